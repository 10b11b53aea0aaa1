"""Buffer resizing through Pillow.

Used by layer resize (stored raster) and by the viewport (display only).
"""

import numpy as np
from PIL import Image

from models.pixel_buffer import PixelBuffer

RESAMPLE_METHODS = {
    'nearest': Image.Resampling.NEAREST,
    'bilinear': Image.Resampling.BILINEAR,
}


def buffer_to_pil(buffer: PixelBuffer) -> Image.Image:
    """RGBA PIL image holding a copy of the buffer"""
    return Image.fromarray(buffer.to_array())


def pil_to_buffer(image: Image.Image) -> PixelBuffer:
    """Convert any PIL image to an RGBA buffer"""
    if image.mode != 'RGBA':
        image = image.convert('RGBA')
    return PixelBuffer._adopt(np.array(image, dtype=np.uint8))


def resize_buffer(buffer: PixelBuffer, width: int, height: int, method: str = 'nearest') -> PixelBuffer:
    """Resample a buffer to width x height.

    Args:
        buffer: Source raster
        width: Target width (> 0)
        height: Target height (> 0)
        method: 'nearest' or 'bilinear'

    Raises:
        ValueError: On unknown method or non-positive size
    """
    if method not in RESAMPLE_METHODS:
        raise ValueError(f"Unknown resample method '{method}'. Use one of: {', '.join(RESAMPLE_METHODS)}")
    if width <= 0 or height <= 0:
        raise ValueError(f"Target size must be positive, got {width}x{height}")
    if buffer.size == (width, height):
        return buffer
    if buffer.is_empty():
        return PixelBuffer.blank(width, height)

    resized = buffer_to_pil(buffer).resize((width, height), RESAMPLE_METHODS[method])
    return pil_to_buffer(resized)
