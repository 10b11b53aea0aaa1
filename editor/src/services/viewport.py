"""
Viewport scaling for on-screen presentation.

Nothing here touches stored layer data: the scaled buffer exists only to
be drawn.
"""

import logging
from typing import Sequence, Tuple

from constants import SCALE_PRESETS
from models.pixel_buffer import PixelBuffer
from services.resampling import resize_buffer

_logger = logging.getLogger('Viewport')


def fit_scale(viewport_width: int, viewport_height: int, image_width: int, image_height: int,
              presets: Sequence[float] = SCALE_PRESETS) -> float:
    """Largest zoom preset at which the whole image fits the viewport.

    Returns the smallest preset when even that is too big, and 1.0 for an
    image without pixels.
    """
    if image_width <= 0 or image_height <= 0:
        return 1.0
    ratio = min(viewport_width / image_width, viewport_height / image_height)
    fitting = [p for p in sorted(presets) if p <= ratio]
    return fitting[-1] if fitting else min(presets)


def scaled_size(width: int, height: int, factor: float) -> Tuple[int, int]:
    """Display size at a zoom factor, at least 1x1 for non-empty images"""
    if width == 0 or height == 0:
        return width, height
    return max(1, int(width * factor + 0.5)), max(1, int(height * factor + 0.5))


def scale_for_display(buffer: PixelBuffer, factor: float, viewport_width: int, viewport_height: int,
                      method: str = 'nearest') -> Tuple[PixelBuffer, int, int]:
    """Resample a buffer for drawing and center it in the viewport.

    Args:
        buffer: Composited image
        factor: Zoom factor (> 0)
        viewport_width: Drawing area width
        viewport_height: Drawing area height
        method: 'nearest' or 'bilinear'

    Returns:
        (scaled buffer, offset_x, offset_y); offsets are negative when the
        scaled image is larger than the viewport

    Raises:
        ValueError: If factor is not positive
    """
    if factor <= 0:
        raise ValueError(f"Scale factor must be positive, got {factor}")

    width, height = scaled_size(buffer.width, buffer.height, factor)
    scaled = buffer if buffer.is_empty() else resize_buffer(buffer, width, height, method)
    offset_x = (viewport_width - scaled.width) // 2
    offset_y = (viewport_height - scaled.height) // 2

    _logger.debug(f"Display {buffer.width}x{buffer.height} at {factor:.2f} -> "
                  f"{scaled.width}x{scaled.height} @ ({offset_x}, {offset_y})")
    return scaled, offset_x, offset_y
