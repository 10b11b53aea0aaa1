"""
GB7 Layer Editor - Convolution Engine

Applies one fixed 3x3 kernel to a PixelBuffer.

Policy:
- Mode RGB filters R, G, B and copies alpha; mode ALPHA filters alpha and
  copies R, G, B. Never both in one call.
- Edges replicate the border (out-of-range coordinates clamp to the nearest
  pixel), no zero padding and no wrap-around.
- The weighted sum is divided by the kernel sum, or by 1 when that sum is 0.
- Results round half up and clamp to 0-255.

Weights are applied as written, kernel[ky][kx] against pixel (x+kx-1, y+ky-1),
which is a correlation in scipy terms.
"""

import logging

import numpy as np
from scipy import ndimage

from models.kernel import Kernel
from models.modes import ConvolutionMode
from models.pixel_buffer import PixelBuffer
from utils.pixel_math import to_channel_bytes

_logger = logging.getLogger('Convolution')

RGB_CHANNELS = (0, 1, 2)
ALPHA_CHANNELS = (3,)


def convolve_channel(channel: np.ndarray, kernel: Kernel) -> np.ndarray:
    """Filter a single 2D channel, returning normalized float values.

    Args:
        channel: (h, w) array of channel values
        kernel: 3x3 kernel

    Returns:
        (h, w) float64 array, not yet rounded or clamped
    """
    weighted = ndimage.correlate(
        channel.astype(np.float64), kernel.weights, mode='nearest'
    )
    return weighted / kernel.divisor


def apply_convolution(buffer: PixelBuffer, kernel: Kernel,
                      mode: ConvolutionMode = ConvolutionMode.RGB) -> PixelBuffer:
    """Apply a 3x3 kernel to the RGB channels or to the alpha channel.

    Args:
        buffer: Source raster (not modified)
        kernel: Weights to apply
        mode: ConvolutionMode.RGB or ConvolutionMode.ALPHA (strings accepted)

    Returns:
        New buffer of identical dimensions
    """
    mode = ConvolutionMode.parse(mode)
    if buffer.is_empty():
        return buffer.copy()

    if mode is ConvolutionMode.RGB:
        channels = RGB_CHANNELS
    elif mode is ConvolutionMode.ALPHA:
        channels = ALPHA_CHANNELS
    else:
        raise ValueError(f"Unhandled convolution mode: {mode}")

    source = buffer.pixels
    result = source.copy()
    for c in channels:
        result[..., c] = to_channel_bytes(convolve_channel(source[..., c], kernel))

    _logger.debug(
        f"Applied {kernel.name or 'custom'} kernel to {buffer.width}x{buffer.height} "
        f"({mode.value}, divisor={kernel.divisor})"
    )
    return PixelBuffer._adopt(result)
