"""
Layer compositor for the final displayed image.

Merges visible layers (bottom to top) into one RGBA buffer with blend modes
and standard alpha-over compositing.

Per source pixel:
    srcA    = alpha/255 * opacity
    blended = blend(dst, src)                      per channel
    channel = round((1 - srcA) * dst + srcA * blended)
    outA    = srcA + dstA * (1 - srcA), stored as round(outA * 255)
Pixels whose output alpha would be 0 leave the destination untouched.

Layers are always centered on the canvas; stored layer offsets are ignored.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Tuple

import numpy as np

from constants import DEFAULT_CANVAS_SIZE
from models.modes import BlendMode
from models.pixel_buffer import PixelBuffer
from utils.pixel_math import round_half_up

_logger = logging.getLogger('Compositor')


@dataclass(frozen=True)
class CompositeLayer:
    """Immutable compositing input: a buffer plus how to blend it."""
    buffer: PixelBuffer
    blend_mode: BlendMode = BlendMode.NORMAL
    opacity: float = 1.0


def blend_channels(dst: np.ndarray, src: np.ndarray, mode: BlendMode) -> np.ndarray:
    """Blend function applied per channel before alpha compositing.

    Args:
        dst: Destination channel values (0-255, float)
        src: Source channel values (0-255, float)
        mode: Blend mode

    Returns:
        Float array of blended values
    """
    if mode is BlendMode.NORMAL:
        return src
    elif mode is BlendMode.MULTIPLY:
        return dst * src / 255.0
    elif mode is BlendMode.SCREEN:
        return 255.0 - (255.0 - dst) * (255.0 - src) / 255.0
    elif mode is BlendMode.OVERLAY:
        return np.where(
            dst < 128,
            2.0 * dst * src / 255.0,
            255.0 - 2.0 * (255.0 - dst) * (255.0 - src) / 255.0,
        )
    raise ValueError(f"Unhandled blend mode: {mode}")


def centered_offset(canvas_size: Tuple[int, int], layer_size: Tuple[int, int]) -> Tuple[int, int]:
    """floor((canvas - layer) / 2) on each axis"""
    return (
        (canvas_size[0] - layer_size[0]) // 2,
        (canvas_size[1] - layer_size[1]) // 2,
    )


def canvas_size_for(buffers: Iterable[PixelBuffer]) -> Tuple[int, int]:
    """(max width, max height) across buffers"""
    buffers = list(buffers)
    return max(b.width for b in buffers), max(b.height for b in buffers)


def _composite_onto(canvas: np.ndarray, layer: CompositeLayer):
    """Blend one layer into the float canvas in place."""
    canvas_h, canvas_w = canvas.shape[:2]
    src = layer.buffer.pixels
    offset_x, offset_y = centered_offset((canvas_w, canvas_h), layer.buffer.size)

    # Layers never exceed the canvas, so the centered region is always in bounds
    region = canvas[offset_y:offset_y + src.shape[0], offset_x:offset_x + src.shape[1]]

    src_rgb = src[..., :3].astype(np.float64)
    src_a = (src[..., 3].astype(np.float64) / 255.0) * layer.opacity
    dst_rgb = region[..., :3]
    dst_a = region[..., 3] / 255.0

    out_a = src_a + dst_a * (1.0 - src_a)
    touched = out_a > 0

    blended = blend_channels(dst_rgb, src_rgb, layer.blend_mode)
    src_a3 = src_a[..., np.newaxis]
    out_rgb = round_half_up((1.0 - src_a3) * dst_rgb + src_a3 * blended)

    region[..., :3] = np.where(touched[..., np.newaxis], out_rgb, dst_rgb)
    region[..., 3] = np.where(touched, round_half_up(out_a * 255.0), region[..., 3])


def composite_layers(layers: Iterable[CompositeLayer],
                     default_size: Tuple[int, int] = DEFAULT_CANVAS_SIZE) -> PixelBuffer:
    """Merge layers bottom to top into one buffer.

    Args:
        layers: Visible layers, bottom first. Empty buffers are skipped.
        default_size: (width, height) of the transparent result when there is
            nothing to draw

    Returns:
        New composite buffer sized to the largest layer
    """
    layers = [layer for layer in layers if layer.buffer is not None and not layer.buffer.is_empty()]
    if not layers:
        _logger.debug(f"No visible layers, returning blank {default_size[0]}x{default_size[1]}")
        return PixelBuffer.blank(*default_size)

    width, height = canvas_size_for(layer.buffer for layer in layers)
    canvas = np.zeros((height, width, 4), dtype=np.float64)

    for layer in layers:
        if layer.opacity <= 0:
            continue
        _composite_onto(canvas, layer)

    _logger.debug(f"Composited {len(layers)} layer(s) into {width}x{height}")
    return PixelBuffer._adopt(np.clip(canvas, 0, 255).astype(np.uint8))
