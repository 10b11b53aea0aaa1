"""
Histogram builder for the correction curves editor.

All tables have 256 entries (pixel count per 0-255 value).

Note: the gray histogram averages (R+G+B)/3, while grayscale correction maps
luma 0.299R + 0.587G + 0.114B. The two are deliberately left separate.
"""

from typing import Dict

import numpy as np

from constants import LUT_SIZE
from models.pixel_buffer import PixelBuffer

CHANNEL_INDEX = {'R': 0, 'G': 1, 'B': 2, 'A': 3}


def _count(values: np.ndarray) -> np.ndarray:
    return np.bincount(values.ravel(), minlength=LUT_SIZE).astype(np.int64)


def channel_histogram(buffer: PixelBuffer, channel: str) -> np.ndarray:
    """Frequency table for one of 'R', 'G', 'B', 'A'.

    Raises:
        ValueError: If channel is not one of R, G, B, A
    """
    key = channel.upper()
    if key not in CHANNEL_INDEX:
        raise ValueError(f"channel must be one of R, G, B, A, got {channel!r}")
    return _count(buffer.pixels[..., CHANNEL_INDEX[key]])


def rgb_histograms(buffer: PixelBuffer) -> Dict[str, np.ndarray]:
    """Independent R, G, B tables keyed 'r', 'g', 'b'"""
    return {
        'r': channel_histogram(buffer, 'R'),
        'g': channel_histogram(buffer, 'G'),
        'b': channel_histogram(buffer, 'B'),
    }


def alpha_histogram(buffer: PixelBuffer) -> np.ndarray:
    return channel_histogram(buffer, 'A')


def grayscale_histogram(buffer: PixelBuffer) -> np.ndarray:
    """Table of round((R+G+B)/3) per pixel"""
    rgb_sum = buffer.pixels[..., :3].astype(np.uint16).sum(axis=2)
    return _count((rgb_sum + 1) // 3)


def all_histograms(buffer: PixelBuffer) -> Dict[str, np.ndarray]:
    """Everything the curves editor shows: r, g, b, alpha and gray"""
    tables = rgb_histograms(buffer)
    tables['alpha'] = alpha_histogram(buffer)
    tables['gray'] = grayscale_histogram(buffer)
    return tables
