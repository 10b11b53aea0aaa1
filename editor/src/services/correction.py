"""
GB7 Layer Editor - Tonal Correction Service

Two-point piecewise-linear LUT correction over RGB, grayscale luma, or alpha.

Modes:
    COLOR      independent LUTs for R, G, B (missing curves pass through)
    GRAYSCALE  luma = round(0.299R + 0.587G + 0.114B) mapped through one LUT
               and written to R, G and B alike
The alpha LUT, when given, applies in both modes.
"""

import logging
from typing import Optional

import numpy as np

from constants import LUMA_WEIGHTS, LUT_SIZE
from models.curve import Curve, CurveSet
from models.modes import CorrectionMode
from models.pixel_buffer import PixelBuffer
from utils.pixel_math import round_half_up

_logger = logging.getLogger('Correction')


def build_lut(curve: Curve) -> np.ndarray:
    """Build a 256 entry lookup table for a two-point curve.

    i <= p1.input   -> p1.output
    i >= p2.input   -> p2.output
    otherwise       -> linear interpolation, rounded half up

    Returns:
        uint8 array of length 256
    """
    p1, p2 = curve.p1, curve.p2
    i = np.arange(LUT_SIZE, dtype=np.float64)
    t = (i - p1.input) / (p2.input - p1.input)
    lut = round_half_up(p1.output + t * (p2.output - p1.output))
    lut[i <= p1.input] = p1.output
    lut[i >= p2.input] = p2.output
    return np.clip(lut, 0, 255).astype(np.uint8)


def compute_luma(pixels: np.ndarray) -> np.ndarray:
    """round(0.299R + 0.587G + 0.114B) for an (h, w, 4) array, as uint8"""
    wr, wg, wb = LUMA_WEIGHTS
    rgb = pixels[..., :3].astype(np.float64)
    luma = wr * rgb[..., 0] + wg * rgb[..., 1] + wb * rgb[..., 2]
    return np.clip(round_half_up(luma), 0, 255).astype(np.uint8)


def choose_correction_mode(buffer: PixelBuffer) -> CorrectionMode:
    """GRAYSCALE iff every pixel has R == G == B"""
    return CorrectionMode.GRAYSCALE if buffer.is_grayscale() else CorrectionMode.COLOR


def _lut_or_none(curve: Optional[Curve]):
    return build_lut(curve) if curve is not None else None


def apply_correction(buffer: PixelBuffer, curves: CurveSet,
                     mode: CorrectionMode = CorrectionMode.COLOR) -> PixelBuffer:
    """Apply tonal curves to a buffer.

    Args:
        buffer: Source raster (not modified)
        curves: Curves per target; None members pass through
        mode: COLOR or GRAYSCALE (exactly one per call)

    Returns:
        New buffer of identical dimensions
    """
    source = buffer.pixels
    result = source.copy()

    if mode is CorrectionMode.GRAYSCALE:
        gray_lut = _lut_or_none(curves.gray)
        if gray_lut is not None:
            corrected = gray_lut[compute_luma(source)]
            result[..., 0] = corrected
            result[..., 1] = corrected
            result[..., 2] = corrected
    elif mode is CorrectionMode.COLOR:
        for c, curve in enumerate((curves.red, curves.green, curves.blue)):
            lut = _lut_or_none(curve)
            if lut is not None:
                result[..., c] = lut[source[..., c]]
    else:
        raise ValueError(f"Unhandled correction mode: {mode}")

    alpha_lut = _lut_or_none(curves.alpha)
    if alpha_lut is not None:
        result[..., 3] = alpha_lut[source[..., 3]]

    _logger.debug(f"Applied {mode.value} correction to {buffer.width}x{buffer.height}")
    return PixelBuffer._adopt(result)
