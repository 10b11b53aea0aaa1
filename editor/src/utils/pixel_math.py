"""Shared rounding helpers for 8-bit channel math."""
import numpy as np


def round_half_up(values: np.ndarray) -> np.ndarray:
    """Round to nearest integer, .5 goes up (matches the GB7 tooling)"""
    return np.floor(values + 0.5)


def to_channel_bytes(values: np.ndarray) -> np.ndarray:
    """Round and clamp float channel values into uint8"""
    return np.clip(round_half_up(values), 0, 255).astype(np.uint8)
