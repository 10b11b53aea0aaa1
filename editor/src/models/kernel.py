"""Convolution kernel value object."""
from typing import Sequence

import numpy as np

from constants import KERNEL_SIZE, CONVOLUTION_PRESETS
from models.errors import InvalidKernelShape


class Kernel:
    """3x3 matrix of real weights.

    No invariant on the sum: it may be 0, negative or greater than 1.
    Normalization is decided at convolution time, not stored here.
    """

    __slots__ = ('_weights', 'name')

    def __init__(self, weights: Sequence[Sequence[float]], name: str = ""):
        try:
            array = np.array(weights, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise InvalidKernelShape(f"Kernel weights must be numeric: {e}") from e
        if array.shape != (KERNEL_SIZE, KERNEL_SIZE):
            raise InvalidKernelShape(
                f"Kernel must be {KERNEL_SIZE}x{KERNEL_SIZE}, got shape {array.shape}"
            )
        if not np.all(np.isfinite(array)):
            raise InvalidKernelShape("Kernel weights must be finite")
        array.setflags(write=False)
        self._weights = array
        self.name = name

    @classmethod
    def identity(cls) -> 'Kernel':
        return cls(CONVOLUTION_PRESETS['Identity'], name='Identity')

    @property
    def weights(self) -> np.ndarray:
        """Read-only 3x3 float64 array"""
        return self._weights

    @property
    def total(self) -> float:
        """Sum of all nine weights"""
        return float(self._weights.sum())

    @property
    def divisor(self) -> float:
        """Normalization divisor: the weight sum, or 1 when the sum is exactly 0"""
        total = self.total
        return total if total != 0 else 1.0

    def to_list(self):
        return self._weights.tolist()

    def __eq__(self, other):
        if not isinstance(other, Kernel):
            return NotImplemented
        return np.array_equal(self._weights, other._weights)

    __hash__ = None

    def __repr__(self):
        label = f" {self.name!r}" if self.name else ""
        return f"Kernel{label}({self.to_list()})"


def get_preset_kernel(name: str) -> Kernel:
    """Look up a preset kernel by name (see constants.CONVOLUTION_PRESETS).

    Raises:
        KeyError: If the preset does not exist
    """
    if name not in CONVOLUTION_PRESETS:
        raise KeyError(f"Unknown kernel preset '{name}'. Available: {', '.join(CONVOLUTION_PRESETS)}")
    return Kernel(CONVOLUTION_PRESETS[name], name=name)
