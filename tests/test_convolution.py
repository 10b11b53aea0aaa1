"""
Tests for the convolution engine.

Verifies:
- Identity kernel is exact
- Channel isolation in RGB and alpha modes
- Normalization by kernel sum (or 1 for zero-sum kernels)
- Border replication and weight orientation
"""
import numpy as np
import pytest

from models.kernel import Kernel, get_preset_kernel
from models.modes import ConvolutionMode
from models.pixel_buffer import PixelBuffer
from services.convolution import apply_convolution


# ══════════════════════════════════════════════════════════════════════════
# Core Properties
# ══════════════════════════════════════════════════════════════════════════

class TestConvolutionProperties:

    def test_identity_reproduces_input(self, random_buffer):
        assert apply_convolution(random_buffer, Kernel.identity()) == random_buffer

    def test_identity_alpha_mode(self, random_buffer):
        assert apply_convolution(random_buffer, Kernel.identity(), ConvolutionMode.ALPHA) == random_buffer

    def test_rgb_mode_keeps_alpha(self, random_buffer):
        result = apply_convolution(random_buffer, get_preset_kernel('Gaussian Blur'), 'rgb')
        assert np.array_equal(result.pixels[..., 3], random_buffer.pixels[..., 3])
        assert not np.array_equal(result.pixels[..., :3], random_buffer.pixels[..., :3])

    def test_alpha_mode_keeps_rgb(self, random_buffer):
        result = apply_convolution(random_buffer, get_preset_kernel('Box Blur'), 'alpha')
        assert np.array_equal(result.pixels[..., :3], random_buffer.pixels[..., :3])
        assert not np.array_equal(result.pixels[..., 3], random_buffer.pixels[..., 3])

    def test_zero_sum_kernel(self, gradient_buffer):
        result = apply_convolution(gradient_buffer, get_preset_kernel('Prewitt Horizontal'))
        assert result.size == gradient_buffer.size
        assert result != gradient_buffer

    def test_large_sum_normalized_on_uniform(self):
        buf = PixelBuffer.filled(5, 5, (90, 140, 33, 255))
        kernel = Kernel([[1, 1, 1], [1, 2, 1], [1, 1, 1]])
        assert kernel.total == 10
        assert apply_convolution(buf, kernel) == buf

    def test_input_not_mutated(self, random_buffer):
        before = random_buffer.copy()
        apply_convolution(random_buffer, get_preset_kernel('Sharpen'))
        assert random_buffer == before

    def test_unknown_mode(self, random_buffer):
        with pytest.raises(ValueError):
            apply_convolution(random_buffer, Kernel.identity(), 'luma')

    def test_empty_buffer(self):
        result = apply_convolution(PixelBuffer.blank(0, 0), Kernel.identity())
        assert result.is_empty()


# ══════════════════════════════════════════════════════════════════════════
# Arithmetic Details
# ══════════════════════════════════════════════════════════════════════════

class TestConvolutionArithmetic:

    def _column_buffer(self):
        # 3x1 row: R = 0, 30, 90
        data = bytes([0, 0, 0, 255, 30, 0, 0, 255, 90, 0, 0, 255])
        return PixelBuffer.from_bytes(data, 3, 1)

    def test_border_replicates_edge(self):
        # Box blur on a 1-row image: each sample sees its row three times
        buf = self._column_buffer()
        result = apply_convolution(buf, get_preset_kernel('Box Blur'))
        # x=0: (0 + 0 + 30) * 3 / 9 = 10
        # x=1: (0 + 30 + 90) * 3 / 9 = 40
        # x=2: (30 + 90 + 90) * 3 / 9 = 70
        assert [result.get_pixel(x, 0)[0] for x in range(3)] == [10, 40, 70]

    def test_weights_not_flipped(self):
        # Weight on the right neighbour pulls the value from x + 1
        buf = self._column_buffer()
        shift = Kernel([[0, 0, 0], [0, 0, 1], [0, 0, 0]])
        result = apply_convolution(buf, shift)
        assert [result.get_pixel(x, 0)[0] for x in range(3)] == [30, 90, 90]

    def test_clamps_and_rounds(self):
        buf = self._column_buffer()
        result = apply_convolution(buf, get_preset_kernel('Prewitt Horizontal'))
        # x=0: 3*(30 - 0) = 90; x=1: 3*(90 - 0) = 270 -> 255; x=2: 3*(90 - 30) = 180
        assert [result.get_pixel(x, 0)[0] for x in range(3)] == [90, 255, 180]

    def test_negative_clamped_to_zero(self):
        buf = self._column_buffer()
        flipped = Kernel([[1, 0, -1], [1, 0, -1], [1, 0, -1]])
        result = apply_convolution(buf, flipped)
        assert [result.get_pixel(x, 0)[0] for x in range(3)] == [0, 0, 0]

    def test_half_rounds_up(self):
        # Two neighbours averaged: (1 + 2) / 2 = 1.5 -> 2
        data = bytes([1, 0, 0, 255, 2, 0, 0, 255])
        buf = PixelBuffer.from_bytes(data, 2, 1)
        kernel = Kernel([[0, 0, 0], [0, 1, 1], [0, 0, 0]])
        result = apply_convolution(buf, kernel)
        assert result.get_pixel(0, 0)[0] == 2
