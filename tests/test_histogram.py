"""
Tests for histogram tables.
"""
import numpy as np
import pytest

from models.pixel_buffer import PixelBuffer
from services.histogram import (
    all_histograms, alpha_histogram, channel_histogram, grayscale_histogram, rgb_histograms,
)


class TestHistogram:

    def test_tables_have_256_entries(self, random_buffer):
        for table in all_histograms(random_buffer).values():
            assert table.shape == (256,)

    def test_counts_sum_to_pixel_count(self, random_buffer):
        for table in all_histograms(random_buffer).values():
            assert table.sum() == random_buffer.pixel_count

    def test_channel_counts(self):
        data = bytes([10, 20, 30, 255, 10, 40, 30, 0])
        buf = PixelBuffer.from_bytes(data, 2, 1)
        tables = rgb_histograms(buf)
        assert tables['r'][10] == 2
        assert tables['g'][20] == 1 and tables['g'][40] == 1
        assert tables['b'][30] == 2
        alpha = alpha_histogram(buf)
        assert alpha[255] == 1 and alpha[0] == 1

    def test_gray_uses_rounded_average(self):
        # (10 + 20 + 31) / 3 = 20.33 -> 20; (0 + 1 + 1) / 3 = 0.67 -> 1
        data = bytes([10, 20, 31, 255, 0, 1, 1, 255])
        gray = grayscale_histogram(PixelBuffer.from_bytes(data, 2, 1))
        assert gray[20] == 1
        assert gray[1] == 1
        assert gray.sum() == 2

    def test_lowercase_channel_accepted(self, gray_buffer):
        assert np.array_equal(channel_histogram(gray_buffer, 'r'), channel_histogram(gray_buffer, 'R'))

    def test_unknown_channel(self, gray_buffer):
        with pytest.raises(ValueError):
            channel_histogram(gray_buffer, 'L')

    def test_empty_buffer(self):
        tables = all_histograms(PixelBuffer.blank(0, 0))
        assert all(table.sum() == 0 for table in tables.values())
