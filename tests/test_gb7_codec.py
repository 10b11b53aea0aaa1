"""
Tests for the GB7 codec.

Verifies:
- Header bytes are bit-exact
- Payload packing with and without the mask bit
- Decoding rules and the lost low bit
- Header and payload validation
"""
import logging

import numpy as np
import pytest

from constants import GB7_HEADER_SIZE
from models.errors import InvalidGB7Header, TruncatedGB7Payload
from models.pixel_buffer import PixelBuffer
from services.gb7_codec import build_header, decode_gb7, encode_gb7, is_gb7, parse_header


# ══════════════════════════════════════════════════════════════════════════
# Header
# ══════════════════════════════════════════════════════════════════════════

class TestHeader:

    def test_header_bytes(self):
        header = build_header(300, 2, use_mask=True)
        assert header == bytes([0x47, 0x42, 0x37, 0x1D, 0x01, 0x01, 0x01, 0x2C, 0x00, 0x02, 0x00, 0x00])

    def test_header_without_mask(self):
        assert build_header(1, 1, use_mask=False)[5] == 0x00

    def test_dimension_limit(self):
        with pytest.raises(ValueError):
            build_header(70000, 1, use_mask=False)

    def test_parse_header(self):
        assert parse_header(build_header(640, 480, True)) == (640, 480, True)

    def test_is_gb7(self):
        assert is_gb7(build_header(1, 1, False))
        assert not is_gb7(b'\x89PNG\r\n\x1a\n')


# ══════════════════════════════════════════════════════════════════════════
# Encoding
# ══════════════════════════════════════════════════════════════════════════

class TestEncode:

    def test_payload_length(self, gradient_buffer):
        data = encode_gb7(gradient_buffer)
        assert len(data) == GB7_HEADER_SIZE + gradient_buffer.width * gradient_buffer.height

    def test_gray_is_rounded_average_shifted(self):
        # (10 + 20 + 31) / 3 = 20.33 -> 20 -> 10
        # (1 + 1 + 2) / 3 = 1.33 -> 1 -> 0
        # (255 + 255 + 254) / 3 = 254.67 -> 255 -> 127
        buf = PixelBuffer.from_bytes(bytes([10, 20, 31, 255, 1, 1, 2, 255, 255, 255, 254, 255]), 3, 1)
        assert encode_gb7(buf)[GB7_HEADER_SIZE:] == bytes([10, 0, 127])

    def test_no_mask_ignores_alpha(self):
        buf = PixelBuffer.filled(2, 1, (200, 200, 200, 0))
        assert encode_gb7(buf)[GB7_HEADER_SIZE:] == bytes([100, 100])

    def test_mask_bit_follows_alpha(self):
        buf = PixelBuffer.from_bytes(bytes([100, 100, 100, 0, 100, 100, 100, 1]), 2, 1)
        assert encode_gb7(buf, use_mask=True)[GB7_HEADER_SIZE:] == bytes([50, 0x80 | 50])

    def test_input_unchanged(self, random_buffer):
        before = random_buffer.copy()
        encode_gb7(random_buffer, use_mask=True)
        assert random_buffer == before


# ══════════════════════════════════════════════════════════════════════════
# Decoding
# ══════════════════════════════════════════════════════════════════════════

class TestDecode:

    def test_decode_without_mask_is_opaque(self):
        data = build_header(2, 1, False) + bytes([0x7F, 0x81])
        buf = decode_gb7(data)
        assert buf.get_pixel(0, 0) == (254, 254, 254, 255)
        # top bit ignored without the mask flag
        assert buf.get_pixel(1, 0) == (2, 2, 2, 255)

    def test_decode_with_mask(self):
        data = build_header(2, 1, True) + bytes([0x05, 0x85])
        buf = decode_gb7(data)
        assert buf.get_pixel(0, 0) == (10, 10, 10, 0)
        assert buf.get_pixel(1, 0) == (10, 10, 10, 255)

    def test_round_trip_within_two(self, random_buffer):
        decoded = decode_gb7(encode_gb7(random_buffer))
        assert np.all(decoded.pixels[..., 3] == 255)
        gray = (random_buffer.pixels[..., :3].astype(int).sum(axis=2) + 1) // 3
        assert np.all(np.abs(decoded.pixels[..., 0].astype(int) - gray) <= 2)
        assert decoded.is_grayscale()

    def test_round_trip_mask_keeps_transparency(self, random_buffer):
        decoded = decode_gb7(encode_gb7(random_buffer, use_mask=True))
        expected = np.where(random_buffer.pixels[..., 3] > 0, 255, 0)
        assert np.array_equal(decoded.pixels[..., 3], expected)

    def test_bad_magic(self):
        data = b'XB7\x1d' + build_header(1, 1, False)[4:] + b'\x00'
        with pytest.raises(InvalidGB7Header):
            decode_gb7(data)

    def test_bad_version(self):
        header = bytearray(build_header(1, 1, False))
        header[4] = 0x02
        with pytest.raises(InvalidGB7Header):
            decode_gb7(bytes(header) + b'\x00')

    def test_short_header(self):
        with pytest.raises(InvalidGB7Header):
            decode_gb7(b'GB7\x1d\x01')

    def test_truncated_payload(self):
        with pytest.raises(TruncatedGB7Payload):
            decode_gb7(build_header(4, 4, False) + bytes(15))

    def test_trailing_bytes_ignored(self):
        buf = decode_gb7(build_header(1, 1, False) + bytes([0x40, 0xAA, 0xBB]))
        assert buf.size == (1, 1)
        assert buf.get_pixel(0, 0) == (128, 128, 128, 255)

    def test_reserved_bytes_warn(self, caplog):
        header = bytearray(build_header(1, 1, False))
        header[10] = 0x01
        with caplog.at_level(logging.WARNING, logger='GB7Codec'):
            buf = decode_gb7(bytes(header) + b'\x00')
        assert buf.size == (1, 1)
        assert any('reserved' in record.message for record in caplog.records)

    def test_empty_image(self):
        buf = decode_gb7(build_header(0, 5, True))
        assert buf.is_empty()
        assert buf.size == (0, 5)
