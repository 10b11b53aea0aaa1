"""
GB7 Layer Editor - GB7 Codec Service

Bit-exact encode/decode of the GB7 raster format.

Layout (see docs/specifications/gb7_format.md):
    0-3   magic 47 42 37 1D
    4     version 01
    5     mask flag (01 = top payload bit is an opacity mask)
    6-7   width, big-endian u16
    8-9   height, big-endian u16
    10-11 reserved, 00 00
    12..  width*height bytes, row-major, one per pixel

The codec does not depend on any other component.
"""

import logging

import numpy as np

from constants import (
    GB7_MAGIC, GB7_VERSION, GB7_HEADER_SIZE,
    GB7_MASK_FLAG, GB7_NO_MASK_FLAG, GB7_MASK_BIT, GB7_GRAY_BITS,
    GB7_MAX_DIMENSION,
)
from models.errors import InvalidGB7Header, TruncatedGB7Payload
from models.pixel_buffer import PixelBuffer

_logger = logging.getLogger('GB7Codec')


def is_gb7(data: bytes) -> bool:
    """True if data starts with the GB7 magic"""
    return bytes(data[:len(GB7_MAGIC)]) == GB7_MAGIC


def build_header(width: int, height: int, use_mask: bool) -> bytes:
    """Build the 12 byte GB7 header.

    Raises:
        ValueError: If a dimension does not fit in 16 bits
    """
    if not (0 <= width <= GB7_MAX_DIMENSION and 0 <= height <= GB7_MAX_DIMENSION):
        raise ValueError(
            f"GB7 dimensions must be 0-{GB7_MAX_DIMENSION}, got {width}x{height}"
        )
    header = bytearray(GB7_HEADER_SIZE)
    header[0:4] = GB7_MAGIC
    header[4] = GB7_VERSION
    header[5] = GB7_MASK_FLAG if use_mask else GB7_NO_MASK_FLAG
    header[6] = (width >> 8) & 0xFF
    header[7] = width & 0xFF
    header[8] = (height >> 8) & 0xFF
    header[9] = height & 0xFF
    # bytes 10-11 reserved, already zero
    return bytes(header)


def encode_gb7(buffer: PixelBuffer, use_mask: bool = False) -> bytes:
    """Encode a buffer as GB7.

    Each pixel becomes gray7 = round((R+G+B)/3) >> 1. With use_mask the top
    bit is set for pixels whose alpha is above 0.

    Args:
        buffer: Source raster
        use_mask: Embed the 1-bit transparency mask

    Returns:
        Complete GB7 file contents
    """
    header = build_header(buffer.width, buffer.height, use_mask)

    pixels = buffer.pixels
    rgb_sum = pixels[..., :3].astype(np.uint16).sum(axis=2)
    # (sum + 1) // 3 == round(sum / 3): a sum never lands exactly on .5
    gray = (rgb_sum + 1) // 3
    payload = (gray >> 1).astype(np.uint8)

    if use_mask:
        opaque = pixels[..., 3] > 0
        payload = np.where(opaque, payload | GB7_MASK_BIT, payload).astype(np.uint8)

    _logger.debug(f"Encoded GB7 {buffer.width}x{buffer.height} (mask={use_mask})")
    return header + payload.tobytes()


def parse_header(data: bytes):
    """Validate and unpack a GB7 header.

    Returns:
        Tuple of (width, height, use_mask)

    Raises:
        InvalidGB7Header: If data is too short, or magic/version mismatch
    """
    if len(data) < GB7_HEADER_SIZE:
        raise InvalidGB7Header(
            f"GB7 header needs {GB7_HEADER_SIZE} bytes, got {len(data)}"
        )
    if bytes(data[0:4]) != GB7_MAGIC:
        raise InvalidGB7Header(f"Bad GB7 magic: {bytes(data[0:4]).hex(' ')}")
    if data[4] != GB7_VERSION:
        raise InvalidGB7Header(f"Unsupported GB7 version: {data[4]:#04x}")

    use_mask = data[5] == GB7_MASK_FLAG
    if data[5] not in (GB7_MASK_FLAG, GB7_NO_MASK_FLAG):
        _logger.warning(f"Unexpected GB7 mask flag {data[5]:#04x}, treating as no mask")

    width = (data[6] << 8) | data[7]
    height = (data[8] << 8) | data[9]

    if data[10] != 0 or data[11] != 0:
        _logger.warning(f"GB7 reserved bytes are not zero: {data[10]:#04x} {data[11]:#04x}")

    return width, height, use_mask


def decode_gb7(data: bytes) -> PixelBuffer:
    """Decode GB7 file contents into an RGBA buffer.

    gray8 = (byte & 0x7F) << 1 goes to R, G and B. Alpha is 255 without a
    mask, otherwise 255 when the top bit is set and 0 when clear.

    Raises:
        InvalidGB7Header: Bad header
        TruncatedGB7Payload: Fewer than width*height payload bytes
    """
    data = bytes(data)
    width, height, use_mask = parse_header(data)

    pixel_count = width * height
    available = len(data) - GB7_HEADER_SIZE
    if available < pixel_count:
        raise TruncatedGB7Payload(
            f"GB7 payload for {width}x{height} needs {pixel_count} bytes, got {available}"
        )
    if available > pixel_count:
        _logger.debug(f"Ignoring {available - pixel_count} trailing bytes after GB7 payload")

    if pixel_count == 0:
        return PixelBuffer.blank(width, height)

    payload = np.frombuffer(data, dtype=np.uint8, count=pixel_count, offset=GB7_HEADER_SIZE)
    payload = payload.reshape((height, width))

    gray8 = (payload & GB7_GRAY_BITS) << 1
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[..., 0] = gray8
    pixels[..., 1] = gray8
    pixels[..., 2] = gray8
    if use_mask:
        pixels[..., 3] = np.where(payload & GB7_MASK_BIT, 255, 0)
    else:
        pixels[..., 3] = 255

    _logger.debug(f"Decoded GB7 {width}x{height} (mask={use_mask})")
    return PixelBuffer._adopt(pixels)
