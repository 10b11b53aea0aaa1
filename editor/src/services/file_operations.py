"""
GB7 Layer Editor - File Operations Service

This module handles image file I/O for the document.
Separates file operations from UI logic.

Formats:
    PNG, JPEG - decoded and encoded through Pillow
    GB7       - through services.gb7_codec
"""

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from constants import JPEG_QUALITY
from models.errors import UnsupportedFormat
from models.modes import ImageFormat
from models.pixel_buffer import PixelBuffer
from services.gb7_codec import is_gb7, parse_header, decode_gb7, encode_gb7
from services.resampling import buffer_to_pil, pil_to_buffer

_logger = logging.getLogger('FileOperations')

PNG_SIGNATURE = b'\x89PNG\r\n\x1a\n'
JPEG_SOI = b'\xff\xd8\xff'

# PNG color type -> samples per pixel
PNG_CHANNELS = {0: 1, 2: 3, 3: 1, 4: 2, 6: 4}

# SOF markers carry precision and component count (C4, C8, CC are not frames)
JPEG_SOF_MARKERS = {0xC0, 0xC1, 0xC2, 0xC3, 0xC5, 0xC6, 0xC7,
                    0xC9, 0xCA, 0xCB, 0xCD, 0xCE, 0xCF}


@dataclass(frozen=True)
class LoadedImage:
    """Result of loading a file: the raster plus what the loader learned"""
    buffer: PixelBuffer
    format: ImageFormat
    color_depth: int
    has_alpha: bool


# ========================================
# Detection
# ========================================

def detect_format(data: bytes) -> ImageFormat:
    """Identify PNG, JPEG or GB7 by magic bytes

    Raises:
        UnsupportedFormat: If the signature is not recognized
    """
    head = bytes(data[:8])
    if head.startswith(PNG_SIGNATURE):
        return ImageFormat.PNG
    if head.startswith(JPEG_SOI):
        return ImageFormat.JPEG
    if is_gb7(head):
        return ImageFormat.GB7
    raise UnsupportedFormat(f"Unrecognized image signature: {head[:4].hex(' ') or 'empty'}")


def _png_depth(data: bytes) -> Optional[int]:
    # IHDR is always the first chunk: bit depth at 24, color type at 25
    if len(data) < 26 or data[12:16] != b'IHDR':
        return None
    channels = PNG_CHANNELS.get(data[25])
    if channels is None:
        return None
    return data[24] * channels


def _jpeg_depth(data: bytes) -> Optional[int]:
    pos = 2
    while pos + 4 <= len(data):
        if data[pos] != 0xFF:
            return None
        marker = data[pos + 1]
        if marker == 0xFF:
            pos += 1
            continue
        if marker in (0xD8, 0x01) or 0xD0 <= marker <= 0xD7:
            pos += 2
            continue
        length = (data[pos + 2] << 8) | data[pos + 3]
        if marker in JPEG_SOF_MARKERS:
            if pos + 10 > len(data):
                return None
            precision = data[pos + 4]
            components = data[pos + 9]
            return precision * components
        if marker == 0xDA:
            return None
        pos += 2 + length
    return None


def probe_color_depth(data: bytes, fmt: Optional[ImageFormat] = None) -> int:
    """Bits per pixel declared by the file

    PNG: IHDR bit depth * samples per pixel (e.g. RGBA8 -> 32)
    JPEG: SOF precision * components (e.g. 8 * 3 -> 24)
    GB7: 8 with a mask, 7 without

    Falls back to 8 bits per Pillow band when the header can't be read.
    """
    data = bytes(data)
    fmt = fmt or detect_format(data)

    if fmt is ImageFormat.GB7:
        _, _, use_mask = parse_header(data)
        return 8 if use_mask else 7

    depth = _png_depth(data) if fmt is ImageFormat.PNG else _jpeg_depth(data)
    if depth:
        return depth

    _logger.debug(f"Header probe failed for {fmt.value}, asking Pillow")
    try:
        with Image.open(io.BytesIO(data)) as image:
            return 8 * len(image.getbands())
    except (UnidentifiedImageError, OSError) as e:
        raise UnsupportedFormat(f"Cannot read {fmt.value} header") from e


# ========================================
# Decoding
# ========================================

def decode_image(data: bytes, declared_format: Optional[ImageFormat] = None) -> PixelBuffer:
    """Decode file contents into an RGBA buffer

    Args:
        data: Raw file bytes
        declared_format: Format implied by the file name; the signature wins
            when the two disagree

    Raises:
        UnsupportedFormat: Unknown signature or Pillow could not decode
        InvalidGB7Header / TruncatedGB7Payload: Broken GB7 data
    """
    data = bytes(data)
    fmt = detect_format(data)
    if declared_format is not None and declared_format is not fmt:
        _logger.warning(f"File declared as {declared_format.value} but looks like {fmt.value}")

    if fmt is ImageFormat.GB7:
        return decode_gb7(data)

    try:
        with Image.open(io.BytesIO(data)) as image:
            image.load()
            return pil_to_buffer(image)
    except (UnidentifiedImageError, OSError) as e:
        raise UnsupportedFormat(f"Pillow could not decode {fmt.value} data") from e


def load_image_file(path: Union[str, Path]) -> LoadedImage:
    """Read and decode an image file

    Raises:
        FileNotFoundError: If path does not exist
        UnsupportedFormat: If the file is not PNG, JPEG or GB7
    """
    path = Path(path)
    data = path.read_bytes()

    try:
        declared = ImageFormat.from_suffix(path.suffix)
    except ValueError:
        declared = None

    fmt = detect_format(data)
    buffer = decode_image(data, declared)
    depth = probe_color_depth(data, fmt)

    if fmt is ImageFormat.GB7:
        has_alpha = depth == 8
    elif fmt is ImageFormat.JPEG:
        has_alpha = False
    else:
        has_alpha = buffer.has_transparency()

    _logger.info(f"Loaded {path.name}: {buffer.width}x{buffer.height} {fmt.value}, {depth} bit")
    return LoadedImage(buffer=buffer, format=fmt, color_depth=depth, has_alpha=has_alpha)


# ========================================
# Encoding
# ========================================

def encode_image(buffer: PixelBuffer, fmt: ImageFormat, use_mask: bool = False,
                 quality: int = JPEG_QUALITY) -> bytes:
    """Encode a buffer to file bytes

    Args:
        buffer: Raster to write
        fmt: Target format
        use_mask: GB7 only, store alpha > 0 as the mask bit
        quality: JPEG only, 1-95

    Raises:
        ValueError: If the buffer is empty (Pillow can't write 0x0 images)
    """
    fmt = ImageFormat(fmt)
    if fmt is ImageFormat.GB7:
        return encode_gb7(buffer, use_mask=use_mask)

    if buffer.is_empty():
        raise ValueError(f"Cannot write an empty {buffer.width}x{buffer.height} image as {fmt.value}")

    out = io.BytesIO()
    if fmt is ImageFormat.PNG:
        buffer_to_pil(buffer).save(out, format='PNG')
    else:
        # JPEG has no alpha channel
        rgb = Image.fromarray(np.ascontiguousarray(buffer.pixels[..., :3]))
        rgb.save(out, format='JPEG', quality=int(quality))
    return out.getvalue()


def save_image_file(buffer: PixelBuffer, path: Union[str, Path],
                    fmt: Optional[ImageFormat] = None, use_mask: bool = False,
                    quality: int = JPEG_QUALITY) -> Path:
    """Encode and write a buffer

    The format comes from the path suffix when fmt is None.

    Raises:
        UnsupportedFormat: If the suffix is not .png, .jpg, .jpeg or .gb7
    """
    path = Path(path)
    if fmt is None:
        try:
            fmt = ImageFormat.from_suffix(path.suffix)
        except ValueError as e:
            raise UnsupportedFormat(f"Cannot infer image format from {path.name!r}") from e

    data = encode_image(buffer, fmt, use_mask=use_mask, quality=quality)
    path.write_bytes(data)
    _logger.info(f"Saved {path.name} ({fmt.value}, {len(data)} bytes)")
    return path
