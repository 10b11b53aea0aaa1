"""
GB7 Layer Editor - Pixel Buffer Model

Canonical raster representation for the entire application.
Every engine (codec, convolution, correction, compositor) consumes and
produces PixelBuffer objects.

Storage is a read-only numpy uint8 array of shape (height, width, 4) in
R, G, B, A order. Transforms never write into an existing buffer: they work
on a private copy and wrap it with PixelBuffer._adopt() once finished.
"""

from typing import Sequence, Tuple, Union

import numpy as np

from models.errors import InvalidBufferLayout


CHANNELS = 4


class PixelBuffer:
    """Immutable RGBA raster, 8 bits per channel.

    Invariant: len(to_bytes()) == width * height * 4

    Construction:
        PixelBuffer.blank(w, h) - fully transparent black
        PixelBuffer.from_bytes(data, w, h) - validates layout
        PixelBuffer.from_array(array) - copies an (h, w, 4) uint8 array
        PixelBuffer.filled(w, h, rgba) - solid color
    """

    __slots__ = ('_pixels',)

    def __init__(self, width: int, height: int):
        """Create a zero-filled (fully transparent) buffer.

        Args:
            width: Width in pixels (>= 0)
            height: Height in pixels (>= 0)

        Raises:
            InvalidBufferLayout: If a dimension is negative
        """
        _check_dimensions(width, height)
        pixels = np.zeros((height, width, CHANNELS), dtype=np.uint8)
        pixels.setflags(write=False)
        self._pixels = pixels

    # ========================================
    # Constructors
    # ========================================

    @classmethod
    def blank(cls, width: int, height: int) -> 'PixelBuffer':
        """Zero-filled, fully transparent buffer"""
        return cls(width, height)

    @classmethod
    def from_bytes(cls, data: Union[bytes, bytearray, memoryview], width: int, height: int) -> 'PixelBuffer':
        """Build from a flat RGBA byte sequence.

        Raises:
            InvalidBufferLayout: If len(data) != width * height * 4
        """
        _check_dimensions(width, height)
        expected = width * height * CHANNELS
        if len(data) != expected:
            raise InvalidBufferLayout(
                f"Expected {expected} bytes for {width}x{height} RGBA, got {len(data)}"
            )
        pixels = np.frombuffer(bytes(data), dtype=np.uint8).reshape((height, width, CHANNELS)).copy()
        return cls._adopt(pixels)

    @classmethod
    def from_array(cls, array: np.ndarray) -> 'PixelBuffer':
        """Build from an (h, w, 4) integer array. The array is copied.

        Raises:
            InvalidBufferLayout: If the array is not (h, w, 4), is not an
                integer array, or holds values outside 0-255
        """
        array = np.asarray(array)
        if array.ndim != 3 or array.shape[2] != CHANNELS:
            raise InvalidBufferLayout(f"Expected array of shape (h, w, 4), got {array.shape}")
        if not np.issubdtype(array.dtype, np.integer):
            raise InvalidBufferLayout(f"Expected an integer array, got dtype {array.dtype}")
        if array.dtype != np.uint8 and array.size and (array.min() < 0 or array.max() > 255):
            raise InvalidBufferLayout(
                f"Pixel values must be 0-255, got range {array.min()}..{array.max()}"
            )
        return cls._adopt(np.array(array, dtype=np.uint8, copy=True))

    @classmethod
    def filled(cls, width: int, height: int, rgba: Sequence[int]) -> 'PixelBuffer':
        """Solid color buffer.

        Args:
            rgba: (r, g, b, a) with values 0-255
        """
        _check_dimensions(width, height)
        if len(rgba) != CHANNELS:
            raise ValueError(f"rgba must have 4 components, got {len(rgba)}")
        color = [max(0, min(255, int(c))) for c in rgba]
        pixels = np.empty((height, width, CHANNELS), dtype=np.uint8)
        pixels[:, :] = color
        return cls._adopt(pixels)

    @classmethod
    def _adopt(cls, pixels: np.ndarray) -> 'PixelBuffer':
        """Freeze a private working array into a buffer without copying.

        The caller must not keep a writable reference to `pixels`.
        """
        buffer = cls.__new__(cls)
        pixels.setflags(write=False)
        buffer._pixels = pixels
        return buffer

    # ========================================
    # Properties
    # ========================================

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    @property
    def size(self) -> Tuple[int, int]:
        """(width, height)"""
        return self.width, self.height

    @property
    def pixels(self) -> np.ndarray:
        """Read-only (h, w, 4) view of the pixel data"""
        return self._pixels.view()

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    def to_bytes(self) -> bytes:
        """Flat RGBA bytes, row-major"""
        return self._pixels.tobytes()

    def to_array(self) -> np.ndarray:
        """Writable copy of the pixel data"""
        return self._pixels.copy()

    def get_pixel(self, x: int, y: int) -> Tuple[int, int, int, int]:
        """RGBA at (x, y)"""
        r, g, b, a = self._pixels[y, x]
        return int(r), int(g), int(b), int(a)

    # ========================================
    # Classification
    # ========================================

    def is_empty(self) -> bool:
        """True if the buffer holds no pixels"""
        return self.pixel_count == 0

    def is_grayscale(self) -> bool:
        """True iff every pixel has R == G == B"""
        rgb = self._pixels[..., :3]
        return bool(np.all(rgb[..., 0] == rgb[..., 1]) and np.all(rgb[..., 0] == rgb[..., 2]))

    def has_transparency(self) -> bool:
        """True if any alpha byte is below 255"""
        return bool(np.any(self._pixels[..., 3] < 255))

    # ========================================
    # Derived buffers
    # ========================================

    def with_opaque_alpha(self) -> 'PixelBuffer':
        """Copy with every alpha byte forced to 255"""
        pixels = self._pixels.copy()
        pixels[..., 3] = 255
        return PixelBuffer._adopt(pixels)

    def copy(self) -> 'PixelBuffer':
        """Independent copy (used when handing buffers across threads)"""
        return PixelBuffer._adopt(self._pixels.copy())

    # ========================================
    # Value semantics
    # ========================================

    def __eq__(self, other):
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self._pixels.shape == other._pixels.shape and np.array_equal(self._pixels, other._pixels)

    __hash__ = None

    def __repr__(self):
        return f"PixelBuffer({self.width}x{self.height})"


def _check_dimensions(width: int, height: int):
    if width < 0 or height < 0:
        raise InvalidBufferLayout(f"Dimensions must be non-negative, got {width}x{height}")
