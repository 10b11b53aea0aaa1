"""
GB7 Layer Editor - Color Domain Model

Canonical fill color representation. Layer fills and the command line flow
through this class.
"""

from typing import Optional, Sequence, Tuple, Union


class Color:
    """Immutable RGBA color with uint8 storage.

    Internal storage: _r, _g, _b, _a (uint8 0-255)
    """

    __slots__ = ('_r', '_g', '_b', '_a')

    def __init__(self, r: int, g: int, b: int, a: int = 255):
        """Direct construction from RGBA uint8 values (0-255), clamped.

        Args:
            r: Red component (0-255)
            g: Green component (0-255)
            b: Blue component (0-255)
            a: Alpha component (0-255), opaque by default
        """
        self._r = max(0, min(255, int(r)))
        self._g = max(0, min(255, int(g)))
        self._b = max(0, min(255, int(b)))
        self._a = max(0, min(255, int(a)))

    @property
    def r(self) -> int:
        """Red component (0-255) - READ ONLY"""
        return self._r

    @property
    def g(self) -> int:
        """Green component (0-255) - READ ONLY"""
        return self._g

    @property
    def b(self) -> int:
        """Blue component (0-255) - READ ONLY"""
        return self._b

    @property
    def a(self) -> int:
        """Alpha component (0-255) - READ ONLY"""
        return self._a

    # ========================================
    # Output Methods
    # ========================================

    def to_rgba(self) -> Tuple[int, int, int, int]:
        return (self._r, self._g, self._b, self._a)

    def to_hex(self, include_alpha: bool = False) -> str:
        """Hex color string: #RRGGBB, or #RRGGBBAA with include_alpha"""
        text = f"#{self._r:02X}{self._g:02X}{self._b:02X}"
        if include_alpha:
            text += f"{self._a:02X}"
        return text

    # ========================================
    # Static Factory Methods
    # ========================================

    @staticmethod
    def from_hex(hex_string: str) -> Optional['Color']:
        """Create Color from #RRGGBB, #RRGGBBAA (leading # optional).

        Returns:
            Color object if parse succeeds, None otherwise
        """
        if not isinstance(hex_string, str):
            return None

        hex_string = hex_string.strip().lstrip('#')
        if len(hex_string) not in (6, 8):
            return None

        try:
            r = int(hex_string[0:2], 16)
            g = int(hex_string[2:4], 16)
            b = int(hex_string[4:6], 16)
            a = int(hex_string[6:8], 16) if len(hex_string) == 8 else 255
        except ValueError:
            return None
        return Color(r, g, b, a)

    @staticmethod
    def parse(value: Union['Color', str, Sequence[int]]) -> 'Color':
        """Accept a Color, a hex string, or an RGB/RGBA sequence.

        Raises:
            ValueError: If value cannot be interpreted as a color
        """
        if isinstance(value, Color):
            return value
        if isinstance(value, str):
            color = Color.from_hex(value)
            if color is None:
                raise ValueError(f"Invalid hex color: {value!r}")
            return color
        try:
            components = [int(c) for c in value]
        except (TypeError, ValueError):
            raise ValueError(f"Cannot interpret {value!r} as a color") from None
        if len(components) in (3, 4):
            return Color(*components)
        raise ValueError(f"Color needs 3 or 4 components, got {len(components)}")

    # ========================================
    # Equality and Hashing
    # ========================================

    def __eq__(self, other) -> bool:
        if not isinstance(other, Color):
            return False
        return self.to_rgba() == other.to_rgba()

    def __hash__(self) -> int:
        return hash(self.to_rgba())

    def __repr__(self) -> str:
        return f"Color({self._r}, {self._g}, {self._b}, {self._a})"

    def __str__(self) -> str:
        return self.to_hex(include_alpha=self._a != 255)
