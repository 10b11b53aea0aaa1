"""Closed mode enumerations shared by the engines and the layer store."""
from enum import Enum


class BlendMode(Enum):
    """Per-channel combining function applied before alpha compositing."""

    NORMAL = 'normal'
    MULTIPLY = 'multiply'
    SCREEN = 'screen'
    OVERLAY = 'overlay'

    @classmethod
    def parse(cls, value) -> 'BlendMode':
        """Accept a BlendMode or its (case-insensitive) name/value."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"Unknown blend mode: {value!r}") from None


class ConvolutionMode(Enum):
    """Which channels a convolution filters (never both in one call)."""

    RGB = 'rgb'
    ALPHA = 'alpha'

    @classmethod
    def parse(cls, value) -> 'ConvolutionMode':
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"Unknown convolution mode: {value!r}") from None


class CorrectionMode(Enum):
    """Color mode maps R, G, B independently; grayscale maps luma into all three."""

    COLOR = 'color'
    GRAYSCALE = 'grayscale'


class ImageFormat(Enum):
    """File formats the loader and exporter understand."""

    PNG = 'png'
    JPEG = 'jpeg'
    GB7 = 'gb7'

    @classmethod
    def from_suffix(cls, suffix: str) -> 'ImageFormat':
        """Map a file suffix ('.png', 'jpg', ...) to a format.

        Raises:
            ValueError: If the suffix is not recognized
        """
        key = suffix.lower().lstrip('.')
        if key == 'png':
            return cls.PNG
        elif key in ('jpg', 'jpeg'):
            return cls.JPEG
        elif key == 'gb7':
            return cls.GB7
        raise ValueError(f"Unknown image suffix: {suffix!r}")
