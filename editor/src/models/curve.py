"""Tonal curve data structures for two-point correction."""
import numbers
from dataclasses import dataclass
from typing import Optional

from constants import CURVE_IDENTITY_START, CURVE_IDENTITY_END
from models.errors import InvalidCurveControlPoints


@dataclass(frozen=True)
class ControlPoint:
    """A curve control point: input byte mapped to output byte (both 0-255)."""
    input: int
    output: int

    def __post_init__(self):
        for field_name in ('input', 'output'):
            value = getattr(self, field_name)
            if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                raise ValueError(f"ControlPoint.{field_name} must be an int, got {value!r}")
            if not 0 <= value <= 255:
                raise ValueError(f"ControlPoint.{field_name} must be 0-255, got {value}")

    def __iter__(self):
        """Allow tuple unpacking: inp, out = point"""
        return iter((self.input, self.output))


@dataclass(frozen=True)
class Curve:
    """Two-point piecewise-linear correction curve.

    p1.input must be strictly below p2.input. Out-of-order points are
    rejected, never swapped.
    """
    p1: ControlPoint
    p2: ControlPoint

    def __post_init__(self):
        if self.p1.input >= self.p2.input:
            raise InvalidCurveControlPoints(
                f"p1.input ({self.p1.input}) must be less than p2.input ({self.p2.input})"
            )

    @classmethod
    def from_points(cls, in1: int, out1: int, in2: int, out2: int) -> 'Curve':
        return cls(ControlPoint(in1, out1), ControlPoint(in2, out2))

    @classmethod
    def identity(cls) -> 'Curve':
        return cls(ControlPoint(*CURVE_IDENTITY_START), ControlPoint(*CURVE_IDENTITY_END))

    @classmethod
    def parse(cls, text: str) -> 'Curve':
        """Parse 'IN1:OUT1,IN2:OUT2' (as used by the command line).

        Raises:
            ValueError: On malformed text
            InvalidCurveControlPoints: If the points are out of order
        """
        try:
            first, second = text.split(',')
            in1, out1 = (int(v) for v in first.split(':'))
            in2, out2 = (int(v) for v in second.split(':'))
        except ValueError:
            raise ValueError(f"Curve must look like 'IN1:OUT1,IN2:OUT2', got {text!r}") from None
        return cls.from_points(in1, out1, in2, out2)

    def is_identity(self) -> bool:
        return self == Curve.identity()


@dataclass(frozen=True)
class CurveSet:
    """Curves for one correction call. Any member may be None (pass-through).

    red/green/blue are used in color mode, gray in grayscale mode,
    alpha in both.
    """
    red: Optional[Curve] = None
    green: Optional[Curve] = None
    blue: Optional[Curve] = None
    gray: Optional[Curve] = None
    alpha: Optional[Curve] = None

    @classmethod
    def uniform(cls, curve: Curve, alpha: Optional[Curve] = None) -> 'CurveSet':
        """Same curve for R, G, B and gray"""
        return cls(red=curve, green=curve, blue=curve, gray=curve, alpha=alpha)
