# solartimes/core/angle.py
"""
Angle value type shared by every solar formula.

Design
------
- Canonical storage in radians; degree view computed on demand.
- Closed arithmetic: Angle ± Angle, Angle × scalar, Angle ÷ scalar.
- sin/cos/tan evaluate directly; asin/acos construct an Angle.
- No normalisation to [0, 360): formulas reduce explicitly where needed.
- NaN is carried, never rejected. `Angle.acos` maps an argument outside
  [-1, 1] to NaN instead of raising, which is how callers detect that an
  elevation is never reached.
"""
from __future__ import annotations

import math
from typing import Union

__all__ = ["Angle", "TAU"]

TAU: float = 2.0 * math.pi

_Number = Union[int, float]


class Angle:
    __slots__ = ("_rad",)

    def __init__(self, rad: float) -> None:
        object.__setattr__(self, "_rad", float(rad))

    def __setattr__(self, name, value):
        raise AttributeError("Angle is immutable")

    # ── constructors ─────────────────────────────────────────────────
    @classmethod
    def from_rad(cls, rad: float) -> "Angle":
        return cls(rad)

    @classmethod
    def from_deg(cls, deg: float) -> "Angle":
        return cls(float(deg) * (math.pi / 180.0))

    @classmethod
    def asin(cls, x: float) -> "Angle":
        return cls(math.asin(x)) if -1.0 <= x <= 1.0 else cls(math.nan)

    @classmethod
    def acos(cls, x: float) -> "Angle":
        """arccos as an Angle; NaN when |x| > 1 or x is NaN."""
        return cls(math.acos(x)) if -1.0 <= x <= 1.0 else cls(math.nan)

    # ── views ────────────────────────────────────────────────────────
    @property
    def rad(self) -> float:
        return self._rad

    @property
    def deg(self) -> float:
        return self._rad * (180.0 / math.pi)

    @property
    def days(self) -> float:
        """Fraction of a day this angle spans on the clock (360° ≡ 1 day)."""
        return self._rad / TAU

    def is_nan(self) -> bool:
        return math.isnan(self._rad)

    # ── trigonometry ─────────────────────────────────────────────────
    def sin(self) -> float:
        return math.sin(self._rad)

    def cos(self) -> float:
        return math.cos(self._rad)

    def tan(self) -> float:
        return math.tan(self._rad)

    # ── arithmetic ───────────────────────────────────────────────────
    def __add__(self, other: "Angle") -> "Angle":
        if not isinstance(other, Angle):
            return NotImplemented
        return Angle(self._rad + other._rad)

    def __sub__(self, other: "Angle") -> "Angle":
        if not isinstance(other, Angle):
            return NotImplemented
        return Angle(self._rad - other._rad)

    def __mul__(self, k: _Number) -> "Angle":
        if isinstance(k, Angle) or not isinstance(k, (int, float)):
            return NotImplemented
        return Angle(self._rad * k)

    def __rmul__(self, k: _Number) -> "Angle":
        if isinstance(k, Angle) or not isinstance(k, (int, float)):
            return NotImplemented
        return Angle(k * self._rad)

    def __truediv__(self, k: _Number) -> "Angle":
        if isinstance(k, Angle) or not isinstance(k, (int, float)):
            return NotImplemented
        return Angle(self._rad / k)

    def __neg__(self) -> "Angle":
        return Angle(-self._rad)

    # ── value semantics ──────────────────────────────────────────────
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Angle):
            return NotImplemented
        return self._rad == other._rad

    def __hash__(self) -> int:
        return hash(("Angle", self._rad))

    def __repr__(self) -> str:
        return f"Angle({self.deg:.9g}°)"
