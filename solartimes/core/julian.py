# solartimes/core/julian.py
"""
Continuous-time substrate: civil UTC instants <-> fractional Julian days.

- Epoch: Julian Day 0 = -4713-11-24 12:00 (proleptic Gregorian).
  Solar formulas consume days/centuries since J2000.0 (JD 2451545.0).
- Two-part form (ERFA convention): `day` holds a whole-day anchor exactly
  (a UTC midnight, or J2000 itself), `offset` the fractional days from it.
  Offsets of a few days keep full float precision instead of being
  absorbed into a 7-digit JD.
- Calendar <-> JD goes through ERFA (cal2jd / jd2cal). Scale is civil
  UTC with 86400-second days; leap seconds are not modelled.
- Back-conversion floors to whole seconds.
- Supported days: MIN_DAY (0001-01-02) to MAX_DAY (9999-12-30). Events of a
  day fall up to about half a day either side of it, and every result must
  fit in `datetime` (years 1..9999).
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone

import erfa  # pyERFA

__all__ = [
    "JulianDay",
    "J2000",
    "UNIX_EPOCH_JD",
    "DAYS_PER_CENTURY",
    "SECONDS_PER_DAY",
    "MIN_DAY",
    "MAX_DAY",
    "is_supported_day",
]

J2000: float = 2451545.0
UNIX_EPOCH_JD: float = 2440587.5
DAYS_PER_CENTURY: float = 36525.0
SECONDS_PER_DAY: float = 86400.0

# Whole-day anchors must stay exact in float seconds (53-bit mantissa).
assert J2000 * SECONDS_PER_DAY < 2.0 ** 53, "JD epoch offset overflows float seconds"
assert float(int(UNIX_EPOCH_JD * 2)) == UNIX_EPOCH_JD * 2

# First and last calendar days whose events all land inside `datetime`.
MIN_DAY: date = date(1, 1, 2)
MAX_DAY: date = date(9999, 12, 30)


def is_supported_day(d: date) -> bool:
    return MIN_DAY <= d <= MAX_DAY


@dataclass(frozen=True)
class JulianDay:
    day: float
    offset: float = 0.0

    # ── constructors ─────────────────────────────────────────────────
    @classmethod
    def from_date(cls, d: date) -> "JulianDay":
        """00:00 UTC of a civil calendar day."""
        djm0, djm = erfa.cal2jd(d.year, d.month, d.day)
        return cls(float(djm0) + float(djm), 0.0)

    @classmethod
    def from_datetime(cls, dt: datetime) -> "JulianDay":
        """Aware datetime -> UTC midnight anchor + fraction of the day (µs kept)."""
        if dt.tzinfo is None or dt.utcoffset() is None:
            raise ValueError("datetime must be timezone-aware (UTC)")
        utc = dt.astimezone(timezone.utc)
        seconds = (utc.hour * 3600 + utc.minute * 60 + utc.second) + utc.microsecond / 1e6
        return cls.from_date(utc.date()) + seconds / SECONDS_PER_DAY

    @classmethod
    def since_j2000(cls, days: float) -> "JulianDay":
        return cls(J2000, float(days))

    # ── arithmetic (days) ────────────────────────────────────────────
    def __add__(self, days: float) -> "JulianDay":
        if isinstance(days, JulianDay):
            return NotImplemented
        return JulianDay(self.day, self.offset + days)

    def __sub__(self, days: float) -> "JulianDay":
        if isinstance(days, JulianDay):
            return NotImplemented
        return JulianDay(self.day, self.offset - days)

    # ── views ────────────────────────────────────────────────────────
    @property
    def jd(self) -> float:
        return math.fsum((self.day, self.offset))

    @property
    def days_since_j2000(self) -> float:
        return (self.day - J2000) + self.offset

    @property
    def centuries(self) -> float:
        """Julian centuries since J2000.0, the argument of the ephemeris model."""
        return self.days_since_j2000 / DAYS_PER_CENTURY

    def is_nan(self) -> bool:
        return math.isnan(self.day) or math.isnan(self.offset)

    def to_datetime(self) -> datetime:
        """UTC instant, floored to the whole second."""
        if self.is_nan():
            raise ValueError("cannot convert NaN Julian day to a calendar instant")
        iy, im, iday, fd = erfa.jd2cal(self.day, self.offset)
        seconds = math.floor(float(fd) * SECONDS_PER_DAY)
        midnight = datetime(int(iy), int(im), int(iday), tzinfo=timezone.utc)
        return midnight + timedelta(seconds=seconds)
