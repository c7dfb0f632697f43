# solartimes/core/events.py
"""
Named solar events, their elevation thresholds, and the per-day aggregate.

Elevation thresholds (degrees above the horizon):
  astronomical twilight  -18
  nautical twilight      -12
  civil twilight          -6
  sunrise / sunset        -0.833  (solar radius + standard refraction)

The hour-angle formula takes a "time angle" rather than the elevation:
  dawn side:  -90° + elevation   (negative → before transit)
  dusk side:   90° - elevation   (positive → after transit)
cos(time angle) == sin(elevation) on both sides; the sign picks the side.
Noon and Midnight are transit-derived and have no threshold.
"""
from __future__ import annotations

import enum
from dataclasses import asdict, dataclass
from datetime import date, datetime
from typing import Dict, Iterator, Optional, Tuple

from solartimes.core.angle import Angle
from solartimes.core.julian import MAX_DAY, MIN_DAY, is_supported_day

__all__ = [
    "SolarEvent",
    "SolarEventError",
    "SunTimes",
    "ELEVATION_EVENTS",
    "ASTRO_TWILIGHT_ELEV",
    "NAUT_TWILIGHT_ELEV",
    "CIVIL_TWILIGHT_ELEV",
    "DAYTIME_ELEV",
    "time_angle",
    "target_elevation",
    "elevation_time_angle",
    "is_dawn",
    "coerce_event",
    "require_supported_day",
]


class SolarEventError(ValueError):
    def __init__(self, code: str, message: str):
        self.code = code
        super().__init__(f"{code}: {message}")


class SolarEvent(str, enum.Enum):
    NOON = "noon"
    MIDNIGHT = "midnight"
    ASTRO_DAWN = "astro_dawn"
    NAUT_DAWN = "naut_dawn"
    CIVIL_DAWN = "civil_dawn"
    SUNRISE = "sunrise"
    SUNSET = "sunset"
    CIVIL_DUSK = "civil_dusk"
    NAUT_DUSK = "naut_dusk"
    ASTRO_DUSK = "astro_dusk"


# ── thresholds ───────────────────────────────────────────────────────────────
ASTRO_TWILIGHT_ELEV: float = -18.0
NAUT_TWILIGHT_ELEV: float = -12.0
CIVIL_TWILIGHT_ELEV: float = -6.0
DAYTIME_ELEV: float = -0.833

_THRESHOLDS: Dict[SolarEvent, Tuple[float, bool]] = {
    # event: (elevation_deg, dawn_side)
    SolarEvent.ASTRO_DAWN: (ASTRO_TWILIGHT_ELEV, True),
    SolarEvent.NAUT_DAWN: (NAUT_TWILIGHT_ELEV, True),
    SolarEvent.CIVIL_DAWN: (CIVIL_TWILIGHT_ELEV, True),
    SolarEvent.SUNRISE: (DAYTIME_ELEV, True),
    SolarEvent.SUNSET: (DAYTIME_ELEV, False),
    SolarEvent.CIVIL_DUSK: (CIVIL_TWILIGHT_ELEV, False),
    SolarEvent.NAUT_DUSK: (NAUT_TWILIGHT_ELEV, False),
    SolarEvent.ASTRO_DUSK: (ASTRO_TWILIGHT_ELEV, False),
}

# Chronological order within one solar day.
ELEVATION_EVENTS: Tuple[SolarEvent, ...] = tuple(_THRESHOLDS)


def coerce_event(value: object) -> SolarEvent:
    """SolarEvent from a member or its string value; anything else is a caller bug."""
    try:
        return SolarEvent(value)
    except ValueError:
        raise SolarEventError("invalid_event", f"{value!r} is not a solar event") from None


def require_supported_day(day: date) -> date:
    if not is_supported_day(day):
        raise SolarEventError(
            "unsupported_date", f"{day} is outside {MIN_DAY.isoformat()}..{MAX_DAY.isoformat()}"
        )
    return day


def _threshold(event: SolarEvent) -> Tuple[float, bool]:
    try:
        return _THRESHOLDS[event]
    except (KeyError, TypeError):
        raise SolarEventError("invalid_event", f"{event!r} has no elevation threshold") from None


def target_elevation(event: SolarEvent) -> float:
    """Elevation in degrees at which `event` occurs."""
    return _threshold(event)[0]


def is_dawn(event: SolarEvent) -> bool:
    return _threshold(event)[1]


def elevation_time_angle(elevation_deg: float, rising: bool) -> Angle:
    if rising:
        return Angle.from_deg(-90.0 + elevation_deg)
    return Angle.from_deg(90.0 - elevation_deg)


def time_angle(event: SolarEvent) -> Angle:
    elev, dawn = _threshold(event)
    return elevation_time_angle(elev, dawn)


# ───────────────────────────── Aggregate ─────────────────────────────
@dataclass(frozen=True)
class SunTimes:
    """All events of one UTC day at one location; None = not reached that day."""

    noon: datetime
    midnight: datetime
    astro_dawn: Optional[datetime] = None
    naut_dawn: Optional[datetime] = None
    civil_dawn: Optional[datetime] = None
    sunrise: Optional[datetime] = None
    sunset: Optional[datetime] = None
    civil_dusk: Optional[datetime] = None
    naut_dusk: Optional[datetime] = None
    astro_dusk: Optional[datetime] = None

    def get(self, event: SolarEvent) -> Optional[datetime]:
        return getattr(self, coerce_event(event).value)

    def __iter__(self) -> Iterator[Tuple[SolarEvent, Optional[datetime]]]:
        for ev in SolarEvent:
            yield ev, getattr(self, ev.value)

    def absent(self) -> Tuple[SolarEvent, ...]:
        return tuple(ev for ev, t in self if t is None)

    def to_dict(self) -> Dict[str, Optional[datetime]]:
        return asdict(self)
