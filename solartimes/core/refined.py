# solartimes/core/refined.py
"""
Two-pass solar event solver (NOAA solar calculator method) and its inverse.

Solar transit
  1) approximate transit from longitude alone: 12:00 - lon/15 h
  2) equation of time at that approximation
  3) corrected transit
  4) equation of time again at the corrected transit -> final transit
  The equation of time depends on the time of day, so one evaluation
  leaves a small fixed-point error; the second pass removes it.

Elevation crossing
  1) hour angle from the declination at the converged transit
  2) candidate time = transit + hour angle
  3) equation of time and hour angle again at the candidate
  4) result as an offset from 00:00 UTC of the requested day
  The second pass is what keeps this backend reliable near the poles.

Absence: the hour-angle arccosine has no solution when the sun stays above
or below the target all day. `Angle.acos` turns that into NaN, NaN flows
through the arithmetic, and the public functions return None for it.

Public API:
    time_of(lat, lon, day, event)                   -> Optional[datetime]
    time_of_elevation(lat, lon, day, elev, rising)  -> Optional[datetime]
    times(lat, lon, day)                            -> SunTimes
    times_shared(lat, lon, day)                     -> SunTimes (same values)
    elevation(lat, lon, instant)                    -> float degrees
    solar_elevation(lat, lon, instant)              -> Angle
"""
from __future__ import annotations

import logging
import math
from datetime import date, datetime
from typing import Dict, Optional, Tuple

from solartimes.core.angle import TAU, Angle
from solartimes.core.ephemeris import SolarPosition, equation_of_time, solar_position
from solartimes.core.events import (
    ELEVATION_EVENTS,
    SolarEvent,
    SunTimes,
    coerce_event,
    elevation_time_angle,
    require_supported_day,
    time_angle,
)
from solartimes.core.julian import JulianDay

__all__ = [
    "NOON",
    "hour_angle",
    "solar_noon_offset",
    "time_of",
    "time_of_elevation",
    "times",
    "times_shared",
    "elevation",
    "solar_elevation",
]

log = logging.getLogger(__name__)

# Hour angle of the anti-meridian at 00:00 local mean time.
NOON = Angle.from_deg(180.0)


# ───────────────────────────── Geometry ─────────────────────────────
def hour_angle(declination: Angle, latitude: Angle, angle: Angle) -> Angle:
    """
    Hour angle at which the sun reaches the elevation encoded by `angle`
    (see events.time_angle), signed like `angle`. NaN if never reached.
    """
    omega = Angle.acos(
        angle.cos() / (latitude.cos() * declination.cos()) - latitude.tan() * declination.tan()
    )
    return Angle.from_rad(math.copysign(omega.rad, angle.rad))


def solar_noon_offset(midnight: JulianDay, longitude: Angle) -> float:
    """Days from `midnight` (00:00 UTC) to the solar transit at `longitude`."""
    approx = midnight + (NOON - longitude).days
    eot = equation_of_time(approx.centuries)

    corrected = midnight + (NOON - longitude - eot).days
    eot = equation_of_time(corrected.centuries)
    return (NOON - longitude - eot).days


def _crossing_offset(
    noon: JulianDay,
    at_noon: SolarPosition,
    latitude: Angle,
    longitude: Angle,
    angle: Angle,
) -> float:
    """Days from 00:00 UTC of the transit's day to the elevation crossing (NaN if none)."""
    ha = hour_angle(at_noon.declination, latitude, angle)
    candidate = noon + ha.days

    at_candidate = solar_position(candidate.centuries)
    ha = hour_angle(at_candidate.declination, latitude, angle)
    return (NOON - longitude - at_candidate.equation_of_time + ha).days


def _transit(day: date, longitude: Angle) -> Tuple[JulianDay, JulianDay]:
    midnight = JulianDay.from_date(require_supported_day(day))
    return midnight, midnight + solar_noon_offset(midnight, longitude)


def _instant(jd: JulianDay) -> Optional[datetime]:
    return None if jd.is_nan() else jd.to_datetime()


# ───────────────────────────── Event solving ─────────────────────────────
def time_of_elevation(
    latitude: float,
    longitude: float,
    day: date,
    elevation_deg: float,
    rising: bool,
) -> Optional[datetime]:
    """
    UTC instant on `day` when the sun passes `elevation_deg` (rising side if
    `rising`, setting side otherwise), or None if it never does that day.
    """
    lat, lon = Angle.from_deg(latitude), Angle.from_deg(longitude)
    midnight, noon = _transit(day, lon)
    offset = _crossing_offset(
        noon, solar_position(noon.centuries), lat, lon, elevation_time_angle(elevation_deg, rising)
    )
    return _instant(midnight + offset)


def time_of(latitude: float, longitude: float, day: date, event: SolarEvent) -> Optional[datetime]:
    event = coerce_event(event)
    lat, lon = Angle.from_deg(latitude), Angle.from_deg(longitude)
    midnight, noon = _transit(day, lon)

    if event == SolarEvent.NOON:
        return noon.to_datetime()
    if event == SolarEvent.MIDNIGHT:
        return (noon + 0.5).to_datetime()
    offset = _crossing_offset(noon, solar_position(noon.centuries), lat, lon, time_angle(event))
    return _instant(midnight + offset)


def _log_absent(kind: str, day: date, latitude: float, longitude: float, out: SunTimes) -> None:
    if log.isEnabledFor(logging.DEBUG):
        log.debug("%s %s (%.5f, %.5f): absent=%s", kind, day, latitude, longitude,
                  [ev.value for ev in out.absent()])


def times(latitude: float, longitude: float, day: date) -> SunTimes:
    """Every event, each solved independently (transit recomputed per event)."""
    out = SunTimes(**{ev.value: time_of(latitude, longitude, day, ev) for ev in SolarEvent})
    _log_absent("refined", day, latitude, longitude, out)
    return out


def times_shared(latitude: float, longitude: float, day: date) -> SunTimes:
    """
    Same result as `times`, bit for bit, with the transit and the ephemeris
    at transit evaluated once and reused by all eight crossings.
    """
    lat, lon = Angle.from_deg(latitude), Angle.from_deg(longitude)
    midnight, noon = _transit(day, lon)
    at_noon = solar_position(noon.centuries)

    crossings: Dict[str, Optional[datetime]] = {
        ev.value: _instant(midnight + _crossing_offset(noon, at_noon, lat, lon, time_angle(ev)))
        for ev in ELEVATION_EVENTS
    }
    out = SunTimes(noon=noon.to_datetime(), midnight=(noon + 0.5).to_datetime(), **crossings)
    _log_absent("refined-shared", day, latitude, longitude, out)
    return out


# ───────────────────────────── Inverse ─────────────────────────────
def solar_elevation(latitude: Angle, longitude: Angle, instant: datetime) -> Angle:
    """Sun elevation above the geometric horizon at an aware `instant` (no refraction)."""
    return _elevation_at(latitude, longitude, JulianDay.from_datetime(instant))


def _elevation_at(latitude: Angle, longitude: Angle, jd: JulianDay) -> Angle:
    pos = solar_position(jd.centuries)

    ha = longitude + pos.equation_of_time + Angle.from_rad(jd.offset * TAU) - NOON
    dec = pos.declination
    x = latitude.sin() * dec.sin() + latitude.cos() * dec.cos() * ha.cos()
    # rounding can push |x| a hair past 1 with the sun at the zenith/nadir
    return Angle.asin(min(1.0, max(-1.0, x)))


def elevation(latitude: float, longitude: float, instant: datetime) -> float:
    return solar_elevation(Angle.from_deg(latitude), Angle.from_deg(longitude), instant).deg
