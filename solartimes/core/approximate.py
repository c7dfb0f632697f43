# solartimes/core/approximate.py
"""
Single-pass sunrise equation (closed form, one evaluation per event).

Step-by-step "complete calculation" of the sunrise equation:
  n   = ceil(JD - 2451545.0 + 0.0008)          current Julian day number
  J*  = n - lon/360                              mean solar time
  M   = (357.5291 + 0.98560028 J*) mod 360       mean anomaly
  C   = 1.9148 sin M + 0.02 sin 2M + 0.0003 sin 3M
  λ   = (M + C + 180 + 102.9372) mod 360         ecliptic longitude
  Jt  = 2451545 + J* + 0.0053 sin M - 0.0069 sin 2λ
  δ   = asin(sin λ · sin 23.44°)
  ω   = acos[(sin h - sin φ sin δ) / (cos φ cos δ)]

The declination is taken at transit only. Close to the onset of polar day
or night this can report one last event that the refined backend (and the
sky) no longer has. That inaccuracy is part of this backend; pick
`solartimes.core.refined` where polar correctness matters.
"""
from __future__ import annotations

import logging
import math
from datetime import date, datetime
from typing import Optional

from solartimes.core.angle import Angle
from solartimes.core.events import SolarEvent, SunTimes, coerce_event, require_supported_day, time_angle
from solartimes.core.julian import JulianDay

__all__ = ["time_of", "times"]

log = logging.getLogger(__name__)

AXIAL_TILT = Angle.from_deg(23.44)
# leap seconds + terrestrial time correction, in days
_TT_FUDGE_DAYS = 0.0008


def _julian_day_number(day: date) -> int:
    require_supported_day(day)
    return math.ceil(JulianDay.from_date(day).days_since_j2000 + _TT_FUDGE_DAYS)


def _mean_anomaly(mean_solar_time: float) -> Angle:
    return Angle.from_deg(math.fmod(357.5291 + 0.98560028 * mean_solar_time, 360.0))


def _equation_of_center(m: Angle) -> Angle:
    return Angle.from_deg(1.9148 * m.sin() + 0.0200 * (2 * m).sin() + 0.0003 * (3 * m).sin())


def _ecliptic_longitude(m: Angle) -> Angle:
    return Angle.from_deg(math.fmod(m.deg + _equation_of_center(m).deg + 180.0 + 102.9372, 360.0))


def _hour_angle(latitude: Angle, declination: Angle, angle: Angle) -> Angle:
    num = angle.cos() - latitude.sin() * declination.sin()
    den = latitude.cos() * declination.cos()
    omega = Angle.acos(num / den)
    return Angle.from_rad(math.copysign(omega.rad, angle.rad))


def _solve(latitude: Angle, longitude: Angle, day: date, event: SolarEvent) -> JulianDay:
    mean_solar_time = _julian_day_number(day) - longitude.days
    m = _mean_anomaly(mean_solar_time)
    lam = _ecliptic_longitude(m)
    declination = Angle.asin(lam.sin() * AXIAL_TILT.sin())

    transit = JulianDay.since_j2000(mean_solar_time + 0.0053 * m.sin() - 0.0069 * (2 * lam).sin())
    if event == SolarEvent.NOON:
        return transit
    if event == SolarEvent.MIDNIGHT:
        return transit + 0.5
    return transit + _hour_angle(latitude, declination, time_angle(event)).days


def time_of(latitude: float, longitude: float, day: date, event: SolarEvent) -> Optional[datetime]:
    """UTC instant of `event` on `day`, or None if the sun never reaches it."""
    jd = _solve(Angle.from_deg(latitude), Angle.from_deg(longitude), day, coerce_event(event))
    if jd.is_nan():
        return None
    return jd.to_datetime()


def times(latitude: float, longitude: float, day: date) -> SunTimes:
    out = SunTimes(**{ev.value: time_of(latitude, longitude, day, ev) for ev in SolarEvent})
    if log.isEnabledFor(logging.DEBUG):
        log.debug("approximate %s (%.5f, %.5f): absent=%s", day, latitude, longitude,
                  [ev.value for ev in out.absent()])
    return out
