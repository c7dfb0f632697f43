# solartimes/core/ephemeris.py
"""
Low-precision solar ephemeris (NOAA solar calculator / Meeus ch. 25).

Every function takes `t`, Julian centuries since J2000.0, and is pure.
Coefficients are the published NOAA spreadsheet values; keep them exact,
a changed digit shifts event times by arc-seconds to arc-minutes.

Accuracy is about 0.01° in declination and a few seconds in equation of
time for 1800–2200. No refraction, no nutation beyond the Ω term.
"""
from __future__ import annotations

import math
from typing import NamedTuple

from solartimes.core.angle import Angle

__all__ = [
    "SolarPosition",
    "sun_geometric_mean_longitude",
    "sun_geometric_mean_anomaly",
    "earth_orbit_eccentricity",
    "sun_equation_of_center",
    "sun_true_longitude",
    "sun_apparent_longitude",
    "mean_ecliptic_obliquity",
    "obliquity_correction",
    "sun_declination",
    "equation_of_time",
    "solar_position",
]


class SolarPosition(NamedTuple):
    """The quantities event solving needs, evaluated once at one instant."""
    declination: Angle
    equation_of_time: Angle


# ───────────────────────────── Orbital elements ─────────────────────────────
def sun_geometric_mean_longitude(t: float) -> Angle:
    return Angle.from_deg(math.fmod(280.46646 + t * (36000.76983 + t * 0.0003032), 360.0))


def sun_geometric_mean_anomaly(t: float) -> Angle:
    return Angle.from_deg(357.52911 + t * (35999.05029 - 0.0001537 * t))


def earth_orbit_eccentricity(t: float) -> float:
    return 0.016708634 - t * (0.000042037 + 0.0000001267 * t)


def sun_equation_of_center(t: float) -> Angle:
    m = sun_geometric_mean_anomaly(t)
    return Angle.from_deg(
        m.sin() * (1.914602 - t * (0.004817 + 0.000014 * t))
        + (2 * m).sin() * (0.019993 - 0.000101 * t)
        + (3 * m).sin() * 0.000289
    )


def _ascending_node(t: float) -> Angle:
    # Ω, longitude of the Moon's ascending node (nutation/aberration term)
    return Angle.from_deg(125.04 - 1934.136 * t)


def sun_true_longitude(t: float) -> Angle:
    return sun_geometric_mean_longitude(t) + sun_equation_of_center(t)


def sun_apparent_longitude(t: float) -> Angle:
    omega = _ascending_node(t)
    return sun_true_longitude(t) - Angle.from_deg(0.00569 + 0.00478 * omega.sin())


# ───────────────────────────── Obliquity ─────────────────────────────
def mean_ecliptic_obliquity(t: float) -> Angle:
    seconds = 21.448 - t * (46.815 + t * (0.00059 - t * 0.001813))
    return Angle.from_deg(23.0 + (26.0 + seconds / 60.0) / 60.0)


def obliquity_correction(t: float) -> Angle:
    omega = _ascending_node(t)
    return mean_ecliptic_obliquity(t) + Angle.from_deg(0.00256 * omega.cos())


# ───────────────────────────── Derived ─────────────────────────────
def _declination(obliquity: Angle, apparent_longitude: Angle) -> Angle:
    return Angle.asin(obliquity.sin() * apparent_longitude.sin())


def _equation_of_time(obliquity: Angle, mean_longitude: Angle, mean_anomaly: Angle, e: float) -> Angle:
    y = (obliquity / 2).tan() * (obliquity / 2).tan()
    l0, m = mean_longitude, mean_anomaly
    return Angle.from_rad(
        y * (2 * l0).sin()
        - 2 * e * m.sin()
        + 4 * e * y * m.sin() * (2 * l0).cos()
        - 0.5 * y * y * (4 * l0).sin()
        - 1.25 * e * e * (2 * m).sin()
    )


def sun_declination(t: float) -> Angle:
    return _declination(obliquity_correction(t), sun_apparent_longitude(t))


def equation_of_time(t: float) -> Angle:
    """
    Apparent minus mean solar time as an angle of the Earth's rotation.
    `.days` gives the clock offset (1° ≈ 4 min).
    """
    return _equation_of_time(
        obliquity_correction(t),
        sun_geometric_mean_longitude(t),
        sun_geometric_mean_anomaly(t),
        earth_orbit_eccentricity(t),
    )


def solar_position(t: float) -> SolarPosition:
    """Declination and equation of time sharing one evaluation of the elements.

    Bit-identical to calling `sun_declination(t)` and `equation_of_time(t)`
    separately: the same helpers run on the same inputs.
    """
    obliquity = obliquity_correction(t)
    return SolarPosition(
        declination=_declination(obliquity, sun_apparent_longitude(t)),
        equation_of_time=_equation_of_time(
            obliquity,
            sun_geometric_mean_longitude(t),
            sun_geometric_mean_anomaly(t),
            earth_orbit_eccentricity(t),
        ),
    )
