# tests/test_refined.py
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest
from hypothesis import assume, given, strategies as st

from solartimes.core import refined
from solartimes.core.angle import Angle
from solartimes.core.ephemeris import solar_position
from solartimes.core.events import ELEVATION_EVENTS, SolarEvent, target_elevation, time_angle
from solartimes.core.julian import MAX_DAY, MIN_DAY

UTC = timezone.utc

VOSTOK = (-78.463889, 106.83757)
LONDON = (51.5074, -0.1278)
BIELEFELD = (52.02182, 8.53509)

ORDER = [
    "astro_dawn", "naut_dawn", "civil_dawn", "sunrise", "noon",
    "sunset", "civil_dusk", "naut_dusk", "astro_dusk", "midnight",
]

days = st.dates(min_value=date(1900, 1, 1), max_value=date(2100, 12, 31))
longitudes = st.floats(min_value=-180.0, max_value=180.0, allow_nan=False)
all_days = st.dates(min_value=MIN_DAY, max_value=MAX_DAY)


def _near(actual: datetime, expected: datetime, tol: timedelta) -> bool:
    return abs(actual - expected) <= tol


# ─────────────────────────────────────────────────────────────────────────────
# Almanac values
# ─────────────────────────────────────────────────────────────────────────────

def test_london_midsummer() -> None:
    t = refined.times(*LONDON, date(2023, 6, 21))
    assert _near(t.sunrise, datetime(2023, 6, 21, 3, 43, tzinfo=UTC), timedelta(minutes=2))
    assert _near(t.sunset, datetime(2023, 6, 21, 20, 21, tzinfo=UTC), timedelta(minutes=2))
    # astronomical night never happens at 51.5°N in June
    assert t.astro_dawn is None and t.astro_dusk is None


def test_bielefeld_october() -> None:
    t = refined.times(*BIELEFELD, date(2022, 10, 15))
    assert _near(t.noon, datetime(2022, 10, 15, 11, 11, 40, tzinfo=UTC), timedelta(seconds=90))
    assert _near(t.sunrise, datetime(2022, 10, 15, 5, 51, tzinfo=UTC), timedelta(minutes=1))
    assert _near(t.sunset, datetime(2022, 10, 15, 16, 32, tzinfo=UTC), timedelta(minutes=1))
    assert abs((t.midnight - t.noon) - timedelta(hours=12)) <= timedelta(seconds=1)


def test_equator_on_equinox() -> None:
    d = date(2023, 3, 20)
    up = refined.time_of_elevation(0.0, 0.0, d, 0.0, rising=True)
    down = refined.time_of_elevation(0.0, 0.0, d, 0.0, rising=False)
    assert abs((down - up) - timedelta(hours=12)) <= timedelta(minutes=1)

    t = refined.times(0.0, 0.0, d)
    # refraction + solar radius add ~3m20s at each end
    assert abs((t.sunset - t.sunrise) - timedelta(hours=12, minutes=6, seconds=40)) <= timedelta(minutes=1)


def test_results_are_utc_and_whole_seconds() -> None:
    t = refined.times(*BIELEFELD, date(2022, 10, 15))
    for _, v in t:
        assert v.tzinfo is UTC
        assert v.microsecond == 0


# ─────────────────────────────────────────────────────────────────────────────
# Polar behaviour
# ─────────────────────────────────────────────────────────────────────────────

def test_vostok_polar_night() -> None:
    t = refined.times(*VOSTOK, date(2023, 6, 21))
    assert t.noon is not None and t.midnight is not None
    assert t.sunrise is None and t.sunset is None
    assert t.civil_dawn is None and t.civil_dusk is None
    assert t.astro_dawn is not None and t.astro_dusk is not None


def test_vostok_polar_day() -> None:
    t = refined.times(*VOSTOK, date(2023, 12, 21))
    assert t.noon is not None and t.midnight is not None
    for ev in ELEVATION_EVENTS:
        assert t.get(ev) is None


@pytest.mark.slow
@given(st.floats(min_value=-90.0, max_value=90.0, allow_nan=False), longitudes, all_days)
def test_never_raises_and_transits_always_present(lat: float, lon: float, d: date) -> None:
    t = refined.times_shared(lat, lon, d)
    assert t.noon is not None and t.midnight is not None


# ─────────────────────────────────────────────────────────────────────────────
# Properties
# ─────────────────────────────────────────────────────────────────────────────

@given(st.floats(min_value=-45.0, max_value=45.0, allow_nan=False), longitudes, days)
def test_events_in_chronological_order(lat: float, lon: float, d: date) -> None:
    t = refined.times(lat, lon, d).to_dict()
    seq = [t[k] for k in ORDER]
    assert all(v is not None for v in seq)
    assert seq == sorted(seq)
    assert len(set(seq)) == len(seq)


@given(st.floats(min_value=-89.0, max_value=89.0, allow_nan=False), longitudes, days)
def test_shared_variant_is_bit_identical(lat: float, lon: float, d: date) -> None:
    assert refined.times_shared(lat, lon, d) == refined.times(lat, lon, d)


@given(st.floats(min_value=-89.0, max_value=89.0, allow_nan=False), longitudes, days)
def test_idempotent(lat: float, lon: float, d: date) -> None:
    assert refined.times(lat, lon, d) == refined.times(lat, lon, d)


@given(
    st.floats(min_value=-45.0, max_value=45.0, allow_nan=False),
    longitudes,
    days,
    st.sampled_from([SolarEvent.NAUT_DAWN, SolarEvent.CIVIL_DAWN, SolarEvent.SUNRISE,
                     SolarEvent.SUNSET, SolarEvent.CIVIL_DUSK, SolarEvent.NAUT_DUSK]),
)
def test_event_time_round_trips_through_elevation(lat: float, lon: float, d: date, ev: SolarEvent) -> None:
    t = refined.time_of(lat, lon, d, ev)
    assume(t is not None)
    # returned instants are floored to the second: up to ~0.004° of sun motion
    assert refined.elevation(lat, lon, t) == pytest.approx(target_elevation(ev), abs=0.02)


@given(
    st.floats(min_value=-45.0, max_value=45.0, allow_nan=False),
    longitudes,
    days,
    st.floats(min_value=-15.0, max_value=30.0, allow_nan=False),
    st.booleans(),
)
def test_arbitrary_elevation_round_trip(lat, lon, d, elev, rising) -> None:
    t = refined.time_of_elevation(lat, lon, d, elev, rising)
    assume(t is not None)
    # second flooring, plus the second-pass residual where the crossing grazes the peak
    assert refined.elevation(lat, lon, t) == pytest.approx(elev, abs=0.05)


@given(
    st.floats(min_value=-45.0, max_value=45.0, allow_nan=False),
    longitudes,
    days,
    st.sampled_from(ELEVATION_EVENTS[1:-1]),
)
def test_unfloored_crossing_hits_target_elevation(lat: float, lon: float, d: date, ev: SolarEvent) -> None:
    la, lo = Angle.from_deg(lat), Angle.from_deg(lon)
    midnight, noon = refined._transit(d, lo)
    offset = refined._crossing_offset(noon, solar_position(noon.centuries), la, lo, time_angle(ev))
    assume(offset == offset)
    # only the declination drift between candidate and final instant remains
    got = refined._elevation_at(la, lo, midnight + offset).deg
    assert got == pytest.approx(target_elevation(ev), abs=1e-3)


def test_time_of_matches_times() -> None:
    d = date(2022, 10, 15)
    t = refined.times(*BIELEFELD, d)
    for ev in SolarEvent:
        assert refined.time_of(*BIELEFELD, d, ev) == t.get(ev)
    assert refined.time_of(*BIELEFELD, d, "sunset") == t.sunset


def test_time_of_elevation_agrees_with_named_event() -> None:
    d = date(2022, 10, 15)
    assert refined.time_of_elevation(*BIELEFELD, d, -6.0, rising=True) == refined.time_of(
        *BIELEFELD, d, SolarEvent.CIVIL_DAWN
    )


# ─────────────────────────────────────────────────────────────────────────────
# Inverse
# ─────────────────────────────────────────────────────────────────────────────

def test_elevation_at_equinox_noon_near_ninety_minus_latitude() -> None:
    noon = refined.time_of(BIELEFELD[0], BIELEFELD[1], date(2023, 3, 20), SolarEvent.NOON)
    assert refined.elevation(*BIELEFELD, noon) == pytest.approx(90.0 - BIELEFELD[0], abs=0.5)


def test_elevation_is_total_at_the_pole() -> None:
    e = refined.elevation(90.0, 0.0, datetime(2023, 6, 21, 12, tzinfo=UTC))
    assert e == pytest.approx(23.44, abs=0.05)


def test_solar_elevation_returns_angle() -> None:
    a = refined.solar_elevation(Angle.from_deg(0.0), Angle.from_deg(0.0), datetime(2023, 3, 20, 12, tzinfo=UTC))
    assert isinstance(a, Angle)
    assert a.deg > 85.0


def test_elevation_rejects_naive_instant() -> None:
    with pytest.raises(ValueError):
        refined.elevation(0.0, 0.0, datetime(2023, 3, 20, 12))


@given(
    st.floats(min_value=-90.0, max_value=90.0, allow_nan=False),
    longitudes,
    st.datetimes(min_value=datetime(1900, 1, 1), max_value=datetime(2100, 1, 1)).map(lambda d: d.replace(tzinfo=UTC)),
)
def test_elevation_always_defined(lat: float, lon: float, instant: datetime) -> None:
    e = refined.elevation(lat, lon, instant)
    assert -90.0 <= e <= 90.0
