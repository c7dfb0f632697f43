# solartimes/core/backends.py
"""Registry of interchangeable event solvers, keyed by the names the API accepts."""
from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Dict, List, NamedTuple, Optional

from solartimes.core import approximate, refined
from solartimes.core.events import SolarEvent, SolarEventError, SunTimes

__all__ = ["Backend", "BACKENDS", "DEFAULT_BACKEND", "get_backend", "backend_names"]


class Backend(NamedTuple):
    name: str
    times: Callable[[float, float, date], SunTimes]
    time_of: Callable[[float, float, date, SolarEvent], Optional[datetime]]
    description: str


BACKENDS: Dict[str, Backend] = {
    b.name: b
    for b in (
        Backend(
            "approximate",
            approximate.times,
            approximate.time_of,
            "Single-pass sunrise equation; may report a spurious event near polar day/night onset.",
        ),
        Backend(
            "refined",
            refined.times,
            refined.time_of,
            "Two-pass NOAA method; transit recomputed per event.",
        ),
        Backend(
            "refined-shared",
            refined.times_shared,
            refined.time_of,
            "Two-pass NOAA method; transit and ephemeris shared across events.",
        ),
    )
}

DEFAULT_BACKEND = "refined-shared"


def backend_names() -> List[str]:
    return list(BACKENDS)


def get_backend(name: Optional[str] = None) -> Backend:
    key = DEFAULT_BACKEND if name is None else str(name).strip().lower()
    try:
        return BACKENDS[key]
    except KeyError:
        raise SolarEventError(
            "unknown_backend", f"{name!r} is not one of {', '.join(BACKENDS)}"
        ) from None
