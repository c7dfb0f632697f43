# solartimes/api/helpers.py
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Optional
from zoneinfo import ZoneInfo

from solartimes.core.events import SunTimes

__all__ = ["utc_day_for_local", "iso_utc", "serialize_sun_times"]

_HALF_DAY = timedelta(hours=12)
_DAY = timedelta(days=1)


# ---- Local time -> UTC calendar day ----------------------------------------
def utc_day_for_local(local_dt: datetime) -> date:
    """
    UTC calendar day whose events belong to a local timestamp.

    The UTC offset is added back before flooring so a local evening stays on
    its own day instead of sliding onto the next UTC date. Offsets above +12 h
    (e.g. Pacific/Kiritimati, +14) are wrapped by -24 h so that day stays
    within half a day of the meridian.
    """
    if local_dt.tzinfo is None or local_dt.utcoffset() is None:
        raise ValueError("local_dt must be timezone-aware")
    offset = local_dt.utcoffset()
    if offset > _HALF_DAY:
        offset -= _DAY
    utc = local_dt.astimezone(timezone.utc)
    return (utc + offset).date()


# ---- JSON shaping ----------------------------------------------------------
def iso_utc(dt: Optional[datetime]) -> Optional[str]:
    if dt is None:
        return None
    return dt.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def serialize_sun_times(times: SunTimes, tz: Optional[ZoneInfo] = None) -> Dict[str, Any]:
    """
    {"times": {event: iso|None}} and, when `tz` is given, a parallel
    {"local": {event: iso-with-offset|None}} block.
    """
    out: Dict[str, Any] = {"times": {ev.value: iso_utc(t) for ev, t in times}}
    if tz is not None:
        out["local"] = {ev.value: (t.astimezone(tz).isoformat() if t is not None else None)
                        for ev, t in times}
    return out
