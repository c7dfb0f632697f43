# solartimes/core/validators.py
from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Tuple, TypedDict, Union
from zoneinfo import ZoneInfo

from solartimes.core.backends import BACKENDS, DEFAULT_BACKEND
from solartimes.core.events import SolarEvent
from solartimes.core.julian import MAX_DAY, MIN_DAY, is_supported_day

# ───────────────────────── errors ─────────────────────────

class ValidationError(ValueError):
    """Structured validator error; routes render .errors() as the 400 details."""
    def __init__(self, details: Union[str, Dict[str, Any], List[Dict[str, Any]]]):
        if isinstance(details, str):
            self._details = [{"loc": [], "msg": details, "type": "value_error"}]
            super().__init__(details)
        elif isinstance(details, dict):
            self._details = [details]
            super().__init__(details.get("msg", "validation_error"))
        elif isinstance(details, list):
            self._details = details
            super().__init__(self._details[0]["msg"] if self._details else "validation_error")
        else:
            self._details = [{"loc": [], "msg": "validation_error", "type": "value_error"}]
            super().__init__("validation_error")

    def errors(self) -> List[Dict[str, Any]]:
        return list(self._details)


# ───────────────────────── helpers ─────────────────────────

def _err(loc: List[str] | str, msg: str, typ: str = "value_error") -> Dict[str, Any]:
    return {"loc": [loc] if isinstance(loc, str) else loc, "msg": msg, "type": typ}

def _as_float(v: Any) -> Optional[float]:
    if v is None or isinstance(v, bool):
        return None
    try:
        x = float(v)
    except (TypeError, ValueError):
        return None
    if x != x or x in (float("inf"), float("-inf")):
        return None
    return x

def _pick(body: Dict[str, Any], *keys: str) -> Any:
    for k in keys:
        if k in body:
            return body[k]
    return None


# ───────────────────────── atomic parsers ─────────────────────────

_RANGE_MSG = f"must fall between {MIN_DAY.isoformat()} and {MAX_DAY.isoformat()}"

def check_supported_day(d: date, loc: str = "date") -> date:
    if not is_supported_day(d):
        raise ValidationError(_err(loc, _RANGE_MSG, "value_error.date"))
    return d

def parse_date(s: Any) -> date:
    if not isinstance(s, str):
        raise ValidationError(_err("date", "date must be 'YYYY-MM-DD'", "value_error.date"))
    try:
        d = datetime.strptime(s.strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(_err("date", "date must be 'YYYY-MM-DD'", "value_error.date")) from None
    return check_supported_day(d)

def parse_latlon(lat: Any, lon: Any, lat_key="latitude", lon_key="longitude") -> Tuple[float, float]:
    lat_f = _as_float(lat); lon_f = _as_float(lon)
    if lat_f is None or lon_f is None:
        raise ValidationError(_err([lat_key, lon_key], "latitude/longitude must be finite numbers", "type_error.float"))
    if not (-90.0 <= lat_f <= 90.0):
        raise ValidationError(_err(lat_key, "latitude must be between -90 and 90"))
    if not (-180.0 <= lon_f <= 180.0):
        raise ValidationError(_err(lon_key, "longitude must be between -180 and 180"))
    return float(lat_f), float(lon_f)

def parse_tz(tz: Any, loc: str = "tz") -> ZoneInfo:
    if not isinstance(tz, str) or not tz.strip():
        raise ValidationError(_err(loc, "must be a string (IANA)"))
    try:
        return ZoneInfo(tz.strip())
    except (KeyError, ValueError, OSError):  # ZoneInfoNotFoundError is a KeyError
        raise ValidationError(_err(loc, "must be a valid IANA zone like 'Europe/Berlin'")) from None

def parse_instant(s: Any, loc: str = "instant", tz: Optional[ZoneInfo] = None) -> datetime:
    """
    ISO-8601 timestamp -> aware datetime. A trailing 'Z' means UTC.
    Naive input is interpreted in `tz` when given, otherwise rejected.
    """
    if not isinstance(s, str) or not s.strip():
        raise ValidationError(_err(loc, "required ISO-8601 string", "value_error.datetime"))
    txt = s.strip()
    if txt.endswith(("Z", "z")):
        txt = txt[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(txt)
    except ValueError:
        raise ValidationError(_err(loc, "must be ISO-8601 like '2022-10-15T18:30:00+02:00'",
                                   "value_error.datetime")) from None
    if dt.tzinfo is None:
        if tz is None:
            raise ValidationError(_err(loc, "must carry a UTC offset (or pass 'tz')", "value_error.datetime"))
        dt = dt.replace(tzinfo=tz)
    # one spare day each side keeps every zone conversion inside datetime's range
    if not (MIN_DAY < dt.date() < MAX_DAY):
        raise ValidationError(_err(loc, _RANGE_MSG, "value_error.datetime"))
    return dt

def parse_event(val: Any) -> SolarEvent:
    s = str(val or "").strip().lower().replace("-", "_")
    try:
        return SolarEvent(s)
    except ValueError:
        raise ValidationError(_err("event", "event must be one of " + ", ".join(e.value for e in SolarEvent),
                                   "value_error.event")) from None

def parse_backend(val: Any, default: str = DEFAULT_BACKEND,
                  enabled: Optional[List[str]] = None) -> str:
    if val is None or (isinstance(val, str) and not val.strip()):
        return default
    name = str(val).strip().lower()
    allowed = [n for n in BACKENDS if enabled is None or n in enabled]
    if name not in allowed:
        raise ValidationError(_err("backend", "backend must be one of " + ", ".join(allowed),
                                   "value_error.backend"))
    return name


# ───────────────────────── payloads ─────────────────────────

class SunTimesPayload(TypedDict, total=False):
    latitude: float
    longitude: float
    date: date
    local: Optional[datetime]
    tz: Optional[ZoneInfo]
    backend: str

def _coords(body: Dict[str, Any]) -> Tuple[float, float]:
    return parse_latlon(_pick(body, "latitude", "lat"), _pick(body, "longitude", "lon"))

def _require_object(body: Any) -> Dict[str, Any]:
    if not isinstance(body, dict):
        raise ValidationError("payload must be an object")
    return body

def parse_sun_times_payload(body: Any, default_backend: str = DEFAULT_BACKEND,
                            enabled: Optional[List[str]] = None) -> SunTimesPayload:
    """
    Normalize /api/sun/times input.

    - Either 'date' (a UTC calendar day) or 'datetime' (a local timestamp) is required.
    - 'tz' is validated only if provided. With 'datetime' it localizes naive input;
      routes map the local timestamp to its UTC day.
    - 'backend' falls back to the configured default.
    """
    body = _require_object(body)
    lat, lon = _coords(body)

    tz_raw = _pick(body, "tz", "timezone")
    tz = parse_tz(tz_raw) if tz_raw is not None else None

    local: Optional[datetime] = None
    if body.get("datetime") is not None:
        local = parse_instant(body["datetime"], "datetime", tz)
        if tz is not None:
            local = local.astimezone(tz)
        d = local.astimezone(timezone.utc).date()  # routes refine this with the local-day rule
    elif body.get("date") is not None:
        d = parse_date(body["date"])
    else:
        raise ValidationError(_err(["date", "datetime"], "one of 'date' or 'datetime' is required"))

    return {
        "latitude": lat,
        "longitude": lon,
        "date": d,
        "local": local,
        "tz": tz,
        "backend": parse_backend(body.get("backend"), default_backend, enabled),
    }

def parse_event_payload(body: Any, default_backend: str = DEFAULT_BACKEND,
                        enabled: Optional[List[str]] = None) -> Dict[str, Any]:
    body = _require_object(body)
    lat, lon = _coords(body)
    if body.get("date") is None:
        raise ValidationError(_err("date", "required string"))
    return {
        "latitude": lat,
        "longitude": lon,
        "date": parse_date(body["date"]),
        "event": parse_event(body.get("event")),
        "backend": parse_backend(body.get("backend"), default_backend, enabled),
    }

def parse_elevation_payload(body: Any) -> Dict[str, Any]:
    body = _require_object(body)
    lat, lon = _coords(body)
    return {
        "latitude": lat,
        "longitude": lon,
        "instant": parse_instant(_pick(body, "instant", "datetime"), "instant"),
    }


__all__ = [
    "ValidationError",
    "check_supported_day",
    "parse_date",
    "parse_latlon",
    "parse_tz",
    "parse_instant",
    "parse_event",
    "parse_backend",
    "parse_sun_times_payload",
    "parse_event_payload",
    "parse_elevation_payload",
]
