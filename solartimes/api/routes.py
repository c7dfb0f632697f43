# solartimes/api/routes.py
"""
Solar Times — API Routes
- Sun events for a UTC day (or a local timestamp + IANA zone)
- Single event lookup
- Sun elevation at an instant
- Ops: /api/health, /api/config, /api/backends

Notes:
- Absent events (polar day / night) serialise as null, never as an error.
- A local 'datetime' is mapped to its UTC day by adding the UTC offset
  before flooring (offsets beyond +12 h wrap by -24 h).
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, request

from solartimes.version import VERSION
from solartimes.utils.config import load_config
from solartimes.core import refined
from solartimes.core.backends import BACKENDS, get_backend
from solartimes.core.events import SolarEventError
from solartimes.core.validators import (
    ValidationError,
    check_supported_day,
    parse_elevation_payload,
    parse_event_payload,
    parse_sun_times_payload,
)
from solartimes.api.helpers import iso_utc, serialize_sun_times, utc_day_for_local

log = logging.getLogger(__name__)
api = Blueprint("api", __name__)


# ───────────────────────── helpers ─────────────────────────
def _json_error(code: str, details: Any = None, http: int = 400):
    out: Dict[str, Any] = {"ok": False, "error": code}
    if details is not None:
        out["details"] = details
    return jsonify(out), http


def _cfg():
    cfg = getattr(current_app, "cfg", None)
    return cfg if cfg is not None else load_config()


def _body() -> Any:
    return request.get_json(force=True)


# ───────────────────────── health / ops ─────────────────────────
@api.get("/api/health")
def health():
    return jsonify({"ok": True, "status": "up", "version": VERSION}), 200


@api.get("/api/config")
def config_info():
    cfg = _cfg()
    return jsonify(
        {
            "ok": True,
            "default_backend": cfg.default_backend,
            "backends_enabled": list(cfg.backends_enabled),
            "localize_output": bool(cfg.localize_output),
            "version": VERSION,
        }
    ), 200


@api.get("/api/backends")
def backends_info():
    enabled = set(_cfg().backends_enabled)
    return jsonify(
        {
            "ok": True,
            "backends": [
                {"name": b.name, "description": b.description, "enabled": b.name in enabled}
                for b in BACKENDS.values()
            ],
        }
    ), 200


# ───────────────────────── sun ─────────────────────────
@api.post("/api/sun/times")
def sun_times():
    cfg = _cfg()
    try:
        p = parse_sun_times_payload(_body(), cfg.default_backend, list(cfg.backends_enabled))
        backend = get_backend(p["backend"])
        day = p["date"]
        if p["local"] is not None:
            day = check_supported_day(utc_day_for_local(p["local"]), "datetime")
    except ValidationError as e:
        return _json_error("validation_error", e.errors(), 400)
    except SolarEventError as e:
        return _json_error(e.code, str(e), 400)

    times = backend.times(p["latitude"], p["longitude"], day)
    log.debug("sun/times %s %s (%.5f, %.5f)", backend.name, day, p["latitude"], p["longitude"])

    tz = p["tz"] if cfg.localize_output else None
    return jsonify(
        {
            "ok": True,
            "backend": backend.name,
            "date": day.isoformat(),
            "latitude": p["latitude"],
            "longitude": p["longitude"],
            **serialize_sun_times(times, tz),
        }
    ), 200


@api.post("/api/sun/event")
def sun_event():
    cfg = _cfg()
    try:
        p = parse_event_payload(_body(), cfg.default_backend, list(cfg.backends_enabled))
        backend = get_backend(p["backend"])
    except ValidationError as e:
        return _json_error("validation_error", e.errors(), 400)
    except SolarEventError as e:
        return _json_error(e.code, str(e), 400)

    t = backend.time_of(p["latitude"], p["longitude"], p["date"], p["event"])
    return jsonify(
        {
            "ok": True,
            "backend": backend.name,
            "date": p["date"].isoformat(),
            "event": p["event"].value,
            "time": iso_utc(t),
        }
    ), 200


@api.post("/api/sun/elevation")
def sun_elevation():
    try:
        p = parse_elevation_payload(_body())
    except ValidationError as e:
        return _json_error("validation_error", e.errors(), 400)

    elev = refined.elevation(p["latitude"], p["longitude"], p["instant"])
    return jsonify(
        {
            "ok": True,
            "instant": iso_utc(p["instant"]),
            "latitude": p["latitude"],
            "longitude": p["longitude"],
            "elevation_deg": elev,
        }
    ), 200
