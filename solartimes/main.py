# solartimes/main.py
from __future__ import annotations

import logging
import os
import traceback
from time import perf_counter
from typing import Final

from flask import Flask, Response, jsonify, request
from flask_cors import CORS
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)
from werkzeug.exceptions import HTTPException
from werkzeug.middleware.proxy_fix import ProxyFix

from solartimes.api.routes import api as _routes_bp
from solartimes.core.validators import ValidationError
from solartimes.utils.config import load_config
from solartimes.version import VERSION

# ───────────────────────── Prometheus ─────────────────────────
MET_REQUESTS: Final = Counter("solar_api_requests_total", "API requests", ["route"])
MET_ABSENT: Final = Counter("solar_absent_events_total", "Events absent from a response (polar day/night)", ["event"])
GAUGE_APP_UP: Final = Gauge("solar_app_up", "1 if app is running")
REQ_LATENCY: Final = Histogram("solar_request_seconds", "API request latency", ["route"])

_TRACKED_ROUTES = ("/", "/health", "/healthz", "/metrics")


def _tracked(path: str) -> bool:
    return path.startswith("/api/") or path in _TRACKED_ROUTES

# ───────────────────────── helpers: logging & errors ─────────────────────────
def _configure_logging(app: Flask) -> None:
    gerr = logging.getLogger("gunicorn.error")
    if gerr.handlers:
        app.logger.handlers = gerr.handlers
        app.logger.setLevel(gerr.level)
        logging.getLogger("solartimes").setLevel(gerr.level)
    else:
        logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO").upper())

def _register_errors(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def _validation(e: ValidationError):
        return jsonify(ok=False, error="validation_error", details=e.errors()), 400

    @app.errorhandler(HTTPException)
    def _http(e: HTTPException):
        app.logger.warning("HTTP %s at %s %s: %s", e.code, request.method, request.path, e.description)
        return jsonify(
            ok=False,
            error="http_error",
            code=e.code,
            name=e.name,
            message=e.description,
            path=request.path,
        ), e.code

    @app.errorhandler(Exception)
    def _any(e: Exception):
        tb = traceback.format_exc()
        app.logger.error("UNHANDLED %s at %s %s\n%s", type(e).__name__, request.method, request.path, tb)
        return jsonify(
            ok=False,
            error="internal_error",
            type=type(e).__name__,
            message=str(e),
            path=request.path,
        ), 500

# ───────────────────────── health & utils ─────────────────────────
def _register_health(app: Flask) -> None:
    @app.route("/", methods=["GET"])
    def root():
        return jsonify(ok=True, service="solartimes", version=VERSION, health="/health"), 200

    @app.route("/health", methods=["GET"])
    @app.route("/healthz", methods=["GET"])
    def health():
        return jsonify(ok=True, status="ok"), 200

def _metrics_auth_ok() -> bool:
    auth = request.authorization
    user = os.getenv("METRICS_USER", "")
    pw = os.getenv("METRICS_PASS", "")
    return bool(
        auth and auth.type == "basic" and auth.username == user and auth.password == pw and user and pw
    )

def _count_absent(resp) -> None:
    if request.path != "/api/sun/times" or resp.status_code != 200:
        return
    body = resp.get_json(silent=True) or {}
    for name, value in (body.get("times") or {}).items():
        if value is None:
            MET_ABSENT.labels(event=name).inc()

# ───────────────────────── app factory ─────────────────────────
def create_app() -> Flask:
    app = Flask(__name__)
    app.json.sort_keys = False
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)  # type: ignore

    _configure_logging(app)

    app.cfg = load_config()  # type: ignore[attr-defined]

    # Seed metrics
    seeded_routes = _TRACKED_ROUTES + (
        "/api/health", "/api/config", "/api/backends",
        "/api/sun/times", "/api/sun/event", "/api/sun/elevation",
    )
    for route in seeded_routes:
        MET_REQUESTS.labels(route=route).inc(0)
        REQ_LATENCY.labels(route=route).observe(0.0)
    GAUGE_APP_UP.set(1.0)

    @app.before_request
    def _before():
        p = request.path or ""
        if _tracked(p):
            MET_REQUESTS.labels(route=p).inc()
            request._t0 = perf_counter()

    @app.after_request
    def _after(resp):
        p = request.path or ""
        if _tracked(p) and hasattr(request, "_t0"):
            REQ_LATENCY.labels(route=p).observe(perf_counter() - request._t0)
        _count_absent(resp)
        return resp

    _register_health(app)
    _register_errors(app)
    app.register_blueprint(_routes_bp)

    # /metrics (Basic Auth)
    @app.route("/metrics", methods=["GET"])
    def metrics_endpoint():
        if not _metrics_auth_ok():
            return Response("Unauthorized", 401, {"WWW-Authenticate": 'Basic realm="metrics"'})
        GAUGE_APP_UP.set(1.0)
        return Response(generate_latest(REGISTRY), mimetype=CONTENT_TYPE_LATEST)

    # CORS for browser UIs
    CORS(
        app,
        resources={r"/.*": {"origins": os.environ.get("CORS_ALLOW_ORIGIN") or "*"}},
        supports_credentials=False,
        methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        max_age=600,
    )

    app.logger.info(
        "App initialized; version=%s default_backend=%s enabled=%s",
        VERSION, app.cfg.default_backend, list(app.cfg.backends_enabled),
    )
    return app

# ───────────────────────── app instance ─────────────────────────
app = create_app()

if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.environ.get("PORT", 5000)))
