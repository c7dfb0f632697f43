# tests/conftest.py
from __future__ import annotations

"""
Pytest configuration for the solartimes suite.

- Registers Hypothesis profiles for local dev and CI.
- Freezes the process TZ to UTC (every instant the engine returns is UTC-aware anyway).
- Sanity-checks ERFA calendar helpers and basic tzdata presence.
- Adds a 'slow' marker for the wider property sweeps.
- Provides a Flask test client built from a fresh app.
"""

import os
import pytest
from hypothesis import settings, HealthCheck


# ──────────────────────────────────────────────────────────────────────────────
# Hypothesis profiles
# ──────────────────────────────────────────────────────────────────────────────
settings.register_profile(
    "dev",
    settings(
        deadline=None,           # avoid flaky timeouts on slower runners
        max_examples=60,         # fast local runs
        suppress_health_check=[HealthCheck.too_slow],
    ),
)
settings.register_profile(
    "ci",
    settings(
        deadline=None,
        max_examples=120,        # a bit more coverage in CI
        suppress_health_check=[HealthCheck.too_slow],
    ),
)

_profile = (
    "ci"
    if (os.getenv("CI") or os.getenv("GITHUB_ACTIONS"))
    else os.getenv("HYPOTHESIS_PROFILE", "dev")
)
settings.load_profile(_profile)


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "slow: mark test as slow")
    config.addinivalue_line("filterwarnings", "ignore::DeprecationWarning")


def pytest_report_header(config: pytest.Config) -> str:
    return f"Hypothesis profile: '{_profile}'"


# ──────────────────────────────────────────────────────────────────────────────
# Global fixtures
# ──────────────────────────────────────────────────────────────────────────────

@pytest.fixture(scope="session", autouse=True)
def freeze_tz_env():
    prev = os.environ.get("TZ")
    os.environ["TZ"] = "UTC"
    try:
        yield
    finally:
        if prev is None:
            os.environ.pop("TZ", None)
        else:
            os.environ["TZ"] = prev


@pytest.fixture(scope="session")
def ensure_erfa():
    """Fail early if pyERFA isn't importable or lacks the calendar functions."""
    import erfa
    assert hasattr(erfa, "cal2jd"), "ERFA.cal2jd not available"
    assert hasattr(erfa, "jd2cal"), "ERFA.jd2cal not available"
    return erfa


@pytest.fixture(scope="session")
def ensure_tzdata():
    from zoneinfo import ZoneInfo
    for name in ("UTC", "Asia/Tokyo", "America/Los_Angeles", "Pacific/Kiritimati"):
        ZoneInfo(name)


@pytest.fixture
def app(monkeypatch):
    """Fresh app on the repo's default config (env overrides cleared)."""
    monkeypatch.delenv("SOLAR_BACKEND", raising=False)
    monkeypatch.delenv("SOLAR_CONFIG", raising=False)
    from solartimes.main import create_app
    a = create_app()
    a.testing = True
    return a


@pytest.fixture
def client(app):
    return app.test_client()
