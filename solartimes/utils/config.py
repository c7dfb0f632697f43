# solartimes/utils/config.py
import logging
import os

import yaml

log = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/defaults.yaml"

_DEFAULTS = {
    "default_backend": "refined-shared",
    "backends_enabled": ["approximate", "refined", "refined-shared"],
    "localize_output": True,
}


class AttrDict(dict):
    """Dict that also supports attribute access: cfg.default_backend and cfg['default_backend'] both work."""
    def __getattr__(self, item):
        try:
            return self[item]
        except KeyError as e:
            raise AttributeError(item) from e
    def __setattr__(self, key, value):
        self[key] = value

def _to_attr(obj):
    if isinstance(obj, dict):
        return AttrDict({k: _to_attr(v) for k, v in obj.items()})
    if isinstance(obj, list):
        return [_to_attr(x) for x in obj]
    return obj

def config_path() -> str:
    return os.getenv("SOLAR_CONFIG") or DEFAULT_CONFIG_PATH

def load_config(path: str = None):
    """
    Load YAML config from `path` (default: $SOLAR_CONFIG or config/defaults.yaml)
    on top of the built-in defaults. A missing file leaves the defaults in place.
    Optional override:
      - SOLAR_BACKEND  (overrides config['default_backend'] if set)
    Returns an AttrDict for convenient access.
    """
    path = path or config_path()
    data = dict(_DEFAULTS)
    if os.path.exists(path):
        with open(path, "r", encoding="utf-8") as f:
            data.update(yaml.safe_load(f) or {})
    else:
        log.info("config file %s not found; using built-in defaults", path)

    backend = os.getenv("SOLAR_BACKEND")
    if backend:
        data["default_backend"] = backend.strip().lower()

    return _to_attr(data)
