"""YAML configuration loader with environment variable overrides.

# ─── CONFIGURATION HIERARCHY ─────────────────────────────────────────
#
# Configuration is loaded in layers (later layers override earlier):
#
#   1. config/config.yaml : Static defaults checked into the repo
#                            (session TTL, cookie name, PIN bounds,
#                            role-protected path prefixes)
#   2. .env file          : Local developer overrides (not committed)
#   3. Environment vars   : Set at deploy time
#
# Missing YAML keys fall back to DEFAULT_CONFIG, so a partial file (or
# none at all) still yields a complete dictionary.
# ──────────────────────────────────────────────────────────────────────
"""

import copy
from pathlib import Path

import yaml

from src.config.settings import Settings

DEFAULT_CONFIG: dict = {
    "app": {
        "name": "instructor-hub",
        "version": "0.1.0",
    },
    "session": {
        "ttl_hours": 24,
        "cookie_name": "auth-token",
    },
    "recovery": {
        "code_ttl_minutes": 10,
        "pin_min_length": 4,
        "pin_max_length": 10,
        "max_pending_codes": 10000,
    },
    "access": {
        "login_path": "/login",
        "role_paths": {
            "/instructor": "INSTRUCTOR",
            "/em": "EM",
        },
        "exempt_prefixes": ["/api", "/static", "/favicon.ico"],
    },
}


def load_config(path: str = "config/config.yaml", settings: Settings | None = None) -> dict:
    """Load YAML config and merge with environment-based Settings.

    Args:
        path: Path to the YAML configuration file.
        settings: Settings to overlay; a fresh ``Settings()`` when omitted.

    Returns:
        Fully resolved configuration dictionary.
    """
    resolved = copy.deepcopy(DEFAULT_CONFIG)

    config_path = Path(path)
    if config_path.exists():
        with open(config_path) as f:
            yaml_config = yaml.safe_load(f) or {}
        _deep_merge(resolved, yaml_config)

    settings = settings or Settings()
    env_overrides = {
        "app": {
            "host": settings.app_host,
            "port": settings.app_port,
            "env": settings.app_env,
        },
        "session": {
            "secure_cookie": settings.is_production,
        },
        "recovery": {
            "allow_email_only_reset": settings.allow_email_only_pin_reset,
        },
        "logging": {
            "level": settings.log_level,
        },
    }

    _deep_merge(resolved, env_overrides)
    return resolved


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
