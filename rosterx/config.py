"""Default application settings. Override with ``ROSTERX_CONFIG`` (JSON/YAML) or ``create_app(test_config)``."""
from __future__ import annotations

from typing import Any, Dict

DEFAULT_CONFIG: Dict[str, Any] = {
    "SECRET_KEY": "dev",
    "JSON_SORT_KEYS": False,
    # ISO weekday the displayed week starts on (1 = Monday).
    "WEEK_START": 1,
    "LOG_LEVEL": "INFO",
    # "sqlite" keeps records in DATABASE; "remote" proxies the facility REST API.
    "ROSTER_BACKEND": "sqlite",
    "AUTO_INIT_DB": True,
    "SEED_DEMO_DATA": True,
    "ROSTER_API_URL": None,
    "ROSTER_API_TOKEN": None,
    "ROSTER_API_TIMEOUT": 30,
}

BACKENDS = ("sqlite", "remote")
