"""Config loading helpers."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import yaml


def load_config(path: str | Path) -> Dict[str, Any]:
    """Read a JSON or YAML mapping of Flask config keys."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(path)
    with path.open("r", encoding="utf-8") as fh:
        if path.suffix.lower() in {".yaml", ".yml"}:
            payload = yaml.safe_load(fh) or {}
        else:
            payload = json.load(fh)
    if not isinstance(payload, dict):
        raise ValueError(f"{path} must contain a mapping at the top level")
    return {str(key).upper(): value for key, value in payload.items()}
