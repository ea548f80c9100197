"""Application factory for the roster scheduler web API."""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from flask import Flask, jsonify
from flask.typing import ResponseReturnValue

from .adapters.config_loader import load_config
from .config import BACKENDS, DEFAULT_CONFIG
from .dao import db as db_module
from .errors import CollaboratorError, RosterError, UnknownAssignmentError, ValidationError
from .services.locks import KeyedLocks

logger = logging.getLogger(__name__)

# (module, attribute, backends the blueprint is served for)
BLUEPRINTS = [
    ("rosterx.blueprints.roster.routes", "bp", BACKENDS),
    ("rosterx.blueprints.catalog.routes", "bp", ("sqlite",)),
]


def create_app(test_config: dict[str, Any] | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_mapping(DEFAULT_CONFIG)
    app.config["DATABASE"] = os.path.join(app.instance_path, "rosterx.sqlite")

    config_path = os.environ.get("ROSTERX_CONFIG")
    if config_path:
        app.config.update(load_config(config_path))
    if test_config:
        app.config.update(test_config)

    backend = app.config["ROSTER_BACKEND"]
    if backend not in BACKENDS:
        raise ValueError(f"ROSTER_BACKEND must be one of {BACKENDS}, got {backend!r}")
    if backend == "remote" and not app.config.get("ROSTER_API_URL"):
        raise ValueError("ROSTER_API_URL is required when ROSTER_BACKEND is 'remote'")

    logging.getLogger("rosterx").setLevel(str(app.config["LOG_LEVEL"]).upper())
    Path(app.instance_path).mkdir(parents=True, exist_ok=True)

    db_module.init_app(app)
    if backend == "sqlite" and app.config.get("AUTO_INIT_DB", True):
        db_module.ensure_schema(app, seed=bool(app.config.get("SEED_DEMO_DATA", True)))

    app.extensions["rosterx.locks"] = KeyedLocks()

    for import_path, attr, backends in BLUEPRINTS:
        if backend not in backends:
            continue
        module = __import__(import_path, fromlist=[attr])
        app.register_blueprint(getattr(module, attr))

    @app.errorhandler(RosterError)
    def handle_roster_error(exc: RosterError) -> ResponseReturnValue:
        if isinstance(exc, ValidationError):
            status = 400
        elif isinstance(exc, UnknownAssignmentError):
            status = 404
        elif isinstance(exc, CollaboratorError):
            logger.error("Collaborator failure: %s", exc)
            status = 502
        else:
            status = 500
        return jsonify({"error": str(exc), "code": exc.code}), status

    @app.get("/healthz")
    def healthcheck() -> tuple[str, int]:
        return "OK", 200

    logger.info("rosterx started with %s backend", backend)
    return app


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    create_app().run(debug=True)
