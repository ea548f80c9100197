"""Request-scoped wiring shared by the blueprints."""
from __future__ import annotations

from datetime import date
from typing import Any, Optional

from flask import current_app

from ..adapters.http_gateway import RemoteScheduleGateway
from ..domain.models import PivotType
from ..errors import ValidationError
from ..services.gateway import DatabaseGateway, ScheduleGateway
from ..services.orchestrator import RosterBoard


def parse_iso_date(value: Any, field: str, *, default: Optional[date] = None) -> date:
    if value is None or value == "":
        if default is not None:
            return default
        raise ValidationError(f"{field} is required")
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a YYYY-MM-DD string")
    try:
        return date.fromisoformat(value[:10])
    except ValueError as exc:
        raise ValidationError(f"{field} must be in YYYY-MM-DD format") from exc


def parse_pivot(value: Any) -> PivotType:
    try:
        return PivotType(str(value or PivotType.STAFF.value).lower())
    except ValueError as exc:
        raise ValidationError("view must be 'staff' or 'shift'") from exc


def gateway() -> ScheduleGateway:
    config = current_app.config
    if config["ROSTER_BACKEND"] != "remote":
        return DatabaseGateway()
    remote = current_app.extensions.get("rosterx.remote")
    if remote is None:
        remote = RemoteScheduleGateway(
            config["ROSTER_API_URL"],
            token=config.get("ROSTER_API_TOKEN"),
            timeout=float(config.get("ROSTER_API_TIMEOUT", 30)),
        )
        current_app.extensions["rosterx.remote"] = remote
    return remote


def board(view: Optional[str] = None) -> RosterBoard:
    return RosterBoard(
        gateway(),
        pivot=parse_pivot(view),
        week_start=int(current_app.config["WEEK_START"]),
        locks=current_app.extensions["rosterx.locks"],
    )
