"""Staff and shift records kept in the local database."""

from __future__ import annotations

from typing import Any, Dict, List

from flask import Blueprint, jsonify, request

from ...dao import shifts_dao, staff_dao
from ...domain.models import ActivityStatus
from ...errors import ValidationError
from ...services.gateway import parse_time, shift_from_row, staff_from_row

bp = Blueprint("catalog", __name__, url_prefix="/api")


def _staff_json(row: Dict[str, Any]) -> Dict[str, Any]:
    staff = staff_from_row(row)
    return {
        "id": staff.id,
        "fullName": staff.display_name,
        "userName": staff.login_name,
        "status": staff.status.value,
    }


def _shift_json(row: Dict[str, Any]) -> Dict[str, Any]:
    shift = shift_from_row(row)
    return {
        "id": shift.id,
        "shiftName": shift.name,
        "startTime": shift.start_time.strftime("%H:%M:%S"),
        "endTime": shift.end_time.strftime("%H:%M:%S"),
        "crossesMidnight": shift.crosses_midnight,
        "status": shift.status.value,
    }


def _id_list() -> List[str]:
    payload = request.get_json(silent=True)
    if isinstance(payload, dict):
        payload = payload.get("ids")
    if not isinstance(payload, list) or not all(isinstance(item, str) for item in payload):
        raise ValidationError("Expected a JSON list of ids")
    return payload


def _status(payload: Dict[str, Any]) -> str:
    try:
        return ActivityStatus.parse(payload.get("status")).value
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc


def _json_object() -> Dict[str, Any]:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError("Expected a JSON object")
    return payload


@bp.get("/staff")
def list_staff():
    return jsonify({"staff": [_staff_json(row) for row in staff_dao.list_staff(include_inactive=True)]})


@bp.post("/staff")
def create_staff():
    payload = _json_object()
    if not payload.get("fullName"):
        raise ValidationError("fullName is required")
    payload["status"] = _status(payload)
    return jsonify({"id": staff_dao.create_staff(payload)}), 201


@bp.put("/staff/activate")
def activate_staff():
    return jsonify({"updated": staff_dao.set_status(_id_list(), ActivityStatus.ACTIVE.value)})


@bp.put("/staff/deactivate")
def deactivate_staff():
    return jsonify({"updated": staff_dao.set_status(_id_list(), ActivityStatus.INACTIVE.value)})


@bp.get("/shifts")
def list_shifts():
    return jsonify({"shifts": [_shift_json(row) for row in shifts_dao.list_shifts(include_inactive=True)]})


@bp.post("/shifts")
def create_shift():
    payload = _json_object()
    if not payload.get("shiftName"):
        raise ValidationError("shiftName is required")
    try:
        start = parse_time(payload["startTime"])
        end = parse_time(payload["endTime"])
    except (KeyError, ValueError) as exc:
        raise ValidationError("startTime and endTime must be HH:MM or HH:MM:SS") from exc
    payload["startTime"] = start.strftime("%H:%M:%S")
    payload["endTime"] = end.strftime("%H:%M:%S")
    payload["status"] = _status(payload)
    return jsonify({"id": shifts_dao.create_shift(payload)}), 201


@bp.put("/shifts/activate")
def activate_shifts():
    return jsonify({"updated": shifts_dao.set_status(_id_list(), ActivityStatus.ACTIVE.value)})


@bp.put("/shifts/deactivate")
def deactivate_shifts():
    return jsonify({"updated": shifts_dao.set_status(_id_list(), ActivityStatus.INACTIVE.value)})
