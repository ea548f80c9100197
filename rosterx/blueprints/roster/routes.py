"""Weekly roster grid, assignment writes, agenda views and export."""

from __future__ import annotations

import io
from datetime import date
from typing import Any, Dict, List

from flask import Blueprint, current_app, jsonify, request, send_file

from ...adapters.report.xlsx_writer import write_grid
from ...domain.models import Assignment, BatchOutcome, BatchRequest, PivotType, Recurrence
from ...domain.week import shift_window, window_for
from ...errors import ValidationError
from ...services import agenda
from ..common import board, gateway, parse_iso_date, parse_pivot

bp = Blueprint("roster", __name__, url_prefix="/api/roster")


def _staff_filter() -> List[str]:
    raw = request.args.get("staff", "")
    return [part for part in (p.strip() for p in raw.split(",")) if part]


def _assignment_json(a: Assignment) -> Dict[str, Any]:
    return {
        "id": a.id,
        "staffId": a.staff_id,
        "shiftId": a.shift_id,
        "workDate": a.work_date.isoformat(),
        "note": a.note,
        "status": a.status,
    }


def _outcome_json(outcome: BatchOutcome) -> Dict[str, Any]:
    return {
        "status": outcome.status,
        "message": outcome.message,
        "createdCount": outcome.created_count,
        "skippedCount": outcome.skipped_count,
        "created": [_assignment_json(a) for a in outcome.created],
        "skipped": [
            {
                "staffId": pair.staff_id,
                "shiftId": pair.shift_id,
                "workDate": pair.work_date.isoformat(),
                "reason": pair.reason,
            }
            for pair in outcome.skipped
        ],
    }


def _as_id_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value else []
    if not isinstance(value, (list, tuple)):
        raise ValidationError("counterpart ids must be a list")
    ids = []
    for item in value:
        if isinstance(item, bool) or not isinstance(item, (str, int)) or item == "":
            raise ValidationError(f"invalid counterpart id: {item!r}")
        ids.append(str(item))
    return ids


def batch_from_payload(payload: Dict[str, Any]) -> BatchRequest:
    """Build a batch from the JSON body; accepts the legacy shiftIds/staffIds keys."""
    pivot = parse_pivot(payload.get("view"))
    row_key = "staffId" if pivot is PivotType.STAFF else "shiftId"
    row_id = payload.get("rowId") or payload.get(row_key)
    if not row_id:
        raise ValidationError(f"rowId (or {row_key}) is required")

    legacy_key = "shiftIds" if pivot is PivotType.STAFF else "staffIds"
    counterpart_ids = _as_id_list(payload.get("counterpartIds", payload.get(legacy_key)))
    work_date = parse_iso_date(payload.get("workDate"), "workDate")

    repeat = None
    if payload.get("isRecurring"):
        try:
            weekdays = frozenset(int(day) for day in payload.get("recurringDays") or [])
        except (TypeError, ValueError) as exc:
            raise ValidationError("recurringDays must be weekday numbers 1-7") from exc
        until = parse_iso_date(payload.get("recurringEndDate"), "recurringEndDate")
        repeat = Recurrence(weekdays=weekdays, until=until)

    return BatchRequest(
        pivot=pivot,
        row_id=str(row_id),
        counterpart_ids=tuple(counterpart_ids),
        work_date=work_date,
        note=payload.get("note") or None,
        recurrence=repeat,
    )


@bp.get("/week")
def week():
    anchor = parse_iso_date(request.args.get("anchor"), "anchor", default=date.today())
    try:
        offset = int(request.args.get("offset", 0))
    except ValueError as exc:
        raise ValidationError("offset must be an integer") from exc
    window = shift_window(window_for(anchor, int(current_app.config["WEEK_START"])), offset)
    start, end = window.iso_range()
    return jsonify({"start": start, "end": end, "days": [day.isoformat() for day in window]})


@bp.get("")
def grid():
    anchor = parse_iso_date(request.args.get("anchor"), "anchor", default=date.today())
    roster = board(request.args.get("view"))
    roster.load(anchor)
    return jsonify(roster.grid(staff_filter=_staff_filter()).to_dict())


@bp.get("/cell")
def cell():
    work_date = parse_iso_date(request.args.get("date"), "date")
    row_id = request.args.get("rowId")
    if not row_id:
        raise ValidationError("rowId is required")
    roster = board(request.args.get("view"))
    roster.load(work_date)
    composition = roster.select_cell(row_id, work_date)
    return jsonify(
        {
            "view": composition.pivot.value,
            "rowId": composition.row_id,
            "workDate": composition.work_date.isoformat(),
            "available": [{"id": entity.id, "label": entity.label} for entity in composition.available],
        }
    )


@bp.post("/assignments")
def create_assignments():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError("Expected a JSON object")
    batch = batch_from_payload(payload)
    roster = board(batch.pivot.value)
    roster.load(batch.work_date)
    outcome = roster.submit(batch)
    return jsonify(_outcome_json(outcome)), (201 if outcome.created else 200)


@bp.delete("/assignments/<assignment_id>")
def delete_assignment(assignment_id: str):
    anchor = parse_iso_date(request.args.get("anchor"), "anchor", default=date.today())
    roster = board(request.args.get("view"))
    roster.load(anchor)
    roster.delete(assignment_id)
    return jsonify({"deleted": assignment_id})


@bp.get("/staff/<staff_id>/agenda")
def staff_agenda(staff_id: str):
    start = parse_iso_date(request.args.get("start"), "start")
    end = parse_iso_date(request.args.get("end"), "end")
    if end < start:
        raise ValidationError("end must not be before start")
    entries = agenda.staff_agenda(gateway(), staff_id, start, end)
    return jsonify({"staffId": staff_id, "entries": [entry.to_dict() for entry in entries]})


@bp.get("/day")
def day():
    target = parse_iso_date(request.args.get("date"), "date", default=date.today())
    entries = agenda.day_roster(gateway(), target)
    return jsonify({"date": target.isoformat(), "entries": [entry.to_dict() for entry in entries]})


@bp.get("/export/xlsx")
def export_xlsx():
    anchor = parse_iso_date(request.args.get("anchor"), "anchor", default=date.today())
    roster = board(request.args.get("view"))
    window = roster.load(anchor)
    stream = io.BytesIO()
    write_grid(stream, roster.grid(staff_filter=_staff_filter()), title=f"Week {window.start.isoformat()}")
    stream.seek(0)
    return send_file(
        stream,
        mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        as_attachment=True,
        download_name=f"roster_{roster.pivot.value}_{window.start.isoformat()}.xlsx",
    )
