"""Data access helpers for shift definitions."""

from __future__ import annotations

import uuid
from typing import Any, Dict, Iterable, List

from . import db


def list_shifts(include_inactive: bool = True) -> List[Dict[str, Any]]:
    rows = db.query_all(
        "SELECT id, shift_name, start_time, end_time, status FROM shifts"
        + ("" if include_inactive else " WHERE status = 'Active'")
        + " ORDER BY shift_name COLLATE NOCASE, id"
    )
    return [dict(row) for row in rows]


def create_shift(payload: Dict[str, Any]) -> str:
    shift_id = payload.get("id") or f"sh-{uuid.uuid4().hex[:12]}"
    db.execute(
        "INSERT INTO shifts(id, shift_name, start_time, end_time, status) VALUES (?, ?, ?, ?, ?)",
        (
            shift_id,
            payload["shiftName"],
            payload["startTime"],
            payload["endTime"],
            payload.get("status", "Active"),
        ),
    )
    return shift_id


def set_status(shift_ids: Iterable[str], status: str) -> int:
    ids = list(shift_ids)
    if not ids:
        return 0
    placeholders = ", ".join("?" for _ in ids)
    return db.execute(f"UPDATE shifts SET status = ? WHERE id IN ({placeholders})", [status, *ids])
