"""Data access helpers for staff members."""

from __future__ import annotations

import uuid
from typing import Any, Dict, Iterable, List

from . import db


def list_staff(include_inactive: bool = True) -> List[Dict[str, Any]]:
    rows = db.query_all(
        "SELECT id, full_name, user_name, status FROM staff"
        + ("" if include_inactive else " WHERE status = 'Active'")
        + " ORDER BY full_name COLLATE NOCASE, id"
    )
    return [dict(row) for row in rows]


def create_staff(payload: Dict[str, Any]) -> str:
    staff_id = payload.get("id") or f"st-{uuid.uuid4().hex[:12]}"
    db.execute(
        "INSERT INTO staff(id, full_name, user_name, status) VALUES (?, ?, ?, ?)",
        (
            staff_id,
            payload["fullName"],
            payload.get("userName"),
            payload.get("status", "Active"),
        ),
    )
    return staff_id


def set_status(staff_ids: Iterable[str], status: str) -> int:
    ids = list(staff_ids)
    if not ids:
        return 0
    placeholders = ", ".join("?" for _ in ids)
    return db.execute(f"UPDATE staff SET status = ? WHERE id IN ({placeholders})", [status, *ids])
