"""Data access for schedule rows (one row per staff, shift and work date)."""

from __future__ import annotations

import sqlite3
import uuid
from typing import Any, Dict, Iterable, List, Optional, Tuple

from . import db

ScheduleRowPayload = Tuple[str, str, str, Optional[str]]

_COLUMNS = "id, staff_id, shift_id, work_date, note, status"


def list_between(start: str, end: str) -> List[Dict[str, Any]]:
    rows = db.query_all(
        f"""
        SELECT {_COLUMNS}
        FROM schedules
        WHERE work_date BETWEEN ? AND ?
        ORDER BY work_date, rowid
        """,
        (start, end),
    )
    return [dict(row) for row in rows]


def insert_many(rows: Iterable[ScheduleRowPayload]) -> List[Dict[str, Any]]:
    """Insert ``(staff_id, shift_id, work_date, note)`` rows in one transaction.

    Rows colliding with an existing triple are ignored; only the rows that
    were actually written are returned.
    """

    connection = db.get_db()
    created: List[Dict[str, Any]] = []
    try:
        for staff_id, shift_id, work_date, note in rows:
            schedule_id = uuid.uuid4().hex
            cursor = connection.execute(
                """
                INSERT OR IGNORE INTO schedules (id, staff_id, shift_id, work_date, note)
                VALUES (?, ?, ?, ?, ?)
                """,
                (schedule_id, staff_id, shift_id, work_date, note),
            )
            if cursor.rowcount == 1:
                created.append(
                    {
                        "id": schedule_id,
                        "staff_id": staff_id,
                        "shift_id": shift_id,
                        "work_date": work_date,
                        "note": note,
                        "status": "ACTIVE",
                    }
                )
        connection.commit()
    except sqlite3.Error as exc:
        connection.rollback()
        raise db.DatabaseError(str(exc)) from exc
    return created


def delete_schedule(schedule_id: str) -> int:
    return db.execute("DELETE FROM schedules WHERE id = ?", (schedule_id,))
