"""
Remote schedule gateway
Talks to the facility administration REST backend.

Every response is wrapped in an envelope:
    {"isSuccess": bool, "data": ..., "code": int, "message": str}
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

import requests

from ..domain.models import ActivityStatus, Assignment, PivotType, Shift, Staff
from ..errors import CollaboratorError
from ..services.gateway import parse_date, parse_time

logger = logging.getLogger(__name__)


class RemoteGatewayError(CollaboratorError):
    """Raised when the remote backend fails or reports ``isSuccess: false``."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RemoteScheduleGateway:
    """
    ScheduleGateway backed by the remote REST API
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 30,
        session: Optional[requests.Session] = None,
    ):
        """
        Args:
            base_url: API root, e.g. https://clinic.example/api
            token: Bearer token forwarded on every call
            timeout: Per-request timeout in seconds
            session: Pre-configured session (tests inject one)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})
        if token:
            self.session.headers.update({"Authorization": f"Bearer {token}"})

    # ------------------------------------------------------------------
    def fetch_assignments(self, start: date, end: date) -> List[Assignment]:
        logger.info(f"Fetching schedules from {start} to {end}")
        data = self._request(
            "GET",
            "/schedule-management/schedules",
            params={"startDate": start.isoformat(), "endDate": end.isoformat()},
        )
        return [assignment_from_json(item) for item in data or []]

    def fetch_shifts(self) -> List[Shift]:
        data = self._request("GET", "/shift-management/shifts")
        return [shift_from_json(item) for item in data or []]

    def fetch_staff(self) -> List[Staff]:
        data = self._request("GET", "/user-management/users/staff")
        return [staff_from_json(item) for item in data or []]

    def create_assignments(
        self,
        pivot: PivotType,
        row_id: str,
        counterpart_ids: Sequence[str],
        dates: Sequence[date],
        note: Optional[str],
    ) -> List[Assignment]:
        """
        One call per date; recurrence is always resolved by the caller.
        """
        if pivot is PivotType.STAFF:
            path = "/schedule-management/schedules/multiple-for-staff"
            body: Dict[str, Any] = {"staffId": row_id, "shiftIds": list(counterpart_ids)}
        else:
            path = "/schedule-management/schedules/multiple-for-shift"
            body = {"shiftId": row_id, "staffIds": list(counterpart_ids)}

        created: List[Assignment] = []
        for day in dates:
            payload = {**body, "workDate": day.isoformat(), "note": note, "isRecurring": False}
            logger.info(f"Creating schedules: {pivot.value} {row_id} x {len(counterpart_ids)} on {day}")
            data = self._request("POST", path, json=payload)
            if isinstance(data, list):
                created.extend(assignment_from_json(item) for item in data)
            else:
                created.extend(self._created_on(pivot, row_id, counterpart_ids, day))
        return created

    def delete_assignment(self, assignment_id: str) -> bool:
        try:
            self._request("DELETE", f"/schedule-management/schedules/{assignment_id}")
        except RemoteGatewayError as exc:
            if exc.status_code == 404:
                return False
            raise
        return True

    # ------------------------------------------------------------------
    def _created_on(
        self, pivot: PivotType, row_id: str, counterpart_ids: Sequence[str], day: date
    ) -> List[Assignment]:
        """Backend did not echo the new rows; read them back."""
        wanted = set(counterpart_ids)
        return [
            a
            for a in self.fetch_assignments(day, day)
            if pivot.row_id_of(a) == row_id and pivot.counterpart_id_of(a) in wanted
        ]

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            logger.error(f"{method} {path} failed with HTTP {status}")
            raise RemoteGatewayError(f"{method} {path} failed: {e}", status_code=status) from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Error calling {method} {path}: {e}")
            raise RemoteGatewayError(f"{method} {path} failed: {e}") from e

        if not response.content:
            return None
        return unwrap(response.json())


def unwrap(payload: Any) -> Any:
    """Return the envelope's ``data``, raising on ``isSuccess: false``."""
    if isinstance(payload, dict) and "isSuccess" in payload:
        if not payload["isSuccess"]:
            raise RemoteGatewayError(payload.get("message") or "Request was not successful")
        return payload.get("data")
    if isinstance(payload, dict) and "data" in payload:
        return payload["data"]
    return payload


def staff_from_json(item: Dict[str, Any]) -> Staff:
    return Staff(
        id=str(item["id"]),
        display_name=item.get("fullName") or item.get("userName") or str(item["id"]),
        login_name=item.get("userName"),
        status=ActivityStatus.parse(item.get("status")),
    )


def shift_from_json(item: Dict[str, Any]) -> Shift:
    return Shift(
        id=str(item["id"]),
        name=item["shiftName"],
        start_time=parse_time(item["startTime"]),
        end_time=parse_time(item["endTime"]),
        status=ActivityStatus.parse(item.get("status")),
    )


def assignment_from_json(item: Dict[str, Any]) -> Assignment:
    return Assignment(
        id=str(item["id"]),
        staff_id=str(item["staffId"]),
        shift_id=str(item["shiftId"]),
        work_date=parse_date(item["workDate"]),
        note=item.get("note"),
        status=item.get("status") or "ACTIVE",
    )
