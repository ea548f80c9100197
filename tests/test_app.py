from __future__ import annotations

import io
from pathlib import Path

import pytest
from openpyxl import load_workbook

from rosterx.app import create_app
from rosterx.blueprints.common import board

MONDAY = "2024-06-03"


@pytest.fixture()
def app(tmp_path: Path):
    return create_app({
        "TESTING": True,
        "DATABASE": str(tmp_path / "test.sqlite"),
        "AUTO_INIT_DB": True,
    })


@pytest.fixture()
def client(app):
    with app.test_client() as client:
        yield client


def create(client, **overrides):
    body = {"view": "staff", "rowId": "st-alice", "counterpartIds": ["sh-morning"], "workDate": MONDAY}
    body.update(overrides)
    return client.post("/api/roster/assignments", json=body)


def test_healthz(client):
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.data == b"OK"


def test_week_for_wednesday_anchor(client):
    data = client.get("/api/roster/week?anchor=2024-06-05").get_json()
    assert data["start"] == MONDAY
    assert data["end"] == "2024-06-09"
    assert len(data["days"]) == 7

    following = client.get("/api/roster/week?anchor=2024-06-05&offset=1").get_json()
    assert following["start"] == "2024-06-10"


def test_grid_lists_active_rows_in_order(client):
    data = client.get(f"/api/roster?anchor={MONDAY}").get_json()
    assert data["view"] == "staff"
    assert [row["id"] for row in data["rows"]] == ["st-alice", "st-bob", "st-chi"]
    assert data["rows"][0]["cells"][0]["available"] == ["sh-evening", "sh-morning", "sh-night"]

    by_shift = client.get(f"/api/roster?anchor={MONDAY}&view=shift").get_json()
    assert [row["id"] for row in by_shift["rows"]] == ["sh-evening", "sh-morning", "sh-night"]
    assert by_shift["rows"][2]["detail"] == "22:00 - 06:00"


def test_grid_staff_filter(client):
    data = client.get(f"/api/roster?anchor={MONDAY}&staff=st-bob,st-chi").get_json()
    assert [row["id"] for row in data["rows"]] == ["st-bob", "st-chi"]

    by_shift = client.get(f"/api/roster?anchor={MONDAY}&view=shift&staff=st-bob").get_json()
    assert [row["id"] for row in by_shift["rows"]] == ["sh-evening", "sh-morning", "sh-night"]


def test_boards_share_the_app_lock_registry(app):
    with app.test_request_context("/api/roster"):
        first = board()
        second = board("shift")
    assert first.locks is app.extensions["rosterx.locks"]
    assert second.locks is first.locks


def test_create_then_resubmit_is_noop(client):
    first = create(client, note="first day")
    assert first.status_code == 201
    body = first.get_json()
    assert body["status"] == "created"
    assert body["createdCount"] == 1
    assert body["created"][0]["note"] == "first day"

    second = create(client)
    assert second.status_code == 200
    assert second.get_json()["status"] == "already_assigned"

    grid = client.get(f"/api/roster?anchor={MONDAY}&view=shift").get_json()
    morning = next(row for row in grid["rows"] if row["id"] == "sh-morning")
    assert [a["staffId"] for a in morning["cells"][0]["assignments"]] == ["st-alice"]


def test_recurring_create_by_shift(client):
    response = create(
        client,
        view="shift",
        rowId="sh-night",
        counterpartIds=["st-bob"],
        isRecurring=True,
        recurringDays=[1, 3],
        recurringEndDate="2024-06-17",
    )
    assert response.status_code == 201
    dates = [a["workDate"] for a in response.get_json()["created"]]
    assert dates == ["2024-06-03", "2024-06-05", "2024-06-10", "2024-06-12", "2024-06-17"]


def test_legacy_payload_keys(client):
    response = client.post(
        "/api/roster/assignments",
        json={"staffId": "st-chi", "shiftIds": ["sh-evening", "sh-night"], "workDate": MONDAY},
    )
    assert response.status_code == 201
    assert response.get_json()["createdCount"] == 2


@pytest.mark.parametrize(
    "overrides",
    [
        {"counterpartIds": []},
        {"workDate": "03/06/2024"},
        {"workDate": 20240603},
        {"view": "month"},
        {"rowId": "st-dung"},
        {"counterpartIds": ["sh-weekend"]},
        {"isRecurring": True, "recurringDays": [], "recurringEndDate": "2024-06-30"},
        {"isRecurring": True, "recurringDays": [1], "recurringEndDate": "2024-05-01"},
        {"isRecurring": True, "recurringDays": [1], "recurringEndDate": 20240630},
        {"counterpartIds": {"sh-morning": True}},
        {"counterpartIds": ["sh-morning", 0.5]},
        {"counterpartIds": ["sh-morning", ""]},
        {"view": 3},
    ],
)
def test_invalid_batches_are_rejected(client, overrides):
    response = create(client, **overrides)
    assert response.status_code == 400
    assert response.get_json()["code"] in {
        "validation_error",
        "empty_counterpart_set",
        "invalid_recurrence",
        "invalid_selection",
    }
    grid = client.get(f"/api/roster?anchor={MONDAY}").get_json()
    assert all(not cell["assignments"] for row in grid["rows"] for cell in row["cells"])


def test_cell_selection(client):
    data = client.get(f"/api/roster/cell?date={MONDAY}&rowId=st-alice").get_json()
    assert [item["id"] for item in data["available"]] == ["sh-evening", "sh-morning", "sh-night"]

    create(client, counterpartIds=["sh-evening", "sh-morning", "sh-night"])
    saturated = client.get(f"/api/roster/cell?date={MONDAY}&rowId=st-alice")
    assert saturated.status_code == 400


def test_delete_single_assignment(client):
    created = create(
        client,
        isRecurring=True,
        recurringDays=[1, 2, 3],
        recurringEndDate="2024-06-05",
    ).get_json()["created"]
    victim = created[1]["id"]

    response = client.delete(f"/api/roster/assignments/{victim}?anchor={MONDAY}")
    assert response.status_code == 200
    assert response.get_json() == {"deleted": victim}

    grid = client.get(f"/api/roster?anchor={MONDAY}").get_json()
    alice = grid["rows"][0]
    assert [len(cell["assignments"]) for cell in alice["cells"][:3]] == [1, 0, 1]

    again = client.delete(f"/api/roster/assignments/{victim}?anchor={MONDAY}")
    assert again.status_code == 404


def test_agenda_and_day_views(client):
    create(client, counterpartIds=["sh-night"])
    create(client, rowId="st-bob", counterpartIds=["sh-morning"])

    agenda = client.get(f"/api/roster/staff/st-alice/agenda?start={MONDAY}&end=2024-06-09").get_json()
    assert [e["shiftId"] for e in agenda["entries"]] == ["sh-night"]
    assert agenda["entries"][0]["crossesMidnight"] is True
    assert agenda["entries"][0]["durationMinutes"] == 480

    day = client.get(f"/api/roster/day?date={MONDAY}").get_json()
    assert [e["staffId"] for e in day["entries"]] == ["st-bob", "st-alice"]

    bad = client.get(f"/api/roster/staff/st-alice/agenda?start=2024-06-09&end={MONDAY}")
    assert bad.status_code == 400


def test_export_xlsx(client):
    create(client)
    response = client.get(f"/api/roster/export/xlsx?anchor={MONDAY}")
    assert response.status_code == 200
    assert "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet" in response.headers["Content-Type"]

    ws = load_workbook(io.BytesIO(response.data)).active
    assert ws.cell(row=1, column=1).value == "Staff"
    assert ws.cell(row=2, column=2).value == "Morning"


def test_catalog_staff_lifecycle(client):
    created = client.post("/api/staff", json={"fullName": "Eve Vo", "userName": "eve"})
    assert created.status_code == 201
    new_id = created.get_json()["id"]

    grid = client.get(f"/api/roster?anchor={MONDAY}").get_json()
    assert new_id in [row["id"] for row in grid["rows"]]

    assert client.put("/api/staff/deactivate", json=[new_id]).get_json() == {"updated": 1}
    grid = client.get(f"/api/roster?anchor={MONDAY}").get_json()
    assert new_id not in [row["id"] for row in grid["rows"]]

    listed = client.get("/api/staff").get_json()["staff"]
    assert {"id": new_id, "fullName": "Eve Vo", "userName": "eve", "status": "Inactive"} in listed


def test_catalog_shift_validation(client):
    assert client.post("/api/shifts", json={"shiftName": "Late"}).status_code == 400
    assert client.post("/api/staff", json={"fullName": "X", "status": "retired"}).status_code == 400

    created = client.post("/api/shifts", json={"shiftName": "Late", "startTime": "18:00", "endTime": "02:00"})
    assert created.status_code == 201
    shifts = client.get("/api/shifts").get_json()["shifts"]
    late = next(s for s in shifts if s["shiftName"] == "Late")
    assert late["startTime"] == "18:00:00"
    assert late["crossesMidnight"] is True

    assert client.put("/api/shifts/activate", json={"ids": ["sh-weekend"]}).get_json() == {"updated": 1}


def test_remote_backend_requires_url(tmp_path):
    with pytest.raises(ValueError):
        create_app({"TESTING": True, "DATABASE": str(tmp_path / "x.sqlite"), "ROSTER_BACKEND": "remote"})
