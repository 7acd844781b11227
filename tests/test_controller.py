from __future__ import annotations

import pytest

from src.office_attendance.office_attendance.attendance.status import StatusPolicy
from src.office_attendance.office_attendance.container import wire
from src.office_attendance.office_attendance.main import create_app
from src.office_attendance.office_attendance.settings.provider import OfficeLocationProvider

ADMIN, MANAGER, WORKER, OUTSIDER = 1, 2, 3, 5


@pytest.fixture
def client(monkeypatch, attendance_repo, users, changelog, office, office_repo):
    monkeypatch.setenv("APP_ENV", "testing")
    container = wire(
        attendance_repo=attendance_repo,
        users_repo=users,
        office_location=OfficeLocationProvider(office, office_repo),
        status_policy=StatusPolicy(),
        changelog_repo=changelog,
    )
    app = create_app(container=container)
    return app.test_client()


def _login(client, user_id: int, role: str) -> None:
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["role"] = role


def test_requires_login(client):
    resp = client.post("/api/attendance/check-in", json={"latitude": 47.916646, "longitude": 106.908877})
    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_check_in_then_latest(client):
    _login(client, WORKER, "employee")

    resp = client.post("/api/attendance/check-in", json={"latitude": 47.916646, "longitude": 106.908877})
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["requiresApproval"] is False
    assert body["record"]["approvalStatus"] == "none"

    again = client.post("/api/attendance/check-in", json={"latitude": 47.916646, "longitude": 106.908877})
    assert again.status_code == 409

    latest = client.get("/api/attendance/latest").get_json()
    assert latest["id"] == body["attendanceId"]
    assert latest["checkOut"] is None


def test_out_of_range_reports_distance(client):
    _login(client, WORKER, "employee")

    resp = client.post("/api/attendance/check-in", json={"latitude": 47.916646 + 0.05, "longitude": 106.908877})

    assert resp.status_code == 400
    body = resp.get_json()
    assert body["allowedRadius"] == 3000
    assert body["distance"] > 3000


def test_invalid_coordinates(client):
    _login(client, WORKER, "employee")
    resp = client.post("/api/attendance/check-in", json={"latitude": "north", "longitude": 106.9})
    assert resp.status_code == 400


def test_remote_check_in_and_manager_approval(client):
    _login(client, WORKER, "employee")
    resp = client.post(
        "/api/attendance/check-in",
        json={"latitude": 48.5, "longitude": 107.5, "isRemote": True, "notes": "home"},
    )
    assert resp.status_code == 201
    attendance_id = resp.get_json()["attendanceId"]
    assert len(client.get("/api/attendance/my-pending").get_json()) == 1

    forbidden = client.put(f"/api/attendance/approve/{attendance_id}", json={"action": "approved"})
    assert forbidden.status_code == 403

    _login(client, MANAGER, "manager")
    pending = client.get("/api/attendance/pending-approvals").get_json()
    assert [r["id"] for r in pending] == [attendance_id]

    ok = client.put(f"/api/attendance/approve/{attendance_id}", json={"action": "approved", "notes": "fine"})
    assert ok.status_code == 200
    assert ok.get_json()["record"]["approvalStatus"] == "approved"

    twice = client.put(f"/api/attendance/approve/{attendance_id}", json={"action": "rejected"})
    assert twice.status_code == 409

    bad = client.put(f"/api/attendance/approve/{attendance_id}", json={"action": "maybe"})
    assert bad.status_code == 400

    missing = client.put("/api/attendance/approve/999", json={"action": "approved"})
    assert missing.status_code == 404


def test_manager_cannot_view_outside_scope(client):
    _login(client, MANAGER, "manager")
    assert client.get(f"/api/attendance/user/{WORKER}").status_code == 200
    assert client.get(f"/api/attendance/user/{OUTSIDER}").status_code == 403


def test_office_location_admin_only(client, office_repo):
    _login(client, MANAGER, "manager")
    assert client.get("/api/attendance/office-location").get_json()["allowedRadius"] == 3000
    denied = client.put(
        "/api/attendance/office-location", json={"latitude": 47.9, "longitude": 106.9, "allowedRadius": 100}
    )
    assert denied.status_code == 403

    _login(client, ADMIN, "admin")
    too_big = client.put(
        "/api/attendance/office-location", json={"latitude": 47.9, "longitude": 106.9, "allowedRadius": 9000}
    )
    assert too_big.status_code == 400

    ok = client.put(
        "/api/attendance/office-location", json={"latitude": 47.9, "longitude": 106.9, "allowedRadius": 100}
    )
    assert ok.status_code == 200
    assert office_repo.stored.allowed_radius_m == 100
    assert client.get("/api/attendance/office-location").get_json()["allowedRadius"] == 100


def test_office_distance_check(client):
    _login(client, WORKER, "employee")
    body = client.get("/api/attendance/office-location/check?latitude=47.916646&longitude=106.908877").get_json()
    assert body == {"distance": 0, "isWithin": True, "allowedRadius": 3000}


def test_report_requires_dates(client):
    _login(client, MANAGER, "manager")
    assert client.get("/api/attendance/report").status_code == 400

    resp = client.get("/api/attendance/report?startDate=2026-03-02&endDate=2026-03-06")
    assert resp.status_code == 200
    assert {s["user_id"] for s in resp.get_json()["summary"]} == {3, 4}


@pytest.mark.parametrize("attendance_id", ["abc", 1.5, True, [1]])
def test_check_out_rejects_malformed_attendance_id(client, attendance_id):
    _login(client, WORKER, "employee")
    client.post("/api/attendance/check-in", json={"latitude": 47.916646, "longitude": 106.908877})

    resp = client.post(
        "/api/attendance/check-out",
        json={"attendanceId": attendance_id, "latitude": 47.916646, "longitude": 106.908877},
    )

    assert resp.status_code == 400
    assert resp.get_json() == {"success": False, "message": "attendanceId must be an integer"}
    assert client.get("/api/attendance/latest").get_json()["checkOut"] is None


def test_check_out_of_unknown_record_is_not_found(client):
    _login(client, WORKER, "employee")
    resp = client.post(
        "/api/attendance/check-out",
        json={"attendanceId": "999", "latitude": 47.916646, "longitude": 106.908877},
    )
    assert resp.status_code == 404
