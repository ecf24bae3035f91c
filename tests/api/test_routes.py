from __future__ import annotations

import pytest

from swipe_attendance.core.constants import MAX_ROSTER_SIZE
from swipe_attendance.main import create_app


@pytest.fixture
def client(container):
    app = create_app(container, settings_module="config.testing")
    return app.test_client()


@pytest.fixture
def logged_in(client, teacher):
    resp = client.post("/api/auth/login", json={"email": "Rivera@example.com", "password": "secret1"})
    assert resp.status_code == 200
    return client


def _add(client, name, roll):
    return client.post(
        "/api/students",
        json={"name": name, "rollNumber": roll, "class": "9", "section": "B", "age": 14, "gender": "Male"},
    )


def test_health_needs_no_login(client):
    resp = client.get("/api/health")

    assert resp.status_code == 200
    assert resp.get_json()["status"] == "OK"


def test_api_requires_login(client):
    assert client.get("/api/students").status_code == 401
    assert client.get("/api/attendance").status_code == 401


def test_wrong_password_is_401(client, teacher):
    resp = client.post("/api/auth/login", json={"email": "rivera@example.com", "password": "nope"})

    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_register_then_me(client):
    resp = client.post(
        "/api/auth/register",
        json={"name": "Kim", "email": "KIM@example.com", "password": "123456", "subjects": ["Art", "Art"]},
    )
    assert resp.status_code == 201

    me = client.get("/api/auth/me").get_json()["user"]
    assert me["email"] == "kim@example.com"
    assert me["subjects"] == ["Art"]


def test_student_crud_and_duplicate_roll(logged_in):
    created = _add(logged_in, "Ana", "R-1")
    assert created.status_code == 201
    student_id = created.get_json()["id"]

    dup = _add(logged_in, "Other", "R-1")
    assert dup.status_code == 409

    bad = logged_in.post("/api/students", json={"name": "X", "rollNumber": "R-2"})
    assert bad.status_code == 400

    updated = logged_in.put(f"/api/students/{student_id}", json={"section": "D"})
    assert updated.get_json()["section"] == "D"

    assert logged_in.delete(f"/api/students/{student_id}").status_code == 200
    assert logged_in.delete(f"/api/students/{student_id}").status_code == 404


def test_swipe_walk_end_to_end(logged_in):
    for name, roll in (("A", "R-1"), ("B", "R-2"), ("C", "R-3")):
        _add(logged_in, name, roll)

    started = logged_in.post("/api/sessions", json={"subject": "Math"})
    assert started.status_code == 201
    assert started.get_json()["session"]["currentStudent"]["name"] == "A"

    logged_in.post("/api/sessions/current/decisions", json={"status": "present"})
    logged_in.post("/api/sessions/current/decisions", json={"status": "absent"})
    last = logged_in.post("/api/sessions/current/decisions", json={"status": "present"}).get_json()

    assert last["session"]["complete"] is True
    assert last["record"]["totalStudents"] == 3
    assert last["record"]["presentCount"] == 2
    assert last["record"]["absentCount"] == 1
    assert last["record"]["attendanceRate"] == 67

    extra = logged_in.post("/api/sessions/current/decisions", json={"status": "present"})
    assert extra.status_code == 409
    assert extra.get_json()["session"]["position"] == 3

    history = logged_in.get("/api/attendance?subject=Math&page=1&limit=10").get_json()
    assert history["pagination"] == {"total": 1, "page": 1, "limit": 10, "totalPages": 1}
    assert [s["status"] for s in history["attendance"][0]["students"]] == ["present", "absent", "present"]


def test_retake_and_abandon(logged_in):
    _add(logged_in, "A", "R-1")
    _add(logged_in, "B", "R-2")
    logged_in.post("/api/sessions", json={"subject": "Math"})
    logged_in.post("/api/sessions/current/decisions", json={"status": "present"})

    retaken = logged_in.post("/api/sessions/current/retake").get_json()["session"]
    assert retaken["position"] == 0
    assert retaken["decisions"] == []

    assert logged_in.delete("/api/sessions/current").status_code == 200
    assert logged_in.get("/api/sessions/current").status_code == 404
    assert logged_in.get("/api/attendance").get_json()["pagination"]["total"] == 0


def test_bad_status_and_foreign_subject(logged_in):
    _add(logged_in, "A", "R-1")

    assert logged_in.post("/api/sessions", json={"subject": "History"}).status_code == 403

    logged_in.post("/api/sessions", json={"subject": "Math"})
    resp = logged_in.post("/api/sessions/current/decisions", json={"status": "late"})
    assert resp.status_code == 400
    assert logged_in.get("/api/sessions/current").get_json()["session"]["position"] == 0


def test_record_attendance_and_dashboard(logged_in):
    a = _add(logged_in, "A", "R-1").get_json()["id"]
    b = _add(logged_in, "B", "R-2").get_json()["id"]

    resp = logged_in.post(
        "/api/attendance",
        json={"subject": "Math", "students": [{"studentId": a, "status": "present"}, {"studentId": b, "status": "absent"}]},
    )
    assert resp.status_code == 201
    assert resp.get_json()["attendanceRate"] == 50

    assert logged_in.post("/api/attendance", json={"subject": "Math"}).status_code == 400

    stats = logged_in.get("/api/dashboard/stats").get_json()
    assert stats["totalStudents"] == 2
    assert stats["totalAttendanceRecords"] == 1
    assert stats["averageAttendanceRate"] == 50
    assert len(stats["recentAttendance"]) == 1


def test_history_query_validation(logged_in):
    assert logged_in.get("/api/attendance?date=10-03-2025").status_code == 400
    assert logged_in.get("/api/attendance?page=0").status_code == 400

    beyond = logged_in.get("/api/attendance?page=5&limit=10").get_json()
    assert beyond["attendance"] == []
    assert beyond["pagination"]["totalPages"] == 0


def test_unknown_route_is_json_404(client):
    resp = client.get("/api/nope")

    assert resp.status_code == 404
    assert resp.get_json()["message"] == "Route not found"


def test_quick_login_creates_then_reuses_the_account(client):
    resp = client.post("/api/auth/quick-login", json={"name": "Sam Park", "subject": "Art"})
    assert resp.status_code == 200
    user = resp.get_json()["user"]
    assert user["email"] == "sampark@temp.com"
    assert user["subjects"] == ["Art"]

    client.post("/api/auth/logout")
    again = client.post("/api/auth/quick-login", json={"name": "Sam Park", "subject": "Music"}).get_json()["user"]
    assert again["id"] == user["id"]
    assert again["subjects"] == ["Art", "Music"]

    assert client.get("/api/auth/me").get_json()["user"]["subjects"] == ["Art", "Music"]
    assert client.post("/api/sessions", json={"subject": "Music"}).status_code == 201


def test_quick_login_needs_name_and_subject(client):
    assert client.post("/api/auth/quick-login", json={"name": "Sam"}).status_code == 400
    assert client.post("/api/auth/quick-login", json={"subject": "Art"}).status_code == 400
    assert client.get("/api/auth/me").status_code == 401


def test_non_text_photo_and_fractional_age_are_400(logged_in):
    fields = {"name": "Ana", "rollNumber": "R-1", "class": "9", "section": "B", "age": 14, "gender": "Male"}

    assert logged_in.post("/api/students", json={**fields, "photo": 5}).status_code == 400
    assert logged_in.post("/api/students", json={**fields, "age": 14.9}).status_code == 400
    assert logged_in.get("/api/students").get_json() == []


def test_full_roster_walk_fits_in_the_session_cookie(logged_in, add_student):
    for _ in range(MAX_ROSTER_SIZE):
        add_student()

    sizes = [len(h) for h in logged_in.post("/api/sessions", json={"subject": "Math"}).headers.getlist("Set-Cookie")]
    for i in range(MAX_ROSTER_SIZE):
        resp = logged_in.post("/api/sessions/current/decisions", json={"status": "present" if i % 3 else "absent"})
        assert resp.status_code == 200
        sizes.extend(len(h) for h in resp.headers.getlist("Set-Cookie"))

    assert max(sizes) < 4000
    assert resp.get_json()["record"]["totalStudents"] == MAX_ROSTER_SIZE


def test_replayed_session_cookie_does_not_save_twice(logged_in):
    _add(logged_in, "A", "R-1")
    _add(logged_in, "B", "R-2")
    logged_in.post("/api/sessions", json={"subject": "Math"})
    logged_in.post("/api/sessions/current/decisions", json={"status": "present"})
    before_last = logged_in.get_cookie("session").value

    done = logged_in.post("/api/sessions/current/decisions", json={"status": "absent"})
    assert done.get_json()["record"]["attendanceRate"] == 50

    logged_in.set_cookie("session", before_last)
    replay = logged_in.post("/api/sessions/current/decisions", json={"status": "present"})

    assert replay.status_code == 409
    assert logged_in.get("/api/attendance").get_json()["pagination"]["total"] == 1
