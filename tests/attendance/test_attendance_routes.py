from __future__ import annotations

import logging

CHECK_IN = {"doctorId": "dokter_1", "shift": "09:00-15:00", "type": "check-in", "date": "2024-12-27", "time": "09:00"}
CHECK_OUT = dict(CHECK_IN, type="check-out", time="15:00")


def test_requests_without_valid_token_are_rejected_before_store_access(make_app, empty_store):
    store = empty_store
    client = make_app(store).test_client()

    missing = client.get("/attendance")
    wrong = client.post("/attendance", json=CHECK_IN, headers={"Authorization": "Bearer forged"})

    assert missing.status_code == 401
    assert wrong.status_code == 401
    assert wrong.get_json() == {"success": False, "error": "Unauthorized", "kind": "unauthorized"}
    assert store.calls == 0


def test_health_needs_no_token(client):
    assert client.get("/health").get_json() == {"success": True}


def test_create_duplicate_and_list_flow(client, auth_headers):
    created = client.post("/attendance", json=CHECK_IN, headers=auth_headers)
    assert created.status_code == 201
    body = created.get_json()
    assert body["success"] is True
    assert body["attendance"]["subjectName"] == "drg. Sari"
    assert body["attendance"]["createdBy"] == "admin-1"

    dup = client.post("/attendance", json=CHECK_IN, headers=auth_headers)
    assert dup.status_code == 409
    dup_body = dup.get_json()
    assert dup_body["success"] is False
    assert dup_body["duplicate"] is True
    assert dup_body["kind"] == "duplicate"
    assert dup_body["existingRecord"] == {
        "date": "2024-12-27",
        "time": "09:00",
        "eventType": "check-in",
        "shift": "09:00-15:00",
        "subjectName": "drg. Sari",
    }

    assert client.post("/attendance", json=CHECK_OUT, headers=auth_headers).status_code == 201

    listed = client.get("/attendance", headers=auth_headers).get_json()
    assert listed["success"] is True
    assert [r["eventType"] for r in listed["attendance"]] == ["check-out", "check-in"]

    filtered = client.get("/attendance?type=check-in", headers=auth_headers).get_json()
    assert len(filtered["attendance"]) == 1


def test_check_out_without_check_in_is_400(client, auth_headers, store):
    resp = client.post("/attendance", json=CHECK_OUT, headers=auth_headers)

    assert resp.status_code == 400
    assert resp.get_json()["kind"] == "missing-check-in"
    assert store.count("attendance_") == 0


def test_missing_fields_and_bad_body_are_400(client, auth_headers):
    resp = client.post("/attendance", json={"doctorId": "dokter_1"}, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.get_json()["kind"] == "validation"

    resp = client.post("/attendance", data="not json", headers=auth_headers)
    assert resp.status_code == 400


def test_update_get_and_delete(client, auth_headers):
    record_id = client.post("/attendance", json=CHECK_IN, headers=auth_headers).get_json()["attendance"]["id"]

    updated = client.put(f"/attendance/{record_id}", json={"notes": "late bus"}, headers=auth_headers)
    assert updated.status_code == 200
    assert updated.get_json()["attendance"]["notes"] == "late bus"

    fetched = client.get(f"/attendance/{record_id}", headers=auth_headers)
    assert fetched.get_json()["attendance"]["notes"] == "late bus"

    assert client.delete(f"/attendance/{record_id}", headers=auth_headers).get_json() == {
        "success": True,
        "message": "Attendance deleted",
    }
    assert client.get(f"/attendance/{record_id}", headers=auth_headers).status_code == 404
    assert client.delete(f"/attendance/{record_id}", headers=auth_headers).status_code == 404
    assert client.put(f"/attendance/{record_id}", json={"notes": "x"}, headers=auth_headers).status_code == 404


def test_update_colliding_with_other_record_is_409(client, auth_headers):
    client.post("/attendance", json=CHECK_IN, headers=auth_headers)
    other = client.post("/attendance", json=dict(CHECK_IN, date="2024-12-28"), headers=auth_headers).get_json()

    resp = client.put(f"/attendance/{other['attendance']['id']}", json={"date": "2024-12-27"}, headers=auth_headers)

    assert resp.status_code == 409
    assert resp.get_json()["duplicate"] is True


def test_employee_attendance_routes(client, auth_headers):
    payload = {"employeeId": "karyawan_1", "type": "check-in", "date": "2024-12-27", "time": "08:00"}

    created = client.post("/employee-attendance", json=payload, headers=auth_headers)
    assert created.status_code == 201
    assert created.get_json()["attendance"]["position"] == "Perawat"

    assert client.post("/employee-attendance", json=payload, headers=auth_headers).status_code == 409

    listed = client.get("/employee-attendance?employeeId=karyawan_1", headers=auth_headers).get_json()
    assert len(listed["attendance"]) == 1
    assert client.get("/attendance", headers=auth_headers).get_json()["attendance"] == []


def test_store_failure_is_500_with_raw_message(make_app, auth_headers, broken_store):
    client = make_app(broken_store).test_client()

    resp = client.get("/attendance", headers=auth_headers)

    assert resp.status_code == 500
    assert resp.get_json() == {"success": False, "error": "connection to kv_store lost", "kind": "store-failure"}


def test_unexpected_error_is_500(make_app, auth_headers, monkeypatch, empty_store):
    store = empty_store

    def boom(key, record):
        raise RuntimeError("disk full")

    monkeypatch.setattr(store, "set", boom)
    client = make_app(store).test_client()

    resp = client.post("/attendance", json=CHECK_IN, headers=auth_headers)

    assert resp.status_code == 500
    assert resp.get_json()["error"] == "Failed to record attendance: disk full"


def test_accepted_and_rejected_writes_are_logged(client, auth_headers, caplog):
    with caplog.at_level(logging.INFO, logger="clinic_attendance"):
        client.post("/attendance", json=CHECK_IN, headers=auth_headers)
        client.post("/attendance", json=CHECK_IN, headers=auth_headers)

    service_logs = [r for r in caplog.records if r.name == "clinic_attendance.attendance.service"]
    assert [r.levelno for r in service_logs] == [logging.INFO, logging.WARNING]
    assert "Rejected duplicate check-in for dokter_1" in service_logs[1].getMessage()
