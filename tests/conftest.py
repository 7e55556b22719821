from __future__ import annotations

import copy
from typing import Any, Dict, Optional

import pytest

from clinic_attendance.attendance.service import DOCTOR_BOOK, EMPLOYEE_BOOK, AttendanceService
from clinic_attendance.container import build_container
from clinic_attendance.core.exceptions import AuthenticationError, StoreError
from clinic_attendance.directory.kv_directory import KVSubjectDirectory


class InMemoryRecordStore:
    """Dict-backed record store; copies on the way in and out like a real backend."""

    def __init__(self, records: Optional[Dict[str, Dict[str, Any]]] = None):
        self.records: Dict[str, Dict[str, Any]] = dict(records or {})
        self.calls = 0

    def get(self, key):
        self.calls += 1
        value = self.records.get(key)
        return copy.deepcopy(value) if value is not None else None

    def set(self, key, record):
        self.calls += 1
        self.records[key] = copy.deepcopy(record)

    def delete(self, key):
        self.calls += 1
        self.records.pop(key, None)

    def list_by_prefix(self, prefix):
        self.calls += 1
        return [copy.deepcopy(v) for k, v in self.records.items() if k.startswith(prefix)]

    def count(self, prefix: str = "") -> int:
        return sum(1 for k in self.records if k.startswith(prefix))


class BrokenRecordStore(InMemoryRecordStore):
    def list_by_prefix(self, prefix):
        raise StoreError("connection to kv_store lost")


class FakeAuthenticator:
    def __init__(self, tokens: Optional[Dict[str, str]] = None):
        self.tokens = tokens or {"good-token": "admin-1"}

    def authenticate(self, token):
        if token not in self.tokens:
            raise AuthenticationError("Unauthorized")
        return self.tokens[token]


DIRECTORY_RECORDS = {
    "dokter_1": {"id": "dokter_1", "nama": "drg. Sari", "spesialisasi": "Ortodonti"},
    "dokter_2": {"id": "dokter_2", "name": "drg. Budi"},
    "karyawan_1": {"id": "karyawan_1", "nama": "Rina", "posisi": "Perawat"},
    "karyawan_2": {"id": "karyawan_2", "name": "Dewi", "position": "Kasir"},
}


@pytest.fixture
def store():
    return InMemoryRecordStore(DIRECTORY_RECORDS)


@pytest.fixture
def doctor_service(store):
    return AttendanceService(store, KVSubjectDirectory(store, prefix="dokter_"), book=DOCTOR_BOOK)


@pytest.fixture
def employee_service(store):
    return AttendanceService(store, KVSubjectDirectory(store, prefix="karyawan_"), book=EMPLOYEE_BOOK)


@pytest.fixture
def make_app(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")

    def _make(record_store):
        from clinic_attendance.main import create_app

        container = build_container(store=record_store, authenticator=FakeAuthenticator())
        return create_app(container)

    return _make


@pytest.fixture
def client(make_app, store):
    return make_app(store).test_client()


@pytest.fixture
def auth_headers():
    return {"Authorization": "Bearer good-token"}


@pytest.fixture
def empty_store():
    return InMemoryRecordStore()


@pytest.fixture
def broken_store():
    return BrokenRecordStore()
