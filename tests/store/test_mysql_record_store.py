import json

import mysql.connector
import pytest

from clinic_attendance.core.exceptions import StoreError
from clinic_attendance.store.mysql_record_store import MySQLRecordStore


class FakeCursor:
    def __init__(self, rows):
        self.rows = rows
        self.executed = []

    def execute(self, sql, params=None):
        self.executed.append((" ".join(sql.split()), params))

    def fetchone(self):
        return self.rows[0] if self.rows else None

    def fetchall(self):
        return self.rows

    def close(self):
        pass


class FakeConnection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.committed = False
        self.rolled_back = False

    def cursor(self, dictionary=False):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        pass


class FakeConnFactory:
    def __init__(self, rows=None, error=None):
        self.cursor = FakeCursor(rows or [])
        self.conn = FakeConnection(self.cursor)
        self.error = error

    def connect(self):
        if self.error:
            raise self.error
        return self.conn


def test_set_upserts_json():
    factory = FakeConnFactory()
    MySQLRecordStore(factory).set("attendance_1", {"id": "attendance_1", "notes": "café"})

    sql, params = factory.cursor.executed[0]
    assert "ON DUPLICATE KEY UPDATE" in sql
    assert params[0] == "attendance_1"
    assert json.loads(params[1]) == {"id": "attendance_1", "notes": "café"}
    assert factory.conn.committed


def test_get_decodes_str_and_bytes():
    record = {"id": "attendance_1"}
    assert MySQLRecordStore(FakeConnFactory([{"value": json.dumps(record)}])).get("attendance_1") == record
    assert MySQLRecordStore(FakeConnFactory([{"value": json.dumps(record).encode()}])).get("attendance_1") == record
    assert MySQLRecordStore(FakeConnFactory([])).get("attendance_1") is None


def test_list_by_prefix_escapes_like_wildcards():
    factory = FakeConnFactory([{"value": "{\"id\": \"attendance_1\"}"}])

    assert MySQLRecordStore(factory).list_by_prefix("attendance_") == [{"id": "attendance_1"}]
    _, params = factory.cursor.executed[0]
    assert params == ("attendance\\_%",)


def test_connector_errors_become_store_errors():
    store = MySQLRecordStore(FakeConnFactory(error=mysql.connector.errors.InterfaceError("Can't connect")))

    with pytest.raises(StoreError, match="Can't connect"):
        store.list_by_prefix("attendance_")
    with pytest.raises(StoreError):
        store.delete("attendance_1")
