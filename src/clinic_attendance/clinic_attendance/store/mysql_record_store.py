from __future__ import annotations

import json
from typing import Any, Dict, Optional, Sequence

import mysql.connector

from ..core.constants import KV_TABLE
from ..core.exceptions import StoreError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, escape_like, fetchall, fetchone
from .repository import RecordStore


def _decode(value: Any) -> Dict[str, Any]:
    # JSON columns come back as str or bytes depending on the connector build.
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        return json.loads(value)
    return dict(value)


class MySQLRecordStore(RecordStore):
    def __init__(self, conn_factory: DatabaseConnection, *, table: str = KV_TABLE):
        self._conn_factory = conn_factory
        self._table = table

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(f"SELECT `value` FROM {self._table} WHERE `key`=%s", (key,))
                r = fetchone(cur)
                return _decode(r["value"]) if r else None
        except mysql.connector.Error as e:
            raise StoreError(str(e)) from e

    def set(self, key: str, record: Dict[str, Any]) -> None:
        payload = json.dumps(record, ensure_ascii=False)
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"""
                    INSERT INTO {self._table}(`key`, `value`)
                    VALUES(%s, %s)
                    ON DUPLICATE KEY UPDATE `value`=VALUES(`value`)
                    """,
                    (key, payload),
                )
        except mysql.connector.Error as e:
            raise StoreError(str(e)) from e

    def delete(self, key: str) -> None:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(f"DELETE FROM {self._table} WHERE `key`=%s", (key,))
        except mysql.connector.Error as e:
            raise StoreError(str(e)) from e

    def list_by_prefix(self, prefix: str) -> Sequence[Dict[str, Any]]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"SELECT `value` FROM {self._table} WHERE `key` LIKE %s",
                    (escape_like(prefix) + "%",),
                )
                return [_decode(r["value"]) for r in fetchall(cur)]
        except mysql.connector.Error as e:
            raise StoreError(str(e)) from e
