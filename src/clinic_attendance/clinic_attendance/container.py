from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.service import DOCTOR_BOOK, EMPLOYEE_BOOK, AttendanceService
from .auth.authenticator import Authenticator, JwtAuthenticator
from .core.constants import DOCTOR_DIRECTORY_PREFIX, EMPLOYEE_DIRECTORY_PREFIX
from .database.connection import DatabaseConnection, DBConfig
from .directory.kv_directory import KVSubjectDirectory
from .store.mysql_record_store import MySQLRecordStore
from .store.repository import RecordStore


@dataclass(frozen=True)
class Container:
    store: RecordStore
    authenticator: Authenticator

    doctor_directory: KVSubjectDirectory
    employee_directory: KVSubjectDirectory

    doctor_attendance: AttendanceService
    employee_attendance: AttendanceService


def build_container(
    *,
    db_config: Optional[dict] = None,
    jwt_secret: str = "",
    jwt_audience: Optional[str] = None,
    store: Optional[RecordStore] = None,
    authenticator: Optional[Authenticator] = None,
) -> Container:
    """Wire the object graph once per process.

    ``store`` and ``authenticator`` can be passed in to substitute fakes.
    """
    if store is None:
        if db_config is None:
            raise ValueError("db_config is required when no store is given")
        store = MySQLRecordStore(DatabaseConnection.get_instance(DBConfig.from_dict(db_config)))

    if authenticator is None:
        authenticator = JwtAuthenticator(jwt_secret, audience=jwt_audience)

    doctor_directory = KVSubjectDirectory(store, prefix=DOCTOR_DIRECTORY_PREFIX)
    employee_directory = KVSubjectDirectory(store, prefix=EMPLOYEE_DIRECTORY_PREFIX)

    return Container(
        store=store,
        authenticator=authenticator,
        doctor_directory=doctor_directory,
        employee_directory=employee_directory,
        doctor_attendance=AttendanceService(store, doctor_directory, book=DOCTOR_BOOK),
        employee_attendance=AttendanceService(store, employee_directory, book=EMPLOYEE_BOOK),
    )
