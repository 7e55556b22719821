"""Example: use the service layer directly (no Flask).

Controllers stay thin; the attendance rules live in the services.
"""

import importlib

from config import get_settings_module

from clinic_attendance.attendance.model import AttendanceInput
from clinic_attendance.container import build_container
from clinic_attendance.core.exceptions import DomainError


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, jwt_secret=settings.SUPABASE_JWT_SECRET)
    doctors = container.doctor_attendance

    try:
        doctors.create(AttendanceInput(subject_id="dokter_1", shift="09:00-15:00", event_type="check-in"))
    except DomainError as e:
        print(f"{e.kind}: {e}")

    for record in doctors.list()[:5]:
        print(record.date, record.time, record.subject_name, record.event_type.value, record.shift)


if __name__ == "__main__":
    main()
