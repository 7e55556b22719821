"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DOCTOR_ATTENDANCE_PREFIX = "attendance_"
EMPLOYEE_ATTENDANCE_PREFIX = "employee_attendance_"

DOCTOR_DIRECTORY_PREFIX = "dokter_"
EMPLOYEE_DIRECTORY_PREFIX = "karyawan_"

UNKNOWN_SUBJECT_NAME = "Unknown"

KV_TABLE = "kv_store"
ID_SUFFIX_LENGTH = 6
