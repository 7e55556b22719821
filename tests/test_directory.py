from clinic_attendance.directory.kv_directory import KVSubjectDirectory


def test_lookup_reads_both_spellings(store):
    doctors = KVSubjectDirectory(store, prefix="dokter_")
    employees = KVSubjectDirectory(store, prefix="karyawan_")

    assert doctors.lookup("dokter_1").name == "drg. Sari"
    assert doctors.lookup("dokter_2").name == "drg. Budi"
    assert employees.lookup("karyawan_1").position == "Perawat"


def test_lookup_misses(store):
    store.set("dokter_3", {"id": "dokter_3"})
    doctors = KVSubjectDirectory(store, prefix="dokter_")

    assert doctors.lookup("dokter_404") is None
    assert doctors.lookup("dokter_3") is None
    assert doctors.lookup("karyawan_1") is None
