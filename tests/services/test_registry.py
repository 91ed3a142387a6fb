import pytest

from asamblea.services import attendance, registry, weights
from asamblea.services.errors import ErrorKind, VotingError


def test_register_voter_is_an_idempotent_upsert(db_session):
    voter, created = registry.register_voter("123", "a101")
    assert created is True
    assert voter.apartment == "A101"

    voter, created = registry.register_voter("123", "A101")
    assert created is False
    assert registry.count_voters() == 1

    voter, _ = registry.register_voter("123", "B202")
    assert registry.lookup_voter("123").apartment == "B202"


def test_lookup_unknown_voter_raises_not_found(db_session):
    assert registry.get_voter("nope") is None

    with pytest.raises(VotingError) as excinfo:
        registry.lookup_voter("nope")

    assert excinfo.value.kind is ErrorKind.NOT_FOUND


def test_register_voter_requires_id_and_apartment(db_session):
    with pytest.raises(VotingError):
        registry.register_voter("  ", "A101")


def test_attendance_requires_registered_voter_with_matching_apartment(db_session):
    registry.register_voter("123", "A101")

    with pytest.raises(VotingError) as excinfo:
        attendance.register_attendance("123", "A102")
    assert excinfo.value.kind is ErrorKind.VOTER_NOT_REGISTERED

    with pytest.raises(VotingError) as excinfo:
        attendance.register_attendance("999", "A101")
    assert excinfo.value.kind is ErrorKind.VOTER_NOT_REGISTERED

    assert attendance.get_status("123") is None


def test_register_attendance_creates_enabled_record_once(db_session):
    registry.register_voter("123", "A101")

    record, created = attendance.register_attendance("123", "A101")
    assert created is True
    assert record.enabled is True
    assert record.registered_at is not None

    attendance.set_enabled("123", False)
    record, created = attendance.register_attendance("123", "A101")
    assert created is False
    assert record.enabled is False


def test_toggling_never_creates_a_record(db_session):
    registry.register_voter("123", "A101")

    with pytest.raises(VotingError) as excinfo:
        attendance.set_enabled("123", True)

    assert excinfo.value.kind is ErrorKind.NOT_FOUND
    assert attendance.get_status("123") is None


def test_attendance_stats(db_session):
    for national_id, apartment in (("1", "A1"), ("2", "A2"), ("3", "A3")):
        registry.register_voter(national_id, apartment)
        attendance.register_attendance(national_id, apartment)
    attendance.set_enabled("2", False)

    assert attendance.attendance_stats() == {"total_registered": 3, "total_enabled": 2}
    assert len(attendance.list_attendance()) == 3


CSV_WITH_HEADER = """cedula,apartamento,peso
123456789,A101,1.5
987654321,a102,2.0
111,,1.0
222,A104,abc
333,A105,-1
444,A106
"""


def test_import_voters_csv_registers_voters_and_weights(db_session):
    report = registry.import_voters_csv(CSV_WITH_HEADER)

    assert report.voters == 2
    assert report.skipped_rows == [4, 5, 6, 7]
    assert registry.lookup_voter("987654321").apartment == "A102"
    assert weights.weight_table() == {"A101": 1.5, "A102": 2.0}


def test_import_without_header_keeps_first_row(db_session):
    report = registry.import_voters_csv("123,A101,1.5\n456,A102,1.0\n")

    assert report.voters == 2
    assert registry.get_voter("123") is not None


def test_header_detection_is_case_insensitive(db_session):
    report = registry.import_voters_csv("\ufeffCEDULA,Apartamento,Peso\n123,A101,1.5\n")

    assert report.voters == 1
    assert report.skipped_rows == []


def test_import_replaces_the_weight_table(db_session):
    registry.import_voters_csv("1,A101,1.5\n2,A102,2.0\n")
    registry.import_voters_csv("3,A103,3.0\n")

    assert weights.weight_table() == {"A103": 3.0}
    assert weights.resolve_weight("A101") == weights.DEFAULT_WEIGHT
    assert registry.count_voters() == 3


def test_import_keeps_attendance_apartment(db_session):
    registry.register_voter("1", "A101", attendance_apartment="A199")

    registry.import_voters_csv("1,A101,1.5\n")

    assert registry.lookup_voter("1").attendance_apartment == "A199"


def test_import_without_valid_rows_changes_nothing(db_session):
    weights.replace_weight_table({"A101": 1.5})

    with pytest.raises(VotingError) as excinfo:
        registry.import_voters_csv("cedula,apartamento,peso\n,,\nx,A1,0\n")

    assert excinfo.value.kind is ErrorKind.INVALID_IMPORT
    assert weights.weight_table() == {"A101": 1.5}
    assert registry.count_voters() == 0


def test_template_matches_import_schema(db_session):
    template = registry.voter_import_template()

    assert template.splitlines()[0] == "cedula,apartamento,peso"
    assert registry.parse_voter_csv(template)[0].weights == {"A101": 1.5, "A102": 2.0}


def test_header_after_leading_blank_lines_is_not_a_skipped_row(db_session):
    report = registry.import_voters_csv("\n\ncedula,apartamento,peso\n123,A101,1.5\n")

    assert report.voters == 1
    assert report.skipped_rows == []
