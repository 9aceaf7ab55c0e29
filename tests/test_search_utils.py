from types import SimpleNamespace

import pytest

from common.scripts import (
    filter_records,
    get_nested_value,
    is_valid_search_term,
    sanitize_search_input,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("50%", "50\\%"),
        ("a_b", "a\\_b"),
        ("back\\slash", "back\\\\slash"),
        ("\\%", "\\\\\\%"),
        ("plain", "plain"),
        ("", ""),
        (None, ""),
        (42, ""),
    ],
)
def test_sanitize_search_input(raw, expected):
    assert sanitize_search_input(raw) == expected


@pytest.mark.parametrize(
    "term, valid",
    [
        ("ab", True),
        ("  ab  ", True),
        ("a", False),
        ("   ", False),
        ("x" * 100, True),
        ("x" * 101, False),
        (None, False),
    ],
)
def test_is_valid_search_term(term, valid):
    assert is_valid_search_term(term) is valid


def test_get_nested_value_on_mappings_and_objects():
    record = {"patient": SimpleNamespace(full_name="Sara Ali", phone=None)}
    assert get_nested_value(record, "patient.full_name") == "Sara Ali"
    assert get_nested_value(record, "patient.phone") == ""
    assert get_nested_value(record, "doctor.doctor_name") == ""


RECORDS = [
    {"diagnosis": "Flu", "patient": {"full_name": "Sara Ali", "phone": "0501112222"}},
    {"diagnosis": "Migraine", "patient": {"full_name": "Omar Saleh", "phone": "0553334444"}},
    {"diagnosis": "Allergy", "patient": None},
]
FIELDS = ("patient.full_name", "patient.phone", "diagnosis")


def test_filter_records_matches_nested_fields_case_insensitively():
    assert filter_records(RECORDS, FIELDS, "sara") == [RECORDS[0]]
    assert filter_records(RECORDS, FIELDS, "0553") == [RECORDS[1]]
    assert filter_records(RECORDS, FIELDS, "ALLERGY") == [RECORDS[2]]


def test_filter_records_case_sensitive():
    assert filter_records(RECORDS, FIELDS, "flu", case_sensitive=True) == []
    assert filter_records(RECORDS, FIELDS, "Flu", case_sensitive=True) == [RECORDS[0]]


def test_filter_records_short_or_empty_term_keeps_everything():
    assert filter_records(RECORDS, FIELDS, "") == RECORDS
    assert filter_records(RECORDS, FIELDS, "s", min_chars=2) == RECORDS
