from datetime import date

from leave_portal.schemas.leave import LeaveRecord
from leave_portal.services.search_filter import (
    APPROVAL_FIELDS,
    MY_LEAVE_FIELDS,
    PERSON_FIELDS,
    format_display_date,
    search_filter,
)


def _leave(leave_id, **fields):
    data = {
        "leaveId": leave_id,
        "fromDate": "2024-01-10",
        "toDate": "2024-01-12",
        "subject": "Flu",
        "reason": "Sick leave",
        "status": "PENDING",
        "reportedToName": "Mr. Rao",
    }
    data.update(fields)
    return LeaveRecord.model_validate(data)


LEAVES = [
    _leave(1),
    _leave(2, subject="Wedding", reason="Sister's wedding", status="APPROVED", fromDate="2024-02-01", toDate="2024-02-03"),
    _leave(3, subject="Hackathon", reason="Inter-college event", status="REJECTED", reportedToName="Ms. Iyer"),
]


def test_blank_query_returns_everything():
    assert search_filter(LEAVES, "", MY_LEAVE_FIELDS) == LEAVES
    assert search_filter(LEAVES, None, MY_LEAVE_FIELDS) == LEAVES
    assert search_filter(LEAVES, "   ", MY_LEAVE_FIELDS) == LEAVES


def test_match_is_case_insensitive_substring():
    result = search_filter(LEAVES, "WEDD", MY_LEAVE_FIELDS)
    assert [l.leave_id for l in result] == ["2"]


def test_result_is_ordered_subset():
    result = search_filter(LEAVES, "e", MY_LEAVE_FIELDS)
    ids = [l.leave_id for l in result]
    assert ids == sorted(ids)
    assert all(l in LEAVES for l in result)


def test_matches_status_and_reported_to():
    assert [l.leave_id for l in search_filter(LEAVES, "rejected", MY_LEAVE_FIELDS)] == ["3"]
    assert [l.leave_id for l in search_filter(LEAVES, "iyer", MY_LEAVE_FIELDS)] == ["3"]


def test_matches_display_formatted_dates():
    assert format_display_date(date(2024, 1, 10)) == "Jan 10, 2024"
    assert [l.leave_id for l in search_filter(LEAVES, "feb 01", MY_LEAVE_FIELDS)] == ["2"]


def test_missing_fields_never_match():
    leave = _leave(9, subject=None, reason=None)
    assert search_filter([leave], "flu", APPROVAL_FIELDS) == []


def test_plain_dict_records():
    people = [
        {"name": "Asha Patel", "email": "asha@college.edu"},
        {"name": "Ben Ong", "email": "ben@college.edu"},
    ]
    assert search_filter(people, "BEN@", PERSON_FIELDS) == [people[1]]
