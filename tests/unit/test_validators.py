from datetime import date

from app.nlu.schemas import ExtractionResult
from app.nlu.validators import is_valid_mobile, validate

TODAY = date(2025, 1, 10)


def _record(**overrides):
    fields = {
        "client_name": "Ritesh Verma",
        "mobile_number": "9876543210",
        "meeting_date": "11-01-2025",
        "start_time": "5:00 PM",
        "end_time": "6:00 PM",
    }
    fields.update(overrides)
    return ExtractionResult(**fields)


def test_is_valid_mobile():
    assert is_valid_mobile("9876543210")
    assert not is_valid_mobile("5876543210")
    assert not is_valid_mobile("98765")
    assert not is_valid_mobile("")


def test_complete_record_is_valid():
    outcome = validate(_record(), today=TODAY)
    assert outcome.is_valid
    assert outcome.errors == []


def test_empty_record_lists_every_missing_field():
    outcome = validate(ExtractionResult(), today=TODAY)
    assert not outcome.is_valid
    assert outcome.errors == [
        "Client name missing",
        "Meeting date missing",
        "Start time missing",
        "End time missing",
    ]


def test_mobile_required_by_profile():
    outcome = validate(_record(mobile_number=""), require_mobile=True, today=TODAY)
    assert outcome.errors == ["Mobile number missing"]

    outcome = validate(_record(mobile_number=""), today=TODAY)
    assert outcome.is_valid


def test_invalid_fields():
    outcome = validate(
        _record(client_name="R", mobile_number="12345", meeting_date="09-01-2025"),
        today=TODAY,
    )
    assert outcome.errors == [
        "Invalid client name format",
        "Invalid mobile number",
        "Invalid meeting date",
    ]


def test_time_range_limits():
    assert validate(_record(end_time="5:10 PM"), today=TODAY).errors == ["Invalid time range"]
    assert validate(_record(end_time="5:00 PM"), today=TODAY).errors == ["Invalid time range"]
    assert validate(
        _record(end_time="5:10 PM"), min_duration_minutes=5, today=TODAY
    ).is_valid


def test_date_horizon():
    record = _record(meeting_date="10-03-2025")
    assert validate(record, today=TODAY).is_valid
    assert validate(record, date_horizon_days=30, today=TODAY).errors == ["Invalid meeting date"]
