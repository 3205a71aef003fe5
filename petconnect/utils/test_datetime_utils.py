# petconnect/utils/test_datetime_utils.py
"""
Usage: python -m pytest petconnect/utils/test_datetime_utils.py -v
"""

import pytest
from datetime import datetime, date, timedelta, timezone
from petconnect.utils.datetime_utils import DateTimeUtils

def test_parse_iso_datetime():
    """Every accepted form normalizes to UTC"""
    test_cases = [
        "2024-01-15T10:30:00Z",
        "2024-01-15T10:30:00+09:00",
        "2024-01-15T10:30:00.123456Z",
        "2024-01-15T10:30:00"
    ]

    for iso_string in test_cases:
        dt = DateTimeUtils.parse_iso_datetime(iso_string)
        assert isinstance(dt, datetime)
        assert dt.tzinfo == timezone.utc

    assert DateTimeUtils.parse_iso_datetime("2024-01-15T10:30:00+09:00").hour == 1

def test_to_iso_string():
    naive = datetime(2024, 1, 15, 10, 30)
    shifted = datetime(2024, 1, 15, 19, 30, tzinfo=timezone(timedelta(hours=9)))

    assert DateTimeUtils.to_iso_string(naive) == "2024-01-15T10:30:00Z"
    assert DateTimeUtils.to_iso_string(shifted) == "2024-01-15T10:30:00Z"

def test_for_firestore():
    """dates become UTC datetimes, recursively"""
    test_data = {
        'birthdate': date(2020, 1, 15),
        'timestamp': datetime(2024, 1, 15, 10, 30),
        'nested': {
            'event_date': date(2023, 12, 25)
        },
        'list_data': [
            {'created_at': datetime(2024, 1, 1)}
        ],
        'name': 'Rex'
    }

    converted = DateTimeUtils.for_firestore(test_data)

    assert isinstance(converted['birthdate'], datetime)
    assert isinstance(converted['nested']['event_date'], datetime)
    assert converted['list_data'][0]['created_at'].tzinfo == timezone.utc
    assert converted['birthdate'].tzinfo == timezone.utc
    assert converted['name'] == 'Rex'

def test_coerce_datetime_sorts_mixed_values():
    values = ["2024-01-02T00:00:00Z", datetime(2024, 1, 3), date(2024, 1, 1), None, "garbage"]

    ordered = sorted(values, key=DateTimeUtils.coerce_datetime)

    assert ordered[-3:] == [date(2024, 1, 1), "2024-01-02T00:00:00Z", datetime(2024, 1, 3)]
    assert DateTimeUtils.coerce_datetime(None) == datetime.fromtimestamp(0, tz=timezone.utc)

def test_error_handling():
    with pytest.raises(ValueError):
        DateTimeUtils.parse_iso_datetime("invalid-date")

    with pytest.raises(ValueError):
        DateTimeUtils.parse_iso_datetime("")

def test_from_firestore():
    stored = {
        'created_at': datetime(2024, 1, 15, 19, 30, tzinfo=timezone(timedelta(hours=9))),
        'history': [datetime(2024, 1, 1)]
    }

    converted = DateTimeUtils.from_firestore(stored)

    assert converted['created_at'] == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
    assert converted['created_at'].tzinfo == timezone.utc
    assert converted['history'][0].tzinfo == timezone.utc
