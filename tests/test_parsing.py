from __future__ import annotations

import logging
from datetime import datetime, time, timedelta, timezone

import pytest

from dtc.errors import UnparseableInputError
from dtc.parsing import parse_datetime
from dtc.timezone_utils import format_in_timezone, to_timezone

NOW = datetime(2024, 3, 10, 15, 0, tzinfo=timezone.utc)


def _utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def test_parse_with_abbreviation():
    parsed = parse_datetime("2023-10-01 11:20:00 cest", now=NOW)
    assert parsed.instant == _utc(2023, 10, 1, 9, 20)
    assert parsed.source_timezone == "CEST"
    assert not parsed.assumed_timezone
    assert not parsed.inferred_date


def test_parse_jst_abbreviation():
    parsed = parse_datetime("2023-10-22 10:34:16 jst", now=NOW)
    assert parsed.instant == _utc(2023, 10, 22, 1, 34, 16)


def test_parse_without_timezone_assumes_utc():
    parsed = parse_datetime("2023-05-07 09:13:03", now=NOW)
    assert parsed.instant == _utc(2023, 5, 7, 9, 13, 3)
    assert parsed.assumed_timezone
    assert parsed.source_timezone == "UTC"


def test_parse_rfc3339_keeps_offset():
    parsed = parse_datetime("2023-10-22T10:34:16+01:00", now=NOW)
    assert parsed.instant == _utc(2023, 10, 22, 9, 34, 16)
    assert not parsed.assumed_timezone


def test_parse_zulu_suffix():
    assert parse_datetime("2023-10-22T10:34:16Z", now=NOW).instant == _utc(2023, 10, 22, 10, 34, 16)


def test_parse_month_name():
    parsed = parse_datetime("Oct 1 2023 11:20 pm pst", now=NOW)
    assert parsed.instant == _utc(2023, 10, 2, 7, 20)


def test_parse_trailing_iana_zone():
    parsed = parse_datetime("2023-10-01 11:20 Europe/Berlin", now=NOW)
    assert parsed.instant == _utc(2023, 10, 1, 9, 20)
    assert parsed.source_timezone == "Europe/Berlin"


def test_time_only_uses_todays_date():
    parsed = parse_datetime("11:20:00 jst", now=NOW)
    today = NOW.astimezone().date()
    expected = datetime.combine(today, time(11, 20), tzinfo=timezone(timedelta(hours=9)))
    assert parsed.instant == expected
    assert parsed.inferred_date


def test_date_only_is_midnight():
    parsed = parse_datetime("2023-05-07", now=NOW)
    assert parsed.instant == _utc(2023, 5, 7)


def test_blank_input_is_now():
    for text in (None, "", "   "):
        parsed = parse_datetime(text, now=NOW)
        assert parsed.instant == NOW
        assert parsed.assumed_timezone


@pytest.mark.parametrize(
    "text",
    [
        "not a date",
        "2023-13-45 10:00",
        "2023-10-01 11:20:00 xyz",
        "2023-10-01 11:20 CEST Europe/Berlin",
    ],
)
def test_unparseable_input(text):
    with pytest.raises(UnparseableInputError):
        parse_datetime(text, now=NOW)


def test_display_timezone_does_not_change_instant():
    instant = parse_datetime("2023-10-01 11:20:00 cest", now=NOW).instant
    assert to_timezone(instant, "jst") == to_timezone(instant, "utc") == instant


@pytest.mark.parametrize(
    "target",
    ["utc", "jst", "cet", "est", "America/New_York", "Europe/Dublin", "America/Havana", "Asia/Kolkata", "+05:30", "-03:00"],
)
def test_rendered_output_parses_back_to_same_instant(target):
    instant = parse_datetime("2023-10-01 11:20:00 cest", now=NOW).instant
    rendered = format_in_timezone(instant, target)
    assert parse_datetime(rendered, now=NOW).instant == instant


@pytest.mark.parametrize(
    "text, expected",
    [
        ("2023-10-01 12:00:00 UTC+3", _utc(2023, 10, 1, 9, 0)),
        ("2023-10-01 12:00:00 GMT-5", _utc(2023, 10, 1, 17, 0)),
        ("2023-10-01 12:00:00 -03:00", _utc(2023, 10, 1, 15, 0)),
    ],
)
def test_trailing_offset_keeps_its_sign(text, expected):
    parsed = parse_datetime(text, now=NOW)
    assert parsed.instant == expected
    assert not parsed.assumed_timezone


def test_date_only_with_abbreviation():
    parsed = parse_datetime("2023-10-01 cest", now=NOW)
    assert parsed.instant == _utc(2023, 9, 30, 22, 0)
    assert parsed.source_timezone == "CEST"
    assert not parsed.inferred_date


def test_date_only_with_iana_zone():
    parsed = parse_datetime("2023-10-01 Asia/Tokyo", now=NOW)
    assert parsed.instant == _utc(2023, 9, 30, 15, 0)


@pytest.mark.parametrize("text", ["0001-01-01 00:00:00 jst", "9999-12-31 23:00:00 UTC-3"])
def test_out_of_range_instant(text):
    with pytest.raises(UnparseableInputError, match="Could not parse"):
        parse_datetime(text, now=NOW)


def test_informal_time_infers_date(caplog):
    with caplog.at_level(logging.DEBUG, logger="dtc.parsing"):
        parsed = parse_datetime("11am jst", now=NOW)

    today = NOW.astimezone().date()
    expected = datetime.combine(today, time(11, 0), tzinfo=timezone(timedelta(hours=9)))
    assert parsed.instant == expected
    assert parsed.inferred_date
    assert "assuming today" in caplog.text


def test_partial_date_infers_missing_fields():
    assert parse_datetime("Oct 1 11:20 cest", now=NOW).inferred_date
    assert not parse_datetime("Oct 1 2023 11:20 cest", now=NOW).inferred_date
