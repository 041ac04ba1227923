"""
Unit tests for access-log parsing
"""

from datetime import datetime, timedelta, timezone

import pytest

from conftest import BROWSER_UA, common_line, json_line


class TestCommonLog:
    """Combined log format lines"""

    def test_recovers_fields(self, parser):
        entry = parser.parse(common_line(ip="10.1.2.3", status=404, nbytes=777, path="/missing"))

        assert entry is not None
        assert entry.ip == "10.1.2.3"
        assert entry.status == 404
        assert entry.bytes == 777
        assert entry.path == "/missing"
        assert entry.method == "GET"
        assert entry.user_agent == BROWSER_UA

    def test_timestamp_keeps_offset(self, parser):
        entry = parser.parse(common_line())

        assert entry.timestamp == datetime(2024, 10, 10, 13, 55, 36,
                                           tzinfo=timezone(timedelta(hours=-7)))

    def test_response_time_is_unknown(self, parser):
        assert parser.parse(common_line()).response_time is None

    def test_empty_user_agent(self, parser):
        entry = parser.parse(common_line(ua=""))

        assert entry is not None
        assert entry.user_agent == ""

    def test_dash_bytes_rejected(self, parser):
        line = '1.2.3.4 - - [10/Oct/2024:13:55:36 -0700] "GET / HTTP/1.1" 304 - "-" "curl/8.0"'
        assert parser.parse(line) is None

    def test_bad_timestamp_rejected(self, parser):
        assert parser.parse(common_line(ts="yesterday at noon")) is None

    def test_oversized_byte_count_rejected(self, parser):
        assert parser.parse(common_line(nbytes="9" * 5000)) is None

    def test_surrounding_whitespace_ignored(self, parser):
        assert parser.parse("  " + common_line() + "\n") is not None


class TestJsonLog:
    """Single-line JSON records"""

    def test_recovers_fields(self, parser):
        entry = parser.parse(json_line(status=201, bytes=4096, response_time=120))

        assert entry.ip == "198.51.100.4"
        assert entry.status == 201
        assert entry.bytes == 4096
        assert entry.response_time == 120
        assert entry.timestamp == datetime(2024, 10, 10, 13, 55, 36, tzinfo=timezone.utc)

    def test_naive_timestamp_is_utc(self, parser):
        entry = parser.parse(json_line(timestamp="2024-10-10T13:55:36"))
        assert entry.timestamp.tzinfo == timezone.utc

    def test_epoch_timestamp_is_milliseconds(self, parser):
        entry = parser.parse(json_line(timestamp=1728568536000))
        assert entry.timestamp == datetime(2024, 10, 10, 13, 55, 36, tzinfo=timezone.utc)
        assert parser.parse(json_line(timestamp=0)).timestamp == datetime(1970, 1, 1, tzinfo=timezone.utc)

    def test_out_of_range_epoch_rejected(self, parser):
        assert parser.parse(json_line(timestamp=10 ** 30)) is None

    def test_numeric_strings_accepted(self, parser):
        entry = parser.parse(json_line(status="200", bytes="1024"))
        assert (entry.status, entry.bytes) == (200, 1024)

    def test_missing_response_time(self, parser):
        assert parser.parse(json_line(response_time=None)).response_time is None

    def test_missing_user_agent(self, parser):
        assert parser.parse(json_line(user_agent=None)).user_agent == ""

    @pytest.mark.parametrize("overrides", [
        {"status": "ok"},
        {"bytes": -1},
        {"bytes": 1.5},
        {"status": True},
        {"timestamp": "not a date"},
        {"timestamp": None},
        {"ip": None},
        {"response_time": "slow"},
    ])
    def test_invalid_fields_rejected(self, parser, overrides):
        assert parser.parse(json_line(**overrides)) is None

    def test_non_object_rejected(self, parser):
        assert parser.parse("[1, 2, 3]") is None
        assert parser.parse("{not json") is None

    @pytest.mark.parametrize("field", ["status", "bytes", "response_time"])
    def test_superscript_digits_rejected(self, parser, field):
        assert parser.parse(json_line(**{field: "²"})) is None

    def test_oversized_integer_rejected(self, parser):
        line = json_line().replace('"bytes": 512', '"bytes": ' + "9" * 5000)
        assert parser.parse(line) is None

    def test_deeply_nested_json_rejected(self, parser):
        assert parser.parse("{\"a\": " + "[" * 100_000 + "]" * 100_000 + "}") is None


class TestParseLines:
    """Batch parsing"""

    @pytest.mark.parametrize("line", [
        "",
        "garbage",
        "Oct 10 13:55:36 host sshd[123]: Failed password for root",
        '1.2.3.4 - - [10/Oct/2024:13:55:36 -0700] "GET / HTTP/1.1" 200',
    ])
    def test_unsupported_lines_return_none(self, parser, line):
        assert parser.parse(line) is None

    def test_skips_malformed_and_keeps_order(self, parser):
        lines = [
            common_line(ip="1.1.1.1"),
            "not a log line",
            json_line(ip="2.2.2.2"),
            "",
            common_line(ip="3.3.3.3"),
        ]

        summary = parser.parse_lines(lines)

        assert [e.ip for e in summary.entries] == ["1.1.1.1", "2.2.2.2", "3.3.3.3"]
        assert summary.lines_submitted == 4
        assert summary.entries_recognized == 3
        assert summary.lines_skipped == 1

    def test_entries_are_immutable(self, parser):
        entry = parser.parse(common_line())
        with pytest.raises(AttributeError):
            entry.bytes = 0
