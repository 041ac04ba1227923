"""crawlcost - Access-log parsing"""

import json
import logging
from datetime import datetime, timezone
from typing import Iterable, Optional

from .models import LogEntry, ParseSummary
from .patterns import LOG_PATTERNS, LOG_TIMESTAMP_FORMAT

logger = logging.getLogger(__name__)


class LogParser:
    """Turns raw access-log lines into :class:`LogEntry` records.

    Combined log format is tried first, then single-line JSON. Lines that
    match neither, or whose numeric fields do not parse, yield ``None``.
    """

    def parse(self, line: str) -> Optional[LogEntry]:
        line = line.strip()
        if not line:
            return None
        return self.parse_common_log(line) or self.parse_json_log(line)

    def parse_common_log(self, line: str) -> Optional[LogEntry]:
        match = LOG_PATTERNS['combined'].match(line)
        if not match:
            return None

        groups = match.groupdict()
        timestamp = _parse_log_timestamp(groups['timestamp'])
        status = _non_negative_int(groups['status'])
        nbytes = _non_negative_int(groups['bytes'])
        if timestamp is None or status is None or nbytes is None:
            return None

        return LogEntry(
            timestamp=timestamp,
            ip=groups['ip'],
            method=groups['method'],
            path=groups['path'],
            status=status,
            bytes=nbytes,
            user_agent=groups['user_agent'],
            # not present in this format
            response_time=None,
        )

    def parse_json_log(self, line: str) -> Optional[LogEntry]:
        if not line.startswith('{'):
            return None
        try:
            log = json.loads(line)
        except (ValueError, RecursionError):
            return None
        if not isinstance(log, dict):
            return None

        timestamp = _parse_json_timestamp(log.get('timestamp'))
        status = _non_negative_int(log.get('status'))
        nbytes = _non_negative_int(log.get('bytes'))
        if timestamp is None or status is None or nbytes is None:
            return None

        ip, method, path = log.get('ip'), log.get('method'), log.get('path')
        if not all(isinstance(v, str) for v in (ip, method, path)):
            return None

        user_agent = log.get('user_agent') or ''
        if not isinstance(user_agent, str):
            return None

        response_time = None
        if log.get('response_time') is not None:
            response_time = _non_negative_int(log['response_time'])
            if response_time is None:
                return None

        return LogEntry(
            timestamp=timestamp,
            ip=ip,
            method=method,
            path=path,
            status=status,
            bytes=nbytes,
            user_agent=user_agent,
            response_time=response_time,
        )

    def parse_lines(self, lines: Iterable[str]) -> ParseSummary:
        """Parse every non-blank line, keeping input order and skipping bad ones"""
        summary = ParseSummary()
        for line_num, line in enumerate(lines, 1):
            if not line.strip():
                continue
            summary.lines_submitted += 1
            entry = self.parse(line)
            if entry is None:
                logger.debug("Skipping unrecognized line %d", line_num)
                continue
            summary.entries.append(entry)

        if summary.lines_skipped:
            logger.info("Recognized %d of %d lines",
                        summary.entries_recognized, summary.lines_submitted)
        return summary


def _parse_log_timestamp(value: str) -> Optional[datetime]:
    try:
        return datetime.strptime(value, LOG_TIMESTAMP_FORMAT)
    except ValueError:
        return None


def _parse_json_timestamp(value) -> Optional[datetime]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        # epoch milliseconds
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        return _parse_log_timestamp(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _non_negative_int(value) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, float):
        if not value.is_integer():
            return None
        value = int(value)
    if isinstance(value, str):
        value = value.strip()
        if not value.isdecimal():
            return None
        try:
            value = int(value)
        except ValueError:
            return None
    if not isinstance(value, int) or value < 0:
        return None
    return value
