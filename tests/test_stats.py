"""
Unit tests for detection aggregation
"""

from datetime import datetime, timezone

from crawlcost.models import BotDetectionResult, LogEntry, TrafficRecord
from crawlcost.stats import aggregate, bot_traffic, category_breakdown

from conftest import BROWSER_UA, GPTBOT_UA


def _record(detection, nbytes=100):
    entry = LogEntry(timestamp=datetime(2024, 10, 10, tzinfo=timezone.utc), ip="192.0.2.1",
                     method="GET", path="/", status=200, bytes=nbytes, user_agent="ua")
    return TrafficRecord(site_id="site", entry=entry, detection=detection)


def test_aggregate_partitions_by_is_bot(detector):
    results = detector.detect_batch([GPTBOT_UA, BROWSER_UA, "CCBot/2.0", "", "Googlebot/2.1"])

    stats = aggregate(results)

    assert stats.total == 5
    assert stats.bots == 3
    assert stats.humans == 2
    assert stats.by_category == {'ai_training': 1, 'ai_scraper': 1, 'search_engine': 1}
    assert stats.by_severity == {'high': 1, 'critical': 1, 'low': 1}
    assert stats.recommendations == {'rate_limit': 1, 'block': 1, 'allow': 1}


def test_aggregate_only_reports_observed_keys(detector):
    stats = aggregate(detector.detect_batch([BROWSER_UA, BROWSER_UA]))

    assert stats.bots == 0
    assert stats.by_category == {}
    assert stats.by_severity == {}
    assert stats.recommendations == {}


def test_aggregate_skips_null_fields():
    results = [BotDetectionResult(is_bot=True, bot_name="Mystery", confidence=0.5)]

    stats = aggregate(results)

    assert stats.bots == 1
    assert stats.by_category == {}


def test_aggregate_empty():
    stats = aggregate([])
    assert (stats.total, stats.bots, stats.humans) == (0, 0, 0)


def test_category_breakdown_keeps_first_seen_bot_order(detector):
    records = [
        _record(detector.detect("ClaudeBot/1.0"), 10),
        _record(detector.detect("GPTBot/1.0"), 20),
        _record(detector.detect("ClaudeBot/1.0"), 30),
        _record(detector.detect(BROWSER_UA), 1000),
        _record(BotDetectionResult(is_bot=True, bot_name="Mystery", confidence=0.5), 5),
    ]

    breakdown = category_breakdown(records)

    assert list(breakdown) == ['ai_training', 'unknown']
    assert breakdown['ai_training'].requests == 3
    assert breakdown['ai_training'].bandwidth == 60
    assert breakdown['ai_training'].to_dict()['bots'] == ['ClaudeBot', 'GPTBot']
    assert breakdown['unknown'].to_dict() == {'requests': 1, 'bandwidth': 5, 'bots': ['Mystery']}


def test_bot_traffic_groups_by_name(detector):
    records = [
        _record(detector.detect("GPTBot/1.0"), 100),
        _record(detector.detect("CCBot/2.0"), 50),
        _record(detector.detect("GPTBot/1.0"), 100),
        _record(detector.detect(BROWSER_UA), 999),
    ]

    traffic = bot_traffic(records)

    assert [t.bot_name for t in traffic] == ['GPTBot', 'CCBot']
    assert traffic[0].bytes_transferred == 200
    assert traffic[0].request_count == 2
    assert traffic[1].category == 'ai_scraper'
