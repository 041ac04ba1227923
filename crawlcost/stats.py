"""crawlcost - Aggregation of detection results"""

from collections import Counter
from typing import Dict, Iterable, List

from .models import BotDetectionResult, BotTraffic, CategoryBreakdown, DetectionStats, TrafficRecord


def aggregate(results: Iterable[BotDetectionResult]) -> DetectionStats:
    """Count bots and humans, and tally bot results by category, severity and recommendation.

    Only keys that actually occur appear in the tallies.
    """
    stats = DetectionStats()
    by_category: Counter = Counter()
    by_severity: Counter = Counter()
    recommendations: Counter = Counter()

    for result in results:
        stats.total += 1
        if not result.is_bot:
            stats.humans += 1
            continue

        stats.bots += 1
        if result.category:
            by_category[str(result.category)] += 1
        if result.severity:
            by_severity[str(result.severity)] += 1
        if result.recommendation:
            recommendations[str(result.recommendation)] += 1

    stats.by_category = dict(by_category)
    stats.by_severity = dict(by_severity)
    stats.recommendations = dict(recommendations)
    return stats


def category_breakdown(records: Iterable[TrafficRecord]) -> Dict[str, CategoryBreakdown]:
    """Requests, bandwidth and distinct bot names per category, in first-seen order"""
    breakdown: Dict[str, CategoryBreakdown] = {}
    for record in records:
        if not record.is_bot:
            continue
        category = str(record.detection.category) if record.detection.category else 'unknown'
        if category not in breakdown:
            breakdown[category] = CategoryBreakdown()
        breakdown[category].add(record.detection.bot_name, record.entry.bytes)
    return breakdown


def bot_traffic(records: Iterable[TrafficRecord]) -> List[BotTraffic]:
    """Group bot records by bot name, in first-seen order"""
    totals: Dict[str, BotTraffic] = {}
    for record in records:
        if not record.is_bot:
            continue
        name = record.detection.bot_name
        if name not in totals:
            totals[name] = BotTraffic(bot_name=name, category=record.detection.category)
        totals[name].bytes_transferred += record.entry.bytes
        totals[name].request_count += 1
    return list(totals.values())
