"""crawlcost - Core analysis engine"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Mapping, Optional

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from .config import EngineConfig, default_config
from .costs import CostCalculator
from .detector import BotDetector
from .errors import StorageError
from .models import CategoryBreakdown, CostBreakdown, DetectionStats, TrafficRecord
from .parser import LogParser
from .patterns import DEFAULT_TIME_RANGE, RECENT_RECORDS_LIMIT, TIME_RANGES
from .recommender import RecommendationEngine
from .robots import policy_from_recommendations, render_robots_txt
from .stats import aggregate, bot_traffic, category_breakdown
from .store import LogStore, MemoryLogStore

logger = logging.getLogger(__name__)


@dataclass
class IngestResult:
    """Outcome of ingesting one batch of log lines"""
    site_id: str
    lines_submitted: int
    records: List[TrafficRecord]
    stats: DetectionStats
    bot_cost: CostBreakdown

    @property
    def entries_recognized(self) -> int:
        return len(self.records)

    @property
    def total_bytes(self) -> int:
        return sum(r.entry.bytes for r in self.records)

    @property
    def bot_bytes(self) -> int:
        return sum(r.entry.bytes for r in self.records if r.is_bot)

    def to_dict(self) -> Dict:
        return {
            'success': True,
            'stats': {
                'lines_submitted': self.lines_submitted,
                'total_entries': self.entries_recognized,
                'bot_requests': self.stats.bots,
                'human_requests': self.stats.humans,
                'total_bytes': self.total_bytes,
                'bot_bytes': self.bot_bytes,
                'potential_savings': self.bot_cost.monthly,
            },
            'message': f"Processed {self.entries_recognized} log entries",
        }


@dataclass
class TrafficMetrics:
    """Aggregate view of one site's traffic over a time range"""
    site_id: str
    time_range: str
    total_requests: int
    bot_requests: int
    human_requests: int
    bot_bandwidth: int
    human_bandwidth: int
    potential_savings: Dict
    bot_breakdown: Dict[str, CategoryBreakdown]
    recent: List[TrafficRecord] = field(default_factory=list)

    @property
    def bot_percentage(self) -> float:
        return _percentage(self.bot_requests, self.total_requests)

    @property
    def human_percentage(self) -> float:
        return _percentage(self.human_requests, self.total_requests)

    def to_dict(self) -> Dict:
        savings = dict(self.potential_savings)
        savings['by_category'] = {k: v.total for k, v in savings['by_category'].items()}
        return {
            'site_id': self.site_id,
            'time_range': self.time_range,
            'total_requests': self.total_requests,
            'bot_requests': self.bot_requests,
            'human_requests': self.human_requests,
            'bot_percentage': self.bot_percentage,
            'human_percentage': self.human_percentage,
            'bot_bandwidth': self.bot_bandwidth,
            'human_bandwidth': self.human_bandwidth,
            'potential_savings': savings,
            'bot_breakdown': {k: v.to_dict() for k, v in self.bot_breakdown.items()},
            'recent': [r.to_dict() for r in self.recent],
        }


class TrafficAnalyzer:
    """Parses, classifies, stores and costs access-log traffic"""

    def __init__(self, config: Optional[EngineConfig] = None, store: Optional[LogStore] = None,
                 provider: Optional[str] = None, console: Optional[Console] = None):
        self.config = config or default_config()
        self.store = store if store is not None else MemoryLogStore()
        self.provider = self.config.provider(provider or self.config.default_provider).key
        self.console = console
        self.parser = LogParser()
        self.detector = BotDetector(self.config)
        self.calculator = CostCalculator(self.config)
        self.recommender = RecommendationEngine(self.calculator)

    def ingest(self, text: str, site_id: str) -> IngestResult:
        return self.ingest_lines(text.splitlines(), site_id)

    def ingest_lines(self, lines: Iterable[str], site_id: str) -> IngestResult:
        summary = self.parser.parse_lines(lines)
        detections = self.detector.detect_batch(e.user_agent for e in summary.entries)
        records = [
            TrafficRecord(site_id=site_id, entry=entry, detection=detection)
            for entry, detection in zip(summary.entries, detections)
        ]

        if records:
            try:
                self.store.insert(records)
            except Exception as e:
                raise StorageError('insert', e) from e

        bot_bytes = sum(r.entry.bytes for r in records if r.is_bot)
        result = IngestResult(
            site_id=site_id,
            lines_submitted=summary.lines_submitted,
            records=records,
            stats=aggregate(detections),
            bot_cost=self.calculator.bandwidth_cost(bot_bytes, self.provider),
        )
        logger.info("Ingested %d/%d lines for %s: %d bot, %d human",
                    result.entries_recognized, result.lines_submitted, site_id,
                    result.stats.bots, result.stats.humans)
        return result

    def analyze_file(self, filepath: str, site_id: str = 'default') -> IngestResult:
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Log file not found: {filepath}")

        with open(path, 'r', encoding='utf-8', errors='ignore') as f:
            lines = f.readlines()

        if self.console is None:
            return self.ingest_lines(lines, site_id)

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=self.console,
            transient=True,
        ) as progress:
            task = progress.add_task("Analyzing logs...", total=len(lines))
            return self.ingest_lines(_tracked(lines, progress, task), site_id)

    def query(self, site_id: str, time_range: str = DEFAULT_TIME_RANGE,
              now: Optional[datetime] = None) -> TrafficMetrics:
        if time_range not in TIME_RANGES:
            logger.debug("Unknown time range %r, using %s", time_range, DEFAULT_TIME_RANGE)
            time_range = DEFAULT_TIME_RANGE
        now = now or datetime.now(timezone.utc)
        since = now - timedelta(hours=TIME_RANGES[time_range])

        try:
            records = self.store.query(site_id, since)
        except Exception as e:
            raise StorageError('query', e) from e

        bots = [r for r in records if r.is_bot]
        return TrafficMetrics(
            site_id=site_id,
            time_range=time_range,
            total_requests=len(records),
            bot_requests=len(bots),
            human_requests=len(records) - len(bots),
            bot_bandwidth=sum(r.entry.bytes for r in bots),
            human_bandwidth=sum(r.entry.bytes for r in records if not r.is_bot),
            potential_savings=self.calculator.savings_by_category(bot_traffic(bots), self.provider),
            bot_breakdown=category_breakdown(bots),
            recent=records[:RECENT_RECORDS_LIMIT],
        )

    def robots_txt(self, blocked: Iterable[str], rate_limited: Mapping[str, float]) -> str:
        return render_robots_txt(blocked, rate_limited)

    def report(self, result: IngestResult, implementation_cost: float = 0.0) -> Dict:
        """Everything the CLI prints or exports for one ingested batch"""
        traffic = bot_traffic(result.records)
        recommendations = self.recommender.recommend(traffic, self.provider)
        blocked, rate_limited = policy_from_recommendations(recommendations, self.detector)
        savings = self.calculator.savings_by_category(traffic, self.provider)
        provider = self.config.provider(self.provider)

        return {
            'summary': {
                'site_id': result.site_id,
                'lines_submitted': result.lines_submitted,
                'total_entries': result.entries_recognized,
                'bot_requests': result.stats.bots,
                'human_requests': result.stats.humans,
                'bot_percentage': _percentage(result.stats.bots, result.entries_recognized),
                'total_bytes': result.total_bytes,
                'bot_bytes': result.bot_bytes,
            },
            'detection': result.stats.to_dict(),
            'categories': {k: v.to_dict() for k, v in category_breakdown(result.records).items()},
            'bots': [t.to_dict() for t in sorted(traffic, key=lambda t: t.bytes_transferred, reverse=True)],
            'costs': {
                'provider': provider.key,
                'provider_name': provider.name,
                'pricing': provider.to_dict(),
                'bot_traffic': result.bot_cost.to_dict(),
                'weighted_savings': {
                    'total': savings['total'],
                    'monthly': savings['monthly'],
                    'yearly': savings['yearly'],
                    'by_category': {k: v.to_dict() for k, v in savings['by_category'].items()},
                },
                'roi': self.calculator.roi(result.bot_bytes, self.provider, implementation_cost),
            },
            'recommendations': [r.to_dict() for r in recommendations],
            'robots_txt': self.robots_txt(blocked, rate_limited),
        }


def _tracked(lines: List[str], progress: Progress, task) -> Iterator[str]:
    for line in lines:
        yield line
        progress.update(task, advance=1)


def _percentage(part: int, whole: int) -> float:
    if whole == 0:
        return 0.0
    return round(part / whole * 100, 1)
