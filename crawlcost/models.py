"""crawlcost - Data models"""

import math
import re
from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .errors import ConfigError


class Category(str, Enum):
    """Coarse purpose of a bot"""
    AI_TRAINING = 'ai_training'
    AI_SCRAPER = 'ai_scraper'
    AI_SEARCH = 'ai_search'
    SEARCH_ENGINE = 'search_engine'
    SOCIAL_MEDIA = 'social_media'
    SEO_TOOL = 'seo_tool'
    SCRAPER = 'scraper'
    MONITORING = 'monitoring'
    SECURITY = 'security'

    def __str__(self):
        return self.value


class Severity(str, Enum):
    LOW = 'low'
    MEDIUM = 'medium'
    HIGH = 'high'
    CRITICAL = 'critical'

    def __str__(self):
        return self.value


class Action(str, Enum):
    ALLOW = 'allow'
    RATE_LIMIT = 'rate_limit'
    BLOCK = 'block'

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class LogEntry:
    """One parsed access-log line.

    ``response_time`` is ``None`` when the source format does not carry it.
    """
    timestamp: datetime
    ip: str
    method: str
    path: str
    status: int
    bytes: int
    user_agent: str
    response_time: Optional[int] = None

    def to_dict(self) -> Dict:
        data = asdict(self)
        data['timestamp'] = self.timestamp.isoformat()
        return data


@dataclass(frozen=True)
class BotSignature:
    """Registry entry for a known bot"""
    name: str
    pattern: re.Pattern
    category: Category
    severity: Severity
    description: str
    recommendation: Action
    rate_limit: Optional[int] = None

    def matches(self, user_agent: str) -> bool:
        return self.pattern.search(user_agent) is not None


@dataclass(frozen=True)
class GenericPattern:
    """Fallback heuristic used when no signature matches"""
    pattern: re.Pattern
    confidence: float


@dataclass(frozen=True)
class BotDetectionResult:
    """Classification of a single user agent"""
    is_bot: bool
    bot_name: Optional[str] = None
    category: Optional[str] = None
    severity: Optional[str] = None
    description: Optional[str] = None
    recommendation: Optional[str] = None
    confidence: float = 1.0

    def __post_init__(self):
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"confidence out of range: {self.confidence}")
        if self.is_bot and not self.bot_name:
            raise ValueError("bot results must carry a bot name")

    def to_dict(self) -> Dict:
        return {
            'is_bot': self.is_bot,
            'bot_name': self.bot_name,
            'category': _plain(self.category),
            'severity': _plain(self.severity),
            'description': self.description,
            'recommendation': _plain(self.recommendation),
            'confidence': self.confidence,
        }


@dataclass(frozen=True)
class PricingTier:
    up_to_gb: float
    cost_per_gb: float


@dataclass(frozen=True)
class HostingProvider:
    """Bandwidth pricing model of a hosting provider.

    Exactly one of ``cost_per_gb`` (flat) and ``tiered_pricing`` is set. Tiers
    are checked on construction: bounds strictly increase, the last one is
    unbounded and no rate is negative.
    """
    key: str
    name: str
    cost_per_gb: Optional[float] = None
    free_gb_included: float = 0.0
    tiered_pricing: Optional[Tuple[PricingTier, ...]] = None

    def __post_init__(self):
        if (self.cost_per_gb is None) == (self.tiered_pricing is None):
            raise ConfigError(
                f"provider '{self.key}' needs either cost_per_gb or tiered_pricing")
        if self.free_gb_included < 0:
            raise ConfigError(f"provider '{self.key}': free_gb_included is negative")
        if self.cost_per_gb is not None and self.cost_per_gb < 0:
            raise ConfigError(f"provider '{self.key}': cost_per_gb is negative")
        if self.tiered_pricing is not None:
            object.__setattr__(self, 'tiered_pricing', tuple(self.tiered_pricing))
            _validate_tiers(self.key, self.tiered_pricing)

    @property
    def is_tiered(self) -> bool:
        return self.tiered_pricing is not None

    def to_dict(self) -> Dict:
        data = {'key': self.key, 'name': self.name, 'free_gb_included': self.free_gb_included}
        if self.is_tiered:
            data['tiered_pricing'] = [
                {'up_to_gb': None if math.isinf(t.up_to_gb) else t.up_to_gb,
                 'cost_per_gb': t.cost_per_gb}
                for t in self.tiered_pricing
            ]
        else:
            data['cost_per_gb'] = self.cost_per_gb
        return data


def _validate_tiers(key: str, tiers: Tuple[PricingTier, ...]):
    if not tiers:
        raise ConfigError(f"provider '{key}': tiered_pricing is empty")
    previous = 0.0
    for tier in tiers:
        if tier.cost_per_gb < 0:
            raise ConfigError(f"provider '{key}': negative tier rate {tier.cost_per_gb}")
        if tier.up_to_gb <= previous:
            raise ConfigError(
                f"provider '{key}': tier bounds must strictly increase "
                f"({tier.up_to_gb} after {previous})")
        previous = tier.up_to_gb
    if not math.isinf(tiers[-1].up_to_gb):
        raise ConfigError(f"provider '{key}': last tier must be unbounded")


@dataclass(frozen=True)
class CostBreakdown:
    """Cost of the sampled period, scaled to 30-day months and 365-day years"""
    gb: float
    cost: float

    @property
    def total(self) -> float:
        return self.cost

    @property
    def monthly(self) -> float:
        return self.total * 30

    @property
    def yearly(self) -> float:
        return self.total * 365

    def __add__(self, other: 'CostBreakdown') -> 'CostBreakdown':
        return CostBreakdown(gb=self.gb + other.gb, cost=self.cost + other.cost)

    def to_dict(self) -> Dict:
        return {
            'bandwidth': {'gb': self.gb, 'cost': self.cost},
            'total': self.total,
            'monthly': self.monthly,
            'yearly': self.yearly,
        }


@dataclass
class BotTraffic:
    """Traffic totals of one bot"""
    bot_name: str
    category: Optional[str]
    bytes_transferred: int = 0
    request_count: int = 0

    def to_dict(self) -> Dict:
        data = asdict(self)
        data['category'] = _plain(self.category)
        return data


@dataclass(frozen=True)
class Recommendation:
    action: Action
    target: str
    reason: str
    savings_per_month: float
    confidence: float

    def to_dict(self) -> Dict:
        data = asdict(self)
        data['action'] = self.action.value
        return data


@dataclass(frozen=True)
class TrafficRecord:
    """Classified entry as handed to the log store"""
    site_id: str
    entry: LogEntry
    detection: BotDetectionResult

    @property
    def is_bot(self) -> bool:
        return self.detection.is_bot

    def to_dict(self) -> Dict:
        return {
            'site_id': self.site_id,
            'timestamp': self.entry.timestamp.isoformat(),
            'ip_address': self.entry.ip,
            'method': self.entry.method,
            'path': self.entry.path,
            'status_code': self.entry.status,
            'bytes_transferred': self.entry.bytes,
            'response_time_ms': self.entry.response_time,
            'user_agent': self.entry.user_agent,
            'is_bot': self.detection.is_bot,
            'bot_name': self.detection.bot_name,
            'bot_category': _plain(self.detection.category),
            'confidence': self.detection.confidence,
        }


@dataclass
class CategoryBreakdown:
    """Requests, bandwidth and distinct bots seen for one category"""
    requests: int = 0
    bandwidth: int = 0
    bots: Dict[str, None] = field(default_factory=dict)

    def add(self, bot_name: Optional[str], nbytes: int):
        self.requests += 1
        self.bandwidth += nbytes
        if bot_name:
            self.bots.setdefault(bot_name, None)

    def to_dict(self) -> Dict:
        return {'requests': self.requests, 'bandwidth': self.bandwidth, 'bots': list(self.bots)}


@dataclass
class DetectionStats:
    total: int = 0
    bots: int = 0
    humans: int = 0
    by_category: Dict[str, int] = field(default_factory=dict)
    by_severity: Dict[str, int] = field(default_factory=dict)
    recommendations: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class ParseSummary:
    """Lines submitted versus entries recognized"""
    lines_submitted: int = 0
    entries: List[LogEntry] = field(default_factory=list)

    @property
    def entries_recognized(self) -> int:
        return len(self.entries)

    @property
    def lines_skipped(self) -> int:
        return self.lines_submitted - self.entries_recognized


def _plain(value):
    if isinstance(value, Enum):
        return value.value
    return value
