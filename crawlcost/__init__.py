"""crawlcost package"""

from .patterns import VERSION, BOT_SIGNATURES, HOSTING_PROVIDERS
from .models import (
    Action, BotDetectionResult, BotTraffic, Category, CostBreakdown, LogEntry, Recommendation,
    Severity, TrafficRecord,
)
from .config import EngineConfig, default_config, load_config
from .errors import ConfigError, CrawlCostError, StorageError
from .parser import LogParser
from .detector import BotDetector
from .stats import aggregate
from .costs import CostCalculator, tiered_cost
from .recommender import RecommendationEngine
from .robots import render_robots_txt
from .analyzer import TrafficAnalyzer

__all__ = [
    'VERSION', 'BOT_SIGNATURES', 'HOSTING_PROVIDERS',
    'Action', 'BotDetectionResult', 'BotTraffic', 'Category', 'CostBreakdown', 'LogEntry',
    'Recommendation', 'Severity', 'TrafficRecord',
    'EngineConfig', 'default_config', 'load_config',
    'ConfigError', 'CrawlCostError', 'StorageError',
    'LogParser', 'BotDetector', 'aggregate', 'CostCalculator', 'tiered_cost',
    'RecommendationEngine', 'render_robots_txt', 'TrafficAnalyzer',
]
