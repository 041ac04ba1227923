"""
Pytest configuration and shared fixtures for crawlcost tests
"""

import json

import pytest

from crawlcost.analyzer import TrafficAnalyzer
from crawlcost.config import default_config
from crawlcost.costs import CostCalculator
from crawlcost.detector import BotDetector
from crawlcost.parser import LogParser

BROWSER_UA = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 Chrome/120.0 Safari/537.36"
GPTBOT_UA = "Mozilla/5.0 AppleWebKit/537.36 (KHTML, like Gecko; compatible; GPTBot/1.0; +https://openai.com/gptbot)"


def common_line(ip="203.0.113.7", ts="10/Oct/2024:13:55:36 -0700", method="GET", path="/index.html",
                status=200, nbytes=2326, ua=BROWSER_UA):
    return f'{ip} - - [{ts}] "{method} {path} HTTP/1.1" {status} {nbytes} "-" "{ua}"'


def json_line(**overrides):
    record = {
        "timestamp": "2024-10-10T13:55:36Z",
        "ip": "198.51.100.4",
        "method": "GET",
        "path": "/api/data",
        "status": 200,
        "bytes": 512,
        "user_agent": BROWSER_UA,
        "response_time": 42,
    }
    record.update(overrides)
    return json.dumps(record)


@pytest.fixture
def config():
    return default_config()


@pytest.fixture
def parser():
    return LogParser()


@pytest.fixture
def detector(config):
    return BotDetector(config)


@pytest.fixture
def calculator(config):
    return CostCalculator(config)


@pytest.fixture
def analyzer(config):
    return TrafficAnalyzer(config)


@pytest.fixture
def sample_log() -> str:
    """1000 lines, 200 of them GPTBot fetching 10,000,000 bytes each"""
    lines = []
    for i in range(1000):
        if i % 5 == 0:
            lines.append(common_line(ip=f"20.15.240.{i % 250}", nbytes=10_000_000, ua=GPTBOT_UA))
        else:
            lines.append(common_line(ip=f"192.0.2.{i % 250}", nbytes=1000))
    return "\n".join(lines) + "\n"
