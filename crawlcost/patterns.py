"""crawlcost - Constants and patterns"""

import math
import re

from .models import (
    Action, BotSignature, Category, GenericPattern, HostingProvider, PricingTier, Severity,
)

VERSION = "1.0.0"


def _sig(name, pattern, category, severity, description, recommendation, rate_limit=None):
    return BotSignature(
        name=name,
        pattern=re.compile(pattern, re.IGNORECASE),
        category=category,
        severity=severity,
        description=description,
        recommendation=recommendation,
        rate_limit=rate_limit,
    )


# Known bots. Tried top to bottom, the first match wins.
BOT_SIGNATURES = (
    # AI training
    _sig('GPTBot', r"GPTBot", Category.AI_TRAINING, Severity.HIGH,
         'OpenAI GPT training crawler', Action.RATE_LIMIT, 10),
    _sig('ChatGPT-User', r"ChatGPT-User", Category.AI_TRAINING, Severity.HIGH,
         'ChatGPT web browsing', Action.RATE_LIMIT, 20),
    _sig('Claude-Web', r"Claude-Web", Category.AI_TRAINING, Severity.HIGH,
         'Anthropic Claude crawler', Action.RATE_LIMIT, 10),
    _sig('ClaudeBot', r"ClaudeBot", Category.AI_TRAINING, Severity.HIGH,
         'Anthropic training crawler', Action.RATE_LIMIT, 10),
    _sig('anthropic-ai', r"anthropic-ai", Category.AI_TRAINING, Severity.HIGH,
         'Anthropic AI bot', Action.RATE_LIMIT),
    _sig('Cohere-ai', r"cohere-ai", Category.AI_TRAINING, Severity.MEDIUM,
         'Cohere AI training bot', Action.RATE_LIMIT),
    _sig('Amazonbot', r"Amazonbot", Category.AI_TRAINING, Severity.MEDIUM,
         'Amazon crawler used for Alexa and model training', Action.RATE_LIMIT, 20),
    _sig('Meta-ExternalAgent', r"meta-externalagent", Category.AI_TRAINING, Severity.HIGH,
         'Meta AI training crawler', Action.RATE_LIMIT, 10),

    # AI search
    _sig('PerplexityBot', r"PerplexityBot", Category.AI_SEARCH, Severity.MEDIUM,
         'Perplexity AI search engine', Action.RATE_LIMIT, 30),
    _sig('OAI-SearchBot', r"OAI-SearchBot", Category.AI_SEARCH, Severity.MEDIUM,
         'OpenAI search indexer', Action.RATE_LIMIT, 30),
    _sig('YouBot', r"YouBot", Category.AI_SEARCH, Severity.MEDIUM,
         'You.com search bot', Action.RATE_LIMIT),

    # Search engines
    _sig('Googlebot', r"Googlebot", Category.SEARCH_ENGINE, Severity.LOW,
         'Google search crawler', Action.ALLOW),
    _sig('bingbot', r"bingbot", Category.SEARCH_ENGINE, Severity.LOW,
         'Bing search crawler', Action.ALLOW),
    _sig('Applebot', r"Applebot", Category.SEARCH_ENGINE, Severity.LOW,
         'Apple Siri and Spotlight crawler', Action.ALLOW),
    _sig('Baiduspider', r"Baiduspider", Category.SEARCH_ENGINE, Severity.LOW,
         'Baidu search crawler', Action.RATE_LIMIT, 20),
    _sig('YandexBot', r"YandexBot", Category.SEARCH_ENGINE, Severity.LOW,
         'Yandex search crawler', Action.RATE_LIMIT),
    _sig('DuckDuckBot', r"DuckDuckBot", Category.SEARCH_ENGINE, Severity.LOW,
         'DuckDuckGo search crawler', Action.ALLOW),

    # Aggressive scrapers
    _sig('CCBot', r"CCBot", Category.AI_SCRAPER, Severity.CRITICAL,
         'Common Crawl bot - Very aggressive', Action.BLOCK),
    _sig('Bytespider', r"Bytespider", Category.AI_SCRAPER, Severity.CRITICAL,
         'ByteDance aggressive crawler', Action.BLOCK),
    _sig('Diffbot', r"Diffbot", Category.AI_SCRAPER, Severity.HIGH,
         'Diffbot structured data extraction', Action.BLOCK),
    _sig('PetalBot', r"PetalBot", Category.SCRAPER, Severity.HIGH,
         'Huawei Petal search crawler', Action.BLOCK),
    _sig('MJ12bot', r"MJ12bot", Category.SCRAPER, Severity.CRITICAL,
         'Majestic SEO crawler - Known for aggressive crawling', Action.BLOCK),
    _sig('DataForSeoBot', r"DataForSeoBot", Category.AI_SCRAPER, Severity.HIGH,
         'SEO data scraper', Action.BLOCK),

    # SEO tools
    _sig('SemrushBot', r"SemrushBot", Category.SEO_TOOL, Severity.MEDIUM,
         'Semrush SEO analysis', Action.RATE_LIMIT, 15),
    _sig('AhrefsBot', r"AhrefsBot", Category.SEO_TOOL, Severity.MEDIUM,
         'Ahrefs SEO crawler', Action.RATE_LIMIT, 15),
    _sig('Screaming Frog', r"Screaming Frog SEO Spider", Category.SEO_TOOL, Severity.MEDIUM,
         'SEO audit tool', Action.RATE_LIMIT),

    # Social media previews
    _sig('facebookexternalhit', r"facebookexternalhit", Category.SOCIAL_MEDIA, Severity.LOW,
         'Facebook link preview', Action.ALLOW),
    _sig('Twitterbot', r"Twitterbot", Category.SOCIAL_MEDIA, Severity.LOW,
         'Twitter/X link preview', Action.ALLOW),
    _sig('LinkedInBot', r"LinkedInBot", Category.SOCIAL_MEDIA, Severity.LOW,
         'LinkedIn link preview', Action.ALLOW),
    _sig('WhatsApp', r"WhatsApp", Category.SOCIAL_MEDIA, Severity.LOW,
         'WhatsApp link preview', Action.ALLOW),
    _sig('Slackbot', r"Slackbot", Category.SOCIAL_MEDIA, Severity.LOW,
         'Slack link preview', Action.ALLOW),

    # Monitoring and security
    _sig('UptimeRobot', r"UptimeRobot", Category.MONITORING, Severity.LOW,
         'Uptime monitoring service', Action.ALLOW),
    _sig('Pingdom', r"Pingdom", Category.MONITORING, Severity.LOW,
         'Website monitoring', Action.ALLOW),
    _sig('CensysInspect', r"CensysInspect", Category.SECURITY, Severity.MEDIUM,
         'Censys internet-wide scanner', Action.RATE_LIMIT, 5),
)

# Name and classification reported for generic matches
UNKNOWN_BOT = {
    'bot_name': 'Unknown Bot',
    'category': Category.SCRAPER,
    'severity': Severity.MEDIUM,
    'description': 'Unidentified bot or scraper',
    'recommendation': Action.RATE_LIMIT,
}

# Tried in order after the signatures
GENERIC_PATTERNS = (
    # CUBOT is a phone brand
    GenericPattern(re.compile(r"(?:(?<!\bcu)bot|crawler|crawl|spider|scraper)\b", re.IGNORECASE), 0.8),
    GenericPattern(re.compile(
        r"\b(?:python-requests|python-urllib|urllib|wget|curl|axios|go-http-client|"
        r"okhttp|libwww-perl|httpx|aiohttp|scrapy)\b", re.IGNORECASE), 0.7),
    GenericPattern(re.compile(
        r"\b(?:headless|phantomjs|phantom|puppeteer|playwright|selenium)", re.IGNORECASE), 0.9),
)

SIGNATURE_CONFIDENCE = 0.95

# Combined log format:
# 127.0.0.1 - - [10/Oct/2024:13:55:36 -0700] "GET /api/data HTTP/1.1" 200 2326 "-" "Mozilla/5.0"
LOG_PATTERNS = {
    'combined': re.compile(
        r'^(?P<ip>\S+) \S+ \S+ \[(?P<timestamp>[^\]]+)\] "(?P<method>\S+) (?P<path>\S+) \S+" '
        r'(?P<status>\d+) (?P<bytes>\d+) "(?P<referrer>[^"]*)" "(?P<user_agent>[^"]*)"$'
    ),
}

LOG_TIMESTAMP_FORMAT = "%d/%b/%Y:%H:%M:%S %z"

HOSTING_PROVIDERS = (
    HostingProvider(
        key='aws', name='Amazon Web Services', free_gb_included=1,
        tiered_pricing=(
            PricingTier(10, 0.09),
            PricingTier(40, 0.085),
            PricingTier(100, 0.07),
            PricingTier(150, 0.05),
            PricingTier(math.inf, 0.03),
        ),
    ),
    HostingProvider(key='cloudflare', name='Cloudflare', cost_per_gb=0.045),
    HostingProvider(key='vercel', name='Vercel', cost_per_gb=0.40, free_gb_included=100),
    HostingProvider(key='netlify', name='Netlify', cost_per_gb=0.55, free_gb_included=100),
    HostingProvider(
        key='gcp', name='Google Cloud Platform',
        tiered_pricing=(
            PricingTier(1, 0.0),
            PricingTier(10, 0.12),
            PricingTier(150, 0.11),
            PricingTier(math.inf, 0.08),
        ),
    ),
    HostingProvider(
        key='azure', name='Microsoft Azure',
        tiered_pricing=(
            PricingTier(5, 0.087),
            PricingTier(10, 0.083),
            PricingTier(50, 0.07),
            PricingTier(150, 0.05),
            PricingTier(math.inf, 0.03),
        ),
    ),
    HostingProvider(key='digitalocean', name='DigitalOcean', cost_per_gb=0.01, free_gb_included=1000),
    HostingProvider(key='generic', name='Generic Provider', cost_per_gb=0.10),
)

DEFAULT_PROVIDER = 'generic'

# Heuristic weighting of how expensive a byte of each category is in practice.
# Overridable through the "multipliers" section of a pricing file.
CATEGORY_COST_MULTIPLIERS = {
    'ai_training': 1.5,
    'ai_scraper': 1.8,
    'ai_search': 1.2,
    'search_engine': 0.5,
    'social_media': 0.3,
    'seo_tool': 1.0,
    'scraper': 1.5,
    'unknown': 1.0,
}

# Query time ranges in hours
TIME_RANGES = {
    '1h': 1,
    '24h': 24,
    '7d': 168,
    '30d': 720,
}

DEFAULT_TIME_RANGE = '24h'

RECENT_RECORDS_LIMIT = 100
