"""crawlcost - robots.txt generation"""

import math
from datetime import datetime
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from .detector import BotDetector
from .models import Action, Recommendation

ALLOWED_SEARCH_ENGINES = ('Googlebot', 'bingbot')

DEFAULT_CRAWL_DELAY = 10


def render_robots_txt(blocked_bots: Iterable[str], rate_limited: Mapping[str, float],
                      sitemap: str = '/sitemap.xml',
                      generated_at: Optional[datetime] = None) -> str:
    """Render a robots.txt that blocks and slows down the given bots.

    Output only depends on the arguments, in the order given.
    """
    lines = ['# crawlcost - Generated robots.txt']
    if generated_at is not None:
        lines.append(f"# Generated: {generated_at.isoformat()}")
    lines.append('')

    lines.append('# Search Engines (Allowed)')
    for bot in ALLOWED_SEARCH_ENGINES:
        lines += [f"User-agent: {bot}", 'Allow: /', '']

    blocked_bots = list(blocked_bots)
    if blocked_bots:
        lines.append('# Blocked Bots')
        for bot in blocked_bots:
            lines += [f"User-agent: {bot}", 'Disallow: /', '']

    if rate_limited:
        lines.append('# Rate Limited Bots')
        for bot, delay in rate_limited.items():
            lines += [f"User-agent: {bot}", f"Crawl-delay: {_delay(delay)}", 'Allow: /', '']

    lines += ['# Default', 'User-agent: *', 'Allow: /', f"Sitemap: {sitemap}"]
    return '\n'.join(lines) + '\n'


def policy_from_recommendations(recommendations: Iterable[Recommendation],
                                detector: Optional[BotDetector] = None
                                ) -> Tuple[List[str], Dict[str, int]]:
    """Split recommendations into blocked bots and per-bot crawl delays.

    The delay spaces requests to the signature's requests-per-minute limit.
    """
    detector = detector or BotDetector()
    blocked: List[str] = []
    rate_limited: Dict[str, int] = {}

    for rec in recommendations:
        if rec.action == Action.BLOCK and rec.target not in blocked:
            blocked.append(rec.target)
        elif rec.action == Action.RATE_LIMIT and rec.target not in rate_limited:
            signature = detector.signature(rec.target)
            if signature is not None and signature.rate_limit:
                rate_limited[rec.target] = math.ceil(60 / signature.rate_limit)
            else:
                rate_limited[rec.target] = DEFAULT_CRAWL_DELAY

    return blocked, rate_limited


def _delay(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(value)
