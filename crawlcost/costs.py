"""crawlcost - Bandwidth cost calculation"""

import math
from typing import Dict, Iterable, List, Optional, Sequence

from .config import EngineConfig, default_config
from .models import BotTraffic, CostBreakdown, PricingTier


BYTES_PER_GB = 1024 ** 3


def tiered_cost(gb: float, tiers: Sequence[PricingTier]) -> float:
    """Bill ``gb`` against ascending tiers, each one up to its bound"""
    remaining = gb
    total = 0.0
    previous_bound = 0.0

    for tier in tiers:
        if remaining <= 0:
            break
        tier_gb = min(remaining, tier.up_to_gb - previous_bound)
        if tier_gb > 0:
            total += tier_gb * tier.cost_per_gb
            remaining -= tier_gb
        previous_bound = tier.up_to_gb

    return total


class CostCalculator:
    """Bandwidth cost of bot traffic per hosting provider"""

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or default_config()

    def bandwidth_cost(self, bytes_transferred: float, provider: Optional[str] = None) -> CostBreakdown:
        if bytes_transferred < 0:
            raise ValueError(f"bytes_transferred must be non-negative, got {bytes_transferred}")

        pricing = self.config.provider(provider or self.config.default_provider)
        gb = bytes_transferred / BYTES_PER_GB
        billable_gb = max(0.0, gb - pricing.free_gb_included)

        if pricing.is_tiered:
            cost = tiered_cost(billable_gb, pricing.tiered_pricing)
        else:
            cost = billable_gb * pricing.cost_per_gb

        return CostBreakdown(gb=gb, cost=cost)

    def savings_by_category(self, bot_traffic: Iterable[BotTraffic],
                            provider: Optional[str] = None) -> Dict:
        """Cost of each category after weighting bytes by its cost multiplier.

        Every traffic record is costed on its own and the results are summed
        per category.
        """
        by_category: Dict[str, CostBreakdown] = {}
        total = 0.0

        for bot in bot_traffic:
            category = str(bot.category) if bot.category else 'unknown'
            adjusted = bot.bytes_transferred * self.config.multiplier(bot.category)
            cost = self.bandwidth_cost(adjusted, provider)
            if category in by_category:
                by_category[category] = by_category[category] + cost
            else:
                by_category[category] = cost
            total += cost.total

        return {
            'total': total,
            'monthly': total * 30,
            'yearly': total * 365,
            'by_category': by_category,
        }

    def roi(self, daily_bot_bytes: float, provider: Optional[str] = None,
            implementation_cost: float = 0.0) -> Dict:
        """Return on blocking ``daily_bot_bytes`` of traffic.

        ``roi`` is ``math.inf`` when nothing was spent; ``break_even_days`` is
        ``None`` when there is a cost but the traffic costs nothing.
        """
        if implementation_cost < 0:
            raise ValueError(f"implementation_cost must be non-negative, got {implementation_cost}")

        daily = self.bandwidth_cost(daily_bot_bytes, provider)

        if implementation_cost == 0:
            break_even_days = 0
            roi = math.inf
        else:
            break_even_days = math.ceil(implementation_cost / daily.total) if daily.total > 0 else None
            roi = (daily.yearly - implementation_cost) / implementation_cost * 100

        return {
            'break_even_days': break_even_days,
            'monthly_savings': daily.monthly,
            'yearly_savings': daily.yearly,
            'roi': roi,
        }

    def supported_providers(self) -> List[Dict[str, str]]:
        return [{'value': key, 'label': p.name} for key, p in self.config.providers.items()]


def format_bytes(nbytes: float) -> str:
    if nbytes <= 0:
        return '0 B'
    sizes = ['B', 'KB', 'MB', 'GB', 'TB', 'PB']
    i = 0
    while nbytes >= 1024 ** (i + 1) and i < len(sizes) - 1:
        i += 1
    return f"{round(nbytes / 1024 ** i, 2):g} {sizes[i]}"


def format_currency(amount: float) -> str:
    if math.isinf(amount):
        return 'unbounded'
    sign = '-' if amount < 0 else ''
    return f"{sign}${abs(amount):,.2f}"
