"""crawlcost - Block / rate-limit / allow recommendations"""

from typing import Callable, Iterable, List, NamedTuple, Optional

from .costs import CostCalculator, format_currency
from .models import Action, BotTraffic, Category, Recommendation


class Rule(NamedTuple):
    category: Category
    min_monthly_cost: Optional[float]
    action: Action
    savings_share: float
    confidence: float
    reason: Callable[[float], str]


# Checked in order, the first rule that applies to a bot wins
RULES = (
    Rule(Category.AI_SCRAPER, 10.0, Action.BLOCK, 1.0, 0.95,
         lambda monthly: f"Aggressive scraper costing {format_currency(monthly)}/month "
                         f"with minimal SEO benefit"),
    Rule(Category.AI_TRAINING, 50.0, Action.RATE_LIMIT, 0.7, 0.85,
         lambda monthly: "AI training bot consuming excessive bandwidth. "
                         "Rate limiting can reduce costs by 70%"),
    Rule(Category.SEARCH_ENGINE, None, Action.ALLOW, 0.0, 1.0,
         lambda monthly: "Essential for SEO and organic traffic"),
    Rule(Category.SEO_TOOL, 20.0, Action.RATE_LIMIT, 0.5, 0.75,
         lambda monthly: "SEO tool with high bandwidth usage. "
                         "Consider rate limiting to reduce costs"),
)


class RecommendationEngine:
    def __init__(self, calculator: Optional[CostCalculator] = None, rules=RULES):
        self.calculator = calculator or CostCalculator()
        self.rules = tuple(rules)

    def recommend(self, bot_traffic: Iterable[BotTraffic],
                  provider: Optional[str] = None) -> List[Recommendation]:
        """One recommendation per bot that meets a rule, highest savings first.

        Bots no rule applies to are left out. Equal savings keep input order.
        """
        recommendations = []
        for bot in bot_traffic:
            monthly = self.calculator.bandwidth_cost(bot.bytes_transferred, provider).monthly
            rule = self._match(bot.category, monthly)
            if rule is None:
                continue
            recommendations.append(Recommendation(
                action=rule.action,
                target=bot.bot_name,
                reason=rule.reason(monthly),
                savings_per_month=monthly * rule.savings_share,
                confidence=rule.confidence,
            ))

        return sorted(recommendations, key=lambda r: r.savings_per_month, reverse=True)

    def _match(self, category: Optional[str], monthly_cost: float) -> Optional[Rule]:
        for rule in self.rules:
            if category != rule.category:
                continue
            if rule.min_monthly_cost is None or monthly_cost > rule.min_monthly_cost:
                return rule
        return None
