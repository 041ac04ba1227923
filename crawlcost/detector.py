"""crawlcost - Bot detection"""

from typing import Iterable, List, Optional

from .config import EngineConfig, default_config
from .models import BotDetectionResult, BotSignature
from .patterns import SIGNATURE_CONFIDENCE, UNKNOWN_BOT

NOT_A_BOT = BotDetectionResult(is_bot=False, confidence=1.0)


class BotDetector:
    """Classifies user agents against the signature registry.

    Signatures are tried in declaration order and the first match wins, so a
    specific signature must be declared before any broader one that could
    also match. When nothing matches, the generic heuristics are tried the
    same way.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or default_config()
        self._by_name = {s.name: s for s in self.config.signatures}

    def detect(self, user_agent: Optional[str]) -> BotDetectionResult:
        if not user_agent:
            return NOT_A_BOT

        for signature in self.config.signatures:
            if signature.matches(user_agent):
                return BotDetectionResult(
                    is_bot=True,
                    bot_name=signature.name,
                    category=signature.category,
                    severity=signature.severity,
                    description=signature.description,
                    recommendation=signature.recommendation,
                    confidence=SIGNATURE_CONFIDENCE,
                )

        for generic in self.config.generic_patterns:
            if generic.pattern.search(user_agent):
                return BotDetectionResult(is_bot=True, confidence=generic.confidence, **UNKNOWN_BOT)

        return NOT_A_BOT

    def detect_batch(self, user_agents: Iterable[Optional[str]]) -> List[BotDetectionResult]:
        return [self.detect(ua) for ua in user_agents]

    def signature(self, name: str) -> Optional[BotSignature]:
        return self._by_name.get(name)
