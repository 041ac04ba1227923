"""crawlcost - Engine configuration"""

import json
import logging
import math
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple

from .errors import ConfigError
from .models import BotSignature, GenericPattern, HostingProvider, PricingTier
from .patterns import (
    BOT_SIGNATURES, CATEGORY_COST_MULTIPLIERS, DEFAULT_PROVIDER, GENERIC_PATTERNS, HOSTING_PROVIDERS,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineConfig:
    """Read-only tables shared by the detector and the cost calculator.

    Build one at start-up with :func:`default_config` or :func:`load_config`
    and hand it to the components that need it.
    """
    signatures: Tuple[BotSignature, ...] = BOT_SIGNATURES
    generic_patterns: Tuple[GenericPattern, ...] = GENERIC_PATTERNS
    providers: Mapping[str, HostingProvider] = field(
        default_factory=lambda: _freeze({p.key: p for p in HOSTING_PROVIDERS}))
    category_multipliers: Mapping[str, float] = field(
        default_factory=lambda: _freeze(CATEGORY_COST_MULTIPLIERS))
    default_provider: str = DEFAULT_PROVIDER

    def __post_init__(self):
        object.__setattr__(self, 'signatures', tuple(self.signatures))
        object.__setattr__(self, 'generic_patterns', tuple(self.generic_patterns))
        object.__setattr__(self, 'providers', _freeze(self.providers))
        object.__setattr__(self, 'category_multipliers', _freeze(self.category_multipliers))
        if self.default_provider not in self.providers:
            raise ConfigError(f"default provider '{self.default_provider}' is not configured")
        names = [s.name for s in self.signatures]
        if len(names) != len(set(names)):
            raise ConfigError("bot signature names must be unique")

    def provider(self, key: Optional[str]) -> HostingProvider:
        """Return the provider for ``key``, falling back to the default one"""
        if key in self.providers:
            return self.providers[key]
        logger.warning("Unknown hosting provider %r, using %r", key, self.default_provider)
        return self.providers[self.default_provider]

    def multiplier(self, category: Optional[str]) -> float:
        if category is None:
            return self.category_multipliers.get('unknown', 1.0)
        return self.category_multipliers.get(str(category), 1.0)

    def with_providers(self, providers: Iterable[HostingProvider]) -> 'EngineConfig':
        merged = dict(self.providers)
        merged.update((p.key, p) for p in providers)
        return replace(self, providers=merged)

    def with_multipliers(self, multipliers: Mapping[str, float]) -> 'EngineConfig':
        merged = dict(self.category_multipliers)
        merged.update(multipliers)
        return replace(self, category_multipliers=merged)


def _freeze(mapping: Mapping) -> Mapping:
    return MappingProxyType(dict(mapping))


def default_config() -> EngineConfig:
    return EngineConfig()


def load_config(path: str, base: Optional[EngineConfig] = None) -> EngineConfig:
    """Load pricing overrides from a JSON file.

    The file may hold a ``providers`` object keyed by provider key and a
    ``multipliers`` object keyed by category::

        {
          "providers": {
            "hetzner": {"name": "Hetzner", "cost_per_gb": 0.001, "free_gb_included": 20000},
            "fastly": {"name": "Fastly", "tiered_pricing": [
              {"up_to_gb": 10000, "cost_per_gb": 0.12},
              {"up_to_gb": null, "cost_per_gb": 0.08}
            ]}
          },
          "multipliers": {"ai_scraper": 2.0}
        }

    A tier with ``"up_to_gb": null`` is unbounded.
    """
    file_path = Path(path)
    if not file_path.exists():
        raise ConfigError(f"Pricing file not found: {path}")

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be an object")

    config = base or default_config()
    providers = data.get('providers', {})
    if not isinstance(providers, dict):
        raise ConfigError(f"{path}: 'providers' must be an object")
    config = config.with_providers(
        provider_from_dict(key, entry) for key, entry in providers.items())

    multipliers = data.get('multipliers', {})
    if not isinstance(multipliers, dict):
        raise ConfigError(f"{path}: 'multipliers' must be an object")
    config = config.with_multipliers({k: _number(v, f"multiplier '{k}'") for k, v in multipliers.items()})

    if 'default_provider' in data:
        config = replace(config, default_provider=data['default_provider'])

    logger.debug("Loaded %d provider(s) and %d multiplier(s) from %s",
                 len(providers), len(multipliers), path)
    return config


def provider_from_dict(key: str, data: Dict) -> HostingProvider:
    if not isinstance(data, dict):
        raise ConfigError(f"provider '{key}' must be an object")

    tiers = data.get('tiered_pricing')
    if tiers is not None:
        if not isinstance(tiers, list):
            raise ConfigError(f"provider '{key}': tiered_pricing must be a list")
        parsed = []
        for tier in tiers:
            if not isinstance(tier, dict):
                raise ConfigError(f"provider '{key}': each tier must be an object")
            bound = tier.get('up_to_gb')
            parsed.append(PricingTier(
                up_to_gb=math.inf if bound is None else _number(bound, 'up_to_gb'),
                cost_per_gb=_number(tier.get('cost_per_gb'), 'cost_per_gb'),
            ))
        tiers = tuple(parsed)

    cost = data.get('cost_per_gb')
    return HostingProvider(
        key=key,
        name=data.get('name', key),
        cost_per_gb=None if cost is None else _number(cost, 'cost_per_gb'),
        free_gb_included=_number(data.get('free_gb_included', 0), 'free_gb_included'),
        tiered_pricing=tiers,
    )


def _number(value, label: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{label} must be a number, got {value!r}")
    return float(value)
