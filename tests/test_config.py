"""
Unit tests for engine configuration and pricing files
"""

import json
import math

import pytest

from crawlcost.config import EngineConfig, load_config
from crawlcost.costs import BYTES_PER_GB, CostCalculator
from crawlcost.errors import ConfigError
from crawlcost.models import HostingProvider, PricingTier


def _write(tmp_path, data):
    path = tmp_path / "pricing.json"
    path.write_text(json.dumps(data) if not isinstance(data, str) else data)
    return str(path)


class TestHostingProviderValidation:

    def test_needs_exactly_one_pricing_shape(self):
        with pytest.raises(ConfigError):
            HostingProvider(key='x', name='X')
        with pytest.raises(ConfigError):
            HostingProvider(key='x', name='X', cost_per_gb=0.1,
                            tiered_pricing=(PricingTier(math.inf, 0.1),))

    def test_rejects_non_increasing_bounds(self):
        with pytest.raises(ConfigError, match="strictly increase"):
            HostingProvider(key='x', name='X', tiered_pricing=(
                PricingTier(10, 0.1), PricingTier(5, 0.05), PricingTier(math.inf, 0.01)))

    def test_rejects_bounded_last_tier(self):
        with pytest.raises(ConfigError, match="unbounded"):
            HostingProvider(key='x', name='X', tiered_pricing=(PricingTier(10, 0.1),))

    def test_rejects_negative_rates(self):
        with pytest.raises(ConfigError):
            HostingProvider(key='x', name='X', cost_per_gb=-0.1)
        with pytest.raises(ConfigError):
            HostingProvider(key='x', name='X', tiered_pricing=(PricingTier(math.inf, -1),))

    def test_rejects_empty_tiers(self):
        with pytest.raises(ConfigError):
            HostingProvider(key='x', name='X', tiered_pricing=())


class TestEngineConfig:

    def test_defaults(self, config):
        assert config.default_provider == 'generic'
        assert config.providers['generic'].cost_per_gb == 0.10
        assert config.multiplier('ai_scraper') == 1.8
        assert config.multiplier('no_such_category') == 1.0
        assert config.multiplier(None) == 1.0

    def test_tables_are_read_only(self, config):
        with pytest.raises(TypeError):
            config.providers['evil'] = None
        with pytest.raises(TypeError):
            config.category_multipliers['ai_scraper'] = 0

    def test_unknown_default_provider(self):
        with pytest.raises(ConfigError):
            EngineConfig(default_provider='nowhere')

    def test_with_providers_returns_copy(self, config):
        extra = HostingProvider(key='tiny', name='Tiny Host', cost_per_gb=1.0)

        updated = config.with_providers([extra])

        assert 'tiny' in updated.providers
        assert 'tiny' not in config.providers


class TestLoadConfig:

    def test_adds_providers_and_multipliers(self, tmp_path):
        path = _write(tmp_path, {
            "providers": {
                "fastly": {"name": "Fastly", "tiered_pricing": [
                    {"up_to_gb": 10, "cost_per_gb": 0.12},
                    {"up_to_gb": None, "cost_per_gb": 0.08},
                ]},
                "generic": {"name": "Generic", "cost_per_gb": 0.2},
            },
            "multipliers": {"ai_scraper": 2.0},
        })

        config = load_config(path)
        calculator = CostCalculator(config)

        assert config.providers['fastly'].name == 'Fastly'
        assert math.isinf(config.providers['fastly'].tiered_pricing[-1].up_to_gb)
        assert calculator.bandwidth_cost(20 * BYTES_PER_GB, 'fastly').total == pytest.approx(2.0)
        assert calculator.bandwidth_cost(BYTES_PER_GB).total == pytest.approx(0.2)
        assert config.multiplier('ai_scraper') == 2.0
        assert config.multiplier('ai_training') == 1.5
        assert 'aws' in config.providers

    def test_default_provider_override(self, tmp_path):
        config = load_config(_write(tmp_path, {"default_provider": "aws"}))
        assert config.default_provider == 'aws'

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(str(tmp_path / "absent.json"))

    @pytest.mark.parametrize("data", [
        "{broken",
        [],
        {"providers": []},
        {"providers": {"bad": {"name": "Bad"}}},
        {"providers": {"bad": {"cost_per_gb": "cheap"}}},
        {"providers": {"bad": {"tiered_pricing": [{"up_to_gb": 10, "cost_per_gb": 0.1}]}}},
        {"providers": {"bad": {"tiered_pricing": ["oops"]}}},
        {"multipliers": {"ai_scraper": "high"}},
        {"default_provider": "nowhere"},
    ])
    def test_invalid_files(self, tmp_path, data):
        with pytest.raises(ConfigError):
            load_config(_write(tmp_path, data))
