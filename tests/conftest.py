"""Pytest configuration and fixtures."""
import logging

import pytest
import yaml

from fxbias.cache import TTLCache
from fxbias.config import reset_config


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def temp_config_file(tmp_path):
    """Create a temporary config file for testing."""
    config_data = {
        'app': {
            'name': 'Test App',
            'version': '0.1.0',
            'debug': True
        },
        'engine': {
            'currencies': ['USD', 'EUR', 'JPY', 'AUD'],
            'cache_ttl_minutes': 5,
            'use_score_modifier': True,
            'use_risk_modifier': True,
            'retry': {
                'analyze_all': {'enabled': True, 'attempts': 3},
                'generate_recap': {'enabled': False, 'attempts': 4},
            },
        },
        'market_data': {
            'base_url': 'https://example.test/query',
            'timeout': 5,
            'volatility_symbol': 'VXX',
        },
        'storage': {
            'state_path': str(tmp_path / 'state.json'),
        },
        'logging': {
            'level': 'WARNING',
            'format': 'text'
        }
    }

    config_path = tmp_path / 'config.yaml'
    with open(config_path, 'w') as f:
        yaml.dump(config_data, f)

    yield str(config_path)


@pytest.fixture(autouse=True)
def reset_global_config():
    """Forget the loaded configuration and undo its logging setup around each test."""
    root = logging.getLogger()
    level = root.level
    reset_config()
    yield
    reset_config()
    for handler in list(root.handlers):
        if not type(handler).__module__.startswith("_pytest"):
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    """Fresh cache on the fake clock."""
    return TTLCache(ttl_seconds=30 * 60, clock=clock)
