"""Tests for configuration module."""
import pytest
import yaml

from fxbias.config import (
    DEFAULT_CURRENCIES,
    Config,
    EngineSettings,
    get_config,
    load_config,
)
from fxbias.utils.errors import ConfigurationError


def test_config_load(temp_config_file):
    """Test basic config loading."""
    config = Config(temp_config_file)
    assert config.app_name == 'Test App'
    assert config.app_version == '0.1.0'
    assert config.debug is True


def test_config_get_nested(temp_config_file):
    """Test getting nested config values."""
    config = Config(temp_config_file)
    assert config.get('engine.retry.analyze_all.attempts') == 3
    assert config.get('market_data.volatility_symbol') == 'VXX'


def test_config_get_default(temp_config_file):
    """Test default values."""
    config = Config(temp_config_file)
    assert config.get('nonexistent.key', 'default') == 'default'


def test_config_cache_ttl_in_seconds(temp_config_file):
    assert Config(temp_config_file).cache_ttl == 300


def test_config_missing_file():
    """Test error on missing config file."""
    with pytest.raises(ConfigurationError):
        Config('nonexistent.yaml')


def test_config_missing_section(tmp_path):
    path = tmp_path / 'config.yaml'
    path.write_text(yaml.dump({'app': {'name': 'x'}}))
    with pytest.raises(ConfigurationError, match="engine"):
        Config(str(path))


def test_config_require_env(temp_config_file, monkeypatch):
    config = Config(temp_config_file)
    monkeypatch.setenv('FXBIAS_TEST_KEY', 'abc')
    assert config.require_env('FXBIAS_TEST_KEY') == 'abc'
    monkeypatch.delenv('FXBIAS_TEST_KEY')
    with pytest.raises(ConfigurationError):
        config.require_env('FXBIAS_TEST_KEY')


def test_engine_settings_from_config(temp_config_file):
    settings = EngineSettings.from_config(Config(temp_config_file))
    assert settings.currencies == ['USD', 'EUR', 'JPY', 'AUD']
    assert settings.cache_ttl_seconds == 300
    assert settings.retry.analyze_all.attempts == 3
    assert settings.retry.generate_recap.enabled is False
    assert settings.market_data.base_url == 'https://example.test/query'
    assert settings.market_data.volatility_symbol == 'VXX'
    assert settings.market_data.equity_symbol == 'SPY'
    assert settings.state_path.endswith('state.json')


def test_engine_settings_defaults():
    settings = EngineSettings()
    assert settings.currencies == DEFAULT_CURRENCIES
    assert settings.cache_ttl_seconds == 1800
    assert settings.retry.analyze_all.attempts == 2


def test_global_config_accessors(temp_config_file, monkeypatch):
    with pytest.raises(ConfigurationError):
        get_config()
    monkeypatch.setenv('FXBIAS_CONFIG', temp_config_file)
    config = load_config()
    assert get_config() is config
    assert config.app_name == 'Test App'
