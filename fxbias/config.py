"""Configuration management for fxbias."""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional
import yaml
from dotenv import load_dotenv
from fxbias.utils.errors import ConfigurationError
from fxbias.utils.logging import setup_logging
from fxbias.utils.paths import find_project_root
import logging

logger = logging.getLogger(__name__)


DEFAULT_CURRENCIES = ["USD", "EUR", "GBP", "JPY", "CHF", "AUD", "NZD", "CAD"]

DEFAULT_INDICATORS = [
    "Manufacturing PMI",
    "Services PMI",
    "Consumer Confidence",
    "CPI",
    "Money Supply",
    "COT",
    "Central Bank",
    "Seasonality",
    "Retail Sentiment",
    "Strong vs Weak",
]


def resolve_config_path(config_path: str = "config.yaml") -> Path:
    """Honor FXBIAS_CONFIG, then the given path, then the project root."""
    env_cfg = os.getenv("FXBIAS_CONFIG")
    cfg_path = Path(env_cfg).expanduser() if env_cfg else Path(config_path)
    if not cfg_path.exists():
        candidate = find_project_root() / cfg_path.name
        if candidate.exists():
            cfg_path = candidate
    return cfg_path


class Config:
    """Application configuration."""

    def __init__(self, config_path: str = "config.yaml"):
        """
        Initialize configuration.

        Args:
            config_path: Path to YAML configuration file
        """
        self.config_path = Path(config_path)
        self._config: Dict[str, Any] = {}
        self._load()

    def _load(self) -> None:
        """Load configuration from YAML and environment."""
        load_dotenv()

        if not self.config_path.exists():
            raise ConfigurationError(f"Config file not found: {self.config_path}")

        with open(self.config_path, 'r') as f:
            try:
                self._config = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in {self.config_path}: {e}") from e

        if not self._config:
            raise ConfigurationError(f"Empty configuration file: {self.config_path}")

        self._validate()

        log_config = self._config.get('logging', {})
        setup_logging(
            level=os.getenv('LOG_LEVEL', log_config.get('level', 'INFO')),
            log_file=log_config.get('file'),
            format_type=log_config.get('format', 'json'),
            enabled=log_config.get('enabled', True)
        )

        logger.info("Configuration loaded successfully")

    def _validate(self) -> None:
        """Validate required configuration sections."""
        required_sections = ['app', 'engine']

        for section in required_sections:
            if section not in self._config:
                raise ConfigurationError(f"Missing required config section: {section}")

        currencies = self._config['engine'].get('currencies')
        if currencies is not None and not isinstance(currencies, list):
            raise ConfigurationError("engine.currencies must be a list")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by dot-separated key.

        Args:
            key: Dot-separated key (e.g., "engine.cache_ttl_minutes")
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split('.')
        value = self._config

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default

        return value

    def get_env(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get environment variable."""
        return os.getenv(key, default)

    def require_env(self, key: str) -> str:
        """Get required environment variable or raise error."""
        value = os.getenv(key)
        if value is None:
            raise ConfigurationError(f"Required environment variable not set: {key}")
        return value

    @property
    def app_name(self) -> str:
        return self.get('app.name', 'fxbias')

    @property
    def app_version(self) -> str:
        return self.get('app.version', '0.1.0')

    @property
    def debug(self) -> bool:
        return self.get('app.debug', False)

    @property
    def state_path(self) -> str:
        """Path of the JSON state file."""
        return self.get('storage.state_path', 'data/fxbias_state.json')

    @property
    def cache_ttl(self) -> int:
        """Cache TTL in seconds."""
        return int(self.get('engine.cache_ttl_minutes', 30)) * 60


@dataclass
class RetrySetting:
    enabled: bool = True
    attempts: int = 2


@dataclass
class RetrySettings:
    analyze_all: RetrySetting = field(default_factory=RetrySetting)
    generate_recap: RetrySetting = field(default_factory=RetrySetting)


@dataclass
class MarketDataSettings:
    base_url: str = "https://www.alphavantage.co/query"
    timeout: float = 10.0
    api_key_env: str = "ALPHA_VANTAGE_API_KEY"
    equity_symbol: str = "SPY"
    volatility_symbol: str = "VIXY"  # ETF proxy for the VIX
    carry_base: str = "AUD"
    carry_quote: str = "JPY"


@dataclass
class EngineSettings:
    currencies: List[str] = field(default_factory=lambda: list(DEFAULT_CURRENCIES))
    indicators: List[str] = field(default_factory=lambda: list(DEFAULT_INDICATORS))
    cache_ttl_seconds: int = 30 * 60
    use_score_modifier: bool = True
    use_risk_modifier: bool = True
    retry: RetrySettings = field(default_factory=RetrySettings)
    market_data: MarketDataSettings = field(default_factory=MarketDataSettings)
    state_path: str = "data/fxbias_state.json"

    @classmethod
    def from_config(cls, cfg: Config) -> "EngineSettings":
        defaults = cls()

        def _retry(name: str) -> RetrySetting:
            src = cfg.get(f"engine.retry.{name}", {}) or {}
            return RetrySetting(
                enabled=bool(src.get("enabled", True)),
                attempts=int(src.get("attempts", 2)),
            )

        md = cfg.get("market_data", {}) or {}
        md_defaults = MarketDataSettings()
        market_data = MarketDataSettings(
            base_url=str(md.get("base_url", md_defaults.base_url)),
            timeout=float(md.get("timeout", md_defaults.timeout)),
            api_key_env=str(md.get("api_key_env", md_defaults.api_key_env)),
            equity_symbol=str(md.get("equity_symbol", md_defaults.equity_symbol)),
            volatility_symbol=str(md.get("volatility_symbol", md_defaults.volatility_symbol)),
            carry_base=str(md.get("carry_base", md_defaults.carry_base)),
            carry_quote=str(md.get("carry_quote", md_defaults.carry_quote)),
        )

        return cls(
            currencies=list(cfg.get("engine.currencies", defaults.currencies)),
            indicators=list(cfg.get("engine.indicators", defaults.indicators)),
            cache_ttl_seconds=cfg.cache_ttl,
            use_score_modifier=bool(cfg.get("engine.use_score_modifier", True)),
            use_risk_modifier=bool(cfg.get("engine.use_risk_modifier", True)),
            retry=RetrySettings(analyze_all=_retry("analyze_all"), generate_recap=_retry("generate_recap")),
            market_data=market_data,
            state_path=cfg.state_path,
        )


_config: Optional[Config] = None


def load_config(config_path: str = "config.yaml") -> Config:
    """Load and return global configuration instance."""
    global _config
    if _config is None:
        _config = Config(str(resolve_config_path(config_path)))
    return _config


def get_config() -> Config:
    """Get global configuration instance."""
    if _config is None:
        raise ConfigurationError("Configuration not loaded. Call load_config() first.")
    return _config


def reset_config() -> None:
    """Forget the loaded configuration (tests, CLI --config switches)."""
    global _config
    _config = None
