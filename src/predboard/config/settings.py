"""TOML config loading, profiles, and trading credentials from the environment."""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

# Default config search path (project root or cwd)
_CONFIG_DIR = Path(__file__).resolve().parent.parent.parent.parent / "config"
_CWD_CONFIG = Path.cwd() / "config"


def _load_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into base. Override values take precedence."""
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _find_config_dir(config_dir: Path | None = None) -> Path:
    if config_dir is not None:
        return config_dir
    if _CWD_CONFIG.exists():
        return _CWD_CONFIG
    return _CONFIG_DIR


def load_config(profile: str | None = None, config_dir: Path | None = None) -> dict[str, Any]:
    """Load merged config from default.toml and optional profile overlay."""
    config_dir = _find_config_dir(config_dir)
    default_path = config_dir / "default.toml"
    if not default_path.exists():
        return {}
    base = _load_toml(default_path)
    if profile:
        profile_path = config_dir / f"{profile}.toml"
        if profile_path.exists():
            overlay = _load_toml(profile_path)
            base = _deep_merge(base, overlay)
    return base


def get_settings(profile: str | None = None, config_dir: Path | None = None) -> Settings:
    """Return Settings instance from merged config."""
    raw = load_config(profile, config_dir)
    return Settings.from_dict(raw)


# Placeholders used when a credential is not set. Any placeholder disables trading.
PLACEHOLDER_CREDENTIALS = {
    "PRIVATE_KEY": "0x" + "0" * 64,
    "API_KEY": "dummy-key",
    "API_SECRET": "dummy-secret",
    "PASSPHRASE": "dummy-passphrase",
}


@dataclass(frozen=True)
class TradingCredentials:
    """Wallet key and CLOB API credentials for order placement."""

    private_key: str
    api_key: str
    api_secret: str
    passphrase: str

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> TradingCredentials:
        env = os.environ if environ is None else environ

        def _get(name: str) -> str:
            return env.get(name) or PLACEHOLDER_CREDENTIALS[name]

        return cls(
            private_key=_get("PRIVATE_KEY"),
            api_key=_get("API_KEY"),
            api_secret=_get("API_SECRET"),
            passphrase=_get("PASSPHRASE"),
        )

    @property
    def is_configured(self) -> bool:
        values = {
            "PRIVATE_KEY": self.private_key,
            "API_KEY": self.api_key,
            "API_SECRET": self.api_secret,
            "PASSPHRASE": self.passphrase,
        }
        return all(v and v != PLACEHOLDER_CREDENTIALS[k] for k, v in values.items())


class Settings:
    """Application settings from TOML config."""

    def __init__(
        self,
        *,
        http: dict[str, Any] | None = None,
        polymarket: dict[str, Any] | None = None,
        kalshi: dict[str, Any] | None = None,
        display: dict[str, Any] | None = None,
        trading: dict[str, Any] | None = None,
        logging: dict[str, Any] | None = None,
    ):
        self.http = http or {}
        self.polymarket = polymarket or {}
        self.kalshi = kalshi or {}
        self.display = display or {}
        self.trading = trading or {}
        self.logging = logging or {}

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Settings:
        return cls(
            http=raw.get("http"),
            polymarket=raw.get("polymarket"),
            kalshi=raw.get("kalshi"),
            display=raw.get("display"),
            trading=raw.get("trading"),
            logging=raw.get("logging"),
        )

    # Convenience accessors with defaults
    @property
    def http_timeout(self) -> float:
        return float(self.http.get("timeout", 30.0))

    @property
    def gamma_api_base(self) -> str:
        return self.polymarket.get("gamma_api_base", "https://gamma-api.polymarket.com")

    @property
    def polymarket_page_size(self) -> int:
        return int(self.polymarket.get("page_size", 100))

    @property
    def polymarket_max_pages(self) -> int:
        return int(self.polymarket.get("max_pages", 5))

    @property
    def kalshi_api_base(self) -> str:
        return self.kalshi.get("api_base", "https://api.elections.kalshi.com/trade-api/v2")

    @property
    def kalshi_events_limit(self) -> int:
        return int(self.kalshi.get("events_limit", 200))

    @property
    def display_page_size(self) -> int:
        return int(self.display.get("page_size", 24))

    @property
    def clob_host(self) -> str:
        return self.trading.get("clob_host", "https://clob.polymarket.com")

    @property
    def chain_id(self) -> int:
        return int(self.trading.get("chain_id", 137))

    @property
    def default_fee_rate_bps(self) -> int:
        return int(self.trading.get("default_fee_rate_bps", 100))

    @property
    def trading_credentials(self) -> TradingCredentials:
        return TradingCredentials.from_env()

    @property
    def logging_level(self) -> str:
        return self.logging.get("level", "INFO").upper()

    @property
    def logging_format(self) -> str:
        return self.logging.get("format", "console")

    @property
    def logging_level_num(self) -> int:
        return getattr(logging, self.logging_level, logging.INFO)


def configure_logging(settings: Settings) -> None:
    """Configure structlog with settings. Call once at application entry."""
    import structlog

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if settings.logging_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(settings.logging_level_num),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
