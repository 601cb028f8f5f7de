"""Configuration: TOML settings, profiles, and logging setup."""

from predboard.config.settings import (
    Settings,
    TradingCredentials,
    configure_logging,
    get_settings,
    load_config,
)

__all__ = ["Settings", "TradingCredentials", "configure_logging", "get_settings", "load_config"]
