"""
Client Settings

Library-wide settings loaded from an optional ``statslite_config`` module
(see statslite_config.example.py) with environment variable overrides.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .backends.http import REPORT_URL

DEFAULT_TIMEOUT = 10.0


def _env_flag(name: str) -> Optional[bool]:
    value = os.environ.get(name)
    if value is None:
        return None
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    """Runtime settings for the statistics client"""

    report_url: str = REPORT_URL
    timeout: float = DEFAULT_TIMEOUT
    debug: bool = False
    config_dir: Path = field(default_factory=Path.cwd)


def load_settings() -> Settings:
    """
    Load settings from statslite_config.py and the environment

    Environment variables STATSLITE_DEBUG, STATSLITE_REPORT_URL and
    STATSLITE_CONFIG_DIR take precedence over the config module.

    Returns:
        Settings instance (defaults when nothing is configured)
    """
    settings = Settings()

    try:
        import statslite_config as config
    except ImportError:
        config = None

    if config is not None:
        settings.report_url = getattr(config, 'REPORT_URL', settings.report_url)
        settings.timeout = float(getattr(config, 'TIMEOUT', settings.timeout))
        settings.debug = bool(getattr(config, 'DEBUG', settings.debug))
        config_dir = getattr(config, 'CONFIG_DIR', None)
        if config_dir:
            settings.config_dir = Path(config_dir)

    debug = _env_flag("STATSLITE_DEBUG")
    if debug is not None:
        settings.debug = debug
    if os.environ.get("STATSLITE_REPORT_URL"):
        settings.report_url = os.environ["STATSLITE_REPORT_URL"]
    if os.environ.get("STATSLITE_CONFIG_DIR"):
        settings.config_dir = Path(os.environ["STATSLITE_CONFIG_DIR"])

    return settings
