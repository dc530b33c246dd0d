"""Configuration loading for xoso_digest."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Tuple

from dotenv import load_dotenv

from .models import Source

SOURCES: Tuple[Source, ...] = (
    Source("Miền Bắc", "https://xosodaiphat.com/ket-qua-xo-so-mien-bac-xsmb.rss"),
    Source("Miền Trung", "https://xosodaiphat.com/ket-qua-xo-so-mien-trung-xsmt.rss"),
    Source("Miền Nam", "https://xosodaiphat.com/ket-qua-xo-so-mien-nam-xsmn.rss"),
)

# Every day at 18:30 Vietnam time, after the southern draw closes.
SCHEDULE_CRON = "30 18 * * *"
SCHEDULE_TIMEZONE = "Asia/Ho_Chi_Minh"

TELEGRAM_API_URL = "https://api.telegram.org/bot{token}/sendMessage"
REPORT_HEADING = "🎰 *Kết quả xổ số hôm nay*"

DEFAULT_ENV_FILE = ".env"
_TRUE_VALUES = {"1", "true", "yes", "on"}


class ConfigError(ValueError):
    """Raised when required configuration is missing or invalid."""


@dataclass
class LoggingConfig:
    level: str = "INFO"
    file: Optional[str] = None


@dataclass
class Settings:
    """Runtime settings, built once at startup."""

    telegram_token: str
    telegram_chat_id: str
    request_timeout: float = 10.0
    concurrency: int = 3
    skip_empty_report: bool = False
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_env_file(path: str = DEFAULT_ENV_FILE) -> bool:
    """Populate ``os.environ`` from a dotenv file without overriding it."""
    env_path = Path(path)
    if not env_path.exists():
        return False
    return load_dotenv(env_path, override=False)


def parse_logging_config(environ: Optional[Mapping[str, str]] = None) -> LoggingConfig:
    env = os.environ if environ is None else environ
    return LoggingConfig(
        level=env.get("LOG_LEVEL") or "INFO",
        file=env.get("LOG_FILE") or None,
    )


def _parse_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {raw!r}")
    return value


def _parse_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc
    if value < 1:
        raise ConfigError(f"{name} must be at least 1, got {raw!r}")
    return value


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build ``Settings`` from the environment.

    ``TELEGRAM_TOKEN`` and ``TELEGRAM_TO`` are required.
    """
    env = os.environ if environ is None else environ

    token = (env.get("TELEGRAM_TOKEN") or "").strip()
    chat_id = (env.get("TELEGRAM_TO") or "").strip()
    missing = [
        name
        for name, value in (("TELEGRAM_TOKEN", token), ("TELEGRAM_TO", chat_id))
        if not value
    ]
    if missing:
        raise ConfigError(f"Missing required settings: {', '.join(missing)}")

    return Settings(
        telegram_token=token,
        telegram_chat_id=chat_id,
        request_timeout=_parse_float(env, "REQUEST_TIMEOUT", 10.0),
        concurrency=_parse_int(env, "FETCH_CONCURRENCY", 3),
        skip_empty_report=(env.get("SKIP_EMPTY_REPORT") or "").strip().lower()
        in _TRUE_VALUES,
        logging=parse_logging_config(env),
    )
