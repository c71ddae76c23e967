"""Configuration primitives for the number formatter."""
from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Callable, Optional

from dotenv import load_dotenv

from .formatting import NumberFormat


def _load_env(dotenv_path: Optional[Path] = None) -> None:
    """Load the .env file once for the process."""

    if getattr(_load_env, "_loaded", False):  # type: ignore[attr-defined]
        return

    load_dotenv(dotenv_path)
    setattr(_load_env, "_loaded", True)  # type: ignore[attr-defined]


def _optional_env(name: str) -> Optional[str]:
    value = os.getenv(name, "").strip()
    return value or None


def _parse_decimals(value: str) -> int:
    try:
        decimals = int(value)
    except ValueError:
        raise ValueError(f"NUMFMT_DECIMALS must be an integer, got {value!r}") from None
    if decimals < 0:
        raise ValueError(f"NUMFMT_DECIMALS must not be negative, got {decimals}")
    return decimals


@dataclass(frozen=True)
class FormatterConfig:
    """Locale and currency the formatter falls back to; ``None`` means derive."""

    locale: Optional[str] = None
    currency: Optional[str] = None


@dataclass(frozen=True)
class ResolvedConfig:
    locale: str
    currency: str


def resolve_config(
    config: FormatterConfig,
    *,
    default_locale: Callable[[], str],
    currency_for_locale: Callable[[str], str],
) -> ResolvedConfig:
    """Fill the unset fields of ``config`` using the given lookups."""

    locale = config.locale or default_locale()
    currency = config.currency or currency_for_locale(locale)
    return ResolvedConfig(locale=locale, currency=currency)


def _number_format_from_env() -> NumberFormat:
    defaults = NumberFormat()
    return NumberFormat(
        decimals=_parse_decimals(os.getenv("NUMFMT_DECIMALS", str(defaults.decimals))),
        decimal_point=os.getenv("NUMFMT_DECIMAL_POINT", defaults.decimal_point),
        thousands_sep=os.getenv("NUMFMT_THOUSANDS_SEP", defaults.thousands_sep),
    )


@dataclass(frozen=True)
class Settings:
    """Container for formatter configuration."""

    formatter: FormatterConfig
    number_format: NumberFormat
    log_level: str = "WARNING"
    log_dir: Optional[Path] = None

    @classmethod
    def from_env(cls, dotenv_path: Optional[Path] = None) -> "Settings":
        """Build ``Settings`` using environment variables (optionally from ``.env``)."""

        _load_env(dotenv_path)

        formatter = FormatterConfig(
            locale=_optional_env("NUMFMT_LOCALE"),
            currency=_optional_env("NUMFMT_CURRENCY"),
        )
        log_dir = _optional_env("NUMFMT_LOG_DIR")

        return cls(
            formatter=formatter,
            number_format=_number_format_from_env(),
            log_level=os.getenv("NUMFMT_LOG_LEVEL", "WARNING").upper(),
            log_dir=Path(log_dir) if log_dir else None,
        )


@lru_cache()
def get_settings(dotenv_path: Optional[Path] = None) -> Settings:
    """Return a cached settings instance."""

    return Settings.from_env(dotenv_path=dotenv_path)
