from __future__ import annotations

from pathlib import Path

import pytest

from numfmt.core.config import (
    FormatterConfig,
    ResolvedConfig,
    Settings,
    get_settings,
    resolve_config,
)
from numfmt.core.formatting import NumberFormat


def test_get_settings_uses_default_configuration() -> None:
    settings = get_settings()

    assert settings.formatter == FormatterConfig(locale=None, currency=None)
    assert settings.number_format == NumberFormat(0, ".", ",")
    assert settings.log_level == "WARNING"
    assert settings.log_dir is None


def test_settings_read_environment(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("NUMFMT_LOCALE", "fr_FR")
    monkeypatch.setenv("NUMFMT_CURRENCY", "EUR")
    monkeypatch.setenv("NUMFMT_DECIMALS", "2")
    monkeypatch.setenv("NUMFMT_LOG_LEVEL", "debug")
    monkeypatch.setenv("NUMFMT_LOG_DIR", str(tmp_path))

    settings = Settings.from_env()

    assert settings.formatter == FormatterConfig(locale="fr_FR", currency="EUR")
    assert settings.number_format.decimals == 2
    assert settings.log_level == "DEBUG"
    assert settings.log_dir == Path(tmp_path)


def test_blank_locale_counts_as_unset(monkeypatch) -> None:
    monkeypatch.setenv("NUMFMT_LOCALE", "  ")

    assert Settings.from_env().formatter.locale is None


@pytest.mark.parametrize("value", ["two", "-1"])
def test_invalid_decimals_are_rejected(monkeypatch, value) -> None:
    monkeypatch.setenv("NUMFMT_DECIMALS", value)

    with pytest.raises(ValueError):
        Settings.from_env()


def test_resolve_config_fills_missing_fields() -> None:
    calls: list[str] = []

    def _currency_for(locale: str) -> str:
        calls.append(locale)
        return "SEK"

    resolved = resolve_config(
        FormatterConfig(),
        default_locale=lambda: "sv_SE",
        currency_for_locale=_currency_for,
    )

    assert resolved == ResolvedConfig(locale="sv_SE", currency="SEK")
    assert calls == ["sv_SE"]


def test_resolve_config_keeps_explicit_values() -> None:
    resolved = resolve_config(
        FormatterConfig(locale="en_GB", currency="USD"),
        default_locale=lambda: pytest.fail("default locale should not be used"),
        currency_for_locale=lambda locale: pytest.fail("currency should not be derived"),
    )

    assert resolved == ResolvedConfig(locale="en_GB", currency="USD")
