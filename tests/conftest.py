from __future__ import annotations

import pytest
from jinja2 import Environment

from numfmt.core.config import get_settings
from numfmt.extension import NumberFormatterExtension
from numfmt.templates import create_environment

_SETTINGS_ENV_VARS = (
    "NUMFMT_LOCALE",
    "NUMFMT_CURRENCY",
    "NUMFMT_DECIMALS",
    "NUMFMT_DECIMAL_POINT",
    "NUMFMT_THOUSANDS_SEP",
    "NUMFMT_LOG_LEVEL",
    "NUMFMT_LOG_DIR",
)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Give every test settings built from a clean environment."""

    for name in _SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def env() -> Environment:
    environment = create_environment()
    environment.number_formatter.set_locale("en_US")
    return environment


@pytest.fixture()
def formatter(env: Environment) -> NumberFormatterExtension:
    return env.number_formatter


@pytest.fixture()
def render(env: Environment):
    def _render(source: str, **context: object) -> str:
        return env.from_string(source).render(**context)

    return _render
