"""Jinja2 extension exposing locale-aware number, currency and percent helpers."""
from __future__ import annotations

from decimal import Decimal
from typing import Callable, Optional

from jinja2 import Environment, pass_environment
from jinja2.ext import Extension

from numfmt.core.config import FormatterConfig, ResolvedConfig, get_settings, resolve_config
from numfmt.core.formatting import (
    DEFAULT_NUMBER_FORMAT,
    NumberFormat,
    extract_symbol,
    humanize_number,
    number_format,
    to_decimal,
)
from numfmt.core.localization import (
    SAMPLE_AMOUNT,
    currency_for_locale,
    default_locale,
    format_currency,
    local_currency_symbol,
    percent_sign,
)
from numfmt.core.log import get_logger, log_context

LOGGER = get_logger(__name__)


def _prefixed(symbol: str, prefix_with_space: bool) -> str:
    return f" {symbol}" if prefix_with_space else symbol


def _environment_number_format(env: Environment) -> NumberFormat:
    return getattr(env, "number_format", DEFAULT_NUMBER_FORMAT)


class NumberFormatterExtension(Extension):
    """Adds ``number_human``, ``percent_format`` and ``currency_format`` filters
    plus the ``currency_symbol`` and ``percent_symbol`` functions.

    Locale and currency default to the ``NUMFMT_LOCALE`` / ``NUMFMT_CURRENCY``
    settings and are otherwise derived from the process locale on first use.
    The instance is reachable from the environment as
    ``environment.number_formatter``::

        env = Environment(extensions=[NumberFormatterExtension])
        env.number_formatter.set_locale("de_DE")
    """

    def __init__(self, environment: Environment) -> None:
        super().__init__(environment)
        settings = get_settings()
        self._config = settings.formatter
        self._resolved: Optional[ResolvedConfig] = None

        environment.extend(
            number_format=settings.number_format,
            number_formatter=self,
        )
        environment.filters.update(self.filters())
        environment.globals.update(self.functions())

    def filters(self) -> dict[str, Callable[..., object]]:
        return {
            "number_human": self.number_human,
            "percent_format": self.percent_format,
            "currency_format": self.currency_format,
        }

    def functions(self) -> dict[str, Callable[..., object]]:
        return {
            "currency_symbol": self.currency_symbol,
            "percent_symbol": self.percent_symbol,
        }

    # -- configuration -----------------------------------------------------

    @property
    def config(self) -> FormatterConfig:
        return self._config

    def _resolve(self) -> ResolvedConfig:
        if self._resolved is None:
            self._resolved = resolve_config(
                self._config,
                default_locale=default_locale,
                currency_for_locale=currency_for_locale,
            )
            LOGGER.debug(
                "Resolved formatter defaults locale=%s currency=%s",
                self._resolved.locale,
                self._resolved.currency,
            )
            log_context.bind(locale=self._resolved.locale, currency=self._resolved.currency)
        return self._resolved

    def resolve_locale(self) -> str:
        return self._resolve().locale

    def resolve_currency(self) -> str:
        return self._resolve().currency

    def set_locale(self, locale: Optional[str]) -> "NumberFormatterExtension":
        self._config = FormatterConfig(locale=locale or None, currency=self._config.currency)
        self._resolved = None
        log_context.unbind("locale", "currency")
        return self

    def set_currency(self, currency: Optional[str]) -> "NumberFormatterExtension":
        self._config = FormatterConfig(locale=self._config.locale, currency=currency or None)
        self._resolved = None
        log_context.unbind("locale", "currency")
        return self

    # -- filters -----------------------------------------------------------

    @pass_environment
    def number_human(
        self,
        env: Environment,
        value: object,
        decimals: Optional[int] = None,
        decimal_point: Optional[str] = None,
        thousands_sep: Optional[str] = None,
        disable_unit_scaling: bool = False,
    ) -> object:
        """Render ``value`` compactly, e.g. ``1,500,000`` as ``2 M``.

        Non-numeric values are returned unchanged.
        """
        if value is not None and to_decimal(value) is None:
            LOGGER.debug("number_human passing through non-numeric value %r", value)
            return value
        return humanize_number(
            value,
            decimals,
            decimal_point,
            thousands_sep,
            disable_unit_scaling=bool(disable_unit_scaling),
            defaults=_environment_number_format(env),
        )

    def currency_format(
        self,
        value: object,
        decimals: Optional[int] = None,
        decimal_point: Optional[str] = None,
        thousands_sep: Optional[str] = None,
        currency: Optional[str] = None,
        locale: Optional[str] = None,
        omit_symbol: bool = False,
    ) -> str:
        """Format a monetary amount using the locale's currency pattern.

        Args:
            value: The amount.
            decimals: Fraction digits, defaults to the currency's own.
            decimal_point: Decimal separator override.
            thousands_sep: Grouping separator override.
            currency: ISO currency code, defaults to the configured currency.
            locale: Locale, defaults to the configured locale.
            omit_symbol: Strip the currency symbol from the result.
        """
        if locale is None:
            locale = self.resolve_locale()
        if currency is None:
            currency = self.resolve_currency()

        formatted = format_currency(
            value,
            currency,
            locale,
            decimals=decimals,
            decimal_point=decimal_point,
            thousands_sep=thousands_sep,
        )

        if omit_symbol:
            # Taken from an unsigned sample so a leading minus sign is never
            # mistaken for the symbol.
            symbol = extract_symbol(format_currency(SAMPLE_AMOUNT, currency, locale))
            formatted = formatted.replace(symbol, "").strip()
        return formatted

    @pass_environment
    def percent_format(
        self,
        env: Environment,
        value: object,
        divide_by_100: bool = False,
        decimals: Optional[int] = None,
        decimal_point: Optional[str] = None,
        locale: Optional[str] = None,
    ) -> str:
        """Format ``value`` as a percentage without digit grouping."""
        if locale is None:
            locale = self.resolve_locale()

        if divide_by_100:
            number = to_decimal(value)
            if number is not None:
                value = number / Decimal(100)

        # Percentages are never grouped.
        formatted = number_format(
            value, decimals, decimal_point, "", defaults=_environment_number_format(env)
        )
        return f"{formatted} {self.percent_symbol(locale, False)}"

    # -- functions ---------------------------------------------------------

    def currency_symbol(
        self,
        currency: Optional[str] = None,
        locale: Optional[str] = None,
        prefix_with_space: bool = True,
    ) -> str:
        """Return the symbol used for ``currency`` in ``locale``.

        An empty currency code falls back to the locale's own currency symbol.
        """
        if locale is None:
            locale = self.resolve_locale()
        if currency is None:
            currency = self.resolve_currency()

        if currency:
            sample = self.currency_format(SAMPLE_AMOUNT, currency=currency, locale=locale)
            symbol = extract_symbol(sample)
            if not symbol:
                LOGGER.debug("No currency symbol found in %r", sample)
        else:
            symbol = local_currency_symbol(locale)

        return _prefixed(symbol, prefix_with_space)

    def percent_symbol(
        self,
        locale: Optional[str] = None,
        prefix_with_space: bool = True,
    ) -> str:
        if locale is None:
            locale = self.resolve_locale()
        return _prefixed(percent_sign(locale), prefix_with_space)
