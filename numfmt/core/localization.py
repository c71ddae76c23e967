"""Thin adapter over Babel's locale data and number formatting."""

from __future__ import annotations

import re
from decimal import Decimal, ROUND_HALF_UP, localcontext

from babel import Locale, default_locale as babel_default_locale
from babel.numbers import (
    format_currency as babel_format_currency,
    format_percent,
    get_currency_symbol,
    get_decimal_symbol,
    get_group_symbol,
    get_territory_currencies,
)

from .formatting import extract_symbol, to_decimal

FALLBACK_LOCALE = "en_US"
# ISO 4217 code for "no currency", used for locales without a territory.
NO_CURRENCY = "XXX"
GENERIC_CURRENCY_SIGN = "¤"

SAMPLE_AMOUNT = 123

# Integer digits and the optional fraction of an LDML number pattern.
_PATTERN_NUMBER_RE = re.compile(r"(?P<integer>[#0,]*0)(?:\.[0#]+)?")


def default_locale() -> str:
    """Return the process default locale, ``en_US`` when none is configured."""
    return babel_default_locale("LC_NUMERIC") or FALLBACK_LOCALE


def currency_for_locale(locale: str) -> str:
    """Return the ISO currency code in use in the locale's territory."""
    territory = Locale.parse(locale).territory
    if not territory:
        return NO_CURRENCY
    currencies = get_territory_currencies(territory)
    return currencies[0] if currencies else NO_CURRENCY


def local_currency_symbol(locale: str) -> str:
    """Return the locale's own currency symbol, e.g. ``€`` for ``de_DE``."""
    code = currency_for_locale(locale)
    if code == NO_CURRENCY:
        return GENERIC_CURRENCY_SIGN
    return get_currency_symbol(code, locale=locale)


def percent_sign(locale: str) -> str:
    return extract_symbol(format_percent(1, locale=locale))


def with_fraction_digits(pattern: str, digits: int) -> str:
    """Rewrite the fraction part of an LDML number pattern to ``digits`` zeros."""
    fraction = "." + "0" * digits if digits > 0 else ""
    return _PATTERN_NUMBER_RE.sub(lambda m: m.group("integer") + fraction, pattern)


def _replace_separators(
    formatted: str,
    locale: str,
    decimal_point: str | None,
    thousands_sep: str | None,
) -> str:
    mapping: dict[str, str] = {}
    if decimal_point is not None:
        mapping[get_decimal_symbol(locale)] = decimal_point
    if thousands_sep is not None:
        mapping[get_group_symbol(locale)] = thousands_sep
    if not mapping:
        return formatted

    digits = [index for index, char in enumerate(formatted) if char.isdigit()]
    if not digits:
        return formatted
    start, end = digits[0], digits[-1] + 1

    # Substitute in one pass so swapped separators do not clobber each other.
    separators = re.compile("|".join(re.escape(symbol) for symbol in mapping))
    number = separators.sub(lambda m: mapping[m.group(0)], formatted[start:end])
    return formatted[:start] + number + formatted[end:]


def format_currency(
    value: object,
    currency: str,
    locale: str,
    decimals: int | None = None,
    decimal_point: str | None = None,
    thousands_sep: str | None = None,
) -> str:
    """Format a monetary amount, always rounding half up.

    Args:
        value: Amount to format. ``None`` counts as zero.
        currency: ISO 4217 currency code.
        locale: Locale identifier such as ``de_DE``.
        decimals: Fraction digits; ``None`` keeps the currency's standard digits.
        decimal_point: Replacement for the locale decimal separator.
        thousands_sep: Replacement for the locale grouping separator.
    """
    number = Decimal(0) if value is None else to_decimal(value)
    if number is None:
        raise ValueError(f"Cannot format non-numeric value {value!r} as currency")

    options: dict[str, object] = {}
    if decimals is not None:
        pattern = Locale.parse(locale).currency_formats["standard"].pattern
        options["format"] = with_fraction_digits(pattern, max(int(decimals), 0))
        options["currency_digits"] = False

    with localcontext() as ctx:
        ctx.rounding = ROUND_HALF_UP
        formatted = babel_format_currency(number, currency, locale=locale, **options)

    return _replace_separators(formatted, locale, decimal_point, thousands_sep)
