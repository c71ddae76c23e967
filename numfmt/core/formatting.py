"""Helper functions for formatting numbers in templates."""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext

# Largest threshold first, the first matching tier wins.
HUMAN_READABLE_UNITS: tuple[tuple[str, int], ...] = (
    ("M", 1_000_000),
    ("K", 1_000),
)

# Leading symbol, the numeric run, trailing symbol.
_SYMBOL_RE = re.compile(r"^(\D*)\s*([\d,.\s]+)\s*(\D*)$")


@dataclass(frozen=True)
class NumberFormat:
    """Environment-wide defaults for :func:`number_format`."""

    decimals: int = 0
    decimal_point: str = "."
    thousands_sep: str = ","


DEFAULT_NUMBER_FORMAT = NumberFormat()


def to_decimal(value: object) -> Decimal | None:
    """Return ``value`` as a finite ``Decimal`` or ``None`` if it is not numeric.

    Numbers and numeric strings are accepted. Booleans, NaN and infinities are
    not treated as numbers.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        candidate = value
    elif isinstance(value, (int, float)):
        candidate = Decimal(str(value))
    elif isinstance(value, str):
        # Decimal accepts digit separators like "1_000"; templates do not.
        if "_" in value:
            return None
        try:
            candidate = Decimal(value.strip())
        except InvalidOperation:
            return None
    else:
        return None
    return candidate if candidate.is_finite() else None


def number_format(
    value: object,
    decimals: int | None = None,
    decimal_point: str | None = None,
    thousands_sep: str | None = None,
    defaults: NumberFormat = DEFAULT_NUMBER_FORMAT,
) -> str:
    """Format ``value`` with fixed decimals and explicit separators.

    ``None`` arguments fall back to ``defaults``. Rounding is half away from
    zero. ``None`` values format as zero.
    """
    decimals = defaults.decimals if decimals is None else max(int(decimals), 0)
    decimal_point = defaults.decimal_point if decimal_point is None else decimal_point
    thousands_sep = defaults.thousands_sep if thousands_sep is None else thousands_sep

    number = Decimal(0) if value is None else to_decimal(value)
    if number is None:
        raise ValueError(f"Cannot format non-numeric value {value!r}")

    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, number.adjusted() + decimals + 2)
        rounded = number.quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP)

    sign = "-" if rounded < 0 and not rounded.is_zero() else ""
    whole, _, fraction = format(abs(rounded), "f").partition(".")
    grouped = f"{int(whole):,}".replace(",", thousands_sep)
    if decimals:
        return f"{sign}{grouped}{decimal_point}{fraction}"
    return f"{sign}{grouped}"


def humanize_number(
    value: object,
    decimals: int | None = None,
    decimal_point: str | None = None,
    thousands_sep: str | None = None,
    disable_unit_scaling: bool = False,
    defaults: NumberFormat = DEFAULT_NUMBER_FORMAT,
) -> object:
    """Format a number with a K/M unit suffix.

    Args:
        value: The number to format. ``None`` counts as zero; anything that is
            not numeric is returned unchanged.
        decimals: Number of decimal places to keep.
        decimal_point: Decimal separator.
        thousands_sep: Thousands separator.
        disable_unit_scaling: Never divide by a unit threshold.
        defaults: Fallbacks for the separator and decimals arguments.
    """
    if value is None:
        number = Decimal(0)
    else:
        number = to_decimal(value)
        if number is None:
            return value

    if not disable_unit_scaling:
        for unit, threshold in HUMAN_READABLE_UNITS:
            if number > threshold:
                scaled = number_format(
                    number / threshold, decimals, decimal_point, thousands_sep, defaults
                )
                return f"{scaled} {unit}"

    return number_format(number, decimals, decimal_point, thousands_sep, defaults)


def extract_symbol(formatted: str) -> str:
    """Pull the currency or percent symbol out of a formatted amount.

    The symbol is the non-digit text before the number, or after it when
    nothing precedes the number. Scripts that interleave the symbol with the
    digits are not supported and yield an empty or partial symbol.
    """
    match = _SYMBOL_RE.match(formatted)
    if not match:
        return ""
    leading, _, trailing = match.groups()
    return (leading or trailing).strip()
