"""Money normalization in integer cents.

Amounts arrive from Airtable as numbers or as currency-formatted strings
("$1,234.50"). Summing them as floats drifts, so every amount is converted
to integer cents once and only turned back into a decimal value when the
response is built.
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

_LEADING_INT = re.compile(r"^\s*([+-]?)(\d+)")
_LEADING_DIGITS = re.compile(r"^(\d+)")
_TWO_PLACES = Decimal("0.01")


def _parse_leading_int(text: str) -> tuple[int, bool]:
    """Parse leading base-10 digits, returning (value, negative)."""
    match = _LEADING_INT.match(text)
    if not match:
        return 0, text.lstrip().startswith("-")
    return int(match.group(2)), match.group(1) == "-"


def _amount_text(value: Any) -> str:
    """Render an amount as text; numbers always in fixed-point notation."""
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float):
        return format(Decimal(repr(value)), "f")
    if isinstance(value, (int, Decimal)):
        return format(Decimal(value), "f")
    return str(value)


def to_cents(value: Any) -> int:
    """Convert an amount into integer cents.

    ``None`` and ``""`` are 0. Otherwise ``$`` and ``,`` are stripped, the text
    is split on the first ``.``, and each part contributes its leading digits
    (anything non-numeric counts as 0). The fraction is padded/truncated to
    two digits, so ``"1234.5"`` and ``"1234.509"`` both give 123450. Numbers
    are read in fixed-point form, so ``1e-05`` is 0 and ``1e16`` is 10**18.

    A leading ``-`` negates the whole amount, not just the integer part:
    ``"-12.34"`` is -1234, where adding the fraction to the signed integer
    part would give -1166.

    >>> to_cents("$1,234.5")
    123450
    >>> to_cents("-12.34")
    -1234
    """
    if value is None or value == "":
        return 0

    text = re.sub(r"[$,]", "", _amount_text(value))
    whole, _, fraction = text.partition(".")

    units, negative = _parse_leading_int(whole)
    frac_match = _LEADING_DIGITS.match((fraction + "00")[:2])
    hundredths = int(frac_match.group(1)) if frac_match else 0

    cents = units * 100 + hundredths
    return -cents if negative else cents


def cents_to_amount(cents: int) -> float:
    """Convert integer cents to a two-decimal number (round half away from zero)."""
    amount = (Decimal(cents) / 100).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)
    return float(amount)
