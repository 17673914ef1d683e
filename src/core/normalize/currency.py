# src/core/normalize/currency.py
"""
Brazilian Real formatting for the listing price field.

The value field is edited as a masked string: prefix "R$", "." thousands
separator, "," decimal separator, exactly two decimals, no negatives.
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

PREFIX = "R$"
_CENTS = Decimal("0.01")
_ALLOWED_RE = re.compile(r"^[\d.,]+$")
_DOT_DECIMAL_RE = re.compile(r"\.\d{1,2}$")


def parse_brl(text: str) -> Decimal:
    """
    "R$1.234,56" → Decimal("1234.56"). Prefix and spaces are optional.
    Without a comma, a dot followed by 1-2 trailing digits is read as the
    decimal point ("1500.75"); otherwise dots group thousands ("450.000").

    Raises ValueError for empty, negative or malformed input.
    """
    s = (text or "").strip()
    if s.startswith(PREFIX):
        s = s[len(PREFIX) :]
    s = s.replace(" ", "").replace("\u00a0", "")
    if not s:
        raise ValueError("empty currency value")
    if s.startswith("-"):
        raise ValueError(f"negative currency value: {text!r}")
    if not _ALLOWED_RE.match(s):
        raise ValueError(f"not a BRL amount: {text!r}")

    if "," not in s and _DOT_DECIMAL_RE.search(s):
        # "1500.75": a last dot followed by 1-2 digits is the decimal point
        integer, _, frac = s.rpartition(".")
    else:
        integer, _, frac = s.partition(",")
    if "," in frac:
        raise ValueError(f"more than one decimal separator: {text!r}")
    digits = integer.replace(".", "")
    if not digits:
        digits = "0"
    try:
        return Decimal(f"{digits}.{frac or '0'}")
    except InvalidOperation as e:
        raise ValueError(f"not a BRL amount: {text!r}") from e


def format_brl(amount: Decimal | int | float | str) -> str:
    """Decimal("1234.5") → "R$1.234,50". Strings are parsed with `parse_brl` first."""
    if isinstance(amount, str):
        value = parse_brl(amount)
    else:
        value = Decimal(str(amount))
    if value < 0:
        raise ValueError(f"negative currency value: {amount!r}")

    value = value.quantize(_CENTS, rounding=ROUND_HALF_UP)
    integer, frac = f"{value:f}".split(".")
    groups = []
    while len(integer) > 3:
        groups.insert(0, integer[-3:])
        integer = integer[:-3]
    groups.insert(0, integer)
    return f"{PREFIX}{'.'.join(groups)},{frac}"


def normalize_brl(text: str) -> str:
    """Re-mask a user-typed amount; returns the input unchanged if it cannot be parsed."""
    try:
        return format_brl(parse_brl(text))
    except ValueError:
        return text
