"""Cell text helpers — normalisation and strict numeric parsing."""

from __future__ import annotations

import re
from datetime import date, datetime, time
from typing import Any

TOTALS_PATTERN: str = r"total|subtotal"

_NUMBER_RE = re.compile(r"-?[0-9]+(\.[0-9]+)?")
_TOTALS_RE = re.compile(TOTALS_PATTERN, re.IGNORECASE)


def normalize(text: Any) -> str:
    """Return *text* as a stripped, lower-cased string (``None`` → ``""``)."""
    if text is None:
        return ""
    return str(text).strip().lower()


def is_blank(text: Any) -> bool:
    return normalize(text) == ""


def is_totals_text(text: Any) -> bool:
    """True when *text* mentions ``total`` or ``subtotal`` anywhere."""
    if text is None:
        return False
    return _TOTALS_RE.search(str(text)) is not None


def parse_number(text: Any) -> float | None:
    """Parse a plain decimal literal such as ``12`` or ``-3.5``.

    Thousands separators, currency/percent symbols and exponents are not
    accepted; anything that does not fully match returns ``None``.
    """
    token = normalize(text)
    if not _NUMBER_RE.fullmatch(token):
        return None
    return float(token)


def to_text(value: Any) -> str:
    """Render a raw workbook value the way a spreadsheet UI shows it."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value)
