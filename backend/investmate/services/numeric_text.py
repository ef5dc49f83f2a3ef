"""Conversion between user-entered numeric text and numbers.

Input text may contain "," grouping separators. Only plain non-negative
decimals are accepted; anything else parses to None, which callers treat as
an empty/invalid field rather than an error.
"""

import math
import re

from investmate.config import FRACTION_DIGITS

_DECIMAL_RE = re.compile(r"^(\d+\.?\d*|\.\d+)$")


def parse_number(raw_text: str | None) -> float | None:
    """Parse raw field text. Returns None for empty or unparseable input."""
    if raw_text is None:
        return None
    text = raw_text.strip().replace(",", "")
    if not _DECIMAL_RE.match(text):
        return None
    value = float(text)
    if not math.isfinite(value):
        return None
    return value


def format_number(value: float, fraction_digits: int = FRACTION_DIGITS) -> str:
    """Render a number with grouping and at most `fraction_digits` decimals.

    Trailing fractional zeros are dropped, so 50000.0 -> "50,000" and
    1234.5 -> "1,234.5".
    """
    text = f"{value:,.{fraction_digits}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("-0", ""):
        return "0"
    return text


def format_percentage(value: float) -> str:
    """Percentages always show two decimals: 20 -> "20.00"."""
    text = f"{value:.2f}"
    if text == "-0.00":
        return "0.00"
    return text
