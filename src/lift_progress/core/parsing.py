"""
Permissive parsing of user-entered numbers and ranges.

Set values arrive as free-text strings ("40", "40kg", "", "abc").
Parsing reads the leading numeric prefix and falls back to 0 instead of
raising, so malformed input is indistinguishable from a logged zero.
"""

import math
import re
import unicodedata

_FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")


def parse_number(value: object) -> float:
    """
    Parse a weight-like value; 0.0 when nothing numeric leads the text.

    Examples:
        "42.5" -> 42.5, "40kg" -> 40.0, "" -> 0.0, "kg" -> 0.0
    """
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, (int, float)):
        result = float(value)
    else:
        m = _FLOAT_PREFIX.match(str(value))
        if not m:
            return 0.0
        result = float(m.group(1))
    return result if math.isfinite(result) else 0.0


def parse_int(value: object) -> int:
    """
    Parse a reps-like value; 0 when nothing numeric leads the text.

    Fractional input is truncated ("12.7" -> 12).
    """
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if isinstance(value, int):
        return value
    m = _INT_PREFIX.match(str(value))
    return int(m.group(1)) if m else 0


def parse_range(text: str, default_low: int, default_high: int) -> tuple[int, int]:
    """
    Split a "low-high" range such as "8-12".

    Missing, unparseable or zero bounds take the defaults.

    Args:
        text: Range text, e.g. "8-12" or "3-4"
        default_low: Used when the first token does not parse
        default_high: Used when the second token is absent or does not parse

    Returns:
        (low, high)
    """
    tokens = (text or "").split("-")
    low = parse_int(tokens[0]) or default_low
    high = (parse_int(tokens[1]) if len(tokens) > 1 else 0) or default_high
    return low, high


def format_number(value: float) -> str:
    """Render a number without a trailing ".0" for integral values."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def format_kg(value: float) -> str:
    return f"{format_number(value)}kg"


def exercise_key(name: str, matching: str = "exact") -> str:
    """
    Identity key used to match an exercise across workouts.

    "exact" keeps the name as entered. "normalized" strips diacritics,
    casefolds and collapses whitespace, so "Supino Reto" and "supino  reto"
    share a history.
    """
    if matching == "exact":
        return name
    if matching != "normalized":
        raise ValueError(f"Unknown name matching mode: {matching!r}")
    decomposed = unicodedata.normalize("NFKD", name)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return " ".join(stripped.casefold().split())
