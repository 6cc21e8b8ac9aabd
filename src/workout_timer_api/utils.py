"""Utility functions."""
import re
from typing import Any, Optional

_CLOCK_RE = re.compile(r"^\s*(\d+):(\d{1,2})\s*$")
_DURATION_RE = re.compile(
    r"^\s*(\d+(?:\.\d+)?)\s*(s|secs?|seconds?|m|mins?|minutes?)?\s*$",
    re.IGNORECASE,
)


def to_int(s: Any) -> Optional[int]:
    """Convert a value to int, returning None if conversion fails."""
    if s is None or isinstance(s, bool):
        return None
    try:
        return int(float(s))
    except Exception:
        return None


def clock_to_seconds(txt: str) -> Optional[int]:
    """Convert a clock string like '2:30' to seconds."""
    m = _CLOCK_RE.match(str(txt))
    if not m:
        return None
    return int(m.group(1)) * 60 + int(m.group(2))


def to_seconds(value: Any) -> Optional[int]:
    """
    Coerce a loosely typed duration into whole seconds.

    Accepts numbers (already seconds), '45', '45s', '2 min', ':45' and '2:30'.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    txt = str(value).strip()
    if txt.startswith(":"):
        txt = "0" + txt
    clock = clock_to_seconds(txt)
    if clock is not None:
        return clock
    m = _DURATION_RE.match(txt)
    if not m:
        return None
    amount = float(m.group(1))
    unit = (m.group(2) or "s").lower()
    if unit.startswith("m"):
        amount *= 60
    return int(amount)


def positive_int(value: Any, default: int) -> int:
    """Return value as a positive int, or default when missing or not positive."""
    n = to_int(value)
    if n is None or n <= 0:
        return default
    return n
