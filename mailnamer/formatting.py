"""Display-format rendering for record property values.

Dates accept the custom date/time pattern letters mail clients use in their
own naming rules (``yyyy-MM-dd HHmm``, ``dd MMM yy``, ...). Numbers accept the
short standard specifiers ``D``, ``F``, ``N`` and ``X``. Digits-only formats never
reach this module because templates treat them as truncation lengths. Anything
else falls through to Python's ``format()``.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time
from typing import Any

_DATE_TOKEN = re.compile(
    r"'[^']*'"
    r'|"[^"]*"'
    r"|\\."
    r"|y+|M+|d+|H+|h+|m+|s+|f+|F+|t+|z+"
    r"|.",
    re.DOTALL,
)
_NUMERIC_STANDARD = re.compile(r"^([DdFfNnXx])(\d{0,2})$")


def default_string(value: Any) -> str:
    """Render a value the way an unformatted token shows it."""
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M:%S")
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def format_value(value: Any, format_spec: str) -> str:
    """Render ``value`` with a type-specific display format.

    An empty ``format_spec`` yields :func:`default_string`. Raises
    ``ValueError`` when the specifier cannot be applied to the value.
    """
    if not format_spec:
        return default_string(value)
    if isinstance(value, (datetime, date, time)):
        return format_datetime(value, format_spec)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return format_number(value, format_spec)
    if value is None:
        return ""
    return format(value, format_spec)


def format_datetime(value: date | datetime | time, pattern: str) -> str:
    """Render a date/time using custom pattern letters."""
    parts: list[str] = []
    for match in _DATE_TOKEN.finditer(pattern):
        parts.append(_render_date_token(value, match.group(0)))
    return "".join(parts)


def _render_date_token(value: date | datetime | time, token: str) -> str:
    letter = token[0]
    width = len(token)

    if letter in "'\"" and width >= 2 and token[-1] == letter:
        return token[1:-1]
    if letter == "\\" and width == 2:
        return token[1]

    if letter == "y":
        year = _require(value, "year")
        if width <= 2:
            short = year % 100
            return f"{short:02d}" if width == 2 else str(short)
        return f"{year:0{width}d}"
    if letter == "M":
        month = _require(value, "month")
        if width >= 4:
            return value.strftime("%B")
        if width == 3:
            return value.strftime("%b")
        return f"{month:02d}" if width == 2 else str(month)
    if letter == "d":
        day = _require(value, "day")
        if width >= 4:
            return value.strftime("%A")
        if width == 3:
            return value.strftime("%a")
        return f"{day:02d}" if width == 2 else str(day)
    if letter == "H":
        return _pad(getattr(value, "hour", 0), width)
    if letter == "h":
        return _pad(getattr(value, "hour", 0) % 12 or 12, width)
    if letter == "m":
        return _pad(getattr(value, "minute", 0), width)
    if letter == "s":
        return _pad(getattr(value, "second", 0), width)
    if letter in "fF":
        if width > 7:
            raise ValueError(f"fraction specifier '{token}' is longer than 7 digits")
        digits = f"{getattr(value, 'microsecond', 0):06d}0"[:width]
        return digits.rstrip("0") if letter == "F" else digits
    if letter == "t":
        designator = "AM" if getattr(value, "hour", 0) < 12 else "PM"
        return designator[:1] if width == 1 else designator
    if letter == "z":
        return _render_utc_offset(value, width)
    return token


def _render_utc_offset(value: date | datetime | time, width: int) -> str:
    offset = value.utcoffset() if isinstance(value, (datetime, time)) else None
    if offset is None:
        return ""
    total_minutes = int(offset.total_seconds() // 60)
    sign = "-" if total_minutes < 0 else "+"
    hours, minutes = divmod(abs(total_minutes), 60)
    if width == 1:
        return f"{sign}{hours}"
    if width == 2:
        return f"{sign}{hours:02d}"
    return f"{sign}{hours:02d}:{minutes:02d}"


def _require(value: date | datetime | time, attribute: str) -> int:
    if not hasattr(value, attribute):
        raise ValueError(f"a {type(value).__name__} value has no {attribute} component")
    return getattr(value, attribute)


def _pad(number: int, width: int) -> str:
    return f"{number:02d}" if width >= 2 else str(number)


def format_number(value: int | float, format_spec: str) -> str:
    """Render a number with a short standard specifier or a Python format spec."""
    standard = _NUMERIC_STANDARD.match(format_spec)
    if standard is None:
        return format(value, format_spec)

    kind, digits = standard.group(1), standard.group(2)
    kind_upper = kind.upper()
    if kind_upper == "D":
        if not isinstance(value, int):
            raise ValueError("the D specifier only applies to integers")
        return _zero_pad(value, int(digits or 0))
    if kind_upper == "F":
        return f"{value:.{int(digits or 2)}f}"
    if kind_upper == "N":
        return f"{value:,.{int(digits or 2)}f}"
    if not isinstance(value, int):
        raise ValueError("the X specifier only applies to integers")
    if value < 0:
        raise ValueError("the X specifier does not render negative integers")
    return format(value, "X" if kind == "X" else "x").zfill(int(digits or 0))


def _zero_pad(value: int, width: int) -> str:
    sign = "-" if value < 0 else ""
    return sign + str(abs(value)).zfill(width)
