"""
Value parsing for typed fields.

Form values arrive as text. Each parser returns the parsed value or None
when the text is not a valid value of that type.
"""

import math
import re
import unicodedata
from datetime import date, datetime, time
from typing import Callable, Optional

from whistle.validation.models import FieldType

# Plain ASCII decimal notation: no "nan", "inf", hex or digit separators
_NUMBER_RE = re.compile(r"[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?", re.ASCII)
_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)
_TIME_RE = re.compile(r"\d{2}:\d{2}(?::\d{2})?", re.ASCII)


def parse_number(text: str) -> Optional[float]:
    text = text.strip()
    if not _NUMBER_RE.fullmatch(text):
        return None
    value = float(text)
    # overflowing literals such as 1e999
    if not math.isfinite(value):
        return None
    return value


def parse_date(text: str) -> Optional[date]:
    """Parse an ISO ``YYYY-MM-DD`` date, rejecting impossible dates."""
    text = text.strip()
    if not _DATE_RE.fullmatch(text):
        return None
    try:
        return datetime.strptime(text, "%Y-%m-%d").date()
    except ValueError:
        return None


def parse_time(text: str) -> Optional[time]:
    """Parse ``HH:MM`` or ``HH:MM:SS`` (24-hour clock)."""
    text = text.strip()
    if not _TIME_RE.fullmatch(text):
        return None
    fmt = "%H:%M:%S" if text.count(":") == 2 else "%H:%M"
    try:
        return datetime.strptime(text, fmt).time()
    except ValueError:
        return None


PARSERS: dict[FieldType, Callable[[str], object]] = {
    FieldType.NUMBER: parse_number,
    FieldType.DATE: parse_date,
    FieldType.TIME: parse_time,
}


def char_length(text: str) -> int:
    """Length in characters, so "Adèle" is 5 composed or decomposed."""
    return len(unicodedata.normalize("NFC", text))
