"""
Pure converters from raw DOM text to field values.

Every converter takes the raw string read from a node and returns the typed
value. They never touch the page, so they are composed with a read in
``FieldReader.read`` and tested on literals.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Callable, Iterable, Union

ENDED_MARKER = "Avslutad"
END_TIME_PREFIX = "Avslutas "

_WHITESPACE_RE = re.compile(r"\s+")
_NON_NUMERIC_RE = re.compile(r"[^0-9.]")

_SV_MONTHS = {
    "jan": 1,
    "feb": 2,
    "mar": 3,
    "apr": 4,
    "maj": 5,
    "jun": 6,
    "jul": 7,
    "aug": 8,
    "sep": 9,
    "okt": 10,
    "nov": 11,
    "dec": 12,
}
_SV_DATE_RE = re.compile(
    r"^(?P<day>\d{1,2})\s+(?P<month>[a-zåäö]{3})[a-zåäö]*\.?"
    r"(?:\s+(?P<year>\d{4}))?\s+(?P<hour>\d{1,2}):(?P<minute>\d{2})$",
    re.I,
)
_ISO_FORMATS = ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H:%M", "%Y-%m-%dT%H:%M:%S")


def to_number(text: str) -> float:
    """
    Parse Swedish-formatted currency text into a float.

    "1 234,50 kr" -> 1234.5, "1.234 kr" -> 1234.0, "350 kr" -> 350.0.

    Spaces and periods are thousands separators, the comma is the decimal
    separator and anything else (currency suffix) is dropped. This is lossy:
    a period meant as a decimal point is discarded too ("12.50" -> 1250.0).
    """
    cleaned = _WHITESPACE_RE.sub("", text).replace(".", "").replace(",", ".")
    cleaned = _NON_NUMERIC_RE.sub("", cleaned)
    if not cleaned.strip("."):
        return 0.0
    return float(cleaned)


def contains(word: str) -> Callable[[str], bool]:
    return lambda text: word in text


def strip_prefix(prefix: str) -> Callable[[str], str]:
    return lambda text: text.strip().removeprefix(prefix).strip()


def time_left(text: str) -> Union[int, str]:
    """Remaining time as displayed, or 0 once the auction is over."""
    text = text.strip()
    return 0 if text == ENDED_MARKER else text


def parse_bid_time(text: str, *, now: datetime | None = None) -> Union[datetime, str]:
    """
    Bid history timestamps are shown either ISO-like ("2024-01-12 14:32") or
    Swedish short form ("12 jan 14:32", "12 jan 2024 14:32"). Anything else is
    returned unchanged.
    """
    raw = text.strip()
    for fmt in _ISO_FORMATS:
        try:
            return datetime.strptime(raw, fmt)
        except ValueError:
            continue

    m = _SV_DATE_RE.match(raw)
    if not m:
        return raw
    month = _SV_MONTHS.get(m.group("month").lower())
    if month is None:
        return raw
    year = int(m.group("year")) if m.group("year") else (now or datetime.now()).year
    try:
        return datetime(
            year, month, int(m.group("day")), int(m.group("hour")), int(m.group("minute"))
        )
    except ValueError:
        return raw


def unique(values: Iterable[str]) -> list[str]:
    """Drop duplicates and empties, keeping first-seen order."""
    seen: set[str] = set()
    out: list[str] = []
    for value in values:
        if value and value not in seen:
            seen.add(value)
            out.append(value)
    return out
