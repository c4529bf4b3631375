"""Lenient parsers for field values used by the scoring rules.

Every parser returns None for empty or malformed input; callers treat None
as "field absent" so that bad values never pass arithmetic checks as zero.
"""

import re
from datetime import date, datetime

_AMOUNT_NOISE_RE = re.compile(r"[$,\s]")
_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?|-?\.\d+")
_YEAR_RE = re.compile(r"\d{4}")
_DATE_FORMATS = ("%Y-%m-%d", "%d/%m/%Y")


def parse_amount(value: str) -> float | None:
    """Parse "$45,000.00" style amounts."""
    cleaned = _AMOUNT_NOISE_RE.sub("", value or "")
    if not _NUMBER_RE.fullmatch(cleaned):
        return None
    return float(cleaned)


def parse_date(value: str) -> date | None:
    """Parse an ISO (YYYY-MM-DD) or Australian (DD/MM/YYYY) date."""
    value = (value or "").strip()
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    return None


def parse_year(value: str) -> int | None:
    value = (value or "").strip()
    if not _YEAR_RE.fullmatch(value):
        return None
    return int(value)
