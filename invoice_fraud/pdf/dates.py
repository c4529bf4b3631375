import re
from datetime import datetime, timedelta, timezone

_PDF_DATE_RE = re.compile(
    r"^(?:D:)?"
    r"(?P<year>\d{4})(?P<month>\d{2})?(?P<day>\d{2})?"
    r"(?P<hour>\d{2})?(?P<minute>\d{2})?(?P<second>\d{2})?"
    r"(?P<tz>[Zz]|[+\-]\d{2}'?(?:\d{2}'?)?)?"
)


def parse_pdf_date(raw: object) -> datetime | None:
    """Parse a PDF info-dictionary date such as ``D:20240131093000+10'00'``.

    Returns a timezone-aware datetime (UTC when the string carries no offset),
    or None when the value is missing or malformed.
    """
    if isinstance(raw, bytes):
        raw = raw.decode("latin-1", errors="ignore")
    if not isinstance(raw, str):
        return None
    match = _PDF_DATE_RE.match(raw.strip())
    if match is None:
        return None
    parts = match.groupdict()
    try:
        value = datetime(
            int(parts["year"]),
            int(parts["month"] or 1),
            int(parts["day"] or 1),
            int(parts["hour"] or 0),
            int(parts["minute"] or 0),
            int(parts["second"] or 0),
        )
    except ValueError:
        return None
    return value.replace(tzinfo=_parse_offset(parts["tz"]))


def _parse_offset(raw: str | None) -> timezone:
    if not raw or raw in ("Z", "z"):
        return timezone.utc
    digits = raw[1:].replace("'", "")
    hours = int(digits[:2])
    minutes = int(digits[2:4]) if len(digits) >= 4 else 0
    delta = timedelta(hours=hours, minutes=minutes)
    return timezone(delta if raw[0] == "+" else -delta)
