"""RFC 2822 publication dates."""

from __future__ import annotations

import re
from datetime import datetime
from email.utils import parsedate_to_datetime

# "Thu, 13 Jul 2023 14:30:00 -0700"; seconds optional, numeric offset required.
RFC2822_RE = re.compile(
    r"^(Mon|Tue|Wed|Thu|Fri|Sat|Sun),?\s+\d{1,2}\s+"
    r"(Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)\s+\d{4}\s+"
    r"\d{2}:\d{2}(:\d{2})?\s+[+-]\d{4}$"
)


def parse_rfc2822_date(value: str) -> datetime | None:
    """Return an aware datetime, or None when the text is not RFC 2822."""
    value = value.strip()
    if not RFC2822_RE.match(value):
        return None
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        return None
    return parsed
