"""
visatrack.dates
===============

Calendar helpers shared by the compliance engine.

Everything here works on *civil* days: datetimes are truncated to their
calendar date before any arithmetic, so an expiry "today" is always ``0``
days away regardless of the time of day.  Nothing in this module raises on
bad input; unparseable values simply become ``None``.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from .models import DateLike

logger = logging.getLogger(__name__)


def parse_date(value: DateLike) -> Optional[date]:
    """
    Return *value* as a :class:`datetime.date`, or ``None``.

    Accepts dates, datetimes and ISO‑8601 strings (``YYYY-MM-DD``, optionally
    followed by a time component such as ``T09:30:00Z``).
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        logger.debug("ignoring non-date value %r", value)
        return None

    text = value.strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        logger.debug("unparseable date %r", value)
        return None


def as_of(now: date | datetime) -> date:
    """Normalise the caller-supplied reference time to a calendar date."""
    return now.date() if isinstance(now, datetime) else now


def days_until(expiry: DateLike, now: date | datetime) -> Optional[int]:
    """
    Whole calendar days from *now* until *expiry*.

    Negative once the expiry has passed, ``0`` on the day itself and
    ``None`` when *expiry* is missing or malformed.
    """
    expiry_day = parse_date(expiry)
    if expiry_day is None:
        return None
    return (expiry_day - as_of(now)).days
