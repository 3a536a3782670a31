# File: utils/dt_utils.py
"""Date and time utilities for OpsRules.

Pure Python date functions with no persistence or transport dependencies.
Uses standard library: datetime, zoneinfo, plus dateutil for month math.

Everything the engines evaluate is a calendar day. Timestamps (item
creation times) are converted to the configured default time zone before
their calendar day is taken, so "created late on the 3rd, UTC" lands on the
day the local user actually saw.

Functions:
    - set_default_timezone / get_default_timezone: Time zone configuration
    - dt_today_local / dt_today_iso: Today's date in the default time zone
    - dt_now_local / dt_now_utc: Current aware datetime
    - dt_parse_date: Parse a calendar date from str/date/datetime
    - dt_parse_datetime: Parse an ISO datetime string
    - dt_to_local_date: Calendar day of a timestamp in the default time zone
    - dt_parse_month / dt_format_month: "YYYY-MM" competence months
    - dt_add_months: Month arithmetic with day clamping
    - dt_days_between: Whole days from one date to another
    - dt_weekday: Weekday with Sunday = 0 numbering
    - dt_date_range: Inclusive iteration over calendar days
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, date, datetime, timedelta
import logging
import re
from zoneinfo import ZoneInfo

# Third-party date utilities
from dateutil.relativedelta import relativedelta

# Module-level logger
_LOGGER = logging.getLogger(__name__)

# ==============================================================================
# Constants (local copies to avoid circular imports)
# ==============================================================================

# Default timezone - can be overridden by caller
DEFAULT_TIME_ZONE: ZoneInfo = ZoneInfo("UTC")

# "2024-02" (also tolerates a trailing day: "2024-02-01")
_MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{1,2})(?:-(\d{1,2}))?$")


# ==============================================================================
# Timezone Configuration
# ==============================================================================


def set_default_timezone(tz: ZoneInfo | str) -> None:
    """Set the default timezone for all dt_utils functions.

    Call this once during application setup with the office time zone.

    Args:
        tz: ZoneInfo object or IANA key (e.g. "America/Sao_Paulo")
    """
    global DEFAULT_TIME_ZONE  # noqa: PLW0603
    DEFAULT_TIME_ZONE = ZoneInfo(tz) if isinstance(tz, str) else tz
    _LOGGER.debug("Default time zone set to %s", DEFAULT_TIME_ZONE)


def get_default_timezone() -> ZoneInfo:
    """Get the current default timezone."""
    return DEFAULT_TIME_ZONE


# ==============================================================================
# Current Date/Time Functions
# ==============================================================================


def dt_today_local(tz: ZoneInfo | None = None) -> date:
    """Return today's date in local timezone as a `datetime.date`.

    Args:
        tz: Optional timezone override. Uses DEFAULT_TIME_ZONE if not provided.

    Example:
        datetime.date(2024, 4, 7)
    """
    tz_info = tz or DEFAULT_TIME_ZONE
    return datetime.now(tz_info).date()


def dt_today_iso(tz: ZoneInfo | None = None) -> str:
    """Return today's date in local timezone as ISO string (YYYY-MM-DD)."""
    return dt_today_local(tz).isoformat()


def dt_now_local(tz: ZoneInfo | None = None) -> datetime:
    """Return the current datetime in local timezone (timezone-aware)."""
    tz_info = tz or DEFAULT_TIME_ZONE
    return datetime.now(tz_info)


def dt_now_utc() -> datetime:
    """Return the current datetime in UTC (timezone-aware)."""
    return datetime.now(UTC)


# ==============================================================================
# Parsing
# ==============================================================================


def dt_parse_date(value: str | date | datetime | None) -> date | None:
    """Safely parse a calendar date.

    Accepts:
    - `datetime.date` (returned unchanged)
    - `datetime.datetime` (its calendar day in the default time zone)
    - "2024-04-07" (ISO format)
    - "2024-04-07T10:30:00+00:00" (ISO datetime, via dt_to_local_date)
    - "07/04/2024" (day-first, as typed in the back office)

    Args:
        value: Value to parse, or None

    Returns:
        datetime.date or None if parsing fails.
    """
    if value is None:
        return None

    # datetime is a subclass of date, check it first
    if isinstance(value, datetime):
        return dt_to_local_date(value)
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()

    try:
        return date.fromisoformat(text)
    except ValueError:
        pass

    if "T" in text or " " in text:
        return dt_to_local_date(text)

    for fmt in ("%d/%m/%Y", "%Y/%m/%d"):
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    _LOGGER.debug("Unparseable date value: %r", value)
    return None


def dt_parse_datetime(value: str | datetime | None) -> datetime | None:
    """Parse an ISO 8601 datetime string.

    Naive results are left naive; the caller decides how to interpret them.

    Returns:
        datetime or None if parsing fails.
    """
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value.strip():
        return None

    try:
        return datetime.fromisoformat(value.strip())
    except ValueError:
        _LOGGER.debug("Unparseable datetime value: %r", value)
        return None


def dt_to_local_date(
    value: str | datetime | None, tz: ZoneInfo | None = None
) -> date | None:
    """Return the calendar day of a timestamp in the local time zone.

    Aware timestamps are converted to `tz` (default: DEFAULT_TIME_ZONE).
    Naive timestamps are taken to already be local.

    Example:
        dt_to_local_date("2024-01-04T01:30:00+00:00", ZoneInfo("America/Sao_Paulo"))
        → datetime.date(2024, 1, 3)
    """
    parsed = dt_parse_datetime(value)
    if parsed is None:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(tz or DEFAULT_TIME_ZONE)
    return parsed.date()


def dt_parse_month(value: str | date | None) -> date | None:
    """Parse a "YYYY-MM" competence month into the first day of that month.

    Returns:
        datetime.date for day 1 of the month, or None if invalid.

    Examples:
        dt_parse_month("2024-02") → datetime.date(2024, 2, 1)
        dt_parse_month("2024-13") → None
        dt_parse_month("2024-02-45") → None
    """
    if isinstance(value, date):
        return value.replace(day=1)
    if not isinstance(value, str):
        return None

    match = _MONTH_PATTERN.match(value.strip())
    if not match:
        return None

    year, month = int(match.group(1)), int(match.group(2))
    if year < 1 or not 1 <= month <= 12:
        return None
    if match.group(3) is not None:
        # A trailing day must exist in that month
        try:
            date(year, month, int(match.group(3)))
        except ValueError:
            return None
    return date(year, month, 1)


def dt_format_month(value: date) -> str:
    """Format a date as its "YYYY-MM" month."""
    return f"{value.year:04d}-{value.month:02d}"


# ==============================================================================
# Arithmetic
# ==============================================================================


def dt_add_months(value: date, months: int) -> date:
    """Add calendar months, clamping the day (Jan 31 + 1 month = Feb 28/29)."""
    return value + relativedelta(months=months)


def dt_days_between(start: date, end: date) -> int:
    """Return the number of whole days from `start` to `end` (negative if before)."""
    return (end - start).days


def dt_weekday(value: date) -> int:
    """Return the weekday with Sunday = 0 ... Saturday = 6."""
    return value.isoweekday() % 7


def dt_date_range(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day from `start` to `end`, both inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
