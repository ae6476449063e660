"""
Helpers for booking records coming from the external booking system.

Those records are loosely shaped: amounts may be numbers or currency strings,
the date may sit under one of several fields, status casing varies. Every
helper here is total: bad input resolves to 0, False, None or "" and nothing
raises.
"""
from __future__ import annotations
import math
import re
from datetime import date, datetime, timezone
from typing import Any, Iterable, List, Mapping, Optional

from dateutil import parser as date_parser

from mindcare.config import (
    BOOKING_CURRENCY_SYMBOLS,
    BOOKING_DATE_FIELDS,
    BOOKING_MAX_FUTURE_YEARS,
)

_CURRENCY_RE = re.compile("[" + re.escape(BOOKING_CURRENCY_SYMBOLS) + "]")
_NON_NUMERIC_RE = re.compile(r"[^0-9.]")
# longest leading decimal, e.g. "12.5.3" -> "12.5"
_LEADING_DECIMAL_RE = re.compile(r"\d+(?:\.\d*)?|\.\d+")


def parse_booking_amount(value: Any) -> float:
    if not value:
        return 0.0

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if not math.isfinite(value):
            return 0.0
        # a minus sign is not a digit, so it goes the same way as for strings.
        # Exponent forms are read by value, not as the digits of "1e+21".
        return abs(float(value))

    numeric = _CURRENCY_RE.sub("", str(value)).strip()
    numeric = _NON_NUMERIC_RE.sub("", numeric)

    match = _LEADING_DECIMAL_RE.match(numeric)
    if not match:
        return 0.0
    return float(match.group(0))


def parse_booking_date(value: Any) -> Optional[datetime]:
    """Read a date string, datetime, date or epoch-milliseconds number.

    ISO-8601 is tried first. Other shapes the booking system emits
    ("2025/01/15", "Jan 15, 2025", RFC 2822) go through dateutil.
    """
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            pass
        try:
            return date_parser.parse(value)
        except (ValueError, OverflowError):
            return None
    return None


def _add_years(moment: datetime, years: int) -> datetime:
    try:
        return moment.replace(year=moment.year + years)
    except ValueError:
        # Feb 29 -> Mar 1
        return moment.replace(year=moment.year + years, month=3, day=1)


def _now_like(parsed: datetime, now: Optional[datetime]) -> datetime:
    if now is None:
        now = datetime.now(timezone.utc)
    if parsed.tzinfo is None and now.tzinfo is not None:
        return now.astimezone().replace(tzinfo=None)
    if parsed.tzinfo is not None and now.tzinfo is None:
        return now.astimezone(timezone.utc)
    return now


def is_valid_booking_date(value: Any, now: Optional[datetime] = None) -> bool:
    """Any past date is valid; future dates only up to two years from `now`."""
    parsed = parse_booking_date(value)
    if parsed is None:
        return False
    max_future = _add_years(_now_like(parsed, now), BOOKING_MAX_FUTURE_YEARS)
    return parsed <= max_future


def get_booking_date(booking: Mapping[str, Any], now: Optional[datetime] = None) -> Optional[datetime]:
    source = None
    for field in BOOKING_DATE_FIELDS:
        source = booking.get(field)
        if source:
            break

    if not is_valid_booking_date(source, now):
        return None
    return parse_booking_date(source)


def is_booking_in_month(booking: Mapping[str, Any], month: int, year: int) -> bool:
    """`month` is zero-indexed: January is 0."""
    booking_date = get_booking_date(booking)
    if booking_date is None:
        return False
    return booking_date.month - 1 == month and booking_date.year == year


def normalize_booking_status(status: Any) -> str:
    if not status:
        return ""
    return str(status).lower().strip()


def is_completed_booking(booking: Mapping[str, Any]) -> bool:
    return normalize_booking_status(booking.get("status")) == "completed"


def calculate_revenue_for_bookings(bookings: Iterable[Mapping[str, Any]]) -> float:
    return sum(
        (parse_booking_amount(b.get("amount")) for b in bookings if is_completed_booking(b)),
        0.0,
    )


def get_bookings_for_month(
    bookings: Iterable[Mapping[str, Any]], month: int, year: int
) -> List[Mapping[str, Any]]:
    return [b for b in bookings if is_booking_in_month(b, month, year)]


def summarize_month(bookings: Iterable[Mapping[str, Any]], month: int, year: int) -> dict:
    in_month = get_bookings_for_month(bookings, month, year)
    completed = [b for b in in_month if is_completed_booking(b)]
    return {
        "month": month,
        "year": year,
        "bookings_count": len(in_month),
        "completed_count": len(completed),
        "revenue": calculate_revenue_for_bookings(completed),
    }
