"""Date helpers: request date parsing, Monday-start weeks and local-day boundaries."""
import re
from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from dailycook.domain.errors import ValidationError
from dailycook.utilities.config import APP_TIMEZONE

_ISO_DAY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def local_tz() -> ZoneInfo:
    return ZoneInfo(APP_TIMEZONE)


def now() -> datetime:
    """Timezone-aware current time in the application timezone."""
    return datetime.now(local_tz())


def local_aware(moment: datetime) -> datetime:
    """Read a naive stored timestamp as local time; aware ones pass through."""
    return moment if moment.tzinfo else moment.replace(tzinfo=local_tz())


def as_date(value) -> date:
    """Parse 'YYYY-MM-DD' or an ISO datetime into a calendar day.

    Raises ValidationError for anything else.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value or not isinstance(value, str):
        raise ValidationError("Invalid date")
    text = value.strip()
    try:
        if _ISO_DAY.match(text):
            return date.fromisoformat(text)
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        raise ValidationError(f"Invalid date: {value!r}")


def week_window(day: date) -> Tuple[date, date]:
    """Monday..Sunday window containing the given day."""
    monday = day - timedelta(days=day.weekday())
    return monday, monday + timedelta(days=6)


def start_of_day(moment: Optional[datetime] = None) -> datetime:
    """Local midnight of the day containing 'moment' (default: now)."""
    moment = moment or now()
    return datetime.combine(moment.date(), time.min, tzinfo=moment.tzinfo)
