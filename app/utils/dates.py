"""Calendar-date helpers.

Exercise dates are whole calendar days. They are stored as UTC midnight
datetimes (BSON has no date-only type) and rendered in the fixed
``"Mon Jan 01 2024"`` form regardless of the process locale.
"""

import re
from datetime import date, datetime, time, timezone
from typing import Optional, Tuple, Union

DAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
MONTH_NAMES = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]
FULL_MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

# "2024/01/15"
_SLASH_YMD_PATTERN = re.compile(r"^(\d{4})/(\d{1,2})/(\d{1,2})$")
# "01/15/2024"
_SLASH_MDY_PATTERN = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
# "Mon Jan 15 2024", "January 15, 2024", "Monday, Jan. 15 2024"
_MONTH_FIRST_PATTERN = re.compile(
    r"^(?:[A-Za-z]+,?\s+)?([A-Za-z]+)\.?\s+(\d{1,2}),?\s+(\d{4})$"
)
# "15 January 2024"
_DAY_FIRST_PATTERN = re.compile(r"^(\d{1,2})\s+([A-Za-z]+)\.?,?\s+(\d{4})$")


class InvalidDateError(ValueError):
    """Raised when a string cannot be read as a calendar date."""


def today() -> date:
    """Current calendar date in UTC."""
    return datetime.now(timezone.utc).date()


def month_number(name: str) -> Optional[int]:
    """Month number for a full or three-letter English month name."""
    name = name.capitalize()
    if name in MONTH_NAMES:
        return MONTH_NAMES.index(name) + 1
    if name in FULL_MONTH_NAMES:
        return FULL_MONTH_NAMES.index(name) + 1
    return None


def _numeric_date(text: str) -> Optional[Tuple[str, str, str]]:
    match = _SLASH_YMD_PATTERN.match(text)
    if match:
        return match.groups()
    match = _SLASH_MDY_PATTERN.match(text)
    if match:
        month, day, year = match.groups()
        return year, month, day
    return None


def _named_month_date(text: str) -> Optional[Tuple[str, int, str]]:
    match = _MONTH_FIRST_PATTERN.match(text)
    if match:
        month_name, day, year = match.groups()
    else:
        match = _DAY_FIRST_PATTERN.match(text)
        if not match:
            return None
        day, month_name, year = match.groups()

    month = month_number(month_name)
    if month is None:
        return None
    return year, month, day


def parse_date(value: str) -> date:
    """
    Parse a calendar date from user input.

    Forms are tried in order:

    - ``YYYY-MM-DD`` and ISO-8601 datetimes (the date part is kept)
    - ``YYYY/MM/DD`` and ``MM/DD/YYYY``
    - English month names, full or abbreviated, with an optional leading
      weekday (``"January 15, 2024"``, ``"Mon Jan 15 2024"``,
      ``"15 Jan 2024"``), which includes the output of :func:`format_date`

    Raises:
        InvalidDateError: If the value matches none of those forms or names
            a day that does not exist
    """
    text = (value or "").strip()
    if not text:
        raise InvalidDateError("Empty date")

    try:
        return date.fromisoformat(text)
    except ValueError:
        pass

    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass

    parts = _numeric_date(text) or _named_month_date(text)
    if parts:
        year, month, day = parts
        try:
            return date(int(year), int(month), int(day))
        except ValueError:
            pass

    raise InvalidDateError(f"Invalid date: {value!r}")


def parse_optional_date(value: Optional[str]) -> Optional[date]:
    """Parse a date, treating ``None`` and blank strings as absent."""
    if value is None or not str(value).strip():
        return None
    return parse_date(value)


def to_storage(value: date) -> datetime:
    """Convert a calendar date to the UTC midnight datetime that is stored."""
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


def from_storage(value: Union[datetime, date]) -> date:
    """Convert a stored datetime back to its calendar date."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    return value


def format_date(value: Union[datetime, date]) -> str:
    """Render a date as ``"Mon Jan 01 2024"``."""
    day = from_storage(value)
    return (
        f"{DAY_NAMES[day.weekday()]} {MONTH_NAMES[day.month - 1]} "
        f"{day.day:02d} {day.year:04d}"
    )
