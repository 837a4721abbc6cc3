"""
Value objects for the pattern-validated fields of rooms, customers and bookings.

Every constructor fails fast with :class:`~karaoke_service.errors.ValidationError`
so that malformed input never reaches the stores.
"""
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Union

from .errors import ValidationError

TIME_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):([0-5][0-9])$")
PHONE_PATTERN = re.compile(r"^\+?[1-9]\d{0,15}$")
EMAIL_PATTERN = re.compile(r"^\w+([.-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,3})+$")

MIN_ROOM_CAPACITY = 1
MAX_ROOM_CAPACITY = 20
MAX_NAME_LENGTH = 100


@dataclass(frozen=True, order=True)
class TimeOfDay:
    """
    A wall-clock time with minute precision.

    Instances order chronologically and render as zero-padded ``HH:MM``,
    so their string form also sorts correctly.
    """
    hour: int
    minute: int

    def __post_init__(self):
        if not (0 <= self.hour <= 23 and 0 <= self.minute <= 59):
            raise ValidationError("Please enter a valid time format (HH:MM)")

    @classmethod
    def parse(cls, raw: str, field: str = "time") -> "TimeOfDay":
        """
        Parse a 24-hour ``HH:MM`` string (a single-digit hour is accepted).

        Raises
        ------
        ValidationError
            If the value is missing or does not match the format.
        """
        if isinstance(raw, TimeOfDay):
            return raw
        if raw is None or str(raw).strip() == "":
            raise ValidationError(f"{field} is required")
        match = TIME_PATTERN.match(str(raw).strip())
        if not match:
            raise ValidationError(f"{field} must be a valid time in HH:MM format")
        return cls(int(match.group(1)), int(match.group(2)))

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


class PhoneNumber(str):
    """Phone number: optional leading ``+`` then up to 16 digits, no leading zero."""

    def __new__(cls, raw: str):
        value = (raw or "").strip()
        if not value:
            raise ValidationError("Phone number is required")
        if not PHONE_PATTERN.match(value):
            raise ValidationError("Please enter a valid phone number")
        return super().__new__(cls, value)


class EmailAddress(str):
    """E-mail address, trimmed and lower-cased before validation."""

    def __new__(cls, raw: str):
        value = (raw or "").strip().lower()
        if not value:
            raise ValidationError("Email is required")
        if not EMAIL_PATTERN.match(value):
            raise ValidationError("Please enter a valid email")
        return super().__new__(cls, value)


def to_day(value: Union[date, datetime, str, None]) -> date:
    """
    Normalize a booking date to a calendar day.

    Accepts a ``date``, a ``datetime`` or an ISO string; any time-of-day
    component is dropped, so two values denote the same day iff their
    normalized results are equal. The whole string must parse; trailing
    text after the day is rejected.
    """
    if value is None or value == "":
        raise ValidationError("Date is required")
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    raw = str(value).strip()
    try:
        return date.fromisoformat(raw)
    except ValueError:
        pass
    # fromisoformat only learned the "Z" suffix in 3.11
    if raw.endswith(("Z", "z")):
        raw = raw[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(raw).date()
    except ValueError:
        raise ValidationError("Date must be a valid calendar day (YYYY-MM-DD)")


def clean_room_number(raw: str) -> str:
    value = (raw or "").strip()
    if not value:
        raise ValidationError("Room number is required")
    return value


def clean_name(raw: str) -> str:
    value = (raw or "").strip()
    if not value:
        raise ValidationError("Name is required")
    if len(value) > MAX_NAME_LENGTH:
        raise ValidationError(f"Name cannot exceed {MAX_NAME_LENGTH} characters")
    return value


def check_capacity(capacity: int) -> int:
    if capacity is None:
        raise ValidationError("Capacity is required")
    if capacity < MIN_ROOM_CAPACITY:
        raise ValidationError(f"Capacity must be at least {MIN_ROOM_CAPACITY}")
    if capacity > MAX_ROOM_CAPACITY:
        raise ValidationError(f"Capacity cannot exceed {MAX_ROOM_CAPACITY}")
    return capacity
