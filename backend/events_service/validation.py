"""
Input parsing and validation for event payloads and list filters.
"""

from datetime import datetime, time, timezone
from typing import Any, Dict, List, Optional

from backend.errors import ValidationError
from backend.events_service.models import Event, EventPatch, VALID_STATUSES

# --- CONSTANTS FOR VALIDATION ---
TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 100
LONG_DESCRIPTION_MIN_LENGTH = 10
SHORT_DESCRIPTION_MAX_LENGTH = 200
TEXT_FIELDS = ["title", "long_description", "short_description", "organizer", "location", "status"]
FILTER_DATE_FORMAT = "%Y-%m-%d"


def parse_dt(val: Optional[str]) -> Optional[datetime]:
    """
    Safely parse an ISO-8601 string to a timezone-aware datetime.

    Naive values are taken to be UTC.

    Returns:
        datetime: The parsed datetime, or None if invalid.
    """
    if not val or not isinstance(val, str):
        return None
    try:
        # Handles 'YYYY-MM-DDTHH:MM:SS' and '...Z' or '...+00:00'
        if val.endswith("Z"):
            val = val[:-1] + "+00:00"
        parsed = datetime.fromisoformat(val)
    except (ValueError, TypeError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_filter_date(val: str, param: str, end_of_day: bool = False) -> datetime:
    """
    Parse a YYYY-MM-DD query parameter into a UTC instant.

    date_end filters use the last second of the day so the whole day is included.
    """
    try:
        day = datetime.strptime(val, FILTER_DATE_FORMAT).date()
    except ValueError:
        raise ValidationError(f"Invalid {param} format. Use YYYY-MM-DD.")
    at = time(23, 59, 59) if end_of_day else time(0, 0, 0)
    return datetime.combine(day, at, tzinfo=timezone.utc)


def _read_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    """Pull known fields out of a JSON body, rejecting values of the wrong type."""
    errors: List[str] = []
    values: Dict[str, Any] = {}

    for name in TEXT_FIELDS:
        value = data.get(name)
        if value is None:
            continue
        if not isinstance(value, str):
            errors.append(f"{name} must be a string")
            continue
        values[name] = value

    raw_dt = data.get("date_and_time")
    if raw_dt is not None:
        parsed = parse_dt(raw_dt)
        if parsed is None:
            errors.append("date_and_time must be an ISO-8601 datetime")
        else:
            values["date_and_time"] = parsed

    if errors:
        raise ValidationError(errors=errors)
    return values


def event_from_payload(data: Dict[str, Any]) -> Event:
    values = _read_fields(data)
    return Event(
        title=values.get("title", ""),
        long_description=values.get("long_description", ""),
        short_description=values.get("short_description", ""),
        date_and_time=values.get("date_and_time"),
        organizer=values.get("organizer", ""),
        location=values.get("location", ""),
        status=values.get("status", ""),
    )


def patch_from_payload(data: Dict[str, Any]) -> EventPatch:
    return EventPatch(**_read_fields(data))


def validate_event(event: Event, require_future: bool = True, now: Optional[datetime] = None) -> None:
    """
    Check every field of an event and raise a single ValidationError listing
    all failures.

    Args:
        event: The event to check.
        require_future: Reject a date_and_time that is not strictly after now.
        now: Reference instant (defaults to the current UTC time).
    """
    errors: List[str] = []

    # length is checked on the stored, lowercased form
    title = event.title or ""
    if not title.strip():
        errors.append("title is required")
    elif not TITLE_MIN_LENGTH <= len(title.lower()) <= TITLE_MAX_LENGTH:
        errors.append(f"title must be between {TITLE_MIN_LENGTH} and {TITLE_MAX_LENGTH} characters")

    long_description = event.long_description or ""
    if not long_description.strip():
        errors.append("long_description is required")
    elif len(long_description) < LONG_DESCRIPTION_MIN_LENGTH:
        errors.append(f"long_description must be at least {LONG_DESCRIPTION_MIN_LENGTH} characters")

    short_description = event.short_description or ""
    if not short_description.strip():
        errors.append("short_description is required")
    elif len(short_description) > SHORT_DESCRIPTION_MAX_LENGTH:
        errors.append(f"short_description must be {SHORT_DESCRIPTION_MAX_LENGTH} characters or less")

    if event.date_and_time is None:
        errors.append("date_and_time is required")
    elif require_future:
        now = now or datetime.now(timezone.utc)
        if event.date_and_time <= now:
            errors.append("date_and_time must be in the future")

    if not (event.organizer or "").strip():
        errors.append("organizer is required")

    if not (event.location or "").strip():
        errors.append("location is required")

    if event.status not in VALID_STATUSES:
        errors.append(f"status must be one of: {', '.join(VALID_STATUSES)}")

    if errors:
        raise ValidationError(errors=errors)
