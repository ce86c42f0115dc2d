"""Input parsing helpers shared by services and API routers."""

import uuid
from datetime import date

from squadhub.core.exceptions import ValidationError


def parse_uuid(value, field="id"):
    """Return ``value`` as a UUID or raise ``ValidationError``."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        raise ValidationError(f"Invalid {field}", errors={field: "must be a UUID"})


def parse_uuid_set(values, field="ids"):
    if values is None:
        return set()
    if isinstance(values, (str, bytes)):
        values = [values]
    return {parse_uuid(value, field) for value in values}


def parse_date(value, field="date"):
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise ValidationError(f"Invalid {field}", errors={field: "must be YYYY-MM-DD"})


def sanitize_string(value, max_length=1000):
    """Strip NUL bytes and surrounding whitespace, then truncate."""
    if not isinstance(value, str):
        return ""
    return value.replace("\0", "").strip()[:max_length]
