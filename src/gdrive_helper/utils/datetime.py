from datetime import datetime
from typing import Optional
import logging

import tzlocal

logger = logging.getLogger(__name__)


def convert_datetime_to_local_timezone(date_time: datetime) -> datetime:
    """
    Converts a given datetime object to a local-timezone-aware datetime.
    Args:
        date_time: The datetime object to be converted.

    Returns:
        A datetime object representing the same instant in the local timezone.
    """
    return datetime.astimezone(date_time, tzlocal.get_localzone())


def parse_rfc3339(value: Optional[str]) -> Optional[datetime]:
    """
    Parses an RFC 3339 timestamp as returned by the Drive API.
    Args:
        value: A timestamp such as "2025-01-15T10:00:00.000Z".

    Returns:
        A local-timezone datetime, or None when the value is missing or malformed.
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.warning("Failed to parse timestamp: %s", value)
        return None
    return convert_datetime_to_local_timezone(parsed)
