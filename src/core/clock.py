"""Business-timezone clock helpers.

All datetimes are persisted naive, expressed as wall-clock time in
``settings.business_timezone``.
"""

from datetime import datetime

from src.core.config import settings


def now() -> datetime:
    """Current wall-clock time in the business timezone, naive."""
    return datetime.now(settings.tzinfo).replace(tzinfo=None)


def to_business_time(value: datetime) -> datetime:
    """Convert an aware datetime into naive business time.

    Naive values are assumed to already be business time and pass through.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone(settings.tzinfo).replace(tzinfo=None)
