# gyneco/helpers/time.py
from datetime import datetime, timedelta, timezone
from typing import Annotated

from pydantic import AfterValidator


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Naive values are taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# Datetime field that always holds an aware UTC value
UtcDateTime = Annotated[datetime, AfterValidator(as_utc)]


def current_year() -> int:
    return utcnow().year


def local_day_bounds(now: datetime | None = None) -> tuple[datetime, datetime]:
    """Return the UTC instants delimiting the local calendar day of ``now``."""
    local_now = (now or utcnow()).astimezone()
    start = local_now.replace(hour=0, minute=0, second=0, microsecond=0)
    end = start + timedelta(days=1)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)
