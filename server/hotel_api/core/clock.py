"""Time helpers shared by models and services."""

from datetime import date, datetime, timezone


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, the form stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def today() -> date:
    """Current UTC calendar date used for check-in and pricing decisions."""
    return utcnow().date()
