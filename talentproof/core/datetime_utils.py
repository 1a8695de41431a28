"""
UTC time helpers.

Session start times and health timestamps go through these functions so tests
can patch a single place.
"""
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def utc_timestamp() -> int:
    """Current time as whole seconds since the Unix epoch."""
    return int(utc_now().timestamp())
