"""
Utility functions for the application.
"""
from datetime import datetime, timezone


def utcnow() -> datetime:
    """Timezone-naive UTC timestamp, as stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
