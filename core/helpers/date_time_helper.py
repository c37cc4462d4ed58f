"""
date_time_helper.py

Helper functions for date and time values. Timestamps are stored as UTC
ISO strings.
"""

from datetime import datetime, timezone


def utc_now_iso() -> str:
    """
    Returns the current UTC time as an ISO8601 string (YYYY-MM-DDTHH:MM:SS+00:00).
    Used for the run log.
    """
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()
