"""
TIME INFORMATION UTILITY
========================

Returns the timestamp string stamped on every JSON response: ISO-8601 in UTC
with millisecond precision and a trailing "Z" (e.g. 2026-02-05T14:03:07.123Z),
the format mobile clients already parse.
"""

import datetime


def get_timestamp() -> str:
    """Return the current UTC time as an ISO-8601 string with milliseconds."""
    now = datetime.datetime.now(datetime.timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"
