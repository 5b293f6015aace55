"""
Session expiry policy.
"""

import re
from datetime import timedelta

from shared.errors import InvalidDuration

DEFAULT_SESSION_DURATION = timedelta(hours=1)

# The duration, in seconds, of a derived session: 15 minutes to 12 hours.
MIN_SESSION_DURATION = timedelta(seconds=900)
MAX_SESSION_DURATION = timedelta(seconds=43200)

_DECIMAL = re.compile(r"[+-]?[0-9]+")


def resolve_expiration(requested: str = "") -> timedelta:
    """Return the session duration for a requested number of seconds.

    An empty request yields ``DEFAULT_SESSION_DURATION``. Anything else must be
    a base-10 integer within the min/max bounds, inclusive.
    """
    if not requested:
        return DEFAULT_SESSION_DURATION

    try:
        if not _DECIMAL.fullmatch(requested):
            raise ValueError(requested)
        seconds = int(requested, 10)
    except ValueError as exc:
        raise InvalidDuration(
            "Requested duration is not a base-10 integer",
            details={"requested": requested}
        ) from exc

    if not MIN_SESSION_DURATION.total_seconds() <= seconds <= MAX_SESSION_DURATION.total_seconds():
        raise InvalidDuration(
            "Requested duration is out of range",
            details={
                "requested": requested,
                "min_seconds": int(MIN_SESSION_DURATION.total_seconds()),
                "max_seconds": int(MAX_SESSION_DURATION.total_seconds()),
            }
        )

    return timedelta(seconds=seconds)
