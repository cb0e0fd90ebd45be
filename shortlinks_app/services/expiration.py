"""
Expiration policy.

A record is expired strictly after its expiry instant: at ``expires_at``
itself it still resolves. The sweep uses the same boundary, removing only
records with ``expires_at < now``.
"""

from datetime import datetime, timedelta
from typing import Optional

DEFAULT_VALIDITY_MINUTES = 30
MAX_VALIDITY_MINUTES = 525600  # One year


def is_expired(expires_at: datetime, now: datetime) -> bool:
    """True once ``now`` is past ``expires_at``."""
    return now > expires_at


def compute_expiry(created_at: datetime, validity_minutes: Optional[int] = None) -> datetime:
    """Expiry instant for a record created at ``created_at``."""
    if validity_minutes is None:
        validity_minutes = DEFAULT_VALIDITY_MINUTES
    return created_at + timedelta(minutes=validity_minutes)
