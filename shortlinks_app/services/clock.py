"""
Clock collaborators.

Everything that stamps or compares time (creation, expiry, click timestamps,
sweeps) reads it from an injected clock so tests can control it.
"""

import threading
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Optional


class Clock(ABC):
    """Source of the current time"""
    
    @abstractmethod
    def now(self) -> datetime:
        """Current time as a timezone-aware UTC datetime"""
        pass


class SystemClock(Clock):
    """Wall clock in UTC"""
    
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock(Clock):
    """
    Manually driven clock.
    
    Returns the same instant until it is moved with ``set`` or ``advance``.
    """
    
    def __init__(self, start: Optional[datetime] = None):
        self._lock = threading.Lock()
        self._now = start or datetime.now(timezone.utc)
    
    def now(self) -> datetime:
        with self._lock:
            return self._now
    
    def set(self, value: datetime) -> None:
        with self._lock:
            self._now = value
    
    def advance(self, delta: Optional[timedelta] = None, **kwargs) -> datetime:
        """Move forward by ``delta`` or by timedelta keyword arguments."""
        step = delta if delta is not None else timedelta(**kwargs)
        with self._lock:
            self._now = self._now + step
            return self._now
