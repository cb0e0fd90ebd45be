"""
Registry storage strategies using Strategy Pattern.

The registry owns two maps keyed by shortcode:
- records: shortcode -> UrlRecord
- clicks:  shortcode -> list of ClickEvent (append-only, insertion order)

Any implementation must make "check then insert" a single step, so two
concurrent requests for the same custom code can never both succeed.
"""

import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, NamedTuple, Optional, Tuple

from shortlinks_app.models import ClickEvent, UrlRecord, UrlSummary

logger = logging.getLogger(__name__)


class StoredStats(NamedTuple):
    """Snapshot of a record and its clicks taken at one instant"""
    record: UrlRecord
    clicks: Tuple[ClickEvent, ...]

    @property
    def total_clicks(self) -> int:
        return len(self.clicks)


class RegistryStore(ABC):
    """
    Abstract base class for registry stores.

    Mutations (create, record_click, sweep_expired) must be linearizable with
    respect to each other. Reads must return a consistent snapshot of each
    record.
    """

    @abstractmethod
    def exists(self, shortcode: str) -> bool:
        """Check whether a record is held for ``shortcode``"""
        pass

    @abstractmethod
    def create(self, shortcode: str, record: UrlRecord) -> bool:
        """
        Insert a new record atomically.

        Args:
            shortcode: Key for the record
            record: Record to store (its shortcode must match)

        Returns:
            True if inserted, False if the shortcode is already present
            (in which case nothing was changed)
        """
        pass

    @abstractmethod
    def get(self, shortcode: str) -> Optional[UrlRecord]:
        """Get a record, or None if unknown"""
        pass

    @abstractmethod
    def list_all(self) -> List[UrlSummary]:
        """Summaries of every held record, live or expired"""
        pass

    @abstractmethod
    def record_click(self, shortcode: str, event: ClickEvent) -> bool:
        """
        Append a click event to a record.

        Returns:
            True if appended, False if the shortcode is unknown (never
            creates a record)
        """
        pass

    @abstractmethod
    def get_stats(self, shortcode: str) -> Optional[StoredStats]:
        """Get a record with its clicks, or None if unknown"""
        pass

    @abstractmethod
    def sweep_expired(self, now: datetime) -> int:
        """
        Delete every record (and its clicks) with ``expires_at < now``.

        Returns:
            Number of records removed
        """
        pass

    @abstractmethod
    def count(self) -> int:
        """Number of records currently held"""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Drop every record and click"""
        pass


class InMemoryRegistryStore(RegistryStore):
    """
    In-memory registry guarded by a single re-entrant lock.

    Pros:
    - No external services
    - Every operation is a short dict operation under one lock

    Cons:
    - Lost on restart
    - Not shared between processes

    Records and events are immutable models, so handing them out of the lock
    is safe; click lists are copied into tuples before leaving it.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._records: Dict[str, UrlRecord] = {}
        self._clicks: Dict[str, List[ClickEvent]] = {}

    def exists(self, shortcode: str) -> bool:
        with self._lock:
            return shortcode in self._records

    def create(self, shortcode: str, record: UrlRecord) -> bool:
        if record.shortcode != shortcode:
            raise ValueError(
                f"Record shortcode {record.shortcode!r} does not match key {shortcode!r}"
            )

        with self._lock:
            if shortcode in self._records:
                logger.debug("Create rejected, shortcode already held: %s", shortcode)
                return False

            self._records[shortcode] = record
            self._clicks[shortcode] = []

        logger.debug("Record stored: %s -> %s", shortcode, record.original_url)
        return True

    def get(self, shortcode: str) -> Optional[UrlRecord]:
        with self._lock:
            return self._records.get(shortcode)

    def list_all(self) -> List[UrlSummary]:
        with self._lock:
            return [
                UrlSummary(
                    shortcode=shortcode,
                    original_url=record.original_url,
                    created_at=record.created_at,
                    expires_at=record.expires_at,
                    total_clicks=len(self._clicks[shortcode]),
                )
                for shortcode, record in self._records.items()
            ]

    def record_click(self, shortcode: str, event: ClickEvent) -> bool:
        with self._lock:
            clicks = self._clicks.get(shortcode)
            if clicks is None:
                logger.debug("Click dropped, shortcode not held: %s", shortcode)
                return False
            clicks.append(event)
            return True

    def get_stats(self, shortcode: str) -> Optional[StoredStats]:
        with self._lock:
            record = self._records.get(shortcode)
            if record is None:
                return None
            return StoredStats(record=record, clicks=tuple(self._clicks[shortcode]))

    def sweep_expired(self, now: datetime) -> int:
        with self._lock:
            expired = [
                shortcode
                for shortcode, record in self._records.items()
                if record.expires_at < now
            ]
            for shortcode in expired:
                del self._records[shortcode]
                del self._clicks[shortcode]

        if expired:
            logger.info("Swept %d expired records", len(expired))
        return len(expired)

    def count(self) -> int:
        with self._lock:
            return len(self._records)

    def clear(self) -> None:
        with self._lock:
            self._records.clear()
            self._clicks.clear()
