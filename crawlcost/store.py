"""crawlcost - Log store boundary"""

import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional, Protocol, Sequence

from .models import TrafficRecord

logger = logging.getLogger(__name__)

Subscriber = Callable[[TrafficRecord], None]


class LogStore(Protocol):
    """What the analyzer needs from a persistence layer"""

    def insert(self, records: Sequence[TrafficRecord]) -> None:
        ...

    def query(self, site_id: str, since: Optional[datetime] = None) -> List[TrafficRecord]:
        """Records of ``site_id`` at or after ``since``, newest first"""
        ...


class MemoryLogStore:
    """In-process store that forwards inserted records to subscribers"""

    def __init__(self):
        self._records: Dict[str, List[TrafficRecord]] = {}
        self._subscribers: List[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)
        return unsubscribe

    def insert(self, records: Sequence[TrafficRecord]) -> None:
        for record in records:
            self._records.setdefault(record.site_id, []).append(record)
        logger.debug("Stored %d record(s)", len(records))
        for record in records:
            for callback in list(self._subscribers):
                callback(record)

    def query(self, site_id: str, since: Optional[datetime] = None) -> List[TrafficRecord]:
        records = self._records.get(site_id, [])
        if since is not None:
            records = [r for r in records if r.entry.timestamp >= since]
        return sorted(records, key=lambda r: r.entry.timestamp, reverse=True)

    def __len__(self):
        return sum(len(r) for r in self._records.values())
