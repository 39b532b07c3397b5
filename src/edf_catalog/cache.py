"""In-memory snapshot of the EDF catalog.

The cache holds exactly one snapshot: the tuple of recordings produced by the
last successful scan. ``replace`` swaps the whole tuple under a lock and
``current`` hands out the tuple itself. Tuples and recordings are immutable,
so readers iterate without holding the lock and always see either the old or
the new snapshot in full.
"""

import logging
import threading
from typing import Iterable, Iterator, Union

from .domain import InvalidRecording, Snapshot, ValidRecording

logger = logging.getLogger(__name__)


class SnapshotCache:
    """Holds the current snapshot and replaces it as a unit."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._snapshot: Snapshot = ()

    def replace(self, recordings: Iterable[Union[ValidRecording, InvalidRecording]]) -> Snapshot:
        """Substitute the current snapshot.

        Args:
            recordings: Recordings of the new snapshot, in snapshot order

        Returns:
            The snapshot now held by the cache
        """
        snapshot = tuple(recordings)
        with self._lock:
            self._snapshot = snapshot
        logger.debug(f"Snapshot replaced ({len(snapshot)} recordings)")
        return snapshot

    def current(self) -> Snapshot:
        """Return the current snapshot (read-only)."""
        with self._lock:
            return self._snapshot

    def __len__(self) -> int:
        return len(self.current())

    def __iter__(self) -> Iterator[Union[ValidRecording, InvalidRecording]]:
        return iter(self.current())
