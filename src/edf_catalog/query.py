"""Read views over the EDF catalog snapshot."""

import logging
from typing import List, Union

from .cache import SnapshotCache
from .domain import InvalidRecording, ValidRecording

logger = logging.getLogger(__name__)


class QueryService:
    """Unsorted and recording-date sorted views of a ``SnapshotCache``."""

    def __init__(self, cache: SnapshotCache):
        self.cache = cache

    def list_all(self) -> List[Union[ValidRecording, InvalidRecording]]:
        """All recordings in snapshot order."""
        return list(self.cache.current())

    def list_sorted_by_recording_date(self) -> List[Union[ValidRecording, InvalidRecording]]:
        """All recordings, newest recording date first.

        Recordings without a parsed date (invalid files, unparseable header
        dates) come after every dated recording, in snapshot order.
        """
        logger.debug("Get all EDF records and return them sorted")
        recordings = self.list_all()
        dated = [rec for rec in recordings if rec.recording_date is not None]
        undated = [rec for rec in recordings if rec.recording_date is None]
        # sorted() is stable, so equal dates keep snapshot order
        dated = sorted(dated, key=lambda rec: rec.recording_date, reverse=True)
        return dated + undated
