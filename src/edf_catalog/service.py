"""Catalog orchestration for the EDF catalog.

``CatalogService`` owns one cache, the scan orchestrator that writes it and
the query service that reads it, all bound to one source directory. It is
the only place where Settings flow into the scanning code; everything below
it receives plain paths and a decoder.

Lifecycle:
----------
1. Build: ``CatalogService.from_settings(settings)``
2. Load: ``service.load()`` runs the initial scan
3. Serve: ``list_all()`` / ``list_sorted_by_recording_date()``
4. Refresh on demand: ``rescan(sorted=...)`` scans, then returns the view

Example:
--------
>>> from edf_catalog.config import load_settings
>>> from edf_catalog.service import CatalogService
>>>
>>> service = CatalogService.from_settings(load_settings("config.toml"))
>>> service.load()
>>> for rec in service.list_sorted_by_recording_date():
...     print(rec.file_name, rec.recording_date)
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from .cache import SnapshotCache
from .config import Settings
from .decoder import Decoder
from .domain import InvalidRecording, Snapshot, ValidRecording
from .ingest import ScanOrchestrator
from .query import QueryService

logger = logging.getLogger(__name__)


class CatalogService:
    """Scan, cache and query the recordings of one source directory.

    Args:
        source_path: Directory holding the EDF files
        decoder: Decoder capability (default: EdfDecoder)
        max_workers: Files decoded in parallel during a scan
    """

    def __init__(self, source_path: Union[str, Path], decoder: Optional[Decoder] = None, max_workers: int = 1):
        self.source_path = Path(source_path)
        self.cache = SnapshotCache()
        self.orchestrator = ScanOrchestrator(self.cache, decoder=decoder, max_workers=max_workers)
        self.query = QueryService(self.cache)

    @classmethod
    def from_settings(cls, settings: Settings, decoder: Optional[Decoder] = None) -> "CatalogService":
        return cls(settings.source.source_path, decoder=decoder, max_workers=settings.source.max_workers)

    def load(self) -> Snapshot:
        """Scan the source directory and replace the snapshot.

        Raises:
            DirectoryNotFoundError: If the source directory is missing
        """
        return self.orchestrator.scan(self.source_path)

    def list_all(self) -> List[Union[ValidRecording, InvalidRecording]]:
        return self.query.list_all()

    def list_sorted_by_recording_date(self) -> List[Union[ValidRecording, InvalidRecording]]:
        return self.query.list_sorted_by_recording_date()

    def rescan(self, sorted: bool = False) -> List[Union[ValidRecording, InvalidRecording]]:
        """Scan the source directory again and return the requested view.

        Args:
            sorted: Return the recording-date sorted view instead of snapshot order

        Raises:
            DirectoryNotFoundError: If the source directory is missing; the
                previous snapshot stays in place
        """
        logger.debug("Rescanning EDF source and return all records")
        self.load()
        return self.list_sorted_by_recording_date() if sorted else self.list_all()
