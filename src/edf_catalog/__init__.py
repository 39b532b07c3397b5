"""EDF catalog: scan, decode and query EDF recording metadata.

Modules, leaf first:
--------------------
- domain: Recording models (valid/invalid tagged union, value objects)
- decoder: pyedflib boundary returning Decoded/Failed outcomes
- factory: Recording construction rules (patient name, start date, channels)
- cache: Atomically replaced in-memory snapshot
- query: Unsorted and recording-date sorted views
- ingest: Directory scan producing a new snapshot
- service: Scan/cache/query bound to the configured source directory
- config, utils: Settings loading, logging setup, JSON output
- schemas, api, cli: External record view, HTTP API, command line

Example:
--------
>>> from edf_catalog import CatalogService
>>> service = CatalogService("data/edf")
>>> service.load()
>>> [rec.file_name for rec in service.list_all() if not rec.is_valid]
['corrupted.edf']
"""

from edf_catalog.cache import SnapshotCache
from edf_catalog.decoder import Decoded, DecodeOutcome, Decoder, EdfDecoder, Failed
from edf_catalog.domain import (
    ChannelInfo,
    InvalidRecording,
    PatientIdentity,
    RecordingAggregate,
    RecordingMetrics,
    RecordingStatus,
    RecordingWindow,
    ValidRecording,
)
from edf_catalog.exceptions import ConfigError, DirectoryNotFoundError, DirectoryNotReadableError, EdfCatalogError
from edf_catalog.ingest import ScanOrchestrator, is_edf_file
from edf_catalog.query import QueryService
from edf_catalog.service import CatalogService

__version__ = "1.0.0"

__all__ = [
    "CatalogService",
    "ScanOrchestrator",
    "SnapshotCache",
    "QueryService",
    "is_edf_file",
    # Decoding
    "Decoder",
    "EdfDecoder",
    "DecodeOutcome",
    "Decoded",
    "Failed",
    # Domain
    "RecordingAggregate",
    "RecordingStatus",
    "ValidRecording",
    "InvalidRecording",
    "ChannelInfo",
    "PatientIdentity",
    "RecordingMetrics",
    "RecordingWindow",
    # Errors
    "EdfCatalogError",
    "DirectoryNotFoundError",
    "DirectoryNotReadableError",
    "ConfigError",
]
