"""Domain models for the EDF catalog.

All models are Pydantic models with ``frozen=True`` and ``extra="forbid"``;
they are re-exported here so callers can import from the package root.

Import Patterns:
---------------
# Direct module imports
from edf_catalog.domain.recording import ValidRecording, InvalidRecording

# Package root imports
from edf_catalog.domain import ChannelInfo, RecordingMetrics, Snapshot
"""

from edf_catalog.domain.recording import (
    NOT_AVAILABLE,
    ChannelInfo,
    InvalidRecording,
    PatientIdentity,
    RecordingAggregate,
    RecordingMetrics,
    RecordingStatus,
    RecordingWindow,
    Snapshot,
    ValidRecording,
)

__all__ = [
    "NOT_AVAILABLE",
    # Recording shapes
    "RecordingAggregate",
    "RecordingStatus",
    "ValidRecording",
    "InvalidRecording",
    "Snapshot",
    # Value objects
    "ChannelInfo",
    "PatientIdentity",
    "RecordingMetrics",
    "RecordingWindow",
]
