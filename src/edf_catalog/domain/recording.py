"""Recording domain models for the EDF catalog.

One recording aggregate is built per ``.edf`` file found in the source
directory. The aggregate is a tagged union of two shapes:

- ValidRecording: header metadata decoded successfully
- InvalidRecording: decoding failed, only the file name and reason are kept

Model Hierarchy:
---------------
- ValidRecording
  ├── RecordingWindow (optional, absent when the start date/time is unparseable)
  ├── PatientIdentity
  ├── ChannelInfo (tuple)
  └── RecordingMetrics
- InvalidRecording

Key Features:
-------------
- **Immutable**: frozen=True prevents modification after construction
- **Strict Schema**: extra="forbid" rejects unknown fields
- **Total Invalidity**: InvalidRecording has no fields for channels, metrics,
  dates or patient data; its accessors return fixed empty values
- **Uniform Access**: both shapes expose the same read accessors so callers
  can iterate a snapshot without branching on the variant

Usage:
------
>>> from edf_catalog.factory import from_failure
>>> rec = from_failure("broken.edf", "Invalid EDF File")
>>> rec.is_valid, rec.channels, rec.total_length_seconds
(False, (), 0.0)

See Also:
---------
- edf_catalog.factory: The only place recordings are constructed
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Optional, Tuple, Union

from pydantic import BaseModel, Field

NOT_AVAILABLE = "Not Available"


class RecordingStatus(str, Enum):
    """Validity tag of a recording aggregate."""

    VALID = "valid"
    INVALID = "invalid"


class ChannelInfo(BaseModel):
    """Signal channel of a recording.

    Attributes:
        label: Channel label, trimmed (e.g. "EEG Fp1")
        transducer_type: Transducer description, verbatim ("" when not recorded)
    """

    model_config = {"frozen": True, "extra": "forbid"}

    label: str = Field(..., description="Channel label (trimmed)")
    transducer_type: str = Field(default="", description="Transducer type as stored in the header")


class RecordingWindow(BaseModel):
    """Recording start as stored in the header and as parsed.

    Only built when ``"<date> <time>"`` matches ``dd.MM.yy HH.mm.ss``;
    an unparseable start is represented by the absence of the window.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    raw_start_date: str = Field(..., description="Start date header field, e.g. '03.03.22'")
    raw_start_time: str = Field(..., description="Start time header field, e.g. '10.30.00'")
    parsed: datetime = Field(..., description="Combined start timestamp")


class PatientIdentity(BaseModel):
    """Patient details taken from the subject identification field.

    EDF convention for the field: ``code sex birthdate name`` where the name
    joins its parts with underscores (``DO0815199 F 06-MAY-2024 Jane_Doe``).
    """

    model_config = {"frozen": True, "extra": "forbid"}

    raw_subject_id: Optional[str] = Field(default=None, description="Subject identification field, None when blank")
    display_name: str = Field(default=NOT_AVAILABLE, description="Extracted patient name or 'Not Available'")


class RecordingMetrics(BaseModel):
    """Data record count and per-record duration."""

    model_config = {"frozen": True, "extra": "forbid"}

    record_count: int = Field(default=0, description="Number of data records")
    record_duration_seconds: float = Field(default=0.0, description="Duration of one data record in seconds")

    @property
    def total_length_seconds(self) -> float:
        """Total recording length: record count times record duration."""
        return self.record_count * self.record_duration_seconds


class _RecordingAccessors(BaseModel):
    """Read accessors shared by both recording shapes."""

    model_config = {"frozen": True, "extra": "forbid"}

    file_name: str = Field(..., description="Name of the source file, including extension")

    @property
    def is_valid(self) -> bool:
        return self.status == RecordingStatus.VALID

    @property
    def recording_date(self) -> Optional[datetime]:
        """Parsed recording start, or None when invalid or unparseable."""
        return self.recording_window.parsed if self.recording_window is not None else None

    @property
    def patient_name(self) -> Optional[str]:
        return self.patient_identity.display_name if self.patient_identity is not None else None

    @property
    def channel_count(self) -> int:
        return len(self.channels)

    @property
    def total_length_seconds(self) -> float:
        return self.metrics.total_length_seconds


class ValidRecording(_RecordingAccessors):
    """Recording whose header was decoded.

    Attributes:
        file_name: Source file name
        recording_id: Recording identification field, trimmed
        recording_window: Parsed start, None when the header date is unparseable
        patient_identity: Subject identification and extracted name
        channels: Signal channels in header order
        metrics: Record count and record duration
        annotation_count: Number of annotations (0 when the file has none)
    """

    status: Literal[RecordingStatus.VALID] = RecordingStatus.VALID
    recording_id: str = Field(default="", description="Recording identification (trimmed)")
    recording_window: Optional[RecordingWindow] = Field(default=None, description="Recording start, if parseable")
    patient_identity: PatientIdentity = Field(default_factory=PatientIdentity)
    channels: Tuple[ChannelInfo, ...] = Field(default=())
    metrics: RecordingMetrics = Field(default_factory=RecordingMetrics)
    annotation_count: int = Field(default=0, ge=0)

    @property
    def error_reason(self) -> str:
        return ""


class InvalidRecording(_RecordingAccessors):
    """Recording that could not be decoded.

    Carries only the file name and the failure reason; every other accessor
    returns the empty value for its type.
    """

    status: Literal[RecordingStatus.INVALID] = RecordingStatus.INVALID
    error_reason: str = Field(..., description="Why decoding failed")

    @property
    def recording_id(self) -> str:
        return ""

    @property
    def recording_window(self) -> None:
        return None

    @property
    def patient_identity(self) -> None:
        return None

    @property
    def channels(self) -> Tuple[ChannelInfo, ...]:
        return ()

    @property
    def metrics(self) -> RecordingMetrics:
        return RecordingMetrics()

    @property
    def annotation_count(self) -> int:
        return 0


RecordingAggregate = Annotated[Union[ValidRecording, InvalidRecording], Field(discriminator="status")]
"""A recording of either shape, discriminated by ``status``."""

Snapshot = Tuple[Union[ValidRecording, InvalidRecording], ...]
"""Full, ordered result of one directory scan."""
