"""External record view of the EDF catalog.

``RecordingView`` is what the HTTP API and the command line emit: a flat,
camelCase JSON object per file. Invalid files keep their file name and
error message, report "Not Available" and zero counts, and have a null
recording id and date and an empty ``channels`` list.

Example (valid file):
---------------------
    {
      "fileName": "patient001.edf",
      "validEdf": true,
      "errorMessage": null,
      "recordingID": "Startdate 03-MAR-2022 ZHI27402 Mrs._John_Doe Zeto_WR-08",
      "recordingDate": "2022-03-03T10:30:00",
      "patientName": "John Doe",
      "channels": [{"name": "EEG Fp1", "type": "AgCl"}],
      "numberOfChannels": 1,
      "recordingLength": 3600.0,
      "numberOfAnnotations": 5
    }
"""

from datetime import datetime
from typing import Iterable, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from .domain import NOT_AVAILABLE, InvalidRecording, ValidRecording


class ChannelView(BaseModel):
    """Channel label and transducer type."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: str


class RecordingView(BaseModel):
    """Flat view of one recording."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    file_name: str = Field(..., alias="fileName")
    valid_edf: bool = Field(..., alias="validEdf")
    error_message: Optional[str] = Field(default=None, alias="errorMessage")
    recording_id: Optional[str] = Field(default=None, alias="recordingID")
    recording_date: Optional[datetime] = Field(default=None, alias="recordingDate")
    patient_name: Optional[str] = Field(default=None, alias="patientName")
    channels: List[ChannelView] = Field(default_factory=list)
    number_of_channels: Optional[int] = Field(default=None, alias="numberOfChannels")
    recording_length: Optional[float] = Field(default=None, alias="recordingLength")
    number_of_annotations: Optional[int] = Field(default=None, alias="numberOfAnnotations")

    @classmethod
    def from_recording(cls, recording: Union[ValidRecording, InvalidRecording]) -> "RecordingView":
        if not recording.is_valid:
            # Header-derived counts read as empty, not unknown
            return cls(
                file_name=recording.file_name,
                valid_edf=False,
                error_message=recording.error_reason,
                patient_name=NOT_AVAILABLE,
                number_of_channels=0,
                recording_length=0.0,
                number_of_annotations=0,
            )

        return cls(
            file_name=recording.file_name,
            valid_edf=True,
            recording_id=recording.recording_id,
            recording_date=recording.recording_date,
            patient_name=recording.patient_name,
            channels=[ChannelView(name=ch.label, type=ch.transducer_type) for ch in recording.channels],
            number_of_channels=recording.channel_count,
            recording_length=recording.total_length_seconds,
            number_of_annotations=recording.annotation_count,
        )


_VIEW_LIST = TypeAdapter(List[RecordingView])


def to_views(recordings: Iterable[Union[ValidRecording, InvalidRecording]]) -> List[RecordingView]:
    return [RecordingView.from_recording(rec) for rec in recordings]


def views_to_json(recordings: Iterable[Union[ValidRecording, InvalidRecording]], indent: Optional[int] = 2) -> str:
    """Serialize ``recordings`` as a JSON array of record views (camelCase keys, ISO dates)."""
    return _VIEW_LIST.dump_json(to_views(recordings), indent=indent, by_alias=True).decode("utf-8")
