"""Recording construction rules for the EDF catalog.

This module is the only place recordings are built. It turns a decode
outcome into a ``ValidRecording`` or an ``InvalidRecording`` and owns the
field rules applied on the way:

- **Recording id**: trimmed
- **Recording window**: start date and time trimmed, joined by one space and
  parsed as ``dd.MM.yy HH.mm.ss`` (two digits per field, ``yy`` read as
  20yy); anything else gives no window
- **Patient name**: 4th whitespace token of the subject id when it looks like
  ``First_Last`` (letters and dots joined by single underscores), with
  underscores turned into spaces; otherwise "Not Available"
- **Channels**: one per label, labels trimmed, transducer type taken by
  position ("" when missing)
- **Annotation count**: length of the annotation list, 0 when absent

Public API:
-----------
- from_failure(file_name, reason) -> InvalidRecording
- from_decoded(file_name, decoded) -> ValidRecording
- from_outcome(file_name, outcome) -> ValidRecording | InvalidRecording
- parse_recording_window(start_date, start_time) -> RecordingWindow | None
- extract_patient_identity(subject_id) -> PatientIdentity
- build_channels(labels, types) -> tuple of ChannelInfo
"""

from datetime import datetime
import logging
import re
from typing import Optional, Sequence, Tuple, Union

from .decoder import Decoded, DecodeOutcome, Failed
from .domain import (
    NOT_AVAILABLE,
    ChannelInfo,
    InvalidRecording,
    PatientIdentity,
    RecordingMetrics,
    RecordingWindow,
    ValidRecording,
)

logger = logging.getLogger(__name__)

# dd.MM.yy HH.mm.ss
_DATE_TIME_PATTERN = re.compile(r"([0-9]{2})\.([0-9]{2})\.([0-9]{2}) ([0-9]{2})\.([0-9]{2})\.([0-9]{2})")
_CENTURY = 2000

# Patient name token: First_Last, First_Middle_Last, Mrs._Jane_Doe, ...
_PATIENT_NAME_PATTERN = re.compile(r"[A-Za-z.]+(?:_[A-Za-z.]+)+")
_PATIENT_NAME_TOKEN = 3


def from_failure(file_name: str, reason: str) -> InvalidRecording:
    """Build an invalid recording carrying ``reason`` verbatim."""
    logger.warning(f"Creating invalid EDF data for file: {file_name}")
    return InvalidRecording(file_name=file_name, error_reason=reason)


def from_decoded(file_name: str, decoded: Decoded) -> ValidRecording:
    """Build a valid recording from decoded header fields.

    Args:
        file_name: Source file name
        decoded: Header fields from the decoder

    Returns:
        ValidRecording with all field rules applied
    """
    logger.debug(f"Creating valid EDF data for file: {file_name}")
    return ValidRecording(
        file_name=file_name,
        recording_id=(decoded.recording_id or "").strip(),
        recording_window=parse_recording_window(decoded.start_date, decoded.start_time),
        patient_identity=extract_patient_identity(decoded.subject_id),
        channels=build_channels(decoded.channel_labels, decoded.transducer_types),
        metrics=RecordingMetrics(
            record_count=decoded.record_count,
            record_duration_seconds=decoded.record_duration_seconds,
        ),
        annotation_count=len(decoded.annotations) if decoded.annotations is not None else 0,
    )


def from_outcome(file_name: str, outcome: DecodeOutcome) -> Union[ValidRecording, InvalidRecording]:
    """Dispatch a decode outcome to the matching builder."""
    if isinstance(outcome, Failed):
        return from_failure(file_name, outcome.reason)
    return from_decoded(file_name, outcome)


def parse_recording_window(start_date: Optional[str], start_time: Optional[str]) -> Optional[RecordingWindow]:
    """Combine header start date and time into a recording window.

    Returns None, never raises, when either part is missing or the combined
    string does not match ``dd.MM.yy HH.mm.ss`` with in-range values.

    Example:
        >>> parse_recording_window("03.03.22", "10.30.00").parsed
        datetime.datetime(2022, 3, 3, 10, 30)
    """
    if start_date is None or start_time is None:
        return None

    combined = f"{start_date.strip()} {start_time.strip()}"
    match = _DATE_TIME_PATTERN.fullmatch(combined)
    if match is None:
        logger.warning(f"Failed to parse recording date: {start_date} {start_time}")
        return None

    day, month, year, hour, minute, second = (int(group) for group in match.groups())
    try:
        parsed = datetime(_CENTURY + year, month, day, hour, minute, second)
    except ValueError:
        logger.warning(f"Failed to parse recording date: {start_date} {start_time}")
        return None

    return RecordingWindow(raw_start_date=start_date, raw_start_time=start_time, parsed=parsed)


def extract_patient_identity(subject_id: Optional[str]) -> PatientIdentity:
    """Extract the patient name from a subject identification field.

    Example:
        >>> extract_patient_identity("P001 M 01-JAN-1980 John_Doe").display_name
        'John Doe'
    """
    if subject_id is None or not subject_id.strip():
        return PatientIdentity(raw_subject_id=None, display_name=NOT_AVAILABLE)
    return PatientIdentity(raw_subject_id=subject_id, display_name=_extract_patient_name(subject_id))


def _extract_patient_name(subject_id: str) -> str:
    tokens = subject_id.split()
    if len(tokens) > _PATIENT_NAME_TOKEN and _PATIENT_NAME_PATTERN.fullmatch(tokens[_PATIENT_NAME_TOKEN]):
        return tokens[_PATIENT_NAME_TOKEN].replace("_", " ")
    return NOT_AVAILABLE


def build_channels(labels: Optional[Sequence[str]], types: Optional[Sequence[str]]) -> Tuple[ChannelInfo, ...]:
    """Pair channel labels with transducer types by position.

    Labels are always trimmed; types are kept as stored and default to ""
    when the type list is missing or shorter than the label list.
    """
    if not labels:
        return ()

    types = types or ()
    return tuple(
        ChannelInfo(label=label.strip(), transducer_type=types[i] if i < len(types) else "")
        for i, label in enumerate(labels)
    )
