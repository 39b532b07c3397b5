"""EDF decoding boundary for the EDF catalog.

Binary decoding is owned by ``pyedflib``; this module turns its reader into a
``DecodeOutcome``: either ``Decoded`` header fields or a ``Failed`` reason.
Decoders never raise to their caller, so one bad file cannot abort a scan.

Decoder Contract:
-----------------
- decode(path) -> Decoded | Failed
- ``None`` input yields Failed immediately
- The file is opened for the duration of the call only and closed on every
  exit path, failures included
- Format errors, I/O errors and unexpected errors all collapse to Failed

Field Mapping:
--------------
Plain EDF files hand over the local patient and recording fields as stored.
EDF+ readers split those fields into subfields, so they are joined back in
the EDF+ order (``code sex birthdate name``, ``Startdate dd-MMM-yyyy
admincode technician equipment``) with ``X`` for empty subfields. The start
date and time are taken verbatim from the fixed header (bytes 168-184),
since the reader only exposes them already parsed.

Example:
--------
>>> from edf_catalog.decoder import EdfDecoder, Failed
>>> outcome = EdfDecoder().decode(Path("data/edf/patient001.edf"))
>>> if isinstance(outcome, Failed):
...     print(outcome.reason)
... else:
...     print(outcome.channel_labels)
"""

import contextlib
from datetime import date, datetime
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Tuple, Union

from pydantic import BaseModel, Field
import pyedflib

logger = logging.getLogger(__name__)

MISSING_FILE_REASON = "File is missing"
INVALID_EDF_REASON = "Invalid EDF File"
UNREADABLE_EDF_REASON = "Unreadable EDF File"
UNEXPECTED_ERROR_REASON = "Unexpected error"

_EDF_PLUS_TYPES = {pyedflib.FILETYPE_EDFPLUS, pyedflib.FILETYPE_BDFPLUS}

# Fixed header: startdate dd.mm.yy at 168, starttime hh.mm.ss at 176
_START_DATE_SLICE = slice(168, 176)
_START_TIME_SLICE = slice(176, 184)


class Annotation(BaseModel):
    """Single annotation (event marker) stored in an EDF+ file."""

    model_config = {"frozen": True, "extra": "forbid"}

    onset_seconds: float
    duration_seconds: float
    description: str


class Decoded(BaseModel):
    """Header fields handed over by the decoder.

    Attributes:
        recording_id: Recording identification field
        start_date: Start date field (``dd.mm.yy``)
        start_time: Start time field (``hh.mm.ss``)
        subject_id: Subject (local patient) identification field
        channel_labels: Signal labels in header order
        transducer_types: Transducer types in header order
        record_count: Number of data records
        record_duration_seconds: Duration of one data record
        annotations: Annotations, or None when the format has no annotation channel
    """

    model_config = {"frozen": True, "extra": "forbid"}

    recording_id: Optional[str] = None
    start_date: Optional[str] = None
    start_time: Optional[str] = None
    subject_id: Optional[str] = None
    channel_labels: Tuple[str, ...] = Field(default=())
    transducer_types: Tuple[str, ...] = Field(default=())
    record_count: int = 0
    record_duration_seconds: float = 0.0
    annotations: Optional[Tuple[Annotation, ...]] = None


class Failed(BaseModel):
    """Decoding failed; ``reason`` says why."""

    model_config = {"frozen": True, "extra": "forbid"}

    reason: str


DecodeOutcome = Union[Decoded, Failed]


class Decoder(Protocol):
    """Anything that turns a file path into a decode outcome without raising."""

    def decode(self, path: Optional[Path]) -> DecodeOutcome: ...


class EdfDecoder:
    """Decoder backed by ``pyedflib.EdfReader``.

    Args:
        read_annotations: Read the annotation list of EDF+ files (default: True).
            When False, annotations are reported as absent.
    """

    def __init__(self, read_annotations: bool = True):
        self.read_annotations = read_annotations

    def decode(self, path: Optional[Union[str, Path]]) -> DecodeOutcome:
        if path is None:
            logger.error("File is missing")
            return Failed(reason=MISSING_FILE_REASON)

        path = Path(path)
        if not path.is_file():
            logger.error(f"IO error reading file: {path.name} - no such file")
            return Failed(reason=f"{UNREADABLE_EDF_REASON}: no such file")

        try:
            with contextlib.closing(pyedflib.EdfReader(str(path))) as reader:
                return self._read(reader, _read_raw_start(path))
        except OSError as e:
            # pyedflib reports header and format errors as OSError
            logger.error(f"Error at parsing of file: {path.name} - {e}")
            return Failed(reason=f"{INVALID_EDF_REASON}: {e}")
        except Exception as e:
            logger.exception(f"Unexpected error processing file: {path.name} - {e}")
            return Failed(reason=f"{UNEXPECTED_ERROR_REASON}: {e}")

    def _read(self, reader: "pyedflib.EdfReader", raw_start: Tuple[str, str]) -> Decoded:
        n_signals = reader.signals_in_file
        start = reader.getStartdatetime()

        if reader.filetype in _EDF_PLUS_TYPES:
            header = reader.getHeader()
            subject_id = _join_patient_subfields(header)
            recording_id = _join_recording_subfields(header, start)
            annotations = _read_annotations(reader) if self.read_annotations else None
        else:
            subject_id = _text(reader.patient)
            recording_id = _text(reader.recording)
            annotations = None

        return Decoded(
            recording_id=recording_id,
            start_date=raw_start[0],
            start_time=raw_start[1],
            subject_id=subject_id,
            channel_labels=tuple(reader.getSignalLabels()),
            transducer_types=tuple(reader.getTransducer(i) for i in range(n_signals)),
            record_count=int(reader.datarecords_in_file),
            record_duration_seconds=float(reader.datarecord_duration),
            annotations=annotations,
        )


def _read_raw_start(path: Path) -> Tuple[str, str]:
    """Start date and time fields exactly as stored in the fixed header."""
    with open(path, "rb") as f:
        header = f.read(_START_TIME_SLICE.stop)
    return header[_START_DATE_SLICE].decode("latin-1"), header[_START_TIME_SLICE].decode("latin-1")


def _read_annotations(reader: "pyedflib.EdfReader") -> Tuple[Annotation, ...]:
    onsets, durations, descriptions = reader.readAnnotations()
    return tuple(
        Annotation(onset_seconds=float(onset), duration_seconds=float(duration), description=str(description))
        for onset, duration, description in zip(onsets, durations, descriptions)
    )


def _subfield(value: Any) -> str:
    """Render one EDF+ subfield: spaces become underscores, empty becomes 'X'."""
    text = str(value).strip() if value is not None else ""
    return text.replace(" ", "_") if text else "X"


def _edf_date(value: Any) -> str:
    """Render a date subfield as ``dd-MMM-yyyy`` (e.g. 06-MAY-2024)."""
    if isinstance(value, (datetime, date)):
        return value.strftime("%d-%b-%Y").upper()
    text = str(value).strip() if value is not None else ""
    if not text:
        return "X"
    # pyedflib renders birthdates as '30 jun 1969'
    return "-".join(text.split()).upper()


def _join_patient_subfields(header: Dict[str, Any]) -> str:
    sex = str(header.get("sex") or header.get("gender") or "").strip()
    parts = [
        _subfield(header.get("patientcode")),
        sex[0].upper() if sex[:1].upper() in ("M", "F") else "X",
        _edf_date(header.get("birthdate")),
        _subfield(header.get("patientname")),
    ]
    additional = str(header.get("patient_additional") or "").strip()
    if additional:
        parts.append(additional)
    return " ".join(parts)


def _join_recording_subfields(header: Dict[str, Any], start: datetime) -> str:
    parts = [
        "Startdate",
        _edf_date(start),
        _subfield(header.get("admincode")),
        _subfield(header.get("technician")),
        _subfield(header.get("equipment")),
    ]
    additional = str(header.get("recording_additional") or "").strip()
    if additional:
        parts.append(additional)
    return " ".join(parts)


def _text(value: Any) -> str:
    """Header field as text; the raw reader properties may hand over bytes."""
    if isinstance(value, bytes):
        return value.decode("latin-1")
    return str(value) if value is not None else ""
