"""Pytest configuration and shared fixtures for edf_catalog tests.

Provides:
- FakeDecoder: scripted decoder standing in for pyedflib
- Decoded header builders
- Temporary EDF directories (placeholder files and real EDF files)
"""

from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Union

import pytest

from edf_catalog.decoder import Annotation, Decoded, DecodeOutcome, Failed

# ============================================================================
# Fake Decoder
# ============================================================================


class FakeDecoder:
    """Decoder double returning scripted outcomes by file name.

    Files without a script decode as Failed("Invalid EDF File"). Names listed
    in ``raises`` raise RuntimeError instead, like a misbehaving library.
    """

    def __init__(self, outcomes: Optional[Dict[str, DecodeOutcome]] = None, raises: Sequence[str] = ()):
        self.outcomes = dict(outcomes or {})
        self.raises = set(raises)
        self.calls: List[Optional[Path]] = []

    def decode(self, path: Optional[Path]) -> DecodeOutcome:
        self.calls.append(path)
        if path is None:
            return Failed(reason="File is missing")
        if path.name in self.raises:
            raise RuntimeError(f"decoder exploded on {path.name}")
        return self.outcomes.get(path.name, Failed(reason="Invalid EDF File"))


def make_decoded(
    start_date: Optional[str] = "03.03.22",
    start_time: Optional[str] = "10.30.00",
    subject_id: Optional[str] = "P001 M 01-JAN-1980 John_Doe",
    recording_id: Optional[str] = "  Startdate 03-MAR-2022 ZHI27402 X Zeto_WR-08  ",
    labels: Sequence[str] = ("EEG Fp1 ", "EEG Fp2 "),
    types: Sequence[str] = ("AgCl electrode", "AgCl electrode"),
    record_count: int = 3600,
    record_duration: float = 1.0,
    n_annotations: Optional[int] = 2,
) -> Decoded:
    """Decoded header with realistic defaults; override what the test needs."""
    annotations = None
    if n_annotations is not None:
        annotations = tuple(Annotation(onset_seconds=float(i), duration_seconds=0.0, description=f"event {i}") for i in range(n_annotations))
    return Decoded(
        recording_id=recording_id,
        start_date=start_date,
        start_time=start_time,
        subject_id=subject_id,
        channel_labels=tuple(labels),
        transducer_types=tuple(types),
        record_count=record_count,
        record_duration_seconds=record_duration,
        annotations=annotations,
    )


@pytest.fixture
def decoded_factory() -> Callable[..., Decoded]:
    """Builder for Decoded headers (see make_decoded)."""
    return make_decoded


@pytest.fixture
def fake_decoder_factory() -> Callable[..., FakeDecoder]:
    return FakeDecoder


# ============================================================================
# Temporary EDF Directories
# ============================================================================


@pytest.fixture
def edf_dir(tmp_path: Path) -> Path:
    """Empty source directory."""
    directory = tmp_path / "edf"
    directory.mkdir()
    return directory


@pytest.fixture
def make_files(edf_dir: Path) -> Callable[..., List[Path]]:
    """Create placeholder files in edf_dir; content is irrelevant to FakeDecoder."""

    def _make(*names: str) -> List[Path]:
        paths = []
        for name in names:
            path = edf_dir / name
            path.write_bytes(b"0       ")
            paths.append(path)
        return paths

    return _make


@pytest.fixture
def mixed_dir(edf_dir: Path, make_files) -> Dict[str, Union[Path, Dict[str, DecodeOutcome]]]:
    """Three decodable files, one corrupted file and two non-EDF files.

    Returns:
        dict with ``path`` (the directory) and ``outcomes`` for FakeDecoder
    """
    make_files("b_2021.edf", "a_2022.EDF", "c_undated.edf", "corrupted.edf", "notes.txt", "edf.bak")
    outcomes = {
        "a_2022.EDF": make_decoded(start_date="03.03.22"),
        "b_2021.edf": make_decoded(start_date="15.06.21", subject_id="P002 F 02-FEB-1990 Jane_Mary_Doe"),
        "c_undated.edf": make_decoded(start_date="2022-03-03"),
    }
    return {"path": edf_dir, "outcomes": outcomes}


# ============================================================================
# Real EDF Files (pyedflib)
# ============================================================================


@pytest.fixture
def write_edf() -> Callable[..., Path]:
    """Write a small EDF+ file with pyedflib.highlevel.

    The returned writer takes the target path and optional keyword arguments
    ``labels``, ``seconds``, ``patientname``, ``startdate`` and ``annotations``
    (list of (onset, duration, description)).
    """
    pyedflib = pytest.importorskip("pyedflib")
    np = pytest.importorskip("numpy")
    from pyedflib import highlevel

    def _write(
        path: Path,
        labels: Sequence[str] = ("EEG Fp1", "EEG Fp2"),
        seconds: int = 10,
        patientname: str = "John Doe",
        startdate: datetime = datetime(2022, 3, 3, 10, 30, 0),
        annotations: Sequence[tuple] = (),
    ) -> Path:
        sample_rate = 64
        signals = np.random.default_rng(0).uniform(-100, 100, size=(len(labels), seconds * sample_rate))
        signal_headers = highlevel.make_signal_headers(list(labels), sample_frequency=sample_rate, physical_min=-200, physical_max=200)
        header = highlevel.make_header(patientcode="P001", patientname=patientname, startdate=startdate)
        header["annotations"] = [list(a) for a in annotations]
        highlevel.write_edf(str(path), signals, signal_headers, header, file_type=pyedflib.FILETYPE_EDFPLUS)
        return path

    return _write
