#!/usr/bin/env python3
"""Example: Scan a Directory of EDF Recordings.

This example writes a handful of synthetic EDF+ recordings (plus one
corrupted file) with pyedflib, scans them with ``CatalogService`` and prints
both catalog views.

Key Concepts:
-------------
- One recording per ``.edf`` file, valid or invalid
- Invalid files keep their name and error message, with empty counts
- Sorted view: newest recording date first, undated and invalid files last
- Rescan replaces the whole snapshot

Outputs:
--------
- <output_root>/edf/*.edf (synthetic recordings)
- <output_root>/catalog.json (sorted record views)

Example Usage:
-------------
    $ python examples/scan_directory.py

    # Or with custom parameters
    $ OUTPUT_ROOT=/tmp/edf-demo N_RECORDINGS=8 python examples/scan_directory.py
"""

from datetime import datetime, timedelta
from pathlib import Path
import shutil

import numpy as np
from pydantic_settings import BaseSettings, SettingsConfigDict
from pyedflib import highlevel
import pyedflib

from edf_catalog import CatalogService
from edf_catalog.utils import configure_logger, write_catalog

PATIENTS = ["John Doe", "Jane Mary Doe", "Mrs. Ada Lovelace", "Alan Turing"]
LABELS = ["EEG Fp1", "EEG Fp2", "EEG C3", "EEG C4", "ECG"]


class ExampleSettings(BaseSettings):
    """Settings for the directory scan example."""

    model_config = SettingsConfigDict(
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )

    output_root: Path = Path("temp/examples/scan_directory")
    n_recordings: int = 4
    seconds: int = 30
    seed: int = 42


def make_recordings(directory: Path, n_recordings: int, seconds: int, seed: int) -> None:
    """Write ``n_recordings`` EDF+ files and one corrupted file."""
    rng = np.random.default_rng(seed)
    start = datetime(2022, 3, 3, 10, 30, 0)
    sample_rate = 128

    for i in range(n_recordings):
        labels = LABELS[: 2 + i % (len(LABELS) - 1)]
        signals = rng.uniform(-100, 100, size=(len(labels), seconds * sample_rate))
        signal_headers = highlevel.make_signal_headers(labels, sample_frequency=sample_rate, physical_min=-200, physical_max=200)
        header = highlevel.make_header(patientcode=f"P{i:03d}", patientname=PATIENTS[i % len(PATIENTS)], startdate=start + timedelta(days=37 * i))
        header["annotations"] = [[float(t), 0.0, f"marker {t}"] for t in range(0, seconds, 10)]
        highlevel.write_edf(str(directory / f"patient{i:03d}.edf"), signals, signal_headers, header, file_type=pyedflib.FILETYPE_EDFPLUS)

    (directory / "corrupted.edf").write_bytes(b"not an EDF header")
    (directory / "notes.txt").write_text("ignored by the scan")


def run_example(settings: ExampleSettings) -> dict:
    """Generate recordings, scan them and write the sorted catalog.

    Args:
        settings: Example settings with output paths and parameters

    Returns:
        Dictionary with artifacts
    """
    configure_logger("edf_catalog", level="WARNING")

    edf_dir = settings.output_root / "edf"
    if settings.output_root.exists():
        shutil.rmtree(settings.output_root)
    edf_dir.mkdir(parents=True)

    print("=" * 80)
    print("EDF Catalog Example: Scan a Directory")
    print("=" * 80)

    print(f"\n📦 Writing {settings.n_recordings} synthetic recordings to {edf_dir}...")
    make_recordings(edf_dir, settings.n_recordings, settings.seconds, settings.seed)

    service = CatalogService(edf_dir)
    service.load()

    print("\n📋 Snapshot order:")
    for rec in service.list_all():
        if rec.is_valid:
            print(f"   ✓ {rec.file_name}: {rec.patient_name}, {rec.channel_count} channels, {rec.total_length_seconds:.0f} s")
        else:
            print(f"   ✗ {rec.file_name}: {rec.error_reason}")

    print("\n📅 Newest first:")
    for rec in service.list_sorted_by_recording_date():
        print(f"   - {rec.file_name}: {rec.recording_date or 'no date'}")

    catalog_path = settings.output_root / "catalog.json"
    write_catalog(service.list_sorted_by_recording_date(), catalog_path)

    print(f"\n📁 Catalog written to {catalog_path}")
    return {"edf_dir": edf_dir, "catalog": catalog_path}


if __name__ == "__main__":
    settings = ExampleSettings()
    run_example(settings)
