"""Ingest module for the EDF catalog.

This module handles directory scanning: it finds the ``.edf`` files of a
source directory, decodes each one, builds one recording per file and
replaces the catalog snapshot with the result.

Core Functionality:
-------------------
- **File Discovery**: Regular files whose name ends in ``.edf`` (any case)
- **Decoding**: Delegated to an injected ``Decoder`` (``EdfDecoder`` by default)
- **Recording Construction**: ``edf_catalog.factory`` turns each outcome into a
  valid or invalid recording
- **Snapshot Replacement**: The whole snapshot is swapped once, after every
  file has been processed

Public API:
-----------
- is_edf_file(name) -> bool: Candidate file check
- discover_files(directory) -> List[Path]: Candidate files sorted by name
- ScanOrchestrator(cache, decoder, max_workers).scan(directory) -> Snapshot

Ordering:
---------
The snapshot is ordered by file name whatever the worker count, so the
unsorted view is reproducible across runs and platforms.

Error Handling:
---------------
- DirectoryNotFoundError: The directory is missing or not a directory; the
  cache keeps its previous snapshot
- DirectoryNotReadableError: The directory exists but cannot be listed
  (a DirectoryNotFoundError, handled the same way)
- Per-file failures (decoder failures or unexpected exceptions) become
  invalid recordings and never abort the scan
- An empty directory is a valid state and gives an empty snapshot
"""

from concurrent.futures import ThreadPoolExecutor
import logging
from pathlib import Path
from typing import List, Optional, Union

from .cache import SnapshotCache
from .decoder import Decoder, EdfDecoder, UNEXPECTED_ERROR_REASON
from .domain import InvalidRecording, Snapshot, ValidRecording
from .exceptions import DirectoryNotFoundError, DirectoryNotReadableError
from .factory import from_failure, from_outcome

logger = logging.getLogger(__name__)

EDF_SUFFIX = ".edf"


def is_edf_file(name: Union[str, Path]) -> bool:
    """Return True if ``name`` ends with ``.edf``, case-insensitively."""
    return str(name).lower().endswith(EDF_SUFFIX)


def discover_files(directory: Union[str, Path]) -> List[Path]:
    """List candidate EDF files in ``directory``, sorted by file name.

    Args:
        directory: Directory to scan (not recursive)

    Returns:
        Regular files passing ``is_edf_file``

    Raises:
        DirectoryNotFoundError: If directory does not exist or is not a directory
        DirectoryNotReadableError: If the directory entries cannot be listed
    """
    directory = Path(directory)
    if not directory.is_dir():
        logger.error("EDF directory not found")
        raise DirectoryNotFoundError(directory)

    try:
        entries = list(directory.iterdir())
    except OSError as e:
        logger.error(f"EDF directory not readable: {directory} - {e}")
        raise DirectoryNotReadableError(directory, e.strerror or str(e)) from e

    return sorted((entry for entry in entries if is_edf_file(entry.name) and entry.is_file()), key=lambda p: p.name)


class ScanOrchestrator:
    """Scan a directory and publish the resulting snapshot to a cache.

    Args:
        cache: Cache that receives the new snapshot
        decoder: Decoder capability (default: EdfDecoder)
        max_workers: Number of files decoded in parallel (1 = sequential)
    """

    def __init__(self, cache: SnapshotCache, decoder: Optional[Decoder] = None, max_workers: int = 1):
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        self.cache = cache
        self.decoder = decoder if decoder is not None else EdfDecoder()
        self.max_workers = max_workers

    def scan(self, directory: Union[str, Path]) -> Snapshot:
        """Scan ``directory`` and replace the cache snapshot.

        Args:
            directory: Source directory

        Returns:
            The new snapshot, ordered by file name

        Raises:
            DirectoryNotFoundError: If directory does not exist or is not a directory
        """
        directory = Path(directory)
        logger.info(f"Start loading of EDF files from {directory.absolute()}")

        files = discover_files(directory)
        if not files:
            logger.warning(f"No EDF files found in directory: {directory.absolute()}")

        if self.max_workers > 1 and len(files) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                recordings = list(pool.map(self._load, files))
        else:
            recordings = [self._load(path) for path in files]

        snapshot = self.cache.replace(recordings)

        n_valid = sum(1 for rec in snapshot if rec.is_valid)
        logger.info(f"Loaded {len(snapshot)} EDF files, valid:{n_valid}, invalid:{len(snapshot) - n_valid}")
        return snapshot

    def _load(self, path: Path) -> Union[ValidRecording, InvalidRecording]:
        """Decode one file into a recording; never raises."""
        try:
            outcome = self.decoder.decode(path)
            recording = from_outcome(path.name, outcome)
        except Exception as e:
            logger.exception(f"Unexpected error processing file: {path.name} - {e}")
            return from_failure(path.name, f"{UNEXPECTED_ERROR_REASON}: {e}")

        if recording.is_valid:
            logger.info(f"File {path.name}: valid")
        else:
            logger.error(f"File {path.name}: invalid")
        return recording
