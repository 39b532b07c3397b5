"""Exception hierarchy for the EDF catalog.

Per-file decode problems are never raised: they become invalid recordings
(see ``edf_catalog.decoder.Failed``). Only conditions that abort a whole
operation are modelled as exceptions here.
"""

from pathlib import Path
from typing import Optional, Union


class EdfCatalogError(Exception):
    """Base class for all EDF catalog errors."""

    pass


class DirectoryNotFoundError(EdfCatalogError):
    """Source directory does not exist or is not a directory.

    Raised by a scan before anything is decoded; the catalog keeps its
    previous snapshot.

    Attributes:
        path: The directory that was requested
    """

    def __init__(self, path: Union[str, Path], message: Optional[str] = None):
        self.path = Path(path)
        super().__init__(message or f"EDF directory not found in: {self.path}")


class ConfigError(EdfCatalogError):
    """Configuration file or environment overrides are invalid."""

    pass


class DirectoryNotReadableError(DirectoryNotFoundError):
    """Source directory exists but its entries cannot be listed.

    Handled wherever a missing directory is: the scan is aborted and the
    catalog keeps its previous snapshot.
    """

    def __init__(self, path: Union[str, Path], reason: str):
        super().__init__(path, f"EDF directory not readable: {Path(path)} ({reason})")
