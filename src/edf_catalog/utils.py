"""Logging setup and catalog output for the EDF catalog.

- configure_logger: One stream handler per logger, plain text or one JSON
  object per line
- write_catalog: Record views of a snapshot written to a JSON file

Example:
--------
>>> from edf_catalog.utils import configure_logger
>>> logger = configure_logger("edf_catalog", level="DEBUG", structured=True)
"""

from datetime import datetime, timezone
import json
import logging
from pathlib import Path
from typing import Iterable, Optional, Union

from .domain import InvalidRecording, ValidRecording
from .schemas import views_to_json

PLAIN_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class JsonLineFormatter(logging.Formatter):
    """Render each record as a single JSON object.

    Messages are escaped by ``json.dumps``, so file names or error reasons
    with quotes or newlines still give one parseable line.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def configure_logger(name: str, level: str = "INFO", structured: bool = False) -> logging.Logger:
    """Configure logger with specified settings.

    Args:
        name: Logger name (usually the package name, so module loggers inherit it)
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        structured: If True, emit one JSON object per line

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))

    # Reconfiguring replaces the handler instead of stacking another one
    logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(JsonLineFormatter() if structured else logging.Formatter(PLAIN_FORMAT))
    logger.addHandler(handler)

    return logger


def write_catalog(
    recordings: Iterable[Union[ValidRecording, InvalidRecording]],
    path: Union[str, Path],
    indent: Optional[int] = 2,
) -> int:
    """Write the record views of ``recordings`` to a JSON file.

    Args:
        recordings: Recordings in output order
        path: Output file path; parent directories are created
        indent: JSON indentation (None for a single line)

    Returns:
        Number of records written
    """
    recordings = list(recordings)
    path_obj = Path(path)
    path_obj.parent.mkdir(parents=True, exist_ok=True)
    path_obj.write_text(views_to_json(recordings, indent=indent), encoding="utf-8")
    return len(recordings)
