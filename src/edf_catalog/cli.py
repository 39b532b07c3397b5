"""Command line interface for the EDF catalog.

Subcommands:
------------
- scan:  Scan a directory once and print (or write) the recordings as JSON
- serve: Run the HTTP API with uvicorn

Example:
--------
    $ edf-catalog scan data/edf --sorted
    $ edf-catalog scan --config config.toml --output catalog.json
    $ edf-catalog serve --config config.toml --port 8080
"""

import logging
from pathlib import Path
from typing import Optional

import typer

from .config import Settings, load_settings
from .exceptions import ConfigError, DirectoryNotFoundError
from .schemas import views_to_json
from .service import CatalogService
from .utils import configure_logger, write_catalog

logger = logging.getLogger(__name__)

app = typer.Typer(help="Scan EDF recordings and serve their metadata.", no_args_is_help=True)


def _settings(config: Optional[Path]) -> Settings:
    try:
        settings = load_settings(config)
    except (FileNotFoundError, ConfigError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2)
    configure_logger("edf_catalog", level=settings.logging.level, structured=settings.logging.structured)
    return settings


@app.command()
def scan(
    directory: Optional[Path] = typer.Argument(None, help="EDF directory (default: configured source directory)"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="TOML configuration file"),
    sorted_: bool = typer.Option(False, "--sorted", help="Sort by recording date, newest first"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write JSON to this file instead of stdout"),
):
    """Scan a directory of EDF files and list their metadata."""
    settings = _settings(config)
    source = directory if directory is not None else settings.source.source_path
    logger.debug(f"Scanning {source} with {settings.source.max_workers} worker(s)")
    service = CatalogService(source, max_workers=settings.source.max_workers)

    try:
        service.load()
    except DirectoryNotFoundError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    recordings = service.list_sorted_by_recording_date() if sorted_ else service.list_all()
    if output is not None:
        count = write_catalog(recordings, output)
        typer.echo(f"Wrote {count} recordings to {output}")
    else:
        typer.echo(views_to_json(recordings))


@app.command()
def serve(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="TOML configuration file"),
    host: str = typer.Option("127.0.0.1", help="Bind address"),
    port: int = typer.Option(8080, help="Bind port"),
):
    """Serve the catalog over HTTP."""
    import uvicorn

    from .api import create_app

    settings = _settings(config)
    uvicorn.run(create_app(settings), host=host, port=port, log_config=None)


if __name__ == "__main__":
    app()
