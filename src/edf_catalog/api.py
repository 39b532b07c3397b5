"""HTTP API for the EDF catalog.

Routes (all JSON, see ``edf_catalog.schemas.RecordingView``):

- GET  /api/edfs                   recordings in snapshot order
- GET  /api/edfs/sorted            recordings, newest recording date first
- POST /api/edfs/rescan?sorted=    rescan the source directory, then list

Errors are returned as problem details (RFC 7807): a missing source
directory gives 404, anything unexpected gives 500.
"""

from contextlib import asynccontextmanager
import logging
from typing import List, Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings, load_settings
from .decoder import Decoder
from .exceptions import DirectoryNotFoundError
from .schemas import RecordingView, to_views
from .service import CatalogService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/edfs", tags=["edfs"])


def _catalog(request: Request) -> CatalogService:
    return request.app.state.catalog


@router.get("", response_model=List[RecordingView])
def get_all_edfs(request: Request):
    """All EDF files, valid and invalid, in snapshot order."""
    logger.debug("Fetching all EDF files")
    return to_views(_catalog(request).list_all())


@router.get("/sorted", response_model=List[RecordingView])
def get_all_edfs_sorted_by_recording_date(request: Request):
    """All EDF files sorted by recording date; undated and invalid files last."""
    logger.debug("Fetching all EDF files sorted by Recording Date")
    return to_views(_catalog(request).list_sorted_by_recording_date())


@router.post("/rescan", response_model=List[RecordingView])
def rescan_source(request: Request, sorted: bool = False):
    """Reload every EDF file from the source directory."""
    logger.debug("Rescanning EDF source directory")
    return to_views(_catalog(request).rescan(sorted=sorted))


def _problem(request: Request, status: int, title: str, detail: str) -> JSONResponse:
    return JSONResponse(
        status_code=status,
        content={"type": "about:blank", "title": title, "status": status, "detail": detail, "instance": request.url.path},
        media_type="application/problem+json",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    catalog: CatalogService = app.state.catalog
    try:
        catalog.load()
    except DirectoryNotFoundError as e:
        # Serve an empty catalog; POST /rescan reports the missing directory
        logger.error(f"Initial scan failed: {e}")
    yield


def create_app(settings: Optional[Settings] = None, decoder: Optional[Decoder] = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        settings: Settings to use (default: load_settings() from environment)
        decoder: Decoder capability (default: EdfDecoder)

    Returns:
        Application whose lifespan runs the initial scan
    """
    settings = settings if settings is not None else load_settings()

    app = FastAPI(title="edf-catalog", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.catalog = CatalogService.from_settings(settings, decoder=decoder)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.allowed_origins,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allowed_methods,
        allow_headers=["*"],
    )

    app.include_router(router)

    @app.exception_handler(DirectoryNotFoundError)
    async def directory_not_found_handler(request: Request, exc: DirectoryNotFoundError):
        logger.error(f"EDF source not found: {exc}")
        return _problem(request, 404, "Not Found", str(exc))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unexpected error occurred on {request.method} {request.url.path}")
        return _problem(request, 500, "Internal Server Error", str(exc))

    logger.info(f"EDF catalog serving {settings.source.source_path}")
    return app
