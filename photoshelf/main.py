"""PhotoShelf Server - FastAPI Application Entry Point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from photoshelf.config import settings
from photoshelf.database import init_db
from photoshelf.errors import PhotoShelfError, StorageError

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize database on startup."""
    init_db()
    logger.info("%s started", settings.server_name)
    yield


app = FastAPI(
    title="PhotoShelf",
    description="Album and asset lifecycle backend for a self-hosted photo library",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PhotoShelfError)
async def photoshelf_error_handler(request: Request, exc: PhotoShelfError):
    """Map store errors to HTTP statuses; storage details never leave the server."""
    if isinstance(exc, StorageError):
        logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed or missing request fields are invalid input, same as a bad id."""
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


# --- Register API routers ---
from photoshelf.api.albums import router as albums_router  # noqa: E402
from photoshelf.api.assets import router as assets_router  # noqa: E402
from photoshelf.api.trash import router as trash_router  # noqa: E402

API_PREFIX = "/api/v1"

app.include_router(albums_router, prefix=API_PREFIX)
app.include_router(assets_router, prefix=API_PREFIX)
app.include_router(trash_router, prefix=API_PREFIX)


@app.get("/")
def root():
    """Server info."""
    return {
        "name": settings.server_name,
        "version": "0.1.0",
        "status": "running",
    }


@app.get("/api/v1/health")
def health():
    return {"status": "ok"}
