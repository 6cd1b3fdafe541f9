"""FastAPI application for Chirpy"""

from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from chirpy import __version__
from chirpy.app import ChirpyApp
from chirpy.utils.exceptions import ChirpyError
from chirpy.utils.logger import get_logger
from .api import admin_router, router as api_router

logger = get_logger(__name__)

PRIVATE_FILE_NAMES = (".env",)


def exposes_private_files(static_dir: Path, store_path: Path) -> bool:
    """True if serving static_dir would publish the document store or secrets"""
    root = static_dir.resolve()
    store = store_path.resolve()
    if root == store or root in store.parents:
        return True
    return any((root / name).exists() for name in PRIVATE_FILE_NAMES)


def create_app(context: Optional[ChirpyApp] = None) -> FastAPI:
    """Build the HTTP app around an initialized ChirpyApp"""
    if context is None:
        context = ChirpyApp().initialize()

    app = FastAPI(
        title="Chirpy",
        description="Short posts with token authentication",
        version=__version__,
    )
    app.state.context = context

    @app.middleware("http")
    async def count_app_visits(request: Request, call_next):
        if request.url.path == "/app" or request.url.path.startswith("/app/"):
            context.hits.increment()
        return await call_next(request)

    @app.exception_handler(ChirpyError)
    async def chirpy_error_handler(request: Request, exc: ChirpyError):
        logger.error(
            "Responding with 5XX error",
            path=request.url.path,
            error_type=type(exc).__name__,
            error=str(exc),
        )
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    app.include_router(api_router)
    app.include_router(admin_router)

    static_dir = context.settings.web.static_dir
    if static_dir and Path(static_dir).is_dir():
        if exposes_private_files(Path(static_dir), context.store.path):
            logger.error(
                "Refusing to serve static files from a directory holding private data",
                static_dir=static_dir,
            )
        else:
            app.mount("/app", StaticFiles(directory=static_dir, html=True), name="app")

    return app
