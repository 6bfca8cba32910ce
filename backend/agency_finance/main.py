import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from fastapi.responses import FileResponse
from pathlib import Path

from . import __version__
from .api import api_router
from .config import Settings, load_settings
from .database import init_database, close_database, is_database_ready

logger = logging.getLogger("agency_finance")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application. Settings are loaded from the environment when not given."""
    settings = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Handle startup and shutdown events."""
        logger.setLevel(settings.log_level.upper())
        init_database(settings.resolved_database_url())
        logger.info("Database ready (%s)", settings.resolved_database_url())
        yield
        # Cleanup on shutdown
        close_database()

    app = FastAPI(
        title="Agency Finance",
        description="Ledger, fixed accounts and financial reports for a creative agency",
        version=__version__,
        lifespan=lifespan
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # API routes
    app.include_router(api_router, prefix="/api")

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "ok", "database": is_database_ready()}

    # Serve frontend static files in production (registered last, catches all unmatched routes)
    frontend_dist = Path(settings.frontend_dist) if settings.frontend_dist else None
    if frontend_dist is not None and frontend_dist.exists():
        app.mount("/assets", StaticFiles(directory=frontend_dist / "assets"), name="static-assets")

        @app.get("/{full_path:path}")
        async def serve_spa(request: Request, full_path: str):
            """Serve index.html for all non-API routes (SPA fallback)."""
            file_path = frontend_dist / full_path
            if file_path.is_file():
                return FileResponse(file_path)
            return FileResponse(frontend_dist / "index.html")

    return app


app = create_app()
