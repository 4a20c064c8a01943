"""
SALN Tracker Philippines

Main application entry point.

Public SALN disclosures of Philippine officials, shown as filed.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from saln_tracker import __version__
from saln_tracker.db.store import DataStore
from saln_tracker.observability import (
    setup_logging,
    get_logger,
    RequestContextMiddleware,
    check_health,
    get_metrics,
)
from saln_tracker.web.projector import Projector
from saln_tracker.web.shared_store import create_templates, get_data_store

# Setup logging at import time
setup_logging()
logger = get_logger(__name__)

STATIC_DIR = Path(__file__).parent / "web" / "static"

DESCRIPTION = """
## SALN Tracker Philippines

Statements of Assets, Liabilities, and Net Worth (SALN) of Philippine
public officials, as filed.

### Data

- Officials are grouped by status (current / former) and branch
- Each official owns their SALN records, one per filing year
- Figures are displayed as reported; net worth is never recomputed

### Storage Backends

- **JSON snapshots**: packaged files, a local path, or an http(s) URL (default)
- **Firestore**: `officials/{slug}` and `resources/{id}` collections
- **Memory**: empty store for development

Set `SALN_DATASTORE_DRIVER` to choose one.
"""


def create_app(store: Optional[DataStore] = None) -> FastAPI:
    """
    Build the application.

    Args:
        store: DataStore to serve from; the shared, environment-configured
            store when omitted.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan events."""
        app.state.store = store if store is not None else get_data_store()
        app.state.projector = Projector(app.state.store)
        app.state.templates = create_templates()

        logger.info(
            "Application startup complete",
            version=__version__,
            **{"store_" + k: v for k, v in app.state.store.describe().items() if k != "cache"},
        )

        yield

        logger.info("Application shutdown complete")

    app = FastAPI(
        title="SALN Tracker Philippines",
        description=DESCRIPTION,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add request context middleware for logging
    app.add_middleware(RequestContextMiddleware)

    # Static files (CSS)
    if STATIC_DIR.exists():
        app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    from saln_tracker.api.routes_public import router as public_api_router
    from saln_tracker.web.routes_public import router as public_router, render_not_found
    app.include_router(public_api_router)
    app.include_router(public_router)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Not-found page for browsers, JSON for the API."""
        if exc.status_code == 404 and not request.url.path.startswith("/api"):
            return render_not_found(request)
        return JSONResponse(
            {"detail": exc.detail},
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None),
        )

    @app.get("/health", tags=["System"])
    async def health():
        """
        Basic health check endpoint.

        Returns 200 if the service is running.
        For detailed health, use /health/detailed
        """
        return {"status": "healthy", "service": "saln-tracker"}

    @app.get("/health/detailed", tags=["System"])
    def health_detailed(request: Request):
        """
        Detailed health check.

        Checks:
        - Service liveness
        - Data store readability (officials collection)

        Returns 200 if healthy, 503 if unhealthy.
        """
        health_status = check_health(store=request.app.state.store)

        return JSONResponse(
            {
                "status": "healthy" if health_status.healthy else "unhealthy",
                "checks": health_status.checks,
                "duration_ms": health_status.duration_ms,
            },
            status_code=200 if health_status.healthy else 503,
        )

    @app.get("/metrics", tags=["System"])
    async def metrics():
        """
        Get application metrics.

        Returns counters and latency percentiles.
        """
        return get_metrics().get_summary()

    @app.get("/api", tags=["System"])
    def api_info(request: Request):
        """API index."""
        return {
            "name": "SALN Tracker Philippines API",
            "version": __version__,
            "storage_backend": request.app.state.store.describe()["type"],
            "stats": request.app.state.projector.stats(),
            "endpoints": {
                "public": {
                    "officials": "/api/public/officials",
                    "officials_grouped": "/api/public/officials/grouped",
                    "official_detail": "/api/public/officials/{slug}",
                    "resources": "/api/public/resources",
                },
            },
        }

    return app


app = create_app()
