"""
Innothon Admin API.

Read-only backend-for-frontend behind the admin dashboard. It serves the
dashboard metrics (trends, distributions, event comparison, revenue,
attendance, messages) and the spreadsheet exports.

Run with: uvicorn api.main:app
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from innothon.logging_config import configure_logging, get_logger

from .dependencies import authenticate_pb, export_cache
from .routers import exports, metrics
from .settings import get_settings

configure_logging(source="api")
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Sign in to PocketBase on startup; drop cached workbooks on shutdown."""
    if get_settings().skip_pb_auth:
        logger.warning("SKIP_PB_AUTH is set, not signing in to PocketBase")
    else:
        await authenticate_pb()

    yield

    export_cache.clear()


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title="Innothon Admin API",
        description="Reporting and export API for the Innothon admin dashboard",
        lifespan=lifespan,
    )

    # Downloads need Content-Disposition visible to the browser for the file name
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition"],
    )

    app.include_router(metrics.router)
    app.include_router(exports.router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "healthy", "service": "innothon-admin-api"}

    return app


app = create_app()
