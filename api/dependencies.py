"""
FastAPI dependencies for the reporting API.

The API reads with superuser rights through one shared PocketBase client.
The export workbook cache lives here too, so it is owned by the HTTP layer
and injected into the exports router rather than hidden in the aggregators.
"""

from __future__ import annotations

import asyncio
import logging

from fastapi import Depends
from pocketbase import PocketBase

from .services.export_cache import ExportCache
from .services.reporting_repository import ReportingRepository
from .services.reporting_service import ReportingService
from .settings import get_settings

logger = logging.getLogger(__name__)

_settings = get_settings()

pb = PocketBase(_settings.pocketbase_url)

export_cache = ExportCache(
    capacity=_settings.export_cache_capacity,
    ttl_seconds=_settings.export_cache_ttl_seconds,
)


async def authenticate_pb() -> None:
    """Sign the shared client in as superuser; raises if PocketBase refuses."""
    settings = get_settings()
    try:
        await asyncio.to_thread(
            pb.collection("_superusers").auth_with_password,
            settings.pocketbase_admin_email,
            settings.pocketbase_admin_password,
        )
    except Exception as e:
        logger.error(f"PocketBase sign-in failed for {settings.pocketbase_admin_email}: {e}")
        raise
    logger.info(f"Signed in to PocketBase at {settings.pocketbase_url}")


async def get_pb_client() -> PocketBase:
    return pb


def get_export_cache() -> ExportCache:
    return export_cache


def get_repository(client: PocketBase = Depends(get_pb_client)) -> ReportingRepository:
    return ReportingRepository(client)


def get_reporting_service(repository: ReportingRepository = Depends(get_repository)) -> ReportingService:
    """Reporting service over the shared client, with the configured display timezone."""
    return ReportingService(repository, display_timezone=get_settings().display_timezone)
