"""
Exports Router - Spreadsheet downloads for the admin dashboard.

Each export type has a fixed column layout (see export_formatter). Generated
workbooks are cached by content, so downloading an unchanged sheet twice only
builds it once.
"""

from __future__ import annotations

import asyncio
import io
import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse

from innothon.errors import UnknownEventError, UnknownExportKindError, UpstreamFetchError

from ..dependencies import get_export_cache, get_reporting_service
from ..services.export_cache import ExportCache, rows_digest
from ..services.reporting_service import ReportingService
from ..services.workbook_writer import XLSX_MEDIA_TYPE, export_filename, write_workbook

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/exports", tags=["exports"])


@router.get("/{kind}")
async def download_export(
    kind: str,
    event_id: str | None = Query(None, description="Event id (required for the event export)"),
    game: str | None = Query(None, description="Game to keep on the gaming export (e.g. bgmi)"),
    service: ReportingService = Depends(get_reporting_service),
    cache: ExportCache = Depends(get_export_cache),
) -> StreamingResponse:
    """Download an export as an .xlsx workbook.

    Kinds: all, approved, pending, accounts, event, statistics, attendance, gaming.
    """
    try:
        table = await service.export(kind, event_id=event_id, game=game)
    except (UnknownExportKindError, UnknownEventError) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except UpstreamFetchError as e:
        logger.error(f"Upstream fetch failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    except Exception as e:
        logger.error(f"Error building {kind} export: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error building export: {str(e)}")

    try:
        key = rows_digest(table.columns, table.rows, table.sheet_title)
        content = cache.get(key)
        if content is None:
            content = await asyncio.to_thread(write_workbook, table.rows, table.columns, table.sheet_title)
            cache.put(key, content)
    except Exception as e:
        logger.error(f"Error writing {kind} workbook: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error writing workbook: {str(e)}")

    filename = export_filename(table.filename_prefix)
    return StreamingResponse(
        io.BytesIO(content),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
