"""Serialize export rows into an .xlsx workbook."""

from __future__ import annotations

import io
from collections.abc import Iterable, Mapping, Sequence
from datetime import date
from typing import Any

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

MIN_COLUMN_WIDTH = 12
MAX_COLUMN_WIDTH = 50


def write_workbook(
    rows: Iterable[Mapping[str, Any]],
    columns: Sequence[str],
    sheet_title: str = "Registrations",
) -> bytes:
    """Write rows to a single-sheet workbook and return the file bytes.

    Args:
        rows: Flat rows keyed by column name.
        columns: Column order; also written as the bold header row.
        sheet_title: Worksheet name (truncated to Excel's 31 character limit).

    Returns:
        The .xlsx file contents.
    """
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_title[:31] or "Sheet"

    ws.append(list(columns))
    for cell in ws[1]:
        cell.font = Font(bold=True)

    widths = [len(column) for column in columns]
    for row in rows:
        values = [row.get(column, "N/A") for column in columns]
        ws.append(values)
        for position, value in enumerate(values):
            widths[position] = max(widths[position], len(str(value)))

    for position, width in enumerate(widths, start=1):
        ws.column_dimensions[get_column_letter(position)].width = min(
            max(width + 2, MIN_COLUMN_WIDTH), MAX_COLUMN_WIDTH
        )
    ws.freeze_panes = "A2"

    out = io.BytesIO()
    wb.save(out)
    out.seek(0)
    return out.read()


def export_filename(prefix: str, today: date | None = None) -> str:
    """Download name with the export date appended, e.g. all-registrations_2025-03-01.xlsx."""
    return f"{prefix}_{(today or date.today()).isoformat()}.xlsx"
