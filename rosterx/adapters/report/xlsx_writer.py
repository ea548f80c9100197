"""Excel export of a weekly roster grid."""
from __future__ import annotations

from pathlib import Path
from typing import BinaryIO, Union

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font

from ...domain.models import PivotType
from ...services.grid import Grid

HEADER_FONT = Font(bold=True)
CENTER = Alignment(horizontal="center", vertical="center", wrap_text=True)


def write_grid(target: Union[str, Path, BinaryIO], grid: Grid, *, title: str | None = None) -> None:
    wb = Workbook()
    ws = wb.active
    ws.title = title or "Roster"

    ws.cell(row=1, column=1, value="Staff" if grid.pivot is PivotType.STAFF else "Shift").font = HEADER_FONT
    for idx, day in enumerate(grid.days, start=2):
        cell = ws.cell(row=1, column=idx, value=day.strftime("%a %d/%m"))
        cell.font = HEADER_FONT
        cell.alignment = CENTER

    for row_idx, row in enumerate(grid.rows, start=2):
        heading = row.label if not row.detail else f"{row.label} ({row.detail})"
        ws.cell(row=row_idx, column=1, value=heading).font = HEADER_FONT
        for col_idx, grid_cell in enumerate(row.cells, start=2):
            value = "\n".join(entry.label for entry in grid_cell.entries) or None
            ws.cell(row=row_idx, column=col_idx, value=value).alignment = CENTER

    ws.column_dimensions["A"].width = 28
    wb.save(target if not isinstance(target, str) else Path(target))
