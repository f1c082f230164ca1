"""SIRF workbook writer - renders an ExtractionResult into an xlsx workbook."""

import io
import logging
from pathlib import Path
from typing import Optional, Sequence, Tuple

import openpyxl
from openpyxl.cell.cell import Cell
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from ..schemas.document import ExtractionResult, ProjectionGrid
from ..schemas.sirf import SIRF_METADATA_LAYOUT, SIRF_TITLE

logger = logging.getLogger(__name__)

NO_TABLE_MESSAGE = "No table detected - please check PDF structure"

HEADER_ROW = 8
MIN_COLUMN_WIDTH = 8
MAX_COLUMN_WIDTH = 50
GRID_COLUMN_WIDTH = 10
GRID_WIDTH_SAMPLE_ROWS = 50

GRID_BORDER_COLOR = "D3D3D3"
GRID_HEADER_FILL = "4472C4"


def _write_text(ws: Worksheet, row: int, column: int, value: Optional[str]) -> Cell:
    """Write extracted text as a literal string cell ("" becomes an empty cell).

    openpyxl treats strings starting with "=" as formulas; form text such as
    "=SUM(A1:A3" must stay text.
    """
    cell = ws.cell(row=row, column=column, value=value if value else None)
    if value and value.startswith("="):
        cell.data_type = "s"
    return cell


class SirfWorkbookWriter:
    """Writes the SIRF sheet plus one projection-grid sheet per page.

    Sheet "SIRF": title, metadata block (rows 2-5), table headers on row 8,
    data from row 9. Sheets "Original Page N": label-free grid with a
    highlighted first row.
    """

    def __init__(
        self,
        title: str = SIRF_TITLE,
        layout: Sequence[Sequence[Tuple[str, str]]] = SIRF_METADATA_LAYOUT,
        include_grids: bool = True,
    ):
        """Initialize writer.

        Args:
            title: Sheet title written to A1
            layout: Metadata rows as (label, metadata key) pairs
            include_grids: Append projection grid sheets
        """
        self.title = title
        self.layout = layout
        self.include_grids = include_grids

    def build(self, result: ExtractionResult) -> Workbook:
        """Build the workbook in memory."""
        wb = openpyxl.Workbook()
        wb.remove(wb.active)  # Remove default sheet

        self._create_sirf_sheet(wb, result)

        if self.include_grids:
            for grid in result.grids:
                self._create_grid_sheet(wb, grid)

        logger.info(f"Built workbook with sheets: {', '.join(wb.sheetnames)}")
        return wb

    def save(self, result: ExtractionResult, output_path: Path) -> Path:
        """Build and save the workbook to output_path."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        self.build(result).save(output_path)
        logger.info(f"Workbook saved: {output_path}")
        return output_path

    def to_bytes(self, result: ExtractionResult) -> bytes:
        buf = io.BytesIO()
        self.build(result).save(buf)
        return buf.getvalue()

    def _create_sirf_sheet(self, wb: Workbook, result: ExtractionResult) -> Worksheet:
        ws = wb.create_sheet("SIRF")
        ws["A1"] = self.title
        ws["A1"].font = Font(bold=True, size=14)

        for offset, pairs in enumerate(self.layout):
            row = 2 + offset
            for idx, (label, key) in enumerate(pairs):
                col = idx * 3 + 1
                ws.cell(row=row, column=col, value=label).font = Font(bold=True)
                _write_text(ws, row, col + 1, result.metadata.get(key, ""))

        if not result.headers:
            ws.cell(row=HEADER_ROW, column=1, value=NO_TABLE_MESSAGE)
            return ws

        for col_num, header in enumerate(result.headers, 1):
            cell = _write_text(ws, HEADER_ROW, col_num, header)
            cell.font = Font(bold=True)

        for row_offset, values in enumerate(result.table(), 1):
            for col_num, value in enumerate(values, 1):
                _write_text(ws, HEADER_ROW + row_offset, col_num, value)

        for col_num, header in enumerate(result.headers, 1):
            max_length = max([len(header)] + [len(row.get(header, "")) for row in result.rows])
            width = min(max(max_length + 2, MIN_COLUMN_WIDTH), MAX_COLUMN_WIDTH)
            ws.column_dimensions[get_column_letter(col_num)].width = width

        return ws

    def _create_grid_sheet(self, wb: Workbook, grid: ProjectionGrid) -> Optional[Worksheet]:
        if not grid.rows:
            return None

        ws = wb.create_sheet(f"Original Page {grid.page}")

        side = Side(style="thin", color=GRID_BORDER_COLOR)
        border = Border(left=side, right=side, top=side, bottom=side)
        header_fill = PatternFill(start_color=GRID_HEADER_FILL, end_color=GRID_HEADER_FILL, fill_type="solid")
        header_font = Font(bold=True, color="FFFFFF")
        header_alignment = Alignment(horizontal="center", vertical="center")
        body_alignment = Alignment(horizontal="left", vertical="top", wrap_text=True)

        for row_num, values in enumerate(grid.rows, 1):
            for col_num, value in enumerate(values, 1):
                cell = _write_text(ws, row_num, col_num, value)
                cell.border = border
                if row_num == 1:
                    cell.font = header_font
                    cell.fill = header_fill
                    cell.alignment = header_alignment
                else:
                    cell.alignment = body_alignment

        widths = [GRID_COLUMN_WIDTH] * len(grid.rows[0])
        for values in grid.rows[:GRID_WIDTH_SAMPLE_ROWS]:
            for idx, value in enumerate(values[: len(widths)]):
                if value and len(value) > widths[idx]:
                    widths[idx] = min(len(value) + 2, MAX_COLUMN_WIDTH)

        for idx, width in enumerate(widths, 1):
            ws.column_dimensions[get_column_letter(idx)].width = width

        return ws
