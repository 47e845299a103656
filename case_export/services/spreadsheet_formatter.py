"""
Excel (.xlsx) rendering of a RenderedTable.

Two modes:
- template fill: data rows are written into a pre-styled workbook supplied by
  a TemplateProvider, cloning the style of the row above the insertion point
- fresh build: a new workbook with header styling and merged identity columns

A missing or unreadable template is a normal condition and falls back to the
fresh build. Single-row regions are styled but never written as 1x1 merges.
"""

from __future__ import annotations

import logging
import os
from copy import copy
from dataclasses import dataclass
from io import BytesIO
from typing import Optional, Protocol, Sequence

from openpyxl import Workbook, load_workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from .table_renderer import MERGED_COLUMNS, RenderedTable

logger = logging.getLogger(__name__)

DEFAULT_SHEET_NAME = "Test Cases"
COLUMN_WIDTHS: Sequence[int] = (5, 15, 40, 30, 50, 60)
HEADER_FILL_COLOR = "E5E7EB"
PARENT_FILL_COLOR = "F3F4F6"
BORDER_COLOR = "D1D5DB"


@dataclass
class TemplateHandle:
    workbook: Workbook
    sheet: Worksheet
    # 1-based row of the first data row
    start_row: int


class TemplateProvider(Protocol):
    def open(self) -> Optional[TemplateHandle]:
        ...


class FileTemplateProvider:
    """Load the styled template workbook from disk on every call."""

    def __init__(self, path: str, sheet_name: str = DEFAULT_SHEET_NAME, start_row: int = 17):
        self.path = path
        self.sheet_name = sheet_name
        self.start_row = max(2, int(start_row))

    def open(self) -> Optional[TemplateHandle]:
        if not self.path or not os.path.exists(self.path):
            logger.warning("Excel template not found at %s, using generated workbook", self.path)
            return None
        workbook = load_workbook(self.path)
        if self.sheet_name in workbook.sheetnames:
            sheet = workbook[self.sheet_name]
        else:
            sheet = workbook.worksheets[0]
        return TemplateHandle(workbook=workbook, sheet=sheet, start_row=self.start_row)


class SpreadsheetFormatter:
    def __init__(
        self,
        template_provider: Optional[TemplateProvider] = None,
        sheet_name: str = DEFAULT_SHEET_NAME,
    ):
        self.template_provider = template_provider
        self.sheet_name = sheet_name

    def format(self, table: RenderedTable) -> bytes:
        if self.template_provider is not None:
            try:
                handle = self.template_provider.open()
                if handle is not None:
                    self.fill_template(handle, table)
                    return self._serialize(handle.workbook)
            except Exception as exc:  # noqa: BLE001
                logger.warning(
                    "Template load failed, falling back to generated workbook: %s",
                    exc,
                    exc_info=True,
                )

        return self._serialize(self.build_workbook(table))

    # ---------------- Fresh build ----------------
    def build_workbook(self, table: RenderedTable) -> Workbook:
        workbook = Workbook()
        sheet = workbook.active
        sheet.title = self.sheet_name

        for row in table.matrix:
            sheet.append([self._cell_value(value) for value in row])

        for index, width in enumerate(COLUMN_WIDTHS, start=1):
            sheet.column_dimensions[get_column_letter(index)].width = width

        for cell in sheet[1]:
            cell.font = Font(bold=True)
            cell.fill = PatternFill("solid", fgColor=HEADER_FILL_COLOR)
            cell.alignment = Alignment(horizontal="center", vertical="center")

        side = Side(style="thin", color=BORDER_COLOR)
        for region in table.merges:
            # +1 for the header row, +1 for 1-based rows/columns
            start_row = region.start_row + 2
            end_row = region.end_row + 2
            column = region.column + 1
            top_cell = sheet.cell(row=start_row, column=column)
            top_cell.font = Font(bold=True)
            top_cell.fill = PatternFill("solid", fgColor=PARENT_FILL_COLOR)
            top_cell.alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)
            top_cell.border = Border(left=side, right=side, top=side, bottom=side)
            if end_row == start_row:
                continue
            sheet.merge_cells(
                start_row=start_row,
                start_column=column,
                end_row=end_row,
                end_column=column,
            )

        return workbook

    # ---------------- Template fill ----------------
    def fill_template(self, handle: TemplateHandle, table: RenderedTable) -> None:
        sheet = handle.sheet
        start_row = handle.start_row
        style_row = max(1, start_row - 1)

        for offset, values in enumerate(table.data_rows):
            row_number = start_row + offset
            for column, value in enumerate(values, start=1):
                target = sheet.cell(row=row_number, column=column)
                source = sheet.cell(row=style_row, column=column)
                if source.has_style:
                    # StyleArray is a mutable per-cell index array; copy, never share
                    target._style = copy(source._style)
                current = target.alignment
                target.alignment = Alignment(
                    horizontal=current.horizontal,
                    text_rotation=current.text_rotation,
                    shrink_to_fit=current.shrink_to_fit,
                    indent=current.indent,
                    wrap_text=True,
                    vertical="center",
                )
                target.value = self._cell_value(value)

        for region in table.merges:
            if region.column not in MERGED_COLUMNS or region.end_row == region.start_row:
                continue
            sheet.merge_cells(
                start_row=start_row + region.start_row,
                start_column=region.column + 1,
                end_row=start_row + region.end_row,
                end_column=region.column + 1,
            )

    @staticmethod
    def _cell_value(value):
        if value == "":
            return None
        return value

    @staticmethod
    def _serialize(workbook: Workbook) -> bytes:
        buffer = BytesIO()
        workbook.save(buffer)
        return buffer.getvalue()

