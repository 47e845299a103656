from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Union

from ..models.test_case import TestCase
from ..models.test_case_export import GroupingStrategy
from .table_renderer import MARKDOWN_LINE_BREAK, MERGED_COLUMNS, RenderedTable, Row, TableRenderer

TABLE_HEADER = "| # | ReqID | Description | Pre-Condition | Step/Procedure | Expected Result/Output |"
TABLE_SEPARATOR = "|----|-------|-------------|---------------|----------------|------------------------|"


class MarkdownFormatter:
    """Render grouped test cases as pipe tables.

    Markdown has no merged cells, so a merge region is approximated by
    printing columns 1-3 on the region's first row only.
    """

    def __init__(self, include_steps: bool = True):
        self.include_steps = include_steps

    def format(
        self,
        groups: Dict[str, Sequence[TestCase]],
        strategy: Union[GroupingStrategy, str] = GroupingStrategy.CATEGORY,
        project_name: Optional[str] = None,
    ) -> str:
        strategy = GroupingStrategy(strategy)
        sections: List[str] = []
        if project_name:
            sections.append(f"# Test Cases - {project_name}")

        for label, test_cases in groups.items():
            renderer = TableRenderer(line_break_token=MARKDOWN_LINE_BREAK, include_steps=self.include_steps)
            table = self.format_table(renderer.render(test_cases))
            if strategy != GroupingStrategy.NONE:
                sections.append(f"# Test Cases - {label}")
            sections.append(table)

        return "\n\n".join(sections).strip()

    def format_table(self, table: RenderedTable) -> str:
        rows = [list(row) for row in table.data_rows]
        for region in table.merges:
            if region.column not in MERGED_COLUMNS:
                continue
            for row_index in range(region.start_row + 1, region.end_row + 1):
                if 0 <= row_index < len(rows):
                    rows[row_index][region.column] = ""

        lines = [TABLE_HEADER, TABLE_SEPARATOR]
        lines.extend(self._format_row(row) for row in rows)
        return "\n".join(lines)

    @classmethod
    def _format_row(cls, row: Row) -> str:
        cells = [cls._escape_cell(value) for value in row]
        return "|" + "|".join(f" {cell} " if cell else " " for cell in cells) + "|"

    @staticmethod
    def _escape_cell(value) -> str:
        text = "" if value is None else str(value)
        text = text.replace("\r\n", "\n").replace("\n", MARKDOWN_LINE_BREAK)
        return text.replace("|", "\\|").strip()
