"""
Test case -> table layout shared by the Markdown and Excel exports.

A test case becomes one parent row plus one child row per additional visible
step. The parent row carries the identity columns (ReqID, Description,
Pre-Condition); merge regions on those columns span the parent row and its
child rows. The `#` column is numbered continuously over every emitted row and
is never merged.

The first visible step is written onto the parent row itself, so a merged
block never starts with a line that has no step text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union

from ..models.test_case import TestCase, TestStep

HEADER_ROW = [
    "#",
    "ReqID",
    "Description",
    "Pre-Condition",
    "Step/Procedure",
    "Expected Result/Output",
]
MERGED_COLUMNS = (1, 2, 3)
PROCEDURE_COLUMN = 4
EXPECTED_COLUMN = 5

SPREADSHEET_LINE_BREAK = "\n"
MARKDOWN_LINE_BREAK = "<br>"

Cell = Union[int, str]
Row = List[Cell]


@dataclass(frozen=True)
class MergeRegion:
    """Vertical span in one column; rows are 0-based data rows (header excluded)."""

    start_row: int
    end_row: int
    column: int


@dataclass
class RenderedTable:
    matrix: List[Row] = field(default_factory=list)
    merges: List[MergeRegion] = field(default_factory=list)

    @property
    def header(self) -> Row:
        return self.matrix[0] if self.matrix else list(HEADER_ROW)

    @property
    def data_rows(self) -> List[Row]:
        return self.matrix[1:]


class TableRenderer:
    def __init__(self, line_break_token: str = SPREADSHEET_LINE_BREAK, include_steps: bool = True):
        self.line_break_token = line_break_token
        self.include_steps = include_steps

    def render(self, test_cases: Sequence[TestCase]) -> RenderedTable:
        matrix: List[Row] = [list(HEADER_ROW)]
        merges: List[MergeRegion] = []
        display_index = 1

        for test_case in test_cases:
            parent_row: Row = [
                display_index,
                test_case.id,
                test_case.title or test_case.description,
                self.line_break_token.join(test_case.preconditions),
                "",
                "",
            ]
            matrix.append(parent_row)
            display_index += 1
            parent_row_index = len(matrix) - 2

            if not self.include_steps:
                continue

            visible_steps = 0
            child_row_count = 0
            for step in test_case.steps:
                procedure = self.format_procedure(step)
                expected = self.format_expected(step)
                if not procedure and not expected:
                    continue
                visible_steps += 1
                if visible_steps == 1:
                    parent_row[PROCEDURE_COLUMN] = procedure
                    parent_row[EXPECTED_COLUMN] = expected
                    continue
                matrix.append([display_index, "", "", "", procedure, expected])
                display_index += 1
                child_row_count += 1

            if visible_steps:
                end_row = parent_row_index + child_row_count
                merges.extend(
                    MergeRegion(start_row=parent_row_index, end_row=end_row, column=column)
                    for column in MERGED_COLUMNS
                )

        return RenderedTable(matrix=matrix, merges=merges)

    @staticmethod
    def format_procedure(step: TestStep) -> str:
        action = (step.action or "").strip()
        if not action:
            return ""
        return f"Step {step.step_number or 1}: {action}"

    def format_expected(self, step: TestStep) -> str:
        return self.encode_line_breaks(step.expected_behavior)

    def encode_line_breaks(self, value: Optional[str]) -> str:
        if not value:
            return ""
        return value.replace("\r\n", "\n").replace("\n", self.line_break_token)
