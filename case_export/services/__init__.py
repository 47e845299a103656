"""Test case recovery, normalization and export components."""

from .grouper import group_test_cases
from .markdown_formatter import MarkdownFormatter
from .response_recover import ResponseRecover, ResponseRecoveryError
from .spreadsheet_formatter import FileTemplateProvider, SpreadsheetFormatter, TemplateHandle
from .table_renderer import MergeRegion, RenderedTable, TableRenderer
from .test_case_export_service import ExportValidationError, TestCaseExportService
from .test_case_ingest_service import ParsedTestCases, TestCaseIngestService
from .test_case_normalizer import EmptyTestCasesError, TestCaseNormalizer, summarize

__all__ = [
    "EmptyTestCasesError",
    "ExportValidationError",
    "FileTemplateProvider",
    "MarkdownFormatter",
    "MergeRegion",
    "ParsedTestCases",
    "RenderedTable",
    "ResponseRecover",
    "ResponseRecoveryError",
    "SpreadsheetFormatter",
    "TableRenderer",
    "TemplateHandle",
    "TestCaseExportService",
    "TestCaseIngestService",
    "TestCaseNormalizer",
    "group_test_cases",
    "summarize",
]
