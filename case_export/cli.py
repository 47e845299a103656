"""
Offline export of generated test cases.

Reads a raw LLM completion (or plain JSON) from a file or stdin, recovers the
test case array and writes it out as Markdown or an .xlsx workbook.

Examples:
    python -m case_export.cli completion.txt --format excel -o cases.xlsx
    cat cases.json | python -m case_export.cli - --group-by priority
"""

import argparse
import base64
import logging
import sys
from typing import List, Optional

from .models.test_case_export import ExportFormat, GroupingStrategy, TestCaseExportRequest
from .services.test_case_export_service import TestCaseExportService
from .services.test_case_ingest_service import TestCaseIngestService

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Export LLM-generated test cases to Markdown or Excel",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("input", help="completion or JSON file, '-' for stdin")
    parser.add_argument("-o", "--output", help="output path (defaults to the suggested file name)")
    parser.add_argument(
        "--format",
        choices=[item.value for item in ExportFormat],
        default=ExportFormat.MARKDOWN.value,
    )
    parser.add_argument(
        "--group-by",
        dest="grouping_strategy",
        choices=[item.value for item in GroupingStrategy],
        default=GroupingStrategy.CATEGORY.value,
    )
    parser.add_argument("--project-name")
    parser.add_argument("--no-steps", action="store_true", help="emit one row per test case")
    parser.add_argument(
        "--no-template",
        action="store_true",
        help="ignore the configured Excel template",
    )
    parser.add_argument("--verbose", action="store_true", help="enable debug logging")
    return parser


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as file:
        return file.read()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    try:
        parsed = TestCaseIngestService().parse_completion(_read_input(args.input))
    except (OSError, ValueError) as exc:
        logger.error("Unable to read test cases: %s", exc)
        return 1

    request = TestCaseExportRequest(
        test_cases=[case.model_dump(by_alias=True) for case in parsed.test_cases],
        format=args.format,
        project_name=args.project_name,
        grouping_strategy=args.grouping_strategy,
        include_steps=not args.no_steps,
    )
    service = TestCaseExportService(use_configured_template=not args.no_template)
    result = service.export(request)
    if not result.success or result.data is None:
        logger.error(result.message)
        return 1

    output_path = args.output or result.data.file_name
    if request.format == ExportFormat.EXCEL:
        with open(output_path, "wb") as file:
            file.write(base64.b64decode(result.data.content))
    else:
        with open(output_path, "w", encoding="utf-8") as file:
            file.write(result.data.content + "\n")

    logger.info(
        "Wrote %s test cases to %s (%s ms)",
        result.data.total_test_cases,
        output_path,
        result.processing_time,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
