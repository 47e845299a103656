from __future__ import annotations

from typing import Dict, List, Sequence, Union

from ..models.test_case import TestCase
from ..models.test_case_export import GroupingStrategy

ALL_TEST_CASES_LABEL = "All Test Cases"

CATEGORY_LABELS: Dict[str, str] = {
    "visual": "Visual Tests",
    "functional": "Functional Tests",
    "integration": "Integration Tests",
    "performance": "Performance Tests",
    "security": "Security Tests",
    "edge_case": "Edge Case Tests",
    "regression": "Regression Tests",
    "accessibility": "Accessibility Tests",
    "ui_ux": "UI/UX Tests",
}

PRIORITY_LABELS: Dict[str, str] = {
    "critical": "Critical Priority",
    "high": "High Priority",
    "medium": "Medium Priority",
    "low": "Low Priority",
}


def _display_label(raw_value: str, labels: Dict[str, str]) -> str:
    text = str(raw_value or "")
    label = labels.get(text.strip().lower())
    if label:
        return label
    return text[:1].upper() + text[1:]


def format_category_name(category: str) -> str:
    return _display_label(category, CATEGORY_LABELS)


def format_priority_name(priority: str) -> str:
    return _display_label(priority, PRIORITY_LABELS)


def group_test_cases(
    test_cases: Sequence[TestCase],
    strategy: Union[GroupingStrategy, str] = GroupingStrategy.CATEGORY,
) -> Dict[str, List[TestCase]]:
    """Partition test cases by label, keeping input order and first-seen group order."""
    strategy = GroupingStrategy(strategy)
    if strategy == GroupingStrategy.NONE:
        return {ALL_TEST_CASES_LABEL: list(test_cases)}

    grouped: Dict[str, List[TestCase]] = {}
    for test_case in test_cases:
        if strategy == GroupingStrategy.PRIORITY:
            label = format_priority_name(test_case.priority)
        else:
            label = format_category_name(test_case.category)
        grouped.setdefault(label, []).append(test_case)
    return grouped
