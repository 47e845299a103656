"""
Recover the test case array from LLM completion text.

The model is asked for a JSON object, but completions routinely arrive wrapped
in code fences, prefixed with prose or slightly truncated. Recovery runs an
ordered chain of strategies and returns the first array found.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

TEST_CASE_ARRAY_KEYS: Tuple[str, ...] = ("testCases", "tests", "test_cases")
NESTED_CONTAINER_KEYS: Tuple[str, ...] = ("data", "result")

_LEADING_FENCE_RE = re.compile(r"^```[A-Za-z0-9_+-]*[ \t]*\r?\n?")
_TRAILING_FENCE_RE = re.compile(r"\r?\n?[ \t]*```[ \t]*$")

RecoveryStrategy = Callable[[str], Optional[List[Any]]]


class ResponseRecoveryError(ValueError):
    """No test case array could be located in the model output."""

    def __init__(self, text_length: int):
        self.text_length = text_length
        super().__init__(
            f"Failed to parse generated test cases: no test case array found "
            f"in model output (length={text_length})"
        )


class ResponseRecover:
    """Run the ordered recovery chain over raw model text."""

    def __init__(self) -> None:
        self._strategies: Sequence[Tuple[str, RecoveryStrategy]] = (
            ("direct", self._parse_direct),
            ("strip_fences", self._parse_without_fences),
            ("brace_slice", self._parse_brace_slice),
            ("array_extract", self._extract_array),
        )

    def recover(self, raw_text: str) -> List[Any]:
        source = str(raw_text or "")
        failures: List[str] = []
        for name, strategy in self._strategies:
            try:
                result = strategy(source)
            except (ValueError, RecursionError) as exc:
                failures.append(f"{name}: {exc.__class__.__name__}")
                continue
            if result is not None:
                logger.debug(
                    "Recovered %s test case candidates via %s", len(result), name
                )
                return result
            failures.append(f"{name}: no test case array")

        logger.debug(
            "Test case recovery failed (length=%s): %s", len(source), "; ".join(failures)
        )
        raise ResponseRecoveryError(len(source))

    # ---------------- Strategies ----------------
    @classmethod
    def _parse_direct(cls, text: str) -> Optional[List[Any]]:
        candidate = text.strip()
        if not candidate:
            return None
        return cls.find_test_case_array(json.loads(candidate))

    @classmethod
    def _parse_without_fences(cls, text: str) -> Optional[List[Any]]:
        stripped = cls.strip_json_fences(text)
        if stripped == text.strip():
            return None
        return cls._parse_direct(stripped)

    @classmethod
    def _parse_brace_slice(cls, text: str) -> Optional[List[Any]]:
        cleaned = cls.strip_json_fences(text)
        first = cleaned.find("{")
        last = cleaned.rfind("}")
        if first == -1 or last <= first:
            return None
        return cls._parse_direct(cleaned[first : last + 1])

    @classmethod
    def _extract_array(cls, text: str) -> Optional[List[Any]]:
        cleaned = cls.strip_json_fences(text)
        for key in TEST_CASE_ARRAY_KEYS:
            key_index = cleaned.find(f'"{key}"')
            if key_index == -1:
                continue
            slice_ = cls._balanced_array_slice(cleaned, key_index)
            if slice_ is None:
                continue
            parsed = json.loads(slice_)
            if isinstance(parsed, list):
                return parsed
        return None

    # ---------------- Helpers ----------------
    @staticmethod
    def strip_json_fences(content: str) -> str:
        normalized = (content or "").strip()
        if not normalized.startswith("```"):
            return normalized
        normalized = _LEADING_FENCE_RE.sub("", normalized, count=1)
        normalized = _TRAILING_FENCE_RE.sub("", normalized, count=1)
        return normalized.strip()

    @staticmethod
    def _balanced_array_slice(source: str, from_index: int) -> Optional[str]:
        start = source.find("[", from_index)
        if start == -1:
            return None
        # Plain depth counter; brackets inside string literals are not special.
        depth = 0
        for idx in range(start, len(source)):
            ch = source[idx]
            if ch == "[":
                depth += 1
            elif ch == "]":
                depth -= 1
                if depth == 0:
                    return source[start : idx + 1]
        return None

    @staticmethod
    def find_test_case_array(payload: Any) -> Optional[List[Any]]:
        if isinstance(payload, list):
            return payload
        if not isinstance(payload, dict):
            return None
        for key in TEST_CASE_ARRAY_KEYS:
            if isinstance(payload.get(key), list):
                return payload[key]
        for container_key in NESTED_CONTAINER_KEYS:
            container = payload.get(container_key)
            if not isinstance(container, dict):
                continue
            for key in TEST_CASE_ARRAY_KEYS:
                if isinstance(container.get(key), list):
                    return container[key]
        return None
