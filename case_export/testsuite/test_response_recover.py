import json
from pathlib import Path
import sys

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from case_export.services.response_recover import ResponseRecover, ResponseRecoveryError


PAYLOAD = {
    "testCases": [
        {"id": "UI-001", "title": "Popup container visual properties"},
        {"id": "UI-002", "title": "Close button dismisses popup"},
        {"id": "UI-003", "title": "Overlay blocks background clicks"},
    ],
    "summary": {"totalTestCases": 3},
}


def _recover(text):
    return ResponseRecover().recover(text)


def test_recover_direct_json_object():
    result = _recover(json.dumps(PAYLOAD))

    assert [item["id"] for item in result] == ["UI-001", "UI-002", "UI-003"]


@pytest.mark.parametrize(
    "payload",
    [
        {"tests": [{"id": "a"}, {"id": "b"}]},
        {"test_cases": [{"id": "a"}, {"id": "b"}]},
        {"data": {"testCases": [{"id": "a"}, {"id": "b"}]}},
        {"result": {"tests": [{"id": "a"}, {"id": "b"}]}},
    ],
)
def test_recover_alternative_field_names(payload):
    assert len(_recover(json.dumps(payload))) == 2


def test_recover_accepts_top_level_array():
    assert _recover('[{"id": "a"}]') == [{"id": "a"}]


def test_recover_strips_code_fences():
    fenced = "```json\n" + json.dumps(PAYLOAD, indent=2) + "\n```"

    assert _recover(fenced) == PAYLOAD["testCases"]


def test_recover_fenced_response_with_leading_prose_matches_raw_json():
    raw = json.dumps(PAYLOAD)
    wrapped = "Here is the result:\n```json\n" + raw + "\n```"

    assert _recover(wrapped) == _recover(raw)


def test_recover_slices_between_outer_braces():
    text = "Sure! " + json.dumps(PAYLOAD) + "\nLet me know if you need more."

    assert len(_recover(text)) == 3


def test_recover_extracts_array_from_malformed_object():
    text = '{"testCases": [{"id": "a", "steps": ["x"]}, {"id": "b"}], "summary": {"total": 2,}'

    result = _recover(text)

    assert result == [{"id": "a", "steps": ["x"]}, {"id": "b"}]


def test_recover_failure_names_only_text_length():
    text = "secret prose without any json"

    with pytest.raises(ResponseRecoveryError) as exc_info:
        _recover(text)

    message = str(exc_info.value)
    assert f"length={len(text)}" in message
    assert "secret prose" not in message
    assert exc_info.value.text_length == len(text)


def test_recover_rejects_object_without_test_case_array():
    with pytest.raises(ResponseRecoveryError):
        _recover('{"summary": {"total": 0}}')


def test_recover_rejects_empty_input():
    with pytest.raises(ResponseRecoveryError) as exc_info:
        _recover("")

    assert "length=0" in str(exc_info.value)


def test_recover_is_deterministic():
    text = "noise ```json\n" + json.dumps(PAYLOAD) + "\n``` trailing"

    assert _recover(text) == _recover(text)


def test_strip_json_fences_removes_language_tag():
    assert ResponseRecover.strip_json_fences("```jsonc\n{}\n```") == "{}"
    assert ResponseRecover.strip_json_fences("  {}  ") == "{}"


def test_recover_survives_oversized_integer_literals():
    oversized = "1" * 5000

    recovered = _recover('{"testCases": [{"id": "a"}], "meta": ' + oversized + "}")

    assert recovered == [{"id": "a"}]
    with pytest.raises(ResponseRecoveryError) as exc_info:
        _recover('{"meta": ' + oversized + "}")
    assert str(exc_info.value).endswith(f"(length={len(oversized) + 10})")
