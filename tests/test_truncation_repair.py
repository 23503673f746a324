from __future__ import annotations

from listing_ai.services.extraction import RepairReport, close_truncated
from listing_ai.services.llm_json import extract_json


def test_close_truncated_appends_missing_braces() -> None:
    report = RepairReport()

    repaired = close_truncated('{"a":{"b":1', report)

    assert repaired == '{"a":{"b":1}}'
    assert report.kinds() == ["closed_braces"]
    assert report.actions[0].count == 2


def test_close_truncated_leaves_balanced_text_alone() -> None:
    report = RepairReport()
    assert close_truncated('{"a": {"b": 1}}', report) == '{"a": {"b": 1}}'
    assert len(report) == 0


def test_close_truncated_ignores_braces_in_strings() -> None:
    assert close_truncated('{"a": "{{{"', RepairReport()) == '{"a": "{{{"}'


def test_close_truncated_closes_array_root_after_braces() -> None:
    report = RepairReport()

    repaired = close_truncated('[{"a": 1}, {"b": 2', report, "array")

    assert repaired == '[{"a": 1}, {"b": 2}]'
    assert report.kinds() == ["closed_braces", "closed_array"]


def test_truncated_object_is_repaired_and_decoded() -> None:
    result = extract_json('{"a":{"b":1')

    assert result.ok
    assert result.value == {"a": {"b": 1}}
    assert "closed_braces" in result.report


def test_truncation_inside_string_is_reported_not_papered_over() -> None:
    result = extract_json('{"a":"unterminated')

    assert not result.ok
    assert result.reason == "truncated_beyond_recovery"
    assert "closed_braces" in result.report
