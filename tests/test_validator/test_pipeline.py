"""Tests for the validation pipeline, consolidation and result assembly."""

from __future__ import annotations

from pathlib import Path

from appcast.document.parser import parse_document
from appcast.validator.models import Diagnostic, ValidationSeverity
from appcast.validator.pipeline import (
    assemble_result,
    consolidate_diagnostics,
    merge_diagnostics,
    run_rules,
    validate,
    validate_document,
)
from appcast.validator.rules import build_rules

from conftest import FIXED_NOW, make_feed, make_item, ids


def _d(diagnostic_id: str, line: int | None = None, message: str = "msg") -> Diagnostic:
    severity = {
        "E": ValidationSeverity.error,
        "W": ValidationSeverity.warning,
        "I": ValidationSeverity.info,
    }[diagnostic_id[0]]
    return Diagnostic(id=diagnostic_id, severity=severity, message=message, line=line)


class TestConsolidate:
    def test_groups_by_id_in_first_seen_order(self) -> None:
        diags = [_d("W003", 5), _d("E010", 2), _d("W003", 9), _d("W003", 12)]
        out = consolidate_diagnostics(diags)
        assert [d.id for d in out] == ["W003", "E010"]
        assert out[0].message == "msg (and 2 more similar issues)"
        assert out[0].line == 5

    def test_singular_suffix(self) -> None:
        out = consolidate_diagnostics([_d("W003"), _d("W003")])
        assert out[0].message == "msg (and 1 more similar issue)"

    def test_idempotent(self) -> None:
        diags = [_d("W003", 5), _d("E010", 2), _d("W003", 9)]
        once = consolidate_diagnostics(diags)
        assert consolidate_diagnostics(once) == once

    def test_input_is_not_mutated(self) -> None:
        first = _d("W003", 5)
        consolidate_diagnostics([first, _d("W003", 6)])
        assert first.message == "msg"


class TestAssemble:
    def test_sorted_by_severity_then_line(self) -> None:
        result = assemble_result([_d("I001", 1), _d("W003", 4), _d("E010", 9), _d("E002", None), _d("W009", 2)])
        assert [d.id for d in result.diagnostics] == ["E002", "E010", "W009", "W003", "I001"]

    def test_counts_and_validity(self) -> None:
        result = assemble_result([_d("W003"), _d("I001"), _d("I002")])
        assert (result.error_count, result.warning_count, result.info_count) == (0, 1, 2)
        assert result.valid is True
        assert assemble_result([_d("E010")]).valid is False

    def test_merge_keeps_remote_duplicates(self) -> None:
        base = assemble_result([_d("I001", 3)])
        merged = merge_diagnostics(base, [_d("E027", 10), _d("E027", 20)])
        assert ids(merged) == ["E027", "E027", "I001"]
        assert merged.error_count == 2
        assert merged.valid is False


class TestPipeline:
    def test_single_item_example(self) -> None:
        result = validate(make_feed(make_item()), now=FIXED_NOW)
        assert result.error_count == 0
        assert result.warning_count == 0
        assert ids(result) == ["I001"]
        assert result.diagnostics[0].message == "Found 1 item"

    def test_valid_fixture(self, valid_feed_path: Path) -> None:
        result = validate(valid_feed_path.read_text(), now=FIXED_NOW)
        assert result.valid is True
        assert result.warning_count == 0
        assert set(ids(result)) == {"I001", "I009"}

    def test_deterministic(self) -> None:
        xml = make_feed(make_item("100") + make_item("100") + make_item("1.0-beta", length="x"))
        first = validate(xml, now=FIXED_NOW)
        second = validate(xml, now=FIXED_NOW)
        assert first.model_dump_json() == second.model_dump_json()

    def test_repeated_findings_are_consolidated(self) -> None:
        xml = make_feed(make_item("300", signature="") + make_item("200", signature="") + make_item("100", signature=""))
        result = validate(xml, now=FIXED_NOW)
        i006 = [d for d in result.diagnostics if d.id == "I006"]
        assert len(i006) == 1
        assert i006[0].message.endswith("(and 2 more similar issues)")

    def test_validate_document_takes_parse_diagnostics(self) -> None:
        parsed = parse_document('<rss version="2.0"><channel><x:y/></channel></rss>')
        result = validate_document(parsed.document, parsed.diagnostics, now=FIXED_NOW)
        assert ids(result)[0] == "E001"
        assert "E007" in ids(result)

    def test_no_root_runs_no_rules(self) -> None:
        parsed = parse_document("")
        assert run_rules(parsed.document, now=FIXED_NOW) == []

    def test_structure_runs_first(self) -> None:
        rules = build_rules(FIXED_NOW)
        assert rules[0].__name__ == "check_structure"
        assert len(rules) == 13
