"""Validation pipeline: parse, run the rules, consolidate and sort."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime

from appcast.document.models import Document
from appcast.document.parser import parse_document
from appcast.validator.models import (
    SEVERITY_ORDER,
    Diagnostic,
    ValidationResult,
    ValidationSeverity,
)
from appcast.validator.rules import build_rules, halts_pipeline

logger = logging.getLogger(__name__)


def run_rules(document: Document, *, now: datetime | None = None) -> list[Diagnostic]:
    """Run every rule against a parsed document, in order.

    The structure rule runs first. If it finds no usable ``<rss>``, channel or
    item, nothing else runs.
    """
    sink: list[Diagnostic] = []
    if document.root is None:
        return sink

    rules = build_rules(now)
    structure, rest = rules[0], rules[1:]
    structure(document, sink)
    if halts_pipeline(sink):
        logger.debug("Structural errors found, skipping %d rule(s)", len(rest))
        return sink

    for rule in rest:
        rule(document, sink)
    return sink


def consolidate_diagnostics(diagnostics: Iterable[Diagnostic]) -> list[Diagnostic]:
    """Collapse repeated ids into one entry per id.

    Groups keep the order in which their id was first seen. The first member
    of each group survives with a count appended to its message.
    """
    groups: dict[str, list[Diagnostic]] = {}
    for diagnostic in diagnostics:
        groups.setdefault(diagnostic.id, []).append(diagnostic)

    consolidated: list[Diagnostic] = []
    for group in groups.values():
        first = group[0]
        if len(group) > 1:
            more = len(group) - 1
            suffix = "issue" if more == 1 else "issues"
            first = first.model_copy(
                update={"message": f"{first.message} (and {more} more similar {suffix})"}
            )
        consolidated.append(first)
    return consolidated


def assemble_result(diagnostics: Iterable[Diagnostic]) -> ValidationResult:
    """Sort by severity then line and compute counts from the sorted list."""
    ordered = sorted(
        diagnostics,
        key=lambda d: (SEVERITY_ORDER[d.severity], d.line or 0),
    )
    errors = sum(1 for d in ordered if d.severity == ValidationSeverity.error)
    warnings = sum(1 for d in ordered if d.severity == ValidationSeverity.warning)
    infos = sum(1 for d in ordered if d.severity == ValidationSeverity.info)
    return ValidationResult(
        valid=errors == 0,
        diagnostics=ordered,
        error_count=errors,
        warning_count=warnings,
        info_count=infos,
    )


def merge_diagnostics(result: ValidationResult, extra: Iterable[Diagnostic]) -> ValidationResult:
    """Add diagnostics (e.g. from remote checks) to an existing result.

    The added diagnostics are not consolidated.
    """
    return assemble_result([*result.diagnostics, *extra])


def validate_document(
    document: Document,
    parse_diagnostics: Iterable[Diagnostic] = (),
    *,
    now: datetime | None = None,
) -> ValidationResult:
    """Validate an already-parsed document."""
    diagnostics = list(parse_diagnostics)
    diagnostics.extend(run_rules(document, now=now))
    return assemble_result(consolidate_diagnostics(diagnostics))


def validate(xml: str, *, now: datetime | None = None) -> ValidationResult:
    """Run the full validation pipeline on an appcast string.

    Order: 1. Parse -> 2. Structure -> 3. Content rules -> 4. Consolidate/sort.
    If parsing yields no root element, only the parse errors are returned.
    """
    parsed = parse_document(xml)
    result = validate_document(parsed.document, parsed.diagnostics, now=now)
    logger.debug(
        "Validated appcast: %d error(s), %d warning(s), %d info",
        result.error_count,
        result.warning_count,
        result.info_count,
    )
    return result
