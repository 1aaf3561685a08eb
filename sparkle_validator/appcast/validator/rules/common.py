"""Helpers for building diagnostics inside rule modules."""

from __future__ import annotations

from typing import Callable

from appcast.document.helpers import element_path
from appcast.document.models import Document, Element
from appcast.validator.models import Diagnostic, ValidationSeverity

Rule = Callable[[Document, list[Diagnostic]], None]

_PREFIX_SEVERITY = {
    "E": ValidationSeverity.error,
    "W": ValidationSeverity.warning,
    "I": ValidationSeverity.info,
}


def severity_for(diagnostic_id: str) -> ValidationSeverity:
    """Severity implied by an id prefix (``E``/``W``/``I``)."""
    return _PREFIX_SEVERITY[diagnostic_id[0]]


def make_diagnostic(
    diagnostic_id: str,
    message: str,
    element: Element | None = None,
    fix: str | None = None,
    *,
    line: int | None = None,
    column: int | None = None,
) -> Diagnostic:
    """Build a diagnostic located at ``element`` (or at an explicit line)."""
    path = None
    if element is not None:
        line = element.line
        column = element.column
        path = element_path(element)
    return Diagnostic(
        id=diagnostic_id,
        severity=severity_for(diagnostic_id),
        message=message,
        line=line,
        column=column,
        path=path,
        fix=fix,
    )


def report(
    sink: list[Diagnostic],
    diagnostic_id: str,
    message: str,
    element: Element | None = None,
    fix: str | None = None,
    **location: int | None,
) -> None:
    sink.append(make_diagnostic(diagnostic_id, message, element, fix, **location))


def plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"
