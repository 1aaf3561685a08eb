"""Human-readable report with optional ANSI colours."""

from __future__ import annotations

from appcast.formatters.common import visible_diagnostics
from appcast.validator.models import Diagnostic, ValidationResult, ValidationSeverity
from appcast.validator.rules.common import plural

RESET = "\x1b[0m"
BOLD = "\x1b[1m"
DIM = "\x1b[2m"
RED = "\x1b[31m"
GREEN = "\x1b[32m"
YELLOW = "\x1b[33m"
BLUE = "\x1b[34m"
CYAN = "\x1b[36m"

_LABELS = {
    ValidationSeverity.error: ("ERROR", BOLD + RED),
    ValidationSeverity.warning: ("WARN ", BOLD + YELLOW),
    ValidationSeverity.info: ("INFO ", BOLD + BLUE),
}

_SECTIONS = (
    (ValidationSeverity.error, "Errors", BOLD + RED),
    (ValidationSeverity.warning, "Warnings", BOLD + YELLOW),
    (ValidationSeverity.info, "Info", BOLD + BLUE),
)

_INDENT = " " * 7


class _Painter:
    def __init__(self, color: bool) -> None:
        self.color = color

    def __call__(self, text: str, code: str) -> str:
        return f"{code}{text}{RESET}" if self.color else text


def _format_diagnostic(diagnostic: Diagnostic, paint: _Painter) -> str:
    label, code = _LABELS[diagnostic.severity]
    head = f"  {paint(label, code)} {paint(diagnostic.id, BOLD)}"
    if diagnostic.line:
        loc = f"{diagnostic.line}:{diagnostic.column}" if diagnostic.column else f"{diagnostic.line}"
        head += f" {paint(f'[line {loc}]', DIM)}"

    lines = [head, f"{_INDENT}{diagnostic.message}"]
    if diagnostic.path:
        lines.append(f"{_INDENT}{paint(f'at {diagnostic.path}', DIM)}")
    if diagnostic.fix:
        lines.append(f"{_INDENT}{paint(f'Fix: {diagnostic.fix}', CYAN)}")
    return "\n".join(lines)


def format_text(
    result: ValidationResult,
    source: str,
    *,
    color: bool = False,
    quiet: bool = False,
    no_info: bool = False,
) -> str:
    paint = _Painter(color)
    status = "VALID" if result.valid else "INVALID"
    status_code = BOLD + (GREEN if result.valid else RED)
    lines = ["", f"{paint(status, status_code)} {paint(source, DIM)}", ""]

    shown = visible_diagnostics(result, quiet=quiet, no_info=no_info)
    for severity, title, code in _SECTIONS:
        group = [d for d in shown if d.severity == severity]
        if not group:
            continue
        lines.append(paint(f"{title} ({len(group)})", code))
        lines.extend(_format_diagnostic(d, paint) for d in group)
        lines.append("")

    summary = [plural(result.error_count, "error"), plural(result.warning_count, "warning")]
    if not no_info:
        summary.append(f"{result.info_count} info")
    lines.append(paint(", ".join(summary), DIM))
    lines.append("")
    return "\n".join(lines)
