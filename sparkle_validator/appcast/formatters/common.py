from __future__ import annotations

from appcast.validator.models import Diagnostic, ValidationResult, ValidationSeverity


def visible_diagnostics(
    result: ValidationResult,
    *,
    quiet: bool = False,
    no_info: bool = False,
) -> list[Diagnostic]:
    """``quiet`` keeps errors only; ``no_info`` drops informational entries."""
    if quiet:
        return [d for d in result.diagnostics if d.severity == ValidationSeverity.error]
    if no_info:
        return [d for d in result.diagnostics if d.severity != ValidationSeverity.info]
    return list(result.diagnostics)
