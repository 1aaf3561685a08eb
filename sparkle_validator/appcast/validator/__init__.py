"""Rule engine and diagnostics for appcast feeds."""

from appcast.validator.models import (
    Diagnostic,
    ValidationResult,
    ValidationSeverity,
)

__all__ = [
    "Diagnostic",
    "ValidationResult",
    "ValidationSeverity",
]
