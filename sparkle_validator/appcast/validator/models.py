"""Validation data models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ValidationSeverity(str, Enum):
    """Severity level for diagnostics."""

    error = "error"
    warning = "warning"
    info = "info"


SEVERITY_ORDER = {
    ValidationSeverity.error: 0,
    ValidationSeverity.warning: 1,
    ValidationSeverity.info: 2,
}


class Diagnostic(BaseModel):
    """A single validation finding.

    ``id`` is stable across releases (``E0xx`` errors, ``W0xx`` warnings,
    ``I0xx`` informational). ``line`` and ``column`` are 1-based.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    severity: ValidationSeverity
    message: str
    line: int | None = None
    column: int | None = None
    path: str | None = None
    fix: str | None = None


class ValidationResult(BaseModel):
    """Consolidated, sorted outcome of one validation run."""

    valid: bool = True
    diagnostics: list[Diagnostic] = Field(default_factory=list)
    error_count: int = 0
    warning_count: int = 0
    info_count: int = 0
