"""JSON report, camelCase keys for compatibility with other tooling."""

from __future__ import annotations

import json
from typing import Any

from appcast.formatters.common import visible_diagnostics
from appcast.validator.models import Diagnostic, ValidationResult


def _diagnostic_dict(diagnostic: Diagnostic) -> dict[str, Any]:
    return diagnostic.model_dump(mode="json", exclude_none=True)


def format_json(
    result: ValidationResult,
    source: str,
    *,
    quiet: bool = False,
    no_info: bool = False,
) -> str:
    output = {
        "valid": result.valid,
        "source": source,
        "errorCount": result.error_count,
        "warningCount": result.warning_count,
        "infoCount": result.info_count,
        "diagnostics": [
            _diagnostic_dict(d)
            for d in visible_diagnostics(result, quiet=quiet, no_info=no_info)
        ],
    }
    return json.dumps(output, indent=2, ensure_ascii=False)
