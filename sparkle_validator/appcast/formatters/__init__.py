"""Output formats for validation results."""

from appcast.formatters.json import format_json
from appcast.formatters.text import format_text

__all__ = ["format_json", "format_text"]
