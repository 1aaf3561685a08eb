"""Sparkle appcast validator."""

from appcast.document.parser import parse_document
from appcast.remote.verifier import RemoteVerifier, verify_remote
from appcast.validator.pipeline import merge_diagnostics, validate, validate_document

__version__ = "1.1.0"

__all__ = [
    "RemoteVerifier",
    "merge_diagnostics",
    "parse_document",
    "validate",
    "validate_document",
    "verify_remote",
]
