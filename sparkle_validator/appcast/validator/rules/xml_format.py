"""Rules that look at the raw document text rather than the tree."""

from __future__ import annotations

import re

from appcast.document.models import Document
from appcast.validator.constants import SPARKLE_PREFIX, is_sparkle_namespace
from appcast.validator.models import Diagnostic
from appcast.validator.rules.common import report

_XML_DECLARATION_RE = re.compile(r"^\ufeff?<\?xml\s+([^?]*)\?>", re.IGNORECASE)
_ENCODING_RE = re.compile(r"\bencoding\s*=")

# (pattern template, message, fix); {p} is an escaped Sparkle prefix.
_CDATA_TEMPLATES = (
    (
        r"<{p}:version\b[^>]*>\s*<!\[CDATA\[",
        "CDATA section used in <sparkle:version>; this may cause parsing issues",
        "Use plain text content instead of CDATA for version elements",
    ),
    (
        r"(?<![\w.-]){p}:version\s*=\s*[\"']\s*<!\[CDATA\[",
        "CDATA section used in sparkle:version attribute; this may cause parsing issues",
        "Use plain text value instead of CDATA for version attributes",
    ),
    (
        r"(?<![\w.-]){p}:(?:ed|dsa)Signature\s*=\s*[\"']\s*<!\[CDATA\[",
        "CDATA section used in signature attribute; this may cause parsing issues",
        "Use plain base64 value instead of CDATA for signature attributes",
    ),
)


def _line_at(source: str, offset: int) -> int:
    return source.count("\n", 0, offset) + 1


def _sparkle_prefixes(document: Document) -> list[str]:
    """Prefixes bound to a Sparkle namespace; ``sparkle`` when none are."""
    prefixes = sorted(
        prefix
        for prefix, uri in document.namespaces.items()
        if prefix and is_sparkle_namespace(uri)
    )
    return prefixes or [SPARKLE_PREFIX]


def check_xml_format(document: Document, sink: list[Diagnostic]) -> None:
    """W038, W039."""
    source = document.source

    declaration = _XML_DECLARATION_RE.match(source)
    if declaration and not _ENCODING_RE.search(declaration.group(1)):
        report(
            sink,
            "W039",
            'XML declaration is missing encoding attribute; recommend adding encoding="UTF-8"',
            fix='<?xml version="1.0" encoding="UTF-8"?>',
            line=1,
            column=1,
        )

    if document.root is None:
        return

    prefix_group = "(?:" + "|".join(re.escape(p) for p in _sparkle_prefixes(document)) + ")"
    for template, message, fix in _CDATA_TEMPLATES:
        pattern = re.compile(template.format(p=prefix_group), re.IGNORECASE)
        for match in pattern.finditer(source):
            report(
                sink,
                "W038",
                message,
                fix=fix,
                line=_line_at(source, match.start()),
                column=1,
            )
