"""Enclosure descriptor and delta update rules."""

from __future__ import annotations

from appcast.document.helpers import (
    attr,
    channel_and_items,
    child_element,
    child_elements,
    sparkle_attr,
    sparkle_child_element,
    text_content,
)
from appcast.document.models import Document, Element
from appcast.validator.constants import (
    ATTR_DELTA_FROM,
    ATTR_INSTALLATION_TYPE,
    ENCLOSURE,
    ENCLOSURE_LENGTH,
    ENCLOSURE_MIME_TYPE,
    ENCLOSURE_TYPE,
    ENCLOSURE_URL,
    LINK,
    NON_NEGATIVE_INT_RE,
    SPARKLE_DELTAS,
    SPARKLE_INFORMATIONAL_UPDATE,
    SPARKLE_INSTALLATION_TYPE,
    VALID_INSTALLATION_TYPES,
)
from appcast.validator.models import Diagnostic
from appcast.validator.rules.common import report
from appcast.validator.versions import resolve_item_version

_INSTALLATION_TYPE_FIX = 'Set installationType to "application" or "package"'


def _check_descriptor(enclosure: Element, sink: list[Diagnostic], *, delta: bool) -> None:
    """Attribute checks shared by main and delta enclosures."""
    url = attr(enclosure, ENCLOSURE_URL)
    length = attr(enclosure, ENCLOSURE_LENGTH)
    mime_type = attr(enclosure, ENCLOSURE_TYPE)

    if not url:
        if delta:
            report(
                sink,
                "E025",
                "Delta <enclosure> is missing the url attribute",
                enclosure,
                fix="Add a url attribute pointing to the delta update file",
            )
        else:
            report(
                sink,
                "E010",
                "<enclosure> is missing the url attribute",
                enclosure,
                fix="Add a url attribute to the <enclosure> element",
            )

    if length is None:
        report(
            sink,
            "W029",
            "<enclosure> is missing the length attribute; the download size cannot be checked",
            enclosure,
            fix="Add a length attribute with the file size in bytes",
        )
    elif not NON_NEGATIVE_INT_RE.match(length):
        report(
            sink,
            "E013",
            f'Enclosure length "{length}" is not a valid non-negative integer',
            enclosure,
            fix="Set length to the file size in bytes (a non-negative integer)",
        )
    elif int(length) == 0:
        report(
            sink,
            "W019",
            "Enclosure length is 0; this is usually a mistake",
            enclosure,
            fix="Set length to the actual file size in bytes",
        )

    if not mime_type:
        report(
            sink,
            "W030",
            "<enclosure> is missing the type attribute",
            enclosure,
            fix=f'Add type="{ENCLOSURE_MIME_TYPE}" to the <enclosure> element',
        )
    elif mime_type != ENCLOSURE_MIME_TYPE:
        report(
            sink,
            "W010",
            f'Enclosure type is "{mime_type}", expected "{ENCLOSURE_MIME_TYPE}"',
            enclosure,
            fix=f'Change type to "{ENCLOSURE_MIME_TYPE}"',
        )


def _check_deltas(
    deltas: Element,
    known_versions: set[str],
    sink: list[Diagnostic],
) -> None:
    delta_enclosures = child_elements(deltas, ENCLOSURE)
    if not delta_enclosures:
        report(
            sink,
            "E023",
            "<sparkle:deltas> element has no <enclosure> children",
            deltas,
            fix="Add <enclosure> elements inside <sparkle:deltas> for each delta update",
        )
        return

    # Deltas are keyed by source version only.
    seen: set[str] = set()
    for delta in delta_enclosures:
        delta_from = (sparkle_attr(delta, ATTR_DELTA_FROM) or "").strip()
        if not delta_from:
            report(
                sink,
                "E024",
                "Delta <enclosure> is missing sparkle:deltaFrom attribute",
                delta,
                fix='Add sparkle:deltaFrom="<previousVersion>" to the delta enclosure',
            )
        else:
            if delta_from in seen:
                report(
                    sink,
                    "W033",
                    f'Duplicate delta update from version "{delta_from}"',
                    delta,
                    fix="Keep a single delta enclosure per sparkle:deltaFrom version",
                )
            seen.add(delta_from)
            if delta_from not in known_versions:
                report(
                    sink,
                    "I007",
                    f'Delta update from version "{delta_from}" refers to a version '
                    "that is not listed in this feed",
                    delta,
                )
        _check_descriptor(delta, sink, delta=True)


def check_enclosures(document: Document, sink: list[Diagnostic]) -> None:
    """E009, E010, E013, E022, E023-E025, W010, W019, W029, W030, W033, I007."""
    channel, items = channel_and_items(document)
    if channel is None:
        return

    known_versions = {
        v for v in (resolve_item_version(item).effective for item in items) if v
    }

    for item in items:
        enclosure = child_element(item, ENCLOSURE)
        link = child_element(item, LINK)
        informational = sparkle_child_element(item, SPARKLE_INFORMATIONAL_UPDATE)

        if enclosure is None and link is None and informational is None:
            report(
                sink,
                "E009",
                "Item has neither <enclosure> with url nor <link>",
                item,
                fix='Add an <enclosure url="..." length="..." type="..."/> or <link> element',
            )
            continue

        if enclosure is not None:
            _check_descriptor(enclosure, sink, delta=False)
            install_type = sparkle_attr(enclosure, ATTR_INSTALLATION_TYPE)
            if install_type and install_type not in VALID_INSTALLATION_TYPES:
                report(
                    sink,
                    "E022",
                    f'Invalid sparkle:installationType "{install_type}" on enclosure; '
                    'must be "application" or "package"',
                    enclosure,
                    fix=_INSTALLATION_TYPE_FIX,
                )

        install_el = sparkle_child_element(item, SPARKLE_INSTALLATION_TYPE)
        if install_el is not None:
            value = text_content(install_el).strip()
            if value not in VALID_INSTALLATION_TYPES:
                report(
                    sink,
                    "E022",
                    f'Invalid sparkle:installationType "{value}"; must be "application" or "package"',
                    install_el,
                    fix=_INSTALLATION_TYPE_FIX,
                )

        deltas = sparkle_child_element(item, SPARKLE_DELTAS)
        if deltas is not None:
            _check_deltas(deltas, known_versions, sink)
