"""Version identity rules."""

from __future__ import annotations

from datetime import datetime

from appcast.document.helpers import (
    channel_and_items,
    child_element,
    sparkle_attr,
    sparkle_child_element,
    text_content,
)
from appcast.document.models import Document, Element
from appcast.validator.constants import (
    ATTR_OS,
    ATTR_SHORT_VERSION_STRING,
    PUB_DATE,
    SPARKLE_CHANNEL,
    SPARKLE_SHORT_VERSION_STRING,
)
from appcast.validator.models import Diagnostic
from appcast.validator.rules.common import report
from appcast.validator.timestamps import parse_rfc2822_date
from appcast.validator.versions import (
    compare_versions,
    is_numeric_version,
    resolve_item_version,
)

_EMPTY_VERSION_FIX = "Set the version to a valid build number (e.g., 100 or 1.0.0)"


def check_versions(document: Document, sink: list[Diagnostic]) -> None:
    """E008, E029, W007, W008, W020, W027, W028, W041."""
    channel, items = channel_and_items(document)
    if channel is None:
        return

    by_key: dict[tuple[str, str, str], list[Element]] = {}
    dated: list[tuple[Element, str, datetime]] = []

    for item in items:
        resolved = resolve_item_version(item)
        enclosure = resolved.enclosure

        if resolved.element is not None and not (resolved.element_text or "").strip():
            report(
                sink,
                "E029",
                "<sparkle:version> element is empty or whitespace-only",
                resolved.element,
                fix=_EMPTY_VERSION_FIX,
            )
        if enclosure is not None and resolved.attribute is not None and not resolved.attribute.strip():
            report(
                sink,
                "E029",
                "sparkle:version attribute on enclosure is empty",
                enclosure,
                fix=_EMPTY_VERSION_FIX,
            )

        version = resolved.explicit
        if version is None:
            if resolved.declared_empty:
                # A blank declaration is unusable; the filename is not consulted.
                continue
            if resolved.deduced:
                report(
                    sink,
                    "W041",
                    f'Item has no sparkle:version but Sparkle may deduce "{resolved.deduced}" from filename',
                    item,
                    fix=(
                        f"Add <sparkle:version>{resolved.deduced}</sparkle:version> explicitly "
                        "instead of relying on filename parsing"
                    ),
                )
                version = resolved.deduced
            else:
                report(
                    sink,
                    "E008",
                    "Item is missing sparkle:version (neither element nor enclosure attribute, "
                    "and cannot be deduced from filename)",
                    item,
                    fix="Add a <sparkle:version> element or sparkle:version attribute on <enclosure>",
                )
                continue

        if not is_numeric_version(version):
            report(
                sink,
                "W027",
                f'Version "{version}" contains non-numeric characters; '
                "Sparkle's version comparison may fail",
                resolved.element or enclosure or item,
                fix="Use a purely numeric version (e.g., 100 or 1.0.0) for reliable comparisons",
            )

        pub_date_el = child_element(item, PUB_DATE)
        if pub_date_el is not None and is_numeric_version(version):
            parsed = parse_rfc2822_date(text_content(pub_date_el))
            if parsed is not None:
                dated.append((item, version, parsed))

        element_text = (resolved.element_text or "").strip()
        if element_text and resolved.attribute and element_text == resolved.attribute.strip():
            report(
                sink,
                "W007",
                f'Version "{version}" is declared both as a <sparkle:version> element and enclosure attribute',
                enclosure,
                fix="Remove the sparkle:version attribute from <enclosure>; the element is sufficient",
            )

        short_el = sparkle_child_element(item, SPARKLE_SHORT_VERSION_STRING)
        short_text = text_content(short_el).strip() if short_el is not None else ""
        short_attr = (
            sparkle_attr(enclosure, ATTR_SHORT_VERSION_STRING) if enclosure is not None else None
        )
        if short_text and short_attr and short_text == short_attr.strip():
            report(
                sink,
                "W008",
                f'shortVersionString "{short_text}" is declared both as element and enclosure attribute',
                enclosure,
                fix="Remove the sparkle:shortVersionString attribute from <enclosure>",
            )

        os_name = (sparkle_attr(enclosure, ATTR_OS) if enclosure is not None else None) or ""
        channel_el = sparkle_child_element(item, SPARKLE_CHANNEL)
        channel_name = text_content(channel_el).strip() if channel_el is not None else ""
        by_key.setdefault((version, os_name, channel_name), []).append(item)

    for (version, _os, _channel), dupes in by_key.items():
        for duplicate in dupes[1:]:
            report(
                sink,
                "W020",
                f'Duplicate version "{version}" found without differing os or channel',
                duplicate,
                fix="Ensure each version is unique per os/channel combination, or remove the duplicate item",
            )

    # Later pubDate with a lower version usually means a typo in one of them.
    ordered = sorted(dated, key=lambda entry: entry[2])
    for (_, prev_version, _), (item, version, _) in zip(ordered, ordered[1:]):
        if compare_versions(version, prev_version) < 0:
            report(
                sink,
                "W028",
                f'Version "{version}" is older than "{prev_version}" but has a newer pubDate',
                item,
                fix="Verify that the version and pubDate are correct; newer dates should have newer versions",
            )
