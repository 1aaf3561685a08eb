"""Collect the URLs a remote check should probe."""

from __future__ import annotations

from urllib.parse import urlsplit

from appcast.document.helpers import (
    attr,
    channel_and_items,
    child_element,
    child_elements,
    sparkle_attr,
    sparkle_child_element,
    sparkle_child_elements,
    text_content,
)
from appcast.document.models import Document, Element
from appcast.remote.models import UrlTarget
from appcast.validator.constants import (
    ALLOWED_URL_SCHEMES,
    ENCLOSURE,
    ENCLOSURE_LENGTH,
    ENCLOSURE_URL,
    NON_NEGATIVE_INT_RE,
    SPARKLE_DELTAS,
    SPARKLE_FULL_RELEASE_NOTES_LINK,
    SPARKLE_RELEASE_NOTES_LINK,
)


def _declared_length(value: str | None) -> int | None:
    """Declared size in bytes; absent, malformed and zero sizes count as undeclared."""
    if value is None or not NON_NEGATIVE_INT_RE.match(value.strip()):
        return None
    return int(value) or None


def _is_http_url(url: str) -> bool:
    try:
        return urlsplit(url).scheme.lower() in ALLOWED_URL_SCHEMES
    except ValueError:
        return False


def _enclosure_target(enclosure: Element) -> UrlTarget | None:
    url = (attr(enclosure, ENCLOSURE_URL) or "").strip()
    if not url or not _is_http_url(url):
        return None
    return UrlTarget(url, _declared_length(attr(enclosure, ENCLOSURE_LENGTH)), enclosure)


def extract_targets(document: Document) -> list[UrlTarget]:
    """Main enclosures and deltas for every item, then every release notes link."""
    channel, items = channel_and_items(document)
    if channel is None:
        return []

    targets: list[UrlTarget] = []
    for item in items:
        enclosure = child_element(item, ENCLOSURE)
        if enclosure is not None:
            target = _enclosure_target(enclosure)
            if target is not None:
                targets.append(target)

        deltas = sparkle_child_element(item, SPARKLE_DELTAS)
        if deltas is not None:
            for delta in child_elements(deltas, ENCLOSURE):
                target = _enclosure_target(delta)
                if target is not None:
                    targets.append(target)

    for item in items:
        links = sparkle_child_elements(item, SPARKLE_RELEASE_NOTES_LINK)
        links += sparkle_child_elements(item, SPARKLE_FULL_RELEASE_NOTES_LINK)
        for link in links:
            url = text_content(link).strip()
            if url and _is_http_url(url):
                targets.append(
                    UrlTarget(url, _declared_length(sparkle_attr(link, ENCLOSURE_LENGTH)), link)
                )
    return targets
