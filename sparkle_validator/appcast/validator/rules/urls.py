"""URL syntax rules for enclosures, links and release notes."""

from __future__ import annotations

from urllib.parse import urlsplit

from appcast.document.helpers import (
    attr,
    channel_and_items,
    child_element,
    child_elements,
    sparkle_child_element,
    sparkle_child_elements,
    text_content,
)
from appcast.document.models import Document, Element
from appcast.validator.constants import (
    ALLOWED_URL_SCHEMES,
    ENCLOSURE,
    ENCLOSURE_URL,
    LINK,
    SPARKLE_DELTAS,
    SPARKLE_FULL_RELEASE_NOTES_LINK,
    SPARKLE_RELEASE_NOTES_LINK,
    UNENCODED_URL_CHARS_RE,
)
from appcast.validator.models import Diagnostic
from appcast.validator.rules.common import report


def is_valid_url(url: str) -> bool:
    """Absolute http(s) URL with a host."""
    try:
        parts = urlsplit(url)
        # Accessing .port validates the port component.
        parts.port
    except ValueError:
        return False
    return parts.scheme.lower() in ALLOWED_URL_SCHEMES and bool(parts.hostname)


def _check_url(
    url: str,
    error_id: str,
    context: str,
    element: Element,
    sink: list[Diagnostic],
) -> None:
    if not is_valid_url(url):
        report(
            sink,
            error_id,
            f'Invalid URL in {context}: "{url}"',
            element,
            fix="Use a valid absolute URL with https:// or http:// scheme",
        )
        return

    if UNENCODED_URL_CHARS_RE.search(url):
        report(
            sink,
            "W016",
            f'URL in {context} contains unencoded special characters: "{url}"',
            element,
            fix="Percent-encode special characters in the URL",
        )


def check_urls(document: Document, sink: list[Diagnostic]) -> None:
    """E014-E018 and W016."""
    channel, items = channel_and_items(document)
    if channel is None:
        return

    for item in items:
        enclosure = child_element(item, ENCLOSURE)
        if enclosure is not None:
            url = attr(enclosure, ENCLOSURE_URL)
            if url:
                _check_url(url, "E014", "enclosure url", enclosure, sink)

        link = child_element(item, LINK)
        if link is not None:
            url = text_content(link).strip()
            if url:
                _check_url(url, "E015", "item <link>", link, sink)

        for notes in sparkle_child_elements(item, SPARKLE_RELEASE_NOTES_LINK):
            url = text_content(notes).strip()
            if url:
                _check_url(url, "E016", "sparkle:releaseNotesLink", notes, sink)

        for notes in sparkle_child_elements(item, SPARKLE_FULL_RELEASE_NOTES_LINK):
            url = text_content(notes).strip()
            if url:
                _check_url(url, "E017", "sparkle:fullReleaseNotesLink", notes, sink)

        deltas = sparkle_child_element(item, SPARKLE_DELTAS)
        if deltas is not None:
            for delta in child_elements(deltas, ENCLOSURE):
                url = attr(delta, ENCLOSURE_URL)
                if url:
                    _check_url(url, "E018", "delta enclosure url", delta, sink)

    channel_link = child_element(channel, LINK)
    if channel_link is not None:
        url = text_content(channel_link).strip()
        if url:
            _check_url(url, "E015", "channel <link>", channel_link, sink)
