"""Release notes presence and localization rules."""

from __future__ import annotations

from appcast.document.helpers import (
    channel_and_items,
    child_element,
    sparkle_child_elements,
    text_content,
    xml_lang,
)
from appcast.document.models import Document, Element
from appcast.validator.constants import (
    DESCRIPTION,
    LANGUAGE,
    SPARKLE_FULL_RELEASE_NOTES_LINK,
    SPARKLE_RELEASE_NOTES_LINK,
)
from appcast.validator.models import Diagnostic
from appcast.validator.rules.common import report


def _has_text(element: Element | None) -> bool:
    return element is not None and bool(text_content(element).strip())


def _primary_language(tag: str) -> str:
    """``en-US`` -> ``en``."""
    return tag.strip().lower().replace("_", "-").split("-", 1)[0]


def _check_localized_links(
    links: list[Element],
    channel_language: str | None,
    sink: list[Diagnostic],
) -> None:
    if len(links) < 2:
        return

    languages: dict[str, Element] = {}
    untagged = False
    for link in links:
        lang = xml_lang(link)
        if not lang or not lang.strip():
            untagged = True
            continue
        key = lang.strip().lower()
        if key in languages:
            report(
                sink,
                "W035",
                f'Multiple sparkle:releaseNotesLink elements share xml:lang="{lang.strip()}"',
                link,
                fix="Give each localized release notes link a distinct xml:lang",
            )
        languages.setdefault(key, link)

    if untagged:
        report(
            sink,
            "W034",
            "Item has several sparkle:releaseNotesLink elements but not all carry xml:lang; "
            "Sparkle cannot tell which one to show",
            links[0],
            fix='Add xml:lang="…" to every localized sparkle:releaseNotesLink',
        )

    if channel_language and languages:
        wanted = _primary_language(channel_language)
        if wanted not in {_primary_language(lang) for lang in languages}:
            report(
                sink,
                "I008",
                f'None of the localized release notes match the channel language "{channel_language}"',
                links[0],
            )


def check_release_notes(document: Document, sink: list[Diagnostic]) -> None:
    """W009, W034, W035, I008."""
    channel, items = channel_and_items(document)
    if channel is None:
        return

    language_el = child_element(channel, LANGUAGE)
    channel_language = text_content(language_el).strip() if language_el is not None else None

    for item in items:
        notes_links = sparkle_child_elements(item, SPARKLE_RELEASE_NOTES_LINK)
        full_links = sparkle_child_elements(item, SPARKLE_FULL_RELEASE_NOTES_LINK)

        has_notes = (
            _has_text(child_element(item, DESCRIPTION))
            or any(_has_text(link) for link in notes_links)
            or any(_has_text(link) for link in full_links)
        )
        if not has_notes:
            report(
                sink,
                "W009",
                "Item has no release notes (no <description>, <sparkle:releaseNotesLink>, "
                "or <sparkle:fullReleaseNotesLink>)",
                item,
                fix="Add a <description> with HTML release notes or a <sparkle:releaseNotesLink> URL",
            )

        _check_localized_links(notes_links, channel_language, sink)
