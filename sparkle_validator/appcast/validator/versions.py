"""Version parsing and comparison shared by several rules."""

from __future__ import annotations

import re
from dataclasses import dataclass

from appcast.document.helpers import (
    attr,
    child_element,
    sparkle_attr,
    sparkle_child_element,
    text_content,
)
from appcast.document.models import Element
from appcast.validator.constants import (
    ATTR_VERSION,
    ENCLOSURE,
    ENCLOSURE_URL,
    NUMERIC_VERSION_RE,
    SPARKLE_VERSION,
)

_DIGIT_RE = re.compile(r"\d")


def is_numeric_version(version: str) -> bool:
    """True for ``100``, ``1.0.1``, ``2023.1``; False for ``1.0-beta``, ``v2``."""
    return bool(NUMERIC_VERSION_RE.match(version))


def compare_versions(a: str, b: str) -> int:
    """Compare dot-separated numeric versions; negative, zero or positive.

    Non-numeric components count as 0 and missing components as 0, so
    ``1.0`` equals ``1.0.0``.
    """
    a_parts = [int(p) if p.isdigit() else 0 for p in a.split(".")]
    b_parts = [int(p) if p.isdigit() else 0 for p in b.split(".")]
    length = max(len(a_parts), len(b_parts))
    a_parts += [0] * (length - len(a_parts))
    b_parts += [0] * (length - len(b_parts))
    for x, y in zip(a_parts, b_parts):
        if x != y:
            return -1 if x < y else 1
    return 0


def version_from_url(url: str) -> str | None:
    """Best-effort version Sparkle may deduce from a download filename.

    Sparkle splits the URL on underscores, takes the last piece and drops the
    extension: ``MyApp_1.5.zip`` gives ``1.5``. Only results with a digit are
    accepted. This mirrors undocumented client behaviour and is not
    authoritative.
    """
    components = url.split("_")
    if len(components) < 2:
        return None
    last = components[-1]
    dot = last.rfind(".")
    candidate = last if dot == -1 else last[:dot]
    if not candidate or not _DIGIT_RE.search(candidate):
        return None
    return candidate


@dataclass(frozen=True)
class ItemVersion:
    """Where an item's version came from.

    ``element_text`` / ``attribute`` are None when not declared and may be
    empty strings when declared blank.
    """

    element: Element | None
    element_text: str | None
    enclosure: Element | None
    attribute: str | None
    deduced: str | None

    @property
    def declared_empty(self) -> bool:
        return (self.element_text is not None and not self.element_text.strip()) or (
            self.attribute is not None and not self.attribute.strip()
        )

    @property
    def explicit(self) -> str | None:
        if self.element_text and self.element_text.strip():
            return self.element_text.strip()
        if self.attribute and self.attribute.strip():
            return self.attribute.strip()
        return None

    @property
    def effective(self) -> str | None:
        """Explicit version first, then the filename deduction."""
        return self.explicit or self.deduced


def resolve_item_version(item: Element) -> ItemVersion:
    version_el = sparkle_child_element(item, SPARKLE_VERSION)
    enclosure = child_element(item, ENCLOSURE)
    attribute = sparkle_attr(enclosure, ATTR_VERSION) if enclosure is not None else None
    url = attr(enclosure, ENCLOSURE_URL) if enclosure is not None else None
    return ItemVersion(
        element=version_el,
        element_text=text_content(version_el) if version_el is not None else None,
        enclosure=enclosure,
        attribute=attribute,
        deduced=version_from_url(url) if url else None,
    )
