"""Tree lookups shared by the rules and the remote verifier."""

from __future__ import annotations

from appcast.document.models import Document, Element, Text
from appcast.validator.constants import (
    CHANNEL,
    ITEM,
    RSS_ROOT,
    SPARKLE_PREFIX,
    XML_NS,
    is_sparkle_namespace,
)


def child_elements(parent: Element, local_name: str) -> list[Element]:
    """Direct children with the given local name and no namespace."""
    return [
        c
        for c in parent.children
        if isinstance(c, Element) and c.name == local_name and not c.namespace
    ]


def child_element(parent: Element, local_name: str) -> Element | None:
    found = child_elements(parent, local_name)
    return found[0] if found else None


def sparkle_child_elements(parent: Element, local_name: str) -> list[Element]:
    """Direct children with the given local name in a Sparkle namespace."""
    return [
        c
        for c in parent.children
        if isinstance(c, Element)
        and c.name == local_name
        and is_sparkle_namespace(c.namespace)
    ]


def sparkle_child_element(parent: Element, local_name: str) -> Element | None:
    found = sparkle_child_elements(parent, local_name)
    return found[0] if found else None


def text_content(element: Element) -> str:
    """Concatenate the element's direct text children."""
    return "".join(c.text for c in element.children if isinstance(c, Text))


def attr(element: Element, qname: str) -> str | None:
    """Attribute value by qualified name, or None."""
    found = element.attributes.get(qname)
    return found.value if found is not None else None


def sparkle_attr(element: Element, local_name: str) -> str | None:
    """Attribute in the Sparkle namespace, falling back to the ``sparkle:`` prefix."""
    for attribute in element.attributes.values():
        if attribute.name == local_name and is_sparkle_namespace(attribute.namespace):
            return attribute.value
    return attr(element, f"{SPARKLE_PREFIX}:{local_name}")


def xml_lang(element: Element) -> str | None:
    """The element's own ``xml:lang`` value, if any."""
    for attribute in element.attributes.values():
        if attribute.name == "lang" and attribute.namespace == XML_NS:
            return attribute.value
    return attr(element, "xml:lang")


def element_path(element: Element) -> str:
    """Human-readable path such as ``rss > channel > item[2] > enclosure``.

    Sparkle elements are labelled with the ``sparkle:`` prefix whatever prefix
    the document used. An index is added only when same-named siblings exist.
    """
    parts: list[str] = []
    current: Element | None = element
    while current is not None:
        if is_sparkle_namespace(current.namespace):
            label = f"{SPARKLE_PREFIX}:{current.name}"
        else:
            label = current.name
        parent = current.parent
        if parent is not None:
            siblings = [
                c
                for c in parent.children
                if isinstance(c, Element)
                and c.name == current.name
                and c.namespace == current.namespace
            ]
            if len(siblings) > 1:
                index = next(i for i, s in enumerate(siblings) if s is current)
                label += f"[{index + 1}]"
        parts.append(label)
        current = parent
    return " > ".join(reversed(parts))


def get_channel(document: Document) -> Element | None:
    """The first ``<channel>`` of an ``<rss>`` root, or None."""
    root = document.root
    if root is None or root.name != RSS_ROOT:
        return None
    return child_element(root, CHANNEL)


def get_items(channel: Element) -> list[Element]:
    return child_elements(channel, ITEM)


def channel_and_items(document: Document) -> tuple[Element | None, list[Element]]:
    """Channel and its items; ``(None, [])`` when the structure is missing."""
    channel = get_channel(document)
    if channel is None:
        return None, []
    return channel, get_items(channel)
