"""Parsed XML document tree."""

from __future__ import annotations

import weakref
from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class Attribute:
    """A single attribute, keyed on its element by qualified name."""

    name: str
    qname: str
    value: str
    namespace: str = ""
    prefix: str = ""


@dataclass
class Text:
    """A text fragment. CDATA sections end up here too."""

    text: str
    line: int = 0
    column: int = 0


@dataclass(eq=False)
class Element:
    """An element node with its position in the source.

    ``parent`` is a weak back-reference: the parent owns the child through
    ``children``, and the back-reference is only read to rebuild paths.
    """

    name: str
    qname: str
    namespace: str = ""
    prefix: str = ""
    attributes: dict[str, Attribute] = field(default_factory=dict)
    children: list[Node] = field(default_factory=list)
    line: int = 0
    column: int = 0
    _parent_ref: weakref.ReferenceType[Element] | None = field(
        default=None, repr=False
    )

    @property
    def parent(self) -> Element | None:
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    def append(self, node: Node) -> None:
        """Attach a child node. Only used while the tree is being built."""
        if isinstance(node, Element):
            node._parent_ref = weakref.ref(self)
        self.children.append(node)


Node = Union[Element, Text]


@dataclass
class Document:
    """Root of a parsed feed.

    ``root`` is None when the source could not be parsed at all.
    ``namespaces`` maps every declared prefix (``""`` for the default
    namespace) to its URI.
    """

    root: Element | None = None
    namespaces: dict[str, str] = field(default_factory=dict)
    source: str = ""
