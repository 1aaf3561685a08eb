"""XML parsing into a position-annotated Document tree using expat."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from xml.parsers import expat

from appcast.document.models import Attribute, Document, Element, Text
from appcast.validator.constants import XML_NS, XMLNS_NS
from appcast.validator.models import Diagnostic, ValidationSeverity

logger = logging.getLogger(__name__)


@dataclass
class ParseResult:
    """Document plus any parse-level diagnostics (always E001)."""

    document: Document
    diagnostics: list[Diagnostic] = field(default_factory=list)


class _EntityDeclared(Exception):
    """Raised from the expat callback to stop on an entity declaration."""


def _parse_error(message: str, line: int | None, column: int | None) -> Diagnostic:
    return Diagnostic(
        id="E001",
        severity=ValidationSeverity.error,
        message=message,
        line=line,
        column=column,
    )


def _split_qname(qname: str) -> tuple[str, str]:
    prefix, sep, local = qname.partition(":")
    if not sep:
        return "", qname
    return prefix, local


class _TreeBuilder:
    """Expat callbacks that build the tree and resolve namespaces.

    Namespaces are resolved here rather than by expat so that qualified names
    and prefixes survive alongside the URIs.
    """

    def __init__(self, parser: expat.XMLParserType) -> None:
        self._parser = parser
        self._stack: list[Element] = []
        self._scopes: list[dict[str, str]] = [{"xml": XML_NS}]
        self._in_cdata = False
        self.root: Element | None = None
        self.namespaces: dict[str, str] = {}
        self.diagnostics: list[Diagnostic] = []

    def _position(self) -> tuple[int, int]:
        return self._parser.CurrentLineNumber, self._parser.CurrentColumnNumber + 1

    def start(self, qname: str, raw_attrs: dict[str, str]) -> None:
        line, column = self._position()
        scope = dict(self._scopes[-1])
        for key, value in raw_attrs.items():
            if key == "xmlns":
                scope[""] = value
                if value:
                    self.namespaces[""] = value
            elif key.startswith("xmlns:"):
                prefix = key[len("xmlns:"):]
                scope[prefix] = value
                if value:
                    self.namespaces[prefix] = value
        self._scopes.append(scope)

        prefix, local = _split_qname(qname)
        if prefix and prefix not in scope:
            self.diagnostics.append(
                _parse_error(
                    f'Not well-formed XML: unbound namespace prefix "{prefix}"',
                    line,
                    column,
                )
            )
        namespace = scope.get(prefix, "")

        attributes: dict[str, Attribute] = {}
        for key, value in raw_attrs.items():
            a_prefix, a_local = _split_qname(key)
            if key == "xmlns" or a_prefix == "xmlns":
                a_namespace = XMLNS_NS
            elif a_prefix:
                a_namespace = scope.get(a_prefix, "")
            else:
                # Unprefixed attributes are never in a namespace.
                a_namespace = ""
            attributes[key] = Attribute(
                name=a_local,
                qname=key,
                value=value,
                namespace=a_namespace,
                prefix=a_prefix,
            )

        element = Element(
            name=local,
            qname=qname,
            namespace=namespace,
            prefix=prefix,
            attributes=attributes,
            line=line,
            column=column,
        )
        if self._stack:
            self._stack[-1].append(element)
        elif self.root is None:
            self.root = element
        self._stack.append(element)

    def end(self, qname: str) -> None:
        self._stack.pop()
        self._scopes.pop()

    def data(self, text: str) -> None:
        if not self._stack:
            return
        if not self._in_cdata and not text.strip():
            return
        line, column = self._position()
        self._stack[-1].append(Text(text=text, line=line, column=column))

    def start_cdata(self) -> None:
        self._in_cdata = True

    def end_cdata(self) -> None:
        self._in_cdata = False

    def entity_decl(self, name, *args) -> None:
        raise _EntityDeclared(name)


def parse_document(xml: str) -> ParseResult:
    """Parse an appcast string.

    Never raises for bad input: syntax problems become E001 diagnostics and,
    when no root element could be opened, the returned document has no root.
    """
    if not xml or not xml.strip():
        return ParseResult(
            document=Document(source=xml or ""),
            diagnostics=[_parse_error("Empty document", None, None)],
        )

    parser = expat.ParserCreate()
    parser.buffer_text = True
    parser.SetParamEntityParsing(expat.XML_PARAM_ENTITY_PARSING_NEVER)
    builder = _TreeBuilder(parser)
    parser.StartElementHandler = builder.start
    parser.EndElementHandler = builder.end
    parser.CharacterDataHandler = builder.data
    parser.StartCdataSectionHandler = builder.start_cdata
    parser.EndCdataSectionHandler = builder.end_cdata
    parser.EntityDeclHandler = builder.entity_decl

    try:
        parser.Parse(xml, True)
    except expat.ExpatError as e:
        reason = expat.errors.messages.get(e.code, str(e))
        builder.diagnostics.append(
            _parse_error(
                f"Not well-formed XML: {reason}",
                e.lineno,
                (e.offset or 0) + 1,
            )
        )
    except _EntityDeclared as e:
        builder.diagnostics.append(
            _parse_error(
                f'Not well-formed XML: entity declarations are not allowed ("{e}")',
                parser.CurrentLineNumber,
                parser.CurrentColumnNumber + 1,
            )
        )

    if builder.diagnostics:
        logger.debug("Parser reported %d issue(s)", len(builder.diagnostics))

    return ParseResult(
        document=Document(
            root=builder.root,
            namespaces=builder.namespaces,
            source=xml,
        ),
        diagnostics=builder.diagnostics,
    )
