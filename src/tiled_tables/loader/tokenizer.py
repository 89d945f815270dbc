# src/tiled_tables/loader/tokenizer.py

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, Union

from tiled_tables.core.exceptions import TmxSyntaxError

# Characters handed to the pull parser per feed() call.
FEED_SIZE = 64 * 1024


class EventKind(str, Enum):
    START = "start"
    END = "end"
    TEXT = "text"
    EOF = "eof"


@dataclass(frozen=True)
class XmlEvent:
    """
    A single XML event.

    Attributes:
        kind: START, END, TEXT or EOF.
        name: Element name for START / END / TEXT (empty for EOF).
        attrs: Attributes of a START event (empty otherwise).
        text: Character data of a TEXT event (empty otherwise).
        depth: Nesting depth of the element (root element = 1).

    Self-closing elements (``<point/>``) produce a START immediately followed
    by an END, so consumers never need a separate "empty" case.
    """

    kind: EventKind
    name: str = ""
    attrs: Dict[str, str] = field(default_factory=dict)
    text: str = ""
    depth: int = 0


def _syntax_error(exc: ET.ParseError) -> TmxSyntaxError:
    lineno = None
    position = getattr(exc, "position", None)
    if position:
        lineno = position[0]
    return TmxSyntaxError(f"XML parse error: {exc}", lineno=lineno)


def _strip_namespace(tag: str) -> str:
    """``{ns}map`` -> ``map``; TMX does not use namespaces but some tools add one."""
    if tag.startswith("{"):
        return tag.split("}", 1)[1]
    return tag


def tokenize(source: Union[str, bytes]) -> Iterator[XmlEvent]:
    """
    Yield XmlEvents for a TMX document, ending with exactly one EOF event.

    The document is fed to ``xml.etree.ElementTree.XMLPullParser`` in slices
    and finished elements are cleared as soon as their END event has been
    produced, so memory stays bounded by the parser window.

    Text is reported once per element, right before its END event, and only
    when it contains non-whitespace characters.

    Raises:
        TmxSyntaxError: for malformed XML (unbalanced tags, bad tokens,
            undecodable bytes, missing root element).
    """
    parser = ET.XMLPullParser(events=("start", "end"))
    depth = 0

    def drain() -> Iterator[XmlEvent]:
        nonlocal depth
        for event, elem in parser.read_events():
            name = _strip_namespace(elem.tag)
            if event == "start":
                depth += 1
                yield XmlEvent(EventKind.START, name=name, attrs=dict(elem.attrib), depth=depth)
                continue

            text = elem.text
            if text and text.strip():
                yield XmlEvent(EventKind.TEXT, name=name, text=text, depth=depth)
            yield XmlEvent(EventKind.END, name=name, depth=depth)
            depth -= 1
            elem.clear()

    try:
        for offset in range(0, len(source), FEED_SIZE):
            parser.feed(source[offset : offset + FEED_SIZE])
            yield from drain()
        parser.close()
        yield from drain()
    except ET.ParseError as exc:
        raise _syntax_error(exc) from exc
    except UnicodeError as exc:
        raise TmxSyntaxError(f"Encoding error: {exc}") from exc

    yield XmlEvent(EventKind.EOF)
