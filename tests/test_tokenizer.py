# tests/test_tokenizer.py

from __future__ import annotations

import pytest

from tiled_tables.core.exceptions import TmxSyntaxError
from tiled_tables.loader import EventKind, tokenize


def _shape(events):
    return [(e.kind, e.name) for e in events]


def test_tokenize_emits_start_text_end_and_single_eof() -> None:
    events = list(tokenize('<map width="2"><layer/><data>1,2</data></map>'))

    assert _shape(events) == [
        (EventKind.START, "map"),
        (EventKind.START, "layer"),
        (EventKind.END, "layer"),
        (EventKind.START, "data"),
        (EventKind.TEXT, "data"),
        (EventKind.END, "data"),
        (EventKind.END, "map"),
        (EventKind.EOF, ""),
    ]
    assert events[0].attrs == {"width": "2"}
    assert events[4].text == "1,2"


def test_tokenize_tracks_depth() -> None:
    events = list(tokenize("<map><group><layer/></group></map>"))
    depths = [(e.kind, e.name, e.depth) for e in events if e.kind is not EventKind.EOF]

    assert depths == [
        (EventKind.START, "map", 1),
        (EventKind.START, "group", 2),
        (EventKind.START, "layer", 3),
        (EventKind.END, "layer", 3),
        (EventKind.END, "group", 2),
        (EventKind.END, "map", 1),
    ]


def test_tokenize_skips_whitespace_only_text() -> None:
    events = list(tokenize("<map>\n  <layer>\n  </layer>\n</map>"))
    assert all(e.kind is not EventKind.TEXT for e in events)


def test_tokenize_accepts_bytes_with_declaration() -> None:
    source = b'<?xml version="1.0" encoding="UTF-8"?>\n<map orientation="orthogonal"/>'
    events = list(tokenize(source))

    assert _shape(events) == [
        (EventKind.START, "map"),
        (EventKind.END, "map"),
        (EventKind.EOF, ""),
    ]


def test_tokenize_strips_namespaces() -> None:
    events = list(tokenize('<map xmlns="urn:example"><layer/></map>'))
    assert [e.name for e in events if e.kind is EventKind.START] == ["map", "layer"]


def test_tokenize_unbalanced_tags_raise_syntax_error() -> None:
    with pytest.raises(TmxSyntaxError) as excinfo:
        list(tokenize("<map>\n<layer>\n</map>"))
    assert excinfo.value.lineno == 3


def test_tokenize_empty_input_raises_syntax_error() -> None:
    with pytest.raises(TmxSyntaxError):
        list(tokenize(""))


def test_tokenize_large_document_spans_feed_slices() -> None:
    csv = ",".join("1" for _ in range(40000))
    events = list(tokenize(f"<map><data>{csv}</data></map>"))

    text = [e for e in events if e.kind is EventKind.TEXT]
    assert len(text) == 1
    assert text[0].text == csv
