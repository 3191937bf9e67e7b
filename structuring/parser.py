"""
structuring/parser.py — model JSON output → Document.

Expected shape (the one requested in templates/structure.md):

  {"title": "...", "subtitle": "...",
   "content": [{"type": "section", "heading": "...", "content": [...]}, ...]}

Node types: section, subsection, paragraph, figure, term, list.

The parser is lenient on everything below the root object:
  - missing strings stay None (the renderer prints placeholders)
  - bare nodes at the root are wrapped in a Section without heading
  - unknown "type" values become a Paragraph "Unknown content type"
  - figure images given as base64 / data: URIs are decoded; bad ones dropped

Only undecodable JSON, or a root that is not an object, raises MalformedInput.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from collections.abc import Mapping
from typing import Any

from data_model.content import (
    ContentNode,
    Document,
    Figure,
    ListBlock,
    Paragraph,
    Section,
    Subsection,
    Term,
)
from data_model.errors import ErrorKind, MalformedInput

log = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled Document"
UNKNOWN_CONTENT = "Unknown content type"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_structure(payload: str | Mapping[str, Any]) -> Document:
    """
    Parses a structure produced by the language model (or read from a file).

    Args:
        payload: JSON text, optionally wrapped in a ```json fence, or an
                 already decoded mapping.

    Raises:
        MalformedInput: Not JSON, or the root is not an object.
    """
    data = _decode(payload) if isinstance(payload, str) else payload
    if not isinstance(data, Mapping):
        raise MalformedInput(
            f"Document structure must be a JSON object, got {type(data).__name__}"
        )

    title = _text(data.get("title")) or DEFAULT_TITLE
    subtitle = _text(data.get("subtitle"))
    raw_content = data.get("content")
    if not isinstance(raw_content, list):
        if raw_content is not None:
            log.warning("document content is not a list (%s); ignoring it",
                        type(raw_content).__name__)
        raw_content = []

    nodes = [_parse_node(item) for item in raw_content]
    return Document(title=title, subtitle=subtitle, content=_wrap_root(nodes))


def strip_code_fence(text: str) -> str:
    """Removes a surrounding ``` / ```json fence from model output."""
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[-1]
    if text.endswith("```"):
        text = text.rsplit("```", 1)[0]
    return text.strip()


# ---------------------------------------------------------------------------
# Internals
# ---------------------------------------------------------------------------

def _decode(text: str) -> Any:
    body = strip_code_fence(text)
    if not body:
        raise MalformedInput("Document structure is empty")
    try:
        return json.loads(body)
    except json.JSONDecodeError as exc:
        raise MalformedInput(f"Invalid document structure JSON: {exc}") from exc


def _parse_node(item: Any) -> ContentNode:
    if not isinstance(item, Mapping):
        log.warning("[%s] content item is not an object: %r",
                    ErrorKind.UNRESOLVABLE_STRUCTURE, item)
        return Paragraph(UNKNOWN_CONTENT)

    match item.get("type"):
        case "section":
            return Section(_text(item.get("heading")), _parse_children(item))
        case "subsection":
            return Subsection(_text(item.get("heading")), _parse_children(item))
        case "paragraph":
            return Paragraph(_text(item.get("text")))
        case "figure":
            return Figure(caption=_text(item.get("caption")),
                          image=decode_image(item.get("image")))
        case "term":
            return Term(term=_text(item.get("term")),
                        definition=_text(item.get("definition")))
        case "list":
            items = item.get("items")
            if not isinstance(items, list):
                items = []
            return ListBlock(items=tuple(str(i) for i in items if i is not None),
                             ordered=bool(item.get("ordered", False)))
        case other:
            log.warning("[%s] unknown content type %r",
                        ErrorKind.UNRESOLVABLE_STRUCTURE, other)
            return Paragraph(UNKNOWN_CONTENT)


def _parse_children(item: Mapping[str, Any]) -> tuple[ContentNode, ...]:
    children = item.get("content")
    if not isinstance(children, list):
        return ()
    return tuple(_parse_node(child) for child in children)


def _wrap_root(nodes: list[ContentNode]) -> tuple[Section, ...]:
    """Groups consecutive non-Section root nodes into Sections without heading."""
    sections: list[Section] = []
    loose: list[ContentNode] = []
    for node in nodes:
        if isinstance(node, Section):
            if loose:
                sections.append(Section(None, tuple(loose)))
                loose = []
            sections.append(node)
        else:
            loose.append(node)
    if loose:
        sections.append(Section(None, tuple(loose)))
    return tuple(sections)


def _text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def decode_image(value: Any) -> bytes | None:
    """Decodes "data:image/png;base64,..." or bare base64; None when absent or invalid."""
    if not value or not isinstance(value, str):
        return None
    encoded = value.partition(",")[2] if value.startswith("data:") else value
    encoded = "".join(encoded.split())
    if not encoded:
        return None
    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError):
        log.warning("figure image is not valid base64; rendering caption only")
        return None
