"""
data_model/content.py — document content model (tree of typed nodes).

Document
  └─ Section*            (only Sections at the root)
       └─ ContentNode*   Subsection | Paragraph | Figure | Term | ListBlock
            Subsection   same shape as Section, only nested

Nodes are immutable once built. The single exception is Figure.image,
which the figure binder sets after the tree exists.

String fields are typed `str | None`: trees parsed from model output may
lack them, and the renderer substitutes placeholder text instead of failing.
"""

from __future__ import annotations

import base64
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any


# ---------------------------------------------------------------------------
# Container nodes
# ---------------------------------------------------------------------------

@dataclass(slots=True, frozen=True)
class Section:
    heading: str | None
    content: tuple[ContentNode, ...] = ()


@dataclass(slots=True, frozen=True)
class Subsection:
    heading: str | None
    content: tuple[ContentNode, ...] = ()


# ---------------------------------------------------------------------------
# Leaf nodes
# ---------------------------------------------------------------------------

@dataclass(slots=True, frozen=True)
class Paragraph:
    text: str | None


@dataclass(slots=True)
class Figure:
    """
    Figure caption with an optional image.

    - caption: caption text, e.g. "Figure 2-1 Star topology."
    - image:   raw image bytes (PNG/JPEG), set by the binder or the parser
    """
    caption: str | None
    image: bytes | None = None


@dataclass(slots=True, frozen=True)
class Term:
    term: str | None
    definition: str | None


@dataclass(slots=True, frozen=True)
class ListBlock:
    items: tuple[str, ...] = ()
    ordered: bool = False


type ContentNode = Section | Subsection | Paragraph | Figure | Term | ListBlock


# ---------------------------------------------------------------------------
# Document and external inputs
# ---------------------------------------------------------------------------

@dataclass(slots=True, frozen=True)
class Document:
    title: str
    subtitle: str | None = None
    content: tuple[Section, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        """Serialises the tree in the same JSON shape the structuring parser reads."""
        data: dict[str, Any] = {"title": self.title}
        if self.subtitle:
            data["subtitle"] = self.subtitle
        data["content"] = [node_to_dict(s) for s in self.content]
        return data


@dataclass(slots=True, frozen=True)
class FigureReference:
    """Image supplied from outside the tree, matched to figures by caption or id."""
    caption: str
    image: bytes
    id: str | None = None


# ---------------------------------------------------------------------------
# Traversal
# ---------------------------------------------------------------------------

def iter_nodes(nodes: Iterable[ContentNode]) -> Iterator[ContentNode]:
    """Depth-first, left-to-right walk; a container is yielded before its children."""
    for node in nodes:
        yield node
        if isinstance(node, (Section, Subsection)):
            yield from iter_nodes(node.content)


def iter_figures(nodes: Iterable[ContentNode]) -> Iterator[Figure]:
    for node in iter_nodes(nodes):
        if isinstance(node, Figure):
            yield node


def node_to_dict(node: ContentNode) -> dict[str, Any]:
    match node:
        case Section(heading=heading, content=content):
            return {"type": "section", "heading": heading,
                    "content": [node_to_dict(n) for n in content]}
        case Subsection(heading=heading, content=content):
            return {"type": "subsection", "heading": heading,
                    "content": [node_to_dict(n) for n in content]}
        case Paragraph(text=text):
            return {"type": "paragraph", "text": text}
        case Figure(caption=caption, image=image):
            data: dict[str, Any] = {"type": "figure", "caption": caption}
            if image is not None:
                data["image"] = base64.b64encode(image).decode("ascii")
            return data
        case Term(term=term, definition=definition):
            return {"type": "term", "term": term, "definition": definition}
        case ListBlock(items=items, ordered=ordered):
            return {"type": "list", "items": list(items), "ordered": ordered}
    raise TypeError(f"Not a content node: {type(node).__name__}")
