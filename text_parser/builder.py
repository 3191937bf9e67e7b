"""
text_parser/builder.py — fragment list → Document tree.

Mapping:
  HEADING, CHAPTER_TITLE → open a new Section (heading = fragment text)
  FIGURE_CAPTION         → Figure(caption)
  TERM_CANDIDATE         → Term(term, definition = next PARAGRAPH fragment)
  PARAGRAPH              → Paragraph

Content that appears before the first heading goes into a synthetic
Section with no heading, so the document root holds Sections only.
"""

from __future__ import annotations

from data_model.content import ContentNode, Document, Figure, Paragraph, Section, Term
from data_model.fragments import FragmentKind, RawFragment

_SECTION_OPENERS = (FragmentKind.HEADING, FragmentKind.CHAPTER_TITLE)


def build_document(
    fragments: list[RawFragment],
    title: str,
    subtitle: str | None = None,
) -> Document:
    sections: list[Section] = []
    heading: str | None = None
    body: list[ContentNode] = []
    opened = False

    i = 0
    while i < len(fragments):
        fragment = fragments[i]
        kind = fragment.kind

        if kind in _SECTION_OPENERS:
            if opened or body:
                sections.append(Section(heading, tuple(body)))
            heading, body, opened = fragment.text, [], True
        elif kind is FragmentKind.FIGURE_CAPTION:
            body.append(Figure(caption=fragment.text))
        elif kind is FragmentKind.TERM_CANDIDATE:
            definition = ""
            nxt = fragments[i + 1] if i + 1 < len(fragments) else None
            if nxt is not None and nxt.kind is FragmentKind.PARAGRAPH:
                definition = nxt.text
                i += 1
            body.append(Term(term=fragment.text, definition=definition))
        else:
            body.append(Paragraph(fragment.text))
        i += 1

    if opened or body:
        sections.append(Section(heading, tuple(body)))

    return Document(title=title, subtitle=subtitle, content=tuple(sections))
