"""
data_model/fragments.py — classified lines produced by the text heuristics.

A fragment list is flat and ordered; insertion order is the document order
and is carried unchanged through building and rendering.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class FragmentKind(StrEnum):
    HEADING        = "heading"
    FIGURE_CAPTION = "figure_caption"
    TERM_CANDIDATE = "term_candidate"
    CHAPTER_TITLE  = "chapter_title"
    PARAGRAPH      = "paragraph"


@dataclass(slots=True, frozen=True)
class RawFragment:
    kind: FragmentKind
    text: str


# Fragments in document order.
type FragmentList = list[RawFragment]
