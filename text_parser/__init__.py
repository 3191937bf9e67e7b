"""
text_parser — heuristic structuring of plain extracted text.

Public API:
  normalize_text(raw)                       -> str
  classify_text(text)                       -> list[RawFragment]
  join_wrapped_lines(lines)                 -> str
  tokenize_inline(text)                     -> list[StyledRun]
  build_document(fragments, title, subtitle)-> Document
"""

from .normalizer import normalize_text
from .classifier import classify_text, join_wrapped_lines
from .inline import RunStyle, StyledRun, tokenize_inline, plain_text
from .builder import build_document

__all__ = [
    "normalize_text",
    "classify_text",
    "join_wrapped_lines",
    "RunStyle",
    "StyledRun",
    "tokenize_inline",
    "plain_text",
    "build_document",
]
