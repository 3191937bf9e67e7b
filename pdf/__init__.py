"""
pdf — reading existing PDF files (text layer and embedded figure images).

Public API:
  extract_text(path)    -> str
  extract_figures(path) -> list[FigureReference]
  looks_scanned(text)   -> bool
"""

from .reader import extract_text, extract_figures, looks_scanned

__all__ = [
    "extract_text",
    "extract_figures",
    "looks_scanned",
]
