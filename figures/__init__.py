"""
figures — binding of extracted images to figure nodes.

Public API:
  bind_figures(tree, references)      -> int
  match_reference(figure, references) -> FigureReference | None
"""

from .binder import bind_figures, match_reference

__all__ = [
    "bind_figures",
    "match_reference",
]
