"""
data_model — data structures shared by the ebookforge pipeline.

Usage:
  from data_model import Document, Section, Paragraph, Figure, ...

Modules:
  content   — Document, Section, Subsection, Paragraph, Figure, Term,
              ListBlock, FigureReference, iter_nodes, iter_figures
  fragments — FragmentKind, RawFragment
  errors    — ErrorKind, EbookError, MalformedInput,
              UnresolvableStructure, RenderingFailure
"""

from .content import (
    ContentNode,
    Section,
    Subsection,
    Paragraph,
    Figure,
    Term,
    ListBlock,
    Document,
    FigureReference,
    iter_nodes,
    iter_figures,
    node_to_dict,
)
from .fragments import (
    FragmentKind,
    RawFragment,
    FragmentList,
)
from .errors import (
    ErrorKind,
    EbookError,
    MalformedInput,
    UnresolvableStructure,
    RenderingFailure,
)

__all__ = [
    # content
    "ContentNode",
    "Section",
    "Subsection",
    "Paragraph",
    "Figure",
    "Term",
    "ListBlock",
    "Document",
    "FigureReference",
    "iter_nodes",
    "iter_figures",
    "node_to_dict",
    # fragments
    "FragmentKind",
    "RawFragment",
    "FragmentList",
    # errors
    "ErrorKind",
    "EbookError",
    "MalformedInput",
    "UnresolvableStructure",
    "RenderingFailure",
]
