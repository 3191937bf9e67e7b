"""
figures/binder.py — attach externally extracted images to Figure nodes.

Matching, per figure, walking the tree depth-first and left to right:
  1. the first reference whose caption occurs in the figure caption, or
     whose id occurs in the figure caption, wins
  2. otherwise, if there is exactly one reference and exactly one figure
     in the whole tree, the two are paired regardless of caption text
  3. otherwise the figure keeps its current image (usually none)

References are not consumed: one image may be bound to several figures.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from data_model.content import ContentNode, Document, Figure, FigureReference, iter_figures

log = logging.getLogger(__name__)


def bind_figures(
    tree: Document | Iterable[ContentNode],
    references: Sequence[FigureReference],
) -> int:
    """
    Sets Figure.image in place for every figure with a matching reference.

    Args:
        tree:       Document or any sequence of content nodes.
        references: Images with their captions / ids.

    Returns:
        Number of figures that received an image.
    """
    nodes = tree.content if isinstance(tree, Document) else tree
    figures = list(iter_figures(nodes))
    if not figures or not references:
        return 0

    sole_pair = len(references) == 1 and len(figures) == 1
    bound = 0
    for figure in figures:
        ref = match_reference(figure, references)
        if ref is None and sole_pair:
            ref = references[0]
            log.debug("binding sole image to sole figure %r", figure.caption)
        if ref is None:
            log.debug("no image for figure %r", figure.caption)
            continue
        figure.image = ref.image
        bound += 1

    log.info("bound %d of %d figures to %d images", bound, len(figures), len(references))
    return bound


def match_reference(
    figure: Figure,
    references: Sequence[FigureReference],
) -> FigureReference | None:
    """First reference whose caption or id is contained in the figure caption."""
    caption = figure.caption or ""
    for ref in references:
        if ref.caption and ref.caption in caption:
            return ref
        if ref.id and ref.id in caption:
            return ref
    return None
