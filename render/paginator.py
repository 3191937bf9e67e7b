"""
render/paginator.py — measured blocks → pages.

Rules, applied block by block in document order:
  - page_break_before starts a new page unless the current page is empty
  - margin_top is dropped for the first block on a page
  - keep_with_next moves a block to the next page when it would be left
    alone at the bottom (the first line of the following block must fit too)
  - a keep_with_next block followed by a page_break_before block takes the
    break itself: it opens the new page and the follower stays under it
  - text blocks that overflow are split at line boundaries; the tail
    continues on the next page
  - a block that does not fit an empty page is placed anyway, so every
    iteration makes progress

Page numbering: the cover is page 0 and has no footer; content pages are
numbered 1..N and carry the footer "n / N".
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass, field, replace

from render.blocks import StyledBlock
from render.styles import PageGeometry

log = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class Page:
    number: int                 # 0 for the cover
    total: int                  # number of content pages
    blocks: tuple[StyledBlock, ...] = ()

    @property
    def is_cover(self) -> bool:
        return self.number == 0

    @property
    def footer(self) -> str | None:
        return None if self.is_cover else f"{self.number} / {self.total}"


@dataclass(slots=True, frozen=True)
class Book:
    geometry: PageGeometry
    cover: Page
    pages: tuple[Page, ...] = field(default=())

    @property
    def total(self) -> int:
        return len(self.pages)

    @property
    def all_pages(self) -> tuple[Page, ...]:
        return (self.cover, *self.pages)


def paginate(
    cover: Sequence[StyledBlock],
    blocks: Sequence[StyledBlock],
    geometry: PageGeometry,
) -> Book:
    """Places the cover on page 0 and flows `blocks` over numbered pages."""
    flowed = _flow(blocks, geometry)
    total = len(flowed)
    pages = tuple(Page(i, total, tuple(p)) for i, p in enumerate(flowed, start=1))
    log.debug("paginated %d blocks onto %d pages", len(blocks), total)
    return Book(geometry, Page(0, total, tuple(_center_cover(cover, geometry))), pages)


# ---------------------------------------------------------------------------
# Internal implementation
# ---------------------------------------------------------------------------

def _flow(blocks: Sequence[StyledBlock], geometry: PageGeometry) -> list[list[StyledBlock]]:
    pages: list[list[StyledBlock]] = [[]]
    queue: deque[StyledBlock] = deque(blocks)
    bottom = geometry.content_bottom
    y = geometry.margin_top

    def new_page() -> None:
        nonlocal y
        pages.append([])
        y = geometry.margin_top

    while queue:
        block = queue.popleft()
        current = pages[-1]
        style = block.style

        if style.page_break_before and current:
            new_page()
            current = pages[-1]

        if style.keep_with_next and queue and queue[0].style.page_break_before:
            follower = queue[0]
            queue[0] = replace(follower, style=replace(follower.style, page_break_before=False))
            if current:
                queue.appendleft(block)
                new_page()
                continue

        top = y + (style.margin_top if current else 0.0)
        height = block.content_height

        if style.keep_with_next and current and queue:
            follower = queue[0]
            needed = height + style.margin_bottom + follower.style.margin_top + follower.first_line_height
            if top + needed > bottom:
                queue.appendleft(block)
                new_page()
                continue

        if top + height <= bottom:
            current.append(replace(block, y=top))
            y = top + height + style.margin_bottom
            continue

        if block.lines:
            fitting = _lines_that_fit(block, bottom - top)
            if fitting == 0 and not current:
                fitting = 1
            if 0 < fitting < len(block.lines):
                head, tail = block.split(fitting)
                current.append(replace(head, y=top))
                queue.appendleft(tail)
                new_page()
                continue

        if current:
            queue.appendleft(block)
            new_page()
            continue

        # Empty page and still too tall: place it and move on.
        log.debug("%s block taller than a page; placing without split", block.kind)
        current.append(replace(block, y=top))
        y = top + height + style.margin_bottom

    return pages


def _lines_that_fit(block: StyledBlock, space: float) -> int:
    used = 0.0
    for count, line in enumerate(block.lines):
        used += line.height
        if used > space:
            return count
    return len(block.lines)


def _center_cover(blocks: Sequence[StyledBlock], geometry: PageGeometry) -> list[StyledBlock]:
    """Stacks the cover blocks and centres the stack vertically."""
    total = 0.0
    for index, block in enumerate(blocks):
        if index:
            total += block.style.margin_top
        total += block.content_height
        if index < len(blocks) - 1:
            total += block.style.margin_bottom

    y = max((geometry.height - total) / 2, geometry.margin_top)
    placed: list[StyledBlock] = []
    for index, block in enumerate(blocks):
        if index:
            y += block.style.margin_top
        placed.append(replace(block, y=y))
        y += block.content_height + block.style.margin_bottom
    return placed
