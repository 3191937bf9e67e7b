import fitz  # PyMuPDF
import pytest

from data_model.content import Document, FigureReference, Paragraph, Section
from data_model.errors import MalformedInput, RenderingFailure
from render import writer
from render.blocks import BlockKind, StyledBlock, document_blocks
from render.paginator import paginate
from render.pipeline import (
    layout_document,
    layout_text,
    render_structured_ebook,
    render_text_ebook,
)
from render.styles import DEFAULT_GEOMETRY, STYLES, StyleName

GEO = DEFAULT_GEOMETRY
HEADING_KINDS = {BlockKind.SECTION_HEADING, BlockKind.SUBSECTION_HEADING,
                 BlockKind.CHAPTER_TITLE, BlockKind.TERM_NAME}


def open_pdf(data: bytes) -> fitz.Document:
    return fitz.open(stream=data, filetype="pdf")


def sectioned_text(sections: int = 12) -> str:
    names = ["Alpha", "Bravo", "Charlie", "Delta", "Echo", "Foxtrot",
             "Golf", "Hotel", "India", "Juliet", "Kilo", "Lima"]
    body = ("every device on the network exchanges packets with its neighbours "
            "and the routers forward them along the cheapest known path. ") * 6
    parts = []
    for name in names[:sections]:
        parts.append(f"Topic {name}")
        parts.append(body.strip())
        parts.append(body.strip())
    return "\n\n".join(parts)


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------

def test_cover_is_page_zero_and_content_pages_are_numbered():
    book = layout_text(sectioned_text(), "Networks", author="Ada")

    assert book.cover.is_cover and book.cover.footer is None
    assert book.total > 1
    assert [p.number for p in book.pages] == list(range(1, book.total + 1))
    assert [p.footer for p in book.pages] == [f"{n} / {book.total}" for n in range(1, book.total + 1)]
    assert [b.kind for b in book.cover.blocks] == [BlockKind.COVER_TITLE, BlockKind.COVER_AUTHOR]


def test_blocks_stay_inside_the_content_area():
    book = layout_text(sectioned_text(), "Networks")
    for page in book.pages:
        assert page.blocks
        for block in page.blocks:
            assert block.y >= GEO.margin_top
            assert block.y + block.content_height <= GEO.content_bottom + 0.01


def test_headings_are_never_stranded_at_page_bottom():
    book = layout_text(sectioned_text(), "Networks")
    for page in book.pages[:-1]:
        assert page.blocks[-1].kind not in HEADING_KINDS


def test_first_block_on_a_page_has_no_top_margin():
    book = layout_text(sectioned_text(), "Networks")
    for page in book.pages:
        assert page.blocks[0].y == GEO.margin_top


def test_chapter_title_starts_a_new_page():
    text = "Some introduction text here.\n\nChapter 2 Routing\n\nrouting moves packets."
    book = layout_text(text, "Networks")
    assert book.total == 2
    assert book.pages[1].blocks[0].kind is BlockKind.CHAPTER_TITLE


def test_chapter_title_outranks_section_heading():
    chapter, section = STYLES[StyleName.CHAPTER_TITLE], STYLES[StyleName.SECTION_HEADING]
    subsection = STYLES[StyleName.SUBSECTION_HEADING]
    assert chapter.size > section.size > subsection.size
    assert chapter.page_break_before and not section.page_break_before


def test_heading_before_chapter_title_shares_its_page():
    book = layout_text("Intro\n\nChapter 2 Routing\n\nrouting moves packets.", "Networks")
    assert book.total == 1
    assert [b.kind for b in book.pages[0].blocks] == [
        BlockKind.SECTION_HEADING, BlockKind.CHAPTER_TITLE, BlockKind.PARAGRAPH,
    ]


def test_heading_before_chapter_title_moves_to_the_new_page():
    text = "Some introduction text here.\n\nIntro\n\nChapter 2 Routing\n\nrouting moves packets."
    book = layout_text(text, "Networks")
    assert book.total == 2
    assert [b.kind for b in book.pages[0].blocks] == [BlockKind.PARAGRAPH]
    assert [b.kind for b in book.pages[1].blocks] == [
        BlockKind.SECTION_HEADING, BlockKind.CHAPTER_TITLE, BlockKind.PARAGRAPH,
    ]
    assert book.pages[1].blocks[0].y == GEO.margin_top


def test_long_paragraph_is_split_without_losing_lines(long_text):
    paragraph = Paragraph(long_text.replace("\n\n", " "))
    document = Document("T", content=(Section("S", (paragraph,)),))
    expected = document_blocks(document, GEO)[1]

    book = layout_document(document)
    pieces = [b for page in book.pages for b in page.blocks if b.kind is BlockKind.PARAGRAPH]

    assert book.total >= 2
    assert len(pieces) == book.total
    assert tuple(line for p in pieces for line in p.lines) == expected.lines
    assert all(p.style.margin_top == 0.0 for p in pieces[1:])


def test_block_taller_than_a_page_gets_its_own_page():
    paragraph = layout_text("some short text here.", "T").pages[0].blocks[0]
    tall = StyledBlock(BlockKind.FIGURE_IMAGE, STYLES[StyleName.FIGURE_IMAGE],
                       image=b"img", image_width=100.0, image_height=2000.0)
    book = paginate([], [paragraph, tall, paragraph], GEO)
    assert [[b.kind for b in p.blocks] for p in book.pages] == [
        [BlockKind.PARAGRAPH], [BlockKind.FIGURE_IMAGE], [BlockKind.PARAGRAPH],
    ]


def test_layout_is_deterministic():
    assert layout_text(sectioned_text(), "N") == layout_text(sectioned_text(), "N")


def test_text_pipeline_binds_reference_images(png_bytes):
    text = "Network Basics\n\nA network is a group of connected devices.\n\nFigure 1 Example topology."
    refs = [FigureReference(caption="Figure 1: diagram", image=png_bytes)]
    book = layout_text(text, "N", references=refs)
    kinds = [b.kind for b in book.pages[0].blocks]
    assert kinds == [
        BlockKind.SECTION_HEADING, BlockKind.PARAGRAPH,
        BlockKind.FIGURE_IMAGE, BlockKind.FIGURE_CAPTION,
    ]


# ---------------------------------------------------------------------------
# PDF output
# ---------------------------------------------------------------------------

def test_text_ebook_pdf_pages_and_footers():
    data = render_text_ebook(sectioned_text(), "Networks", author="Ada Writer")
    assert data.startswith(b"%PDF")

    doc = open_pdf(data)
    try:
        total = doc.page_count - 1
        assert total >= 2
        cover = doc[0].get_text()
        assert "Networks" in cover and "By Ada Writer" in cover
        assert f"1 / {total}" in doc[1].get_text()
        assert f"{total} / {total}" in doc[total].get_text()
        assert doc.metadata["title"] == "Networks"
        assert doc.metadata["author"] == "Ada Writer"
    finally:
        doc.close()


def test_structured_ebook_renders_placeholder_heading(png_bytes):
    document = Document(
        "Networks",
        subtitle="Basics",
        content=(Section(None, (Paragraph("Child paragraph stays."),)),),
    )
    doc = open_pdf(render_structured_ebook(document, references=[FigureReference("x", png_bytes)]))
    try:
        assert doc.page_count == 2
        assert "Basics" in doc[0].get_text()
        page = doc[1].get_text()
        assert "Untitled Section" in page
        assert "Child paragraph stays." in page
    finally:
        doc.close()


def test_inline_markup_is_drawn_without_markers():
    doc = open_pdf(render_text_ebook("plain **bold** and __under__ words here.", "T"))
    try:
        text = doc[1].get_text()
        assert "bold" in text and "**" not in text and "__" not in text
    finally:
        doc.close()


def test_empty_text_is_malformed_input():
    with pytest.raises(MalformedInput):
        render_text_ebook(" \n\n ", "T")


def test_writer_errors_become_rendering_failures(monkeypatch):
    def broken(*args):
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(writer, "_draw_page", broken)
    with pytest.raises(RenderingFailure, match="disk on fire") as info:
        writer.write_pdf(layout_text("Some text here.", "T"))
    assert isinstance(info.value.__cause__, RuntimeError)
