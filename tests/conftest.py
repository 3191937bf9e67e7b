from pathlib import Path

import fitz  # PyMuPDF
import pytest


def make_png(width: int = 40, height: int = 20, shade: int = 180) -> bytes:
    pix = fitz.Pixmap(fitz.csRGB, fitz.IRect(0, 0, width, height), False)
    pix.clear_with(shade)
    return pix.tobytes("png")


def write_text_pdf(path: Path, pages: list[str], image: bytes | None = None) -> Path:
    """Writes a simple PDF; `image` is placed on the first page above its text."""
    doc = fitz.open()
    for index, text in enumerate(pages):
        page = doc.new_page(width=595, height=842)
        y = 72
        if image is not None and index == 0:
            page.insert_image(fitz.Rect(72, 72, 272, 172), stream=image)
            y = 200
        for line in text.split("\n"):
            if not line:
                continue
            page.insert_text(fitz.Point(72, y), line, fontname="helv", fontsize=11)
            y += 16
    doc.save(str(path))
    doc.close()
    return path


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture
def long_text() -> str:
    body = (
        "The quick brown fox jumps over the lazy dog while the network "
        "keeps sending packets between the connected devices of the office."
    )
    return "\n\n".join(body for _ in range(30))
