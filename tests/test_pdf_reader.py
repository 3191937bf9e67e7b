import pytest

from conftest import write_text_pdf
from data_model.errors import MalformedInput
from pdf.reader import extract_figures, extract_text, looks_scanned

PAGE_ONE = (
    "Figure 1 Example topology.\n"
    "A network is a group of connected devices that share resources\n"
    "and exchange data with each other over a common medium."
)
PAGE_TWO = "Routers forward packets between networks using routing tables and metrics."


def test_extract_text_joins_pages(tmp_path, png_bytes):
    path = write_text_pdf(tmp_path / "doc.pdf", [PAGE_ONE, PAGE_TWO], image=png_bytes)
    text = extract_text(path)
    assert "Figure 1 Example topology." in text
    assert "Routers forward packets" in text
    assert "\n\n" in text


def test_extract_figures_pairs_image_with_caption(tmp_path, png_bytes):
    path = write_text_pdf(tmp_path / "doc.pdf", [PAGE_ONE], image=png_bytes)
    refs = extract_figures(path)
    assert len(refs) == 1
    assert refs[0].caption == "Figure 1 Example topology."
    assert refs[0].id == "Figure 1"
    assert refs[0].image


def test_pdf_without_text_layer_is_rejected(tmp_path, png_bytes):
    path = write_text_pdf(tmp_path / "scan.pdf", [""], image=png_bytes)
    with pytest.raises(MalformedInput):
        extract_text(path)


@pytest.mark.parametrize(
    ("text", "scanned"),
    [
        ("", True),
        ("too short", True),
        ("x" * 200, True),
        ("word " * 20, False),
    ],
)
def test_looks_scanned(text, scanned):
    assert looks_scanned(text) is scanned
