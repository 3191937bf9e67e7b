from render.layout import measure, wrap_runs
from render.styles import DEFAULT_GEOMETRY, STYLES, StyleName
from text_parser.inline import RunStyle, StyledRun, tokenize_inline

WIDTH = DEFAULT_GEOMETRY.content_width


def line_text(line):
    return "".join(run.text for run in line.runs)


def test_long_paragraph_wraps_within_width(long_text):
    style = STYLES[StyleName.PARAGRAPH]
    lines = wrap_runs([StyledRun(long_text.replace("\n", " "))], style, WIDTH)

    assert len(lines) > 10
    for line in lines:
        last = line.runs[-1]
        assert last.x + last.width <= WIDTH + 0.01
        assert not line_text(line).startswith(" ")
        assert not line_text(line).endswith(" ")


def test_first_line_indent_only_on_first_line(long_text):
    style = STYLES[StyleName.PARAGRAPH]
    lines = wrap_runs([StyledRun(long_text)], style, WIDTH)
    assert lines[0].runs[0].x == style.first_indent
    assert lines[1].runs[0].x == style.left_indent


def test_oversized_word_is_broken_between_characters():
    style = STYLES[StyleName.PARAGRAPH_FLUSH]
    word = "x" * 400
    lines = wrap_runs([StyledRun(word)], style, WIDTH)
    assert len(lines) > 1
    assert "".join(line_text(line) for line in lines) == word


def test_inline_styles_select_fonts():
    style = STYLES[StyleName.PARAGRAPH_FLUSH]
    lines = wrap_runs(tokenize_inline("plain **bold** *it* __under__"), style, WIDTH)
    fonts = {run.text.strip(): run.font for run in lines[0].runs}
    assert fonts["bold"] == "tibo"
    assert fonts["it"] == "tiit"
    underlined = [run for run in lines[0].runs if run.underline]
    assert [run.text for run in underlined] == ["under"]


def test_centered_lines_are_offset():
    style = STYLES[StyleName.CHAPTER_TITLE]
    lines = wrap_runs([StyledRun("Chapter 1")], style, WIDTH)
    width = measure("Chapter 1", "tibo", style.size)
    assert abs(lines[0].runs[0].x - (WIDTH - width) / 2) < 0.01


def test_whitespace_only_gives_no_lines():
    assert wrap_runs([StyledRun("   ", RunStyle.BOLD)], STYLES[StyleName.PARAGRAPH], WIDTH) == []


def test_wrapping_is_deterministic(long_text):
    style = STYLES[StyleName.PARAGRAPH]
    assert wrap_runs([StyledRun(long_text)], style, WIDTH) == wrap_runs([StyledRun(long_text)], style, WIDTH)
