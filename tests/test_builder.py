from data_model.content import Figure, Paragraph, Section, Term, iter_nodes
from data_model.fragments import FragmentKind, RawFragment
from text_parser.builder import build_document
from text_parser.classifier import classify_text


def frag(kind, text):
    return RawFragment(kind, text)


def test_root_holds_only_sections():
    fragments = [
        frag(FragmentKind.PARAGRAPH, "Leading text before any heading."),
        frag(FragmentKind.HEADING, "Network Basics"),
        frag(FragmentKind.PARAGRAPH, "A network connects devices."),
        frag(FragmentKind.CHAPTER_TITLE, "Chapter 2 Routing"),
        frag(FragmentKind.FIGURE_CAPTION, "Figure 2 Router."),
    ]
    document = build_document(fragments, "Networks")

    assert all(isinstance(s, Section) for s in document.content)
    assert [s.heading for s in document.content] == [None, "Network Basics", "Chapter 2 Routing"]
    assert document.content[0].content == (Paragraph("Leading text before any heading."),)
    assert document.content[2].content == (Figure(caption="Figure 2 Router."),)


def test_term_consumes_following_paragraph_as_definition():
    fragments = [
        frag(FragmentKind.HEADING, "Glossary"),
        frag(FragmentKind.TERM_CANDIDATE, "latency"),
        frag(FragmentKind.PARAGRAPH, "the delay before a transfer begins."),
        frag(FragmentKind.TERM_CANDIDATE, "jitter"),
    ]
    section = build_document(fragments, "T").content[0]
    assert section.content == (
        Term("latency", "the delay before a transfer begins."),
        Term("jitter", ""),
    )


def test_heading_without_body_still_opens_section():
    document = build_document([frag(FragmentKind.HEADING, "Empty Part")], "T", subtitle="S")
    assert document.subtitle == "S"
    assert document.content == (Section("Empty Part", ()),)


def test_no_fragments_gives_empty_document():
    assert build_document([], "Title").content == ()


def test_classified_text_to_tree_keeps_reading_order():
    text = (
        "Network Basics\n\n"
        "A network is a group of connected devices.\n\n"
        "Figure 1 Example topology."
    )
    document = build_document(classify_text(text), "Networks")
    flat = [type(n).__name__ for n in iter_nodes(document.content)]
    assert flat == ["Section", "Paragraph", "Figure"]
