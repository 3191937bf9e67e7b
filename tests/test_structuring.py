import base64
import json
from types import SimpleNamespace

import pytest
from google.genai import errors as genai_errors

import structuring
from data_model.content import Figure, ListBlock, Paragraph, Section, Subsection, Term
from data_model.errors import MalformedInput
from structuring import gemini
from structuring.parser import decode_image, parse_structure, strip_code_fence
from structuring.prompt import SYSTEM_INSTRUCTION, build_structure_prompt


STRUCTURE = {
    "title": "Networks",
    "subtitle": "An introduction",
    "content": [
        {"type": "section", "heading": "Basics", "content": [
            {"type": "paragraph", "text": "A network connects devices."},
            {"type": "subsection", "heading": "Topologies", "content": [
                {"type": "figure", "caption": "Figure 1 Star"},
            ]},
            {"type": "term", "term": "LAN", "definition": "Local area network"},
            {"type": "list", "items": ["one", "two"], "ordered": True},
        ]},
    ],
}


# ---------------------------------------------------------------------------
# parse_structure
# ---------------------------------------------------------------------------

def test_parse_full_structure():
    document = parse_structure(json.dumps(STRUCTURE))
    assert document.title == "Networks"
    assert document.subtitle == "An introduction"
    assert document.content == (
        Section("Basics", (
            Paragraph("A network connects devices."),
            Subsection("Topologies", (Figure("Figure 1 Star"),)),
            Term("LAN", "Local area network"),
            ListBlock(("one", "two"), ordered=True),
        )),
    )


def test_parse_accepts_fenced_json_and_mappings():
    fenced = "```json\n" + json.dumps(STRUCTURE) + "\n```"
    assert parse_structure(fenced) == parse_structure(STRUCTURE)


def test_missing_title_and_heading():
    document = parse_structure({"content": [{"type": "section", "content": []}]})
    assert document.title == "Untitled Document"
    assert document.content == (Section(None, ()),)


def test_root_nodes_are_wrapped_into_sections():
    document = parse_structure({"title": "T", "content": [
        {"type": "paragraph", "text": "loose"},
        {"type": "subsection", "heading": "Sub"},
        {"type": "section", "heading": "Real"},
        {"type": "figure", "caption": "Figure 2"},
    ]})
    assert [type(s) for s in document.content] == [Section, Section, Section]
    assert document.content[0] == Section(None, (Paragraph("loose"), Subsection("Sub", ())))
    assert document.content[1].heading == "Real"
    assert document.content[2] == Section(None, (Figure("Figure 2"),))


def test_unknown_types_become_placeholder_paragraphs(caplog):
    document = parse_structure({"title": "T", "content": [
        {"type": "section", "heading": "S", "content": [{"type": "table"}, "junk"]},
    ]})
    assert document.content[0].content == (
        Paragraph("Unknown content type"),
        Paragraph("Unknown content type"),
    )
    assert "E_UNRESOLVABLE_STRUCTURE" in caplog.text


@pytest.mark.parametrize("payload", ["", "not json", "```json\n```", "[1, 2]"])
def test_malformed_payloads(payload):
    with pytest.raises(MalformedInput):
        parse_structure(payload)


def test_strip_code_fence():
    assert strip_code_fence('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fence('  {"a": 1}  ') == '{"a": 1}'


def test_decode_image_variants(png_bytes):
    encoded = base64.b64encode(png_bytes).decode("ascii")
    assert decode_image(encoded) == png_bytes
    assert decode_image("data:image/png;base64," + encoded) == png_bytes
    assert decode_image("%%% not base64") is None
    assert decode_image("data:image/png;base64") is None
    assert decode_image(None) is None


# ---------------------------------------------------------------------------
# prompt / structure_text
# ---------------------------------------------------------------------------

def test_prompt_is_filled():
    prompt = build_structure_prompt("Some body text.", "My Title")
    assert "Document title: My Title" in prompt
    assert "Content: Some body text." in prompt
    assert "{{" not in prompt


def test_prompt_template_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        build_structure_prompt("x", "y", template_path=tmp_path / "missing.md")


def test_structure_text_calls_model_with_normalized_text(monkeypatch):
    seen = {}

    def fake_call(prompt, model, system_instruction):
        seen["prompt"], seen["model"] = prompt, model
        seen["system"] = system_instruction
        return "```json\n" + json.dumps(STRUCTURE) + "\n```"

    monkeypatch.setattr(structuring, "call_gemini", fake_call)
    document = structuring.structure_text("A  network\r\nconnects “devices”.", "Nets", model="m1")

    assert document.title == "Networks"
    assert seen["model"] == "m1"
    assert 'A network\nconnects "devices".' in seen["prompt"]
    assert seen["system"] == SYSTEM_INSTRUCTION
    assert SYSTEM_INSTRUCTION not in seen["prompt"]


def test_structure_text_rejects_empty_input(monkeypatch):
    monkeypatch.setattr(structuring, "call_gemini", pytest.fail)
    with pytest.raises(MalformedInput):
        structuring.structure_text("   \n\n ")


# ---------------------------------------------------------------------------
# Gemini client
# ---------------------------------------------------------------------------

def test_call_gemini_requires_api_key(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    with pytest.raises(ValueError):
        gemini.call_gemini("prompt")


def test_call_gemini_retries_on_rate_limit(monkeypatch):
    calls = []

    def generate_content(*, model, contents, config):
        calls.append(model)
        if len(calls) == 1:
            raise genai_errors.ClientError(
                429, {"error": {"code": 429, "message": "Please retry in 1.5s", "status": "RESOURCE_EXHAUSTED"}}
            )
        return SimpleNamespace(text='{"title": "ok"}')

    client = SimpleNamespace(models=SimpleNamespace(generate_content=generate_content))
    sleeps = []
    monkeypatch.setattr(gemini, "_get_client", lambda key: client)
    monkeypatch.setattr(gemini.time, "sleep", sleeps.append)

    assert gemini.call_gemini("prompt", model="m", api_key="k") == '{"title": "ok"}'
    assert calls == ["m", "m"]
    assert sleeps == [1.5]


def test_call_gemini_requests_json_under_system_instruction(monkeypatch):
    requests = []

    def generate_content(*, model, contents, config):
        requests.append((model, contents, config))
        return SimpleNamespace(text='{"title": "ok", "content": []}')

    client = SimpleNamespace(models=SimpleNamespace(generate_content=generate_content))
    monkeypatch.setattr(gemini, "_get_client", lambda key: client)

    gemini.call_gemini("fill me", model="m", api_key="k", system_instruction="Be a typesetter.")

    [(model, contents, config)] = requests
    assert (model, contents) == ("m", "fill me")
    assert config.system_instruction == "Be a typesetter."
    assert config.response_mime_type == "application/json"


def test_call_gemini_rejects_empty_answer(monkeypatch):
    client = SimpleNamespace(models=SimpleNamespace(
        generate_content=lambda **kwargs: SimpleNamespace(text=None)))
    monkeypatch.setattr(gemini, "_get_client", lambda key: client)
    with pytest.raises(RuntimeError):
        gemini.call_gemini("prompt", api_key="k")


def test_call_gemini_daily_quota_is_not_retried(monkeypatch):
    def generate_content(**kwargs):
        raise genai_errors.ClientError(
            429, {"error": {"code": 429, "message": "GenerateRequestsPerDay exceeded", "status": "RESOURCE_EXHAUSTED"}}
        )

    client = SimpleNamespace(models=SimpleNamespace(generate_content=generate_content))
    monkeypatch.setattr(gemini, "_get_client", lambda key: client)
    monkeypatch.setattr(gemini.time, "sleep", pytest.fail)
    with pytest.raises(RuntimeError, match="Daily"):
        gemini.call_gemini("prompt", api_key="k")
