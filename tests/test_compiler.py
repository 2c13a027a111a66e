from __future__ import annotations

import json

from designrender import CompositionRender, RenderSettings
from designrender.compiler import OUTPUT_FILES

from .helpers import auto_layout, composition, rect, solid, text_node, write_json


def _card():
    return composition(
        [
            auto_layout(
                "card",
                [
                    text_node("title", "Pricing", x=16, y=16, width=120, height=24),
                    rect("badge", fill=solid(0, 0.5, 1), x=148, y=16, width=24, height=24),
                ],
                spacing=12,
                width=200,
                height=56,
                paddingTop=16,
                paddingLeft=16,
            )
        ]
    )


def test_write_produces_content_and_debug_files(tmp_path):
    written = CompositionRender.from_dict(_card()).write(tmp_path / "out")

    assert set(written) == set(OUTPUT_FILES)
    for kind, name in OUTPUT_FILES.items():
        assert written[kind] == tmp_path / "out" / name
        assert written[kind].read_text(encoding="utf-8")


def test_write_skips_debug_files_when_disabled(tmp_path):
    render = CompositionRender.from_dict(_card(), settings=RenderSettings(debug_enabled=False))

    written = render.write(tmp_path)

    assert set(written) == {"html", "css"}
    assert not (tmp_path / "debug.html").exists()


def test_from_file_and_from_json_agree(tmp_path):
    path = tmp_path / "card.json"
    write_json(path, _card())

    from_file = CompositionRender.from_file(path).to_document()
    from_json = CompositionRender.from_json(json.dumps(_card())).to_document()

    assert from_file == from_json


def test_repeated_renders_are_identical():
    render = CompositionRender.from_dict(_card())

    first = render.render()
    second = render.render()

    assert first == second
    assert first.html.count("padding:16px 0px 0px 16px") == 1


def test_title_defaults_when_composition_is_unnamed():
    data = _card()
    data["name"] = ""

    page = CompositionRender.from_dict(data).to_document()

    assert "<title>Composition</title>" in page


def test_content_page_contains_text_and_debug_page_does_not():
    render = CompositionRender.from_dict(_card())

    assert "Pricing" in render.to_document()
    assert "Pricing" not in render.to_document(debug=True)
    assert 'data-layer-id="badge"' in render.to_document(debug=True)
