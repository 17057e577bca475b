from __future__ import annotations

from typing import Any

import pytest

from artboard_contrast.analyzer.color_math import Color
from artboard_contrast.analyzer.layer_tree import (
    LayerDocumentError,
    LayerTreeWalker,
    find_artboards,
    load_document,
)
from artboard_contrast.analyzer.sample_extractor import Rectangle
from artboard_contrast.core.config import ContrastConfig


def _text(name: str = "Label", **extra: Any) -> dict[str, Any]:
    layer = {
        "type": "text",
        "name": name,
        "frame": {"x": 1, "y": 2, "w": 30, "h": 10},
        "font_size": 16,
        "font_name": "Roboto-Regular",
        "text_color": "#000000",
    }
    layer.update(extra)
    return layer


def _group(name: str, layers: list[dict[str, Any]], **extra: Any) -> dict[str, Any]:
    group = {
        "type": "group",
        "name": name,
        "frame": {"x": 0, "y": 0, "w": 100, "h": 100},
        "layers": layers,
    }
    group.update(extra)
    return group


def _artboard(layers: list[dict[str, Any]], **extra: Any) -> dict[str, Any]:
    artboard = {
        "type": "artboard",
        "name": "Home",
        "frame": {"x": 500, "y": 700, "w": 360, "h": 640},
        "layers": layers,
    }
    artboard.update(extra)
    return artboard


def test_offsets_and_opacity_accumulate_below_artboard() -> None:
    inner = _group("Inner", [_text()], frame={"x": 5, "y": 5, "w": 50, "h": 50}, opacity=0.5)
    outer = _group("Outer", [inner], frame={"x": 10, "y": 20, "w": 80, "h": 80}, opacity=0.5)

    [element] = LayerTreeWalker().find_text_elements(_artboard([outer]))

    assert element.rectangle == Rectangle(16, 27, 30, 10)
    assert element.effective_opacity == pytest.approx(0.25)
    assert element.name == "Home > Outer > Inner > Label"
    assert element.text_color == Color(0, 0, 0)
    assert element.font_size_px == 16
    assert element.is_bold is False


def test_text_layer_own_opacity_is_not_included() -> None:
    [element] = LayerTreeWalker().find_text_elements(_artboard([_text(opacity=0.1)]))
    assert element.effective_opacity == 1.0


def test_hidden_layers_and_hidden_ancestors_are_skipped() -> None:
    artboard = _artboard([
        _text("Shown"),
        _text("Hidden", visible=False),
        _group("Collapsed", [_text("Inside")], visible=False),
    ])
    names = [e.name for e in LayerTreeWalker().find_text_elements(artboard)]
    assert names == ["Home > Shown"]


def test_non_text_leaves_are_ignored() -> None:
    artboard = _artboard([{"type": "rectangle", "name": "Card"}, _text()])
    assert len(LayerTreeWalker().find_text_elements(artboard)) == 1


def test_nearest_ancestor_tint_overrides_text_color() -> None:
    artboard = _artboard([
        _group("Red", [_group("Blue", [_text("A")], tint="#0000ff"), _text("B")], tint="#ff0000"),
    ])
    colors = {e.name.split(" > ")[-1]: e.text_color for e in LayerTreeWalker().find_text_elements(artboard)}
    assert colors == {"A": Color(0, 0, 255), "B": Color(255, 0, 0)}


def test_missing_or_unparsable_text_color_is_unresolved() -> None:
    artboard = _artboard([_text("None", text_color=None), _text("Bad", text_color="#nothex")])
    assert [e.text_color for e in LayerTreeWalker().find_text_elements(artboard)] == [None, None]


def test_unit_color_mapping_is_scaled_to_bytes() -> None:
    artboard = _artboard([_text(text_color={"r": 1, "g": 0.5, "b": 0, "a": 0.4})])
    [element] = LayerTreeWalker().find_text_elements(artboard)
    assert element.text_color == Color(255, 128, 0, 102)


def test_bold_detection_uses_font_name() -> None:
    artboard = _artboard([_text("A", font_name="Roboto-Medium"), _text("B", font_name="Roboto-Light")])
    assert [e.is_bold for e in LayerTreeWalker().find_text_elements(artboard)] == [True, False]


def test_symbol_instances_expand_from_master() -> None:
    document = {
        "layers": [
            _artboard([
                {
                    "type": "symbol_instance",
                    "name": "Button",
                    "symbol_id": "btn",
                    "frame": {"x": 100, "y": 200, "w": 80, "h": 30},
                    "opacity": 0.5,
                },
                {
                    "type": "symbol_instance",
                    "name": "Ghost",
                    "symbol_id": "missing",
                    "frame": {"x": 0, "y": 0, "w": 10, "h": 10},
                },
            ])
        ],
        "symbols": {"btn": {"type": "symbol_master", "name": "Button", "layers": [_text("Caption")]}},
    }
    walker = LayerTreeWalker.for_document(document)
    [element] = walker.find_text_elements(find_artboards(document)[0])

    assert element.name == "Home > Button > Caption"
    assert element.rectangle == Rectangle(101, 202, 30, 10)
    assert element.effective_opacity == 0.5


def test_report_meta_group_is_ignored() -> None:
    meta = _group(ContrastConfig().meta_group_name, [_text("1.00:1")])
    assert LayerTreeWalker().find_text_elements(_artboard([meta, _text()]))[0].name == "Home > Label"
    assert len(LayerTreeWalker().find_text_elements(_artboard([meta]))) == 0


def test_depth_limit_stops_recursion() -> None:
    node = _text()
    for i in range(5):
        node = _group(f"G{i}", [node])
    walker = LayerTreeWalker(config=ContrastConfig(max_tree_depth=3))
    assert walker.find_text_elements(_artboard([node])) == []


def test_text_without_font_size_is_rejected() -> None:
    layer = _text()
    del layer["font_size"]
    with pytest.raises(LayerDocumentError, match="font_size"):
        LayerTreeWalker().find_text_elements(_artboard([layer]))


def test_layer_without_frame_is_rejected() -> None:
    with pytest.raises(LayerDocumentError, match="frame"):
        LayerTreeWalker().find_text_elements(_artboard([_text(frame=None)]))


def test_find_artboards_lists_top_level_artboards_only() -> None:
    document = {"layers": [_artboard([]), _group("Loose", []), _artboard([], name="Settings")]}
    assert [a["name"] for a in find_artboards(document)] == ["Home", "Settings"]


def test_load_document_rejects_invalid_json(tmp_path) -> None:
    path = tmp_path / "doc.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(LayerDocumentError):
        load_document(path)

    path.write_text("[]", encoding="utf-8")
    with pytest.raises(LayerDocumentError, match="JSON object"):
        load_document(path)
