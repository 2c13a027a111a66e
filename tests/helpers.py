from __future__ import annotations

import copy
import json
import math
from pathlib import Path

from designrender import CompositionRender
from designrender.model import DesignNode


def translate(x: float = 0, y: float = 0) -> list:
    return [[1, 0, x], [0, 1, y]]


def rotate(degrees: float, x: float = 0, y: float = 0) -> list:
    rad = math.radians(degrees)
    cos, sin = math.cos(rad), math.sin(rad)
    return [[cos, -sin, x], [sin, cos, y]]


def color(r: float = 0, g: float = 0, b: float = 0, a: float = 1) -> dict:
    return {"r": r, "g": g, "b": b, "a": a}


def solid(r: float = 0, g: float = 0, b: float = 0, *, a: float = 1, opacity: float = 1) -> dict:
    return {"type": "SOLID", "color": color(r, g, b, a), "opacity": opacity}


def drop_shadow(x: float = 0, y: float = 4, radius: float = 8, *, a: float = 0.25, inner: bool = False) -> dict:
    return {
        "type": "INNER_SHADOW" if inner else "DROP_SHADOW",
        "radius": radius,
        "offset": {"x": x, "y": y},
        "color": color(0, 0, 0, a),
    }


def node(
    node_id: str,
    *,
    type: str = "FRAME",
    x: float = 0,
    y: float = 0,
    width: float = 100,
    height: float = 100,
    transform: list | None = None,
    children: list | None = None,
    style: dict | None = None,
    **extra,
) -> dict:
    data = {
        "id": node_id,
        "name": extra.pop("name", node_id),
        "type": type,
        "width": width,
        "height": height,
        "absoluteTransform": transform if transform is not None else translate(x, y),
        "renderBounds": {"x": x, "y": y, "width": width, "height": height},
        "style": style or {},
        "children": children or [],
    }
    data.update(extra)
    return data


def rect(node_id: str, *, fill: dict | None = None, **kwargs) -> dict:
    style = kwargs.pop("style", {})
    if fill is not None:
        style = {**style, "fills": [fill]}
    return node(node_id, type="RECTANGLE", style=style, **kwargs)


def text_node(node_id: str, characters: str = "Hello", *, family: str = "Inter", font_style: str = "Regular", **kwargs) -> dict:
    text = {
        "characters": characters,
        "segments": [
            {
                "start": 0,
                "end": len(characters),
                "fontSize": 16,
                "fontName": {"family": family, "style": font_style},
                "fills": [solid(0, 0, 0)],
            }
        ],
    }
    text.update(kwargs.pop("text", {}))
    return node(node_id, type="TEXT", text=text, **kwargs)


def auto_layout(node_id: str, children: list, *, mode: str = "HORIZONTAL", spacing: float = 0, **kwargs) -> dict:
    return node(
        node_id,
        children=children,
        layoutMode=mode,
        itemSpacing=spacing,
        **kwargs,
    )


def composition(children: list, *, width: float = 400, height: float = 300, origin: tuple = (0, 0)) -> dict:
    return {
        "name": "Test Composition",
        "absOrigin": {"x": origin[0], "y": origin[1]},
        "bounds": {"width": width, "height": height},
        "children": children,
    }


def design_node(data: dict) -> DesignNode:
    return DesignNode.model_validate(data)


def compile_dict(data: dict, **kwargs):
    return CompositionRender.from_dict(data, **kwargs).compile()


def render_dict(data: dict, **kwargs):
    return CompositionRender.from_dict(data, **kwargs).render()


def deep_copy(data: dict) -> dict:
    return copy.deepcopy(data)


def css_value(declarations, name: str) -> str | None:
    return dict(declarations).get(name)


def write_json(path: Path, data: dict) -> None:
    path.write_text(json.dumps(data), encoding="utf-8")
