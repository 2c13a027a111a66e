from __future__ import annotations

import pytest
from pydantic import ValidationError

from designrender.model import CompositionInput, DesignNode, GradientPaint, ImagePaint, LayoutMode, SolidPaint

from .helpers import auto_layout, composition, design_node, node, rect, solid


def test_camel_case_input_maps_to_snake_case_fields():
    node = design_node(auto_layout("row", [rect("a")], spacing=6, paddingLeft=3))

    assert node.layout_mode == LayoutMode.HORIZONTAL
    assert node.item_spacing == 6
    assert node.padding_left == 3
    assert node.render_bounds.width == 100


def test_fields_can_be_populated_by_name():
    node = DesignNode(id="n", layout_mode="VERTICAL", item_spacing=4)

    assert node.is_auto_layout
    assert node.item_spacing == 4


def test_paints_are_discriminated_by_type():
    node = design_node(
        rect(
            "a",
            style={
                "fills": [
                    solid(1, 0, 0),
                    {"type": "IMAGE", "imageId": "img", "scaleMode": "FIT"},
                    {"type": "GRADIENT_RADIAL", "gradientStops": []},
                ]
            },
        )
    )

    assert [type(p) for p in node.style.fills] == [SolidPaint, ImagePaint, GradientPaint]


def test_symbolic_sizes_are_kept_as_strings():
    data = rect("a")
    data["width"] = "100%"

    assert design_node(data).width == "100%"


def test_transform_must_be_finite_2x3():
    data = rect("a")
    data["absoluteTransform"] = [[1, 0, 0], [0, 1]]

    with pytest.raises(ValidationError):
        design_node(data)

    data["absoluteTransform"] = [[1, 0, float("nan")], [0, 1, 0]]
    with pytest.raises(ValidationError):
        design_node(data)


def test_child_ids_must_be_unique_within_a_parent():
    with pytest.raises(ValidationError, match="unique"):
        design_node(auto_layout("row", [rect("a"), rect("a")]))

    with pytest.raises(ValidationError, match="unique"):
        CompositionInput.model_validate(composition([rect("a"), rect("a")]))


def test_models_are_frozen():
    node = design_node(rect("a"))

    with pytest.raises(ValidationError):
        node.name = "renamed"


@pytest.mark.parametrize("type_", ["frame", "Rectangle", ""])
def test_node_type_must_be_upper_case(type_):
    with pytest.raises(ValidationError, match="upper-case"):
        design_node(node("a", type=type_))


def test_upper_case_node_type_is_kept_verbatim():
    assert design_node(node("a", type="ELLIPSE")).type == "ELLIPSE"
