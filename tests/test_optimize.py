from __future__ import annotations

from designrender.css import CssProps
from designrender.optimize import BoxContext, optimize_box_css


def test_relative_boxes_drop_zero_offsets():
    props = CssProps([("position", "relative"), ("left", "0px"), ("top", "0"), ("width", "10px")])

    out = optimize_box_css(props, BoxContext(position="relative"))

    assert out.serialize() == "position:relative;width:10px;"


def test_absolute_boxes_keep_zero_offsets():
    props = CssProps([("left", "0px"), ("top", "0px")])

    assert optimize_box_css(props, BoxContext(position="absolute")) == props


def test_transform_origin_needs_a_rotation_or_scale():
    props = CssProps([("transform-origin", "0 0"), ("transform", "matrix(1,0,0,1,0,0)")])

    assert "transform-origin" not in optimize_box_css(props, BoxContext())
    assert "transform-origin" in optimize_box_css(props, BoxContext(has_rotate_or_scale=True))


def test_flex_defaults_are_removed():
    props = CssProps(
        [
            ("display", "flex"),
            ("flex-direction", "row"),
            ("justify-content", "flex-start"),
            ("align-items", "stretch"),
            ("flex-wrap", "nowrap"),
            ("flex-grow", "0"),
        ]
    )

    out = optimize_box_css(props, BoxContext(display="flex", flex_direction="row"))

    assert out.serialize() == "display:flex;flex-grow:0;"


def test_wrapping_flex_container_keeps_flex_wrap():
    props = CssProps([("display", "flex"), ("flex-wrap", "wrap")])

    out = optimize_box_css(props, BoxContext(display="flex"))

    assert out.get("flex-wrap") == "wrap"


def test_text_keeps_flex_start_justification():
    props = CssProps([("display", "flex"), ("justify-content", "flex-start")])

    out = optimize_box_css(props, BoxContext(display="flex", is_text=True))

    assert out.get("justify-content") == "flex-start"
