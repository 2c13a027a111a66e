from __future__ import annotations

import pytest

from designrender import matrix as mx
from designrender.errors import InvalidDimensionError, MissingRenderBoundsError, MissingTransformError, SingularTransformError
from designrender.layout import FlexFlags, NodeKind, classify_kind, compute_layout, is_css_unit

from .helpers import auto_layout, compile_dict, composition, design_node, node, rect, rotate, text_node


def three_children() -> list:
    return [rect(f"c{i}", x=i * 60, width=50, height=50) for i in range(3)]


def test_space_between_container_has_no_gap():
    row = auto_layout("row", three_children(), spacing=8, width=300, height=50, primaryAxisAlignItems="SPACE_BETWEEN")

    container = compile_dict(composition([row])).nodes[0]

    assert container.layout.justify_content == "space-between"
    assert container.layout.gap is None
    assert "gap" not in container.layout.container_css()


def test_min_aligned_container_emits_gap():
    row = auto_layout("row", three_children(), spacing=8, width=300, height=50, primaryAxisAlignItems="MIN")

    container = compile_dict(composition([row])).nodes[0]

    assert container.layout.gap == 8
    assert container.layout.container_css().get("gap") == "8px"
    assert container.layout.container_css().get("display") == "flex"
    assert container.layout.flex_direction == "row"


def test_rotated_flex_item_reserves_bounding_box_and_gets_wrapper():
    child = rect("rot", width=100, height=50, transform=rotate(45, 10, 10))
    row = auto_layout("row", [child], width=300, height=200)

    item = compile_dict(composition([row])).nodes[0].children[0]

    assert item.layout.position == "relative"
    assert item.layout.left == 0 and item.layout.top == 0
    assert item.layout.width == pytest.approx(106.07, abs=0.01)
    assert item.layout.height == pytest.approx(106.07, abs=0.01)
    assert item.layout.wrapper is not None
    assert item.layout.wrapper.content_width == 100
    assert item.layout.wrapper.content_height == 50
    assert item.layout.wrapper.center_strategy == "translate"
    assert item.layout.origin == "center"


def test_unrotated_flex_item_has_no_wrapper():
    row = auto_layout("row", three_children(), width=300, height=50)

    items = compile_dict(composition([row])).nodes[0].children

    assert [i.layout.wrapper for i in items] == [None, None, None]
    assert all(i.layout.position == "relative" for i in items)


def test_absolute_child_is_positioned_relative_to_parent():
    child = rect("child", x=30, y=50, width=20, height=20)
    parent = node("parent", x=10, y=20, width=200, height=200, children=[child])

    ir_child = compile_dict(composition([parent])).nodes[0].children[0]

    assert ir_child.layout.position == "absolute"
    assert (ir_child.layout.left, ir_child.layout.top) == (20, 30)
    assert ir_child.layout.origin == "top left"
    assert ir_child.layout.transform.is_identity


def test_composition_origin_is_the_root_frame():
    child = rect("child", x=130, y=70, width=20, height=20)

    ir_child = compile_dict(composition([child], origin=(100, 50))).nodes[0]

    assert (ir_child.layout.left, ir_child.layout.top) == (30, 20)


def test_absolute_positioned_child_of_auto_layout_stays_out_of_flow():
    floating = rect("float", x=5, y=5, width=10, height=10, layoutPositioning="ABSOLUTE")
    row = auto_layout("row", [rect("a", width=20, height=20), floating], width=100, height=40)

    kids = compile_dict(composition([row])).nodes[0].children

    assert kids[0].layout.position == "relative"
    assert kids[1].layout.position == "absolute"
    assert (kids[1].layout.left, kids[1].layout.top) == (5, 5)


def test_hug_contents_container_gets_auto_size():
    row = auto_layout(
        "row",
        three_children(),
        width=170,
        height=50,
        primaryAxisSizingMode="AUTO",
    )

    layout = compile_dict(composition([row])).nodes[0].layout

    assert layout.css_width == "auto"
    assert layout.css_height is None
    assert layout.width_css == "auto"
    assert layout.height_css == "50px"


def test_stretch_child_uses_auto_cross_size():
    column = auto_layout(
        "col",
        [rect("bar", width=80, height=10, layoutAlign="STRETCH")],
        mode="VERTICAL",
        width=100,
        height=100,
    )

    bar = compile_dict(composition([column])).nodes[0].children[0]

    assert bar.layout.css_width == "auto"
    assert bar.layout.align_self == "stretch"


def test_text_auto_resize_wins_over_stretch():
    label = text_node("label", width=80, height=20, layoutAlign="STRETCH", text={"textAutoResize": "HEIGHT"})
    column = auto_layout("col", [label], mode="VERTICAL", width=100, height=100)

    ir_label = compile_dict(composition([column])).nodes[0].children[0]

    assert ir_label.kind == NodeKind.TEXT
    assert ir_label.layout.css_width is None
    assert ir_label.layout.width == 80


def test_grow_child_gets_flex_item_css():
    row = auto_layout("row", [rect("grow", width=40, height=20, layoutGrow=1)], width=200, height=20)

    item = compile_dict(composition([row])).nodes[0].children[0]
    css = item.layout.flex_item_css()

    assert css.get("flex-grow") == "1"
    assert css.get("flex-shrink") == "1"
    assert css.get("flex-basis") == "40px"


def test_wrap_container_sets_counter_axis_gap():
    row = auto_layout(
        "row",
        three_children(),
        spacing=4,
        width=120,
        height=200,
        layoutWrap="WRAP",
        counterAxisSpacing=12,
    )

    layout = compile_dict(composition([row])).nodes[0].layout

    assert layout.flex_wrap == "wrap"
    assert layout.row_gap == 12
    assert layout.container_css().get("row-gap") == "12px"


def test_container_padding_clip_and_border_box():
    frame = node(
        "frame",
        width=100,
        height=100,
        paddingTop=4,
        paddingLeft=8,
        clipsContent=True,
        strokesIncludedInLayout=True,
    )

    css = compile_dict(composition([frame])).nodes[0].layout.container_css()

    assert css.get("padding") == "4px 0px 0px 8px"
    assert css.get("overflow") == "hidden"
    assert css.get("box-sizing") == "border-box"


def test_classify_kind_prefers_vector_content():
    assert classify_kind(design_node(node("v", type="TEXT", svgContent="<svg/>"))) == NodeKind.SVG
    assert classify_kind(design_node(text_node("t"))) == NodeKind.TEXT
    assert classify_kind(design_node(node("g", type="GROUP"))) == NodeKind.FRAME
    assert classify_kind(design_node(rect("r"))) == NodeKind.SHAPE


def test_missing_transform_is_a_contract_violation():
    data = rect("r")
    del data["absoluteTransform"]

    with pytest.raises(MissingTransformError) as exc:
        compute_layout(design_node(data), mx.IDENTITY)

    assert exc.value.node_id == "r"
    assert "(node r)" in str(exc.value)


def test_singular_parent_transform_is_a_contract_violation():
    singular = mx.as_matrix([[2, 4, 0], [1, 2, 0]])

    with pytest.raises(SingularTransformError) as exc:
        compute_layout(design_node(rect("r")), singular)

    assert exc.value.node_id == "r"


def test_vector_without_render_bounds_is_a_contract_violation():
    data = node("v", type="VECTOR", x=5, y=5, width=24, height=24, svgContent="<svg/>")
    data.pop("renderBounds")

    with pytest.raises(MissingRenderBoundsError) as exc:
        compute_layout(design_node(data), mx.translation(5, 5), FlexFlags())

    assert exc.value.node_id == "v"


def test_symbolic_size_without_render_bounds_is_invalid():
    data = rect("r", width="100%")
    data.pop("renderBounds")

    with pytest.raises(InvalidDimensionError):
        compute_layout(design_node(data), mx.IDENTITY)


def test_symbolic_size_is_kept_as_css_override():
    data = rect("r", width="100%", height=40, renderBounds={"x": 0, "y": 0, "width": 100, "height": 40})

    kind, layout = compute_layout(design_node(data), mx.IDENTITY)

    assert kind == NodeKind.SHAPE
    assert layout.css_width == "100%"
    assert layout.width == 100
    assert layout.height_css == "40px"


def test_flex_flags_turn_node_into_relative_item():
    _, layout = compute_layout(design_node(rect("r", x=40, y=40, width=10, height=10)), mx.IDENTITY, FlexFlags())

    assert layout.is_relative
    assert (layout.left, layout.top) == (0, 0)


def test_is_css_unit():
    assert is_css_unit("100%")
    assert is_css_unit("auto")
    assert not is_css_unit("0")
    assert not is_css_unit(12)
