from __future__ import annotations

from designrender.model import LayoutMode
from designrender.render_items import MaskedItem, NodeItem, build_render_items, render_items_for

from .helpers import auto_layout, design_node, rect


def _children(*specs):
    return [design_node(rect(node_id, **extra)) for node_id, extra in specs]


def test_absolute_parent_stacks_by_document_order():
    children = _children(("a", {}), ("b", {}), ("c", {}))

    items = build_render_items(children)

    assert [item.index for item in items] == [0, 1, 2]
    assert [dict(item.item_css)["z-index"] for item in items] == ["1", "2", "3"]


def test_auto_layout_parent_without_overlap_emits_no_z_index():
    children = _children(("a", {}), ("b", {}))

    items = build_render_items(children, parent_is_auto_layout=True, item_spacing=8)

    assert all(item.item_css == () for item in items)


def test_invisible_children_are_filtered_before_numbering():
    children = _children(("a", {}), ("hidden", {"visible": False}), ("c", {}))

    items = build_render_items(children)

    assert [item.index for item in items] == [0, 2]
    assert [dict(item.item_css)["z-index"] for item in items] == ["1", "2"]


def test_mask_groups_following_siblings_until_next_mask():
    children = _children(
        ("before", {}),
        ("mask-1", {"isMask": True}),
        ("inside-1", {}),
        ("inside-2", {}),
        ("mask-2", {"isMask": True}),
        ("inside-3", {}),
    )

    items = build_render_items(children)

    assert isinstance(items[0], NodeItem) and items[0].index == 0
    assert items[1] == MaskedItem(1, (2, 3), (("z-index", "2"),))
    assert items[2] == MaskedItem(4, (5,), (("z-index", "3"),))


def test_mask_group_with_nothing_visible_is_dropped():
    children = _children(("mask", {"isMask": True}), ("hidden", {"visible": False}))

    assert build_render_items(children) == []


def test_negative_spacing_overlaps_flow_items():
    children = _children(("a", {}), ("b", {}), ("c", {}))

    items = build_render_items(
        children,
        parent_is_auto_layout=True,
        parent_layout_mode=LayoutMode.HORIZONTAL,
        item_spacing=-10,
    )

    assert dict(items[0].item_css) == {"z-index": "1"}
    assert dict(items[1].item_css) == {"margin-left": "-10px", "z-index": "2"}
    assert dict(items[2].item_css)["margin-left"] == "-10px"


def test_negative_spacing_in_vertical_flow_uses_margin_top():
    children = _children(("a", {}), ("b", {}))

    items = build_render_items(
        children,
        parent_is_auto_layout=True,
        parent_layout_mode=LayoutMode.VERTICAL,
        item_spacing=-4,
    )

    assert dict(items[1].item_css)["margin-top"] == "-4px"


def test_reverse_z_index_puts_first_child_on_top():
    container = design_node(
        auto_layout("row", [rect("a"), rect("b"), rect("c")], itemReverseZIndex=True)
    )

    items = render_items_for(container)

    assert [dict(item.item_css)["z-index"] for item in items] == ["3", "2", "1"]


def test_render_items_never_touch_the_input_nodes():
    container = design_node(auto_layout("row", [rect("a"), rect("b")]))
    before = container.model_dump()

    render_items_for(container)

    assert container.model_dump() == before
