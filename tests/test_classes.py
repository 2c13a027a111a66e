from __future__ import annotations

from designrender.classes import (
    SharedClassTable,
    SizeFrequency,
    UtilityClassSet,
    escape_class_selector,
    layout_utility_classes,
    sanitize_class_name,
    semantic_class_name,
    shared_class_name,
    utility_rule,
)
from designrender.css import CssProps
from designrender.layout import LayoutInfo


def test_sanitize_class_name():
    assert sanitize_class_name("Primary Button") == "primary-button"
    assert sanitize_class_name("Card / Header (dark)") == "card-header-dark"
    assert sanitize_class_name("Price: $9.99!") == "price-9-99"
    assert len(sanitize_class_name("x" * 80)) == 50


def test_semantic_class_name_falls_back_for_generic_names():
    assert semantic_class_name("Frame 12", "frame") == "frame"
    assert semantic_class_name("Rectangle", "shape") == "shape"
    assert semantic_class_name("42", "text") == "text"
    assert semantic_class_name("A", "text") == "text"
    assert semantic_class_name("Hero Title", "text") == "hero-title"
    assert semantic_class_name("2 Columns", "frame") == "frame-2-columns"


def test_escape_class_selector():
    assert escape_class_selector("gap-[8px]") == "gap-\\[8px\\]"
    assert escape_class_selector("w-[10.5px]") == "w-\\[10\\.5px\\]"


def test_layout_utility_classes_split_known_declarations():
    props = CssProps(
        [
            ("display", "flex"),
            ("flex-direction", "column"),
            ("gap", "8px"),
            ("align-items", "center"),
            ("padding", "4px"),
        ]
    )

    classes, remaining = layout_utility_classes(props)

    assert classes == ["flex", "flex-col", "gap-[8px]", "items-center"]
    assert remaining.serialize() == "padding:4px;"


def test_layout_utility_classes_leave_non_px_gaps_inline():
    classes, remaining = layout_utility_classes(CssProps([("gap", "1em")]))

    assert classes == []
    assert remaining.get("gap") == "1em"


def test_utility_rule():
    assert utility_rule("flex") == ".flex{display:flex;}"
    assert utility_rule("gap-y-[12px]") == ".gap-y-\\[12px\\]{row-gap:12px;}"
    assert utility_rule("w-[100px]", "[data-design-render]") == "[data-design-render] .w-\\[100px\\]{width:100px;}"
    assert utility_rule("unknown") is None


def test_utility_class_set_emits_only_used_classes_in_stable_order():
    used = UtilityClassSet()
    used.add(["w-[20px]", "items-center", "flex"])
    used.add(["flex", "gap-[4px]"])

    assert len(used) == 4
    assert "flex" in used and "flex-col" not in used
    assert used.css().splitlines() == [
        ".flex{display:flex;}",
        ".items-center{align-items:center;}",
        ".gap-\\[4px\\]{gap:4px;}",
        ".w-\\[20px\\]{width:20px;}",
    ]


def test_size_frequency_only_classes_recurring_sizes():
    common = LayoutInfo(width=100, height=40)
    unique = LayoutInfo(width=100, height=41)
    symbolic = LayoutInfo(width=100, height=40, css_width="50%")

    sizes = SizeFrequency.from_layouts([common, unique, symbolic])

    assert sizes.width_class(common) == "w-[100px]"
    assert sizes.height_class(common) == "h-[40px]"
    assert sizes.height_class(unique) is None
    assert sizes.width_class(symbolic) is None


def test_shared_class_table_extracts_repeated_whitelisted_declarations():
    box = CssProps([("width", "10px"), ("background", "red"), ("border-radius", "4px")])
    other = CssProps([("border-radius", "4px"), ("background", "red"), ("left", "5px")])
    once = CssProps([("background", "blue")])

    table = SharedClassTable.build([box, other, once], scope="[data-design-render]")

    assert len(table) == 1
    name, inline = table.apply(other)
    assert name == shared_class_name("background:red;border-radius:4px")
    assert name.startswith("sc-") and len(name) == 11
    assert inline.serialize() == "left:5px;"
    assert table.apply(once) == (None, once)
    assert table.css() == f"[data-design-render] .{name}{{background:red;border-radius:4px;}}"


def test_shared_class_threshold():
    box = CssProps([("color", "red")])

    assert len(SharedClassTable.build([box, box], threshold=3)) == 0
    assert len(SharedClassTable.build([box, box, box], threshold=3)) == 1


def test_boxes_without_whitelisted_declarations_are_ignored():
    table = SharedClassTable.build([CssProps([("width", "1px")])] * 3)

    assert len(table) == 0
