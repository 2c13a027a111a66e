"""
Layout calculation: map a node's absolute geometry and auto-layout hints
onto CSS positioning, sizing and flexbox properties.

Every node is either absolutely positioned inside its parent (left/top from
the local transform, ``transform-origin: top left``) or, when its parent is
an auto-layout container, a relative flex item at left/top 0 with its
transform applied around the box center. Flex items whose transform rotates,
reflects or non-uniformly scales them reserve their axis-aligned bounding
box in flow and render the true-size box inside a wrapper.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

from . import matrix as mx
from .css import CssProps, fmt_px
from .errors import (
    InvalidDimensionError,
    MissingRenderBoundsError,
    MissingTransformError,
    SingularTransformError,
)
from .model import AxisAlign, DesignNode, LayoutAlign, LayoutMode, LayoutWrap, SizingMode


class NodeKind(str, Enum):
    FRAME = "frame"
    TEXT = "text"
    SVG = "svg"
    SHAPE = "shape"


def classify_kind(node: DesignNode) -> NodeKind:
    """Vector content wins over text, text over containers, containers over shapes."""
    if node.svg_content or node.svg_id:
        return NodeKind.SVG
    if node.type == "TEXT" and node.text is not None:
        return NodeKind.TEXT
    if node.is_container_type:
        return NodeKind.FRAME
    return NodeKind.SHAPE


# ---------------------------------------------------------------------- #
# Alignment tables
# ---------------------------------------------------------------------- #
@dataclass(frozen=True)
class LayoutAxes:
    main: str
    cross: str


HORIZONTAL_AXES = LayoutAxes(main="width", cross="height")
VERTICAL_AXES = LayoutAxes(main="height", cross="width")

JUSTIFY_CONTENT = {
    AxisAlign.MIN: "flex-start",
    AxisAlign.CENTER: "center",
    AxisAlign.MAX: "flex-end",
    AxisAlign.SPACE_BETWEEN: "space-between",
}

ALIGN_ITEMS = {
    AxisAlign.MIN: "flex-start",
    AxisAlign.CENTER: "center",
    AxisAlign.MAX: "flex-end",
    AxisAlign.BASELINE: "baseline",
    AxisAlign.STRETCH: "stretch",
}

ALIGN_SELF = {
    LayoutAlign.INHERIT: "auto",
    LayoutAlign.MIN: "flex-start",
    LayoutAlign.CENTER: "center",
    LayoutAlign.MAX: "flex-end",
    LayoutAlign.STRETCH: "stretch",
}


def layout_axes(mode: LayoutMode) -> LayoutAxes:
    return VERTICAL_AXES if mode == LayoutMode.VERTICAL else HORIZONTAL_AXES


def is_stretch(layout_align: LayoutAlign, parent_align_items: Optional[str]) -> bool:
    if layout_align == LayoutAlign.STRETCH:
        return True
    return layout_align == LayoutAlign.INHERIT and parent_align_items == "stretch"


# ---------------------------------------------------------------------- #
# Dimensions
# ---------------------------------------------------------------------- #
_UNIT_RE = re.compile(r"[a-zA-Z%]")


def is_css_unit(value: Any) -> bool:
    """True for symbolic CSS lengths such as ``100%``, ``50vw`` or ``auto``."""
    return isinstance(value, str) and value.strip() != "0" and bool(_UNIT_RE.search(value))


def node_size(node: DesignNode) -> Tuple[float, float]:
    """Declared size, falling back to render bounds; fails when neither is numeric."""
    rb = node.render_bounds
    sizes = []
    for axis in ("width", "height"):
        declared = getattr(node, axis)
        if isinstance(declared, (int, float)) and math.isfinite(declared):
            sizes.append(float(declared))
        elif rb is not None:
            sizes.append(float(getattr(rb, axis)))
        else:
            raise InvalidDimensionError(f"invalid {axis}: {declared!r}", node_id=node.id)
    return sizes[0], sizes[1]


# ---------------------------------------------------------------------- #
# Layout records
# ---------------------------------------------------------------------- #
@dataclass(frozen=True)
class Transform2x2:
    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 1.0

    @property
    def is_identity(self) -> bool:
        return mx.is_identity_linear(self.a, self.b, self.c, self.d)

    @property
    def has_rotation_or_scale(self) -> bool:
        return mx.has_rotation(((self.a, self.c, 0), (self.b, self.d, 0))) or mx.has_scale(
            self.a, self.b, self.c, self.d
        )

    def css(self) -> str:
        return mx.to_css_matrix(self.a, self.b, self.c, self.d)


IDENTITY_2X2 = Transform2x2()


@dataclass(frozen=True)
class Padding:
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0
    left: float = 0.0

    def css(self) -> str:
        return " ".join(fmt_px(v) for v in (self.top, self.right, self.bottom, self.left))


@dataclass(frozen=True)
class WrapperInfo:
    content_width: float
    content_height: float
    center_strategy: str = "translate"


@dataclass(frozen=True)
class FlexFlags:
    """How the parent auto-layout container treats a flow child."""

    parent_axes: LayoutAxes = HORIZONTAL_AXES
    parent_align_items: Optional[str] = None
    parent_wrap: bool = False


@dataclass(frozen=True)
class LayoutInfo:
    display: str = "block"
    position: str = "absolute"
    left: float = 0.0
    top: float = 0.0
    width: float = 0.0
    height: float = 0.0
    css_width: Optional[str] = None
    css_height: Optional[str] = None
    origin: str = "top left"
    transform: Transform2x2 = field(default_factory=Transform2x2)

    flex_direction: Optional[str] = None
    justify_content: Optional[str] = None
    align_items: Optional[str] = None
    flex_wrap: Optional[str] = None
    gap: Optional[float] = None
    row_gap: Optional[float] = None
    column_gap: Optional[float] = None
    padding: Optional[Padding] = None
    box_sizing: Optional[str] = None
    overflow: Optional[str] = None

    flex_grow: float = 0.0
    flex_shrink: Optional[float] = None
    flex_basis: Optional[Union[float, str]] = None
    align_self: Optional[str] = None

    wrapper: Optional[WrapperInfo] = None

    @property
    def is_flex(self) -> bool:
        return self.display == "flex"

    @property
    def is_relative(self) -> bool:
        return self.position == "relative"

    @property
    def width_css(self) -> str:
        return self.css_width or fmt_px(self.width)

    @property
    def height_css(self) -> str:
        return self.css_height or fmt_px(self.height)

    def container_css(self) -> CssProps:
        """Flex container declarations, in a fixed order."""
        props = CssProps()
        if self.is_flex:
            props.set("display", "flex")
            if self.flex_direction:
                props.set("flex-direction", self.flex_direction)
            if self.justify_content:
                props.set("justify-content", self.justify_content)
            if self.align_items:
                props.set("align-items", self.align_items)
            if self.flex_wrap:
                props.set("flex-wrap", self.flex_wrap)
            if self.gap is not None:
                props.set("gap", fmt_px(self.gap))
            if self.row_gap is not None:
                props.set("row-gap", fmt_px(self.row_gap))
            if self.column_gap is not None:
                props.set("column-gap", fmt_px(self.column_gap))
        if self.padding is not None:
            props.set("padding", self.padding.css())
        if self.box_sizing:
            props.set("box-sizing", self.box_sizing)
        if self.overflow:
            props.set("overflow", self.overflow)
        return props

    def flex_item_css(self) -> CssProps:
        props = CssProps()
        if self.flex_grow > 0:
            props.set("flex-grow", _num(self.flex_grow))
            if self.flex_shrink is not None:
                props.set("flex-shrink", _num(self.flex_shrink))
            if self.flex_basis is not None:
                basis = self.flex_basis
                props.set("flex-basis", basis if isinstance(basis, str) else fmt_px(basis))
        if self.align_self and self.align_self != "auto":
            props.set("align-self", self.align_self)
        return props


def _num(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


# ---------------------------------------------------------------------- #
# Calculation
# ---------------------------------------------------------------------- #
def _vector_geometry(node: DesignNode, parent_abs: mx.Matrix) -> Dict[str, Any]:
    """Geometry for baked vector content, taken from its render bounds."""
    rb = node.render_bounds
    if rb is None:
        raise MissingRenderBoundsError("vector content requires render bounds", node_id=node.id)
    arb = node.absolute_render_bounds
    if arb is None:
        return {"left": rb.x, "top": rb.y, "width": rb.width, "height": rb.height, "transform": IDENTITY_2X2}
    inv_parent = mx.invert(parent_abs)
    if inv_parent is None:
        raise SingularTransformError("parent transform is not invertible", node_id=node.id)
    left, top = mx.apply(inv_parent, arb.x, arb.y)
    a, b, c, d = mx.linear_part(inv_parent)
    # Baked SVGs already contain the parent's rotation/scale; cancel it.
    transform = IDENTITY_2X2 if mx.is_identity_linear(a, b, c, d) else Transform2x2(a, b, c, d)
    return {"left": left, "top": top, "width": rb.width, "height": rb.height, "transform": transform}


def _needs_reservation(local: mx.Matrix) -> bool:
    if mx.has_rotation(local) or mx.has_reflection(local):
        return True
    a, b, c, d = mx.linear_part(local)
    return abs(math.hypot(a, b) - math.hypot(c, d)) > 1e-6


def _flex_core(node: DesignNode, kind: NodeKind, flags: FlexFlags, out_main: float) -> Dict[str, Any]:
    props: Dict[str, Any] = {"flex_grow": node.layout_grow}
    if node.layout_grow > 0:
        props["flex_shrink"] = 1.0
        props["flex_basis"] = "auto" if flags.parent_wrap or kind == NodeKind.TEXT else out_main
    props["align_self"] = ALIGN_SELF.get(node.layout_align)
    return props


def _apply_stretch(node: DesignNode, kind: NodeKind, flags: FlexFlags, fields: Dict[str, Any]) -> None:
    if not is_stretch(node.layout_align, flags.parent_align_items):
        return
    cross = flags.parent_axes.cross
    if kind == NodeKind.TEXT:
        auto_resize = (node.text.text_auto_resize or "").upper() if node.text else ""
        if cross == "width" and auto_resize in ("WIDTH", "WIDTH_AND_HEIGHT"):
            fields["css_width"] = "auto"
        elif cross == "height" and auto_resize in ("HEIGHT", "WIDTH_AND_HEIGHT"):
            fields["css_height"] = "auto"
        return
    fields["css_" + cross] = "auto"


def _apply_container(node: DesignNode, fields: Dict[str, Any]) -> None:
    has_wrapper = fields.get("wrapper") is not None
    if node.is_auto_layout:
        horizontal = node.layout_mode == LayoutMode.HORIZONTAL
        fields["display"] = "flex"
        fields["flex_direction"] = "row" if horizontal else "column"
        justify = JUSTIFY_CONTENT.get(node.primary_axis_align_items)
        fields["justify_content"] = justify
        if justify != "space-between" and node.item_spacing > 0:
            fields["gap"] = node.item_spacing
        if node.layout_wrap == LayoutWrap.WRAP:
            fields["flex_wrap"] = "wrap"
            if node.counter_axis_spacing > 0:
                fields["row_gap" if horizontal else "column_gap"] = node.counter_axis_spacing
        else:
            fields["flex_wrap"] = "nowrap"
        fields["align_items"] = ALIGN_ITEMS.get(node.counter_axis_align_items)

        has_flow_children = any(
            ch.visible and not ch.is_absolute_child for ch in node.children
        )
        if has_flow_children and not has_wrapper:
            axes = layout_axes(node.layout_mode)
            for axis, mode in (
                (axes.main, node.primary_axis_sizing_mode),
                (axes.cross, node.counter_axis_sizing_mode),
            ):
                key = "css_" + axis
                if mode == SizingMode.AUTO and not is_css_unit(fields.get(key)):
                    fields[key] = "auto"
    else:
        fields["display"] = "block"

    pad = (node.padding_top, node.padding_right, node.padding_bottom, node.padding_left)
    if any(pad):
        fields["padding"] = Padding(*pad)
    if node.strokes_included_in_layout:
        fields["box_sizing"] = "border-box"
    if node.clips_content:
        fields["overflow"] = "hidden"

    wrapper = fields.get("wrapper")
    if wrapper is not None:
        transform = fields.get("transform", IDENTITY_2X2)
        strategy = "inset" if fields["display"] == "flex" and transform.is_identity else "translate"
        fields["wrapper"] = WrapperInfo(wrapper.content_width, wrapper.content_height, strategy)


def compute_layout(
    node: DesignNode,
    parent_abs: mx.Matrix,
    flex: Optional[FlexFlags] = None,
) -> Tuple[NodeKind, LayoutInfo]:
    """
    Compute the kind and LayoutInfo of ``node`` relative to its parent.

    ``flex`` is given when the parent is an auto-layout container and the
    node takes part in its flow.
    """
    kind = classify_kind(node)
    if node.absolute_transform is None:
        raise MissingTransformError("node has no absolute transform", node_id=node.id)
    inv_parent = mx.invert(parent_abs)
    if inv_parent is None:
        raise SingularTransformError("parent transform is not invertible", node_id=node.id)
    local = mx.compose(inv_parent, mx.as_matrix(node.absolute_transform))

    if kind == NodeKind.SVG:
        fields = _vector_geometry(node, parent_abs)
    else:
        width, height = node_size(node)
        a, b, c, d = mx.linear_part(local)
        e, f = mx.translation_part(local)
        fields = {"left": e, "top": f, "width": width, "height": height, "transform": Transform2x2(a, b, c, d)}

    if flex is not None:
        w, h = node_size(node)
        fields.update(position="relative", left=0.0, top=0.0, origin="center")
        if kind == NodeKind.SVG:
            base_w, base_h = fields["width"], fields["height"]
            fields["width"], fields["height"] = w, h
            if abs(base_w - w) > 1e-2 or abs(base_h - h) > 1e-2:
                fields["wrapper"] = WrapperInfo(base_w, base_h)
        else:
            reserve_w, reserve_h = w, h
            if _needs_reservation(local):
                a, b, c, d = mx.linear_part(local)
                reserve_w = abs(a) * w + abs(c) * h
                reserve_h = abs(b) * w + abs(d) * h
            fields["width"], fields["height"] = reserve_w, reserve_h
            if reserve_w != w or reserve_h != h:
                fields["wrapper"] = WrapperInfo(w, h)
        fields.update(_flex_core(node, kind, flex, fields[flex.parent_axes.main]))
        _apply_stretch(node, kind, flex, fields)

    if isinstance(node.width, str) and not fields.get("css_width"):
        fields["css_width"] = node.width
    if isinstance(node.height, str) and not fields.get("css_height"):
        fields["css_height"] = node.height

    if kind == NodeKind.FRAME:
        _apply_container(node, fields)

    return kind, LayoutInfo(**fields)


__all__ = [
    "ALIGN_ITEMS",
    "ALIGN_SELF",
    "FlexFlags",
    "HORIZONTAL_AXES",
    "IDENTITY_2X2",
    "JUSTIFY_CONTENT",
    "LayoutAxes",
    "LayoutInfo",
    "NodeKind",
    "Padding",
    "Transform2x2",
    "VERTICAL_AXES",
    "WrapperInfo",
    "classify_kind",
    "compute_layout",
    "is_css_unit",
    "is_stretch",
    "layout_axes",
    "node_size",
]
