"""
Ordered render items for the children of one container.

Consecutive siblings are grouped into plain node items or masked groups:
a mask-flagged child starts a group that covers every following sibling up
to the next mask. Invisible siblings are filtered here, so node compilation
never sees them. Items are computed into a side list and never stored on
the input nodes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple, Union

from .css import CssProps, Declarations, fmt_px
from .model import DesignNode, LayoutMode


@dataclass(frozen=True)
class NodeItem:
    index: int
    item_css: Declarations = ()


@dataclass(frozen=True)
class MaskedItem:
    mask_index: int
    node_indices: Tuple[int, ...]
    container_css: Declarations = ()


RenderItem = Union[NodeItem, MaskedItem]


@dataclass
class _Segment:
    mask_index: Optional[int] = None
    node_indices: List[int] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.mask_index is not None or bool(self.node_indices)


def _segments(children: Sequence[DesignNode]) -> List[_Segment]:
    segments: List[_Segment] = []
    current = _Segment()
    for i, child in enumerate(children):
        if child.is_mask:
            if current:
                segments.append(current)
            current = _Segment(mask_index=i)
        else:
            current.node_indices.append(i)
    if current:
        segments.append(current)
    return segments


def build_render_items(
    children: Sequence[DesignNode],
    *,
    parent_is_auto_layout: bool = False,
    parent_layout_mode: LayoutMode = LayoutMode.NONE,
    item_spacing: float = 0.0,
    reverse_z_index: bool = False,
) -> List[RenderItem]:
    """
    Group ``children`` and attach stacking and overlap CSS.

    ``z-index`` is emitted when the parent is not auto-layout, has negative
    spacing, or reverses z-order. Negative spacing in flow becomes a negative
    leading margin on every flow item after the first.
    """
    groups: List[Union[int, _Segment]] = []
    for segment in _segments(children):
        if segment.mask_index is not None:
            if any(children[i].visible for i in segment.node_indices):
                groups.append(segment)
        else:
            groups.extend(i for i in segment.node_indices if children[i].visible)

    total = len(groups)
    negative_gap = item_spacing < 0
    needs_z_index = not parent_is_auto_layout or negative_gap or reverse_z_index
    margin_prop = "margin-top" if parent_layout_mode == LayoutMode.VERTICAL else "margin-left"

    items: List[RenderItem] = []
    flow_index = 0
    for i, group in enumerate(groups):
        z_css = CssProps()
        if needs_z_index:
            z_css.set("z-index", total - i if reverse_z_index else i + 1)
        if isinstance(group, _Segment):
            items.append(
                MaskedItem(group.mask_index, tuple(group.node_indices), z_css.declarations())
            )
            continue
        item_css = CssProps()
        if negative_gap and parent_is_auto_layout and flow_index > 0:
            item_css.set(margin_prop, fmt_px(item_spacing))
        item_css.update(z_css)
        items.append(NodeItem(group, item_css.declarations()))
        flow_index += 1
    return items


def render_items_for(container: DesignNode) -> List[RenderItem]:
    return build_render_items(
        container.children,
        parent_is_auto_layout=container.is_auto_layout,
        parent_layout_mode=container.layout_mode,
        item_spacing=container.item_spacing,
        reverse_z_index=container.item_reverse_z_index,
    )


__all__ = [
    "MaskedItem",
    "NodeItem",
    "RenderItem",
    "build_render_items",
    "render_items_for",
]
