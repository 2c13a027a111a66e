"""
Render-IR: the immutable tree produced by one top-down walk over a
Composition.

``composition_to_ir`` resolves layout and style for every visible node,
groups masked siblings into synthetic containers and threads inherited
shadows from bare shadow holders down to the nodes that paint them.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Tuple, Union

from . import matrix as mx
from .context import CompileContext
from .css import CssProps, Declarations
from .effects import EFFECTS_INHERIT, EFFECTS_SELF, Shadow, effects_mode, parse_effects
from .errors import InvisibleNodeError, MissingOriginError, MissingRenderBoundsError, MissingTransformError, SingularTransformError
from .fonts import FontInfo, FontUrlProvider, collect_fonts, provider_urls
from .layout import (
    ALIGN_ITEMS,
    FlexFlags,
    LayoutInfo,
    NodeKind,
    Transform2x2,
    compute_layout,
    layout_axes,
)
from .model import CompositionInput, DesignNode, ImagePaint, LayoutWrap, Rect, Style
from .node_style import collect_box_css
from .paint import mask_image_css, radius_css
from .render_items import MaskedItem, NodeItem, render_items_for
from .text import render_segments

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------- #
# IR types
# ---------------------------------------------------------------------- #
@dataclass(frozen=True)
class TextMarkup:
    html: str


@dataclass(frozen=True)
class InlineSvg:
    svg: str


@dataclass(frozen=True)
class ChildNodes:
    nodes: Tuple["RenderNodeIR", ...] = ()


@dataclass(frozen=True)
class NoContent:
    pass


Content = Union[TextMarkup, InlineSvg, ChildNodes, NoContent]


@dataclass(frozen=True)
class StyleInfo:
    declarations: Declarations = ()
    raw: Optional[Style] = None

    def css(self) -> CssProps:
        return CssProps(self.declarations)

    @property
    def has_stroke(self) -> bool:
        return bool(self.raw is not None and self.raw.strokes)


@dataclass(frozen=True)
class RenderNodeIR:
    id: str
    kind: NodeKind
    name: str
    type: str
    layout: LayoutInfo
    style: StyleInfo
    content: Content = field(default_factory=NoContent)
    is_mask: bool = False
    inherited_shadows: Tuple[Shadow, ...] = ()
    effects_mode: str = EFFECTS_SELF
    svg_file: Optional[str] = None
    svg_content: Optional[str] = None

    @property
    def children(self) -> Tuple["RenderNodeIR", ...]:
        if isinstance(self.content, ChildNodes):
            return self.content.nodes
        return ()

    def walk(self) -> Iterator["RenderNodeIR"]:
        """This node and its descendants, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass(frozen=True)
class FontMeta:
    google_fonts_url: Optional[str] = None
    stylesheet_urls: Tuple[str, ...] = ()
    fonts: Tuple[FontInfo, ...] = ()


@dataclass(frozen=True)
class AssetMeta:
    images: Tuple[str, ...] = ()
    svgs: Tuple[str, ...] = ()


@dataclass(frozen=True)
class CompiledComposition:
    nodes: Tuple[RenderNodeIR, ...]
    css_rules: str
    render_union: Rect
    font_meta: FontMeta
    asset_meta: AssetMeta
    bounds: Optional[Rect] = None

    def walk(self) -> Iterator[RenderNodeIR]:
        for node in self.nodes:
            yield from node.walk()


# ---------------------------------------------------------------------- #
# Node compilation
# ---------------------------------------------------------------------- #
_UNSAFE_FILE_CHARS = re.compile(r"[^a-zA-Z0-9_-]")


def svg_file_name(svg_id: Optional[str]) -> Optional[str]:
    if not svg_id:
        return None
    return _UNSAFE_FILE_CHARS.sub("_", svg_id) + ".svg"


def _parent_frame(node: DesignNode) -> mx.Matrix:
    if node.absolute_transform is None:
        raise MissingTransformError("container has no absolute transform", node_id=node.id)
    return mx.as_matrix(node.absolute_transform)


def _flex_flags(container: DesignNode) -> FlexFlags:
    return FlexFlags(
        parent_axes=layout_axes(container.layout_mode),
        parent_align_items=ALIGN_ITEMS.get(container.counter_axis_align_items),
        parent_wrap=container.layout_wrap == LayoutWrap.WRAP,
    )


def node_to_ir(
    node: DesignNode,
    parent_abs: mx.Matrix,
    ctx: CompileContext,
    inherited: Sequence[Shadow] = (),
    flex: Optional[FlexFlags] = None,
    item_css: Declarations = (),
) -> RenderNodeIR:
    """Compile one visible node and its subtree."""
    if not node.visible:
        raise InvisibleNodeError("invisible node reached node compilation", node_id=node.id)

    kind, layout = compute_layout(node, parent_abs, flex)
    mode = effects_mode(node)
    box = collect_box_css(node, kind, ctx, inherited=inherited, mode=mode)
    css = CssProps(item_css).update(box.css)

    if kind == NodeKind.TEXT and node.text is not None:
        content: Content = TextMarkup(render_segments(node.text, wrap=box.text_uses_flex))
    elif kind == NodeKind.SVG:
        content = InlineSvg(node.svg_content) if node.svg_content else NoContent()
    elif kind == NodeKind.FRAME:
        content = _children_content(node, mode, inherited, ctx)
    else:
        content = NoContent()

    return RenderNodeIR(
        id=node.id,
        kind=kind,
        name=node.name or f"Unnamed {kind.value}",
        type=node.type,
        layout=layout,
        style=StyleInfo(css.declarations(), node.style),
        content=content,
        is_mask=node.is_mask,
        inherited_shadows=tuple(inherited),
        effects_mode=mode,
        svg_file=svg_file_name(node.svg_id) if kind == NodeKind.SVG else None,
        svg_content=node.svg_content if kind == NodeKind.SVG else None,
    )


def _children_content(
    node: DesignNode,
    mode: str,
    inherited: Sequence[Shadow],
    ctx: CompileContext,
) -> ChildNodes:
    if not node.children:
        return ChildNodes()
    parent_abs = _parent_frame(node)
    inv_parent = mx.invert(parent_abs)
    if inv_parent is None:
        raise SingularTransformError("container transform is not invertible", node_id=node.id)

    # Only a bare shadow holder passes shadows further down.
    if mode == EFFECTS_INHERIT:
        next_inherited: Tuple[Shadow, ...] = tuple(inherited) + parse_effects(node.style).shadows
    else:
        next_inherited = ()

    flags = _flex_flags(node) if node.is_auto_layout else None
    children = node.children
    kids: List[RenderNodeIR] = []
    for item in render_items_for(node):
        if isinstance(item, NodeItem):
            child = children[item.index]
            flex = flags if flags is not None and not child.is_absolute_child else None
            kids.append(node_to_ir(child, parent_abs, ctx, next_inherited, flex, item.item_css))
        else:
            group = _masked_group(node, item, inv_parent, ctx, next_inherited)
            if group is not None:
                kids.append(group)
    return ChildNodes(tuple(kids))


def _masked_group(
    parent: DesignNode,
    item: MaskedItem,
    inv_parent: mx.Matrix,
    ctx: CompileContext,
    inherited: Sequence[Shadow],
) -> Optional[RenderNodeIR]:
    """
    A synthetic clipping container for a mask and the siblings it covers.
    Covered siblings are compiled with the mask's transform as their parent
    frame.
    """
    mask = parent.children[item.mask_index]
    if mask.absolute_transform is None:
        raise MissingTransformError("mask has no absolute transform", node_id=mask.id)
    covered = [parent.children[i] for i in item.node_indices if parent.children[i].visible]
    if not covered:
        return None

    mask_abs = mx.as_matrix(mask.absolute_transform)
    local = mx.compose(inv_parent, mask_abs)
    a, b, c, d = mx.linear_part(local)
    e, f = mx.translation_part(local)
    in_flow = parent.is_auto_layout and not mask.is_absolute_child

    css = radius_css(mask.style.radii)
    if mask.type == "ELLIPSE":
        css.set("border-radius", "50%")
    css.set("overflow", "hidden")
    css.update(mask_image_css(mask, image_url_template=ctx.settings.image_url_template))
    css.update(item.container_css)

    layout = LayoutInfo(
        display="block",
        position="relative" if in_flow else "absolute",
        left=0.0 if in_flow else e,
        top=0.0 if in_flow else f,
        width=float(mask.width) if isinstance(mask.width, (int, float)) else 0.0,
        height=float(mask.height) if isinstance(mask.height, (int, float)) else 0.0,
        origin="center" if in_flow else "top left",
        transform=Transform2x2(a, b, c, d),
    )
    kids = tuple(node_to_ir(child, mask_abs, ctx, inherited) for child in covered)
    return RenderNodeIR(
        id=mask.id,
        kind=NodeKind.FRAME,
        name=mask.name or "Mask Container",
        type=mask.type,
        layout=layout,
        style=StyleInfo(css.declarations()),
        content=ChildNodes(kids),
        is_mask=True,
    )


# ---------------------------------------------------------------------- #
# Composition
# ---------------------------------------------------------------------- #
def render_union(children: Sequence[DesignNode]) -> Rect:
    """Union of the render bounds of all top-level nodes; zero when empty."""
    if not children:
        return Rect()
    min_x = min_y = float("inf")
    max_x = max_y = float("-inf")
    for index, child in enumerate(children):
        rb = child.render_bounds
        if rb is None:
            raise MissingRenderBoundsError(f"top-level child {index} has no render bounds", node_id=child.id)
        min_x = min(min_x, rb.x)
        min_y = min(min_y, rb.y)
        max_x = max(max_x, rb.x + rb.width)
        max_y = max(max_y, rb.y + rb.height)
    return Rect(x=min_x, y=min_y, width=max_x - min_x, height=max_y - min_y)


def _collect_images(node: DesignNode, out: List[str]) -> None:
    for paint in node.style.fills:
        if isinstance(paint, ImagePaint) and paint.image_id and paint.image_id not in out:
            out.append(paint.image_id)
    for child in node.children:
        _collect_images(child, out)


def asset_meta(composition: CompositionInput, nodes: Sequence[RenderNodeIR]) -> AssetMeta:
    images: List[str] = []
    for child in composition.children:
        _collect_images(child, images)
    svgs: List[str] = []
    for root in nodes:
        for ir in root.walk():
            if ir.svg_file and ir.svg_file not in svgs:
                svgs.append(ir.svg_file)
    return AssetMeta(tuple(images), tuple(svgs))


def composition_to_ir(
    composition: CompositionInput,
    ctx: Optional[CompileContext] = None,
    *,
    font_url_provider: Optional[FontUrlProvider] = None,
) -> CompiledComposition:
    """
    Compile ``composition`` into a Render-IR tree.

    The composition's absolute origin is the root frame: top-level nodes are
    positioned relative to it.
    """
    ctx = ctx or CompileContext()
    bounds = (
        Rect(width=composition.bounds.width, height=composition.bounds.height)
        if composition.bounds is not None
        else None
    )
    if not composition.children:
        return CompiledComposition((), "", Rect(), FontMeta(), AssetMeta(), bounds)

    origin = composition.abs_origin
    if origin is None:
        raise MissingOriginError("composition has no absolute origin")
    root_frame = mx.translation(origin.x, origin.y)

    nodes = tuple(
        node_to_ir(child, root_frame, ctx)
        for child in composition.children
        if child.visible
    )
    union = render_union(composition.children)

    collector = collect_fonts(composition)
    fonts = tuple(collector.fonts())
    font_meta = FontMeta(
        google_fonts_url=collector.google_fonts_url(),
        stylesheet_urls=tuple(provider_urls(fonts, font_url_provider)),
        fonts=fonts,
    )
    compiled = CompiledComposition(
        nodes=nodes,
        css_rules=ctx.pseudo_rules.to_css(),
        render_union=union,
        font_meta=font_meta,
        asset_meta=asset_meta(composition, nodes),
        bounds=bounds,
    )
    logger.debug(
        "compiled %d top-level nodes (%d total), %d pseudo rules",
        len(nodes),
        sum(1 for _ in compiled.walk()),
        len(ctx.pseudo_rules),
    )
    return compiled


__all__ = [
    "AssetMeta",
    "ChildNodes",
    "CompiledComposition",
    "Content",
    "FontMeta",
    "InlineSvg",
    "NoContent",
    "RenderNodeIR",
    "StyleInfo",
    "TextMarkup",
    "asset_meta",
    "composition_to_ir",
    "node_to_ir",
    "render_union",
    "svg_file_name",
]
