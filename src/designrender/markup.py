"""
HTML markup for a compiled composition.

``MarkupRenderer`` walks the Render-IR once per mode:

- content mode emits the visual markup and moves layout, size and repeated
  style declarations into classes
- debug mode emits the same tree shape with geometry-only CSS, outline
  vectors and ``data-layer-id`` on every box

Markup is built as ``xml.etree`` elements and serialized with the HTML
method, so attribute and text escaping come from the serializer.
"""

from __future__ import annotations

import html
import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

from .classes import (
    SharedClassTable,
    SizeFrequency,
    UtilityClassSet,
    layout_utility_classes,
    semantic_class_name,
)
from .css import CssProps, fmt_px, split_top_level
from .ir import CompiledComposition, InlineSvg, RenderNodeIR, TextMarkup
from .layout import LayoutInfo, NodeKind
from .optimize import BoxContext, optimize_box_css
from .settings import RenderSettings

logger = logging.getLogger(__name__)

CONTENT_MODE = "content"
DEBUG_MODE = "debug"

DEBUG_LAYOUT_PROPS = frozenset(
    {
        "position",
        "left",
        "top",
        "right",
        "bottom",
        "width",
        "height",
        "min-width",
        "min-height",
        "max-width",
        "max-height",
        "margin",
        "margin-top",
        "margin-left",
        "padding",
        "box-sizing",
        "display",
        "flex-direction",
        "flex-wrap",
        "justify-content",
        "align-items",
        "align-self",
        "flex-grow",
        "flex-shrink",
        "flex-basis",
        "gap",
        "row-gap",
        "column-gap",
        "transform",
        "transform-origin",
        "z-index",
    }
)

# Flow item declarations that stay on the outer box of a wrapped node.
OUTER_ITEM_PROPS = frozenset({"z-index", "margin-top", "margin-left"})

SVG_SHAPES = frozenset({"path", "rect", "circle", "ellipse", "line", "polyline", "polygon"})
OUTLINE_STROKE_STYLE = "stroke:var(--dr-svg-stroke);stroke-width:calc(1px / var(--dr-scale))"

SHAPE_CLASSES = {"RECTANGLE": "rect", "ELLIPSE": "ellipse", "LINE": "line"}

_LENGTH = re.compile(r"^-?\d*\.?\d+(px)?$")
_TAG = re.compile(r"<[^>]+>")


# ---------------------------------------------------------------------- #
# Element helpers
# ---------------------------------------------------------------------- #
def _local_name(tag: str) -> str:
    if "}" in tag:
        return tag.rsplit("}", 1)[-1]
    return tag


def parse_svg(svg_text: str) -> Optional[ET.Element]:
    """Parse inline SVG into namespace-free elements, or ``None`` if malformed."""
    try:
        root = ET.fromstring(svg_text)
    except ET.ParseError as exc:
        logger.debug("inline svg is not well-formed: %s", exc)
        return None
    for elem in root.iter():
        elem.tag = _local_name(elem.tag)
        for key in [k for k in elem.attrib if "}" in k]:
            value = elem.attrib.pop(key)
            local = _local_name(key)
            elem.set(f"xlink:{local}" if "xlink" in key else local, value)
    return root


def outline_svg(root: ET.Element) -> ET.Element:
    """Turn painted vector shapes into hairline outlines."""
    for elem in root.iter():
        if elem.tag not in SVG_SHAPES:
            continue
        for attr in ("fill", "stroke", "stroke-width", "style"):
            elem.attrib.pop(attr, None)
        elem.set("fill", "none")
        elem.set("vector-effect", "non-scaling-stroke")
        elem.set("style", OUTLINE_STROKE_STYLE)
    return root


def append_markup(elem: ET.Element, markup: str) -> None:
    """Append an HTML fragment made of spans and line breaks to ``elem``."""
    try:
        holder = ET.fromstring(f"<div>{markup}</div>")
    except ET.ParseError as exc:
        logger.debug("text markup fell back to plain text: %s", exc)
        elem.text = html.unescape(_TAG.sub("", markup))
        return
    elem.text = holder.text
    elem.extend(list(holder))


def _keeps_whitespace(elem: ET.Element) -> bool:
    if elem.tag == "text":
        return True
    return "text" in (elem.get("class") or "").split()


def indent_tree(elem: ET.Element, *, indent: str = "  ", level: int = 0) -> None:
    """Indent nested elements in place, leaving text boxes untouched."""
    children = list(elem)
    if not children or _keeps_whitespace(elem):
        if level and (not elem.tail or not elem.tail.strip()):
            elem.tail = "\n" + (indent * level)
        return

    child_ws = "\n" + (indent * (level + 1))
    parent_ws = "\n" + (indent * level)

    if not elem.text or not elem.text.strip():
        elem.text = child_ws

    for child in children:
        indent_tree(child, indent=indent, level=level + 1)
        if not child.tail or not child.tail.strip():
            child.tail = child_ws

    if not children[-1].tail or not children[-1].tail.strip():
        children[-1].tail = parent_ws

    if level and (not elem.tail or not elem.tail.strip()):
        elem.tail = parent_ws


def serialize(elements: Sequence[ET.Element], *, indent: str = "  ", level: int = 0) -> str:
    """Pretty HTML for ``elements``, one top-level element per line block."""
    lines = []
    for elem in elements:
        indent_tree(elem, indent=indent, level=level)
        elem.tail = None
        lines.append(indent * level + ET.tostring(elem, encoding="unicode", method="html"))
    return "\n".join(lines)


# ---------------------------------------------------------------------- #
# Shadows on wrapped boxes
# ---------------------------------------------------------------------- #
def box_shadow_to_drop_shadow(token: str) -> str:
    """``x y blur spread color`` as ``drop-shadow(x y blur color)``; spread is dropped."""
    lengths: List[str] = []
    rest: List[str] = []
    for part in split_top_level(token, " "):
        if not rest and _LENGTH.match(part):
            lengths.append(part)
        else:
            rest.append(part)
    return f"drop-shadow({' '.join(lengths[:3] + rest)})"


def migrate_outer_shadows(inner: CssProps, outer: CssProps) -> None:
    """
    Move outer box-shadows of a transformed inner box onto the wrapper as
    drop-shadow filters. Inset shadows stay on the inner box.
    """
    value = inner.get("box-shadow")
    if not value:
        return
    keep: List[str] = []
    moved: List[str] = []
    for token in split_top_level(value, ","):
        (keep if token.startswith("inset") else moved).append(token)
    if not moved:
        return
    if keep:
        inner.set("box-shadow", ",".join(keep))
    else:
        inner.pop("box-shadow")
    for token in moved:
        outer.append_list("filter", box_shadow_to_drop_shadow(token), sep=" ")


# ---------------------------------------------------------------------- #
# Renderer
# ---------------------------------------------------------------------- #
@dataclass
class RenderedMarkup:
    elements: List[ET.Element]
    css: str = ""

    def to_html(self, *, indent: str = "  ", level: int = 0) -> str:
        return serialize(self.elements, indent=indent, level=level)


@dataclass
class _Box:
    """What a kind contributes to the element that carries its visuals."""

    classes: List[str]
    css: CssProps
    fill: Callable[[ET.Element], None] = lambda elem: None
    shareable: bool = True
    attrs: Dict[str, str] = field(default_factory=dict)


class MarkupRenderer:
    """
    Render one compiled composition in content or debug mode.

    Class tables (size frequencies, shared classes, used utilities) are built
    per renderer instance, so each render call starts from an empty state.
    """

    def __init__(
        self,
        compiled: CompiledComposition,
        *,
        mode: str = CONTENT_MODE,
        settings: Optional[RenderSettings] = None,
    ) -> None:
        if mode not in (CONTENT_MODE, DEBUG_MODE):
            raise ValueError(f"unknown markup mode: {mode!r}")
        self.compiled = compiled
        self.mode = mode
        self.settings = settings or RenderSettings()
        self.utilities = UtilityClassSet()
        self.sizes = SizeFrequency()
        self.shared = SharedClassTable(scope=self.settings.class_scope)
        if self.is_content:
            single = [node for node in compiled.walk() if node.layout.wrapper is None]
            self.sizes = SizeFrequency.from_layouts(node.layout for node in single)
            self.shared = SharedClassTable.build(
                (node.style.css() for node in single if node.kind != NodeKind.SVG),
                threshold=self.settings.shared_class_threshold,
                scope=self.settings.class_scope,
            )
        self._kinds = {
            NodeKind.FRAME: self._frame_box,
            NodeKind.TEXT: self._text_box,
            NodeKind.SVG: self._svg_box,
            NodeKind.SHAPE: self._shape_box,
        }

    @property
    def is_content(self) -> bool:
        return self.mode == CONTENT_MODE

    def render(self) -> RenderedMarkup:
        elements = [self.render_node(node) for node in self.compiled.nodes]
        logger.debug(
            "%s markup: %d utility classes, %d shared classes",
            self.mode,
            len(self.utilities),
            len(self.shared),
        )
        return RenderedMarkup(elements, self.css())

    def css(self) -> str:
        """Pseudo, utility and shared class rules for content mode."""
        if not self.is_content:
            return ""
        parts = [self.compiled.css_rules, self.utilities.css(), self.shared.css()]
        return "\n".join(part for part in parts if part)

    def render_node(self, node: RenderNodeIR) -> ET.Element:
        box = self._kinds[node.kind](node)
        if node.layout.wrapper is None:
            return self._single(node, box)
        return self._wrapped(node, box)

    # ------------------------------------------------------------------ #
    # Kinds
    # ------------------------------------------------------------------ #
    def _frame_box(self, node: RenderNodeIR) -> _Box:
        classes = ["frame"]
        if node.is_mask:
            classes.append("mask-container")
        css = node.layout.container_css().update(node.style.css())

        def fill(elem: ET.Element) -> None:
            elem.extend(self.render_node(child) for child in node.children)
        return _Box(classes, css, fill)

    def _text_box(self, node: RenderNodeIR) -> _Box:
        def fill(elem: ET.Element) -> None:
            if self.is_content and isinstance(node.content, TextMarkup):
                append_markup(elem, node.content.html)

        return _Box(["text"], node.style.css(), fill)

    def _svg_box(self, node: RenderNodeIR) -> _Box:
        attrs: Dict[str, str] = {}
        parsed = parse_svg(node.content.svg) if isinstance(node.content, InlineSvg) else None

        if not self.is_content and parsed is None and node.svg_file:
            attrs["data-svg-file"] = node.svg_file

        def fill(elem: ET.Element) -> None:
            if self.is_content:
                if parsed is not None:
                    elem.append(parsed)
                elif node.svg_file:
                    src = self.settings.svg_url_template.format(svg_file=node.svg_file)
                    ET.SubElement(elem, "img", {"src": src, "alt": ""})
            elif parsed is not None:
                elem.append(outline_svg(parsed))

        return _Box(["svg-container"], node.style.css(), fill, shareable=False, attrs=attrs)

    def _shape_box(self, node: RenderNodeIR) -> _Box:
        shape = SHAPE_CLASSES.get(node.type, node.type.lower())
        return _Box(["shape", shape], node.style.css())

    # ------------------------------------------------------------------ #
    # Boxes
    # ------------------------------------------------------------------ #
    def _position_css(self, layout: LayoutInfo) -> CssProps:
        props = CssProps()
        props.set("position", layout.position)
        props.set("left", fmt_px(layout.left))
        props.set("top", fmt_px(layout.top))
        if not layout.transform.is_identity:
            props.set("transform-origin", layout.origin)
            props.set("transform", layout.transform.css())
        return props

    def _size_css(self, layout: LayoutInfo, classes: List[str]) -> CssProps:
        props = CssProps()
        width_class = self.sizes.width_class(layout) if self.is_content else None
        height_class = self.sizes.height_class(layout) if self.is_content else None
        if width_class:
            classes.append(width_class)
        else:
            props.set("width", layout.width_css)
        if height_class:
            classes.append(height_class)
        else:
            props.set("height", layout.height_css)
        self.utilities.add(c for c in (width_class, height_class) if c)
        return props

    def _single(self, node: RenderNodeIR, box: _Box) -> ET.Element:
        layout = node.layout
        size_classes: List[str] = []
        props = self._position_css(layout)
        props.update(self._size_css(layout, size_classes))
        props.update(layout.flex_item_css())
        props.update(box.css)
        props = optimize_box_css(props, self._box_context(node, props, layout.position))
        return self._element(node, box, props, size_classes, shareable=box.shareable)

    def _wrapped(self, node: RenderNodeIR, box: _Box) -> ET.Element:
        """
        Outer box reserving the flow footprint, inner box at true size
        centred inside it and carrying the transform.
        """
        layout = node.layout
        wrapper = layout.wrapper
        transformed = not layout.transform.is_identity

        outer = CssProps()
        outer.set("position", layout.position)
        outer.set("left", fmt_px(layout.left))
        outer.set("top", fmt_px(layout.top))
        outer.set("width", layout.width_css)
        outer.set("height", layout.height_css)
        outer.update(layout.flex_item_css())
        outer.update(box.css.subset(OUTER_ITEM_PROPS))

        inner = CssProps().set("position", "absolute")
        if wrapper.center_strategy == "inset" and not transformed:
            inner.update([("left", "0"), ("top", "0"), ("right", "0"), ("bottom", "0"), ("margin", "auto")])
        else:
            transform = "translate(-50%,-50%)"
            if transformed:
                transform += " " + layout.transform.css()
            inner.update([("left", "50%"), ("top", "50%"), ("transform-origin", "center"), ("transform", transform)])
        inner.set("width", fmt_px(wrapper.content_width))
        inner.set("height", fmt_px(wrapper.content_height))
        inner.update(box.css.without(OUTER_ITEM_PROPS))
        if transformed:
            migrate_outer_shadows(inner, outer)

        outer = optimize_box_css(outer, BoxContext(position=layout.position))
        inner = optimize_box_css(
            inner,
            BoxContext(
                position="absolute",
                has_rotate_or_scale=True,
                display=inner.get("display"),
                flex_direction=inner.get("flex-direction"),
                is_text=node.kind == NodeKind.TEXT,
            ),
        )

        outer_elem = ET.Element("div", {"class": "has-wrapper"})
        if not self.is_content:
            outer_elem.set("class", "debug-box has-wrapper")
            outer_elem.set("data-layer-id", node.id)
            outer = outer.subset(DEBUG_LAYOUT_PROPS)
        style = outer.serialize()
        if style:
            outer_elem.set("style", style)
        outer_elem.append(self._element(node, box, inner, [], shareable=False))
        return outer_elem

    def _box_context(self, node: RenderNodeIR, props: CssProps, position: str) -> BoxContext:
        return BoxContext(
            position=position,
            has_rotate_or_scale=node.layout.transform.has_rotation_or_scale,
            display=props.get("display"),
            flex_direction=props.get("flex-direction"),
            is_text=node.kind == NodeKind.TEXT,
        )

    def _element(
        self,
        node: RenderNodeIR,
        box: _Box,
        props: CssProps,
        size_classes: List[str],
        *,
        shareable: bool,
    ) -> ET.Element:
        classes = list(box.classes)
        if self.is_content:
            semantic = semantic_class_name(node.name, classes[0])
            if semantic != classes[0]:
                classes.append(semantic)
            utilities, props = layout_utility_classes(props)
            self.utilities.add(utilities)
            classes.extend(utilities)
            classes.extend(size_classes)
            if shareable:
                shared, props = self.shared.apply(props)
                if shared:
                    classes.append(shared)
        else:
            classes.append("debug-svg" if node.kind == NodeKind.SVG else "debug-box")
            props = props.subset(DEBUG_LAYOUT_PROPS)

        elem = ET.Element("div", {"class": " ".join(dict.fromkeys(classes))})
        if not self.is_content or node.style.has_stroke:
            elem.set("data-layer-id", node.id)
        if not self.is_content:
            elem.set("data-name", node.name)
        for key, value in box.attrs.items():
            elem.set(key, value)
        style = props.serialize()
        if style:
            elem.set("style", style)
        box.fill(elem)
        return elem


def render_markup(
    compiled: CompiledComposition,
    *,
    mode: str = CONTENT_MODE,
    settings: Optional[RenderSettings] = None,
) -> RenderedMarkup:
    return MarkupRenderer(compiled, mode=mode, settings=settings).render()


__all__ = [
    "CONTENT_MODE",
    "DEBUG_LAYOUT_PROPS",
    "DEBUG_MODE",
    "MarkupRenderer",
    "RenderedMarkup",
    "append_markup",
    "box_shadow_to_drop_shadow",
    "indent_tree",
    "migrate_outer_shadows",
    "outline_svg",
    "parse_svg",
    "render_markup",
    "serialize",
]
