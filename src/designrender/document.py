"""
Document assembly: viewport sizing, the fixed shell around the rendered
nodes and the stylesheets that go with each mode.
"""

from __future__ import annotations

import html
import logging
import math
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .css import CssProps, css_rule, fmt_px
from .errors import EmptyCompositionError
from .fonts import font_link_tags
from .ir import CompiledComposition
from .markup import CONTENT_MODE, DEBUG_MODE, MarkupRenderer, serialize
from .model import Rect
from .resources import base_css, debug_css
from .settings import RenderSettings

logger = logging.getLogger(__name__)

SHELL_ATTRIBUTE = "data-design-render"


@dataclass(frozen=True)
class Viewport:
    width: int
    height: int
    offset_x: int
    offset_y: int


def compute_viewport(bounds: Optional[Rect], union: Rect, padding: float = 4) -> Viewport:
    """
    Smallest viewport holding both the nominal canvas and everything that
    renders, expanded by ``padding`` so outlines at the edges stay visible.
    Offsets move the composition origin into the padded viewport.
    """
    canvas_w = bounds.width if bounds is not None else 0.0
    canvas_h = bounds.height if bounds is not None else 0.0
    min_x = min(0.0, union.x)
    min_y = min(0.0, union.y)
    max_x = max(canvas_w, union.x + union.width)
    max_y = max(canvas_h, union.y + union.height)
    offset_x = math.ceil(padding - min_x)
    offset_y = math.ceil(padding - min_y)
    return Viewport(
        width=math.ceil(max_x + offset_x + padding),
        height=math.ceil(max_y + offset_y + padding),
        offset_x=offset_x,
        offset_y=offset_y,
    )


def shell_css(viewport: Viewport, bounds: Optional[Rect]) -> str:
    rules = [
        css_rule(
            ".viewport",
            CssProps([("width", fmt_px(viewport.width)), ("height", fmt_px(viewport.height))]),
        ),
        css_rule(
            ".view-offset",
            CssProps([("left", fmt_px(viewport.offset_x)), ("top", fmt_px(viewport.offset_y))]),
        ),
    ]
    if bounds is not None:
        rules.append(
            css_rule(
                ".composition",
                CssProps([("width", fmt_px(bounds.width)), ("height", fmt_px(bounds.height))]),
            )
        )
    return "\n".join(rules)


def build_shell(elements: Sequence[ET.Element], *, debug: bool = False) -> ET.Element:
    """``.viewport > .view-offset > .composition > .content-layer`` around ``elements``."""
    viewport = ET.Element("div", {"class": "viewport"})
    offset = ET.SubElement(viewport, "div", {"class": "view-offset"})
    composition = ET.SubElement(offset, "div", {"class": "composition", SHELL_ATTRIBUTE: ""})
    if debug:
        composition.set("data-debug", "true")
    layer = ET.SubElement(composition, "div", {"class": "content-layer"})
    layer.extend(elements)
    return viewport


def _join_css(*parts: str) -> str:
    return "\n\n".join(part.strip() for part in parts if part and part.strip()) + "\n"


def _indent_block(text: str, prefix: str) -> str:
    return "\n".join(f"{prefix}{line}" if line else "" for line in text.strip().splitlines())


@dataclass(frozen=True)
class RenderedDocument:
    html: str
    css: str
    debug_html: str
    debug_css: str
    viewport: Viewport
    title: str = "Composition"
    font_links: Tuple[str, ...] = ()

    def to_document(self, *, debug: bool = False) -> str:
        """A standalone HTML page with the stylesheet inlined."""
        body = self.debug_html if debug else self.html
        css = self.debug_css if debug else self.css
        head: List[str] = [
            '<meta charset="utf-8"/>',
            f"<title>{html.escape(self.title)}</title>",
        ]
        if not debug:
            head.extend(self.font_links)
        head.append("<style>\n" + _indent_block(css, "    ") + "\n  </style>")
        lines = ["<!DOCTYPE html>", '<html lang="en">', "<head>"]
        lines.extend(f"  {item}" for item in head)
        lines.extend(["</head>", "<body>", _indent_block(body, "  "), "</body>", "</html>"])
        return "\n".join(lines) + "\n"


def assemble_document(
    compiled: CompiledComposition,
    *,
    settings: Optional[RenderSettings] = None,
    title: str = "Composition",
) -> RenderedDocument:
    """Render both markup passes and wrap them in the document shell."""
    settings = settings or RenderSettings()
    if not compiled.nodes:
        raise EmptyCompositionError("composition has no visible nodes to render")

    viewport = compute_viewport(compiled.bounds, compiled.render_union, settings.outline_padding)
    shell = shell_css(viewport, compiled.bounds)

    content = MarkupRenderer(compiled, mode=CONTENT_MODE, settings=settings).render()
    content_html = serialize([build_shell(content.elements)])
    content_css = _join_css(base_css(), shell, content.css)

    debug_html = ""
    debug_styles = ""
    if settings.debug_enabled:
        debug = MarkupRenderer(compiled, mode=DEBUG_MODE, settings=settings).render()
        debug_html = serialize([build_shell(debug.elements, debug=True)])
        debug_styles = _join_css(base_css(), shell, debug_css())

    logger.debug(
        "viewport %dx%d offset (%d, %d)",
        viewport.width,
        viewport.height,
        viewport.offset_x,
        viewport.offset_y,
    )
    return RenderedDocument(
        html=content_html,
        css=content_css,
        debug_html=debug_html,
        debug_css=debug_styles,
        viewport=viewport,
        title=title,
        font_links=tuple(
            font_link_tags(compiled.font_meta.google_fonts_url, compiled.font_meta.stylesheet_urls)
        ),
    )


__all__ = [
    "RenderedDocument",
    "SHELL_ATTRIBUTE",
    "Viewport",
    "assemble_document",
    "build_shell",
    "compute_viewport",
    "shell_css",
]
