"""
Per-node box CSS: paints, effects, strokes, radii, opacity and blending
combined into one declaration bag.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .context import CompileContext
from .css import CssProps, fmt_num
from .effects import (
    EFFECTS_INHERIT,
    EFFECTS_SELF,
    Shadow,
    effect_target,
    effect_tokens,
    merge_inherited,
    parse_effects,
    without_shadows,
)
from .layout import NodeKind
from .model import DesignNode
from .paint import blend_mode_css, paint_css, radius_css
from .stroke import collect_stroke, pseudo_selector
from .text import text_box_css


@dataclass(frozen=True)
class BoxStyle:
    css: CssProps
    text_uses_flex: bool = False


def consumes_inherited(kind: NodeKind, mode: str) -> bool:
    """Bare shadow holders pass inherited shadows on; every other node paints them."""
    return not (kind == NodeKind.FRAME and mode == EFFECTS_INHERIT)


def collect_box_css(
    node: DesignNode,
    kind: NodeKind,
    ctx: CompileContext,
    *,
    inherited: Sequence[Shadow] = (),
    mode: str = EFFECTS_SELF,
) -> BoxStyle:
    """
    Box CSS of ``node`` in the fixed order paint, effects, stroke, radius,
    opacity, blend mode, then text box properties.

    Stroke pseudo-element rules are registered on ``ctx.pseudo_rules``.
    """
    style = node.style
    is_svg = kind == NodeKind.SVG
    is_text = kind == NodeKind.TEXT
    holder = kind == NodeKind.FRAME and mode == EFFECTS_INHERIT

    props = CssProps()
    if not is_svg:
        props.update(paint_css(node, image_url_template=ctx.settings.image_url_template))

    effects = parse_effects(style)
    if holder:
        # Shadows travel down to the descendants; blurs stay on this box.
        effects = without_shadows(effects)

    stroke = collect_stroke(node, effects)
    if stroke.pseudo is not None:
        ctx.pseudo_rules.add(pseudo_selector(node.id), stroke.pseudo)

    target = effect_target(node)
    tokens = effect_tokens(effects, target=target, is_text=is_text)
    tokens.box_shadows.extend(stroke.box_shadows)
    if inherited and consumes_inherited(kind, mode):
        tokens = merge_inherited(tokens, inherited, target=target, is_text=is_text)
    props.update(tokens.to_css())
    props.update(stroke.css)

    radius = radius_css(style.radii)
    if not is_svg and node.type == "ELLIPSE" and "border-radius" not in radius:
        radius.set("border-radius", "50%")
        radius.set("overflow", "hidden")
    props.update(radius)

    if style.opacity != 1:
        props.set("opacity", fmt_num(style.opacity, 3))
    blend = blend_mode_css(style.blend_mode)
    if blend != "normal":
        props.set("mix-blend-mode", blend)

    if is_text and node.text is not None:
        text = text_box_css(node.text)
        props.update(text.css)
        return BoxStyle(props, text_uses_flex=text.uses_flex)
    return BoxStyle(props)


__all__ = ["BoxStyle", "collect_box_css", "consumes_inherited"]
