"""
Strokes to CSS.

Uniform solid strokes without dashes map onto native CSS: an inset
box-shadow (INSIDE), a border (CENTER) or an outline (OUTSIDE). Everything
else is drawn by a ``::before`` pseudo-element bound to the host through
its ``data-layer-id`` attribute:

- dashed strokes on rectangles and ellipses get an inline SVG background
  with an exact ``stroke-dasharray``
- other dashed, non-uniform or shadow-carrying strokes get a pseudo border
- linear-gradient strokes get a padded gradient box masked to a ring
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple
from urllib.parse import quote

import svg

from .css import CssProps, fmt_num, fmt_px
from .effects import ParsedEffects
from .model import DesignNode, GradientPaint, Radii, SolidPaint, StrokeAlign, StrokeWeights
from .paint import gradient_to_css, rgba_to_css

Corners = Tuple[float, float, float, float]

DOTTED_DASH_THRESHOLD = 2
RECT_LIKE_TYPES = frozenset({"RECTANGLE", "FRAME", "INSTANCE", "COMPONENT", "COMPONENT_SET"})


@dataclass
class StrokeResult:
    css: CssProps = field(default_factory=CssProps)
    box_shadows: List[str] = field(default_factory=list)
    pseudo: Optional[CssProps] = None


@dataclass(frozen=True)
class StrokeSpec:
    kind: str
    align: StrokeAlign
    weights: StrokeWeights
    color: Optional[str] = None
    gradient: Optional[str] = None
    dash_pattern: Tuple[float, ...] = ()


def pseudo_selector(node_id: str) -> str:
    return f'[data-layer-id="{node_id}"]::before'


def extract_stroke(node: DesignNode) -> Optional[StrokeSpec]:
    """First visible stroke paint, when it is SOLID or GRADIENT_LINEAR."""
    style = node.style
    paint = next((p for p in style.strokes if p.visible), None)
    if paint is None:
        return None
    weights = style.stroke_weights or StrokeWeights()
    if isinstance(paint, SolidPaint):
        return StrokeSpec(
            kind="solid",
            align=style.stroke_align,
            weights=weights,
            color=rgba_to_css(paint.color, paint.opacity),
            dash_pattern=tuple(style.dash_pattern),
        )
    if isinstance(paint, GradientPaint) and paint.type == "GRADIENT_LINEAR":
        width = node.width if isinstance(node.width, (int, float)) else 0
        height = node.height if isinstance(node.height, (int, float)) else 0
        gradient = gradient_to_css(paint, width, height)
        if gradient is None:
            return None
        return StrokeSpec(kind="gradient", align=style.stroke_align, weights=weights, gradient=gradient)
    return None


def border_style(dash_pattern: Tuple[float, ...]) -> str:
    if not dash_pattern:
        return "solid"
    return "dotted" if dash_pattern[0] <= DOTTED_DASH_THRESHOLD else "dashed"


# ---------------------------------------------------------------------- #
# Geometry helpers
# ---------------------------------------------------------------------- #
def _inset_css(props: CssProps, align: StrokeAlign, w: StrokeWeights) -> None:
    if align == StrokeAlign.CENTER:
        sides = (-w.t / 2, -w.r / 2, -w.b / 2, -w.l / 2)
    elif align == StrokeAlign.OUTSIDE:
        sides = (-w.t, -w.r, -w.b, -w.l)
    else:
        props.set("inset", "0")
        return
    if len(set(sides)) == 1:
        props.set("inset", fmt_px(sides[0]))
        return
    for name, value in zip(("top", "right", "bottom", "left"), sides):
        props.set(name, fmt_px(value))


def compensated_radius(radii: Optional[Radii], align: StrokeAlign, w: StrokeWeights) -> Optional[str]:
    """
    Border-radius for a pseudo box grown outward by the stroke.

    Each non-zero corner grows by the sum of its adjacent side weights
    times 0.25 (CENTER) or 0.5 (OUTSIDE); INSIDE keeps the host radius.
    """
    if radii is None:
        return None
    tl, tr, br, bl = radii.as_corners()
    if align != StrokeAlign.INSIDE:
        factor = 0.25 if align == StrokeAlign.CENTER else 0.5
        tl = tl + (w.t + w.l) * factor if tl > 0 else 0
        tr = tr + (w.t + w.r) * factor if tr > 0 else 0
        br = br + (w.b + w.r) * factor if br > 0 else 0
        bl = bl + (w.b + w.l) * factor if bl > 0 else 0
    if not (tl or tr or br or bl):
        return None
    if tl == tr == br == bl:
        return fmt_px(tl)
    return " ".join(fmt_px(v) for v in (tl, tr, br, bl))


def _pseudo_base() -> CssProps:
    return CssProps(
        [
            ("content", '""'),
            ("position", "absolute"),
            ("z-index", "0"),
            ("pointer-events", "none"),
        ]
    )


# ---------------------------------------------------------------------- #
# Pseudo-element variants
# ---------------------------------------------------------------------- #
def _dash_svg(node: DesignNode, spec: StrokeSpec, width: float, height: float) -> str:
    """Serialized SVG drawing the dashed stroke of a ``width`` x ``height`` host."""
    weight = spec.weights.t
    half = weight / 2
    if spec.align == StrokeAlign.CENTER:
        grow, delta = half, 0.0
    elif spec.align == StrokeAlign.OUTSIDE:
        grow, delta = weight, half
    else:
        grow, delta = 0.0, -half
    box_w = width + 2 * grow
    box_h = height + 2 * grow
    line_w = box_w - weight
    line_h = box_h - weight
    stroke_kwargs = dict(
        fill="none",
        stroke=spec.color,
        stroke_width=weight,
        stroke_dasharray=" ".join(fmt_num(v) for v in spec.dash_pattern),
    )

    if node.type == "ELLIPSE":
        shape = svg.Ellipse(cx=box_w / 2, cy=box_h / 2, rx=line_w / 2, ry=line_h / 2, **stroke_kwargs)
    else:
        radii = node.style.radii.as_corners() if node.style.radii else (0.0, 0.0, 0.0, 0.0)
        corners = tuple(max(r + delta, 0.0) if r > 0 else 0.0 for r in radii)
        if len(set(corners)) == 1:
            shape = svg.Rect(x=half, y=half, width=line_w, height=line_h, rx=corners[0] or None, **stroke_kwargs)
        else:
            shape = svg.Path(d=_rounded_rect_path(half, half, line_w, line_h, corners), **stroke_kwargs)

    root = svg.SVG(
        width=box_w,
        height=box_h,
        viewBox=svg.ViewBoxSpec(0, 0, box_w, box_h),
        elements=[shape],
    )
    return root.as_str()


def _rounded_rect_path(x: float, y: float, w: float, h: float, corners: Corners) -> list:
    tl, tr, br, bl = corners
    x1, y1 = x + w, y + h
    return [
        svg.MoveTo(x + tl, y),
        svg.LineTo(x1 - tr, y),
        svg.Arc(tr, tr, 0, False, True, x1, y + tr),
        svg.LineTo(x1, y1 - br),
        svg.Arc(br, br, 0, False, True, x1 - br, y1),
        svg.LineTo(x + bl, y1),
        svg.Arc(bl, bl, 0, False, True, x, y1 - bl),
        svg.LineTo(x, y + tl),
        svg.Arc(tl, tl, 0, False, True, x + tl, y),
        svg.Z(),
    ]


def svg_data_uri(svg_text: str) -> str:
    return f'url("data:image/svg+xml,{quote(svg_text, safe="")}")'


def _svg_dash_pseudo(node: DesignNode, spec: StrokeSpec, width: float, height: float) -> CssProps:
    props = _pseudo_base()
    weights = spec.weights
    _inset_css(props, spec.align, weights)
    props.set("background", f"{svg_data_uri(_dash_svg(node, spec, width, height))} 0 0/100% 100% no-repeat")
    return props


def _border_pseudo(node: DesignNode, spec: StrokeSpec) -> CssProps:
    props = _pseudo_base()
    w = spec.weights
    _inset_css(props, spec.align, w)
    style = border_style(spec.dash_pattern)
    if w.is_uniform:
        props.set("border", f"{fmt_px(w.t)} {style} {spec.color}")
    else:
        props.set("border-style", style)
        props.set("border-color", spec.color)
        props.set("border-width", " ".join(fmt_px(v) for v in (w.t, w.r, w.b, w.l)))
    radius = compensated_radius(node.style.radii, spec.align, w)
    if radius:
        props.set("border-radius", radius)
    return props


def _gradient_pseudo(node: DesignNode, spec: StrokeSpec) -> CssProps:
    props = _pseudo_base()
    w = spec.weights
    _inset_css(props, spec.align, w)
    if w.is_uniform:
        props.set("padding", fmt_px(w.t))
    else:
        props.set("padding", " ".join(fmt_px(v) for v in (w.t, w.r, w.b, w.l)))
    props.set("background", spec.gradient)
    props.set("border-radius", compensated_radius(node.style.radii, spec.align, w) or "inherit")
    props.set("-webkit-mask", "linear-gradient(#fff 0 0) content-box, linear-gradient(#fff 0 0)")
    props.set("-webkit-mask-composite", "xor")
    props.set("mask-composite", "exclude")
    return props


def _numeric_size(node: DesignNode) -> Optional[Tuple[float, float]]:
    if isinstance(node.width, (int, float)) and isinstance(node.height, (int, float)):
        return float(node.width), float(node.height)
    return None


# ---------------------------------------------------------------------- #
# Public API
# ---------------------------------------------------------------------- #
def collect_stroke(node: DesignNode, effects: Optional[ParsedEffects] = None) -> StrokeResult:
    """
    Stroke CSS for ``node``.

    The result holds inline declarations, box-shadow tokens to merge with
    effect shadows, and optionally the declarations of a ``::before`` rule
    the caller registers under :func:`pseudo_selector`.
    """
    result = StrokeResult()
    spec = extract_stroke(node)
    if spec is None or spec.weights.is_zero:
        return result

    if node.type == "TEXT":
        if spec.kind == "solid":
            result.css.set("-webkit-text-stroke", f"{fmt_px(spec.weights.max)} {spec.color}")
            if spec.align == StrokeAlign.OUTSIDE:
                result.css.set("paint-order", "stroke fill")
        return result

    # Baked vectors already contain their strokes.
    if node.svg_content or node.svg_id:
        return result

    w = spec.weights
    has_shadows = bool(effects and effects.shadows)

    if spec.kind == "gradient":
        result.pseudo = _gradient_pseudo(node, spec)
        return result

    if w.is_uniform and not spec.dash_pattern and not has_shadows:
        if spec.align == StrokeAlign.INSIDE:
            result.box_shadows.append(f"inset 0 0 0 {fmt_px(w.t)} {spec.color}")
        elif spec.align == StrokeAlign.CENTER:
            result.css.set("border", f"{fmt_px(w.t)} solid {spec.color}")
        else:
            result.css.set("outline", f"{fmt_px(w.t)} solid {spec.color}")
            result.css.set("outline-offset", "0")
        return result

    size = _numeric_size(node)
    if (
        spec.dash_pattern
        and w.is_uniform
        and size is not None
        and (node.type in RECT_LIKE_TYPES or node.type == "ELLIPSE")
    ):
        result.pseudo = _svg_dash_pseudo(node, spec, *size)
        return result

    result.pseudo = _border_pseudo(node, spec)
    return result


__all__ = [
    "StrokeResult",
    "StrokeSpec",
    "border_style",
    "collect_stroke",
    "compensated_radius",
    "extract_stroke",
    "pseudo_selector",
    "svg_data_uri",
]
