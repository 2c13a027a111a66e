"""
Fill paints to CSS backgrounds, plus colors, corner radii and mask images.

Design paints are listed bottom-most first while CSS background layers
are listed top-most first, so paints are walked in reverse.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .css import CssProps, fmt_num, fmt_px
from .matrix import is_affine_2x3
from .model import Color, DesignNode, GradientPaint, ImagePaint, Radii, ScaleMode, SolidPaint, Vec2

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_URL_TEMPLATE = "images/{image_id}.png"


# ---------------------------------------------------------------------- #
# Colors
# ---------------------------------------------------------------------- #
def _round_alpha(value: float) -> float:
    rounded = round(value, 2)
    return 0.0 if abs(rounded) < 0.01 else rounded


def rgba_to_css(color: Optional[Color], opacity: float = 1.0) -> Optional[str]:
    """``rgb(r,g,b)`` when the effective alpha rounds to 1, else ``rgba(...)``."""
    if color is None:
        return None
    r = int(round(color.r * 255))
    g = int(round(color.g * 255))
    b = int(round(color.b * 255))
    alpha = _round_alpha(color.a * opacity)
    if alpha == 1:
        return f"rgb({r},{g},{b})"
    return f"rgba({r},{g},{b},{fmt_num(alpha)})"


def blend_mode_css(raw: Optional[str]) -> str:
    if not raw:
        return "normal"
    up = raw.upper()
    if up in ("NORMAL", "PASS_THROUGH"):
        return "normal"
    return raw.lower().replace("_", "-")


# ---------------------------------------------------------------------- #
# Gradients
# ---------------------------------------------------------------------- #
def _angle_from_transform(transform, width: float, height: float) -> Optional[int]:
    if transform is None or not is_affine_2x3(transform):
        return None
    a = transform[0][0]
    b = transform[1][0]
    vx = a * width if width > 0 else a
    vy = b * height if height > 0 else b
    deg = 90 - math.degrees(math.atan2(vy, vx))
    deg %= 360
    return int(round(deg)) % 360


def _angle_from_handles(handles: Optional[Sequence[Vec2]]) -> int:
    if not handles or len(handles) < 2:
        return 180
    p1, p2 = handles[0], handles[1]
    angle = 180 - math.degrees(math.atan2(p2.x - p1.x, p2.y - p1.y))
    if angle < 0:
        angle += 360
    return int(round(angle))


def linear_gradient_angle(paint: GradientPaint, width: float = 0, height: float = 0) -> int:
    """Gradient transform first, then handle positions, then 180deg."""
    from_transform = _angle_from_transform(paint.gradient_transform, width, height)
    if from_transform is not None:
        return from_transform
    return _angle_from_handles(paint.gradient_handle_positions)


def gradient_to_css(paint: GradientPaint, width: float = 0, height: float = 0) -> Optional[str]:
    """CSS gradient value for ``paint``, or ``None`` with fewer than two stops."""
    if len(paint.gradient_stops) < 2:
        return None
    stops = ", ".join(
        f"{rgba_to_css(stop.color, paint.opacity)} {stop.position * 100:.2f}%"
        for stop in paint.gradient_stops
    )
    if paint.type == "GRADIENT_LINEAR":
        return f"linear-gradient({linear_gradient_angle(paint, width, height)}deg, {stops})"
    if paint.type == "GRADIENT_RADIAL":
        return f"radial-gradient(circle, {stops})"
    if paint.type == "GRADIENT_ANGULAR":
        return f"conic-gradient(from 0deg, {stops})"
    logger.debug("approximating %s with an elliptical radial gradient", paint.type)
    return f"radial-gradient(ellipse, {stops})"


# ---------------------------------------------------------------------- #
# Background layers
# ---------------------------------------------------------------------- #
@dataclass(frozen=True)
class BackgroundLayer:
    kind: str
    image: str
    size: str = "auto"
    position: str = "center"
    repeat: str = "no-repeat"
    blend: str = "normal"
    raw_color: Optional[str] = None


SCALE_DEFAULTS = {
    ScaleMode.FIT: ("contain", "center", "no-repeat"),
    ScaleMode.FILL: ("cover", "center", "no-repeat"),
    ScaleMode.CROP: ("cover", "center", "no-repeat"),
    ScaleMode.STRETCH: ("100% 100%", "center", "no-repeat"),
    ScaleMode.TILE: ("auto", "0 0", "repeat"),
}


def image_url(image_id: str, template: str = DEFAULT_IMAGE_URL_TEMPLATE) -> str:
    if image_id.startswith("/"):
        return image_id
    return template.format(image_id=image_id)


def image_placement(paint: ImagePaint, width: float, height: float) -> Tuple[str, str, str]:
    """Return ``(size, position, repeat)`` for an image paint."""
    transform = paint.image_transform
    if paint.scale_mode == ScaleMode.CROP and transform is not None and width > 0 and height > 0:
        (a, b, tx), (c, d, ty) = transform[0][:3], transform[1][:3]
        if b == 0 and c == 0 and a > 0 and d > 0:
            full_w = width / a
            full_h = height / d
            return (
                f"{full_w:.2f}px {full_h:.2f}px",
                f"{-tx * full_w + 0.0:.2f}px {-ty * full_h + 0.0:.2f}px",
                "no-repeat",
            )
    return SCALE_DEFAULTS.get(paint.scale_mode, SCALE_DEFAULTS[ScaleMode.FILL])


def _box_size(node: DesignNode) -> Tuple[float, float]:
    dims = []
    for axis in ("width", "height"):
        value = getattr(node, axis)
        dims.append(float(value) if isinstance(value, (int, float)) else 0.0)
    return dims[0], dims[1]


def background_layers(
    node: DesignNode, *, image_url_template: str = DEFAULT_IMAGE_URL_TEMPLATE
) -> List[BackgroundLayer]:
    width, height = _box_size(node)
    layers: List[BackgroundLayer] = []
    for paint in reversed(node.style.fills):
        if not paint.visible:
            continue
        blend = blend_mode_css(paint.blend_mode)
        if isinstance(paint, ImagePaint):
            if not paint.image_id:
                continue
            size, position, repeat = image_placement(paint, width, height)
            url = image_url(paint.image_id, image_url_template)
            layers.append(BackgroundLayer("image", f"url('{url}')", size, position, repeat, blend))
        elif isinstance(paint, GradientPaint):
            value = gradient_to_css(paint, width, height)
            if value:
                layers.append(BackgroundLayer("gradient", value, blend=blend))
        elif isinstance(paint, SolidPaint):
            color = rgba_to_css(paint.color, paint.opacity)
            image = f"linear-gradient(0deg, {color} 0%, {color} 100%)"
            layers.append(BackgroundLayer("solid", image, blend=blend, raw_color=color))
    return layers


def paint_css(
    node: DesignNode, *, image_url_template: str = DEFAULT_IMAGE_URL_TEMPLATE
) -> CssProps:
    """Background declarations for the node's fills; empty for text nodes."""
    props = CssProps()
    if node.type == "TEXT":
        return props
    layers = background_layers(node, image_url_template=image_url_template)
    if not layers:
        return props

    if len(layers) == 1:
        layer = layers[0]
        if layer.kind == "solid":
            return props.set("background", layer.raw_color)
        if layer.kind == "gradient":
            return props.set("background", layer.image)
        props.set("background-image", layer.image)
        props.set("background-position", layer.position)
        props.set("background-size", layer.size)
        props.set("background-repeat", layer.repeat)
        return props

    props.set("background-image", ", ".join(layer.image for layer in layers))
    props.set("background-position", ", ".join(layer.position for layer in layers))
    props.set("background-size", ", ".join(layer.size for layer in layers))
    props.set("background-repeat", ", ".join(layer.repeat for layer in layers))
    if any(layer.blend != "normal" for layer in layers):
        props.set("background-blend-mode", ", ".join(layer.blend for layer in layers))
    return props


# ---------------------------------------------------------------------- #
# Radii and masks
# ---------------------------------------------------------------------- #
def radius_css(radii: Optional[Radii]) -> CssProps:
    props = CssProps()
    if radii is None:
        return props
    if radii.uniform is not None and radii.uniform > 0:
        return props.set("border-radius", fmt_px(radii.uniform))
    if radii.corners is not None and any(radii.corners):
        return props.set("border-radius", " ".join(fmt_px(v) for v in radii.corners))
    return props


def mask_image_css(
    node: DesignNode, *, image_url_template: str = DEFAULT_IMAGE_URL_TEMPLATE
) -> CssProps:
    """``mask-image`` declarations for a mask node filled with an image."""
    props = CssProps()
    paint = next(
        (p for p in node.style.fills if isinstance(p, ImagePaint) and p.visible and p.image_id),
        None,
    )
    if paint is None:
        return props
    width, height = _box_size(node)
    size, position, repeat = image_placement(paint, width, height)
    url = f"url('{image_url(paint.image_id, image_url_template)}')"
    mode = "luminance" if (node.mask_type or "").upper() == "LUMINANCE" else "alpha"
    for prefix in ("-webkit-", ""):
        props.set(f"{prefix}mask-image", url)
        props.set(f"{prefix}mask-size", size)
        props.set(f"{prefix}mask-position", position)
        props.set(f"{prefix}mask-repeat", repeat)
    props.set("mask-mode", mode)
    return props


__all__ = [
    "BackgroundLayer",
    "DEFAULT_IMAGE_URL_TEMPLATE",
    "SCALE_DEFAULTS",
    "background_layers",
    "blend_mode_css",
    "gradient_to_css",
    "image_placement",
    "image_url",
    "linear_gradient_angle",
    "mask_image_css",
    "paint_css",
    "radius_css",
    "rgba_to_css",
]
