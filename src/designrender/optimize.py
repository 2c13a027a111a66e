"""
Strip box declarations that are redundant in their rendering context.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .css import CssProps

DO_NOT_TOUCH = frozenset(
    {
        "flex",
        "flex-grow",
        "flex-shrink",
        "flex-basis",
        "transform",
        "z-index",
        "line-height",
        "letter-spacing",
    }
)

ZERO_OFFSETS = frozenset({"0", "0px", "0%"})


@dataclass(frozen=True)
class BoxContext:
    position: str = "absolute"
    has_rotate_or_scale: bool = False
    display: Optional[str] = None
    flex_direction: Optional[str] = None
    is_text: bool = False


def optimize_box_css(props: CssProps, ctx: BoxContext) -> CssProps:
    """
    Return ``props`` without declarations a browser would apply anyway:
    zero left/top on relative boxes, transform-origin without a transform,
    and flex defaults. Text keeps ``justify-content:flex-start`` because its
    vertical alignment relies on it.
    """
    out = CssProps()
    relative = (ctx.position or "").lower() == "relative"
    flex = (ctx.display or "").lower() == "flex"
    for name, value in props.items():
        if name in DO_NOT_TOUCH:
            out.set(name, value)
            continue
        low = value.lower()
        if relative and name in ("left", "top") and low in ZERO_OFFSETS:
            continue
        if name == "transform-origin" and not ctx.has_rotate_or_scale:
            continue
        if flex:
            if name == "justify-content" and low == "flex-start" and not ctx.is_text:
                continue
            if name == "align-items" and low == "stretch":
                continue
            if name == "flex-direction" and low == "row":
                continue
            if name == "flex-wrap" and low == "nowrap":
                continue
        out.set(name, value)
    return out


__all__ = ["BoxContext", "DO_NOT_TOUCH", "optimize_box_css"]
