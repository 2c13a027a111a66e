"""
Shadow and blur effects.

Effects are first parsed into ``ParsedEffects`` and then expanded into
``EffectTokens``: the value lists of ``box-shadow``, ``text-shadow``,
``filter`` and ``backdrop-filter``. Keeping tokens as lists lets stroke
box-shadows and inherited shadows be merged before one final
serialization.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List, Sequence, Tuple

from .css import CssProps, fmt_num
from .model import DesignNode, EffectType, Style
from .paint import rgba_to_css

EFFECTS_SELF = "self"
EFFECTS_INHERIT = "inherit"

TARGET_SELF = "self"
TARGET_CONTENT = "content"


@dataclass(frozen=True)
class Shadow:
    type: EffectType
    x: float
    y: float
    blur: float
    spread: float
    color: str

    @property
    def is_inner(self) -> bool:
        return self.type == EffectType.INNER_SHADOW


@dataclass(frozen=True)
class ParsedEffects:
    shadows: Tuple[Shadow, ...] = ()
    layer_blur: float = 0.0
    background_blur: float = 0.0


@dataclass
class EffectTokens:
    box_shadows: List[str] = field(default_factory=list)
    text_shadows: List[str] = field(default_factory=list)
    filters: List[str] = field(default_factory=list)
    backdrop_filters: List[str] = field(default_factory=list)

    def to_css(self) -> CssProps:
        props = CssProps()
        if self.box_shadows:
            props.set("box-shadow", ",".join(self.box_shadows))
        if self.text_shadows:
            props.set("text-shadow", ",".join(self.text_shadows))
        if self.filters:
            props.set("filter", " ".join(self.filters))
        if self.backdrop_filters:
            value = " ".join(self.backdrop_filters)
            props.set("backdrop-filter", value)
            props.set("-webkit-backdrop-filter", value)
        return props


def parse_effects(style: Style) -> ParsedEffects:
    """Collect visible shadows in order and the largest blur radius of each kind."""
    shadows: List[Shadow] = []
    layer_blur = 0.0
    background_blur = 0.0
    for effect in style.effects:
        if not effect.visible:
            continue
        if effect.type == EffectType.LAYER_BLUR:
            layer_blur = max(layer_blur, effect.radius)
        elif effect.type == EffectType.BACKGROUND_BLUR:
            background_blur = max(background_blur, effect.radius)
        else:
            shadows.append(
                Shadow(
                    type=effect.type,
                    x=effect.offset.x,
                    y=effect.offset.y,
                    blur=effect.radius,
                    spread=effect.spread,
                    color=rgba_to_css(effect.color) or "rgb(0,0,0)",
                )
            )
    return ParsedEffects(tuple(shadows), layer_blur, background_blur)


def without_shadows(effects: ParsedEffects) -> ParsedEffects:
    return replace(effects, shadows=())


def _px(value: float) -> str:
    return f"{fmt_num(value)}px"


def box_shadow_token(shadow: Shadow) -> str:
    inset = "inset " if shadow.is_inner else ""
    return f"{inset}{_px(shadow.x)} {_px(shadow.y)} {_px(shadow.blur)} {_px(shadow.spread)} {shadow.color}"


def text_shadow_token(shadow: Shadow) -> str:
    return f"{_px(shadow.x)} {_px(shadow.y)} {_px(shadow.blur)} {shadow.color}"


def drop_shadow_token(shadow: Shadow) -> str:
    return f"drop-shadow({_px(shadow.x)} {_px(shadow.y)} {_px(shadow.blur)} {shadow.color})"


def effect_tokens(effects: ParsedEffects, *, target: str = TARGET_SELF, is_text: bool = False) -> EffectTokens:
    """
    Expand ``effects`` for a box (``target="self"``) or for rendered
    content such as baked vectors (``target="content"``).

    Text never takes inner shadows; its drop shadows become text-shadow.
    Blur radii are halved to match the design tool's rendering.
    """
    tokens = EffectTokens()
    for shadow in effects.shadows:
        if target == TARGET_CONTENT:
            if shadow.is_inner:
                tokens.box_shadows.append(box_shadow_token(shadow))
            else:
                tokens.filters.append(drop_shadow_token(shadow))
        elif shadow.is_inner:
            if not is_text:
                tokens.box_shadows.append(box_shadow_token(shadow))
        elif is_text:
            tokens.text_shadows.append(text_shadow_token(shadow))
        else:
            tokens.box_shadows.append(box_shadow_token(shadow))
    if effects.layer_blur > 0:
        tokens.filters.append(f"blur({_px(effects.layer_blur / 2)})")
    if effects.background_blur > 0:
        tokens.backdrop_filters.append(f"blur({_px(effects.background_blur / 2)})")
    return tokens


def merge_inherited(
    tokens: EffectTokens,
    inherited: Sequence[Shadow],
    *,
    target: str = TARGET_SELF,
    is_text: bool = False,
) -> EffectTokens:
    """
    Add shadows pushed down from a bare shadow holder ancestor.

    Drop shadows join the box-shadow list of painting boxes and become
    drop-shadow filters on text and content targets; inner shadows are
    inset box-shadows, skipped for text.
    """
    merged = EffectTokens(
        list(tokens.box_shadows),
        list(tokens.text_shadows),
        list(tokens.filters),
        list(tokens.backdrop_filters),
    )
    for shadow in inherited:
        if shadow.is_inner:
            if not is_text:
                merged.box_shadows.append(box_shadow_token(shadow))
        elif is_text or target == TARGET_CONTENT:
            merged.filters.append(drop_shadow_token(shadow))
        else:
            merged.box_shadows.append(box_shadow_token(shadow))
    return merged


def has_shadow_effects(style: Style) -> bool:
    return any(
        e.visible and e.type in (EffectType.DROP_SHADOW, EffectType.INNER_SHADOW)
        for e in style.effects
    )


def effects_mode(node: DesignNode) -> str:
    """``inherit`` for a bare shadow holder: no visible fill or stroke, but a shadow."""
    style = node.style
    has_fills = any(p.visible for p in style.fills)
    has_strokes = any(p.visible for p in style.strokes)
    if not has_fills and not has_strokes and has_shadow_effects(style):
        return EFFECTS_INHERIT
    return EFFECTS_SELF


def effect_target(node: DesignNode) -> str:
    return TARGET_CONTENT if (node.svg_content or node.svg_id) else TARGET_SELF


__all__ = [
    "EFFECTS_INHERIT",
    "EFFECTS_SELF",
    "EffectTokens",
    "ParsedEffects",
    "Shadow",
    "TARGET_CONTENT",
    "TARGET_SELF",
    "box_shadow_token",
    "drop_shadow_token",
    "effect_target",
    "effect_tokens",
    "effects_mode",
    "has_shadow_effects",
    "merge_inherited",
    "parse_effects",
    "text_shadow_token",
    "without_shadows",
]
