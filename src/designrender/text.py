"""
Typography: text box CSS and styled segment markup.
"""

from __future__ import annotations

from dataclasses import dataclass
from html import escape
from typing import Optional

from .css import CssProps, fmt_num
from .model import SolidPaint, TextData, TextSegment
from .paint import rgba_to_css

AUTO_WIDTH_MODES = ("WIDTH", "WIDTH_AND_HEIGHT")
AUTO_HEIGHT_MODES = ("HEIGHT", "WIDTH_AND_HEIGHT")

TEXT_ALIGN = {
    "LEFT": "left",
    "CENTER": "center",
    "RIGHT": "right",
    "JUSTIFIED": "justify",
}

VERTICAL_ALIGN = {
    "TOP": "flex-start",
    "CENTER": "center",
    "BOTTOM": "flex-end",
}

TEXT_DECORATION = {
    "UNDERLINE": "underline",
    "STRIKETHROUGH": "line-through",
}

TEXT_CASE = {
    "UPPER": "uppercase",
    "LOWER": "lowercase",
    "TITLE": "capitalize",
}


def infer_font_weight(style: Optional[str]) -> int:
    """Numeric weight from a font style name such as ``"Semi Bold Italic"``."""
    if not style:
        return 400
    s = " ".join(style.lower().replace("-", " ").replace("_", " ").split())
    if "thin" in s or "hairline" in s:
        return 100
    if any(k in s for k in ("extra light", "ultra light", "extralight", "ultralight")):
        return 200
    if "light" in s:
        return 300
    if "medium" in s:
        return 500
    if any(k in s for k in ("semi bold", "semibold", "demi bold", "demibold")):
        return 600
    if any(k in s for k in ("extra bold", "ultra bold", "extrabold", "ultrabold")):
        return 800
    if "black" in s or "heavy" in s:
        return 900
    if "bold" in s:
        return 700
    return 400


def is_italic(style: Optional[str]) -> bool:
    return "italic" in (style or "").lower()


def font_stack(family: str) -> str:
    if " " in family or "-" in family:
        return f"'{family}', sans-serif"
    return f"{family}, sans-serif"


def segment_weight(segment: TextSegment) -> int:
    if segment.font_weight is not None:
        return segment.font_weight
    return infer_font_weight(segment.font_name.style if segment.font_name else None)


def segment_css(segment: TextSegment) -> CssProps:
    """Inline style of one text run."""
    props = CssProps()
    if segment.font_size is not None:
        props.set("font-size", f"{fmt_num(segment.font_size)}px")
    if segment.font_name is not None:
        props.set("font-family", font_stack(segment.font_name.family))
        if is_italic(segment.font_name.style):
            props.set("font-style", "italic")
    if segment.font_weight is not None or segment.font_name is not None:
        props.set("font-weight", segment_weight(segment))

    spacing = segment.letter_spacing
    if spacing is not None and spacing.value:
        if spacing.unit == "PERCENT":
            em = spacing.value / 100
            if abs(round(em, 2)) >= 0.01:
                props.set("letter-spacing", f"{fmt_num(em)}em")
        elif abs(round(spacing.value, 2)) >= 0.01:
            props.set("letter-spacing", f"{fmt_num(spacing.value)}px")

    line_height = segment.line_height
    if line_height is not None and line_height.value is not None:
        if line_height.unit == "PIXELS":
            props.set("line-height", f"{fmt_num(line_height.value)}px")
        elif line_height.unit == "PERCENT" and line_height.value > 100:
            props.set("line-height", f"{fmt_num(line_height.value)}%")

    solid = next(
        (p for p in segment.fills if isinstance(p, SolidPaint) and p.visible),
        None,
    )
    props.set("color", rgba_to_css(solid.color, solid.opacity) if solid else "transparent")

    decoration = TEXT_DECORATION.get((segment.text_decoration or "").upper())
    if decoration:
        props.set("text-decoration", decoration)
    transform = TEXT_CASE.get((segment.text_case or "").upper())
    if transform:
        props.set("text-transform", transform)
    return props


@dataclass(frozen=True)
class TextBoxCss:
    css: CssProps
    auto_width: bool
    auto_height: bool
    uses_flex: bool


def text_box_css(text: TextData) -> TextBoxCss:
    """White-space policy, alignment and indentation of the text box."""
    props = CssProps()
    auto_resize = (text.text_auto_resize or "").upper()
    truncation = (text.text_truncation or "").upper()
    auto_width = auto_resize in AUTO_WIDTH_MODES

    if truncation == "ENDING" or auto_resize == "TRUNCATE":
        props.set("white-space", "nowrap")
        props.set("overflow", "hidden")
        props.set("text-overflow", "ellipsis")
    elif auto_width:
        props.set("white-space", "pre")
    else:
        props.set("white-space", "pre-wrap")

    align = TEXT_ALIGN.get((text.text_align_horizontal or "").upper())
    if align:
        props.set("text-align", align)

    vertical = VERTICAL_ALIGN.get((text.text_align_vertical or "").upper())
    if vertical:
        props.set("display", "flex")
        if auto_width:
            props.set("align-items", vertical)
        else:
            props.set("flex-direction", "column")
            props.set("justify-content", vertical)

    if text.paragraph_indent:
        props.set("text-indent", f"{fmt_num(text.paragraph_indent)}px")

    return TextBoxCss(
        css=props,
        auto_width=auto_width,
        auto_height=auto_resize in AUTO_HEIGHT_MODES,
        uses_flex=vertical is not None,
    )


def _escape_run(value: str) -> str:
    return escape(value, quote=False).replace("\n", "<br/>")


def render_segments(text: TextData, *, wrap: bool = False) -> str:
    """
    Text runs as ``<span style>`` markup. Runs are wrapped in one block when
    the text has line breaks or ``wrap`` is set, so a flex text box sees a
    single flex item.
    """
    chars = text.characters
    if not text.segments:
        body = _escape_run(chars)
    else:
        parts = []
        for segment in text.segments:
            end = segment.end if segment.end is not None else len(chars)
            run = chars[segment.start:end]
            style = escape(segment_css(segment).serialize(), quote=True)
            parts.append(f'<span style="{style}">{_escape_run(run)}</span>')
        body = "".join(parts)
    if wrap or "\n" in chars:
        return f"<div>{body}</div>"
    return body


__all__ = [
    "TextBoxCss",
    "font_stack",
    "infer_font_weight",
    "is_italic",
    "render_segments",
    "segment_css",
    "segment_weight",
    "text_box_css",
]
