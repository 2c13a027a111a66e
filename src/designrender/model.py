"""
Pydantic models for the Composition input.

The upstream authoring adapter emits camelCase JSON with enum values
already upper-cased; these models validate that shape and expose it with
snake_case attributes. Models are frozen: the compiler reads the tree but
never writes to it.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

from .matrix import is_affine_2x3

Dimension = Union[float, str]

_MODEL_CONFIG = {
    "populate_by_name": True,
    "alias_generator": to_camel,
    "frozen": True,
}


class LayoutMode(str, Enum):
    NONE = "NONE"
    HORIZONTAL = "HORIZONTAL"
    VERTICAL = "VERTICAL"

class LayoutWrap(str, Enum):
    NO_WRAP = "NO_WRAP"
    WRAP = "WRAP"

class AxisAlign(str, Enum):
    MIN = "MIN"
    CENTER = "CENTER"
    MAX = "MAX"
    SPACE_BETWEEN = "SPACE_BETWEEN"
    BASELINE = "BASELINE"
    STRETCH = "STRETCH"

class LayoutAlign(str, Enum):
    INHERIT = "INHERIT"
    MIN = "MIN"
    CENTER = "CENTER"
    MAX = "MAX"
    STRETCH = "STRETCH"

class SizingMode(str, Enum):
    FIXED = "FIXED"
    AUTO = "AUTO"

class LayoutPositioning(str, Enum):
    AUTO = "AUTO"
    ABSOLUTE = "ABSOLUTE"

class StrokeAlign(str, Enum):
    INSIDE = "INSIDE"
    CENTER = "CENTER"
    OUTSIDE = "OUTSIDE"

class ScaleMode(str, Enum):
    FILL = "FILL"
    FIT = "FIT"
    CROP = "CROP"
    TILE = "TILE"
    STRETCH = "STRETCH"

class EffectType(str, Enum):
    LAYER_BLUR = "LAYER_BLUR"
    BACKGROUND_BLUR = "BACKGROUND_BLUR"
    DROP_SHADOW = "DROP_SHADOW"
    INNER_SHADOW = "INNER_SHADOW"


CONTAINER_TYPES = frozenset({"FRAME", "INSTANCE", "COMPONENT", "COMPONENT_SET", "GROUP"})


class Vec2(BaseModel):
    model_config = _MODEL_CONFIG

    x: float = 0.0
    y: float = 0.0

class Size(BaseModel):
    model_config = _MODEL_CONFIG

    width: float = 0.0
    height: float = 0.0

class Rect(BaseModel):
    model_config = _MODEL_CONFIG

    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

class Color(BaseModel):
    model_config = _MODEL_CONFIG

    r: float = 0.0
    g: float = 0.0
    b: float = 0.0
    a: float = 1.0


def _check_affine(v):
    if v is not None and not is_affine_2x3(v):
        raise ValueError("transform must be a 2x3 matrix of finite numbers")
    return v


# ---------------------------------------------------------------------- #
# Paints and effects
# ---------------------------------------------------------------------- #
class _PaintBase(BaseModel):
    model_config = _MODEL_CONFIG

    visible: bool = True
    opacity: float = 1.0
    blend_mode: Optional[str] = None

class SolidPaint(_PaintBase):
    type: Literal["SOLID"] = "SOLID"
    color: Color = Field(default_factory=Color)

class ImagePaint(_PaintBase):
    type: Literal["IMAGE"] = "IMAGE"
    image_id: Optional[str] = None
    scale_mode: ScaleMode = ScaleMode.FILL
    image_transform: Optional[List[List[float]]] = None

    @field_validator("image_transform")
    @classmethod
    def image_transform_is_affine(cls, v):
        return _check_affine(v)

class GradientStop(BaseModel):
    model_config = _MODEL_CONFIG

    position: float = 0.0
    color: Color = Field(default_factory=Color)

class GradientPaint(_PaintBase):
    type: Literal["GRADIENT_LINEAR", "GRADIENT_RADIAL", "GRADIENT_ANGULAR", "GRADIENT_DIAMOND"]
    gradient_stops: List[GradientStop] = Field(default_factory=list)
    gradient_handle_positions: Optional[List[Vec2]] = None
    gradient_transform: Optional[List[List[float]]] = None

    @field_validator("gradient_transform")
    @classmethod
    def gradient_transform_is_affine(cls, v):
        return _check_affine(v)

Paint = Annotated[Union[SolidPaint, ImagePaint, GradientPaint], Field(discriminator="type")]

class Effect(BaseModel):
    model_config = _MODEL_CONFIG

    type: EffectType
    radius: float = 0.0
    spread: float = 0.0
    offset: Vec2 = Field(default_factory=Vec2)
    color: Optional[Color] = None
    visible: bool = True

class StrokeWeights(BaseModel):
    model_config = _MODEL_CONFIG

    t: float = 0.0
    r: float = 0.0
    b: float = 0.0
    l: float = 0.0

    @property
    def is_uniform(self) -> bool:
        return self.t == self.r == self.b == self.l

    @property
    def is_zero(self) -> bool:
        return not (self.t or self.r or self.b or self.l)

    @property
    def max(self) -> float:
        return max(self.t, self.r, self.b, self.l)

class Radii(BaseModel):
    model_config = _MODEL_CONFIG

    uniform: Optional[float] = None
    corners: Optional[Tuple[float, float, float, float]] = None

    def as_corners(self) -> Tuple[float, float, float, float]:
        """Return ``(tl, tr, br, bl)``."""
        if self.uniform is not None and self.uniform > 0:
            return (self.uniform,) * 4
        if self.corners is not None:
            return self.corners
        return (0.0, 0.0, 0.0, 0.0)

class Style(BaseModel):
    model_config = _MODEL_CONFIG

    fills: List[Paint] = Field(default_factory=list)
    strokes: List[Paint] = Field(default_factory=list)
    stroke_weights: Optional[StrokeWeights] = None
    stroke_align: StrokeAlign = StrokeAlign.INSIDE
    dash_pattern: List[float] = Field(default_factory=list)
    effects: List[Effect] = Field(default_factory=list)
    opacity: float = 1.0
    blend_mode: Optional[str] = None
    radii: Optional[Radii] = None


# ---------------------------------------------------------------------- #
# Text
# ---------------------------------------------------------------------- #
class FontName(BaseModel):
    model_config = _MODEL_CONFIG

    family: str
    style: str = "Regular"

class LetterSpacing(BaseModel):
    model_config = _MODEL_CONFIG

    unit: Literal["PIXELS", "PERCENT"] = "PIXELS"
    value: float = 0.0

class LineHeight(BaseModel):
    model_config = _MODEL_CONFIG

    unit: Literal["PIXELS", "PERCENT", "AUTO"] = "AUTO"
    value: Optional[float] = None

class TextSegment(BaseModel):
    model_config = _MODEL_CONFIG

    start: int = 0
    end: Optional[int] = None
    font_size: Optional[float] = None
    font_name: Optional[FontName] = None
    font_weight: Optional[int] = None
    letter_spacing: Optional[LetterSpacing] = None
    line_height: Optional[LineHeight] = None
    fills: List[Paint] = Field(default_factory=list)
    text_decoration: Optional[str] = None
    text_case: Optional[str] = None

class TextData(BaseModel):
    model_config = _MODEL_CONFIG

    characters: str = ""
    segments: List[TextSegment] = Field(default_factory=list)
    text_align_horizontal: Optional[str] = None
    text_align_vertical: Optional[str] = None
    text_auto_resize: Optional[str] = None
    text_truncation: Optional[str] = None
    paragraph_indent: float = 0.0


# ---------------------------------------------------------------------- #
# Nodes
# ---------------------------------------------------------------------- #
class DesignNode(BaseModel):
    model_config = _MODEL_CONFIG

    id: str
    name: str = ""
    type: str = "FRAME"
    visible: bool = True
    width: Optional[Dimension] = None
    height: Optional[Dimension] = None
    absolute_transform: Optional[List[List[float]]] = None
    render_bounds: Optional[Rect] = None
    absolute_render_bounds: Optional[Rect] = None
    style: Style = Field(default_factory=Style)

    layout_mode: LayoutMode = LayoutMode.NONE
    layout_wrap: LayoutWrap = LayoutWrap.NO_WRAP
    item_spacing: float = 0.0
    counter_axis_spacing: float = 0.0
    item_reverse_z_index: bool = False
    primary_axis_align_items: AxisAlign = AxisAlign.MIN
    counter_axis_align_items: AxisAlign = AxisAlign.MIN
    primary_axis_sizing_mode: SizingMode = SizingMode.FIXED
    counter_axis_sizing_mode: SizingMode = SizingMode.FIXED
    padding_top: float = 0.0
    padding_right: float = 0.0
    padding_bottom: float = 0.0
    padding_left: float = 0.0
    strokes_included_in_layout: bool = False
    clips_content: bool = False

    layout_positioning: LayoutPositioning = LayoutPositioning.AUTO
    layout_grow: float = 0.0
    layout_align: LayoutAlign = LayoutAlign.INHERIT

    text: Optional[TextData] = None
    svg_id: Optional[str] = None
    svg_content: Optional[str] = None
    is_mask: bool = False
    mask_type: Optional[str] = None

    children: List["DesignNode"] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("type")
    @classmethod
    def type_is_upper_case(cls, v):
        if not v or v != v.upper():
            raise ValueError(f"node type must be an upper-case name, got {v!r}")
        return v

    @field_validator("absolute_transform")
    @classmethod
    def transform_is_affine(cls, v):
        return _check_affine(v)

    @field_validator("children")
    @classmethod
    def children_ids_unique(cls, v: List["DesignNode"]):
        ids = [c.id for c in v]
        if len(ids) != len(set(ids)):
            raise ValueError("child id values must be unique within a parent")
        return v

    @property
    def is_auto_layout(self) -> bool:
        return self.layout_mode in (LayoutMode.HORIZONTAL, LayoutMode.VERTICAL)

    @property
    def is_container_type(self) -> bool:
        return self.type in CONTAINER_TYPES

    @property
    def is_absolute_child(self) -> bool:
        return self.layout_positioning == LayoutPositioning.ABSOLUTE


class CompositionInput(BaseModel):
    model_config = _MODEL_CONFIG

    name: str = ""
    abs_origin: Optional[Vec2] = None
    bounds: Optional[Size] = None
    children: List[DesignNode] = Field(default_factory=list)

    @field_validator("children")
    @classmethod
    def children_ids_unique(cls, v: List[DesignNode]):
        ids = [c.id for c in v]
        if len(ids) != len(set(ids)):
            raise ValueError("children id values must be unique")
        return v


DesignNode.model_rebuild()


__all__ = [
    "AxisAlign",
    "Color",
    "CompositionInput",
    "CONTAINER_TYPES",
    "DesignNode",
    "Dimension",
    "Effect",
    "EffectType",
    "FontName",
    "GradientPaint",
    "GradientStop",
    "ImagePaint",
    "LayoutAlign",
    "LayoutMode",
    "LayoutPositioning",
    "LayoutWrap",
    "LetterSpacing",
    "LineHeight",
    "Paint",
    "Radii",
    "Rect",
    "ScaleMode",
    "Size",
    "SolidPaint",
    "StrokeAlign",
    "StrokeWeights",
    "Style",
    "TextData",
    "TextSegment",
    "Vec2",
]
