"""
designrender package initialization.
Exports the composition compiler, its result types and resource helpers.
"""

from .compiler import CompositionRender
from .document import RenderedDocument, Viewport, assemble_document, compute_viewport
from .errors import (
    ContractViolation,
    DesignRenderError,
    EmptyCompositionError,
    InvalidDimensionError,
    InvisibleNodeError,
    MissingOriginError,
    MissingRenderBoundsError,
    MissingTransformError,
    SingularTransformError,
)
from .fonts import FontInfo
from .ir import CompiledComposition, RenderNodeIR, composition_to_ir
from .markup import CONTENT_MODE, DEBUG_MODE, render_markup
from .model import CompositionInput, DesignNode
from .resources import base_css, debug_css
from .settings import RenderSettings, get_settings

__all__ = [
    "CONTENT_MODE",
    "CompiledComposition",
    "CompositionInput",
    "CompositionRender",
    "ContractViolation",
    "DEBUG_MODE",
    "DesignNode",
    "DesignRenderError",
    "EmptyCompositionError",
    "FontInfo",
    "InvalidDimensionError",
    "InvisibleNodeError",
    "MissingOriginError",
    "MissingRenderBoundsError",
    "MissingTransformError",
    "RenderNodeIR",
    "RenderSettings",
    "RenderedDocument",
    "SingularTransformError",
    "Viewport",
    "assemble_document",
    "base_css",
    "composition_to_ir",
    "compute_viewport",
    "debug_css",
    "get_settings",
    "render_markup",
]
