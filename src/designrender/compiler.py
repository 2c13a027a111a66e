"""
Compile a design Composition into HTML, CSS and a geometry-only debug
overlay.

``CompositionRender`` is the entry point: it validates the input with the
pydantic models, compiles it into a Render-IR tree and assembles the
content and debug documents. Every call builds its own context, so one
instance can be compiled and rendered repeatedly with identical output.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

from .context import CompileContext
from .document import RenderedDocument, assemble_document
from .fonts import FontUrlProvider
from .ir import CompiledComposition, composition_to_ir
from .model import CompositionInput
from .settings import RenderSettings

OUTPUT_FILES = {
    "html": "index.html",
    "css": "styles.css",
    "debug_html": "debug.html",
    "debug_css": "debug.css",
}


class CompositionRender:
    """Render one Composition to documents."""

    def __init__(
        self,
        composition: CompositionInput,
        *,
        settings: Optional[RenderSettings] = None,
        font_url_provider: Optional[FontUrlProvider] = None,
    ) -> None:
        self.composition = composition
        self.settings = settings or RenderSettings()
        self.font_url_provider = font_url_provider

    # ------------------------------------------------------------------ #
    # Constructors
    # ------------------------------------------------------------------ #
    @classmethod
    def from_dict(cls, data: Dict[str, Any], **kwargs) -> "CompositionRender":
        """Validate a Composition dict."""
        return cls(CompositionInput.model_validate(data), **kwargs)

    @classmethod
    def from_json(cls, json_str: str, **kwargs) -> "CompositionRender":
        """Load a Composition from a JSON string."""
        return cls.from_dict(json.loads(json_str), **kwargs)

    @classmethod
    def from_file(cls, path: str | Path, **kwargs) -> "CompositionRender":
        """Load a Composition from a JSON file."""
        return cls.from_json(Path(path).read_text(encoding="utf-8"), **kwargs)

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #
    def compile(self) -> CompiledComposition:
        ctx = CompileContext(settings=self.settings)
        return composition_to_ir(self.composition, ctx, font_url_provider=self.font_url_provider)

    def render(self) -> RenderedDocument:
        return assemble_document(
            self.compile(),
            settings=self.settings,
            title=self.composition.name or "Composition",
        )

    def to_document(self, *, debug: bool = False) -> str:
        """Return a standalone HTML page."""
        return self.render().to_document(debug=debug)

    def write(self, out_dir: str | Path) -> Dict[str, Path]:
        """
        Write the content page, stylesheet and, when enabled, the debug
        overlay into ``out_dir``. Returns the written paths by output kind.
        """
        out = Path(out_dir)
        out.mkdir(parents=True, exist_ok=True)
        rendered = self.render()
        contents = {
            "html": rendered.to_document(),
            "css": rendered.css,
        }
        if self.settings.debug_enabled:
            contents["debug_html"] = rendered.to_document(debug=True)
            contents["debug_css"] = rendered.debug_css

        written: Dict[str, Path] = {}
        for kind, text in contents.items():
            path = out / OUTPUT_FILES[kind]
            path.write_text(text, encoding="utf-8")
            written[kind] = path
        return written


__all__ = ["CompositionRender", "OUTPUT_FILES"]
