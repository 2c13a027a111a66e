"""
Font collection and stylesheet link metadata.

Families are collected from text segments. A Google Fonts css2 URL is
built from them, and an optional provider callable may contribute extra
stylesheet URLs per family (for example a CDN hosting CJK subsets). Provider
failures are logged and the family is skipped; they never affect layout or
paint output.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Set, Tuple
from urllib.parse import urlsplit

from .model import CompositionInput, DesignNode
from .text import infer_font_weight

logger = logging.getLogger(__name__)

GOOGLE_FONTS_CSS2 = "https://fonts.googleapis.com/css2"
STANDARD_FONT_WEIGHTS = (100, 200, 300, 400, 500, 600, 700, 800, 900)


@dataclass(frozen=True)
class FontInfo:
    family: str
    weights: Tuple[int, ...]
    styles: Tuple[str, ...]

    @property
    def has_italic(self) -> bool:
        return any("italic" in s.lower() for s in self.styles)


FontUrlProvider = Callable[[FontInfo], Iterable[str]]


class FontCollector:
    """Families in first-seen order with their used weights and styles."""

    def __init__(self) -> None:
        self._weights: Dict[str, Set[int]] = {}
        self._styles: Dict[str, List[str]] = {}

    def add(self, family: str, weight: Optional[int] = None, style: Optional[str] = None) -> None:
        weights = self._weights.setdefault(family, set())
        styles = self._styles.setdefault(family, [])
        if weight:
            weights.add(int(weight))
        if style and style not in styles:
            styles.append(style)

    def fonts(self) -> List[FontInfo]:
        return [
            FontInfo(family, tuple(sorted(self._weights[family])), tuple(self._styles[family]))
            for family in self._weights
        ]

    def google_fonts_url(self) -> Optional[str]:
        specs = []
        for info in self.fonts():
            name = "+".join(info.family.split())
            weights = sorted(set(STANDARD_FONT_WEIGHTS) | set(info.weights))
            if info.has_italic:
                values = [f"{ital},{w}" for w in weights for ital in (0, 1)]
                axes = "ital,wght"
            else:
                values = [str(w) for w in weights]
                axes = "wght"
            specs.append(f"family={name}:{axes}@{';'.join(values)}")
        if not specs:
            return None
        return f"{GOOGLE_FONTS_CSS2}?{'&'.join(specs)}&display=swap"

    def __len__(self) -> int:
        return len(self._weights)


def _walk(node: DesignNode, collector: FontCollector) -> None:
    if node.text is not None:
        for segment in node.text.segments:
            if segment.font_name is None or not segment.font_name.family:
                continue
            weight = segment.font_weight or infer_font_weight(segment.font_name.style)
            collector.add(segment.font_name.family, weight, segment.font_name.style)
    for child in node.children:
        _walk(child, collector)


def collect_fonts(composition: CompositionInput) -> FontCollector:
    collector = FontCollector()
    for child in composition.children:
        _walk(child, collector)
    return collector


def provider_urls(fonts: Iterable[FontInfo], provider: Optional[FontUrlProvider]) -> List[str]:
    """Extra stylesheet URLs from ``provider``, deduplicated in order."""
    if provider is None:
        return []
    urls: List[str] = []
    for info in fonts:
        try:
            found = list(provider(info) or ())
        except Exception as exc:
            logger.warning("font provider failed for %r: %s", info.family, exc)
            continue
        for url in found:
            if url and url not in urls:
                urls.append(url)
    return urls


def _origin(url: str) -> Optional[str]:
    parts = urlsplit(url)
    if not parts.scheme or not parts.netloc:
        return None
    return f"{parts.scheme}://{parts.netloc}"


def font_link_tags(google_fonts_url: Optional[str], stylesheet_urls: Iterable[str] = ()) -> List[str]:
    """``<link>`` tags: preconnect origins first, then stylesheets."""
    sheets: List[str] = []
    if google_fonts_url:
        sheets.append(google_fonts_url)
    for url in stylesheet_urls:
        if url not in sheets:
            sheets.append(url)
    if not sheets:
        return []

    origins: List[str] = []
    if google_fonts_url:
        origins.extend(["https://fonts.googleapis.com", "https://fonts.gstatic.com"])
    for url in sheets:
        origin = _origin(url)
        if origin and origin not in origins:
            origins.append(origin)

    tags = []
    for origin in origins:
        crossorigin = " crossorigin" if origin == "https://fonts.gstatic.com" else ""
        tags.append(f'<link rel="preconnect" href="{origin}"{crossorigin}/>')
    for url in sheets:
        tags.append(f'<link rel="stylesheet" href="{_escape_attr(url)}"/>')
    return tags


def _escape_attr(value: str) -> str:
    return value.replace("&", "&amp;").replace('"', "&quot;")


__all__ = [
    "FontCollector",
    "FontInfo",
    "FontUrlProvider",
    "STANDARD_FONT_WEIGHTS",
    "collect_fonts",
    "font_link_tags",
    "provider_urls",
]
