"""
Class names for content-mode markup.

- semantic classes derived from node names
- layout utility classes (``flex``, ``items-center``, ``gap-[8px]``...) whose
  rules are emitted only for classes actually used
- size utility classes ``w-[Npx]``/``h-[Npx]`` for sizes that recur
- shared classes: a whitelisted subset of style declarations that repeats
  across the document is moved into one ``sc-<hash>`` rule

All tables are built per render call.
"""

from __future__ import annotations

import hashlib
import re
from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from .css import CssProps, Declarations, css_rule, fmt_num
from .layout import LayoutInfo

# ---------------------------------------------------------------------- #
# Semantic names
# ---------------------------------------------------------------------- #
GENERIC_NAMES = frozenset(
    {
        "frame",
        "group",
        "rectangle",
        "ellipse",
        "vector",
        "polygon",
        "star",
        "line",
        "text",
        "component",
        "instance",
    }
)
MAX_CLASS_NAME_LENGTH = 50

_SEPARATORS = re.compile(r"[\s()\[\]{}/\\,.]+")
_INVALID = re.compile(r"[^a-z0-9_-]")
_GENERIC_NUMBERED = re.compile(r"^([a-z]+)-\d+$")


def sanitize_class_name(name: str) -> str:
    token = _SEPARATORS.sub("-", (name or "").strip().lower())
    token = _INVALID.sub("", token)
    token = re.sub(r"--+", "-", token).strip("-")
    return token[:MAX_CLASS_NAME_LENGTH].strip("-")


def semantic_class_name(name: str, fallback: str) -> str:
    """
    Class derived from a node name, or ``fallback`` for generic names such
    as "Frame 3", very short names and bare numbers.
    """
    token = sanitize_class_name(name)
    if len(token) < 2 or token.isdigit() or token in GENERIC_NAMES:
        return fallback
    numbered = _GENERIC_NUMBERED.match(token)
    if numbered and numbered.group(1) in GENERIC_NAMES:
        return fallback
    if token[0].isdigit():
        return f"{fallback}-{token}"
    return token


_SELECTOR_SPECIALS = re.compile(r"([!\"#$%&'()*+,./:;<=>?@\[\\\]^`{|}~])")


def escape_class_selector(name: str) -> str:
    return _SELECTOR_SPECIALS.sub(r"\\\1", name)


# ---------------------------------------------------------------------- #
# Layout utilities
# ---------------------------------------------------------------------- #
SIMPLE_UTILITIES: Dict[Tuple[str, str], str] = {
    ("display", "flex"): "flex",
    ("flex-direction", "column"): "flex-col",
    ("flex-wrap", "wrap"): "flex-wrap",
    ("justify-content", "center"): "justify-center",
    ("justify-content", "flex-end"): "justify-end",
    ("justify-content", "space-between"): "justify-between",
    ("align-items", "flex-start"): "items-start",
    ("align-items", "center"): "items-center",
    ("align-items", "flex-end"): "items-end",
    ("align-items", "baseline"): "items-baseline",
    ("align-self", "flex-start"): "self-start",
    ("align-self", "flex-end"): "self-end",
    ("align-self", "center"): "self-center",
    ("align-self", "stretch"): "self-stretch",
    ("flex-grow", "1"): "grow",
    ("flex-shrink", "1"): "shrink",
    ("flex-basis", "auto"): "basis-auto",
    ("flex-basis", "0px"): "basis-0",
    ("box-sizing", "border-box"): "box-border",
    ("overflow", "hidden"): "overflow-hidden",
    ("width", "auto"): "w-auto",
    ("height", "auto"): "h-auto",
}
_SIMPLE_RULES: Dict[str, Tuple[str, str]] = {cls: decl for decl, cls in SIMPLE_UTILITIES.items()}
_SIMPLE_ORDER = {cls: i for i, cls in enumerate(_SIMPLE_RULES)}

ARBITRARY_UTILITIES: Dict[str, str] = {
    "gap": "gap",
    "row-gap": "gap-y",
    "column-gap": "gap-x",
    "width": "w",
    "height": "h",
}
_ARBITRARY_PROPS = {prefix: prop for prop, prefix in ARBITRARY_UTILITIES.items()}
_ARBITRARY_CLASS = re.compile(r"^(gap|gap-x|gap-y|w|h)-\[(-?\d+(?:\.\d+)?)px\]$")
_PX_VALUE = re.compile(r"^\d+(?:\.\d+)?px$")

# Only flex layout declarations become utilities; sizes go through SizeFrequency.
_LAYOUT_ARBITRARY = ("gap", "row-gap", "column-gap")


def layout_utility_classes(props: CssProps) -> Tuple[List[str], CssProps]:
    """Split layout declarations into utility classes and the remaining CSS."""
    classes: List[str] = []
    remaining = CssProps()
    for name, value in props.items():
        simple = SIMPLE_UTILITIES.get((name, value))
        if simple is not None:
            classes.append(simple)
        elif name in _LAYOUT_ARBITRARY and _PX_VALUE.match(value):
            classes.append(f"{ARBITRARY_UTILITIES[name]}-[{value}]")
        else:
            remaining.set(name, value)
    return classes, remaining


def utility_rule(name: str, scope: str = "") -> Optional[str]:
    """The CSS rule for a utility class, or ``None`` for unknown names."""
    selector = f"{scope} .{escape_class_selector(name)}" if scope else f".{escape_class_selector(name)}"
    simple = _SIMPLE_RULES.get(name)
    if simple is not None:
        return css_rule(selector, CssProps([simple]))
    match = _ARBITRARY_CLASS.match(name)
    if match:
        prop = _ARBITRARY_PROPS[match.group(1)]
        return css_rule(selector, CssProps([(prop, f"{match.group(2)}px")]))
    return None


class UtilityClassSet:
    """Utility classes used during one render, emitted in a stable order."""

    def __init__(self) -> None:
        self._used: set = set()

    def add(self, names: Iterable[str]) -> None:
        self._used.update(names)

    def __contains__(self, name: object) -> bool:
        return name in self._used

    def __len__(self) -> int:
        return len(self._used)

    def css(self, scope: str = "") -> str:
        simple = sorted((n for n in self._used if n in _SIMPLE_ORDER), key=_SIMPLE_ORDER.__getitem__)
        arbitrary = sorted(n for n in self._used if n not in _SIMPLE_ORDER)
        rules = [utility_rule(name, scope) for name in simple + arbitrary]
        return "\n".join(rule for rule in rules if rule)


# ---------------------------------------------------------------------- #
# Size utilities
# ---------------------------------------------------------------------- #
class SizeFrequency:
    """Document-wide counts of numeric widths and heights."""

    def __init__(self) -> None:
        self.widths: Counter = Counter()
        self.heights: Counter = Counter()

    @classmethod
    def from_layouts(cls, layouts: Iterable[LayoutInfo]) -> "SizeFrequency":
        freq = cls()
        for layout in layouts:
            if layout.css_width is None:
                freq.widths[fmt_num(layout.width)] += 1
            if layout.css_height is None:
                freq.heights[fmt_num(layout.height)] += 1
        return freq

    def width_class(self, layout: LayoutInfo) -> Optional[str]:
        if layout.css_width is not None:
            return None
        value = fmt_num(layout.width)
        return f"w-[{value}px]" if self.widths[value] > 1 else None

    def height_class(self, layout: LayoutInfo) -> Optional[str]:
        if layout.css_height is not None:
            return None
        value = fmt_num(layout.height)
        return f"h-[{value}px]" if self.heights[value] > 1 else None


# ---------------------------------------------------------------------- #
# Shared classes
# ---------------------------------------------------------------------- #
SHARED_WHITELIST = frozenset(
    {
        "font-family",
        "font-size",
        "font-weight",
        "line-height",
        "letter-spacing",
        "text-transform",
        "text-decoration",
        "color",
        "opacity",
        "background",
        "background-color",
        "border",
        "border-radius",
        "box-shadow",
        "filter",
        "backdrop-filter",
        "-webkit-backdrop-filter",
    }
)
SHARED_CLASS_PREFIX = "sc-"


@dataclass(frozen=True)
class SharedClass:
    name: str
    declarations: Declarations
    usage: int

    def rule(self, scope: str) -> str:
        props = CssProps(sorted(self.declarations))
        return css_rule(f"{scope} .{self.name}", props)


def shared_class_name(key: str) -> str:
    return SHARED_CLASS_PREFIX + hashlib.sha1(key.encode("utf-8")).hexdigest()[:8]


class SharedClassTable:
    """
    Shared classes for one render.

    Built in an up-front pass over every box that will later call
    :meth:`apply`, so frequencies are document-wide before any markup is
    produced.
    """

    def __init__(self, classes: Iterable[SharedClass] = (), *, scope: str = "[data-design-render]") -> None:
        self.scope = scope
        self.classes: List[SharedClass] = list(classes)
        self._by_key: Dict[str, str] = {
            CssProps(c.declarations).stable_key(): c.name for c in self.classes
        }

    @classmethod
    def build(
        cls,
        boxes: Iterable[CssProps],
        *,
        threshold: int = 2,
        scope: str = "[data-design-render]",
    ) -> "SharedClassTable":
        counts: Counter = Counter()
        first: Dict[str, Declarations] = {}
        for props in boxes:
            shared = props.subset(SHARED_WHITELIST)
            key = shared.stable_key()
            if not key:
                continue
            counts[key] += 1
            first.setdefault(key, shared.declarations())
        classes = [
            SharedClass(shared_class_name(key), first[key], count)
            for key, count in counts.items()
            if count >= threshold
        ]
        return cls(classes, scope=scope)

    def apply(self, props: CssProps) -> Tuple[Optional[str], CssProps]:
        """Return the shared class for ``props`` and the CSS left inline."""
        key = props.subset(SHARED_WHITELIST).stable_key()
        name = self._by_key.get(key) if key else None
        if name is None:
            return None, props
        return name, props.without(SHARED_WHITELIST)

    def css(self) -> str:
        return "\n".join(c.rule(self.scope) for c in self.classes)

    def __len__(self) -> int:
        return len(self.classes)


__all__ = [
    "GENERIC_NAMES",
    "SHARED_WHITELIST",
    "SharedClass",
    "SharedClassTable",
    "SizeFrequency",
    "UtilityClassSet",
    "escape_class_selector",
    "layout_utility_classes",
    "sanitize_class_name",
    "semantic_class_name",
    "shared_class_name",
    "utility_rule",
]
