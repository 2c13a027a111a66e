"""
Ordered CSS declaration bags.

Style synthesis, optimization and class extraction all operate on
``CssProps`` instances; CSS text is produced only when markup or
stylesheets are serialized.
"""

from __future__ import annotations

import math
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

Number = float | int
Declarations = Tuple[Tuple[str, str], ...]


def fmt_num(value: Number, dp: int = 2) -> str:
    """Round to ``dp`` decimals and drop trailing zeros ("-0" becomes "0")."""
    if not math.isfinite(value):
        return "0"
    rounded = round(float(value), dp)
    if abs(rounded) < 10 ** -dp:
        rounded = 0.0
    text = f"{rounded:.{dp}f}".rstrip("0").rstrip(".")
    return text or "0"


def fmt_px(value: Number) -> str:
    return f"{fmt_num(value)}px"


def split_top_level(value: str, sep: str = ",") -> List[str]:
    """
    Split ``value`` on ``sep`` while ignoring separators nested in
    parentheses or quotes. ``sep=" "`` splits filter chains.
    """
    parts: List[str] = []
    depth = 0
    quote: Optional[str] = None
    current: List[str] = []
    for ch in value:
        if quote:
            current.append(ch)
            if ch == quote:
                quote = None
            continue
        if ch in "\"'":
            quote = ch
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth = max(depth - 1, 0)
        elif depth == 0 and (ch == sep or (sep == " " and ch.isspace())):
            token = "".join(current).strip()
            if token:
                parts.append(token)
            current = []
            continue
        current.append(ch)
    token = "".join(current).strip()
    if token:
        parts.append(token)
    return parts


class CssProps:
    """An ordered ``property -> value`` mapping for one declaration block."""

    __slots__ = ("_items",)

    def __init__(
        self,
        items: Union[None, Mapping[str, str], Iterable[Tuple[str, str]]] = None,
    ) -> None:
        self._items: Dict[str, str] = {}
        if items is not None:
            self.update(items)

    # ------------------------------------------------------------------ #
    # Mapping protocol
    # ------------------------------------------------------------------ #
    def __contains__(self, name: object) -> bool:
        return name in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CssProps):
            return NotImplemented
        return list(self._items.items()) == list(other._items.items())

    def __repr__(self) -> str:
        return f"CssProps({self.serialize()!r})"

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self._items.get(name, default)

    def items(self) -> List[Tuple[str, str]]:
        return list(self._items.items())

    # ------------------------------------------------------------------ #
    # Mutation
    # ------------------------------------------------------------------ #
    def set(self, name: str, value: Union[str, Number]) -> "CssProps":
        self._items[name] = str(value)
        return self

    def pop(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self._items.pop(name, default)

    def update(
        self, other: Union["CssProps", Mapping[str, str], Iterable[Tuple[str, str]]]
    ) -> "CssProps":
        if isinstance(other, CssProps):
            pairs: Iterable[Tuple[str, str]] = other.items()
        elif isinstance(other, Mapping):
            pairs = other.items()
        else:
            pairs = other
        for name, value in pairs:
            self.set(name, value)
        return self

    def append_list(self, name: str, value: str, *, sep: str = ", ") -> "CssProps":
        """Append to a list-valued property such as box-shadow or filter."""
        current = self._items.get(name)
        self._items[name] = f"{current}{sep}{value}" if current else value
        return self

    def copy(self) -> "CssProps":
        return CssProps(self._items.items())

    def subset(self, names: Iterable[str]) -> "CssProps":
        """Declarations whose name is in ``names``, in this bag's order."""
        wanted = set(names)
        return CssProps((k, v) for k, v in self._items.items() if k in wanted)

    def without(self, names: Iterable[str]) -> "CssProps":
        drop = set(names)
        return CssProps((k, v) for k, v in self._items.items() if k not in drop)

    # ------------------------------------------------------------------ #
    # Serialization
    # ------------------------------------------------------------------ #
    def declarations(self) -> Declarations:
        return tuple(self._items.items())

    def serialize(self) -> str:
        return "".join(f"{k}:{v};" for k, v in self._items.items())

    def stable_key(self) -> str:
        """Order-independent key: sorted ``name:value`` pairs joined by ``;``."""
        return ";".join(f"{k}:{v}" for k, v in sorted(self._items.items()))


def css_rule(selector: str, props: CssProps) -> str:
    return f"{selector}{{{props.serialize()}}}"


__all__ = [
    "CssProps",
    "Declarations",
    "css_rule",
    "fmt_num",
    "fmt_px",
    "split_top_level",
]
