"""
Per-run compilation state.

A ``CompileContext`` is created by each compile call and threaded through
the tree walk; nothing here is module-level, so two runs never share
pseudo rules.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from .css import CssProps, css_rule
from .settings import RenderSettings


class PseudoRuleCollector:
    """Ordered ``selector -> declarations`` rules for stroke pseudo-elements."""

    def __init__(self) -> None:
        self._rules: Dict[str, CssProps] = {}

    def add(self, selector: str, props: CssProps) -> None:
        if not props:
            return
        self._rules[selector] = props.copy()

    def rules(self) -> List[str]:
        return [css_rule(selector, props) for selector, props in self._rules.items()]

    def to_css(self) -> str:
        return "\n".join(self.rules())

    def __len__(self) -> int:
        return len(self._rules)


@dataclass
class CompileContext:
    settings: RenderSettings = field(default_factory=RenderSettings)
    pseudo_rules: PseudoRuleCollector = field(default_factory=PseudoRuleCollector)


__all__ = ["CompileContext", "PseudoRuleCollector"]
