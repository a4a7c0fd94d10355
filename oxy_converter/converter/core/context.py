"""
Conversion Context - All mutable state of one convert() call.

A new context is created for every conversion (and for every item of a
batch), so id counters, consumed selectors and mined patterns never leak
between inputs.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Set

from bs4 import Tag

from ..analyzers.heuristics import HeaderSpacingState
from ..analyzers.js_pattern_miner import MinedPatterns
from ..contracts.options import ConversionOptions
from ..contracts.report import ConversionReport
from ..parsers.css_parser import CssRule


@dataclass
class ConversionContext:
    """Per-call state threaded through the tree walk."""

    options: ConversionOptions = field(default_factory=ConversionOptions)

    report: ConversionReport = field(default_factory=ConversionReport)

    css: str = ""
    """Stylesheet text extracted from all <style> tags."""

    rules: List[CssRule] = field(default_factory=list)

    rules_by_selector: Dict[str, Dict[str, str]] = field(default_factory=dict)
    """Merged declarations per selector, for the animation detector."""

    patterns: MinedPatterns = field(default_factory=MinedPatterns)

    consumed_selectors: Set[str] = field(default_factory=set)
    """Selectors converted into properties, removed from the residual CSS."""

    animation_selectors: Set[str] = field(default_factory=set)
    """Selectors converted into entrance animations."""

    retained_selectors: Set[str] = field(default_factory=set)
    """Matched selectors that must stay in the residual CSS."""

    preserved_markup: List[Tag] = field(default_factory=list)
    """Roots of markup emitted verbatim; their nodes still need the stylesheet."""

    custom_classes: List[str] = field(default_factory=list)
    """Distinct non-utility class names, in first-seen order."""

    header_state: HeaderSpacingState = field(default_factory=HeaderSpacingState)

    def __post_init__(self):
        self._next_id = self.options.starting_node_id

    def next_id(self) -> int:
        """Next element id."""
        value = self._next_id
        self._next_id += 1
        return value

    def preserve_children(self, node: Tag) -> None:
        """Record the element children of a node whose inner markup is kept as-is."""
        self.preserved_markup.extend(node.find_all(True, recursive=False))

    def add_custom_classes(self, names: Iterable[str]) -> None:
        for name in names:
            if name not in self.custom_classes:
                self.custom_classes.append(name)
