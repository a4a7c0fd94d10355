"""
Selector Matcher - Decide which stylesheet rules apply to a DOM node.

Supported grammar is a pragmatic subset:
- ``.a.b`` (all classes present), ``#id``, ``tag``
- compound parts ``tag#id.class.class``
- descendant chains of such parts; ``>``, ``+`` and ``~`` are treated as
  plain descendant combinators

Selectors with a pseudo-class or pseudo-element never match, so hover and
``::before`` styling stays in the residual stylesheet instead of becoming a
base style. Anything else outside the grammar (attribute selectors, ``*``,
escapes, functional pseudos) never matches either and is reported once.

Usage:
    from oxy_converter.converter.core.selector_matcher import SelectorMatcher

    matcher = SelectorMatcher()
    matcher.matches(".card .title", node)
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set

from bs4 import Tag

from ..contracts.elements import PropertyTree
from ..mapping.style_mapper import StyleMapper
from ..parsers.css_parser import CssRule
from ..parsers.markup_parser import get_attribute, get_classes

logger = logging.getLogger(__name__)


UNSUPPORTED_SELECTOR_INFO = (
    "{count} CSS selector(s) such as '{example}' were kept in the stylesheet instead of "
    "being converted. The converter supports #id, .class, simple tag+class selectors "
    "and simple descendant chains."
)


@dataclass
class SelectorPart:
    """One compound part of a selector, e.g. ``div#main.card``."""

    tag: Optional[str] = None
    element_id: Optional[str] = None
    classes: List[str] = field(default_factory=list)

    def matches(self, node: Tag) -> bool:
        if self.tag and node.name.lower() != self.tag:
            return False
        if self.element_id and get_attribute(node, "id") != self.element_id:
            return False
        if self.classes:
            node_classes = set(get_classes(node))
            return all(name in node_classes for name in self.classes)
        return True


class SelectorMatcher:
    """Matches selectors against nodes and merges matched rules."""

    PSEUDO_PATTERN = re.compile(r":")
    UNSUPPORTED_PATTERN = re.compile(r"[\[\]*\\()@|]")
    COMBINATOR_PATTERN = re.compile(r"\s*[>+~]\s*")
    MULTI_CLASS_PATTERN = re.compile(r"^(?:\.[A-Za-z_-][\w-]*)+$")
    ID_PATTERN = re.compile(r"^#([A-Za-z_-][\w-]*)$")
    TAG_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9]*$")
    PART_PATTERN = re.compile(r"^([A-Za-z][A-Za-z0-9]*)?((?:[#.][A-Za-z_-][\w-]*)*)$")
    PART_TOKEN_PATTERN = re.compile(r"([#.])([A-Za-z_-][\w-]*)")

    def __init__(self, style_mapper: Optional[StyleMapper] = None):
        self.style_mapper = style_mapper or StyleMapper()

    # =========================================================================
    # GRAMMAR
    # =========================================================================

    def has_pseudo(self, selector: str) -> bool:
        """Check for ``:hover``, ``::before`` and other pseudo segments."""
        return bool(self.PSEUDO_PATTERN.search(selector))

    def is_supported(self, selector: str) -> bool:
        """Check if a selector is inside the matchable grammar."""
        selector = selector.strip()
        if not selector or self.has_pseudo(selector) or self.UNSUPPORTED_PATTERN.search(selector):
            return False
        return self.parse(selector) is not None

    def is_descendant_chain(self, selector: str) -> bool:
        """Check if a selector has more than one compound part."""
        return len(self._normalize(selector).split()) > 1

    def parse(self, selector: str) -> Optional[List[SelectorPart]]:
        """
        Split a selector into compound parts, left to right.

        Returns:
            Parts, or None when any part is outside the grammar
        """
        parts = []
        for text in self._normalize(selector).split():
            part = self.parse_part(text)
            if part is None:
                return None
            parts.append(part)
        return parts or None

    def parse_part(self, text: str) -> Optional[SelectorPart]:
        """Parse one compound part like ``a#id.c1.c2``."""
        match = self.PART_PATTERN.match(text)
        if not match:
            return None

        part = SelectorPart(tag=match.group(1).lower() if match.group(1) else None)
        for kind, name in self.PART_TOKEN_PATTERN.findall(match.group(2)):
            if kind == "#":
                if part.element_id is not None:
                    return None
                part.element_id = name
            else:
                part.classes.append(name)
        return part

    def _normalize(self, selector: str) -> str:
        return self.COMBINATOR_PATTERN.sub(" ", selector.strip())

    # =========================================================================
    # MATCHING
    # =========================================================================

    def matches(self, selector: str, node: Tag) -> bool:
        """
        Check if a selector applies to a node.

        Args:
            selector: Single selector (no commas)
            node: Element to test

        Returns:
            True when the rightmost part matches the node and every earlier
            part matches some ancestor, walking outward (first match wins)
        """
        selector = selector.strip()
        if not selector or self.has_pseudo(selector) or self.UNSUPPORTED_PATTERN.search(selector):
            return False

        if self.MULTI_CLASS_PATTERN.match(selector):
            node_classes = set(get_classes(node))
            return all(name in node_classes for name in selector.split(".")[1:])

        id_match = self.ID_PATTERN.match(selector)
        if id_match:
            return get_attribute(node, "id") == id_match.group(1)

        if self.TAG_PATTERN.match(selector):
            return node.name.lower() == selector.lower()

        parts = self.parse(selector)
        if not parts:
            return False
        return self._match_chain(parts, node)

    def _match_chain(self, parts: List[SelectorPart], node: Tag) -> bool:
        if not parts[-1].matches(node):
            return False

        current = node.parent
        for part in reversed(parts[:-1]):
            while isinstance(current, Tag) and current.name != "[document]":
                if part.matches(current):
                    break
                current = current.parent
            else:
                return False
            current = current.parent
        return True

    # =========================================================================
    # APPLICATION
    # =========================================================================

    def apply_rules(
        self,
        node: Tag,
        rules: Iterable[CssRule],
        properties: PropertyTree,
        consumed: Set[str],
        excluded: Optional[Set[str]] = None,
        retained: Optional[Set[str]] = None,
    ) -> List[str]:
        """
        Merge every matching rule into a node's design, in stylesheet order.

        A rule is consumed only when all of its declarations map to design
        properties. Partially mapped rules are still merged, and their
        selector goes to ``retained`` so the rule stays in the stylesheet.

        Args:
            node: Element being converted
            rules: Parsed stylesheet rules
            properties: Property tree of the element
            consumed: Selectors consumed so far (updated in place)
            excluded: Selectors handled elsewhere (e.g. animations)
            retained: Selectors that must stay in the stylesheet (updated in place)

        Returns:
            Selectors that matched this node
        """
        excluded = excluded or set()
        matched = []
        for rule in rules:
            if rule.selector in excluded or not self.matches(rule.selector, node):
                continue
            properties.merge_design(self.style_mapper.to_properties(rule.declarations))
            unmapped = self.style_mapper.unmapped(rule.declarations)
            if unmapped:
                logger.debug(f"Kept '{rule.selector}' for unmapped {sorted(unmapped)}")
                if retained is not None:
                    retained.add(rule.selector)
            else:
                consumed.add(rule.selector)
            matched.append(rule.selector)

        if matched:
            logger.debug(f"<{node.name}> matched {matched}")
        return matched

    def matches_within(self, selector: str, roots: Iterable[Tag]) -> bool:
        """Check if a selector applies to any root or any of its descendants."""
        for root in roots:
            if self.matches(selector, root):
                return True
            if any(self.matches(selector, node) for node in root.find_all(True)):
                return True
        return False

    def unconverted_selectors(
        self,
        rules: Iterable[CssRule],
        consumed: Set[str],
        excluded: Optional[Set[str]] = None,
    ) -> List[str]:
        """
        Selectors relying on the residual stylesheet because of the grammar.

        Pseudo selectors are excluded: keeping them is intended. Unmatched
        simple selectors are excluded too: they may target other pages.
        """
        excluded = excluded or set()
        found: List[str] = []
        for rule in rules:
            selector = rule.selector
            if selector in consumed or selector in excluded or selector in found:
                continue
            if self.has_pseudo(selector) and not self.UNSUPPORTED_PATTERN.search(selector):
                continue
            if not self.is_supported(selector) or self.is_descendant_chain(selector):
                found.append(selector)
        return found

    def unsupported_info(self, selectors: List[str]) -> Optional[str]:
        """Single info message for unconverted selectors, None when there are none."""
        if not selectors:
            return None
        return UNSUPPORTED_SELECTOR_INFO.format(count=len(selectors), example=selectors[0])
