"""
CSS Parser - Split stylesheet text into rules and top-level blocks.

A single left-to-right scan tracks brace depth, quote state and ``/* */``
comments, so braces inside strings, urls or comments never change depth.
Top-level at-rules (``@media``, ``@keyframes``, ``@font-face``, ...) are
recognized as whole blocks and never decomposed into rules.

Usage:
    from oxy_converter.converter.parsers import CssParser

    parser = CssParser()
    for rule in parser.parse(".a, .b { color: red; margin: 0 !important }"):
        print(rule.selector, rule.declarations)
    # .a {'color': 'red', 'margin': '0'}
    # .b {'color': 'red', 'margin': '0'}
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)
_IMPORTANT = re.compile(r"!\s*important", re.IGNORECASE)
_AT_KEYWORD = re.compile(r"^@([\w-]+)")
_KEYFRAMES_PRELUDE = re.compile(r"^@(?:-[a-z]+-)?keyframes\s+([^\s{]+)", re.IGNORECASE)


@dataclass
class CssRule:
    """One selector with its declarations."""

    selector: str
    """Single selector (comma groups are split into separate rules)."""

    declarations: Dict[str, str] = field(default_factory=dict)
    """Property to value, ``!important`` stripped."""

    def __repr__(self) -> str:
        """String representation."""
        return f"CssRule({self.selector!r}, {len(self.declarations)} declarations)"


@dataclass
class CssBlock:
    """One top-level block of a stylesheet with its source position."""

    prelude: str
    """Text before the opening brace (comments removed, trimmed)."""

    body: Optional[str]
    """Text between the outer braces, None for statements ending in ``;``."""

    start: int
    """Offset of the first significant character of the prelude."""

    end: int
    """Offset just past the closing brace (or semicolon)."""

    @property
    def is_at_rule(self) -> bool:
        return self.prelude.startswith("@")

    @property
    def at_keyword(self) -> Optional[str]:
        """Lower-cased at-rule name without vendor prefix, e.g. 'media', 'keyframes'."""
        match = _AT_KEYWORD.match(self.prelude)
        if not match:
            return None
        return re.sub(r"^-[a-z]+-", "", match.group(1).lower())

    @property
    def keyframes_name(self) -> Optional[str]:
        """Animation name for ``@keyframes`` blocks."""
        match = _KEYFRAMES_PRELUDE.match(self.prelude)
        return match.group(1) if match else None

    @property
    def selectors(self) -> List[str]:
        """Comma-separated selectors of a style rule (empty for at-rules)."""
        if self.is_at_rule:
            return []
        return CssParser.split_selectors(self.prelude)

    def source(self, css: str) -> str:
        """Original text of this block within ``css``."""
        return css[self.start:self.end]


class CssParser:
    """
    Depth-aware stylesheet parser.

    Provides:
    - scan(): positioned top-level blocks
    - parse(): flat rule list (style rules only)
    - parse_declarations(): declaration text to mapping
    """

    # =========================================================================
    # SCANNING
    # =========================================================================

    def scan(self, css: str) -> List[CssBlock]:
        """
        Split stylesheet text into top-level blocks.

        Args:
            css: Stylesheet text

        Returns:
            Blocks in source order
        """
        blocks: List[CssBlock] = []
        depth = 0
        quote: Optional[str] = None
        first: Optional[int] = None
        prelude_from = 0
        open_at = 0
        i = 0
        length = len(css)

        while i < length:
            char = css[i]

            if quote:
                if char == "\\":
                    i += 2
                    continue
                if char == quote:
                    quote = None
                i += 1
                continue

            if char == "/" and css.startswith("/*", i):
                close = css.find("*/", i + 2)
                i = length if close == -1 else close + 2
                continue

            if char in ("'", '"'):
                quote = char
                if depth == 0 and first is None:
                    first = i
            elif char == "{":
                if depth == 0:
                    open_at = i
                    if first is None:
                        first = i
                depth += 1
            elif char == "}":
                if depth == 0:
                    # stray closing brace
                    first = None
                    prelude_from = i + 1
                else:
                    depth -= 1
                    if depth == 0:
                        blocks.append(CssBlock(
                            prelude=self._clean_prelude(css[prelude_from:open_at]),
                            body=css[open_at + 1:i],
                            start=first,
                            end=i + 1,
                        ))
                        first = None
                        prelude_from = i + 1
            elif char == ";" and depth == 0:
                prelude = self._clean_prelude(css[prelude_from:i])
                if prelude:
                    blocks.append(CssBlock(prelude=prelude, body=None, start=first, end=i + 1))
                first = None
                prelude_from = i + 1
            elif depth == 0 and first is None and not char.isspace():
                first = i

            i += 1

        if depth > 0:
            # unterminated block runs to the end of the text
            blocks.append(CssBlock(
                prelude=self._clean_prelude(css[prelude_from:open_at]),
                body=css[open_at + 1:],
                start=first if first is not None else open_at,
                end=length,
            ))

        return blocks

    # =========================================================================
    # PARSING
    # =========================================================================

    def parse(self, css: str) -> List[CssRule]:
        """
        Parse stylesheet text into style rules.

        At-rule blocks are skipped whole. Each selector of a comma group
        becomes its own rule with a copy of the shared declarations.
        """
        rules: List[CssRule] = []
        for block in self.scan(css):
            if block.body is None or block.is_at_rule or not block.prelude:
                continue
            declarations = self.parse_declarations(block.body)
            for selector in block.selectors:
                rules.append(CssRule(selector=selector, declarations=dict(declarations)))

        logger.debug(f"Parsed {len(rules)} CSS rules")
        return rules

    @staticmethod
    def parse_declarations(text: str) -> Dict[str, str]:
        """
        Parse a declaration block body.

        Splits on ``;`` (outside quotes and parentheses) then on the first
        ``:``. Empty properties or values are dropped.
        """
        declarations: Dict[str, str] = {}
        for part in _split_top_level(_COMMENT.sub("", text), ";"):
            prop, sep, value = part.partition(":")
            if not sep:
                continue
            prop = prop.strip()
            value = _IMPORTANT.sub("", value).strip()
            if not prop or not value:
                continue
            if not prop.startswith("--"):
                prop = prop.lower()
            declarations[prop] = value
        return declarations

    @staticmethod
    def split_selectors(prelude: str) -> List[str]:
        """Split a selector list on top-level commas."""
        return [s.strip() for s in _split_top_level(prelude, ",") if s.strip()]

    @staticmethod
    def _clean_prelude(text: str) -> str:
        return _COMMENT.sub("", text).strip()


def _split_top_level(text: str, separator: str) -> List[str]:
    """Split on ``separator`` outside quotes, parentheses and brackets."""
    parts = []
    depth = 0
    quote: Optional[str] = None
    current = []
    escaped = False

    for char in text:
        if quote:
            current.append(char)
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == quote:
                quote = None
            continue
        if char in ("'", '"'):
            quote = char
        elif char in "([":
            depth += 1
        elif char in ")]" and depth > 0:
            depth -= 1
        elif char == separator and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)

    parts.append("".join(current))
    return parts
