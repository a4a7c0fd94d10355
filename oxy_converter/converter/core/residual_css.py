"""
Residual CSS - Regenerate the stylesheet without converted rules.

Works on positioned top-level blocks so everything that was not converted
keeps its original text:
- style rules whose selectors were all consumed are dropped
- comma groups keep only their unconsumed selectors
- at-rules are kept verbatim; ``@keyframes X`` is dropped only when X was
  used by a consumed rule and nothing left in the stylesheet uses it
"""

import logging
import re
from typing import Iterable, List, Optional, Set, Union

from ..parsers.css_parser import CssBlock, CssParser, CssRule

logger = logging.getLogger(__name__)


_COMMENTS = re.compile(r"/\*.*?\*/", re.DOTALL)
_EXTRA_BLANK_LINES = re.compile(r"\n{3,}")
ANIMATION_PROPERTIES = ("animation", "animation-name")


class ResidualCssBuilder:
    """Builds the stylesheet text left after conversion."""

    def __init__(self, parser: Optional[CssParser] = None):
        self.parser = parser or CssParser()

    def build(self, css: str, rules: Iterable[CssRule], consumed: Set[str]) -> str:
        """
        Remove consumed selectors from a stylesheet.

        Args:
            css: Stylesheet text the rules were parsed from
            rules: Parsed rules
            consumed: Selectors converted into properties

        Returns:
            Residual stylesheet, "" when only comments or whitespace remain
        """
        if not css.strip():
            return ""

        blocks = self.parser.scan(css)
        pieces: List[Union[str, CssBlock]] = []
        cursor = 0

        for block in blocks:
            pieces.append(css[cursor:block.start])
            cursor = block.end

            if block.keyframes_name:
                # decided once the rest of the residual text is known
                pieces.append(block)
                continue

            pieces.append(self._rewrite_block(css, block, consumed))
        pieces.append(css[cursor:])

        used_by_consumed = self._animation_names(rules, consumed)
        text_without_keyframes = "".join(p for p in pieces if isinstance(p, str))

        output = []
        for piece in pieces:
            if isinstance(piece, CssBlock):
                if self._keep_keyframes(piece.keyframes_name, used_by_consumed, text_without_keyframes):
                    output.append(piece.source(css))
                else:
                    logger.debug(f"Dropped unused @keyframes {piece.keyframes_name}")
                continue
            output.append(piece)

        residual = _EXTRA_BLANK_LINES.sub("\n\n", "".join(output)).strip()
        if not _COMMENTS.sub("", residual).strip():
            return ""
        return residual + "\n"

    def _rewrite_block(self, css: str, block: CssBlock, consumed: Set[str]) -> str:
        if block.body is None or block.is_at_rule or not block.prelude:
            return block.source(css)

        selectors = block.selectors
        remaining = [s for s in selectors if s not in consumed]
        if not remaining:
            return ""
        if len(remaining) == len(selectors):
            return block.source(css)
        return f"{', '.join(remaining)} {{{block.body}}}"

    @staticmethod
    def _animation_names(rules: Iterable[CssRule], consumed: Set[str]) -> str:
        values = []
        for rule in rules:
            if rule.selector not in consumed:
                continue
            for prop in ANIMATION_PROPERTIES:
                if prop in rule.declarations:
                    values.append(rule.declarations[prop])
        return " ".join(values)

    @staticmethod
    def _keep_keyframes(name: str, used_by_consumed: str, residual: str) -> bool:
        pattern = re.compile(rf"(?<![\w-]){re.escape(name)}(?![\w-])")
        if not pattern.search(used_by_consumed):
            return True
        return pattern.search(_COMMENTS.sub("", residual)) is not None
