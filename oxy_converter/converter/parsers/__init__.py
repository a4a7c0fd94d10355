"""
Parsers - Markup and stylesheet parsing.

- MarkupParser: HTML to BeautifulSoup document (fragment-aware)
- CssParser: stylesheet text to rules and positioned blocks

Usage:
    from oxy_converter.converter.parsers import MarkupParser, CssParser

    result = MarkupParser().parse(html)
    rules = CssParser().parse(css)
"""

from .markup_parser import (
    AT_PREFIX,
    MarkupParser,
    ParseResult,
    get_attribute,
    get_classes,
    inner_html,
    outer_html,
    raw_text,
    restore_attribute_name,
    restore_markup,
)
from .css_parser import (
    CssBlock,
    CssParser,
    CssRule,
)

__all__ = [
    # Markup
    "AT_PREFIX",
    "MarkupParser",
    "ParseResult",
    "get_attribute",
    "get_classes",
    "inner_html",
    "outer_html",
    "raw_text",
    "restore_attribute_name",
    "restore_markup",
    # CSS
    "CssBlock",
    "CssParser",
    "CssRule",
]
