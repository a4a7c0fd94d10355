"""
Markup Parser - HTML parsing and document normalization using BeautifulSoup.

Fragments are wrapped in a minimal document shell so that the parser always
produces the same html/head/body skeleton. Attribute names starting with
``@`` (reactive-template shorthand such as ``@click``) are rewritten to the
``data-oxy-at-`` prefix before parsing and restored whenever attribute names
or raw markup are read back.

Usage:
    from oxy_converter.converter.parsers import MarkupParser

    parser = MarkupParser()
    result = parser.parse("<div class='card'>Hello</div>")
    if result.ok:
        for node in parser.content_nodes(result.root):
            print(node.name)
"""

import logging
import re
from dataclasses import dataclass, field
from html.parser import HTMLParser
from typing import Dict, List, Optional, Tuple

from bs4 import (
    BeautifulSoup,
    CData,
    Comment,
    Declaration,
    Doctype,
    NavigableString,
    ParserRejectedMarkup,
    ProcessingInstruction,
    Tag,
)

logger = logging.getLogger(__name__)


AT_PREFIX = "data-oxy-at-"
"""Placeholder prefix for attribute names that start with ``@``."""

_AT_ATTRIBUTE = re.compile(r"(\s)@([A-Za-z0-9_.\-]+)=")
_AT_PLACEHOLDER = re.compile(r"(\s)" + re.escape(AT_PREFIX) + r"([A-Za-z0-9_.\-]+)=")

_FULL_DOCUMENT = re.compile(r"<!DOCTYPE|<html", re.IGNORECASE)
_HEAD_OPEN = re.compile(r"<head>", re.IGNORECASE)

FRAGMENT_SHELL = (
    '<!DOCTYPE html><html><head><meta charset="UTF-8"></head><body>{}</body></html>'
)

SKIPPED_TAGS = frozenset({"meta", "noscript"})

HEAD_LINK_RELS = frozenset({"stylesheet", "preconnect", "dns-prefetch", "preload"})

VOID_ELEMENTS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input", "link",
    "meta", "param", "source", "track", "wbr",
})

# End tags the HTML grammar lets authors omit.
OPTIONAL_END_TAGS = frozenset({
    "html", "head", "body", "p", "li", "dt", "dd", "option", "optgroup",
    "tr", "td", "th", "thead", "tbody", "tfoot", "colgroup", "rt", "rp",
})


def restore_attribute_name(name: str) -> str:
    """Reverse the ``@`` placeholder rewrite for one attribute name."""
    if name.startswith(AT_PREFIX):
        return "@" + name[len(AT_PREFIX):]
    return name


def restore_markup(html: str) -> str:
    """Reverse the ``@`` placeholder rewrite inside serialized markup."""
    return _AT_PLACEHOLDER.sub(r"\1@\2=", html)


def get_attribute(node: Tag, name: str) -> str:
    """Attribute value as a string ("" when absent or valueless)."""
    value = node.get(name)
    if value is None:
        return ""
    if isinstance(value, list):
        return " ".join(value)
    return value


def get_classes(node: Tag) -> List[str]:
    """Class names of a node in document order."""
    return get_attribute(node, "class").split()


def raw_text(node: Tag) -> str:
    """Unescaped text of a node's direct string children (script/style bodies)."""
    return "".join(str(child) for child in node.contents if isinstance(child, NavigableString))


def inner_html(node: Tag) -> str:
    """Serialized children of a node, trimmed, with ``@`` names restored."""
    return restore_markup(node.decode_contents()).strip()


def outer_html(node: Tag) -> str:
    """Serialized node, with ``@`` names restored."""
    return restore_markup(str(node))


@dataclass
class ParseResult:
    """Outcome of MarkupParser.parse()."""

    root: Optional[Tag]
    """The <body> element, the document root, or None on failure."""

    errors: List[str] = field(default_factory=list)
    """Recoverable (or, when root is None, fatal) parse errors."""

    document: Optional[BeautifulSoup] = None
    """The full parsed document."""

    @property
    def ok(self) -> bool:
        return self.root is not None


class _TagBalanceChecker(HTMLParser):
    """Collects stray end tags and unclosed elements."""

    def __init__(self):
        super().__init__(convert_charrefs=True)
        self._stack: List[Tuple[str, int]] = []
        self.errors: List[str] = []

    def handle_starttag(self, tag, attrs):
        if tag not in VOID_ELEMENTS:
            self._stack.append((tag, self.getpos()[0]))

    def handle_startendtag(self, tag, attrs):
        pass

    def handle_endtag(self, tag):
        if tag in VOID_ELEMENTS:
            return
        for index in range(len(self._stack) - 1, -1, -1):
            if self._stack[index][0] == tag:
                self._report_unclosed(self._stack[index + 1:])
                del self._stack[index:]
                return
        self.errors.append(f"Unexpected end tag </{tag}> at line {self.getpos()[0]}")

    def close(self):
        super().close()
        self._report_unclosed(self._stack)
        self._stack = []

    def _report_unclosed(self, entries: List[Tuple[str, int]]) -> None:
        for tag, line in entries:
            if tag not in OPTIONAL_END_TAGS:
                self.errors.append(f"Unclosed tag <{tag}> opened at line {line}")


class MarkupParser:
    """
    HTML parser producing a BeautifulSoup document.

    Provides methods for:
    - Fragment/document normalization
    - Content node filtering
    - <style> and <head> link extraction
    """

    # =========================================================================
    # PARSING
    # =========================================================================

    def parse(self, html: str) -> ParseResult:
        """
        Parse raw HTML into a document.

        Args:
            html: Full document or bare fragment

        Returns:
            ParseResult with the body (or document root) and any recoverable
            parse errors. ``root`` is None when the parser rejects the markup.
        """
        prepared = self.prepare(html)

        try:
            document = BeautifulSoup(prepared, "html.parser", multi_valued_attributes=None)
        except ParserRejectedMarkup as e:
            logger.warning(f"Parser rejected markup: {e}")
            return ParseResult(root=None, errors=[str(e)])

        errors = self.check_balance(prepared)
        if errors:
            logger.debug(f"Recovered from {len(errors)} parse errors")

        root = document.body or document.html or document
        return ParseResult(root=root, errors=errors, document=document)

    @staticmethod
    def prepare(html: str) -> str:
        """
        Normalize raw input before parsing.

        - Rewrites ``@name=`` attributes to the placeholder prefix
        - Injects a charset declaration into full documents lacking one
        - Wraps fragments in a minimal document shell
        """
        html = _AT_ATTRIBUTE.sub(r"\1" + AT_PREFIX + r"\2=", html.strip())

        if _FULL_DOCUMENT.search(html):
            lowered = html.lower()
            if "<meta charset" not in lowered and "charset=" not in lowered:
                html = _HEAD_OPEN.sub('<head><meta charset="UTF-8">', html, count=1)
            return html

        return FRAGMENT_SHELL.format(html)

    @staticmethod
    def check_balance(html: str) -> List[str]:
        """List recoverable tag-balance errors in raw markup."""
        checker = _TagBalanceChecker()
        checker.feed(html)
        checker.close()
        return checker.errors

    # =========================================================================
    # NODE FILTERING
    # =========================================================================

    @staticmethod
    def should_skip(node) -> bool:
        """
        Check if a node is excluded from conversion.

        Skips whitespace-only text, comments and other markup declarations,
        and <meta>/<noscript> elements. Skipped nodes stay in the document.
        """
        if isinstance(node, Tag):
            return node.name.lower() in SKIPPED_TAGS
        if isinstance(node, (Comment, Doctype, Declaration, ProcessingInstruction, CData)):
            return True
        if isinstance(node, NavigableString):
            return node.strip() == ""
        return True

    def content_nodes(self, root: Tag) -> List:
        """Direct children of ``root`` that should be converted."""
        return [child for child in root.children if not self.should_skip(child)]

    # =========================================================================
    # EXTRACTION
    # =========================================================================

    @staticmethod
    def extract_styles(document: BeautifulSoup) -> List[Dict[str, str]]:
        """
        Collect stylesheet sources from the whole document.

        Returns:
            ``{"type": "inline", "content": ...}`` per <style> tag and
            ``{"type": "external", "href": ...}`` per stylesheet <link>
        """
        styles: List[Dict[str, str]] = []

        for style in document.find_all("style"):
            styles.append({"type": "inline", "content": raw_text(style)})

        for link in document.find_all("link"):
            rels = get_attribute(link, "rel").lower().split()
            if "stylesheet" in rels:
                styles.append({"type": "external", "href": get_attribute(link, "href")})

        return styles

    @staticmethod
    def extract_head_links(document: BeautifulSoup) -> List[Tag]:
        """<link> tags inside <head> that load or warm up external resources."""
        head = document.head
        if head is None:
            return []

        links = []
        for link in head.find_all("link"):
            rels = set(get_attribute(link, "rel").lower().split())
            if rels & HEAD_LINK_RELS:
                links.append(link)
        return links
