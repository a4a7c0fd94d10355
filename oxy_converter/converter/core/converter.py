"""
HTML Converter - Entry point of the conversion core.

Turns an HTML document or fragment (with embedded <style> and <script>)
into a page-builder element tree:

1. Parse the markup (fragments get a document shell)
2. Extract <style> contents and parse the rules
3. Mine inline scripts for toggles and smooth scrolling
4. Walk the DOM with TreeBuilder
5. Rebuild the residual stylesheet and collect report data

Usage:
    from oxy_converter.converter import HtmlConverter

    converter = HtmlConverter()
    result = converter.convert('<div class="card"><h2>Hello</h2></div>')
    if result.success:
        payload = result.to_dict()
"""

import logging
from collections import Counter
from typing import Any, Dict, List, Optional, Union

from bs4 import BeautifulSoup

from ..analyzers.animation_detector import AnimationDetector
from ..analyzers.heuristics import HeuristicsService
from ..analyzers.js_pattern_miner import JsPatternMiner
from ..contracts.element_types import ElementType
from ..contracts.elements import BuilderElement
from ..contracts.options import (
    ClassHandlingMode,
    ConversionOptions,
    ConverterConfig,
    HeuristicFlags,
)
from ..contracts.report import ConversionReport
from ..contracts.result import ConversionError, ConversionResult
from ..parsers.css_parser import CssParser
from ..parsers.markup_parser import MarkupParser, get_attribute, get_classes, raw_text
from .context import ConversionContext
from .tree_builder import JS_SCRIPT_TYPES, TreeBuilder

logger = logging.getLogger(__name__)


OptionsLike = Union[ConversionOptions, Dict[str, Any], None]


class HtmlConverter:
    """
    Converts HTML into builder element trees.

    One instance can serve any number of conversions; every call gets its
    own ConversionContext.
    """

    def __init__(
        self,
        config: Optional[ConverterConfig] = None,
        parser: Optional[MarkupParser] = None,
        css_parser: Optional[CssParser] = None,
        miner: Optional[JsPatternMiner] = None,
        tree_builder: Optional[TreeBuilder] = None,
    ):
        self.config = config or ConverterConfig()
        self.parser = parser or MarkupParser()
        self.css_parser = css_parser or CssParser()
        self.tree_builder = tree_builder or TreeBuilder(self.config, parser=self.parser)
        self.miner = miner or JsPatternMiner(self.tree_builder.js_transformer)
        self.heuristics = HeuristicsService(self.config.heuristics)

    @classmethod
    def from_settings(cls, settings) -> "HtmlConverter":
        """Build a converter from application settings."""
        flags = HeuristicFlags(
            sticky_navbar=settings.HEURISTIC_STICKY_NAVBAR,
            nav_link_white=settings.HEURISTIC_NAV_LINK_WHITE,
            rounded_full_centering=settings.HEURISTIC_ROUNDED_FULL_CENTERING,
            button_centering=settings.HEURISTIC_BUTTON_CENTERING,
            fixed_header_spacing=settings.HEURISTIC_FIXED_HEADER_SPACING,
            nav_scrolled_css_rewrite=settings.HEURISTIC_NAV_SCROLLED_CSS_REWRITE,
        )
        config = ConverterConfig(
            class_handling_mode=ClassHandlingMode.from_string(settings.CLASS_HANDLING_MODE),
            wrap_init_scripts=settings.WRAP_INIT_SCRIPTS,
            heuristics=flags,
        )
        return cls(config)

    # =========================================================================
    # CONVERSION
    # =========================================================================

    def convert(self, html: str, options: OptionsLike = None) -> ConversionResult:
        """
        Convert HTML into an element tree.

        Args:
            html: Full document or fragment
            options: ConversionOptions or a mapping of option values

        Returns:
            ConversionResult; failures are returned, not raised
        """
        if not isinstance(options, ConversionOptions):
            options = ConversionOptions.from_dict(options or {})

        parsed = self.parser.parse(html)
        if not parsed.ok:
            logger.warning(f"Failed to parse HTML: {parsed.errors}")
            return ConversionResult.failure("Failed to parse HTML", parsed.errors)

        document = parsed.document
        context = ConversionContext(options=options, report=ConversionReport())

        if options.debug_mode:
            for error in parsed.errors:
                context.report.add_info(f"Parse error: {error}")

        context.css = self.extract_css(document)
        context.rules = self.css_parser.parse(context.css)
        context.rules_by_selector = AnimationDetector.index_rules(context.rules)
        logger.debug(f"Parsed {len(context.rules)} CSS rules")

        context.patterns = self.miner.mine(self.inline_scripts(document))
        context.patterns.scroll_reveal = self.uses_scroll_reveal(document)

        built = self.tree_builder.build(document, parsed.root, context)
        if built is None:
            return ConversionResult.failure("No convertible content found in HTML", parsed.errors)

        logger.debug(
            f"Converted {context.report.elements} elements, "
            f"consumed {len(context.consumed_selectors)} selectors"
        )

        return ConversionResult.succeeded(
            built.root,
            css_element=built.css_element,
            head_link_elements=built.head_link_elements,
            icon_script_elements=built.icon_script_elements,
            detected_icon_libraries=built.detected_icon_libraries,
            extracted_css=built.residual_css,
            custom_classes=list(context.custom_classes),
            stats=context.report,
            parse_errors=list(parsed.errors),
        )

    def convert_or_raise(self, html: str, options: OptionsLike = None) -> ConversionResult:
        """
        Convert HTML, raising instead of returning a failed result.

        Raises:
            ConversionError: On conversion failure or an unexpected fault
        """
        try:
            result = self.convert(html, options)
        except ConversionError:
            raise
        except Exception as e:
            raise ConversionError(f"Conversion error: {e}") from e

        if not result.success:
            raise ConversionError(result.error, result.errors)
        return result

    # =========================================================================
    # DOCUMENT EXTRACTION
    # =========================================================================

    def extract_css(self, document: BeautifulSoup) -> str:
        """Concatenated contents of all <style> tags."""
        css = ""
        for style in self.parser.extract_styles(document):
            if style["type"] != "inline":
                continue
            content = style["content"].replace("fontFamily", "font-family")
            if not content.strip():
                continue
            content = self.heuristics.rewrite_css(content)
            css += "/* Extracted from <style> tag */\n" + content.strip() + "\n\n"
        return css

    @staticmethod
    def inline_scripts(document: BeautifulSoup) -> List[str]:
        """Texts of inline JavaScript <script> tags, in document order."""
        scripts = []
        for script in document.find_all("script"):
            if script.has_attr("src"):
                continue
            if get_attribute(script, "type").lower() not in JS_SCRIPT_TYPES:
                continue
            scripts.append(raw_text(script))
        return scripts

    @staticmethod
    def uses_scroll_reveal(document: BeautifulSoup) -> bool:
        """Check if any element carries a scroll-reveal class."""
        for node in document.find_all(True):
            if any(name in AnimationDetector.SCROLL_REVEAL_CLASSES for name in get_classes(node)):
                return True
        return False

    # =========================================================================
    # PREVIEW
    # =========================================================================

    @staticmethod
    def preview_summary(element: Union[BuilderElement, Dict[str, Any]]) -> Dict[str, Any]:
        """
        Count nodes of a tree per element short name.

        Args:
            element: Root element or its serialized dict

        Returns:
            {"total": int, "byType": {"Container": 2, "Text": 3, ...}}
        """
        counts: Counter = Counter()
        stack = [element]
        while stack:
            current = stack.pop()
            if isinstance(current, BuilderElement):
                counts[current.type.short_name] += 1
                stack.extend(current.children)
            else:
                counts[ElementType.short_name_of(current.get("data", {}).get("type", ""))] += 1
                stack.extend(current.get("children", []))

        return {"total": sum(counts.values()), "byType": dict(counts)}
