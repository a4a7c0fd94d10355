"""
Tree Builder - Walk the parsed document and assemble the element tree.

Per element node, in order:
1. skip filtered nodes; scripts, styles and links are special-cased
2. classify and build base properties (content, inline style, grid)
3. tag option and URL sanitization
4. entrance animation, matched stylesheet rules
5. classes, id, attributes, interactions, mined script patterns
6. framework warnings, then children (not for raw markup; buttons get
   their synthesized text child)

Afterwards the top-level elements are unwrapped or wrapped. Selectors that
verbatim markup still needs are given back before the residual stylesheet
is built, library loaders and head links are added, and the final tree is
numbered once in pre-order.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from bs4 import BeautifulSoup, NavigableString, Tag

from ..analyzers.animation_detector import AnimationDetector
from ..analyzers.class_strategy import ClassStrategy
from ..analyzers.component_detector import ComponentDetector
from ..analyzers.framework_detector import FrameworkDetector
from ..analyzers.heuristics import HeuristicsService
from ..analyzers.icon_detector import IconDetector
from ..analyzers.interaction_detector import InteractionDetector
from ..contracts.element_types import ElementType
from ..contracts.elements import BuilderElement, PropertyTree
from ..contracts.options import ConverterConfig
from ..mapping.element_classifier import RAW_OUTER_TAGS, ElementClassifier
from ..mapping.style_mapper import StyleMapper
from ..parsers.markup_parser import (
    MarkupParser,
    get_attribute,
    get_classes,
    inner_html,
    outer_html,
    raw_text,
)
from .context import ConversionContext
from .js_transformer import JsTransformer
from .residual_css import ResidualCssBuilder
from .selector_matcher import SelectorMatcher

logger = logging.getLogger(__name__)


# Document-level tags that never become elements
IGNORED_TAGS = frozenset({"head", "title", "base", "template"})

JS_SCRIPT_TYPES = frozenset({"", "text/javascript", "application/javascript", "module"})


def sanitize_url(url: str) -> str:
    """Reduce local ``file://`` URLs to their file name."""
    if url.startswith("file://"):
        return url.replace("\\", "/").rstrip("/").rsplit("/", 1)[-1]
    return url


@dataclass
class BuiltTree:
    """Output of TreeBuilder.build()."""

    root: BuilderElement
    css_element: Optional[BuilderElement] = None
    head_link_elements: List[BuilderElement] = field(default_factory=list)
    icon_script_elements: List[BuilderElement] = field(default_factory=list)
    detected_icon_libraries: Dict[str, Dict[str, str]] = field(default_factory=dict)
    residual_css: str = ""


class TreeBuilder:
    """
    Recursive DOM walker producing builder elements.

    All collaborators are injected; per-call state lives in the
    ConversionContext passed to build().
    """

    def __init__(
        self,
        config: Optional[ConverterConfig] = None,
        parser: Optional[MarkupParser] = None,
        classifier: Optional[ElementClassifier] = None,
        style_mapper: Optional[StyleMapper] = None,
        selector_matcher: Optional[SelectorMatcher] = None,
        class_strategy: Optional[ClassStrategy] = None,
        animation_detector: Optional[AnimationDetector] = None,
        interaction_detector: Optional[InteractionDetector] = None,
        framework_detector: Optional[FrameworkDetector] = None,
        component_detector: Optional[ComponentDetector] = None,
        icon_detector: Optional[IconDetector] = None,
        js_transformer: Optional[JsTransformer] = None,
        residual_css: Optional[ResidualCssBuilder] = None,
    ):
        from ..analyzers.tailwind_detector import TailwindDetector

        self.config = config or ConverterConfig()
        self.parser = parser or MarkupParser()
        self.icon_detector = icon_detector or IconDetector()
        self.classifier = classifier or ElementClassifier(icon_detector=self.icon_detector)
        self.style_mapper = style_mapper or StyleMapper()
        self.selector_matcher = selector_matcher or SelectorMatcher(self.style_mapper)
        self.class_strategy = class_strategy or ClassStrategy(
            self.config.class_handling_mode, TailwindDetector()
        )
        self.animation_detector = animation_detector or AnimationDetector()
        self.framework_detector = framework_detector or FrameworkDetector()
        self.interaction_detector = interaction_detector or InteractionDetector(self.framework_detector)
        self.component_detector = component_detector or ComponentDetector()
        self.js_transformer = js_transformer or JsTransformer()
        self.residual_css = residual_css or ResidualCssBuilder()
        self.heuristics = HeuristicsService(self.config.heuristics)

    # =========================================================================
    # ASSEMBLY
    # =========================================================================

    def build(self, document: BeautifulSoup, root: Tag, context: ConversionContext) -> Optional[BuiltTree]:
        """
        Convert the content of ``root`` into a numbered element tree.

        Args:
            document: Full parsed document (icons, head links)
            root: <body> or document root
            context: Fresh per-call context

        Returns:
            BuiltTree, or None when nothing convertible was found
        """
        nodes = self.parser.content_nodes(root)
        self.component_detector.analyze(nodes, context.report)

        children = []
        for node in nodes:
            element = self.convert_node(node, context, top_level=True)
            if element is not None:
                children.append(element)

        if not children:
            return None

        if len(children) == 1 and not context.options.wrap_in_container:
            tree_root = children[0]
        else:
            tree_root = BuilderElement(type=ElementType.CONTAINER, children=children)

        self._finalize_consumed_selectors(context)
        residual = self.residual_css.build(context.css, context.rules, context.consumed_selectors)
        self._report_unconverted_selectors(context)

        libraries = self.icon_detector.detect(document)
        icon_elements = self.icon_detector.build_elements(libraries)
        for library in libraries.values():
            context.report.add_warning(self.icon_detector.warning_for(library))

        head_links = [self._raw_element(link) for link in self.parser.extract_head_links(document)]

        css_element = None
        if residual:
            css_properties = PropertyTree()
            css_properties.set("content.content.css_code", residual)
            css_element = BuilderElement(type=ElementType.CSS_CODE, properties=css_properties)

        prepended = icon_elements + head_links
        if css_element is not None and context.options.include_css_element:
            prepended.append(css_element)
        if prepended:
            if not tree_root.type.accepts_children:
                tree_root = BuilderElement(type=ElementType.CONTAINER, children=[tree_root])
            tree_root.children[:0] = prepended

        tree_root.assign_ids(context.next_id)
        if css_element is not None and css_element.id is None:
            css_element.assign_ids(context.next_id)

        return BuiltTree(
            root=tree_root,
            css_element=css_element,
            head_link_elements=head_links,
            icon_script_elements=icon_elements,
            detected_icon_libraries={key: lib.to_dict() for key, lib in libraries.items()},
            residual_css=residual,
        )

    def _finalize_consumed_selectors(self, context: ConversionContext) -> None:
        """Give back selectors still needed by partially mapped rules or preserved markup."""
        if context.preserved_markup:
            for selector in context.consumed_selectors - context.animation_selectors:
                if self.selector_matcher.matches_within(selector, context.preserved_markup):
                    context.retained_selectors.add(selector)

        retained = context.consumed_selectors & context.retained_selectors
        if retained:
            logger.debug(f"Kept {sorted(retained)} in the residual stylesheet")
        context.consumed_selectors -= context.retained_selectors

    def _report_unconverted_selectors(self, context: ConversionContext) -> None:
        selectors = self.selector_matcher.unconverted_selectors(
            context.rules,
            context.consumed_selectors,
            context.animation_selectors | context.retained_selectors,
        )
        message = self.selector_matcher.unsupported_info(selectors)
        if message:
            context.report.add_info(message)

    # =========================================================================
    # NODE CONVERSION
    # =========================================================================

    def convert_node(self, node, context: ConversionContext, top_level: bool = False) -> Optional[BuilderElement]:
        """
        Convert one DOM node (and its subtree).

        Returns:
            The element, or None for skipped nodes
        """
        if self.parser.should_skip(node):
            return None

        if isinstance(node, NavigableString):
            return self._text_element(node, context)

        if not isinstance(node, Tag):
            return None

        tag = node.name.lower()
        if tag in IGNORED_TAGS or tag == "style":
            return None
        if tag == "script":
            return self._convert_script(node, context)
        if tag == "link":
            context.report.increment_elements()
            return self._raw_element(node)

        element_type = self.classifier.classify(node)
        context.report.increment_elements()

        properties = self.classifier.build_properties(node, element_type)
        properties.merge_design(self.style_mapper.extract(node))

        tag_option = self.classifier.tag_option(tag, element_type)
        if tag_option:
            properties.set("design.tag", tag_option)

        self._sanitize_urls(properties, element_type)

        if tag in RAW_OUTER_TAGS:
            # classes, id and attributes stay inside the preserved markup
            _, custom = self.class_strategy.count(get_classes(node), context.report)
            context.add_custom_classes(custom)
            self.framework_detector.detect(node, context.report)
            context.preserved_markup.append(node)
            return BuilderElement(type=element_type, properties=properties)

        classes = self._apply_animation(node, get_classes(node), properties, context)
        self.selector_matcher.apply_rules(
            node,
            context.rules,
            properties,
            context.consumed_selectors,
            context.animation_selectors,
            context.retained_selectors,
        )

        custom = self.class_strategy.apply(classes, properties, context.report)
        context.add_custom_classes(custom)

        element_id = get_attribute(node, "id")
        if element_id:
            properties.set("settings.advanced.id", element_id)

        self.interaction_detector.process(node, properties)
        self._apply_mined_patterns(node, element_type, element_id, properties, context)
        self.framework_detector.detect(node, context.report)

        element = BuilderElement(type=element_type, properties=properties)

        if self.classifier.is_button(node):
            context.preserve_children(node)
            text_child = self.classifier.build_button_text(node)
            if text_child is not None:
                context.report.increment_elements()
                element.children.append(text_child)
        elif self.classifier.should_convert_to_text(node, element_type):
            context.preserve_children(node)
            element.type = ElementType.TEXT
            properties.set("content.content.text", inner_html(node))
        elif element_type.accepts_children:
            for child in node.children:
                child_element = self.convert_node(child, context)
                if child_element is not None:
                    element.children.append(child_element)
        else:
            context.preserve_children(node)

        button_like = tag == "button" or element_type == ElementType.CONTAINER_LINK
        self.heuristics.apply(node, element, button_like=button_like)
        if top_level:
            self.heuristics.apply_header_spacing(node, element, context.header_state)

        return element

    def _text_element(self, node: NavigableString, context: ConversionContext) -> Optional[BuilderElement]:
        text = str(node).strip()
        if not text:
            return None

        context.report.increment_elements()
        properties = PropertyTree()
        properties.set("content.content.text", text)
        return BuilderElement(type=ElementType.TEXT, properties=properties)

    def _raw_element(self, node: Tag) -> BuilderElement:
        properties = PropertyTree()
        properties.set("content.content.html_code", outer_html(node))
        return BuilderElement(type=ElementType.HTML_CODE, properties=properties)

    def _convert_script(self, node: Tag, context: ConversionContext) -> Optional[BuilderElement]:
        if node.has_attr("src"):
            context.report.increment_elements()
            return self._raw_element(node)

        code = raw_text(node)
        if not code.strip():
            return None

        if get_attribute(node, "type").lower() not in JS_SCRIPT_TYPES:
            # JSON-LD, templates and other data blocks are kept verbatim
            context.report.increment_elements()
            return self._raw_element(node)

        js = self.js_transformer.transform(code, wrap_init_scripts=self.config.wrap_init_scripts)
        patterns = context.patterns
        if patterns.has_converted_code:
            js = self.js_transformer.strip_converted_patterns(
                js,
                strip_scroll_reveal=patterns.scroll_reveal,
                strip_smooth_scroll=patterns.smooth_scroll,
                toggles=patterns.toggles,
            )

        if not self.js_transformer.strip_comments(js).strip():
            logger.debug("Dropped script left empty after pattern stripping")
            return None

        context.report.increment_elements()
        properties = PropertyTree()
        properties.set("content.content.javascript_code", js)
        return BuilderElement(type=ElementType.JAVASCRIPT_CODE, properties=properties)

    # =========================================================================
    # PROPERTY PASSES
    # =========================================================================

    @staticmethod
    def _sanitize_urls(properties: PropertyTree, element_type: ElementType) -> None:
        if element_type == ElementType.IMAGE:
            path = "content.image.url"
        elif element_type in (ElementType.TEXT_LINK, ElementType.CONTAINER_LINK):
            path = "content.content.url"
        else:
            return
        url = properties.get(path)
        if url:
            properties.set(path, sanitize_url(url))

    def _apply_animation(
        self,
        node: Tag,
        classes: List[str],
        properties: PropertyTree,
        context: ConversionContext,
    ) -> List[str]:
        """Write an entrance animation and return the classes left on the element."""
        if not classes:
            return classes

        match = self.animation_detector.detect(classes, context.rules_by_selector)
        if match is None:
            return classes

        properties.set("settings.animations.entrance_animation", match.descriptor)
        context.animation_selectors.update(match.consumed_selectors)
        context.consumed_selectors.update(match.consumed_selectors)

        # layout declarations of the consumed rules still apply
        for selector in match.consumed_selectors:
            declarations = context.rules_by_selector.get(selector)
            if declarations and self.selector_matcher.matches(selector, node):
                properties.merge_design(
                    self.style_mapper.to_properties(self.animation_detector.static_declarations(declarations))
                )

        logger.debug(f"<{node.name}> {match.strategy} animation: {match.descriptor['type']}")
        return [name for name in classes if name not in match.removed_classes]

    def _apply_mined_patterns(
        self,
        node: Tag,
        element_type: ElementType,
        element_id: str,
        properties: PropertyTree,
        context: ConversionContext,
    ) -> None:
        for interaction in context.patterns.interactions_for(element_id):
            properties.append("settings.interactions.interactions", interaction)

        if not context.patterns.smooth_scroll:
            return
        if element_type not in (ElementType.TEXT_LINK, ElementType.CONTAINER_LINK):
            return
        href = get_attribute(node, "href")
        if href.startswith("#") and len(href) > 1:
            properties.append(
                "settings.interactions.interactions",
                context.patterns.scroll_interaction(href),
            )
