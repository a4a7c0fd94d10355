"""
Element Classifier - Decide which builder element kind a tag becomes.

A table lookup on the lower-cased tag name, plus two context rules:
- ``<a>`` becomes a ContainerLink when it looks like a button (class
  keyword or a block-ish child), otherwise a TextLink
- ``<button>`` is always a Container with one synthesized Text child

Raw-markup tags keep their serialized HTML and are never recursed into.

Usage:
    from oxy_converter.converter.mapping import ElementClassifier

    classifier = ElementClassifier()
    element_type = classifier.classify(node)
    properties = classifier.build_properties(node, element_type)
"""

from typing import Dict, Optional

from bs4 import NavigableString, Tag

from ..analyzers.grid_detector import GridDetector
from ..analyzers.icon_detector import IconDetector
from ..contracts.element_types import ElementType
from ..contracts.elements import BuilderElement, PropertyTree
from ..parsers.markup_parser import get_attribute, inner_html, outer_html


TAG_MAP: Dict[str, ElementType] = {
    # Containers
    "div": ElementType.CONTAINER,
    "section": ElementType.CONTAINER,
    "article": ElementType.CONTAINER,
    "aside": ElementType.CONTAINER,
    "header": ElementType.CONTAINER,
    "footer": ElementType.CONTAINER,
    "main": ElementType.CONTAINER,
    "nav": ElementType.CONTAINER,
    "figure": ElementType.CONTAINER,
    "figcaption": ElementType.CONTAINER,
    "details": ElementType.CONTAINER,
    "summary": ElementType.CONTAINER,
    "ul": ElementType.CONTAINER,
    "ol": ElementType.CONTAINER,
    "li": ElementType.CONTAINER,
    "button": ElementType.CONTAINER,

    # Text
    "p": ElementType.TEXT,
    "span": ElementType.TEXT,
    "h1": ElementType.TEXT,
    "h2": ElementType.TEXT,
    "h3": ElementType.TEXT,
    "h4": ElementType.TEXT,
    "h5": ElementType.TEXT,
    "h6": ElementType.TEXT,
    "blockquote": ElementType.TEXT,
    "label": ElementType.TEXT,
    "code": ElementType.TEXT,

    # Links (button-like anchors are upgraded in classify())
    "a": ElementType.TEXT_LINK,

    # Media
    "img": ElementType.IMAGE,

    # Raw markup
    "table": ElementType.RICH_TEXT,
    "video": ElementType.HTML_CODE,
    "iframe": ElementType.HTML_CODE,
    "svg": ElementType.HTML_CODE,
    "i": ElementType.HTML_CODE,
    "form": ElementType.HTML_CODE,
    "input": ElementType.HTML_CODE,
    "select": ElementType.HTML_CODE,
    "textarea": ElementType.HTML_CODE,
    "pre": ElementType.HTML_CODE,
}

# Kept as serialized markup, children never converted
RAW_OUTER_TAGS = frozenset({
    "table", "iframe", "svg", "form", "input", "select", "textarea", "video", "pre", "i",
})
RAW_INNER_TAGS = frozenset({"code"})

CONTAINER_TAG_OPTIONS = frozenset({
    "section", "footer", "header", "nav", "aside", "figure", "article",
    "main", "details", "summary", "ul", "li", "ol", "button",
})
TEXT_TAG_OPTIONS = frozenset({"span", "p", "h1", "h2", "h3", "h4", "h5", "h6", "blockquote"})

BUTTON_CLASS_KEYWORDS = ("btn", "button", "cta", "action")
BUTTON_CHILD_TAGS = frozenset({"div", "span", "img", "svg", "i", "icon"})

INLINE_FORMATTING_TAGS = frozenset({
    "strong", "b", "em", "i", "u", "s", "mark", "small", "sub", "sup", "br", "span",
})


class ElementClassifier:
    """Maps DOM nodes to builder element kinds and base properties."""

    def __init__(
        self,
        grid_detector: Optional[GridDetector] = None,
        icon_detector: Optional[IconDetector] = None,
    ):
        self.grid_detector = grid_detector or GridDetector()
        self.icon_detector = icon_detector or IconDetector()

    # =========================================================================
    # CLASSIFICATION
    # =========================================================================

    def classify(self, node: Tag) -> ElementType:
        """
        Element kind for a node.

        Unknown tags become Containers.
        """
        tag = node.name.lower()
        if tag == "a" and self.is_button_like_link(node):
            return ElementType.CONTAINER_LINK
        return TAG_MAP.get(tag, ElementType.CONTAINER)

    def is_button_like_link(self, node: Tag) -> bool:
        """Check if an anchor should wrap children like a button."""
        class_attr = get_attribute(node, "class").lower()
        if any(keyword in class_attr for keyword in BUTTON_CLASS_KEYWORDS):
            return True

        return any(
            isinstance(child, Tag) and child.name.lower() in BUTTON_CHILD_TAGS
            for child in node.children
        )

    def is_raw(self, node: Tag) -> bool:
        """Check if a node is kept as markup instead of being recursed into."""
        tag = node.name.lower()
        return tag in RAW_OUTER_TAGS or tag in RAW_INNER_TAGS

    def is_button(self, node: Tag) -> bool:
        return node.name.lower() == "button"

    def tag_option(self, tag: str, element_type: ElementType) -> Optional[str]:
        """HTML tag the builder should render, for semantic tags only."""
        tag = tag.lower()
        if element_type == ElementType.CONTAINER and tag in CONTAINER_TAG_OPTIONS:
            return tag
        if element_type == ElementType.TEXT and tag in TEXT_TAG_OPTIONS:
            return tag
        return None

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    def build_properties(self, node: Tag, element_type: ElementType) -> PropertyTree:
        """
        Base properties of an element, before styles and attributes.

        Args:
            node: Source node
            element_type: Result of classify()

        Returns:
            PropertyTree with content (and grid layout for containers)
        """
        properties = PropertyTree()
        tag = node.name.lower()

        if element_type == ElementType.TEXT:
            properties.set("content.content.text", inner_html(node))

        elif element_type == ElementType.RICH_TEXT:
            properties.set("content.content.text", outer_html(node))

        elif element_type == ElementType.TEXT_LINK:
            properties.set("content.content.text", inner_html(node))
            properties.set("content.content.url", get_attribute(node, "href") or "#")
            properties.set("design.typography.text-decoration", "none")
            self._set_new_tab(node, properties)

        elif element_type == ElementType.CONTAINER_LINK:
            properties.set("content.content.url", get_attribute(node, "href") or "#")
            self._set_new_tab(node, properties)

        elif element_type == ElementType.IMAGE:
            properties.set("content.image", {
                "from": "url",
                "url": get_attribute(node, "src"),
                "lazy_load": True,
            })
            alt = get_attribute(node, "alt")
            if alt:
                properties.set("content.image.alt_when_from_url", "custom")
                properties.set("content.image.custom_alt_when_from_url", alt)

        elif element_type == ElementType.HTML_CODE:
            properties.set("content.content.html_code", outer_html(node))

        elif element_type.accepts_children and tag != "button":
            grid = self.grid_detector.get_grid_properties(get_attribute(node, "class").split())
            if grid:
                properties.merge_design({"layout": grid})

        return properties

    @staticmethod
    def _set_new_tab(node: Tag, properties: PropertyTree) -> None:
        if get_attribute(node, "target") == "_blank":
            properties.set("content.content.open_in_new_tab", True)

    # =========================================================================
    # BUTTONS AND TEXT CONVERSION
    # =========================================================================

    def button_text(self, node: Tag) -> str:
        """Direct text of a button plus its inline formatting children."""
        parts = []
        for child in node.children:
            if isinstance(child, Tag):
                if child.name.lower() in INLINE_FORMATTING_TAGS:
                    parts.append(outer_html(child))
            elif type(child) is NavigableString:
                parts.append(str(child))
        return "".join(parts).strip()

    def build_button_text(self, node: Tag) -> Optional[BuilderElement]:
        """
        The single Text child of a button.

        Other element children of the button are discarded.

        Returns:
            Text element, or None for a button without text
        """
        text = self.button_text(node)
        if not text:
            return None

        properties = PropertyTree()
        properties.set("content.content.text", text)
        properties.set("design.tag", "span")
        properties.set("settings.advanced.tag", "span")
        return BuilderElement(type=ElementType.TEXT, properties=properties)

    def has_only_inline_content(self, node: Tag) -> bool:
        """Check if all element children are inline formatting (icons excluded)."""
        for child in node.children:
            if not isinstance(child, Tag):
                continue
            tag = child.name.lower()
            if tag == "i" and self.icon_detector.is_icon_element(child):
                return False
            if tag not in INLINE_FORMATTING_TAGS:
                return False
        return True

    def should_convert_to_text(self, node: Tag, element_type: ElementType) -> bool:
        """
        Check if a plain container holds nothing but text and inline formatting.

        Such containers become Text elements carrying their inner HTML.
        Buttons and links are never reclassified.
        """
        if element_type != ElementType.CONTAINER or self.is_button(node):
            return False
        if not node.get_text().strip():
            return False
        return self.has_only_inline_content(node)
