"""
Heuristics - Optional template-specific tweaks.

These help one family of landing-page templates and can surprise on other
markup, so every heuristic is off unless enabled in ``HeuristicFlags``.

| Flag                      | Effect                                                |
|---------------------------|-------------------------------------------------------|
| sticky_navbar             | ``nav#navbar`` gets top/viewport sticky settings      |
| nav_link_white            | links in a nav, or with a nav class, get white text   |
| rounded_full_centering    | ``span.rounded-full`` becomes a centered flex box     |
| button_centering          | button containers center their content                |
| fixed_header_spacing      | 80px top padding after a fixed/sticky first element   |
| nav_scrolled_css_rewrite  | ``.nav-scrolled`` also targets ``.oxy-header-sticky`` |
"""

from dataclasses import dataclass

from bs4 import Tag

from ..contracts.element_types import ElementType
from ..contracts.elements import BuilderElement, PropertyTree
from ..contracts.options import HeuristicFlags
from ..parsers.markup_parser import get_attribute


HEADER_SPACING = "80px"
SPACED_TAGS = frozenset({"header", "section", "div"})


@dataclass
class HeaderSpacingState:
    """Walk state of the fixed-header spacing heuristic."""

    first_processed: bool = False
    header_detected: bool = False


class HeuristicsService:
    """Applies the enabled heuristics to built elements."""

    def __init__(self, flags: HeuristicFlags):
        self.flags = flags

    # =========================================================================
    # ELEMENT HEURISTICS
    # =========================================================================

    def apply(self, node: Tag, element: BuilderElement, button_like: bool = False) -> None:
        """
        Apply per-element heuristics.

        Args:
            node: Source node
            element: Element built from ``node``
            button_like: True for buttons and button-like links
        """
        if not self.flags.any_enabled:
            return

        tag = node.name.lower()
        properties = element.properties

        if self.flags.sticky_navbar and tag == "nav" and get_attribute(node, "id") == "navbar":
            properties.merge_design({
                "sticky": {"position": "top", "relative_to": "viewport", "offset": "0"},
            })

        if self.flags.nav_link_white and self._is_nav_link(node):
            properties.set("design.typography.color", "#ffffff")

        if self.flags.rounded_full_centering and tag == "span" \
                and "rounded-full" in get_attribute(node, "class"):
            properties.merge_design({
                "layout": {"display": "flex", "justify-content": "center", "align-items": "center"},
                "typography": {"line-height": "0"},
            })

        if self.flags.button_centering and button_like and element.type.accepts_children:
            self.center_button(properties)
            for child in element.children:
                if child.type == ElementType.TEXT:
                    child.properties.set_default("design.typography.text-align", "center")

    @staticmethod
    def _is_nav_link(node: Tag) -> bool:
        parent = node.parent
        in_nav = isinstance(parent, Tag) and parent.name.lower() == "nav"
        return in_nav or "nav" in get_attribute(node, "class")

    @staticmethod
    def center_button(properties: PropertyTree) -> None:
        """Flex-center a button container, keeping explicit values."""
        properties.set_default("design.layout.display", "flex")
        properties.set_default("design.layout.justify-content", "center")
        properties.set_default("design.layout.align-items", "center")
        properties.set_default("design.typography.text-align", "center")

    def apply_header_spacing(self, node: Tag, element: BuilderElement, state: HeaderSpacingState) -> bool:
        """
        Pad the first top-level section after a fixed header.

        Only called for top-level elements. Applies at most once per walk.

        Returns:
            Whether padding was added
        """
        if not self.flags.fixed_header_spacing:
            return False

        if not state.first_processed:
            state.first_processed = True
            classes = get_attribute(node, "class")
            if "fixed" in classes or "sticky" in classes or get_attribute(node, "id") == "navbar":
                state.header_detected = True
            return False

        if state.header_detected and node.name.lower() in SPACED_TAGS:
            element.properties.set_default("design.spacing.padding-top", HEADER_SPACING)
            state.header_detected = False
            return True

        return False

    # =========================================================================
    # STYLESHEET HEURISTICS
    # =========================================================================

    def rewrite_css(self, css: str) -> str:
        """Apply stylesheet rewrites."""
        if self.flags.nav_scrolled_css_rewrite:
            css = css.replace(".nav-scrolled", ".nav-scrolled, .oxy-header-sticky")
        return css
