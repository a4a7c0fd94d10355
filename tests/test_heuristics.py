"""
Tests for HeuristicsService - optional template tweaks.

Tests for:
- Flags off by default
- Sticky navbar, nav link color, badge centering
- Button centering
- Fixed header spacing state
- Stylesheet rewrite
"""

import pytest
from bs4 import BeautifulSoup

from oxy_converter.converter import BuilderElement, ElementType, HeuristicFlags, PropertyTree
from oxy_converter.converter.analyzers import HeaderSpacingState, HeuristicsService


def service(**flags) -> HeuristicsService:
    return HeuristicsService(HeuristicFlags(**flags))


def container() -> BuilderElement:
    return BuilderElement(type=ElementType.CONTAINER)


class TestElementHeuristics:
    """Tests for per-element heuristics."""

    def test_all_off_by_default(self, node):
        """Test nothing changes without flags."""
        element = container()

        service().apply(node('<nav id="navbar"></nav>'), element, button_like=True)

        assert element.properties.is_empty()

    def test_sticky_navbar(self, node):
        """Test nav#navbar becomes sticky."""
        element = container()

        service(sticky_navbar=True).apply(node('<nav id="navbar"></nav>'), element)

        assert element.properties.get("design.sticky") == {
            "position": "top", "relative_to": "viewport", "offset": "0",
        }

    def test_sticky_needs_navbar_id(self, node):
        """Test other navs are not made sticky."""
        element = container()

        service(sticky_navbar=True).apply(node('<nav id="menu"></nav>'), element)

        assert element.properties.is_empty()

    @pytest.mark.parametrize("html, white", [
        ('<nav><a href="#">Home</a></nav>', True),
        ('<div><a class="nav-item" href="#">Home</a></div>', True),
        ('<div><a href="#">Home</a></div>', False),
    ])
    def test_nav_link_white(self, html, white):
        """Test links in a nav or with a nav class turn white."""
        link = BeautifulSoup(html, "html.parser", multi_valued_attributes=None).find("a")
        element = BuilderElement(type=ElementType.TEXT_LINK)

        service(nav_link_white=True).apply(link, element)

        assert (element.properties.get("design.typography.color") == "#ffffff") is white

    def test_rounded_full_badge(self, node):
        """Test rounded-full spans become centered flex boxes."""
        element = BuilderElement(type=ElementType.TEXT)

        service(rounded_full_centering=True).apply(node('<span class="rounded-full w-8">1</span>'), element)

        assert element.properties.get("design.layout") == {
            "display": "flex", "justify-content": "center", "align-items": "center",
        }
        assert element.properties.get("design.typography.line-height") == "0"


class TestButtonCentering:
    """Tests for button centering."""

    def test_centers_container_and_text(self, node):
        """Test the container and its Text child are centered."""
        text = BuilderElement(type=ElementType.TEXT)
        element = BuilderElement(type=ElementType.CONTAINER, children=[text])

        service(button_centering=True).apply(node("<button>Go</button>"), element, button_like=True)

        assert element.properties.get("design.layout") == {
            "display": "flex", "justify-content": "center", "align-items": "center",
        }
        assert text.properties.get("design.typography.text-align") == "center"

    def test_explicit_values_kept(self, node):
        """Test existing layout values are not overwritten."""
        properties = PropertyTree({"design": {"layout": {"display": "inline-flex"}}})
        element = BuilderElement(type=ElementType.CONTAINER_LINK, properties=properties)

        service(button_centering=True).apply(node('<a class="btn">Go</a>'), element, button_like=True)

        assert element.properties.get("design.layout.display") == "inline-flex"
        assert element.properties.get("design.layout.justify-content") == "center"

    def test_only_button_like(self, node):
        """Test plain containers are left alone."""
        element = container()

        service(button_centering=True).apply(node("<div>Go</div>"), element, button_like=False)

        assert element.properties.is_empty()

    def test_text_link_not_centered(self, node):
        """Test leaf link kinds are not centered."""
        element = BuilderElement(type=ElementType.TEXT_LINK)

        service(button_centering=True).apply(node('<a href="#">Go</a>'), element, button_like=True)

        assert element.properties.is_empty()


class TestHeaderSpacing:
    """Tests for the fixed header spacing heuristic."""

    def test_pads_section_after_fixed_header(self, node):
        """Test only the first spaced element after the header is padded."""
        heuristics = service(fixed_header_spacing=True)
        state = HeaderSpacingState()
        section = container()
        later = container()

        assert not heuristics.apply_header_spacing(node('<nav class="fixed top-0"></nav>'), container(), state)
        assert heuristics.apply_header_spacing(node("<section></section>"), section, state)
        assert not heuristics.apply_header_spacing(node("<section></section>"), later, state)

        assert section.properties.get("design.spacing.padding-top") == "80px"
        assert later.properties.is_empty()

    def test_no_header(self, node):
        """Test nothing is padded when the first element is not fixed."""
        heuristics = service(fixed_header_spacing=True)
        state = HeaderSpacingState()
        section = container()

        heuristics.apply_header_spacing(node("<div></div>"), container(), state)
        heuristics.apply_header_spacing(node("<section></section>"), section, state)

        assert section.properties.is_empty()

    def test_explicit_padding_kept(self, node):
        """Test a section with its own top padding keeps it."""
        heuristics = service(fixed_header_spacing=True)
        state = HeaderSpacingState()
        section = BuilderElement(
            type=ElementType.CONTAINER,
            properties=PropertyTree({"design": {"spacing": {"padding-top": "2rem"}}}),
        )

        heuristics.apply_header_spacing(node('<header id="navbar"></header>'), container(), state)
        heuristics.apply_header_spacing(node("<section></section>"), section, state)

        assert section.properties.get("design.spacing.padding-top") == "2rem"

    def test_disabled(self, node):
        """Test the heuristic is inert when off."""
        state = HeaderSpacingState()

        assert not service().apply_header_spacing(node('<nav class="fixed"></nav>'), container(), state)
        assert not state.first_processed


class TestCssRewrite:
    """Tests for stylesheet rewrites."""

    def test_nav_scrolled(self):
        """Test .nav-scrolled also targets the sticky header class."""
        css = ".nav-scrolled { background: #000; }"

        assert service(nav_scrolled_css_rewrite=True).rewrite_css(css) == (
            ".nav-scrolled, .oxy-header-sticky { background: #000; }"
        )

    def test_unchanged_when_off(self):
        """Test the stylesheet is untouched by default."""
        css = ".nav-scrolled { background: #000; }"

        assert service().rewrite_css(css) == css
