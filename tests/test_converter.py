"""
Tests for HtmlConverter - end-to-end conversions.

Tests for:
- Tree assembly (unwrap, wrap, ids, starting id)
- Stylesheet rules, residual stylesheet and the CSS element
- Buttons, links, raw markup and scripts
- Mined script patterns and event handlers
- Icon libraries, head links, frameworks
- Failures, debug mode, preview summaries
"""

import pytest

from oxy_converter.converter import (
    ConversionError,
    ConversionOptions,
    ElementType,
    HtmlConverter,
)
from oxy_converter.converter.core.tree_builder import sanitize_url


CARD_HTML = '<div class="card"><h2>Hello</h2><p>World</p></div>'


def types_of(result):
    return [element.type for element in result.all_elements()]


# =============================================================================
# TREE ASSEMBLY
# =============================================================================

class TestAssembly:
    """Tests for root selection and numbering."""

    def test_single_root_unwrapped(self, convert):
        """Test one top-level element becomes the root."""
        result = convert(CARD_HTML)
        root = result.element

        assert root.type == ElementType.CONTAINER
        assert root.properties.get("settings.advanced.classes") == ["card"]
        assert [child.properties.get("design.tag") for child in root.children] == ["h2", "p"]
        assert [child.properties.get("content.content.text") for child in root.children] == [
            "Hello", "World",
        ]

    def test_ids_in_pre_order(self, convert):
        """Test ids increase in document order."""
        root = convert(CARD_HTML).element

        assert [element.id for element in root.walk()] == [1, 2, 3]

    def test_starting_node_id(self, convert):
        """Test numbering starts at the requested id."""
        root = convert(CARD_HTML, starting_node_id=100).element

        assert [element.id for element in root.walk()] == [100, 101, 102]

    def test_camel_case_options(self, converter):
        """Test options given with wire-format keys."""
        result = converter.convert(CARD_HTML, {"startingNodeId": 5})

        assert result.element.id == 5

    def test_wrap_in_container(self, convert):
        """Test the forced wrapper precedes its children."""
        root = convert(CARD_HTML, wrap_in_container=True).element

        assert root.type == ElementType.CONTAINER
        assert root.id == 1
        assert root.properties.is_empty()
        assert root.children[0].id == 2

    def test_multiple_top_level_wrapped(self, convert):
        """Test several top-level elements get a synthetic container."""
        root = convert("<h1>A</h1><p>B</p>").element

        assert root.type == ElementType.CONTAINER
        assert len(root.children) == 2

    def test_calls_do_not_share_state(self, converter):
        """Test every call starts from fresh counters."""
        first = converter.convert(CARD_HTML)
        second = converter.convert(CARD_HTML)

        assert second.element.id == first.element.id == 1
        assert second.stats.elements == first.stats.elements == 3

    def test_stats(self, convert):
        """Test counters of a simple conversion."""
        stats = convert('<div class="card mt-4"><p>x</p></div>').stats

        assert stats.elements == 2
        assert stats.tailwind_classes == 1
        assert stats.custom_classes == 1

    def test_result_dict(self, convert):
        """Test the wire-format keys of a successful result."""
        payload = convert(CARD_HTML).to_dict()

        assert set(payload) == {
            "success", "element", "cssElement", "headLinkElements", "iconScriptElements",
            "detectedIconLibraries", "extractedCss", "customClasses", "stats", "parseErrors",
        }
        assert payload["element"]["data"]["type"] == "OxygenElements\\Container"
        assert payload["customClasses"] == ["card"]
        assert payload["cssElement"] is None


# =============================================================================
# STYLESHEETS
# =============================================================================

STYLED_HTML = (
    "<style>.card { padding: 16px; color: #333; } .card:hover { color: red; } "
    "@media (max-width: 600px) { .card { padding: 8px; } }</style>"
    '<section class="card"><h2>Hi</h2></section>'
)


class TestStylesheets:
    """Tests for rule matching and the residual stylesheet."""

    def test_matched_rule_becomes_design(self, convert):
        """Test matched declarations land in design sections."""
        root = convert(STYLED_HTML).element

        assert root.properties.get("design.spacing.padding-top") == "16px"
        assert root.properties.get("design.typography.color") == "#333"
        assert root.properties.get("design.tag") == "section"

    def test_residual_stylesheet(self, convert):
        """Test consumed rules leave the stylesheet, the rest stays."""
        css = convert(STYLED_HTML).extracted_css

        assert css.startswith("/* Extracted from <style> tag */")
        assert ".card:hover { color: red; }" in css
        assert "@media (max-width: 600px) { .card { padding: 8px; } }" in css
        assert "padding: 16px" not in css

    def test_css_element_in_tree(self, convert):
        """Test the CssCode element is the first child of the root."""
        result = convert(STYLED_HTML)
        first = result.element.children[0]

        assert first is result.css_element
        assert first.type == ElementType.CSS_CODE
        assert first.properties.get("content.content.css_code") == result.extracted_css
        assert [element.id for element in result.element.walk()] == [1, 2, 3]

    def test_css_element_outside_tree(self, convert):
        """Test the CssCode element is returned separately when not embedded."""
        result = convert(STYLED_HTML, include_css_element=False)

        assert result.css_element not in result.element.children
        assert [element.id for element in result.element.walk()] == [1, 2]
        assert result.css_element.id == 3

    def test_non_container_root_wrapped_for_css(self, convert):
        """Test a leaf root is wrapped before the CssCode element is added."""
        result = convert("<style>.x:hover { color: red; }</style><p>Hi</p>")

        assert result.element.type == ElementType.CONTAINER
        assert types_of(result)[:3] == [ElementType.CONTAINER, ElementType.CSS_CODE, ElementType.TEXT]

    def test_fully_consumed_stylesheet(self, convert):
        """Test no CssCode element when nothing is left."""
        result = convert("<style>.card { color: red; }</style>" + CARD_HTML)

        assert result.extracted_css == ""
        assert result.css_element is None

    def test_unmapped_declarations_keep_rule(self, convert):
        """Test a matched rule with declarations the builder cannot hold stays in the stylesheet."""
        result = convert(
            "<style>.spin { color: red; animation: spin 1s linear infinite; -webkit-line-clamp: 2; }\n"
            "@keyframes spin { to { transform: rotate(360deg); } }</style>"
            '<div class="spin"><p>x</p></div>'
        )
        css = result.extracted_css

        assert ".spin { color: red; animation: spin 1s linear infinite; -webkit-line-clamp: 2; }" in css
        assert "@keyframes spin { to { transform: rotate(360deg); } }" in css
        assert result.element.properties.get("design.typography.color") == "red"
        assert not any("'.spin'" in message for message in result.stats.info)

    def test_class_shared_with_raw_markup_kept(self, convert):
        """Test a rule also matching preserved markup stays in the stylesheet."""
        result = convert(
            "<style>.btn { color: red; }</style>"
            '<div><a class="btn" href="#">x</a><form><button class="btn">Go</button></form></div>'
        )
        link = next(e for e in result.all_elements() if e.type == ElementType.CONTAINER_LINK)

        assert ".btn { color: red; }" in result.extracted_css
        assert link.properties.get("design.typography.color") == "red"

    def test_class_shared_with_inline_text_kept(self, convert):
        """Test a rule also matching markup inside a Text element stays in the stylesheet."""
        result = convert(
            "<style>.hl { color: red; } .title { font-size: 2rem; }</style>"
            '<section><h2 class="hl title">A</h2><div>Hi <span class="hl">b</span></div></section>'
        )

        assert ".hl { color: red; }" in result.extracted_css
        assert ".title" not in result.extracted_css

    def test_unconverted_selector_info(self, convert):
        """Test descendant chains that matched nothing are reported."""
        result = convert("<style>.nav a { color: red; }</style><div class='x'><p>hi</p></div>")

        assert any("1 CSS selector(s) such as '.nav a'" in message for message in result.stats.info)

    def test_inline_style(self, convert):
        """Test the style attribute is mapped."""
        root = convert('<a href="/x" style="color: red">Go</a>').element

        assert root.type == ElementType.TEXT_LINK
        assert root.properties.get("design.typography.color") == "red"
        assert root.properties.get("design.typography.text-decoration") == "none"


class TestAnimations:
    """Tests for entrance animations."""

    HTML = """
    <style>
    .reveal { opacity: 0; transform: translateY(20px); transition: all 0.5s ease; margin-top: 10px; }
    .reveal.visible { opacity: 1; transform: none; }
    </style>
    <section><div class="reveal stagger-2"><p>A</p></div></section>
    <script>
    const observer = new IntersectionObserver(entries => {
      entries.forEach(e => e.target.classList.add('visible'));
    });
    document.querySelectorAll('.reveal').forEach(el => observer.observe(el));
    </script>
    """

    def test_scroll_reveal(self, convert):
        """Test the reveal idiom becomes a native animation."""
        result = convert(self.HTML)
        div = result.element.children[0]

        assert div.properties.get("settings.animations.entrance_animation") == {
            "type": "slideUp",
            "duration": 500,
            "delay": 200,
            "easing": "ease",
            "distance": 20,
            "once": True,
        }
        assert not div.properties.has("settings.advanced.classes")
        assert div.properties.get("design.spacing.margin-top") == "10px"

    def test_observer_script_and_rules_removed(self, convert):
        """Test the reveal stylesheet and observer script are dropped."""
        result = convert(self.HTML)

        assert result.extracted_css == ""
        assert ElementType.JAVASCRIPT_CODE not in types_of(result)
        assert result.element.type == ElementType.CONTAINER
        assert result.element.properties.get("design.tag") == "section"


# =============================================================================
# ELEMENT KINDS
# =============================================================================

class TestElementKinds:
    """Tests for buttons, links and raw markup."""

    def test_button_text(self, convert):
        """Test buttons keep formatting in their Text child."""
        root = convert("<button>Click <b>me</b></button>").element

        assert root.type == ElementType.CONTAINER
        assert root.properties.get("design.tag") == "button"
        assert len(root.children) == 1
        assert root.children[0].properties.get("content.content.text") == "Click <b>me</b>"

    def test_button_block_children_discarded(self, convert):
        """Test block children of buttons are dropped without error."""
        root = convert("<button><div>icon</div>Go</button>").element

        assert [child.properties.get("content.content.text") for child in root.children] == ["Go"]

    def test_button_text_counted(self, convert):
        """Test the synthesized Text child counts as an element."""
        result = convert("<button>Menu</button>")

        assert result.stats.elements == len(list(result.element.walk())) == 2

    def test_button_like_link(self, convert):
        """Test button-like anchors wrap their children."""
        root = convert('<a class="btn btn-primary" href="/buy"><span>Buy</span></a>').element

        assert root.type == ElementType.CONTAINER_LINK
        assert root.properties.get("content.content.url") == "/buy"
        assert root.children[0].type == ElementType.TEXT

    def test_plain_link(self, convert):
        """Test plain anchors are text links."""
        root = convert('<a href="https://x.com">Plain</a>').element

        assert root.type == ElementType.TEXT_LINK
        assert root.properties.get("content.content.text") == "Plain"

    def test_raw_markup_only_counts_classes(self, convert):
        """Test raw elements keep classes inside their markup."""
        result = convert('<section><svg class="icon mt-2" id="logo"><path d="M0"></path></svg></section>')
        svg = result.element.children[0]

        assert svg.type == ElementType.HTML_CODE
        assert not svg.properties.has("settings")
        assert 'id="logo"' in svg.properties.get("content.content.html_code")
        assert result.custom_classes == ["icon"]
        assert result.stats.tailwind_classes == 1

    def test_file_url_sanitized(self, convert):
        """Test local image paths are reduced to the file name."""
        root = convert('<img src="file:///C:/Users/me/site/hero.png" alt="Hero">').element

        assert root.properties.get("content.image.url") == "hero.png"

    @pytest.mark.parametrize("url, expected", [
        ("file:///home/me/a.png", "a.png"),
        ("file:///C:\\site\\b.jpg", "b.jpg"),
        ("https://cdn.x/c.png", "https://cdn.x/c.png"),
    ])
    def test_sanitize_url(self, url, expected):
        """Test URL sanitization."""
        assert sanitize_url(url) == expected

    def test_container_of_inline_text(self, convert):
        """Test a div holding only inline content becomes Text."""
        root = convert("<div>Hello <em>there</em></div>").element

        assert root.type == ElementType.TEXT
        assert root.properties.get("content.content.text") == "Hello <em>there</em>"


class TestScripts:
    """Tests for script handling."""

    def test_inline_script_rewritten(self, convert):
        """Test functions move to window in a JavaScriptCode element."""
        root = convert(
            "<section><p>x</p><script>function hello() { console.log(1); }</script></section>"
        ).element
        script = root.children[1]

        assert script.type == ElementType.JAVASCRIPT_CODE
        assert script.properties.get("content.content.javascript_code").startswith(
            "// Functions (available on window object)\n"
            "window.hello = function(event, target, action) {"
        )

    def test_external_script_kept(self, convert):
        """Test scripts with src stay raw markup."""
        root = convert('<section><p>x</p><script src="https://cdn.example.com/app.js"></script></section>').element

        assert root.children[1].type == ElementType.HTML_CODE
        assert root.children[1].properties.get("content.content.html_code") == (
            '<script src="https://cdn.example.com/app.js"></script>'
        )

    def test_data_script_kept(self, convert):
        """Test non-JavaScript script types stay raw markup."""
        root = convert(
            '<section><p>x</p><script type="application/ld+json">{"name": "x"}</script></section>'
        ).element

        assert root.children[1].type == ElementType.HTML_CODE
        assert "ld+json" in root.children[1].properties.get("content.content.html_code")

    def test_empty_script_dropped(self, convert):
        """Test blank scripts produce no element."""
        root = convert("<section><p>x</p><script>  </script></section>").element

        assert len(root.children) == 1


# =============================================================================
# INTERACTIONS
# =============================================================================

NAV_HTML = """
<nav>
  <button id="navToggle">Menu</button>
  <ul id="mobileMenu"><li><a href="#about">About</a></li></ul>
</nav>
<script>
const navToggle = document.getElementById('navToggle');
const mobileMenu = document.getElementById('mobileMenu');
navToggle.addEventListener('click', () => {
  mobileMenu.classList.toggle('active');
});
document.querySelectorAll('a[href^="#"]').forEach(a => {
  a.addEventListener('click', () => {
    document.querySelector(a.getAttribute('href')).scrollIntoView({ behavior: 'smooth' });
  });
});
</script>
"""


class TestInteractions:
    """Tests for handlers and mined script patterns."""

    def test_toggle_interaction(self, convert):
        """Test the class toggle becomes an interaction on the trigger."""
        button = convert(NAV_HTML).element.children[0]

        assert button.properties.get("settings.advanced.id") == "navToggle"
        assert button.properties.get("settings.interactions.interactions") == [{
            "trigger": "click",
            "actions": [{"name": "toggle_class", "target": "#mobileMenu", "class_name": "active"}],
        }]

    def test_smooth_scroll_interaction(self, convert):
        """Test in-page links get a scroll interaction."""
        link = convert(NAV_HTML).element.children[1].children[0].children[0]

        assert link.type == ElementType.TEXT_LINK
        assert link.properties.get("settings.interactions.interactions") == [{
            "trigger": "click",
            "actions": [{"name": "scroll_to", "target": "#about", "scroll_behavior": "smooth"}],
        }]

    def test_converted_script_dropped(self, convert):
        """Test a script with only converted code leaves no element."""
        result = convert(NAV_HTML)

        assert result.element.properties.get("design.tag") == "nav"
        assert ElementType.JAVASCRIPT_CODE not in types_of(result)

    def test_onclick_translated(self, convert):
        """Test a bare call handler becomes a native action."""
        root = convert('<button onclick="toggleMenu()">Menu</button>').element

        assert root.properties.get("settings.interactions.interactions") == [{
            "trigger": "click",
            "target": "this_element",
            "actions": [{
                "name": "javascript_function",
                "target": "this_element",
                "js_function_name": "toggleMenu",
            }],
        }]
        assert not root.properties.has("settings.advanced.attributes")

    def test_onclick_with_string_kept(self, convert):
        """Test handlers outside the grammar stay raw attributes."""
        root = convert("<button onclick=\"alert('hi')\">X</button>").element

        assert root.properties.get("settings.advanced.attributes") == [
            {"name": "onclick", "value": "alert('hi')"},
        ]
        assert not root.properties.has("settings.interactions")

    def test_alpine_attributes(self, convert):
        """Test framework attributes are preserved with a warning."""
        result = convert('<div x-data="{ open: false }"><button @click="open = !open">Toggle</button></div>')
        button = result.element.children[0]

        assert button.properties.get("settings.advanced.attributes") == [
            {"name": "@click", "value": "open = !open"},
        ]
        assert result.element.properties.get("settings.advanced.attributes") == [
            {"name": "x-data", "value": "{ open: false }"},
        ]
        assert any(warning.startswith("Alpine.js detected") for warning in result.stats.warnings)


# =============================================================================
# DOCUMENT EXTRAS
# =============================================================================

class TestDocumentExtras:
    """Tests for icon libraries, head links and suggestions."""

    def test_icon_loader_prepended(self, convert):
        """Test a loader element is added for a detected library."""
        result = convert('<section><i data-lucide="menu"></i><p>Hi</p></section>')
        loader = result.element.children[0]

        assert loader is result.icon_script_elements[0]
        assert loader.library_key == "lucide"
        assert loader.id == 2
        assert loader.to_dict()["_libraryKey"] == "lucide"
        assert result.detected_icon_libraries == {
            "lucide": {
                "name": "Lucide Icons",
                "cdn": "https://unpkg.com/lucide@latest",
                "type": "js",
                "init": "lucide.createIcons();",
            },
        }
        assert any(warning.startswith("Lucide Icons detected") for warning in result.stats.warnings)

    def test_head_links(self, convert):
        """Test stylesheet and preconnect links in <head> are kept."""
        html = (
            "<!DOCTYPE html><html><head>"
            '<link rel="preconnect" href="https://fonts.googleapis.com">'
            '<link rel="stylesheet" href="https://fonts.googleapis.com/css2?family=Inter">'
            '<link rel="icon" href="/favicon.ico">'
            "</head><body><main><h1>Hi</h1></main></body></html>"
        )

        result = convert(html)

        assert len(result.head_link_elements) == 2
        assert 'rel="preconnect"' in result.head_link_elements[0].properties.get("content.content.html_code")
        assert result.element.children[:2] == result.head_link_elements
        assert result.element.properties.get("design.tag") == "main"

    def test_repeated_structure_info(self, convert):
        """Test repeated cards produce a component suggestion."""
        card = '<div class="card"><h3>T</h3><p>B</p></div>'
        result = convert(f"<section>{card * 3}</section>")

        assert any(message.startswith("Detected 3 repeated <div> structures") for message in result.stats.info)


# =============================================================================
# HEURISTICS
# =============================================================================

class TestHeuristicsIntegration:
    """Tests for heuristics switched on through configuration."""

    def test_header_spacing(self, heuristic_converter):
        """Test the section after a fixed nav gets top padding."""
        converter = heuristic_converter(fixed_header_spacing=True)

        result = converter.convert('<nav class="fixed top-0"><a href="#">Home</a></nav><section><h2>Hi</h2></section>')

        assert result.element.children[1].properties.get("design.spacing.padding-top") == "80px"

    def test_button_centering(self, heuristic_converter):
        """Test button-like links center their content."""
        converter = heuristic_converter(button_centering=True)

        root = converter.convert('<a class="btn" href="/buy"><span>Buy</span></a>').element

        assert root.properties.get("design.layout.justify-content") == "center"
        assert root.children[0].properties.get("design.typography.text-align") == "center"

    def test_nav_scrolled_rewrite(self, heuristic_converter):
        """Test the stylesheet rewrite reaches the residual CSS."""
        converter = heuristic_converter(nav_scrolled_css_rewrite=True)

        result = converter.convert("<style>.nav-scrolled { background: #000; }</style><nav><p>x</p></nav>")

        assert ".nav-scrolled, .oxy-header-sticky { background: #000; }" in result.extracted_css

    def test_off_by_default(self, convert):
        """Test default conversions apply no heuristics."""
        root = convert('<a class="btn" href="/buy"><span>Buy</span></a>').element

        assert not root.properties.has("design.layout")


# =============================================================================
# FAILURES AND DIAGNOSTICS
# =============================================================================

class TestFailures:
    """Tests for failed conversions and diagnostics."""

    @pytest.mark.parametrize("html", ["", "<!-- nothing here -->", "<style>.a { color: red; }</style>"])
    def test_no_content(self, converter, html):
        """Test inputs without convertible content fail."""
        result = converter.convert(html)

        assert not result.success
        assert result.error == "No convertible content found in HTML"
        assert result.to_dict() == {
            "success": False,
            "error": "No convertible content found in HTML",
            "errors": [],
        }

    def test_convert_or_raise(self, converter):
        """Test failures raise ConversionError."""
        with pytest.raises(ConversionError, match="No convertible content"):
            converter.convert_or_raise("")

    def test_convert_or_raise_wraps_faults(self, converter):
        """Test unexpected faults are wrapped."""
        with pytest.raises(ConversionError, match="Conversion error: starting_node_id must be >= 1"):
            converter.convert_or_raise(CARD_HTML, {"starting_node_id": 0})

    def test_invalid_options(self):
        """Test option validation."""
        with pytest.raises(ValueError):
            ConversionOptions(starting_node_id=0)

    def test_parse_errors_recovered(self, converter):
        """Test unbalanced markup converts and records the error."""
        result = converter.convert("<div><span>unclosed</div>")

        assert result.success
        assert result.parse_errors == ["Unclosed tag <span> opened at line 1"]
        assert result.stats.info == []

    def test_debug_mode(self, converter):
        """Test debug mode surfaces parse errors as info."""
        result = converter.convert("<div><span>unclosed</div>", ConversionOptions(debug_mode=True))

        assert "Parse error: Unclosed tag <span> opened at line 1" in result.stats.info


class TestPreviewSummary:
    """Tests for element counts per type."""

    def test_from_element(self, convert):
        """Test counting a built tree."""
        summary = HtmlConverter.preview_summary(convert(CARD_HTML).element)

        assert summary == {"total": 3, "byType": {"Container": 1, "Text": 2}}

    def test_from_dict(self, convert):
        """Test counting a serialized tree."""
        payload = convert(CARD_HTML).to_dict()["element"]

        assert HtmlConverter.preview_summary(payload) == {"total": 3, "byType": {"Container": 1, "Text": 2}}
