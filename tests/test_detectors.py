"""
Tests for the independent analyzers.

Tests for:
- Utility class detection and class handling modes
- Icon library detection and loader elements
- Framework attribute detection
- Event handler translation and attribute pass-through
- Repeated structure suggestions
- Entrance animation inference
"""

import pytest
from bs4 import BeautifulSoup

from oxy_converter.converter import (
    ClassHandlingMode,
    ConversionReport,
    ElementType,
    PropertyTree,
)
from oxy_converter.converter.analyzers import (
    NATIVE_MODE_WARNING,
    AnimationDetector,
    ClassStrategy,
    ComponentDetector,
    FrameworkDetector,
    IconDetector,
    InteractionDetector,
    TailwindDetector,
    merge_attributes,
)
from oxy_converter.converter.parsers.markup_parser import AT_PREFIX


def soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser", multi_valued_attributes=None)


# =============================================================================
# CLASSES
# =============================================================================

class TestTailwindDetector:
    """Tests for utility class detection."""

    @pytest.mark.parametrize("class_name", [
        "mt-4", "flex", "md:flex", "hover:bg-blue-600", "w-[200px]", "-mt-4", "text-white/50",
    ])
    def test_utility(self, class_name):
        """Test utility class names."""
        assert TailwindDetector().is_utility_class(class_name)

    @pytest.mark.parametrize("class_name", ["card", "hero-badge", "navbar", "btn-primary"])
    def test_custom(self, class_name):
        """Test project class names."""
        assert not TailwindDetector().is_utility_class(class_name)

    def test_split_keeps_order(self):
        """Test bucketing preserves order within each bucket."""
        assert TailwindDetector().split(["mt-4", "card", "flex", "logo"]) == (
            ["mt-4", "flex"], ["card", "logo"],
        )


class TestClassStrategy:
    """Tests for class handling modes."""

    def test_utility_mode_keeps_order(self):
        """Test utility mode stores classes as written."""
        strategy = ClassStrategy(ClassHandlingMode.UTILITY, TailwindDetector())
        properties = PropertyTree()
        report = ConversionReport()

        custom = strategy.apply(["mt-4", "card"], properties, report)

        assert custom == ["card"]
        assert properties.get("settings.advanced.classes") == ["mt-4", "card"]
        assert report.tailwind_classes == 1
        assert report.custom_classes == 1
        assert report.warnings == []

    def test_native_mode_orders_custom_first(self):
        """Test native mode puts custom classes first and warns."""
        strategy = ClassStrategy(ClassHandlingMode.NATIVE, TailwindDetector())
        properties = PropertyTree()
        report = ConversionReport()

        strategy.apply(["mt-4", "card"], properties, report)

        assert properties.get("settings.advanced.classes") == ["card", "mt-4"]
        assert report.warnings == [NATIVE_MODE_WARNING]

    def test_no_classes(self):
        """Test an element without classes is left untouched."""
        strategy = ClassStrategy(ClassHandlingMode.UTILITY, TailwindDetector())
        properties = PropertyTree()

        assert strategy.apply([], properties, ConversionReport()) == []
        assert properties.is_empty()

    def test_mode_from_string(self):
        """Test unknown modes fall back to utility."""
        assert ClassHandlingMode.from_string("NATIVE") == ClassHandlingMode.NATIVE
        assert ClassHandlingMode.from_string("other") == ClassHandlingMode.UTILITY


# =============================================================================
# ICONS AND FRAMEWORKS
# =============================================================================

class TestIconDetector:
    """Tests for icon library detection."""

    def test_detect_in_library_order(self):
        """Test detected libraries come back in a fixed order."""
        document = soup('<div><i class="fa-solid fa-star"></i><i data-lucide="menu"></i></div>')

        assert list(IconDetector().detect(document)) == ["lucide", "fontawesome"]

    def test_nothing_detected(self):
        """Test plain markup has no libraries."""
        assert IconDetector().detect(soup("<p><i>italic</i></p>")) == {}

    def test_script_loader_element(self):
        """Test script libraries get a script tag plus init call."""
        detector = IconDetector()
        elements = detector.build_elements(detector.detect(soup('<i data-lucide="x"></i>')))

        assert len(elements) == 1
        element = elements[0]
        markup = element.properties.get("content.content.html_code")
        assert element.type == ElementType.HTML_CODE
        assert element.library_key == "lucide"
        assert '<script src="https://unpkg.com/lucide@latest"></script>' in markup
        assert "lucide.createIcons();" in markup

    def test_stylesheet_loader_element(self):
        """Test icon fonts get a stylesheet link."""
        detector = IconDetector()
        elements = detector.build_elements(detector.detect(soup('<span class="material-icons">home</span>')))

        markup = elements[0].properties.get("content.content.html_code")
        assert markup == (
            "<!-- Material Icons -->\n"
            '<link rel="stylesheet" href="https://fonts.googleapis.com/icon?family=Material+Icons">'
        )

    @pytest.mark.parametrize("html, expected", [
        ('<i data-feather="x"></i>', True),
        ('<i class="bi-house"></i>', True),
        ('<i class="fa fa-star"></i>', True),
        ("<i></i>", True),
        ("<i>emphasis</i>", False),
    ])
    def test_icon_element(self, node, html, expected):
        """Test icon <i> versus italic text."""
        assert IconDetector().is_icon_element(node(html)) is expected


class TestFrameworkDetector:
    """Tests for framework attribute detection."""

    def test_all_frameworks(self, node):
        """Test Alpine, HTMX and Stimulus attributes."""
        div = node('<div x-data="{open: false}" hx-get="/items" data-controller="menu"></div>')
        report = ConversionReport()
        detector = FrameworkDetector()

        detected = detector.detect(div, report)
        detector.detect(div, report)

        assert detected == ["Alpine.js", "HTMX", "Stimulus.js"]
        assert len(report.warnings) == 3

    def test_at_placeholder_is_alpine(self):
        """Test rewritten @ attributes count as Alpine."""
        assert FrameworkDetector().is_framework_attribute(f"{AT_PREFIX}click")

    def test_plain_attributes(self, node):
        """Test ordinary attributes detect nothing."""
        assert FrameworkDetector().frameworks_of(node('<div data-id="3" title="x"></div>')) == []


# =============================================================================
# INTERACTIONS
# =============================================================================

@pytest.fixture
def interactions():
    """Create an InteractionDetector instance."""
    return InteractionDetector(FrameworkDetector())


class TestHandlerTranslation:
    """Tests for the handler grammar."""

    def test_bare_call(self, interactions):
        """Test a single call without arguments."""
        translated = interactions.translate_handler("click", "toggleMenu()")

        assert translated.interaction == {
            "trigger": "click",
            "target": "this_element",
            "actions": [{
                "name": "javascript_function",
                "target": "this_element",
                "js_function_name": "toggleMenu",
            }],
        }
        assert translated.arg_attributes == []

    def test_multiple_calls_with_args(self, interactions):
        """Test several calls and the argument attribute."""
        translated = interactions.translate_handler("click", "openModal(2, step); track();")

        assert translated.function_names == ["openModal", "track"]
        assert translated.arg_attributes == [{"name": "data-arg-openmodal", "value": "2,step"}]

    @pytest.mark.parametrize("code", [
        "alert('hi')",
        "toggle(this)",
        "open = true",
        "if (x) go()",
        "menu.toggle()",
        "",
    ])
    def test_outside_grammar(self, interactions, code):
        """Test handlers that must stay raw."""
        assert interactions.translate_handler("click", code) is None


class TestAttributeProcessing:
    """Tests for attribute pass-through."""

    def test_translated_and_preserved(self, interactions, node):
        """Test translated handlers leave the node, others pass through."""
        button = node(
            '<button onclick="toggleMenu()" aria-label="Menu" data-id="7" style="color: red" '
            "onmouseenter=\"alert('x')\" foo=\"bar\">Menu</button>"
        )
        properties = PropertyTree()

        added = interactions.process(button, properties)

        assert len(added) == 1
        assert not button.has_attr("onclick")
        assert properties.get("settings.advanced.attributes") == [
            {"name": "aria-label", "value": "Menu"},
            {"name": "data-id", "value": "7"},
            {"name": "onmouseenter", "value": "alert('x')"},
        ]
        assert properties.get("settings.interactions.interactions") == added

    def test_alpine_click_translated_and_kept(self, interactions, node):
        """Test Alpine click handlers are translated and preserved."""
        button = node('<button x-on:click="toggle()" x-show="open">Go</button>')
        properties = PropertyTree()

        added = interactions.process(button, properties)

        assert added[0]["actions"][0]["js_function_name"] == "toggle"
        assert properties.get("settings.advanced.attributes") == [
            {"name": "x-on:click", "value": "toggle()"},
            {"name": "x-show", "value": "open"},
        ]

    def test_at_attribute_restored(self, interactions, node):
        """Test the @ placeholder is reversed in the stored name."""
        button = node(f'<button {AT_PREFIX}click="open()">Go</button>')
        properties = PropertyTree()

        interactions.process(button, properties)

        assert properties.get("settings.advanced.attributes") == [{"name": "@click", "value": "open()"}]

    def test_merge_attributes_first_wins(self):
        """Test existing attributes keep their value."""
        properties = PropertyTree()
        properties.set("settings.advanced.attributes", [{"name": "id-x", "value": "1"}])

        merge_attributes(properties, [{"name": "id-x", "value": "2"}, {"name": "role", "value": "nav"}])

        assert properties.get("settings.advanced.attributes") == [
            {"name": "id-x", "value": "1"},
            {"name": "role", "value": "nav"},
        ]


# =============================================================================
# STRUCTURE
# =============================================================================

class TestComponentDetector:
    """Tests for repeated structure suggestions."""

    def test_repeated_cards(self):
        """Test three identical cards produce one suggestion."""
        card = '<div class="card"><img src="a.png"><h3>T</h3><p>B</p></div>'
        section = soup(f"<section>{card * 3}</section>").find("section")
        report = ConversionReport()

        repeated = ComponentDetector().analyze([section], report)

        assert repeated == ["div[img,h3,p]"]
        assert report.info == [
            "Detected 3 repeated <div> structures. "
            "Consider creating a reusable Oxygen component or partial for these."
        ]

    def test_below_threshold(self):
        """Test two repetitions are not reported."""
        card = "<li><a>x</a></li>"
        nodes = soup(f"<ul>{card * 2}</ul>").find_all("ul")

        assert ComponentDetector().analyze(nodes, ConversionReport()) == []

    def test_signature(self, node):
        """Test non-candidate tags and leaf nodes have no signature."""
        detector = ComponentDetector()

        assert detector.signature(node("<ul><li>a</li></ul>")) is None
        assert detector.signature(node("<div>text</div>")) is None


# =============================================================================
# ANIMATIONS
# =============================================================================

class TestAnimationDetector:
    """Tests for entrance animation inference."""

    def test_scroll_reveal_with_stagger(self):
        """Test transform, transition and stagger feed the descriptor."""
        rules = {
            ".animate-on-scroll": {
                "opacity": "0",
                "transform": "translateY(30px)",
                "transition": "all 0.6s ease-out",
            },
        }

        match = AnimationDetector().detect(["card", "animate-on-scroll", "stagger-3"], rules)

        assert match.descriptor == {
            "type": "slideUp",
            "duration": 600,
            "delay": 300,
            "easing": "ease-out",
            "distance": 30,
            "once": True,
        }
        assert match.removed_classes == ["stagger-3", "animate-on-scroll"]
        assert match.consumed_selectors == [
            ".stagger-3", ".animate-on-scroll", ".animate-on-scroll.visible",
        ]
        assert match.strategy == "scroll_reveal"

    def test_scroll_reveal_without_rule(self):
        """Test a reveal class alone gives a default fade."""
        match = AnimationDetector().detect(["reveal"], {})

        assert match.descriptor["type"] == "fade"
        assert match.descriptor["duration"] == 600

    def test_keyframes(self):
        """Test a hidden element with an entrance keyframe."""
        rules = {
            ".hero-title": {
                "opacity": "0",
                "animation": "fadeInUp 1s ease-out forwards",
                "animation-delay": "0.2s",
            },
        }

        match = AnimationDetector().detect(["hero-title"], rules)

        assert match.descriptor == {
            "type": "slideUp",
            "duration": 1000,
            "delay": 200,
            "easing": "ease-out",
            "distance": 40,
            "once": True,
        }
        assert match.removed_classes == []
        assert match.consumed_selectors == [".hero-title"]

    def test_visible_keyframes_ignored(self):
        """Test keyframe animations on visible elements are left alone."""
        rules = {".title": {"animation": "fadeInUp 1s"}}

        assert AnimationDetector().detect(["title"], rules) is None

    @pytest.mark.parametrize("transform, expected", [
        ("translateY(-20px)", ("slideDown", 20)),
        ("translateX(-20px)", ("slideRight", 20)),
        ("translateX(15px)", ("slideLeft", 15)),
        ("scale(0.9)", ("zoomIn", 0)),
        ("rotate(5deg)", ("fade", 0)),
    ])
    def test_parse_transform(self, transform, expected):
        """Test transform values to animation types."""
        assert AnimationDetector().parse_transform(transform) == expected

    def test_static_declarations(self):
        """Test animation properties are filtered out of consumed rules."""
        declarations = {
            "opacity": "0",
            "transform": "translateY(20px)",
            "transition": "all .5s",
            "animation-delay": "1s",
            "color": "red",
        }

        assert AnimationDetector.static_declarations(declarations) == {"color": "red"}
