"""
Tests for StyleMapper - CSS declarations to design sections.

Tests for:
- Shorthand expansion (margin/padding, border, background)
- Section mapping and unknown properties
- Inline style extraction
"""

import pytest

from oxy_converter.converter.mapping import StyleMapper, is_color, is_length, split_value_tokens


@pytest.fixture
def mapper():
    """Create a fresh StyleMapper instance."""
    return StyleMapper()


class TestSpacingShorthand:
    """Tests for margin/padding resolution."""

    @pytest.mark.parametrize("value, expected", [
        ("10px", ("10px", "10px", "10px", "10px")),
        ("10px 20px", ("10px", "20px", "10px", "20px")),
        ("1px 2px 3px", ("1px", "2px", "3px", "2px")),
        ("1px 2px 3px 4px", ("1px", "2px", "3px", "4px")),
    ])
    def test_one_to_four_values(self, mapper, value, expected):
        """Test CSS side resolution order for 1 to 4 values."""
        sides = mapper.parse_shorthand_spacing(value)

        assert (sides["top"], sides["right"], sides["bottom"], sides["left"]) == expected

    def test_five_values_not_expanded(self, mapper):
        """Test an invalid shorthand stays as-is."""
        sections = mapper.to_properties({"padding": "1px 2px 3px 4px 5px"})

        assert sections == {"spacing": {"padding": "1px 2px 3px 4px 5px"}}

    def test_calc_values_are_single_tokens(self, mapper):
        """Test spaces inside functions don't split values."""
        sections = mapper.to_properties({"margin": "calc(100% - 2rem) auto"})

        assert sections["spacing"]["margin-top"] == "calc(100% - 2rem)"
        assert sections["spacing"]["margin-right"] == "auto"

    def test_longhand_after_shorthand_wins(self, mapper):
        """Test declaration order is honored between shorthand and longhand."""
        sections = mapper.to_properties({"margin": "0", "margin-top": "5px"})

        assert sections["spacing"]["margin-top"] == "5px"
        assert sections["spacing"]["margin-bottom"] == "0"


class TestBorderAndBackground:
    """Tests for border and background shorthands."""

    def test_border_shorthand(self, mapper):
        """Test width/style/color are split in any order."""
        sections = mapper.to_properties({"border": "solid 1px #ccc"})

        assert sections == {"borders": {
            "border-style": "solid",
            "border-width": "1px",
            "border-color": "#ccc",
        }}

    def test_border_with_unknown_token_kept(self, mapper):
        """Test a border using var() stays unexpanded."""
        sections = mapper.to_properties({"border": "1px solid var(--line)"})

        assert sections == {"borders": {"border": "1px solid var(--line)"}}

    def test_background_color(self, mapper):
        """Test a bare color background becomes background-color."""
        assert mapper.to_properties({"background": "#fff"}) == {
            "background": {"background-color": "#fff"},
        }

    def test_background_image_kept(self, mapper):
        """Test complex backgrounds stay on the shorthand."""
        sections = mapper.to_properties({"background": "url(a.png) no-repeat"})

        assert sections == {"background": {"background": "url(a.png) no-repeat"}}


class TestMapping:
    """Tests for section lookup."""

    def test_sections(self, mapper):
        """Test properties land in their sections."""
        sections = mapper.to_properties({
            "color": "red",
            "display": "flex",
            "z-index": "10",
            "border-radius": "8px",
            "box-shadow": "none",
        })

        assert sections["typography"] == {"color": "red"}
        assert sections["layout"] == {"display": "flex"}
        assert sections["position"] == {"z-index": "10"}
        assert sections["borders"] == {"border-radius": "8px"}
        assert sections["effects"] == {"box-shadow": "none"}

    def test_unknown_properties_ignored(self, mapper):
        """Test unmapped properties are dropped."""
        assert mapper.to_properties({"foo": "bar", "--brand": "#000"}) == {}

    def test_unmapped_declarations(self, mapper):
        """Test declarations without a design path are listed after expansion."""
        unmapped = mapper.unmapped({
            "margin": "0 auto",
            "animation": "spin 1s linear infinite",
            "-webkit-line-clamp": "2",
            "--brand": "#000",
            "color": "red",
        })

        assert unmapped == {
            "animation": "spin 1s linear infinite",
            "-webkit-line-clamp": "2",
            "--brand": "#000",
        }

    def test_fully_mapped_declarations(self, mapper):
        """Test expanded shorthands count as mapped."""
        assert mapper.unmapped({"padding": "4px 8px", "border": "1px solid red"}) == {}

    def test_extract_inline_style(self, mapper, node):
        """Test style attribute extraction with !important stripped."""
        div = node('<div style="color: red !important; padding: 4px">x</div>')
        sections = mapper.extract(div)

        assert sections["typography"] == {"color": "red"}
        assert sections["spacing"]["padding-left"] == "4px"

    def test_no_style_attribute(self, mapper, node):
        """Test elements without style give no sections."""
        assert mapper.extract(node("<div>x</div>")) == {}


class TestValueHelpers:
    """Tests for value token helpers."""

    def test_split_value_tokens(self):
        """Test whitespace inside parentheses is kept."""
        assert split_value_tokens(" rgba(0, 0, 0, .5)  1px ") == ["rgba(0, 0, 0, .5)", "1px"]

    @pytest.mark.parametrize("value", ["#fff", "#ffffff80", "rgb(0,0,0)", "hsl(0 0% 0%)", "Red", "transparent"])
    def test_colors(self, value):
        """Test color recognition."""
        assert is_color(value)

    @pytest.mark.parametrize("value", ["solid", "1px", "#ggg", "var(--c)"])
    def test_not_colors(self, value):
        """Test non-color tokens."""
        assert not is_color(value)

    @pytest.mark.parametrize("value", ["0", "1px", "-2.5rem", ".5em", "100%"])
    def test_lengths(self, value):
        """Test length recognition."""
        assert is_length(value)
