"""
Style Mapper - Translate flat CSS declarations into builder design sections.

Both inline ``style=""`` attributes and matched stylesheet rules flow through
the same mapper. Shorthands are expanded before lookup:

- margin / padding: 1 to 4 values → four longhands (CSS resolution order)
- border: <width> <style> <color> → border-width / border-style / border-color
- background: a bare color → background-color

Values are passed through as opaque strings.

Usage:
    from oxy_converter.converter.mapping import StyleMapper

    mapper = StyleMapper()
    sections = mapper.to_properties({"margin": "10px 20px", "color": "red"})
    # {"spacing": {"margin-top": "10px", ...}, "typography": {"color": "red"}}
"""

import re
from typing import Dict, List, Optional, Tuple

from bs4 import Tag

from ..parsers.css_parser import CssParser
from ..parsers.markup_parser import get_attribute


# =============================================================================
# PROPERTY TABLE
# =============================================================================

STYLE_MAP: Dict[str, Tuple[str, str]] = {
    # Typography
    "font-family": ("typography", "font-family"),
    "font-size": ("typography", "font-size"),
    "font-weight": ("typography", "font-weight"),
    "font-style": ("typography", "font-style"),
    "font-variant": ("typography", "font-variant"),
    "line-height": ("typography", "line-height"),
    "letter-spacing": ("typography", "letter-spacing"),
    "word-spacing": ("typography", "word-spacing"),
    "text-align": ("typography", "text-align"),
    "text-decoration": ("typography", "text-decoration"),
    "text-transform": ("typography", "text-transform"),
    "text-indent": ("typography", "text-indent"),
    "text-shadow": ("typography", "text-shadow"),
    "color": ("typography", "color"),
    "white-space": ("typography", "white-space"),
    "word-break": ("typography", "word-break"),
    "overflow-wrap": ("typography", "overflow-wrap"),
    "text-overflow": ("typography", "text-overflow"),
    "vertical-align": ("typography", "vertical-align"),
    "list-style": ("typography", "list-style"),
    "list-style-type": ("typography", "list-style-type"),

    # Spacing
    "margin": ("spacing", "margin"),
    "margin-top": ("spacing", "margin-top"),
    "margin-right": ("spacing", "margin-right"),
    "margin-bottom": ("spacing", "margin-bottom"),
    "margin-left": ("spacing", "margin-left"),
    "padding": ("spacing", "padding"),
    "padding-top": ("spacing", "padding-top"),
    "padding-right": ("spacing", "padding-right"),
    "padding-bottom": ("spacing", "padding-bottom"),
    "padding-left": ("spacing", "padding-left"),

    # Size
    "width": ("size", "width"),
    "min-width": ("size", "min-width"),
    "max-width": ("size", "max-width"),
    "height": ("size", "height"),
    "min-height": ("size", "min-height"),
    "max-height": ("size", "max-height"),
    "aspect-ratio": ("size", "aspect-ratio"),
    "box-sizing": ("size", "box-sizing"),
    "object-fit": ("size", "object-fit"),
    "object-position": ("size", "object-position"),

    # Layout
    "display": ("layout", "display"),
    "flex": ("layout", "flex"),
    "flex-direction": ("layout", "flex-direction"),
    "flex-wrap": ("layout", "flex-wrap"),
    "justify-content": ("layout", "justify-content"),
    "justify-items": ("layout", "justify-items"),
    "justify-self": ("layout", "justify-self"),
    "align-items": ("layout", "align-items"),
    "align-content": ("layout", "align-content"),
    "align-self": ("layout", "align-self"),
    "gap": ("layout", "gap"),
    "row-gap": ("layout", "row-gap"),
    "column-gap": ("layout", "column-gap"),
    "flex-grow": ("layout", "flex-grow"),
    "flex-shrink": ("layout", "flex-shrink"),
    "flex-basis": ("layout", "flex-basis"),
    "order": ("layout", "order"),
    "grid-template-columns": ("layout", "grid-template-columns"),
    "grid-template-rows": ("layout", "grid-template-rows"),
    "grid-column": ("layout", "grid-column"),
    "grid-row": ("layout", "grid-row"),
    "grid-area": ("layout", "grid-area"),
    "float": ("layout", "float"),
    "clear": ("layout", "clear"),

    # Position
    "position": ("position", "position"),
    "top": ("position", "top"),
    "right": ("position", "right"),
    "bottom": ("position", "bottom"),
    "left": ("position", "left"),
    "inset": ("position", "inset"),
    "z-index": ("position", "z-index"),

    # Background
    "background": ("background", "background"),
    "background-color": ("background", "background-color"),
    "background-image": ("background", "background-image"),
    "background-size": ("background", "background-size"),
    "background-position": ("background", "background-position"),
    "background-repeat": ("background", "background-repeat"),
    "background-attachment": ("background", "background-attachment"),
    "background-clip": ("background", "background-clip"),

    # Borders
    "border": ("borders", "border"),
    "border-width": ("borders", "border-width"),
    "border-style": ("borders", "border-style"),
    "border-color": ("borders", "border-color"),
    "border-radius": ("borders", "border-radius"),
    "border-top": ("borders", "border-top"),
    "border-right": ("borders", "border-right"),
    "border-bottom": ("borders", "border-bottom"),
    "border-left": ("borders", "border-left"),
    "border-top-left-radius": ("borders", "border-top-left-radius"),
    "border-top-right-radius": ("borders", "border-top-right-radius"),
    "border-bottom-left-radius": ("borders", "border-bottom-left-radius"),
    "border-bottom-right-radius": ("borders", "border-bottom-right-radius"),
    "outline": ("borders", "outline"),
    "outline-offset": ("borders", "outline-offset"),

    # Effects
    "opacity": ("effects", "opacity"),
    "box-shadow": ("effects", "box-shadow"),
    "transform": ("effects", "transform"),
    "transform-origin": ("effects", "transform-origin"),
    "transition": ("effects", "transition"),
    "filter": ("effects", "filter"),
    "backdrop-filter": ("effects", "backdrop-filter"),
    "mix-blend-mode": ("effects", "mix-blend-mode"),
    "cursor": ("effects", "cursor"),
    "pointer-events": ("effects", "pointer-events"),
    "visibility": ("effects", "visibility"),

    # Overflow
    "overflow": ("overflow", "overflow"),
    "overflow-x": ("overflow", "overflow-x"),
    "overflow-y": ("overflow", "overflow-y"),
}

BORDER_STYLES = frozenset({
    "none", "hidden", "dotted", "dashed", "solid", "double",
    "groove", "ridge", "inset", "outset",
})

BORDER_WIDTH_KEYWORDS = frozenset({"thin", "medium", "thick"})

NAMED_COLORS = frozenset({
    "transparent", "currentcolor", "black", "white", "red", "green", "blue",
    "yellow", "orange", "purple", "pink", "gray", "grey", "silver", "maroon",
    "olive", "lime", "aqua", "teal", "navy", "fuchsia", "brown", "cyan",
    "magenta", "gold", "indigo", "violet", "beige", "ivory", "khaki",
    "coral", "crimson", "salmon", "tomato", "turquoise", "tan", "plum",
    "orchid", "lavender", "linen", "snow", "azure", "mintcream", "whitesmoke",
    "gainsboro", "lightgray", "lightgrey", "darkgray", "darkgrey", "dimgray",
    "slategray", "darkslategray", "lightblue", "skyblue", "steelblue",
    "royalblue", "midnightblue", "darkblue", "lightgreen", "darkgreen",
    "forestgreen", "seagreen", "darkred", "firebrick", "hotpink", "deeppink",
})

_NUMERIC_LENGTH = re.compile(r"^-?(\d+(\.\d+)?|\.\d+)([a-z%]*)$", re.IGNORECASE)
_COLOR_FUNCTION = re.compile(r"^(rgba?|hsla?|hwb|lab|lch|oklab|oklch|color)\(", re.IGNORECASE)
_HEX_COLOR = re.compile(r"^#([0-9a-f]{3,4}|[0-9a-f]{6}|[0-9a-f]{8})$", re.IGNORECASE)

SPACING_SHORTHANDS = ("margin", "padding")
SIDES = ("top", "right", "bottom", "left")


def split_value_tokens(value: str) -> List[str]:
    """Split a CSS value on whitespace outside parentheses."""
    tokens = []
    depth = 0
    current = []
    for char in value.strip():
        if char == "(":
            depth += 1
        elif char == ")" and depth > 0:
            depth -= 1
        if char.isspace() and depth == 0:
            if current:
                tokens.append("".join(current))
                current = []
            continue
        current.append(char)
    if current:
        tokens.append("".join(current))
    return tokens


def is_color(value: str) -> bool:
    """Check if a single CSS value token is a color."""
    value = value.strip()
    if _HEX_COLOR.match(value) or _COLOR_FUNCTION.match(value):
        return True
    return value.lower() in NAMED_COLORS


def is_length(value: str) -> bool:
    """Check if a token is a number with an optional unit."""
    return bool(_NUMERIC_LENGTH.match(value.strip()))


class StyleMapper:
    """
    Maps CSS declarations onto builder design sections.

    Unknown properties are ignored; ``unmapped()`` lists them so callers
    can keep the source rule in the stylesheet.
    """

    STYLE_MAP = STYLE_MAP

    # =========================================================================
    # PARSING HELPERS
    # =========================================================================

    def parse_inline_styles(self, style: str) -> Dict[str, str]:
        """
        Parse a ``style`` attribute into a declaration map.

        Args:
            style: Attribute value, e.g. "color: red; margin: 0 !important"

        Returns:
            Property to value with ``!important`` stripped
        """
        if not style:
            return {}
        return CssParser.parse_declarations(style)

    def parse_shorthand_spacing(self, value: str) -> Dict[str, str]:
        """
        Resolve a 1 to 4 value margin/padding shorthand to its four sides.

        Returns:
            {"top", "right", "bottom", "left"}, or {} for 0 or >4 values
        """
        parts = split_value_tokens(value)
        if len(parts) == 1:
            top = right = bottom = left = parts[0]
        elif len(parts) == 2:
            top, right = parts
            bottom, left = top, right
        elif len(parts) == 3:
            top, right, bottom = parts
            left = right
        elif len(parts) == 4:
            top, right, bottom, left = parts
        else:
            return {}
        return {"top": top, "right": right, "bottom": bottom, "left": left}

    def parse_border(self, value: str) -> Dict[str, str]:
        """
        Split a ``border`` shorthand into width/style/color longhands.

        Tokens that are neither a width, a style keyword nor a color leave
        the shorthand unexpanded ({} returned).
        """
        longhands: Dict[str, str] = {}
        for token in split_value_tokens(value):
            lowered = token.lower()
            if lowered in BORDER_STYLES and "border-style" not in longhands:
                longhands["border-style"] = lowered
            elif (is_length(token) or lowered in BORDER_WIDTH_KEYWORDS) and "border-width" not in longhands:
                longhands["border-width"] = token
            elif is_color(token) and "border-color" not in longhands:
                longhands["border-color"] = token
            else:
                return {}
        return longhands

    # =========================================================================
    # EXPANSION AND MAPPING
    # =========================================================================

    def expand_shorthands(self, declarations: Dict[str, str]) -> Dict[str, str]:
        """
        Expand margin/padding/border/background shorthands in place order.

        Longhands declared after a shorthand still override it.
        """
        expanded: Dict[str, str] = {}
        for prop, value in declarations.items():
            for name, longhand_value in self._expand_one(prop, value):
                expanded.pop(name, None)
                expanded[name] = longhand_value
        return expanded

    def _expand_one(self, prop: str, value: str) -> List[Tuple[str, str]]:
        if prop in SPACING_SHORTHANDS:
            sides = self.parse_shorthand_spacing(value)
            if sides:
                return [(f"{prop}-{side}", sides[side]) for side in SIDES]
            return [(prop, value)]

        if prop == "border":
            longhands = self.parse_border(value)
            if longhands:
                return list(longhands.items())
            return [(prop, value)]

        if prop == "background" and is_color(value):
            return [("background-color", value.strip())]

        return [(prop, value)]

    def map_property(self, prop: str) -> Optional[Tuple[str, str]]:
        """(section, key) path for a CSS property, None when unknown."""
        return self.STYLE_MAP.get(prop.lower())

    def unmapped(self, declarations: Dict[str, str]) -> Dict[str, str]:
        """Expanded declarations with no design path (animation, custom properties, ...)."""
        return {
            prop: value
            for prop, value in self.expand_shorthands(declarations).items()
            if self.map_property(prop) is None
        }

    def to_properties(self, declarations: Dict[str, str]) -> Dict[str, Dict[str, str]]:
        """
        Convert declarations to design sections.

        Args:
            declarations: Flat property to value map

        Returns:
            Section name to {key: value}, e.g. {"typography": {"color": "red"}}
        """
        sections: Dict[str, Dict[str, str]] = {}
        for prop, value in self.expand_shorthands(declarations).items():
            path = self.map_property(prop)
            if path is None:
                continue
            section, key = path
            sections.setdefault(section, {})[key] = value
        return sections

    def extract(self, node: Tag) -> Dict[str, Dict[str, str]]:
        """Design sections from a node's inline ``style`` attribute."""
        return self.to_properties(self.parse_inline_styles(get_attribute(node, "style")))
