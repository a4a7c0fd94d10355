"""
Element Types - The fixed set of builder element kinds the converter emits.

Every node of the output tree carries one of these types. The string values
are the fully-qualified names the page builder expects in ``data.type``:
- CONTAINER / CONTAINER_LINK → wrap arbitrary children
- TEXT / TEXT_LINK / RICH_TEXT → flat text content
- IMAGE / HTML5_VIDEO → media
- HTML_CODE / CSS_CODE / JAVASCRIPT_CODE → opaque code blocks
"""

from enum import Enum
from typing import Dict, List, Tuple


class ElementType(str, Enum):
    """Builder element kinds understood by the target page builder."""

    # Containers
    CONTAINER = "OxygenElements\\Container"
    """Generic block wrapper (div, section, nav, button, ...)."""

    CONTAINER_LINK = "OxygenElements\\ContainerLink"
    """Link that wraps children (button-like anchors)."""

    # Text
    TEXT = "OxygenElements\\Text"
    """Flat text with inline formatting."""

    TEXT_LINK = "OxygenElements\\TextLink"
    """Plain text anchor."""

    RICH_TEXT = "OxygenElements\\RichText"
    """Structured markup rendered as rich text (tables)."""

    # Media
    IMAGE = "OxygenElements\\Image"
    """Image loaded from a URL."""

    HTML5_VIDEO = "OxygenElements\\Html5Video"
    """Native video element."""

    # Code
    HTML_CODE = "OxygenElements\\HtmlCode"
    """Raw HTML preserved verbatim."""

    CSS_CODE = "OxygenElements\\CssCode"
    """Stylesheet block."""

    JAVASCRIPT_CODE = "OxygenElements\\JavaScriptCode"
    """Script block."""

    # Builder extras
    HEADER = "OxygenElements\\Header"
    """Sticky-capable header section."""

    ESSENTIAL_BUTTON = "EssentialElements\\Button"
    """Native button from the essential elements pack."""

    @classmethod
    def is_valid(cls, value: str) -> bool:
        """Check if a raw type string is a known element type."""
        return value in _VALUES

    @classmethod
    def short_name_of(cls, value: str) -> str:
        """Short display name for a raw type string (text after the last backslash)."""
        return value.rsplit("\\", 1)[-1]

    @property
    def short_name(self) -> str:
        """Short display name, e.g. 'Container'."""
        return self.short_name_of(self.value)

    @property
    def accepts_children(self) -> bool:
        """Check if elements of this type are built by recursing into children."""
        return self in (self.CONTAINER, self.CONTAINER_LINK, self.HEADER)

    @property
    def is_code(self) -> bool:
        """Check if this type carries an opaque code payload."""
        return self in (self.HTML_CODE, self.CSS_CODE, self.JAVASCRIPT_CODE)


_VALUES = frozenset(member.value for member in ElementType)


# =============================================================================
# PROPERTY CONTRACTS
# =============================================================================

# Property paths the builder reads for each element type. Missing paths are
# reported by the output validator as warnings.
ELEMENT_CONTRACTS: Dict[ElementType, Tuple[str, ...]] = {
    ElementType.TEXT_LINK: ("content.content.url",),
    ElementType.CONTAINER_LINK: ("content.content.url",),
    ElementType.IMAGE: ("content.image.url",),
    ElementType.HTML5_VIDEO: ("content.content.video_file_url",),
    ElementType.ESSENTIAL_BUTTON: (
        "content.content.text",
        "content.content.link.url",
    ),
}


def get_required_property_paths(element_type: str) -> List[str]:
    """
    Get the contract paths for a raw element type string.

    Args:
        element_type: Value of ``data.type``

    Returns:
        Dotted property paths (empty for types without a contract)
    """
    if not ElementType.is_valid(element_type):
        return []
    return list(ELEMENT_CONTRACTS.get(ElementType(element_type), ()))
