"""
Icon Detector - Find icon-library markers and synthesize loader elements.

Supported libraries:
- Lucide (``data-lucide``) and Feather (``data-feather``): script + init call
- Font Awesome, Bootstrap Icons, Material Icons: stylesheet link

Usage:
    from oxy_converter.converter.analyzers import IconDetector

    detector = IconDetector()
    libraries = detector.detect(document)
    elements = detector.build_elements(libraries)
"""

import html
import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Optional

from bs4 import BeautifulSoup, Tag

from ..contracts.element_types import ElementType
from ..contracts.elements import BuilderElement, PropertyTree
from ..parsers.markup_parser import get_attribute

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IconLibrary:
    """One supported icon library."""

    key: str
    """Stable library key (e.g. 'lucide')."""

    name: str
    """Display name."""

    cdn: str
    """Loader URL."""

    kind: str = "js"
    """'js' for script libraries, 'css' for icon fonts."""

    init: Optional[str] = None
    """Initialization call run on DOMContentLoaded (js only)."""

    def to_dict(self) -> Dict[str, str]:
        data = {"name": self.name, "cdn": self.cdn, "type": self.kind}
        if self.init:
            data["init"] = self.init
        return data


LUCIDE = IconLibrary("lucide", "Lucide Icons", "https://unpkg.com/lucide@latest", init="lucide.createIcons();")
FEATHER = IconLibrary("feather", "Feather Icons", "https://unpkg.com/feather-icons", init="feather.replace();")
FONT_AWESOME = IconLibrary(
    "fontawesome",
    "Font Awesome",
    "https://cdnjs.cloudflare.com/ajax/libs/font-awesome/6.5.1/css/all.min.css",
    kind="css",
)
BOOTSTRAP_ICONS = IconLibrary(
    "bootstrap-icons",
    "Bootstrap Icons",
    "https://cdn.jsdelivr.net/npm/bootstrap-icons@1.11.3/font/bootstrap-icons.min.css",
    kind="css",
)
MATERIAL_ICONS = IconLibrary(
    "material-icons",
    "Material Icons",
    "https://fonts.googleapis.com/icon?family=Material+Icons",
    kind="css",
)

ICON_LIBRARIES: List[IconLibrary] = [LUCIDE, FEATHER, FONT_AWESOME, BOOTSTRAP_ICONS, MATERIAL_ICONS]


class IconDetector:
    """Detects icon libraries used anywhere in a document."""

    FONT_AWESOME_MARKERS = ("fa-", "fas ", "far ", "fab ")
    ICON_CLASS_PATTERN = re.compile(r"\b(fa-|fas|far|fab|fal|fad|fa)\b")

    # =========================================================================
    # DETECTION
    # =========================================================================

    def detect(self, document: BeautifulSoup) -> Dict[str, IconLibrary]:
        """
        Detect icon libraries in a parsed document.

        Returns:
            Library key to IconLibrary, in a fixed library order
        """
        found = {library.key: False for library in ICON_LIBRARIES}

        for node in document.find_all(True):
            if node.has_attr("data-lucide"):
                found[LUCIDE.key] = True
            if node.has_attr("data-feather"):
                found[FEATHER.key] = True

            class_attr = get_attribute(node, "class")
            if not class_attr:
                continue
            if any(marker in class_attr for marker in self.FONT_AWESOME_MARKERS):
                found[FONT_AWESOME.key] = True
            if "bi-" in class_attr:
                found[BOOTSTRAP_ICONS.key] = True
            if "material-icons" in class_attr:
                found[MATERIAL_ICONS.key] = True

        detected = {library.key: library for library in ICON_LIBRARIES if found[library.key]}
        if detected:
            logger.debug(f"Detected icon libraries: {list(detected)}")
        return detected

    def is_icon_element(self, node: Tag) -> bool:
        """
        Check if an element renders an icon rather than formatted text.

        Used to tell an icon ``<i>`` apart from italic text.
        """
        if node.has_attr("data-lucide") or node.has_attr("data-feather"):
            return True

        class_attr = get_attribute(node, "class")
        if self.ICON_CLASS_PATTERN.search(class_attr):
            return True
        if "material-icons" in class_attr or re.search(r"\bbi-", class_attr):
            return True
        if node.has_attr("data-icon") or "iconify" in class_attr:
            return True

        # An empty <i> is an icon placeholder
        return not node.contents

    # =========================================================================
    # ELEMENT CREATION
    # =========================================================================

    def loader_markup(self, library: IconLibrary) -> str:
        """HTML that loads (and initializes) a library."""
        url = html.escape(library.cdn)
        if library.kind == "css":
            markup = f'<link rel="stylesheet" href="{url}">'
        else:
            markup = f'<script src="{url}"></script>'
            if library.init:
                markup += (
                    "\n<script>document.addEventListener('DOMContentLoaded', "
                    f"function() {{ {library.init} }});</script>"
                )
        return f"<!-- {library.name} -->\n{markup}"

    def build_elements(self, libraries: Dict[str, IconLibrary]) -> List[BuilderElement]:
        """One HtmlCode loader element per detected library."""
        elements = []
        for key, library in libraries.items():
            properties = PropertyTree()
            properties.set("content.content.html_code", self.loader_markup(library))
            elements.append(BuilderElement(
                type=ElementType.HTML_CODE,
                properties=properties,
                library_key=key,
            ))
        return elements

    def warning_for(self, library: IconLibrary) -> str:
        """User-facing warning for a detected library."""
        return (
            f"{library.name} detected. A loader element was added to the converted tree; "
            f"adjust icon size and color in the builder if needed."
        )
