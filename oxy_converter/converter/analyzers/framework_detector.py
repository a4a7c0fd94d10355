"""
Framework Detector - Flag reactive-template framework attributes.

Alpine.js, HTMX and Stimulus attributes are preserved verbatim on the
element; detection only adds a warning so the user loads the framework.
"""

from typing import List

from bs4 import Tag

from ..contracts.report import ConversionReport
from ..parsers.markup_parser import AT_PREFIX


ALPINE = "Alpine.js"
HTMX = "HTMX"
STIMULUS = "Stimulus.js"

FRAMEWORK_WARNINGS = {
    ALPINE: "Alpine.js detected. Ensure Alpine.js script is included in your WordPress site.",
    HTMX: "HTMX detected. Ensure HTMX script is included in your WordPress site.",
    STIMULUS: "Stimulus.js detected. Ensure Stimulus.js is properly initialized in your project.",
}


class FrameworkDetector:
    """Detects framework attributes on single elements."""

    ALPINE_PREFIXES = ("x-", "@", ":", AT_PREFIX)
    HTMX_PREFIXES = ("hx-",)
    STIMULUS_ATTRIBUTES = frozenset({"data-controller", "data-action", "data-target"})

    def frameworks_of(self, node: Tag) -> List[str]:
        """Names of the frameworks whose attributes appear on ``node``."""
        names = list(node.attrs)
        detected = []
        if any(name.startswith(self.ALPINE_PREFIXES) for name in names):
            detected.append(ALPINE)
        if any(name.startswith(self.HTMX_PREFIXES) for name in names):
            detected.append(HTMX)
        if any(name in self.STIMULUS_ATTRIBUTES for name in names):
            detected.append(STIMULUS)
        return detected

    def detect(self, node: Tag, report: ConversionReport) -> List[str]:
        """
        Detect frameworks on a node and warn once per framework.

        Returns:
            Detected framework names
        """
        detected = self.frameworks_of(node)
        for name in detected:
            report.add_warning(FRAMEWORK_WARNINGS[name])
        return detected

    def is_framework_attribute(self, name: str) -> bool:
        """Check if an attribute name belongs to a supported framework."""
        if name.startswith(self.ALPINE_PREFIXES) or name.startswith(self.HTMX_PREFIXES):
            return True
        return name in self.STIMULUS_ATTRIBUTES
