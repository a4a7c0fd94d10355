"""
Class Strategy - Decide how an element's classes are written to the tree.

Both modes keep every class on the element (settings.advanced.classes) and
count utility vs custom usages in the report. Native mode orders custom
classes first and warns that utility-to-property conversion is not
available yet.
"""

from typing import List, Tuple

from ..contracts.elements import PropertyTree
from ..contracts.options import ClassHandlingMode
from ..contracts.report import ConversionReport
from .tailwind_detector import TailwindDetector


NATIVE_MODE_WARNING = (
    "Oxygen Native Mode: Tailwind class conversion to properties not yet implemented. "
    "Classes preserved as-is for now."
)


class ClassStrategy:
    """Applies the configured class handling mode to one element."""

    def __init__(self, mode: ClassHandlingMode, detector: TailwindDetector):
        self.mode = mode
        self.detector = detector

    def count(self, classes: List[str], report: ConversionReport) -> Tuple[List[str], List[str]]:
        """
        Update class counters without storing the classes.

        Used for raw-markup elements, whose classes stay in the markup.

        Returns:
            (utility, custom) class names
        """
        utility, custom = self.detector.split(classes)
        report.increment_tailwind_classes(len(utility))
        report.increment_custom_classes(len(custom))
        return utility, custom

    def apply(self, classes: List[str], properties: PropertyTree, report: ConversionReport) -> List[str]:
        """
        Store classes on an element and update class counters.

        Args:
            classes: Class names to keep (already filtered by other passes)
            properties: Property tree of the element
            report: Report of the running conversion

        Returns:
            The custom (non-utility) class names
        """
        if not classes:
            return []

        utility, custom = self.count(classes, report)

        if self.mode.is_native:
            if utility:
                report.add_warning(NATIVE_MODE_WARNING)
            ordered = custom + utility
        else:
            ordered = list(classes)

        properties.set("settings.advanced.classes", ordered)
        return custom
