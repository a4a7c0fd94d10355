"""
Grid Detector - Map grid utility classes to explicit grid layout properties.

Usage:
    from oxy_converter.converter.analyzers import GridDetector

    layout = GridDetector().get_grid_properties(["grid", "grid-cols-3", "gap-8"])
    # {"grid": "true", "display": "grid",
    #  "grid-template-columns": "repeat(3, minmax(0, 1fr))", "gap": "2rem"}
"""

import re
from typing import Dict, List, Optional


class GridDetector:
    """Detects ``grid``/``grid-cols-*``/``gap-*`` classes."""

    COLUMNS_PATTERN = re.compile(r"^grid-cols-(\d+)$")
    ARBITRARY_COLUMNS_PATTERN = re.compile(r"^grid-cols-\[(.+)\]$")
    GAP_PATTERNS = {
        "gap": re.compile(r"^gap-(\d+)$"),
        "column-gap": re.compile(r"^gap-x-(\d+)$"),
        "row-gap": re.compile(r"^gap-y-(\d+)$"),
    }

    # One spacing step in rem
    SPACING_UNIT = 0.25

    def is_grid(self, classes: List[str]) -> bool:
        """Check if the class list turns grid layout on."""
        return any(c == "grid" or c.startswith("grid-cols-") for c in classes)

    def get_template_columns(self, classes: List[str]) -> Optional[str]:
        """Column template from the first ``grid-cols-*`` class."""
        for class_name in classes:
            match = self.COLUMNS_PATTERN.match(class_name)
            if match:
                return f"repeat({match.group(1)}, minmax(0, 1fr))"
            match = self.ARBITRARY_COLUMNS_PATTERN.match(class_name)
            if match:
                return match.group(1).replace("_", " ")
        return None

    def get_gaps(self, classes: List[str]) -> Dict[str, str]:
        """Gap properties; later classes win for the same property."""
        gaps: Dict[str, str] = {}
        for class_name in classes:
            for prop, pattern in self.GAP_PATTERNS.items():
                match = pattern.match(class_name)
                if match:
                    gaps[prop] = self.format_rem(int(match.group(1)))
        return gaps

    def format_rem(self, steps: int) -> str:
        """Spacing steps to rem without a trailing ``.0`` (8 → "2rem")."""
        return f"{steps * self.SPACING_UNIT:g}rem"

    def get_grid_properties(self, classes: List[str]) -> Dict[str, str]:
        """
        All layout properties implied by grid classes.

        Args:
            classes: Class names of one element

        Returns:
            Layout section entries, {} when the element is not a grid
        """
        if not self.is_grid(classes):
            return {}

        properties = {"grid": "true", "display": "grid"}
        columns = self.get_template_columns(classes)
        if columns:
            properties["grid-template-columns"] = columns
        properties.update(self.get_gaps(classes))
        return properties
