"""
Conversion Report - Counters and diagnostics collected during one conversion.

A fresh report is created for every convert() call and mutated by the tree
builder and the detectors. Messages are deduplicated, first occurrence wins.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class ConversionReport:
    """Statistics and messages for one conversion."""

    elements: int = 0
    """Number of builder elements created from document nodes."""

    tailwind_classes: int = 0
    """Number of class usages recognized as utility classes."""

    custom_classes: int = 0
    """Number of class usages not recognized as utility classes."""

    warnings: List[str] = field(default_factory=list)
    """User-facing warnings (library loaders, frameworks, ...)."""

    errors: List[str] = field(default_factory=list)
    """Non-fatal errors encountered while converting."""

    info: List[str] = field(default_factory=list)
    """Informational notes (limitations, suggestions)."""

    def increment_elements(self, amount: int = 1) -> None:
        self.elements += amount

    def increment_tailwind_classes(self, amount: int = 1) -> None:
        self.tailwind_classes += amount

    def increment_custom_classes(self, amount: int = 1) -> None:
        self.custom_classes += amount

    def add_warning(self, message: str) -> None:
        """Add a warning unless already present."""
        if message not in self.warnings:
            self.warnings.append(message)

    def add_error(self, message: str) -> None:
        """Add an error unless already present."""
        if message not in self.errors:
            self.errors.append(message)

    def add_info(self, message: str) -> None:
        """Add an info message unless already present."""
        if message not in self.info:
            self.info.append(message)

    def reset(self) -> None:
        """Clear all counters and messages."""
        self.elements = 0
        self.tailwind_classes = 0
        self.custom_classes = 0
        self.warnings = []
        self.errors = []
        self.info = []

    @property
    def has_errors(self) -> bool:
        """Check if any error was recorded."""
        return bool(self.errors)

    def to_dict(self) -> Dict[str, Any]:
        """Stats payload in wire format."""
        return {
            "elements": self.elements,
            "tailwindClasses": self.tailwind_classes,
            "customClasses": self.custom_classes,
            "warnings": list(self.warnings),
            "errors": list(self.errors),
            "info": list(self.info),
        }

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"ConversionReport(elements={self.elements}, "
            f"warnings={len(self.warnings)}, errors={len(self.errors)})"
        )
