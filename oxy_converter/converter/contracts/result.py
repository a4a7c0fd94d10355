"""
Conversion Result - Discriminated outcome of one conversion call.

A result is either a success carrying the element tree and its side
artifacts, or a failure carrying an error message. Use the ``succeeded()``
and ``failure()`` constructors rather than building instances by hand.

Usage:
    result = converter.convert(html)
    if result.success:
        payload = result.to_dict()
        print(payload["stats"]["elements"])
    else:
        print(result.error, result.errors)
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .elements import BuilderElement
from .report import ConversionReport


@dataclass
class ConversionResult:
    """Outcome of HtmlConverter.convert()."""

    success: bool
    """Whether a tree was produced."""

    element: Optional[BuilderElement] = None
    """Root of the converted tree."""

    css_element: Optional[BuilderElement] = None
    """CssCode element carrying the residual stylesheet (None when empty)."""

    head_link_elements: List[BuilderElement] = field(default_factory=list)
    """HtmlCode elements for stylesheet/preconnect links found in <head>."""

    icon_script_elements: List[BuilderElement] = field(default_factory=list)
    """HtmlCode elements loading detected icon libraries."""

    detected_icon_libraries: Dict[str, Dict[str, str]] = field(default_factory=dict)
    """Detected icon libraries keyed by library key."""

    extracted_css: str = ""
    """Residual stylesheet text after consumed rules were removed."""

    custom_classes: List[str] = field(default_factory=list)
    """Distinct non-utility class names seen in the document."""

    stats: ConversionReport = field(default_factory=ConversionReport)
    """Counters and diagnostics."""

    parse_errors: List[str] = field(default_factory=list)
    """Recoverable parse errors reported by the markup parser."""

    error: Optional[str] = None
    """Failure message."""

    errors: List[str] = field(default_factory=list)
    """Failure details."""

    # =========================================================================
    # CONSTRUCTORS
    # =========================================================================

    @classmethod
    def failure(cls, error: str, errors: Optional[List[str]] = None) -> "ConversionResult":
        """Build a failed result."""
        return cls(success=False, error=error, errors=list(errors or []))

    @classmethod
    def succeeded(cls, element: BuilderElement, **kwargs: Any) -> "ConversionResult":
        """Build a successful result around a root element."""
        return cls(success=True, element=element, **kwargs)

    # =========================================================================
    # EXPORT
    # =========================================================================

    def all_elements(self) -> List[BuilderElement]:
        """Every element of the result (tree first, then side artifacts) in pre-order."""
        elements: List[BuilderElement] = []
        seen = set()
        roots = [self.element, self.css_element]
        roots.extend(self.head_link_elements)
        roots.extend(self.icon_script_elements)
        for root in roots:
            if root is None:
                continue
            for element in root.walk():
                if id(element) not in seen:
                    seen.add(id(element))
                    elements.append(element)
        return elements

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the camelCase keys of the wire format."""
        if not self.success:
            return {
                "success": False,
                "error": self.error,
                "errors": list(self.errors),
            }

        return {
            "success": True,
            "element": self.element.to_dict() if self.element else None,
            "cssElement": self.css_element.to_dict() if self.css_element else None,
            "headLinkElements": [el.to_dict() for el in self.head_link_elements],
            "iconScriptElements": [el.to_dict() for el in self.icon_script_elements],
            "detectedIconLibraries": {
                key: dict(info) for key, info in self.detected_icon_libraries.items()
            },
            "extractedCss": self.extracted_css,
            "customClasses": list(self.custom_classes),
            "stats": self.stats.to_dict(),
            "parseErrors": list(self.parse_errors),
        }

    def __repr__(self) -> str:
        """String representation."""
        if not self.success:
            return f"ConversionResult(failed: {self.error})"
        return f"ConversionResult(success, {self.stats!r})"


class ConversionError(Exception):
    """Raised by HtmlConverter.convert_or_raise() when a conversion fails."""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = list(errors or [])
