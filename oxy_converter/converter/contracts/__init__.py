"""
Contracts - Data types shared across the conversion pipeline.

Usage:
    from oxy_converter.converter.contracts import (
        BuilderElement,
        ElementType,
        PropertyTree,
        ConversionOptions,
    )

    element = BuilderElement(ElementType.TEXT)
    element.properties.set("content.content.text", "Hello")
"""

from .element_types import (
    ElementType,
    ELEMENT_CONTRACTS,
    get_required_property_paths,
)
from .elements import (
    BuilderElement,
    PropertyTree,
    deep_merge,
)
from .options import (
    ClassHandlingMode,
    ConversionOptions,
    ConverterConfig,
    HeuristicFlags,
)
from .report import ConversionReport
from .result import (
    ConversionError,
    ConversionResult,
)

__all__ = [
    # Element types
    "ElementType",
    "ELEMENT_CONTRACTS",
    "get_required_property_paths",
    # Elements
    "BuilderElement",
    "PropertyTree",
    "deep_merge",
    # Options
    "ClassHandlingMode",
    "ConversionOptions",
    "ConverterConfig",
    "HeuristicFlags",
    # Report
    "ConversionReport",
    # Result
    "ConversionError",
    "ConversionResult",
]
