"""
Converter - HTML/CSS/JS to page-builder element trees.

Subpackages:
- contracts: element types, elements, options, report, result
- parsers: markup and stylesheet parsing
- mapping: tag classification and CSS-to-design mapping
- analyzers: independent detectors (classes, icons, frameworks, interactions,
  animations, scripts, heuristics)
- core: orchestration (tree walk, selector matching, residual stylesheet)
- validators: structural output checks

Usage:
    from oxy_converter.converter import HtmlConverter, ConversionOptions

    converter = HtmlConverter()
    result = converter.convert(html, ConversionOptions(starting_node_id=100))
    print(converter.preview_summary(result.element))
"""

from .contracts import (
    BuilderElement,
    ClassHandlingMode,
    ConversionError,
    ConversionOptions,
    ConversionReport,
    ConversionResult,
    ConverterConfig,
    ElementType,
    HeuristicFlags,
    PropertyTree,
)
from .core.converter import HtmlConverter
from .validators import OutputValidator

__all__ = [
    # Entry point
    "HtmlConverter",
    # Contracts
    "BuilderElement",
    "ClassHandlingMode",
    "ConversionError",
    "ConversionOptions",
    "ConversionReport",
    "ConversionResult",
    "ConverterConfig",
    "ElementType",
    "HeuristicFlags",
    "PropertyTree",
    # Validation
    "OutputValidator",
]
