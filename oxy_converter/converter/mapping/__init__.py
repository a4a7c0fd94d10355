"""
Mapping - Tags to element kinds, CSS declarations to design sections.

Usage:
    from oxy_converter.converter.mapping import ElementClassifier, StyleMapper

    element_type = ElementClassifier().classify(node)
    sections = StyleMapper().to_properties({"padding": "1rem 2rem"})
"""

from .style_mapper import (
    STYLE_MAP,
    StyleMapper,
    is_color,
    is_length,
    split_value_tokens,
)
from .element_classifier import (
    CONTAINER_TAG_OPTIONS,
    TAG_MAP,
    TEXT_TAG_OPTIONS,
    ElementClassifier,
)

__all__ = [
    # Styles
    "STYLE_MAP",
    "StyleMapper",
    "is_color",
    "is_length",
    "split_value_tokens",
    # Elements
    "CONTAINER_TAG_OPTIONS",
    "TAG_MAP",
    "TEXT_TAG_OPTIONS",
    "ElementClassifier",
]
