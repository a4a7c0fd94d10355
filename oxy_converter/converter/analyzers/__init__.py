"""
Analyzers - Independent detectors run while the tree is built.

Each detector either contributes a property fragment or a report message,
and declines with None or an empty result when unsure.

Usage:
    from oxy_converter.converter.analyzers import TailwindDetector, GridDetector

    TailwindDetector().is_utility_class("hover:bg-blue-600")   # True
    GridDetector().get_grid_properties(["grid", "grid-cols-2"])
"""

from .tailwind_detector import TailwindDetector
from .grid_detector import GridDetector
from .class_strategy import ClassStrategy, NATIVE_MODE_WARNING
from .icon_detector import (
    ICON_LIBRARIES,
    IconDetector,
    IconLibrary,
)
from .framework_detector import (
    FRAMEWORK_WARNINGS,
    FrameworkDetector,
)
from .interaction_detector import (
    EVENT_TO_TRIGGER,
    InteractionDetector,
    TranslatedHandler,
    merge_attributes,
)
from .component_detector import ComponentDetector
from .animation_detector import AnimationDetector, AnimationMatch
from .js_pattern_miner import JsPatternMiner, MinedPatterns, ToggleRecord
from .heuristics import HeaderSpacingState, HeuristicsService

__all__ = [
    # Classes
    "TailwindDetector",
    "GridDetector",
    "ClassStrategy",
    "NATIVE_MODE_WARNING",
    # Icons and frameworks
    "ICON_LIBRARIES",
    "IconDetector",
    "IconLibrary",
    "FRAMEWORK_WARNINGS",
    "FrameworkDetector",
    # Interactions
    "EVENT_TO_TRIGGER",
    "InteractionDetector",
    "TranslatedHandler",
    "merge_attributes",
    "JsPatternMiner",
    "MinedPatterns",
    "ToggleRecord",
    # Structure and motion
    "ComponentDetector",
    "AnimationDetector",
    "AnimationMatch",
    # Heuristics
    "HeaderSpacingState",
    "HeuristicsService",
]
