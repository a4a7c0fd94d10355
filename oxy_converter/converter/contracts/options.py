"""
Options - Per-call options and per-process converter configuration.

- ConversionOptions: what a caller passes to HtmlConverter.convert()
- HeuristicFlags: opt-in layout heuristics (all off by default)
- ConverterConfig: immutable converter configuration injected at construction
- ClassHandlingMode: how utility classes are treated
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict


class ClassHandlingMode(Enum):
    """How utility-framework classes on elements are handled."""

    UTILITY = "utility"
    """Keep every class as-is and bucket utility vs custom for the report."""

    NATIVE = "native"
    """Reserved for converting utility classes into native properties."""

    @classmethod
    def from_string(cls, value: str) -> "ClassHandlingMode":
        """Convert string to ClassHandlingMode, defaulting to UTILITY."""
        try:
            return cls(value.lower())
        except ValueError:
            return cls.UTILITY

    @property
    def is_native(self) -> bool:
        return self == ClassHandlingMode.NATIVE


@dataclass
class ConversionOptions:
    """Options for one conversion call."""

    starting_node_id: int = 1
    """Id of the first element in pre-order."""

    wrap_in_container: bool = False
    """Wrap the converted root in an extra Container."""

    include_css_element: bool = True
    """Embed the residual stylesheet element into the returned tree."""

    inline_styles: bool = True
    """Diagnostic flag, recorded only."""

    debug_mode: bool = False
    """Surface recoverable parse errors as info messages."""

    def __post_init__(self):
        if self.starting_node_id < 1:
            raise ValueError("starting_node_id must be >= 1")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConversionOptions":
        """
        Build options from a mapping using either snake_case or camelCase keys.

        Unknown keys are ignored.
        """
        aliases = {
            "startingNodeId": "starting_node_id",
            "wrapInContainer": "wrap_in_container",
            "includeCssElement": "include_css_element",
            "inlineStyles": "inline_styles",
            "debugMode": "debug_mode",
        }
        values = {}
        for key, value in (data or {}).items():
            name = aliases.get(key, key)
            if name in cls.__dataclass_fields__:
                values[name] = value
        return cls(**values)


@dataclass(frozen=True)
class HeuristicFlags:
    """Layout heuristics tuned for generated landing pages."""

    sticky_navbar: bool = False
    """Make ``nav#navbar`` sticky to the viewport top."""

    nav_link_white: bool = False
    """Force white text on links inside the navbar."""

    rounded_full_centering: bool = False
    """Flex-center the content of ``span.rounded-full`` badges."""

    button_centering: bool = False
    """Flex-center buttons and button-like links."""

    fixed_header_spacing: bool = False
    """Add top padding to the first section after a fixed header."""

    nav_scrolled_css_rewrite: bool = False
    """Extend ``.nav-scrolled`` rules to the builder's sticky header class."""

    @property
    def any_enabled(self) -> bool:
        """Check if at least one heuristic is on."""
        return any(
            (
                self.sticky_navbar,
                self.nav_link_white,
                self.rounded_full_centering,
                self.button_centering,
                self.fixed_header_spacing,
                self.nav_scrolled_css_rewrite,
            )
        )


@dataclass(frozen=True)
class ConverterConfig:
    """Process-wide converter configuration."""

    class_handling_mode: ClassHandlingMode = ClassHandlingMode.UTILITY
    wrap_init_scripts: bool = False
    """Wrap leftover script statements in a DOMContentLoaded listener."""

    heuristics: HeuristicFlags = field(default_factory=HeuristicFlags)
