"""
Animation Detector - Infer native entrance animations from CSS idioms.

Two independent strategies:

A. Scroll reveal: an allow-listed class (``animate-on-scroll``, ``reveal``,
   ...) whose rule sets ``transform``/``transition``. The transform gives the
   type and distance, the transition gives duration and easing, and a
   ``stagger-N`` sibling class gives the delay (N x 100ms). The reveal and
   stagger classes leave the element.
B. Keyframes: a class rule with ``opacity: 0`` whose ``animation`` names a
   known entrance keyframe (``fadeInUp``). The class stays on the element.

Usage:
    from oxy_converter.converter.analyzers import AnimationDetector

    detector = AnimationDetector()
    rules = detector.index_rules(css_rules)
    match = detector.detect(["card", "animate-on-scroll", "stagger-3"], rules)
    match.descriptor
    # {"type": "slideUp", "duration": 600, "delay": 300, "easing": "ease",
    #  "distance": 30, "once": True}
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..parsers.css_parser import CssRule


@dataclass
class AnimationMatch:
    """Entrance animation inferred for one element."""

    descriptor: Dict[str, Any]
    """{type, duration, delay, easing, distance, once}"""

    removed_classes: List[str] = field(default_factory=list)
    """Classes to drop from the element."""

    consumed_selectors: List[str] = field(default_factory=list)
    """Selectors whose rules the animation replaces."""

    @property
    def strategy(self) -> str:
        return "scroll_reveal" if self.removed_classes else "keyframes"


class AnimationDetector:
    """Detects scroll-reveal and keyframe entrance animations."""

    SCROLL_REVEAL_CLASSES = (
        "animate-on-scroll", "reveal", "scroll-reveal",
        "fade-in", "slide-up", "slide-in",
        "aos-animate", "wow",
    )
    KEYFRAME_NAMES = ("fadeInUp",)

    STAGGER_PATTERN = re.compile(r"^stagger-(\d+)$")
    STAGGER_DELAY_MS = 100

    DEFAULT_DURATION_MS = 600
    DEFAULT_KEYFRAME_DURATION_MS = 800
    DEFAULT_KEYFRAME_DISTANCE = 40
    DEFAULT_EASING = "ease"

    TIME_PATTERN = re.compile(r"(\d*\.?\d+)(ms|s)\b")
    EASING_PATTERN = re.compile(
        r"(?<![\w-])(ease-in-out|ease-in|ease-out|ease|linear|step-start|step-end|cubic-bezier\([^)]*\))(?![\w-])"
    )
    TRANSLATE_Y_PATTERN = re.compile(r"translateY\(\s*(-?[\d.]+)")
    TRANSLATE_X_PATTERN = re.compile(r"translateX\(\s*(-?[\d.]+)")
    SCALE_PATTERN = re.compile(r"scale\(\s*([\d.]+)")

    # =========================================================================
    # DETECTION
    # =========================================================================

    @staticmethod
    def index_rules(rules: List[CssRule]) -> Dict[str, Dict[str, str]]:
        """Declarations per selector; repeated selectors merge in source order."""
        index: Dict[str, Dict[str, str]] = {}
        for rule in rules:
            index.setdefault(rule.selector, {}).update(rule.declarations)
        return index

    def detect(
        self,
        classes: List[str],
        rules_by_selector: Dict[str, Dict[str, str]],
    ) -> Optional[AnimationMatch]:
        """
        Infer an entrance animation for an element.

        Args:
            classes: Class names of the element
            rules_by_selector: Output of index_rules()

        Returns:
            AnimationMatch or None when no idiom applies
        """
        match = self._detect_scroll_reveal(classes, rules_by_selector)
        if match:
            return match
        return self._detect_keyframes(classes, rules_by_selector)

    def _detect_scroll_reveal(
        self,
        classes: List[str],
        rules_by_selector: Dict[str, Dict[str, str]],
    ) -> Optional[AnimationMatch]:
        reveal_class = next((c for c in classes if c in self.SCROLL_REVEAL_CLASSES), None)
        if reveal_class is None:
            return None

        declarations = rules_by_selector.get(f".{reveal_class}", {})

        animation_type, distance = "fade", 0
        if "transform" in declarations:
            animation_type, distance = self.parse_transform(declarations["transform"])

        duration = self.DEFAULT_DURATION_MS
        easing = self.DEFAULT_EASING
        transition = declarations.get("transition")
        if transition:
            duration = self.parse_duration(transition) or duration
            easing = self.parse_easing(transition) or easing

        removed: List[str] = []
        consumed: List[str] = []
        delay = 0
        for class_name in classes:
            stagger = self.STAGGER_PATTERN.match(class_name)
            if stagger:
                delay = int(stagger.group(1)) * self.STAGGER_DELAY_MS
                removed.append(class_name)
                consumed.append(f".{class_name}")

        removed.append(reveal_class)
        consumed.extend([f".{reveal_class}", f".{reveal_class}.visible"])

        return AnimationMatch(
            descriptor=self._descriptor(animation_type, duration, delay, easing, distance),
            removed_classes=removed,
            consumed_selectors=consumed,
        )

    def _detect_keyframes(
        self,
        classes: List[str],
        rules_by_selector: Dict[str, Dict[str, str]],
    ) -> Optional[AnimationMatch]:
        for class_name in classes:
            declarations = rules_by_selector.get(f".{class_name}", {})
            animation = declarations.get("animation")
            if not animation or declarations.get("opacity") != "0":
                continue
            if not any(name in animation for name in self.KEYFRAME_NAMES):
                continue

            duration = self.parse_duration(animation) or self.DEFAULT_KEYFRAME_DURATION_MS
            easing = self.parse_easing(animation) or self.DEFAULT_EASING
            delay = self.parse_duration(declarations.get("animation-delay", ""))

            return AnimationMatch(
                descriptor=self._descriptor(
                    "slideUp", duration, delay, easing, self.DEFAULT_KEYFRAME_DISTANCE
                ),
                consumed_selectors=[f".{class_name}"],
            )
        return None

    @staticmethod
    def static_declarations(declarations: Dict[str, str]) -> Dict[str, str]:
        """Declarations of a consumed rule that are not part of the animation."""
        return {
            prop: value
            for prop, value in declarations.items()
            if prop not in ("opacity", "transform") and not prop.startswith(("transition", "animation"))
        }

    def _descriptor(self, animation_type: str, duration: int, delay: int, easing: str, distance: int) -> Dict[str, Any]:
        return {
            "type": animation_type,
            "duration": duration,
            "delay": delay,
            "easing": easing,
            "distance": distance,
            "once": True,
        }

    # =========================================================================
    # VALUE PARSERS
    # =========================================================================

    def parse_transform(self, transform: str) -> Tuple[str, int]:
        """(type, distance) from a transform value."""
        match = self.TRANSLATE_Y_PATTERN.search(transform)
        if match:
            value = float(match.group(1))
            return ("slideUp" if value > 0 else "slideDown", abs(int(value)))

        match = self.TRANSLATE_X_PATTERN.search(transform)
        if match:
            value = float(match.group(1))
            return ("slideLeft" if value > 0 else "slideRight", abs(int(value)))

        match = self.SCALE_PATTERN.search(transform)
        if match and float(match.group(1)) < 1:
            return ("zoomIn", 0)

        return ("fade", 0)

    def parse_duration(self, value: str) -> int:
        """First time value in milliseconds, 0 when none."""
        match = self.TIME_PATTERN.search(value)
        if not match:
            return 0
        amount = float(match.group(1))
        if match.group(2) == "s":
            return int(round(amount * 1000))
        return int(amount)

    def parse_easing(self, value: str) -> Optional[str]:
        """First timing function keyword in a transition/animation shorthand."""
        match = self.EASING_PATTERN.search(value)
        return match.group(1) if match else None
