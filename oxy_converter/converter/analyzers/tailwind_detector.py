"""
Tailwind Detector - Recognize utility-framework class names.

Classes are only bucketed into utility vs custom; nothing here converts a
utility class into native properties.

Usage:
    from oxy_converter.converter.analyzers import TailwindDetector

    detector = TailwindDetector()
    detector.is_utility_class("hover:bg-blue-600")   # True
    detector.is_utility_class("hero-badge")          # False
"""

import re
from typing import List, Tuple


class TailwindDetector:
    """
    Classifies class names against Tailwind naming conventions.

    Patterns are checked in order; the first match wins.
    """

    UTILITY_PATTERNS = [
        # Layout
        re.compile(r"^(flex|grid|block|inline|hidden|container)$"),
        re.compile(r"^(flex-|grid-|col-|row-|gap-|order-|justify-|items-|content-|self-|place-)"),
        # Spacing
        re.compile(r"^[mp][xytblr]?-"),
        re.compile(r"^space-[xy]-"),
        # Sizing
        re.compile(r"^[wh]-"),
        re.compile(r"^(min|max)-[wh]-"),
        re.compile(r"^(size)-"),
        # Typography
        re.compile(r"^(text-|font-|leading-|tracking-|indent-|align-|whitespace-|break-|hyphens-)"),
        re.compile(r"^(uppercase|lowercase|capitalize|normal-case|truncate|line-clamp-)"),
        re.compile(r"^(antialiased|subpixel-antialiased)$"),
        # Backgrounds
        re.compile(r"^bg-"),
        re.compile(r"^(from-|via-|to-)"),
        # Borders
        re.compile(r"^(border|rounded|ring|outline|divide)-?"),
        # Effects
        re.compile(r"^(shadow|opacity|mix-blend|bg-blend)-"),
        re.compile(r"^(blur|brightness|contrast|grayscale|hue-rotate|invert|saturate|sepia|backdrop-)-?"),
        re.compile(r"^drop-shadow"),
        # Transforms
        re.compile(r"^(scale|rotate|translate|skew|origin)-"),
        re.compile(r"^transform"),
        # Transitions & animation
        re.compile(r"^(transition|duration|ease|delay|animate)-"),
        # Interactivity
        re.compile(r"^(cursor|pointer-events|resize|scroll|snap|touch|select|will-change)-"),
        re.compile(r"^(appearance|accent)-"),
        # SVG
        re.compile(r"^(fill|stroke)-"),
        # Accessibility
        re.compile(r"^(not-)?sr-only$"),
        # Position
        re.compile(r"^(static|fixed|absolute|relative|sticky)$"),
        re.compile(r"^(inset|top|right|bottom|left|z)-"),
        re.compile(r"^(float|clear|isolate|isolation)-?"),
        re.compile(r"^(object|overflow|overscroll)-"),
        # Visibility
        re.compile(r"^(visible|invisible|collapse)$"),
        # Flex/grid items
        re.compile(r"^(grow|shrink|basis)-?"),
        re.compile(r"^auto-"),
        # Tables
        re.compile(r"^(table|border-collapse|border-spacing)-?"),
        # Lists, aspect, columns, box
        re.compile(r"^(list|aspect|columns|box)-"),
        # Display
        re.compile(r"^(contents|flow-root)$"),
        # Arbitrary values
        re.compile(r"\[.+\]"),
        # Responsive, state, dark and print variants
        re.compile(r"^(sm|md|lg|xl|2xl):"),
        re.compile(r"^(hover|focus|active|disabled|visited|checked|first|last|odd|even|group-hover|peer-[a-z-]*):"),
        re.compile(r"^(dark|print):"),
        # Opacity modifier (text-white/50)
        re.compile(r"^[a-z0-9-]+?/[0-9]{1,3}$"),
    ]

    NEGATIVE_PATTERN = re.compile(r"^-[a-z]+-")

    def is_utility_class(self, class_name: str) -> bool:
        """
        Check if a class name follows utility naming.

        Args:
            class_name: Single class name

        Returns:
            True for utility classes like "mt-4", "md:flex", "w-[200px]"
        """
        for pattern in self.UTILITY_PATTERNS:
            if pattern.search(class_name):
                return True

        if "[" in class_name and "]" in class_name:
            return True

        return bool(self.NEGATIVE_PATTERN.match(class_name))

    def split(self, classes: List[str]) -> Tuple[List[str], List[str]]:
        """
        Bucket classes into (utility, custom), keeping order within each.
        """
        utility = []
        custom = []
        for class_name in classes:
            if self.is_utility_class(class_name):
                utility.append(class_name)
            else:
                custom.append(class_name)
        return utility, custom
