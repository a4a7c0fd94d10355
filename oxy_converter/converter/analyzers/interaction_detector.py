"""
Interaction Detector - Translate inline event handlers into native interactions.

Only a narrow handler grammar is translated: one or more ``;``-separated
bare calls ``name(args)`` where every argument is a numeric literal or a
bare identifier other than ``this``. Anything else (string or object
literals, ``this``, assignments, control flow) keeps the raw attribute.

Call arguments cannot travel through the builder's fixed
``(event, target, action)`` signature, so they are stored in a
``data-arg-<function>`` attribute that the rewritten function reads back.

Usage:
    from oxy_converter.converter.analyzers import InteractionDetector

    detector = InteractionDetector(FrameworkDetector())
    translated = detector.translate_handler("click", "toggleMenu()")
    translated.interaction
    # {"trigger": "click", "target": "this_element",
    #  "actions": [{"name": "javascript_function", "target": "this_element",
    #               "js_function_name": "toggleMenu"}]}
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from bs4 import Tag

from ..contracts.elements import PropertyTree
from ..parsers.markup_parser import restore_attribute_name
from .framework_detector import FrameworkDetector


EVENT_TO_TRIGGER = {
    "onclick": "click",
    "ondblclick": "dblclick",
    "onmouseenter": "mouse_enter",
    "onmouseleave": "mouse_leave",
    "onmouseover": "mouseover",
    "onmouseout": "mouseout",
    "onfocus": "focus",
    "onblur": "blur",
    "onchange": "change",
    "oninput": "input",
    "onsubmit": "submit",
    "onkeydown": "keydown",
    "onkeyup": "keyup",
    "onkeypress": "keypress",
    "onscroll": "scroll",
    "ontouchstart": "touchstart",
    "ontouchend": "touchend",
}

# Alpine click handlers translated in addition to being preserved
FRAMEWORK_CLICK_ATTRIBUTES = frozenset({"@click", "x-on:click"})

PRESERVE_PATTERNS = [
    re.compile(r"^data-"),
    re.compile(r"^aria-"),
    re.compile(r"^(role|tabindex|title|lang|dir|draggable|contenteditable)$"),
]

PRESERVE_NAMES = frozenset({
    "target", "rel", "download", "ping", "referrerpolicy", "type", "name",
    "value", "placeholder", "autocomplete", "autofocus", "disabled",
    "readonly", "required", "pattern", "min", "max", "step", "minlength",
    "maxlength", "multiple", "accept", "capture", "form", "formaction",
    "formmethod", "formtarget", "formnovalidate", "formenctype", "list",
    "size", "cols", "rows", "wrap", "spellcheck", "inputmode", "enterkeyhint",
})

# Handled by dedicated passes
SKIP_ATTRIBUTES = frozenset({"class", "id", "style", "href", "src", "alt", "width", "height"})


@dataclass
class TranslatedHandler:
    """A handler that was translated into a native interaction."""

    interaction: Dict[str, Any]
    """{trigger, target, actions}"""

    arg_attributes: List[Dict[str, str]] = field(default_factory=list)
    """``data-arg-*`` attributes carrying call arguments."""

    @property
    def function_names(self) -> List[str]:
        return [action["js_function_name"] for action in self.interaction["actions"]]


class InteractionDetector:
    """Translates event-handler attributes and collects pass-through attributes."""

    CALL_PATTERN = re.compile(r"^([A-Za-z_$][\w$]*)\s*\((.*)\)$", re.DOTALL)
    IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_$][\w$]*$")
    NUMBER_PATTERN = re.compile(r"^-?(\d+(\.\d+)?|\.\d+)$")
    UNSUPPORTED_CHARS = frozenset("'\"`{}[]=")

    def __init__(self, framework_detector: FrameworkDetector):
        self.framework_detector = framework_detector

    # =========================================================================
    # HANDLER TRANSLATION
    # =========================================================================

    def translate_handler(self, trigger: str, code: str) -> Optional[TranslatedHandler]:
        """
        Translate handler code into a native interaction.

        Args:
            trigger: Native trigger name (e.g. "click")
            code: Handler source, e.g. "openModal(2); track()"

        Returns:
            TranslatedHandler, or None when the code is outside the grammar
        """
        code = code.strip()
        if not code or any(char in self.UNSUPPORTED_CHARS for char in code):
            return None

        actions = []
        arg_attributes = []
        for statement in code.split(";"):
            statement = statement.strip()
            if not statement:
                continue

            match = self.CALL_PATTERN.match(statement)
            if not match:
                return None
            function_name, args = match.group(1), match.group(2).strip()
            if function_name == "this" or not self._args_supported(args):
                return None

            if args:
                arg_attributes.append({
                    "name": f"data-arg-{function_name.lower()}",
                    "value": ",".join(a.strip() for a in args.split(",")),
                })
            actions.append({
                "name": "javascript_function",
                "target": "this_element",
                "js_function_name": function_name,
            })

        if not actions:
            return None

        return TranslatedHandler(
            interaction={"trigger": trigger, "target": "this_element", "actions": actions},
            arg_attributes=arg_attributes,
        )

    def _args_supported(self, args: str) -> bool:
        if not args:
            return True
        for arg in args.split(","):
            arg = arg.strip()
            if arg == "this":
                return False
            if not (self.NUMBER_PATTERN.match(arg) or self.IDENTIFIER_PATTERN.match(arg)):
                return False
        return True

    # =========================================================================
    # ATTRIBUTE PROCESSING
    # =========================================================================

    def should_preserve(self, name: str) -> bool:
        """Check if an attribute passes through to the builder element."""
        if name in PRESERVE_NAMES:
            return True
        return any(pattern.match(name) for pattern in PRESERVE_PATTERNS)

    def process(self, node: Tag, properties: PropertyTree) -> List[Dict[str, Any]]:
        """
        Write pass-through attributes and translated interactions.

        Translated event attributes are removed from ``node``. Attributes
        are appended to any already stored on the element.

        Returns:
            The interactions added to the element
        """
        attributes: List[Dict[str, str]] = []
        interactions: List[Dict[str, Any]] = []
        translated_names = []

        for name, value in list(node.attrs.items()):
            if isinstance(value, list):
                value = " ".join(value)
            value = value or ""

            if name in SKIP_ATTRIBUTES:
                continue

            if name in EVENT_TO_TRIGGER:
                translated = self.translate_handler(EVENT_TO_TRIGGER[name], value)
                if translated is None:
                    attributes.append({"name": name, "value": value})
                else:
                    interactions.append(translated.interaction)
                    attributes.extend(translated.arg_attributes)
                    translated_names.append(name)
                continue

            if self.framework_detector.is_framework_attribute(name):
                original_name = restore_attribute_name(name)
                if original_name in FRAMEWORK_CLICK_ATTRIBUTES:
                    translated = self.translate_handler("click", value)
                    if translated is not None:
                        interactions.append(translated.interaction)
                        attributes.extend(translated.arg_attributes)
                attributes.append({"name": original_name, "value": value})
                continue

            if self.should_preserve(name):
                attributes.append({"name": name, "value": value})

        for name in translated_names:
            del node[name]

        if attributes:
            merge_attributes(properties, attributes)
        for interaction in interactions:
            properties.append("settings.interactions.interactions", interaction)

        return interactions


def merge_attributes(properties: PropertyTree, attributes: List[Dict[str, str]]) -> None:
    """Append attributes to settings.advanced.attributes, first name wins."""
    existing = properties.get("settings.advanced.attributes") or []
    names = {attribute["name"] for attribute in existing}
    merged = list(existing)
    for attribute in attributes:
        if attribute["name"] not in names:
            names.add(attribute["name"])
            merged.append(attribute)
    properties.set("settings.advanced.attributes", merged)
