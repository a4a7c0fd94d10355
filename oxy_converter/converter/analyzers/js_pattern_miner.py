"""
JS Pattern Miner - Find script idioms that have native builder equivalents.

Runs once per conversion over all inline script text, before the tree is
walked. Two fixed idiom shapes are recognized:

A. Class toggles::

       const navToggle = document.getElementById('navToggle');
       const mobileMenu = document.getElementById('mobileMenu');
       navToggle.addEventListener('click', () => {
           mobileMenu.classList.toggle('active');
       });

   The listener becomes a ``toggle_class`` interaction on ``#navToggle``.
   Only listeners whose body consists of nothing but classList calls on
   known elements are converted.

B. Smooth scrolling of in-page anchors (``a[href^="#"]`` together with
   ``scrollIntoView`` or ``window.scrollTo``). Every internal link gets a
   ``scroll_to`` interaction.

Usage:
    from oxy_converter.converter.analyzers import JsPatternMiner

    patterns = JsPatternMiner().mine([script_text])
    patterns.interactions_for("navToggle")
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..core.js_transformer import JsTransformer
from .interaction_detector import EVENT_TO_TRIGGER

logger = logging.getLogger(__name__)


@dataclass
class ToggleRecord:
    """One converted ``addEventListener`` class toggle."""

    trigger_id: str
    """Id of the element the listener is attached to."""

    trigger_var: str
    """Variable holding the trigger element in the script."""

    event: str
    """DOM event name, e.g. 'click'."""

    actions: List[Dict[str, str]] = field(default_factory=list)
    """Native class actions, in script order."""

    target_vars: List[str] = field(default_factory=list)
    """Variables of the elements whose classes change."""

    def interaction(self) -> Dict[str, Any]:
        trigger = EVENT_TO_TRIGGER.get(f"on{self.event}", self.event)
        return {"trigger": trigger, "actions": [dict(action) for action in self.actions]}


@dataclass
class MinedPatterns:
    """Patterns found in the scripts of one document."""

    toggles: List[ToggleRecord] = field(default_factory=list)
    smooth_scroll: bool = False
    scroll_reveal: bool = False
    """Set by the converter when an element uses a scroll-reveal class."""

    def interactions_for(self, element_id: Optional[str]) -> List[Dict[str, Any]]:
        """Toggle interactions for the element with the given id."""
        if not element_id:
            return []
        return [t.interaction() for t in self.toggles if t.trigger_id == element_id]

    @staticmethod
    def scroll_interaction(href: str) -> Dict[str, Any]:
        """Native smooth-scroll click interaction for an in-page link."""
        return {
            "trigger": "click",
            "actions": [{
                "name": "scroll_to",
                "target": href,
                "scroll_behavior": "smooth",
            }],
        }

    @property
    def has_converted_code(self) -> bool:
        return bool(self.toggles or self.smooth_scroll or self.scroll_reveal)


class JsPatternMiner:
    """Mines toggle and smooth-scroll idioms from script text."""

    ELEMENT_VAR_PATTERN = re.compile(
        r"\b(?:const|let|var)\s+([a-zA-Z_$][\w$]*)\s*=\s*"
        r"document\.getElementById\(\s*['\"]([^'\"]+)['\"]\s*\)"
    )
    LISTENER_PATTERN = re.compile(
        r"(?<![\w$.])([a-zA-Z_$][\w$]*)\s*\.\s*addEventListener\s*\(\s*['\"](\w+)['\"]\s*,"
    )
    CLASS_LIST_PATTERN = re.compile(
        r"(?<![\w$.])([a-zA-Z_$][\w$]*)\s*\.\s*classList\s*\.\s*(add|remove|toggle)"
        r"\s*\(\s*['\"]([^'\"]+)['\"]\s*\)\s*;?"
    )
    SMOOTH_SCROLL_SELECTOR = JsTransformer.SMOOTH_SCROLL_SELECTOR
    SMOOTH_SCROLL_CALLS = re.compile(r"scrollIntoView|window\.scrollTo")

    def __init__(self, transformer: Optional[JsTransformer] = None):
        self.transformer = transformer or JsTransformer()

    def mine(self, scripts: List[str]) -> MinedPatterns:
        """
        Mine all inline scripts of a document.

        Args:
            scripts: Inline script texts in document order

        Returns:
            MinedPatterns (empty when nothing matched)
        """
        patterns = MinedPatterns()
        for script in scripts:
            code = self.transformer.strip_comments(script)
            patterns.toggles.extend(self.find_toggles(code))
            if self.SMOOTH_SCROLL_SELECTOR.search(code) and self.SMOOTH_SCROLL_CALLS.search(code):
                patterns.smooth_scroll = True

        if patterns.toggles or patterns.smooth_scroll:
            logger.debug(
                f"Mined {len(patterns.toggles)} toggles, smooth_scroll={patterns.smooth_scroll}"
            )
        return patterns

    def find_toggles(self, code: str) -> List[ToggleRecord]:
        """Class-toggle listeners on elements bound through getElementById."""
        element_vars = {
            match.group(1): match.group(2)
            for match in self.ELEMENT_VAR_PATTERN.finditer(code)
        }
        if not element_vars:
            return []

        toggles = []
        for match in self.LISTENER_PATTERN.finditer(code):
            trigger_var, event = match.group(1), match.group(2)
            if trigger_var not in element_vars:
                continue

            body = self._callback_body(code, match.end())
            if body is None:
                continue

            record = self._toggle_from_body(body, trigger_var, element_vars, event)
            if record is not None:
                toggles.append(record)
        return toggles

    def _callback_body(self, code: str, start: int) -> Optional[str]:
        open_pos = code.find("{", start)
        if open_pos == -1:
            return None
        close_pos = self.transformer.find_matching_brace(code, open_pos)
        if close_pos is None:
            return None
        return code[open_pos + 1:close_pos]

    def _toggle_from_body(
        self,
        body: str,
        trigger_var: str,
        element_vars: Dict[str, str],
        event: str,
    ) -> Optional[ToggleRecord]:
        actions = []
        target_vars = []
        for call in self.CLASS_LIST_PATTERN.finditer(body):
            target_var, method, class_name = call.groups()
            if target_var not in element_vars:
                return None
            actions.append({
                "name": f"{method}_class",
                "target": f"#{element_vars[target_var]}",
                "class_name": class_name,
            })
            if target_var not in target_vars:
                target_vars.append(target_var)

        if not actions:
            return None

        # Anything besides the classList calls keeps the listener in script
        if self.CLASS_LIST_PATTERN.sub("", body).strip(" \t\r\n;"):
            return None

        return ToggleRecord(
            trigger_id=element_vars[trigger_var],
            trigger_var=trigger_var,
            event=event,
            actions=actions,
            target_vars=target_vars,
        )
