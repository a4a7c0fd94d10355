"""
JavaScript Transformer - Rewrite inline scripts for the builder runtime.

The builder can only call global functions with a fixed
``(event, target, action)`` signature. This module moves function
declarations and function-valued variables onto ``window`` and rebuilds
declared parameters from the ``data-arg-<function>`` attribute written by
the interaction detector.

It also removes script fragments that the conversion already replaced
with native features (scroll-reveal observers, smooth-scroll handlers,
class toggles), so the page does not run both.

Scanning is brace, string and comment aware, but it is not a JavaScript
parser. Known gaps: regex literals containing quotes or braces, class
methods (left in place), and ``${...}`` nesting inside template literals.

Usage:
    from oxy_converter.converter.core.js_transformer import JsTransformer

    transformer = JsTransformer()
    transformer.transform("function toggleMenu() { menu.classList.toggle('open'); }")
    # // Functions (available on window object)
    # window.toggleMenu = function(event, target, action) { menu.classList.toggle('open'); }
"""

import logging
import re
from typing import Callable, List, Optional, Set, Tuple

logger = logging.getLogger(__name__)


class JsTransformer:
    """Rewrites script text into window-scoped builder functions."""

    FUNCTIONS_HEADER = "// Functions (available on window object)"
    INIT_HEADER = "// Initialization (runs when DOM is ready)"

    ALREADY_WRAPPED_PATTERN = re.compile(
        r"^\s*(document\.addEventListener\s*\(\s*['\"]DOMContentLoaded"
        r"|window\.onload"
        r"|jQuery\s*\(\s*function"
        r"|\$\s*\(\s*function"
        r"|\$\s*\(\s*document\s*\)\.ready)"
    )
    DECLARATION_PATTERN = re.compile(
        r"\b(async\s+)?function\s+([a-zA-Z_$][\w$]*)\s*\(([^)]*)\)\s*\{"
    )
    VARIABLE_PATTERN = re.compile(
        r"\b(?:const|let|var)\s+([a-zA-Z_$][\w$]*)\s*=\s*(async\s+)?"
        r"(?:function\s*\(([^)]*)\)|(\([^)]*\)|[a-zA-Z_$][\w$]*)\s*=>)\s*(\{)?"
    )
    IMPLICIT_RETURN_PATTERN = re.compile(r"[^;\r\n]+")
    DECLARED_NAME_PATTERN = re.compile(r"^(?:const|let|var)\s+([a-zA-Z_$][\w$]*)")
    BLANK_LINES_PATTERN = re.compile(r"^\s*[\r\n]+", re.MULTILINE)

    INIT_MARKERS = (
        "lucide.createIcons",
        ".querySelectorAll",
        ".getElementById",
        ".getElementsByClassName",
        ".querySelector(",
        ".addEventListener",
    )

    SMOOTH_SCROLL_SELECTOR = re.compile(r"a\[href\^=\s*['\"]#['\"]\s*\]")
    SMOOTH_SCROLL_CALLS = re.compile(r"scrollIntoView|window\.scrollTo|scrollTo\s*\(")

    # Characters after which a line break never ends a statement
    CONTINUES_LINE = frozenset("=+-*/%,.(&|?:<>!{[")
    # Characters that make the next line part of the current statement
    CONTINUES_NEXT = frozenset(".)]}?:+-*/=&|,")

    # =========================================================================
    # FUNCTION REWRITING
    # =========================================================================

    def transform(self, js: str, wrap_init_scripts: bool = False) -> str:
        """
        Rewrite functions to window assignments.

        Args:
            js: Script source
            wrap_init_scripts: Wrap leftover initialization code in a
                DOMContentLoaded listener. The builder already runs script
                elements after load, so this is off by default.

        Returns:
            Functions first, then the remaining code. Empty for blank input.
        """
        if not js or not js.strip():
            return ""

        functions: List[str] = []
        code = self._extract_declarations(js, functions)
        code = self._extract_variables(code, functions)

        remaining = self.BLANK_LINES_PATTERN.sub("", code).strip()
        if remaining and wrap_init_scripts and self._needs_init_wrap(remaining):
            remaining = self.wrap_in_dom_ready(remaining)

        if not functions:
            return remaining

        logger.debug(f"Moved {len(functions)} script functions to window")
        output = self.FUNCTIONS_HEADER + "\n" + "\n\n".join(functions)
        if remaining:
            output += "\n\n" + remaining
        return output.strip()

    def _extract_declarations(self, code: str, functions: List[str]) -> str:
        offset = 0
        while True:
            match = self.DECLARATION_PATTERN.search(code, offset)
            if not match:
                return code

            open_pos = match.end() - 1
            close_pos = self.find_matching_brace(code, open_pos)
            if close_pos is None:
                offset = match.end()
                continue

            is_async, name, params = match.group(1), match.group(2), match.group(3)
            body = code[open_pos + 1:close_pos]
            functions.append(self._window_function(name, params, body, bool(is_async)))

            code = code[:match.start()] + code[close_pos + 1:]
            offset = match.start()

    def _extract_variables(self, code: str, functions: List[str]) -> str:
        offset = 0
        while True:
            match = self.VARIABLE_PATTERN.search(code, offset)
            if not match:
                return code

            name = match.group(1)
            prefix = "async " if match.group(2) else ""
            function_params = match.group(3)
            arrow_params = match.group(4)
            has_braces = match.group(5) is not None

            if function_params is not None:
                head = f"{prefix}function({function_params.strip()})"
            else:
                head = f"{prefix}{arrow_params} =>"

            if has_braces:
                open_pos = match.end() - 1
                close_pos = self.find_matching_brace(code, open_pos)
                if close_pos is None:
                    offset = match.end()
                    continue
                body = code[open_pos + 1:close_pos]
                functions.append(f"window.{name} = {head} {{{body}}}")
                end = close_pos + 1
            else:
                if function_params is not None:
                    # function expression without a body brace
                    offset = match.end()
                    continue
                expression = self.IMPLICIT_RETURN_PATTERN.match(code, match.end())
                if not expression or not expression.group(0).strip():
                    offset = match.end()
                    continue
                functions.append(f"window.{name} = {head} {expression.group(0).strip()}")
                end = expression.end()

            if code[end:end + 1] == ";":
                end += 1
            code = code[:match.start()] + code[end:]
            offset = match.start()

    def _window_function(self, name: str, params: str, body: str, is_async: bool) -> str:
        prefix = "async " if is_async else ""
        names = [p.strip() for p in params.split(",") if p.strip()]
        if not names:
            return f"window.{name} = {prefix}function(event, target, action) {{{body}}}"

        return (
            f"window.{name} = {prefix}function(event, target, action) {{\n"
            f"{self.argument_extraction(name, names)}"
            f"{body}}}"
        )

    def argument_extraction(self, function_name: str, params: List[str]) -> str:
        """
        Code that rebuilds declared parameters from ``data-arg-<function>``.

        The first parameter becomes a number when the stored value is
        numeric. Further parameters come from the comma-split value.
        """
        lower = function_name.lower()
        dataset_key = "arg" + lower[:1].upper() + lower[1:]
        first = self._parameter_name(params[0])

        lines = [
            "",
            f"    // Extract original arguments from data-arg-{lower} attribute (set by converter)",
            f"    var _rawArgs = target ? (target.dataset['{dataset_key}'] "
            f"|| target.getAttribute('data-arg-{lower}') || '') : '';",
            f"    var {first} = _rawArgs;",
        ]
        if len(params) > 1:
            lines.append("    var _argParts = _rawArgs.split(',');")
            lines.append(f"    {first} = _argParts[0].trim();")
            for index, param in enumerate(params[1:], start=1):
                param = self._parameter_name(param)
                lines.append(
                    f"    var {param} = _argParts[{index}] ? _argParts[{index}].trim() : undefined;"
                )
        lines.append(f"    if ({first} !== '' && !isNaN({first})) {{ {first} = Number({first}); }}")
        return "\n".join(lines) + "\n"

    @staticmethod
    def _parameter_name(param: str) -> str:
        # Drop default values: "count = 1" -> "count"
        return param.split("=", 1)[0].strip()

    def _needs_init_wrap(self, code: str) -> bool:
        if self.ALREADY_WRAPPED_PATTERN.match(code):
            return False
        return any(marker in code for marker in self.INIT_MARKERS)

    def wrap_in_dom_ready(self, code: str) -> str:
        """Wrap code in a DOMContentLoaded listener."""
        indented = code.replace("\n", "\n    ")
        return (
            f"{self.INIT_HEADER}\n"
            "document.addEventListener('DOMContentLoaded', function() {\n"
            f"    {indented}\n"
            "});"
        )

    # =========================================================================
    # SCANNING
    # =========================================================================

    @staticmethod
    def skip_string(code: str, pos: int) -> int:
        """Index just past the string literal opening at ``pos``."""
        quote = code[pos]
        i = pos + 1
        while i < len(code):
            char = code[i]
            if char == "\\":
                i += 2
                continue
            if char == quote:
                return i + 1
            i += 1
        return len(code)

    @staticmethod
    def skip_comment(code: str, pos: int) -> Optional[int]:
        """Index just past a comment starting at ``pos``, None when there is none."""
        if code.startswith("//", pos):
            end = code.find("\n", pos)
            return len(code) if end == -1 else end
        if code.startswith("/*", pos):
            end = code.find("*/", pos + 2)
            return len(code) if end == -1 else end + 2
        return None

    def find_matching_brace(self, code: str, open_pos: int) -> Optional[int]:
        """
        Find the ``}`` closing the ``{`` at ``open_pos``.

        Braces inside quoted strings, template literals and comments are
        ignored.

        Returns:
            Index of the closing brace, or None when unbalanced
        """
        depth = 0
        i = open_pos
        while i < len(code):
            char = code[i]
            if char in "'\"`":
                i = self.skip_string(code, i)
                continue
            comment_end = self.skip_comment(code, i)
            if comment_end is not None:
                i = comment_end
                continue
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return i
            i += 1
        return None

    def strip_comments(self, code: str) -> str:
        """Code with comments removed, string contents untouched."""
        parts = []
        i = 0
        while i < len(code):
            if code[i] in "'\"`":
                end = self.skip_string(code, i)
                parts.append(code[i:end])
                i = end
                continue
            comment_end = self.skip_comment(code, i)
            if comment_end is not None:
                i = comment_end
                continue
            parts.append(code[i])
            i += 1
        return "".join(parts)

    def split_statements(self, code: str) -> List[str]:
        """
        Split code into top-level statements.

        Pieces are contiguous: joining them gives back ``code``. Leading
        whitespace and comments belong to the statement that follows them.
        A statement ends at a top-level ``;`` or at a line break that cannot
        continue the expression.
        """
        pieces: List[str] = []
        start = 0
        depth = 0
        last = ""
        i = 0
        while i < len(code):
            char = code[i]
            if char in "'\"`":
                i = self.skip_string(code, i)
                last = char
                continue
            comment_end = self.skip_comment(code, i)
            if comment_end is not None:
                i = comment_end
                continue

            if char in "({[":
                depth += 1
            elif char in ")}]":
                depth = max(depth - 1, 0)

            if depth == 0 and char == ";":
                pieces.append(code[start:i + 1])
                start = i + 1
                last = ""
            elif depth == 0 and char == "\n" and last and self._ends_statement(code, i, last):
                pieces.append(code[start:i])
                start = i
                last = ""
            elif not char.isspace():
                last = char
            i += 1

        if start < len(code):
            pieces.append(code[start:])
        return pieces

    def _ends_statement(self, code: str, newline_pos: int, last: str) -> bool:
        if last in self.CONTINUES_LINE:
            return False
        j = newline_pos
        while j < len(code) and code[j].isspace():
            j += 1
        if j >= len(code) or self.skip_comment(code, j) is not None:
            return True
        return code[j] not in self.CONTINUES_NEXT

    # =========================================================================
    # CONVERTED PATTERN STRIPPING
    # =========================================================================

    def strip_converted_patterns(
        self,
        js: str,
        strip_scroll_reveal: bool = False,
        strip_smooth_scroll: bool = False,
        toggles: Optional[list] = None,
    ) -> str:
        """
        Remove script fragments already converted to native features.

        Args:
            js: Script source
            strip_scroll_reveal: Remove IntersectionObserver reveal code
            strip_smooth_scroll: Remove the ``a[href^="#"]`` smooth-scroll block
            toggles: Converted ToggleRecord objects; their listeners go

        Returns:
            The script without converted statements. Variables only used by
            removed statements are removed too.
        """
        toggles = toggles or []
        if not (strip_scroll_reveal or strip_smooth_scroll or toggles):
            return js

        listener_patterns = [
            re.compile(
                rf"^{re.escape(toggle.trigger_var)}\s*\.\s*addEventListener\s*\(\s*"
                rf"['\"]{re.escape(toggle.event)}['\"]"
            )
            for toggle in toggles
        ]

        def is_converted(statement: str) -> bool:
            if strip_scroll_reveal and "IntersectionObserver" in statement:
                return True
            if strip_smooth_scroll and self.SMOOTH_SCROLL_SELECTOR.search(statement) \
                    and self.SMOOTH_SCROLL_CALLS.search(statement):
                return True
            return any(pattern.match(statement) for pattern in listener_patterns)

        stripped = self._strip_statements(js, is_converted)
        return self.BLANK_LINES_PATTERN.sub("", stripped).strip()

    def _strip_statements(self, code: str, is_converted: Callable[[str], bool]) -> str:
        pieces = self.split_statements(code)
        keep = [True] * len(pieces)
        significant = [self.strip_comments(piece).strip() for piece in pieces]

        for index, statement in enumerate(significant):
            if not statement:
                continue

            body_span = self._ready_wrapper_body(pieces[index])
            if body_span is None:
                if is_converted(statement):
                    keep[index] = False
                continue

            # Strip inside DOM-ready wrappers instead of dropping them whole
            start, end = body_span
            body = pieces[index][start:end]
            inner = self._strip_statements(body, is_converted)
            if inner == body:
                continue
            if self.strip_comments(inner).strip():
                pieces[index] = pieces[index][:start] + inner + pieces[index][end:]
                significant[index] = self.strip_comments(pieces[index]).strip()
            else:
                keep[index] = False

        self._drop_orphaned(significant, keep)
        return "".join(piece for piece, kept in zip(pieces, keep) if kept)

    def _drop_orphaned(self, significant: List[str], keep: List[bool]) -> None:
        """Drop statements tied to removed ones until nothing changes."""
        changed = True
        while changed:
            changed = False
            removed = [s for s, kept in zip(significant, keep) if not kept and s]
            removed_names = self._declared_names(removed)

            for index, statement in enumerate(significant):
                if not keep[index] or not statement:
                    continue

                # Uses a variable that was declared by a removed statement
                if any(self._references(statement, name) for name in removed_names):
                    keep[index] = False
                    changed = True
                    continue

                # Declares a variable only removed statements used
                declared = self.DECLARED_NAME_PATTERN.match(statement)
                if not declared:
                    continue
                name = declared.group(1)
                used_by_removed = any(self._references(s, name) for s in removed)
                used_by_kept = any(
                    self._references(other, name)
                    for other_index, other in enumerate(significant)
                    if keep[other_index] and other_index != index
                )
                if used_by_removed and not used_by_kept:
                    keep[index] = False
                    changed = True

    def _declared_names(self, statements: List[str]) -> Set[str]:
        names = set()
        for statement in statements:
            match = self.DECLARED_NAME_PATTERN.match(statement)
            if match:
                names.add(match.group(1))
        return names

    @staticmethod
    def _references(statement: str, name: str) -> bool:
        return re.search(rf"(?<![\w$.]){re.escape(name)}(?![\w$])", statement) is not None

    def _ready_wrapper_body(self, statement: str) -> Optional[Tuple[int, int]]:
        """Body span of a DOM-ready wrapper statement, None for other statements."""
        match = self.ALREADY_WRAPPED_PATTERN.search(self.strip_comments(statement))
        if not match:
            return None

        anchor = statement.find(match.group(1).strip()[:12])
        if anchor == -1:
            return None
        open_pos = statement.find("{", anchor)
        if open_pos == -1:
            return None
        close_pos = self.find_matching_brace(statement, open_pos)
        if close_pos is None:
            return None
        return open_pos + 1, close_pos
