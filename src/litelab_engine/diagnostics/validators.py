"""Heuristic, best-effort validators for the three buffer kinds.

None of these are linters. The markup check is a tolerant structural parse,
the style check only counts braces (plus one crude uppercase heuristic), and
the script check parses the source with tree-sitter without running it.
"""

from __future__ import annotations

import re
from functools import lru_cache
from html.parser import HTMLParser
from typing import Callable, List, Mapping, Optional

import tree_sitter_javascript
from tree_sitter import Language, Node, Parser

from litelab_engine.buffer import BufferKind
from litelab_engine.errors import ParseError, StyleBalanceError

from .models import Diagnostic, error, warning

Validator = Callable[[str], List[Diagnostic]]

VOID_ELEMENTS = frozenset(
    {
        "area", "base", "br", "col", "embed", "hr", "img", "input",
        "link", "meta", "param", "source", "track", "wbr",
    }
)
# End tags the HTML parser would insert on its own.
OPTIONAL_END = frozenset(
    {
        "html", "head", "body", "p", "li", "dt", "dd", "option", "optgroup",
        "tr", "td", "th", "thead", "tbody", "tfoot", "colgroup", "rt", "rp",
    }
)

UNDERFLOW_LIMIT = -5
UPPERCASE_RUN = re.compile(r"[A-Z]{2,}")
UPPERCASE_MESSAGE = (
    "CSS properties appear uppercase - CSS is case-sensitive for some values"
)


class _StructureParser(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.stack: list[tuple[str, tuple[int, int]]] = []

    def handle_starttag(self, tag: str, attrs) -> None:
        del attrs
        if tag not in VOID_ELEMENTS:
            self.stack.append((tag, self.getpos()))

    def handle_startendtag(self, tag: str, attrs) -> None:
        del tag, attrs

    def handle_endtag(self, tag: str) -> None:
        if tag in VOID_ELEMENTS:
            return
        for index in range(len(self.stack) - 1, -1, -1):
            if self.stack[index][0] == tag:
                del self.stack[index:]
                return
        line, column = self.getpos()
        raise ParseError(
            f"Unexpected closing tag </{tag}> at line {line}, column {column + 1}",
            source=BufferKind.MARKUP.value,
        )

    def check_unclosed(self) -> None:
        for tag, (line, column) in self.stack:
            if tag not in OPTIONAL_END:
                raise ParseError(
                    f"Unclosed element <{tag}> opened at line {line}, column {column + 1}",
                    source=BufferKind.MARKUP.value,
                )


def parse_markup(text: str) -> None:
    """Raise ParseError if ``text`` has a structural error."""

    parser = _StructureParser()
    parser.feed(text)
    parser.close()
    parser.check_unclosed()


def validate_markup(text: str) -> List[Diagnostic]:
    try:
        parse_markup(text)
    except ParseError as exc:
        return [error(str(exc) or "HTML parse error", BufferKind.MARKUP)]
    return []


def scan_braces(text: str) -> int:
    """Return the final brace balance of ``text``.

    Raises StyleBalanceError as soon as the running balance drops below the
    underflow limit; nothing after that point is scanned.
    """

    balance = 0
    for offset, char in enumerate(text):
        if char == "{":
            balance += 1
        elif char == "}":
            balance -= 1
        if balance < UNDERFLOW_LIMIT:
            raise StyleBalanceError("Unexpected '}'", offset=offset)
    return balance


def validate_style(text: str) -> List[Diagnostic]:
    findings: List[Diagnostic] = []
    try:
        balance = scan_braces(text)
    except StyleBalanceError as exc:
        findings.append(error(str(exc), BufferKind.STYLE))
    else:
        if balance > 0:
            findings.append(error("Missing closing '}'", BufferKind.STYLE))
    # Crude on purpose: also matches class names and comments.
    if UPPERCASE_RUN.search(text):
        findings.append(warning(UPPERCASE_MESSAGE, BufferKind.STYLE))
    return findings


@lru_cache(maxsize=1)
def _script_parser() -> Parser:
    return Parser(Language(tree_sitter_javascript.language()))


def _first_problem(root: Node) -> Optional[Node]:
    earliest: Optional[Node] = None
    pending = [root]
    while pending:
        node = pending.pop()
        if node.is_error or node.is_missing:
            if earliest is None or node.start_byte < earliest.start_byte:
                earliest = node
        pending.extend(node.children)
    return earliest


def _describe(node: Node) -> str:
    if node.is_missing:
        return f"Missing '{node.type}'"
    words = (node.text or b"").decode("utf-8", "replace").split()
    if not words:
        return "Unexpected end of input"
    return f"Unexpected token '{words[0][:24]}'"


def parse_script(text: str) -> None:
    """Parse ``text`` without running it; raise ParseError on bad syntax.

    The grammar tracks current ECMAScript (optional chaining, ``??``, class
    fields, BigInt). A top-level ``return`` is accepted.
    """

    tree = _script_parser().parse(text.encode("utf-8"))
    if not tree.root_node.has_error:
        return
    problem = _first_problem(tree.root_node)
    if problem is None:
        raise ParseError("JS syntax error", source=BufferKind.SCRIPT.value)
    line = problem.start_point[0] + 1
    raise ParseError(
        f"Line {line}: {_describe(problem)}", source=BufferKind.SCRIPT.value
    )


def validate_script(text: str) -> List[Diagnostic]:
    try:
        parse_script(text)
    except ParseError as exc:
        return [error(str(exc) or "JS syntax error", BufferKind.SCRIPT)]
    return []


VALIDATORS: Mapping[BufferKind, Validator] = {
    BufferKind.MARKUP: validate_markup,
    BufferKind.STYLE: validate_style,
    BufferKind.SCRIPT: validate_script,
}


__all__ = [
    "Validator",
    "VALIDATORS",
    "VOID_ELEMENTS",
    "UPPERCASE_MESSAGE",
    "parse_markup",
    "parse_script",
    "scan_braces",
    "validate_markup",
    "validate_style",
    "validate_script",
]
