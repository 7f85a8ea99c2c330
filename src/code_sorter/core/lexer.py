"""
Character level lexical state tracking.

The scanner walks source text one character at a time and keeps track of
the lexical context it is in: single quote, double quote, template string,
single-line comment or multi-line comment. Outside those contexts it keeps a
stack of open brackets so the parser can tell where a block ends without
building a syntax tree.

Precedence, checked in order for every character:

1. a pending escape consumes exactly one character
2. a backslash inside a quote or template sets a pending escape
3. outside quotes, ``//`` opens a single-line comment and ``/*`` / ``*/``
   open and close a multi-line comment
4. inside any comment nothing else is interpreted
5. a quote or backtick toggles its own context when no other string context
   is active
6. outside strings and comments brackets are pushed and matched
"""

import logging
from dataclasses import dataclass, field

from code_sorter.core.exceptions import ParseError

logger = logging.getLogger(__name__)

BRACKET_PAIRS = {"(": ")", "[": "]", "{": "}"}
CLOSING_BRACKETS = {closer: opener for opener, closer in BRACKET_PAIRS.items()}


def get_matching_closing_bracket(opening_bracket: str) -> str:
    """Get the closing bracket for an opening bracket"""
    return BRACKET_PAIRS.get(opening_bracket, "")


@dataclass
class LexicalState:
    """Lexical contexts active at the current scan position"""

    in_single_quote: bool = False
    in_double_quote: bool = False
    in_template_string: bool = False
    in_single_line_comment: bool = False
    in_multi_line_comment: bool = False
    bracket_stack: list[str] = field(default_factory=list)
    escaped: bool = False

    @property
    def in_string(self) -> bool:
        return self.in_single_quote or self.in_double_quote or self.in_template_string

    @property
    def in_comment(self) -> bool:
        return self.in_single_line_comment or self.in_multi_line_comment


@dataclass
class LineScan:
    """Structural facts collected while scanning one line"""

    first_open_brace: int | None = None
    last_close_brace: int | None = None
    comment_start: int | None = None

    @property
    def opened_brace(self) -> bool:
        return self.first_open_brace is not None


class LexicalScanner:
    """Stateful scanner fed line by line.

    In strict mode every closing bracket must match the top of the bracket
    stack and violations raise ParseError. In counting mode the scanner only
    keeps independent depth counters per bracket kind and never raises; this
    is what plain statement completion uses.
    """

    def __init__(self, strict: bool = True):
        self.strict = strict
        self.state = LexicalState()
        self.depths = {opener: 0 for opener in BRACKET_PAIRS}

    @property
    def is_balanced(self) -> bool:
        """Check if no bracket is left open"""
        if self.strict:
            return not self.state.bracket_stack
        return all(depth == 0 for depth in self.depths.values())

    def scan_line(self, line: str, line_number: int) -> LineScan:
        """Feed one line (without its newline) through the state machine

        Args:
            line: Line text
            line_number: 1-based line number used in error messages

        Returns:
            LineScan with the structural positions found on the line
        """
        state = self.state
        scan = LineScan()
        index = 0
        length = len(line)

        while index < length:
            char = line[index]
            next_char = line[index + 1] if index + 1 < length else ""
            column = index
            index += 1

            if state.escaped:
                state.escaped = False
                continue

            if char == "\\" and state.in_string:
                state.escaped = True
                continue

            if not state.in_string:
                if char == "/" and next_char == "/" and not state.in_multi_line_comment:
                    if not state.in_single_line_comment:
                        scan.comment_start = column
                    state.in_single_line_comment = True
                    continue

                if char == "/" and next_char == "*" and not state.in_single_line_comment:
                    state.in_multi_line_comment = True
                    index += 1  # skip the *
                    continue

                if char == "*" and next_char == "/" and state.in_multi_line_comment:
                    state.in_multi_line_comment = False
                    index += 1  # skip the /
                    continue

            if state.in_comment:
                continue

            if char == '"' and not state.in_single_quote and not state.in_template_string:
                state.in_double_quote = not state.in_double_quote
                continue

            if char == "'" and not state.in_double_quote and not state.in_template_string:
                state.in_single_quote = not state.in_single_quote
                continue

            if char == "`" and not state.in_single_quote and not state.in_double_quote:
                state.in_template_string = not state.in_template_string
                continue

            if state.in_string:
                continue

            if char in BRACKET_PAIRS:
                self._open(char)
                if char == "{" and scan.first_open_brace is None:
                    scan.first_open_brace = column
            elif char in CLOSING_BRACKETS:
                self._close(char, line_number)
                if char == "}":
                    scan.last_close_brace = column

        # Single-line comments never survive the end of the line
        state.in_single_line_comment = False
        return scan

    def _open(self, char: str) -> None:
        if self.strict:
            self.state.bracket_stack.append(char)
        else:
            self.depths[char] += 1

    def _close(self, char: str, line_number: int) -> None:
        if not self.strict:
            self.depths[CLOSING_BRACKETS[char]] -= 1
            return

        stack = self.state.bracket_stack
        if not stack:
            raise ParseError(
                f"Unexpected closing bracket '{char}' at line {line_number}. "
                f"No matching opening bracket found.",
                line_number,
            )

        last_opening = stack[-1]
        expected_closing = get_matching_closing_bracket(last_opening)
        if char != expected_closing:
            raise ParseError(
                f"Mismatched brackets at line {line_number}. Expected "
                f"'{expected_closing}' to close '{last_opening}', but found '{char}'.",
                line_number,
            )
        stack.pop()

    def check_closed(self, construct: str, start_line: int) -> None:
        """Raise ParseError if any lexical context is still open

        Args:
            construct: Name of the construct being scanned (e.g. 'class')
            start_line: 1-based line where the construct starts
        """
        state = self.state
        unclosed = [
            (state.in_single_quote, "single quote", "'"),
            (state.in_double_quote, "double quote", '"'),
            (state.in_template_string, "template string", "`"),
            (state.in_multi_line_comment, "multi-line comment", "*/"),
        ]
        for is_open, label, closer in unclosed:
            if is_open:
                raise ParseError(
                    f"Unclosed {label} in {construct} starting at line {start_line}. "
                    f"Expected closing '{closer}' but reached end of file.",
                    start_line,
                )

        if state.bracket_stack:
            brackets = ", ".join(
                f"'{bracket}' expecting '{get_matching_closing_bracket(bracket)}'"
                for bracket in state.bracket_stack
            )
            raise ParseError(
                f"Unclosed brackets in {construct} starting at line {start_line}. "
                f"Unclosed: {brackets}",
                start_line,
            )


def is_statement_complete(content: str) -> bool:
    """Check if an accumulated plain statement is complete

    A statement is complete when its trimmed text ends with a semicolon and
    parentheses, square brackets and braces are all balanced outside strings
    and comments. A trailing single-line comment is ignored, and a semicolon
    inside an unterminated string or template does not count.
    """
    if not content.strip():
        return False

    scanner = LexicalScanner(strict=False)
    code_lines = []
    for line_number, line in enumerate(content.split("\n"), start=1):
        scan = scanner.scan_line(line, line_number)
        code_lines.append(line if scan.comment_start is None else line[: scan.comment_start])

    if not "\n".join(code_lines).strip().endswith(";"):
        return False

    state = scanner.state
    if state.in_string or state.in_multi_line_comment:
        return False
    return scanner.is_balanced
