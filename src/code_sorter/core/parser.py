"""
Line by line parser splitting source text into code parts.

The parser never builds a syntax tree. Each line is classified by its trimmed
text; blocks are consumed with the lexical scanner until their opening brace
is matched, and class bodies are parsed again recursively to produce their
members. Plain statements are scanned too, so a statement with an open
string, comment or bracket keeps every following line until it closes.
Every part keeps the exact source text of its lines, so joining the contents
of all top-level parts with newlines gives back the input.
"""

import logging

from code_sorter.core.classification_rule_part import (
    classify_block,
    classify_statement,
    extract_modifiers,
    extract_name,
    is_block_start,
)
from code_sorter.core.code_part import CodePart, PartKind
from code_sorter.core.exceptions import ParseError
from code_sorter.core.lexer import LexicalScanner, LineScan, is_statement_complete

logger = logging.getLogger(__name__)

CONTINUATION_TOKENS = (".", "&&", "||", "+", "-", "?", ":", '"', "'", "`")

# Text allowed after the closing brace of a block on its last line
CLOSING_TAIL_CHARS = set(")],;")


def _indentation(line: str) -> int:
    return len(line) - len(line.lstrip())


class _PartBuilder:
    """Accumulates consecutive lines belonging to one part"""

    def __init__(self, kind: PartKind, line_start: int, first_line: str = ""):
        self.kind = kind
        self.line_start = line_start
        self.line_end = line_start
        self.lines: list[str] = []
        self.indent = _indentation(first_line)
        self.name = ""
        self.modifiers: dict[str, bool] = {}
        self.scanner: LexicalScanner | None = None

    @property
    def is_statement(self) -> bool:
        return self.kind not in (PartKind.BLANK, PartKind.COMMENT)

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    @property
    def is_open(self) -> bool:
        """Check if a string, comment or bracket of the statement is still open"""
        if self.scanner is None:
            return False
        state = self.scanner.state
        return (
            state.in_string
            or state.in_multi_line_comment
            or not self.scanner.is_balanced
        )

    def add(self, line: str, line_number: int) -> None:
        self.lines.append(line)
        self.line_end = line_number
        if self.scanner is not None:
            self.scanner.scan_line(line, line_number)

    def finalize(self) -> CodePart:
        return CodePart(
            kind=self.kind,
            content=self.text,
            line_start=self.line_start,
            line_end=self.line_end,
            name=self.name,
            **self.modifiers,
        )


class LineByLineParser:
    """Custom line-by-line parser that captures everything exactly as written"""

    def parse_contents(self, content: str, line_offset: int = 0) -> list[CodePart]:
        """Parse content line by line into code parts

        Args:
            content: Text to parse
            line_offset: Number of lines preceding content in the document,
                used to report absolute line numbers for nested bodies

        Returns:
            Ordered list of CodePart objects covering every line of content

        Raises:
            ParseError: On any unrecoverable lexical inconsistency
        """
        lines = content.split("\n")
        parts: list[CodePart] = []
        current: _PartBuilder | None = None
        index = 0

        while index < len(lines):
            line = lines[index]
            trimmed = line.strip()
            line_number = line_offset + index + 1

            # An open string, comment or bracket takes every line until it closes
            if current and current.is_open:
                current.add(line, line_number)
                if is_statement_complete(current.text):
                    parts.append(current.finalize())
                    current = None
                index += 1
                continue

            # Blank lines
            if not trimmed:
                if current and current.kind is not PartKind.BLANK:
                    parts.append(current.finalize())
                    current = None
                if current is None:
                    current = _PartBuilder(PartKind.BLANK, line_number)
                current.add(line, line_number)
                index += 1
                continue

            # An incomplete statement swallows its continuation lines
            if current and current.is_statement and self._is_continuation_line(line, current):
                current.add(line, line_number)
                if is_statement_complete(current.text):
                    parts.append(current.finalize())
                    current = None
                index += 1
                continue

            # Single line comments
            if trimmed.startswith("//"):
                if current and current.kind is not PartKind.COMMENT:
                    parts.append(current.finalize())
                    current = None
                if current is None:
                    current = _PartBuilder(PartKind.COMMENT, line_number, line)
                current.add(line, line_number)
                index += 1
                continue

            # Multi-line comments
            if trimmed.startswith("/*") and self._is_comment_only(trimmed):
                if current:
                    parts.append(current.finalize())
                    current = None
                part, index = self._parse_multi_line_comment(lines, index, line_offset)
                parts.append(part)
                continue

            code = self._strip_inline_comment(trimmed)

            # Code blocks (classes, functions, interfaces, ...)
            if is_block_start(code):
                if current:
                    parts.append(current.finalize())
                    current = None
                part, index = self._parse_code_block(lines, index, line_offset)
                parts.append(part)
                continue

            # Other statements (imports, variables, exports, ...)
            if current:
                parts.append(current.finalize())
            current = self._create_statement(code, line, line_number)
            current.add(line, line_number)
            if is_statement_complete(current.text):
                parts.append(current.finalize())
                current = None
            index += 1

        if current:
            if current.is_open:
                current.scanner.check_closed(current.kind.value, current.line_start)
            parts.append(current.finalize())

        logger.debug(f"Parsed {len(parts)} parts from {len(lines)} lines")
        return parts

    def _is_continuation_line(self, line: str, current: _PartBuilder) -> bool:
        """Check if a line continues the statement being accumulated"""
        trimmed = line.strip()
        if trimmed.startswith("//") or trimmed.startswith("/*"):
            return False
        if trimmed.startswith(CONTINUATION_TOKENS):
            return True
        return _indentation(line) > current.indent

    def _is_comment_only(self, trimmed: str) -> bool:
        """Check if a line opening a comment holds nothing else"""
        end = trimmed.find("*/", 2)
        return end == -1 or not trimmed[end + 2 :].strip()

    def _strip_inline_comment(self, trimmed: str) -> str:
        """Drop leading inline /* ... */ comments before classification"""
        code = trimmed
        while code.startswith("/*"):
            end = code.find("*/", 2)
            if end == -1:
                break
            code = code[end + 2 :].lstrip()
        return code

    def _create_statement(self, code: str, line: str, line_number: int) -> _PartBuilder:
        kind = classify_statement(code)
        builder = _PartBuilder(kind, line_number, line)
        builder.name = extract_name(code, kind)
        builder.modifiers = extract_modifiers(code, kind)
        builder.scanner = LexicalScanner(strict=True)
        return builder

    def _parse_multi_line_comment(
        self,
        lines: list[str],
        start_index: int,
        line_offset: int,
    ) -> tuple[CodePart, int]:
        """Parse a multi-line comment block

        Returns:
            The comment part and the index of the first line after it
        """
        start_number = line_offset + start_index + 1
        first = lines[start_index]
        search_from = first.find("/*") + 2
        index = start_index

        while index < len(lines):
            if "*/" in lines[index][search_from:]:
                break
            search_from = 0
            index += 1
        else:
            raise ParseError(
                f"Unclosed multi-line comment starting at line {start_number}. "
                f"Expected closing '*/' but reached end of file.",
                start_number,
            )

        part = CodePart(
            kind=PartKind.COMMENT,
            content="\n".join(lines[start_index : index + 1]),
            line_start=start_number,
            line_end=line_offset + index + 1,
        )
        return part, index + 1

    def _is_block_closed(self, line: str, scan: LineScan) -> bool:
        """Check if the rest of the line after the closing brace ends the block"""
        if scan.last_close_brace is None:
            return False
        end = scan.comment_start if scan.comment_start is not None else len(line)
        tail = line[scan.last_close_brace + 1 : end].strip()
        if not tail or tail.endswith(";"):
            return True
        return all(char in CLOSING_TAIL_CHARS or char.isspace() for char in tail)

    def _parse_code_block(
        self,
        lines: list[str],
        start_index: int,
        line_offset: int,
    ) -> tuple[CodePart, int]:
        """Parse a code block (class, function, interface, ...) with brace matching

        Returns:
            The block part and the index of the first line after it
        """
        first_line = lines[start_index]
        code = self._strip_inline_comment(first_line.strip())
        kind = classify_block(code)
        start_number = line_offset + start_index + 1

        scanner = LexicalScanner(strict=True)
        offset = 0
        body_start = None
        body_end = None
        closed = False
        index = start_index

        while index < len(lines):
            line = lines[index]
            scan = scanner.scan_line(line, line_offset + index + 1)

            if body_start is None and scan.opened_brace:
                body_start = offset + scan.first_open_brace

            if scan.last_close_brace is not None:
                before = line[: scan.last_close_brace]
                body_end = offset if not before.strip() else offset + scan.last_close_brace

            if body_start is not None and scanner.is_balanced and self._is_block_closed(line, scan):
                closed = True
                break

            offset += len(line) + 1
            index += 1

        if not closed:
            scanner.check_closed(kind.value, start_number)
            if body_start is None:
                raise ParseError(
                    f"Unterminated {kind.value} starting at line {start_number}. "
                    f"Expected '{{' but reached end of file.",
                    start_number,
                )
            index = len(lines) - 1

        content = "\n".join(lines[start_index : index + 1])
        part = CodePart(
            kind=kind,
            content=content,
            line_start=start_number,
            line_end=line_offset + index + 1,
            name=extract_name(code, kind),
            body_start=body_start,
            body_end=body_end,
            **extract_modifiers(code, kind),
        )

        if kind is PartKind.CLASS:
            part = part.with_children(self._parse_class_members(part))

        return part, index + 1

    def _parse_class_members(self, class_part: CodePart) -> list[CodePart]:
        """Parse the body of a class recursively into member parts"""
        if class_part.body_start is None or class_part.body_end is None:
            return []
        if class_part.body_end <= class_part.body_start:
            return []

        # The body starts on the line of the opening brace
        brace_line_offset = class_part.line_start - 1 + class_part.content.count(
            "\n", 0, class_part.body_start
        )
        return self.parse_contents(class_part.body, brace_line_offset)
