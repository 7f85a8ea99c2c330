#!/usr/bin/env python3
"""
Classification rules for code parts.
Separate file to keep the line grammar organized and auditable.

Two ordered tables map the trimmed first line of a part to its kind: one for
bracket-matched blocks and one for plain statements. Rules are checked in
priority order and the first match wins; each table has a fallback kind.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum

from code_sorter.core.code_part import PartKind
from code_sorter.core.lexer import LexicalScanner

# Leading run of declaration modifiers, e.g. "export default abstract "
MODIFIER_WORDS = (
    "export",
    "default",
    "declare",
    "public",
    "private",
    "protected",
    "static",
    "abstract",
    "async",
    "readonly",
    "override",
)
MODIFIERS = rf"(?:(?:{'|'.join(MODIFIER_WORDS)})\s+)*"
MEMBER_MODIFIERS = r"(?:(?:public|private|protected|static|abstract|async|readonly|override)\s+)+"

IDENTIFIER = r"[\w$]+"
BINDING = rf"(?:const|let|var)\s+{IDENTIFIER}\s*(?::[^=]+)?="
FUNCTION_VALUE = r"\s*(?:async\s+)?(?:function\b|.*=>)"


class Priority(IntEnum):
    """Priority levels for classification rules."""

    HIGHEST = 0
    HIGH = 10
    MEDIUM = 20
    NORMAL = 30
    LOW = 40
    LOWEST = 50


@dataclass
class ClassificationRulePart:
    """A single line classification rule."""

    kind: PartKind
    pattern: str
    priority: int = Priority.NORMAL

    # Declaration keyword rules mark a block start even without a brace
    is_declaration: bool = False

    # Optional extra condition on the trimmed line
    custom_check: Callable[[str], bool] | None = None

    def __post_init__(self):
        self._regex = re.compile(self.pattern)

    def matches(self, line: str) -> bool:
        """Check if this rule matches the given trimmed line."""
        if not self._regex.search(line):
            return False
        if self.custom_check:
            return self.custom_check(line)
        return True


def get_default_block_rules() -> list[ClassificationRulePart]:
    """Get the default set of block classification rules."""
    rules = []

    # ============================================================
    # DECLARATION KEYWORDS (Highest Priority)
    # ============================================================

    rules.append(
        ClassificationRulePart(
            kind=PartKind.CLASS,
            pattern=rf"^{MODIFIERS}class\b",
            priority=Priority.HIGHEST,
            is_declaration=True,
        ),
    )

    rules.append(
        ClassificationRulePart(
            kind=PartKind.INTERFACE,
            pattern=rf"^{MODIFIERS}interface\b",
            priority=Priority.HIGHEST,
            is_declaration=True,
        ),
    )

    # Type aliases with an object body behave like interfaces
    rules.append(
        ClassificationRulePart(
            kind=PartKind.INTERFACE,
            pattern=rf"^{MODIFIERS}type\s+{IDENTIFIER}",
            priority=Priority.HIGHEST,
        ),
    )

    rules.append(
        ClassificationRulePart(
            kind=PartKind.ENUM,
            pattern=rf"^{MODIFIERS}(?:const\s+)?enum\b",
            priority=Priority.HIGHEST,
            is_declaration=True,
        ),
    )

    rules.append(
        ClassificationRulePart(
            kind=PartKind.FUNCTION,
            pattern=rf"^{MODIFIERS}function\b",
            priority=Priority.HIGHEST,
            is_declaration=True,
        ),
    )

    rules.append(
        ClassificationRulePart(
            kind=PartKind.CONSTRUCTOR,
            pattern=rf"^{MODIFIERS}constructor\s*\(",
            priority=Priority.HIGHEST,
            is_declaration=True,
        ),
    )

    # ============================================================
    # BINDINGS (High Priority)
    # ============================================================

    # const handler = (...) => {   /   const handler = function (...) {
    rules.append(
        ClassificationRulePart(
            kind=PartKind.FUNCTION,
            pattern=rf"^{MODIFIERS}{BINDING}{FUNCTION_VALUE}",
            priority=Priority.HIGH,
        ),
    )

    # export default { ... }
    rules.append(
        ClassificationRulePart(
            kind=PartKind.EXPORT_DEFAULT,
            pattern=r"^export\s+default\b",
            priority=Priority.HIGH,
        ),
    )

    rules.append(
        ClassificationRulePart(
            kind=PartKind.EXPORT,
            pattern=r"^export\s+(?:declare\s+)?(?:const|let|var)\b",
            priority=Priority.HIGH,
        ),
    )

    rules.append(
        ClassificationRulePart(
            kind=PartKind.VARIABLE,
            pattern=r"^(?:declare\s+)?(?:const|let|var)\b",
            priority=Priority.HIGH,
        ),
    )

    rules.sort(key=lambda rule: rule.priority)
    return rules


def get_default_statement_rules() -> list[ClassificationRulePart]:
    """Get the default set of plain statement classification rules."""
    rules = []

    rules.append(
        ClassificationRulePart(
            kind=PartKind.IMPORT,
            pattern=r"^import\b",
            priority=Priority.HIGHEST,
        ),
    )

    rules.append(
        ClassificationRulePart(
            kind=PartKind.EXPORT_DEFAULT,
            pattern=r"^export\s+default\b",
            priority=Priority.HIGHEST,
        ),
    )

    # export const format = (value) => value.trim();
    rules.append(
        ClassificationRulePart(
            kind=PartKind.FUNCTION,
            pattern=rf"^export\s+{BINDING}{FUNCTION_VALUE}",
            priority=Priority.HIGH,
        ),
    )

    rules.append(
        ClassificationRulePart(
            kind=PartKind.EXPORT,
            pattern=r"^export\b",
            priority=Priority.HIGH,
        ),
    )

    rules.append(
        ClassificationRulePart(
            kind=PartKind.FUNCTION,
            pattern=rf"^(?:declare\s+)?{BINDING}{FUNCTION_VALUE}",
            priority=Priority.MEDIUM,
        ),
    )

    rules.append(
        ClassificationRulePart(
            kind=PartKind.VARIABLE,
            pattern=r"^(?:declare\s+)?(?:const|let|var)\b",
            priority=Priority.MEDIUM,
        ),
    )

    # Overload signatures and ambient declarations
    rules.append(
        ClassificationRulePart(
            kind=PartKind.FUNCTION,
            pattern=rf"^{MODIFIERS}function\b",
            priority=Priority.NORMAL,
        ),
    )

    rules.sort(key=lambda rule: rule.priority)
    return rules


BLOCK_RULES = get_default_block_rules()
STATEMENT_RULES = get_default_statement_rules()

# Fallback kinds when no rule matches
DEFAULT_BLOCK_KIND = PartKind.FUNCTION
DEFAULT_STATEMENT_KIND = PartKind.VARIABLE

# Member signatures split over several lines, e.g. "private load("
MEMBER_SIGNATURE = re.compile(
    rf"^{MEMBER_MODIFIERS}(?:[gs]et\s+)?\*?\s*#?{IDENTIFIER}\s*[(<]"
)

# Name patterns per kind, tried in order
NAME_PATTERNS = {
    PartKind.CLASS: [re.compile(rf"\bclass\s+({IDENTIFIER})")],
    PartKind.INTERFACE: [
        re.compile(rf"\binterface\s+({IDENTIFIER})"),
        re.compile(rf"\btype\s+({IDENTIFIER})"),
    ],
    PartKind.ENUM: [re.compile(rf"\benum\s+({IDENTIFIER})")],
    PartKind.FUNCTION: [
        re.compile(rf"^{MODIFIERS}(?:const|let|var)\s+({IDENTIFIER})"),
        re.compile(rf"\bfunction\b\s*\*?\s*({IDENTIFIER})"),
        re.compile(rf"^{MODIFIERS}(?:[gs]et\s+)?\*?\s*(#?{IDENTIFIER})\s*[(<]"),
        re.compile(rf"^{MODIFIERS}(#?{IDENTIFIER})\s*[?!]?\s*[=:]"),
        re.compile(rf"({IDENTIFIER})\s*\("),
    ],
    PartKind.VARIABLE: [
        re.compile(rf"^{MODIFIERS}(?:const|let|var)\s+({IDENTIFIER})"),
    ],
    PartKind.EXPORT: [
        re.compile(
            r"^export\s+(?:declare\s+)?(?:const|let|var|type|namespace)\s+"
            rf"({IDENTIFIER})"
        ),
    ],
    PartKind.EXPORT_DEFAULT: [re.compile(rf"^export\s+default\s+({IDENTIFIER})")],
}
MODIFIER_RUN = re.compile(rf"^{MODIFIERS}")


def classify_block(line: str) -> PartKind:
    """Determine the kind of a block from its first trimmed line."""
    for rule in BLOCK_RULES:
        if rule.matches(line):
            return rule.kind
    return DEFAULT_BLOCK_KIND


def classify_statement(line: str) -> PartKind:
    """Determine the kind of a plain statement from its first trimmed line."""
    for rule in STATEMENT_RULES:
        if rule.matches(line):
            return rule.kind
    return DEFAULT_STATEMENT_KIND


def has_open_brace(line: str) -> bool:
    """Check if the line opens a brace outside strings and comments."""
    scanner = LexicalScanner(strict=False)
    return scanner.scan_line(line, 0).opened_brace


def is_block_start(line: str) -> bool:
    """Check if a trimmed line starts a bracket-matched block.

    Lines ending with a semicolon are always statements (field declarations,
    abstract members, one-line bindings).
    """
    if line.endswith(";"):
        return False

    for rule in BLOCK_RULES:
        if rule.is_declaration and rule.matches(line):
            return True

    if MEMBER_SIGNATURE.match(line):
        return True

    return has_open_brace(line)


def extract_name(line: str, kind: PartKind) -> str:
    """Extract the identifier used to sort a part."""
    if kind is PartKind.CONSTRUCTOR:
        return "constructor"

    for pattern in NAME_PATTERNS.get(kind, []):
        match = pattern.search(line)
        if match:
            return match.group(1)

    if kind is PartKind.EXPORT_DEFAULT:
        return "default"
    return ""


def extract_modifiers(line: str, kind: PartKind) -> dict[str, bool]:
    """Read declared modifiers from the leading modifier run of a line."""
    run = MODIFIER_RUN.match(line).group(0).split()
    return {
        "is_exported": "export" in run,
        "is_public": "public" in run,
        "is_private": "private" in run,
        "is_protected": "protected" in run,
        "is_static": "static" in run,
        "is_arrow_function": kind is PartKind.FUNCTION and "=>" in line,
    }
