"""
Part model for classified units of source text.

A document is split into an ordered list of parts: comments, blank runs,
plain statements and bracket-matched blocks. Class parts own their members
as children. Parts are immutable; grouping and sorting build new values.
"""

from dataclasses import dataclass, field, replace
from enum import Enum

# Reserved group number keeping default exports at the end of their scope
EXPORT_DEFAULT_GROUP = 99999


class PartKind(Enum):
    """Kind of a code part"""

    COMMENT = "comment"
    BLANK = "blank"
    IMPORT = "import"
    VARIABLE = "variable"
    FUNCTION = "function"
    CLASS = "class"
    INTERFACE = "interface"
    ENUM = "enum"
    EXPORT = "export"
    EXPORT_DEFAULT = "export-default"
    CONSTRUCTOR = "constructor"


@dataclass(frozen=True)
class CodePart:
    """One classified unit of source text"""

    kind: PartKind
    content: str
    line_start: int
    line_end: int
    name: str = ""

    # Declared modifiers
    is_exported: bool = False
    is_public: bool = False
    is_private: bool = False
    is_protected: bool = False
    is_static: bool = False
    is_arrow_function: bool = False

    group_number: int | None = None
    children: tuple["CodePart", ...] = field(default_factory=tuple)

    # Offsets into content: the opening brace of a block and the start of the
    # line holding its closing brace. Only meaningful for blocks.
    body_start: int | None = None
    body_end: int | None = None

    def __post_init__(self):
        if self.children and self.kind is not PartKind.CLASS:
            raise ValueError(f"Only class parts can own children, got {self.kind.value}")

    @property
    def is_blank(self) -> bool:
        return self.kind is PartKind.BLANK

    @property
    def is_comment(self) -> bool:
        return self.kind is PartKind.COMMENT

    @property
    def header(self) -> str:
        """Text up to and including the opening brace of the block"""
        if self.body_start is None:
            return self.content
        return self.content[: self.body_start + 1]

    @property
    def footer(self) -> str:
        """Text from the line holding the closing brace to the end"""
        if self.body_end is None:
            return ""
        return self.content[self.body_end :].rstrip("\n")

    @property
    def body(self) -> str:
        """Text between the opening brace and the closing line"""
        if self.body_start is None or self.body_end is None:
            return ""
        return self.content[self.body_start + 1 : self.body_end]

    def with_leading_comment(self, comment: "CodePart") -> "CodePart":
        """Return a copy of this part with the comment text prefixed to it"""
        connector = "" if comment.content.endswith("\n") else "\n"
        prefix = f"{comment.content}{connector}"
        shift = len(prefix)
        return replace(
            self,
            content=f"{prefix}{self.content}",
            line_start=comment.line_start,
            body_start=None if self.body_start is None else self.body_start + shift,
            body_end=None if self.body_end is None else self.body_end + shift,
        )

    def with_group(self, group_number: int) -> "CodePart":
        return replace(self, group_number=group_number)

    def with_children(self, children) -> "CodePart":
        return replace(self, children=tuple(children))

    def __str__(self) -> str:
        label = f" {self.name}" if self.name else ""
        return f"{self.kind.value}{label} [{self.line_start}-{self.line_end}]"
