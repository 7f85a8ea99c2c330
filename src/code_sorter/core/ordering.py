"""
Priority table and sorting of grouped code parts.

Within a scope, parts are ordered by group number first. Inside a group,
constructors come first, then parts are ordered by the fixed priority table
and finally by case-insensitive name. Python's sort is stable, so parts with
equal keys keep their original relative order.

The kind strategy ignores groups and orders whole declaration layers:
imports, variables and exported bindings, interfaces, enums, functions,
classes and finally the default export.
"""

import logging
from enum import Enum

from code_sorter.core.code_part import EXPORT_DEFAULT_GROUP, CodePart, PartKind

logger = logging.getLogger(__name__)

STRATEGIES = ["grouped", "kind"]

FALLBACK_PRIORITY = 8


class Visibility(Enum):
    """Declared visibility of a function or method"""

    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"
    UNSPECIFIED = "unspecified"


# Non-function kinds
KIND_PRIORITY = {
    PartKind.CONSTRUCTOR: 1,
    PartKind.IMPORT: 1,
    PartKind.VARIABLE: 2,
    PartKind.INTERFACE: 3,
    PartKind.ENUM: 4,
    PartKind.CLASS: 5,
    PartKind.EXPORT: 7,
    PartKind.EXPORT_DEFAULT: 99,
    PartKind.COMMENT: FALLBACK_PRIORITY,
    PartKind.BLANK: FALLBACK_PRIORITY,
}

# Declaration layers of the kind strategy; exported bindings sit with the
# variables and the default export is pinned last separately
KIND_LAYER = {
    PartKind.CONSTRUCTOR: 0,
    PartKind.IMPORT: 1,
    PartKind.VARIABLE: 2,
    PartKind.EXPORT: 2,
    PartKind.INTERFACE: 3,
    PartKind.ENUM: 4,
    PartKind.FUNCTION: 5,
    PartKind.CLASS: 6,
}
FALLBACK_LAYER = 7

# Functions and methods: (visibility, is_static) -> priority
FUNCTION_PRIORITY = {
    (Visibility.PUBLIC, True): 2,
    (Visibility.PUBLIC, False): 3,
    (Visibility.UNSPECIFIED, True): 4,
    (Visibility.UNSPECIFIED, False): 5,
    (Visibility.PROTECTED, True): 4,
    (Visibility.PROTECTED, False): 5,
    (Visibility.PRIVATE, True): 6,
    (Visibility.PRIVATE, False): 7,
}


def get_visibility(part: CodePart) -> Visibility:
    """Exported top-level functions rank like public methods"""
    if part.is_public or part.is_exported:
        return Visibility.PUBLIC
    if part.is_private:
        return Visibility.PRIVATE
    if part.is_protected:
        return Visibility.PROTECTED
    return Visibility.UNSPECIFIED


def get_priority(part: CodePart) -> int:
    """Get the sort priority of a part from the priority table"""
    if part.kind is PartKind.FUNCTION:
        return FUNCTION_PRIORITY.get(
            (get_visibility(part), part.is_static),
            FALLBACK_PRIORITY,
        )
    return KIND_PRIORITY.get(part.kind, FALLBACK_PRIORITY)


class Sorter:
    """Stable multi-key sorter for one scope of grouped parts"""

    def __init__(self, strategy: str = "grouped"):
        if strategy not in STRATEGIES:
            raise ValueError(f"Invalid ordering strategy: {strategy}")
        self.strategy = strategy

    def sort(self, parts: list[CodePart]) -> list[CodePart]:
        """Return the parts in canonical order

        Args:
            parts: Grouped parts of one scope (top level or one class body)

        Returns:
            New list with the parts sorted
        """
        if self.strategy == "kind":
            return sorted(parts, key=self._kind_key)
        return sorted(parts, key=self._grouped_key)

    def _grouped_key(self, part: CodePart) -> tuple:
        return (
            part.group_number or 0,
            part.kind is not PartKind.CONSTRUCTOR,
            get_priority(part),
            part.name.casefold(),
        )

    def _kind_key(self, part: CodePart) -> tuple:
        # Layers decide across groups; standalone comments stay on top and the
        # default export stays last. Functions keep their visibility tiers.
        return (
            part.group_number == EXPORT_DEFAULT_GROUP,
            part.kind is not PartKind.COMMENT,
            KIND_LAYER.get(part.kind, FALLBACK_LAYER),
            get_priority(part) if part.kind is PartKind.FUNCTION else 0,
            part.name.casefold(),
            part.group_number or 0,
        )
