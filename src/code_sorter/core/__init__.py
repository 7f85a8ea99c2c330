"""
Core modules for declaration sorting
"""

from .code_part import CodePart, PartKind
from .exceptions import CodeSorterError, ParseError
from .sorter import CodeSorter

__all__ = [
    # Classes
    "CodePart",
    "CodeSorter",
    "PartKind",
    # Errors
    "CodeSorterError",
    "ParseError",
]
