"""
Exceptions raised by the code sorter
"""


class CodeSorterError(Exception):
    """Base class for all code sorter errors"""


class ParseError(CodeSorterError):
    """Fatal lexical fault found while parsing a document

    Attributes:
        line_number: 1-based line where the fault was detected or where the
            faulty construct starts
        description: Human readable description of the expected vs found token
    """

    def __init__(self, description: str, line_number: int):
        self.description = description
        self.line_number = line_number
        super().__init__(description)

    def __str__(self) -> str:
        return self.description
