"""
Code sorter pipeline: parse, group, sort and reassemble one document.
"""

import logging

from code_sorter.core.assembler import Reassembler
from code_sorter.core.config import OrderingConfig
from code_sorter.core.grouping import Grouper
from code_sorter.core.ordering import Sorter
from code_sorter.core.parser import LineByLineParser

logger = logging.getLogger(__name__)


class CodeSorter:
    """Sorts the declarations of a source document.

    The pipeline holds no per-document state, so one instance can sort any
    number of documents. A document is transformed completely or not at all:
    any lexical fault raises ParseError before output is produced.
    """

    def __init__(self, config: OrderingConfig | None = None):
        if config is None:
            config = OrderingConfig()

        self.config = config
        self.parser = LineByLineParser()
        self.sorter = Sorter(strategy=config.strategy)
        self.grouper = Grouper(
            sorter=self.sorter,
            sort_class_members=config.sort_class_members,
        )
        self.reassembler = Reassembler()

    def sort_content(self, content: str) -> str:
        """Sort the content of one document

        Args:
            content: Full document text

        Returns:
            Sorted document text ending with a single newline

        Raises:
            ParseError: If the document has an unrecoverable lexical fault
        """
        parts = self.parser.parse_contents(content)
        grouped = self.grouper.group(parts)
        ordered = self.sorter.sort(grouped)
        logger.debug(
            f"Sorted {len(ordered)} parts using the '{self.sorter.strategy}' strategy"
        )
        return self.reassembler.render(ordered, is_root=True)
