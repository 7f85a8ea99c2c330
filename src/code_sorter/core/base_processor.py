"""
Shared result types and the processor base for commands working on files
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any


class ProcessingStatus(Enum):
    """Outcome of processing one file"""

    SUCCESS = "success"
    ERROR = "error"
    SKIPPED = "skipped"
    NO_CHANGES = "no_changes"
    NEEDS_SORTING = "needs_sorting"


# Console line per status; errors show their message instead
STATUS_LINES = {
    ProcessingStatus.SUCCESS: "✓ {name}: Sorted",
    ProcessingStatus.NEEDS_SORTING: "! {name}: Would be sorted",
    ProcessingStatus.NO_CHANGES: "= {name}: No changes needed",
    ProcessingStatus.SKIPPED: "⊝ {name}: Skipped",
}


@dataclass
class ProcessResult:
    """What happened to one file"""

    file_path: Path
    status: ProcessingStatus
    error_message: str | None = None
    backup_path: Path | None = None
    diff: str | None = None

    @property
    def is_success(self) -> bool:
        return self.status not in (ProcessingStatus.ERROR, ProcessingStatus.SKIPPED)

    @property
    def is_changed(self) -> bool:
        """True when the file differs from its sorted form"""
        return self.status in (ProcessingStatus.SUCCESS, ProcessingStatus.NEEDS_SORTING)

    def __str__(self) -> str:
        template = STATUS_LINES.get(self.status)
        if template is None:
            return f"✗ {self.file_path.name}: {self.error_message}"
        return template.format(name=self.file_path.name)


class BaseProcessor(ABC):
    """Runs one command over a list of files, one result per file.

    Subclasses decide which files they accept, how a single file is handled
    and how rewritten content is checked before it reaches the disk.
    """

    def __init__(self, config: Any | None = None):
        self.config = config
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def can_process(self, file_path: Path) -> bool:
        pass

    @abstractmethod
    def process_file(self, file_path: Path, **kwargs) -> ProcessResult:
        pass

    @abstractmethod
    def validate_content(self, content: str) -> bool:
        """Check content that is about to replace a file"""
        pass

    def read_file(self, file_path: Path) -> str:
        return file_path.read_text(encoding="utf-8")

    def write_file(self, file_path: Path, content: str) -> bool:
        """Replace a file in one write, returning False when that fails"""
        try:
            file_path.write_text(content, encoding="utf-8")
        except OSError as e:
            self.logger.error(f"Error writing {file_path}: {e}")
            return False
        return True

    def process_batch(self, file_paths: list[Path], **kwargs) -> list[ProcessResult]:
        """Process files in order; unsupported ones are reported as skipped"""
        results = []
        for file_path in file_paths:
            if not self.can_process(file_path):
                results.append(
                    ProcessResult(
                        file_path=file_path,
                        status=ProcessingStatus.SKIPPED,
                        error_message="Unsupported file type",
                    )
                )
                continue
            results.append(self.process_file(file_path, **kwargs))
        return results
