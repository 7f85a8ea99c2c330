"""
Sort command: reorders declarations of JS/TS files in place
"""

import difflib
import logging
from pathlib import Path

from code_sorter.core.backup_manager import BackupManager
from code_sorter.core.base_processor import (
    BaseProcessor,
    ProcessingStatus,
    ProcessResult,
)
from code_sorter.core.config import Config
from code_sorter.core.exceptions import ParseError
from code_sorter.core.parser import LineByLineParser
from code_sorter.core.path_analyzer import PathAnalyzer
from code_sorter.core.sorter import CodeSorter

logger = logging.getLogger(__name__)


def unified_diff(original: str, updated: str, file_name: str) -> str:
    """Build a unified diff between two versions of a file"""
    return "".join(
        difflib.unified_diff(
            original.splitlines(keepends=True),
            updated.splitlines(keepends=True),
            fromfile=f"a/{file_name}",
            tofile=f"b/{file_name}",
        )
    )


class SortCommand(BaseProcessor):
    """Command handler sorting the declarations of source files"""

    def __init__(self, config: Config | None = None):
        super().__init__(config or Config())
        self.sorter = CodeSorter(self.config.ordering)
        self.path_analyzer = PathAnalyzer(
            extensions=self.config.ordering.extensions,
            exclude_dirs=self.config.ordering.exclude_dirs,
        )
        self.backup_manager = None
        if self.config.backup.enabled and not self.is_read_only:
            self.backup_manager = BackupManager(
                backup_dir=self.config.backup.directory,
                compression=self.config.backup.compression,
                keep_sessions=self.config.backup.keep_sessions,
            )

    @property
    def is_read_only(self) -> bool:
        return self.config.dry_run or self.config.check

    def can_process(self, file_path: Path) -> bool:
        return self.path_analyzer.is_source_file(file_path)

    def validate_content(self, content: str) -> bool:
        """Check that sorted output still scans cleanly"""
        try:
            LineByLineParser().parse_contents(content)
        except ParseError as e:
            self.logger.error(f"Sorted output failed validation: {e}")
            return False
        return True

    def sort_text(self, content: str) -> str:
        """Sort one document held in memory"""
        return self.sorter.sort_content(content)

    def process_file(
        self,
        file_path: Path,
        show_diff: bool = False,
        **kwargs,
    ) -> ProcessResult:
        """
        Sort a single file

        The file is rewritten in one write, after a backup, only when its
        sorted form differs and neither dry run nor check mode is active.
        A parse error leaves the file untouched.

        Args:
            file_path: Path to file to process
            show_diff: Attach a unified diff to the result

        Returns:
            ProcessResult with operation details
        """
        try:
            original = self.read_file(file_path)
        except (OSError, UnicodeDecodeError) as e:
            self.logger.error(f"Error reading {file_path}: {e}")
            return ProcessResult(
                file_path=file_path,
                status=ProcessingStatus.ERROR,
                error_message=str(e),
            )

        try:
            ordered = self.sort_text(original)
        except ParseError as e:
            self.logger.error(f"Cannot sort {file_path}: {e}")
            return ProcessResult(
                file_path=file_path,
                status=ProcessingStatus.ERROR,
                error_message=str(e),
            )

        if ordered == original:
            self.logger.info(f"No changes needed for {file_path}")
            return ProcessResult(file_path=file_path, status=ProcessingStatus.NO_CHANGES)

        diff = unified_diff(original, ordered, file_path.name) if show_diff else None

        if self.is_read_only:
            self.logger.info(f"[DRY RUN] Would sort {file_path}")
            return ProcessResult(
                file_path=file_path,
                status=ProcessingStatus.NEEDS_SORTING,
                diff=diff,
            )

        if not self.validate_content(ordered):
            return ProcessResult(
                file_path=file_path,
                status=ProcessingStatus.ERROR,
                error_message="Sorted output failed validation",
            )

        backup_path = None
        if self.backup_manager:
            backup_path = self.backup_manager.backup_file(file_path)

        if not self.write_file(file_path, ordered):
            return ProcessResult(
                file_path=file_path,
                status=ProcessingStatus.ERROR,
                error_message=f"Could not write {file_path}",
                backup_path=backup_path,
            )

        self.logger.info(f"Sorted {file_path}")
        return ProcessResult(
            file_path=file_path,
            status=ProcessingStatus.SUCCESS,
            backup_path=backup_path,
            diff=diff,
        )

    def execute(
        self,
        paths: list[Path],
        recursive: bool = True,
        show_diff: bool = False,
    ) -> list[ProcessResult]:
        """
        Sort every supported file under the given paths

        Args:
            paths: Files or directories to process
            recursive: Process directories recursively
            show_diff: Attach unified diffs to changed results

        Returns:
            One ProcessResult per discovered file
        """
        files = self.path_analyzer.find_source_files(paths, recursive=recursive)
        if not files:
            logger.warning("No supported source files found")
            return []

        if self.backup_manager:
            self.backup_manager.start_session("sort")

        try:
            results = self.process_batch(files, show_diff=show_diff)
        finally:
            if self.backup_manager:
                self.backup_manager.finalize_session()

        changed = sum(1 for r in results if r.is_changed)
        errors = sum(1 for r in results if r.status == ProcessingStatus.ERROR)
        logger.info(
            f"Processed {len(results)} files: {changed} changed, {errors} errors"
        )
        return results
