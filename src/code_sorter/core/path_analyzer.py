"""
Path analysis and source file discovery.

Resolves the paths given on the command line into the list of source files
the sorter should visit, skipping excluded directories such as node_modules.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from code_sorter.core.config import SUPPORTED_EXTENSIONS

logger = logging.getLogger(__name__)

DEFAULT_EXCLUDE_DIRS = ["node_modules", ".git", "dist", "build"]


class PathType(Enum):
    """Enumeration of path types that can be detected"""

    SOURCE_FILE = "source_file"
    OTHER_FILE = "other_file"
    SOURCE_DIR = "source_directory"
    EMPTY_DIR = "empty_directory"
    UNKNOWN = "unknown"


@dataclass
class PathAnalysis:
    """Result of path analysis"""

    path: Path
    path_type: PathType
    source_files: list[Path] = field(default_factory=list)
    description: str = ""

    @property
    def total_files(self) -> int:
        return len(self.source_files)


class PathAnalyzer:
    """Finds sortable source files under files and directories"""

    def __init__(
        self,
        extensions: list[str] | None = None,
        exclude_dirs: list[str] | None = None,
    ):
        self.extensions = {
            ext.lower() for ext in (extensions or SUPPORTED_EXTENSIONS)
        }
        self.exclude_dirs = set(
            DEFAULT_EXCLUDE_DIRS if exclude_dirs is None else exclude_dirs
        )

    def is_source_file(self, path: Path) -> bool:
        """Check if a path has one of the configured extensions"""
        return path.suffix.lower() in self.extensions

    def analyze(self, path: Path, recursive: bool = True) -> PathAnalysis:
        """
        Analyze a path and collect the source files it designates.

        Args:
            path: File or directory path to analyze
            recursive: Descend into subdirectories

        Returns:
            PathAnalysis object
        """
        if not path.exists():
            return PathAnalysis(
                path=path,
                path_type=PathType.UNKNOWN,
                description=f"Path does not exist: {path}",
            )

        if path.is_file():
            if self.is_source_file(path):
                return PathAnalysis(
                    path=path,
                    path_type=PathType.SOURCE_FILE,
                    source_files=[path],
                    description="Source file",
                )
            return PathAnalysis(
                path=path,
                path_type=PathType.OTHER_FILE,
                description=f"Unsupported file type ({path.suffix})",
            )

        source_files = self._collect(path, recursive)
        if not source_files:
            return PathAnalysis(
                path=path,
                path_type=PathType.EMPTY_DIR,
                description="Directory without source files",
            )
        return PathAnalysis(
            path=path,
            path_type=PathType.SOURCE_DIR,
            source_files=source_files,
            description=f"Directory with {len(source_files)} source files",
        )

    def _collect(self, directory: Path, recursive: bool) -> list[Path]:
        candidates = directory.rglob("*") if recursive else directory.glob("*")
        files = []
        for file_path in candidates:
            if not file_path.is_file() or not self.is_source_file(file_path):
                continue
            relative = file_path.relative_to(directory)
            if any(part in self.exclude_dirs for part in relative.parts[:-1]):
                continue
            files.append(file_path)
        return sorted(files)

    def find_source_files(
        self, paths: list[Path], recursive: bool = True
    ) -> list[Path]:
        """
        Resolve paths into a sorted, de-duplicated list of source files.

        Explicit files are kept when their extension is supported; missing
        paths and unsupported files are logged and skipped.
        """
        found: list[Path] = []
        seen: set[Path] = set()

        for path in paths:
            analysis = self.analyze(Path(path), recursive=recursive)
            if analysis.path_type in (PathType.UNKNOWN, PathType.OTHER_FILE):
                logger.warning(analysis.description)
                continue
            logger.debug(f"{analysis.path}: {analysis.description}")
            for file_path in analysis.source_files:
                resolved = file_path.resolve()
                if resolved not in seen:
                    seen.add(resolved)
                    found.append(file_path)

        return found


def find_source_files(
    paths: list[Path],
    extensions: list[str] | None = None,
    exclude_dirs: list[str] | None = None,
    recursive: bool = True,
) -> list[Path]:
    """Find source files under the given paths"""
    return PathAnalyzer(extensions, exclude_dirs).find_source_files(
        paths, recursive=recursive
    )
