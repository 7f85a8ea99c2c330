"""
Backup sessions for files rewritten by the sorter
"""

import json
import logging
import shutil
import tarfile
from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

SESSION_PREFIX = "session_"
METADATA_FILE = "session_metadata.json"
ARCHIVE_SUFFIX = ".tar.gz"


@dataclass
class BackupSession:
    """Information about a backup session"""

    session_id: str
    timestamp: str
    directory: Path
    files_backed_up: list[str] = field(default_factory=list)
    total_size: int = 0
    compressed: bool = False


def _relative_backup_path(file_path: Path) -> Path:
    """Map a source path to its location inside a session directory"""
    if file_path.is_absolute():
        return Path(*file_path.parts[1:]) if len(file_path.parts) > 1 else Path(
            file_path.name
        )
    return file_path


class BackupManager:
    """Copies files into timestamped sessions before they are rewritten"""

    def __init__(
        self,
        backup_dir: str | Path = ".backups",
        compression: bool = False,
        keep_sessions: int = 10,
    ):
        """
        Initialize backup manager

        Args:
            backup_dir: Directory to store backups
            compression: Whether to compress finalized sessions
            keep_sessions: Number of backup sessions to keep
        """
        self.backup_dir = Path(backup_dir)
        self.compression = compression
        self.keep_sessions = keep_sessions
        self.current_session: BackupSession | None = None
        self.backup_dir.mkdir(parents=True, exist_ok=True)

    def start_session(self, description: str | None = None) -> Path:
        """Start a new backup session"""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        session_id = f"{SESSION_PREFIX}{timestamp}"
        if description:
            session_id = f"{session_id}_{description}"
        session_dir = self.backup_dir / session_id
        session_dir.mkdir(parents=True, exist_ok=True)
        self.current_session = BackupSession(
            session_id=session_id, timestamp=timestamp, directory=session_dir
        )
        logger.info(f"Started backup session: {session_id}")
        return session_dir

    def backup_file(self, file_path: Path) -> Path | None:
        """Copy one file into the current session, starting one if needed"""
        if not self.current_session:
            self.start_session()

        if not file_path.exists():
            logger.warning(f"File does not exist: {file_path}")
            return None

        try:
            backup_path = self.current_session.directory / _relative_backup_path(
                file_path
            )
            backup_path.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(file_path, backup_path)

            self.current_session.files_backed_up.append(str(file_path))
            self.current_session.total_size += file_path.stat().st_size

            logger.debug(f"Backed up: {file_path} -> {backup_path}")
            return backup_path
        except OSError as e:
            logger.error(f"Error backing up {file_path}: {e}")
            return None

    def restore_file(
        self, original_path: Path, backup_path: Path | None = None
    ) -> bool:
        """Restore a file from an explicit backup or the current session"""
        if backup_path is None:
            backup_path = self.get_backup_for_file(original_path)

        if backup_path is None or not backup_path.exists():
            logger.warning(f"No backup found for {original_path}")
            return False

        try:
            shutil.copy2(backup_path, original_path)
            logger.info(f"Restored {original_path} from {backup_path}")
            return True
        except OSError as e:
            logger.error(f"Error restoring {original_path}: {e}")
            return False

    def finalize_session(self) -> Path | None:
        """Write session metadata, compress if requested and prune old sessions"""
        if not self.current_session:
            logger.warning("No active backup session")
            return None

        session = self.current_session
        try:
            metadata_file = session.directory / METADATA_FILE
            with open(metadata_file, "w") as f:
                json.dump(asdict(session), f, indent=2, default=str)

            result = session.directory
            if self.compression:
                archive_path = self._compress_session(session)
                shutil.rmtree(session.directory)
                session.compressed = True
                logger.info(f"Compressed backup session to {archive_path}")
                result = archive_path

            self._cleanup_old_sessions()
            logger.info(f"Finalized backup session: {session.session_id}")
            return result
        except (OSError, tarfile.TarError) as e:
            logger.error(f"Error finalizing backup session: {e}")
            return None
        finally:
            self.current_session = None

    def _compress_session(self, session: BackupSession) -> Path:
        archive_path = self.backup_dir / f"{session.session_id}{ARCHIVE_SUFFIX}"
        with tarfile.open(archive_path, "w:gz") as tar:
            tar.add(session.directory, arcname=session.session_id)
        return archive_path

    def _iter_sessions(self) -> list[Path]:
        sessions = []
        for item in self.backup_dir.iterdir():
            if not item.name.startswith(SESSION_PREFIX):
                continue
            if item.is_dir() or item.name.endswith(ARCHIVE_SUFFIX):
                sessions.append(item)
        return sessions

    def _cleanup_old_sessions(self) -> int:
        """Remove sessions beyond the keep_sessions limit, newest kept first"""
        sessions = sorted(self._iter_sessions(), key=lambda x: x.name, reverse=True)
        removed = 0
        for session in sessions[self.keep_sessions :]:
            if session.is_dir():
                shutil.rmtree(session)
            else:
                session.unlink()
            removed += 1
            logger.debug(f"Removed old backup: {session}")
        return removed

    def clean_sessions(self, keep: int | None = None) -> int:
        """Prune stored sessions, returning how many were removed"""
        if keep is not None:
            self.keep_sessions = keep
        return self._cleanup_old_sessions()

    def list_sessions(self) -> list[dict[str, Any]]:
        """List all backup sessions, newest first"""
        sessions = []

        for item in self._iter_sessions():
            if item.is_dir():
                metadata_file = item / METADATA_FILE
                if metadata_file.exists():
                    with open(metadata_file, "r") as f:
                        sessions.append(json.load(f))
                else:
                    sessions.append(
                        {
                            "session_id": item.name,
                            "directory": str(item),
                            "timestamp": item.name[len(SESSION_PREFIX) :],
                        }
                    )
            else:
                session_id = item.name[: -len(ARCHIVE_SUFFIX)]
                sessions.append(
                    {
                        "session_id": session_id,
                        "archive": str(item),
                        "compressed": True,
                        "timestamp": session_id[len(SESSION_PREFIX) :],
                    }
                )

        return sorted(sessions, key=lambda x: x.get("session_id", ""), reverse=True)

    def restore_session(self, session_id: str) -> bool:
        """Restore all files from a backup session"""
        session_path = self.backup_dir / session_id
        archive_path = self.backup_dir / f"{session_id}{ARCHIVE_SUFFIX}"
        extracted = False

        try:
            if archive_path.exists() and not session_path.exists():
                with tarfile.open(archive_path, "r:gz") as tar:
                    tar.extractall(self.backup_dir, filter="data")
                extracted = True

            if not session_path.exists():
                logger.error(f"Backup session not found: {session_id}")
                return False

            metadata_file = session_path / METADATA_FILE
            if not metadata_file.exists():
                logger.error(f"Backup session has no metadata: {session_id}")
                return False

            with open(metadata_file, "r") as f:
                metadata = json.load(f)

            for file_path in metadata.get("files_backed_up", []):
                original = Path(file_path)
                backup = session_path / _relative_backup_path(original)
                if backup.exists():
                    original.parent.mkdir(parents=True, exist_ok=True)
                    shutil.copy2(backup, original)
                    logger.info(f"Restored: {original}")

            return True
        except (OSError, ValueError, tarfile.TarError) as e:
            logger.error(f"Error restoring session {session_id}: {e}")
            return False
        finally:
            if extracted and session_path.exists():
                shutil.rmtree(session_path)

    def get_backup_for_file(
        self, file_path: Path, session_id: str | None = None
    ) -> Path | None:
        """Get backup path for a specific file"""
        if session_id:
            session_path = self.backup_dir / session_id
        elif self.current_session:
            session_path = self.current_session.directory
        else:
            return None

        backup_path = session_path / _relative_backup_path(file_path)
        return backup_path if backup_path.exists() else None
