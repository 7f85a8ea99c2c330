"""
Unit tests for backup manager
"""

import json

from code_sorter.core.backup_manager import BackupManager


class TestBackupManager:
    """Test backup manager functionality"""

    def test_initialization(self, tmp_path):
        """Test backup manager initialization"""
        backup_dir = tmp_path / "backups"
        manager = BackupManager(backup_dir=str(backup_dir))

        assert manager.backup_dir == backup_dir
        assert backup_dir.exists()
        assert manager.current_session is None

    def test_start_session(self, tmp_path):
        """Test starting a backup session"""
        manager = BackupManager(backup_dir=tmp_path / "backups")

        session_dir = manager.start_session("sort")

        assert session_dir.exists()
        assert manager.current_session.session_id.startswith("session_")
        assert manager.current_session.session_id.endswith("_sort")
        assert manager.current_session.directory == session_dir

    def test_backup_file(self, tmp_path):
        """Test backing up a file"""
        manager = BackupManager(backup_dir=tmp_path / "backups")
        source = tmp_path / "app.ts"
        source.write_text("const a = 1;\n")

        manager.start_session()
        backup_path = manager.backup_file(source)

        assert backup_path.read_text() == "const a = 1;\n"
        assert str(source) in manager.current_session.files_backed_up
        assert manager.current_session.total_size == len("const a = 1;\n")

    def test_backup_starts_session_on_demand(self, tmp_path):
        manager = BackupManager(backup_dir=tmp_path / "backups")
        source = tmp_path / "app.ts"
        source.write_text("x")

        assert manager.backup_file(source) is not None
        assert manager.current_session is not None

    def test_backup_nonexistent_file(self, tmp_path):
        """Test backing up a non-existent file"""
        manager = BackupManager(backup_dir=tmp_path / "backups")
        manager.start_session()

        assert manager.backup_file(tmp_path / "missing.ts") is None

    def test_restore_file(self, tmp_path):
        """Test restoring a file from backup"""
        manager = BackupManager(backup_dir=tmp_path / "backups")
        source = tmp_path / "restore.ts"
        source.write_text("original")

        manager.start_session()
        backup_path = manager.backup_file(source)
        source.write_text("sorted")

        assert manager.restore_file(source, backup_path) is True
        assert source.read_text() == "original"

    def test_restore_from_current_session(self, tmp_path):
        """Test restoring from current session without specific path"""
        manager = BackupManager(backup_dir=tmp_path / "backups")
        source = tmp_path / "session_restore.ts"
        source.write_text("session content")

        manager.start_session()
        manager.backup_file(source)
        source.write_text("changed")

        assert manager.restore_file(source) is True
        assert source.read_text() == "session content"

    def test_restore_without_backup(self, tmp_path):
        manager = BackupManager(backup_dir=tmp_path / "backups")
        source = tmp_path / "untracked.ts"
        source.write_text("x")

        assert manager.restore_file(source) is False

    def test_finalize_session(self, tmp_path):
        """Test finalizing a backup session"""
        manager = BackupManager(backup_dir=tmp_path / "backups")
        source = tmp_path / "final.ts"
        source.write_text("content")

        manager.start_session()
        manager.backup_file(source)
        session_id = manager.current_session.session_id

        result = manager.finalize_session()

        assert manager.current_session is None
        with open(result / "session_metadata.json") as f:
            metadata = json.load(f)
        assert metadata["session_id"] == session_id
        assert metadata["files_backed_up"] == [str(source)]

    def test_finalize_without_session(self, tmp_path):
        manager = BackupManager(backup_dir=tmp_path / "backups")

        assert manager.finalize_session() is None

    def test_session_compression(self, tmp_path):
        """Test session compression"""
        manager = BackupManager(backup_dir=tmp_path / "backups", compression=True)
        source = tmp_path / "compress.ts"
        source.write_text("compress me")

        manager.start_session("compress")
        manager.backup_file(source)
        session_id = manager.current_session.session_id

        result = manager.finalize_session()

        assert result.name == f"{session_id}.tar.gz"
        assert result.exists()
        assert not (tmp_path / "backups" / session_id).exists()

    def test_list_sessions(self, tmp_path):
        """Test listing backup sessions"""
        manager = BackupManager(backup_dir=tmp_path / "backups")

        for i in range(3):
            manager.start_session(f"run{i}")
            source = tmp_path / f"file_{i}.ts"
            source.write_text(f"const v = {i};")
            manager.backup_file(source)
            manager.finalize_session()

        sessions = manager.list_sessions()

        assert len(sessions) == 3
        assert sessions[0]["session_id"].endswith("_run2")
        assert all(len(s["files_backed_up"]) == 1 for s in sessions)

    def test_list_compressed_sessions(self, tmp_path):
        manager = BackupManager(backup_dir=tmp_path / "backups", compression=True)
        source = tmp_path / "a.ts"
        source.write_text("a")

        manager.start_session()
        manager.backup_file(source)
        manager.finalize_session()

        sessions = manager.list_sessions()

        assert len(sessions) == 1
        assert sessions[0]["compressed"] is True

    def test_cleanup_old_sessions(self, tmp_path):
        """Test cleaning up old sessions"""
        manager = BackupManager(backup_dir=tmp_path / "backups", keep_sessions=2)

        for i in range(5):
            manager.start_session(f"old{i}")
            source = tmp_path / f"old_{i}.ts"
            source.write_text(f"old content {i}")
            manager.backup_file(source)
            manager.finalize_session()

        # Cleanup happens on finalize, only the 2 most recent remain
        sessions = manager.list_sessions()
        assert len(sessions) == 2
        assert sessions[-1]["session_id"].endswith("_old3")

    def test_clean_sessions(self, tmp_path):
        manager = BackupManager(backup_dir=tmp_path / "backups")
        for i in range(3):
            manager.start_session(f"s{i}")
            manager.finalize_session()

        removed = manager.clean_sessions(keep=1)

        assert removed == 2
        assert len(manager.list_sessions()) == 1

    def test_restore_session(self, tmp_path):
        """Test restoring an entire session"""
        manager = BackupManager(backup_dir=tmp_path / "backups")
        files = []
        for i in range(3):
            source = tmp_path / f"restore_{i}.ts"
            source.write_text(f"original {i}")
            files.append(source)

        manager.start_session("full_restore")
        for source in files:
            manager.backup_file(source)
        session_id = manager.current_session.session_id
        manager.finalize_session()

        for i, source in enumerate(files):
            source.write_text(f"modified {i}")

        assert manager.restore_session(session_id) is True
        for i, source in enumerate(files):
            assert source.read_text() == f"original {i}"

    def test_restore_compressed_session(self, tmp_path):
        manager = BackupManager(backup_dir=tmp_path / "backups", compression=True)
        source = tmp_path / "packed.ts"
        source.write_text("original")

        manager.start_session()
        manager.backup_file(source)
        session_id = manager.current_session.session_id
        manager.finalize_session()
        source.write_text("modified")

        assert manager.restore_session(session_id) is True
        assert source.read_text() == "original"
        # The extracted copy is cleaned up, the archive stays
        assert not (tmp_path / "backups" / session_id).exists()
        assert (tmp_path / "backups" / f"{session_id}.tar.gz").exists()

    def test_restore_unknown_session(self, tmp_path):
        manager = BackupManager(backup_dir=tmp_path / "backups")

        assert manager.restore_session("session_missing") is False

    def test_multiple_sessions_no_interference(self, tmp_path):
        """Test that multiple sessions don't interfere"""
        manager = BackupManager(backup_dir=tmp_path / "backups")
        source = tmp_path / "multi.ts"

        source.write_text("version 1")
        manager.start_session("first")
        manager.backup_file(source)
        first_id = manager.current_session.session_id
        manager.finalize_session()

        source.write_text("version 2")
        manager.start_session("second")
        manager.backup_file(source)
        manager.finalize_session()

        manager.restore_session(first_id)
        assert source.read_text() == "version 1"
