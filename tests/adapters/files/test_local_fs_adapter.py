"""
Tests for the LocalFileSystemAdapter.
"""

import os
import stat
from unittest.mock import patch

import pytest

from agentfs.adapters.files.local_fs_adapter import LocalFileSystemAdapter
from agentfs.entities.file import File
from agentfs.exceptions import FileRepositoryError


class TestLocalFileSystemAdapter:
    """Test cases for the LocalFileSystemAdapter."""

    def test_list_dir_success(self, temp_directory, mock_logger):
        """Test listing returns files and directories sorted by name."""
        adapter = LocalFileSystemAdapter(mock_logger)
        entries = adapter.list_dir(temp_directory)

        assert [e.name for e in entries] == [
            "node_modules",
            "subdir",
            "test1.txt",
            "test2.py",
        ]
        assert all(isinstance(e, File) for e in entries)
        assert entries[1].is_dir

    def test_list_dir_nonexistent_directory(self, mock_logger):
        adapter = LocalFileSystemAdapter(mock_logger)

        with pytest.raises(FileRepositoryError, match="Directory does not exist"):
            adapter.list_dir("/nonexistent/directory")

    def test_list_dir_with_file_path(self, temp_directory, mock_logger):
        test_file = os.path.join(temp_directory, "test1.txt")
        adapter = LocalFileSystemAdapter(mock_logger)

        with pytest.raises(FileRepositoryError, match="Path is not a directory"):
            adapter.list_dir(test_file)

    def test_list_dir_os_error(self, temp_directory, mock_logger):
        adapter = LocalFileSystemAdapter(mock_logger)

        with patch("os.listdir", side_effect=PermissionError("Permission denied")):
            with pytest.raises(FileRepositoryError, match="Failed to list files"):
                adapter.list_dir(temp_directory)

    def test_write_creates_parent_directories(self, temp_directory, mock_logger):
        adapter = LocalFileSystemAdapter(mock_logger)
        target = os.path.join(temp_directory, "a", "b", "c.txt")

        written = adapter.write_text(target, "hello")

        assert written.name == "c.txt"
        assert adapter.read_text(target) == "hello"

    def test_write_preserves_line_endings_exactly(self, temp_directory, mock_logger):
        adapter = LocalFileSystemAdapter(mock_logger)
        target = os.path.join(temp_directory, "crlf.txt")
        content = "one\r\ntwo\r\n\n"

        adapter.write_text(target, content)

        with open(target, "rb") as f:
            assert f.read() == content.encode("utf-8")
        assert adapter.read_text(target) == content

    def test_write_leaves_no_temporary_files(self, temp_directory, mock_logger):
        adapter = LocalFileSystemAdapter(mock_logger)
        adapter.write_text(os.path.join(temp_directory, "test1.txt"), "replaced")

        leftovers = [n for n in os.listdir(temp_directory) if n.endswith(".tmp")]
        assert leftovers == []

    def test_new_file_is_world_readable(self, temp_directory, mock_logger):
        adapter = LocalFileSystemAdapter(mock_logger)
        target = os.path.join(temp_directory, "new.txt")
        adapter.write_text(target, "x")

        assert os.stat(target).st_mode & stat.S_IROTH

    def test_write_failure_is_wrapped(self, temp_directory, mock_logger):
        adapter = LocalFileSystemAdapter(mock_logger)

        with patch("os.replace", side_effect=OSError("disk full")):
            with pytest.raises(FileRepositoryError, match="Failed to write"):
                adapter.write_text(os.path.join(temp_directory, "x.txt"), "x")

    def test_read_missing_file(self, temp_directory, mock_logger):
        adapter = LocalFileSystemAdapter(mock_logger)

        with pytest.raises(FileRepositoryError, match="Failed to read"):
            adapter.read_text(os.path.join(temp_directory, "missing.txt"))

    def test_read_binary_file(self, temp_directory, mock_logger):
        adapter = LocalFileSystemAdapter(mock_logger)
        target = os.path.join(temp_directory, "blob.bin")
        with open(target, "wb") as f:
            f.write(b"\xff\xfe\x00\x81")

        with pytest.raises(FileRepositoryError, match="not valid UTF-8"):
            adapter.read_text(target)

    def test_delete(self, temp_directory, mock_logger):
        adapter = LocalFileSystemAdapter(mock_logger)
        target = os.path.join(temp_directory, "test1.txt")

        adapter.delete(target)

        assert not adapter.exists(target)
        with pytest.raises(FileRepositoryError, match="Failed to delete"):
            adapter.delete(target)

    def test_mkdir_and_stat(self, temp_directory, mock_logger):
        adapter = LocalFileSystemAdapter(mock_logger)
        target = os.path.join(temp_directory, "x", "y")

        created = adapter.mkdir(target)

        assert created.is_dir
        assert adapter.is_dir(target)
        details = adapter.stat(os.path.join(temp_directory, "test1.txt")).get_details()
        assert details["size"] == len("This is a test file.")
        assert details["is_file"] is True

    def test_logger_usage(self, temp_directory, mock_logger):
        """Test that the adapter uses the provided logger."""
        adapter = LocalFileSystemAdapter(mock_logger)
        assert adapter._logger == mock_logger

    def test_default_logger_creation(self):
        """Test that adapter creates default logger when none provided."""
        adapter = LocalFileSystemAdapter()
        assert adapter._logger is not None
        assert adapter._logger.name == "agentfs.adapters.files.local_fs_adapter"
