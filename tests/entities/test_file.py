"""
Tests for the File entity.
"""

import os

import pytest

from agentfs.entities.file import File
from agentfs.exceptions import FileRepositoryError


class TestFile:
    """Test cases for the File entity."""

    def test_file_initialization_success(self, temp_directory: str):
        """Test successful File initialization with a valid file."""
        test_file = os.path.join(temp_directory, "test1.txt")
        file_entity = File(test_file)

        assert file_entity.path == os.path.abspath(test_file)
        assert file_entity.name == "test1.txt"
        assert file_entity.size > 0
        assert file_entity.file_type == "txt"
        assert not file_entity.is_dir

    def test_directory_entry(self, temp_directory: str):
        entry = File(os.path.join(temp_directory, "subdir"))

        assert entry.is_dir
        assert entry.size == 0
        assert entry.file_type == "directory"

    def test_file_initialization_with_nonexistent_file(self):
        with pytest.raises(FileRepositoryError, match="File does not exist"):
            File("/nonexistent/path/file.txt")

    def test_file_initialization_with_empty_path(self):
        with pytest.raises(
            FileRepositoryError, match="Path must be a non-empty string"
        ):
            File("")

    def test_get_details(self, temp_directory: str):
        """Test getting file details."""
        test_file = os.path.join(temp_directory, "test2.py")
        details = File(test_file).get_details()

        assert details["path"] == os.path.abspath(test_file)
        assert details["name"] == "test2.py"
        assert details["type"] == "py"
        assert details["is_file"] is True
        assert details["is_directory"] is False
        assert "T" in details["modified"]

    def test_no_extension(self, temp_directory: str):
        test_file = os.path.join(temp_directory, "Makefile")
        with open(test_file, "w") as f:
            f.write("all:")
        assert File(test_file).file_type == "no_extension"

    def test_string_representation(self, temp_directory: str):
        file_entity = File(os.path.join(temp_directory, "test1.txt"))
        assert "test1.txt" in str(file_entity)
        assert repr(file_entity).startswith("File(path=")
