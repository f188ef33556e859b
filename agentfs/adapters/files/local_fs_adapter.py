"""
Local file system adapter implementation for file operations.
"""

import logging
import os
import tempfile

from typing_extensions import override

from agentfs.entities.file import File
from agentfs.exceptions import FileRepositoryError
from agentfs.ports.files.file_repository_port import FileRepositoryPort


class LocalFileSystemAdapter(FileRepositoryPort):
    """Local file system implementation of the file repository port."""

    def __init__(self, logger: logging.Logger | None = None):
        """
        Initialize the adapter with an optional logger.

        Args:
            logger: Logger instance to use for logging. If None, a default logger will be created.
        """
        self._logger: logging.Logger = logger or logging.getLogger(__name__)

    def _validate_directory(self, directory: str) -> None:
        """
        Validate that a directory exists and is indeed a directory.

        Args:
            directory: Path to the directory to validate

        Raises:
            FileRepositoryError: If directory does not exist or is not a directory
        """
        if not os.path.exists(directory):
            raise FileRepositoryError(f"Directory does not exist: {directory}")

        if not os.path.isdir(directory):
            raise FileRepositoryError(f"Path is not a directory: {directory}")

    def _create_file_entities(self, file_paths: list[str]) -> list[File]:
        """
        Create File entities from a list of paths.

        Args:
            file_paths: List of paths to convert to File entities

        Returns:
            List of File entities
        """
        files: list[File] = []
        for file_path in file_paths:
            try:
                files.append(File(file_path))
            except FileRepositoryError as e:
                # Entry vanished between listing and stat; keep the others
                self._logger.warning(f"Could not process file {file_path}: {e}")
                continue

        return files

    @override
    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    @override
    def is_dir(self, path: str) -> bool:
        return os.path.isdir(path)

    @override
    def read_text(self, path: str) -> str:
        try:
            with open(path, "r", encoding="utf-8", newline="") as f:
                return f.read()
        except UnicodeDecodeError:
            raise FileRepositoryError(f"File is not valid UTF-8 text: {path}")
        except OSError as e:
            raise FileRepositoryError(f"Failed to read {path}: {e}")

    @override
    def write_text(self, path: str, content: str) -> File:
        """
        Write through a temporary file in the target directory, then rename.

        Readers see either the previous content or the new one, never a
        partial write.
        """
        directory = os.path.dirname(path) or "."
        tmp_path = None
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                prefix=f".{os.path.basename(path)}.", suffix=".tmp", dir=directory
            )
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(content)
            if os.path.exists(path):
                os.chmod(tmp_path, os.stat(path).st_mode & 0o7777)
            else:
                # mkstemp creates 0600 files
                os.chmod(tmp_path, 0o644)
            os.replace(tmp_path, path)
            tmp_path = None
            self._logger.debug(f"Wrote {len(content)} characters to {path}")
            return File(path)
        except OSError as e:
            raise FileRepositoryError(f"Failed to write {path}: {e}")
        finally:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)

    @override
    def delete(self, path: str) -> None:
        try:
            os.remove(path)
        except OSError as e:
            raise FileRepositoryError(f"Failed to delete {path}: {e}")

    @override
    def mkdir(self, path: str, exist_ok: bool = True) -> File:
        try:
            os.makedirs(path, exist_ok=exist_ok)
            return File(path)
        except OSError as e:
            raise FileRepositoryError(f"Failed to create directory {path}: {e}")

    @override
    def list_dir(self, directory: str) -> list[File]:
        """
        List all entries in a directory.

        Args:
            directory: Path to the directory to list entries from

        Returns:
            List of File entities sorted by name

        Raises:
            FileRepositoryError: If listing fails
        """
        try:
            self._validate_directory(directory)

            file_paths: list[str] = [
                os.path.join(directory, item) for item in sorted(os.listdir(directory))
            ]
            return self._create_file_entities(file_paths)

        except FileRepositoryError:
            raise
        except OSError as e:
            raise FileRepositoryError(f"Failed to list files in {directory}: {str(e)}")

    @override
    def stat(self, path: str) -> File:
        return File(path)
