"""
File repository port interface defining the contract for file operations.
"""

from abc import ABC, abstractmethod

from agentfs.entities.file import File


class FileRepositoryPort(ABC):
    """Port interface for file repository operations.

    All paths are absolute; sandboxing happens before the repository is called.
    """

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Return True if a file or directory exists at ``path``."""
        pass

    @abstractmethod
    def is_dir(self, path: str) -> bool:
        """Return True if ``path`` is an existing directory."""
        pass

    @abstractmethod
    def read_text(self, path: str) -> str:
        """
        Read a UTF-8 text file exactly, without newline translation.

        Args:
            path: Absolute path to the file

        Returns:
            File content

        Raises:
            FileRepositoryError: If reading fails
        """
        pass

    @abstractmethod
    def write_text(self, path: str, content: str) -> File:
        """
        Create or overwrite a text file with UTF-8 content.

        Missing parent directories are created.

        Args:
            path: Absolute path to the file to write
            content: Text content to write, stored byte-for-byte

        Returns:
            A File entity representing the written file

        Raises:
            FileRepositoryError: If writing fails
        """
        pass

    @abstractmethod
    def delete(self, path: str) -> None:
        """
        Remove a file.

        Raises:
            FileRepositoryError: If removal fails
        """
        pass

    @abstractmethod
    def mkdir(self, path: str, exist_ok: bool = True) -> File:
        """
        Create a directory at the given path.

        Args:
            path: Directory path to create
            exist_ok: If True, do not raise if the directory already exists

        Returns:
            A File entity representing the created directory
        """
        pass

    @abstractmethod
    def list_dir(self, directory: str) -> list[File]:
        """
        List the entries (files and directories) of a directory, sorted by name.

        Args:
            directory: Path to the directory to list

        Returns:
            List of File entities

        Raises:
            FileRepositoryError: If listing fails
        """
        pass

    @abstractmethod
    def stat(self, path: str) -> File:
        """
        Describe an existing entry.

        Raises:
            FileRepositoryError: If the entry does not exist
        """
        pass
