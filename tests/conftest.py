"""
Pytest configuration and shared fixtures.
"""

import os
import tempfile
from typing import Any, Callable, Mapping, Optional, Union
from unittest.mock import MagicMock

import pytest

from agentfs.adapters.files.local_fs_adapter import LocalFileSystemAdapter
from agentfs.container import DependencyContainer
from agentfs.entities.mutation import MutationRequest
from agentfs.entities.plan import StepContext
from agentfs.ports.planning.plan_author_port import PlanAuthorPort
from agentfs.ports.planning.step_interpreter_port import StepInterpreterPort
from agentfs.use_cases.files.mutation_engine import MutationEngine


class FakeInterpreter(StepInterpreterPort):
    """
    Scripted interpreter: maps step text to requests (or to an exception).

    Records every call so tests can assert which steps were interpreted.
    """

    def __init__(self, script: Optional[dict[str, Union[list[MutationRequest], Exception]]] = None):
        self.script = dict(script or {})
        self.calls: list[tuple[str, StepContext]] = []

    def interpret(self, step: str, context: StepContext) -> list[MutationRequest]:
        self.calls.append((step, context))
        outcome = self.script.get(step, [])
        if isinstance(outcome, Exception):
            raise outcome
        return list(outcome)


class FakeAuthor(PlanAuthorPort):
    """Plan author returning canned content."""

    def __init__(self, content: Union[str, Callable[[str], str]]):
        self.content = content
        self.calls: list[tuple[str, Mapping[str, Any]]] = []

    def draft(self, task: str, context: Mapping[str, Any]) -> str:
        self.calls.append((task, dict(context)))
        return self.content(task) if callable(self.content) else self.content


@pytest.fixture
def temp_directory():
    """
    Create a temporary workspace for testing file operations.

    Returns:
        Path to the temporary directory
    """
    with tempfile.TemporaryDirectory() as temp_dir:
        # Create some test files
        test_file1 = os.path.join(temp_dir, "test1.txt")
        test_file2 = os.path.join(temp_dir, "test2.py")

        with open(test_file1, "w") as f:
            f.write("This is a test file.")

        with open(test_file2, "w") as f:
            f.write("print('Hello, world!')")

        # Create a subdirectory with a file
        subdir = os.path.join(temp_dir, "subdir")
        os.makedirs(subdir)

        test_file3 = os.path.join(subdir, "test3.md")
        with open(test_file3, "w") as f:
            f.write("# Test Markdown\n\nThis is a test.")

        # Dependency directory that listings hide by default
        deps = os.path.join(temp_dir, "node_modules")
        os.makedirs(deps)
        with open(os.path.join(deps, "lib.js"), "w") as f:
            f.write("module.exports = {};")

        # Resolve symlinked temp roots (macOS /var -> /private/var)
        yield os.path.realpath(temp_dir)


@pytest.fixture
def mock_logger():
    """
    Create a mock logger for testing.

    Returns:
        Mock logger instance
    """
    return MagicMock()


@pytest.fixture
def file_repository(mock_logger):
    return LocalFileSystemAdapter(mock_logger)


@pytest.fixture
def engine(temp_directory, file_repository, mock_logger):
    """
    Mutation engine sandboxed to the temporary workspace.

    Returns:
        MutationEngine instance
    """
    return MutationEngine(file_repository, temp_directory, logger=mock_logger)


@pytest.fixture
def fake_interpreter():
    return FakeInterpreter()


@pytest.fixture
def dependency_container(mock_logger, temp_directory, monkeypatch):
    """
    Create a dependency container with mocked dependencies for testing.

    Returns:
        DependencyContainer instance with mocked logger, rooted at the temp workspace
    """
    from agentfs.config.settings import Settings

    monkeypatch.setenv("AGENTFS_WORKSPACE_ROOT", temp_directory)
    container = DependencyContainer(Settings())
    # Replace the logger with our mock
    container._logger = mock_logger
    return container
