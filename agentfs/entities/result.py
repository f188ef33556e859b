"""
Result entities returned by the mutation engine.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from agentfs.utils.diff import DiffLine


class ErrorKind(str, Enum):
    """Failure taxonomy reported by engine and plan results."""

    OUT_OF_WORKSPACE = "out_of_workspace"
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    PATTERN_NOT_FOUND = "pattern_not_found"
    NOTHING_TO_UNDO = "nothing_to_undo"
    NOTHING_TO_REDO = "nothing_to_redo"
    INTERPRETER_FAILURE = "interpreter_failure"
    FILESYSTEM_FAILURE = "filesystem_failure"
    UNKNOWN_ACTION = "unknown_action"
    INVALID_REQUEST = "invalid_request"


@dataclass(frozen=True)
class DirectoryEntry:
    name: str
    path: str
    is_directory: bool


@dataclass
class MutationResult:
    """
    Outcome of one engine operation.

    Failures are values: ``success`` is False, ``error_kind`` names the
    category and ``error`` carries a human-readable reason.
    """

    success: bool
    path: str
    operation: str
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    overwritten: bool = False
    content: Optional[str] = None
    entries: list[DirectoryEntry] = field(default_factory=list)
    diff: list[DiffLine] = field(default_factory=list)
    stats: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, operation: str, path: str, **kwargs: Any) -> "MutationResult":
        return cls(success=True, path=path, operation=operation, **kwargs)

    @classmethod
    def fail(
        cls, operation: str, path: str, kind: ErrorKind, error: str
    ) -> "MutationResult":
        return cls(
            success=False, path=path, operation=operation, error=error, error_kind=kind
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize the result to plain JSON-compatible types."""
        data: dict[str, Any] = {
            "success": self.success,
            "path": self.path,
            "operation": self.operation,
        }
        if self.error is not None:
            data["error"] = self.error
            data["error_kind"] = self.error_kind.value if self.error_kind else None
        if self.overwritten:
            data["overwritten"] = True
        if self.content is not None:
            data["content"] = self.content
        if self.entries:
            data["entries"] = [
                {"name": e.name, "path": e.path, "is_directory": e.is_directory}
                for e in self.entries
            ]
        if self.diff:
            data["diff"] = [
                {"kind": d.kind, "index": d.index, "text": d.text} for d in self.diff
            ]
        if self.stats:
            data["stats"] = dict(self.stats)
        return data
