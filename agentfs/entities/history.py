"""
History domain entities: reversible entries and audit log records.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


def _now() -> datetime:
    return datetime.now()


@dataclass(frozen=True)
class HistoryEntry:
    """
    Before/after content pair recorded for one mutation.

    ``old_content`` is None when the path did not exist before the operation,
    so undo removes it. ``new_content`` is None when the operation deleted the
    path, so redo removes it again.
    """

    operation_type: str
    resolved_path: str
    old_content: Optional[str]
    new_content: Optional[str]
    timestamp: datetime = field(default_factory=_now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "operation_type": self.operation_type,
            "path": self.resolved_path,
            "existed_before": self.old_content is not None,
            "exists_after": self.new_content is not None,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class OperationRecord:
    """Append-only audit record of a completed mutation."""

    type: str
    path: str
    timestamp: datetime = field(default_factory=_now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "path": self.path,
            "timestamp": self.timestamp.isoformat(),
        }
