"""
Operation log and undo/redo history owned by the mutation engine.
"""

from collections import deque
from typing import Optional

from agentfs.entities.history import HistoryEntry, OperationRecord


class OperationLog:
    """Append-only audit trail of completed mutations."""

    def __init__(self):
        self._records: list[OperationRecord] = []

    def append(self, op_type: str, path: str) -> OperationRecord:
        record = OperationRecord(type=op_type, path=path)
        self._records.append(record)
        return record

    def records(self) -> list[OperationRecord]:
        return list(self._records)

    def clear(self) -> None:
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)


class UndoHistory:
    """
    Bounded undo stack plus redo stack of HistoryEntry values.

    A forward mutation (``record``) clears the redo stack. When the undo stack
    is full the oldest entry is evicted and can no longer be undone.
    """

    def __init__(self, max_entries: int = 50):
        if max_entries < 0:
            raise ValueError("max_entries must be >= 0")
        self._undo: deque[HistoryEntry] = deque(maxlen=max_entries)
        self._redo: list[HistoryEntry] = []

    @property
    def max_entries(self) -> int:
        return self._undo.maxlen or 0

    def set_max_entries(self, max_entries: int) -> None:
        """Change the bound, keeping the most recent entries."""
        if max_entries < 0:
            raise ValueError("max_entries must be >= 0")
        self._undo = deque(self._undo, maxlen=max_entries)

    def record(self, entry: HistoryEntry) -> None:
        self._undo.append(entry)
        self._redo.clear()

    def pop_undo(self) -> Optional[HistoryEntry]:
        return self._undo.pop() if self._undo else None

    def pop_redo(self) -> Optional[HistoryEntry]:
        return self._redo.pop() if self._redo else None

    def push_redo(self, entry: HistoryEntry) -> None:
        self._redo.append(entry)

    def push_undo(self, entry: HistoryEntry) -> None:
        """Put an entry back on the undo stack without touching redo."""
        self._undo.append(entry)

    def undo_entries(self) -> list[HistoryEntry]:
        """Undo stack, most recent first."""
        return list(reversed(self._undo))

    def redo_entries(self) -> list[HistoryEntry]:
        """Redo stack, next to redo first."""
        return list(reversed(self._redo))

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()
