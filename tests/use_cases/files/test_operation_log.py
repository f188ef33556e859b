"""
Tests for the operation log and bounded undo history.
"""

import pytest

from agentfs.entities.history import HistoryEntry
from agentfs.use_cases.files.operation_log import OperationLog, UndoHistory


def _entry(name: str) -> HistoryEntry:
    return HistoryEntry("create", f"/ws/{name}", None, name)


class TestOperationLog:
    def test_append_and_clear(self):
        log = OperationLog()
        log.append("create", "/ws/a")
        log.append("delete", "/ws/a")

        assert len(log) == 2
        assert [r.type for r in log.records()] == ["create", "delete"]

        log.clear()
        assert log.records() == []

    def test_records_is_a_copy(self):
        log = OperationLog()
        log.append("create", "/ws/a")
        log.records().clear()
        assert len(log) == 1


class TestUndoHistory:
    def test_record_clears_redo(self):
        history = UndoHistory()
        history.record(_entry("a"))
        history.push_redo(history.pop_undo())

        history.record(_entry("b"))

        assert history.pop_redo() is None

    def test_bound_evicts_oldest(self):
        history = UndoHistory(max_entries=2)
        for name in ("a", "b", "c"):
            history.record(_entry(name))

        assert [e.new_content for e in history.undo_entries()] == ["c", "b"]

    def test_shrinking_bound_keeps_most_recent(self):
        history = UndoHistory(max_entries=5)
        for name in ("a", "b", "c"):
            history.record(_entry(name))

        history.set_max_entries(1)

        assert history.max_entries == 1
        assert [e.new_content for e in history.undo_entries()] == ["c"]

    def test_zero_bound_disables_undo(self):
        history = UndoHistory(max_entries=0)
        history.record(_entry("a"))
        assert history.pop_undo() is None

    def test_negative_bound_rejected(self):
        with pytest.raises(ValueError):
            UndoHistory(max_entries=-1)

    def test_clear(self):
        history = UndoHistory()
        history.record(_entry("a"))
        history.push_redo(_entry("b"))

        history.clear()

        assert history.undo_entries() == []
        assert history.redo_entries() == []
