"""
Use case for sandboxed workspace mutations with undo/redo history.
"""

import fnmatch
import functools
import logging
import os
import threading
from typing import Any, Callable, Optional, TypeVar

from agentfs.entities.file import File
from agentfs.entities.history import HistoryEntry, OperationRecord
from agentfs.entities.mutation import (
    CreateRequest,
    DeleteRequest,
    EditMode,
    EditRequest,
    MutationRequest,
    ReadRequest,
    UnknownRequest,
)
from agentfs.entities.result import DirectoryEntry, ErrorKind, MutationResult
from agentfs.exceptions import ConfigurationError, FileRepositoryError
from agentfs.ports.files.file_repository_port import FileRepositoryPort
from agentfs.use_cases.files.operation_log import OperationLog, UndoHistory
from agentfs.utils.diff import line_diff
from agentfs.utils.ignore import IgnoreRules
from agentfs.utils.workspace import PathSandbox

_F = TypeVar("_F", bound=Callable[..., Any])


def _synchronized(method: _F) -> _F:
    """Serialize engine operations on the instance lock."""

    @functools.wraps(method)
    def wrapper(self: "MutationEngine", *args: Any, **kwargs: Any) -> Any:
        with self._lock:
            return method(self, *args, **kwargs)

    return wrapper  # type: ignore[return-value]


class MutationEngine:
    """
    File operation API over a sandboxed workspace.

    Every public operation returns a MutationResult; sandbox rejections and
    file system errors are reported as failures, never raised. Successful
    create/edit/delete operations push exactly one HistoryEntry (clearing the
    redo stack) and append one OperationLog record. Reads and listings record
    nothing.
    """

    def __init__(
        self,
        file_repository: FileRepositoryPort,
        workspace_root: str,
        allow_outside_workspace: bool = False,
        max_undo_history: int = 50,
        ignore_file: Optional[str] = ".agentignore",
        show_diff_preview: bool = True,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the engine.

        Args:
            file_repository: Repository performing the actual disk I/O
            workspace_root: Directory all relative paths resolve against
            allow_outside_workspace: Accept paths that escape the root
            max_undo_history: Bound of the undo stack (oldest entries evicted)
            ignore_file: Root-relative file with extra ignore patterns
            show_diff_preview: Attach diffs to overwrite and edit results
            logger: Logger instance to use for logging
        """
        if max_undo_history < 0:
            raise ConfigurationError(
                f"max_undo_history must be >= 0, got {max_undo_history}"
            )
        self._files = file_repository
        self._logger = logger or logging.getLogger(__name__)
        self._lock = threading.RLock()
        self._sandbox = PathSandbox(workspace_root, allow_outside_workspace)
        self._history = UndoHistory(max_undo_history)
        self._log = OperationLog()
        self._ignore_file = ignore_file
        self._ignore_rules = self._load_ignore_rules()
        self.show_diff_preview = show_diff_preview

    # ------------------------- configuration -------------------------
    @property
    def sandbox(self) -> PathSandbox:
        return self._sandbox

    @property
    def workspace_root(self) -> str:
        return self._sandbox.root

    @property
    def max_undo_history(self) -> int:
        return self._history.max_entries

    @_synchronized
    def configure(
        self,
        workspace_root: Optional[str] = None,
        allow_outside_workspace: Optional[bool] = None,
        max_undo_history: Optional[int] = None,
        ignore_file: Optional[str] = None,
        show_diff_preview: Optional[bool] = None,
    ) -> MutationResult:
        """
        Reconfigure the engine; history and log are kept.

        Invalid values leave the configuration untouched and are reported as
        an INVALID_REQUEST failure.
        """
        if max_undo_history is not None and max_undo_history < 0:
            return self._fail(
                "configure",
                "",
                ErrorKind.INVALID_REQUEST,
                f"Undo bound must be >= 0, got {max_undo_history}",
            )
        root = self._sandbox.root if workspace_root is None else workspace_root
        allow = (
            self._sandbox.allow_outside
            if allow_outside_workspace is None
            else allow_outside_workspace
        )
        self._sandbox = PathSandbox(root, allow)
        if max_undo_history is not None:
            self._history.set_max_entries(max_undo_history)
        if ignore_file is not None:
            self._ignore_file = ignore_file
        if show_diff_preview is not None:
            self.show_diff_preview = show_diff_preview
        self._ignore_rules = self._load_ignore_rules()
        self._logger.info(
            f"Workspace configured: root={self._sandbox.root} "
            f"allow_outside={self._sandbox.allow_outside} "
            f"max_undo={self._history.max_entries}"
        )
        return MutationResult.ok("configure", self._sandbox.root)

    def _load_ignore_rules(self) -> IgnoreRules:
        if not self._ignore_file:
            return IgnoreRules()
        inside, path = PathSandbox(self._sandbox.root).check(self._ignore_file)
        if not inside:
            self._logger.warning(f"Ignore file is outside the workspace, skipped: {path}")
            return IgnoreRules()
        if not self._files.exists(path) or self._files.is_dir(path):
            return IgnoreRules()
        try:
            return IgnoreRules.from_text(self._files.read_text(path))
        except FileRepositoryError as e:
            self._logger.warning(f"Could not load ignore file {path}: {e}")
            return IgnoreRules()

    # ------------------------- internal helpers -------------------------
    def _fail(
        self, operation: str, path: str, kind: ErrorKind, error: str
    ) -> MutationResult:
        self._logger.error(f"{operation} failed for {path}: {error}")
        return MutationResult.fail(operation, path, kind, error)

    def _resolve(self, operation: str, path: str) -> tuple[str, Optional[MutationResult]]:
        """Return (absolute_path, None) or ("", failure) for a sandbox rejection."""
        if not path or not str(path).strip():
            return "", self._fail(
                operation, str(path), ErrorKind.INVALID_REQUEST, "Path must not be empty"
            )
        ok, abs_path = self._sandbox.check(path)
        if not ok:
            return "", self._fail(
                operation,
                path,
                ErrorKind.OUT_OF_WORKSPACE,
                f"Path is outside of workspace root {self._sandbox.root}: {path}",
            )
        return abs_path, None

    def _missing_file(self, operation: str, path: str, abs_path: str) -> Optional[MutationResult]:
        if not self._files.exists(abs_path):
            return self._fail(operation, path, ErrorKind.NOT_FOUND, f"File not found: {path}")
        if self._files.is_dir(abs_path):
            return self._fail(
                operation, path, ErrorKind.FILESYSTEM_FAILURE, f"Path is a directory: {path}"
            )
        return None

    def _diff_for(self, old: Optional[str], new: str, preview: Optional[bool]) -> list:
        show = self.show_diff_preview if preview is None else preview
        return line_diff(old, new) if show else []

    def _commit(self, op_type: str, abs_path: str, old: Optional[str], new: Optional[str]) -> None:
        self._history.record(HistoryEntry(op_type, abs_path, old, new))
        self._log.append(op_type, abs_path)

    def _outside(self, operation: str, entry: HistoryEntry) -> Optional[MutationResult]:
        """Reject history entries the current sandbox no longer admits."""
        ok, _ = self._sandbox.check(entry.resolved_path)
        if ok:
            return None
        return self._fail(
            operation,
            entry.resolved_path,
            ErrorKind.OUT_OF_WORKSPACE,
            f"Path is outside of workspace root {self._sandbox.root}: {entry.resolved_path}",
        )

    def _restore(self, abs_path: str, content: Optional[str]) -> None:
        """Write ``content`` back, or remove the path when content is None."""
        if content is None:
            if self._files.exists(abs_path):
                self._files.delete(abs_path)
        else:
            self._files.write_text(abs_path, content)

    def _entry(self, f: File) -> DirectoryEntry:
        return DirectoryEntry(
            name=f.name, path=self._sandbox.relative(f.path), is_directory=f.is_dir
        )

    # ------------------------- file operations -------------------------
    @_synchronized
    def create(
        self,
        path: str,
        content: str,
        overwrite: bool = False,
        show_diff_preview: Optional[bool] = None,
    ) -> MutationResult:
        """
        Create a file, creating parent directories as needed.

        Fails with ALREADY_EXISTS when the file exists and ``overwrite`` is
        False. An overwrite captures the previous content for undo.
        """
        abs_path, rejected = self._resolve("create", path)
        if rejected:
            return rejected
        if self._files.is_dir(abs_path):
            return self._fail(
                "create", path, ErrorKind.FILESYSTEM_FAILURE, f"Path is a directory: {path}"
            )
        try:
            exists = self._files.exists(abs_path)
            if exists and not overwrite:
                return self._fail(
                    "create", path, ErrorKind.ALREADY_EXISTS, f"File already exists: {path}"
                )
            old = self._files.read_text(abs_path) if exists else None
            self._files.write_text(abs_path, content)
        except FileRepositoryError as e:
            return self._fail("create", path, ErrorKind.FILESYSTEM_FAILURE, str(e))

        op_type = "overwrite" if exists else "create"
        self._commit(op_type, abs_path, old, content)
        self._logger.info(f"{'Overwritten' if exists else 'Created'}: {path}")
        return MutationResult.ok(
            "create",
            path,
            overwritten=exists,
            diff=self._diff_for(old, content, show_diff_preview) if exists else [],
        )

    @_synchronized
    def read(self, path: str) -> MutationResult:
        abs_path, rejected = self._resolve("read", path)
        if rejected:
            return rejected
        missing = self._missing_file("read", path, abs_path)
        if missing:
            return missing
        try:
            content = self._files.read_text(abs_path)
        except FileRepositoryError as e:
            return self._fail("read", path, ErrorKind.FILESYSTEM_FAILURE, str(e))
        return MutationResult.ok("read", path, content=content)

    @_synchronized
    def edit(
        self,
        path: str,
        mode: EditMode | str = EditMode.REPLACE,
        new_content: str = "",
        search_text: Optional[str] = None,
        replace_text: Optional[str] = None,
        line_index: Optional[int] = None,
        show_diff_preview: Optional[bool] = None,
    ) -> MutationResult:
        """
        Edit an existing file.

        Modes:
            replace: discard the old content, write ``new_content``
            insert: insert ``new_content`` as a line at ``line_index``; a missing
                or out-of-range index inserts at end of file
            find-replace: replace every literal occurrence of ``search_text``
                with ``replace_text``; PATTERN_NOT_FOUND when absent
            append: add ``new_content`` as a new trailing line
        """
        edit_mode = EditMode.parse(mode)
        if edit_mode is None:
            return self._fail(
                "edit", path, ErrorKind.INVALID_REQUEST, f"Unknown edit mode: {mode}"
            )
        abs_path, rejected = self._resolve("edit", path)
        if rejected:
            return rejected
        missing = self._missing_file("edit", path, abs_path)
        if missing:
            return missing
        try:
            old = self._files.read_text(abs_path)
        except FileRepositoryError as e:
            return self._fail("edit", path, ErrorKind.FILESYSTEM_FAILURE, str(e))

        if edit_mode is EditMode.REPLACE:
            new = new_content
        elif edit_mode is EditMode.INSERT:
            lines = old.split("\n")
            position = line_index
            if position is None or position < 0 or position > len(lines):
                position = len(lines)
            lines.insert(position, new_content)
            new = "\n".join(lines)
        elif edit_mode is EditMode.FIND_REPLACE:
            if not search_text:
                return self._fail(
                    "edit", path, ErrorKind.INVALID_REQUEST, "Search text must not be empty"
                )
            if search_text not in old:
                return self._fail(
                    "edit",
                    path,
                    ErrorKind.PATTERN_NOT_FOUND,
                    f"Search pattern not found in {path}: {search_text}",
                )
            new = old.replace(search_text, replace_text or "")
        else:
            if not old:
                new = new_content
            elif old.endswith("\n"):
                new = old + new_content
            else:
                new = old + "\n" + new_content

        try:
            self._files.write_text(abs_path, new)
        except FileRepositoryError as e:
            return self._fail("edit", path, ErrorKind.FILESYSTEM_FAILURE, str(e))

        self._commit("edit", abs_path, old, new)
        self._logger.info(f"Edited: {path} ({edit_mode.value})")
        return MutationResult.ok(
            "edit", path, diff=self._diff_for(old, new, show_diff_preview)
        )

    @_synchronized
    def delete(self, path: str) -> MutationResult:
        abs_path, rejected = self._resolve("delete", path)
        if rejected:
            return rejected
        missing = self._missing_file("delete", path, abs_path)
        if missing:
            return missing
        try:
            old = self._files.read_text(abs_path)
        except FileRepositoryError as e:
            # Undo needs the text pre-image; binary files cannot be captured
            return self._fail(
                "delete",
                path,
                ErrorKind.FILESYSTEM_FAILURE,
                f"Cannot delete {path}: content could not be saved for undo ({e})",
            )
        try:
            self._files.delete(abs_path)
        except FileRepositoryError as e:
            return self._fail("delete", path, ErrorKind.FILESYSTEM_FAILURE, str(e))

        self._commit("delete", abs_path, old, None)
        self._logger.info(f"Deleted: {path}")
        return MutationResult.ok("delete", path)

    @_synchronized
    def list_files(
        self,
        dir_path: str = ".",
        include_directories: bool = True,
        include_ignored: bool = False,
    ) -> MutationResult:
        """List a directory's entries, sorted by name, filtered by the ignore rules."""
        abs_path, rejected = self._resolve("list", dir_path)
        if rejected:
            return rejected
        if not self._files.is_dir(abs_path):
            return self._fail(
                "list", dir_path, ErrorKind.NOT_FOUND, f"Directory not found: {dir_path}"
            )
        try:
            items = self._files.list_dir(abs_path)
        except FileRepositoryError as e:
            return self._fail("list", dir_path, ErrorKind.FILESYSTEM_FAILURE, str(e))

        entries: list[DirectoryEntry] = []
        for item in items:
            if item.is_dir and not include_directories:
                continue
            entry = self._entry(item)
            if not include_ignored and self._ignore_rules.is_ignored(entry.name, entry.path):
                continue
            entries.append(entry)
        return MutationResult.ok("list", dir_path, entries=entries)

    @_synchronized
    def search(self, pattern: str, dir_path: str = ".") -> MutationResult:
        """Recursively find files whose name matches a glob, skipping ignored entries."""
        abs_path, rejected = self._resolve("search", dir_path)
        if rejected:
            return rejected
        if not pattern:
            return self._fail(
                "search", dir_path, ErrorKind.INVALID_REQUEST, "Pattern must not be empty"
            )
        if not self._files.is_dir(abs_path):
            return self._fail(
                "search", dir_path, ErrorKind.NOT_FOUND, f"Directory not found: {dir_path}"
            )

        matches: list[DirectoryEntry] = []
        pending = [abs_path]
        visited = {os.path.realpath(abs_path)}
        try:
            while pending:
                current = pending.pop()
                for item in self._files.list_dir(current):
                    entry = self._entry(item)
                    if self._ignore_rules.is_ignored(entry.name, entry.path):
                        continue
                    if item.is_dir:
                        # Symlinked directories may point back up the tree
                        real = os.path.realpath(item.path)
                        if real not in visited:
                            visited.add(real)
                            pending.append(item.path)
                    elif fnmatch.fnmatch(item.name, pattern):
                        matches.append(entry)
        except FileRepositoryError as e:
            return self._fail("search", dir_path, ErrorKind.FILESYSTEM_FAILURE, str(e))

        matches.sort(key=lambda e: e.path)
        return MutationResult.ok("search", dir_path, entries=matches)

    @_synchronized
    def mkdir(self, path: str) -> MutationResult:
        """Create a directory and its parents. Directories are not undoable."""
        abs_path, rejected = self._resolve("mkdir", path)
        if rejected:
            return rejected
        if self._files.exists(abs_path) and not self._files.is_dir(abs_path):
            return self._fail(
                "mkdir", path, ErrorKind.ALREADY_EXISTS, f"A file already exists at: {path}"
            )
        try:
            self._files.mkdir(abs_path, exist_ok=True)
        except FileRepositoryError as e:
            return self._fail("mkdir", path, ErrorKind.FILESYSTEM_FAILURE, str(e))
        self._logger.info(f"Created directory: {path}")
        return MutationResult.ok("mkdir", path)

    @_synchronized
    def stat(self, path: str) -> MutationResult:
        abs_path, rejected = self._resolve("stat", path)
        if rejected:
            return rejected
        if not self._files.exists(abs_path):
            return self._fail("stat", path, ErrorKind.NOT_FOUND, f"File not found: {path}")
        try:
            details = self._files.stat(abs_path).get_details()
        except FileRepositoryError as e:
            return self._fail("stat", path, ErrorKind.FILESYSTEM_FAILURE, str(e))
        details["path"] = self._sandbox.relative(abs_path)
        return MutationResult.ok("stat", path, stats=details)

    # ------------------------- history -------------------------
    @_synchronized
    def undo(self) -> MutationResult:
        """Revert the most recent mutation and move it onto the redo stack."""
        entry = self._history.pop_undo()
        if entry is None:
            return MutationResult.fail(
                "undo", "", ErrorKind.NOTHING_TO_UNDO, "Nothing to undo"
            )
        path = self._sandbox.relative(entry.resolved_path)
        rejected = self._outside("undo", entry)
        if rejected:
            self._history.push_undo(entry)
            return rejected
        try:
            self._restore(entry.resolved_path, entry.old_content)
        except FileRepositoryError as e:
            self._history.push_undo(entry)
            return self._fail("undo", path, ErrorKind.FILESYSTEM_FAILURE, str(e))
        self._history.push_redo(entry)
        self._log.append(f"undo:{entry.operation_type}", entry.resolved_path)
        self._logger.info(f"Undo {entry.operation_type}: {path}")
        return MutationResult.ok("undo", path)

    @_synchronized
    def redo(self) -> MutationResult:
        """Re-apply the most recently undone mutation."""
        entry = self._history.pop_redo()
        if entry is None:
            return MutationResult.fail(
                "redo", "", ErrorKind.NOTHING_TO_REDO, "Nothing to redo"
            )
        path = self._sandbox.relative(entry.resolved_path)
        rejected = self._outside("redo", entry)
        if rejected:
            self._history.push_redo(entry)
            return rejected
        try:
            self._restore(entry.resolved_path, entry.new_content)
        except FileRepositoryError as e:
            self._history.push_redo(entry)
            return self._fail("redo", path, ErrorKind.FILESYSTEM_FAILURE, str(e))
        self._history.push_undo(entry)
        self._log.append(f"redo:{entry.operation_type}", entry.resolved_path)
        self._logger.info(f"Redo {entry.operation_type}: {path}")
        return MutationResult.ok("redo", path)

    @_synchronized
    def history(self) -> dict[str, list[HistoryEntry]]:
        """Snapshot of both stacks, most recent first."""
        return {
            "undo": self._history.undo_entries(),
            "redo": self._history.redo_entries(),
        }

    @_synchronized
    def operations(self) -> list[OperationRecord]:
        return self._log.records()

    @_synchronized
    def clear_operations(self) -> None:
        self._log.clear()
        self._logger.info("Operation history cleared")

    # ------------------------- dispatch -------------------------
    def apply(self, request: MutationRequest) -> MutationResult:
        """Apply one request variant; unsupported variants fail with UNKNOWN_ACTION."""
        if isinstance(request, CreateRequest):
            return self.create(request.path, request.content, overwrite=request.overwrite)
        if isinstance(request, ReadRequest):
            return self.read(request.path)
        if isinstance(request, EditRequest):
            return self.edit(
                request.path,
                mode=request.mode,
                new_content=request.new_content,
                search_text=request.search_text,
                replace_text=request.replace_text,
                line_index=request.line_index,
            )
        if isinstance(request, DeleteRequest):
            return self.delete(request.path)
        if isinstance(request, UnknownRequest):
            return self._fail(
                request.action,
                request.path,
                ErrorKind.UNKNOWN_ACTION,
                f"Unknown action: {request.action}",
            )
        return self._fail(
            "apply",
            str(getattr(request, "path", "")),
            ErrorKind.UNKNOWN_ACTION,
            f"Unknown action: {type(request).__name__}",
        )
