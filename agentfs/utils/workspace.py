from __future__ import annotations

import os
from typing import Tuple

from agentfs.exceptions import OutOfWorkspaceError

"""Workspace root sandbox used to constrain file access.

Resolution is pure path algebra: ``..`` segments are collapsed lexically and
symlinks are not followed. A symlink inside the workspace that points outside
of it is therefore still treated as inside; callers that need a stronger
guarantee must not place such links in the workspace.
"""


def normalize_root(root: str) -> str:
    s = os.path.expanduser(str(root or "").strip()) or os.getcwd()
    return os.path.normpath(os.path.abspath(s))


class PathSandbox:
    """Resolves user paths against a workspace root and rejects escapes."""

    def __init__(self, root: str, allow_outside: bool = False):
        self.root = normalize_root(root)
        self.allow_outside = allow_outside

    def absolute(self, path: str) -> str:
        """Join ``path`` onto the root (absolute paths kept) and normalize."""
        s = os.path.expanduser(str(path or "").strip()) or "."
        if not os.path.isabs(s):
            s = os.path.join(self.root, s)
        return os.path.normpath(s)

    def contains(self, abs_path: str) -> bool:
        try:
            return os.path.commonpath([self.root, abs_path]) == self.root
        except ValueError:
            # Different drives on Windows
            return False

    def check(self, path: str) -> Tuple[bool, str]:
        """Return (ok, normalized_abs) without raising."""
        p = self.absolute(path)
        if self.allow_outside:
            return True, p
        return self.contains(p), p

    def resolve(self, path: str) -> str:
        """
        Resolve a path to an absolute path inside the workspace.

        Raises:
            OutOfWorkspaceError: If the path escapes the root and escapes are not allowed
        """
        ok, p = self.check(path)
        if not ok:
            raise OutOfWorkspaceError(path, self.root)
        return p

    def relative(self, abs_path: str) -> str:
        """Workspace-relative form of ``abs_path`` for display (absolute if outside)."""
        if self.contains(abs_path):
            rel = os.path.relpath(abs_path, self.root)
            return "." if rel == os.curdir else rel.replace(os.sep, "/")
        return abs_path
