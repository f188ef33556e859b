"""
Ignore rules for directory listings and searches.
"""

import fnmatch
import os
from typing import Iterable, Optional

# Version control, build output and dependency directories
DEFAULT_IGNORES: tuple[str, ...] = (
    ".git",
    ".hg",
    ".svn",
    "node_modules",
    "dist",
    "build",
    "coverage",
    ".next",
    "__pycache__",
    ".venv",
    "venv",
    ".tox",
    ".mypy_cache",
    ".pytest_cache",
)


def parse_ignore_lines(lines: Iterable[str]) -> list[str]:
    """One pattern per line; blank lines and '#' comments are skipped."""
    patterns: list[str] = []
    for raw in lines:
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        line = line.strip("/")
        if line:
            patterns.append(line)
    return patterns


class IgnoreRules:
    """Default ignore set plus project patterns, matched by name or relative path."""

    def __init__(
        self,
        extra_patterns: Optional[Iterable[str]] = None,
        defaults: Iterable[str] = DEFAULT_IGNORES,
    ):
        self.patterns: list[str] = list(defaults) + list(extra_patterns or [])

    @classmethod
    def from_text(cls, text: str) -> "IgnoreRules":
        """Defaults plus the patterns of an ignore file's content."""
        return cls(parse_ignore_lines(text.splitlines()))

    def is_ignored(self, name: str, rel_path: Optional[str] = None) -> bool:
        rel = (rel_path or name).replace(os.sep, "/")
        for pattern in self.patterns:
            if fnmatch.fnmatch(name, pattern) or fnmatch.fnmatch(rel, pattern):
                return True
        return False
