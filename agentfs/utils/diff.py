"""
Position-aligned line diff used to preview destructive writes.

Lines are compared index by index: line ``i`` of the old text against line
``i`` of the new text. This is not a minimal edit script; a single inserted
line marks every following line as changed. Previews depend on this exact
output, so it must stay position-aligned.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Union

from rich.text import Text

REMOVED = "-"
ADDED = "+"

TextOrLines = Union[str, Sequence[str]]


@dataclass(frozen=True)
class DiffLine:
    kind: str  # REMOVED or ADDED
    index: int
    text: str

    def __str__(self) -> str:
        return f"{self.kind} {self.text}"


def _as_lines(value: Optional[TextOrLines]) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return value.split("\n")
    return list(value)


def line_diff(old: Optional[TextOrLines], new: Optional[TextOrLines]) -> list[DiffLine]:
    """
    Compute the change list between two texts (or pre-split line lists).

    For each index up to the longer of the two, differing lines emit a removal
    of the old line (when present) followed by an addition of the new line
    (when present). Identical lines are not emitted.
    """
    old_lines = _as_lines(old)
    new_lines = _as_lines(new)
    changes: list[DiffLine] = []
    for i in range(max(len(old_lines), len(new_lines))):
        old_line = old_lines[i] if i < len(old_lines) else None
        new_line = new_lines[i] if i < len(new_lines) else None
        if old_line == new_line:
            continue
        if old_line is not None:
            changes.append(DiffLine(REMOVED, i, old_line))
        if new_line is not None:
            changes.append(DiffLine(ADDED, i, new_line))
    return changes


def render_diff(changes: Sequence[DiffLine], title: str = "") -> Text:
    """Render a change list as colored rich text (red removals, green additions)."""
    out = Text()
    if title:
        out.append(f"{title}\n", style="bold cyan")
    if not changes:
        out.append("(no changes)", style="dim")
        return out
    for n, change in enumerate(changes):
        style = "red" if change.kind == REMOVED else "green"
        out.append(str(change), style=style)
        if n < len(changes) - 1:
            out.append("\n")
    return out
