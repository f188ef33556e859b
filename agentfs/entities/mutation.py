"""
Mutation request domain entities.

A ``MutationRequest`` is a closed set of variants: create, read, edit, delete,
plus ``UnknownRequest`` for actions an interpreter produced that the engine
does not support.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union


class EditMode(str, Enum):
    """How an edit rewrites the current file content."""

    REPLACE = "replace"
    INSERT = "insert"
    FIND_REPLACE = "find-replace"
    APPEND = "append"

    @classmethod
    def parse(cls, value: Any) -> Optional["EditMode"]:
        """Return the mode matching ``value`` (case-insensitive), or None."""
        if isinstance(value, EditMode):
            return value
        text = str(value or "").strip().lower().replace("_", "-")
        for mode in cls:
            if mode.value == text:
                return mode
        return None


@dataclass(frozen=True)
class CreateRequest:
    path: str
    content: str
    overwrite: bool = False


@dataclass(frozen=True)
class ReadRequest:
    path: str


@dataclass(frozen=True)
class EditRequest:
    path: str
    mode: EditMode = EditMode.REPLACE
    new_content: str = ""
    search_text: Optional[str] = None
    replace_text: Optional[str] = None
    line_index: Optional[int] = None


@dataclass(frozen=True)
class DeleteRequest:
    path: str


@dataclass(frozen=True)
class UnknownRequest:
    """An action kind the engine cannot apply."""

    action: str
    path: str = ""


MutationRequest = Union[
    CreateRequest, ReadRequest, EditRequest, DeleteRequest, UnknownRequest
]


def _optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def request_from_dict(data: dict[str, Any]) -> MutationRequest:
    """
    Build a MutationRequest from an interpreter action object.

    Args:
        data: Object with ``action``, ``path`` and, depending on the action,
            ``content``, ``mode``, ``search``, ``replace`` and ``line``

    Returns:
        The matching request variant. Unsupported actions (and edits with an
        unsupported mode) become ``UnknownRequest``.
    """
    action = str(data.get("action") or "").strip().lower()
    path = str(data.get("path") or "")
    content = data.get("content")
    content = "" if content is None else str(content)

    if action == "create":
        # Plans overwrite existing files so later steps can rewrite earlier output
        return CreateRequest(path=path, content=content, overwrite=True)
    if action == "read":
        return ReadRequest(path=path)
    if action == "delete":
        return DeleteRequest(path=path)
    if action == "edit":
        mode = EditMode.parse(data.get("mode") or EditMode.REPLACE.value)
        if mode is None:
            return UnknownRequest(action=f"edit:{data.get('mode')}", path=path)
        search = data.get("search")
        replace = data.get("replace")
        if mode is EditMode.FIND_REPLACE and replace is None:
            replace = content
        return EditRequest(
            path=path,
            mode=mode,
            new_content=content,
            search_text=None if search is None else str(search),
            replace_text=None if replace is None else str(replace),
            line_index=_optional_int(data.get("line")),
        )
    return UnknownRequest(action=action or "<missing>", path=path)
