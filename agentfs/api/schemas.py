"""
Pydantic models for API requests and responses.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, Field


class CreateFileRequest(BaseModel):
    """Schema for file creation."""

    path: str = Field(..., description="Workspace-relative or absolute file path")
    content: str = Field("", description="File content")
    overwrite: bool = Field(False, description="Replace the file if it exists")


class EditFileRequest(BaseModel):
    """Schema for file edits."""

    path: str = Field(..., description="File to edit")
    mode: str = Field("replace", description="replace | insert | find-replace | append")
    content: str = Field("", description="New content, inserted line or appended text")
    search: Optional[str] = Field(None, description="Literal text to find (find-replace)")
    replace: Optional[str] = Field(None, description="Replacement text (find-replace)")
    line: Optional[int] = Field(None, description="Insert position (insert)")


class DirectoryEntryInfo(BaseModel):
    """Schema for one directory listing entry."""

    name: str = Field(..., description="Entry name")
    path: str = Field(..., description="Workspace-relative path")
    is_directory: bool = Field(..., description="Whether the entry is a directory")


class DiffLineInfo(BaseModel):
    """Schema for one line of a position-aligned diff."""

    kind: str = Field(..., description="'-' for removed, '+' for added")
    index: int = Field(..., description="Zero-based line index")
    text: str = Field(..., description="Line text")


class MutationResponse(BaseModel):
    """Schema for a successful engine operation."""

    success: bool = Field(..., description="Always true for 2xx responses")
    path: str = Field(..., description="Path as given by the caller")
    operation: str = Field(..., description="Engine operation name")
    overwritten: bool = Field(False, description="Create replaced an existing file")
    content: Optional[str] = Field(None, description="File content (read)")
    entries: List[DirectoryEntryInfo] = Field(
        default_factory=list, description="Listing or search results"
    )
    diff: List[DiffLineInfo] = Field(default_factory=list, description="Change preview")
    stats: dict[str, Any] = Field(default_factory=dict, description="File information")


class HistoryEntryInfo(BaseModel):
    """Schema for one undo/redo stack entry."""

    operation_type: str
    path: str
    existed_before: bool
    exists_after: bool
    timestamp: str


class OperationInfo(BaseModel):
    """Schema for one operation log record."""

    type: str
    path: str
    timestamp: str


class HistoryResponse(BaseModel):
    """Schema for the history snapshot."""

    undo: List[HistoryEntryInfo] = Field(default_factory=list)
    redo: List[HistoryEntryInfo] = Field(default_factory=list)
    operations: List[OperationInfo] = Field(default_factory=list)


class CreatePlanRequest(BaseModel):
    """Schema for plan creation. Either ``steps`` or an LLM-authored plan."""

    task: str = Field(..., description="Task description")
    steps: Optional[List[str]] = Field(
        None, description="Explicit steps; when omitted the plan is drafted by the LLM"
    )
    context: dict[str, Any] = Field(default_factory=dict, description="Extra context")


class PlanInfo(BaseModel):
    """Schema for a registered plan."""

    id: int
    task: str
    steps: List[str]
    content: str
    context: dict[str, Any] = Field(default_factory=dict)
    created_at: str


class PlanListResponse(BaseModel):
    """Schema for the plan list."""

    plans: List[PlanInfo] = Field(default_factory=list)


class StepOutcomeInfo(BaseModel):
    """Schema for one executed step."""

    index: int
    step: str
    success: bool
    results: List[dict[str, Any]] = Field(default_factory=list)
    error: Optional[str] = None
    error_kind: Optional[str] = None


class PlanRunResponse(BaseModel):
    """Schema for a plan execution outcome."""

    plan_id: int
    state: str
    success: bool
    completed_steps: int
    total_steps: int
    error: Optional[str] = None
    outcomes: List[StepOutcomeInfo] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Schema for error responses."""

    detail: str = Field(..., description="Error message")
