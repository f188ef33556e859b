"""
FastAPI router definitions for the API endpoints.
"""

from fastapi import APIRouter, HTTPException, Query

from agentfs.api.dependencies import get_mutation_engine, get_plan_runner
from agentfs.api.schemas import (
    CreateFileRequest,
    CreatePlanRequest,
    EditFileRequest,
    ErrorResponse,
    HistoryResponse,
    MutationResponse,
    PlanInfo,
    PlanListResponse,
    PlanRunResponse,
)
from agentfs.entities.result import ErrorKind, MutationResult
from agentfs.exceptions import ConfigurationError, LLMError, PlanNotFoundError

router = APIRouter()

_STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.OUT_OF_WORKSPACE: 403,
}

_ERRORS = {
    400: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
}


def _respond(result: MutationResult) -> MutationResponse:
    """Turn an engine result into a response, or raise the matching HTTP error."""
    if not result.success:
        status = _STATUS_BY_KIND.get(result.error_kind, 400)
        raise HTTPException(status_code=status, detail=result.error or "Operation failed")
    return MutationResponse(**result.to_dict())


@router.get("/files", response_model=MutationResponse, responses=_ERRORS)
def list_files(
    path: str = Query(".", description="Directory to list, relative to the workspace"),
    include_directories: bool = Query(True, description="Include sub-directories"),
    include_ignored: bool = Query(False, description="Include ignored entries"),
):
    """
    List a workspace directory.

    Args:
        path: Directory to list
        include_directories: Whether sub-directories are returned
        include_ignored: Whether ignore rules are bypassed

    Returns:
        MutationResponse: Entries sorted by name
    """
    return _respond(
        get_mutation_engine().list_files(
            path,
            include_directories=include_directories,
            include_ignored=include_ignored,
        )
    )


@router.get("/files/search", response_model=MutationResponse, responses=_ERRORS)
def search_files(
    pattern: str = Query(..., description="File name glob (e.g., '*.py')"),
    directory: str = Query(".", description="Directory to search in"),
):
    """Recursively search the workspace for file names matching a glob."""
    return _respond(get_mutation_engine().search(pattern, directory))


@router.get("/files/content", response_model=MutationResponse, responses=_ERRORS)
def read_file(path: str = Query(..., description="File to read")):
    """Read a file's content."""
    return _respond(get_mutation_engine().read(path))


@router.post("/files", response_model=MutationResponse, status_code=201, responses=_ERRORS)
def create_file(body: CreateFileRequest):
    """
    Create a file.

    Args:
        body: Path, content and overwrite flag

    Returns:
        MutationResponse: Result with an overwrite diff when applicable

    Raises:
        HTTPException: 400 when the file exists and overwrite is false
    """
    return _respond(
        get_mutation_engine().create(body.path, body.content, overwrite=body.overwrite)
    )


@router.patch("/files", response_model=MutationResponse, responses=_ERRORS)
def edit_file(body: EditFileRequest):
    """Edit a file in one of the replace, insert, find-replace or append modes."""
    return _respond(
        get_mutation_engine().edit(
            body.path,
            mode=body.mode,
            new_content=body.content,
            search_text=body.search,
            replace_text=body.replace,
            line_index=body.line,
        )
    )


@router.delete("/files", response_model=MutationResponse, responses=_ERRORS)
def delete_file(path: str = Query(..., description="File to delete")):
    """Delete a file. The deletion can be undone."""
    return _respond(get_mutation_engine().delete(path))


@router.get("/history", response_model=HistoryResponse)
def get_history():
    """Return the undo/redo stacks (most recent first) and the operation log."""
    engine = get_mutation_engine()
    stacks = engine.history()
    return HistoryResponse(
        undo=[e.to_dict() for e in stacks["undo"]],
        redo=[e.to_dict() for e in stacks["redo"]],
        operations=[r.to_dict() for r in engine.operations()],
    )


@router.post("/history/undo", response_model=MutationResponse, responses=_ERRORS)
def undo():
    """Undo the most recent mutation."""
    return _respond(get_mutation_engine().undo())


@router.post("/history/redo", response_model=MutationResponse, responses=_ERRORS)
def redo():
    """Redo the most recently undone mutation."""
    return _respond(get_mutation_engine().redo())


@router.post(
    "/plans",
    response_model=PlanInfo,
    status_code=201,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def create_plan(body: CreatePlanRequest):
    """
    Register a plan.

    When ``steps`` is given the plan is registered as-is; otherwise the
    configured plan author drafts it from the task.
    """
    if not body.task.strip():
        raise HTTPException(status_code=400, detail="Task must not be empty")
    try:
        runner = get_plan_runner()
        if body.steps is not None:
            plan = runner.register_plan(body.task, body.steps, context=body.context)
        else:
            plan = runner.create_plan(body.task, body.context)
    except (ConfigurationError, LLMError) as e:
        raise HTTPException(status_code=500, detail=str(e))
    return PlanInfo(**plan.to_dict())


@router.get("/plans", response_model=PlanListResponse)
def list_plans():
    """List registered plans in creation order."""
    try:
        plans = get_plan_runner().plans()
    except ConfigurationError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return PlanListResponse(plans=[PlanInfo(**p.to_dict()) for p in plans])


@router.post(
    "/plans/{plan_id}/execute",
    response_model=PlanRunResponse,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def execute_plan(plan_id: int):
    """
    Run a registered plan fail-fast.

    A failed run is still a 200 response; ``success`` and ``completed_steps``
    report how far it got.
    """
    try:
        outcome = get_plan_runner().run_plan(plan_id)
    except PlanNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConfigurationError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return PlanRunResponse(**outcome.to_dict())
