"""
Query Session Routes - HTTP endpoints over the query workspace.

Endpoints:
- POST /api/query/execute - Run the editor text (or a supplied query)
- GET /api/query/results - Current page of the last successful result
- GET /api/query/export - CSV download of the last successful result
- GET/PUT /api/editor - Current editor text
- GET /api/history - List execution history with truncated previews
- DELETE /api/history - Clear history
- POST /api/history/{id}/select - Load a history entry into the editor
- GET /api/saved - Saved queries partitioned into mine/shared/all
- POST /api/saved - Save the editor text under a name
- POST /api/saved/{id}/favorite, /share, /select; DELETE /api/saved/{id}
- GET /api/quick-actions - Built-in query templates
- POST /api/quick-actions/{id}/select - Load a template into the editor
- GET /api/environment - Environment the session submits against
- GET /api/notifications - Recent user-facing notifications
"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from pydantic import Field

from querybench.core.constants import (
    DATA_DIR,
    DEFAULT_SAVED_CATEGORY,
    ENVIRONMENT_CONNECTED,
    ENVIRONMENT_CONNECTION,
    ENVIRONMENT_ID,
    ENVIRONMENT_NAME,
    ENVIRONMENT_TYPE,
)
from querybench.domain.base import CamelCaseModel
from querybench.domain.models import Environment, HistoryEntry, SavedQuery, SavedQueryPartition
from querybench.errors import (
    BusyError,
    EnvironmentUnavailableError,
    ExportError,
    PersistenceError,
    ValidationError,
)
from querybench.session.executor.controller import ExecutionController
from querybench.session.history.persistence import HistoryStore
from querybench.session.notifications import RecordingNotifier
from querybench.session.presenter.export import CSV_MEDIA_TYPE
from querybench.session.quick_actions import QuickAction, list_quick_actions
from querybench.session.saved.persistence import SavedQueryStore
from querybench.session.workspace import QueryWorkspace
from querybench.storage.kv import JsonFileStorage
from querybench.utils.log_utils import get_logger

router = APIRouter(prefix="/api", tags=["QuerySession"])
logger = get_logger(__name__)


# =============================================================================
# Request/Response Models
# =============================================================================


class ExecuteRequest(CamelCaseModel):
    """Execute request; omitting query runs the current editor text."""
    query: Optional[str] = Field(None, description="Query text to run")


class EditorState(CamelCaseModel):
    query: str


class SaveQueryRequest(CamelCaseModel):
    name: str = Field(..., description="Display name for the saved query")
    category: str = Field(DEFAULT_SAVED_CATEGORY, description="Catalog category")
    query: Optional[str] = Field(None, description="Query text; defaults to the editor text")


class HistoryListItem(HistoryEntry):
    preview: str


class HistoryListResponse(CamelCaseModel):
    entries: List[HistoryListItem]
    total: int


# =============================================================================
# Workspace Resolution
# =============================================================================


_workspace: Optional[QueryWorkspace] = None


def build_workspace(storage=None, environment: Optional[Environment] = None, **controller_options) -> QueryWorkspace:
    """Wire stores, controller and notifier into a workspace."""
    storage = storage or JsonFileStorage(DATA_DIR)
    environment = environment or Environment(
        id=ENVIRONMENT_ID,
        name=ENVIRONMENT_NAME,
        type=ENVIRONMENT_TYPE,
        connection_string=ENVIRONMENT_CONNECTION,
        is_connected=ENVIRONMENT_CONNECTED,
    )
    notifier = RecordingNotifier()
    history = HistoryStore(storage)
    saved = SavedQueryStore(storage)
    controller = ExecutionController(
        history,
        environment=environment,
        notifier=notifier,
        **controller_options,
    )
    return QueryWorkspace(controller, history, saved, notifier=notifier)


def get_workspace() -> QueryWorkspace:
    """Get the process-wide workspace instance."""
    global _workspace
    if _workspace is None:
        _workspace = build_workspace()
    return _workspace


# =============================================================================
# Execution & Results
# =============================================================================


@router.post("/query/execute")
async def execute(request: ExecuteRequest, workspace: QueryWorkspace = Depends(get_workspace)):
    """
    Execute a query.

    Execution failures are part of the response (success=false), not HTTP
    errors. Validation (400), busy (409) and disconnected environment (503)
    are rejected before anything runs.
    """
    try:
        outcome = await workspace.execute(request.query)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except BusyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except EnvironmentUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except PersistenceError as e:
        logger.error(f"Execute failed to persist history: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Persistence failed: {str(e)}")
    return outcome.to_dict()


@router.get("/query/results")
def get_results(
    page: Optional[int] = Query(None, description="1-based page index; clamped into range"),
    page_size: Optional[int] = Query(None, alias="pageSize", description="10, 25, 50 or 100"),
    workspace: QueryWorkspace = Depends(get_workspace),
):
    """
    Current page of the last successful result.

    Omitting page returns the page last shown. A new pageSize resets to page 1
    unless page is also given.
    """
    grid = workspace.last_grid
    if grid is None:
        raise HTTPException(status_code=404, detail="Execute a query to see results here")
    pager = workspace.pager
    try:
        if page_size is not None and page_size != pager.page_size:
            pager.set_page_size(page_size)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    view = pager.go_to(page) if page is not None else pager.view()

    return {
        "columns": list(grid.columns),
        "rowCount": grid.row_count,
        "executionTimeMs": grid.execution_time_ms,
        "isEmpty": view.is_empty,
        "page": view.page_index,
        "pageSize": view.page_size,
        "totalPages": view.total_pages,
        "startIndex": view.start_index,
        "endIndex": view.end_index,
        "rows": [list(row) for row in view.rows],
        "cells": [[c.to_dict() for c in row] for row in view.formatted_rows()],
    }


@router.get("/query/export")
def export_results(workspace: QueryWorkspace = Depends(get_workspace)):
    """Download the last successful result as CSV."""
    try:
        filename, payload = workspace.export_csv(date.today())
    except ExportError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(
        content=payload,
        media_type=CSV_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# =============================================================================
# Editor
# =============================================================================


@router.get("/editor", response_model=EditorState)
def get_editor(workspace: QueryWorkspace = Depends(get_workspace)):
    return EditorState(query=workspace.query_text)


@router.put("/editor", response_model=EditorState)
def set_editor(state: EditorState, workspace: QueryWorkspace = Depends(get_workspace)):
    return EditorState(query=workspace.set_query_text(state.query))


# =============================================================================
# History
# =============================================================================


@router.get("/history", response_model=HistoryListResponse)
def list_history(workspace: QueryWorkspace = Depends(get_workspace)):
    """List execution history, newest first."""
    entries = [
        HistoryListItem(**entry.model_dump(), preview=entry.preview())
        for entry in workspace.history.list()
    ]
    return HistoryListResponse(entries=entries, total=len(entries))


@router.delete("/history")
def clear_history(workspace: QueryWorkspace = Depends(get_workspace)):
    workspace.clear_history()
    return {"status": "cleared"}


@router.post("/history/{entry_id}/select", response_model=EditorState)
def select_history_entry(entry_id: str, workspace: QueryWorkspace = Depends(get_workspace)):
    if workspace.select_history_entry(entry_id) is None:
        raise HTTPException(status_code=404, detail=f"History entry not found: {entry_id}")
    return EditorState(query=workspace.query_text)


# =============================================================================
# Saved Queries
# =============================================================================


@router.get("/saved", response_model=SavedQueryPartition)
def list_saved(
    search: str = Query("", description="Case-insensitive filter on name or query text"),
    workspace: QueryWorkspace = Depends(get_workspace),
):
    return workspace.saved.partition(search)


@router.post("/saved", response_model=SavedQuery, status_code=201)
def save_query(request: SaveQueryRequest, workspace: QueryWorkspace = Depends(get_workspace)):
    if request.query is not None:
        workspace.set_query_text(request.query)
    try:
        return workspace.save_current_query(request.name, request.category)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/saved/{query_id}/favorite", response_model=SavedQuery)
def toggle_favorite(query_id: str, workspace: QueryWorkspace = Depends(get_workspace)):
    query = workspace.saved.toggle_favorite(query_id)
    if query is None:
        raise HTTPException(status_code=404, detail=f"Saved query not found: {query_id}")
    return query


@router.post("/saved/{query_id}/share", response_model=SavedQuery)
def toggle_shared(query_id: str, workspace: QueryWorkspace = Depends(get_workspace)):
    query = workspace.share_saved_query(query_id)
    if query is None:
        raise HTTPException(status_code=404, detail=f"Saved query not found: {query_id}")
    return query


@router.delete("/saved/{query_id}")
def delete_saved(query_id: str, workspace: QueryWorkspace = Depends(get_workspace)):
    if not workspace.delete_saved_query(query_id):
        raise HTTPException(status_code=404, detail=f"Saved query not found: {query_id}")
    return {"status": "deleted", "id": query_id}


@router.post("/saved/{query_id}/select", response_model=EditorState)
def select_saved(query_id: str, workspace: QueryWorkspace = Depends(get_workspace)):
    if workspace.select_saved_query(query_id) is None:
        raise HTTPException(status_code=404, detail=f"Saved query not found: {query_id}")
    return EditorState(query=workspace.query_text)


# =============================================================================
# Quick Actions
# =============================================================================


@router.get("/quick-actions", response_model=List[QuickAction])
def get_quick_actions():
    return list_quick_actions()


@router.post("/quick-actions/{action_id}/select", response_model=EditorState)
def select_quick_action(action_id: str, workspace: QueryWorkspace = Depends(get_workspace)):
    if workspace.select_quick_action(action_id) is None:
        raise HTTPException(status_code=404, detail=f"Quick action not found: {action_id}")
    return EditorState(query=workspace.query_text)


# =============================================================================
# Environment & Notifications
# =============================================================================


@router.get("/environment", response_model=Environment)
def get_environment(workspace: QueryWorkspace = Depends(get_workspace)):
    environment = workspace.controller.environment
    if environment is None:
        raise HTTPException(status_code=404, detail="No environment selected")
    return environment


@router.get("/notifications")
def list_notifications(workspace: QueryWorkspace = Depends(get_workspace)):
    notifier = workspace.notifier
    recent = notifier.recent() if isinstance(notifier, RecordingNotifier) else []
    return {"notifications": [n.to_dict() for n in recent]}
