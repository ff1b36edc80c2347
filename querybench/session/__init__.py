"""
Query session subsystem.

- session.executor: execution lifecycle and outcome classification
- session.history: bounded execution history persistence
- session.saved: saved-query catalog persistence
- session.presenter: result paging, cell formatting and CSV export
- session.quick_actions: built-in query templates
- session.workspace: single-session facade used by the HTTP routes
"""
from .executor.controller import ExecutionController, ExecutionState, QueryFailure, QuerySuccess
from .history.persistence import HistoryStore
from .saved.persistence import SavedQueryStore
from .presenter.pager import ResultSetPager, paginate, format_cell
from .presenter.export import CsvExporter, export_filename
from .quick_actions import QuickAction, get_quick_action, list_quick_actions
from .workspace import QueryWorkspace

__all__ = [
    "ExecutionController",
    "ExecutionState",
    "QueryFailure",
    "QuerySuccess",
    "HistoryStore",
    "SavedQueryStore",
    "ResultSetPager",
    "paginate",
    "format_cell",
    "CsvExporter",
    "export_filename",
    "QuickAction",
    "get_quick_action",
    "list_quick_actions",
    "QueryWorkspace",
]
