"""
Query Workspace - One interactive session over the core components.

Holds the editor text, the last outcome and the last successful grid (which
stays exportable after a later failed run), and wires the pager and the
exporter to that grid. The HTTP layer talks to this object only.
"""
from datetime import date
from typing import Optional

from querybench.core.constants import DEFAULT_QUERY, DEFAULT_SAVED_CATEGORY
from querybench.domain.models import HistoryEntry, ResultGrid, SavedQuery
from querybench.session.executor.controller import ExecutionController, QueryOutcome
from querybench.session.history.persistence import HistoryStore
from querybench.session.notifications import Notifier
from querybench.session.presenter.export import CsvExporter, export_filename
from querybench.session.presenter.pager import ResultSetPager
from querybench.session.quick_actions import QuickAction, get_quick_action
from querybench.session.saved.persistence import SavedQueryStore
from querybench.errors import ExportError, ValidationError


class QueryWorkspace:
    def __init__(
        self,
        controller: ExecutionController,
        history: HistoryStore,
        saved: SavedQueryStore,
        notifier: Optional[Notifier] = None,
        query_text: str = DEFAULT_QUERY,
    ):
        self.controller = controller
        self.history = history
        self.saved = saved
        self.pager = ResultSetPager()
        self.exporter = CsvExporter()
        self.notifier = notifier or Notifier()
        self.query_text = query_text
        self.last_outcome: Optional[QueryOutcome] = None

    @property
    def last_grid(self) -> Optional[ResultGrid]:
        return self.pager.grid

    def set_query_text(self, query_text: str) -> str:
        self.query_text = query_text
        return self.query_text

    async def execute(self, query_text: Optional[str] = None) -> QueryOutcome:
        """Run the given text (or the editor text) and update the displayed result."""
        if query_text is not None:
            self.query_text = query_text
        outcome = await self.controller.submit(self.query_text)
        self.last_outcome = outcome
        if outcome.success:
            self.pager.set_grid(outcome.grid)
        return outcome

    def select_history_entry(self, entry_id: str) -> Optional[HistoryEntry]:
        """Load a history entry's text into the editor."""
        entry = self.history.get(entry_id)
        if entry is not None:
            self.query_text = entry.query_text
        return entry

    def select_saved_query(self, query_id: str) -> Optional[SavedQuery]:
        """Load a saved query's text into the editor."""
        query = self.saved.get(query_id)
        if query is not None:
            self.query_text = query.query_text
        return query

    def select_quick_action(self, action_id: str) -> Optional[QuickAction]:
        """Load a quick action's template into the editor."""
        action = get_quick_action(action_id)
        if action is not None:
            self.query_text = action.query_text
        return action

    def save_current_query(self, name: str, category: str = DEFAULT_SAVED_CATEGORY) -> SavedQuery:
        try:
            query = self.saved.save(name, self.query_text, category)
        except ValidationError as e:
            self.notifier.error("Error", str(e))
            raise
        self.notifier.info("Success", "Query saved successfully")
        return query

    def share_saved_query(self, query_id: str) -> Optional[SavedQuery]:
        query = self.saved.toggle_shared(query_id)
        if query is not None:
            state = "shared" if query.is_shared else "unshared"
            self.notifier.info("Success", f"Query {state} successfully")
        return query

    def delete_saved_query(self, query_id: str) -> bool:
        deleted = self.saved.delete(query_id)
        if deleted:
            self.notifier.info("Success", "Query deleted successfully")
        return deleted

    def clear_history(self) -> None:
        self.history.clear()
        self.notifier.info("History Cleared", "Query history has been cleared")

    def export_csv(self, day: Optional[date] = None) -> tuple:
        """Return (filename, payload) for the last successful grid."""
        try:
            payload = self.exporter.export(self.last_grid)
        except ExportError as e:
            self.notifier.error("No Results", str(e))
            raise
        self.notifier.info("Export Complete", "Results exported as CSV file")
        return export_filename(day or date.today()), payload
