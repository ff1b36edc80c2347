"""
Error taxonomy for the query session subsystem.

Validation, busy and environment conditions are raised before any state
change. QuerySyntaxError never escapes ExecutionController.submit: it is
turned into a QueryFailure outcome there.
"""


class QueryBenchError(Exception):
    """Base class for all query session errors."""


class ValidationError(QueryBenchError):
    """Input rejected before any state change (empty query text, empty name)."""


class QuerySyntaxError(QueryBenchError):
    """Synthetic execution failure produced by the classifier."""


class BusyError(QueryBenchError):
    """A query is already running."""

    def __init__(self, message: str = "A query is already running"):
        super().__init__(message)


class EnvironmentUnavailableError(QueryBenchError):
    """The selected environment is not connected."""


class PersistenceError(QueryBenchError):
    """A persisted record could not be read or written."""


class ExportError(QueryBenchError):
    """Export requested with no result grid available."""
