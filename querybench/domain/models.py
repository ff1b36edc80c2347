"""
Domain models for the query session subsystem.

ResultGrid and HistoryEntry are frozen. The saved-query catalog swaps in
updated SavedQuery copies rather than mutating records in place.
"""

from datetime import datetime
from typing import Any, List, Literal, Optional, Tuple, Union

from pydantic import ConfigDict, Field, model_validator

from querybench.core.constants import HISTORY_PREVIEW_LENGTH
from querybench.domain.base import CamelCaseModel, to_camel

Cell = Optional[Union[bool, int, float, str]]


class ResultGrid(CamelCaseModel):
    """
    Tabular result of one successful execution.

    Column names need not be unique. Every row carries exactly one cell per
    column and row_count always equals len(rows).
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    columns: Tuple[str, ...]
    rows: Tuple[Tuple[Cell, ...], ...] = ()
    row_count: int = 0
    execution_time_ms: int = 0

    @model_validator(mode="before")
    @classmethod
    def _fill_row_count(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("row_count", data.get("rowCount")) is None:
            data = dict(data)
            data["row_count"] = len(data.get("rows") or ())
        return data

    @model_validator(mode="after")
    def _check_shape(self) -> "ResultGrid":
        width = len(self.columns)
        for index, row in enumerate(self.rows):
            if len(row) != width:
                raise ValueError(
                    f"row {index} has {len(row)} cells, expected {width}"
                )
        if self.row_count != len(self.rows):
            raise ValueError(
                f"row_count {self.row_count} does not match {len(self.rows)} rows"
            )
        return self

    def with_execution_time(self, execution_time_ms: int) -> "ResultGrid":
        """Copy of this grid stamped with the measured execution time."""
        return self.model_copy(update={"execution_time_ms": execution_time_ms})


class HistoryEntry(CamelCaseModel):
    """
    Immutable record of one execution attempt.

    execution_time_ms is only present for successful runs.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    id: str
    query_text: str
    timestamp: datetime
    execution_time_ms: Optional[int] = None
    success: bool

    def preview(self, max_length: int = HISTORY_PREVIEW_LENGTH) -> str:
        if len(self.query_text) <= max_length:
            return self.query_text
        return self.query_text[:max_length] + "..."


class SavedQuery(CamelCaseModel):
    """
    A named query in the saved-query catalog.

    shared_by marks a record shared *to* this catalog by someone else and
    drives the mine/shared partition. is_shared is the local share toggle and
    is independent of shared_by.
    """
    id: str
    name: str
    query_text: str
    category: str = "general"
    is_favorite: bool = False
    is_shared: bool = False
    shared_by: Optional[str] = None
    created_at: datetime


class Environment(CamelCaseModel):
    """Descriptor of the environment queries are submitted against."""
    id: str
    name: str
    type: Literal["production", "development", "local", "staging"] = "development"
    connection_string: Optional[str] = None
    is_connected: bool = True


class SavedQueryPartition(CamelCaseModel):
    """The three views over a (possibly filtered) saved-query catalog."""
    mine: List[SavedQuery] = Field(default_factory=list)
    shared: List[SavedQuery] = Field(default_factory=list)
    all: List[SavedQuery] = Field(default_factory=list)
