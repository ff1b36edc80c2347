from .models import (
    Cell,
    ResultGrid,
    HistoryEntry,
    SavedQuery,
    SavedQueryPartition,
    Environment,
)

__all__ = [
    "Cell",
    "ResultGrid",
    "HistoryEntry",
    "SavedQuery",
    "SavedQueryPartition",
    "Environment",
]
