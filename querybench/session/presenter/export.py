"""
CSV Exporter - Serializes a full (unpaginated) ResultGrid to CSV text.

The quoting rule is deliberately narrow: only string cells that contain a
comma are wrapped in double quotes, and embedded double quotes are left as
they are. Header names are never quoted.
"""
from datetime import date
from typing import Any, Optional

from querybench.domain.models import ResultGrid
from querybench.errors import ExportError
from querybench.utils.log_utils import get_logger

logger = get_logger(__name__)

CSV_MEDIA_TYPE = "text/csv"


def _csv_field(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, str) and "," in value:
        return f'"{value}"'
    return str(value)


def export_filename(day: date) -> str:
    """Download name for an export made on the given calendar day."""
    return f"query_results_{day.isoformat()}.csv"


class CsvExporter:
    """Turns the last successful result grid into a CSV payload."""

    def export(self, grid: Optional[ResultGrid]) -> str:
        if grid is None:
            raise ExportError("Execute a query first to export results")

        lines = [",".join(grid.columns)]
        lines.extend(",".join(_csv_field(cell) for cell in row) for row in grid.rows)
        payload = "\n".join(lines)
        logger.info(f"[CsvExporter] Exported {grid.row_count} rows ({len(payload)} bytes)")
        return payload
