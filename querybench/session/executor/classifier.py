"""
Outcome classification for submitted query text.

Rules are evaluated in order against the lowercase, trimmed text and the
first matching rule wins. A rule's generator either returns a ResultGrid or
raises QuerySyntaxError for a synthetic failure.
"""
import random
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional, Sequence

from querybench.domain.models import ResultGrid
from querybench.errors import QuerySyntaxError

SYNTAX_ERROR_MESSAGE = 'Syntax error near "invalid"'

SELECT_COLUMNS = ("id", "name", "email", "created_at", "status")
SELECT_MIN_ROWS = 5
SELECT_MAX_ROWS = 24
# Spread of synthetic created_at dates behind "now" (~115 days).
SELECT_DATE_SPREAD_MS = 10_000_000_000

SHOW_TABLES_RESULT = ResultGrid(
    columns=("Table Name", "Engine", "Rows", "Created"),
    rows=(
        ("users", "InnoDB", "1,234", "2024-01-15"),
        ("orders", "InnoDB", "5,678", "2024-01-16"),
        ("products", "InnoDB", "892", "2024-01-17"),
        ("categories", "InnoDB", "45", "2024-01-18"),
        ("reviews", "InnoDB", "3,456", "2024-01-19"),
    ),
)

DESCRIBE_RESULT = ResultGrid(
    columns=("Field", "Type", "Null", "Key", "Default", "Extra"),
    rows=(
        ("id", "int(11)", "NO", "PRI", None, "auto_increment"),
        ("name", "varchar(255)", "NO", "", None, ""),
        ("email", "varchar(255)", "NO", "UNI", None, ""),
        ("created_at", "timestamp", "NO", "", "CURRENT_TIMESTAMP", ""),
        ("updated_at", "timestamp", "NO", "", "CURRENT_TIMESTAMP", "on update CURRENT_TIMESTAMP"),
    ),
)

MESSAGE_RESULT = ResultGrid(
    columns=("Message",),
    rows=(("Query executed successfully",),),
)

Predicate = Callable[[str], bool]
Generator = Callable[[random.Random, datetime], ResultGrid]


@dataclass(frozen=True)
class ClassificationRule:
    """A (predicate, generator) pair, matched against normalized query text."""
    name: str
    predicate: Predicate
    generate: Generator


def normalize(query_text: str) -> str:
    return query_text.strip().lower()


def raise_syntax_error(rng: random.Random, now: datetime) -> ResultGrid:
    raise QuerySyntaxError(SYNTAX_ERROR_MESSAGE)


def generate_select_result(rng: random.Random, now: datetime) -> ResultGrid:
    """Synthetic users table with a random row count in [5, 24]."""
    row_count = rng.randint(SELECT_MIN_ROWS, SELECT_MAX_ROWS)
    rows = []
    for i in range(1, row_count + 1):
        created = now - timedelta(milliseconds=rng.random() * SELECT_DATE_SPREAD_MS)
        rows.append((
            i,
            f"User {i}",
            f"user{i}@example.com",
            created.date().isoformat(),
            "active" if rng.random() > 0.5 else "inactive",
        ))
    return ResultGrid(columns=SELECT_COLUMNS, rows=tuple(rows))


def _fixed(grid: ResultGrid) -> Generator:
    return lambda rng, now: grid


DEFAULT_RULES = (
    ClassificationRule(
        "syntax_error",
        lambda q: "error" in q or "invalid" in q,
        raise_syntax_error,
    ),
    ClassificationRule("select", lambda q: q.startswith("select"), generate_select_result),
    ClassificationRule("show_tables", lambda q: q.startswith("show tables"), _fixed(SHOW_TABLES_RESULT)),
    ClassificationRule(
        "describe",
        lambda q: q.startswith("describe") or q.startswith("desc"),
        _fixed(DESCRIBE_RESULT),
    ),
    ClassificationRule("message", lambda q: True, _fixed(MESSAGE_RESULT)),
)


def classify(
    query_text: str,
    rules: Sequence[ClassificationRule] = DEFAULT_RULES,
) -> Optional[ClassificationRule]:
    """Return the first rule whose predicate matches, or None."""
    normalized = normalize(query_text)
    for rule in rules:
        if rule.predicate(normalized):
            return rule
    return None
