"""
Execution Controller - Runs one query at a time and classifies its outcome.

Lifecycle:
    IDLE -> RUNNING -> {SUCCEEDED, FAILED} -> IDLE

The terminal states are transient: submit() passes through them and is back
in IDLE before it returns. Every completed attempt is appended to the
history store; validation, busy and environment rejections are not.
"""
import random
from dataclasses import dataclass
from enum import Enum
from threading import Lock
from typing import Optional, Sequence, Tuple, Union

from querybench.core.constants import QUERY_LATENCY_MAX_MS, QUERY_LATENCY_MIN_MS
from querybench.domain.models import Environment, ResultGrid
from querybench.errors import (
    BusyError,
    EnvironmentUnavailableError,
    QuerySyntaxError,
    ValidationError,
)
from querybench.session.executor.classifier import DEFAULT_RULES, ClassificationRule, classify
from querybench.session.executor.clock import Clock, SystemClock
from querybench.session.history.persistence import HistoryStore
from querybench.session.notifications import Notifier
from querybench.utils.log_utils import get_logger

logger = get_logger(__name__)


class ExecutionState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class QuerySuccess:
    """Successful execution carrying its result grid."""
    grid: ResultGrid
    duration_ms: int
    success: bool = True

    def to_dict(self):
        return {
            "success": True,
            "durationMs": self.duration_ms,
            "result": self.grid.to_dict(),
        }


@dataclass(frozen=True)
class QueryFailure:
    """Execution that ended in a (synthetic) error."""
    message: str
    duration_ms: int
    success: bool = False

    def to_dict(self):
        return {
            "success": False,
            "durationMs": self.duration_ms,
            "error": self.message,
        }


QueryOutcome = Union[QuerySuccess, QueryFailure]


class ExecutionController:
    """
    Orchestrates query submission.

    Mutual exclusion is enforced here, not by callers: a submit() while
    another one is suspended in its latency wait raises BusyError.
    """

    def __init__(
        self,
        history: HistoryStore,
        environment: Optional[Environment] = None,
        clock: Optional[Clock] = None,
        rng: Optional[random.Random] = None,
        notifier: Optional[Notifier] = None,
        rules: Sequence[ClassificationRule] = DEFAULT_RULES,
        latency_ms: Tuple[int, int] = (QUERY_LATENCY_MIN_MS, QUERY_LATENCY_MAX_MS),
    ):
        self._history = history
        self._environment = environment
        self._clock = clock or SystemClock()
        self._rng = rng or random.Random()
        self._notifier = notifier or Notifier()
        self._rules = tuple(rules)
        self._latency_ms = latency_ms
        self._state = ExecutionState.IDLE
        self._state_lock = Lock()

    @property
    def state(self) -> ExecutionState:
        return self._state

    @property
    def environment(self) -> Optional[Environment]:
        return self._environment

    def set_environment(self, environment: Environment) -> None:
        """Bind a new environment; announces the change after the first one."""
        previous = self._environment
        self._environment = environment
        if previous is not None:
            self._notifier.info("Environment Changed", f"Connected to {environment.name} environment")

    def _begin(self) -> None:
        with self._state_lock:
            if self._state is not ExecutionState.IDLE:
                raise BusyError()
            self._state = ExecutionState.RUNNING

    def _finish(self, state: ExecutionState) -> None:
        with self._state_lock:
            self._state = state

    async def submit(self, query_text: str) -> QueryOutcome:
        """
        Run query_text and return its outcome.

        Raises:
            ValidationError: query text is empty or whitespace.
            EnvironmentUnavailableError: the bound environment is disconnected.
            BusyError: another submit is still running.
        """
        if not query_text or not query_text.strip():
            self._notifier.error("Error", "Please enter a SQL query")
            raise ValidationError("Please enter a SQL query")

        if self._environment is not None and not self._environment.is_connected:
            raise EnvironmentUnavailableError(
                f"Environment '{self._environment.name}' is not connected"
            )

        self._begin()
        try:
            start_ms = self._clock.now_ms()
            latency = self._rng.uniform(*self._latency_ms)
            await self._clock.sleep(latency / 1000.0)

            rule = classify(query_text, self._rules)
            try:
                if rule is None:
                    raise QuerySyntaxError("Unrecognized query")
                grid = rule.generate(self._rng, self._clock.utcnow())
            except QuerySyntaxError as e:
                duration_ms = self._clock.now_ms() - start_ms
                self._finish(ExecutionState.FAILED)
                outcome: QueryOutcome = QueryFailure(message=str(e), duration_ms=duration_ms)
            else:
                duration_ms = self._clock.now_ms() - start_ms
                self._finish(ExecutionState.SUCCEEDED)
                outcome = QuerySuccess(
                    grid=grid.with_execution_time(duration_ms),
                    duration_ms=duration_ms,
                )

            self._history.record(
                query_text,
                success=outcome.success,
                execution_time_ms=duration_ms if outcome.success else None,
            )

            if outcome.success:
                logger.info(
                    f"[Executor] rule={rule.name} rows={outcome.grid.row_count} duration={duration_ms}ms"
                )
                self._notifier.info("Success", f"Query executed in {duration_ms}ms")
            else:
                logger.info(f"[Executor] failed after {duration_ms}ms: {outcome.message}")
                self._notifier.error("Query Failed", outcome.message)
            return outcome
        finally:
            self._finish(ExecutionState.IDLE)
