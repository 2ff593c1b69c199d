"""Selection scheduler — the single mutation entry point of the core.

The scheduler owns the session's :class:`~codecalc.core.models.Selection`
and sequences every change through an explicit state machine::

    IDLE ──write──▶ RESOLVING ──fixed point──▶ SETTLED ──▶ CALCULATING ──▶ IDLE

Guarantees
----------
* One call to :meth:`SelectionScheduler.apply_selection_change` (or one
  :meth:`SelectionScheduler.batch` block) produces at most one settled
  calculation.
* The calculation engine never sees an unsettled selection.
* Resolver auto-selections happen inside RESOLVING and do not trigger
  extra calculations.
* Writes that arrive while the scheduler is busy (e.g. from a result
  listener) are queued and applied to the latest state afterwards.
"""

from __future__ import annotations

import enum
import logging
from collections import deque
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from dataclasses import replace

from codecalc.core import engine
from codecalc.core.engine import CalculationStatus, FallbackPolicy
from codecalc.core.models import (
    CalculationResult,
    Category,
    Duration,
    Preset,
    Selection,
    SelectionField,
)
from codecalc.core.protocols import CatalogProvider, ResultListener
from codecalc.core.resolver import DEFAULT_MAX_PASSES, ConstraintResolver, Correction
from codecalc.exceptions import InvalidDurationError

logger = logging.getLogger(__name__)


class SchedulerState(str, enum.Enum):
    IDLE = "idle"
    RESOLVING = "resolving"
    SETTLED = "settled"
    CALCULATING = "calculating"


class SelectionScheduler:
    """Owns the selection, runs the resolver, publishes results.

    Parameters
    ----------
    provider:
        Any object satisfying the :class:`CatalogProvider` protocol.
    initial:
        Seed selection (e.g. from CLI flags).  It is re-validated by the
        resolver before the first calculation.
    max_passes:
        Resolver bound, see :class:`ConstraintResolver`.
    fallback:
        Frame-rate fallback policy handed to the engine.
    """

    def __init__(
        self,
        provider: CatalogProvider,
        *,
        initial: Selection | None = None,
        max_passes: int = DEFAULT_MAX_PASSES,
        fallback: FallbackPolicy = FallbackPolicy.FIRST_KEY,
    ) -> None:
        self._provider: CatalogProvider = provider
        self._resolver: ConstraintResolver = ConstraintResolver(max_passes=max_passes)
        self._fallback: FallbackPolicy = fallback

        self._selection: Selection = initial if initial is not None else Selection()
        self._state: SchedulerState = SchedulerState.IDLE
        self._pending: deque[tuple[SelectionField, object]] = deque()
        self._batch_depth: int = 0
        self._listeners: list[ResultListener] = []

        self._result: CalculationResult | None = None
        self._status: CalculationStatus = CalculationStatus.INCOMPLETE_SELECTION
        self._calculated_for: Selection | None = None
        self._corrections: tuple[Correction, ...] = ()

        self._run_cycle(force=True)

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def selection(self) -> Selection:
        return self._selection

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def last_status(self) -> CalculationStatus:
        return self._status

    @property
    def corrections(self) -> tuple[Correction, ...]:
        """Resolver corrections made during the most recent cycle."""
        return self._corrections

    @property
    def categories(self) -> Sequence[Category]:
        return self._provider.get_categories()

    def get_current_result(self) -> CalculationResult | None:
        return self._result

    def get_available_options(self, level: SelectionField | str) -> list:
        """Options currently valid at *level*, in stable catalog order."""
        field = SelectionField.parse(level)
        return self._resolver.available_options(self.categories, self._selection, field)

    def selection_issue(self) -> str | None:
        return engine.selection_issue(self._selection, self.categories)

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, listener: ResultListener) -> Callable[[], None]:
        """Register *listener*; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def apply_selection_change(self, field: SelectionField | str, value: object) -> None:
        """Queue a write to *field* and, unless busy, process it.

        Raises
        ------
        UnknownFieldError
            If *field* does not name a selection field.
        InvalidDurationError
            If a duration value cannot be interpreted.
        """
        parsed = SelectionField.parse(field)
        self._pending.append((parsed, self._coerce(parsed, value)))
        if self._state is SchedulerState.IDLE and self._batch_depth == 0:
            self._drain()

    @contextmanager
    def batch(self) -> Iterator[SelectionScheduler]:
        """Coalesce every write inside the block into one cycle."""
        self._batch_depth += 1
        completed = False
        try:
            yield self
            completed = True
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0:
                # An aborted block (KeyboardInterrupt included) discards its writes.
                if not completed:
                    self._pending.clear()
                elif self._state is SchedulerState.IDLE:
                    self._drain()

    def apply_preset(self, preset: Preset) -> None:
        """Write all five cascading fields of *preset* as one change."""
        with self.batch():
            self.apply_selection_change(SelectionField.CATEGORY, preset.category_id)
            self.apply_selection_change(SelectionField.CODEC, preset.codec_id)
            self.apply_selection_change(SelectionField.VARIANT, preset.variant_name)
            self.apply_selection_change(SelectionField.RESOLUTION, preset.resolution_id)
            self.apply_selection_change(SelectionField.FRAME_RATE, preset.frame_rate_id)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _coerce(field: SelectionField, value: object) -> object:
        if field is SelectionField.DURATION:
            if isinstance(value, Duration):
                return value
            if isinstance(value, int) and not isinstance(value, bool):
                return Duration.from_seconds(value)
            if isinstance(value, str):
                return Duration.parse(value)
            raise InvalidDurationError(f"Unsupported duration value: {value!r}")
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    def _drain(self) -> None:
        while self._pending:
            self._run_cycle()

    def _run_cycle(self, *, force: bool = False) -> None:
        self._state = SchedulerState.RESOLVING
        try:
            candidate = self._selection
            while self._pending:
                field, value = self._pending.popleft()
                candidate = replace(candidate, **{field.attribute: value})
            resolution = self._resolver.settle(self.categories, candidate)
            self._selection = resolution.selection
            self._corrections = resolution.corrections

            self._state = SchedulerState.SETTLED
            if force or self._selection != self._calculated_for:
                self._state = SchedulerState.CALCULATING
                if self._calculate():
                    self._notify()
        finally:
            self._state = SchedulerState.IDLE

    def _calculate(self) -> bool:
        """Recompute the result; return whether it changed."""
        evaluation = engine.evaluate(self._selection, self.categories, fallback=self._fallback)
        self._status = evaluation.status
        self._calculated_for = self._selection
        if evaluation.status is CalculationStatus.UNSUPPORTED_COMBINATION:
            logger.info("Unsupported combination: %s", self._selection)
        elif evaluation.status is CalculationStatus.MALFORMED_BITRATE_TABLE:
            logger.warning("Malformed bitrate table for variant %r", self._selection.variant_name)
        previous, self._result = self._result, evaluation.result
        return previous != self._result

    def _notify(self) -> None:
        # Listeners run while CALCULATING, so their own writes are queued.
        for listener in list(self._listeners):
            listener(self._result)
