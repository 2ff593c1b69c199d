"""Core layer — selection state, constraint resolution and calculation.

Rules
-----
* No ``print()`` calls.
* No filesystem or network I/O.
* No imports from ``cli`` or ``infra``.
* Catalog data anomalies never raise; they degrade to empty options.
"""

from codecalc.core.bitrate_table import BitrateTable, FlatBitrate, PerFrameRate
from codecalc.core.engine import CalculationStatus, FallbackPolicy, calculate, evaluate
from codecalc.core.models import (
    CalculationResult,
    Category,
    Codec,
    Duration,
    FrameRateOption,
    Preset,
    ResolutionOption,
    Selection,
    SelectionField,
    Variant,
)
from codecalc.core.protocols import CatalogProvider, ResultListener
from codecalc.core.resolver import ConstraintResolver, Correction, CorrectionReason
from codecalc.core.scheduler import SchedulerState, SelectionScheduler

__all__: list[str] = [
    "BitrateTable",
    "CalculationResult",
    "CalculationStatus",
    "CatalogProvider",
    "Category",
    "Codec",
    "ConstraintResolver",
    "Correction",
    "CorrectionReason",
    "Duration",
    "FallbackPolicy",
    "FlatBitrate",
    "FrameRateOption",
    "PerFrameRate",
    "Preset",
    "ResolutionOption",
    "ResultListener",
    "SchedulerState",
    "Selection",
    "SelectionField",
    "SelectionScheduler",
    "Variant",
    "calculate",
    "evaluate",
]
