"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters and UI layers
must satisfy.  Core code depends ONLY on these protocols — never on
concrete implementations — preserving the dependency inversion
principle.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from codecalc.core.models import CalculationResult, Category


class CatalogProvider(Protocol):
    """Contract for codec catalog sources.

    Any object that implements :meth:`get_categories` with the correct
    signature satisfies this protocol structurally (no explicit
    inheritance required).
    """

    def get_categories(self) -> Sequence[Category]:
        """Return the full category → codec → variant hierarchy.

        The returned data must already be loaded and must not change
        while the core is resolving a selection.  Implementations map
        their own I/O failures to
        :class:`~codecalc.exceptions.CatalogLoadError`.
        """
        ...  # pragma: no cover


class ResultListener(Protocol):
    """Callback invoked once per settled selection whose result changed.

    Receives the fresh :class:`CalculationResult`, or ``None`` when the
    selection became incomplete or unsupported.
    """

    def __call__(self, result: CalculationResult | None) -> None:
        ...  # pragma: no cover
