"""Custom exception hierarchy for codecalc.

All exceptions that cross layer boundaries must inherit from
:class:`CodecalcError`.  Data-shape anomalies in a codec catalog are
NOT exceptions — the core degrades to empty option sets and ``None``
results instead.  Only contract violations and user-input errors end
up here.

Hierarchy
---------
CodecalcError
├── UnknownFieldError
├── InvalidDurationError
├── ResolutionLoopError
├── CatalogLoadError
├── PresetNotFoundError
├── SelectionIncompleteError
├── ConfigurationError
└── EnvironmentError
"""

from __future__ import annotations


class CodecalcError(Exception):
    """Base exception for all codecalc errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Selection contract -----------------------------------------------------

class UnknownFieldError(CodecalcError):
    """Raised when a selection change names a field that does not exist."""


class InvalidDurationError(CodecalcError):
    """Raised when a duration is negative or cannot be parsed."""


class ResolutionLoopError(CodecalcError):
    """Raised when the constraint resolver fails to reach a fixed point."""


# --- Catalog ----------------------------------------------------------------

class CatalogLoadError(CodecalcError):
    """Raised when the codec catalog cannot be read or decoded."""


class PresetNotFoundError(CodecalcError):
    """Raised when a named workflow preset does not exist."""


# --- Calculation ------------------------------------------------------------

class SelectionIncompleteError(CodecalcError):
    """Raised by the CLI when the selection does not produce a result."""


# --- Settings ---------------------------------------------------------------

class ConfigurationError(CodecalcError):
    """Raised when CODECALC_ environment settings fail validation."""


# --- Environment / tooling --------------------------------------------------

class EnvironmentError(CodecalcError):
    """Raised when a required runtime dependency is not available."""
