"""Per-variant bitrate tables.

A table maps a resolution id to one of two entry shapes:

* :class:`FlatBitrate` — one bitrate for every frame rate (the legacy
  form, a bare number in the source data).
* :class:`PerFrameRate` — an ordered mapping of frame-rate id to bitrate.

Key order of the source data is preserved everywhere; the calculation
engine's frame-rate fallback depends on it.  Only leaves ``> 0`` count as
supported.  Zero, negative, absent and non-numeric leaves all mean
"unsupported", never "free".

Nothing in this module raises for bad data.  Malformed input yields a
table flagged ``malformed`` with no entries, and
:func:`validate_bitrate_data` describes what was wrong.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Union


def _as_number(value: object) -> float | None:
    """Return *value* as a float when it is a real JSON number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    return None


def is_positive_bitrate(value: float | None) -> bool:
    """Return ``True`` for a finite bitrate strictly greater than zero."""
    return value is not None and math.isfinite(value) and value > 0


# ---------------------------------------------------------------------------
# Entry shapes
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class FlatBitrate:
    """Single bitrate (Mbps) shared by every frame rate of a resolution."""

    mbps: float

    @property
    def is_supported(self) -> bool:
        return is_positive_bitrate(self.mbps)


@dataclass(frozen=True, slots=True)
class PerFrameRate:
    """Frame-rate specific bitrates for one resolution.

    ``rates`` keeps the source order.  A ``None`` value marks a leaf that
    was present but not a number.
    """

    rates: tuple[tuple[str, float | None], ...]

    def get(self, frame_rate_id: str) -> float | None:
        for key, value in self.rates:
            if key == frame_rate_id:
                return value
        return None

    def keys(self) -> list[str]:
        return [key for key, _ in self.rates]

    def supported_keys(self) -> list[str]:
        return [key for key, value in self.rates if is_positive_bitrate(value)]

    @property
    def is_supported(self) -> bool:
        return any(is_positive_bitrate(value) for _, value in self.rates)


BitrateEntry = Union[FlatBitrate, PerFrameRate]


# ---------------------------------------------------------------------------
# Table
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class BitrateTable:
    """Immutable resolution → bitrate entry mapping for one variant."""

    entries: tuple[tuple[str, BitrateEntry], ...] = ()
    malformed: bool = False
    """``True`` when the raw data was not a mapping at all."""

    @classmethod
    def from_raw(cls, raw: object) -> BitrateTable:
        """Build a table from decoded JSON-like data.

        Entries that are neither a number nor a mapping are dropped; a
        non-mapping *raw* produces an empty, ``malformed`` table.
        """
        if not isinstance(raw, Mapping):
            return cls(entries=(), malformed=True)

        entries: list[tuple[str, BitrateEntry]] = []
        for resolution_id, value in raw.items():
            number = _as_number(value)
            if number is not None:
                entries.append((str(resolution_id), FlatBitrate(number)))
            elif isinstance(value, Mapping):
                rates = tuple(
                    (str(frame_rate_id), _as_number(rate))
                    for frame_rate_id, rate in value.items()
                )
                entries.append((str(resolution_id), PerFrameRate(rates)))
        return cls(entries=tuple(entries))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self.entries)

    def __bool__(self) -> bool:
        return len(self.entries) > 0

    @property
    def is_empty(self) -> bool:
        return not self.entries

    def resolution_ids(self) -> list[str]:
        """Resolution ids in source order."""
        return [resolution_id for resolution_id, _ in self.entries]

    def entry(self, resolution_id: str) -> BitrateEntry | None:
        for key, value in self.entries:
            if key == resolution_id:
                return value
        return None

    def supports_resolution(self, resolution_id: str) -> bool:
        """Whether at least one positive bitrate exists for *resolution_id*."""
        found = self.entry(resolution_id)
        return found is not None and found.is_supported

    def frame_rates_with_bitrate(
        self,
        resolution_id: str,
        catalog_ids: Iterable[str],
    ) -> list[str]:
        """Frame-rate ids with a positive bitrate at *resolution_id*.

        The result follows the order of *catalog_ids*.  A flat entry
        covers every catalog frame rate.
        """
        found = self.entry(resolution_id)
        if found is None or not found.is_supported:
            return []
        if isinstance(found, FlatBitrate):
            return list(catalog_ids)
        supported = set(found.supported_keys())
        return [frame_rate_id for frame_rate_id in catalog_ids if frame_rate_id in supported]


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def validate_bitrate_data(raw: object) -> list[str]:
    """Describe every structural problem in raw bitrate data.

    Returns an empty list for a well-formed table.  Used for diagnostic
    logging by catalog loaders; callers never need to act on it.
    """
    if not isinstance(raw, Mapping):
        return ["Bitrates must be an object mapping resolutions to bitrates"]

    problems: list[str] = []
    for resolution_id, value in raw.items():
        number = _as_number(value)
        if number is not None:
            if not is_positive_bitrate(number):
                problems.append(f"Invalid bitrate for {resolution_id}: must be positive")
        elif isinstance(value, Mapping):
            if not value:
                problems.append(f"No frame rates listed for {resolution_id}")
            for frame_rate_id, rate in value.items():
                if not is_positive_bitrate(_as_number(rate)):
                    problems.append(
                        f"Invalid bitrate for {resolution_id}@{frame_rate_id}: "
                        "must be a positive number"
                    )
        else:
            problems.append(f"Invalid bitrate format for {resolution_id}")
    return problems
