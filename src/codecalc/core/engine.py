"""Bitrate lookup and file-size derivation.

Every function in this module is **pure** — identical inputs always
produce results with identical field values, and nothing is mutated.

Lookup order for a complete selection:

1. ``bitrates[resolution]`` — missing ⇒ unsupported combination.
2. Flat entry ⇒ its value is the bitrate.
3. Per-frame-rate entry ⇒ the requested frame rate, or when it is
   absent or not a number, the fallback chosen by :class:`FallbackPolicy`.
4. The bitrate must be a finite number ``> 0``.

Sizes: ``MB = Mbps * seconds / 8``; ``GB = MB / 1024``; ``TB = GB / 1024``.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from codecalc.core import option_catalog
from codecalc.core.bitrate_table import FlatBitrate, PerFrameRate, is_positive_bitrate
from codecalc.core.models import CalculationResult, Category, Selection

logger = logging.getLogger(__name__)


class FallbackPolicy(str, enum.Enum):
    """How to pick a bitrate when the requested frame rate has none."""

    FIRST_KEY = "first_key"
    """First frame rate in the table's own key order (historic behaviour)."""

    LOWEST_RATE = "lowest_rate"
    """Lowest numeric frame rate present in the table."""


class CalculationStatus(str, enum.Enum):
    """Why a calculation did or did not produce a result."""

    COMPLETE = "complete"
    INCOMPLETE_SELECTION = "incomplete_selection"
    UNSUPPORTED_COMBINATION = "unsupported_combination"
    MALFORMED_BITRATE_TABLE = "malformed_bitrate_table"

    @property
    def message(self) -> str:
        return _STATUS_MESSAGES[self]


_STATUS_MESSAGES: dict[CalculationStatus, str] = {
    CalculationStatus.COMPLETE: "Calculation complete.",
    CalculationStatus.INCOMPLETE_SELECTION: "Select more options to see file size estimates.",
    CalculationStatus.UNSUPPORTED_COMBINATION: (
        "No bitrate is published for this combination of settings."
    ),
    CalculationStatus.MALFORMED_BITRATE_TABLE: (
        "The bitrate data for this variant is malformed."
    ),
}


@dataclass(frozen=True, slots=True)
class Evaluation:
    """Status plus result (``None`` unless status is COMPLETE)."""

    status: CalculationStatus
    result: CalculationResult | None = None


# ---------------------------------------------------------------------------
# Bitrate lookup
# ---------------------------------------------------------------------------

def _frame_rate_sort_key(frame_rate_id: str) -> float:
    try:
        return float(frame_rate_id)
    except ValueError:
        return float("inf")


def _fallback_key(entry: PerFrameRate, policy: FallbackPolicy) -> str | None:
    keys = entry.keys()
    if not keys:
        return None
    if policy is FallbackPolicy.LOWEST_RATE:
        numeric = [key for key in keys if entry.get(key) is not None]
        return min(numeric or keys, key=_frame_rate_sort_key)
    return keys[0]


def lookup_bitrate(
    entry: FlatBitrate | PerFrameRate,
    frame_rate_id: str,
    *,
    fallback: FallbackPolicy = FallbackPolicy.FIRST_KEY,
) -> tuple[float | None, str | None, bool]:
    """Return ``(mbps, frame_rate_key, used_fallback)`` for one entry.

    ``frame_rate_key`` is ``None`` for flat entries.
    """
    if isinstance(entry, FlatBitrate):
        return entry.mbps, None, False

    requested = entry.get(frame_rate_id)
    if requested is not None:
        return requested, frame_rate_id, False

    key = _fallback_key(entry, fallback)
    if key is None:
        return None, None, False
    logger.debug("Frame rate %s missing; falling back to %s", frame_rate_id, key)
    return entry.get(key), key, True


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def evaluate(
    selection: Selection,
    categories: Sequence[Category],
    *,
    fallback: FallbackPolicy = FallbackPolicy.FIRST_KEY,
) -> Evaluation:
    """Derive bitrate and file sizes for *selection*."""
    total_seconds = selection.duration.total_seconds
    if not selection.is_complete or total_seconds <= 0:
        return Evaluation(CalculationStatus.INCOMPLETE_SELECTION)

    category = next((c for c in categories if c.id == selection.category_id), None)
    codec = category.find_codec(selection.codec_id) if category else None
    variant = codec.find_variant(selection.variant_name) if codec else None
    resolution = option_catalog.find_resolution(selection.resolution_id)
    frame_rate = option_catalog.find_frame_rate(selection.frame_rate_id)
    if category is None or codec is None or variant is None:
        return Evaluation(CalculationStatus.INCOMPLETE_SELECTION)
    if resolution is None or frame_rate is None:
        return Evaluation(CalculationStatus.INCOMPLETE_SELECTION)

    if variant.bitrates.malformed:
        return Evaluation(CalculationStatus.MALFORMED_BITRATE_TABLE)

    entry = variant.bitrates.entry(resolution.id)
    if entry is None:
        return Evaluation(CalculationStatus.UNSUPPORTED_COMBINATION)

    bitrate_mbps, frame_rate_key, used_fallback = lookup_bitrate(
        entry, frame_rate.id, fallback=fallback,
    )
    if bitrate_mbps is None or not is_positive_bitrate(bitrate_mbps):
        return Evaluation(CalculationStatus.UNSUPPORTED_COMBINATION)

    file_size_mb = bitrate_mbps * total_seconds / 8
    file_size_gb = file_size_mb / 1024
    file_size_tb = file_size_gb / 1024

    return Evaluation(
        CalculationStatus.COMPLETE,
        CalculationResult(
            bitrate_mbps=bitrate_mbps,
            file_size_mb=file_size_mb,
            file_size_gb=file_size_gb,
            file_size_tb=file_size_tb,
            total_seconds=total_seconds,
            resolved_category=category,
            resolved_codec=codec,
            resolved_variant=variant,
            resolved_resolution=resolution,
            resolved_frame_rate=frame_rate,
            bitrate_frame_rate_id=frame_rate_key,
            used_fallback=used_fallback,
        ),
    )


def calculate(
    selection: Selection,
    categories: Sequence[Category],
    *,
    fallback: FallbackPolicy = FallbackPolicy.FIRST_KEY,
) -> CalculationResult | None:
    """Return the :class:`CalculationResult` for *selection*, or ``None``."""
    return evaluate(selection, categories, fallback=fallback).result


def selection_issue(selection: Selection, categories: Sequence[Category]) -> str | None:
    """Explain why a populated selection has no bitrate, if it has none."""
    if not selection.variant_name or not selection.resolution_id or not selection.frame_rate_id:
        return None
    category = next((c for c in categories if c.id == selection.category_id), None)
    codec = category.find_codec(selection.codec_id) if category else None
    variant = codec.find_variant(selection.variant_name) if codec else None
    if variant is None:
        return None

    entry = variant.bitrates.entry(selection.resolution_id)
    if entry is None or not entry.is_supported:
        return "This resolution is not supported by the selected codec variant"
    if isinstance(entry, PerFrameRate) and not is_positive_bitrate(
        entry.get(selection.frame_rate_id)
    ):
        return "This frame rate is not supported for the selected resolution and codec"
    return None
