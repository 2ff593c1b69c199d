"""Constraint resolution for the cascading selection.

Each level's valid options depend on the levels above it and on the
sparse bitrate table of the selected variant.  The resolver keeps a
:class:`~codecalc.core.models.Selection` consistent by applying one
correction at a time, top-down, until nothing changes.

Rules (evaluated in this order by :meth:`ConstraintResolver.step`):

1. **Category** — an unknown category is cleared.
2. **Codec** — a codec outside the category's codec list is cleared.
3. **Variant** — a variant outside the codec's variant list is cleared.
4. **Singleton variant** — a codec with exactly one variant (with a
   non-empty table) and nothing selected gets that variant.
5. **Resolution** — a resolution outside the variant's domain is
   reselected to the first valid one, or cleared when none is valid.
6. **Frame rate** — a frame rate outside its domain is auto-selected
   (one option), replaced by the preferred rate (several), or cleared
   (none).

Rules only clear fields or fill them from a strictly narrower domain,
so :meth:`ConstraintResolver.settle` always reaches a fixed point.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace

from codecalc.core import option_catalog
from codecalc.core.models import (
    Category,
    Codec,
    FrameRateOption,
    ResolutionOption,
    Selection,
    SelectionField,
    Variant,
)
from codecalc.exceptions import ResolutionLoopError, UnknownFieldError

logger = logging.getLogger(__name__)

DEFAULT_MAX_PASSES: int = 32


class CorrectionReason(str, enum.Enum):
    INVALIDATED = "invalidated"
    AUTO_SELECTED = "auto-selected"
    RESELECTED = "reselected"
    PREFERRED = "preferred"


@dataclass(frozen=True, slots=True)
class Correction:
    """A single resolver-driven field assignment."""

    field: SelectionField
    previous: str | None
    value: str | None
    reason: CorrectionReason

    def apply(self, selection: Selection) -> Selection:
        return replace(selection, **{self.field.attribute: self.value})


@dataclass(frozen=True, slots=True)
class Resolution:
    """Outcome of :meth:`ConstraintResolver.settle`."""

    selection: Selection
    corrections: tuple[Correction, ...]

    @property
    def changed(self) -> bool:
        return bool(self.corrections)


class ConstraintResolver:
    """Computes option domains and restores selection consistency.

    Parameters
    ----------
    max_passes:
        Upper bound on corrections per :meth:`settle` call.
    """

    def __init__(self, *, max_passes: int = DEFAULT_MAX_PASSES) -> None:
        self._max_passes: int = max_passes

    # ------------------------------------------------------------------
    # Entity lookup
    # ------------------------------------------------------------------

    @staticmethod
    def find_category(
        categories: Sequence[Category], category_id: str | None,
    ) -> Category | None:
        if not category_id:
            return None
        return next((category for category in categories if category.id == category_id), None)

    def find_codec(self, categories: Sequence[Category], selection: Selection) -> Codec | None:
        category = self.find_category(categories, selection.category_id)
        return category.find_codec(selection.codec_id) if category else None

    def find_variant(self, categories: Sequence[Category], selection: Selection) -> Variant | None:
        codec = self.find_codec(categories, selection)
        return codec.find_variant(selection.variant_name) if codec else None

    # ------------------------------------------------------------------
    # Domains
    # ------------------------------------------------------------------

    def codecs_for(self, categories: Sequence[Category], selection: Selection) -> list[Codec]:
        category = self.find_category(categories, selection.category_id)
        return list(category.codecs) if category else []

    def variants_for(self, categories: Sequence[Category], selection: Selection) -> list[Variant]:
        codec = self.find_codec(categories, selection)
        return list(codec.variants) if codec else []

    def resolution_domain(
        self, categories: Sequence[Category], selection: Selection,
    ) -> list[ResolutionOption]:
        """Resolutions valid for the selected variant, in catalog order.

        Without a selected variant the whole catalog is offered.
        """
        if not selection.variant_name:
            return list(option_catalog.RESOLUTIONS)
        variant = self.find_variant(categories, selection)
        if variant is None:
            return []
        if variant.bitrates.malformed:
            logger.debug("Bitrate table of %r is malformed; no resolutions offered", variant.name)
            return []
        return [
            option
            for option in option_catalog.RESOLUTIONS
            if variant.bitrates.supports_resolution(option.id)
            and option_catalog.category_allows(selection.category_id, option.id)
        ]

    def frame_rate_domain(
        self, categories: Sequence[Category], selection: Selection,
    ) -> list[FrameRateOption]:
        """Frame rates valid for the selected variant and resolution.

        Without a variant and resolution the whole catalog is offered.
        """
        if not selection.variant_name or not selection.resolution_id:
            return list(option_catalog.FRAME_RATES)
        variant = self.find_variant(categories, selection)
        resolution = option_catalog.find_resolution(selection.resolution_id)
        if variant is None or resolution is None:
            return []
        with_bitrate = set(
            variant.bitrates.frame_rates_with_bitrate(
                resolution.id, option_catalog.FRAME_RATE_IDS,
            )
        )
        allowed = set(option_catalog.allowed_frame_rates(resolution))
        return [
            option
            for option in option_catalog.FRAME_RATES
            if option.id in with_bitrate and option.id in allowed
        ]

    def available_options(
        self,
        categories: Sequence[Category],
        selection: Selection,
        level: SelectionField,
    ) -> list[Category] | list[Codec] | list[Variant] | list[ResolutionOption] | list[FrameRateOption]:
        """Options for *level* given the fields above it."""
        if level is SelectionField.CATEGORY:
            return list(categories)
        if level is SelectionField.CODEC:
            return self.codecs_for(categories, selection)
        if level is SelectionField.VARIANT:
            return self.variants_for(categories, selection)
        if level is SelectionField.RESOLUTION:
            return self.resolution_domain(categories, selection)
        if level is SelectionField.FRAME_RATE:
            return self.frame_rate_domain(categories, selection)
        raise UnknownFieldError(f"{level.value!r} has no option list")

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    def step(self, categories: Sequence[Category], selection: Selection) -> Correction | None:
        """Return the first correction *selection* needs, or ``None``."""
        for rule in (
            self._check_category,
            self._check_codec,
            self._check_variant,
            self._auto_select_variant,
            self._check_resolution,
            self._check_frame_rate,
        ):
            correction = rule(categories, selection)
            if correction is not None:
                return correction
        return None

    def settle(self, categories: Sequence[Category], selection: Selection) -> Resolution:
        """Apply corrections until *selection* is settled.

        Raises
        ------
        ResolutionLoopError
            If more than ``max_passes`` corrections were needed.
        """
        corrections: list[Correction] = []
        current = selection
        while True:
            correction = self.step(categories, current)
            if correction is None:
                return Resolution(selection=current, corrections=tuple(corrections))
            if len(corrections) >= self._max_passes:
                break
            logger.debug(
                "%s %s: %r -> %r",
                correction.reason.value,
                correction.field.value,
                correction.previous,
                correction.value,
            )
            corrections.append(correction)
            current = correction.apply(current)
        raise ResolutionLoopError(
            f"Selection did not settle after {self._max_passes} corrections.",
            hint="This is a bug in the resolver rules; please report it.",
        )

    def _check_category(
        self, categories: Sequence[Category], selection: Selection,
    ) -> Correction | None:
        if selection.category_id and self.find_category(categories, selection.category_id) is None:
            return Correction(
                SelectionField.CATEGORY, selection.category_id, None, CorrectionReason.INVALIDATED,
            )
        return None

    def _check_codec(
        self, categories: Sequence[Category], selection: Selection,
    ) -> Correction | None:
        if selection.codec_id and self.find_codec(categories, selection) is None:
            return Correction(
                SelectionField.CODEC, selection.codec_id, None, CorrectionReason.INVALIDATED,
            )
        return None

    def _check_variant(
        self, categories: Sequence[Category], selection: Selection,
    ) -> Correction | None:
        if selection.variant_name and self.find_variant(categories, selection) is None:
            return Correction(
                SelectionField.VARIANT, selection.variant_name, None, CorrectionReason.INVALIDATED,
            )
        return None

    def _auto_select_variant(
        self, categories: Sequence[Category], selection: Selection,
    ) -> Correction | None:
        if not selection.codec_id or selection.variant_name:
            return None
        variants = self.variants_for(categories, selection)
        if len(variants) == 1 and variants[0].bitrates:
            return Correction(
                SelectionField.VARIANT, None, variants[0].name, CorrectionReason.AUTO_SELECTED,
            )
        return None

    def _check_resolution(
        self, categories: Sequence[Category], selection: Selection,
    ) -> Correction | None:
        current = selection.resolution_id
        domain = self.resolution_domain(categories, selection)
        if any(option.id == current for option in domain):
            return None
        if domain and selection.variant_name:
            return Correction(
                SelectionField.RESOLUTION, current, domain[0].id, CorrectionReason.RESELECTED,
            )
        if current:
            return Correction(
                SelectionField.RESOLUTION, current, None, CorrectionReason.INVALIDATED,
            )
        return None

    def _check_frame_rate(
        self, categories: Sequence[Category], selection: Selection,
    ) -> Correction | None:
        current = selection.frame_rate_id
        domain = self.frame_rate_domain(categories, selection)
        if any(option.id == current for option in domain):
            return None
        constrained = bool(selection.variant_name and selection.resolution_id)
        if constrained and len(domain) == 1:
            return Correction(
                SelectionField.FRAME_RATE, current, domain[0].id, CorrectionReason.AUTO_SELECTED,
            )
        if constrained and domain:
            return Correction(
                SelectionField.FRAME_RATE,
                current,
                self._preferred_frame_rate(selection, domain).id,
                CorrectionReason.PREFERRED,
            )
        if current:
            return Correction(
                SelectionField.FRAME_RATE, current, None, CorrectionReason.INVALIDATED,
            )
        return None

    @staticmethod
    def _preferred_frame_rate(
        selection: Selection, domain: list[FrameRateOption],
    ) -> FrameRateOption:
        resolution = option_catalog.find_resolution(selection.resolution_id)
        if resolution is not None:
            by_id = {option.id: option for option in domain}
            for frame_rate_id in option_catalog.preferred_frame_rates(resolution):
                if frame_rate_id in by_id:
                    return by_id[frame_rate_id]
        return domain[0]
