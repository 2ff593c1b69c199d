"""Tests for static reference data (core/option_catalog.py).

Catalog order, category allow-lists, frame-rate allow-lists and
preferences, and workflow preset lookup.
"""

from __future__ import annotations

import pytest

from codecalc.core import option_catalog
from codecalc.core.models import ResolutionOption, ScanType, TechnicalClass


def _resolution(resolution_id: str) -> ResolutionOption:
    found = option_catalog.find_resolution(resolution_id)
    assert found is not None
    return found


# ---------------------------------------------------------------------------
# Catalog contents
# ---------------------------------------------------------------------------

class TestCatalogOrder:
    def test_resolution_order(self) -> None:
        assert option_catalog.RESOLUTION_IDS == (
            "NTSC_DV", "NTSC_D1", "PAL",
            "720p", "1080i", "1080p", "1440x1080",
            "2K", "4K", "6K", "8K",
            "UHD", "8K UHD",
        )

    def test_frame_rate_order(self) -> None:
        assert option_catalog.FRAME_RATE_IDS == (
            "23.98", "24", "25", "29.97", "30", "50", "59.94", "60", "120", "240",
        )

    def test_ids_are_unique(self) -> None:
        assert len(set(option_catalog.RESOLUTION_IDS)) == len(option_catalog.RESOLUTION_IDS)
        assert len(set(option_catalog.FRAME_RATE_IDS)) == len(option_catalog.FRAME_RATE_IDS)

    def test_only_1080i_is_interlaced(self) -> None:
        interlaced = [r.id for r in option_catalog.RESOLUTIONS if r.scan is ScanType.INTERLACED]
        assert interlaced == ["1080i"]

    def test_find_helpers(self) -> None:
        assert _resolution("UHD").technical_class is TechnicalClass.UHD
        assert option_catalog.find_resolution("9K") is None
        assert option_catalog.find_resolution(None) is None
        frame_rate = option_catalog.find_frame_rate("29.97")
        assert frame_rate is not None and frame_rate.value == pytest.approx(29.97)
        assert option_catalog.find_frame_rate("") is None


# ---------------------------------------------------------------------------
# Category allow-lists
# ---------------------------------------------------------------------------

class TestCategoryAllows:
    @pytest.mark.parametrize(
        ("category", "resolution", "allowed"),
        [
            ("camera", "1080i", True),
            ("camera", "4K", True),
            ("camera", "6K", False),
            ("broadcast", "UHD", True),
            ("broadcast", "2K", False),
            ("professional", "2K", True),
            ("professional", "8K", False),
            ("cinema", "2K", True),
            ("cinema", "8K", True),
            ("cinema", "1080p", False),
            ("cinema", "UHD", False),
            ("raw", "8K UHD", True),
            ("delivery", "PAL", True),
            (None, "6K", True),
        ],
    )
    def test_allow_list(self, category: str | None, resolution: str, allowed: bool) -> None:
        assert option_catalog.category_allows(category, resolution) is allowed


# ---------------------------------------------------------------------------
# Frame-rate allow-lists and preferences
# ---------------------------------------------------------------------------

class TestFrameRateRules:
    def test_interlaced(self) -> None:
        assert option_catalog.allowed_frame_rates(_resolution("1080i")) == ("25", "29.97", "30")

    def test_progressive_hd_and_uhd(self) -> None:
        for resolution_id in ("720p", "1080p", "UHD"):
            allowed = option_catalog.allowed_frame_rates(_resolution(resolution_id))
            assert allowed[0] == "23.98" and allowed[-1] == "60"
            assert "120" not in allowed

    def test_cinema_and_sd(self) -> None:
        for resolution_id in ("2K", "6K", "PAL", "NTSC_DV"):
            assert option_catalog.allowed_frame_rates(_resolution(resolution_id)) == (
                "23.98", "24", "25", "29.97", "30",
            )

    def test_preferences(self) -> None:
        assert option_catalog.preferred_frame_rates(_resolution("1080i")) == ("29.97", "30")
        assert option_catalog.preferred_frame_rates(_resolution("1080p")) == ("30", "29.97")
        assert option_catalog.preferred_frame_rates(_resolution("4K")) == ("24",)
        assert option_catalog.preferred_frame_rates(_resolution("PAL")) == ()

    def test_constraint_notes(self) -> None:
        assert "Interlaced" in option_catalog.frame_rate_constraint_note(_resolution("1080i"))
        assert "Cinema" in option_catalog.frame_rate_constraint_note(_resolution("2K"))
        assert option_catalog.frame_rate_constraint_note(None)


# ---------------------------------------------------------------------------
# Presets
# ---------------------------------------------------------------------------

class TestPresets:
    def test_eight_presets_with_unique_ids(self) -> None:
        ids = [preset.id for preset in option_catalog.DEFAULT_PRESETS]
        assert len(ids) == 8
        assert len(set(ids)) == 8

    def test_preset_ids_reference_catalog_options(self) -> None:
        for preset in option_catalog.DEFAULT_PRESETS:
            assert preset.resolution_id in option_catalog.RESOLUTION_IDS
            assert preset.frame_rate_id in option_catalog.FRAME_RATE_IDS

    def test_find_by_name_is_case_insensitive(self) -> None:
        preset = option_catalog.find_preset("netflix 4k")
        assert preset is not None
        assert preset.codec_id == "jpeg2000"

    def test_find_by_id(self) -> None:
        preset = option_catalog.find_preset("preset-3")
        assert preset is not None
        assert preset.name == "News TV"

    def test_unknown_preset(self) -> None:
        assert option_catalog.find_preset("Vertical TikTok") is None
