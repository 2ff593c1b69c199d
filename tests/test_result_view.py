"""Tests for result and preset rendering (cli/result_view.py).

Row builders are checked directly; the renderers are checked through
``capsys`` with Rich present and with Rich hidden.
"""

from __future__ import annotations

import sys

import pytest

from codecalc.cli.result_view import (
    correction_notes,
    format_duration,
    format_number,
    preset_rows,
    render_presets,
    render_result,
    result_rows,
    units_caption,
)
from codecalc.core import engine, option_catalog
from codecalc.core.bitrate_table import BitrateTable
from codecalc.core.models import CalculationResult, Category, Codec, Selection, SelectionField, Variant
from codecalc.core.resolver import Correction, CorrectionReason


def _hide_rich(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setitem(sys.modules, "rich", None)
    monkeypatch.setitem(sys.modules, "rich.console", None)
    monkeypatch.setitem(sys.modules, "rich.table", None)


@pytest.fixture()
def result(catalog: tuple[Category, ...]) -> CalculationResult:
    found = engine.calculate(Selection("delivery", "h264", "High", "1080p", "30"), catalog)
    assert found is not None
    return found


def _rows(result: CalculationResult, *, binary: bool = False) -> dict[str, list[str]]:
    rows: dict[str, list[str]] = {}
    label = ""
    for name, value in result_rows(result, binary=binary):
        label = name or label
        rows.setdefault(label, []).append(value)
    return rows


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------

class TestFormatting:
    def test_format_number(self) -> None:
        assert format_number(1234.5) == "1,234.50"
        assert format_number(0.0214, decimals=3) == "0.021"

    @pytest.mark.parametrize(
        ("seconds", "expected"),
        [(0, "00:00:00"), (59, "00:00:59"), (3661, "01:01:01"), (36000, "10:00:00")],
    )
    def test_format_duration(self, seconds: int, expected: str) -> None:
        assert format_duration(seconds) == expected

    def test_units_caption(self) -> None:
        assert units_caption(binary=True) == "Binary units: 1 GB = 1024 MB"
        assert units_caption(binary=False) == "Decimal units: 1 GB = 1000 MB"


# ---------------------------------------------------------------------------
# Row builders
# ---------------------------------------------------------------------------

class TestResultRows:
    def test_decimal_rows(self, result: CalculationResult) -> None:
        rows = _rows(result)
        assert rows["Category"] == ["Delivery"]
        assert rows["Codec"] == ["H.264 / High"]
        assert rows["Duration"] == ["01:00:00"]
        assert rows["Bitrate"] == ["50.0 Mbps"]
        assert rows["Data rate"] == ["375.00 MB/min", "22,500.00 MB/hour"]
        assert rows["File size"][:2] == ["22,500.00 MB", "22.50 GB"]

    def test_binary_rows(self, result: CalculationResult) -> None:
        rows = _rows(result, binary=True)
        assert rows["File size"][:2] == ["22,500.00 MB", "21.97 GB"]
        assert rows["File size"][2] == "0.021 TB"

    def test_fallback_frame_rate_is_labelled(self) -> None:
        variant = Variant("Test", BitrateTable.from_raw({"1080p": {"30": 220, "25": 184}}))
        catalog = (Category("c", "C", (Codec("x", "X", (variant,)),)),)
        found = engine.calculate(Selection("c", "x", "Test", "1080p", "24"), catalog)
        assert found is not None

        (frame_rate,) = _rows(found)["Frame rate"]
        assert frame_rate.endswith("(bitrate of 30 fps)")

    def test_exact_frame_rate_has_no_note(self, result: CalculationResult) -> None:
        (frame_rate,) = _rows(result)["Frame rate"]
        assert "bitrate of" not in frame_rate


class TestPresetRows:
    def test_one_row_per_preset(self) -> None:
        rows = preset_rows(option_catalog.DEFAULT_PRESETS)
        assert len(rows) == 8
        assert rows[0] == ("YouTube 1080p", "delivery", "h264", "High Profile", "1080p", "30")


class TestCorrectionNotes:
    def test_notes(self) -> None:
        notes = correction_notes([
            Correction(SelectionField.CATEGORY, "nope", None, CorrectionReason.INVALIDATED),
            Correction(SelectionField.FRAME_RATE, None, "29.97", CorrectionReason.PREFERRED),
            Correction(SelectionField.VARIANT, None, "DNxHR SQ", CorrectionReason.AUTO_SELECTED),
        ])
        assert notes == [
            "category 'nope' is not available and was cleared",
            "frame rate set to '29.97' (preferred)",
            "variant set to 'DNxHR SQ' (auto-selected)",
        ]

    def test_empty(self) -> None:
        assert correction_notes(()) == []


# ---------------------------------------------------------------------------
# Renderers
# ---------------------------------------------------------------------------

class TestRender:
    @pytest.fixture(autouse=True)
    def _wide_terminal(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("COLUMNS", "160")

    def test_result_goes_to_stdout(
        self, result: CalculationResult, capsys: pytest.CaptureFixture[str],
    ) -> None:
        render_result(result)
        captured = capsys.readouterr()
        assert "File size estimate" in captured.out
        assert "22,500.00 MB" in captured.out
        assert "Decimal units" in captured.out
        assert captured.err == ""

    def test_result_without_rich(
        self,
        result: CalculationResult,
        capsys: pytest.CaptureFixture[str],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        _hide_rich(monkeypatch)
        render_result(result, binary=True)
        captured = capsys.readouterr()
        assert "21.97 GB" in captured.out
        assert "Binary units: 1 GB = 1024 MB" in captured.out

    def test_presets(self, capsys: pytest.CaptureFixture[str]) -> None:
        render_presets(option_catalog.DEFAULT_PRESETS)
        out = capsys.readouterr().out
        assert "Workflow presets" in out
        assert "Netflix 4K" in out

    def test_presets_without_rich(
        self, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        _hide_rich(monkeypatch)
        render_presets(option_catalog.DEFAULT_PRESETS)
        out = capsys.readouterr().out
        assert "Cinema 2K" in out
        assert "arri_raw" in out
