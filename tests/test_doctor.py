"""Tests for the ``codecalc doctor`` command (cli/doctor.py).

Catalogs are written to ``tmp_path`` or the bundled one is used; no
network and no user files.

Coverage:
* Individual check functions return correct tuples.
* The catalog check distinguishes OK / WARN / FAIL.
* ``run_doctor`` returns SUCCESS or GENERAL_ERROR and renders with and
  without Rich.
* CLI routing dispatches to ``run_doctor``.
"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from codecalc.cli import exit_codes
from codecalc.infra.json_catalog import JsonCatalogProvider


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _catalog_file(tmp_path: Path, variants: list[dict]) -> Path:
    path = tmp_path / "catalog.json"
    path.write_text(
        json.dumps([{"id": "delivery", "codecs": [{"id": "h264", "variants": variants}]}]),
        encoding="utf-8",
    )
    return path


# ---------------------------------------------------------------------------
# Individual check functions
# ---------------------------------------------------------------------------

class TestPythonVersionCheck:
    def test_returns_tuple(self) -> None:
        from codecalc.cli.doctor import _python_version_check

        label, value, status = _python_version_check()
        assert label == "Python"
        assert isinstance(value, str)
        assert "OK" in status


class TestPackageChecks:
    def test_rich_installed(self) -> None:
        from codecalc.cli.doctor import _rich_check

        label, value, status = _rich_check()
        assert label == "rich"
        assert value != "NOT INSTALLED"
        assert "OK" in status

    @patch.dict("sys.modules", {"questionary": None})
    def test_questionary_not_installed(self) -> None:
        from codecalc.cli.doctor import _questionary_check

        label, value, status = _questionary_check()
        assert label == "questionary"
        assert value == "NOT INSTALLED"
        assert "FAIL" in status

    def test_unknown_distribution_version(self) -> None:
        from codecalc.cli.doctor import _package_check

        label, value, status = _package_check("json", "json", "no-such-distribution")
        assert (label, value) == ("json", "unknown")
        assert "OK" in status


class TestCodecalcVersionCheck:
    def test_returns_current_version(self) -> None:
        from codecalc.cli.doctor import _codecalc_version_check
        from codecalc.version import __version__

        label, value, status = _codecalc_version_check()
        assert label == "codecalc"
        assert value == __version__
        assert "OK" in status


class TestCatalogCheck:
    def test_bundled_catalog_ok(self) -> None:
        from codecalc.cli.doctor import _catalog_check

        label, value, status = _catalog_check(JsonCatalogProvider())
        assert label == "Catalog"
        assert value.startswith("6 categories")
        assert "OK" in status

    def test_data_problems_warn(self, tmp_path: Path) -> None:
        from codecalc.cli.doctor import _catalog_check

        path = _catalog_file(tmp_path, [
            {"name": "Good", "bitrates": {"1080p": 10}},
            {"name": "Bad", "bitrates": "fast"},
        ])
        _label, value, status = _catalog_check(JsonCatalogProvider(path))
        assert value == "1 categories, 1 codecs, 2 variants"
        assert "WARN" in status

    def test_no_variants_fails(self, tmp_path: Path) -> None:
        from codecalc.cli.doctor import _catalog_check

        _label, _value, status = _catalog_check(JsonCatalogProvider(_catalog_file(tmp_path, [])))
        assert "FAIL" in status

    def test_unreadable_catalog_fails(self, tmp_path: Path) -> None:
        from codecalc.cli.doctor import _catalog_check

        _label, value, status = _catalog_check(JsonCatalogProvider(tmp_path / "missing.json"))
        assert "not found" in value
        assert "FAIL" in status


# ---------------------------------------------------------------------------
# run_doctor integration
# ---------------------------------------------------------------------------

class TestRunDoctor:
    def test_all_pass_returns_success(self, capsys: pytest.CaptureFixture[str]) -> None:
        from codecalc.cli.doctor import run_doctor

        assert run_doctor() == exit_codes.SUCCESS
        assert "All checks passed." in capsys.readouterr().err

    def test_catalog_failure_returns_error(self, tmp_path: Path) -> None:
        from codecalc.cli.doctor import run_doctor

        code = run_doctor(JsonCatalogProvider(tmp_path / "missing.json"))
        assert code == exit_codes.GENERAL_ERROR

    def test_problems_are_listed(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        from codecalc.cli.doctor import run_doctor

        path = _catalog_file(tmp_path, [{"name": "Zero", "bitrates": {"1080p": 0}}])
        assert run_doctor(JsonCatalogProvider(path)) == exit_codes.SUCCESS
        err = capsys.readouterr().err
        assert "Catalog data problems:" in err
        assert "h264/Zero: Invalid bitrate for 1080p: must be positive" in err

    @patch.dict("sys.modules", {"rich": None, "rich.table": None, "rich.console": None})
    def test_plain_output_without_rich(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        from codecalc.cli.doctor import run_doctor

        code = run_doctor(JsonCatalogProvider(tmp_path / "missing.json"))
        assert code == exit_codes.GENERAL_ERROR

        err = capsys.readouterr().err
        assert "codecalc doctor" in err
        assert "FAIL" in err
        assert "[red]" not in err
        assert "Some checks failed." in err
        assert f"Catalog: {tmp_path / 'missing.json'}" in err


# ---------------------------------------------------------------------------
# CLI routing
# ---------------------------------------------------------------------------

class TestDoctorRouting:
    @patch("codecalc.cli.doctor.run_doctor", return_value=exit_codes.SUCCESS)
    def test_doctor_dispatches(self, mock_run: MagicMock) -> None:
        from codecalc.cli.app import main

        code = main(["doctor"])
        assert code == exit_codes.SUCCESS
        mock_run.assert_called_once()
        (provider,), _ = mock_run.call_args
        assert provider.source == "<bundled catalog.json>"

    @patch("codecalc.cli.doctor.run_doctor", return_value=exit_codes.GENERAL_ERROR)
    def test_doctor_failure_propagates(self, mock_run: MagicMock) -> None:
        from codecalc.cli.app import main

        code = main(["doctor"])
        assert code == exit_codes.GENERAL_ERROR

    @patch("codecalc.cli.doctor.run_doctor", return_value=exit_codes.SUCCESS)
    def test_doctor_uses_catalog_flag(self, mock_run: MagicMock, tmp_path: Path) -> None:
        from codecalc.cli.app import main

        main(["doctor", "--catalog", str(tmp_path / "c.json")])
        (provider,), _ = mock_run.call_args
        assert provider.source == str(tmp_path / "c.json")
