"""Shared pytest fixtures and configuration for the codecalc test suite.

Guidelines
----------
* No network access and no user catalog files; catalogs are built in
  memory or written to ``tmp_path``.
* Core tests must be pure and free of side effects.
* Settings are re-read per test (the ``get_settings`` cache is cleared).

The ``catalog`` fixture is a small hand-made hierarchy whose variants
exercise every bitrate-table shape:

=============  ==========  ============  =========================================
category       codec       variant       table
=============  ==========  ============  =========================================
professional   prores      422 HQ        1080p/UHD per frame rate
professional   prores      LT            1080p @ 25 only
professional   dnxhr       DNxHR SQ      single resolution, single frame rate
delivery       h264        High          ``{"1080p": {"30": 50}}``
delivery       h264        Flat 4K       ``{"4K": 200}`` (flat)
delivery       h264        Zero          ``{"1080p": {"30": 0}}``
delivery       h264        Broken        not a mapping (malformed)
camera         xdcam       HD422         1080i (25/29.97/50), 720p (50/59.94)
cinema         dcp         DCP 2K        2K @ 24, plus 1080p (not cinema)
=============  ==========  ============  =========================================
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator

import pytest

from codecalc.config import get_settings
from codecalc.core.bitrate_table import BitrateTable
from codecalc.core.models import Category, Codec, Variant
from codecalc.infra.json_catalog import StaticCatalogProvider


def _variant(name: str, raw: object) -> Variant:
    return Variant(name=name, bitrates=BitrateTable.from_raw(raw))


def _build_catalog() -> tuple[Category, ...]:
    return (
        Category(
            id="professional",
            name="Professional",
            codecs=(
                Codec(
                    id="prores",
                    name="Apple ProRes",
                    variants=(
                        _variant("422 HQ", {
                            "1080p": {"23.98": 176, "25": 184, "29.97": 220, "30": 220},
                            "UHD": {"23.98": 707, "24": 707, "30": 884},
                        }),
                        _variant("LT", {"1080p": {"25": 82}}),
                    ),
                ),
                Codec(
                    id="dnxhr",
                    name="Avid DNxHR",
                    variants=(_variant("DNxHR SQ", {"1080p": {"25": 116}}),),
                ),
            ),
        ),
        Category(
            id="delivery",
            name="Delivery",
            codecs=(
                Codec(
                    id="h264",
                    name="H.264",
                    variants=(
                        _variant("High", {"1080p": {"30": 50}}),
                        _variant("Flat 4K", {"4K": 200}),
                        _variant("Zero", {"1080p": {"30": 0}}),
                        _variant("Broken", "not a table"),
                    ),
                ),
            ),
        ),
        Category(
            id="camera",
            name="Camera",
            codecs=(
                Codec(
                    id="xdcam",
                    name="XDCAM",
                    variants=(
                        _variant("HD422", {
                            "1080i": {"25": 50, "29.97": 50, "50": 50},
                            "720p": {"50": 50, "59.94": 50},
                        }),
                    ),
                ),
            ),
        ),
        Category(
            id="cinema",
            name="Cinema",
            codecs=(
                Codec(
                    id="dcp",
                    name="DCP",
                    variants=(_variant("DCP 2K", {"2K": {"24": 250}, "1080p": 100}),),
                ),
            ),
        ),
    )


@pytest.fixture()
def catalog() -> tuple[Category, ...]:
    return _build_catalog()


@pytest.fixture()
def provider(catalog: tuple[Category, ...]) -> StaticCatalogProvider:
    return StaticCatalogProvider(catalog)


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Isolate every test from CODECALC_* variables in the real environment."""
    for key in list(os.environ):
        if key.startswith("CODECALC_"):
            monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()

    # main() installs a stderr handler; drop it so later tests start clean.
    package_logger = logging.getLogger("codecalc")
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)
