"""JSON-backed implementations of :class:`~codecalc.core.protocols.CatalogProvider`.

This module is the **only** place in the codebase that reads catalog
files.  I/O and decode failures are re-raised as
:class:`~codecalc.exceptions.CatalogLoadError`; malformed entries inside
an otherwise readable document are skipped or kept as malformed tables
and reported through logging, never raised.

Document shape::

    {"categories": [
        {"id": "professional", "name": "Professional",
         "codecs": [
            {"id": "prores", "name": "Apple ProRes",
             "variants": [
                {"name": "ProRes 422 HQ",
                 "bitrates": {"1080p": {"23.98": 176, "29.97": 220},
                              "UHD": 707}}]}]}]}

A bare list of categories is accepted as well.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from importlib import resources
from pathlib import Path
from typing import Any

from codecalc.core.bitrate_table import BitrateTable, validate_bitrate_data
from codecalc.core.models import Category, Codec, Variant
from codecalc.exceptions import CatalogLoadError

logger = logging.getLogger(__name__)

BUNDLED_CATALOG: str = "catalog.json"


class StaticCatalogProvider:
    """In-memory :class:`CatalogProvider` around pre-built categories."""

    def __init__(self, categories: Sequence[Category]) -> None:
        self._categories: tuple[Category, ...] = tuple(categories)

    def get_categories(self) -> Sequence[Category]:
        return self._categories


class JsonCatalogProvider:
    """Concrete :class:`CatalogProvider` reading a JSON document.

    Usage::

        provider = JsonCatalogProvider()                  # bundled catalog
        provider = JsonCatalogProvider(Path("my.json"))   # user catalog
        categories = provider.get_categories()

    The document is read once, on first access, and cached.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path: Path | None = path
        self._categories: tuple[Category, ...] | None = None
        self.problems: list[str] = []
        """Human-readable data problems found while parsing."""

    @property
    def source(self) -> str:
        return str(self._path) if self._path is not None else f"<bundled {BUNDLED_CATALOG}>"

    # ------------------------------------------------------------------
    # Protocol method
    # ------------------------------------------------------------------

    def get_categories(self) -> Sequence[Category]:
        """Return the parsed categories, loading the document if needed.

        Raises
        ------
        CatalogLoadError
            When the file is missing, unreadable, or not valid JSON.
        """
        if self._categories is None:
            document = self._read_document()
            self._categories = self.parse_document(document)
            logger.info(
                "Loaded %d categories from %s", len(self._categories), self.source,
            )
        return self._categories

    # ------------------------------------------------------------------
    # I/O boundary
    # ------------------------------------------------------------------

    def _read_text(self) -> str:
        if self._path is None:
            return (
                resources.files("codecalc.infra")
                .joinpath("data", BUNDLED_CATALOG)
                .read_text(encoding="utf-8")
            )
        return self._path.read_text(encoding="utf-8")

    def _read_document(self) -> Any:
        try:
            text = self._read_text()
        except FileNotFoundError as exc:
            raise CatalogLoadError(
                f"Catalog file not found: {self.source}",
                hint="Pass --catalog with an existing JSON file, or omit it to use the bundled catalog.",
            ) from exc
        except OSError as exc:
            raise CatalogLoadError(f"Cannot read catalog {self.source}: {exc}") from exc

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise CatalogLoadError(
                f"Catalog {self.source} is not valid JSON: {exc.msg} (line {exc.lineno})",
            ) from exc

    # ------------------------------------------------------------------
    # Raw-dict → domain-model parsers
    # ------------------------------------------------------------------

    def parse_document(self, document: Any) -> tuple[Category, ...]:
        """Convert a decoded document into categories, skipping bad entries."""
        raw_categories: object = (
            document.get("categories") if isinstance(document, dict) else document
        )
        if not isinstance(raw_categories, list):
            self._report("Catalog has no 'categories' list")
            return ()

        categories: list[Category] = []
        seen: set[str] = set()
        for raw in raw_categories:
            category = self._parse_category(raw)
            if category is None:
                continue
            if category.id in seen:
                self._report(f"Duplicate category id {category.id!r} ignored")
                continue
            seen.add(category.id)
            categories.append(category)
        return tuple(categories)

    def _parse_category(self, raw: object) -> Category | None:
        if not isinstance(raw, dict) or not raw.get("id"):
            self._report("Skipping category without an id")
            return None
        category_id = str(raw["id"])
        codecs: list[Codec] = []
        seen: set[str] = set()
        for entry in self._list_of_dicts(raw.get("codecs")):
            codec = self._parse_codec(category_id, entry)
            if codec is None:
                continue
            if codec.id in seen:
                self._report(f"Duplicate codec id {codec.id!r} in {category_id!r} ignored")
                continue
            seen.add(codec.id)
            codecs.append(codec)
        return Category(
            id=category_id,
            name=str(raw.get("name") or category_id),
            codecs=tuple(codecs),
            description=str(raw.get("description") or ""),
        )

    def _parse_codec(self, category_id: str, raw: dict[str, Any]) -> Codec | None:
        if not raw.get("id"):
            self._report(f"Skipping codec without an id in {category_id!r}")
            return None
        codec_id = str(raw["id"])
        variants: list[Variant] = []
        seen: set[str] = set()
        for entry in self._list_of_dicts(raw.get("variants")):
            variant = self._parse_variant(codec_id, entry)
            if variant is None:
                continue
            if variant.name in seen:
                self._report(f"Duplicate variant {variant.name!r} in codec {codec_id!r} ignored")
                continue
            seen.add(variant.name)
            variants.append(variant)
        return Codec(
            id=codec_id,
            name=str(raw.get("name") or codec_id),
            variants=tuple(variants),
            description=str(raw.get("description") or ""),
        )

    def _parse_variant(self, codec_id: str, raw: dict[str, Any]) -> Variant | None:
        name = str(raw.get("name") or "").strip()
        if not name:
            self._report(f"Skipping unnamed variant in codec {codec_id!r}")
            return None
        raw_bitrates = raw.get("bitrates")
        for problem in validate_bitrate_data(raw_bitrates):
            self._report(f"{codec_id}/{name}: {problem}")
        return Variant(
            name=name,
            bitrates=BitrateTable.from_raw(raw_bitrates),
            description=str(raw.get("description") or ""),
        )

    @staticmethod
    def _list_of_dicts(raw: object) -> list[dict[str, Any]]:
        if not isinstance(raw, list):
            return []
        return [entry for entry in raw if isinstance(entry, dict)]

    def _report(self, problem: str) -> None:
        self.problems.append(problem)
        logger.warning("%s: %s", self.source, problem)
