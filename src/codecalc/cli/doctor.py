"""``codecalc doctor`` — environment and catalog diagnostics command.

Gathers runtime information and renders a Rich table summarising
whether the environment and the selected codec catalog are usable.

This module lives in the CLI layer — it may import from ``infra``
and ``core``, and it renders via Rich.  No business logic resides
here; it purely collects and displays diagnostic data.
"""

from __future__ import annotations

import platform
import sys
from importlib import metadata

from codecalc.cli import exit_codes
from codecalc.cli.console import console
from codecalc.exceptions import CatalogLoadError
from codecalc.infra.json_catalog import JsonCatalogProvider
from codecalc.version import __version__

Check = tuple[str, str, str]


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _python_version_check() -> Check:
    """Return (label, value, status) for the Python version row."""
    version = platform.python_version()
    ok = sys.version_info >= (3, 10)
    status = "[green]OK[/green]" if ok else "[red]FAIL (>=3.10 required)[/red]"
    return "Python", version, status


def _package_check(label: str, module: str, distribution: str) -> Check:
    """Return (label, value, status) for an importable third-party package."""
    try:
        __import__(module)
    except ImportError:
        return label, "NOT INSTALLED", "[red]FAIL[/red]"
    try:
        return label, metadata.version(distribution), "[green]OK[/green]"
    except metadata.PackageNotFoundError:
        return label, "unknown", "[green]OK[/green]"


def _rich_check() -> Check:
    return _package_check("rich", "rich", "rich")


def _questionary_check() -> Check:
    return _package_check("questionary", "questionary", "questionary")


def _codecalc_version_check() -> Check:
    """Return (label, value, status) for the codecalc version row."""
    return "codecalc", __version__, "[green]OK[/green]"


def _catalog_check(provider: JsonCatalogProvider) -> Check:
    """Return (label, value, status) for the codec catalog row."""
    try:
        categories = provider.get_categories()
    except CatalogLoadError as exc:
        return "Catalog", str(exc), "[red]FAIL[/red]"

    codecs = [codec for category in categories for codec in category.codecs]
    variants = [variant for codec in codecs for variant in codec.variants]
    value = f"{len(categories)} categories, {len(codecs)} codecs, {len(variants)} variants"
    if not variants:
        return "Catalog", value, "[red]FAIL (no variants)[/red]"
    if provider.problems or any(variant.bitrates.malformed for variant in variants):
        return "Catalog", value, "[yellow]WARN[/yellow]"
    return "Catalog", value, "[green]OK[/green]"


def _status_plain(status: str) -> str:
    """Convert rich-markup status to plain text."""
    if "FAIL" in status:
        return "FAIL"
    if "WARN" in status:
        return "WARN"
    if "OK" in status:
        return "OK"
    return status


def _print_plain_doctor_table(checks: list[Check]) -> None:
    """Render doctor output without Rich."""
    print("\ncodecalc doctor", file=sys.stderr)
    print("=" * 60, file=sys.stderr)
    print(f"{'Component':<12} {'Value':<38} {'Status':<8}", file=sys.stderr)
    print("-" * 60, file=sys.stderr)
    for label, value, status in checks:
        print(f"{label:<12} {value:<38} {_status_plain(status):<8}", file=sys.stderr)
    print(file=sys.stderr)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def run_doctor(provider: JsonCatalogProvider | None = None) -> int:
    """Execute all diagnostic checks and render a summary table.

    Parameters
    ----------
    provider:
        Catalog to inspect.  Defaults to the bundled catalog.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` when all critical checks pass,
        :data:`exit_codes.GENERAL_ERROR` if a critical check fails.
    """
    provider = provider if provider is not None else JsonCatalogProvider()
    checks = [
        _codecalc_version_check(),
        _python_version_check(),
        _rich_check(),
        _questionary_check(),
        _catalog_check(provider),
    ]
    has_failure = any("FAIL" in status for _, _, status in checks)

    rich_available = True
    try:
        from rich.table import Table
    except ModuleNotFoundError:
        rich_available = False

    if rich_available:
        table = Table(
            title="codecalc doctor",
            caption=f"Catalog: {provider.source}",
            show_header=True,
            header_style="bold cyan",
            border_style="dim",
        )
        table.add_column("Component", style="bold", min_width=12)
        table.add_column("Value", min_width=20)
        table.add_column("Status", justify="center", min_width=8)
        for label, value, status in checks:
            table.add_row(label, value, status)

        console.print()
        console.print(table)
        console.print()
    else:
        _print_plain_doctor_table(checks)
        print(f"Catalog: {provider.source}", file=sys.stderr)

    # List catalog data problems so the user can fix their file.
    if provider.problems:
        console.print("Catalog data problems:")
        for problem in provider.problems:
            console.print(f"  - {problem}")
        console.print()

    if has_failure:
        if rich_available:
            console.print("[bold red]Some checks failed.[/bold red]")
        else:
            print("Some checks failed.", file=sys.stderr)
        return exit_codes.GENERAL_ERROR

    if rich_available:
        console.print("[bold green]All checks passed.[/bold green]")
    else:
        print("All checks passed.", file=sys.stderr)
    return exit_codes.SUCCESS
