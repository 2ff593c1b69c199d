"""Rich rendering of calculation results and workflow presets.

Rows are built by pure helpers (:func:`result_rows`, :func:`preset_rows`)
so the numbers can be tested without a terminal; the ``render_*``
functions only lay them out, as a Rich table when Rich is importable or
as aligned plain text otherwise.  Output goes to stdout.
"""

from __future__ import annotations

import sys
from collections.abc import Sequence

from codecalc.cli.console import out, rich_available
from codecalc.core.models import CalculationResult, Preset
from codecalc.core.resolver import Correction, CorrectionReason

Row = tuple[str, str]


# ---------------------------------------------------------------------------
# Presentation helpers (pure transforms, no I/O)
# ---------------------------------------------------------------------------

def format_number(value: float, *, decimals: int = 2) -> str:
    """``1234.5`` → ``"1,234.50"``."""
    return f"{value:,.{decimals}f}"


def format_duration(total_seconds: int) -> str:
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def file_sizes(result: CalculationResult, *, binary: bool) -> tuple[float, float]:
    """Return ``(gb, tb)`` in binary (1024) or decimal (1000) steps."""
    if binary:
        return result.file_size_gb, result.file_size_tb
    return result.file_size_gb_decimal, result.file_size_tb_decimal


def units_caption(*, binary: bool) -> str:
    if binary:
        return "Binary units: 1 GB = 1024 MB"
    return "Decimal units: 1 GB = 1000 MB"


def result_rows(result: CalculationResult, *, binary: bool = False) -> list[Row]:
    """Label/value pairs for one calculation, top to bottom."""
    frame_rate = result.resolved_frame_rate.name
    if result.used_fallback and result.bitrate_frame_rate_id:
        frame_rate += f" (bitrate of {result.bitrate_frame_rate_id} fps)"
    gb, tb = file_sizes(result, binary=binary)

    return [
        ("Category", result.resolved_category.name),
        ("Codec", f"{result.resolved_codec.name} / {result.resolved_variant.name}"),
        ("Resolution", result.resolved_resolution.name),
        ("Frame rate", frame_rate),
        ("Duration", format_duration(result.total_seconds)),
        ("Bitrate", f"{format_number(result.bitrate_mbps, decimals=1)} Mbps"),
        ("Data rate", f"{format_number(result.data_rate_mb_per_minute)} MB/min"),
        ("", f"{format_number(result.data_rate_mb_per_hour)} MB/hour"),
        ("File size", f"{format_number(result.file_size_mb)} MB"),
        ("", f"{format_number(gb)} GB"),
        ("", f"{format_number(tb, decimals=3)} TB"),
    ]


def preset_rows(presets: Sequence[Preset]) -> list[tuple[str, ...]]:
    return [
        (
            preset.name,
            preset.category_id,
            preset.codec_id,
            preset.variant_name,
            preset.resolution_id,
            preset.frame_rate_id,
        )
        for preset in presets
    ]


def correction_notes(corrections: Sequence[Correction]) -> list[str]:
    """Human-readable notes for resolver auto-selections worth surfacing."""
    notes: list[str] = []
    for correction in corrections:
        label = correction.field.value.replace("_", " ")
        if correction.reason is CorrectionReason.INVALIDATED:
            notes.append(f"{label} {correction.previous!r} is not available and was cleared")
        elif correction.value is not None:
            notes.append(f"{label} set to {correction.value!r} ({correction.reason.value})")
    return notes


# ---------------------------------------------------------------------------
# Renderers
# ---------------------------------------------------------------------------

def _print_plain(title: str, header: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
    widths = [
        max(len(str(cell)) for cell in column)
        for column in zip(header, *rows)
    ]
    print(f"\n{title}", file=sys.stdout)
    print("=" * (sum(widths) + 2 * len(widths)), file=sys.stdout)
    print("  ".join(h.ljust(w) for h, w in zip(header, widths)), file=sys.stdout)
    print("-" * (sum(widths) + 2 * len(widths)), file=sys.stdout)
    for row in rows:
        print("  ".join(str(c).ljust(w) for c, w in zip(row, widths)), file=sys.stdout)
    print(file=sys.stdout)


def render_result(result: CalculationResult, *, binary: bool = False) -> None:
    """Print the file-size estimate for *result*."""
    rows = result_rows(result, binary=binary)
    caption = units_caption(binary=binary)

    if not rich_available():
        _print_plain("File size estimate", ("Item", "Value"), rows)
        print(caption, file=sys.stdout)
        return

    from rich.table import Table

    table = Table(
        title="File size estimate",
        caption=caption,
        show_header=False,
        border_style="dim",
    )
    table.add_column("Item", style="bold cyan", min_width=12)
    table.add_column("Value", justify="right", min_width=20)
    for label, value in rows:
        table.add_row(label, value)

    out.print()
    out.print(table)
    out.print()


def render_presets(presets: Sequence[Preset]) -> None:
    """Print the workflow preset list."""
    header = ("Preset", "Category", "Codec", "Variant", "Resolution", "Frame rate")
    rows = preset_rows(presets)

    if not rich_available():
        _print_plain("Workflow presets", header, rows)
        return

    from rich.table import Table

    table = Table(
        title="Workflow presets",
        show_header=True,
        header_style="bold magenta",
        border_style="dim",
    )
    for column in header:
        table.add_column(column)
    for row in rows:
        table.add_row(*row)

    out.print()
    out.print(table)
    out.print()
