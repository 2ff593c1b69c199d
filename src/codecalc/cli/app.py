"""CLI application entry point and command routing for codecalc.

This module is the **sole error boundary** for the entire application.
It catches :class:`~codecalc.exceptions.CodecalcError`, ``KeyboardInterrupt``,
and any unexpected ``Exception``, rendering user-friendly messages via Rich
and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here — selection state, resolution and
  calculation are delegated to :class:`~codecalc.core.scheduler.SelectionScheduler`.
* ``print()`` is forbidden outside the CLI layer; Rich console is used
  where available.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from codecalc.cli import exit_codes
from codecalc.cli.console import console
from codecalc.config import LOG_LEVELS, Settings, get_settings
from codecalc.core.models import SelectionField
from codecalc.exceptions import CodecalcError, SelectionIncompleteError
from codecalc.utils.log import setup_logging
from codecalc.version import __version__

if TYPE_CHECKING:
    from codecalc.infra.json_catalog import JsonCatalogProvider

COMMANDS: tuple[str, ...] = ("doctor", "presets")

_FLAG_FIELDS: tuple[tuple[str, SelectionField], ...] = (
    ("category", SelectionField.CATEGORY),
    ("codec", SelectionField.CODEC),
    ("variant", SelectionField.VARIANT),
    ("resolution", SelectionField.RESOLUTION),
    ("frame_rate", SelectionField.FRAME_RATE),
)


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    Sub-commands are plain positional words:
    * ``codecalc``          — interactive (or ``--no-input``) estimate
    * ``codecalc presets``  — list workflow presets
    * ``codecalc doctor``   — environment and catalog diagnostics
    * ``codecalc --version``
    """
    parser = argparse.ArgumentParser(
        prog="codecalc",
        description="Estimate video file sizes from codec, resolution, frame rate and duration.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "command",
        nargs="?",
        default=None,
        help="Optional command: 'presets' or 'doctor'. Omit to calculate.",
    )
    parser.add_argument("--catalog", type=Path, help="JSON codec catalog to use.")

    selection = parser.add_argument_group("selection")
    selection.add_argument("--preset", help="Start from a workflow preset (name or id).")
    selection.add_argument("--category", help="Codec category id, e.g. 'professional'.")
    selection.add_argument("--codec", help="Codec id, e.g. 'prores'.")
    selection.add_argument("--variant", help="Variant name, e.g. 'ProRes 422 HQ'.")
    selection.add_argument("--resolution", help="Resolution id, e.g. '1080p' or 'UHD'.")
    selection.add_argument("--frame-rate", dest="frame_rate", help="Frame rate id, e.g. '29.97'.")
    selection.add_argument("--duration", help="Clip length as HH:MM:SS, MM:SS or seconds.")

    output = parser.add_argument_group("output")
    output.add_argument(
        "--binary",
        action="store_true",
        default=None,
        help="Show GB/TB in 1024 steps instead of 1000.",
    )
    output.add_argument(
        "--no-input",
        dest="no_input",
        action="store_true",
        help="Do not prompt; calculate from flags and defaults only.",
    )
    output.add_argument(
        "--log-level",
        dest="log_level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help="Logging level for diagnostics on stderr.",
    )
    return parser


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _build_provider(args: argparse.Namespace, settings: Settings) -> JsonCatalogProvider:
    from codecalc.infra.json_catalog import JsonCatalogProvider

    return JsonCatalogProvider(args.catalog or settings.catalog_path)


def _handle_calculate(args: argparse.Namespace, settings: Settings) -> int:
    """Seed a scheduler from flags, prompt for the rest, render the estimate.

    Flow:
    1. Load the catalog and build the scheduler from the settings defaults.
    2. Apply ``--preset`` (if any), then the individual flags, each as one
       batched change so the resolver settles once per step.
    3. Unless ``--no-input``, prompt level by level.
    4. Render the result, or raise :class:`SelectionIncompleteError`.
    """
    from codecalc.cli.result_view import correction_notes, render_result
    from codecalc.core import option_catalog
    from codecalc.core.scheduler import SelectionScheduler
    from codecalc.exceptions import PresetNotFoundError

    provider = _build_provider(args, settings)
    provider.get_categories()

    scheduler = SelectionScheduler(
        provider,
        initial=settings.default_selection(),
        max_passes=settings.max_resolver_passes,
        fallback=settings.frame_rate_fallback,
    )

    preset = None
    if args.preset:
        preset = option_catalog.find_preset(args.preset)
        if preset is None:
            raise PresetNotFoundError(
                f"Unknown preset: {args.preset!r}",
                hint="Run 'codecalc presets' to list the available presets.",
            )

    # Preset and flags settle together so every correction is reported.
    with scheduler.batch():
        if preset is not None:
            scheduler.apply_preset(preset)
        for attribute, field in _FLAG_FIELDS:
            value = getattr(args, attribute)
            if value is not None:
                scheduler.apply_selection_change(field, value)
        if args.duration is not None:
            scheduler.apply_selection_change(SelectionField.DURATION, args.duration)

    for note in correction_notes(scheduler.corrections):
        console.print(f"[dim]Note: {note}[/dim]")

    if not args.no_input:
        from codecalc.cli.selection_prompt import prompt_selection

        prompt_selection(scheduler, ask_duration=args.duration is None)

    result = scheduler.get_current_result()
    if result is None:
        raise SelectionIncompleteError(
            "No file size estimate for the current selection.",
            hint=scheduler.selection_issue() or scheduler.last_status.message,
        )

    binary = settings.binary_units if args.binary is None else args.binary
    render_result(result, binary=binary)
    return exit_codes.SUCCESS


def _handle_presets() -> int:
    """Dispatch the ``presets`` listing command."""
    from codecalc.cli.result_view import render_presets
    from codecalc.core.option_catalog import DEFAULT_PRESETS

    render_presets(DEFAULT_PRESETS)
    return exit_codes.SUCCESS


def _handle_doctor(args: argparse.Namespace, settings: Settings) -> int:
    """Dispatch the ``doctor`` diagnostics command."""
    from codecalc.cli.doctor import run_doctor

    return run_doctor(_build_provider(args, settings))


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the codecalc CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    command: str | None = args.command.lower() if args.command else None
    if command is not None and command not in COMMANDS:
        parser.error(f"unknown command {args.command!r} (choose from {', '.join(COMMANDS)})")

    settings = get_settings()
    setup_logging(args.log_level or settings.log_level)

    if command == "doctor":
        return _handle_doctor(args, settings)
    if command == "presets":
        return _handle_presets()
    return _handle_calculate(args, settings)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except CodecalcError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {exc.hint}")
        if isinstance(exc, SelectionIncompleteError):
            sys.exit(exit_codes.NO_RESULT)
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {exc}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
