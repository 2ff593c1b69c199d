"""Interactive, level-by-level selection UI for the CLI layer.

This module is responsible for:

* Walking the cascade (category → codec → variant → resolution → frame
  rate) top-down, offering only the options the scheduler reports as
  valid for the current state.
* Skipping levels the resolver has already forced to a single option.
* Prompting for the clip duration.

Every answer is written back through
:meth:`~codecalc.core.scheduler.SelectionScheduler.apply_selection_change`
so the resolver re-settles the levels below before the next prompt.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from codecalc.cli.console import console
from codecalc.core import option_catalog
from codecalc.core.models import (
    CASCADE_LEVELS,
    Category,
    Codec,
    Duration,
    FrameRateOption,
    ResolutionOption,
    SelectionField,
    Variant,
)
from codecalc.core.scheduler import SelectionScheduler
from codecalc.exceptions import CodecalcError, EnvironmentError, SelectionIncompleteError

Option = Category | Codec | Variant | ResolutionOption | FrameRateOption

_LEVEL_PROMPTS: dict[SelectionField, str] = {
    SelectionField.CATEGORY: "Codec category:",
    SelectionField.CODEC: "Codec:",
    SelectionField.VARIANT: "Variant:",
    SelectionField.RESOLUTION: "Resolution:",
    SelectionField.FRAME_RATE: "Frame rate:",
}


def _import_questionary() -> Any:
    """Import questionary lazily for interactive selection."""
    try:
        import questionary
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "questionary is not installed. Install with: pip install questionary",
        ) from exc
    return questionary


# ---------------------------------------------------------------------------
# Presentation helpers (pure transforms, no I/O)
# ---------------------------------------------------------------------------

def option_value(option: Option) -> str:
    """The value written to the selection for *option*."""
    if isinstance(option, Variant):
        return option.name
    return option.id


def option_label(option: Option) -> str:
    """Single-line label shown in the questionary selector."""
    if isinstance(option, ResolutionOption):
        return f"{option.name:<24} {option.width}x{option.height}"
    if isinstance(option, FrameRateOption):
        return f"{option.name:<12} {option.rate_class.value}"
    description = getattr(option, "description", "")
    return f"{option.name}  ({description})" if description else option.name


def validate_duration(text: str) -> bool | str:
    """questionary validator: ``True`` or an error message."""
    try:
        duration = Duration.parse(text)
    except CodecalcError as exc:
        return exc.hint or str(exc)
    if duration.total_seconds <= 0:
        return "Duration must be longer than zero seconds."
    return True


def _is_forced(options: Sequence[Option], current: object) -> bool:
    return len(options) == 1 and option_value(options[0]) == current


# ---------------------------------------------------------------------------
# Public prompt functions
# ---------------------------------------------------------------------------

def prompt_level(scheduler: SelectionScheduler, level: SelectionField) -> None:
    """Ask for one cascade level and write the answer to *scheduler*.

    Raises
    ------
    SelectionIncompleteError
        If the level has no valid options, or the user cancels (Esc).
    KeyboardInterrupt
        If the user presses Ctrl+C during selection.
    """
    options: Sequence[Option] = scheduler.get_available_options(level)
    current = scheduler.selection.get(level)

    if not options:
        raise SelectionIncompleteError(
            f"No {level.value.replace('_', ' ')} is available for this selection.",
            hint=scheduler.selection_issue() or "Choose a different variant.",
        )
    if _is_forced(options, current):
        console.print(f"[dim]{_LEVEL_PROMPTS[level]} {option_label(options[0])} (only option)[/dim]")
        return

    if level is SelectionField.FRAME_RATE:
        resolution = option_catalog.find_resolution(scheduler.selection.resolution_id)
        console.print(f"[dim]{option_catalog.frame_rate_constraint_note(resolution)}[/dim]")

    questionary = _import_questionary()
    choices = [
        questionary.Choice(title=option_label(option), value=option_value(option))
        for option in options
    ]
    values = [option_value(option) for option in options]

    selected: str | None = questionary.select(
        _LEVEL_PROMPTS[level],
        choices=choices,
        default=current if current in values else None,
        use_arrow_keys=True,
        use_shortcuts=False,
    ).ask()  # Returns None on Ctrl+C / Esc

    if selected is None:
        raise SelectionIncompleteError(
            "Selection cancelled.",
            hint="Use arrow keys to pick an option, then press Enter.",
        )
    scheduler.apply_selection_change(level, selected)


def prompt_duration(scheduler: SelectionScheduler) -> None:
    """Ask for the clip duration and write it to *scheduler*."""
    questionary = _import_questionary()
    answer: str | None = questionary.text(
        "Duration (HH:MM:SS):",
        default=str(scheduler.selection.duration),
        validate=validate_duration,
    ).ask()
    if answer is None:
        raise SelectionIncompleteError("Selection cancelled.")
    scheduler.apply_selection_change(SelectionField.DURATION, answer)


def prompt_selection(scheduler: SelectionScheduler, *, ask_duration: bool = True) -> None:
    """Walk every cascade level top-down, then (optionally) the duration."""
    for level in CASCADE_LEVELS:
        prompt_level(scheduler, level)
    if ask_duration:
        prompt_duration(scheduler)
