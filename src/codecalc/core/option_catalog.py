"""Static reference data: resolutions, frame rates, allow-lists, presets.

Catalog order is significant.  Every option list the resolver produces
follows the order declared here, and "first valid option" always means
first in this order.
"""

from __future__ import annotations

from codecalc.core.models import (
    FrameRateOption,
    Preset,
    RateClass,
    ResolutionOption,
    ScanType,
    TechnicalClass,
)


# ---------------------------------------------------------------------------
# Resolutions
# ---------------------------------------------------------------------------

RESOLUTIONS: tuple[ResolutionOption, ...] = (
    # SD
    ResolutionOption("NTSC_DV", "NTSC DV (720×480)", 720, 480, TechnicalClass.SD),
    ResolutionOption("NTSC_D1", "NTSC D1 (720×486)", 720, 486, TechnicalClass.SD),
    ResolutionOption("PAL", "PAL (720×576)", 720, 576, TechnicalClass.SD),
    # HD
    ResolutionOption("720p", "720p HD (1280×720)", 1280, 720, TechnicalClass.HD),
    ResolutionOption(
        "1080i", "1080i (1920×1080 interlaced)", 1920, 1080,
        TechnicalClass.HD, ScanType.INTERLACED,
    ),
    ResolutionOption("1080p", "1080p FHD (1920×1080)", 1920, 1080, TechnicalClass.HD),
    ResolutionOption("1440x1080", "1440×1080 (HDV)", 1440, 1080, TechnicalClass.HD),
    # Cinema (DCI)
    ResolutionOption("2K", "2K DCI (2048×1080)", 2048, 1080, TechnicalClass.CINEMA),
    ResolutionOption("4K", "4K DCI (4096×2160)", 4096, 2160, TechnicalClass.CINEMA),
    ResolutionOption("6K", "6K (6144×3240)", 6144, 3240, TechnicalClass.CINEMA),
    ResolutionOption("8K", "8K DCI (8192×4320)", 8192, 4320, TechnicalClass.CINEMA),
    # UHD
    ResolutionOption("UHD", "UHD (3840×2160)", 3840, 2160, TechnicalClass.UHD),
    ResolutionOption("8K UHD", "8K UHD (7680×4320)", 7680, 4320, TechnicalClass.UHD),
)


# ---------------------------------------------------------------------------
# Frame rates
# ---------------------------------------------------------------------------

FRAME_RATES: tuple[FrameRateOption, ...] = (
    FrameRateOption("23.98", "23.98 fps (Film on TV)", 23.976, RateClass.FILM_ON_TV),
    FrameRateOption("24", "24 fps (True Cinema)", 24.0, RateClass.CINEMA),
    FrameRateOption("25", "25 fps (PAL/European)", 25.0, RateClass.BROADCAST),
    FrameRateOption("29.97", "29.97 fps (NTSC)", 29.97, RateClass.BROADCAST),
    FrameRateOption("30", "30 fps", 30.0, RateClass.STANDARD),
    FrameRateOption("50", "50 fps (PAL Progressive)", 50.0, RateClass.BROADCAST),
    FrameRateOption("59.94", "59.94 fps (NTSC Progressive)", 59.94, RateClass.BROADCAST),
    FrameRateOption("60", "60 fps", 60.0, RateClass.STANDARD),
    FrameRateOption("120", "120 fps (High Frame Rate)", 120.0, RateClass.HFR),
    FrameRateOption("240", "240 fps (Super Slow Motion)", 240.0, RateClass.HFR),
)

RESOLUTION_IDS: tuple[str, ...] = tuple(option.id for option in RESOLUTIONS)
FRAME_RATE_IDS: tuple[str, ...] = tuple(option.id for option in FRAME_RATES)


def find_resolution(resolution_id: str | None) -> ResolutionOption | None:
    if not resolution_id:
        return None
    return next((option for option in RESOLUTIONS if option.id == resolution_id), None)


def find_frame_rate(frame_rate_id: str | None) -> FrameRateOption | None:
    if not frame_rate_id:
        return None
    return next((option for option in FRAME_RATES if option.id == frame_rate_id), None)


# ---------------------------------------------------------------------------
# Category → resolution allow-lists
# ---------------------------------------------------------------------------

_BROADCAST_RESOLUTIONS: frozenset[str] = frozenset(
    option.id
    for option in RESOLUTIONS
    if option.technical_class in (TechnicalClass.SD, TechnicalClass.HD, TechnicalClass.UHD)
) | {"4K"}

CATEGORY_RESOLUTIONS: dict[str, frozenset[str]] = {
    "camera": _BROADCAST_RESOLUTIONS,
    "broadcast": _BROADCAST_RESOLUTIONS,
    "professional": _BROADCAST_RESOLUTIONS | {"2K"},
    "cinema": frozenset(
        option.id for option in RESOLUTIONS if option.technical_class is TechnicalClass.CINEMA
    ),
}
"""Categories missing here (``raw`` included) permit every resolution."""


def category_allows(category_id: str | None, resolution_id: str) -> bool:
    allowed = CATEGORY_RESOLUTIONS.get(category_id or "")
    return allowed is None or resolution_id in allowed


# ---------------------------------------------------------------------------
# Resolution → frame-rate allow-lists and preferences
# ---------------------------------------------------------------------------

INTERLACED_RATES: tuple[str, ...] = ("25", "29.97", "30")
PROGRESSIVE_RATES: tuple[str, ...] = ("23.98", "24", "25", "29.97", "30", "50", "59.94", "60")
CINEMA_RATES: tuple[str, ...] = ("23.98", "24", "25", "29.97", "30")
STANDARD_RATES: tuple[str, ...] = ("23.98", "24", "25", "29.97", "30")


def allowed_frame_rates(resolution: ResolutionOption) -> tuple[str, ...]:
    """Frame-rate ids technically valid for *resolution*."""
    if resolution.is_interlaced:
        return INTERLACED_RATES
    if resolution.technical_class in (TechnicalClass.HD, TechnicalClass.UHD):
        return PROGRESSIVE_RATES
    if resolution.technical_class is TechnicalClass.CINEMA:
        return CINEMA_RATES
    return STANDARD_RATES


def preferred_frame_rates(resolution: ResolutionOption) -> tuple[str, ...]:
    """Frame rates to try, in order, before falling back to the first valid one."""
    if resolution.is_interlaced:
        return ("29.97", "30")
    if resolution.technical_class in (TechnicalClass.HD, TechnicalClass.UHD):
        return ("30", "29.97")
    if resolution.technical_class is TechnicalClass.CINEMA:
        return ("24",)
    return ()


def frame_rate_constraint_note(resolution: ResolutionOption | None) -> str:
    """Short explanation of why only some frame rates are offered."""
    if resolution is None:
        return "Standard broadcast frame rates"
    if resolution.is_interlaced:
        return "Interlaced content typically uses 25, 29.97, or 30 fps"
    if resolution.technical_class is TechnicalClass.HD:
        return "Progressive HD supports 23.98-60 fps"
    if resolution.technical_class is TechnicalClass.UHD:
        return "UHD supports 23.98-60 fps"
    if resolution.technical_class is TechnicalClass.CINEMA:
        return "Cinema formats support 23.98-30 fps"
    return "Standard broadcast frame rates"


# ---------------------------------------------------------------------------
# Workflow presets
# ---------------------------------------------------------------------------

DEFAULT_PRESETS: tuple[Preset, ...] = (
    Preset("preset-1", "YouTube 1080p", "delivery", "h264", "High Profile", "1080p", "30"),
    Preset("preset-2", "Netflix 4K", "broadcast", "jpeg2000", "J2K IMF 4K", "UHD", "24"),
    Preset("preset-3", "News TV", "camera", "xdcam", "XDCAM HD422", "1080i", "29.97"),
    Preset("preset-4", "Episodic TV", "professional", "dnxhd", "DNxHD 145", "1080p", "23.98"),
    Preset("preset-5", "Documentary Edit", "professional", "dnxhd", "DNxHR HQ", "1080p", "25"),
    Preset("preset-6", "Color Grading", "professional", "prores", "ProRes 4444", "UHD", "24"),
    Preset("preset-7", "RAW Cinema", "raw", "braw", "BRAW 5:1", "UHD", "24"),
    Preset("preset-8", "Cinema 2K", "raw", "arri_raw", "ARRIRAW 3.2K", "2K", "24"),
)


def find_preset(name_or_id: str, presets: tuple[Preset, ...] = DEFAULT_PRESETS) -> Preset | None:
    """Look a preset up by id or case-insensitive name."""
    wanted = name_or_id.strip().lower()
    return next(
        (preset for preset in presets if preset.id == name_or_id or preset.name.lower() == wanted),
        None,
    )
