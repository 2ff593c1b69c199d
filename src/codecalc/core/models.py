"""Domain models for codecalc.

All models are **frozen** dataclasses — immutable value objects.  The
mutable session state (:class:`Selection`) is still immutable here; the
scheduler replaces it wholesale on every change.  Models carry zero I/O
and no dependencies on external packages.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from codecalc.core.bitrate_table import BitrateTable
from codecalc.exceptions import InvalidDurationError, UnknownFieldError


# ---------------------------------------------------------------------------
# Catalog hierarchy
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Variant:
    """A named profile of a codec with its own bitrate table."""

    name: str
    """Identity key of the variant within its codec."""

    bitrates: BitrateTable

    description: str = ""


@dataclass(frozen=True, slots=True)
class Codec:
    """A codec and its variants, owned by exactly one category."""

    id: str
    name: str
    variants: tuple[Variant, ...]
    description: str = ""

    def find_variant(self, name: str | None) -> Variant | None:
        if not name:
            return None
        return next((variant for variant in self.variants if variant.name == name), None)


@dataclass(frozen=True, slots=True)
class Category:
    """Top-level grouping of codecs (e.g. broadcast, cinema, raw)."""

    id: str
    name: str
    codecs: tuple[Codec, ...]
    description: str = ""

    def find_codec(self, codec_id: str | None) -> Codec | None:
        if not codec_id:
            return None
        return next((codec for codec in self.codecs if codec.id == codec_id), None)


# ---------------------------------------------------------------------------
# Static reference options
# ---------------------------------------------------------------------------

class TechnicalClass(str, enum.Enum):
    SD = "SD"
    HD = "HD"
    UHD = "UHD"
    CINEMA = "Cinema"


class ScanType(str, enum.Enum):
    PROGRESSIVE = "progressive"
    INTERLACED = "interlaced"


class RateClass(str, enum.Enum):
    FILM_ON_TV = "Film on TV"
    CINEMA = "Cinema"
    BROADCAST = "Broadcast"
    STANDARD = "Standard"
    HFR = "HFR"


@dataclass(frozen=True, slots=True)
class ResolutionOption:
    """One entry of the static resolution catalog."""

    id: str
    name: str
    width: int
    height: int
    technical_class: TechnicalClass
    scan: ScanType = ScanType.PROGRESSIVE

    @property
    def is_interlaced(self) -> bool:
        return self.scan is ScanType.INTERLACED


@dataclass(frozen=True, slots=True)
class FrameRateOption:
    """One entry of the static frame-rate catalog."""

    id: str
    name: str
    value: float
    rate_class: RateClass


# ---------------------------------------------------------------------------
# Duration
# ---------------------------------------------------------------------------

def _is_ascii_number(part: str) -> bool:
    # str.isdigit() also accepts superscripts and other non-ASCII digits.
    return part.isascii() and part.isdecimal()


@dataclass(frozen=True, slots=True)
class Duration:
    """Clip length as hours / minutes / seconds.

    Invariant: ``hours >= 0`` and ``0 <= minutes, seconds <= 59``.  Use
    :meth:`from_parts` to normalise overflowing input.
    """

    hours: int = 0
    minutes: int = 0
    seconds: int = 0

    def __post_init__(self) -> None:
        if self.hours < 0:
            raise InvalidDurationError(f"Hours must not be negative (got {self.hours}).")
        if not 0 <= self.minutes <= 59:
            raise InvalidDurationError(f"Minutes must be between 0 and 59 (got {self.minutes}).")
        if not 0 <= self.seconds <= 59:
            raise InvalidDurationError(f"Seconds must be between 0 and 59 (got {self.seconds}).")

    @property
    def total_seconds(self) -> int:
        return self.hours * 3600 + self.minutes * 60 + self.seconds

    @classmethod
    def from_parts(cls, hours: int = 0, minutes: int = 0, seconds: int = 0) -> Duration:
        """Build a duration, carrying overflowing seconds and minutes upward."""
        if hours < 0 or minutes < 0 or seconds < 0:
            raise InvalidDurationError(
                "Duration parts must not be negative.",
                hint="Use a value such as 01:30:00.",
            )
        minutes += seconds // 60
        seconds %= 60
        hours += minutes // 60
        minutes %= 60
        return cls(hours=hours, minutes=minutes, seconds=seconds)

    @classmethod
    def from_seconds(cls, total: int) -> Duration:
        return cls.from_parts(seconds=total)

    @classmethod
    def parse(cls, text: str) -> Duration:
        """Parse ``HH:MM:SS``, ``MM:SS`` or a bare number of seconds."""
        parts = text.strip().split(":")
        if not parts or len(parts) > 3 or not all(_is_ascii_number(part.strip()) for part in parts):
            raise InvalidDurationError(
                f"Invalid duration: {text!r}",
                hint="Use HH:MM:SS, MM:SS or a number of seconds.",
            )
        numbers = [int(part) for part in parts]
        while len(numbers) < 3:
            numbers.insert(0, 0)
        hours, minutes, seconds = numbers
        return cls.from_parts(hours, minutes, seconds)

    def __str__(self) -> str:
        return f"{self.hours:02d}:{self.minutes:02d}:{self.seconds:02d}"


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------

class SelectionField(str, enum.Enum):
    """Writable fields of a :class:`Selection`, in cascade order."""

    CATEGORY = "category"
    CODEC = "codec"
    VARIANT = "variant"
    RESOLUTION = "resolution"
    FRAME_RATE = "frame_rate"
    DURATION = "duration"

    @property
    def attribute(self) -> str:
        """Name of the matching :class:`Selection` attribute."""
        return _FIELD_ATTRIBUTES[self]

    @classmethod
    def parse(cls, name: SelectionField | str) -> SelectionField:
        """Resolve an enum member, its value, or a camelCase alias."""
        if isinstance(name, SelectionField):
            return name
        key = str(name).strip()
        found = _FIELD_ALIASES.get(key) or _FIELD_ALIASES.get(key.lower())
        if found is None:
            raise UnknownFieldError(
                f"Unknown selection field: {name!r}",
                hint="Valid fields: " + ", ".join(member.value for member in cls),
            )
        return found


_FIELD_ATTRIBUTES: dict[SelectionField, str] = {
    SelectionField.CATEGORY: "category_id",
    SelectionField.CODEC: "codec_id",
    SelectionField.VARIANT: "variant_name",
    SelectionField.RESOLUTION: "resolution_id",
    SelectionField.FRAME_RATE: "frame_rate_id",
    SelectionField.DURATION: "duration",
}

_FIELD_ALIASES: dict[str, SelectionField] = {
    **{member.value: member for member in SelectionField},
    **{attribute: member for member, attribute in _FIELD_ATTRIBUTES.items()},
    "categoryId": SelectionField.CATEGORY,
    "codecId": SelectionField.CODEC,
    "variantName": SelectionField.VARIANT,
    "resolutionId": SelectionField.RESOLUTION,
    "frameRateId": SelectionField.FRAME_RATE,
    "framerate": SelectionField.FRAME_RATE,
    "frame-rate": SelectionField.FRAME_RATE,
}

CASCADE_LEVELS: tuple[SelectionField, ...] = (
    SelectionField.CATEGORY,
    SelectionField.CODEC,
    SelectionField.VARIANT,
    SelectionField.RESOLUTION,
    SelectionField.FRAME_RATE,
)
"""Option levels, top-down.  Duration is free input, not a level."""


@dataclass(frozen=True, slots=True)
class Selection:
    """The user's current choices.  ``None`` means "not selected"."""

    category_id: str | None = None
    codec_id: str | None = None
    variant_name: str | None = None
    resolution_id: str | None = None
    frame_rate_id: str | None = None
    duration: Duration = Duration(hours=1)

    def get(self, field: SelectionField) -> object:
        return getattr(self, field.attribute)

    @property
    def is_complete(self) -> bool:
        """All cascading fields set and a positive duration."""
        return (
            all(self.get(level) for level in CASCADE_LEVELS)
            and self.duration.total_seconds > 0
        )


# ---------------------------------------------------------------------------
# Presets
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Preset:
    """A named, ready-made selection for a common workflow."""

    id: str
    name: str
    category_id: str
    codec_id: str
    variant_name: str
    resolution_id: str
    frame_rate_id: str


# ---------------------------------------------------------------------------
# Calculation output
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class CalculationResult:
    """Immutable snapshot of one successful calculation.

    Sizes derive from ``bitrate_mbps`` (megabits per second):
    ``MB = Mbps * seconds / 8``, then binary steps of 1024 for GB and TB.
    """

    bitrate_mbps: float
    file_size_mb: float
    file_size_gb: float
    file_size_tb: float
    total_seconds: int
    resolved_category: Category
    resolved_codec: Codec
    resolved_variant: Variant
    resolved_resolution: ResolutionOption
    resolved_frame_rate: FrameRateOption
    bitrate_frame_rate_id: str | None = None
    """Frame-rate key whose bitrate was used, ``None`` for flat entries."""

    used_fallback: bool = False
    """``True`` when the requested frame rate had no bitrate of its own."""

    @property
    def file_size_gb_decimal(self) -> float:
        return self.file_size_mb / 1000

    @property
    def file_size_tb_decimal(self) -> float:
        return self.file_size_gb_decimal / 1000

    @property
    def data_rate_mb_per_minute(self) -> float:
        return self.bitrate_mbps * 60 / 8

    @property
    def data_rate_mb_per_hour(self) -> float:
        return self.data_rate_mb_per_minute * 60
