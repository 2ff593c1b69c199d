"""codecalc — codec bitrate and file-size calculator.

Pick a category, codec, variant, resolution, frame rate and duration;
codecalc keeps the selection consistent and derives bitrate and size.
"""

from codecalc.version import __version__

__all__: list[str] = ["__version__"]
