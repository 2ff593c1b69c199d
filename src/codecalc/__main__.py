"""Allow ``python -m codecalc`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m codecalc`` behaves identically to the ``codecalc``
console script.
"""

from __future__ import annotations

from codecalc.cli.app import cli

if __name__ == "__main__":
    cli()
