"""Allow ``python -m ytdash`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m ytdash`` behaves identically to the ``ytdash``
console script.
"""

from __future__ import annotations

from ytdash.cli.app import cli

if __name__ == "__main__":
    cli()
