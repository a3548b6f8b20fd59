"""Entry point for `python -m kubelanes`.

Usage:
    python -m kubelanes lanes events.json
    python -m kubelanes health events.json --window 2h
"""

from __future__ import annotations

from kubelanes.cli import cli

cli()
