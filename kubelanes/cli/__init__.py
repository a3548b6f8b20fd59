"""KubeLanes command-line interface.

Exposes:
    cli -- Click group entry point (registered as ``kubelanes`` script).
"""

from kubelanes.cli.main import cli

__all__ = ["cli"]
