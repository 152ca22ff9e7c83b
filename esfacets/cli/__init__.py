"""Command-line interface for compiling refinements and inspecting responses.

Built with Click and Rich.
"""

from esfacets.cli.main import cli, main

__all__ = ["cli", "main"]
