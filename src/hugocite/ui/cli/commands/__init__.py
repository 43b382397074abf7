"""CLI command implementations exposed via `hugocite.ui.cli`.

Re-exports the Typer command functions defined in the sibling modules so they
can be imported using dotted paths (e.g. ``hugocite.ui.cli.commands.process``).
"""

from __future__ import annotations

from .check import check
from .process import process


__all__ = ["check", "process"]
