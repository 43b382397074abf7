"""Public CLI exports for hugocite."""

from __future__ import annotations

from .app import app, main
from .commands import check, process
from .state import debug_enabled, emit_error, emit_warning, get_cli_state


__all__ = [
    "app",
    "check",
    "debug_enabled",
    "emit_error",
    "emit_warning",
    "get_cli_state",
    "main",
    "process",
]
