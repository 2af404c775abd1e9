"""CLI command handlers."""

from .describe import cmd_describe
from .run import cmd_run

__all__ = [
    "cmd_describe",
    "cmd_run",
]
