"""Adapters — bindings for the external tools podforge drives.

Public re-exports for convenient access.
"""

from podforge.adapters.base import Command, CommandRunner
from podforge.adapters.mock import MockCommandRunner
from podforge.adapters.shell.command import OsCommandRunner

__all__ = [
    "Command",
    "CommandRunner",
    "MockCommandRunner",
    "OsCommandRunner",
]
