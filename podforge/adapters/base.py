"""
Command runner base — the contract between podforge and external tools.

The core never spawns processes itself.  It asks a ``CommandRunner`` for
a ``Command``, adds arguments and environment variables, and calls
``exec()``.  Only success or failure is observed; output is never parsed.

To add a runner:
    1. Subclass CommandRunner and Command
    2. Implement CommandRunner.build and Command.exec
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path


class Command(ABC):
    """A single external command being assembled for execution."""

    def __init__(self, program: str | Path):
        self.program = str(program)
        self._args: list[str] = []
        self._env: dict[str, str] = {}

    def arg(self, value: str | Path) -> Command:
        """Append one argument."""
        self._args.append(str(value))
        return self

    def args(self, *values: str | Path) -> Command:
        """Append several arguments."""
        for value in values:
            self.arg(value)
        return self

    def env(self, name: str, value: str) -> Command:
        """Set an environment variable for the child process."""
        self._env[name] = value
        return self

    @property
    def argv(self) -> list[str]:
        """Program followed by its arguments."""
        return [self.program, *self._args]

    @property
    def environment(self) -> dict[str, str]:
        """Variables injected on top of the inherited environment."""
        return dict(self._env)

    @abstractmethod
    def exec(self) -> None:
        """Run the command.

        Raises:
            ExternalCommandFailure: If it exits non-zero or cannot start.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} argv={self.argv!r}>"


class CommandRunner(ABC):
    """Factory for ``Command`` objects."""

    @abstractmethod
    def build(self, program: str | Path) -> Command:
        """Start building a command that runs ``program``."""
