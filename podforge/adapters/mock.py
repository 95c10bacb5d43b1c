"""
Mock command runner — test double for every external command.

Records each executed command instead of running it.  Individual
programs can be configured to fail.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from podforge.adapters.base import Command, CommandRunner
from podforge.core.errors import ExternalCommandFailure


@dataclass
class RecordedCommand:
    """One command the mock runner was asked to execute."""

    argv: list[str]
    env: dict[str, str] = field(default_factory=dict)

    @property
    def program(self) -> str:
        return self.argv[0]


class MockCommand(Command):
    def __init__(self, program: str | Path, runner: MockCommandRunner):
        super().__init__(program)
        self._runner = runner

    def exec(self) -> None:
        self._runner._record(self)


class MockCommandRunner(CommandRunner):
    """Command runner that records instead of executing.

    By default every command succeeds.  Use ``set_failure`` to make a
    program exit with a non-zero code.
    """

    def __init__(self) -> None:
        self._call_log: list[RecordedCommand] = []
        self._failures: dict[str, int] = {}

    @property
    def call_log(self) -> list[RecordedCommand]:
        """All commands executed so far, in order."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    @property
    def ran(self) -> list[list[str]]:
        """The argv of every executed command."""
        return [c.argv for c in self._call_log]

    def set_failure(self, program: str | Path, returncode: int = 1) -> None:
        """Make every execution of ``program`` fail."""
        self._failures[str(program)] = returncode

    def build(self, program: str | Path) -> MockCommand:
        return MockCommand(program, self)

    def reset(self) -> None:
        """Clear the call log and configured failures."""
        self._call_log.clear()
        self._failures.clear()

    def _record(self, command: Command) -> None:
        self._call_log.append(RecordedCommand(argv=command.argv, env=command.environment))
        if command.program in self._failures:
            raise ExternalCommandFailure(command.argv, returncode=self._failures[command.program])
