"""
OS command runner — runs commands as real child processes.

Children inherit our stdin/stdout/stderr so interactive tools (git
prompts, docker-compose logs) behave as if run directly.
"""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path

from podforge.adapters.base import Command, CommandRunner
from podforge.core.errors import ExternalCommandFailure

logger = logging.getLogger(__name__)


class OsCommand(Command):
    """A command executed with ``subprocess.run``."""

    def exec(self) -> None:
        argv = self.argv
        env = {**os.environ, **self._env}
        logger.debug("Executing: %s", " ".join(argv))

        try:
            result = subprocess.run(argv, env=env, check=False)
        except OSError as e:
            raise ExternalCommandFailure(argv, reason=str(e)) from e

        if result.returncode != 0:
            raise ExternalCommandFailure(argv, returncode=result.returncode)


class OsCommandRunner(CommandRunner):
    """Build commands that run on the host OS."""

    def build(self, program: str | Path) -> OsCommand:
        return OsCommand(program)
