"""
Docker adapter — builds docker and docker-compose commands.

Each pod is an independent compose file, so every compose invocation
names the project and the pod file explicitly.
"""

from __future__ import annotations

from pathlib import Path

from podforge.adapters.base import Command, CommandRunner

COMPOSE_PROGRAM = "docker-compose"


def compose_command(
    runner: CommandRunner,
    project_name: str,
    pod_file: Path,
    verb: str,
    *args: str,
) -> Command:
    """Build ``docker-compose -p NAME -f FILE VERB [ARGS...]``."""
    return (
        runner.build(COMPOSE_PROGRAM)
        .args("-p", project_name, "-f", pod_file, verb)
        .args(*args)
    )


def version_commands(runner: CommandRunner) -> list[Command]:
    """``--version`` for docker and docker-compose."""
    return [
        runner.build("docker").arg("--version"),
        runner.build(COMPOSE_PROGRAM).arg("--version"),
    ]
