"""
Git adapter — builds the git commands podforge needs.

Uses the git CLI through a ``CommandRunner``, never a git library.
"""

from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import urldefrag

from podforge.adapters.base import Command, CommandRunner

logger = logging.getLogger(__name__)


def split_ref(git_url: str) -> tuple[str, str | None]:
    """Split ``url#ref`` into the clonable URL and the branch/ref."""
    url, fragment = urldefrag(git_url)
    return url, fragment or None


def clone_command(runner: CommandRunner, git_url: str, dest: Path) -> Command:
    """Build ``git clone`` for ``git_url``, checking out its ``#ref`` if any."""
    url, ref = split_ref(git_url)
    cmd = runner.build("git").arg("clone")
    if ref:
        cmd.args("-b", ref)
    cmd.args(url, dest)
    return cmd


def clone(runner: CommandRunner, git_url: str, dest: Path) -> None:
    """Clone ``git_url`` into ``dest``, creating the parent directory."""
    dest.parent.mkdir(parents=True, exist_ok=True)
    logger.info("Cloning %s into %s", git_url, dest)
    clone_command(runner, git_url, dest).exec()


def version_command(runner: CommandRunner) -> Command:
    return runner.build("git").arg("--version")
