"""
Lifecycle hooks — user scripts run around podforge commands.

Hooks for an event live in ``<hooks_dir>/<event>.d/``.  Every regular
file there whose name ends in ``.hook`` and does not start with ``.``
is run, in lexicographic order, with the caller's variables added to
its environment.  Symlinks are skipped.  The first failure stops the run.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

from podforge.adapters.base import CommandRunner
from podforge.core.errors import DirectoryReadFailure, FileReadFailure

logger = logging.getLogger(__name__)

HOOK_SUFFIX = ".hook"


class HookManager:
    """Finds and invokes hook scripts under one directory."""

    def __init__(self, hooks_dir: Path):
        self.hooks_dir = Path(hooks_dir)

    def scripts(self, hook_name: str) -> list[Path]:
        """The scripts for ``hook_name``, in execution order."""
        d_dir = self.hooks_dir / f"{hook_name}.d"
        if not d_dir.exists():
            logger.debug("No hooks for '%s' because %s does not exist", hook_name, d_dir)
            return []

        try:
            entries = list(d_dir.iterdir())
        except OSError as e:
            raise DirectoryReadFailure(d_dir) from e

        scripts = []
        for path in entries:
            logger.debug("Checking %s to see if it's a hook", path)
            try:
                is_file = path.is_file() and not path.is_symlink()
            except OSError as e:
                raise FileReadFailure(path) from e
            if is_file and not path.name.startswith(".") and path.name.endswith(HOOK_SUFFIX):
                scripts.append(path)
        return sorted(scripts)

    def invoke(
        self,
        runner: CommandRunner,
        hook_name: str,
        env: Mapping[str, str],
    ) -> None:
        """Run every script for ``hook_name`` with ``env`` injected.

        Raises:
            ExternalCommandFailure: From the first script that fails.
        """
        for script in self.scripts(hook_name):
            logger.info("Running %s hook %s", hook_name, script.name)
            cmd = runner.build(script)
            for name, value in env.items():
                cmd.env(name, value)
            cmd.exec()
