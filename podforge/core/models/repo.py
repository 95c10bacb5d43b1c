"""
Repo model — an external source tree a service builds from or mounts.

Mount state is never cached on the model.  It is re-derived on each
call from the clone directory and the persisted source state.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from podforge.adapters.base import CommandRunner
from podforge.adapters.vcs import git
from podforge.core.persistence import state_file

if TYPE_CHECKING:
    from podforge.core.project import Project

logger = logging.getLogger(__name__)


class Repo(BaseModel):
    """A named git source.

    ``alias`` is the identity and the clone directory name.  ``lib_key``
    is set for library sources declared through service labels.
    """

    model_config = ConfigDict(frozen=True)

    alias: str
    git_url: str
    lib_key: str | None = None

    def path(self, project: Project) -> Path:
        """Where the local clone lives: ``src_dir/alias``."""
        return project.src_dir / self.alias

    def absolute_path(self, project: Project) -> Path:
        return self.path(project).resolve()

    def is_cloned(self, project: Project) -> bool:
        return self.path(project).is_dir()

    def is_mounted(self, project: Project) -> bool:
        """Cloned and not explicitly unmounted."""
        if not self.is_cloned(project):
            return False
        state = state_file.load_state(state_file.default_state_path(project.output_dir))
        return self.alias not in state.unmounted

    def set_mounted(self, project: Project, mounted: bool) -> None:
        """Record whether a local clone should be mounted."""
        path = state_file.default_state_path(project.output_dir)
        state = state_file.load_state(path)
        state.set_unmounted(self.alias, not mounted)
        state_file.save_state(state, path)
        logger.info("%s %s", "Mounted" if mounted else "Unmounted", self.alias)

    def clone(self, project: Project, runner: CommandRunner) -> None:
        """Clone the source into ``path``; a no-op if already cloned."""
        dest = self.path(project)
        if dest.exists():
            logger.info("%s is already cloned at %s", self.alias, dest)
            return
        git.clone(runner, self.git_url, dest)

    def fake_clone_source(self, project: Project) -> None:
        """(Tests only.) Create an empty clone directory."""
        self.path(project).mkdir(parents=True, exist_ok=True)
