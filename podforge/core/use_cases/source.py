"""
Source use cases — list, clone, mount and unmount source trees.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from podforge.adapters.base import CommandRunner
from podforge.core.errors import NameResolutionFailure
from podforge.core.models.repo import Repo
from podforge.core.project import Project

logger = logging.getLogger(__name__)


@dataclass
class SourceRow:
    """One line of ``source ls``."""

    alias: str
    git_url: str
    lib_key: str | None
    mounted: bool
    path: str

    def to_dict(self) -> dict:
        return {
            "alias": self.alias,
            "git_url": self.git_url,
            "lib_key": self.lib_key,
            "mounted": self.mounted,
            "path": self.path,
        }


def _repo_or_err(project: Project, alias: str) -> Repo:
    repo = project.repos.find_by_alias(alias)
    if repo is None:
        raise NameResolutionFailure(alias, kind="source")
    return repo


def source_list(project: Project) -> list[SourceRow]:
    return [
        SourceRow(
            alias=repo.alias,
            git_url=repo.git_url,
            lib_key=repo.lib_key,
            mounted=repo.is_mounted(project),
            path=str(repo.path(project)),
        )
        for repo in project.repos
    ]


def source_clone(project: Project, runner: CommandRunner, alias: str) -> Repo:
    """Clone a source and mount it."""
    repo = _repo_or_err(project, alias)
    repo.clone(project, runner)
    repo.set_mounted(project, True)
    return repo


def source_set_mounted(
    project: Project,
    runner: CommandRunner,
    alias: str,
    mounted: bool,
) -> Repo:
    """Mount (cloning first if needed) or unmount a source."""
    repo = _repo_or_err(project, alias)
    if mounted and not repo.is_cloned(project):
        repo.clone(project, runner)
    repo.set_mounted(project, mounted)
    return repo
