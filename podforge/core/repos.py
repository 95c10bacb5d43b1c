"""
Source registry — the git repositories a project's services use.

Sources are declared inside pod files:

    services:
      web:
        build: https://github.com/docker/dockercloud-hello-world.git
        labels:
          io.podforge.srcdir: /app
          io.podforge.lib.coffee_rails: https://github.com/rails/coffee-rails.git

The first form makes the service's own build context a source, mounted
at its ``srcdir``.  The second declares a library source, looked up by
its key and mounted at ``<srcdir>/vendor/<alias>``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path, PurePosixPath
from typing import Any
from urllib.parse import urlsplit

from podforge.core import compose
from podforge.core.errors import AliasDerivationFailure
from podforge.core.models.override import Override
from podforge.core.models.pod import Pod
from podforge.core.models.repo import Repo

logger = logging.getLogger(__name__)

SRCDIR_LABEL = "io.podforge.srcdir"
LIB_LABEL_PREFIX = "io.podforge.lib."
DEFAULT_SRCDIR = "/app"


def _parseable_git_url(git_url: str) -> str:
    """Rewrite scp-style and scheme-less git URLs so urlsplit can read them."""
    if git_url.startswith("git@") and "://" not in git_url:
        host, _, path = git_url[len("git@"):].partition(":")
        return f"ssh://git@{host}/{path}"
    if git_url.startswith("github.com/"):
        return f"https://{git_url}"
    return git_url


def human_alias(reference: str) -> str:
    """A short alias for a git URL or local path.

    ``https://example.com/org/rails_hello.git#dev`` → ``rails_hello_dev``,
    ``../src/node_hello`` → ``node_hello``.

    Raises:
        AliasDerivationFailure: If the reference has no usable name.
    """
    if compose.is_git_url(reference):
        parts = urlsplit(_parseable_git_url(reference))
        stem = PurePosixPath(parts.path).stem
        if not stem:
            raise AliasDerivationFailure(reference)
        if parts.fragment:
            return f"{stem}_{parts.fragment}"
        return stem

    stem = Path(reference).stem
    if not stem or stem in (".", ".."):
        raise AliasDerivationFailure(reference)
    return stem


def service_srcdir(service: dict[str, Any]) -> str:
    return compose.labels(service).get(SRCDIR_LABEL) or DEFAULT_SRCDIR


def lib_labels(service: dict[str, Any]) -> dict[str, str]:
    """``lib_key -> git URL`` for each library label on a service."""
    return {
        key[len(LIB_LABEL_PREFIX):]: value
        for key, value in compose.labels(service).items()
        if key.startswith(LIB_LABEL_PREFIX) and value
    }


def lib_mount_path(service: dict[str, Any], repo: Repo) -> str:
    """Container path a library source is mounted at for ``service``."""
    return f"{service_srcdir(service).rstrip('/')}/vendor/{repo.alias}"


class Repos:
    """Every source repository referenced by a project, keyed by alias."""

    def __init__(self, repos: list[Repo] | None = None):
        self._repos: dict[str, Repo] = {}
        self._lib_keys: dict[str, str] = {}
        for repo in repos or []:
            self._add(repo)

    @classmethod
    def from_pods(cls, pods: list[Pod], overrides: list[Override]) -> Repos:
        """Collect sources from the base and override files of every pod."""
        registry = cls()
        for pod in pods:
            for path in pod.layer_paths(overrides):
                doc = compose.read_compose(path)
                for service in compose.services(doc).values():
                    if isinstance(service, dict):
                        registry._add_from_service(service)
        logger.debug("Found %d source repositories", len(registry))
        return registry

    def _add_from_service(self, service: dict[str, Any]) -> None:
        ctx = compose.build_context(service)
        if ctx is not None and compose.is_git_url(ctx):
            self._add(Repo(alias=human_alias(ctx), git_url=ctx))

        for lib_key, git_url in lib_labels(service).items():
            self._add(Repo(alias=human_alias(git_url), git_url=git_url, lib_key=lib_key))

    def _add(self, repo: Repo) -> None:
        existing = self._repos.get(repo.alias)
        if existing is None:
            self._repos[repo.alias] = repo
        elif existing.git_url != repo.git_url:
            logger.warning(
                "Source alias '%s' is used by both %s and %s; keeping the first",
                repo.alias,
                existing.git_url,
                repo.git_url,
            )
            return
        if repo.lib_key and repo.lib_key not in self._lib_keys:
            self._lib_keys[repo.lib_key] = repo.alias
            if existing is not None and existing.lib_key is None:
                self._repos[repo.alias] = existing.model_copy(update={"lib_key": repo.lib_key})

    def find_by_alias(self, alias: str) -> Repo | None:
        return self._repos.get(alias)

    def find_by_lib_key(self, lib_key: str) -> Repo | None:
        alias = self._lib_keys.get(lib_key)
        return self._repos.get(alias) if alias else None

    def find_by_git_url(self, git_url: str) -> Repo | None:
        """Look up the repo a build context refers to."""
        repo = self._repos.get(human_alias(git_url))
        if repo is not None and repo.git_url == git_url:
            return repo
        return None

    def __iter__(self) -> Iterator[Repo]:
        return iter(sorted(self._repos.values(), key=lambda r: r.alias))

    def __len__(self) -> int:
        return len(self._repos)

    def __repr__(self) -> str:
        return f"<Repos {sorted(self._repos)!r}>"
