"""
Source plugin — points services at local clones or remote sources.

Output:  a mounted source becomes the build context (absolute clone
         path) and is bind-mounted into the container.
Export:  build contexts always name the original remote source and no
         local paths are injected.
"""

from __future__ import annotations

import logging
from typing import Any

from podforge.core import compose
from podforge.core.plugins.base import Context, Operation, Plugin
from podforge.core.repos import lib_labels, lib_mount_path, service_srcdir

logger = logging.getLogger(__name__)


class SourcePlugin(Plugin):
    @property
    def name(self) -> str:
        return "sources"

    def transform(self, op: Operation, ctx: Context, doc: dict[str, Any]) -> None:
        project = ctx.project
        repos = project.repos

        for svc_name, service in compose.services(doc).items():
            if not isinstance(service, dict):
                continue

            build_ctx = compose.build_context(service)
            if build_ctx is not None and compose.is_git_url(build_ctx):
                repo = repos.find_by_git_url(build_ctx)
                if repo is None:
                    continue
                if op is Operation.EXPORT:
                    compose.set_build_context(service, repo.git_url)
                elif repo.is_mounted(project):
                    local = repo.absolute_path(project)
                    logger.debug("Using local source %s for %s/%s", local, ctx.pod.name, svc_name)
                    compose.set_build_context(service, str(local))
                    compose.add_volume(service, local, service_srcdir(service))

            if op is not Operation.OUTPUT:
                continue

            for lib_key in lib_labels(service):
                repo = repos.find_by_lib_key(lib_key)
                if repo is None or not repo.is_mounted(project):
                    continue
                compose.add_volume(
                    service, repo.absolute_path(project), lib_mount_path(service, repo)
                )
