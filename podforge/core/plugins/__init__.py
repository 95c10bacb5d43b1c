"""
Transform pipeline — the fixed, ordered list of document plugins.

The manager runs every interested plugin, in order, over each pod's
merged document.  Later plugins see earlier plugins' changes.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from podforge.core.errors import PodforgeError, TransformFailure
from podforge.core.plugins.base import Context, Operation, Plugin
from podforge.core.plugins.default_tags import DefaultTagsPlugin
from podforge.core.plugins.source import SourcePlugin

if TYPE_CHECKING:
    from podforge.core.project import Project

logger = logging.getLogger(__name__)

__all__ = ["Context", "Manager", "Operation", "Plugin"]


class Manager:
    """Owns the plugin list for one project."""

    def __init__(self, plugins: list[Plugin]):
        self._plugins = list(plugins)

    @classmethod
    def new(cls, project: Project) -> Manager:
        """The standard plugin set, in the order they must run."""
        manager = cls([SourcePlugin(), DefaultTagsPlugin()])
        logger.debug("Plugins for %s: %s", project.name, manager.plugin_names())
        return manager

    def plugin_names(self) -> list[str]:
        return [p.name for p in self._plugins]

    def transform(self, op: Operation, ctx: Context, doc: dict[str, Any]) -> None:
        """Run every interested plugin over ``doc``.

        Raises:
            TransformFailure: Wrapping any non-podforge error a plugin raised.
        """
        for plugin in self._plugins:
            if not plugin.is_interested(op, ctx):
                continue
            logger.debug("Running plugin %s on pod %s (%s)", plugin.name, ctx.pod.name, op.value)
            try:
                plugin.transform(op, ctx, doc)
            except PodforgeError:
                raise
            except Exception as e:
                raise TransformFailure(plugin.name, ctx.pod.name, str(e)) from e
