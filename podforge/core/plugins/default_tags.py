"""
Default tags plugin — gives untagged images the project's default tag.

Runs for both output and export, after the source plugin.
"""

from __future__ import annotations

import logging
from typing import Any

from podforge.core import compose
from podforge.core.plugins.base import Context, Operation, Plugin

logger = logging.getLogger(__name__)


class DefaultTagsPlugin(Plugin):
    @property
    def name(self) -> str:
        return "default_tags"

    def is_interested(self, op: Operation, ctx: Context) -> bool:
        return ctx.project.default_tags is not None

    def transform(self, op: Operation, ctx: Context, doc: dict[str, Any]) -> None:
        default_tags = ctx.project.default_tags
        assert default_tags is not None  # guaranteed by is_interested

        for svc_name, service in compose.services(doc).items():
            if not isinstance(service, dict):
                continue
            image = service.get("image")
            if not isinstance(image, str):
                continue
            tagged = default_tags.default_for(image)
            if tagged != image:
                logger.debug("Defaulting %s/%s image to %s", ctx.pod.name, svc_name, tagged)
                service["image"] = tagged
