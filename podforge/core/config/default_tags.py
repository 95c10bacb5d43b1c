"""
Default image tags — pin untagged images to versions chosen by CI.

The input is line-oriented, one tagged image per line:

    dockercloud/hello-world:staging
    postgres:9.6

Blank lines and ``#`` comments are ignored.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from podforge.core.compose import has_tag, split_image
from podforge.core.errors import ConfigError

logger = logging.getLogger(__name__)


class DefaultTags:
    """Lookup from untagged image name to a default tagged image."""

    def __init__(self, tags: dict[str, str] | None = None):
        self._tags: dict[str, str] = dict(tags or {})

    @classmethod
    def read(cls, lines: Iterable[str]) -> DefaultTags:
        """Parse ``image:tag`` lines.

        Raises:
            ConfigError: If a line has no tag.
        """
        tags: dict[str, str] = {}
        for lineno, line in enumerate(lines, start=1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            name, tag = split_image(line)
            if not tag:
                raise ConfigError(f"Default tag line {lineno} has no tag: {line!r}")
            if name in tags:
                logger.warning("Duplicate default tag for %s on line %d", name, lineno)
            tags[name] = line
        return cls(tags)

    @classmethod
    def from_path(cls, path: Path) -> DefaultTags:
        try:
            with path.open(encoding="utf-8") as f:
                return cls.read(f)
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(f"Cannot read default tags from {path}: {e}") from e

    def default_for(self, image: str) -> str:
        """Return ``image`` with its default tag, if it lacks one."""
        if has_tag(image):
            return image
        return self._tags.get(split_image(image)[0], image)

    def __len__(self) -> int:
        return len(self._tags)

    def __repr__(self) -> str:
        return f"<DefaultTags {len(self._tags)} image(s)>"
