"""
Pod model — a group of compose services materialized together.

A pod is backed by ``pods/<name>.yml`` plus an optional layer per
override in ``pods/overrides/<override>/<name>.yml``.  The merged form
is recomputed from disk on every call and never cached.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict

from podforge.core import compose
from podforge.core.models.config import PodType
from podforge.core.models.override import Override

logger = logging.getLogger(__name__)

OVERRIDES_DIR = "overrides"
CONFIG_SUFFIX = ".config"


class Pod(BaseModel):
    """A pod definition discovered under the pods directory."""

    model_config = ConfigDict(frozen=True)

    name: str
    pods_dir: Path
    pod_type: PodType = PodType.SERVICE
    service_names: tuple[str, ...] = ()

    @classmethod
    def load(cls, pods_dir: Path, name: str) -> Pod:
        """Read the pod's base file and optional ``.config.yml``."""
        from podforge.core.config.loader import load_pod_config

        config = load_pod_config(pods_dir / f"{name}{CONFIG_SUFFIX}.yml")
        base = compose.read_compose(pods_dir / f"{name}.yml")
        return cls(
            name=name,
            pods_dir=pods_dir,
            pod_type=config.pod_type,
            service_names=tuple(compose.services(base)),
        )

    @property
    def base_path(self) -> Path:
        return self.pods_dir / f"{self.name}.yml"

    def override_path(self, ovr: Override) -> Path:
        """Where this pod's layer for ``ovr`` lives (it may not exist)."""
        return self.pods_dir / OVERRIDES_DIR / ovr.name / f"{self.name}.yml"

    def layer_paths(self, overrides: list[Override]) -> list[Path]:
        """The base file followed by every existing override layer."""
        paths = [self.base_path]
        for ovr in overrides:
            path = self.override_path(ovr)
            if path.is_file():
                paths.append(path)
        return paths

    def merged_file(self, ovr: Override) -> dict[str, Any]:
        """Base document with the ``ovr`` layer applied on top."""
        doc = compose.read_compose(self.base_path)
        layer_path = self.override_path(ovr)
        if layer_path.is_file():
            logger.debug("Applying %s to pod %s", layer_path, self.name)
            doc = compose.merge_compose(doc, compose.read_compose(layer_path))
        return doc

    def service(self, name: str) -> Service | None:
        if name in self.service_names:
            return Service(pod=self, name=name)
        return None

    @property
    def is_task(self) -> bool:
        return self.pod_type == PodType.TASK


@dataclass(frozen=True)
class Service:
    """A single service inside a pod."""

    pod: Pod
    name: str

    @property
    def qualified_name(self) -> str:
        return f"{self.pod.name}/{self.name}"


PodOrService = Pod | Service
