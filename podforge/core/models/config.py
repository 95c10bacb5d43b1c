"""
Settings models — validated contents of podforge's YAML/JSON files.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class PodType(str, Enum):
    """How a pod is used.  Tasks are one-shot, services stay up."""

    SERVICE = "service"
    TASK = "task"


class ProjectConfig(BaseModel):
    """Optional ``config/project.yml``."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = None
    default_target: str = "development"


class PodConfig(BaseModel):
    """Optional ``pods/<pod>.config.yml``."""

    model_config = ConfigDict(extra="forbid")

    pod_type: PodType = PodType.SERVICE


class SourceState(BaseModel):
    """Persisted source-tree state.

    Only explicit unmounts are recorded: a cloned source is mounted
    unless its alias appears here.
    """

    unmounted: list[str] = Field(default_factory=list)
    updated_at: str = Field(default_factory=_now_iso)

    def touch(self) -> None:
        self.updated_at = _now_iso()

    def set_unmounted(self, alias: str, unmounted: bool) -> None:
        if unmounted and alias not in self.unmounted:
            self.unmounted.append(alias)
            self.unmounted.sort()
        elif not unmounted and alias in self.unmounted:
            self.unmounted.remove(alias)
