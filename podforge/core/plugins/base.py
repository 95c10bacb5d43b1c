"""
Transform plugin base — the contract every document transform follows.

A plugin receives the operation, a read-only context and the merged,
standalone compose document of one pod, and mutates the document in
place.  Plugins never write files.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from podforge.core.models.override import Override
    from podforge.core.models.pod import Pod
    from podforge.core.project import Project


class Operation(str, Enum):
    """Why we are materializing a project."""

    OUTPUT = "output"   # for immediate local use
    EXPORT = "export"   # portable snapshot with remote-only sources


@dataclass(frozen=True)
class Context:
    """What a plugin may look at while transforming one pod."""

    project: Project
    ovr: Override
    pod: Pod


class Plugin(ABC):
    """Abstract base class for transform plugins."""

    @property
    @abstractmethod
    def name(self) -> str:
        """The plugin identifier, used in error messages and logs."""

    def is_interested(self, op: Operation, ctx: Context) -> bool:
        """Whether ``transform`` should run for this pod at all."""
        return True

    @abstractmethod
    def transform(self, op: Operation, ctx: Context, doc: dict[str, Any]) -> None:
        """Mutate ``doc`` in place."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
