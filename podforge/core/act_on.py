"""
Target selection — which pods or services a command acts on.

An ``ActOn`` is either "all pods" or an ordered list of names.  It is
resolved against a project only when iterated, so it always reflects
the project's current pods.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import TYPE_CHECKING

from podforge.core.models.pod import PodOrService

if TYPE_CHECKING:
    from podforge.core.project import Project


class ActOn:
    """The pods and/or services named on a command line."""

    def __init__(self, names: Sequence[str] | None = None):
        # None means "all"
        self._names: tuple[str, ...] | None = tuple(names) if names is not None else None

    @classmethod
    def all(cls) -> ActOn:
        return cls(None)

    @classmethod
    def named(cls, names: Sequence[str]) -> ActOn:
        return cls(names)

    @classmethod
    def from_names(cls, names: Sequence[str]) -> ActOn:
        """``All`` for an empty list, otherwise the given names."""
        return cls.named(names) if names else cls.all()

    @property
    def is_all(self) -> bool:
        return self._names is None

    @property
    def names(self) -> tuple[str, ...]:
        return self._names or ()

    def pods_or_services(self, project: Project) -> Iterator[PodOrService]:
        """Resolve against ``project``, lazily and in order.

        Duplicated names are yielded as many times as they appear.

        Raises:
            NameResolutionFailure: When a named target is reached that
                matches no pod or service.  Earlier targets have already
                been yielded.
        """
        if self._names is None:
            yield from project.pods()
            return
        for name in self._names:
            yield project.pod_or_service_or_err(name)

    def __repr__(self) -> str:
        if self._names is None:
            return "ActOn.all()"
        return f"ActOn.named({list(self._names)!r})"
