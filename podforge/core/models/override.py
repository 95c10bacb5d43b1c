"""
Override model — a deployment target such as development or production.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Override(BaseModel):
    """A named set of per-pod override layers.

    Corresponds to ``pods/overrides/<name>/``.
    """

    model_config = ConfigDict(frozen=True)

    name: str
