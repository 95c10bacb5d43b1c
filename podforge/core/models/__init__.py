"""
Domain models — Pydantic types for podforge.

    from podforge.core.models import Pod, Override, Repo, PodType
"""

from podforge.core.models.config import PodConfig, PodType, ProjectConfig, SourceState
from podforge.core.models.override import Override
from podforge.core.models.pod import Pod, PodOrService, Service
from podforge.core.models.repo import Repo

__all__ = [
    # config.py
    "PodConfig",
    "PodType",
    "ProjectConfig",
    "SourceState",
    # override.py
    "Override",
    # pod.py
    "Pod",
    "PodOrService",
    "Service",
    # repo.py
    "Repo",
]
