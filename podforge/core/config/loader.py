"""
Configuration loader — finds the project and reads its settings files.

A project is any directory containing a ``pods/`` subdirectory.
Settings files are optional YAML validated with Pydantic:

    config/project.yml      ProjectConfig
    pods/<pod>.config.yml   PodConfig
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TypeVar

import yaml
from pydantic import BaseModel, ValidationError

from podforge.core.errors import ConfigError, ProjectNotFound
from podforge.core.models.config import PodConfig, ProjectConfig

logger = logging.getLogger(__name__)

PODS_DIR = "pods"
PROJECT_CONFIG_FILE = Path("config") / "project.yml"

_ModelT = TypeVar("_ModelT", bound=BaseModel)


def find_project_dir(start_dir: Path | None = None) -> Path:
    """Walk up from ``start_dir`` (default: cwd) to the project root.

    Raises:
        ProjectNotFound: If no ancestor contains a ``pods`` directory.
    """
    start = (start_dir or Path.cwd()).resolve()
    current = start

    for _ in range(64):  # safety limit
        if (current / PODS_DIR).is_dir():
            logger.debug("Found project root at %s", current)
            return current
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    raise ProjectNotFound(start)


def _load_model(path: Path, model: type[_ModelT]) -> _ModelT:
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e


def load_project_config(root_dir: Path) -> ProjectConfig:
    """Load ``config/project.yml``, or defaults when it is absent."""
    path = root_dir / PROJECT_CONFIG_FILE
    if not path.is_file():
        return ProjectConfig()
    logger.debug("Loading project settings from %s", path)
    return _load_model(path, ProjectConfig)


def load_pod_config(path: Path) -> PodConfig:
    """Load a ``<pod>.config.yml``, or defaults when it is absent."""
    if not path.is_file():
        return PodConfig()
    return _load_model(path, PodConfig)
