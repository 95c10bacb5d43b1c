"""
Compose documents — read, merge, make standalone, write.

Documents are plain dicts as produced by ``yaml.safe_load``.  Merging
follows docker-compose's override-file behavior with one simplification:
mappings merge by key, scalars replace, lists replace wholesale.
"""

from __future__ import annotations

import copy
import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml

from podforge.core.errors import FileReadFailure

logger = logging.getLogger(__name__)

# Build contexts docker treats as remote git repositories.
_GIT_PREFIXES = ("git://", "git@", "github.com/")
_GIT_HTTP = re.compile(r"^https?://.+\.git(#.*)?$")


def is_git_url(ref: str) -> bool:
    """Whether a build context refers to a git repository."""
    return ref.startswith(_GIT_PREFIXES) or bool(_GIT_HTTP.match(ref))


# ── I/O ─────────────────────────────────────────────────────────


def read_compose(path: Path) -> dict[str, Any]:
    """Load a compose file.  An empty file is an empty document."""
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FileReadFailure(path, str(e)) from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise FileReadFailure(path, f"invalid YAML: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise FileReadFailure(path, f"expected a YAML mapping, got {type(data).__name__}")
    return data


def dump_compose(doc: dict[str, Any]) -> str:
    return yaml.safe_dump(doc, default_flow_style=False, sort_keys=False)


def write_compose(doc: dict[str, Any], path: Path) -> None:
    """Write ``doc`` to ``path``, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_compose(doc), encoding="utf-8")


# ── Merging ─────────────────────────────────────────────────────


def merge_compose(base: dict[str, Any], layer: dict[str, Any]) -> dict[str, Any]:
    """Apply an override layer on top of a base document.

    Neither input is modified.
    """
    merged = copy.deepcopy(base)
    for key, value in layer.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = merge_compose(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


# ── Services ────────────────────────────────────────────────────


def services(doc: dict[str, Any]) -> dict[str, dict[str, Any]]:
    """The ``services`` mapping of a document (empty if absent)."""
    svcs = doc.get("services")
    if isinstance(svcs, dict):
        return svcs
    return {}


def build_context(service: dict[str, Any]) -> str | None:
    build = service.get("build")
    if isinstance(build, str):
        return build
    if isinstance(build, dict):
        ctx = build.get("context")
        return str(ctx) if ctx is not None else None
    return None


def set_build_context(service: dict[str, Any], context: str) -> None:
    """Point a service's build at ``context``, keeping other build keys."""
    build = service.get("build")
    if isinstance(build, dict):
        build["context"] = context
    else:
        service["build"] = context


def labels(service: dict[str, Any]) -> dict[str, str]:
    """Service labels as a mapping, accepting the ``KEY=VALUE`` list form."""
    raw = service.get("labels")
    if isinstance(raw, dict):
        return {str(k): "" if v is None else str(v) for k, v in raw.items()}
    if isinstance(raw, list):
        result = {}
        for item in raw:
            key, _, value = str(item).partition("=")
            result[key] = value
        return result
    return {}


def add_volume(service: dict[str, Any], host: Path, container: str) -> None:
    """Append a bind mount of an absolute host path."""
    if not host.is_absolute():
        raise ValueError(f"Bind mount host path must be absolute: {host}")
    volumes = service.setdefault("volumes", [])
    volumes.append(f"{host}:{container}")


# ── Standalone ──────────────────────────────────────────────────


def _absolute(base_dir: Path, ref: str) -> str:
    return os.path.normpath(base_dir / ref)


def _is_relative_host_path(ref: str) -> bool:
    return ref.startswith(".")


def make_standalone(doc: dict[str, Any], base_dir: Path) -> None:
    """Anchor every relative filesystem reference at ``base_dir``.

    After this, the document can be written anywhere.  Modifies ``doc``
    in place.
    """
    base_dir = base_dir.resolve()

    for name, service in services(doc).items():
        if not isinstance(service, dict):
            continue

        ctx = build_context(service)
        if ctx is not None and not is_git_url(ctx) and not os.path.isabs(ctx):
            set_build_context(service, _absolute(base_dir, ctx))

        env_file = service.get("env_file")
        if isinstance(env_file, str):
            service["env_file"] = _absolute(base_dir, env_file)
        elif isinstance(env_file, list):
            service["env_file"] = [
                _absolute(base_dir, f) if isinstance(f, str) else f for f in env_file
            ]

        volumes = service.get("volumes")
        if isinstance(volumes, list):
            service["volumes"] = [_standalone_volume(base_dir, v) for v in volumes]

        extends = service.get("extends")
        if isinstance(extends, dict) and isinstance(extends.get("file"), str):
            extends["file"] = _absolute(base_dir, extends["file"])

        logger.debug("Made service '%s' standalone", name)


def _standalone_volume(base_dir: Path, volume: Any) -> Any:
    if isinstance(volume, str):
        host, sep, rest = volume.partition(":")
        if sep and _is_relative_host_path(host):
            return f"{_absolute(base_dir, host)}:{rest}"
        return volume
    if isinstance(volume, dict):
        source = volume.get("source")
        if (
            volume.get("type", "bind") == "bind"
            and isinstance(source, str)
            and _is_relative_host_path(source)
        ):
            volume = dict(volume)
            volume["source"] = _absolute(base_dir, source)
    return volume


# ── Images ──────────────────────────────────────────────────────


def split_image(image: str) -> tuple[str, str | None]:
    """Split ``name[:tag]``; a ``:`` inside the registry host is not a tag."""
    if "@" in image:
        return image, None
    slash = image.rfind("/")
    colon = image.rfind(":")
    if colon > slash:
        return image[:colon], image[colon + 1:]
    return image, None


def has_tag(image: str) -> bool:
    if "@" in image:
        return True
    return split_image(image)[1] is not None
