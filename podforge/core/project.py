"""
Project — discovers pods, overrides and sources, and materializes them.

A project is a directory with a ``pods`` subdirectory:

    <root>/pods/<pod>.yml                      base definitions
    <root>/pods/<pod>.config.yml               optional pod metadata
    <root>/pods/overrides/<override>/<pod>.yml override layers
    <root>/src/<alias>/                        cloned sources
    <root>/config/hooks/<event>.d/*.hook       lifecycle hooks
    <root>/.podforge/pods/<pod>.yml            generated output

``output`` regenerates ``.podforge/pods`` from scratch.  ``export``
writes a frozen copy into a new directory, with task pods under
``tasks/``.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Iterator
from pathlib import Path

from podforge.core import compose
from podforge.core.config.default_tags import DefaultTags
from podforge.core.config.loader import PODS_DIR, find_project_dir, load_project_config
from podforge.core.errors import (
    DestinationExists,
    DirectoryReadFailure,
    NameResolutionFailure,
    PodforgeError,
)
from podforge.core.hooks import HookManager
from podforge.core.models.config import ProjectConfig
from podforge.core.models.override import Override
from podforge.core.models.pod import CONFIG_SUFFIX, OVERRIDES_DIR, Pod, PodOrService, Service
from podforge.core.plugins import Context, Manager, Operation
from podforge.core.repos import Repos

logger = logging.getLogger(__name__)

OUTPUT_DIR = ".podforge"
SRC_DIR = "src"
HOOKS_DIR = Path("config") / "hooks"
TASKS_DIR = "tasks"


class Project:
    """A loaded podforge project.

    Pods, overrides and sources are fixed at load time.  Only ``name``
    and ``default_tags`` may be changed, and only before materializing.
    """

    def __init__(
        self,
        root_dir: Path,
        src_dir: Path,
        output_dir: Path,
        config: ProjectConfig | None = None,
    ):
        self.config = config or ProjectConfig()
        self.root_dir = root_dir
        self.src_dir = src_dir
        self.output_dir = output_dir

        self._overrides = self._find_overrides(root_dir)
        self._pods = self._find_pods(root_dir)
        self._repos = Repos.from_pods(self._pods, self._overrides)
        self._name = self.config.name or self._dir_name(root_dir)
        self._default_tags: DefaultTags | None = None
        self._plugins = Manager.new(self)

        logger.info(
            "Loaded project '%s' with %d pod(s), %d override(s), %d source(s)",
            self._name,
            len(self._pods),
            len(self._overrides),
            len(self._repos),
        )

    # ── Construction ────────────────────────────────────────────

    @classmethod
    def from_dirs(cls, root_dir: Path, src_dir: Path, output_dir: Path) -> Project:
        """Create a project, specifying every directory."""
        return cls(root_dir, src_dir, output_dir, load_project_config(root_dir))

    @classmethod
    def load(cls, start_dir: Path | None = None) -> Project:
        """Find the project containing ``start_dir`` (default: cwd).

        Raises:
            ProjectNotFound: If no ancestor directory has a ``pods`` dir.
        """
        root_dir = find_project_dir(start_dir)
        return cls.from_dirs(root_dir, root_dir / SRC_DIR, root_dir / OUTPUT_DIR)

    @staticmethod
    def _dir_name(root_dir: Path) -> str:
        name = root_dir.resolve().name
        if not name:
            raise PodforgeError(f"Can't find directory name for {root_dir}")
        return name

    @staticmethod
    def _find_overrides(root_dir: Path) -> list[Override]:
        overrides_dir = root_dir / PODS_DIR / OVERRIDES_DIR
        if not overrides_dir.is_dir():
            return []
        try:
            entries = sorted(overrides_dir.iterdir())
        except OSError as e:
            raise DirectoryReadFailure(overrides_dir) from e
        return [Override(name=p.name) for p in entries if p.is_dir()]

    @staticmethod
    def _find_pods(root_dir: Path) -> list[Pod]:
        pods_dir = root_dir / PODS_DIR
        try:
            paths = sorted(pods_dir.glob("*.yml"))
        except OSError as e:
            raise DirectoryReadFailure(pods_dir) from e
        pods = []
        for path in paths:
            if path.stem.endswith(CONFIG_SUFFIX):
                continue
            pods.append(Pod.load(pods_dir, path.stem))
        return pods

    # ── Identity and directories ────────────────────────────────

    @property
    def name(self) -> str:
        """Defaults to the root directory name, like docker-compose."""
        return self._name

    def set_name(self, name: str) -> Project:
        self._name = name
        return self

    @property
    def pods_dir(self) -> Path:
        """The directory relative paths in pod files are resolved against."""
        return self.root_dir / PODS_DIR

    @property
    def output_pods_dir(self) -> Path:
        return self.output_dir / PODS_DIR

    def output_pod_path(self, pod: Pod) -> Path:
        """Where ``output`` writes ``pod``."""
        return self.output_pods_dir / f"{pod.name}.yml"

    @property
    def hooks(self) -> HookManager:
        return HookManager(self.root_dir / HOOKS_DIR)

    # ── Lookups ─────────────────────────────────────────────────

    def pods(self) -> Iterator[Pod]:
        """All pods, in discovery order."""
        return iter(self._pods)

    def pod(self, name: str) -> Pod | None:
        for pod in self._pods:
            if pod.name == name:
                return pod
        return None

    def overrides(self) -> Iterator[Override]:
        return iter(self._overrides)

    def ovr(self, name: str) -> Override | None:
        """Look up an override by name."""
        for ovr in self._overrides:
            if ovr.name == name:
                return ovr
        return None

    def ovr_or_err(self, name: str) -> Override:
        ovr = self.ovr(name)
        if ovr is None:
            known = ", ".join(o.name for o in self._overrides) or "none"
            raise NameResolutionFailure(name, kind="target", detail=f"known: {known}")
        return ovr

    def service(self, name: str) -> Service | None:
        """Find ``pod/service``, or a service name unique across pods.

        Raises:
            NameResolutionFailure: If a bare name matches several pods.
        """
        if "/" in name:
            pod_name, _, svc_name = name.partition("/")
            pod = self.pod(pod_name)
            return pod.service(svc_name) if pod else None

        matches = [s for pod in self._pods if (s := pod.service(name)) is not None]
        if len(matches) > 1:
            candidates = ", ".join(s.qualified_name for s in matches)
            raise NameResolutionFailure(name, kind="service", detail=f"ambiguous: {candidates}")
        return matches[0] if matches else None

    def pod_or_service(self, name: str) -> PodOrService | None:
        """A pod by that name, else a service."""
        return self.pod(name) or self.service(name)

    def pod_or_service_or_err(self, name: str) -> PodOrService:
        found = self.pod_or_service(name)
        if found is None:
            raise NameResolutionFailure(name)
        return found

    @property
    def repos(self) -> Repos:
        return self._repos

    @property
    def default_tags(self) -> DefaultTags | None:
        return self._default_tags

    def set_default_tags(self, tags: DefaultTags) -> Project:
        self._default_tags = tags
        return self

    @property
    def plugins(self) -> Manager:
        return self._plugins

    # ── Materialization ─────────────────────────────────────────

    def _output_helper(self, ovr: Override, op: Operation, dest_dir: Path) -> None:
        for pod in self._pods:
            file_name = f"{pod.name}.yml"
            if op is Operation.EXPORT and pod.is_task:
                out_path = dest_dir / TASKS_DIR / file_name
            else:
                out_path = dest_dir / file_name
            logger.debug("Outputting %s", out_path)

            doc = pod.merged_file(ovr)
            compose.make_standalone(doc, self.pods_dir)
            ctx = Context(project=self, ovr=ovr, pod=pod)
            self._plugins.transform(op, ctx, doc)
            compose.write_compose(doc, out_path)

    def output(self, ovr: Override) -> None:
        """Replace ``.podforge/pods`` with freshly generated pod files."""
        out_pods = self.output_pods_dir
        if out_pods.exists():
            try:
                shutil.rmtree(out_pods)
            except OSError as e:
                raise PodforgeError(f"Cannot delete {out_pods}: {e}") from e

        self._output_helper(ovr, Operation.OUTPUT, out_pods)
        logger.info("Generated %d pod(s) for '%s' in %s", len(self._pods), ovr.name, out_pods)

    def export(self, ovr: Override, export_dir: Path) -> None:
        """Write a standalone copy of every pod into a new directory.

        Raises:
            DestinationExists: If ``export_dir`` already exists.
        """
        if export_dir.exists():
            raise DestinationExists(export_dir)

        if self._default_tags is None:
            logger.warning("Exporting project without --default-tags")

        self._output_helper(ovr, Operation.EXPORT, export_dir)
        logger.info("Exported %d pod(s) for '%s' to %s", len(self._pods), ovr.name, export_dir)

    def __repr__(self) -> str:
        return f"<Project name={self._name!r} root={str(self.root_dir)!r}>"
