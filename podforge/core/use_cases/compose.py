"""
Compose use cases — run docker-compose verbs over selected targets.

Each target becomes one ``docker-compose`` call against its generated
pod file; the matching hook runs once all calls have succeeded.

The single-target commands (``run``, ``exec``, ``shell``, ``test``) and
``logs`` run no hooks.
"""

from __future__ import annotations

import logging
import shlex
from dataclasses import dataclass, field

from podforge.adapters.base import CommandRunner
from podforge.adapters.containers import docker
from podforge.adapters.vcs import git
from podforge.core import compose
from podforge.core.act_on import ActOn
from podforge.core.errors import ConfigError, NameResolutionFailure
from podforge.core.models.override import Override
from podforge.core.models.pod import Pod, PodOrService, Service
from podforge.core.project import Project

logger = logging.getLogger(__name__)

COMPOSE_VERBS = ("build", "pull", "up", "stop", "rm")

# Extra arguments so verbs never block on a prompt or attach to logs.
_VERB_ARGS: dict[str, tuple[str, ...]] = {
    "up": ("-d",),
    "rm": ("-f",),
}


def _split_target(target: PodOrService) -> tuple[Pod, tuple[str, ...]]:
    """The pod to address and the service arguments for one target."""
    if isinstance(target, Pod):
        return target, ()
    return target.pod, (target.name,)


def hook_env(project: Project, ovr: Override) -> dict[str, str]:
    return {
        "PODFORGE_PROJECT": project.name,
        "PODFORGE_TARGET": ovr.name,
    }


def run_compose(
    project: Project,
    runner: CommandRunner,
    verb: str,
    act_on: ActOn,
    ovr: Override,
) -> int:
    """Run ``verb`` for every target, then the ``verb`` hook.

    Task pods are skipped for ``up``; they only run on demand.

    Returns:
        The number of docker-compose invocations.
    """
    if verb not in COMPOSE_VERBS:
        raise ValueError(f"Unsupported compose verb: {verb}")

    count = 0
    for target in act_on.pods_or_services(project):
        pod, service_args = _split_target(target)

        if verb == "up" and pod.is_task:
            logger.debug("Not starting task pod %s", pod.name)
            continue

        docker.compose_command(
            runner,
            project.name,
            project.output_pod_path(pod),
            verb,
            *_VERB_ARGS.get(verb, ()),
            *service_args,
        ).exec()
        count += 1

    project.hooks.invoke(runner, verb, hook_env(project, ovr))
    return count


def all_versions(runner: CommandRunner) -> None:
    """Print the versions of the tools podforge drives."""
    for cmd in [*docker.version_commands(runner), git.version_command(runner)]:
        cmd.exec()


# ── Single-target commands ──────────────────────────────────────

TEST_LABEL = "io.podforge.test"
SHELL_COMMAND = ("sh",)


@dataclass
class RunOptions:
    """Options shared by ``run`` and ``test``."""

    detached: bool = False
    user: str | None = None
    no_tty: bool = False
    entrypoint: str | None = None
    environment: dict[str, str] = field(default_factory=dict)

    def to_args(self) -> list[str]:
        args: list[str] = []
        if self.detached:
            args.append("-d")
        if self.user:
            args += ["--user", self.user]
        if self.no_tty:
            args.append("-T")
        if self.entrypoint:
            args += ["--entrypoint", self.entrypoint]
        for name, value in self.environment.items():
            args += ["-e", f"{name}={value}"]
        return args


@dataclass
class ExecOptions:
    """Options for ``exec`` and ``shell``."""

    detached: bool = False
    user: str | None = None
    no_tty: bool = False
    privileged: bool = False

    def to_args(self) -> list[str]:
        args: list[str] = []
        if self.detached:
            args.append("-d")
        if self.user:
            args += ["--user", self.user]
        if self.no_tty:
            args.append("-T")
        if self.privileged:
            args.append("--privileged")
        return args


@dataclass
class LogsOptions:
    follow: bool = False
    tail: int | None = None

    def to_args(self) -> list[str]:
        args: list[str] = []
        if self.follow:
            args.append("-f")
        if self.tail is not None:
            args += ["--tail", str(self.tail)]
        return args


def _service_or_err(project: Project, name: str) -> Service:
    service = project.service(name)
    if service is None:
        raise NameResolutionFailure(name, kind="service")
    return service


def run_task(
    project: Project,
    runner: CommandRunner,
    pod_name: str,
    command: list[str],
    opts: RunOptions | None = None,
) -> None:
    """Run a one-service pod as a one-shot container.

    An empty ``command`` runs the service's own command.

    Raises:
        NameResolutionFailure: If there is no such pod.
        ConfigError: If the pod does not have exactly one service.
    """
    pod = project.pod(pod_name)
    if pod is None:
        raise NameResolutionFailure(pod_name, kind="pod")
    if len(pod.service_names) != 1:
        raise ConfigError(
            f"Pod '{pod.name}' must have exactly one service to be run, "
            f"found {len(pod.service_names)}"
        )

    logger.info("Running pod %s", pod.name)
    docker.compose_command(
        runner,
        project.name,
        project.output_pod_path(pod),
        "run",
        *(opts or RunOptions()).to_args(),
        pod.service_names[0],
        *command,
    ).exec()


def exec_service(
    project: Project,
    runner: CommandRunner,
    service_name: str,
    command: list[str],
    opts: ExecOptions | None = None,
) -> None:
    """Run ``command`` inside the service's running container."""
    service = _service_or_err(project, service_name)
    docker.compose_command(
        runner,
        project.name,
        project.output_pod_path(service.pod),
        "exec",
        *(opts or ExecOptions()).to_args(),
        service.name,
        *command,
    ).exec()


def shell(
    project: Project,
    runner: CommandRunner,
    service_name: str,
    opts: ExecOptions | None = None,
) -> None:
    exec_service(project, runner, service_name, list(SHELL_COMMAND), opts)


def service_test_command(service: Service, ovr: Override) -> list[str]:
    """The command in the service's ``io.podforge.test`` label for ``ovr``.

    Raises:
        ConfigError: If the service has no test label.
    """
    doc = service.pod.merged_file(ovr)
    spec = compose.services(doc).get(service.name) or {}
    label = compose.labels(spec).get(TEST_LABEL, "").strip()
    if not label:
        raise ConfigError(
            f"No test command for {service.qualified_name}: "
            f"pass one or add a '{TEST_LABEL}' label"
        )
    return shlex.split(label)


def run_tests(
    project: Project,
    runner: CommandRunner,
    service_name: str,
    command: list[str],
    ovr: Override,
    opts: RunOptions | None = None,
) -> None:
    """Run a service's tests in a fresh, removed-afterwards container.

    An empty ``command`` uses the service's test label.
    """
    service = _service_or_err(project, service_name)
    argv = list(command) or service_test_command(service, ovr)
    logger.info("Testing %s with: %s", service.qualified_name, " ".join(argv))
    docker.compose_command(
        runner,
        project.name,
        project.output_pod_path(service.pod),
        "run",
        "--rm",
        *(opts or RunOptions()).to_args(),
        service.name,
        *argv,
    ).exec()


def logs(
    project: Project,
    runner: CommandRunner,
    act_on: ActOn,
    opts: LogsOptions | None = None,
) -> int:
    """Show container logs for every target; returns the call count."""
    count = 0
    for target in act_on.pods_or_services(project):
        pod, service_args = _split_target(target)
        docker.compose_command(
            runner,
            project.name,
            project.output_pod_path(pod),
            "logs",
            *(opts or LogsOptions()).to_args(),
            *service_args,
        ).exec()
        count += 1
    return count
