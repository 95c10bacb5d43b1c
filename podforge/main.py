"""
podforge — CLI entrypoint.

Usage:
    podforge --help
    podforge output
    podforge --target production export ./release
    podforge source mount rails_hello
"""

from __future__ import annotations

import json
import os
from pathlib import Path

import click

from podforge import __version__
from podforge.core.errors import PodforgeError, error_chain
from podforge.core.observability.logging_config import (
    FILE_ENV,
    FILE_LEVEL_ENV,
    resolve_level,
    setup_logging,
)


class PodforgeGroup(click.Group):
    """Top-level group that turns podforge errors into exit code 1."""

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except PodforgeError as e:
            messages = error_chain(e)
            click.secho(f"❌ Error: {messages[0]}", fg="red", err=True)
            for cause in messages[1:]:
                click.echo(f"   caused by: {cause}", err=True)
            ctx.exit(1)


@click.group(cls=PodforgeGroup)
@click.version_option(version=__version__, prog_name="podforge")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--project-name",
    "-p",
    default=None,
    help="The name of this project. Defaults to the project directory name.",
)
@click.option(
    "--target",
    default=None,
    help="Override to apply from pods/overrides/. Defaults to 'development'.",
)
@click.option(
    "--default-tags",
    "default_tags_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="File of tagged image names, one per line, used for untagged images.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    project_name: str | None,
    target: str | None,
    default_tags_path: Path | None,
) -> None:
    """podforge — build compose files from layered pod definitions."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["project_name"] = project_name
    ctx.obj["target"] = target
    ctx.obj["default_tags_path"] = default_tags_path

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(debug, verbose, quiet),
        log_file=os.environ.get(FILE_ENV),
        log_file_level=os.environ.get(FILE_LEVEL_ENV),
    )


# ── Shared helpers ──────────────────────────────────────────────


def load_project(ctx: click.Context):
    """Load the project around the cwd and apply global options."""
    from podforge.core.config.default_tags import DefaultTags
    from podforge.core.project import Project

    project = Project.load()
    if ctx.obj.get("project_name"):
        project.set_name(ctx.obj["project_name"])
    if ctx.obj.get("default_tags_path"):
        project.set_default_tags(DefaultTags.from_path(ctx.obj["default_tags_path"]))
    return project


def current_override(ctx: click.Context, project, default: str | None = None):
    """``--target``, else ``default``, else the project's default target."""
    name = ctx.obj.get("target") or default or project.config.default_target
    return project.ovr_or_err(name)


def load_and_output(ctx: click.Context, default_target: str | None = None):
    """Load the project and regenerate its pod files."""
    project = load_project(ctx)
    ovr = current_override(ctx, project, default_target)
    project.output(ovr)
    return project, ovr


def make_runner(ctx: click.Context):
    """The runner injected through ``ctx.obj`` (tests), else the OS runner."""
    from podforge.adapters.shell.command import OsCommandRunner

    return ctx.obj.get("runner") or OsCommandRunner()


# ── Materialization ─────────────────────────────────────────────


@cli.command()
@click.pass_context
def output(ctx: click.Context) -> None:
    """Regenerate .podforge/pods for the current target."""
    project, ovr = load_and_output(ctx)
    if not ctx.obj.get("quiet"):
        click.secho(
            f"✅ Generated pods for '{ovr.name}' in {project.output_pods_dir}",
            fg="green",
        )


@cli.command()
@click.argument("directory", type=click.Path(file_okay=False, path_type=Path))
@click.pass_context
def export(ctx: click.Context, directory: Path) -> None:
    """Export the project as standalone *.yml files into DIRECTORY."""
    project = load_project(ctx)
    ovr = current_override(ctx, project)
    project.export(ovr, directory)
    if not ctx.obj.get("quiet"):
        click.secho(f"✅ Exported '{ovr.name}' to {directory}", fg="green")


@cli.command()
@click.argument("names", nargs=-1)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def status(ctx: click.Context, names: tuple[str, ...], as_json: bool) -> None:
    """Show the pods and services NAMES refer to (default: all pods)."""
    from podforge.core.act_on import ActOn
    from podforge.core.models.pod import Pod

    project, ovr = load_and_output(ctx)
    targets = list(ActOn.from_names(names).pods_or_services(project))

    rows = []
    for target in targets:
        if isinstance(target, Pod):
            rows.append({
                "name": target.name,
                "kind": target.pod_type.value,
                "services": list(target.service_names),
                "file": str(project.output_pod_path(target)),
            })
        else:
            rows.append({
                "name": target.qualified_name,
                "kind": "container",
                "services": [target.name],
                "file": str(project.output_pod_path(target.pod)),
            })

    if as_json:
        click.echo(json.dumps({"project": project.name, "target": ovr.name, "items": rows}, indent=2))
        return

    click.secho(f"\n📋 {project.name} ({ovr.name})", fg="cyan", bold=True)
    for row in rows:
        click.echo(f"   • {row['name']:<24} {row['kind']:<10} {', '.join(row['services'])}")
    click.echo()


def _compose_verb(verb: str, help_text: str) -> click.Command:
    @click.argument("names", nargs=-1)
    @click.pass_context
    def command(ctx: click.Context, names: tuple[str, ...]) -> None:
        from podforge.core.act_on import ActOn
        from podforge.core.use_cases.compose import run_compose

        project, ovr = load_and_output(ctx)
        run_compose(project, make_runner(ctx), verb, ActOn.from_names(names), ovr)

    command.__doc__ = help_text
    return click.command(verb)(command)


for _verb, _help in (
    ("build", "Build images for the selected pods or services."),
    ("pull", "Pull images for the selected pods or services."),
    ("up", "Start the selected pods or services."),
    ("stop", "Stop the selected pods or services."),
    ("rm", "Remove containers of the selected pods or services."),
):
    cli.add_command(_compose_verb(_verb, _help))


# ── Single-target commands ──────────────────────────────────────

_PASSTHROUGH = {"ignore_unknown_options": True, "allow_interspersed_args": False}


def _parse_environment(ctx, param, values: tuple[str, ...]) -> dict[str, str]:
    env = {}
    for item in values:
        name, sep, value = item.partition("=")
        if not sep or not name:
            raise click.BadParameter(f"expected KEY=VAL, got {item!r}")
        env[name] = value
    return env


def _run_options(func):
    """Options accepted by both ``run`` and ``test``."""
    for option in reversed([
        click.option("-d", "detached", is_flag=True, help="Run the container in the background."),
        click.option("--user", default=None, help="User to run the command as."),
        click.option("-T", "no_tty", is_flag=True, help="Do not allocate a TTY."),
        click.option("--entrypoint", default=None, help="Override the image entrypoint."),
        click.option(
            "-e", "environment", multiple=True, metavar="KEY=VAL",
            callback=_parse_environment, help="Set an environment variable.",
        ),
    ]):
        func = option(func)
    return func


def _exec_options(func):
    """Options accepted by ``exec`` and ``shell``."""
    for option in reversed([
        click.option("-d", "detached", is_flag=True, help="Run the command in the background."),
        click.option("--user", default=None, help="User to run the command as."),
        click.option("-T", "no_tty", is_flag=True, help="Do not allocate a TTY."),
        click.option("--privileged", is_flag=True, help="Give the process extended privileges."),
    ]):
        func = option(func)
    return func


@cli.command(context_settings=_PASSTHROUGH)
@_run_options
@click.argument("pod")
@click.argument("command", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def run(ctx: click.Context, pod: str, command: tuple[str, ...], **opts) -> None:
    """Run POD as a one-shot task, optionally with COMMAND."""
    from podforge.core.use_cases.compose import RunOptions, run_task

    project, _ = load_and_output(ctx)
    run_task(project, make_runner(ctx), pod, list(command), RunOptions(**opts))


@cli.command("exec", context_settings=_PASSTHROUGH)
@_exec_options
@click.argument("service")
@click.argument("command", nargs=-1, required=True, type=click.UNPROCESSED)
@click.pass_context
def exec_(ctx: click.Context, service: str, command: tuple[str, ...], **opts) -> None:
    """Run COMMAND inside the running container of SERVICE."""
    from podforge.core.use_cases.compose import ExecOptions, exec_service

    project, _ = load_and_output(ctx)
    exec_service(project, make_runner(ctx), service, list(command), ExecOptions(**opts))


@cli.command()
@_exec_options
@click.argument("service")
@click.pass_context
def shell(ctx: click.Context, service: str, **opts) -> None:
    """Open an interactive shell in the running container of SERVICE."""
    from podforge.core.use_cases.compose import ExecOptions, shell as open_shell

    project, _ = load_and_output(ctx)
    open_shell(project, make_runner(ctx), service, ExecOptions(**opts))


@cli.command("test", context_settings=_PASSTHROUGH)
@_run_options
@click.argument("service")
@click.argument("command", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def run_service_tests(ctx: click.Context, service: str, command: tuple[str, ...], **opts) -> None:
    """Run the tests of SERVICE.

    Without COMMAND, runs the command in the service's io.podforge.test
    label.  Uses the 'test' target unless --target is given.
    """
    from podforge.core.use_cases.compose import RunOptions, run_tests

    project, ovr = load_and_output(ctx, default_target="test")
    run_tests(project, make_runner(ctx), service, list(command), ovr, RunOptions(**opts))


@cli.command()
@click.option("-f", "follow", is_flag=True, help="Follow log output.")
@click.option("--tail", type=int, default=None, metavar="NUMBER", help="Lines from the end to show.")
@click.argument("names", nargs=-1)
@click.pass_context
def logs(ctx: click.Context, follow: bool, tail: int | None, names: tuple[str, ...]) -> None:
    """Show container logs for the selected pods or services."""
    from podforge.core.act_on import ActOn
    from podforge.core.use_cases.compose import LogsOptions
    from podforge.core.use_cases.compose import logs as show_logs

    project, _ = load_and_output(ctx)
    show_logs(project, make_runner(ctx), ActOn.from_names(names), LogsOptions(follow, tail))


@cli.command()
@click.pass_context
def sysinfo(ctx: click.Context) -> None:
    """Print versions of podforge and the tools it uses."""
    from podforge.core.use_cases.compose import all_versions

    click.echo(f"podforge {__version__}")
    all_versions(make_runner(ctx))


# ── Register sub-command groups from podforge/ui/cli/ ───────────

from podforge.ui.cli.source import source  # noqa: E402

cli.add_command(source)


if __name__ == "__main__":
    cli()
