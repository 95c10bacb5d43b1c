"""
CLI commands for source trees.

Thin wrappers over ``podforge.core.use_cases.source``.
"""

from __future__ import annotations

import json

import click


@click.group()
def source() -> None:
    """Source trees — list, clone, mount, unmount."""


@source.command("ls")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def source_ls(ctx: click.Context, as_json: bool) -> None:
    """List all known source aliases and URLs."""
    from podforge.core.use_cases.source import source_list
    from podforge.main import load_project

    rows = source_list(load_project(ctx.find_root()))

    if as_json:
        click.echo(json.dumps([r.to_dict() for r in rows], indent=2))
        return

    if not rows:
        click.secho("No sources found.", fg="yellow")
        return

    for row in rows:
        marker = click.style("mounted", fg="green") if row.mounted else "-"
        click.echo(f"{row.alias:<24} {marker:<8} {row.git_url}")
        if row.mounted:
            click.echo(f"  Cloned at {row.path}")


def _alias_command(name: str, help_text: str, mounted: bool, clone: bool) -> click.Command:
    @click.argument("alias")
    @click.pass_context
    def command(ctx: click.Context, alias: str) -> None:
        from podforge.core.use_cases.source import source_clone, source_set_mounted
        from podforge.main import current_override, load_project, make_runner

        root = ctx.find_root()
        project = load_project(root)
        runner = make_runner(root)
        if clone:
            repo = source_clone(project, runner, alias)
        else:
            repo = source_set_mounted(project, runner, alias, mounted)

        # Mount state changed, so the generated pods are stale.
        project.output(current_override(root, project))

        if not root.obj.get("quiet"):
            state = "mounted" if mounted else "unmounted"
            click.secho(f"✅ {repo.alias} {state}", fg="green")

    command.__doc__ = help_text
    return click.command(name)(command)


source.add_command(_alias_command(
    "clone", "Clone a source by ALIAS and mount it into its containers.", True, True,
))
source.add_command(_alias_command(
    "mount", "Mount a source tree into the containers that use it.", True, False,
))
source.add_command(_alias_command(
    "unmount", "Unmount a local source tree from all containers.", False, False,
))
