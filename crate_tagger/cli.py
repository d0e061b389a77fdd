"""CLI entry point for crate-tagger.

Every option can also come from the environment, so the same command
works as a GitHub Action step (``INPUT_*`` variables) and locally.
"""

from __future__ import annotations

import re
from pathlib import Path

import click

from . import actions
from .errors import TaggerError
from .models import ResolutionContext, RunResult
from .pipeline import run_tagging


def _envvars(name: str, legacy: str) -> list[str]:
    return [f"INPUT_{name.upper()}", f"INP_{legacy}"]


def _strip(
    ctx: click.Context, param: click.Parameter, value: str | None
) -> str | None:
    return value.strip() if value is not None else None


def _regex(ctx: click.Context, param: click.Parameter, value: str) -> str:
    value = value.strip()
    try:
        re.compile(value)
    except re.error as exc:
        raise click.BadParameter(f"not a valid regular expression: {exc}") from exc
    return value


def parse_dry_run(value: str | None) -> bool:
    """Anything but an absent/blank value or the literal "false" means dry-run."""
    return bool(value and value.strip()) and value.strip() != "false"


@click.command()
@click.version_option(package_name="crate-tagger")
@click.option(
    "--crate",
    envvar=_envvars("crate", "CRATE"),
    callback=_strip,
    help="Workspace member to tag. Defaults to the root package.",
)
@click.option(
    "--pwd",
    envvar=_envvars("pwd", "PWD"),
    callback=_strip,
    help="Directory containing Cargo.toml. Defaults to the current directory.",
)
@click.option(
    "--tag-to-version",
    envvar=_envvars("tag-to-version", "TAG_TO_VERSION"),
    default="v(.*)",
    show_default=True,
    callback=_regex,
    help="Regex whose first group extracts a version from a tag.",
)
@click.option(
    "--version-to-tag",
    envvar=_envvars("version-to-tag", "VERSION_TO_TAG"),
    default="v$1",
    show_default=True,
    callback=_strip,
    help="Tag template; $1 is replaced by the crate version.",
)
@click.option(
    "--dry-run",
    envvar=_envvars("dry-run", "DRY_RUN"),
    default=None,
    help='Create the tag locally but do not push. Any value but "false" enables it.',
)
@click.option(
    "--token",
    envvar=_envvars("token", "GITHUB_TOKEN"),
    callback=_strip,
    help="Token used to authenticate the tag push.",
)
@click.option(
    "--github-output",
    envvar="GITHUB_OUTPUT",
    type=click.Path(dir_okay=False, path_type=Path),
    help="File receiving step outputs. Printed to stdout when unset.",
)
def cli(
    crate: str | None,
    pwd: str | None,
    tag_to_version: str,
    version_to_tag: str,
    dry_run: str | None,
    token: str | None,
    github_output: Path | None,
) -> None:
    """Tag a Cargo crate's current version in git if it isn't tagged yet."""
    ctx = ResolutionContext(
        crate=crate or None,
        pwd=Path(pwd) if pwd else Path.cwd(),
        tag_to_version=tag_to_version,
        version_to_tag=version_to_tag or "v$1",
        dry_run=parse_dry_run(dry_run),
        token=token or None,
    )

    result = RunResult()
    try:
        run_tagging(ctx, actions.Outputs(github_output), result)
    except TaggerError as exc:
        actions.fatal(str(exc))

    click.echo()
    click.echo("=" * 60)
    if result.published:
        click.echo(f"✓ Tagged {result.crate_name} as {result.derived_tag}")
    else:
        click.echo(f"No new tag for {result.crate_name}")
    click.echo("=" * 60)
