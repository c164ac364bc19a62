"""CLI entry point for merge-release."""

from __future__ import annotations

import sys

import click

from merge_release.models import ReleaseOptions
from merge_release.pipeline import run_merge_release


def _show_help(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    """Print usage and exit with status 1, like any other refused run."""
    if not value or ctx.resilient_parsing:
        return
    click.echo(ctx.get_help())
    ctx.exit(1)


@click.command(context_settings={"help_option_names": []})
@click.option(
    "-h",
    "--help",
    is_flag=True,
    expose_value=False,
    is_eager=True,
    callback=_show_help,
    help="Show this message and exit.",
)
@click.option(
    "-n",
    "--dry-run",
    is_flag=True,
    help="Print git commands that change the repository instead of running them.",
)
@click.option(
    "-y",
    "--yes",
    is_flag=True,
    help="Accept the proposed version and overwrite an existing tag without asking.",
)
@click.option(
    "--tag-version",
    metavar="VERSION",
    default=None,
    help="Release version to tag (skips the version prompt).",
)
@click.option(
    "--remote",
    default="origin",
    show_default=True,
    help="Remote to fetch from and push to.",
)
@click.version_option(package_name="merge-release")
def cli(dry_run: bool, yes: bool, tag_version: str | None, remote: str) -> None:
    """Merge the current branch into the default branch with --no-ff, tag the
    merge commit as {repo}-X.Y.Z and push both."""
    run_merge_release(
        ReleaseOptions(dry_run=dry_run, yes=yes, tag_version=tag_version, remote=remote)
    )


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point.

    Every refused run, usage errors included, exits with status 1.
    """
    try:
        code = cli.main(args=argv, prog_name="merge-release", standalone_mode=False)
    except click.ClickException as exc:
        exc.show()
        sys.exit(1)
    except click.Abort:
        click.echo("Aborted!", err=True)
        sys.exit(1)
    sys.exit(code if isinstance(code, int) else 0)


if __name__ == "__main__":
    main()
