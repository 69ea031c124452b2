"""Click CLI group: run, check and vercmp commands."""

from __future__ import annotations

import asyncio
import signal
import sys
from pathlib import Path

import click

from aurwatch.checks.dir_diff import Site, compare_dirs
from aurwatch.checks.validator import iter_file_reports, render_changes, validate_trees
from aurwatch.config import create_environment, get_settings, validate_settings
from aurwatch.errors import ConfigError
from aurwatch.logging import configure_logging
from aurwatch.packages.vercmp import vercmp as compare_versions
from aurwatch.updater.runner import RefreshRunner

EXIT_REJECTED = 1
EXIT_CONFIG = 2


@click.group()
def cli() -> None:
    """Watch AUR packages and apply safe upstream updates."""


async def _serve(runner: RefreshRunner, interval_seconds: float) -> None:
    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(signum, lambda: loop.create_task(runner.shutdown()))
    await runner.run(interval_seconds)


@cli.command()
@click.option("--once", is_flag=True, help="Run a single refresh cycle and exit.")
def run(once: bool) -> None:
    """Refresh packages forever, or once with --once."""
    from aurwatch.providers.factory import build_runner

    settings = get_settings()
    try:
        validate_settings(settings)
        create_environment(settings)
    except ConfigError as exc:
        click.echo(f"error: {exc}", err=True)
        sys.exit(EXIT_CONFIG)

    configure_logging(settings.log_level, json_output=settings.app_env == "prod")
    runner = build_runner(settings)
    if not once:
        asyncio.run(_serve(runner, settings.refresh_interval_seconds))
        return

    report = asyncio.run(runner.run_cycle())
    for name, outcome in sorted(report.outcomes.items()):
        click.echo(f"{name}: {outcome.value}")
    for name, reason in sorted(report.failures.items()):
        click.echo(f"{name}: failed: {reason}")
    if report.failures:
        sys.exit(1)


@cli.command()
@click.argument("local", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.argument("remote", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--show-diff", is_flag=True, help="Print normalized line changes per file.")
def check(local: Path, remote: Path, show_diff: bool) -> None:
    """Validate the REMOTE package tree against the LOCAL one."""
    site = compare_dirs(local, remote)
    if site is not None:
        click.echo(f"divergence: {site.value}")
        if site is not Site.RIGHT:
            click.echo("rejected: package trees diverge")
            sys.exit(EXIT_REJECTED)

    if show_diff:
        for report in iter_file_reports(local, remote):
            if not report.changed:
                continue
            click.echo(f"--- {report.rel_path} ({report.media_type})")
            if report.changes:
                click.echo(render_changes(report.changes))

    verdict = validate_trees(local, remote)
    status = "accepted" if verdict.ok else "rejected"
    click.echo(f"{status}: {verdict.reason} ({verdict.added_lines} added lines)")
    if not verdict.ok:
        sys.exit(EXIT_REJECTED)


@cli.command()
@click.argument("a")
@click.argument("b")
def vercmp(a: str, b: str) -> None:
    """Print -1, 0 or 1 as version A is older than, equal to or newer than B."""
    click.echo(str(compare_versions(a, b)))
