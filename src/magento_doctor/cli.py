"""
Click-based CLI for magento-doctor.

This module only ORCHESTRATES: it picks a connector, hands the flags to the
review pipeline and formats the result. Every decision about what is an
issue lives in the analyzers.
"""

import contextlib
import logging
import sys
import time
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler

from magento_doctor import __version__
from magento_doctor.actions.report import ReportAction
from magento_doctor.analyzer.registry import AnalyzerLoader
from magento_doctor.config import ConfigLoader
from magento_doctor.connector.base import Connector
from magento_doctor.connector.local import LocalConnector
from magento_doctor.connector.ssh import SSHConfig, SSHConnector
from magento_doctor.model.dependencies import Dependencies
from magento_doctor.pipeline import AnalyzerRun, ReviewRunner, RunState, build_runner
from magento_doctor.scanner.environment import MagentoNotFoundError

console = Console()
err_console = Console(stderr=True)

LOG_LEVELS = {0: logging.WARNING, 1: logging.INFO}


def setup_logging(verbose: int) -> None:
    level = LOG_LEVELS.get(verbose, logging.DEBUG)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=verbose > 1)],
        force=True,
    )


@click.group()
@click.version_option(version=__version__, prog_name="magento-doctor")
@click.option("--verbose", "-v", count=True, help="-v for progress, -vv for debug output")
def main(verbose: int) -> None:
    """magento-doctor: performance review for Magento 2 installations.

    Reviews configuration, database, indexers, modules and the runtime
    stack of a local or remote (SSH) installation.
    """
    setup_logging(verbose)


def connection_options(func):
    """Shared ROOT argument and SSH options."""
    options = [
        click.argument("root", default=".", required=False),
        click.option("--config", "config_file", type=click.Path(dir_okay=False), help="Extra YAML configuration file"),
        click.option("--host", help="Review a remote installation over SSH"),
        click.option("--user", "-u", default="root", show_default=True, help="SSH username"),
        click.option("--port", "-p", default=22, show_default=True, help="SSH port"),
        click.option("--key", "-k", type=click.Path(), help="Path to SSH private key"),
        click.option("--sudo/--no-sudo", default=False, help="Use sudo for remote commands"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _connector(host: str | None, user: str, port: int, key: str | None, sudo: bool) -> Connector:
    if host:
        return SSHConnector(SSHConfig(host=host, user=user, port=port, key_path=key, use_sudo=sudo))
    return LocalConnector()


def _resolve_root(root: str, host: str | None) -> str:
    # Remote roots are taken as given, relative to the SSH user's home
    return root if host else str(Path(root).resolve())


def _list_analyzers(connector: Connector, root: str, config_file: str | None, reporter: ReportAction) -> None:
    """List what would run without collecting the environment."""
    config = ConfigLoader().load(connector, root, config_file)
    runner = ReviewRunner(AnalyzerLoader(config).load(), Dependencies())
    reporter.report_analyzers(runner.list_analyzers())


def _fail(message: str) -> None:
    err_console.print(f"[bold red]Error:[/] {message}")
    sys.exit(1)


@main.command()
@connection_options
@click.option("--category", "-c", help="Only run analyzers of this category (e.g. redis)")
@click.option("--skip-analyzer", "-s", "skip", multiple=True, help="Analyzer id to skip (repeatable)")
@click.option("--details", "-d", is_flag=True, help="Show details, current and recommended values")
@click.option("--output-file", "-o", type=click.Path(dir_okay=False), help="Also write a plain-text report here")
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.option("--format", "fmt", type=click.Choice(["rich", "plain", "json"]), default=None, help="Output format")
@click.option("--list-analyzers", "-l", is_flag=True, help="List available analyzers and exit")
@click.option("--timeout", type=float, default=None, help="Per-analyzer time limit in seconds")
def review(
    root: str,
    config_file: str | None,
    host: str | None,
    user: str,
    port: int,
    key: str | None,
    sudo: bool,
    category: str | None,
    skip: tuple[str, ...],
    details: bool,
    output_file: str | None,
    no_color: bool,
    fmt: str | None,
    list_analyzers: bool,
    timeout: float | None,
) -> None:
    """Review the Magento installation at ROOT (default: current directory).

    Exits with code 1 when any high-priority issue is found.
    """
    if fmt is None:
        fmt = "plain" if not sys.stdout.isatty() else "rich"
    out = Console(no_color=True) if no_color else console
    reporter = ReportAction(out, format_mode=fmt, show_details=details)
    root = _resolve_root(root, host)
    started = time.monotonic()

    try:
        with _connector(host, user, port, key, sudo) as connector:
            if list_analyzers:
                _list_analyzers(connector, root, config_file, reporter)
                return

            status = out.status("[bold blue]Reviewing...[/]", spinner="dots") if fmt == "rich" else contextlib.nullcontext()
            with status:
                progress = None
                if fmt == "rich":
                    def progress(run: AnalyzerRun) -> None:
                        if run.state == RunState.RUNNING:
                            status.update(f"[bold blue]Running {run.name}...[/]")

                runner = build_runner(connector, root, config_file=config_file, timeout=timeout, progress=progress)
                result = runner.run(category=category, skip_ids=skip)
    except (MagentoNotFoundError, ConnectionError) as e:
        _fail(str(e))
        return

    if result.nothing_to_run:
        err_console.print(f"[yellow]No analyzers matched[/] (category={category or 'any'})")

    exit_code = reporter.report_issues(result.issues)

    if output_file:
        try:
            with open(output_file, "w", encoding="utf-8") as fh:
                file_console = Console(file=fh, no_color=True, width=120, highlight=False)
                ReportAction(file_console, format_mode="plain", show_details=details).report_issues(result.issues)
        except OSError as e:
            _fail(f"Could not write report to {output_file}: {e}")
        err_console.print(f"[bold green]Report written:[/] {output_file}")

    # Keep stdout parseable in JSON mode
    timing_console = err_console if fmt == "json" else out
    timing_console.print(f"[dim]Review completed in {time.monotonic() - started:.2f}s[/]")
    sys.exit(exit_code)


@main.command()
@connection_options
@click.option("--format", "fmt", type=click.Choice(["rich", "plain", "json"]), default=None, help="Output format")
def analyzers(
    root: str,
    config_file: str | None,
    host: str | None,
    user: str,
    port: int,
    key: str | None,
    sudo: bool,
    fmt: str | None,
) -> None:
    """List the analyzers a review of ROOT would run."""
    if fmt is None:
        fmt = "plain" if not sys.stdout.isatty() else "rich"
    try:
        with _connector(host, user, port, key, sudo) as connector:
            _list_analyzers(connector, _resolve_root(root, host), config_file, ReportAction(console, format_mode=fmt))
    except ConnectionError as e:
        _fail(str(e))


if __name__ == "__main__":
    main()
