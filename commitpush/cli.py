"""commitpush command-line interface."""

import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from commitpush import __version__
from commitpush.config import CommitPushConfig
from commitpush.exceptions import ConfigurationError
from commitpush.host import ActionHost
from commitpush.logging import setup_logging
from commitpush.workflow import WorkflowResult, WorkflowStatus, format_failure, run_action

console = Console(stderr=True)

_STATUS_STYLE = {
    WorkflowStatus.SUCCEEDED: "[green]succeeded[/green]",
    WorkflowStatus.NO_CHANGES: "[yellow]no changes[/yellow]",
    WorkflowStatus.FAILED: "[red]failed[/red]",
}


@click.group()
@click.version_option(version=__version__, prog_name="commitpush")
def cli() -> None:
    """commitpush - stage, commit and push repository changes from CI.

    Optionally opens a pull request once the push succeeds.
    """


def _render_summary(result: WorkflowResult) -> None:
    table = Table(title="commitpush", show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Status", _STATUS_STYLE[result.status])
    table.add_row("Steps", ", ".join(result.completed_steps) or "-")
    if result.commit_hash:
        table.add_row("Commit", result.commit_hash)
    if result.pull_request and result.pull_request.get("html_url"):
        table.add_row("Pull request", result.pull_request["html_url"])
    if result.failed_step:
        table.add_row("Failed step", result.failed_step)
    console.print(table)


@cli.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to a YAML config file (default: .commitpush.yaml)",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"]),
    default=None,
    help="Override the configured log level",
)
@click.option(
    "--working-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Repository working directory (default: current directory)",
)
@click.option("--summary/--no-summary", default=True, help="Print a summary table when done")
def run(config_path: Path | None, log_level: str | None, working_dir: Path | None, summary: bool) -> None:
    """Run the commit-and-push workflow using INPUT_* variables."""
    host = ActionHost()

    try:
        config = CommitPushConfig.load(config_path)
    except ConfigurationError as e:
        setup_logging(level=log_level or "info", actions=host.is_actions())
        host.set_failed(format_failure(e))
        sys.exit(host.exit_code)

    level = log_level or ("debug" if host.is_debug() else config.logging.level)
    setup_logging(level=level, actions=host.is_actions(), json_file=config.logging.json_file)

    result = run_action(host, config, working_dir)

    if summary:
        _render_summary(result)
    sys.exit(host.exit_code)


if __name__ == "__main__":
    cli()
