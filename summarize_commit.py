#!/usr/bin/env python3
"""
Commit Summary Action CLI

Summarizes the latest Git commit with an AI backend and forwards the summary
to a collector API. Designed to run as a GitHub Actions step: inputs are read
from ``INPUT_*`` variables and results are written as step outputs.

Usage:
    python summarize_commit.py [OPTIONS]

Examples:
    python summarize_commit.py                           # Summarize HEAD of $GITHUB_WORKSPACE or .
    python summarize_commit.py --repo-path /path/to/repo # Summarize another repository
    python summarize_commit.py --show-config             # Print effective settings
"""

import asyncio
import json
import logging
import sys
from typing import Optional

import click
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from config.settings import ActionInputs, export_config, get_settings
from services.pipeline.main import SummaryPipeline
from shared.actions import ActionsHost
from shared.models import PipelineResult

logger = logging.getLogger(__name__)


class CommitSummaryCLI:
    """Console presentation for a pipeline run."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def display_summary(self, summary: str):
        panel = Panel(Text(summary), title="Commit Summary", border_style="green")
        self.console.print(panel)

    def display_delivery(self, result: PipelineResult):
        table = Table(title="Delivery", show_header=True, header_style="bold magenta")
        table.add_column("Property", style="cyan", no_wrap=True)
        table.add_column("Value", style="green")

        status = result.outputs.get("status", "N/A")
        style = "green" if status.startswith("2") else "yellow"
        table.add_row("Status", f"[{style}]{status}[/{style}]")

        response = result.outputs.get("response", "")
        if len(response) > 200:
            response = response[:200] + "..."
        table.add_row("Response", Text(response))
        table.add_row("States", " -> ".join(state.value for state in result.history))

        self.console.print(table)

    def display_error_message(self, error: str, suggestion: str = ""):
        """Display error message with helpful suggestions."""
        error_text = Text()
        error_text.append("❌ ", style="bold red")
        error_text.append("Error occurred\n\n", style="bold white")
        error_text.append("Error: ", style="red")
        error_text.append(f"{error}\n", style="white")

        if suggestion:
            error_text.append("Suggestion: ", style="yellow")
            error_text.append(f"{suggestion}", style="white")

        panel = Panel(error_text, title="Error", border_style="red")
        self.console.print(panel)


SUGGESTIONS = {
    "configuration": "Set the blackbox-api-key input and check api-url",
    "extraction": "Check out the repository with at least one commit before this step",
    "summarization_transport": "Check network access to the summarization backend",
    "summarization_timeout": "The summarization backend did not answer within the deadline",
    "summarization_shape": "Check the model name and the API key",
    "delivery_transport": "Check that api-url is reachable from the runner",
    "delivery_timeout": "The collector did not answer within the deadline",
}


@click.command()
@click.option(
    '--repo-path',
    default=None,
    help='Path to Git repository (default: $GITHUB_WORKSPACE or current directory)',
    type=click.Path(exists=True, file_okay=False, dir_okay=True)
)
@click.option(
    '--show-config',
    is_flag=True,
    help='Print the effective settings and exit'
)
@click.option(
    '--verbose',
    '-v',
    is_flag=True,
    help='Enable verbose output'
)
def summarize_commit(repo_path: Optional[str], show_config: bool, verbose: bool):
    """Summarize the latest commit and send the summary to an API."""
    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, settings.monitoring.log_level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if show_config:
        click.echo(json.dumps(export_config(settings), indent=2))
        return

    cli = CommitSummaryCLI()
    host = ActionsHost()

    try:
        inputs = ActionInputs()
    except ValidationError as e:
        cli.display_error_message(f"Invalid inputs: {e}", "Check the step's with: block")
        host.set_failed(f"Invalid inputs: {e}")
        sys.exit(1)

    host.add_mask(inputs.blackbox_api_key.get_secret_value())
    host.add_mask(inputs.api_key.get_secret_value())

    config = inputs.to_run_configuration(settings.summarizer.default_model, repo_path)
    pipeline = SummaryPipeline(config, settings=settings, output_sink=host.set_output)
    result = asyncio.run(pipeline.run())

    for warning in result.warnings:
        host.warning(warning)

    if result.failure:
        cli.display_error_message(
            result.failure.describe(), SUGGESTIONS.get(result.failure.kind.value, "")
        )
        host.set_failed(result.failure.message)
        sys.exit(result.exit_code)

    cli.display_summary(result.outputs["summary"])
    cli.display_delivery(result)


if __name__ == "__main__":
    summarize_commit()
