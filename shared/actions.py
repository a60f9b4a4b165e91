"""
GitHub Actions host adapter.

Writes step outputs and workflow commands (annotations, secret masks) the
way the Actions runner expects them.
"""

import os
from typing import Mapping, Optional
from uuid import uuid4

import click


def escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def escape_property(value: str) -> str:
    return escape_data(value).replace(":", "%3A").replace(",", "%2C")


class ActionsHost:
    """Outputs and annotations for the current workflow step."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self.environ = os.environ if environ is None else environ

    def issue_command(self, command: str, message: str, **properties: str) -> None:
        props = ",".join(f"{key}={escape_property(value)}" for key, value in properties.items())
        prefix = f"::{command} {props}::" if props else f"::{command}::"
        click.echo(f"{prefix}{escape_data(message)}")

    def set_output(self, name: str, value: str) -> None:
        output_file = self.environ.get("GITHUB_OUTPUT")
        if not output_file:
            self.issue_command("set-output", value, name=name)
            return

        delimiter = f"ghadelimiter_{uuid4()}"
        if delimiter in name or delimiter in value:
            raise ValueError(f"Unexpected input: output value contains the delimiter {delimiter}")
        with open(output_file, "a", encoding="utf-8") as f:
            f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")

    def add_mask(self, secret: str) -> None:
        if secret:
            self.issue_command("add-mask", secret)

    def notice(self, message: str) -> None:
        self.issue_command("notice", message)

    def warning(self, message: str) -> None:
        self.issue_command("warning", message)

    def error(self, message: str) -> None:
        self.issue_command("error", message)

    def set_failed(self, message: str) -> None:
        """Report a failed step; the caller is responsible for the exit code."""
        self.error(message)
