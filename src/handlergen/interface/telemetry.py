"""Console telemetry for the CLI. Progress goes to stderr so stdout stays pipeable."""

import logging

import typer

from handlergen.domain.protocols import TelemetryPort


class ProjectTelemetry(TelemetryPort):
    """TelemetryPort printing coloured progress lines and mirroring them to a debug log."""

    def __init__(self, name: str, color: str, welcome: str) -> None:
        self.name = name
        self.color = color
        self.welcome = welcome
        self.logger = logging.getLogger(f"{name.lower()}.telemetry")
        self.echo = typer.secho

    def handshake(self) -> None:
        self.echo(f"{self.name}: {self.welcome}", fg=self.color, bold=True, err=True)
        self.logger.debug(self.welcome)

    def step(self, message: str) -> None:
        self.echo(message, fg=self.color, err=True)
        self.logger.debug(message)

    def error(self, message: str) -> None:
        self.echo(message, fg=typer.colors.RED, err=True)
        self.logger.debug(message)

    def warning(self, message: str) -> None:
        self.echo(message, fg=typer.colors.YELLOW, err=True)
        self.logger.debug(message)

    def debug(self, message: str) -> None:
        self.logger.debug(message)
