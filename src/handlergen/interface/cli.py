"""CLI entry points for handlergen - Thin Controller using Typer."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer

from handlergen.domain.config import ConfigurationLoader
from handlergen.domain.protocols import (
    DeclarationReaderProtocol,
    FileSystemProtocol,
    HandlerGeneratorProtocol,
    ModuleRendererProtocol,
    TelemetryPort,
)
from handlergen.use_cases.generate_handlers import GenerateHandlersUseCase

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class CLIDependencies:
    """Explicit dependencies for the CLI. All dependencies injected at composition root."""

    config_loader: ConfigurationLoader
    telemetry: TelemetryPort
    filesystem: FileSystemProtocol
    reader: DeclarationReaderProtocol
    generator: HandlerGeneratorProtocol
    renderer: ModuleRendererProtocol


class CLIAppFactory:
    """Creates the Typer app. No top-level functions."""

    @staticmethod
    def resolve_target_path(path: Optional[Path]) -> str:
        """Resolve target path: explicit path, else src/ if exists, else '.'."""
        if path and str(path) != ".":
            return str(path)
        src_dir = Path.cwd() / "src"
        if src_dir.exists() and src_dir.is_dir():
            return "src"
        return "."

    @staticmethod
    def configure_logging(verbose: bool) -> None:
        logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=LOG_FORMAT)

    @staticmethod
    def create_app(deps: CLIDependencies) -> typer.Typer:
        """Create the Typer app with explicitly injected dependencies."""
        app = typer.Typer(
            name="handlergen",
            help="Generate handler interfaces and dispatch methods for tagged unions.",
            add_completion=False,
        )

        def build_use_case() -> GenerateHandlersUseCase:
            return GenerateHandlersUseCase(
                filesystem=deps.filesystem,
                reader=deps.reader,
                generator=deps.generator,
                renderer=deps.renderer,
                telemetry=deps.telemetry,
                config_loader=deps.config_loader,
            )

        @app.callback()
        def main(
            verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
        ) -> None:
            """Generate handler interfaces and dispatch methods for tagged unions."""
            CLIAppFactory.configure_logging(verbose)

        @app.command()
        def generate(
            path: Optional[Path] = typer.Argument(None, help="File or directory to scan (default: src/ or .)"),  # noqa: B008
            inplace: bool = typer.Option(
                False, "--inplace", help="Splice interfaces into the source files instead of sibling modules"),
            check: bool = typer.Option(
                False, "--check", help="Write nothing; fail if any output is missing or out of date"),
        ) -> None:
            """Expand every @handler union under PATH."""
            deps.telemetry.handshake()
            target_path = CLIAppFactory.resolve_target_path(path)
            report = build_use_case().execute(target_path, inplace=inplace, check=check)
            if report.has_errors():
                raise typer.Exit(code=1)

        @app.command()
        def show(
            file: Path = typer.Argument(  # noqa: B008
                ..., exists=True, dir_okay=False, help="Python source file to expand"),
            fragments: bool = typer.Option(
                False, "--fragments", help="Print only the generated classes"),
        ) -> None:
            """Print the module that `generate` would write for FILE."""
            expansion = build_use_case().expand_file(str(file), fragments_only=fragments)
            if expansion.diagnostic is not None:
                deps.telemetry.error(expansion.diagnostic.format())
                raise typer.Exit(code=1)
            if expansion.content is None:
                deps.telemetry.warning(f"No @handler declarations in {file}")
                return
            typer.echo(expansion.content, nl=False)

        return app
