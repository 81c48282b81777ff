"""Use Case: Generate handler interfaces for every annotated union under a path."""

import logging
from typing import Optional

import libcst as cst

from handlergen.domain.config import ConfigurationLoader
from handlergen.domain.entities import Declaration, Diagnostic, GenerationReport
from handlergen.domain.errors import HandlerGenError, SourceParseError
from handlergen.domain.protocols import (
    DeclarationReaderProtocol,
    FileSystemProtocol,
    HandlerGeneratorProtocol,
    ModuleRendererProtocol,
    TelemetryPort,
)

logger = logging.getLogger(__name__)


class FileExpansion:
    """Rendered output for one source file, or the diagnostic that stopped it."""

    def __init__(
        self,
        path: str,
        output_path: Optional[str] = None,
        content: Optional[str] = None,
        interfaces: int = 0,
        diagnostic: Optional[Diagnostic] = None,
    ) -> None:
        self.path = path
        self.output_path = output_path
        self.content = content
        self.interfaces = interfaces
        self.diagnostic = diagnostic


class GenerateHandlersUseCase:
    """Orchestrate reading declarations, expanding them and writing the results."""

    def __init__(
        self,
        filesystem: FileSystemProtocol,
        reader: DeclarationReaderProtocol,
        generator: HandlerGeneratorProtocol,
        renderer: ModuleRendererProtocol,
        telemetry: TelemetryPort,
        config_loader: ConfigurationLoader,
    ) -> None:
        self.filesystem = filesystem
        self.reader = reader
        self.generator = generator
        self.renderer = renderer
        self.telemetry = telemetry
        self.config_loader = config_loader

    def execute(self, target_path: str, inplace: bool = False, check: bool = False) -> GenerationReport:
        """Expand every file under target_path. One failing file never stops the others."""
        self.telemetry.step(f"Generating handlers for {target_path}")
        files = self.filesystem.glob_python_files(target_path)
        if not inplace:
            files = self.skip_generated(files)

        written: list[str] = []
        stale: list[str] = []
        diagnostics: list[Diagnostic] = []
        interfaces = 0
        for file_path in files:
            expansion = self.expand_file(file_path, inplace=inplace)
            if expansion.diagnostic is not None:
                diagnostics.append(expansion.diagnostic)
                self.telemetry.error(expansion.diagnostic.format())
                continue
            if expansion.output_path is None or expansion.content is None:
                continue
            interfaces += expansion.interfaces
            if self._is_current(expansion.output_path, expansion.content):
                logger.debug("%s is up to date", expansion.output_path)
                continue
            if check:
                stale.append(expansion.output_path)
                self.telemetry.warning(f"{expansion.output_path} is out of date")
                continue
            self.filesystem.write_text(expansion.output_path, expansion.content)
            written.append(expansion.output_path)
            self.telemetry.debug(f"Wrote {expansion.output_path}")

        report = GenerationReport(
            files_scanned=len(files),
            files_written=written,
            stale_outputs=stale,
            interfaces_generated=interfaces,
            diagnostics=diagnostics,
        )
        status = "failed" if report.has_errors() else "complete"
        self.telemetry.step(
            f"Generation {status}. Interfaces: {interfaces}, files written: {len(written)}"
        )
        return report

    def expand_file(
        self, file_path: str, inplace: bool = False, fragments_only: bool = False
    ) -> FileExpansion:
        """
        Render one file's output. Files without declarations produce nothing.

        With `fragments_only` the content is just the generated classes and no
        output path is set, so nothing is ever written from it.
        """
        try:
            source = self._read_source(file_path)
            declarations = self.reader.read_declarations(source)
            if not declarations:
                return FileExpansion(file_path)
            expansions = self.expand_declarations(declarations)
            if fragments_only:
                rendered = [self.renderer.render_fragment(f) for _, f in expansions]
                return FileExpansion(file_path, content="\n\n".join(rendered), interfaces=len(expansions))
            if inplace:
                return FileExpansion(
                    file_path,
                    output_path=file_path,
                    content=self.renderer.splice(source, expansions),
                    interfaces=len(expansions),
                )
            module = self.filesystem.module_name(file_path)
            if not module.isidentifier():
                raise HandlerGenError(
                    f"cannot import from '{module}'; rename the file or use --inplace"
                )
            if self.filesystem.is_package_member(file_path):
                module = f".{module}"
            return FileExpansion(
                file_path,
                output_path=self.filesystem.sibling_path(file_path, self.config_loader.output_suffix),
                content=self.renderer.render_module(
                    expansions, module, header=self.config_loader.header, source=source
                ),
                interfaces=len(expansions),
            )
        except HandlerGenError as exc:
            return FileExpansion(
                file_path, diagnostic=Diagnostic(path=file_path, message=str(exc), line=exc.line)
            )

    def skip_generated(self, files: list[str]) -> list[str]:
        """Drop files that are the sibling output of another scanned file."""
        suffix = self.config_loader.output_suffix
        outputs = {self.filesystem.sibling_path(f, suffix) for f in files}
        return [f for f in files if f not in outputs]

    def expand_declarations(
        self, declarations: list[Declaration]
    ) -> list[tuple[Declaration, cst.ClassDef]]:
        """Expand all declarations of one file; the first failure aborts the file."""
        return [(d, self.generator.expand(d)) for d in declarations]

    def _read_source(self, file_path: str) -> str:
        try:
            return self.filesystem.read_text(file_path)
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceParseError(f"cannot read file: {exc}") from exc

    def _is_current(self, output_path: str, content: str) -> bool:
        return self.filesystem.exists(output_path) and self.filesystem.read_text(output_path) == content
