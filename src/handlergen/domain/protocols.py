from typing import TYPE_CHECKING, Protocol, Sequence

if TYPE_CHECKING:
    import libcst as cst

    from handlergen.domain.entities import Declaration


class TelemetryPort(Protocol):
    """Protocol for telemetry/UI updates."""

    def handshake(self) -> None: ...
    def step(self, message: str) -> None: ...
    def error(self, message: str) -> None: ...
    def warning(self, message: str) -> None: ...
    def debug(self, message: str) -> None: ...


class FileSystemProtocol(Protocol):
    """Protocol for filesystem operations - abstracts Path usage."""

    def glob_python_files(self, path: str) -> list[str]:
        ...

    def exists(self, path: str) -> bool:
        ...

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        ...

    def write_text(self, path: str, content: str, encoding: str = "utf-8") -> None:
        ...

    def sibling_path(self, path: str, suffix: str) -> str:
        """Return `<dir>/<stem><suffix>.py` for a source file."""
        ...

    def module_name(self, path: str) -> str:
        """Return the importable module name of a source file (its stem)."""
        ...

    def is_package_member(self, path: str) -> bool:
        """Return True if the file's directory is a regular package (has `__init__.py`)."""
        ...


class DeclarationReaderProtocol(Protocol):
    """Front end: turns module source into annotated declarations."""

    def read_declarations(self, source: str) -> list["Declaration"]:
        ...


class HandlerGeneratorProtocol(Protocol):
    """Entry point turning one declaration into its handler interface."""

    def expand(self, declaration: "Declaration") -> "cst.ClassDef":
        ...


class ModuleRendererProtocol(Protocol):
    """Turns generated fragments into source text."""

    def render_fragment(self, fragment: "cst.ClassDef") -> str:
        ...

    def splice(
        self, source: str, expansions: Sequence[tuple["Declaration", "cst.ClassDef"]]
    ) -> str:
        ...

    def render_module(
        self,
        expansions: Sequence[tuple["Declaration", "cst.ClassDef"]],
        source_module: str,
        header: bool = True,
        source: str = "",
    ) -> str:
        ...
