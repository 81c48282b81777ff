from dataclasses import dataclass, field
from enum import Enum

import libcst as cst

RECOGNIZED_OPTIONS = ("returns", "trait_name", "method")


class DeclarationKind(Enum):
    """Shape of a statement carrying the handler annotation."""
    UNION = "union"
    RECORD = "record"
    OTHER = "other"


class FieldShape(Enum):
    """How a variant carries its data."""
    UNIT = "unit"
    NAMED = "named"
    POSITIONAL = "positional"


@dataclass(frozen=True)
class Field:
    """One named, annotated attribute of a variant."""
    name: str
    annotation: cst.BaseExpression


@dataclass(frozen=True)
class Variant:
    """One case of a tagged union. Fields keep declaration order."""
    name: str
    shape: FieldShape = FieldShape.UNIT
    fields: tuple[Field, ...] = ()

    @property
    def field_names(self) -> list[str]:
        """Names bound by the match arm and forwarded to the handler, in order."""
        if self.shape is not FieldShape.NAMED:
            return []
        return [f.name for f in self.fields]


@dataclass(frozen=True)
class Declaration:
    """
    A parsed statement annotated with the handler decorator.

    Produced by the front end once per annotated statement and never mutated.
    `options` holds the raw annotation key/value pairs in source order.
    """
    name: str
    kind: DeclarationKind
    variants: tuple[Variant, ...] = ()
    options: dict[str, str] = field(default_factory=dict)
    line: int = 0


@dataclass(frozen=True)
class GenerationConfig:
    """Resolved generation options. Built once from the raw annotation."""
    return_type: cst.BaseExpression
    interface_name: str
    dispatch_method_name: str


@dataclass(frozen=True)
class Diagnostic:
    """A fatal generation failure located in a source file."""
    path: str
    message: str
    line: int = 0

    def format(self) -> str:
        """Render as `path:line: error: message` (line omitted when unknown)."""
        location = f"{self.path}:{self.line}" if self.line else self.path
        return f"{location}: error: {self.message}"


@dataclass(frozen=True)
class GenerationReport:
    """Outcome of a generate run across all files."""
    files_scanned: int = 0
    files_written: list[str] = field(default_factory=list)
    stale_outputs: list[str] = field(default_factory=list)
    interfaces_generated: int = 0
    diagnostics: list[Diagnostic] = field(default_factory=list)

    def has_errors(self) -> bool:
        """Return True if any file failed or any output is out of date."""
        return bool(self.diagnostics) or bool(self.stale_outputs)
