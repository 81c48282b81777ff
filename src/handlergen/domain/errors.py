"""Generation failures. Every one of them is fatal for the declaration it concerns."""

from typing import Optional


class HandlerGenError(Exception):
    """Base class for failures reported back to the caller as diagnostics."""

    def __init__(self, message: str, line: int = 0) -> None:
        super().__init__(message)
        self.line = line


class InputShapeError(HandlerGenError):
    """The annotated declaration is not a tagged union that can be expanded."""


class ConfigParseError(HandlerGenError):
    """A handler option value cannot be parsed as its expected syntactic kind."""

    def __init__(self, option: str, value: Optional[str], reason: str, line: int = 0) -> None:
        if value is None:
            message = f"invalid handler option '{option}': {reason}"
        else:
            message = f"invalid handler option '{option}' = {value!r}: {reason}"
        super().__init__(message, line)
        self.option = option
        self.value = value


class SourceParseError(HandlerGenError):
    """The source module itself is not valid Python."""
