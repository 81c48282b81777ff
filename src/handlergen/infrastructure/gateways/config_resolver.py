"""Resolve handler annotation options into a GenerationConfig."""

import keyword
from collections.abc import Mapping

import libcst as cst

from handlergen.domain.entities import RECOGNIZED_OPTIONS, GenerationConfig
from handlergen.domain.errors import ConfigParseError


class HandlerConfigResolver:
    """
    Turn raw `handler(...)` options into a fully populated GenerationConfig.

    Defaults apply only when a key is absent. A present value that fails to
    parse is a ConfigParseError naming the option; there is no fallback.
    """

    def __init__(self, raw: Mapping[str, str], declaration_name: str, line: int = 0) -> None:
        self.raw = dict(raw)
        self.declaration_name = declaration_name
        self.line = line
        for key in self.raw:
            if key not in RECOGNIZED_OPTIONS:
                raise ConfigParseError(
                    key, None,
                    f"unknown option; expected one of {', '.join(RECOGNIZED_OPTIONS)}",
                    line,
                )

    @staticmethod
    def lower_name(name: str) -> str:
        """Whole-string case fold. `MyEvent` becomes `myevent`, not `my_event`."""
        return name.lower()

    def resolve_return_type(self) -> cst.BaseExpression:
        """Parse `returns` as a type expression; the unit type `None` when absent."""
        text = self.raw.get("returns")
        if text is None:
            return cst.Name("None")
        try:
            return cst.parse_expression(text)
        except cst.ParserSyntaxError as exc:
            raise ConfigParseError(
                "returns", text, f"not a valid type expression ({exc.message})", self.line
            ) from exc

    def resolve_interface_name(self) -> str:
        """`trait_name` verbatim, else `<DeclarationName>Handler`."""
        name = self.raw.get("trait_name")
        if name is None:
            return f"{self.declaration_name}Handler"
        if name == self.declaration_name:
            raise ConfigParseError(
                "trait_name", name, "must differ from the union it handles", self.line
            )
        return self._identifier("trait_name", name)

    def resolve_dispatch_method_name(self) -> str:
        """`method` verbatim, else `handle_<lowercased DeclarationName>`."""
        name = self.raw.get("method")
        if name is None:
            return f"handle_{self.lower_name(self.declaration_name)}"
        return self._identifier("method", name)

    def resolve(self) -> GenerationConfig:
        """Resolve all options at once."""
        return GenerationConfig(
            return_type=self.resolve_return_type(),
            interface_name=self.resolve_interface_name(),
            dispatch_method_name=self.resolve_dispatch_method_name(),
        )

    def _identifier(self, option: str, text: str) -> str:
        try:
            parsed = cst.parse_expression(text)
        except cst.ParserSyntaxError as exc:
            raise ConfigParseError(option, text, "not a valid identifier", self.line) from exc
        if not isinstance(parsed, cst.Name) or parsed.value != text or keyword.iskeyword(text):
            raise ConfigParseError(option, text, "not a valid identifier", self.line)
        return text
