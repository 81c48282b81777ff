"""Unit tests for HandlerConfigResolver."""

import libcst as cst
import pytest

from handlergen.domain.errors import ConfigParseError
from handlergen.infrastructure.gateways.config_resolver import HandlerConfigResolver


def _code(expr: cst.BaseExpression) -> str:
    return cst.Module(body=[]).code_for_node(expr)


class TestDefaults:
    """Absent options fall back to derived names."""

    def test_return_type_defaults_to_none(self) -> None:
        resolver = HandlerConfigResolver({}, "Event")
        assert _code(resolver.resolve_return_type()) == "None"

    def test_interface_name_appends_handler(self) -> None:
        assert HandlerConfigResolver({}, "Event").resolve_interface_name() == "EventHandler"

    def test_interface_name_keeps_declaration_case(self) -> None:
        assert HandlerConfigResolver({}, "MyEvent").resolve_interface_name() == "MyEventHandler"

    def test_dispatch_method_lowercases_whole_name(self) -> None:
        """PascalCase collapses to one token; it is not converted to snake_case."""
        resolver = HandlerConfigResolver({}, "MyEvent")
        assert resolver.resolve_dispatch_method_name() == "handle_myevent"

    def test_dispatch_method_for_simple_name(self) -> None:
        assert HandlerConfigResolver({}, "Event").resolve_dispatch_method_name() == "handle_event"

    def test_resolve_bundles_all_defaults(self) -> None:
        config = HandlerConfigResolver({}, "Event").resolve()
        assert config.interface_name == "EventHandler"
        assert config.dispatch_method_name == "handle_event"
        assert _code(config.return_type) == "None"


class TestOverrides:
    """Present options are used verbatim."""

    def test_all_overrides(self) -> None:
        config = HandlerConfigResolver(
            {"returns": "int", "trait_name": "EventSink", "method": "dispatch"}, "Event"
        ).resolve()
        assert config.interface_name == "EventSink"
        assert config.dispatch_method_name == "dispatch"
        assert _code(config.return_type) == "int"

    def test_returns_accepts_generic_type(self) -> None:
        resolver = HandlerConfigResolver({"returns": "dict[str, list[int]]"}, "Event")
        assert _code(resolver.resolve_return_type()) == "dict[str, list[int]]"

    def test_returns_accepts_optional_union(self) -> None:
        resolver = HandlerConfigResolver({"returns": "int | None"}, "Event")
        assert _code(resolver.resolve_return_type()) == "int | None"

    def test_returns_accepts_dotted_type(self) -> None:
        resolver = HandlerConfigResolver({"returns": "collections.abc.Iterator[str]"}, "Event")
        assert isinstance(resolver.resolve_return_type(), cst.Subscript)


class TestInvalidOptions:
    """Present-but-invalid values are fatal and name the option."""

    def test_malformed_return_type(self) -> None:
        resolver = HandlerConfigResolver({"returns": "int)"}, "Event")
        with pytest.raises(ConfigParseError) as exc_info:
            resolver.resolve_return_type()
        assert exc_info.value.option == "returns"
        assert "returns" in str(exc_info.value)
        assert "int)" in str(exc_info.value)

    def test_empty_return_type_is_not_defaulted(self) -> None:
        with pytest.raises(ConfigParseError) as exc_info:
            HandlerConfigResolver({"returns": ""}, "Event").resolve()
        assert exc_info.value.option == "returns"

    @pytest.mark.parametrize("name", ["Event Sink", "1Sink", "Sink()", "class", "None", " Sink"])
    def test_invalid_trait_name(self, name: str) -> None:
        with pytest.raises(ConfigParseError) as exc_info:
            HandlerConfigResolver({"trait_name": name}, "Event").resolve_interface_name()
        assert exc_info.value.option == "trait_name"

    @pytest.mark.parametrize("name", ["handle-event", "a.b", "def", ""])
    def test_invalid_method(self, name: str) -> None:
        with pytest.raises(ConfigParseError) as exc_info:
            HandlerConfigResolver({"method": name}, "Event").resolve_dispatch_method_name()
        assert exc_info.value.option == "method"

    def test_unknown_option(self) -> None:
        with pytest.raises(ConfigParseError) as exc_info:
            HandlerConfigResolver({"return": "int"}, "Event", line=7)
        assert exc_info.value.option == "return"
        assert exc_info.value.line == 7
        assert "unknown option" in str(exc_info.value)

    def test_error_carries_line(self) -> None:
        with pytest.raises(ConfigParseError) as exc_info:
            HandlerConfigResolver({"method": "1x"}, "Event", line=12).resolve()
        assert exc_info.value.line == 12

    def test_trait_name_equal_to_union_name(self) -> None:
        with pytest.raises(ConfigParseError) as exc_info:
            HandlerConfigResolver({"trait_name": "Event"}, "Event").resolve()
        assert exc_info.value.option == "trait_name"
        assert "must differ from the union" in str(exc_info.value)
