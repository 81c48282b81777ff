"""Unit tests for LibCSTDeclarationGateway."""

import libcst as cst
import pytest

from handlergen.domain.entities import DeclarationKind, FieldShape
from handlergen.domain.errors import ConfigParseError, SourceParseError
from handlergen.infrastructure.gateways.libcst_declaration_gateway import LibCSTDeclarationGateway
from tests.conftest import read_declaration


def _code(node: cst.CSTNode) -> str:
    return cst.Module(body=[]).code_for_node(node)


class TestFindsDeclarations:
    """Only top-level statements carrying the handler annotation are collected."""

    def test_no_declarations(self) -> None:
        source = "class Plain:\n    class Inner:\n        pass\n"
        assert LibCSTDeclarationGateway().read_declarations(source) == []

    def test_bare_decorator(self, event_source: str) -> None:
        declarations = LibCSTDeclarationGateway().read_declarations(event_source)
        assert [d.name for d in declarations] == ["Event"]
        assert declarations[0].options == {}

    def test_dotted_and_called_decorators(self) -> None:
        source = (
            "import handlergen.markers\n"
            "@handlergen.markers.handler\n"
            "class A:\n"
            "    class X: pass\n"
            "@handlergen.markers.handler(method='go')\n"
            "class B:\n"
            "    class Y: pass\n"
        )
        declarations = LibCSTDeclarationGateway().read_declarations(source)
        assert [d.name for d in declarations] == ["A", "B"]
        assert declarations[1].options == {"method": "go"}

    def test_other_decorators_are_ignored(self) -> None:
        source = "@dataclass\nclass A:\n    x: int\n"
        assert LibCSTDeclarationGateway().read_declarations(source) == []

    def test_nested_classes_are_not_declarations(self) -> None:
        source = (
            "class Outer:\n"
            "    @handler\n"
            "    class Inner:\n"
            "        class X: pass\n"
            "def build():\n"
            "    @handler\n"
            "    class Local:\n"
            "        class Y: pass\n"
            "if True:\n"
            "    @handler\n"
            "    class Guarded:\n"
            "        class Z: pass\n"
        )
        assert LibCSTDeclarationGateway().read_declarations(source) == []

    def test_declarations_keep_source_order(self) -> None:
        source = (
            "@handler\nclass B:\n    class X: pass\n\n"
            "@handler\nclass A:\n    class Y: pass\n"
        )
        declarations = LibCSTDeclarationGateway().read_declarations(source)
        assert [(d.name, d.line) for d in declarations] == [("B", 2), ("A", 6)]

    def test_invalid_source(self) -> None:
        with pytest.raises(SourceParseError) as exc_info:
            LibCSTDeclarationGateway().read_declarations("class Broken(:\n    pass\n")
        assert exc_info.value.line == 1


class TestOptions:
    """Annotation options must be keyword string literals."""

    def test_reads_string_options_in_order(self) -> None:
        declaration = read_declaration(
            """\
            @handler(trait_name="Sink", returns='list[int]', method="dispatch")
            class Event:
                class Start: pass
            """
        )
        assert list(declaration.options.items()) == [
            ("trait_name", "Sink"), ("returns", "list[int]"), ("method", "dispatch"),
        ]

    def test_non_string_value(self) -> None:
        with pytest.raises(ConfigParseError) as exc_info:
            read_declaration(
                """\
                @handler(returns=int)
                class Event:
                    class Start: pass
                """
            )
        assert exc_info.value.option == "returns"
        assert exc_info.value.line == 2

    def test_bytes_value(self) -> None:
        with pytest.raises(ConfigParseError) as exc_info:
            read_declaration(
                """\
                @handler(method=b"dispatch")
                class Event:
                    class Start: pass
                """
            )
        assert exc_info.value.option == "method"

    def test_positional_argument(self) -> None:
        with pytest.raises(ConfigParseError) as exc_info:
            read_declaration(
                """\
                @handler("int")
                class Event:
                    class Start: pass
                """
            )
        assert "keyword arguments" in str(exc_info.value)


class TestClassification:
    """Declaration kinds and variant shapes."""

    def test_union_with_unit_and_named_variants(self, event_source: str) -> None:
        declaration = LibCSTDeclarationGateway().read_declarations(event_source)[0]
        assert declaration.kind is DeclarationKind.UNION
        start, stop = declaration.variants
        assert (start.name, start.shape, start.fields) == ("Start", FieldShape.UNIT, ())
        assert stop.name == "Stop"
        assert stop.shape is FieldShape.NAMED
        assert [(f.name, _code(f.annotation)) for f in stop.fields] == [("at", "Timestamp")]

    def test_record(self) -> None:
        declaration = read_declaration(
            """\
            @handler
            class Point:
                x: int
                y: int
            """
        )
        assert declaration.kind is DeclarationKind.RECORD
        assert declaration.variants == ()

    def test_function(self) -> None:
        declaration = read_declaration(
            """\
            @handler
            def run():
                pass
            """
        )
        assert declaration.kind is DeclarationKind.OTHER
        assert declaration.name == "run"

    def test_class_without_variants_is_an_empty_union(self) -> None:
        declaration = read_declaration(
            """\
            @handler
            class Nothing:
                '''No variants yet.'''
            """
        )
        assert declaration.kind is DeclarationKind.UNION
        assert declaration.variants == ()

    def test_positional_variant(self) -> None:
        declaration = read_declaration(
            """\
            @handler
            class Shape:
                class Point(tuple[int, int]):
                    pass

                class Legacy(typing.Tuple[str]):
                    pass
            """
        )
        assert [v.shape for v in declaration.variants] == [FieldShape.POSITIONAL, FieldShape.POSITIONAL]
        assert all(v.field_names == [] for v in declaration.variants)

    def test_named_fields_keep_order_and_annotations(self) -> None:
        declaration = read_declaration(
            """\
            @handler
            class Command:
                @dataclass(frozen=True)
                class Move:
                    dx: int
                    dy: int = 0
                    label: Optional[str] = None

                    def describe(self) -> str:
                        return "move"
            """
        )
        (move,) = declaration.variants
        assert move.field_names == ["dx", "dy", "label"]
        assert [_code(f.annotation) for f in move.fields] == ["int", "int", "Optional[str]"]

    def test_class_vars_are_not_fields(self) -> None:
        declaration = read_declaration(
            """\
            @handler
            class Command:
                class Tick:
                    kind: ClassVar[str] = "tick"
                    rate: typing.ClassVar = 1
            """
        )
        assert declaration.variants[0].shape is FieldShape.UNIT

    def test_one_line_variant_body(self) -> None:
        declaration = read_declaration(
            """\
            @handler
            class Command:
                class Jump: height: int
            """
        )
        assert declaration.variants[0].field_names == ["height"]

    def test_non_class_members_are_not_variants(self) -> None:
        declaration = read_declaration(
            """\
            @handler
            class Command:
                VERSION = 2

                class Stop:
                    pass

                def helper(self) -> None:
                    pass
            """
        )
        assert declaration.kind is DeclarationKind.UNION
        assert [v.name for v in declaration.variants] == ["Stop"]
