"""LibCST front end: find `@handler` declarations in module source."""

import logging
from collections.abc import Sequence
from typing import Optional, Union

import libcst as cst
from libcst.metadata import MetadataWrapper, PositionProvider

from handlergen.domain.entities import Declaration, DeclarationKind, Field, FieldShape, Variant
from handlergen.domain.errors import ConfigParseError, SourceParseError
from handlergen.domain.protocols import DeclarationReaderProtocol

logger = logging.getLogger(__name__)

ANNOTATION_NAME = "handler"
TUPLE_BASES = ("tuple", "Tuple")


class DeclarationCollector(cst.CSTVisitor):
    """Collect top-level statements decorated with the handler annotation."""

    METADATA_DEPENDENCIES = (PositionProvider,)

    def __init__(self) -> None:
        self.declarations: list[Declaration] = []
        self._depth = 0

    def visit_IndentedBlock(self, node: cst.IndentedBlock) -> None:
        self._depth += 1

    def leave_IndentedBlock(self, original_node: cst.IndentedBlock) -> None:
        self._depth -= 1

    def visit_ClassDef(self, node: cst.ClassDef) -> None:
        if self._depth == 0:
            decorator = DeclarationCollector.find_annotation(node.decorators)
            if decorator is not None:
                self._collect(node, decorator)

    def visit_FunctionDef(self, node: cst.FunctionDef) -> bool:
        if self._depth == 0:
            decorator = DeclarationCollector.find_annotation(node.decorators)
            if decorator is not None:
                self._collect(node, decorator)
        # Nothing nested in a function is a top-level declaration.
        return False

    def _collect(
        self, node: Union[cst.ClassDef, cst.FunctionDef], decorator: cst.Decorator
    ) -> None:
        line = self.get_metadata(PositionProvider, node).start.line
        options = DeclarationCollector.read_options(decorator, line)
        if isinstance(node, cst.FunctionDef):
            kind = DeclarationKind.OTHER
            variants: tuple[Variant, ...] = ()
        else:
            kind, variants = DeclarationCollector.classify(node)
        declaration = Declaration(
            name=node.name.value,
            kind=kind,
            variants=variants,
            options=options,
            line=line,
        )
        logger.debug("Found %s declaration %s at line %d", kind.value, declaration.name, line)
        self.declarations.append(declaration)

    @staticmethod
    def find_annotation(decorators: Sequence[cst.Decorator]) -> Optional[cst.Decorator]:
        """Return the `handler` / `x.handler` / `handler(...)` decorator, if any."""
        for decorator in decorators:
            target = decorator.decorator
            if isinstance(target, cst.Call):
                target = target.func
            if isinstance(target, cst.Name) and target.value == ANNOTATION_NAME:
                return decorator
            if isinstance(target, cst.Attribute) and target.attr.value == ANNOTATION_NAME:
                return decorator
        return None

    @staticmethod
    def read_options(decorator: cst.Decorator, line: int) -> dict[str, str]:
        """Raw keyword options of the annotation; values must be plain string literals."""
        call = decorator.decorator
        if not isinstance(call, cst.Call):
            return {}
        options: dict[str, str] = {}
        for arg in call.args:
            if arg.keyword is None:
                raise ConfigParseError(
                    "<positional>", None, "handler options must be keyword arguments", line
                )
            key = arg.keyword.value
            value = arg.value
            evaluated = value.evaluated_value if isinstance(value, cst.SimpleString) else None
            if not isinstance(evaluated, str):
                raise ConfigParseError(key, None, "value must be a string literal", line)
            options[key] = evaluated
        return options

    @staticmethod
    def classify(node: cst.ClassDef) -> tuple[DeclarationKind, tuple[Variant, ...]]:
        """A class with top-level fields is a record; otherwise its nested classes are variants."""
        statements = DeclarationCollector.class_statements(node)
        if DeclarationCollector.annotated_fields(statements):
            return DeclarationKind.RECORD, ()
        variants = tuple(
            DeclarationCollector.to_variant(stmt)
            for stmt in statements
            if isinstance(stmt, cst.ClassDef)
        )
        return DeclarationKind.UNION, variants

    @staticmethod
    def class_statements(node: cst.ClassDef) -> list[cst.CSTNode]:
        """Flatten a class body into its statements and small statements."""
        body = node.body
        if isinstance(body, cst.SimpleStatementSuite):
            return list(body.body)
        statements: list[cst.CSTNode] = []
        for stmt in body.body:
            if isinstance(stmt, cst.SimpleStatementLine):
                statements.extend(stmt.body)
            else:
                statements.append(stmt)
        return statements

    @staticmethod
    def annotated_fields(statements: list[cst.CSTNode]) -> list[Field]:
        fields = []
        for stmt in statements:
            if not isinstance(stmt, cst.AnnAssign) or not isinstance(stmt.target, cst.Name):
                continue
            if DeclarationCollector.is_class_var(stmt.annotation.annotation):
                continue
            fields.append(Field(name=stmt.target.value, annotation=stmt.annotation.annotation))
        return fields

    @staticmethod
    def is_class_var(annotation: cst.BaseExpression) -> bool:
        if isinstance(annotation, cst.Subscript):
            annotation = annotation.value
        if isinstance(annotation, cst.Attribute):
            return annotation.attr.value == "ClassVar"
        return isinstance(annotation, cst.Name) and annotation.value == "ClassVar"

    @staticmethod
    def is_positional(node: cst.ClassDef) -> bool:
        for base in node.bases:
            value = base.value
            if isinstance(value, cst.Subscript):
                value = value.value
            if isinstance(value, cst.Name) and value.value in TUPLE_BASES:
                return True
            if isinstance(value, cst.Attribute) and value.attr.value in TUPLE_BASES:
                return True
        return False

    @staticmethod
    def to_variant(node: cst.ClassDef) -> Variant:
        name = node.name.value
        if DeclarationCollector.is_positional(node):
            return Variant(name=name, shape=FieldShape.POSITIONAL)
        fields = DeclarationCollector.annotated_fields(DeclarationCollector.class_statements(node))
        if fields:
            return Variant(name=name, shape=FieldShape.NAMED, fields=tuple(fields))
        return Variant(name=name, shape=FieldShape.UNIT)


class LibCSTDeclarationGateway(DeclarationReaderProtocol):
    """Gateway reading annotated declarations from Python source using LibCST."""

    def read_declarations(self, source: str) -> list[Declaration]:
        """
        Parse a module and return every top-level `@handler` declaration in order.

        Raises:
            SourceParseError: the module is not valid Python.
            ConfigParseError: an annotation option is not a keyword string literal.
        """
        try:
            module = cst.parse_module(source)
        except cst.ParserSyntaxError as exc:
            raise SourceParseError(f"invalid Python source: {exc.message}", exc.raw_line) from exc
        collector = DeclarationCollector()
        MetadataWrapper(module).visit(collector)
        return collector.declarations
