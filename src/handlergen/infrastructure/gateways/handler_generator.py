"""LibCST generation of handler interfaces for tagged unions."""

import keyword
import logging
from collections import Counter
from collections.abc import Sequence

import libcst as cst

from handlergen.domain.entities import (
    Declaration,
    DeclarationKind,
    FieldShape,
    GenerationConfig,
    Variant,
)
from handlergen.domain.errors import InputShapeError
from handlergen.domain.protocols import HandlerGeneratorProtocol
from handlergen.infrastructure.gateways.config_resolver import HandlerConfigResolver

logger = logging.getLogger(__name__)

RECEIVER = "self"
HANDLED_VALUE = "handled_value"


class HandlerInterfaceGenerator:
    """
    Build the handler interface for one tagged union.

    The output is a single `class <Interface>(ABC)` holding one abstract method
    per variant, in declaration order, followed by the concrete dispatch method
    whose `match` has exactly one `case` per variant.
    """

    def __init__(self, declaration: Declaration, config: GenerationConfig) -> None:
        self.declaration = declaration
        self.config = config

    @staticmethod
    def variant_to_method_name(variant: Variant) -> str:
        """Lowercase the variant name as a whole; keywords get a trailing underscore."""
        name = HandlerConfigResolver.lower_name(variant.name)
        if keyword.iskeyword(name):
            return f"{name}_"
        return name

    @staticmethod
    def variant_to_arguments(variant: Variant) -> list[tuple[str, cst.BaseExpression]]:
        """(name, annotation) pairs after the implicit receiver. Empty unless NAMED."""
        if variant.shape is not FieldShape.NAMED:
            return []
        return [(f.name, f.annotation) for f in variant.fields]

    def generate_method_signature(self, variant: Variant) -> cst.FunctionDef:
        params = [cst.Param(name=cst.Name(RECEIVER))]
        for name, annotation in self.variant_to_arguments(variant):
            params.append(cst.Param(name=cst.Name(name), annotation=cst.Annotation(annotation)))
        return cst.FunctionDef(
            name=cst.Name(self.variant_to_method_name(variant)),
            params=cst.Parameters(params=params),
            body=cst.SimpleStatementSuite(body=[cst.Expr(cst.Ellipsis())]),
            decorators=[cst.Decorator(decorator=cst.Name("abstractmethod"))],
            returns=cst.Annotation(self.config.return_type),
        )

    def generate_match_arm(self, variant: Variant) -> cst.MatchCase:
        """`case Enum.Variant(f=f, ...): return self.variant(f, ...)`."""
        names = variant.field_names
        pattern = cst.MatchClass(
            cls=cst.Attribute(value=cst.Name(self.declaration.name), attr=cst.Name(variant.name)),
            kwds=[
                cst.MatchKeywordElement(key=cst.Name(n), pattern=cst.MatchAs(name=cst.Name(n)))
                for n in names
            ],
        )
        call = cst.Call(
            func=cst.Attribute(
                value=cst.Name(RECEIVER), attr=cst.Name(self.variant_to_method_name(variant))
            ),
            args=[cst.Arg(value=cst.Name(n)) for n in names],
        )
        return cst.MatchCase(
            pattern=pattern,
            body=cst.IndentedBlock(body=[cst.SimpleStatementLine(body=[cst.Return(value=call)])]),
        )

    def generate_dispatch_method(self, match_arms: Sequence[cst.MatchCase]) -> cst.FunctionDef:
        params = [
            cst.Param(name=cst.Name(RECEIVER)),
            cst.Param(
                name=cst.Name(HANDLED_VALUE),
                annotation=cst.Annotation(cst.Name(self.declaration.name)),
            ),
        ]
        match = cst.Match(subject=cst.Name(HANDLED_VALUE), cases=list(match_arms))
        return cst.FunctionDef(
            name=cst.Name(self.config.dispatch_method_name),
            params=cst.Parameters(params=params),
            body=cst.IndentedBlock(body=[match]),
            returns=cst.Annotation(self.config.return_type),
            leading_lines=[cst.EmptyLine(indent=False)],
        )

    def generate(self) -> cst.ClassDef:
        """Assemble the interface: all signatures in variant order, then the dispatch method."""
        declaration = self.declaration
        if declaration.kind is not DeclarationKind.UNION:
            raise InputShapeError(
                f"handler target '{declaration.name}' must be a tagged union "
                f"(a class of nested variant classes), not a {declaration.kind.value}",
                declaration.line,
            )
        if not declaration.variants:
            raise InputShapeError(
                f"tagged union '{declaration.name}' declares no variants",
                declaration.line,
            )
        for variant in declaration.variants:
            self._check_field_names(variant)
        self._warn_on_collisions()

        signatures = []
        for index, variant in enumerate(declaration.variants):
            signature = self.generate_method_signature(variant)
            if index:
                signature = signature.with_changes(leading_lines=[cst.EmptyLine(indent=False)])
            signatures.append(signature)
        arms = [self.generate_match_arm(v) for v in declaration.variants]

        return cst.ClassDef(
            name=cst.Name(self.config.interface_name),
            bases=[cst.Arg(value=cst.Name("ABC"))],
            body=cst.IndentedBlock(body=[*signatures, self.generate_dispatch_method(arms)]),
        )

    def _check_field_names(self, variant: Variant) -> None:
        """Field names become parameters next to the receiver, so they must be distinct."""
        seen: set[str] = set()
        for name in variant.field_names:
            if name == RECEIVER:
                raise InputShapeError(
                    f"variant '{self.declaration.name}.{variant.name}' has a field named "
                    f"'{RECEIVER}', which clashes with the handler receiver",
                    self.declaration.line,
                )
            if name in seen:
                raise InputShapeError(
                    f"variant '{self.declaration.name}.{variant.name}' declares field "
                    f"'{name}' more than once",
                    self.declaration.line,
                )
            seen.add(name)

    def _warn_on_collisions(self) -> None:
        counts = Counter(self.variant_to_method_name(v) for v in self.declaration.variants)
        for name, count in counts.items():
            if count > 1:
                logger.warning(
                    "%s: %d variants fold to the handler method name '%s'; "
                    "the generated interface repeats it",
                    self.declaration.name, count, name,
                )


class HandlerGenerationGateway(HandlerGeneratorProtocol):
    """Entry point: declaration -> resolver -> generator -> interface fragment."""

    def expand(self, declaration: Declaration) -> cst.ClassDef:
        resolver = HandlerConfigResolver(declaration.options, declaration.name, declaration.line)
        config = resolver.resolve()
        logger.debug(
            "Expanding %s into %s.%s", declaration.name,
            config.interface_name, config.dispatch_method_name,
        )
        return HandlerInterfaceGenerator(declaration, config).generate()
