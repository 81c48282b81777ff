"""LibCST based rendering of generated handler interfaces."""

import logging
from collections.abc import Sequence

import libcst as cst

from handlergen.domain.entities import Declaration
from handlergen.domain.errors import SourceParseError
from handlergen.domain.protocols import ModuleRendererProtocol
from handlergen.infrastructure.gateways.transformers import (
    ABC_NAMES,
    AddAbcImportTransformer,
    AnnotationNamesCollector,
    ModuleBindingsCollector,
    SpliceHandlersTransformer,
)

logger = logging.getLogger(__name__)

GENERATED_BANNER = "# Generated by handlergen from {module}. Do not edit."


class LibCSTModuleRenderer(ModuleRendererProtocol):
    """Gateway turning interface fragments into source text using LibCST."""

    def render_fragment(self, fragment: cst.ClassDef) -> str:
        return cst.Module(body=[fragment]).code

    def splice(
        self, source: str, expansions: Sequence[tuple[Declaration, cst.ClassDef]]
    ) -> str:
        """
        Splice interfaces into the module they were generated from.

        Args:
            source: The module source containing the declarations
            expansions: (declaration, interface) pairs in declaration order

        Returns:
            The updated module source
        """
        module = self._parse(source)
        if not expansions:
            return module.code
        splicer = SpliceHandlersTransformer({d.name: f for d, f in expansions})
        module = module.visit(splicer)
        module = module.visit(AddAbcImportTransformer())
        logger.debug("Spliced %d interface(s)", len(splicer.spliced))
        return module.code

    def render_module(
        self,
        expansions: Sequence[tuple[Declaration, cst.ClassDef]],
        source_module: str,
        header: bool = True,
        source: str = "",
    ) -> str:
        """
        Render a standalone module importing the unions from `source_module`.

        `source_module` may be relative (`.events`). When `source` is given, the
        names the generated annotations use are imported from it too, as long
        as that module binds them at runtime.
        """
        imports = [
            self._import_from("__future__", ["annotations"]),
            self._import_from("abc", list(ABC_NAMES)),
            self._import_from(source_module, self.imported_names(expansions, source)),
        ]
        imports[1] = imports[1].with_changes(leading_lines=[cst.EmptyLine()])
        imports[2] = imports[2].with_changes(leading_lines=[cst.EmptyLine()])
        body: list[cst.BaseStatement] = list(imports)
        for _, fragment in expansions:
            body.append(fragment.with_changes(leading_lines=[cst.EmptyLine(), cst.EmptyLine()]))
        module_header = []
        if header:
            banner = GENERATED_BANNER.format(module=source_module.lstrip("."))
            module_header = [cst.EmptyLine(comment=cst.Comment(banner))]
        return cst.Module(body=body, header=module_header).code

    def imported_names(
        self, expansions: Sequence[tuple[Declaration, cst.ClassDef]], source: str
    ) -> list[str]:
        """Union names, then annotation names the source module binds, in first-seen order."""
        names = [d.name for d, _ in expansions]
        if not source:
            return names
        bindings = ModuleBindingsCollector()
        self._parse(source).visit(bindings)
        referenced = AnnotationNamesCollector()
        for _, fragment in expansions:
            fragment.visit(referenced)
        taken = {*names, *ABC_NAMES, *(f.name.value for _, f in expansions)}
        names.extend(n for n in referenced.names if n in bindings.names and n not in taken)
        return names

    @staticmethod
    def _parse(source: str) -> cst.Module:
        try:
            return cst.parse_module(source)
        except cst.ParserSyntaxError as exc:
            raise SourceParseError(f"invalid Python source: {exc.message}", exc.raw_line) from exc

    @staticmethod
    def _import_from(module: str, names: list[str]) -> cst.SimpleStatementLine:
        # ".events" is relative to the current package, "a.b.c" is dotted
        level = len(module) - len(module.lstrip("."))
        parts = module[level:].split(".")
        module_expr: cst.BaseExpression = cst.Name(parts[0])
        for part in parts[1:]:
            module_expr = cst.Attribute(value=module_expr, attr=cst.Name(part))
        import_stmt = cst.ImportFrom(
            module=module_expr,
            names=[cst.ImportAlias(name=cst.Name(n)) for n in names],
            relative=[cst.Dot()] * level,
        )
        return cst.SimpleStatementLine(body=[import_stmt])
