"""LibCST transformers and visitors used to place generated handler interfaces."""

from collections.abc import Sequence
from typing import Optional

import libcst as cst

ABC_NAMES = ("ABC", "abstractmethod")


class SpliceHandlersTransformer(cst.CSTTransformer):
    """
    Insert each generated interface right after its declaration.

    A top-level class already named like a generated interface is a previous
    expansion and is dropped, so splicing the same module twice is stable.
    """

    def __init__(self, fragments: dict[str, cst.ClassDef]) -> None:
        # declaration name -> generated interface
        self.fragments = fragments
        self.interface_names = {f.name.value for f in fragments.values()}
        self.spliced: set[str] = set()

    def leave_Module(self, original_node: cst.Module, updated_node: cst.Module) -> cst.Module:
        new_body: list[cst.BaseStatement] = []
        for stmt in updated_node.body:
            if isinstance(stmt, cst.ClassDef) and stmt.name.value in self.interface_names:
                continue
            new_body.append(stmt)
            if isinstance(stmt, cst.ClassDef) and stmt.name.value in self.fragments:
                fragment = self.fragments[stmt.name.value]
                new_body.append(fragment.with_changes(leading_lines=[cst.EmptyLine(), cst.EmptyLine()]))
                self.spliced.add(stmt.name.value)
        return updated_node.with_changes(body=new_body)


class AddAbcImportTransformer(cst.CSTTransformer):
    """Ensure `from abc import ABC, abstractmethod` is available to the generated classes."""

    def __init__(self) -> None:
        self.existing: set[str] = set()

    def visit_ImportFrom(self, node: cst.ImportFrom) -> None:
        if isinstance(node.module, cst.Name) and node.module.value == "abc":
            if isinstance(node.names, cst.ImportStar):
                self.existing.update(ABC_NAMES)
                return
            for alias in node.names:
                if isinstance(alias.name, cst.Name) and alias.asname is None:
                    self.existing.add(alias.name.value)

    def leave_Module(self, original_node: cst.Module, updated_node: cst.Module) -> cst.Module:
        missing = [n for n in ABC_NAMES if n not in self.existing]
        if not missing:
            return updated_node
        import_stmt = cst.ImportFrom(
            module=cst.Name("abc"),
            names=[cst.ImportAlias(name=cst.Name(n)) for n in missing],
        )
        new_body = list(updated_node.body)
        insert_idx = AddAbcImportTransformer.import_insert_index(new_body)
        new_body.insert(insert_idx, cst.SimpleStatementLine(body=[import_stmt]))
        return updated_node.with_changes(body=new_body)

    @staticmethod
    def import_insert_index(body: Sequence[cst.BaseStatement]) -> int:
        """After the last top-level import, else after a module docstring, else 0."""
        insert_idx = 0
        for i, stmt in enumerate(body):
            if isinstance(stmt, cst.SimpleStatementLine):
                for item in stmt.body:
                    if isinstance(item, (cst.Import, cst.ImportFrom)):
                        insert_idx = i + 1
                        break
        if insert_idx == 0 and body and AddAbcImportTransformer.is_docstring(body[0]):
            insert_idx = 1
        return insert_idx

    @staticmethod
    def is_docstring(stmt: cst.BaseStatement) -> bool:
        return (
            isinstance(stmt, cst.SimpleStatementLine)
            and len(stmt.body) == 1
            and isinstance(stmt.body[0], cst.Expr)
            and isinstance(stmt.body[0].value, (cst.SimpleString, cst.ConcatenatedString))
        )


class ModuleBindingsCollector(cst.CSTVisitor):
    """
    Collect the names a module binds at import time.

    Class and function bodies are not entered. `if TYPE_CHECKING:` blocks are
    skipped because their imports do not exist at runtime.
    """

    def __init__(self) -> None:
        self.names: set[str] = set()

    def visit_ClassDef(self, node: cst.ClassDef) -> bool:
        self.names.add(node.name.value)
        return False

    def visit_FunctionDef(self, node: cst.FunctionDef) -> bool:
        self.names.add(node.name.value)
        return False

    def visit_Lambda(self, node: cst.Lambda) -> bool:
        return False

    def visit_If(self, node: cst.If) -> Optional[bool]:
        test = node.test
        if isinstance(test, cst.Attribute):
            test = test.attr
        if isinstance(test, cst.Name) and test.value == "TYPE_CHECKING":
            return False
        return None

    def visit_AssignTarget(self, node: cst.AssignTarget) -> None:
        self._add_target(node.target)

    def visit_AnnAssign(self, node: cst.AnnAssign) -> None:
        self._add_target(node.target)

    def visit_Import(self, node: cst.Import) -> None:
        for alias in node.names:
            if alias.asname is not None and isinstance(alias.asname.name, cst.Name):
                self.names.add(alias.asname.name.value)
                continue
            root = alias.name
            while isinstance(root, cst.Attribute):
                root = root.value
            if isinstance(root, cst.Name):
                self.names.add(root.value)

    def visit_ImportFrom(self, node: cst.ImportFrom) -> None:
        if isinstance(node.names, cst.ImportStar):
            return
        for alias in node.names:
            if alias.asname is not None and isinstance(alias.asname.name, cst.Name):
                self.names.add(alias.asname.name.value)
            elif isinstance(alias.name, cst.Name):
                self.names.add(alias.name.value)

    def _add_target(self, target: cst.BaseExpression) -> None:
        if isinstance(target, cst.Name):
            self.names.add(target.value)
        elif isinstance(target, (cst.Tuple, cst.List)):
            for element in target.elements:
                self._add_target(element.value)


class AnnotationNamesCollector(cst.CSTVisitor):
    """Collect the root names referenced by annotations, in first-seen order."""

    def __init__(self) -> None:
        self.names: list[str] = []
        self._in_annotation = 0

    def visit_Annotation(self, node: cst.Annotation) -> None:
        self._in_annotation += 1

    def leave_Annotation(self, original_node: cst.Annotation) -> None:
        self._in_annotation -= 1

    def visit_Name(self, node: cst.Name) -> None:
        if self._in_annotation:
            self._add(node.value)

    def visit_Attribute(self, node: cst.Attribute) -> Optional[bool]:
        if not self._in_annotation:
            return None
        root: cst.BaseExpression = node
        while isinstance(root, cst.Attribute):
            root = root.value
        if isinstance(root, cst.Name):
            self._add(root.value)
        # `a.b.c` contributes only `a`
        return False

    def _add(self, name: str) -> None:
        if name not in self.names:
            self.names.append(name)
