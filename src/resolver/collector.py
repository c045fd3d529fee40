"""
Reference collection for a file.

The collector walks the declaration tree in the order the emitter prints it
and records every type and member reference, together with the scope it is
printed in. Collection order decides which of two clashing simple names is
imported, so the walk must visit declarations exactly as they are emitted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterator, List, Sequence, Tuple

from names import (
    NULLABLE_ANY,
    ClassName,
    LambdaTypeName,
    ParameterizedTypeName,
    Reference as Target,
    TypeName,
    TypeVariableName,
    UNIT,
    WildcardTypeName,
)
from specs import (
    AnnotationSpec,
    EnumConstant,
    FileSpec,
    FunSpec,
    ParameterSpec,
    PropertySpec,
    TypeAliasSpec,
    TypeSpec,
)
from template import CodeBlock, InstructionKind

from .scope import ScopeFrame, declared_class_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Reference:
    """A symbolic reference and the scope it is printed in."""

    target: Target
    scope: Tuple[ScopeFrame, ...] = ()
    in_kdoc: bool = False


class ReferenceSet:
    """Immutable, ordered collection of references in first-seen order."""

    def __init__(self, references: Sequence[Reference] = ()):
        self._references = tuple(references)

    def __iter__(self) -> Iterator[Reference]:
        return iter(self._references)

    def __len__(self) -> int:
        return len(self._references)

    def __getitem__(self, index: int) -> Reference:
        return self._references[index]

    def canonical_names(self) -> Tuple[str, ...]:
        """Distinct canonical names, in the order they were first collected."""
        seen = {}
        for reference in self._references:
            seen.setdefault(reference.target.canonical_name, None)
        return tuple(seen)

    def __repr__(self) -> str:
        return f"ReferenceSet({list(self.canonical_names())!r})"


def has_declared_bound(type_variable: TypeVariableName) -> bool:
    """True when a single bound is printed inline as `T : Bound`."""
    return len(type_variable.bounds) == 1 and type_variable.bounds[0] != NULLABLE_ANY


class _ReferenceCollector:
    def __init__(self, package_name: str) -> None:
        self._package_name = package_name
        self._scope: List[ScopeFrame] = []
        self._in_kdoc = False
        self._references: List[Reference] = []

    def collect(self, file_spec: FileSpec) -> ReferenceSet:
        self._visit(file_spec)
        logger.debug(
            "collected %d references from %s", len(self._references), file_spec.name
        )
        return ReferenceSet(self._references)

    # ------------------------------------------------------------------ helpers

    def _record(self, target: Target) -> None:
        if isinstance(target, ClassName):
            target = target.copy(nullable=False)
        self._references.append(Reference(target, tuple(self._scope), self._in_kdoc))

    def _visit(self, node: Any) -> None:
        if node is None:
            return
        if isinstance(node, (list, tuple)):
            for element in node:
                self._visit(element)
            return
        handler = getattr(self, f"_visit_{type(node).__name__}", None)
        if handler:
            handler(node)

    def _visit_kdoc(self, kdoc: CodeBlock) -> None:
        previous, self._in_kdoc = self._in_kdoc, True
        try:
            self._visit_CodeBlock(kdoc)
        finally:
            self._in_kdoc = previous

    def _visit_type(self, type_name: TypeName) -> None:
        if isinstance(type_name, ClassName):
            self._record(type_name)
        elif isinstance(type_name, ParameterizedTypeName):
            self._record(type_name.raw_type)
            for argument in type_name.type_arguments:
                self._visit_type(argument)
        elif isinstance(type_name, WildcardTypeName):
            if type_name.in_type is not None:
                self._visit_type(type_name.in_type)
            elif type_name.out_type is not None:
                self._visit_type(type_name.out_type)
        elif isinstance(type_name, LambdaTypeName):
            if type_name.receiver is not None:
                self._visit_type(type_name.receiver)
            for parameter in type_name.parameters:
                self._visit_type(parameter)
            self._visit_type(type_name.return_type)
        # Type variables print their name only; bounds belong to the declaration.

    def _visit_type_variables(self, type_variables: Sequence[TypeVariableName]) -> None:
        for type_variable in type_variables:
            if has_declared_bound(type_variable):
                self._visit_type(type_variable.bounds[0])

    def _visit_where_block(self, type_variables: Sequence[TypeVariableName]) -> None:
        for type_variable in type_variables:
            if len(type_variable.bounds) > 1:
                for bound in type_variable.bounds:
                    self._visit_type(bound)

    # ----------------------------------------------------------------- visitors

    def _visit_CodeBlock(self, code_block: CodeBlock) -> None:
        for instruction in code_block.instructions():
            if instruction.kind is InstructionKind.TYPE:
                self._visit_type(instruction.payload)
            elif instruction.kind is InstructionKind.MEMBER:
                self._record(instruction.payload)
            elif instruction.kind in (InstructionKind.LITERAL, InstructionKind.TEMPLATE):
                self._visit(instruction.payload)

    def _visit_FileSpec(self, file_spec: FileSpec) -> None:
        self._visit_CodeBlock(file_spec.comment)
        self._visit(file_spec.annotations)
        self._visit(file_spec.members)

    def _visit_AnnotationSpec(self, annotation: AnnotationSpec) -> None:
        self._visit_type(annotation.type_name)
        self._visit(annotation.members)

    def _visit_TypeSpec(self, type_spec: TypeSpec) -> None:
        class_name = declared_class_name(type_spec.name, self._scope, self._package_name)
        self._scope.append(ScopeFrame.for_type(type_spec, class_name))
        try:
            self._visit_kdoc(type_spec.kdoc_with_constructor())
            self._visit(type_spec.annotations)
            self._visit_type_variables(type_spec.type_variables)

            constructor = type_spec.primary_constructor
            if constructor is not None:
                self._visit(constructor.annotations)
                self._visit(constructor.parameters)

            if type_spec.superclass is not None:
                self._visit_type(type_spec.superclass)
                self._visit(type_spec.superclass_constructor_arguments)
            for superinterface in type_spec.superinterfaces:
                self._visit_type(superinterface)
            self._visit_where_block(type_spec.type_variables)

            self._visit(type_spec.enum_constants)
            self._visit(type_spec.body_properties())
            self._visit(type_spec.body_initializers())
            self._visit(type_spec.body_functions())
            self._visit(type_spec.types)
        finally:
            self._scope.pop()

    def _visit_EnumConstant(self, constant: EnumConstant) -> None:
        self._visit_kdoc(constant.kdoc)
        self._visit(constant.annotations)
        self._visit(constant.arguments)

    def _visit_PropertySpec(self, prop: PropertySpec) -> None:
        self._visit_kdoc(prop.kdoc)
        self._visit(prop.annotations)
        if prop.receiver_type is not None:
            self._visit_type(prop.receiver_type)
        self._visit_type(prop.type)
        self._visit(prop.initializer)
        self._visit(prop.getter)
        self._visit(prop.setter)

    def _visit_ParameterSpec(self, parameter: ParameterSpec, with_type: bool = True) -> None:
        self._visit(parameter.annotations)
        if with_type:
            self._visit_type(parameter.type)
        self._visit(parameter.default_value)

    def _visit_FunSpec(self, function: FunSpec) -> None:
        self._visit_kdoc(function.kdoc_with_parameters())
        self._visit(function.annotations)
        if not (function.is_constructor or function.is_accessor):
            self._visit_type_variables(function.type_variables)
            if function.receiver_type is not None:
                self._visit_type(function.receiver_type)
        if not (function.is_accessor and function.body.is_empty()):
            for parameter in function.parameters:
                self._visit_ParameterSpec(parameter, with_type=not function.is_accessor)
        if shows_return_type(function):
            self._visit_type(function.return_type)
        self._visit(function.delegate_constructor_arguments)
        self._visit_where_block(function.type_variables)
        self._visit_CodeBlock(function.body)

    def _visit_TypeAliasSpec(self, alias: TypeAliasSpec) -> None:
        self._visit_kdoc(alias.kdoc)
        self._visit(alias.annotations)
        self._visit_type_variables(alias.type_variables)
        self._visit_type(alias.type)


def shows_return_type(function: FunSpec) -> bool:
    """True when the function signature prints `: ReturnType`."""
    if function.return_type is None or function.is_constructor or function.is_accessor:
        return False
    return not (isinstance(function.return_type, ClassName) and function.return_type == UNIT)


def collect_references(file_spec: FileSpec) -> ReferenceSet:
    """Collect every type and member reference `file_spec` prints, in emission order."""
    return _ReferenceCollector(file_spec.package_name).collect(file_spec)


__all__ = [
    "Reference",
    "ReferenceSet",
    "collect_references",
    "has_declared_bound",
    "shows_return_type",
]
