"""Declaration scopes visible while a reference is printed."""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Mapping, Optional, Sequence

from names import ClassName
from specs import KModifier, TypeKind, TypeSpec


@dataclass(frozen=True)
class ScopeFrame:
    """
    One enclosing type declaration.

    Nested type names shadow imports for every reference printed inside the
    declaration; enum constants are only consulted for the outermost frame.
    """

    class_name: ClassName
    nested_type_names: FrozenSet[str] = frozenset()
    function_names: FrozenSet[str] = frozenset()
    enum_constants: FrozenSet[str] = frozenset()
    is_inner: bool = False

    @classmethod
    def for_type(cls, type_spec: TypeSpec, class_name: ClassName) -> "ScopeFrame":
        enum_constants = frozenset()
        if type_spec.kind is TypeKind.ENUM:
            enum_constants = frozenset(constant.name for constant in type_spec.enum_constants)
        return cls(
            class_name=class_name,
            nested_type_names=frozenset(type_spec.nested_type_names),
            function_names=frozenset(function.name for function in type_spec.functions),
            enum_constants=enum_constants,
            is_inner=KModifier.INNER in type_spec.modifiers,
        )


def resolve_in_scope(
    simple_name: str,
    scope: Sequence[ScopeFrame],
    imported_types: Mapping[str, ClassName],
) -> Optional[ClassName]:
    """Return the declaration `simple_name` denotes at `scope`, or None."""
    for frame in reversed(scope):
        if simple_name in frame.nested_type_names:
            return frame.class_name.nested_class(simple_name)

    if scope:
        top = scope[0]
        if top.class_name.simple_name == simple_name:
            return top.class_name
        if simple_name in top.enum_constants:
            return top.class_name.nested_class(simple_name)

    return imported_types.get(simple_name)


def declared_class_name(
    simple_name: str, scope: Sequence[ScopeFrame], package_name: str
) -> ClassName:
    """Return the class name of a type declared as `simple_name` inside `scope`."""
    if scope:
        return scope[-1].class_name.nested_class(simple_name)
    return ClassName(package_name, simple_name)


def is_function_name_in_scope(simple_name: str, scope: Sequence[ScopeFrame]) -> bool:
    """True when a function of the current type, or of an inner type's outer class, is named `simple_name`."""
    for frame in reversed(scope):
        if simple_name in frame.function_names:
            return True
        if not frame.is_inner:
            break
    return False


__all__ = ["ScopeFrame", "declared_class_name", "is_function_name_in_scope", "resolve_in_scope"]
