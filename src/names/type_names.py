"""
Immutable references to types.

A `ClassName` is identified by its canonical name: two class names refer to
the same declaration iff their canonical names match. Nullability is carried
on the reference but is irrelevant for identity when resolving imports.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Optional, Tuple


class TypeName:
    """Base class for every type reference."""

    nullable: bool

    def copy(self, nullable: Optional[bool] = None) -> "TypeName":
        if nullable is None or nullable == self.nullable:
            return self
        return dataclasses.replace(self, nullable=nullable)


@dataclass(frozen=True, init=False)
class ClassName(TypeName):
    """A fully-qualified class name, possibly nested inside enclosing classes."""

    package_name: str
    simple_names: Tuple[str, ...]
    nullable: bool = False

    def __init__(self, package_name: str, *simple_names: str, nullable: bool = False):
        if not simple_names:
            raise ValueError("simpleNames must not be empty")
        empty = [name for name in simple_names if not name]
        if empty:
            raise ValueError(f"simpleNames must not contain empty items: {list(simple_names)}")
        object.__setattr__(self, "package_name", package_name)
        object.__setattr__(self, "simple_names", tuple(simple_names))
        object.__setattr__(self, "nullable", nullable)

    def copy(self, nullable: Optional[bool] = None) -> "ClassName":
        if nullable is None or nullable == self.nullable:
            return self
        return ClassName(self.package_name, *self.simple_names, nullable=nullable)

    @classmethod
    def best_guess(cls, qualified_name: str) -> "ClassName":
        """
        Guess the package/class split of `qualified_name`.

        Segments are treated as package components until the first one that
        starts with an uppercase letter.
        """
        segments = qualified_name.split(".")
        for index, segment in enumerate(segments):
            if segment[:1].isupper():
                if any(not part for part in segments[index:]):
                    break
                return cls(".".join(segments[:index]), *segments[index:])
        raise ValueError(f"couldn't make a guess for {qualified_name}")

    @property
    def simple_name(self) -> str:
        return self.simple_names[-1]

    @property
    def canonical_name(self) -> str:
        if self.package_name:
            return self.package_name + "." + ".".join(self.simple_names)
        return ".".join(self.simple_names)

    @property
    def enclosing_class_name(self) -> Optional["ClassName"]:
        if len(self.simple_names) == 1:
            return None
        return ClassName(self.package_name, *self.simple_names[:-1])

    @property
    def top_level_class_name(self) -> "ClassName":
        return ClassName(self.package_name, self.simple_names[0])

    def nested_class(self, name: str) -> "ClassName":
        return ClassName(self.package_name, *self.simple_names, name)

    def peer_class(self, name: str) -> "ClassName":
        return ClassName(self.package_name, *self.simple_names[:-1], name)

    def parameterized_by(self, *type_arguments: TypeName) -> "ParameterizedTypeName":
        return ParameterizedTypeName(self, tuple(type_arguments))

    def same_declaration(self, other: Optional["ClassName"]) -> bool:
        return other is not None and other.canonical_name == self.canonical_name

    def __str__(self) -> str:
        return self.canonical_name + ("?" if self.nullable else "")


@dataclass(frozen=True)
class ParameterizedTypeName(TypeName):
    raw_type: ClassName
    type_arguments: Tuple[TypeName, ...]
    nullable: bool = False

    def __post_init__(self) -> None:
        if not self.type_arguments:
            raise ValueError(f"no type arguments: {self.raw_type}")

    def __str__(self) -> str:
        arguments = ", ".join(str(argument) for argument in self.type_arguments)
        return f"{self.raw_type.copy(nullable=False)}<{arguments}>" + ("?" if self.nullable else "")


@dataclass(frozen=True)
class TypeVariableName(TypeName):
    name: str
    bounds: Tuple[TypeName, ...] = ()
    variance: Optional[str] = None
    is_reified: bool = False
    nullable: bool = False

    def __post_init__(self) -> None:
        if self.variance not in (None, "in", "out"):
            raise ValueError(f"unexpected variance {self.variance!r}")

    def __str__(self) -> str:
        return self.name + ("?" if self.nullable else "")


@dataclass(frozen=True)
class WildcardTypeName(TypeName):
    """`*`, `out T` or `in T` in a type argument position."""

    out_type: Optional[TypeName] = None
    in_type: Optional[TypeName] = None
    nullable: bool = False

    @classmethod
    def producer_of(cls, type_name: TypeName) -> "WildcardTypeName":
        return cls(out_type=type_name)

    @classmethod
    def consumer_of(cls, type_name: TypeName) -> "WildcardTypeName":
        return cls(in_type=type_name)

    def __str__(self) -> str:
        if self.in_type is not None:
            return f"in {self.in_type}"
        if self.out_type is not None:
            return f"out {self.out_type}"
        return "*"


@dataclass(frozen=True)
class LambdaTypeName(TypeName):
    receiver: Optional[TypeName] = None
    parameters: Tuple[TypeName, ...] = ()
    return_type: TypeName = None  # type: ignore[assignment]
    is_suspending: bool = False
    nullable: bool = False

    def __post_init__(self) -> None:
        if self.return_type is None:
            object.__setattr__(self, "return_type", UNIT)

    def __str__(self) -> str:
        receiver = f"{self.receiver}." if self.receiver is not None else ""
        parameters = ", ".join(str(parameter) for parameter in self.parameters)
        text = f"{receiver}({parameters}) -> {self.return_type}"
        if self.is_suspending:
            text = "suspend " + text
        return f"({text})?" if self.nullable else text


def _kotlin(name: str) -> ClassName:
    return ClassName("kotlin", name)


def _collections(name: str) -> ClassName:
    return ClassName("kotlin.collections", name)


ANY = _kotlin("Any")
ARRAY = _kotlin("Array")
UNIT = _kotlin("Unit")
NOTHING = _kotlin("Nothing")
BOOLEAN = _kotlin("Boolean")
BYTE = _kotlin("Byte")
SHORT = _kotlin("Short")
INT = _kotlin("Int")
LONG = _kotlin("Long")
CHAR = _kotlin("Char")
FLOAT = _kotlin("Float")
DOUBLE = _kotlin("Double")
STRING = _kotlin("String")
CHAR_SEQUENCE = _kotlin("CharSequence")
COMPARABLE = _kotlin("Comparable")
THROWABLE = _kotlin("Throwable")
ITERABLE = _collections("Iterable")
COLLECTION = _collections("Collection")
LIST = _collections("List")
SET = _collections("Set")
MAP = _collections("Map")
MUTABLE_LIST = _collections("MutableList")
MUTABLE_SET = _collections("MutableSet")
MUTABLE_MAP = _collections("MutableMap")

NULLABLE_ANY = ANY.copy(nullable=True)
STAR = WildcardTypeName()


__all__ = [
    "ANY",
    "ARRAY",
    "BOOLEAN",
    "BYTE",
    "CHAR",
    "CHAR_SEQUENCE",
    "COLLECTION",
    "COMPARABLE",
    "ClassName",
    "DOUBLE",
    "FLOAT",
    "INT",
    "ITERABLE",
    "LIST",
    "LONG",
    "LambdaTypeName",
    "MAP",
    "MUTABLE_LIST",
    "MUTABLE_MAP",
    "MUTABLE_SET",
    "NOTHING",
    "NULLABLE_ANY",
    "ParameterizedTypeName",
    "SET",
    "SHORT",
    "STAR",
    "STRING",
    "THROWABLE",
    "TypeName",
    "TypeVariableName",
    "UNIT",
    "WildcardTypeName",
]
