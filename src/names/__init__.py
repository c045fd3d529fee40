"""Symbolic references to types and members, and import directives."""

from .member_name import Import, MemberName, Reference
from .type_names import (
    ANY,
    ARRAY,
    BOOLEAN,
    BYTE,
    CHAR,
    CHAR_SEQUENCE,
    COLLECTION,
    COMPARABLE,
    DOUBLE,
    FLOAT,
    INT,
    ITERABLE,
    LIST,
    LONG,
    MAP,
    MUTABLE_LIST,
    MUTABLE_MAP,
    MUTABLE_SET,
    NOTHING,
    NULLABLE_ANY,
    SET,
    SHORT,
    STAR,
    STRING,
    THROWABLE,
    UNIT,
    ClassName,
    LambdaTypeName,
    ParameterizedTypeName,
    TypeName,
    TypeVariableName,
    WildcardTypeName,
)

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
    "Import",
    "LIST",
    "LONG",
    "LambdaTypeName",
    "MAP",
    "MUTABLE_LIST",
    "MUTABLE_MAP",
    "MUTABLE_SET",
    "MemberName",
    "NOTHING",
    "NULLABLE_ANY",
    "ParameterizedTypeName",
    "Reference",
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
