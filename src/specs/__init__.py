"""Immutable declaration tree: files, types, functions, properties."""

from .declarations import (
    CONSTRUCTOR,
    GETTER,
    SETTER,
    AnnotationSpec,
    EnumConstant,
    FileSpec,
    FunSpec,
    KModifier,
    Member,
    ParameterSpec,
    PropertySpec,
    TypeAliasSpec,
    TypeKind,
    TypeSpec,
)

__all__ = [
    "AnnotationSpec",
    "CONSTRUCTOR",
    "EnumConstant",
    "FileSpec",
    "FunSpec",
    "GETTER",
    "KModifier",
    "Member",
    "ParameterSpec",
    "PropertySpec",
    "SETTER",
    "TypeAliasSpec",
    "TypeKind",
    "TypeSpec",
]
