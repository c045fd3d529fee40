"""Kotlin rendering of files, types, functions, properties and type aliases."""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, AbstractSet, Any, Mapping, Optional, Sequence

from resolver.collector import shows_return_type
from specs import (
    GETTER,
    EnumConstant,
    FileSpec,
    FunSpec,
    KModifier,
    ParameterSpec,
    PropertySpec,
    TypeAliasSpec,
    TypeKind,
    TypeSpec,
)
from template import CodeBlock, join_to_code

if TYPE_CHECKING:
    from .code_writer import CodeWriter

PUBLIC = frozenset({KModifier.PUBLIC})
INTERFACE_MEMBER = frozenset({KModifier.PUBLIC, KModifier.ABSTRACT})

_DECLARATION_KEYWORDS = {
    TypeKind.CLASS: "class",
    TypeKind.INTERFACE: "interface",
    TypeKind.OBJECT: "object",
    TypeKind.ENUM: "enum class",
    TypeKind.ANNOTATION: "annotation class",
}


def emit_file(writer: "CodeWriter", file_spec: FileSpec, import_lines: Sequence[str]) -> None:
    if not file_spec.comment.is_empty():
        writer.emit_comment(file_spec.comment)

    if file_spec.annotations:
        annotations = [
            dataclasses.replace(annotation, use_site_target="file")
            for annotation in file_spec.annotations
        ]
        writer.emit_annotations(annotations, inline=False)
        writer.emit("\n")

    package = writer.policy.escape_segments(file_spec.package_name)
    if package:
        writer.emit("package·")
        writer.emit(package, non_wrapping=True)
        writer.emit("\n\n")

    if import_lines:
        for line in import_lines:
            writer.emit("import·")
            writer.emit(line, non_wrapping=True)
            writer.emit("\n")
        writer.emit("\n")

    for index, member in enumerate(file_spec.members):
        if index > 0:
            writer.emit("\n")
        emit_declaration(writer, member)


def emit_type_spec(
    writer: "CodeWriter", type_spec: TypeSpec, implicit_modifiers: AbstractSet[KModifier] = PUBLIC
) -> None:
    # The type's own scope covers its header: nested names shadow imports in supertypes too.
    writer.push_type(type_spec)
    try:
        writer.emit_kdoc(type_spec.kdoc_with_constructor())
        writer.emit_annotations(type_spec.annotations, inline=False)
        writer.emit_modifiers(type_spec.modifiers, implicit_modifiers)
        writer.emit(_DECLARATION_KEYWORDS[type_spec.kind])
        if not (type_spec.is_companion and type_spec.name == "Companion"):
            writer.emit("·")
            writer.emit_identifier(type_spec.name)
        writer.emit_type_variables(type_spec.type_variables)

        constructor = type_spec.primary_constructor
        if constructor is not None:
            if constructor.annotations or constructor.modifiers:
                writer.emit(" ")
                writer.emit_annotations(constructor.annotations, inline=True)
                writer.emit_modifiers(constructor.modifiers, PUBLIC)
                writer.emit("constructor")
            if constructor.parameters or constructor.annotations or constructor.modifiers:
                emit_parameters(
                    writer, constructor.parameters, properties=type_spec.constructor_properties()
                )

        supertypes = _supertypes(type_spec)
        if supertypes:
            writer.emit(" : ")
            writer.emit_code(join_to_code(supertypes))
        writer.emit_where_block(type_spec.type_variables)

        if not type_spec.has_body():
            writer.emit("\n")
            return

        writer.emit(" {\n")
        writer.indent()
        member_modifiers = INTERFACE_MEMBER if type_spec.kind is TypeKind.INTERFACE else PUBLIC
        others = [
            *type_spec.body_properties(),
            *type_spec.body_initializers(),
            *type_spec.body_functions(),
            *type_spec.types,
        ]

        constants = type_spec.enum_constants
        for index, constant in enumerate(constants):
            emit_enum_constant(writer, constant)
            if index < len(constants) - 1:
                writer.emit(",\n")
            elif others:
                writer.emit(";\n")
            else:
                writer.emit("\n")

        first = not constants
        for member in others:
            if not first:
                writer.emit("\n")
            first = False
            if isinstance(member, CodeBlock):
                _emit_initializer_block(writer, member)
            elif isinstance(member, TypeSpec):
                emit_type_spec(writer, member)
            else:
                emit_declaration(writer, member, member_modifiers)

        writer.unindent()
        writer.emit("}\n")
    finally:
        writer.pop_type()


def _supertypes(type_spec: TypeSpec):
    supertypes = []
    if type_spec.superclass is not None:
        calls_constructor = type_spec.kind in (TypeKind.CLASS, TypeKind.OBJECT) and (
            type_spec.primary_constructor is not None
            or not any(function.is_constructor for function in type_spec.functions)
        )
        if calls_constructor:
            arguments = join_to_code(type_spec.superclass_constructor_arguments)
            supertypes.append(CodeBlock.of("%T(%L)", type_spec.superclass, arguments))
        else:
            supertypes.append(CodeBlock.of("%T", type_spec.superclass))
    for superinterface in type_spec.superinterfaces:
        supertypes.append(CodeBlock.of("%T", superinterface))
    return supertypes


def _emit_initializer_block(writer: "CodeWriter", code_block: CodeBlock) -> None:
    writer.emit("init {\n")
    writer.indent()
    writer.emit_code(code_block, ensure_trailing_newline=True)
    writer.unindent()
    writer.emit("}\n")


def emit_enum_constant(writer: "CodeWriter", constant: EnumConstant) -> None:
    writer.emit_kdoc(constant.kdoc)
    writer.emit_annotations(constant.annotations, inline=False)
    writer.emit_identifier(constant.name)
    if constant.arguments:
        writer.emit("(")
        writer.emit_code(join_to_code(constant.arguments))
        writer.emit(")")


def emit_function(
    writer: "CodeWriter", function: FunSpec, implicit_modifiers: AbstractSet[KModifier] = PUBLIC
) -> None:
    writer.emit_kdoc(function.kdoc_with_parameters())
    writer.emit_annotations(function.annotations, inline=False)
    writer.emit_modifiers(function.modifiers, implicit_modifiers)

    if function.is_constructor:
        writer.emit("constructor")
    elif function.is_accessor:
        writer.emit("get" if function.name == GETTER else "set")
        if function.body.is_empty():
            writer.emit("\n")
            return
    else:
        writer.emit("fun·")
        if function.type_variables:
            writer.emit_type_variables(function.type_variables)
            writer.emit(" ")
        if function.receiver_type is not None:
            writer.emit_receiver(function.receiver_type)
            writer.emit(".")
        writer.emit_identifier(function.name)

    emit_parameters(writer, function.parameters, with_type=not function.is_accessor)
    if shows_return_type(function):
        writer.emit(": ")
        writer.emit_type_name(function.return_type)
    if function.delegate_constructor is not None:
        writer.emit(f" : {function.delegate_constructor}(")
        writer.emit_code(join_to_code(function.delegate_constructor_arguments))
        writer.emit(")")
    writer.emit_where_block(function.type_variables)

    is_abstract = KModifier.ABSTRACT in function.modifiers or (
        KModifier.ABSTRACT in implicit_modifiers and function.body.is_empty()
    )
    external = KModifier.EXTERNAL in function.modifiers and function.body.is_empty()
    if is_abstract or external or (function.is_constructor and function.body.is_empty()):
        writer.emit("\n")
        return

    # Only the complete body tells whether it is a single return statement.
    expression = None if function.is_constructor else function.body.as_expression_body()
    if expression is not None:
        writer.emit_code(CodeBlock.of(" = %L", expression), ensure_trailing_newline=True)
        return

    writer.emit(" {\n")
    writer.indent()
    writer.emit_code(function.body.returns_without_linebreak(), ensure_trailing_newline=True)
    writer.unindent()
    writer.emit("}\n")


def emit_parameters(
    writer: "CodeWriter",
    parameters: Sequence[ParameterSpec],
    with_type: bool = True,
    properties: Optional[Mapping[str, PropertySpec]] = None,
) -> None:
    """Emit `(a, b)`; more than two parameters go one per line with a trailing comma."""
    properties = properties or {}
    writer.emit("(")
    if len(parameters) > 2:
        writer.emit("\n")
        writer.indent()
        for parameter in parameters:
            emit_parameter(writer, parameter, with_type, properties.get(parameter.name))
            writer.emit(",\n")
        writer.unindent()
    else:
        for index, parameter in enumerate(parameters):
            if index > 0:
                writer.emit(", ")
            emit_parameter(writer, parameter, with_type, properties.get(parameter.name))
    writer.emit(")")


def emit_parameter(
    writer: "CodeWriter",
    parameter: ParameterSpec,
    with_type: bool = True,
    prop: Optional[PropertySpec] = None,
) -> None:
    writer.emit_annotations(parameter.annotations, inline=True)
    writer.emit_modifiers(parameter.modifiers)
    if prop is not None:
        writer.emit_modifiers(prop.modifiers, PUBLIC)
        writer.emit("var·" if prop.mutable else "val·")
    writer.emit_identifier(parameter.name)
    if with_type:
        writer.emit(": ")
        writer.emit_type_name(parameter.type)
    if parameter.default_value is not None:
        writer.emit_code(CodeBlock.of(" = %L", parameter.default_value))


def emit_property(
    writer: "CodeWriter", prop: PropertySpec, implicit_modifiers: AbstractSet[KModifier] = PUBLIC
) -> None:
    writer.emit_kdoc(prop.kdoc)
    writer.emit_annotations(prop.annotations, inline=False)
    writer.emit_modifiers(prop.modifiers, implicit_modifiers)
    writer.emit("var·" if prop.mutable else "val·")
    if prop.receiver_type is not None:
        writer.emit_receiver(prop.receiver_type)
        writer.emit(".")
    writer.emit_identifier(prop.name)
    writer.emit(": ")
    writer.emit_type_name(prop.type)

    if prop.initializer is not None:
        initializer_format = "%L" if prop.initializer.has_statements() else "«%L»"
        keyword = " by " if prop.delegated else " = "
        writer.emit_code(
            CodeBlock.of(keyword + initializer_format, prop.initializer),
            is_constant_context=KModifier.CONST in prop.modifiers,
        )
    writer.emit("\n")

    for accessor in (prop.getter, prop.setter):
        if accessor is not None:
            writer.indent()
            emit_function(writer, accessor, PUBLIC)
            writer.unindent()


def emit_type_alias(
    writer: "CodeWriter", alias: TypeAliasSpec, implicit_modifiers: AbstractSet[KModifier] = PUBLIC
) -> None:
    writer.emit_kdoc(alias.kdoc)
    writer.emit_annotations(alias.annotations, inline=False)
    writer.emit_modifiers(alias.modifiers, implicit_modifiers)
    writer.emit("typealias·")
    writer.emit_identifier(alias.name)
    writer.emit_type_variables(alias.type_variables)
    writer.emit(" = ")
    writer.emit_type_name(alias.type)
    writer.emit("\n")


def _emit_parameter_declaration(
    writer: "CodeWriter", parameter: ParameterSpec, implicit_modifiers: AbstractSet[KModifier]
) -> None:
    emit_parameter(writer, parameter)


_EMITTERS = {
    TypeSpec: emit_type_spec,
    FunSpec: emit_function,
    PropertySpec: emit_property,
    TypeAliasSpec: emit_type_alias,
    ParameterSpec: _emit_parameter_declaration,
}


def is_declaration(value: Any) -> bool:
    return type(value) in _EMITTERS


def emit_declaration(
    writer: "CodeWriter", declaration: Any, implicit_modifiers: AbstractSet[KModifier] = PUBLIC
) -> None:
    emitter = _EMITTERS.get(type(declaration))
    if emitter is None:
        raise TypeError(f"cannot emit {declaration!r}")
    emitter(writer, declaration, implicit_modifiers)


__all__ = [
    "emit_declaration",
    "emit_enum_constant",
    "emit_file",
    "emit_function",
    "emit_parameter",
    "emit_parameters",
    "emit_property",
    "emit_type_alias",
    "emit_type_spec",
    "is_declaration",
]
