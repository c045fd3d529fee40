"""
Converts code blocks and declarations into text.

The writer interprets the instruction stream of each code block. Indentation
is lazy: it is written only when the first text of a line arrives, so blank
lines never carry trailing whitespace. Inside a statement (`«` ... `»`) every
explicit line break after the first one continues at a double indent.
"""

from __future__ import annotations

import io
import sys
from typing import AbstractSet, Any, List, Sequence, TextIO, Union

from lexical import KOTLIN, LexicalPolicy
from names import (
    ClassName,
    LambdaTypeName,
    MemberName,
    ParameterizedTypeName,
    TypeName,
    TypeVariableName,
    WildcardTypeName,
)
from resolver import (
    EMPTY_TABLE,
    ImportTable,
    ScopeFrame,
    declared_class_name,
    lookup_member_name,
    lookup_type_name,
)
from resolver.collector import has_declared_bound
from specs import AnnotationSpec, KModifier, TypeSpec
from template import CodeBlock, InstructionKind

from . import declarations
from .line_wrapper import LineWrapper


class StatementBalanceError(ValueError):
    """Raised for a nested statement open or a statement close without an open."""


class UnbalancedIndentError(ValueError):
    """Raised when more levels are unindented than were indented."""


class CodeWriter:
    """Writes code to `out`, resolving references against an import table."""

    def __init__(
        self,
        out: TextIO,
        indent: str = "  ",
        column_limit: int = 100,
        policy: LexicalPolicy = KOTLIN,
        import_table: ImportTable = EMPTY_TABLE,
        package_name: str = "",
    ):
        self._out = LineWrapper(out, indent, column_limit)
        self._indent = indent
        self.policy = policy
        self.import_table = import_table
        self.package_name = package_name
        self.scope: List[ScopeFrame] = []
        self.indent_level = 0
        self.kdoc = False
        self.comment = False
        self.trailing_newline = False

        # -1 outside a statement; otherwise the number of line breaks emitted in it.
        self.statement_line = -1

    # --------------------------------------------------------------- structure

    def indent(self, levels: int = 1) -> "CodeWriter":
        self.indent_level += levels
        return self

    def unindent(self, levels: int = 1) -> "CodeWriter":
        if self.indent_level - levels < 0:
            raise UnbalancedIndentError(
                f"cannot unindent {levels} from {self.indent_level}"
            )
        self.indent_level -= levels
        return self

    def push_type(self, type_spec: TypeSpec) -> ClassName:
        class_name = declared_class_name(type_spec.name, self.scope, self.package_name)
        self.scope.append(ScopeFrame.for_type(type_spec, class_name))
        return class_name

    def pop_type(self) -> None:
        self.scope.pop()

    def close(self) -> None:
        if self.statement_line != -1:
            raise StatementBalanceError("statement enter « has no matching statement exit »")
        self._out.close()

    # ------------------------------------------------------------------- text

    def _emit_indentation(self) -> None:
        for _ in range(self.indent_level):
            self._out.append_non_wrapping(self._indent)

    def emit(self, s: str, non_wrapping: bool = False) -> "CodeWriter":
        """Emit `s`, indenting every line that starts after a line break."""
        first = True
        for line in s.split("\n"):
            # Line breaks only happen between lines.
            if not first:
                if (self.kdoc or self.comment) and self.trailing_newline:
                    self._emit_indentation()
                    self._out.append_non_wrapping(" *" if self.kdoc else "//")
                self._out.newline()
                self.trailing_newline = True
                if self.statement_line != -1:
                    if self.statement_line == 0:
                        self.indent(2)  # Begin multiple-line statement. Increase the indentation level.
                    self.statement_line += 1
            first = False

            if not line:
                continue

            if self.trailing_newline:
                self._emit_indentation()
                if self.kdoc:
                    self._out.append_non_wrapping(" * ")
                elif self.comment:
                    self._out.append_non_wrapping("// ")

            if non_wrapping:
                self._out.append_non_wrapping(line)
            else:
                self._out.append(
                    line,
                    indent_level=self.indent_level if self.kdoc else self.indent_level + 2,
                    line_prefix=" * " if self.kdoc else ("// " if self.comment else ""),
                )
            self.trailing_newline = False
        return self

    def emit_identifier(self, name: str) -> "CodeWriter":
        """Emit `name` escaped; a back-ticked name is never broken at its spaces."""
        return self.emit(self.policy.escape_identifier(name), non_wrapping=True)

    def emit_code(
        self,
        code: Union[CodeBlock, str],
        *args: Any,
        is_constant_context: bool = False,
        ensure_trailing_newline: bool = False,
    ) -> "CodeWriter":
        if isinstance(code, str):
            code = CodeBlock.of(code, *args)

        for instruction in code.instructions():
            kind = instruction.kind
            payload = instruction.payload
            if kind is InstructionKind.TEXT:
                self.emit(payload)
            elif kind is InstructionKind.LITERAL:
                self.emit_literal(payload, is_constant_context)
            elif kind is InstructionKind.NAME:
                self.emit_identifier(payload)
            elif kind is InstructionKind.STRING:
                self._emit_string(payload, False, is_constant_context)
            elif kind is InstructionKind.TEMPLATE:
                if isinstance(payload, CodeBlock):
                    payload = self._render_fragment(payload)
                self._emit_string(payload, True, is_constant_context)
            elif kind is InstructionKind.TYPE:
                self.emit_type_name(payload)
            elif kind is InstructionKind.MEMBER:
                self.emit(self.lookup_member(payload), non_wrapping=True)
            elif kind is InstructionKind.INDENT:
                self.indent()
            elif kind is InstructionKind.UNINDENT:
                self.unindent()
            elif kind is InstructionKind.OPEN_STATEMENT:
                if self.statement_line != -1:
                    raise StatementBalanceError(
                        "statement enter « followed by statement enter «: "
                        f"{list(code.format_parts)}"
                    )
                self.statement_line = 0
            elif kind is InstructionKind.CLOSE_STATEMENT:
                if self.statement_line == -1:
                    raise StatementBalanceError(
                        "statement exit » has no matching statement enter «: "
                        f"{list(code.format_parts)}"
                    )
                if self.statement_line > 0:
                    self.unindent(2)  # End a multi-line statement. Decrease the indentation level.
                self.statement_line = -1

        if ensure_trailing_newline and self._out.has_pending_segments:
            self.emit("\n")
        return self

    def _emit_string(self, value, is_template: bool, is_constant_context: bool) -> None:
        if value is None:
            self.emit(self.policy.null_literal)
            return
        self.emit(
            self.policy.quote_string_literal(value, is_template, is_constant_context),
            non_wrapping=True,
        )

    def _render_fragment(self, code_block: CodeBlock) -> str:
        """Render a nested block on one logical line, sharing this writer's imports and scope."""
        buffer = io.StringIO()
        writer = CodeWriter(
            buffer,
            self._indent,
            sys.maxsize,
            self.policy,
            self.import_table,
            self.package_name,
        )
        writer.scope = list(self.scope)
        writer.emit_code(code_block)
        writer.close()
        return buffer.getvalue()

    def emit_literal(self, value: Any, is_constant_context: bool = False) -> None:
        if isinstance(value, CodeBlock):
            self.emit_code(value, is_constant_context=is_constant_context)
        elif isinstance(value, AnnotationSpec):
            self.emit_annotation(value, inline=True)
        elif declarations.is_declaration(value):
            declarations.emit_declaration(self, value)
        elif value is None:
            self.emit(self.policy.null_literal)
        elif isinstance(value, bool):
            self.emit(self.policy.format_boolean(value))
        else:
            self.emit(str(value))

    def emit_comment(self, code_block: CodeBlock) -> None:
        self.trailing_newline = True  # Force the '//' prefix for the comment.
        self.comment = True
        try:
            self.emit_code(code_block)
            self.emit("\n")
        finally:
            self.comment = False

    def emit_kdoc(self, kdoc: CodeBlock) -> None:
        if kdoc.is_empty():
            return
        self.emit("/**\n")
        previous, self.kdoc = self.kdoc, True
        try:
            self.emit_code(kdoc, ensure_trailing_newline=True)
        finally:
            self.kdoc = previous
        self.emit(" */\n")

    # ------------------------------------------------------------- references

    def lookup_type(self, class_name: ClassName) -> str:
        return lookup_type_name(
            class_name.copy(nullable=False),
            self.scope,
            self.import_table,
            self.package_name,
            self.policy,
            in_kdoc=self.kdoc,
        )

    def lookup_member(self, member: MemberName) -> str:
        return lookup_member_name(
            member,
            self.scope,
            self.import_table,
            self.package_name,
            self.policy,
            in_kdoc=self.kdoc,
        )

    def emit_type_name(self, type_name: TypeName) -> None:
        nullable = "?" if type_name.nullable else ""
        if isinstance(type_name, ClassName):
            self.emit(self.lookup_type(type_name) + nullable, non_wrapping=True)
        elif isinstance(type_name, ParameterizedTypeName):
            self.emit(self.lookup_type(type_name.raw_type) + "<", non_wrapping=True)
            for index, argument in enumerate(type_name.type_arguments):
                if index > 0:
                    self.emit(", ")
                self.emit_type_name(argument)
            self.emit(">" + nullable)
        elif isinstance(type_name, TypeVariableName):
            self.emit_identifier(type_name.name)
            self.emit(nullable)
        elif isinstance(type_name, WildcardTypeName):
            if type_name.in_type is not None:
                self.emit("in ")
                self.emit_type_name(type_name.in_type)
            elif type_name.out_type is not None:
                self.emit("out ")
                self.emit_type_name(type_name.out_type)
            else:
                self.emit("*")
        elif isinstance(type_name, LambdaTypeName):
            self._emit_lambda_type(type_name)
        else:
            raise TypeError(f"unexpected type name {type_name!r}")

    def _emit_lambda_type(self, type_name: LambdaTypeName) -> None:
        if type_name.nullable:
            self.emit("(")
        if type_name.is_suspending:
            self.emit("suspend ")
        if type_name.receiver is not None:
            self.emit_receiver(type_name.receiver)
            self.emit(".")
        self.emit("(")
        for index, parameter in enumerate(type_name.parameters):
            if index > 0:
                self.emit(", ")
            self.emit_type_name(parameter)
        self.emit(") -> ")
        self.emit_type_name(type_name.return_type)
        if type_name.nullable:
            self.emit(")?")

    def emit_receiver(self, receiver: TypeName) -> None:
        if isinstance(receiver, LambdaTypeName):
            self.emit("(")
            self.emit_type_name(receiver)
            self.emit(")")
        else:
            self.emit_type_name(receiver)

    # ----------------------------------------------------------- declarations

    def emit_annotation(self, annotation: AnnotationSpec, inline: bool) -> None:
        site = f"{annotation.use_site_target}:" if annotation.use_site_target else ""
        self.emit("@" + site)
        self.emit_type_name(annotation.type_name)
        if not annotation.members:
            return

        multiline = len(annotation.members) > 1 and not inline
        self.emit("(")
        if multiline:
            self.emit("\n").indent()
        separator = ", " if inline else ",\n"
        for index, member in enumerate(annotation.members):
            if index > 0:
                self.emit(separator)
            self.emit_code(member)
        if multiline:
            self.unindent().emit("\n")
        self.emit(")")

    def emit_annotations(self, annotations: Sequence[AnnotationSpec], inline: bool) -> None:
        for annotation in annotations:
            self.emit_annotation(annotation, inline)
            self.emit(" " if inline else "\n")

    def emit_modifiers(
        self, modifiers: Sequence[KModifier], implicit_modifiers: AbstractSet[KModifier] = frozenset()
    ) -> None:
        """Emit `modifiers` in canonical order, skipping those implied by the context."""
        for modifier in modifiers:
            if modifier in implicit_modifiers:
                continue
            self.emit(modifier.keyword)
            self.emit(" ")

    def emit_type_variables(self, type_variables: Sequence[TypeVariableName]) -> None:
        if not type_variables:
            return
        self.emit("<")
        for index, type_variable in enumerate(type_variables):
            if index > 0:
                self.emit(", ")
            if type_variable.variance is not None:
                self.emit(type_variable.variance + " ")
            if type_variable.is_reified:
                self.emit("reified ")
            self.emit_identifier(type_variable.name)
            if has_declared_bound(type_variable):
                self.emit(" : ")
                self.emit_type_name(type_variable.bounds[0])
        self.emit(">")

    def emit_where_block(self, type_variables: Sequence[TypeVariableName]) -> None:
        first = True
        for type_variable in type_variables:
            if len(type_variable.bounds) < 2:
                continue
            for bound in type_variable.bounds:
                self.emit(" where " if first else ", ")
                self.emit_identifier(type_variable.name)
                self.emit(" : ")
                self.emit_type_name(bound)
                first = False


__all__ = ["CodeWriter", "StatementBalanceError", "UnbalancedIndentError"]
