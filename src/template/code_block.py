"""
Code fragments: literal text interleaved with typed placeholders.

A `CodeBlock` is bound once, when it is built, and never re-parsed. Binding
validates the template against its arguments and stores the template as a
list of format parts: plain text, one part per placeholder (`%L`, `%S`,
`%P`, `%N`, `%T`, `%M`, `%%`) and one part per structural marker. Code blocks
are not validated as target-language code.

Placeholders:
* `%L` emits a *literal* with no escaping. Arguments may be strings, numbers,
  nested code blocks or declarations.
* `%N` emits a *name*. Arguments may be strings, member names or any
  declaration carrying a `name`.
* `%S` emits a quoted *string* literal, `null` for `None`.
* `%P` emits a string *template*: like `%S` but dollar signs are not escaped,
  and a nested code block is rendered into the string.
* `%T` emits a *type* reference, imported where possible.
* `%M` emits a *member* reference, imported where possible.
* `%%` emits a percent sign.
* `·` emits a space that never wraps. A plain space may become a line break.
* `⇥` increases and `⇤` decreases the indentation level.
* `«` begins a statement and `»` ends it. Wrapped lines of a statement are
  double-indented.

Placeholders are consumed left to right ("relative"), or addressed by a
1-based index (`%2L`). A template uses one mode or the other, never both.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

from names import MemberName, TypeName

INDENT = "⇥"
UNINDENT = "⇤"
STATEMENT_OPEN = "«"
STATEMENT_CLOSE = "»"
NON_BREAKING_SPACE = "·"

NO_ARG_PLACEHOLDERS = frozenset({INDENT, UNINDENT, STATEMENT_OPEN, STATEMENT_CLOSE})

_NAMED_ARGUMENT = re.compile(r"%([\w_]+):([\w]).*")
_LOWERCASE = re.compile(r"[a-z]+[\w_]*")
_PLACEHOLDER_CHARACTERS = re.compile("[%«»⇥⇤]")


class FormatError(ValueError):
    """Raised when a template cannot be bound to its arguments."""


class InstructionKind(str, Enum):
    TEXT = "text"
    LITERAL = "L"
    NAME = "N"
    STRING = "S"
    TEMPLATE = "P"
    TYPE = "T"
    MEMBER = "M"
    INDENT = "indent"
    UNINDENT = "unindent"
    OPEN_STATEMENT = "open_statement"
    CLOSE_STATEMENT = "close_statement"


_MARKER_KINDS = {
    INDENT: InstructionKind.INDENT,
    UNINDENT: InstructionKind.UNINDENT,
    STATEMENT_OPEN: InstructionKind.OPEN_STATEMENT,
    STATEMENT_CLOSE: InstructionKind.CLOSE_STATEMENT,
}


@dataclass(frozen=True)
class Instruction:
    """One step of the emission stream produced by interpreting a code block."""

    kind: InstructionKind
    payload: Any = None


def _next_placeholder(format: str, start: int) -> int:
    match = _PLACEHOLDER_CHARACTERS.search(format, start)
    return match.start() if match else -1


def _takes_argument(part: str) -> bool:
    return len(part) == 2 and part[0] == "%" and part[1] != "%"


def _format_numeric(value: Any) -> Any:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return value
    if isinstance(value, int):
        return f"{value:_}"
    if not math.isfinite(value):
        return repr(value)
    text = format(Decimal(repr(value)), "f")
    sign = ""
    if text.startswith("-"):
        sign, text = "-", text[1:]
    whole, _, fraction = text.partition(".")
    return f"{sign}{int(whole):_}.{fraction or '0'}"


def _arg_to_name(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, MemberName):
        return value.simple_name
    name = getattr(value, "name", None)
    if isinstance(name, str):
        return name
    raise FormatError(f"expected name but was {value!r}")


def _arg_to_type(value: Any) -> TypeName:
    if isinstance(value, TypeName):
        return value
    raise FormatError(f"expected type but was {value!r}")


def _bind_argument(format: str, kind: str, value: Any) -> Any:
    if kind == "N":
        return _arg_to_name(value)
    if kind == "L":
        return _format_numeric(value)
    if kind == "S":
        return None if value is None else str(value)
    if kind == "P":
        if value is None or isinstance(value, CodeBlock):
            return value
        return str(value)
    if kind == "T":
        return _arg_to_type(value)
    if kind == "M":
        if not isinstance(value, MemberName):
            raise FormatError(f"expected member but was {value!r}")
        return value
    raise FormatError(f"invalid format string: '{format}'")


@dataclass(frozen=True, eq=False)
class CodeBlock:
    """An immutable, bound code fragment."""

    format_parts: Tuple[str, ...] = ()
    args: Tuple[Any, ...] = ()

    @classmethod
    def of(cls, format: str, *args: Any) -> "CodeBlock":
        return CodeBlockBuilder().add(format, *args).build()

    @classmethod
    def builder(cls) -> "CodeBlockBuilder":
        return CodeBlockBuilder()

    def is_empty(self) -> bool:
        return not self.format_parts

    def instructions(self) -> Iterator[Instruction]:
        """Yield the emission instructions for this block, pairing placeholders with arguments."""
        index = 0
        for part in self.format_parts:
            if part in _MARKER_KINDS:
                yield Instruction(_MARKER_KINDS[part])
            elif part == "%%":
                yield Instruction(InstructionKind.TEXT, "%")
            elif _takes_argument(part):
                yield Instruction(InstructionKind(part[1]), self.args[index])
                index += 1
            else:
                yield Instruction(InstructionKind.TEXT, part)

    def has_statements(self) -> bool:
        return any(STATEMENT_OPEN in part for part in self.format_parts)

    def has_unmatched_closing_statement(self) -> bool:
        open_count = 0
        for part in self.format_parts:
            if part == STATEMENT_OPEN:
                open_count += 1
            elif part == STATEMENT_CLOSE:
                if open_count == 0:
                    return True
                open_count -= 1
        return False

    def trim(self) -> "CodeBlock":
        """Return a copy without leading and trailing structural markers."""
        start, end = 0, len(self.format_parts)
        while start < end and self.format_parts[start] in NO_ARG_PLACEHOLDERS:
            start += 1
        while start < end and self.format_parts[end - 1] in NO_ARG_PLACEHOLDERS:
            end -= 1
        if start == 0 and end == len(self.format_parts):
            return self
        return CodeBlock(self.format_parts[start:end], self.args)

    def without_prefix(self, prefix: "CodeBlock") -> Optional["CodeBlock"]:
        """
        Return this block with `prefix` stripped off, or None if it doesn't start with `prefix`.

        The last format part of `prefix` may match the start of a longer text part.
        """
        if len(self.format_parts) < len(prefix.format_parts):
            return None
        if len(self.args) < len(prefix.args):
            return None

        prefix_arg_count = 0
        first_part: Optional[str] = None
        last_index = len(prefix.format_parts) - 1
        for index, part in enumerate(prefix.format_parts):
            own = self.format_parts[index]
            if own != part:
                if index == last_index and own.startswith(part):
                    first_part = own[len(part):]
                else:
                    return None
            if _takes_argument(part):
                if self.args[prefix_arg_count] != prefix.args[prefix_arg_count]:
                    return None
                prefix_arg_count += 1

        parts: List[str] = [first_part] if first_part is not None else []
        parts.extend(self.format_parts[len(prefix.format_parts):])
        return CodeBlock(tuple(parts), self.args[len(prefix.args):])

    def as_expression_body(self) -> Optional["CodeBlock"]:
        """
        Return the expression form of a function body, or None if it must stay a block.

        Only a body made of a single `return`/`throw` statement collapses. The
        decision needs the complete body: a later statement opening, or an
        unmatched statement close, keeps the block form.
        """
        body = self.trim()
        if body.has_unmatched_closing_statement():
            return None
        for prefix in (_RETURN_SPACE, _RETURN_NBSP):
            expression = body.without_prefix(prefix)
            if expression is not None:
                return None if STATEMENT_OPEN in expression.format_parts else expression
        for prefix in (_THROW_SPACE, _THROW_NBSP):
            if body.without_prefix(prefix) is not None:
                return None if STATEMENT_OPEN in body.format_parts else body
        return None

    def returns_without_linebreak(self) -> "CodeBlock":
        """Glue `return` to its expression so the wrapper never breaks right after it."""
        plain = _RETURN_SPACE.format_parts[0]
        glued = _RETURN_NBSP.format_parts[0]
        parts = tuple(
            part.replace(plain, glued, 1) if part.startswith(plain) else part
            for part in self.format_parts
        )
        if parts == self.format_parts:
            return self
        return CodeBlock(parts, self.args)

    def to_builder(self) -> "CodeBlockBuilder":
        builder = CodeBlockBuilder()
        builder.format_parts.extend(self.format_parts)
        builder.args.extend(self.args)
        return builder

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, CodeBlock):
            return NotImplemented
        return str(self) == str(other)

    def __hash__(self) -> int:
        return hash(str(self))

    def __str__(self) -> str:
        from emitter.writer import render_code_block

        return render_code_block(self)


@dataclass
class CodeBlockBuilder:
    """Accumulates format parts and bound arguments for a `CodeBlock`."""

    format_parts: List[str] = field(default_factory=list)
    args: List[Any] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.format_parts

    def add(self, format: str, *args: Any) -> "CodeBlockBuilder":
        """
        Add code with relative (`%L`) or indexed (`%1L`) arguments.

        Every argument must be consumed by at least one placeholder.
        """
        parts: List[str] = []
        bound: List[Any] = []
        has_relative = False
        has_indexed = False
        relative_count = 0
        indexed_count = [0] * len(args)

        p = 0
        length = len(format)
        while p < length:
            if format[p] in NO_ARG_PLACEHOLDERS:
                parts.append(format[p])
                p += 1
                continue

            if format[p] != "%":
                next_p = _next_placeholder(format, p + 1)
                if next_p == -1:
                    next_p = length
                parts.append(format[p:next_p])
                p = next_p
                continue

            p += 1  # '%'

            # Consume zero or more digits, leaving `kind` as the first non-digit after '%'.
            index_start = p
            while True:
                if p >= length:
                    raise FormatError(f"dangling format characters in '{format}'")
                kind = format[p]
                p += 1
                if kind not in "0123456789":
                    break
            index_end = p - 1

            if kind == "%":
                if index_start != index_end:
                    raise FormatError("%% may not have an index")
                parts.append("%%")
                continue

            if index_start < index_end:
                index = int(format[index_start:index_end]) - 1
                has_indexed = True
                if args:
                    indexed_count[index % len(args)] += 1
            else:
                index = relative_count
                has_relative = True
                relative_count += 1

            if not 0 <= index < len(args):
                raise FormatError(
                    f"index {index + 1} for '{format[index_start - 1:index_end + 1]}' "
                    f"not in range (received {len(args)} arguments)"
                )
            if has_indexed and has_relative:
                raise FormatError("cannot mix indexed and positional parameters")

            bound.append(_bind_argument(format, kind, args[index]))
            parts.append("%" + kind)

        if not has_indexed and relative_count < len(args):
            raise FormatError(
                f"unused arguments: expected {relative_count}, received {len(args)}"
            )
        if has_indexed:
            unused = [f"%{i + 1}" for i, count in enumerate(indexed_count) if count == 0]
            if unused:
                plural = "" if len(unused) == 1 else "s"
                raise FormatError(f"unused argument{plural}: {', '.join(unused)}")

        self.format_parts.extend(parts)
        self.args.extend(bound)
        return self

    def add_named(self, format: str, arguments: Mapping[str, Any]) -> "CodeBlockBuilder":
        """
        Add code using named arguments, written `%name:K`.

        Names consist of `a-z`, `A-Z`, `0-9` and `_` and must start with a
        lowercase letter. A name may be referenced any number of times;
        arguments that are never referenced are allowed.
        """
        for name in arguments:
            if not _LOWERCASE.fullmatch(name):
                raise FormatError(f"argument '{name}' must start with a lowercase character")

        parts: List[str] = []
        bound: List[Any] = []
        p = 0
        length = len(format)
        while p < length:
            next_p = _next_placeholder(format, p)
            if next_p == -1:
                parts.append(format[p:])
                break

            if p != next_p:
                parts.append(format[p:next_p])
                p = next_p

            match = None
            colon = format.find(":", p)
            if colon != -1:
                end = min(colon + 2, length)
                match = _NAMED_ARGUMENT.fullmatch(format, p, end)
            if match is not None:
                name = match.group(1)
                if name not in arguments:
                    raise FormatError(f"Missing named argument for %{name}")
                kind = match.group(2)
                bound.append(_bind_argument(format, kind, arguments[name]))
                parts.append("%" + kind)
                p = match.end()
            elif format[p] in NO_ARG_PLACEHOLDERS:
                parts.append(format[p])
                p += 1
            else:
                if p >= length - 1:
                    raise FormatError("dangling % at end")
                if format[p + 1] != "%":
                    raise FormatError(f"unknown format %{format[p + 1]} at {p + 1} in '{format}'")
                parts.append("%%")
                p += 2

        self.format_parts.extend(parts)
        self.args.extend(bound)
        return self

    def add_code(self, code_block: CodeBlock) -> "CodeBlockBuilder":
        self.format_parts.extend(code_block.format_parts)
        self.args.extend(code_block.args)
        return self

    def add_statement(self, format: str, *args: Any) -> "CodeBlockBuilder":
        self.add(STATEMENT_OPEN)
        self.add(format, *args)
        self.add("\n" + STATEMENT_CLOSE)
        return self

    def begin_control_flow(self, control_flow: str, *args: Any) -> "CodeBlockBuilder":
        """
        Open a braced block such as `if (foo == 5)`.

        An opening brace is added unless `control_flow` already ends with one,
        e.g. `list.forEach { element ->`.
        """
        self.add(_with_opening_brace(control_flow), *args)
        return self.indent()

    def next_control_flow(self, control_flow: str, *args: Any) -> "CodeBlockBuilder":
        self.unindent()
        self.add("} " + control_flow + " {\n", *args)
        return self.indent()

    def end_control_flow(self) -> "CodeBlockBuilder":
        self.unindent()
        return self.add("}\n")

    def indent(self) -> "CodeBlockBuilder":
        self.format_parts.append(INDENT)
        return self

    def unindent(self) -> "CodeBlockBuilder":
        self.format_parts.append(UNINDENT)
        return self

    def clear(self) -> "CodeBlockBuilder":
        self.format_parts.clear()
        self.args.clear()
        return self

    def build(self) -> CodeBlock:
        return CodeBlock(tuple(self.format_parts), tuple(self.args))


def _with_opening_brace(control_flow: str) -> str:
    for ch in reversed(control_flow):
        if ch == "{":
            return control_flow + "\n"
        if ch == "}":
            break
    return control_flow + " {\n"


def join_to_code(
    code_blocks: Iterable[CodeBlock],
    separator: str = ", ",
    prefix: str = "",
    suffix: str = "",
) -> CodeBlock:
    """Join code blocks into one, separated by `separator`."""
    blocks: Sequence[CodeBlock] = list(code_blocks)
    placeholders = separator.join("%L" for _ in blocks)
    return CodeBlock.of(prefix + placeholders + suffix, *blocks)


EMPTY = CodeBlock()

_RETURN_SPACE = CodeBlock.of("return ")
_RETURN_NBSP = CodeBlock.of("return" + NON_BREAKING_SPACE)
_THROW_SPACE = CodeBlock.of("throw ")
_THROW_NBSP = CodeBlock.of("throw" + NON_BREAKING_SPACE)


__all__ = [
    "CodeBlock",
    "CodeBlockBuilder",
    "EMPTY",
    "FormatError",
    "INDENT",
    "Instruction",
    "InstructionKind",
    "NON_BREAKING_SPACE",
    "NO_ARG_PLACEHOLDERS",
    "STATEMENT_CLOSE",
    "STATEMENT_OPEN",
    "UNINDENT",
    "join_to_code",
]
