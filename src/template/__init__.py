"""Code fragments with typed placeholders and structural markers."""

from .code_block import (
    EMPTY,
    INDENT,
    NON_BREAKING_SPACE,
    STATEMENT_CLOSE,
    STATEMENT_OPEN,
    UNINDENT,
    CodeBlock,
    CodeBlockBuilder,
    FormatError,
    Instruction,
    InstructionKind,
    join_to_code,
)

__all__ = [
    "CodeBlock",
    "CodeBlockBuilder",
    "EMPTY",
    "FormatError",
    "INDENT",
    "Instruction",
    "InstructionKind",
    "NON_BREAKING_SPACE",
    "STATEMENT_CLOSE",
    "STATEMENT_OPEN",
    "UNINDENT",
    "join_to_code",
]
