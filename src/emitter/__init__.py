"""Utilities for emitting source code from declaration trees."""

from .code_writer import CodeWriter, StatementBalanceError, UnbalancedIndentError
from .line_wrapper import LineWrapper
from .writer import RenderOptions, RenderResult, render_code_block, render_file

__all__ = [
    "CodeWriter",
    "LineWrapper",
    "RenderOptions",
    "RenderResult",
    "StatementBalanceError",
    "UnbalancedIndentError",
    "render_code_block",
    "render_file",
]
