"""
Render declaration trees to source text, ready for writing to disk.

Rendering a file is one synchronous pass over fresh state: references are
collected, the import table is resolved from them, and the tree is emitted
against that table. Nothing is returned unless every phase succeeds.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from lexical import KOTLIN, LexicalPolicy
from resolver import EMPTY_TABLE, build_import_table, collect_references
from specs import FileSpec
from template import CodeBlock

from .code_writer import CodeWriter
from .declarations import emit_file

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderOptions:
    indent: str = "  "
    column_limit: int = 100
    policy: LexicalPolicy = KOTLIN

    def __post_init__(self) -> None:
        if self.column_limit < 2:
            raise ValueError(f"column_limit must be at least 2, was {self.column_limit}")
        if self.indent.strip(" \t"):
            raise ValueError(f"indent must be spaces or tabs, was {self.indent!r}")


@dataclass(frozen=True)
class RenderResult:
    source: str
    imports: Tuple[str, ...]
    relative_path: str


def render_file(file_spec: FileSpec, options: Optional[RenderOptions] = None) -> RenderResult:
    """
    Render `file_spec` to source text.
    """
    options = options or RenderOptions()
    policy = options.policy

    references = collect_references(file_spec)
    table = build_import_table(references, file_spec.package_name, file_spec.imports, policy)
    import_lines = tuple(table.lines(policy))

    buffer = io.StringIO()
    writer = CodeWriter(
        buffer,
        indent=options.indent,
        column_limit=options.column_limit,
        policy=policy,
        import_table=table,
        package_name=file_spec.package_name,
    )
    emit_file(writer, file_spec, import_lines)
    writer.close()

    relative_path = file_spec.relative_path(policy.file_extension)
    logger.debug("rendered %s with %d imports", relative_path, len(import_lines))
    return RenderResult(
        source=buffer.getvalue(),
        imports=import_lines,
        relative_path=relative_path,
    )


def render_code_block(code_block: CodeBlock, options: Optional[RenderOptions] = None) -> str:
    """Render a lone fragment. References are printed fully qualified."""
    options = options or RenderOptions()
    buffer = io.StringIO()
    writer = CodeWriter(
        buffer,
        indent=options.indent,
        column_limit=options.column_limit,
        policy=options.policy,
        import_table=EMPTY_TABLE,
    )
    writer.emit_code(code_block)
    writer.close()
    return buffer.getvalue()


__all__ = ["RenderOptions", "RenderResult", "render_code_block", "render_file"]
