"""
Command-line interface for rendering declaration trees to Kotlin source.
"""

from __future__ import annotations

import argparse
import importlib.util
import logging
import sys
from pathlib import Path
from typing import List

from emitter import (
    LineWrapper,
    RenderOptions,
    StatementBalanceError,
    UnbalancedIndentError,
    render_file,
)
from resolver import ImportConflictError
from specs import FileSpec
from template import FormatError

logger = logging.getLogger("kpoet")

_RENDER_ERRORS = (FormatError, ImportConflictError, StatementBalanceError, UnbalancedIndentError)


def _load_callable(target: str):
    script, sep, name = target.rpartition(":")
    if not sep or not script or not name:
        raise ValueError(f"expected SCRIPT:CALLABLE, got {target!r}")

    script_path = Path(script).resolve()
    if not script_path.exists():
        raise FileNotFoundError(f"Script not found: {script_path}")

    spec = importlib.util.spec_from_file_location(script_path.stem, script_path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    factory = getattr(module, name, None)
    if not callable(factory):
        raise ValueError(f"{script_path} has no callable named {name}")
    return factory


def render_command(args: argparse.Namespace) -> int:
    try:
        factory = _load_callable(args.target)
        file_spec = factory()
    except (ImportError, SyntaxError, OSError, ValueError) as exc:
        sys.stderr.write(f"ERROR: {exc}\n")
        return 1

    if not isinstance(file_spec, FileSpec):
        sys.stderr.write(f"ERROR: {args.target} returned {type(file_spec).__name__}, not a FileSpec\n")
        return 1

    try:
        options = RenderOptions(indent=" " * args.indent, column_limit=args.column_limit)
        result = render_file(file_spec, options)
    except _RENDER_ERRORS as exc:
        sys.stderr.write(f"ERROR: Rendering failed: {exc}\n")
        return 1
    except ValueError as exc:
        sys.stderr.write(f"ERROR: {exc}\n")
        return 1

    if args.out:
        output_path = Path(args.out)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(result.source, encoding="utf-8")
        logger.info("wrote %s (%d imports)", output_path, len(result.imports))
    else:
        sys.stdout.write(result.source)
    return 0


def wrap_command(args: argparse.Namespace) -> int:
    try:
        wrapper = LineWrapper(sys.stdout, " " * args.indent, args.column_limit)
    except ValueError as exc:
        sys.stderr.write(f"ERROR: {exc}\n")
        return 1

    for line in sys.stdin.read().splitlines():
        # `·` is kept as typed and never becomes a break.
        for index, piece in enumerate(line.split("·")):
            if index > 0:
                wrapper.append_non_wrapping("·")
            wrapper.append(piece, indent_level=1)
        wrapper.newline()
    wrapper.close()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="kpoet", description="Render Kotlin source from declaration trees")
    subparsers = parser.add_subparsers(dest="command")

    render_parser = subparsers.add_parser("render", help="Render the FileSpec built by a Python script")
    render_parser.add_argument(
        "target",
        help="SCRIPT:CALLABLE, a Python file and the zero-argument function returning a FileSpec",
    )
    render_parser.add_argument("--out", help="Output file path (defaults to stdout)")
    render_parser.add_argument(
        "--indent", type=int, default=2, help="Spaces per indentation level (default: 2)"
    )
    render_parser.add_argument(
        "--column-limit", type=int, default=100, help="Wrap lines longer than this (default: 100)"
    )
    render_parser.add_argument("--verbose", action="store_true", help="Log resolution details to stderr.")
    render_parser.set_defaults(func=render_command)

    wrap_parser = subparsers.add_parser("wrap", help="Reflow stdin at spaces to a column limit")
    wrap_parser.add_argument(
        "--indent", type=int, default=4, help="Continuation indent in spaces (default: 4)"
    )
    wrap_parser.add_argument(
        "--column-limit", type=int, default=100, help="Wrap lines longer than this (default: 100)"
    )
    wrap_parser.add_argument("--verbose", action="store_true", help="Log details to stderr.")
    wrap_parser.set_defaults(func=wrap_command)

    return parser


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if getattr(args, "verbose", False) else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    if not hasattr(args, "func"):
        parser.print_help()
        return 1
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
