"""
Target-language lexical policy injected into the resolver and the emitter.

A policy bundles the few decisions that depend on the language being printed:
which words are reserved, how an identifier is escaped when it cannot be used
verbatim, and how string literals are quoted. Everything else in the engine
(template interpretation, import resolution, line wrapping) is language
agnostic and consults the policy through these pure functions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, FrozenSet, Tuple


@dataclass(frozen=True)
class LexicalPolicy:
    """Pure functions and constants describing one target language."""

    name: str
    is_reserved_word: Callable[[str], bool]
    escape_identifier: Callable[[str], str]
    quote_string_literal: Callable[[str, bool, bool], str]
    null_literal: str = "null"
    boolean_literals: Tuple[str, str] = ("false", "true")
    default_imports: FrozenSet[str] = frozenset()
    file_extension: str = ""

    def escape_segments(self, dotted: str) -> str:
        """Escape every segment of a dotted name such as a package."""
        return ".".join(
            self.escape_identifier(segment) for segment in dotted.split(".") if segment
        )

    def format_boolean(self, value: bool) -> str:
        return self.boolean_literals[1] if value else self.boolean_literals[0]

    def is_default_import(self, qualified_name: str) -> bool:
        """True when `qualified_name` lives in a package that is always in scope."""
        package, _, _ = qualified_name.rpartition(".")
        return package in self.default_imports


__all__ = ["LexicalPolicy"]
