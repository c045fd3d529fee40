"""
Kotlin lexical rules: keywords, identifier escaping and string literal quoting.

Identifiers that Kotlin cannot accept verbatim are wrapped in backticks.
Escaping is idempotent: a name that is already back-ticked is returned as is.
Multi-line strings are emitted as raw strings whose lines carry a `|` margin,
followed by `.trimMargin()`, so the printed code keeps its indentation.
"""

from __future__ import annotations

import unicodedata

from .policy import LexicalPolicy

# https://kotlinlang.org/docs/reference/keyword-reference.html
KEYWORDS = frozenset(
    {
        # Hard keywords
        "as",
        "break",
        "class",
        "continue",
        "do",
        "else",
        "false",
        "for",
        "fun",
        "if",
        "in",
        "interface",
        "is",
        "null",
        "object",
        "package",
        "return",
        "super",
        "this",
        "throw",
        "true",
        "try",
        "typealias",
        "typeof",
        "val",
        "var",
        "when",
        "while",
        # Soft keywords
        "by",
        "catch",
        "constructor",
        "delegate",
        "dynamic",
        "field",
        "file",
        "finally",
        "get",
        "import",
        "init",
        "param",
        "property",
        "receiver",
        "set",
        "setparam",
        "where",
        # Modifier keywords
        "actual",
        "abstract",
        "annotation",
        "companion",
        "const",
        "crossinline",
        "data",
        "enum",
        "expect",
        "external",
        "final",
        "infix",
        "inline",
        "inner",
        "internal",
        "lateinit",
        "noinline",
        "open",
        "operator",
        "out",
        "override",
        "private",
        "protected",
        "public",
        "reified",
        "sealed",
        "suspend",
        "tailrec",
        "value",
        "vararg",
        # No longer keywords, but still break some code if unescaped.
        "header",
        "impl",
        # Other reserved keywords
        "yield",
    }
)

DEFAULT_IMPORTS = frozenset(
    {
        "kotlin",
        "kotlin.annotation",
        "kotlin.collections",
        "kotlin.comparisons",
        "kotlin.io",
        "kotlin.ranges",
        "kotlin.sequences",
        "kotlin.text",
    }
)

_ILLEGAL_CHARACTERS_TO_ESCAPE = frozenset(".;[]/<>:\\")

_CHARACTER_ESCAPES = {
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\r": "\\r",
    '"': '"',
    "'": "\\'",
    "\\": "\\\\",
}

_DOLLAR = "${'$'}"


def is_keyword(name: str) -> bool:
    return name in KEYWORDS


def is_identifier_start(ch: str) -> bool:
    return ch.isidentifier() or unicodedata.category(ch) == "Sc"


def is_identifier_part(ch: str) -> bool:
    return ("a" + ch).isidentifier() or unicodedata.category(ch) in {"Sc", "Nd"}


def _already_escaped(name: str) -> bool:
    return len(name) > 1 and name.startswith("`") and name.endswith("`")


def _needs_backticks(name: str) -> bool:
    if not name:
        return False
    if not is_identifier_start(name[0]):
        return True
    if any(not is_identifier_part(ch) for ch in name[1:]):
        return True
    if is_keyword(name) or "$" in name:
        return True
    return all(ch == "_" for ch in name)


def escape_if_necessary(name: str, validate: bool = True) -> str:
    """Return `name` wrapped in backticks when Kotlin cannot use it verbatim."""
    if _already_escaped(name):
        return name
    if validate:
        illegal = sorted(_ILLEGAL_CHARACTERS_TO_ESCAPE.intersection(name))
        if illegal:
            raise ValueError(
                f"Can't escape identifier {name} because it contains illegal "
                f"characters: {''.join(illegal)}"
            )
    if _needs_backticks(name):
        return f"`{name}`"
    return name


def character_literal(ch: str) -> str:
    """Escape a single character the way it appears inside a quoted literal."""
    escaped = _CHARACTER_ESCAPES.get(ch)
    if escaped is not None:
        return escaped
    code = ord(ch)
    if code <= 0x1F or 0x7F <= code <= 0x9F:
        return f"\\u{code:04x}"
    return ch


def string_literal_with_quotes(
    value: str, is_template: bool = False, is_constant_context: bool = False
) -> str:
    """Return the Kotlin literal for `value`, including its quotes."""
    if not is_constant_context and "\n" in value:
        parts = ['"""\n|']
        i = 0
        while i < len(value):
            ch = value[i]
            if value.startswith('"""', i):
                # Don't end the raw string too early.
                parts.append('""' + "${'\"'}")
                i += 3
                continue
            if ch == "\n":
                parts.append("\n|")
            elif ch == "$" and not is_template:
                parts.append(_DOLLAR)
            else:
                parts.append(ch)
            i += 1
        if not value.endswith("\n"):
            parts.append("\n")
        parts.append('""".trimMargin()')
        return "".join(parts)

    parts = ['"']
    for ch in value:
        if ch == "'":
            parts.append("'")
        elif ch == '"':
            parts.append('\\"')
        elif ch == "$" and not is_template:
            parts.append(_DOLLAR)
        else:
            parts.append(character_literal(ch))
    parts.append('"')
    return "".join(parts)


KOTLIN = LexicalPolicy(
    name="kotlin",
    is_reserved_word=is_keyword,
    escape_identifier=escape_if_necessary,
    quote_string_literal=string_literal_with_quotes,
    null_literal="null",
    boolean_literals=("false", "true"),
    default_imports=DEFAULT_IMPORTS,
    file_extension="kt",
)


__all__ = [
    "DEFAULT_IMPORTS",
    "KEYWORDS",
    "KOTLIN",
    "character_literal",
    "escape_if_necessary",
    "is_identifier_part",
    "is_identifier_start",
    "is_keyword",
    "string_literal_with_quotes",
]
