"""
JavaScript lexical rules, built on top of the Python `esprima` port.

Whether a word is reserved is decided by the tokenizer itself: a candidate that
scans as a single `Keyword`, `Boolean` or `Null` token cannot be used as a
binding name. Strict-mode reserved words are not reported by the tokenizer in
script mode, so they are listed explicitly. JavaScript has no quoting syntax
for identifiers; escaping appends an underscore instead, which keeps the
operation idempotent.
"""

from __future__ import annotations

from typing import Any, List, Optional

import esprima

from .kotlin import character_literal
from .policy import LexicalPolicy

STRICT_MODE_RESERVED = frozenset(
    {
        "arguments",
        "await",
        "eval",
        "implements",
        "interface",
        "package",
        "private",
        "protected",
        "public",
        "static",
    }
)

_RESERVED_TOKEN_TYPES = frozenset({"Keyword", "Boolean", "Null"})


def _token_field(token: Any, name: str) -> Optional[str]:
    if isinstance(token, dict):
        return token.get(name)
    return getattr(token, name, None)


def _tokenize(name: str) -> List[Any]:
    try:
        return list(esprima.tokenize(name))
    except esprima.Error:
        return []


def is_reserved_word(name: str) -> bool:
    if name in STRICT_MODE_RESERVED:
        return True
    tokens = _tokenize(name)
    if len(tokens) != 1:
        return False
    return _token_field(tokens[0], "type") in _RESERVED_TOKEN_TYPES


def is_identifier(name: str) -> bool:
    """True when `name` scans as exactly one identifier token."""
    tokens = _tokenize(name)
    return (
        len(tokens) == 1
        and _token_field(tokens[0], "type") == "Identifier"
        and _token_field(tokens[0], "value") == name
    )


def escape_identifier(name: str) -> str:
    if not name:
        return name
    if is_reserved_word(name):
        return f"{name}_"
    if is_identifier(name):
        return name
    chars = [ch if ("a" + ch).isidentifier() or ch == "$" else "_" for ch in name]
    if not (chars[0].isidentifier() or chars[0] == "$"):
        chars.insert(0, "_")
    return "".join(chars)


def quote_string_literal(
    value: str, is_template: bool = False, is_constant_context: bool = False
) -> str:
    if is_template or (not is_constant_context and "\n" in value):
        parts = ["`"]
        for index, ch in enumerate(value):
            if ch in "`\\":
                parts.append("\\" + ch)
            elif ch == "$" and not is_template and value[index + 1 : index + 2] == "{":
                parts.append("\\$")
            else:
                parts.append(ch)
        parts.append("`")
        return "".join(parts)

    parts = ['"']
    for ch in value:
        if ch == '"':
            parts.append('\\"')
        elif ch == "'":
            parts.append("'")
        else:
            parts.append(character_literal(ch))
    parts.append('"')
    return "".join(parts)


JAVASCRIPT = LexicalPolicy(
    name="javascript",
    is_reserved_word=is_reserved_word,
    escape_identifier=escape_identifier,
    quote_string_literal=quote_string_literal,
    null_literal="null",
    boolean_literals=("false", "true"),
    default_imports=frozenset(),
    file_extension="js",
)


__all__ = [
    "JAVASCRIPT",
    "STRICT_MODE_RESERVED",
    "escape_identifier",
    "is_identifier",
    "is_reserved_word",
    "quote_string_literal",
]
