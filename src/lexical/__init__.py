"""Target-language lexical policies (keywords, escaping, string quoting)."""

from .javascript import JAVASCRIPT
from .kotlin import KEYWORDS, KOTLIN, escape_if_necessary, string_literal_with_quotes
from .policy import LexicalPolicy

__all__ = [
    "JAVASCRIPT",
    "KEYWORDS",
    "KOTLIN",
    "LexicalPolicy",
    "escape_if_necessary",
    "string_literal_with_quotes",
]
