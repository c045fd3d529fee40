"""
Import table construction.

Resolution is a pure function of the collected references, the file's
package and its explicit imports. Explicit imports claim their display names
first; every other reference claims its simple name in collection order, so
the first type seen under a name is imported and later clashing types stay
fully qualified. Types and members are resolved in separate namespaces.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Tuple

from lexical import KOTLIN, LexicalPolicy
from names import ClassName, Import, MemberName

from .collector import ReferenceSet
from .lookup import ImportCandidates, lookup_member_name, lookup_type_name

logger = logging.getLogger(__name__)


class ImportConflictError(ValueError):
    """Raised when explicit imports bring two declarations in under one name."""


@dataclass(frozen=True)
class ImportTable:
    """Names brought into scope for one file, and the import directives that do it."""

    imported_types: Mapping[str, ClassName] = field(default_factory=dict)
    imported_members: Mapping[str, MemberName] = field(default_factory=dict)
    aliases: Mapping[str, str] = field(default_factory=dict)
    imports: Tuple[Import, ...] = ()

    def __post_init__(self) -> None:
        for name in ("imported_types", "imported_members", "aliases"):
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))
        object.__setattr__(self, "imports", tuple(self.imports))

    def lines(self, policy: LexicalPolicy = KOTLIN) -> List[str]:
        return [directive.render(policy.escape_identifier) for directive in self.imports]


EMPTY_TABLE = ImportTable()


def _seed(explicit_imports: Iterable[Import]):
    types: Dict[str, ClassName] = {}
    members: Dict[str, MemberName] = {}
    aliases: Dict[str, str] = {}
    for directive in explicit_imports:
        qualified = directive.qualified_name
        if directive.alias is not None:
            previous = aliases.get(qualified)
            if previous is not None and previous != directive.alias:
                raise ImportConflictError(
                    f"{qualified} is imported as both {previous} and {directive.alias}"
                )
            aliases[qualified] = directive.alias

        namespace = members if directive.is_member else types
        display = directive.display_name
        existing = namespace.get(display)
        if existing is not None and existing.canonical_name != qualified:
            raise ImportConflictError(
                f"conflicting imports for {display}: {existing.canonical_name} and {qualified}"
            )
        namespace[display] = directive.target
    return types, members, aliases


def build_import_table(
    references: ReferenceSet,
    package_name: str,
    explicit_imports: Iterable[Import] = (),
    policy: LexicalPolicy = KOTLIN,
) -> ImportTable:
    """Decide which references are imported and how every other one is written."""
    explicit = list(explicit_imports)
    types, members, aliases = _seed(explicit)
    provisional = ImportTable(types, members, aliases)

    candidates = ImportCandidates(aliases)
    for reference in references:
        if isinstance(reference.target, MemberName):
            lookup_member_name(
                reference.target,
                reference.scope,
                provisional,
                package_name,
                policy,
                reference.in_kdoc,
                candidates,
            )
        else:
            lookup_type_name(
                reference.target.copy(nullable=False),
                reference.scope,
                provisional,
                package_name,
                policy,
                reference.in_kdoc,
                candidates,
            )

    suggested_types = candidates.suggested_types()
    suggested_members = candidates.suggested_members()
    for name in candidates.types.keys() - suggested_types.keys():
        logger.debug("not importing %s: the name is declared in package %r", name, package_name)

    directives = list(explicit)
    for target in list(suggested_types.values()) + list(suggested_members.values()):
        if not policy.is_default_import(target.canonical_name):
            directives.append(Import(target))

    unique = {}
    for directive in directives:
        unique.setdefault(directive.render(policy.escape_identifier), directive)
    ordered = tuple(unique[text] for text in sorted(unique))

    table = ImportTable(
        imported_types={**suggested_types, **types},
        imported_members={**suggested_members, **members},
        aliases=aliases,
        imports=ordered,
    )
    logger.debug(
        "resolved %d references in %r: %d imports",
        len(references),
        package_name,
        len(table.imports),
    )
    return table


__all__ = ["EMPTY_TABLE", "ImportConflictError", "ImportTable", "build_import_table"]
