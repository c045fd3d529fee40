"""
Display forms for type and member references.

The same lookup runs twice. While the import table is being built it runs
against the explicit imports only, with an `ImportCandidates` recording
which references could be imported. While printing it runs against the
final table and only computes text.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, Mapping, Optional, Sequence, Set

from lexical import LexicalPolicy
from names import ClassName, MemberName

from .scope import ScopeFrame, is_function_name_in_scope, resolve_in_scope

if TYPE_CHECKING:
    from .imports import ImportTable

logger = logging.getLogger(__name__)


class ImportCandidates:
    """References that may be imported, keyed by the simple name they would claim."""

    def __init__(self, aliases: Mapping[str, str]):
        self.aliases = aliases
        self.types: Dict[str, ClassName] = {}
        self.members: Dict[str, MemberName] = {}
        self.referenced_type_names: Set[str] = set()
        self.referenced_member_names: Set[str] = set()

    def add_type(self, class_name: ClassName) -> None:
        if not class_name.package_name:
            return
        top_level = class_name.top_level_class_name
        simple_name = self.aliases.get(class_name.canonical_name) or top_level.simple_name
        # First collected occurrence keeps the simple name.
        existing = self.types.setdefault(simple_name, top_level)
        if not existing.same_declaration(top_level):
            logger.debug(
                "%s already claimed by %s, keeping %s qualified",
                simple_name,
                existing.canonical_name,
                top_level.canonical_name,
            )

    def add_member(self, member: MemberName) -> None:
        if not member.package_name:
            return
        simple_name = self.aliases.get(member.canonical_name) or member.simple_name
        existing = self.members.setdefault(simple_name, member)
        if existing.canonical_name != member.canonical_name:
            logger.debug(
                "%s already claimed by %s, keeping %s qualified",
                simple_name,
                existing.canonical_name,
                member.canonical_name,
            )

    def suggested_types(self) -> Dict[str, ClassName]:
        return {
            name: class_name
            for name, class_name in self.types.items()
            if name not in self.referenced_type_names
        }

    def suggested_members(self) -> Dict[str, MemberName]:
        return {
            name: member
            for name, member in self.members.items()
            if name not in self.referenced_member_names
        }


def _join(names: Sequence[str], policy: LexicalPolicy) -> str:
    return ".".join(policy.escape_identifier(name) for name in names)


def lookup_type_name(
    class_name: ClassName,
    scope: Sequence[ScopeFrame],
    table: "ImportTable",
    package_name: str,
    policy: LexicalPolicy,
    in_kdoc: bool = False,
    candidates: Optional[ImportCandidates] = None,
) -> str:
    """
    Return the shortest text that denotes `class_name` at `scope`, without nullability.

    The shortest suffix of the nested path that resolves back to the class is
    used: `Entry` inside `Map` denotes `Map.Entry`. A name that resolves to a
    different declaration forces the qualified form.
    """
    name_resolved = False
    current: Optional[ClassName] = class_name
    while current is not None:
        alias = table.aliases.get(current.canonical_name)
        simple_name = alias or current.simple_name
        resolved = resolve_in_scope(simple_name, scope, table.imported_types)
        name_resolved = resolved is not None
        if resolved is not None and resolved.same_declaration(current):
            suffix = class_name.simple_names[len(current.simple_names):]
            return _join((simple_name,) + tuple(suffix), policy)
        current = current.enclosing_class_name

    if name_resolved:
        return policy.escape_segments(class_name.canonical_name)

    if class_name.package_name == package_name:
        if candidates is not None:
            candidates.referenced_type_names.add(class_name.simple_names[0])
        return _join(class_name.simple_names, policy)

    if candidates is not None and not in_kdoc:
        candidates.add_type(class_name)
    return policy.escape_segments(class_name.canonical_name)


def lookup_member_name(
    member: MemberName,
    scope: Sequence[ScopeFrame],
    table: "ImportTable",
    package_name: str,
    policy: LexicalPolicy,
    in_kdoc: bool = False,
    candidates: Optional[ImportCandidates] = None,
) -> str:
    """
    Return the text that denotes `member` at `scope`.

    A function of an enclosing type with the same simple name hides an
    imported or same-package member, unless the member is an extension.
    """
    simple_name = table.aliases.get(member.canonical_name) or member.simple_name
    shadowed = not member.is_extension and is_function_name_in_scope(simple_name, scope)
    imported = table.imported_members.get(simple_name)
    if not shadowed and imported is not None and imported.canonical_name == member.canonical_name:
        return policy.escape_identifier(simple_name)
    if (imported is not None or shadowed) and member.enclosing_class_name is not None:
        enclosing = lookup_type_name(
            member.enclosing_class_name, scope, table, package_name, policy, in_kdoc, candidates
        )
        return f"{enclosing}.{policy.escape_identifier(member.simple_name)}"

    if not shadowed and member.package_name == package_name and member.enclosing_class_name is None:
        if candidates is not None:
            candidates.referenced_member_names.add(member.simple_name)
        return policy.escape_identifier(member.simple_name)

    if candidates is not None and not in_kdoc and not shadowed:
        candidates.add_member(member)
    return policy.escape_segments(member.canonical_name)


__all__ = ["ImportCandidates", "lookup_member_name", "lookup_type_name"]
