"""Reference collection and import resolution."""

from .collector import Reference, ReferenceSet, collect_references
from .imports import EMPTY_TABLE, ImportConflictError, ImportTable, build_import_table
from .lookup import ImportCandidates, lookup_member_name, lookup_type_name
from .scope import ScopeFrame, declared_class_name, resolve_in_scope

__all__ = [
    "EMPTY_TABLE",
    "ImportCandidates",
    "ImportConflictError",
    "ImportTable",
    "Reference",
    "ReferenceSet",
    "ScopeFrame",
    "build_import_table",
    "collect_references",
    "declared_class_name",
    "lookup_member_name",
    "lookup_type_name",
    "resolve_in_scope",
]
