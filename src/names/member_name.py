"""References to functions and properties, and the import directives naming them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from .type_names import ClassName


@dataclass(frozen=True)
class MemberName:
    """
    A function or property that may be imported.

    Top-level members live directly in `package_name`; members of objects or
    companion objects carry their `enclosing_class_name`.
    """

    package_name: str
    simple_name: str
    enclosing_class_name: Optional[ClassName] = None
    is_extension: bool = False

    def __post_init__(self) -> None:
        if not self.simple_name:
            raise ValueError("simpleName must not be empty")
        if (
            self.enclosing_class_name is not None
            and self.enclosing_class_name.package_name != self.package_name
        ):
            raise ValueError(
                f"member {self.simple_name} must share the package of "
                f"{self.enclosing_class_name.canonical_name}"
            )

    @classmethod
    def of(cls, enclosing: ClassName, simple_name: str, is_extension: bool = False) -> "MemberName":
        return cls(enclosing.package_name, simple_name, enclosing.copy(nullable=False), is_extension)

    @property
    def canonical_name(self) -> str:
        if self.enclosing_class_name is not None:
            return f"{self.enclosing_class_name.canonical_name}.{self.simple_name}"
        if self.package_name:
            return f"{self.package_name}.{self.simple_name}"
        return self.simple_name

    def __str__(self) -> str:
        return self.canonical_name


Reference = Union[ClassName, MemberName]


@dataclass(frozen=True)
class Import:
    """An import directive: a type or member, optionally under an alias."""

    target: Reference
    alias: Optional[str] = None

    def __post_init__(self) -> None:
        if isinstance(self.target, ClassName):
            object.__setattr__(self, "target", self.target.copy(nullable=False))

    @property
    def qualified_name(self) -> str:
        return self.target.canonical_name

    @property
    def display_name(self) -> str:
        """The name this import brings into scope."""
        return self.alias or self.target.simple_name

    @property
    def is_member(self) -> bool:
        return isinstance(self.target, MemberName)

    def render(self, escape=None) -> str:
        """Render as `qualified.Name` or `qualified.Name as Alias`, escaping segments."""
        qualified = self.qualified_name
        if escape is not None:
            qualified = ".".join(escape(segment) for segment in qualified.split("."))
        if self.alias is None:
            return qualified
        alias = escape(self.alias) if escape is not None else self.alias
        return f"{qualified} as {alias}"

    def __str__(self) -> str:
        return self.render()


__all__ = ["Import", "MemberName", "Reference"]
