"""Identifiers for aliases and variables, optionally qualified by a namespace."""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import total_ordering
from typing import Iterable, Iterator

# Matches {{ some_name_1 }}, {{some_name_1 }}, {{ some_name_1}} and ns::name variants.
_VARS_RE = re.compile(r"(?P<vars>\{\{ ?[a-zA-Z0-9_:]+ ?\}\})")


def _sanitize_identifier(text: str) -> str:
    return (
        text.replace("{ ", "{")
        .replace(" }", "}")
        .replace(" ", "")
        .replace("{{", "")
        .replace("}}", "")
        .replace("]]", "")
        .replace("[[", "")
    )


@total_ordering
@dataclass(frozen=True)
class Identifier:
    """A name with an optional namespace, written ``namespace::name``."""

    name: str
    namespace: str | None = None

    @classmethod
    def new(cls, name: str) -> Identifier:
        """Build an identifier without namespace, stripping template braces."""
        cleaned = (
            name.replace("{{ ", "{{")
            .replace(" }}", "}}")
            .replace(" ", "")
            .replace("{{", "")
            .replace("}}", "")
        )
        return cls(cleaned, None)

    @classmethod
    def with_namespace(cls, name: str, namespace: str | None = None) -> Identifier:
        """Build an identifier in ``namespace``, sanitizing the name."""
        return cls(_sanitize_identifier(name), namespace)

    @classmethod
    def from_str(cls, text: str) -> Identifier:
        """Parse ``ns::name`` or a bare ``name``."""
        name, namespace = cls.maybe_namespace(text)
        return cls.with_namespace(name, namespace)

    @classmethod
    def parse(cls, text: str, namespace: str | None = None) -> list[Identifier]:
        """Return every ``{{ var }}`` reference found in ``text``.

        References without an explicit namespace get ``namespace``.
        """
        found = []
        for match in _VARS_RE.finditer(text):
            name, explicit_ns = cls.maybe_namespace(match.group("vars"))
            ns = explicit_ns if explicit_ns is not None else namespace
            found.append(cls.with_namespace(name, ns))
        return found

    @staticmethod
    def maybe_namespace(text: str) -> tuple[str, str | None]:
        """Split ``text`` into a name and an optional namespace."""
        if "::" in text:
            namespace_part, name_part = text.split("::")[:2]
            name = _sanitize_identifier(name_part)
            namespace = _sanitize_identifier(namespace_part)
            return name, (namespace or None)
        return text, None

    def with_updated_namespace(self, namespace: str) -> Identifier:
        """Return a copy of this identifier placed in ``namespace``."""
        return Identifier(self.name, namespace)

    def _sort_key(self) -> tuple[str, bool, str]:
        return (self.name, self.namespace is not None, self.namespace or "")

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Identifier):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __str__(self) -> str:
        if self.namespace:
            return f"{self.namespace}::{self.name}"
        return self.name


@dataclass(frozen=True)
class Identifiers:
    """A list of identifiers that renders as a bulleted list."""

    items: tuple[Identifier, ...] = ()

    def __init__(self, items: Iterable[Identifier] = ()) -> None:
        object.__setattr__(self, "items", tuple(items))

    def __iter__(self) -> Iterator[Identifier]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __str__(self) -> str:
        return "".join(f"- {identifier}\n" for identifier in self.items)