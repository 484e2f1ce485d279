"""Aliases: named command templates, and their resolved forms."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from samrun.choices import Choice
from samrun.commands import NamespaceUpdater
from samrun.dependencies import Dependencies
from samrun.identifiers import Identifier

# Matches {{ some_name_1 }}, {{some_name_1 }} and {{ some_name_1}} (no namespace).
VARS_NO_NS_RE = re.compile(r"\{\{ ?(?P<vars>[a-zA-Z0-9_]+) ?\}\}")


def _required(data: Mapping[str, Any], key: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise ValueError(f"missing field {key!r}") from None


@dataclass
class Alias(Dependencies, NamespaceUpdater):
    """A named command template that may reference variables."""

    identifier: Identifier
    desc: str
    alias: str

    @classmethod
    def create(cls, name: str, desc: str, alias: str) -> Alias:
        """Build an alias without namespace, sanitizing the name."""
        return cls(Identifier.new(name), desc, alias)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Alias:
        """Build an alias from a decoded configuration entry.

        Expects the keys ``name``, ``desc`` and ``alias``, and optionally
        ``namespace``. Raises ValueError when a required key is missing.
        """
        namespace = data.get("namespace")
        identifier = Identifier(
            str(_required(data, "name")),
            None if namespace is None else str(namespace),
        )
        return cls(identifier, str(_required(data, "desc")), str(_required(data, "alias")))

    @property
    def name(self) -> str:
        """The alias name without namespace."""
        return self.identifier.name

    @property
    def namespace(self) -> str | None:
        return self.identifier.namespace

    @property
    def command(self) -> str:
        return self.alias

    def update_namespace(self, namespace: str) -> None:
        self.identifier = self.identifier.with_updated_namespace(namespace)

    def with_choices(
        self, choices: Mapping[Identifier, Sequence[Choice]]
    ) -> ResolvedAlias:
        """Resolve the alias with the given choices.

        Raises MissingChoicesForVar if a referenced variable has no choice.
        """
        commands = self.substitute_for_choices(choices)
        return ResolvedAlias(
            name=self.identifier,
            desc=self.desc,
            original_alias=self.alias,
            resolved_aliases=commands,
            choices={key: list(values) for key, values in choices.items()},
        )

    def with_partial_choices(self, choices: Mapping[Identifier, Choice]) -> Alias:
        """A copy of this alias with the known choices filled in."""
        return Alias(self.identifier, self.desc, self.substitute_for_choices_partial(choices))

    def sanitized_alias(self) -> str:
        """The alias text with unqualified variables put in this alias's namespace."""
        return self.sanitize(self.alias, self.namespace or "")

    def full_name(self) -> str:
        """``namespace::name`` or just ``name`` when there is no namespace."""
        if self.namespace is not None:
            return f"{self.namespace}::{self.name}"
        return self.name

    @staticmethod
    def sanitize(alias_def: str, namespace: str) -> str:
        """Qualify every unqualified ``{{ var }}`` in ``alias_def`` with ``namespace``."""
        return VARS_NO_NS_RE.sub(
            lambda match: f"{{{{ {namespace}::{match.group('vars')} }}}}", alias_def
        )

    def __str__(self) -> str:
        return f"alias {self.identifier}='{self.alias}' # {self.desc}\n"


@dataclass
class AliasAndDependencies:
    """An alias together with the variables it needs, in resolution order."""

    alias: Alias
    full_name: str
    dependencies: list[Identifier] = field(default_factory=list)


@dataclass
class ResolvedAlias:
    """An alias whose variables were given values, ready to run."""

    name: Identifier
    desc: str
    original_alias: str
    resolved_aliases: list[str] = field(default_factory=list)
    choices: dict[Identifier, list[Choice]] = field(default_factory=dict)

    @property
    def commands(self) -> list[str]:
        """The final commands to run."""
        return list(self.resolved_aliases)

    @property
    def namespace(self) -> str | None:
        return self.name.namespace

    def choice(self, identifier: Identifier) -> list[Choice] | None:
        """The choices used for ``identifier``, or None if it had none."""
        values = self.choices.get(identifier)
        return None if values is None else list(values)

    def to_alias(self) -> Alias:
        """The unresolved alias this was made from."""
        return Alias(self.name, self.desc, self.original_alias)

    def __str__(self) -> str:
        lines = [f"Alias: {self.name}\n\n", "Choices:\n"]
        for identifier, values in self.choices.items():
            rendered = "".join(f"{value} " for value in values)
            lines.append(f" - {identifier} = {rendered}\n")
        lines.append("\nExecuted commands:\n")
        lines.extend(f" - {cmd}\n" for cmd in self.resolved_aliases)
        return "".join(lines)