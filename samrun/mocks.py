"""In-memory variable stores and a scripted resolver."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping, Sequence

from samrun.aliases import AliasAndDependencies
from samrun.choices import Choice
from samrun.identifiers import Identifier
from samrun.resolution import VarsCollection, VarsDefaultValues
from samrun.resolver import (
    IdentifierSelectionEmpty,
    NoChoiceWasAvailable,
    NoChoiceWasSelected,
    Resolver,
    ResolverContext,
)
from samrun.vars import Var


@dataclass
class VarsCollectionMock(VarsCollection):
    """Variables held in a dictionary."""

    vars: dict[Identifier, Var] = field(default_factory=dict)

    def get(self, identifier: Identifier) -> Var | None:
        return self.vars.get(identifier)


@dataclass
class VarsDefaultValuesMock(VarsDefaultValues):
    """Preset values held in a dictionary."""

    defaults: dict[Identifier, list[Choice]] = field(default_factory=dict)

    def default_value(self, identifier: Identifier) -> Choice | None:
        values = self.defaults.get(identifier)
        return values[0] if values else None

    def set_defaults(self, defaults: Mapping[Identifier, Sequence[Choice]]) -> None:
        """Add or replace preset values."""
        for identifier, values in defaults.items():
            self.defaults[identifier] = list(values)


@dataclass
class StaticResolver(Resolver):
    """A resolver answering from fixed tables instead of asking the user."""

    identifier_to_select: Identifier | None = None
    dynamic_res: dict[str, list[Choice]] = field(default_factory=dict)
    static_res: dict[Identifier, list[Choice]] = field(default_factory=dict)

    def resolve_input(self, var: Var, prompt: str, ctx: ResolverContext) -> Choice:
        values = self.static_res.get(var.name)
        if not values:
            raise NoChoiceWasAvailable(var.name)
        return values[0]

    def resolve_dynamic(self, var: Var, cmd: str, ctx: ResolverContext) -> list[Choice]:
        values = self.dynamic_res.get(cmd)
        if not values:
            raise NoChoiceWasAvailable(var.name)
        return [values[0]]

    def resolve_static(
        self, var: Var, choices: Iterable[Choice], ctx: ResolverContext
    ) -> list[Choice]:
        values = self.static_res.get(var.name)
        if values is None:
            raise NoChoiceWasSelected(var.name)
        return list(values)

    def select_identifier(
        self, identifiers: Sequence[AliasAndDependencies], prompt: str
    ) -> AliasAndDependencies:
        if self.identifier_to_select is not None:
            for candidate in identifiers:
                if candidate.alias.identifier == self.identifier_to_select:
                    return candidate
        raise IdentifierSelectionEmpty()