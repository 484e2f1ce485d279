"""Substitution of variable choices into commands and execution sequences."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Iterator, Mapping, Sequence

from samrun.choices import Choice
from samrun.commands import Command
from samrun.identifiers import Identifier


class DependenciesError(Exception):
    """Raised when choices cannot be substituted into a command."""


class MissingChoicesForVar(DependenciesError):
    """No choice was supplied for a variable the command needs."""

    def __init__(self, identifier: Identifier) -> None:
        super().__init__(f"no choice is available for var {identifier}")
        self.identifier = identifier


def substitute_choice(origin: str, dependency: Identifier, choice: str) -> str:
    """Replace the first reference to ``dependency`` in each accepted form."""
    name = re.escape(dependency.name)
    namespace = re.escape(dependency.namespace or "")
    plain = re.compile(rf"(?P<var>\{{\{{ ?{name} ?\}}\}})")
    qualified = re.compile(rf"(?P<var>\{{\{{ ?{namespace}::{name} ?\}}\}})")
    text = plain.sub(lambda _m: choice, origin, count=1)
    return qualified.sub(lambda _m: choice, text, count=1)


class Dependencies(Command):
    """A command whose variable references can be filled in."""

    def substitute_for_choices(
        self, choices: Mapping[Identifier, Sequence[Choice]]
    ) -> list[str]:
        """Every command produced by substituting all combinations of choices.

        Raises MissingChoicesForVar if a referenced variable has no entry.
        """
        commands = [self.command]
        for dep in self.dependencies():
            if dep not in choices:
                raise MissingChoicesForVar(dep)
            commands = [
                substitute_choice(cmd, dep, choice.value)
                for choice in choices[dep]
                for cmd in commands
            ]
        return commands

    def substitute_for_choices_partial(self, choices: Mapping[Identifier, Choice]) -> str:
        """Substitute the variables that have a choice and leave the rest."""
        command = self.command
        for dep in self.dependencies():
            choice = choices.get(dep)
            if choice is not None:
                command = substitute_choice(command, dep, choice.value)
        return command


@dataclass(frozen=True)
class ExecutionSequence:
    """Variables in the order their values must be resolved."""

    inner: tuple[Identifier, ...] = ()

    def __init__(self, inner: Iterable[Identifier] = ()) -> None:
        object.__setattr__(self, "inner", tuple(inner))

    def identifiers(self) -> list[Identifier]:
        """A fresh list of the identifiers in order."""
        return list(self.inner)

    def __iter__(self) -> Iterator[Identifier]:
        return iter(self.inner)

    def __len__(self) -> int:
        return len(self.inner)

    def __getitem__(self, index: int) -> Identifier:
        return self.inner[index]