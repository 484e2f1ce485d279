"""Ordering variable dependencies and gathering a value for each variable."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import deque
from typing import Mapping, Sequence

from samrun.aliases import Alias
from samrun.choices import Choice
from samrun.dependencies import Dependencies, DependenciesError, ExecutionSequence
from samrun.identifiers import Identifier, Identifiers
from samrun.resolver import DynamicResolveEmpty, Resolver, ResolverContext, ResolverError
from samrun.vars import Var


class VarsCollection(ABC):
    """A lookup of variables by identifier."""

    @abstractmethod
    def get(self, identifier: Identifier) -> Var | None:
        """The variable named ``identifier``, or None."""


class VarsDefaultValues(ABC):
    """A lookup of preset values for variables."""

    @abstractmethod
    def default_value(self, identifier: Identifier) -> Choice | None:
        """The preset value for ``identifier``, or None."""


class DependencyResolutionError(Exception):
    """Raised when the variables of a command cannot be resolved."""


class MissingDependencies(DependencyResolutionError):
    """Some referenced variables are not defined."""

    def __init__(self, identifiers: Identifiers) -> None:
        super().__init__(f"missing the following dependencies:\n{identifiers}")
        self.identifiers = identifiers


class UnknownVarsDefaults(DependencyResolutionError):
    """Preset values were given for variables that are not defined."""

    def __init__(self, identifiers: Identifiers) -> None:
        super().__init__(f"the provided variables are unknown:\n{identifiers}")
        self.identifiers = identifiers


class NoChoiceForVar(DependencyResolutionError):
    """No value could be obtained for a variable."""

    def __init__(self, var_name: Identifier, error: Exception) -> None:
        super().__init__(f"no choice available for var {var_name}\n-> {error}")
        self.var_name = var_name
        self.error = error


def execution_sequence_for_dependencies(
    vars: VarsCollection, dep: Dependencies
) -> ExecutionSequence:
    """Order the variables ``dep`` needs so each comes after its own dependencies.

    Raises MissingDependencies listing every variable that is not defined.
    """
    already_seen: set[Identifier] = set()
    already_inserted: set[Identifier] = set()
    candidates = list(dep.dependencies())
    missing: list[Identifier] = []
    sequence: deque[Identifier] = deque()

    while candidates:
        current = candidates.pop()
        if current in already_seen:
            if current not in already_inserted:
                already_inserted.add(current)
                var = vars.get(current)
                if var is not None:
                    sequence.append(var.name)
            continue
        var = vars.get(current)
        if var is None:
            missing.append(current)
            continue
        deps = var.dependencies()
        already_seen.add(current)
        if deps:
            candidates.append(current)
            candidates.extend(deps)
        else:
            already_inserted.add(current)
            sequence.appendleft(var.name)

    if missing:
        raise MissingDependencies(Identifiers(missing))
    return ExecutionSequence(sequence)


def choices_for_execution_sequence(
    alias: Alias,
    vars_col: VarsCollection,
    vars_defaults: VarsDefaultValues,
    resolver: Resolver,
    sequence: ExecutionSequence,
) -> list[tuple[Identifier, list[Choice]]]:
    """Obtain values for every variable of ``sequence``, in order.

    Preset values take precedence over asking the resolver.
    """
    ctx = ResolverContext(
        alias=alias,
        full_name=alias.full_name(),
        choices={},
        execution_sequence=sequence.identifiers(),
    )
    for var_name in sequence:
        var = vars_col.get(var_name)
        if var is None:
            raise MissingDependencies(Identifiers([var_name]))
        default = vars_defaults.default_value(var.name)
        if default is not None:
            chosen = [default]
        else:
            chosen = choice_for_var(resolver, var, ctx.choices, ctx)
        ctx.choices[var.name] = chosen
    return list(ctx.choices.items())


def choice_for_var(
    resolver: Resolver,
    var: Var,
    choices: Mapping[Identifier, Sequence[Choice]],
    ctx: ResolverContext,
) -> list[Choice]:
    """Values for ``var``, using ``choices`` to fill in its own dependencies.

    Raises NoChoiceForVar when nothing could be obtained.
    """
    try:
        return resolve_choice_for_var(resolver, var, choices, ctx)
    except (ResolverError, DependenciesError) as error:
        raise NoChoiceForVar(var.name, error) from error


def resolve_choice_for_var(
    resolver: Resolver,
    var: Var,
    choices: Mapping[Identifier, Sequence[Choice]],
    ctx: ResolverContext,
) -> list[Choice]:
    """Ask ``resolver`` for the values of ``var`` according to its kind."""
    if var.is_command():
        gathered: list[Choice] = []
        one_per_command = True
        for command in var.substitute_for_choices(choices):
            found = resolver.resolve_dynamic(var, command, ctx)
            one_per_command = one_per_command and len(found) == 1
            gathered.extend(found)
        if not gathered:
            raise DynamicResolveEmpty(var.name, "", "")
        if one_per_command:
            return gathered
        return resolver.resolve_static(var, iter(gathered), ctx)
    if var.is_input():
        prompt = var.prompt if var.prompt is not None else "no provided prompt"
        return [resolver.resolve_input(var, prompt, ctx)]
    return resolver.resolve_static(var, iter(var.choices), ctx)