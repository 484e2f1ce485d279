"""Choosing an alias, resolving its variables and running it."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Mapping, Sequence, Union

from samrun.aliases import Alias, AliasAndDependencies, ResolvedAlias
from samrun.choices import Choice
from samrun.identifiers import Identifier
from samrun.resolution import (
    VarsCollection,
    VarsDefaultValues,
    choices_for_execution_sequence,
    execution_sequence_for_dependencies,
)
from samrun.resolver import Resolver, ResolverError

PROMPT = "Choose an alias to run > "


class SamEngineError(Exception):
    """Raised when an alias cannot be chosen, resolved or run."""


class ExitCodeError(SamEngineError):
    """A command finished without an exit code."""

    def __init__(self) -> None:
        super().__init__("could not return an exit code.")


class ExecutorFailure(SamEngineError):
    """The executor could not run the commands."""

    def __init__(self, error: BaseException) -> None:
        super().__init__(f"could not run commands because {error}")
        self.error = error


class AliasCollectionError(SamEngineError):
    """Raised when an alias cannot be selected from a collection."""


class AliasInvalidSelection(AliasCollectionError):
    """The selected alias does not exist."""

    def __init__(self, identifier: Identifier) -> None:
        super().__init__(f"Invalid alias selected {identifier}")
        self.identifier = identifier


class AliasSelectionFailure(AliasCollectionError):
    """The resolver could not select an alias."""

    def __init__(self, error: ResolverError) -> None:
        super().__init__(f"Alias selection failed because \n-> {error}")
        self.error = error


@dataclass(frozen=True)
class ChooseAndExecuteAlias:
    """Let the user pick an alias, then run it."""


@dataclass(frozen=True)
class ExecuteAlias:
    """Run the alias named ``alias``."""

    alias: Identifier


SamCommand = Union[ChooseAndExecuteAlias, ExecuteAlias]


class AliasCollection(ABC):
    """A lookup of aliases by identifier."""

    def select_alias(
        self, resolver: Resolver, vars: VarsCollection, prompt: str
    ) -> Alias:
        """Let ``resolver`` pick one of the aliases.

        Raises a DependencyResolutionError when an alias needs an undefined
        variable, AliasSelectionFailure when the resolver picks nothing and
        AliasInvalidSelection when the pick is not in this collection.
        """
        qualified = [
            AliasAndDependencies(
                alias=alias,
                full_name=alias.full_name(),
                dependencies=execution_sequence_for_dependencies(vars, alias).identifiers(),
            )
            for alias in self.aliases()
        ]
        try:
            selection = resolver.select_identifier(qualified, prompt)
        except ResolverError as error:
            raise AliasSelectionFailure(error) from error
        found = self.get(selection.alias.identifier)
        if found is None:
            raise AliasInvalidSelection(selection.alias.identifier)
        return found

    @abstractmethod
    def get(self, identifier: Identifier) -> Alias | None:
        """The alias named ``identifier``, or None."""

    @abstractmethod
    def aliases(self) -> list[Alias]:
        """Every alias of the collection."""


class SamHistory(ABC):
    """A record of the aliases that were run, newest first."""

    @abstractmethod
    def put(self, alias: ResolvedAlias) -> None:
        """Record ``alias`` as the latest run."""

    @abstractmethod
    def get_last_n(self, n: int) -> list[ResolvedAlias]:
        """Up to ``n`` latest runs, newest first."""

    def get_last(self) -> ResolvedAlias | None:
        """The latest run, or None when the history is empty."""
        last = self.get_last_n(1)
        return last[0] if last else None


class SessionSaver(ABC):
    """Stores choices as defaults for the current session."""

    @abstractmethod
    def save_choices(self, choices: Mapping[Identifier, Sequence[Choice]]) -> None:
        """Remember ``choices`` for later runs."""


class SamLogger(ABC):
    """Receives notice of what the engine does."""

    @abstractmethod
    def final_command(self, alias: Alias, final_command: object) -> None:
        """The final command of ``alias`` is about to run."""

    @abstractmethod
    def command(self, var: object, cmd: str) -> None:
        """``cmd`` is run to get choices for ``var``."""

    @abstractmethod
    def choice(self, var: object, choice: object) -> None:
        """``choice`` was made for ``var``."""

    @abstractmethod
    def alias(self, alias: Alias) -> None:
        """``alias`` was selected."""


class SamExecutor(ABC):
    """Runs the commands of a resolved alias."""

    @abstractmethod
    def execute_resolved_alias(
        self, alias: ResolvedAlias, env_variables: Mapping[str, str]
    ) -> int:
        """Run ``alias`` with ``env_variables`` and return an exit code."""


class _VarsDefaults(VarsDefaultValues):
    """Preset values that can also be replaced."""

    @abstractmethod
    def set_defaults(self, defaults: Mapping[Identifier, Sequence[Choice]]) -> None:
        """Add or replace preset values."""


@dataclass
class SamEngine:
    """Selects, resolves, records and runs aliases."""

    resolver: Resolver
    aliases: AliasCollection
    vars: VarsCollection
    defaults: VarsDefaultValues
    logger: SamLogger
    history: SamHistory
    env_variables: dict[str, str] = field(default_factory=dict)
    executor: SamExecutor | None = None
    session_saver: SessionSaver | None = None

    def run(self, command: SamCommand) -> int:
        """Carry out ``command`` and return the exit code."""
        if isinstance(command, ChooseAndExecuteAlias):
            alias = self.aliases.select_alias(self.resolver, self.vars, PROMPT)
            return self._run_alias(alias)
        if isinstance(command, ExecuteAlias):
            alias = self.aliases.get(command.alias)
            if alias is None:
                raise AliasInvalidSelection(command.alias)
            return self._run_alias(alias)
        raise TypeError(f"unknown command {command!r}")

    def _run_alias(self, alias: Alias) -> int:
        if self.executor is None:
            raise ExecutorFailure(RuntimeError("no executor configured"))
        self.logger.alias(alias)
        sequence = execution_sequence_for_dependencies(self.vars, alias)
        choices = dict(
            choices_for_execution_sequence(
                alias, self.vars, self.defaults, self.resolver, sequence
            )
        )
        final_alias = alias.with_choices(choices)
        self.history.put(final_alias)
        return self.executor.execute_resolved_alias(final_alias, self.env_variables)