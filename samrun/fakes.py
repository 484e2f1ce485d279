"""In-memory logger, executor, history and alias store."""

from __future__ import annotations

import copy
from collections import deque
from dataclasses import dataclass, field
from itertools import islice
from typing import Iterable, Mapping

from samrun.aliases import Alias, ResolvedAlias
from samrun.engine import AliasCollection, SamExecutor, SamHistory, SamLogger
from samrun.identifiers import Identifier


class SilentLogger(SamLogger):
    """A logger that discards everything."""

    def final_command(self, alias: Alias, final_command: object) -> None:
        return None

    def command(self, var: object, cmd: str) -> None:
        return None

    def choice(self, var: object, choice: object) -> None:
        return None

    def alias(self, alias: Alias) -> None:
        return None


@dataclass
class LogExecutor(SamExecutor):
    """An executor that records what it was asked to run instead of running it."""

    commands: list[tuple[ResolvedAlias, dict[str, str]]] = field(default_factory=list)

    def execute_resolved_alias(
        self, alias: ResolvedAlias, env_variables: Mapping[str, str]
    ) -> int:
        self.commands.append((copy.deepcopy(alias), dict(env_variables)))
        return 0


@dataclass
class InMemoryHistory(SamHistory):
    """A history kept in memory, newest first."""

    aliases: deque[ResolvedAlias] = field(default_factory=deque)

    def put(self, alias: ResolvedAlias) -> None:
        self.aliases.appendleft(alias)

    def get_last_n(self, n: int) -> list[ResolvedAlias]:
        return [copy.deepcopy(alias) for alias in islice(self.aliases, n)]


class StaticAliasRepository(AliasCollection):
    """Aliases held in a dictionary keyed by identifier."""

    def __init__(self, aliases: Iterable[Alias] = ()) -> None:
        self._aliases: dict[Identifier, Alias] = {
            alias.identifier: alias for alias in aliases
        }

    def get(self, identifier: Identifier) -> Alias | None:
        return self._aliases.get(identifier)

    def aliases(self) -> list[Alias]:
        return list(self._aliases.values())