"""The interface that picks values for variables, and its errors."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from samrun.aliases import Alias, AliasAndDependencies
from samrun.choices import Choice
from samrun.identifiers import Identifier
from samrun.vars import Var


@dataclass
class ResolverContext:
    """What is known while resolving the variables of one alias."""

    alias: Alias
    full_name: str
    choices: dict[Identifier, list[Choice]] = field(default_factory=dict)
    execution_sequence: list[Identifier] = field(default_factory=list)


class ResolverError(Exception):
    """Raised when no value could be obtained for a variable or alias."""


class NoChoiceWasAvailable(ResolverError):
    """There was nothing to choose from for a variable."""

    def __init__(self, identifier: Identifier) -> None:
        super().__init__(f"no choice is available for var {identifier}")
        self.identifier = identifier


class DynamicResolveFailure(ResolverError):
    """Running the command that provides choices failed."""

    def __init__(self, identifier: Identifier, error: BaseException) -> None:
        super().__init__(
            f"an error happened when gathering choices for identifier {identifier}\n-> {error}"
        )
        self.identifier = identifier
        self.error = error


class DynamicResolveEmpty(ResolverError):
    """The command that provides choices printed nothing."""

    def __init__(self, identifier: Identifier, command: str, stderr: str) -> None:
        super().__init__(
            f"gathering choices for {identifier} failed because the command\n"
            f"   {command} \n"
            f"   returned empty content on stdout. stderr content was \n {stderr}"
        )
        self.identifier = identifier
        self.command = command
        self.stderr = stderr


class NoChoiceWasSelected(ResolverError):
    """The user selected nothing for a variable."""

    def __init__(self, identifier: Identifier) -> None:
        super().__init__(f"no choice was selected for var {identifier}")
        self.identifier = identifier


class NoInputWasProvided(ResolverError):
    """The user typed no value for a variable."""

    def __init__(self, identifier: Identifier, reason: str) -> None:
        super().__init__(f"no input for for var {identifier} because {reason}")
        self.identifier = identifier
        self.reason = reason


class IdentifierSelectionEmpty(ResolverError):
    """No alias was selected."""

    def __init__(self) -> None:
        super().__init__("selection empty")


class IdentifierSelectionInvalid(ResolverError):
    """The alias selection could not be used."""

    def __init__(self, error: BaseException) -> None:
        super().__init__("selection invalid.")
        self.error = error


class Resolver(ABC):
    """Obtains values for variables and lets the user pick an alias."""

    @abstractmethod
    def resolve_input(self, var: Var, prompt: str, ctx: ResolverContext) -> Choice:
        """Ask for a typed value for ``var``."""

    @abstractmethod
    def resolve_dynamic(self, var: Var, cmd: str, ctx: ResolverContext) -> list[Choice]:
        """Obtain the choices for ``var`` by running ``cmd``."""

    @abstractmethod
    def resolve_static(
        self, var: Var, choices: Iterable[Choice], ctx: ResolverContext
    ) -> list[Choice]:
        """Pick among ``choices`` for ``var``."""

    @abstractmethod
    def select_identifier(
        self, identifiers: Sequence[AliasAndDependencies], prompt: str
    ) -> AliasAndDependencies:
        """Pick one alias among ``identifiers``."""