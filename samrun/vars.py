"""Variables that aliases reference, with static, command or input choices."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from samrun.choices import Choice
from samrun.commands import NamespaceUpdater
from samrun.dependencies import Dependencies
from samrun.identifiers import Identifier


def _required(data: Mapping[str, Any], key: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise ValueError(f"missing field {key!r}") from None


def _choice_from_mapping(data: Mapping[str, Any]) -> Choice:
    desc = data.get("desc")
    return Choice(str(_required(data, "value")), None if desc is None else str(desc))


@dataclass(eq=False)
class Var(Dependencies, NamespaceUpdater):
    """A variable whose value comes from a fixed list, a command or user input.

    Two variables are equal when their names are equal.
    """

    name: Identifier
    desc: str
    choices: list[Choice] = field(default_factory=list)
    shell_command: str | None = None
    prompt: str | None = None

    @classmethod
    def create(cls, name: str, desc: str, choices: list[Choice]) -> Var:
        """A variable with a static list of choices."""
        return cls(Identifier.new(name), desc, list(choices))

    @classmethod
    def from_command(cls, name: str, desc: str, command: str) -> Var:
        """A variable whose choices are the output lines of ``command``."""
        return cls(Identifier.new(name), desc, [], shell_command=command)

    @classmethod
    def from_input(cls, name: str, desc: str, prompt: str) -> Var:
        """A variable whose value is typed by the user after ``prompt``."""
        return cls(Identifier.new(name), desc, [], prompt=prompt)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Var:
        """Build a variable from a decoded configuration entry.

        Expects ``name`` and ``desc``, and optionally ``namespace``,
        ``choices`` (entries with ``value`` and ``desc``), ``from_command``
        and ``from_input``. Raises ValueError when a required key is missing.
        """
        namespace = data.get("namespace")
        identifier = Identifier(
            str(_required(data, "name")),
            None if namespace is None else str(namespace),
        )
        choices = [_choice_from_mapping(entry) for entry in data.get("choices") or []]
        command = data.get("from_command")
        prompt = data.get("from_input")
        return cls(
            identifier,
            str(_required(data, "desc")),
            choices,
            shell_command=None if command is None else str(command),
            prompt=None if prompt is None else str(prompt),
        )

    @property
    def identifier(self) -> Identifier:
        """The variable's identifier; same as ``name``."""
        return self.name

    @property
    def namespace(self) -> str | None:
        return self.name.namespace

    @property
    def command(self) -> str:
        return self.shell_command or ""

    def is_command(self) -> bool:
        """Whether the choices come from running a command."""
        return self.shell_command is not None

    def is_input(self) -> bool:
        """Whether the value is typed in by the user."""
        return self.prompt is not None

    def update_namespace(self, namespace: str) -> None:
        self.name = self.name.with_updated_namespace(namespace)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Var):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)