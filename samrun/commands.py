"""Commands, their variable dependencies, environment variables and programs."""

from __future__ import annotations

import os
import re
import shlex
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable

from samrun.identifiers import Identifier

# Matches $ENV_VAR39, $(ENV_VAR39) and ${ENV_VAR39}.
_ENV_VAR_RE = re.compile(r"\$[\{\(]?(?P<env_var>[a-zA-Z0-9_]+)[\}\)]?")
_SUBCMD_RE = re.compile(r"`+(?P<sub_cmd>[a-zA-Z0-9_]+)`+")
_SUBCMD_NESTED_RE = re.compile(r"[\"']+(?P<sub_nest>[^'\"]+)[\"']+")


class Command(ABC):
    """Something holding a shell command text inside a namespace."""

    @property
    @abstractmethod
    def command(self) -> str:
        """The command text."""

    @property
    @abstractmethod
    def namespace(self) -> str | None:
        """The namespace the command belongs to."""

    def dependencies(self) -> list[Identifier]:
        """Variables referenced by the command."""
        return Identifier.parse(self.command, self.namespace)

    def env_vars(self) -> list[str]:
        """Environment variables referenced by the command."""
        return extract_env_vars(self.command)


class NamespaceUpdater(ABC):
    """Something whose namespace can be changed."""

    @abstractmethod
    def update_namespace(self, namespace: str) -> None:
        """Move this object into ``namespace``."""

    def update_from_path(self, path: str | os.PathLike[str]) -> bool:
        """Use the name of the directory holding ``path`` as namespace.

        Returns whether a namespace could be derived.
        """
        directory = Path(path).parent.name
        if not directory:
            return False
        self.update_namespace(directory)
        return True


def extract_env_vars(text: str) -> list[str]:
    """Names of environment variables referenced in ``text``, in order."""
    return [match.group("env_var") for match in _ENV_VAR_RE.finditer(text)]


def unset_env_vars(commands: Iterable[Command]) -> set[str]:
    """Environment variables used by ``commands`` that are not set."""
    used = {name for command in commands for name in command.env_vars()}
    return used - set(os.environ)


def programs_used(commands: Iterable[Command]) -> set[str]:
    """Programs invoked by ``commands``."""
    return {
        program
        for command in commands
        for program in extract_programs_from_command(command.command)
    }


def _first_word(segment: str) -> str | None:
    try:
        words = shlex.split(segment)
    except ValueError:
        return None
    return words[0] if words else None


def extract_programs_from_command(cmd: str) -> list[str]:
    """Programs started by a shell command line, pipelines and backticks included."""
    cleaned = _SUBCMD_NESTED_RE.sub("", cmd)
    segments = [
        piece
        for and_part in cleaned.split("&&")
        for or_part in and_part.split("||")
        for piece in or_part.split("|")
    ]
    segments.extend(match.group("sub_cmd") for match in _SUBCMD_RE.finditer(cleaned))
    return [word for word in map(_first_word, segments) if word is not None]