"""Checks that the configured aliases and variables can run on this machine."""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from typing import Sequence

from samrun.aliases import Alias
from samrun.cli import ConfigCommand
from samrun.commands import programs_used, unset_env_vars
from samrun.vars import Var

_BOLD = "\x1b[1m"
_RED = "\x1b[38;5;1m"
_RESET = "\x1b[m"


def is_program_available(program: str) -> bool:
    """Whether ``program`` can be found on the PATH."""
    return shutil.which(program) is not None


@dataclass
class ConfigEngine:
    """Reports undefined environment variables and missing programs."""

    aliases: Sequence[Alias] = field(default_factory=list)
    vars: Sequence[Var] = field(default_factory=list)
    env_variables: dict[str, str] = field(default_factory=dict)

    def run(self, command: ConfigCommand) -> int:
        """Run the check ``command`` and return an exit code."""
        if command is ConfigCommand.CHECK_UNSET_ENV_VARS:
            return self.check_unset_env_vars()
        if command is ConfigCommand.CHECK_UNAVAILABLE_PROGRAMS:
            return self.check_unavailable_programs()
        if command is ConfigCommand.ALL:
            self.check_unavailable_programs()
            return self.check_unset_env_vars()
        raise ValueError(f"unknown config command {command!r}")

    def check_unset_env_vars(self) -> int:
        """Print environment variables that are used but defined nowhere.

        Returns 0 when none is missing and 1 otherwise.
        """
        used = unset_env_vars(self.aliases) | unset_env_vars(self.vars)
        missing = sorted(used - set(self.env_variables))
        if not missing:
            return 0
        print("Undifined environement variables:")
        for name in missing:
            print(f"- {_BOLD}{_RED}{name}{_RESET}")
        return 1

    def check_unavailable_programs(self) -> int:
        """Print programs used by the commands that are not installed; returns 1."""
        used = programs_used(self.aliases) | programs_used(self.vars)
        missing = sorted(program for program in used if not is_program_available(program))
        if missing:
            print("Missing programs:")
            for program in missing:
                print(f"- {_BOLD}{_RED}{program}{_RESET}")
        return 1