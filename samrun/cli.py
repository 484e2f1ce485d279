"""Command line parsing into a request for one of the engines."""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterable, Sequence, Union

from samrun.choices import Choice
from samrun.engine import ChooseAndExecuteAlias, ExecuteAlias, SamCommand
from samrun.identifiers import Identifier

VERSION = "1.3.0"

ABOUT = "sam lets you difine custom aliases and search them using fuzzy search."
ABOUT_SUB_RUN = "let's you select and alias then run it"
ABOUT_SUB_SHOW_HISTORY = "displays the last commands that you ran"
ABOUT_SUB_RUN_LAST = "runs the last command that was run again. shortcut is `sam %`"
ABOUT_SUB_SHOW_LAST = "runs the last command that was run again. shortcut is `sam s`"
ABOUT_SUB_CHECK_CONFIG = "checks your configuration files"
ABOUT_SUB_CACHE_CLEAR = "clears the cache for vars 'from_command' outputs"
ABOUT_SUB_CACHE_KEYS = "lists all the cache keys"
ABOUT_SUB_CACHE_DELETE = "explore the content of the command cache in order to delete entries"
ABOUT_SUB_ALIAS = "run's a provided alias"
ABOUT_SUB_SESSION_SET = "set a default value for a variable in the current session"
ABOUT_SUB_SESSION_CLEAR = "clear all session defaults for the current session"
ABOUT_SUB_SESSION_LIST = "list all session defaults for the current session"

_CHOICES_HELP = "provide choices for vars. example '-c ns::var=choice'"
_SUBCOMMAND_ALIASES = {"%": "run-last", "s": "show-last"}


class HistoryCommand(Enum):
    """Operations on the history of executed aliases."""

    INTERACT_WITH_HISTORY = auto()
    EXECUTE_LAST_EXECUTED_ALIAS = auto()
    DISPLAY_LAST_EXECUTED_ALIAS = auto()


class CacheCommand(Enum):
    """Operations on the cache of command outputs."""

    PRINT_KEYS = auto()
    DELETE_ENTRIES = auto()
    CLEAR = auto()


class ConfigCommand(Enum):
    """Checks run against the configuration."""

    CHECK_UNSET_ENV_VARS = auto()
    CHECK_UNAVAILABLE_PROGRAMS = auto()
    ALL = auto()


class SessionCommand(Enum):
    """Operations on the defaults of the current session."""

    CLEAR = auto()
    LIST = auto()


@dataclass(frozen=True)
class SessionSet:
    """Set a session default for a variable."""

    var_name: str
    choice_value: str


SubCommand = Union[SamCommand, HistoryCommand, CacheCommand, ConfigCommand, SessionCommand, SessionSet]


@dataclass
class CLISettings:
    """Flags and preset choices given on the command line."""

    dry: bool = False
    silent: bool = False
    no_cache: bool = False
    default_choices: dict[Identifier, list[Choice]] = field(default_factory=dict)


@dataclass
class CLIRequest:
    """The command to run and the settings to run it with."""

    command: SubCommand
    settings: CLISettings


class CLIError(Exception):
    """Raised when the command line arguments cannot be used."""


class MissingAliasIdentifier(CLIError):
    """No alias identifier was given."""

    def __init__(self) -> None:
        super().__init__("the alias identifier that was provided does not exist")


class MissingNamespaceForChoice(CLIError):
    """A preset choice names a variable without namespace."""

    def __init__(self, identifier: Identifier, text: str) -> None:
        super().__init__(
            f"The variable name '{identifier}' does not have a namespace "
            f"in this section of the command line '{text}'"
        )
        self.identifier = identifier
        self.text = text


class MalformedChoice(CLIError):
    """A preset choice is not of the form ``ns::var=choice``."""

    def __init__(self, text: str) -> None:
        super().__init__(f"malformed choice {text}, it should be -c namespace::var_name=choice")
        self.text = text


class MalformedSessionAssignment(CLIError):
    """A session assignment is not of the form ``var=value``."""

    def __init__(self, assignment: str) -> None:
        super().__init__(f"malformed session assignment {assignment}, it should be var=value")
        self.assignment = assignment


def _add_choices(parser: argparse.ArgumentParser, dest: str) -> None:
    parser.add_argument(
        "-c", "--choices", dest=dest, action="extend", nargs="+", metavar="CHOICE", help=_CHOICES_HELP
    )


def build_parser() -> argparse.ArgumentParser:
    """The argument parser of the ``sam`` command."""
    parser = argparse.ArgumentParser(prog="sam", description=ABOUT)
    parser.add_argument("--version", action="version", version=f"sam {VERSION}")
    parser.add_argument("-d", "--dry", action="store_true", help="dry run, don't execute the final command.")
    parser.add_argument(
        "-s", "--silent", action="store_true", help="don't cache the output of `from_command` vars."
    )
    parser.add_argument(
        "-n", "--no-cache", dest="no_cache", action="store_true", help="avoid relying of the vars cache."
    )
    _add_choices(parser, "choices")

    sub = parser.add_subparsers(dest="subcommand", metavar="SUBCOMMAND")
    run = sub.add_parser("run", help=ABOUT_SUB_RUN, description=ABOUT_SUB_RUN)
    _add_choices(run, "sub_choices")
    alias = sub.add_parser("alias", help=ABOUT_SUB_ALIAS, description=ABOUT_SUB_ALIAS)
    alias.add_argument("alias", help="the alias to run.")
    _add_choices(alias, "sub_choices")
    sub.add_parser("run-last", aliases=["%"], help=ABOUT_SUB_RUN_LAST)
    sub.add_parser("show-last", aliases=["s"], help=ABOUT_SUB_SHOW_LAST)
    sub.add_parser("history", help=ABOUT_SUB_SHOW_HISTORY)
    sub.add_parser("check-config", help=ABOUT_SUB_CHECK_CONFIG)
    sub.add_parser("cache-clear", help=ABOUT_SUB_CACHE_CLEAR)
    sub.add_parser("cache-keys", help=ABOUT_SUB_CACHE_KEYS)
    sub.add_parser("cache-keys-delete", help=ABOUT_SUB_CACHE_DELETE)
    session_set = sub.add_parser("session-set", help=ABOUT_SUB_SESSION_SET)
    session_set.add_argument("variable", help="the variable assignment in format 'var=value'")
    sub.add_parser("session-clear", help=ABOUT_SUB_SESSION_CLEAR)
    sub.add_parser("session-list", help=ABOUT_SUB_SESSION_LIST)
    return parser


_SIMPLE_COMMANDS: dict[str, SubCommand] = {
    "run-last": HistoryCommand.EXECUTE_LAST_EXECUTED_ALIAS,
    "show-last": HistoryCommand.DISPLAY_LAST_EXECUTED_ALIAS,
    "history": HistoryCommand.INTERACT_WITH_HISTORY,
    "check-config": ConfigCommand.ALL,
    "cache-clear": CacheCommand.CLEAR,
    "cache-keys": CacheCommand.PRINT_KEYS,
    "cache-keys-delete": CacheCommand.DELETE_ENTRIES,
    "session-clear": SessionCommand.CLEAR,
    "session-list": SessionCommand.LIST,
}


def make_cli_request(argv: Sequence[str]) -> CLIRequest:
    """Parse ``argv`` (without the program name) into a request.

    Raises CLIError for unusable values; argparse exits on invalid syntax.
    """
    args = build_parser().parse_args(list(argv))
    choice_values = args.choices or getattr(args, "sub_choices", None)
    settings = CLISettings(
        dry=args.dry,
        silent=args.silent,
        no_cache=args.no_cache,
        default_choices=parse_default_choices(choice_values),
    )

    name = _SUBCOMMAND_ALIASES.get(args.subcommand, args.subcommand)
    command: SubCommand
    if name == "alias":
        command = ExecuteAlias(alias=parse_alias(args.alias))
    elif name == "session-set":
        var_name, choice_value = parse_session_assignment(args.variable)
        command = SessionSet(var_name=var_name, choice_value=choice_value)
    elif name in _SIMPLE_COMMANDS:
        command = _SIMPLE_COMMANDS[name]
    else:
        command = ChooseAndExecuteAlias()
    return CLIRequest(command=command, settings=settings)


def read_cli_request(argv: Sequence[str] | None = None) -> CLIRequest:
    """Parse ``argv``, or the process arguments when it is None."""
    return make_cli_request(sys.argv[1:] if argv is None else argv)


def parse_alias(alias: str | None) -> Identifier:
    """The identifier named by ``alias``; raises MissingAliasIdentifier if None."""
    if alias is None:
        raise MissingAliasIdentifier()
    return Identifier.from_str(alias)


def parse_choice(text: str) -> tuple[Identifier, Choice]:
    """Parse ``ns::var=choice`` into the variable and its choice."""
    parts = text.split("=")
    if len(parts) != 2:
        raise MalformedChoice(text)
    identifier = Identifier.from_str(parts[0])
    if identifier.namespace is None:
        raise MissingNamespaceForChoice(identifier, text)
    return identifier, Choice(parts[1], None)


def parse_default_choices(values: Iterable[str] | None) -> dict[Identifier, list[Choice]]:
    """Parse every ``ns::var=choice`` into a mapping of preset choices."""
    defaults: dict[Identifier, list[Choice]] = {}
    for value in values or ():
        identifier, choice = parse_choice(value)
        defaults[identifier] = [choice]
    return defaults


def parse_session_assignment(assignment: str) -> tuple[str, str]:
    """Split ``var=value`` into the variable name and the value."""
    parts = assignment.split("=")
    if len(parts) != 2:
        raise MalformedSessionAssignment(assignment)
    return parts[0], parts[1]