import pytest

from samrun.choices import Choice
from samrun.cli import (
    CacheCommand,
    CLIRequest,
    CLISettings,
    ConfigCommand,
    HistoryCommand,
    MalformedChoice,
    MalformedSessionAssignment,
    MissingAliasIdentifier,
    MissingNamespaceForChoice,
    SessionCommand,
    SessionSet,
    make_cli_request,
    parse_alias,
    parse_choice,
    parse_default_choices,
    parse_session_assignment,
    read_cli_request,
)
from samrun.engine import ChooseAndExecuteAlias, ExecuteAlias
from samrun.identifiers import Identifier


def _expected_defaults():
    return {
        Identifier.with_namespace("some_choice", "some_ns"): [Choice.from_value("value")],
        Identifier.with_namespace("some_other_choice", "some_ns"): [Choice.from_value("value2")],
    }


def test_alias_subcommand():
    request = make_cli_request(
        [
            "alias",
            "some_namespace::some_alias",
            "-csome_ns::some_choice=value",
            "-csome_ns::some_other_choice=value2",
        ]
    )
    expected = CLIRequest(
        command=ExecuteAlias(alias=Identifier.with_namespace("some_alias", "some_namespace")),
        settings=CLISettings(dry=False, silent=False, no_cache=False, default_choices=_expected_defaults()),
    )
    assert request == expected


def test_no_subcommand():
    request = make_cli_request(
        ["-csome_ns::some_choice=value", "-csome_ns::some_other_choice=value2"]
    )
    expected = CLIRequest(
        command=ChooseAndExecuteAlias(),
        settings=CLISettings(dry=False, silent=False, no_cache=False, default_choices=_expected_defaults()),
    )
    assert request == expected


def test_run_subcommand():
    request = make_cli_request(
        ["run", "-csome_ns::some_choice=value", "-csome_ns::some_other_choice=value2"]
    )
    expected = CLIRequest(
        command=ChooseAndExecuteAlias(),
        settings=CLISettings(dry=False, silent=False, no_cache=False, default_choices=_expected_defaults()),
    )
    assert request == expected


def test_flags():
    request = make_cli_request(["--dry", "-s", "-n", "history"])
    assert request.settings.dry is True
    assert request.settings.silent is True
    assert request.settings.no_cache is True
    assert request.command == HistoryCommand.INTERACT_WITH_HISTORY


@pytest.mark.parametrize(
    "argv, command",
    [
        (["run-last"], HistoryCommand.EXECUTE_LAST_EXECUTED_ALIAS),
        (["%"], HistoryCommand.EXECUTE_LAST_EXECUTED_ALIAS),
        (["show-last"], HistoryCommand.DISPLAY_LAST_EXECUTED_ALIAS),
        (["s"], HistoryCommand.DISPLAY_LAST_EXECUTED_ALIAS),
        (["check-config"], ConfigCommand.ALL),
        (["cache-clear"], CacheCommand.CLEAR),
        (["cache-keys"], CacheCommand.PRINT_KEYS),
        (["cache-keys-delete"], CacheCommand.DELETE_ENTRIES),
        (["session-clear"], SessionCommand.CLEAR),
        (["session-list"], SessionCommand.LIST),
    ],
)
def test_simple_subcommands(argv, command):
    assert make_cli_request(argv).command == command


def test_session_set():
    request = make_cli_request(["session-set", "ns::var=value"])
    assert request.command == SessionSet(var_name="ns::var", choice_value="value")


def test_session_set_malformed():
    with pytest.raises(MalformedSessionAssignment):
        make_cli_request(["session-set", "novalue"])


def test_choice_without_namespace_rejected():
    with pytest.raises(MissingNamespaceForChoice):
        make_cli_request(["-cvar=value"])


def test_read_cli_request_with_argv():
    request = read_cli_request(["alias", "ns::x"])
    assert request.command == ExecuteAlias(alias=Identifier.with_namespace("x", "ns"))
    assert request.settings.default_choices == {}


def test_parse_choice():
    identifier, choice = parse_choice("some_ns::some_choice=value")
    assert identifier == Identifier.with_namespace("some_choice", "some_ns")
    assert choice == Choice.from_value("value")


@pytest.mark.parametrize("text", ["ns::a=b=c", "ns::a"])
def test_parse_choice_malformed(text):
    with pytest.raises(MalformedChoice):
        parse_choice(text)


def test_parse_choice_missing_namespace():
    with pytest.raises(MissingNamespaceForChoice) as info:
        parse_choice("var=value")
    assert info.value.identifier == Identifier("var")


def test_parse_default_choices_none():
    assert parse_default_choices(None) == {}


def test_parse_default_choices_last_wins():
    result = parse_default_choices(["ns::a=1", "ns::a=2"])
    assert result == {Identifier("a", "ns"): [Choice.from_value("2")]}


def test_parse_alias():
    assert parse_alias("ns::name") == Identifier("name", "ns")
    with pytest.raises(MissingAliasIdentifier):
        parse_alias(None)


def test_parse_session_assignment():
    assert parse_session_assignment("var=value") == ("var", "value")
    with pytest.raises(MalformedSessionAssignment):
        parse_session_assignment("a=b=c")