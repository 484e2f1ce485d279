import pytest

from samrun.aliases import Alias
from samrun.choices import Choice
from samrun.dependencies import MissingChoicesForVar
from samrun.identifiers import Identifier
from samrun.mocks import StaticResolver, VarsCollectionMock, VarsDefaultValuesMock
from samrun.resolution import (
    MissingDependencies,
    NoChoiceForVar,
    UnknownVarsDefaults,
    choice_for_var,
    choices_for_execution_sequence,
    execution_sequence_for_dependencies,
    resolve_choice_for_var,
)
from samrun.resolver import DynamicResolveEmpty, Resolver, ResolverContext
from samrun.identifiers import Identifiers
from samrun.vars import Var

VAR_USE_LISTING_NAME = Identifier.new("use_listing")
VAR_LISTING_NAME = Identifier.new("listing")
VAR_DIRECTORY_NAME = Identifier.new("directory")
VAR_PATTERN_NAME = Identifier.with_namespace("pattern", "ns")
ALIAS_GREP_DIR_NAME = Identifier.with_namespace("grep", "dirs")

VAR_DIRECTORY_CHOICE_1 = Choice("/var/log", "logs directory")
VAR_DIRECTORY_CHOICE_2 = Choice("/home", "users directory")
VAR_PATTERN_CHOICE_1 = Choice("service", "service pattern")
VAR_PATTERN_CHOICE_2 = Choice("ryad", "users ryad pattern")


def var_use_listing():
    return Var(
        VAR_USE_LISTING_NAME,
        "output element in {{listing}} and discards everything that matches {{pattern}}",
        [],
        shell_command="cat {{listing}} |grep -v {{ns::pattern}}",
    )


def var_listing():
    return Var(
        VAR_LISTING_NAME,
        "list element in {{directory}} and discards everything that matches {{pattern}}",
        [],
        shell_command="ls -l {{directory}} |grep -v {{ ns::pattern }}",
    )


def var_directory():
    return Var(
        VAR_DIRECTORY_NAME,
        "A list of safe directory paths where to perform commands.",
        [VAR_DIRECTORY_CHOICE_1, VAR_DIRECTORY_CHOICE_2],
    )


def var_pattern():
    return Var(
        VAR_PATTERN_NAME,
        "A black list of patterns",
        [VAR_PATTERN_CHOICE_1, VAR_PATTERN_CHOICE_2],
    )


def alias_grep_dir():
    return Alias(ALIAS_GREP_DIR_NAME, "some desc", "[[ dirs::list ]]|grep {{ pattern }}")


def full_repo():
    return VarsCollectionMock({v.name: v for v in (var_directory(), var_listing(), var_pattern())})


def command_final():
    return f"ls -l {VAR_DIRECTORY_CHOICE_1.value} |grep -v {VAR_PATTERN_CHOICE_2.value}"


def static_res():
    return {
        VAR_DIRECTORY_NAME: [VAR_DIRECTORY_CHOICE_1],
        VAR_PATTERN_NAME: [VAR_PATTERN_CHOICE_2],
    }


def make_ctx(choices=None):
    alias = alias_grep_dir()
    return ResolverContext(alias, alias.full_name(), dict(choices or {}), [])


def test_resolve():
    choices = static_res()
    choice_final = Choice.from_value("final_value")
    resolver = StaticResolver(
        ALIAS_GREP_DIR_NAME, {command_final(): [choice_final]}, static_res()
    )
    ctx = make_ctx(choices)
    result1 = resolve_choice_for_var(resolver, var_listing(), choices, ctx)
    assert result1[0] == choice_final
    result2 = resolve_choice_for_var(resolver, var_pattern(), choices, ctx)
    assert result2[0] == VAR_PATTERN_CHOICE_2


def test_var_repository_execution_sequence():
    repo = full_repo()
    execution_sequence_for_dependencies(repo, var_listing())
    seq = execution_sequence_for_dependencies(repo, var_use_listing())
    assert seq.identifiers() == [VAR_DIRECTORY_NAME, VAR_PATTERN_NAME, VAR_LISTING_NAME]


def test_var_repository_choices():
    choice_final = Choice.from_value("final_value")
    resolver = StaticResolver(None, {command_final(): [choice_final]}, static_res())
    repo = full_repo()
    seq = execution_sequence_for_dependencies(repo, var_use_listing())
    result = choices_for_execution_sequence(
        alias_grep_dir(), repo, VarsDefaultValuesMock(), resolver, seq
    )
    expected = [
        (VAR_PATTERN_NAME, [VAR_PATTERN_CHOICE_2]),
        (VAR_LISTING_NAME, [choice_final]),
        (VAR_DIRECTORY_NAME, [VAR_DIRECTORY_CHOICE_1]),
    ]
    assert sorted(result, key=lambda item: item[0]) == sorted(expected, key=lambda item: item[0])


def test_execution_sequence_for_var_without_deps_is_empty():
    assert execution_sequence_for_dependencies(full_repo(), var_directory()).identifiers() == []


def test_execution_sequence_missing_dependency():
    repo = VarsCollectionMock({VAR_LISTING_NAME: var_listing()})
    with pytest.raises(MissingDependencies) as info:
        execution_sequence_for_dependencies(repo, var_use_listing())
    assert set(info.value.identifiers) == {VAR_PATTERN_NAME, VAR_DIRECTORY_NAME}


def test_choices_for_unknown_var_in_sequence():
    from samrun.dependencies import ExecutionSequence

    with pytest.raises(MissingDependencies) as info:
        choices_for_execution_sequence(
            alias_grep_dir(),
            VarsCollectionMock(),
            VarsDefaultValuesMock(),
            StaticResolver(),
            ExecutionSequence([VAR_DIRECTORY_NAME]),
        )
    assert list(info.value.identifiers) == [VAR_DIRECTORY_NAME]


def test_input_var_uses_resolve_input():
    var = Var.from_input("answer", "desc", "type it")
    resolver = StaticResolver(None, {}, {var.name: [Choice.from_value("typed")]})
    assert resolve_choice_for_var(resolver, var, {}, make_ctx()) == [Choice.from_value("typed")]


def test_empty_dynamic_result_raises():
    class EmptyResolver(StaticResolver):
        def resolve_dynamic(self, var, cmd, ctx):
            return []

    var = Var.from_command("listing", "desc", "ls")
    with pytest.raises(DynamicResolveEmpty):
        resolve_choice_for_var(EmptyResolver(), var, {}, make_ctx())


def test_multiple_dynamic_results_go_through_static():
    seen = []

    class ManyResolver(Resolver):
        def resolve_input(self, var, prompt, ctx):
            raise AssertionError

        def resolve_dynamic(self, var, cmd, ctx):
            return [Choice.from_value("a"), Choice.from_value("b")]

        def resolve_static(self, var, choices, ctx):
            values = list(choices)
            seen.extend(values)
            return values[-1:]

        def select_identifier(self, identifiers, prompt):
            raise AssertionError

    var = Var.from_command("listing", "desc", "ls")
    result = resolve_choice_for_var(ManyResolver(), var, {}, make_ctx())
    assert result == [Choice.from_value("b")]
    assert seen == [Choice.from_value("a"), Choice.from_value("b")]


def test_choice_for_var_wraps_resolver_errors():
    with pytest.raises(NoChoiceForVar) as info:
        choice_for_var(StaticResolver(), var_pattern(), {}, make_ctx())
    assert info.value.var_name == VAR_PATTERN_NAME


def test_choice_for_var_wraps_missing_substitution():
    with pytest.raises(NoChoiceForVar) as info:
        choice_for_var(StaticResolver(), var_listing(), {}, make_ctx())
    assert isinstance(info.value.error, MissingChoicesForVar)
    assert info.value.error.identifier == VAR_DIRECTORY_NAME


def test_unknown_vars_defaults_message():
    error = UnknownVarsDefaults(Identifiers([VAR_DIRECTORY_NAME]))
    assert str(error).startswith("the provided variables are unknown:\n")
    assert "- directory" in str(error)