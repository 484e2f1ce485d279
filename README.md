# samrun

`samrun` is a library for shell aliases whose pieces are variables. It
works out the order in which those variables must be resolved, gathers
a value for each one and produces the final commands.

An alias is a command template such as

    ls -l {{ directory }} | grep {{ pattern }}

Each `{{ ... }}` names a variable. A variable either offers a fixed list
of choices, builds its choices from the output of another command
(which may itself use variables), or asks for free input. Names may
carry a namespace, written `namespace::name`.

The package needs nothing beyond the standard library. The `test` extra
pulls in pytest.

## Building blocks

Identifiers (`samrun.identifiers`) name aliases and variables:

```python
from samrun.identifiers import Identifier

ident = Identifier.from_str("dirs::list")
print(ident)   # dirs::list

Identifier.parse("ls -l {{ location }} | grep {{pattern}}")
# [Identifier(name='location', namespace=None), Identifier(name='pattern', namespace=None)]
```

Aliases (`samrun.aliases`), variables (`samrun.vars`) and choices
(`samrun.choices`) are plain objects. They can also be built from
already decoded mappings with `Alias.from_mapping` and
`Var.from_mapping`.

```python
from samrun.aliases import Alias
from samrun.choices import Choice
from samrun.vars import Var

greet = Alias.create("greet", "say hello", "echo hello {{ name }}")
name = Var.create("name", "who to greet", [Choice.from_value("world")])
listing = Var.from_command("listing", "files", "ls {{ directory }}")
answer = Var.from_input("answer", "free text", "type something")
```

Once every variable has a value, an alias becomes a `ResolvedAlias`:

```python
resolved = greet.with_choices({Identifier.new("name"): [Choice.from_value("world")]})
resolved.commands                        # ['echo hello world']
resolved.choice(Identifier.new("name"))  # [Choice(value='world', desc=None)]
```

A variable with several choices yields one command per choice. A
missing choice raises `samrun.dependencies.MissingChoicesForVar`.

`samrun.commands` also finds the environment variables a command uses
(`extract_env_vars`, `unset_env_vars`) and the programs it starts
(`extract_programs_from_command`, `programs_used`).

## Resolving variables

`samrun.resolution.execution_sequence_for_dependencies` orders the
variables an alias needs so that each one comes after the variables it
depends on. It raises `MissingDependencies` listing every variable that
is not defined.

`choices_for_execution_sequence` walks that order. It takes preset
defaults where they exist and otherwise asks a resolver.

A resolver is a subclass of `samrun.resolver.Resolver`. It implements:

- `resolve_input`
- `resolve_dynamic`
- `resolve_static`
- `select_identifier`

`samrun.mocks.StaticResolver` answers from fixed tables.
`VarsCollectionMock` and `VarsDefaultValuesMock` hold variables and
defaults in dictionaries.

## The engine

`samrun.engine.SamEngine` ties it together. It runs either a named alias
(`ExecuteAlias`) or lets the resolver pick one (`ChooseAndExecuteAlias`).
It then resolves the variables, records the resolved alias in a
`SamHistory` and hands it to a `SamExecutor`.

`samrun.fakes` provides in-memory pieces:

- `SilentLogger`
- `LogExecutor`, which records instead of running
- `InMemoryHistory`
- `StaticAliasRepository`

```python
from samrun.engine import ExecuteAlias, SamEngine
from samrun.fakes import InMemoryHistory, LogExecutor, SilentLogger, StaticAliasRepository
from samrun.mocks import StaticResolver, VarsCollectionMock, VarsDefaultValuesMock

executor = LogExecutor()
engine = SamEngine(
    resolver=StaticResolver(static_res={name.name: [Choice.from_value("world")]}),
    aliases=StaticAliasRepository([greet]),
    vars=VarsCollectionMock({name.name: name}),
    defaults=VarsDefaultValuesMock(),
    logger=SilentLogger(),
    history=InMemoryHistory(),
    executor=executor,
)
engine.run(ExecuteAlias(greet.identifier))   # 0
executor.commands[0][0].commands             # ['echo hello world']
```

`samrun.logger.FileLogger` is a `SamLogger` that writes what the engine
does as `logging` info records.

## Configuration

`samrun.settings.AppSettings.load()` reads `.sam_rc.toml` from the
current directory, falling back to the home directory.
`AppSettings.load_from(path)` reads a given file, and
`AppSettings.from_toml(text)` parses content directly.

The file holds these keys:

- `root_dir`: the directories searched by `aliases_files()` and
  `vars_files()` for `aliases.yaml`/`aliases.yml` and
  `vars.yaml`/`vars.yml`
- `ttl`: the cache lifetime in seconds
- any other key: an environment variable, returned by `variables()`

Loading also requires `~/.cache/` and `~/.local/share/sam/` to exist.
`load_with_cli` applies the options of a `CLISettings` on top.

`samrun.config_engine.ConfigEngine` checks lists of aliases and
variables. It reports environment variables that are referenced but
defined nowhere, and programs that cannot be found on the `PATH`.

## Command-line requests

`samrun.cli.make_cli_request` turns an argument list, without the
program name, into a `CLIRequest`:

```python
from samrun.cli import make_cli_request

request = make_cli_request(["alias", "ns::my_alias", "-cns::var=value"])
request.command    # ExecuteAlias(alias=Identifier(name='my_alias', namespace='ns'))
request.settings.default_choices
```

Choices given with `-c namespace::var=value` become defaults for those
variables. A choice without a namespace, or one that is not of the form
`name=value`, raises a `CLIError`.

## What the package does not do

- It installs no command. It parses command lines into requests, but
  nothing here dispatches a request.
- It has no executor that runs commands through a shell. Supply your
  own `SamExecutor`; the only one included, `LogExecutor`, records
  what it is given.
- It has no interactive resolver or fuzzy picker. Supply your own
  `Resolver`.
- It does not read alias or variable files. `aliases_files()` and
  `vars_files()` find them; turning their decoded contents into objects
  is left to `Alias.from_mapping` and `Var.from_mapping`.
- It keeps no persistent history, command-output cache or session
  storage; `InMemoryHistory` lives only as long as the process.