"""Application settings read from the ``.sam_rc.toml`` configuration file."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Any, Iterator, Mapping, Sequence

from samrun.choices import Choice
from samrun.cli import CLISettings
from samrun.identifiers import Identifier

CONFIG_FILE_NAME = ".sam_rc.toml"
HISTORY_DIR = ".local/share/sam/"
CACHE_DIR = ".cache/"

_ALIASES_FILE_NAMES = frozenset({"aliases.yaml", "aliases.yml"})
_VARS_FILE_NAMES = frozenset({"vars.yaml", "vars.yml"})


class SettingsError(Exception):
    """Raised when the settings cannot be loaded."""


class CantFindHomeDirectory(SettingsError):
    """The home directory of the current user is unknown."""

    def __init__(self) -> None:
        super().__init__("we were unable to locate the home directory for the current user")


class CantFindCacheDirectory(SettingsError):
    """The cache directory of the current user does not exist."""

    def __init__(self) -> None:
        super().__init__("we were unable to locate the cache directory for the current user")


class CantFindCurrentDirectory(SettingsError):
    """The current working directory is unavailable."""

    def __init__(self) -> None:
        super().__init__("we were unable to locate the current directory for the current user")


class CantFindHistoryDirectory(SettingsError):
    """The history directory of the current user does not exist."""

    def __init__(self, directory: str) -> None:
        super().__init__(
            "we were unable to locate the history directory for the current user, "
            f"make sure {directory} exists"
        )
        self.directory = directory


class CantDeserialize(SettingsError):
    """The configuration file is not valid."""

    def __init__(self, error: object) -> None:
        super().__init__(f"got deserialize the configuration file because\n-> {error}")
        self.error = error


class CantReadConfigFile(SettingsError):
    """A configuration file could not be read."""

    def __init__(self, error: OSError) -> None:
        super().__init__(f"can't read the configuration file because\n-> {error}")
        self.error = error


def _home_dir() -> Path:
    try:
        return Path.home()
    except (RuntimeError, KeyError):
        raise CantFindHomeDirectory() from None


def _path_with_suffix(relative: str, file_name: str, error: SettingsError) -> Path:
    directory = _home_dir() / relative
    if not directory.exists():
        raise error
    return directory / file_name


def _walk_dir(root: Path) -> list[Path]:
    if not root.is_dir():
        return []
    return sorted(
        Path(directory) / name
        for directory, _subdirs, files in os.walk(root)
        for name in files
    )


@dataclass
class AppSettings:
    """Where aliases live, how long cached outputs last and the run options."""

    root_dir: list[Path] = field(default_factory=list)
    ttl_seconds: int = 0
    env_variables: dict[str, str] = field(default_factory=dict)
    cache_dir: Path = field(default_factory=Path)
    history_file: Path = field(default_factory=Path)
    dry: bool = False
    silent: bool = False
    no_cache: bool = False
    defaults: dict[Identifier, list[Choice]] = field(default_factory=dict)

    @classmethod
    def from_toml(cls, text: str) -> AppSettings:
        """Parse the configuration file content.

        ``root_dir`` and ``ttl`` are required; every other key is an
        environment variable and must hold a string. Raises CantDeserialize.
        """
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as error:
            raise CantDeserialize(error) from error
        return cls._from_data(data)

    @classmethod
    def _from_data(cls, data: Mapping[str, Any]) -> AppSettings:
        remaining = dict(data)
        if "root_dir" not in remaining:
            raise CantDeserialize("missing field `root_dir`")
        if "ttl" not in remaining:
            raise CantDeserialize("missing field `ttl`")
        roots = remaining.pop("root_dir")
        ttl = remaining.pop("ttl")
        if not isinstance(roots, list) or not all(isinstance(r, str) for r in roots):
            raise CantDeserialize("`root_dir` must be a list of paths")
        if isinstance(ttl, bool) or not isinstance(ttl, int) or ttl < 0:
            raise CantDeserialize("`ttl` must be a non-negative integer")
        for key, value in remaining.items():
            if not isinstance(value, str):
                raise CantDeserialize(f"variable `{key}` must be a string")
        return cls(root_dir=[Path(r) for r in roots], ttl_seconds=ttl, env_variables=remaining)

    @classmethod
    def _read_config(cls, path: Path) -> AppSettings:
        if not path.exists():
            raise CantReadConfigFile(FileNotFoundError(f"{path} does not exist"))
        if not path.is_file():
            raise CantReadConfigFile(IsADirectoryError(f"{path} is not a file"))
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as error:
            raise CantReadConfigFile(error) from error
        return cls.from_toml(content)

    @staticmethod
    def _user_dirs() -> tuple[Path, Path]:
        cache_dir = _path_with_suffix(CACHE_DIR, "sam", CantFindCacheDirectory())
        history_file = _path_with_suffix(
            HISTORY_DIR, "history", CantFindHistoryDirectory(HISTORY_DIR)
        )
        return cache_dir, history_file

    def _validate(self) -> AppSettings:
        for root in self.root_dir:
            for path in _walk_dir(root):
                if not path.exists():
                    raise CantReadConfigFile(FileNotFoundError(f"{path} does not exist"))
                if not os.access(path, os.R_OK):
                    raise CantReadConfigFile(PermissionError(f"{path} is not readable"))
        return self

    @classmethod
    def load_from(cls, path: str | os.PathLike[str]) -> AppSettings:
        """Load the settings from the configuration file at ``path``."""
        cache_dir, history_file = cls._user_dirs()
        settings = cls._read_config(Path(path))._validate()
        settings.cache_dir = cache_dir
        settings.history_file = history_file
        return settings

    @classmethod
    def load(cls) -> AppSettings:
        """Load the configuration of the current directory, else of the home directory."""
        home_config = _home_dir() / CONFIG_FILE_NAME
        try:
            current_config: Path | None = Path.cwd() / CONFIG_FILE_NAME
        except OSError:
            current_config = None
        cache_dir, history_file = cls._user_dirs()

        settings: AppSettings | None = None
        if current_config is not None:
            try:
                settings = cls._read_config(current_config)
            except SettingsError:
                settings = None
        if settings is None:
            settings = cls._read_config(home_config)
        settings._validate()
        settings.cache_dir = cache_dir
        settings.history_file = history_file
        return settings

    @property
    def ttl(self) -> timedelta:
        """How long cached command outputs stay valid."""
        return timedelta(seconds=self.ttl_seconds)

    def merge_session_defaults(
        self, session_defaults: Mapping[Identifier, Sequence[Choice]]
    ) -> None:
        """Add session defaults for variables that have no default yet."""
        for identifier, choices in session_defaults.items():
            self.defaults.setdefault(identifier, list(choices))

    def apply_cli(self, cli_settings: CLISettings) -> None:
        """Override the run options with those given on the command line."""
        self.dry = cli_settings.dry
        self.silent = cli_settings.silent
        self.no_cache = cli_settings.no_cache
        self.defaults = {key: list(values) for key, values in cli_settings.default_choices.items()}

    def variables(self) -> dict[str, str]:
        """A copy of the environment variables set in the configuration."""
        return dict(self.env_variables)

    def _sam_files(self) -> Iterator[Path]:
        for root in self.root_dir:
            yield from _walk_dir(root)

    def aliases_files(self) -> Iterator[Path]:
        """Every ``aliases.yaml`` or ``aliases.yml`` below the root directories."""
        return (f for f in self._sam_files() if f.name in _ALIASES_FILE_NAMES)

    def vars_files(self) -> Iterator[Path]:
        """Every ``vars.yaml`` or ``vars.yml`` below the root directories."""
        return (f for f in self._sam_files() if f.name in _VARS_FILE_NAMES)


def load_with_cli(cli_settings: CLISettings | None = None) -> AppSettings:
    """Load the settings and apply the command line options when given."""
    settings = AppSettings.load()
    if cli_settings is not None:
        settings.apply_cli(cli_settings)
    return settings