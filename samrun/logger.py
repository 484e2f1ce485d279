"""A logger that records engine activity through the logging module."""

from __future__ import annotations

import logging

from samrun.aliases import Alias
from samrun.engine import SamLogger

_log = logging.getLogger(__name__)


class FileLogger(SamLogger):
    """Writes what the engine does as info records."""

    def final_command(self, alias: Alias, final_command: object) -> None:
        _log.info(
            "[SAM][ alias='%s::%s'] Running final command: '%s'",
            alias.namespace or "",
            alias.name,
            final_command,
        )

    def command(self, var: object, cmd: str) -> None:
        _log.info("[SAM][ var = '%s' ] Running: '%s'", var, cmd)

    def choice(self, var: object, choice: object) -> None:
        _log.info("[SAM][ var = '%s' ] Choice was: '%s'", var, choice)

    def alias(self, alias: Alias) -> None:
        _log.info("[SAM][ alias = '%s::%s' ]", alias.namespace or "", alias.name)