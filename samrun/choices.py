"""A value a variable can take, with an optional description."""

from __future__ import annotations

from dataclasses import dataclass
from functools import total_ordering


@total_ordering
@dataclass(frozen=True)
class Choice:
    """A selectable value for a variable."""

    value: str
    desc: str | None = None

    @classmethod
    def from_value(cls, value: str) -> Choice:
        """Build a choice that has no description."""
        return cls(value, None)

    def _sort_key(self) -> tuple[str, bool, str]:
        return (self.value, self.desc is not None, self.desc or "")

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Choice):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __str__(self) -> str:
        return self.value