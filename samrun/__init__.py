"""Shell aliases with variables: identifiers, dependency ordering, choice resolution and an alias engine."""

__version__ = "1.3.0"