"""Argument carrier and short-circuit sentinel.

A step controls the rest of the chain through the first value it yields:

- ``STOP`` (``False``) halts forward progress and skips the destination
- an ``Arguments`` instance replaces the arguments seen by inner steps
- anything else leaves the chain untouched
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any

STOP = False


def is_stop(value: Any) -> bool:
    """Return True only for the literal ``False`` sentinel."""
    return value is STOP


@dataclass(frozen=True, init=False)
class Arguments:
    """Immutable ordered bundle of positional arguments.

    Attributes:
        values: The arguments, in the order they are passed on
    """

    values: tuple

    def __init__(self, *values: Any):
        object.__setattr__(self, "values", tuple(values))

    @classmethod
    def of(cls, values: Iterable) -> "Arguments":
        return cls(*values)

    def __iter__(self) -> Iterator:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def to_list(self) -> list:
        return list(self.values)
