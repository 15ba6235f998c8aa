"""Process-wide environment abstraction.

Everything in hostenv that reads PATH or writes sourced variables goes
through an ``Environment`` so tests can swap the real process table for a
plain dict.
"""

from __future__ import annotations

import os
from typing import Dict, Iterator, Mapping, MutableMapping, Optional, Protocol


class Environment(Protocol):
    """Read/write view of an environment variable table."""

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def snapshot(self) -> Dict[str, str]: ...


class _MappingEnvironment:
    """Environment backed by a mutable mapping."""

    def __init__(self, table: MutableMapping[str, str]):
        self._table = table

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._table.get(key, default)

    def set(self, key: str, value: str) -> None:
        self._table[key] = value

    def snapshot(self) -> Dict[str, str]:
        return dict(self._table)

    def __contains__(self, key: object) -> bool:
        return key in self._table

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)


class ProcessEnvironment(_MappingEnvironment):
    """The real process environment (``os.environ``)."""

    def __init__(self) -> None:
        super().__init__(os.environ)

    def __repr__(self) -> str:
        return "<ProcessEnvironment>"


class InMemoryEnvironment(_MappingEnvironment):
    """An isolated environment held in a dict."""

    def __init__(self, initial: Optional[Mapping[str, str]] = None):
        super().__init__(dict(initial or {}))

    def __repr__(self) -> str:
        return f"<InMemoryEnvironment {len(self)} vars>"


def default_environment() -> Environment:
    """Return the environment used when callers do not inject one."""
    return ProcessEnvironment()


def resolve_environment(environment: Optional[Environment] = None) -> Environment:
    """Return ``environment``, or the process environment when it is None.

    An empty environment is a valid injection and is kept as is.
    """
    if environment is not None:
        return environment
    return default_environment()
