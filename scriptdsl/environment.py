"""Environment identity and the request-scoped "current environment".

Environments are plain named values; two environments with the same name are
the same environment. The current environment lives in a ``ContextVar`` so
each thread (and each asyncio task) sees its own value, defaulting to root.
"""

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Iterator, Optional, Union


@dataclass(frozen=True)
class Environment:
    name: str

    def __str__(self) -> str:
        return self.name

    @property
    def is_root(self) -> bool:
        return self == ROOT


ROOT = Environment("*root*")

EnvLike = Union[Environment, str, None]

_current: ContextVar[Optional[Environment]] = ContextVar("scriptdsl_environment", default=None)


def current_environment() -> Environment:
    return _current.get() or ROOT


def coerce_environment(env: EnvLike = None) -> Environment:
    if env is None:
        return current_environment()
    if isinstance(env, Environment):
        return env
    if isinstance(env, str):
        return Environment(env)
    raise TypeError(f"Cannot use {env!r} as an environment")


@contextmanager
def using_environment(env: EnvLike) -> Iterator[Environment]:
    resolved = coerce_environment(env)
    token = _current.set(resolved)
    try:
        yield resolved
    finally:
        _current.reset(token)
