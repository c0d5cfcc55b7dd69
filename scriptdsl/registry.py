import logging
import textwrap
import threading
from contextlib import contextmanager
from contextvars import ContextVar
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, NamedTuple, Optional, Sequence, Union

from .autoload import AutoloadGateway, Autoloader
from .environment import ROOT, EnvLike, Environment, coerce_environment
from .errors import ArgumentCountError, InvalidCallConvention, InvalidConfiguration
from .log import LEVELS, send_log

logger = logging.getLogger(__name__)


class FunctionKind(str, Enum):
    STATEMENT = "statement"
    RVALUE = "rvalue"

    @classmethod
    def coerce(cls, value: Union["FunctionKind", str]) -> "FunctionKind":
        try:
            return cls(value)
        except ValueError:
            raise InvalidConfiguration(
                f"Invalid statement type {value!r}", context={"kind": repr(value)}
            ) from None


class FunctionWrapper:
    """Arity-checked entry point for a defined function.

    Scripts always pass their arguments as one list: ``fn([1, 2], scope=ctx)``.
    """

    __slots__ = ("name", "arity", "impl")

    def __init__(self, name: str, arity: int, impl: Callable[[Any, Sequence], Any]):
        self.name = name
        self.arity = arity
        self.impl = impl

    def __call__(self, *args, **kwargs):
        scope = kwargs.pop("scope", None)
        if kwargs or len(args) != 1 or not isinstance(args[0], (list, tuple)):
            raise InvalidCallConvention(
                "custom functions must be called with a single list that contains the "
                f"arguments. For example, {self.name}([1]) instead of {self.name}(1)",
                context={"function": self.name},
            )
        values = args[0]
        if self.arity >= 0 and len(values) != self.arity:
            raise ArgumentCountError(self.name, len(values), self.arity)
        if self.arity < 0 and len(values) < abs(self.arity + 1):
            raise ArgumentCountError(self.name, len(values), abs(self.arity + 1), minimum=True)
        return self.impl(scope, values)

    def __repr__(self) -> str:
        return f"<FunctionWrapper {self.name}/{self.arity}>"


class FuncSpec(NamedTuple):
    name: str
    arity: int      # >= 0 exact count; -N means at least N-1
    kind: FunctionKind
    doc: Optional[str]
    invoke: FunctionWrapper


class FunctionTable:
    """Functions defined in one environment, guarded by their own lock."""

    def __init__(self, environment: Environment):
        self.environment = environment
        self.lock = threading.Lock()
        self.functions: Dict[str, FuncSpec] = {}

    def __setitem__(self, name: str, spec: FuncSpec) -> None:
        with self.lock:
            self.functions[name] = spec

    def __len__(self) -> int:
        with self.lock:
            return len(self.functions)


def scrub(text: str) -> str:
    """Strip common indentation and surrounding blank lines from a doc string."""
    lines = textwrap.dedent(text).splitlines()
    while lines and not lines[0].strip():
        lines.pop(0)
    while lines and not lines[-1].strip():
        lines.pop()
    return "\n".join(line.rstrip() for line in lines)


class Registry:
    def __init__(self, autoloader: Optional[AutoloadGateway] = None, settings=None):
        self._lock = threading.Lock()
        self._tables: Dict[str, FunctionTable] = {}
        if autoloader is None:
            autoloader = Autoloader.from_settings(self, settings)
        self.autoloader = autoloader
        self.reset()

    def reset(self) -> None:
        """Forget every definition and re-seed the log level functions."""
        with self._lock:
            self._tables = {ROOT.name: FunctionTable(ROOT)}
        clear = getattr(self.autoloader, "reset", None)
        if clear is not None:
            clear()
        for level in LEVELS:
            self.define(
                level,
                _log_function(level),
                doc=f"Log a message on the server at level {level}.",
                environment=ROOT,
            )

    def table(self, environment: EnvLike = None) -> FunctionTable:
        env = coerce_environment(environment)
        with self._lock:
            table = self._tables.get(env.name)
            if table is None:
                table = self._tables[env.name] = FunctionTable(env)
            return table

    def define(
        self,
        name: str,
        impl: Callable[[Any, Sequence], Any],
        *,
        arity: int = -1,
        kind: Union[FunctionKind, str] = FunctionKind.STATEMENT,
        doc: Optional[str] = None,
        environment: EnvLike = None,
    ) -> FuncSpec:
        name = str(name)
        kind = FunctionKind.coerce(kind)
        arity = -1 if arity is None else int(arity)
        env = coerce_environment(environment)

        if self.get(name, env) is not None:
            logger.warning("Overwriting previous definition for function %s", name)

        spec = FuncSpec(name, arity, kind, doc, FunctionWrapper(name, arity, impl))
        self.table(env)[name] = spec
        return spec

    def functions(self, environment: EnvLike = None) -> Dict[str, FuncSpec]:
        """Root definitions overlaid by the environment's own."""
        root = self.table(ROOT)
        current = self.table(environment)
        with root.lock:
            if current is root:
                return dict(root.functions)
            with current.lock:
                merged = dict(root.functions)
                merged.update(current.functions)
        return merged

    def get(self, name: str, environment: EnvLike = None) -> Optional[FuncSpec]:
        return self.functions(environment).get(str(name))

    def lookup(self, name: str, environment: EnvLike = None) -> Optional[FunctionWrapper]:
        """Resolve ``name`` to its wrapper, autoloading it once on a miss.

        Returns None when no definition could be found.
        """
        name = str(name)
        env = coerce_environment(environment)
        spec = self.get(name, env)
        if spec is None:
            self.autoloader.load(name, env)
            spec = self.get(name, env)
        return spec.invoke if spec is not None else None

    def is_rvalue(self, name: str, environment: EnvLike = None) -> bool:
        spec = self.get(name, environment)
        return spec is not None and spec.kind is FunctionKind.RVALUE

    def arity(self, name: str, environment: EnvLike = None) -> int:
        spec = self.get(name, environment)
        return spec.arity if spec is not None else -1

    def list_functions(self, environment: EnvLike = None) -> List[Dict[str, Any]]:
        out = []
        for k, spec in sorted(self.functions(environment).items()):
            out.append({"name": k, "arity": spec.arity, "kind": spec.kind.value, "doc": spec.doc})
        return out

    def documentation(self, environment: EnvLike = None) -> str:
        env = coerce_environment(environment)
        self.autoloader.load_all(env)

        ret = []
        for name, spec in sorted(self.functions(env).items()):
            body = scrub(spec.doc) if spec.doc else ""
            ret.append(f"{name}\n{'-' * len(name)}\n")
            ret.append(f"{body or 'Undocumented.'}\n\n")
            ret.append(f"- Type: {spec.kind.value}\n\n")
        return "".join(ret)

    @contextmanager
    def activated(self) -> Iterator["Registry"]:
        """Make this registry the target of ``register`` within the block."""
        token = _active.set(self)
        try:
            yield self
        finally:
            _active.reset(token)


def _log_function(level: str):
    def log(scope, vals):
        send_log(level, " ".join(str(v) for v in vals))
    return log


_active: ContextVar[Optional[Registry]] = ContextVar("scriptdsl_registry", default=None)

REGISTRY = Registry()


def active_registry() -> Registry:
    return _active.get() or REGISTRY


def register(name, arity=-1, kind=FunctionKind.STATEMENT, doc=None):
    def deco(fn):
        active_registry().define(name, fn, arity=arity, kind=kind, doc=doc)
        return fn
    return deco


def define(name, impl, **options) -> FuncSpec:
    return active_registry().define(name, impl, **options)


def lookup(name: str, environment: EnvLike = None) -> Optional[FunctionWrapper]:
    return active_registry().lookup(name, environment)


def is_rvalue(name: str, environment: EnvLike = None) -> bool:
    return active_registry().is_rvalue(name, environment)


def arity(name: str, environment: EnvLike = None) -> int:
    return active_registry().arity(name, environment)


def documentation(environment: EnvLike = None) -> str:
    return active_registry().documentation(environment)


def list_functions(environment: EnvLike = None):
    return active_registry().list_functions(environment)


def reset() -> None:
    active_registry().reset()
