"""Load function definition files on demand.

A definition file is ``<dir>/<name>.py`` and registers its function with
``scriptdsl.registry.register``. Files are executed afresh for every
environment that asks for them. An environment's own file only takes effect
when that environment resolves the name before the root environment has it:
once a root definition exists, every environment sees it through the merged
view and nothing is loaded for them.
"""

import importlib.util
import logging
import re
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Protocol, Set, Tuple

from .environment import EnvLike, Environment, coerce_environment, using_environment
from .errors import AutoloadError

logger = logging.getLogger(__name__)

BUILTIN_DIR = Path(__file__).parent / "functions"

_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class AutoloadGateway(Protocol):
    def load(self, name: str, environment: Environment) -> bool: ...

    def load_all(self, environment: Environment) -> None: ...


class Autoloader:
    def __init__(
        self,
        registry,
        search_path: Optional[Iterable] = None,
        environment_path=None,
        include_builtins: bool = True,
    ):
        self.registry = registry
        self.search_path: List[Path] = [Path(p) for p in (search_path or [])]
        self.environment_path: Optional[Path] = Path(environment_path) if environment_path else None
        self.include_builtins = include_builtins
        self._lock = threading.Lock()
        # held only while a load of the key is in flight: [lock, waiters]
        self._key_locks: Dict[Tuple[str, str], list] = {}
        self._loaded: Set[Tuple[str, str]] = set()

    @classmethod
    def from_settings(cls, registry, settings=None) -> "Autoloader":
        if settings is None:
            from .config import Settings
            settings = Settings.from_env()
        return cls(registry, settings.function_path, settings.environment_path)

    def reset(self) -> None:
        with self._lock:
            self._loaded.clear()

    def search_dirs(self, environment: EnvLike = None) -> List[Path]:
        env = coerce_environment(environment)
        dirs = []
        if self.environment_path is not None and not env.is_root:
            dirs.append(self.environment_path / env.name / "functions")
        dirs.extend(self.search_path)
        if self.include_builtins:
            dirs.append(BUILTIN_DIR)
        return dirs

    def find(self, name: str, environment: EnvLike = None) -> Optional[Path]:
        for d in self.search_dirs(environment):
            candidate = d / f"{name}.py"
            if candidate.is_file():
                return candidate
        return None

    def loaded(self, name: str, environment: EnvLike = None) -> bool:
        key = (coerce_environment(environment).name, name)
        with self._lock:
            return key in self._loaded

    @contextmanager
    def _key_lock(self, key: Tuple[str, str]) -> Iterator[None]:
        with self._lock:
            entry = self._key_locks.get(key)
            if entry is None:
                entry = self._key_locks[key] = [threading.RLock(), 0]
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._lock:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._key_locks[key]

    def load(self, name: str, environment: EnvLike = None) -> bool:
        """Load the definition of ``name`` for ``environment``.

        Returns True when the function resolves after loading its file. A name
        that was already loaded, or that has no definition file, returns False.
        """
        name = str(name)
        if not _NAME_RE.match(name):
            return False
        env = coerce_environment(environment)
        key = (env.name, name)

        with self._key_lock(key):
            if self.loaded(name, env):
                return False
            path = self.find(name, env)
            if path is None:
                logger.debug("No definition file for function %s in %s", name, env)
                return False
            self._execute(path, name, env)
            with self._lock:
                self._loaded.add(key)

        if self.registry.get(name, env) is None:
            logger.warning("%s did not define function %s", path, name)
            return False
        return True

    def load_all(self, environment: EnvLike = None) -> None:
        env = coerce_environment(environment)
        seen = set()
        for d in self.search_dirs(env):
            if not d.is_dir():
                continue
            for path in sorted(d.glob("*.py")):
                name = path.stem
                if name.startswith("_") or name in seen:
                    continue
                seen.add(name)
                try:
                    self.load(name, env)
                except AutoloadError as e:
                    logger.warning("Skipping %s: %s", path, e)

    def _execute(self, path: Path, name: str, env: Environment) -> None:
        module_name = "_scriptdsl_functions.%s.%s" % (re.sub(r"\W", "_", env.name), name)
        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            raise AutoloadError(f"Could not autoload {name}: {path} is not loadable",
                                context={"function": name, "path": str(path)})
        module = importlib.util.module_from_spec(spec)
        logger.debug("Loading function %s for %s from %s", name, env, path)
        with self.registry.activated(), using_environment(env):
            try:
                spec.loader.exec_module(module)
            except Exception as e:
                raise AutoloadError(
                    f"Could not autoload {name}: {e}",
                    context={"function": name, "path": str(path), "environment": env.name},
                ) from e
