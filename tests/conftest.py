import pytest
from scriptdsl.registry import REGISTRY, Registry


class CountingGateway:
    """Autoload stand-in that records every call and defines from a dict."""

    def __init__(self):
        self.registry = None
        self.definitions = {}   # name -> (impl, define options)
        self.loads = []
        self.load_alls = 0

    def load(self, name, environment):
        self.loads.append((name, environment.name))
        if name not in self.definitions:
            return False
        impl, options = self.definitions[name]
        self.registry.define(name, impl, environment=environment, **options)
        return True

    def load_all(self, environment):
        self.load_alls += 1


@pytest.fixture
def gateway():
    return CountingGateway()


@pytest.fixture
def registry(gateway):
    reg = Registry(autoloader=gateway)
    gateway.registry = reg
    return reg


@pytest.fixture(autouse=True)
def clean_default_registry():
    REGISTRY.reset()
    yield
    REGISTRY.reset()


def write_function(directory, name, body="args[0] * 3", arity=1, kind="rvalue", doc=None):
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{name}.py"
    path.write_text(
        "from scriptdsl.registry import register\n"
        "\n"
        f"@register({name!r}, arity={arity}, kind={kind!r}, doc={doc!r})\n"
        "def fn(scope, args):\n"
        f"    return {body}\n",
        encoding="utf-8",
    )
    return path
