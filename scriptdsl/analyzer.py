from dataclasses import dataclass, field
from typing import List, Set
from .parser import Program, Assignment, Variable, ListLiteral, BinOp, UnaryOp, Call
from .registry import FunctionKind, active_registry

@dataclass
class Analysis:
    assigned: Set[str] = field(default_factory=set)
    variables: Set[str] = field(default_factory=set)
    functions: Set[str] = field(default_factory=set)
    problems: List[str] = field(default_factory=list)

def _classify(an: Analysis, call: Call, registry, environment):
    # only what is already registered; classification must not load anything
    spec = registry.get(call.name, environment)
    if spec is None:
        return
    rvalue = registry.is_rvalue(call.name, environment)
    if call.statement and rvalue:
        an.problems.append(f"Function '{call.name}' must be the value of a statement")
    elif not call.statement and spec.kind is FunctionKind.STATEMENT:
        an.problems.append(f"Function '{call.name}' does not return a value")

def analyze(node, registry=None, environment=None) -> Analysis:
    registry = registry or active_registry()
    an = Analysis()

    def walk(n):
        if isinstance(n, Program):
            for s in n.statements:
                walk(s)

        elif isinstance(n, Assignment):
            an.assigned.add(n.name)
            walk(n.value)

        elif isinstance(n, Variable):
            an.variables.add(n.name)

        elif isinstance(n, Call):
            an.functions.add(n.name)
            _classify(an, n, registry, environment)
            for a in n.args:
                walk(a)

        elif isinstance(n, ListLiteral):
            for item in n.items:
                walk(item)

        elif isinstance(n, (BinOp, UnaryOp)):
            for val in vars(n).values():
                if hasattr(val, "__dict__"):
                    walk(val)

    walk(node)
    return an
