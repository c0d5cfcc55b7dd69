import operator

from .environment import coerce_environment
from .errors import ScriptError, UnknownFunctionError
from .parser import (Program, Assignment, Number, String, Boolean, Variable,
                     ListLiteral, BinOp, UnaryOp, Call, parse_script)
from .registry import active_registry

def truthy(x):
    return bool(x)

OPS = {
    '+': operator.add,
    '-': operator.sub,
    '*': operator.mul,
    '/': operator.truediv,
    '%': operator.mod,
    '^': operator.pow,
    '==': operator.eq,
    '!=': operator.ne,
    '>': operator.gt,
    '>=': operator.ge,
    '<': operator.lt,
    '<=': operator.le,
}

class EvaluationContext:
    """The scope a script runs in; handed to every function it calls."""

    def __init__(self, registry=None, environment=None, variables=None):
        self.registry = registry or active_registry()
        self.environment = coerce_environment(environment)
        self.variables = dict(variables or {})

    def lookup_var(self, name: str):
        if name not in self.variables:
            raise ScriptError(f"Unknown variable '${name}'", context={"variable": name})
        return self.variables[name]

    def set_var(self, name: str, value):
        self.variables[name] = value


def call_function(ctx: EvaluationContext, node: Call):
    fn = ctx.registry.lookup(node.name, ctx.environment)
    if fn is None:
        raise UnknownFunctionError(node.name, ctx.environment.name)
    rvalue = ctx.registry.is_rvalue(node.name, ctx.environment)
    if node.statement and rvalue:
        raise ScriptError(f"Function '{node.name}' must be the value of a statement",
                          context={"function": node.name})
    if not node.statement and not rvalue:
        raise ScriptError(f"Function '{node.name}' does not return a value",
                          context={"function": node.name})
    args = [eval_node(ctx, arg) for arg in node.args]
    return fn(args, scope=ctx)


def eval_node(ctx: EvaluationContext, node):
    if isinstance(node, Program):
        out = None
        for stmt in node.statements:
            out = eval_node(ctx, stmt)
        return out
    if isinstance(node, Assignment):
        value = eval_node(ctx, node.value)
        ctx.set_var(node.name, value)
        return value
    if isinstance(node, (Number, String, Boolean)):
        return node.value
    if isinstance(node, Variable):
        return ctx.lookup_var(node.name)
    if isinstance(node, ListLiteral):
        return [eval_node(ctx, item) for item in node.items]
    if isinstance(node, UnaryOp):
        val = eval_node(ctx, node.operand)
        if node.op == '-':
            try:
                return -val
            except TypeError as e:
                raise ScriptError(f"Cannot negate {val!r}: {e}") from e
        if node.op == '!': return not truthy(val)
        raise ScriptError(f"Unknown unary op {node.op}")
    if isinstance(node, BinOp):
        # short-circuit
        if node.op == '&&':
            return truthy(eval_node(ctx, node.left)) and truthy(eval_node(ctx, node.right))
        if node.op == '||':
            return truthy(eval_node(ctx, node.left)) or truthy(eval_node(ctx, node.right))
        a = eval_node(ctx, node.left)
        b = eval_node(ctx, node.right)
        try:
            return OPS[node.op](a, b)
        except (TypeError, ZeroDivisionError, OverflowError) as e:
            raise ScriptError(f"Cannot evaluate {a!r} {node.op} {b!r}: {e}") from e
    if isinstance(node, Call):
        return call_function(ctx, node)
    raise TypeError(f"Unknown node {type(node)}")


def run_script(src: str, registry=None, environment=None, variables=None) -> EvaluationContext:
    """Parse and evaluate ``src``; returns the context holding the final variables."""
    program = parse_script(src)
    ctx = EvaluationContext(registry, environment, variables)
    eval_node(ctx, program)
    return ctx
