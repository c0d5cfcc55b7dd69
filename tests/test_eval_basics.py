import logging

import pytest
from scriptdsl.errors import ArgumentCountError, ScriptError, UnknownFunctionError
from scriptdsl.eval import EvaluationContext, eval_node, run_script
from scriptdsl.parser import parse_script

def test_arithmetic_and_assignment():
    ctx = run_script("$x = 1 + 2 * 3\n$y = $x ^ 2 - 10 % 4; $z = $x / 2")
    assert ctx.variables == {"x": 7, "y": 47, "z": 3.5}

def test_literals_and_logic():
    ctx = run_script("$l = [1, 'a', true]\n$b = !(1 < 2) || 3 >= 3\n$s = 'ab' + 'c'\n$c = 'a' == 'a'")
    assert ctx.variables == {"l": [1, "a", True], "b": True, "s": "abc", "c": True}

def test_logic_short_circuits():
    ctx = run_script("$a = false && nosuch(1)\n$b = true || nosuch(1)")
    assert ctx.variables == {"a": False, "b": True}

def test_initial_variables():
    ctx = run_script("$y = $x * 2", variables={"x": 21})
    assert ctx.variables["y"] == 42

def test_notice_from_script(caplog):
    caplog.set_level(logging.DEBUG, logger="scriptdsl.log")
    run_script("$who = 'world'\nnotice('hello', $who)\ndebug(1, 2.5)")
    got = [(r.levelname, r.getMessage()) for r in caplog.records if r.name == "scriptdsl.log"]
    assert got == [("NOTICE", "hello world"), ("DEBUG", "1 2.5")]

def test_bundled_functions_autoload_from_scripts():
    ctx = run_script("$h = sha1('abc')\n$m = mean([1, 2], 3)\n$d = sdiv(1, 0)\n"
                     "$p = split('a-b', '-')\n$f = sprintf('%s:%d', 'port', 80)")
    assert ctx.variables["h"] == "a9993e364706816aba3e25717850c26c9cd0d89d"
    assert ctx.variables["m"] == 2.0
    assert ctx.variables["d"] == 0.0
    assert ctx.variables["p"] == ["a", "b"]
    assert ctx.variables["f"] == "port:80"

def test_defined_from_script():
    ctx = run_script("$a = defined('sha1')\n$b = defined('nope')")
    assert ctx.variables == {"a": True, "b": False}

def test_statement_function_in_value_position():
    with pytest.raises(ScriptError, match="Function 'notice' does not return a value"):
        run_script("$x = notice('a')")

def test_rvalue_function_in_statement_position():
    with pytest.raises(ScriptError, match="Function 'sha1' must be the value of a statement"):
        run_script("sha1('a')")

def test_unknown_function():
    with pytest.raises(UnknownFunctionError, match="Unknown function 'nosuch'") as exc:
        run_script("nosuch(1)")
    assert isinstance(exc.value, NameError)
    assert exc.value.to_json_error()["code"] == "UnknownFunctionError"

def test_argument_count_checked_for_script_calls():
    with pytest.raises(ArgumentCountError, match=r"sdiv\(\): Wrong number of arguments given \(1 for 2\)"):
        run_script("$x = sdiv(1)")

def test_fail_stops_the_script():
    with pytest.raises(ScriptError, match="stop here"):
        run_script("$x = 1\nfail('stop', 'here')\n$y = 2")

def test_unknown_variable():
    with pytest.raises(ScriptError, match=r"Unknown variable '\$y'"):
        run_script("$x = $y")

def test_type_errors_become_script_errors():
    with pytest.raises(ScriptError, match="Cannot evaluate"):
        run_script("$x = 'a' - 1")

@pytest.mark.parametrize("src,match", [
    ("$x = -'a'", "Cannot negate"),
    ("$x = -[1]", "Cannot negate"),
    ("$x = 2.0 ^ 10000", "Cannot evaluate"),
])
def test_operator_failures_become_script_errors(src, match):
    with pytest.raises(ScriptError, match=match):
        run_script(src)

def test_functions_see_the_scope(registry):
    registry.define("where", lambda scope, args: scope.environment.name, arity=0, kind="rvalue")
    registry.define("var", lambda scope, args: scope.lookup_var(args[0]), arity=1, kind="rvalue",
                    environment="production")
    ctx = run_script("$w = where()\n$v = var('w')", registry=registry, environment="production")
    assert ctx.variables == {"w": "production", "v": "production"}

def test_environment_specific_definition_is_used(registry):
    registry.define("tier", lambda scope, args: "default", arity=0, kind="rvalue")
    registry.define("tier", lambda scope, args: "prod", arity=0, kind="rvalue", environment="production")
    assert run_script("$t = tier()", registry=registry).variables["t"] == "default"
    assert run_script("$t = tier()", registry=registry, environment="production").variables["t"] == "prod"

def test_eval_node_returns_last_statement_value(registry):
    ctx = EvaluationContext(registry)
    assert eval_node(ctx, parse_script("$a = 1\n$b = $a + 1")) == 2
