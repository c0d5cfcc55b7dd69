import logging

import pytest
from conftest import write_function
from scriptdsl.cli import main
from scriptdsl.config import Settings
from scriptdsl.registry import Registry

@pytest.fixture
def fresh():
    return Registry(settings=Settings())

def test_run_script(tmp_path, fresh):
    script = tmp_path / "site.dsl"
    script.write_text("$x = sdiv(6, 3)\nnotice($x)\n", encoding="utf-8")
    assert main(["run", str(script)], registry=fresh) == 0

def test_run_missing_file(tmp_path, fresh, capsys):
    assert main(["run", str(tmp_path / "nope.dsl")], registry=fresh) == 1
    assert "file not found" in capsys.readouterr().err

def test_run_reports_script_errors(tmp_path, fresh, capsys):
    script = tmp_path / "site.dsl"
    script.write_text("fail('bad', 'input')", encoding="utf-8")
    assert main(["run", str(script)], registry=fresh) == 1
    assert "Error: bad input" in capsys.readouterr().err

def test_function_path_and_environment(tmp_path, fresh, caplog):
    write_function(tmp_path / "lib", "whereami", body="scope.environment.name", arity=0)
    script = tmp_path / "site.dsl"
    script.write_text("notice(whereami())", encoding="utf-8")
    caplog.set_level(logging.DEBUG, logger="scriptdsl.log")
    rc = main(["--function-path", str(tmp_path / "lib"), "--environment", "staging",
               "run", str(script)], registry=fresh)
    assert rc == 0
    assert "staging" in [r.getMessage() for r in caplog.records if r.name == "scriptdsl.log"]
    assert fresh.get("whereami", "staging") is not None
    assert fresh.get("whereami") is None

def test_reference_to_stdout(fresh, capsys):
    assert main(["reference"], registry=fresh) == 0
    out = capsys.readouterr().out
    assert "notice\n------\nLog a message on the server at level notice.\n" in out
    assert "sha1\n----\n" in out

def test_reference_to_file(tmp_path, fresh):
    target = tmp_path / "FUNCTIONS.md"
    assert main(["reference", "-o", str(target)], registry=fresh) == 0
    assert target.read_text(encoding="utf-8").startswith("alert\n-----\n")

def test_functions_listing(fresh, capsys):
    fresh.define("double", lambda scope, args: args[0] * 2, arity=1, kind="rvalue")
    assert main(["functions"], registry=fresh) == 0
    out = capsys.readouterr().out
    assert "double" in out and "rvalue" in out and "arity=1" in out
