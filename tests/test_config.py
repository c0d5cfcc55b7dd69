import os

import pytest
from pydantic import ValidationError
from scriptdsl.config import Settings
from scriptdsl.environment import ROOT, Environment, coerce_environment, current_environment, using_environment

def test_defaults():
    s = Settings.from_env({})
    assert s.function_path == []
    assert s.environment_path is None
    assert s.environment is None
    assert s.log_level == "notice"

def test_from_env():
    s = Settings.from_env({
        "SCRIPTDSL_FUNCTION_PATH": os.pathsep.join(["/opt/a", "", "/opt/b"]),
        "SCRIPTDSL_ENVIRONMENT_PATH": "/etc/envs",
        "SCRIPTDSL_ENVIRONMENT": "production",
        "SCRIPTDSL_LOG_LEVEL": "DEBUG",
        "UNRELATED": "x",
    })
    assert s.function_path == ["/opt/a", "/opt/b"]
    assert s.environment_path == "/etc/envs"
    assert s.environment == "production"
    assert s.log_level == "debug"

def test_unknown_log_level_rejected():
    with pytest.raises(ValidationError):
        Settings(log_level="verbose")

def test_environment_identity_is_its_name():
    assert Environment("production") == Environment("production")
    assert coerce_environment("production") == Environment("production")
    assert ROOT.is_root and not Environment("production").is_root

def test_current_environment_is_scoped():
    assert current_environment() == ROOT
    with using_environment("production") as env:
        assert env == Environment("production")
        assert coerce_environment(None) == env
        with using_environment(ROOT):
            assert current_environment() == ROOT
        assert current_environment() == env
    assert current_environment() == ROOT

def test_bad_environment_value():
    with pytest.raises(TypeError):
        coerce_environment(42)
