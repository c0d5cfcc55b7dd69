import os
from typing import List, Mapping, Optional

from pydantic import BaseModel, Field, field_validator

from .log import LEVELS

ENV_PREFIX = "SCRIPTDSL_"


class Settings(BaseModel):
    function_path: List[str] = Field(default_factory=list)  # extra definition directories
    environment_path: Optional[str] = None                  # <dir>/<env>/functions/*.py
    environment: Optional[str] = None                       # default environment for the CLI
    log_level: str = "notice"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        value = value.lower()
        if value not in LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LEVELS)}")
        return value

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        environ = os.environ if environ is None else environ
        data = {}
        path = environ.get(ENV_PREFIX + "FUNCTION_PATH")
        if path:
            data["function_path"] = [p for p in path.split(os.pathsep) if p]
        for key in ("environment_path", "environment", "log_level"):
            value = environ.get(ENV_PREFIX + key.upper())
            if value:
                data[key] = value
        return cls(**data)
