from fastapi import FastAPI, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel
from typing import Any, Dict, Optional
from scriptdsl.registry import active_registry
from scriptdsl.parser import parse_script
from scriptdsl.eval import run_script
from scriptdsl.analyzer import analyze
from scriptdsl.ast_utils import ast_to_dict, ast_to_pretty
from scriptdsl.config import Settings
from scriptdsl.errors import DSLError
from scriptdsl.log import configure_logging

settings = Settings.from_env()
configure_logging(settings.log_level)

app = FastAPI(title="scriptdsl functions")

class ParseBody(BaseModel):
    script: str
    environment: Optional[str] = None

class EvalBody(BaseModel):
    script: str
    environment: Optional[str] = None
    variables: Dict[str, Any] = {}


def _bad_request(e: DSLError):
    return HTTPException(status_code=400, detail=e.to_json_error())


@app.get("/functions")
def functions(environment: Optional[str] = None):
    return {"functions": active_registry().list_functions(environment)}

@app.get("/functions/{name}")
def function(name: str, environment: Optional[str] = None):
    registry = active_registry()
    try:
        if registry.lookup(name, environment) is None:
            raise HTTPException(status_code=404, detail=f"Unknown function '{name}'")
    except DSLError as e:
        raise _bad_request(e) from e
    spec = registry.get(name, environment)
    return {"name": spec.name, "arity": spec.arity, "kind": spec.kind.value, "doc": spec.doc}

@app.get("/documentation", response_class=PlainTextResponse)
def documentation(environment: Optional[str] = None):
    return active_registry().documentation(environment)

@app.post("/parse")
def parse(body: ParseBody):
    try:
        ast = parse_script(body.script)
    except DSLError as e:
        raise _bad_request(e) from e
    meta = analyze(ast, environment=body.environment)
    return {
        "ok": not meta.problems,
        "assigned": sorted(meta.assigned),
        "variables": sorted(meta.variables),
        "functions": sorted(meta.functions),
        "problems": meta.problems,
    }

@app.post("/evaluate")
def evaluate(body: EvalBody):
    try:
        ctx = run_script(body.script, environment=body.environment, variables=body.variables)
    except DSLError as e:
        raise _bad_request(e) from e
    return {"environment": ctx.environment.name, "variables": ctx.variables}

@app.post("/ast")
def ast_view(body: ParseBody):
    try:
        ast = parse_script(body.script)
    except DSLError as e:
        raise _bad_request(e) from e
    return {
        "ok": True,
        "pretty": ast_to_pretty(ast),
        "tree": ast_to_dict(ast),
    }
