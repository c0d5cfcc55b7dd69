from scriptdsl.errors import ScriptError
from scriptdsl.registry import register


@register("fail", doc="Fail with a script error, joining the arguments with spaces.")
def fail(scope, args):
    raise ScriptError(" ".join(str(a) for a in args))
