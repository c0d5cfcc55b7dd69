from scriptdsl.errors import ScriptError
from scriptdsl.registry import register


@register("sprintf", arity=-2, kind="rvalue", doc="""
    Format a string with printf-style conversions: the first argument is the
    format, the remaining arguments fill it in, e.g. `sprintf("%s-%03d", "web", 7)`.
""")
def sprintf(scope, args):
    fmt, values = str(args[0]), tuple(args[1:])
    try:
        return fmt % values
    except (TypeError, ValueError) as e:
        raise ScriptError(f"sprintf(): {e}") from e
