import numpy as np

from scriptdsl.errors import ScriptError
from scriptdsl.registry import register


@register("sdiv", arity=2, kind="rvalue", doc="""
    Safe divide: `sdiv(a, b)` returns `a / b`, or 0 where `b` is 0 or NaN.
""")
def sdiv(scope, args):
    try:
        a, b = float(args[0]), float(args[1])
    except (TypeError, ValueError) as e:
        raise ScriptError(f"sdiv(): {e}") from e
    return 0.0 if (b == 0 or np.isnan(b)) else a / b
