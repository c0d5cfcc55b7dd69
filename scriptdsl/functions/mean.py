import numpy as np

from scriptdsl.registry import register


def _flatten(values):
    for v in values:
        if isinstance(v, (list, tuple)):
            yield from _flatten(v)
        else:
            yield v


@register("mean", arity=-2, kind="rvalue", doc="""
    Arithmetic mean of its arguments. Lists are flattened, so `mean([1, 2], 3)`
    is the mean of 1, 2 and 3.
""")
def mean(scope, args):
    values = np.asarray(list(_flatten(args)), dtype=float)
    if values.size == 0:
        return 0.0
    return float(np.mean(values))
