import re

from scriptdsl.registry import register


@register("split", arity=2, kind="rvalue", doc="""
    Split a string on a regular expression: `split("a,b;c", "[,;]")` returns
    `["a", "b", "c"]`.
""")
def split(scope, args):
    return re.split(str(args[1]), str(args[0]))
