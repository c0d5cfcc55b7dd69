from scriptdsl.registry import active_registry, register


@register("defined", arity=1, kind="rvalue", doc="""
    Whether a function of the given name is available in the current
    environment. Loads the function if it has not been used yet.
""")
def defined(scope, args):
    if scope is not None:
        return scope.registry.lookup(str(args[0]), scope.environment) is not None
    return active_registry().lookup(str(args[0])) is not None
