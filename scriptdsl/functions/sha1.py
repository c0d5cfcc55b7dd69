import hashlib

from scriptdsl.registry import register


@register("sha1", arity=1, kind="rvalue", doc="Return the hex SHA1 digest of a string.")
def sha1(scope, args):
    return hashlib.sha1(str(args[0]).encode("utf-8")).hexdigest()
