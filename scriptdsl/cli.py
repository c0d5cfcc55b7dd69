"""Command line entry point.

Usage examples:
    scriptdsl run site.dsl --environment production
    scriptdsl reference -o FUNCTIONS.md
    scriptdsl functions --function-path ./my_functions
"""

import argparse
import sys
from pathlib import Path

from .config import Settings
from .errors import DSLError
from .eval import run_script
from .log import LEVELS, configure_logging
from .registry import REGISTRY


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="scriptdsl")
    ap.add_argument("--environment", help="environment to run in (default: $SCRIPTDSL_ENVIRONMENT or root)")
    ap.add_argument("--function-path", action="append", default=[],
                    help="extra directory of function definition files (repeatable)")
    ap.add_argument("--log-level", choices=LEVELS)
    sub = ap.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="evaluate a script file")
    run.add_argument("file")

    ref = sub.add_parser("reference", help="print the function reference")
    ref.add_argument("-o", "--output", help="write to this file instead of stdout")

    sub.add_parser("functions", help="list registered functions")
    return ap


def main(argv=None, registry=None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()
    configure_logging(args.log_level or settings.log_level)

    registry = registry or REGISTRY
    for p in args.function_path:
        registry.autoloader.search_path.insert(0, Path(p))
    environment = args.environment or settings.environment

    if args.command == "run":
        try:
            source = Path(args.file).read_text(encoding="utf-8")
        except FileNotFoundError:
            print(f"Error: file not found: {args.file}", file=sys.stderr)
            return 1
        try:
            run_script(source, registry=registry, environment=environment)
        except DSLError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        return 0

    if args.command == "reference":
        text = registry.documentation(environment)
        if args.output:
            Path(args.output).write_text(text, encoding="utf-8")
        else:
            sys.stdout.write(text)
        return 0

    for fn in registry.list_functions(environment):
        print(f"{fn['name']:<16} {fn['kind']:<10} arity={fn['arity']}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
