"""``perch routes``: print the route tree.

Resolves an import string to a route tree and prints every navigable
pattern with its guard and model hooks.
"""

import argparse
import sys

from perch.cli._resolve import resolve_tree


def run_routes(args: argparse.Namespace) -> None:
    """Print a PATH / GUARD / MODEL table for ``args.target``."""
    try:
        tree = resolve_tree(args.target)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    infos = tree.paths()
    if not infos:
        print("No routes registered.")
        return

    rows = [(info.pattern, info.guard or "-", info.model or "-") for info in infos]
    max_path = max(4, *(len(r[0]) for r in rows))
    max_guard = max(5, *(len(r[1]) for r in rows))

    fmt = f"{{:<{max_path}}}  {{:<{max_guard}}}  {{}}"
    print(fmt.format("PATH", "GUARD", "MODEL"))
    sep_len = max_path + max_guard + 4 + max(len(r[2]) for r in rows)
    print("-" * min(sep_len, 80))
    for path, guard, model in rows:
        print(fmt.format(path, guard, model))
