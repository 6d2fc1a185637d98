"""``notelink routes`` — list documented routes."""

import argparse

from notelink.cli._resolve import load_api


def run_routes(args: argparse.Namespace) -> None:
    """Print a table of METHOD, PATH, AUTH and SUMMARY for ``args.api``."""
    api = load_api(args.api)
    descriptors = api.routes
    if not descriptors:
        print("No routes registered.")
        return

    rows = [
        (
            d.method,
            api.resolve_path(d.path),
            "yes" if d.requires_auth else "",
            d.summary or d.description or "",
        )
        for d in descriptors
    ]
    max_method = max(6, *(len(r[0]) for r in rows))
    max_path = max(4, *(len(r[1]) for r in rows))

    fmt = f"{{:<{max_method}}}  {{:<{max_path}}}  {{:<4}}  {{}}"
    print(fmt.format("METHOD", "PATH", "AUTH", "SUMMARY"))
    print("-" * min(max_method + max_path + 8 + max(len(r[3]) for r in rows), 80))
    for row in rows:
        print(fmt.format(*row))
