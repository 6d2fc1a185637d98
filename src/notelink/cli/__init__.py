"""NoteLink CLI — inspect and serve documented APIs.

Entry point registered as ``notelink`` in ``pyproject.toml``::

    [project.scripts]
    notelink = "notelink.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``notelink`` command."""
    parser = argparse.ArgumentParser(
        prog="notelink",
        description="NoteLink — documented HTTP APIs from route descriptors.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- notelink routes --------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List documented routes")
    routes_parser.add_argument("api", help="Import string (e.g. myapi:api)")

    # -- notelink openapi -------------------------------------------------
    openapi_parser = subparsers.add_parser("openapi", help="Print the OpenAPI document")
    openapi_parser.add_argument("api", help="Import string (e.g. myapi:api)")
    openapi_parser.add_argument("--output", "-o", default=None, help="Write to a file")
    openapi_parser.add_argument("--indent", type=int, default=2, help="JSON indent")

    # -- notelink run -----------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Serve the API")
    run_parser.add_argument("api", help="Import string (e.g. myapi:api)")
    run_parser.add_argument("--port", type=int, default=None, help="Listen port")
    run_parser.add_argument("--quiet", action="store_true", help="Skip the startup banner")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        from notelink.cli._routes import run_routes

        run_routes(args)
    elif args.command == "openapi":
        from notelink.cli._openapi import run_openapi

        run_openapi(args)
    elif args.command == "run":
        from notelink.cli._run import run_server

        run_server(args)
