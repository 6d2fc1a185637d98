"""``notelink run`` — serve an API with pounce."""

import argparse
import sys

from notelink.cli._resolve import load_api
from notelink.errors import StartupError
from notelink.server.banner import print_banner


def run_server(args: argparse.Namespace) -> None:
    """Start ``args.api`` and block until the server stops.

    A port embedded in the API's configured host still wins over
    ``--port``, exactly as in ``ApiNote.start()``.
    """
    api = load_api(args.api)
    config = api.config

    def on_ready(host: str, port: int) -> None:
        if not args.quiet:
            print_banner(config.title, config.version, config.host, port, config.docs_path)

    try:
        api.start(args.port, on_ready=on_ready)
    except StartupError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
