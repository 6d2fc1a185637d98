"""``notelink openapi`` — print the OpenAPI document as JSON."""

import argparse
import json
from pathlib import Path

from notelink.cli._resolve import load_api


def run_openapi(args: argparse.Namespace) -> None:
    """Write ``args.api``'s document to stdout, or to ``--output``."""
    api = load_api(args.api)
    text = json.dumps(api.openapi(), indent=args.indent)
    if args.output:
        Path(args.output).write_text(text + "\n", encoding="utf-8")
        print(f"Wrote {args.output}")
    else:
        print(text)
