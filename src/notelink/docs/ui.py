"""Interactive documentation page.

A small HTML shell that loads the Scalar API reference from its CDN and
points it at the JSON document. Rendered with kida.
"""

import json
from functools import cache

from kida import Environment

SCALAR_CDN = "https://cdn.jsdelivr.net/npm/@scalar/api-reference"

_PAGE = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>{{ title }}</title>
  </head>
  <body>
    <script id="api-reference" data-url="{{ spec_url }}" data-configuration="{{ configuration }}"></script>
    <script src="{{ cdn }}"></script>
  </body>
</html>
"""

_SCALAR_CONFIGURATION = {"theme": "mars", "hideClientButton": True, "showToolbar": "never"}


@cache
def _environment() -> Environment:
    return Environment(autoescape=True)


def render_docs_page(title: str, spec_url: str) -> str:
    """Render the documentation page for the document served at *spec_url*."""
    template = _environment().from_string(_PAGE)
    return template.render(
        {
            "title": title,
            "spec_url": spec_url,
            "configuration": json.dumps(_SCALAR_CONFIGURATION),
            "cdn": SCALAR_CDN,
        }
    )
