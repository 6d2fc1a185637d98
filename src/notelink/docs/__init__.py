"""Documentation — the OpenAPI document and the page that renders it."""

from notelink.docs.openapi import DocumentedRoute, build_openapi_document, openapi_path
from notelink.docs.ui import render_docs_page

__all__ = ["DocumentedRoute", "build_openapi_document", "openapi_path", "render_docs_page"]
