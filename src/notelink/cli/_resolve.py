"""Locating the API a command operates on.

Commands take an import string, ``"package.module:attribute"``, the
same shape ASGI servers use for applications.
"""

import importlib
import sys
from typing import Any

from notelink.api import ApiNote

DEFAULT_ATTRIBUTE = "api"


def resolve_api(import_string: str) -> ApiNote:
    """Import the ``ApiNote`` named by *import_string*.

    Without ``:attribute`` the module's ``api`` is used. A callable
    other than an ``ApiNote`` is a factory and is called with no
    arguments.

    Raises ``ModuleNotFoundError`` or ``AttributeError`` when the name
    does not exist, and ``TypeError`` when it is not an API or its
    factory fails.
    """
    module_name, _, attribute = import_string.partition(":")
    target: Any = getattr(importlib.import_module(module_name), attribute or DEFAULT_ATTRIBUTE)

    if not isinstance(target, ApiNote) and callable(target):
        try:
            target = target()
        except Exception as exc:
            msg = f"Factory {import_string!r} failed: {exc}"
            raise TypeError(msg) from exc

    if isinstance(target, ApiNote):
        return target
    msg = f"{import_string!r} resolved to {type(target).__name__}, not a notelink.ApiNote"
    raise TypeError(msg)


def load_api(import_string: str) -> ApiNote:
    """``resolve_api`` for commands: report the problem on stderr and exit 1."""
    try:
        return resolve_api(import_string)
    except (ImportError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
