"""Routing — the engine's compiled route table.

Routes are registered during setup and compiled into an immutable
lookup structure when the registry freezes. Path parameters use
``:name`` (or ``{name}``); a trailing ``*`` matches the rest of the path.
"""
