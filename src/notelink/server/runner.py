"""Running the engine under pounce.

pounce binds its own sockets inside ``Server.run()``, which blocks, so
the address is probed first: a failure to bind surfaces as a
``StartupError`` to the caller instead of a log line from a worker.
"""

import logging
import socket

from notelink.errors import StartupError

logger = logging.getLogger("notelink.server")


def probe_bind(host: str, port: int) -> None:
    """Check that *host*:*port* can be bound right now.

    Raises ``StartupError`` (chained to the ``OSError``) when it cannot.
    """
    try:
        with socket.create_server((host, port)):
            pass
    except OSError as exc:
        msg = f"Cannot bind {host}:{port}: {exc.strerror or exc}"
        raise StartupError(msg) from exc


def run_server(
    app: object,
    host: str,
    port: int,
    *,
    workers: int = 1,
    log_level: str = "info",
) -> None:
    """Serve *app* with pounce until it shuts down.

    Pounce's ``run()`` takes an import string, but here there is a live
    ASGI object, so ``pounce.Server`` is used directly.
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    config = ServerConfig(
        host=host,
        port=port,
        workers=workers,
        log_level=log_level,
    )
    logger.info("Serving on http://%s:%d with %d worker(s)", host, port, workers)
    Server(config, app).run()
