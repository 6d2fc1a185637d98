"""Startup banner.

Printed once the listening address is known to be free. Lists the
configured host, the machine's external IPv4 addresses and the
documentation URL, in pounce's ``->`` visual language::

    notelink · Todo API 1.0.0

      -> Host:    http://localhost:8080
      -> Network: http://192.168.1.20:8080
      -> Docs:    http://localhost:8080/doc-api

The banner is purely informational; nothing depends on it.
"""

import socket
import sys
from typing import TextIO


def network_addresses() -> list[str]:
    """Non-loopback IPv4 addresses of this machine, best effort."""
    try:
        infos = socket.getaddrinfo(socket.gethostname(), None, socket.AF_INET)
    except OSError:
        return []
    addresses: list[str] = []
    for *_, sockaddr in infos:
        address = str(sockaddr[0])
        if not address.startswith("127.") and address not in addresses:
            addresses.append(address)
    return addresses


def format_banner(
    title: str,
    version: str,
    host: str,
    port: int,
    docs_path: str,
    *,
    addresses: list[str] | None = None,
) -> str:
    """Build the banner text. *host* may already carry a port."""
    origin = f"http://{host}" if ":" in host else f"http://{host}:{port}"
    lines = [f"notelink · {title} {version}", "", f"  -> Host:    {origin}"]
    for address in network_addresses() if addresses is None else addresses:
        lines.append(f"  -> Network: http://{address}:{port}")
    lines.append(f"  -> Docs:    {origin}{docs_path}")
    return "\n".join(lines) + "\n"


def print_banner(
    title: str,
    version: str,
    host: str,
    port: int,
    docs_path: str,
    *,
    stream: TextIO | None = None,
) -> None:
    """Write the banner to *stream* (stderr by default)."""
    out = stream or sys.stderr
    out.write(format_banner(title, version, host, port, docs_path))
    out.flush()
