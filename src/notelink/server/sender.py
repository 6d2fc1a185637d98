"""Writing a Response to the ASGI ``send`` channel."""

from notelink._internal.asgi import Send
from notelink.http.response import Response

# Statuses that never carry a body (RFC 9110)
_NO_BODY_STATUSES = frozenset({204, 304})


def _encode_headers(response: Response, content_length: int) -> list[tuple[bytes, bytes]]:
    pairs = [("content-type", response.content_type), *response.headers]
    pairs.append(("content-length", str(content_length)))
    return [(name.lower().encode("latin-1"), value.encode("latin-1")) for name, value in pairs]


async def send_response(response: Response, send: Send, *, method: str = "GET") -> None:
    """Send *response* as one start message and one body message.

    1xx, 204 and 304 responses are sent without a body and with a zero
    length. A HEAD response advertises the length a GET would have
    carried but sends no bytes.
    """
    if response.status < 200 or response.status in _NO_BODY_STATUSES:
        body = b""
    else:
        body = response.body_bytes

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": _encode_headers(response, len(body)),
        }
    )
    await send({"type": "http.response.body", "body": b"" if method == "HEAD" else body})
