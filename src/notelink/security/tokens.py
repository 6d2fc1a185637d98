"""JWT signing and verification.

``JWTProvider`` is the contract the registry depends on; ``JWTSigner``
implements it with PyJWT over a shared HMAC secret. Either method may be
sync or async, since callers go through ``invoke()``.
"""

import logging
import time
from collections.abc import Awaitable, Mapping
from typing import Any, Protocol, runtime_checkable

import jwt
from jwt import InvalidTokenError

from notelink.errors import ConfigurationError

logger = logging.getLogger("notelink.auth")


@runtime_checkable
class JWTProvider(Protocol):
    """Signs payloads into tokens and verifies tokens back into payloads.

    ``verify`` returns the decoded payload, or a falsy value for a token
    that is invalid or expired. Raising is also allowed; callers treat it
    as a verification failure.
    """

    def sign(self, payload: Mapping[str, Any]) -> str | Awaitable[str]: ...

    def verify(self, token: str) -> Any: ...


class JWTSigner:
    """HMAC JWT provider backed by PyJWT.

    Usage::

        signer = JWTSigner("s3cret", expires_in=3600)
        token = signer.sign({"id": 1, "email": "ada@example.com"})
        signer.verify(token)  # {"id": 1, "email": "...", "exp": ...}
        signer.verify("garbage")  # None
    """

    __slots__ = ("_algorithm", "_expires_in", "_secret")

    def __init__(
        self,
        secret: str,
        *,
        algorithm: str = "HS256",
        expires_in: int | None = None,
    ) -> None:
        if not secret:
            msg = "JWT secret must be a non-empty string."
            raise ConfigurationError(msg)
        if expires_in is not None and expires_in <= 0:
            msg = f"jwt_expires_in must be positive, got {expires_in}"
            raise ConfigurationError(msg)
        self._secret = secret
        self._algorithm = algorithm
        self._expires_in = expires_in

    @property
    def algorithm(self) -> str:
        return self._algorithm

    def sign(self, payload: Mapping[str, Any]) -> str:
        """Encode *payload* as a signed token.

        Adds an ``exp`` claim when the signer has an expiry and the payload
        does not carry one already.
        """
        claims = dict(payload)
        if self._expires_in is not None and "exp" not in claims:
            claims["exp"] = int(time.time()) + self._expires_in
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> dict[str, Any] | None:
        """Decode *token*, or return ``None`` if it is malformed, tampered or expired."""
        try:
            return jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except InvalidTokenError as exc:
            logger.debug("Rejected token: %s", exc)
            return None
