"""Identity checks performed before a websocket upgrade is accepted."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
import secrets
from typing import Optional, Protocol, Tuple
from urllib.parse import parse_qs, urlsplit

from jose import JWTError, jwt
from websockets.datastructures import Headers

from . import constants

ALGORITHM = "HS256"
_FALSE_MARKERS = {"", "0", "false", "no"}


class IdentityProvider(Protocol):
    """Turns a credential into a stable identity string."""

    async def verify(self, credential: str) -> Optional[str]: ...

    async def register_guest(self) -> str: ...


def issue_token(username: str, secret: str, expires_in: int = constants.TOKEN_TTL_SECONDS) -> str:
    """Mint a signed token carrying ``username``."""

    expire = datetime.now(timezone.utc) + timedelta(seconds=expires_in)
    return jwt.encode({"username": username, "exp": expire}, secret, algorithm=ALGORITHM)


def new_guest_identity() -> str:
    return f"{constants.GUEST_PREFIX}{secrets.token_hex(3)}"


class TokenIdentityProvider:
    """Identity provider backed by HS256 signed tokens."""

    def __init__(self, secret: str) -> None:
        if not secret:
            raise ValueError("A token secret is required")
        self.secret = secret

    async def verify(self, credential: str) -> Optional[str]:
        try:
            claims = jwt.decode(credential, self.secret, algorithms=[ALGORITHM])
        except JWTError:
            return None
        username = claims.get("username")
        if not isinstance(username, str) or not username.strip():
            return None
        return username

    async def register_guest(self) -> str:
        return new_guest_identity()


def credentials_from_request(path: str, headers: Headers) -> Tuple[Optional[str], bool]:
    """Extract ``(token, guest)`` from an upgrade request.

    The token comes from a ``Bearer`` authorization header or a ``token``
    query parameter; ``guest`` is set by a truthy ``guest`` query parameter.
    Raises ``ValueError`` when more than one authorization header is sent.
    """

    query = parse_qs(urlsplit(path).query, keep_blank_values=True)
    token: Optional[str] = None
    authorizations = headers.get_all("Authorization")
    if len(authorizations) > 1:
        raise ValueError("Ambiguous Authorization header")
    if authorizations:
        authorization = authorizations[0]
        scheme, _, value = authorization.partition(" ")
        if scheme.lower() == "bearer" and value.strip():
            token = value.strip()
    if token is None:
        values = query.get("token")
        if values and values[0]:
            token = values[0]
    guest_values = query.get("guest")
    guest = bool(guest_values) and guest_values[0].strip().lower() not in _FALSE_MARKERS
    return token, guest


async def authenticate(provider: IdentityProvider, token: Optional[str], guest: bool) -> Optional[str]:
    """Resolve the identity for an upgrade, or ``None`` to refuse it.

    A token that was supplied but fails verification is refused even when the
    guest marker is also present.
    """

    if token is not None:
        return await provider.verify(token)
    if guest:
        return await provider.register_guest()
    return None
