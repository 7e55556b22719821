from __future__ import annotations

from typing import Optional, Protocol, Sequence

from jose import JWTError, jwt

from ..core.exceptions import AuthenticationError


def bearer_token(header: Optional[str]) -> Optional[str]:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not header:
        return None
    scheme, _, token = header.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


class Authenticator(Protocol):
    def authenticate(self, token: Optional[str]) -> str:
        """Return the caller's user id or raise AuthenticationError."""

        raise NotImplementedError


class JwtAuthenticator(Authenticator):
    """Validate access tokens issued by the identity provider (Supabase, HS256).

    Only "is this a valid session" is checked; there is no per-record ownership.
    """

    def __init__(self, secret: str, *, audience: Optional[str] = None, algorithms: Sequence[str] = ("HS256",)):
        self._secret = secret
        self._audience = audience
        self._algorithms = list(algorithms)

    def authenticate(self, token: Optional[str]) -> str:
        if not token:
            raise AuthenticationError("Unauthorized")
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=self._algorithms,
                audience=self._audience,
                options={"verify_aud": self._audience is not None},
            )
        except JWTError:
            raise AuthenticationError("Unauthorized") from None

        user_id = payload.get("sub")
        if not user_id:
            raise AuthenticationError("Unauthorized")
        return str(user_id)
