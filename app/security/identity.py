"""Bearer credential verification. Resolves a JWT to the authenticated user id. No FastAPI."""

from typing import Optional

import jwt

from app.security.exceptions import UnauthorizedError

BEARER_SCHEME = "bearer"


def extract_bearer_token(authorization: Optional[str]) -> str:
    """Return the token from an Authorization header value. Raises UnauthorizedError if absent."""
    if not authorization or not authorization.strip():
        raise UnauthorizedError("Missing authorization header")
    parts = authorization.strip().split(None, 1)
    if parts[0].lower() == BEARER_SCHEME:
        value = parts[1].strip() if len(parts) > 1 else ""
    else:
        value = authorization.strip()
    if not value:
        raise UnauthorizedError("Missing bearer token")
    return value


class IdentityVerifier:
    """
    Verifies HS-signed access tokens issued by the identity platform.
    The subject claim carries the user id; expiry is always checked, audience when configured.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", audience: Optional[str] = None) -> None:
        if not secret:
            raise ValueError("IdentityVerifier requires a signing secret")
        self._secret = secret
        self._algorithm = algorithm
        self._audience = audience

    def verify(self, token: str) -> str:
        """Decode token and return the user id. Raises UnauthorizedError if invalid."""
        options = {"require": ["sub", "exp"], "verify_aud": self._audience is not None}
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                audience=self._audience,
                options=options,
            )
        except jwt.ExpiredSignatureError:
            raise UnauthorizedError("Token has expired") from None
        except jwt.InvalidTokenError:
            raise UnauthorizedError("Unauthorized") from None
        subject = claims.get("sub")
        if not isinstance(subject, str) or not subject.strip():
            raise UnauthorizedError("Unauthorized")
        return subject

    def verify_header(self, authorization: Optional[str]) -> str:
        return self.verify(extract_bearer_token(authorization))
