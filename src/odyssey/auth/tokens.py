"""JWT token creation and verification.

Learn: JWT (JSON Web Token) provides stateless authentication. A token
is header.claims.signature, base64url encoded, signed with HS256 using
the server's secret. It carries only:

- sub: the user's email
- iat: when it was issued
- exp: iat + TTL

There is no server-side session or revocation list. A token is valid
exactly when its signature checks out and exp is still in the future;
logging out clears the cookie but cannot recall a copied token. Keep
the TTL short enough that this is acceptable.

validate() is a pure function of (token, key, clock). The clock is
injected so tests can move time forward without sleeping.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable

import jwt

from odyssey.config import settings
from odyssey.errors import Expired, InvalidSignature, Malformed

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TokenCodec:
    """Issue and validate signed, time-bounded tokens."""

    def __init__(
        self,
        key: bytes,
        ttl: timedelta,
        algorithm: str = "HS256",
        clock: Clock = utc_now,
    ):
        if not key:
            raise ValueError("Signing key must not be empty")
        if ttl <= timedelta(0):
            raise ValueError("Token TTL must be positive")
        self._key = key
        self.ttl = ttl
        self.algorithm = algorithm
        self._clock = clock

    def issue(self, subject: str) -> str:
        """Create a token for `subject` expiring one TTL from now."""
        issued_at = self._clock()
        expires_at = issued_at + self.ttl
        payload = {
            "sub": subject,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        return jwt.encode(payload, self._key, algorithm=self.algorithm)

    def validate(self, token: str) -> str:
        """Verify a token and return its subject.

        Raises Malformed, InvalidSignature or Expired. Callers should
        treat all three the same ("sign in again"); the distinction is
        for logs.
        """
        try:
            payload = jwt.decode(
                token,
                self._key,
                algorithms=[self.algorithm],
                # exp/iat are checked below against the injected clock
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "require": ["sub", "exp"],
                },
            )
        except jwt.InvalidSignatureError:
            raise InvalidSignature()
        except jwt.InvalidAlgorithmError:
            raise InvalidSignature("Token signed with an unexpected algorithm")
        except jwt.InvalidTokenError as e:
            raise Malformed(f"Malformed token: {e}")

        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            raise Malformed("Token has no subject")

        exp = payload.get("exp")
        if isinstance(exp, bool) or not isinstance(exp, (int, float)):
            raise Malformed("Token expiry is not a timestamp")
        if exp <= self._clock().timestamp():
            raise Expired()

        return subject


def get_token_codec() -> TokenCodec:
    """Codec built from settings. FastAPI dependency; tests override it."""
    return TokenCodec(
        key=settings.signing_key,
        ttl=settings.token_ttl,
        algorithm=settings.jwt_algorithm,
    )
