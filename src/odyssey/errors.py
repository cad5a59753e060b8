"""Error taxonomy shared by the auth core and the services.

Learn: services raise these instead of HTTPException so they can be
used (and tested) without a web request. main.py registers handlers
that turn each family into one HTTP status with a generic message:

- AuthError → 401 (never says *why*: unknown user, bad password,
  expired token and tampered token all look the same to the client)
- DuplicateIdentity → 409
- Forbidden → 403
- NotFound → 404
- ValidationFailed → 400

Anything else (e.g. a database outage) is deliberately not part of
this hierarchy and surfaces as a 500.
"""


class OdysseyError(Exception):
    """Base class for all expected, terminal failures."""

    detail = "Request failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.detail)


# ─── Authentication ──────────────────────────────────────


class AuthError(OdysseyError):
    detail = "Authentication required"


class InvalidCredentials(AuthError):
    """Unknown email or wrong password — indistinguishable on purpose."""

    detail = "Invalid email or password"


class NoCredential(AuthError):
    """Neither the Authorization header nor the cookie carried a token."""

    detail = "Authentication required"


class PrincipalNotFound(AuthError):
    """Token was valid but its subject no longer has an account."""

    detail = "Authentication required"


class TokenError(AuthError):
    """Token could not be accepted. Subclasses exist for diagnostics only."""

    detail = "Invalid or expired token, please sign in again"
    reason = "invalid"


class Malformed(TokenError):
    reason = "malformed"


class InvalidSignature(TokenError):
    reason = "invalid_signature"


class Expired(TokenError):
    reason = "expired"


# ─── Registration ────────────────────────────────────────


class DuplicateIdentity(OdysseyError):
    detail = "Email is already registered"


# ─── Authorization / lookup ──────────────────────────────


class Forbidden(OdysseyError):
    detail = "You do not have permission to perform this action"


class NotFound(OdysseyError):
    detail = "Not found"


class ValidationFailed(OdysseyError):
    detail = "Invalid request"
