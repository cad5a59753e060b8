"""Locate the token in an inbound request.

Learn: browsers send the token back automatically in the HTTP-only
cookie set at login; API clients and the CLI send it as
"Authorization: Bearer <token>". When both are present the header
wins, so an explicit credential always overrides an ambient one.
"""

from typing import Mapping, Optional

from odyssey.errors import NoCredential

BEARER_PREFIX = "Bearer "  # case-sensitive


def _header(headers: Mapping[str, str], name: str) -> Optional[str]:
    value = headers.get(name)
    if value is not None:
        return value
    # Plain dicts are case-sensitive; Starlette's Headers already are not.
    lowered = name.lower()
    for key, val in headers.items():
        if key.lower() == lowered:
            return val
    return None


def resolve_token(
    headers: Mapping[str, str],
    cookies: Mapping[str, str],
    cookie_name: str,
) -> str:
    """Return the candidate token, header first, then cookie.

    Raises NoCredential when neither source carries a non-empty value.
    The token is not validated here.
    """
    authorization = _header(headers, "Authorization")
    if authorization and authorization.startswith(BEARER_PREFIX):
        token = authorization[len(BEARER_PREFIX):]
        if token:
            return token

    token = cookies.get(cookie_name)
    if token:
        return token

    raise NoCredential()
