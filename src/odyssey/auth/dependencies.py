"""FastAPI auth dependencies and the token cookie contract.

Learn: These are used as Depends() in route handlers to extract
and validate the current user from the request.

Two places a token can come from (header wins, see resolver.py):
1. Authorization: Bearer <token> (API clients, CLI)
2. The HTTP-only odyssey-token cookie (browsers)

Auth failures are raised as AuthError subclasses; the handler in
main.py turns every one of them into the same 401.
"""

from typing import Optional

from fastapi import Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from odyssey.auth.principal import resolve_and_validate
from odyssey.auth.tokens import TokenCodec, get_token_codec
from odyssey.config import settings
from odyssey.db.engine import get_db
from odyssey.db.models import User
from odyssey.errors import NoCredential


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
    codec: TokenCodec = Depends(get_token_codec),
) -> User:
    """Resolve the authenticated user (required — 401 if no auth)."""
    return await resolve_and_validate(
        request.headers,
        request.cookies,
        db,
        codec,
        settings.token_cookie_name,
    )


async def get_current_user_optional(
    request: Request,
    db: AsyncSession = Depends(get_db),
    codec: TokenCodec = Depends(get_token_codec),
) -> Optional[User]:
    """Resolve the user if a token was sent (soft auth).

    Learn: used by routes anonymous visitors may call, like reading a
    public journal. Sending *no* token is fine; sending a bad one is
    still a 401.
    """
    try:
        return await get_current_user(request, db, codec)
    except NoCredential:
        return None


# ─── Cookie contract ─────────────────────────────────────


def set_token_cookie(response: Response, token: str, max_age: int) -> None:
    """Hand the token to the browser as an HTTP-only cookie.

    max_age is the TTL of the codec that issued the token, so cookie and
    token expire together.
    """
    response.set_cookie(
        key=settings.token_cookie_name,
        value=token,
        max_age=max_age,
        path=settings.token_cookie_path,
        httponly=True,
        secure=settings.token_cookie_secure,
        samesite="lax",
    )


def clear_token_cookie(response: Response) -> None:
    """Overwrite the cookie with an empty, already-expired one.

    Learn: this is all logout does. The token itself stays valid until
    its exp, so a client that kept a copy can keep using it as a
    Bearer header. There is no denylist.
    """
    response.set_cookie(
        key=settings.token_cookie_name,
        value="",
        max_age=0,
        path=settings.token_cookie_path,
        httponly=True,
        secure=settings.token_cookie_secure,
        samesite="lax",
    )
