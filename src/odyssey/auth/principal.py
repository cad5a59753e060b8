"""Turn a request's token into the User making the request."""

from typing import Mapping

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from odyssey.auth.resolver import resolve_token
from odyssey.auth.tokens import TokenCodec
from odyssey.db.models import User
from odyssey.errors import PrincipalNotFound, TokenError

logger = structlog.get_logger()


async def resolve_principal(db: AsyncSession, subject: str) -> User:
    """Load the user a validated token names.

    Learn: a signed, unexpired token can outlive its account. That is an
    authentication failure (PrincipalNotFound → 401), not a server error.
    """
    result = await db.execute(select(User).where(User.email == subject))
    user = result.scalars().first()
    if user is None:
        raise PrincipalNotFound()
    return user


async def resolve_and_validate(
    headers: Mapping[str, str],
    cookies: Mapping[str, str],
    db: AsyncSession,
    codec: TokenCodec,
    cookie_name: str,
) -> User:
    """Token resolver → codec → principal resolver, in that order.

    Raises NoCredential, Malformed, InvalidSignature, Expired or
    PrincipalNotFound. Store errors propagate untouched.
    """
    token = resolve_token(headers, cookies, cookie_name)
    try:
        subject = codec.validate(token)
    except TokenError as e:
        logger.info("auth.token_rejected", reason=e.reason)
        raise
    return await resolve_principal(db, subject)
