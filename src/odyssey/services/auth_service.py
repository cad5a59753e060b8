"""Account service — registration, credential verification, profiles.

Learn: Service layer separates business logic from HTTP routing.
authenticate() is the credential verifier: an unknown email and a
wrong password raise the same InvalidCredentials, and both paths spend
one bcrypt verification so response time does not tell them apart.
"""

import uuid

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from odyssey.auth.password import dummy_hash, hash_password, verify_password
from odyssey.db.models import User
from odyssey.errors import DuplicateIdentity, Forbidden, InvalidCredentials, NotFound

logger = structlog.get_logger()


class AuthService:
    """Business logic for accounts."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_email(self, email: str) -> User | None:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalars().first()

    async def email_exists(self, email: str) -> bool:
        result = await self.db.execute(select(User.id).where(User.email == email))
        return result.first() is not None

    # ─── Registration ───────────────────────────────────

    async def register(self, email: str, name: str, password: str) -> User:
        """Create an account. Raises DuplicateIdentity if the email is taken."""
        if await self.email_exists(email):
            raise DuplicateIdentity()

        user = User(
            email=email,
            name=name,
            password_hash=hash_password(password),
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration of the same email
            await self.db.rollback()
            raise DuplicateIdentity()

        logger.info("auth.registered", user_id=str(user.id))
        return user

    # ─── Login ──────────────────────────────────────────

    async def authenticate(self, email: str, password: str) -> User:
        """Verify an email/password pair and return the user."""
        user = await self.get_by_email(email)
        if user is None:
            verify_password(password, dummy_hash())
            logger.info("auth.login_failed")
            raise InvalidCredentials()

        if not verify_password(password, user.password_hash):
            logger.info("auth.login_failed")
            raise InvalidCredentials()

        logger.info("auth.login", user_id=str(user.id))
        return user

    # ─── Profiles ───────────────────────────────────────

    async def get_user(self, user_id: uuid.UUID) -> User:
        user = await self.db.get(User, user_id)
        if user is None:
            raise NotFound("User not found")
        return user

    async def update_profile(
        self, principal: User, user_id: uuid.UUID, changes: dict
    ) -> User:
        """Apply non-None profile fields. Users may only edit themselves."""
        user = await self.get_user(user_id)
        if user.id != principal.id:
            raise Forbidden("You can only update your own profile")

        for field in ("name", "avatar", "bio", "location"):
            value = changes.get(field)
            if value is not None:
                setattr(user, field, value)

        await self.db.commit()
        return user
