"""Journal service — CRUD plus visibility-aware reads.

Learn: every method that touches an existing journal goes through
access.enforce(), so the ownership and visibility rules are the ones in
auth/guard.py and nowhere else.
"""

import uuid
from collections import Counter
from typing import Optional

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from odyssey.auth.guard import Action, JournalRef
from odyssey.db.models import (
    Comment,
    Journal,
    JournalImage,
    Location,
    User,
    utcnow,
)
from odyssey.schemas.journal import (
    CommentRead,
    JournalCreate,
    JournalRead,
    JournalUpdate,
    LocationData,
    LocationRead,
)
from odyssey.services.access import (
    enforce,
    full_journal_options,
    load_journal,
    principal_id,
)
from odyssey.services.reaction_service import summarize_counts

logger = structlog.get_logger()


def comment_to_read(comment: Comment) -> CommentRead:
    return CommentRead(
        id=comment.id,
        content=comment.content,
        user_id=comment.user_id,
        user_name=comment.user.name,
        user_avatar=comment.user.avatar,
        created_at=comment.created_at,
    )


def journal_to_read(journal: Journal) -> JournalRead:
    """Map a fully-loaded Journal to its API shape."""
    return JournalRead(
        id=journal.id,
        title=journal.title,
        content=journal.content,
        is_public=journal.is_public,
        user_id=journal.user_id,
        created_at=journal.created_at,
        updated_at=journal.updated_at,
        location=(
            LocationRead.model_validate(journal.location)
            if journal.location is not None
            else None
        ),
        images=[image.url for image in journal.images],
        comments=[comment_to_read(c) for c in journal.comments],
        reactions=summarize_counts(Counter(r.type for r in journal.reactions)),
    )


class JournalService:
    """Business logic for journals."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Reads ──────────────────────────────────────────

    async def list_public(
        self, page: int = 0, size: int = 20, newest_first: bool = True
    ) -> tuple[list[Journal], int]:
        order = Journal.created_at.desc() if newest_first else Journal.created_at.asc()
        total = await self.db.scalar(
            select(func.count()).select_from(Journal).where(Journal.is_public.is_(True))
        )
        result = await self.db.execute(
            select(Journal)
            .where(Journal.is_public.is_(True))
            .options(*full_journal_options())
            .order_by(order, Journal.id)
            .offset(page * size)
            .limit(size)
        )
        return list(result.scalars().all()), int(total or 0)

    async def list_for_user(self, user: User) -> list[Journal]:
        result = await self.db.execute(
            select(Journal)
            .where(Journal.user_id == user.id)
            .options(*full_journal_options())
            .order_by(Journal.created_at.desc())
        )
        return list(result.scalars().all())

    async def get(self, principal: Optional[User], journal_id: uuid.UUID) -> Journal:
        """Read a journal. Private journals of other users are NotFound."""
        journal = await load_journal(self.db, journal_id, full=True)
        enforce(principal_id(principal), journal, JournalRef.of(journal), Action.READ)
        return journal

    # ─── Writes ─────────────────────────────────────────

    async def create(self, principal: User, data: JournalCreate) -> Journal:
        now = utcnow()
        journal = Journal(
            user_id=principal.id,
            title=data.title,
            content=data.content,
            is_public=data.is_public,
            created_at=now,
            updated_at=now,
        )
        if data.location is not None:
            journal.location = Location(**data.location.model_dump())
        journal.images = [
            JournalImage(url=url, position=i) for i, url in enumerate(data.images)
        ]
        self.db.add(journal)
        await self.db.commit()

        logger.info("journal.created", journal_id=str(journal.id), public=data.is_public)
        return await load_journal(self.db, journal.id, full=True)

    async def update(
        self, principal: User, journal_id: uuid.UUID, data: JournalUpdate
    ) -> Journal:
        journal = await load_journal(self.db, journal_id, full=True)
        enforce(principal.id, journal, JournalRef.of(journal), Action.UPDATE)

        journal.title = data.title
        journal.content = data.content
        journal.is_public = data.is_public
        journal.updated_at = utcnow()

        if data.location is not None:
            self._apply_location(journal, data.location)

        if data.images is not None:
            journal.images.clear()
            await self.db.flush()
            journal.images.extend(
                JournalImage(url=url, position=i) for i, url in enumerate(data.images)
            )

        await self.db.commit()
        logger.info("journal.updated", journal_id=str(journal_id))
        return await load_journal(self.db, journal_id, full=True)

    async def delete(self, principal: User, journal_id: uuid.UUID) -> None:
        journal = await load_journal(self.db, journal_id, full=True)
        enforce(principal.id, journal, JournalRef.of(journal), Action.DELETE)

        await self.db.delete(journal)
        await self.db.commit()
        logger.info("journal.deleted", journal_id=str(journal_id))

    @staticmethod
    def _apply_location(journal: Journal, data: LocationData) -> None:
        if journal.location is None:
            journal.location = Location(**data.model_dump())
            return
        for field, value in data.model_dump().items():
            setattr(journal.location, field, value)
