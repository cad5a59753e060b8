"""Comment service.

Learn: deleting a comment has two independent allow paths (its author,
or the owner of the journal it is on). Both live in the guard's
(comment, delete) rule, not here.
"""

import uuid

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from odyssey.auth.guard import Action, CommentRef, JournalRef
from odyssey.db.models import Comment, User, utcnow
from odyssey.errors import NotFound
from odyssey.services.access import enforce, load_journal

logger = structlog.get_logger()


class CommentService:
    """Business logic for comments."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def add(
        self, principal: User, journal_id: uuid.UUID, content: str
    ) -> Comment:
        journal = await load_journal(self.db, journal_id)
        ref = CommentRef(author_id=principal.id, journal=JournalRef.of(journal))
        enforce(principal.id, journal, ref, Action.CREATE)

        comment = Comment(
            journal_id=journal.id,
            user_id=principal.id,
            content=content,
            created_at=utcnow(),
        )
        self.db.add(comment)
        await self.db.commit()
        logger.info("comment.created", comment_id=str(comment.id), journal_id=str(journal_id))

        result = await self.db.execute(
            select(Comment)
            .where(Comment.id == comment.id)
            .options(selectinload(Comment.user))
        )
        return result.scalars().one()

    async def delete(
        self, principal: User, journal_id: uuid.UUID, comment_id: uuid.UUID
    ) -> None:
        journal = await load_journal(self.db, journal_id)
        comment = await self.db.get(Comment, comment_id)
        if comment is None or comment.journal_id != journal.id:
            # A comment id paired with the wrong journal does not exist here.
            # Still report "journal not found" first if the journal is hidden.
            enforce(principal.id, journal, JournalRef.of(journal), Action.READ)
            raise NotFound("Comment not found")

        enforce(principal.id, journal, CommentRef.of(comment, journal), Action.DELETE)

        await self.db.delete(comment)
        await self.db.commit()
        logger.info("comment.deleted", comment_id=str(comment_id), journal_id=str(journal_id))
