"""Reaction service — idempotent add, no-op remove.

Learn: a user has at most one reaction of each type per journal. The
uniqueness is a DB constraint (uq_reactions_journal_user_type); the
check-then-insert below is the fast path and the IntegrityError branch
covers two concurrent adds of the same reaction. Either way the caller
sees success and one row. Any other integrity failure (a foreign key
to a journal deleted mid-request) is not swallowed.
"""

import uuid

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from odyssey.auth.guard import Action, JournalRef, ReactionRef
from odyssey.db.models import Reaction, ReactionType, User
from odyssey.errors import ValidationFailed
from odyssey.schemas.journal import ReactionSummary
from odyssey.services.access import enforce, load_journal

logger = structlog.get_logger()


def summarize_counts(counts: dict[ReactionType, int]) -> list[ReactionSummary]:
    """Per-type counts in ReactionType order, lower-cased, zeros skipped."""
    return [
        ReactionSummary(type=t.value.lower(), count=counts[t])
        for t in ReactionType
        if counts.get(t)
    ]


def parse_reaction_type(raw: str) -> ReactionType:
    """Case-insensitive reaction name → ReactionType."""
    try:
        return ReactionType[raw.strip().upper()]
    except KeyError:
        raise ValidationFailed(f"Invalid reaction type: {raw}")


class ReactionService:
    """Business logic for reactions."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _find(
        self, journal_id: uuid.UUID, user_id: uuid.UUID, reaction_type: ReactionType
    ) -> Reaction | None:
        result = await self.db.execute(
            select(Reaction).where(
                Reaction.journal_id == journal_id,
                Reaction.user_id == user_id,
                Reaction.type == reaction_type,
            )
        )
        return result.scalars().first()

    async def summary(self, journal_id: uuid.UUID) -> list[ReactionSummary]:
        """Reaction counts per type for a journal, in ReactionType order."""
        result = await self.db.execute(
            select(Reaction.type, func.count())
            .where(Reaction.journal_id == journal_id)
            .group_by(Reaction.type)
        )
        return summarize_counts({t: n for t, n in result.all()})

    async def add(
        self, principal: User, journal_id: uuid.UUID, raw_type: str
    ) -> list[ReactionSummary]:
        reaction_type = parse_reaction_type(raw_type)
        journal = await load_journal(self.db, journal_id)
        user_id = principal.id
        ref = ReactionRef(owner_id=user_id, journal=JournalRef.of(journal))
        enforce(user_id, journal, ref, Action.CREATE)

        if await self._find(journal_id, user_id, reaction_type) is None:
            self.db.add(
                Reaction(journal_id=journal_id, user_id=user_id, type=reaction_type)
            )
            try:
                await self.db.commit()
                logger.info(
                    "reaction.added",
                    journal_id=str(journal_id),
                    type=reaction_type.value,
                )
            except IntegrityError:
                await self.db.rollback()
                if await self._find(journal_id, user_id, reaction_type) is None:
                    # Not a duplicate: the journal (or user) went away mid-add.
                    await load_journal(self.db, journal_id)
                    raise

        return await self.summary(journal_id)

    async def remove(
        self, principal: User, journal_id: uuid.UUID, raw_type: str
    ) -> list[ReactionSummary]:
        reaction_type = parse_reaction_type(raw_type)
        journal = await load_journal(self.db, journal_id)
        enforce(principal.id, journal, JournalRef.of(journal), Action.READ)

        reaction = await self._find(journal_id, principal.id, reaction_type)
        if reaction is not None:
            enforce(principal.id, journal, ReactionRef.of(reaction, journal), Action.DELETE)
            await self.db.delete(reaction)
            await self.db.commit()
            logger.info(
                "reaction.removed",
                journal_id=str(journal_id),
                type=reaction_type.value,
            )

        return await self.summary(journal_id)
