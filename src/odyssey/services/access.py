"""Shared lookup + authorization helpers for the journal services.

Learn: the guard answers allow/deny; this module decides how a denial
is *reported*. If the principal cannot even read the journal involved,
every denial becomes NotFound, the same answer as for a journal that
does not exist. Only principals who can see the journal get a 403.
"""

import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from odyssey.auth import guard
from odyssey.auth.guard import Action, JournalRef, Resource
from odyssey.db.models import Comment, Journal, User
from odyssey.errors import Forbidden, NotFound


def full_journal_options():
    return (
        selectinload(Journal.location),
        selectinload(Journal.images),
        selectinload(Journal.comments).selectinload(Comment.user),
        selectinload(Journal.reactions),
    )


def principal_id(user: Optional[User]) -> Optional[uuid.UUID]:
    return user.id if user is not None else None


async def load_journal(
    db: AsyncSession, journal_id: uuid.UUID, *, full: bool = False
) -> Journal:
    """Fetch a journal or raise NotFound.

    full=True eagerly loads everything JournalRead needs (async sessions
    cannot lazy-load).
    """
    q = select(Journal).where(Journal.id == journal_id)
    if full:
        q = q.options(*full_journal_options()).execution_options(populate_existing=True)
    result = await db.execute(q)
    journal = result.scalars().first()
    if journal is None:
        raise NotFound("Journal not found")
    return journal


def enforce(
    principal: Optional[uuid.UUID],
    journal: Journal,
    resource: Resource,
    action: Action,
) -> None:
    """Apply the guard, collapsing denials on unreadable journals to NotFound."""
    if guard.is_allowed(principal, resource, action):
        return
    if not guard.is_allowed(principal, JournalRef.of(journal), Action.READ):
        raise NotFound("Journal not found")
    raise Forbidden()
