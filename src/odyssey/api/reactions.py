"""Reaction API routes.

Learn: both endpoints return the journal's updated reaction summary,
and both are idempotent: adding a reaction you already left, or
removing one you never left, succeeds without changing anything.
"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from odyssey.auth.dependencies import get_current_user
from odyssey.db.engine import get_db
from odyssey.db.models import User
from odyssey.schemas.journal import ReactionCreate, ReactionSummary
from odyssey.services.reaction_service import ReactionService

router = APIRouter(prefix="/journals/{journal_id}/reactions")


def _svc(db: AsyncSession = Depends(get_db)) -> ReactionService:
    return ReactionService(db)


@router.post("", response_model=list[ReactionSummary])
async def add_reaction(
    journal_id: uuid.UUID,
    body: ReactionCreate,
    user: User = Depends(get_current_user),
    svc: ReactionService = Depends(_svc),
):
    return await svc.add(user, journal_id, body.type)


@router.delete("/{reaction_type}", response_model=list[ReactionSummary])
async def remove_reaction(
    journal_id: uuid.UUID,
    reaction_type: str,
    user: User = Depends(get_current_user),
    svc: ReactionService = Depends(_svc),
):
    return await svc.remove(user, journal_id, reaction_type)
