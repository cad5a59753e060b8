"""Comment API routes — nested under a journal."""

import uuid

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from odyssey.auth.dependencies import get_current_user
from odyssey.db.engine import get_db
from odyssey.db.models import User
from odyssey.schemas.journal import CommentCreate, CommentRead
from odyssey.services.comment_service import CommentService
from odyssey.services.journal_service import comment_to_read

router = APIRouter(prefix="/journals/{journal_id}/comments")


def _svc(db: AsyncSession = Depends(get_db)) -> CommentService:
    return CommentService(db)


@router.post("", response_model=CommentRead, status_code=201)
async def add_comment(
    journal_id: uuid.UUID,
    body: CommentCreate,
    user: User = Depends(get_current_user),
    svc: CommentService = Depends(_svc),
):
    comment = await svc.add(user, journal_id, body.content)
    return comment_to_read(comment)


@router.delete("/{comment_id}", status_code=204)
async def delete_comment(
    journal_id: uuid.UUID,
    comment_id: uuid.UUID,
    user: User = Depends(get_current_user),
    svc: CommentService = Depends(_svc),
):
    """Allowed for the comment's author and the journal's owner."""
    await svc.delete(user, journal_id, comment_id)
    return Response(status_code=204)
