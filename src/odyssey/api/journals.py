"""Journal API routes.

Learn: FastAPI routers define HTTP endpoints. Each route function
receives dependencies (db session, current user) via Depends() and
delegates to the service layer. Authorization decisions happen in the
service (via auth/guard.py); routes only choose between required and
optional authentication.
"""

import uuid
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from odyssey.auth.dependencies import get_current_user, get_current_user_optional
from odyssey.db.engine import get_db
from odyssey.db.models import User
from odyssey.schemas.journal import (
    JournalCreate,
    JournalPage,
    JournalRead,
    JournalUpdate,
)
from odyssey.services.journal_service import JournalService, journal_to_read

router = APIRouter(prefix="/journals")


def _svc(db: AsyncSession = Depends(get_db)) -> JournalService:
    return JournalService(db)


# ─── Listings ───────────────────────────────────────────

@router.get("/public", response_model=JournalPage)
async def list_public_journals(
    page: int = Query(0, ge=0),
    size: int = Query(20, ge=1, le=100),
    sort_dir: Literal["asc", "desc"] = "desc",
    svc: JournalService = Depends(_svc),
):
    """Public feed, newest first by default. No auth required."""
    items, total = await svc.list_public(
        page=page, size=size, newest_first=(sort_dir == "desc")
    )
    return JournalPage(
        items=[journal_to_read(j) for j in items],
        page=page,
        size=size,
        total=total,
    )


@router.get("/my", response_model=list[JournalRead])
async def list_my_journals(
    user: User = Depends(get_current_user),
    svc: JournalService = Depends(_svc),
):
    return [journal_to_read(j) for j in await svc.list_for_user(user)]


# ─── Single journal ─────────────────────────────────────

@router.get("/share/{journal_id}", response_model=JournalRead)
async def share_journal(
    journal_id: uuid.UUID,
    user: Optional[User] = Depends(get_current_user_optional),
    svc: JournalService = Depends(_svc),
):
    """Shareable view — same visibility rules as a normal read."""
    return journal_to_read(await svc.get(user, journal_id))


@router.get("/{journal_id}", response_model=JournalRead)
async def get_journal(
    journal_id: uuid.UUID,
    user: Optional[User] = Depends(get_current_user_optional),
    svc: JournalService = Depends(_svc),
):
    return journal_to_read(await svc.get(user, journal_id))


@router.post("", response_model=JournalRead, status_code=201)
async def create_journal(
    body: JournalCreate,
    user: User = Depends(get_current_user),
    svc: JournalService = Depends(_svc),
):
    return journal_to_read(await svc.create(user, body))


@router.put("/{journal_id}", response_model=JournalRead)
async def update_journal(
    journal_id: uuid.UUID,
    body: JournalUpdate,
    user: User = Depends(get_current_user),
    svc: JournalService = Depends(_svc),
):
    return journal_to_read(await svc.update(user, journal_id, body))


@router.delete("/{journal_id}", status_code=204)
async def delete_journal(
    journal_id: uuid.UUID,
    user: User = Depends(get_current_user),
    svc: JournalService = Depends(_svc),
):
    await svc.delete(user, journal_id)
    return Response(status_code=204)
