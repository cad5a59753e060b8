"""Location search route."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from odyssey.auth.dependencies import get_current_user_optional
from odyssey.db.engine import get_db
from odyssey.db.models import User
from odyssey.schemas.journal import LocationRead
from odyssey.services.access import principal_id
from odyssey.services.location_service import LocationService

router = APIRouter(prefix="/locations")


@router.get("/search", response_model=list[LocationRead])
async def search_locations(
    q: str = Query(..., min_length=1, max_length=100),
    user: Optional[User] = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db),
):
    """Match q against location name, country and city."""
    return await LocationService(db).search(q, principal_id=principal_id(user))
