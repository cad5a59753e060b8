"""Location search — substring match over journal locations."""

import uuid
from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from odyssey.db.models import Journal, Location


class LocationService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def search(
        self, query: str, principal_id: Optional[uuid.UUID] = None, limit: int = 50
    ) -> list[Location]:
        """Case-insensitive match on name, country or city.

        Only locations of journals the caller could read are returned.
        """
        query = query.strip()
        if not query:
            return []

        visible = Journal.is_public.is_(True)
        if principal_id is not None:
            visible = or_(visible, Journal.user_id == principal_id)

        result = await self.db.execute(
            select(Location)
            .join(Journal, Location.journal_id == Journal.id)
            .where(
                visible,
                or_(
                    Location.name.icontains(query, autoescape=True),
                    Location.country.icontains(query, autoescape=True),
                    Location.city.icontains(query, autoescape=True),
                ),
            )
            .order_by(Location.name)
            .limit(limit)
        )
        return list(result.scalars().all())
