"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: unlike a blanket dependencies=[Depends(get_current_user)] per
router, each route here declares its own auth: some journal reads and
the location search are open to anonymous visitors, so authentication
is chosen per endpoint (get_current_user vs get_current_user_optional).
"""

from fastapi import APIRouter

from odyssey.api.auth import router as auth_router
from odyssey.api.comments import router as comments_router
from odyssey.api.health import router as health_router
from odyssey.api.journals import router as journals_router
from odyssey.api.locations import router as locations_router
from odyssey.api.reactions import router as reactions_router

api_router = APIRouter(prefix="/api")

api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])
api_router.include_router(journals_router, tags=["journals"])
api_router.include_router(comments_router, tags=["comments"])
api_router.include_router(reactions_router, tags=["reactions"])
api_router.include_router(locations_router, tags=["locations"])
