"""Auth API — registration, login, logout, profiles.

Learn: Routes for the account lifecycle:
- POST /auth/register → create account, returns {user, token}, sets cookie
- POST /auth/login → email/password → {user, token}, sets cookie
- POST /auth/logout → clears the cookie (token itself stays valid to exp)
- GET /auth/me → current user
- GET /auth/users/:id → a user's public profile
- PUT /auth/users/:id → edit your own profile
"""

import uuid

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from odyssey.auth.dependencies import (
    clear_token_cookie,
    get_current_user,
    set_token_cookie,
)
from odyssey.auth.tokens import TokenCodec, get_token_codec
from odyssey.db.engine import get_db
from odyssey.db.models import User
from odyssey.schemas.user import (
    AuthResponse,
    LoginRequest,
    ProfileUpdate,
    RegisterRequest,
    UserRead,
)
from odyssey.services.auth_service import AuthService

router = APIRouter(prefix="/auth")


def _svc(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db)


def _signed_in(user: User, codec: TokenCodec, response: Response) -> AuthResponse:
    token = codec.issue(user.email)
    set_token_cookie(response, token, max_age=int(codec.ttl.total_seconds()))
    return AuthResponse(user=UserRead.model_validate(user), token=token)


# ─── Register / Login / Logout ──────────────────────────


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(
    body: RegisterRequest,
    response: Response,
    svc: AuthService = Depends(_svc),
    codec: TokenCodec = Depends(get_token_codec),
):
    """Create a new account and sign it in."""
    user = await svc.register(email=body.email, name=body.name, password=body.password)
    return _signed_in(user, codec, response)


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    response: Response,
    svc: AuthService = Depends(_svc),
    codec: TokenCodec = Depends(get_token_codec),
):
    """Login with email and password → token (body + cookie)."""
    user = await svc.authenticate(body.email, body.password)
    return _signed_in(user, codec, response)


@router.post("/logout", status_code=204)
async def logout():
    """Clear the token cookie.

    Learn: no server-side state changes. A Bearer client holding the
    same token can keep using it until it expires.
    """
    response = Response(status_code=204)
    clear_token_cookie(response)
    return response


# ─── Current user / profiles ────────────────────────────


@router.get("/me", response_model=UserRead)
async def get_me(user: User = Depends(get_current_user)):
    return user


@router.get("/users/{user_id}", response_model=UserRead)
async def get_user(user_id: uuid.UUID, svc: AuthService = Depends(_svc)):
    return await svc.get_user(user_id)


@router.put("/users/{user_id}", response_model=UserRead)
async def update_user(
    user_id: uuid.UUID,
    body: ProfileUpdate,
    user: User = Depends(get_current_user),
    svc: AuthService = Depends(_svc),
):
    return await svc.update_profile(user, user_id, body.model_dump(exclude_none=True))
