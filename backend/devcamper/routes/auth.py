"""
DevCamper API - Auth Routes
===========================

What:  Registration, login and the current-user lookup.
How:   Register and login answer `{"success": true, "token": "<jwt>"}`;
       the token is sent back as `Authorization: Bearer <jwt>`.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from devcamper.database import get_db_session
from devcamper.dependencies import get_auth_service, get_current_user
from devcamper.models import User
from devcamper.schemas.auth import LoginRequest, RegisterRequest, TokenResponse, UserResponse
from devcamper.schemas.common import DataEnvelope, ErrorResponse
from devcamper.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/register",
    response_model=TokenResponse,
    responses={400: {"description": "Invalid input or email taken", "model": ErrorResponse}},
    summary="Register a user",
)
async def register(
    body: RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
    auth: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    return TokenResponse(token=await auth.register(db, body))


@router.post(
    "/login",
    response_model=TokenResponse,
    responses={
        400: {"description": "Email or password missing", "model": ErrorResponse},
        401: {"description": "Invalid credentials", "model": ErrorResponse},
    },
    summary="Log in",
)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
    auth: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    return TokenResponse(token=await auth.login(db, body))


@router.get(
    "/me",
    response_model=DataEnvelope,
    responses={401: {"description": "Missing or invalid token", "model": ErrorResponse}},
    summary="Current user",
)
async def me(user: User = Depends(get_current_user)) -> DataEnvelope:
    return DataEnvelope(data=UserResponse.model_validate(user).model_dump(mode="json", by_alias=True))
