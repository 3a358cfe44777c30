"""
Bloglist Backend - Account & Login Route Handlers
==================================================

What:  POST /api/users (register), GET /api/users (list), POST /api/login.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from bloglist.database import get_db_session
from bloglist.dependencies import get_account_service, get_identity, get_session_service
from bloglist.schemas.account import AccountCreate, AccountResponse, LoginRequest, LoginResponse
from bloglist.schemas.common import ErrorResponse
from bloglist.services.account_service import AccountService
from bloglist.services.session_service import SessionService

logger = logging.getLogger(__name__)

users_router = APIRouter(
    prefix="/api/users",
    tags=["Users"],
    dependencies=[Depends(get_identity)],
)

login_router = APIRouter(prefix="/api", tags=["Login"])


@users_router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=AccountResponse,
    responses={
        400: {"description": "Missing or too-short username/password", "model": ErrorResponse},
        409: {"description": "Username already taken", "model": ErrorResponse},
    },
    summary="Register an account",
)
async def register(
    payload: AccountCreate,
    db: AsyncSession = Depends(get_db_session),
    accounts: AccountService = Depends(get_account_service),
) -> AccountResponse:
    return await accounts.register(db, payload)


@users_router.get(
    "",
    response_model=List[AccountResponse],
    summary="List accounts with the posts they created",
)
async def list_users(
    db: AsyncSession = Depends(get_db_session),
    accounts: AccountService = Depends(get_account_service),
) -> List[AccountResponse]:
    return await accounts.list_accounts(db)


@login_router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        401: {"description": "invalid username or password", "model": ErrorResponse},
        429: {"description": "Too many login attempts", "model": ErrorResponse},
    },
    summary="Exchange credentials for a session token",
)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
    sessions: SessionService = Depends(get_session_service),
) -> LoginResponse:
    return await sessions.login(db, payload.username, payload.password)
