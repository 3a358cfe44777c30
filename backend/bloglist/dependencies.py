"""
Bloglist Backend - FastAPI Dependencies
========================================

What:  Request-scoped accessors for the collaborators create_app() built,
       and the identity dependency every post/user route runs.
How:   Collaborators live on `app.state`; these functions hand them to route
       handlers through Depends(). get_identity shares the request's cached
       database session with the handler.
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from bloglist.auth.identity import Identity, IdentityResolver
from bloglist.database import get_db_session
from bloglist.services.account_service import AccountService
from bloglist.services.post_service import PostService
from bloglist.services.session_service import SessionService


def get_account_service(request: Request) -> AccountService:
    return request.app.state.account_service


def get_session_service(request: Request) -> SessionService:
    return request.app.state.session_service


def get_post_service(request: Request) -> PostService:
    return request.app.state.post_service


async def get_identity(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> Identity:
    """
    Resolve who the request acts as.

    Runs before the handler body; a presented but invalid token raises
    InvalidTokenError here and the handler never executes.
    """
    resolver: IdentityResolver = request.app.state.identity_resolver
    return await resolver.resolve(db, request.headers.get("Authorization"))
