"""
Bloglist Backend - Post Route Handlers
=======================================

What:  /api/posts collection, item, and statistics endpoints.
How:   Thin handlers: resolve identity and session through Depends(),
       delegate to PostService, set status codes and headers.

Route Summary:
    GET    /api/posts          list (X-Total-Count header)
    GET    /api/posts/stats    aggregations over all posts
    GET    /api/posts/{id}     single post
    POST   /api/posts          create (identity required)
    PUT    /api/posts/{id}     update
    DELETE /api/posts/{id}     delete (owner only, idempotent)

Every route depends on get_identity, so a request carrying a bad token is
rejected with 401 even on read-only endpoints.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from bloglist.auth.identity import Identity
from bloglist.database import get_db_session
from bloglist.dependencies import get_identity, get_post_service
from bloglist.schemas.common import ErrorResponse
from bloglist.schemas.post import PostCreate, PostResponse, PostUpdate, StatsResponse
from bloglist.services.post_service import PostService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/posts",
    tags=["Posts"],
    dependencies=[Depends(get_identity)],
    responses={401: {"description": "Invalid bearer token", "model": ErrorResponse}},
)


@router.get(
    "",
    response_model=List[PostResponse],
    summary="List all posts",
)
async def list_posts(
    response: Response,
    db: AsyncSession = Depends(get_db_session),
    posts: PostService = Depends(get_post_service),
) -> List[PostResponse]:
    result = await posts.list_posts(db)
    response.headers["X-Total-Count"] = str(len(result))
    return result


# Declared before "/{post_id}" so "stats" is not captured as an id
@router.get(
    "/stats",
    response_model=StatsResponse,
    summary="Aggregate statistics over all posts",
    description=(
        "Total likes, the most liked post (ties go to the most recently created), "
        "the author with most posts and the author with most likes "
        "(ties go to the author who appeared first)."
    ),
)
async def post_statistics(
    db: AsyncSession = Depends(get_db_session),
    posts: PostService = Depends(get_post_service),
) -> StatsResponse:
    return await posts.statistics(db)


@router.get(
    "/{post_id}",
    response_model=PostResponse,
    responses={
        400: {"description": "Malformed id", "model": ErrorResponse},
        404: {"description": "Post not found", "model": ErrorResponse},
    },
    summary="Get a single post",
)
async def get_post(
    post_id: str,
    db: AsyncSession = Depends(get_db_session),
    posts: PostService = Depends(get_post_service),
) -> PostResponse:
    return await posts.get_post(db, post_id)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=PostResponse,
    responses={
        400: {"description": "Missing title, author or url", "model": ErrorResponse},
        401: {"description": "No identity", "model": ErrorResponse},
    },
    summary="Create a post owned by the caller",
)
async def create_post(
    payload: PostCreate,
    db: AsyncSession = Depends(get_db_session),
    identity: Identity = Depends(get_identity),
    posts: PostService = Depends(get_post_service),
) -> PostResponse:
    return await posts.create_post(db, identity, payload)


@router.put(
    "/{post_id}",
    response_model=PostResponse,
    responses={
        400: {"description": "Malformed id or empty field", "model": ErrorResponse},
        403: {"description": "Not the owner (owner-only updates)", "model": ErrorResponse},
        404: {"description": "Post not found", "model": ErrorResponse},
    },
    summary="Update fields of a post",
)
async def update_post(
    post_id: str,
    payload: PostUpdate,
    db: AsyncSession = Depends(get_db_session),
    identity: Identity = Depends(get_identity),
    posts: PostService = Depends(get_post_service),
) -> PostResponse:
    return await posts.update_post(db, identity, post_id, payload)


@router.delete(
    "/{post_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={
        400: {"description": "Malformed id", "model": ErrorResponse},
        403: {"description": "Not the owner", "model": ErrorResponse},
    },
    summary="Delete a post owned by the caller",
)
async def delete_post(
    post_id: str,
    db: AsyncSession = Depends(get_db_session),
    identity: Identity = Depends(get_identity),
    posts: PostService = Depends(get_post_service),
) -> Response:
    await posts.delete_post(db, identity, post_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
