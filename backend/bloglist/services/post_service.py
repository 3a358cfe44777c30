"""
Bloglist Backend - Post Service (Business Logic)
=================================================

What:  CRUD over posts plus the statistics view.
How:   Validates payloads, applies the ownership rules from bloglist.auth,
       and runs async SQLAlchemy queries.
Who:   Called by the /api/posts route handlers with the request's session
       and resolved Identity.

Mutation Rules:
    create  → identity required (401), then title/author/url required (400)
    update  → unrestricted, or owner-only when OWNER_ONLY_UPDATES is set
    delete  → identity required (401); absent post is a silent success;
              present post must be owned by the identity (403)

Error Handling Strategy:
    Our own exceptions propagate unchanged. Unexpected SQLAlchemy errors on
    reads and writes alike are wrapped in DatabaseError so the client only
    sees a generic message.
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from bloglist.auth.authorization import authorize_mutation, require_authenticated
from bloglist.auth.identity import Identity
from bloglist.exceptions import DatabaseError, MalformedIdentifierError, NotFoundError, ValidationError
from bloglist.models import AccountPost, Post
from bloglist.schemas.post import (
    AuthorLikesResponse,
    AuthorPostCountResponse,
    OwnerSummary,
    PostCreate,
    PostResponse,
    PostSummary,
    PostUpdate,
    StatsResponse,
)
from bloglist.services import stats
from bloglist.services.account_store import AccountStore

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "author", "url")


def parse_post_id(raw_id: str) -> uuid.UUID:
    """
    Parse a path identifier.

    Raises:
        MalformedIdentifierError: `raw_id` is not a UUID ("malformatted id").
    """
    try:
        return uuid.UUID(raw_id)
    except (ValueError, AttributeError, TypeError) as e:
        raise MalformedIdentifierError(raw_id=str(raw_id)) from e


def to_response(post: Post, owner: Optional[OwnerSummary] = None) -> PostResponse:
    """Build a PostResponse; `owner` overrides reading the (eager-loaded) relationship."""
    if owner is None and post.owner_id is not None:
        owner = OwnerSummary.model_validate(post.owner)
    return PostResponse(
        id=post.id,
        title=post.title,
        author=post.author,
        url=post.url,
        likes=post.likes,
        owner=owner,
    )


class PostService:

    def __init__(self, account_store: AccountStore, owner_only_updates: bool = False):
        self.account_store = account_store
        self.owner_only_updates = owner_only_updates

    # ── Reads ─────────────────────────────────────────────────────────────

    async def list_posts(self, db: AsyncSession) -> List[PostResponse]:
        """All posts in creation order, each with its owner summary."""
        try:
            posts = await self._all_posts(db)
        except SQLAlchemyError as e:
            logger.error("Database error listing posts: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve posts. Please try again.",
                context={"error_type": type(e).__name__},
            )
        return [to_response(post) for post in posts]

    async def get_post(self, db: AsyncSession, raw_id: str) -> PostResponse:
        """
        Raises:
            MalformedIdentifierError: `raw_id` is not a UUID
            NotFoundError:            no such post
        """
        post_id = parse_post_id(raw_id)
        post = await self._load(db, post_id)
        if post is None:
            raise NotFoundError(resource="post", resource_id=str(post_id))
        return to_response(post)

    async def statistics(self, db: AsyncSession) -> StatsResponse:
        """Run the aggregations over every post, oldest first."""
        try:
            posts = await self._all_posts(db)
        except SQLAlchemyError as e:
            logger.error("Database error computing statistics: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not compute statistics. Please try again.",
                context={"error_type": type(e).__name__},
            )

        favourite = stats.most_liked(posts)
        prolific = stats.author_with_most_posts(posts)
        popular = stats.author_with_most_likes(posts)

        return StatsResponse(
            total_posts=len(posts),
            total_likes=stats.total_likes(posts),
            most_liked=PostSummary.model_validate(favourite) if favourite else None,
            author_with_most_posts=(
                AuthorPostCountResponse(author=prolific.author, posts=prolific.posts)
                if prolific else None
            ),
            author_with_most_likes=(
                AuthorLikesResponse(author=popular.author, likes=popular.likes)
                if popular else None
            ),
        )

    # ── Mutations ─────────────────────────────────────────────────────────

    async def create_post(
        self, db: AsyncSession, identity: Identity, payload: PostCreate
    ) -> PostResponse:
        """
        Create a post owned by `identity` and append it to the account's posts.

        Raises:
            UnauthenticatedError: anonymous identity (checked first)
            ValidationError:      title, author or url missing
            DatabaseError:        the insert failed unexpectedly
        """
        require_authenticated(identity)

        missing = [name for name in REQUIRED_FIELDS if not getattr(payload, name)]
        if missing:
            raise ValidationError(
                message=f"missing required field(s): {', '.join(missing)}",
                field=missing[0],
                context={"missing": missing},
            )

        post = Post(
            title=payload.title,
            author=payload.author,
            url=payload.url,
            likes=payload.likes or 0,
            owner_id=identity.account_id,
        )
        try:
            db.add(post)
            await db.flush()
            await self.account_store.append_post(db, identity.account_id, post.id)
        except SQLAlchemyError as e:
            logger.error("Database error creating post: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create post. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("Post %s created by account %s", post.id, identity.account_id)

        owner = OwnerSummary(id=identity.account_id, username=identity.username, name=identity.name)
        return to_response(post, owner=owner)

    async def update_post(
        self, db: AsyncSession, identity: Identity, raw_id: str, payload: PostUpdate
    ) -> PostResponse:
        """
        Apply the fields present in `payload`; absent fields keep their values.

        Raises:
            MalformedIdentifierError, NotFoundError,
            ValidationError:      a required field was sent empty
            UnauthenticatedError / ForbiddenError: only with owner_only_updates
        """
        post_id = parse_post_id(raw_id)
        post = await self._load(db, post_id)
        if post is None:
            raise NotFoundError(resource="post", resource_id=str(post_id))

        if self.owner_only_updates:
            authorize_mutation(identity, post)

        changes = payload.model_dump(exclude_unset=True)
        for name in REQUIRED_FIELDS:
            if name in changes and not changes[name]:
                raise ValidationError(message=f"{name} must not be empty", field=name)
        if "likes" in changes and changes["likes"] is None:
            del changes["likes"]

        for name, value in changes.items():
            setattr(post, name, value)
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating post %s: %s", post_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not update post. Please try again.",
                context={"error_type": type(e).__name__, "post_id": str(post_id)},
            )

        logger.info("Post %s updated (%s)", post.id, ", ".join(sorted(changes)) or "no changes")
        return to_response(post)

    async def delete_post(self, db: AsyncSession, identity: Identity, raw_id: str) -> None:
        """
        Delete a post owned by `identity`. Deleting an absent post succeeds.

        Raises:
            UnauthenticatedError:     anonymous identity
            MalformedIdentifierError: `raw_id` is not a UUID
            ForbiddenError:           the post belongs to someone else
        """
        require_authenticated(identity)
        post_id = parse_post_id(raw_id)

        post = await db.get(Post, post_id)
        if post is None:
            logger.info("Delete of absent post %s treated as success", post_id)
            return

        authorize_mutation(identity, post)

        try:
            await db.execute(delete(AccountPost).where(AccountPost.post_id == post.id))
            await db.delete(post)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting post %s: %s", post_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete post. Please try again.",
                context={"error_type": type(e).__name__, "post_id": str(post_id)},
            )

        logger.info("Post %s deleted by account %s", post_id, identity.account_id)

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _load(self, db: AsyncSession, post_id: uuid.UUID) -> Optional[Post]:
        result = await db.execute(
            select(Post).options(joinedload(Post.owner)).where(Post.id == post_id)
        )
        return result.scalar_one_or_none()

    async def _all_posts(self, db: AsyncSession) -> List[Post]:
        result = await db.execute(
            select(Post).options(joinedload(Post.owner)).order_by(Post.created_at, Post.id)
        )
        return list(result.scalars().all())
