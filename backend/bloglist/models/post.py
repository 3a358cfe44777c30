"""
Bloglist Backend - Post SQLAlchemy Model
=========================================

What:  ORM model representing the `posts` table.
Who:   Used by PostService for CRUD and aggregation, and by Alembic.

Table Design:
    - owner_id is the source of truth for ownership; it is set at creation
      and never changed (PostService.update_post has no way to write it)
    - owner_id is nullable for posts created before accounts existed
    - created_at orders listings and the aggregation input
"""

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bloglist.database import Base

if TYPE_CHECKING:
    from bloglist.models.account import Account


class Post(Base):
    """
    A catalogued blog post.

    Query Patterns:
        - List posts: SELECT ... ORDER BY created_at → idx_posts_created_at
        - Get single post: SELECT ... WHERE id = :uuid → primary key
    """

    __tablename__ = "posts"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    author: Mapped[str] = mapped_column(String(255), nullable=False)
    url: Mapped[str] = mapped_column(String(2048), nullable=False)

    likes: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    owner_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("accounts.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        comment="Account that created the post; immutable once set",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # lazy="raise": async sessions cannot lazy-load, so every query that needs
    # the owner must ask for it with joinedload()
    owner: Mapped[Optional["Account"]] = relationship(lazy="raise")

    __table_args__ = (
        CheckConstraint("likes >= 0", name="ck_posts_likes_non_negative"),
        Index("idx_posts_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, title='{self.title}', likes={self.likes})>"
