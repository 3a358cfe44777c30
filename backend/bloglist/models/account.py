"""
Bloglist Backend - Account SQLAlchemy Models
=============================================

What:  ORM models for the `accounts` table and the `account_posts` link table.
Who:   Used by AccountStore (the credential store) and by Alembic.

Table Design:
    accounts
        - username: unique, immutable after registration
        - password_hash: bcrypt digest; the raw password is never stored
    account_posts
        - One row per post an account created, in creation order
        - Surrogate autoincrement `id` gives the order; (account_id, post_id)
          is unique so the list behaves as an ordered set
        - Rows are appended with a single conditional INSERT, so concurrent
          post creation by one account cannot lose entries
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from bloglist.database import Base


class Account(Base):
    """
    A registered user.

    Lifecycle:
        1. Created once at registration
        2. Gains account_posts rows whenever it creates a post
        3. Never deleted
    """

    __tablename__ = "accounts"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    username: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
        index=True,
        comment="Login name; unique and immutable",
    )

    name: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        default=None,
        comment="Display name",
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="bcrypt digest of the password",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<Account(id={self.id}, username='{self.username}')>"


class AccountPost(Base):
    """Back-reference from an account to a post it created (ordering only, not ownership)."""

    __tablename__ = "account_posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    account_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    post_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("account_id", "post_id", name="uq_account_posts_account_post"),
    )
