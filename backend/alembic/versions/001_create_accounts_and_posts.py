"""Create accounts, posts and account_posts tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Initial schema: registered accounts, catalogued posts, and the ordered
       account → posts link table.

Rollback: downgrade() drops all three tables (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "accounts",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(
            "username",
            sa.String(64),
            nullable=False,
            comment="Login name; unique and immutable",
        ),
        sa.Column("name", sa.String(255), nullable=True, comment="Display name"),
        sa.Column(
            "password_hash",
            sa.String(255),
            nullable=False,
            comment="bcrypt digest of the password",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    # Unique index doubles as the duplicate-username guard
    op.create_index("ix_accounts_username", "accounts", ["username"], unique=True)

    op.create_table(
        "posts",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("author", sa.String(255), nullable=False),
        sa.Column("url", sa.String(2048), nullable=False),
        sa.Column("likes", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column(
            "owner_id",
            sa.Uuid(),
            nullable=True,
            comment="Account that created the post; immutable once set",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["owner_id"], ["accounts.id"], ondelete="SET NULL"),
        sa.CheckConstraint("likes >= 0", name="ck_posts_likes_non_negative"),
    )
    op.create_index("idx_posts_created_at", "posts", ["created_at"])
    op.create_index("ix_posts_owner_id", "posts", ["owner_id"])

    op.create_table(
        "account_posts",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("account_id", sa.Uuid(), nullable=False),
        sa.Column("post_id", sa.Uuid(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["account_id"], ["accounts.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["post_id"], ["posts.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("account_id", "post_id", name="uq_account_posts_account_post"),
    )
    op.create_index("ix_account_posts_account_id", "account_posts", ["account_id"])


def downgrade() -> None:
    """Drop every table. All accounts and posts are lost."""
    op.drop_index("ix_account_posts_account_id", table_name="account_posts")
    op.drop_table("account_posts")
    op.drop_index("ix_posts_owner_id", table_name="posts")
    op.drop_index("idx_posts_created_at", table_name="posts")
    op.drop_table("posts")
    op.drop_index("ix_accounts_username", table_name="accounts")
    op.drop_table("accounts")
