"""
Bloglist Backend - Credential Store
====================================

What:  Persistence operations for accounts and their post back-references.
How:   Async SQLAlchemy queries against `accounts` and `account_posts`.
Who:   AccountService, SessionService, PostService and IdentityResolver.

Concurrency:
    append_post() is one conditional INSERT ... SELECT ... WHERE NOT EXISTS
    statement. Two posts created concurrently by the same account each add
    their own row; there is no read-modify-write of a list in Python.
"""

import logging
import uuid
from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from sqlalchemy import Uuid, cast, insert, literal, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from bloglist.exceptions import ConflictError, NotFoundError
from bloglist.models import Account, AccountPost, Post

logger = logging.getLogger(__name__)


class AccountStore:
    """Stateless gateway to account storage; every call takes the request's session."""

    async def find_by_username(self, db: AsyncSession, username: str) -> Optional[Account]:
        result = await db.execute(select(Account).where(Account.username == username))
        return result.scalar_one_or_none()

    async def find_by_id(self, db: AsyncSession, account_id: uuid.UUID) -> Optional[Account]:
        return await db.get(Account, account_id)

    async def list_accounts(self, db: AsyncSession) -> List[Account]:
        result = await db.execute(select(Account).order_by(Account.created_at, Account.username))
        return list(result.scalars().all())

    async def create(self, db: AsyncSession, account: Account) -> Account:
        """
        Insert a new account.

        Raises:
            ConflictError: the username is already taken (unique index).
        """
        db.add(account)
        try:
            await db.flush()
        except IntegrityError as e:
            # The session is unusable now; get_db_session rolls it back when
            # this exception leaves the handler.
            logger.info("Duplicate username rejected by store: %s", account.username)
            raise ConflictError(field="username", context={"username": account.username}) from e
        return account

    async def append_post(
        self, db: AsyncSession, account_id: uuid.UUID, post_id: uuid.UUID
    ) -> Account:
        """
        Record `post_id` at the end of the account's post list (no-op if present).

        Raises:
            NotFoundError: no account with `account_id`.
        """
        account = await self.find_by_id(db, account_id)
        if account is None:
            raise NotFoundError(resource="account", resource_id=str(account_id))

        already_linked = (
            select(AccountPost.id)
            .where(AccountPost.account_id == account_id, AccountPost.post_id == post_id)
            .correlate(None)
            .exists()
        )
        await db.execute(
            insert(AccountPost).from_select(
                ["account_id", "post_id"],
                # casts type the SELECT list as uuid on PostgreSQL
                select(
                    cast(literal(account_id, Uuid()), Uuid()),
                    cast(literal(post_id, Uuid()), Uuid()),
                ).where(~already_linked),
            )
        )
        return account

    async def posts_by_account(
        self, db: AsyncSession, account_ids: Iterable[uuid.UUID]
    ) -> Dict[uuid.UUID, List[Post]]:
        """Posts per account, in the order they were appended."""
        ids = list(account_ids)
        grouped: Dict[uuid.UUID, List[Post]] = defaultdict(list)
        if not ids:
            return grouped

        result = await db.execute(
            select(AccountPost.account_id, Post)
            .join(Post, Post.id == AccountPost.post_id)
            .where(AccountPost.account_id.in_(ids))
            .order_by(AccountPost.id)
        )
        for account_id, post in result.all():
            grouped[account_id].append(post)
        return grouped
