"""
Bloglist Backend - Account Service
===================================

What:  Account registration and listing.
How:   Validates the registration payload, hashes the password, and delegates
       persistence to AccountStore.
Who:   Called by the /api/users route handlers.

Validation Order (first failure wins):
    1. username and password both present → "must give both username and password"
    2. username length ≥ MIN_USERNAME_LENGTH
    3. password length ≥ MIN_PASSWORD_LENGTH
    4. username not taken                 → ConflictError
"""

import logging
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from bloglist.auth.passwords import PasswordHasher
from bloglist.exceptions import ConflictError, DatabaseError, ValidationError
from bloglist.models import Account
from bloglist.schemas.account import AccountCreate, AccountResponse
from bloglist.schemas.post import PostSummary
from bloglist.services.account_store import AccountStore

logger = logging.getLogger(__name__)


class AccountService:

    def __init__(
        self,
        account_store: AccountStore,
        password_hasher: PasswordHasher,
        min_username_length: int = 3,
        min_password_length: int = 3,
    ):
        self.account_store = account_store
        self.password_hasher = password_hasher
        self.min_username_length = min_username_length
        self.min_password_length = min_password_length

    def validate_registration(self, payload: AccountCreate) -> None:
        """Raise ValidationError for the first rule the payload breaks."""
        if not payload.username or not payload.password:
            raise ValidationError(message="must give both username and password")
        if len(payload.username) < self.min_username_length:
            raise ValidationError(
                message=f"username must be at least {self.min_username_length} characters long",
                field="username",
            )
        if len(payload.password) < self.min_password_length:
            raise ValidationError(
                message=f"password must be at least {self.min_password_length} characters long",
                field="password",
            )

    async def register(self, db: AsyncSession, payload: AccountCreate) -> AccountResponse:
        """
        Create an account from a registration payload.

        Raises:
            ValidationError: missing or too-short username/password
            ConflictError:   username already in use
        """
        self.validate_registration(payload)

        # The unique index is the real guard; this lookup only avoids a
        # failed INSERT in the common case.
        if await self.account_store.find_by_username(db, payload.username) is not None:
            raise ConflictError(field="username", context={"username": payload.username})

        account = Account(
            username=payload.username,
            name=payload.name,
            password_hash=self.password_hasher.hash(payload.password),
        )
        account = await self.account_store.create(db, account)
        logger.info("Account registered: %s (%s)", account.username, account.id)

        return AccountResponse(id=account.id, username=account.username, name=account.name)

    async def list_accounts(self, db: AsyncSession) -> List[AccountResponse]:
        """All accounts, each with summaries of the posts it created."""
        try:
            accounts = await self.account_store.list_accounts(db)
            posts = await self.account_store.posts_by_account(db, [a.id for a in accounts])
        except SQLAlchemyError as e:
            logger.error("Database error listing accounts: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve users. Please try again.",
                context={"error_type": type(e).__name__},
            )

        return [
            AccountResponse(
                id=account.id,
                username=account.username,
                name=account.name,
                posts=[PostSummary.model_validate(p) for p in posts.get(account.id, [])],
            )
            for account in accounts
        ]
