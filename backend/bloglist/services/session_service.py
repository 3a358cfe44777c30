"""
Bloglist Backend - Session Issuer
==================================

What:  Exchanges a username and password for a signed session token.
Who:   Called by POST /api/login.

Flow:
    1. find_by_username   → absent: InvalidCredentialsError
    2. verify password    → mismatch: InvalidCredentialsError
    3. TokenCodec.issue(account.id)

Both failure paths raise the same exception with the same message, and the
absent-account path still spends one bcrypt verification, so neither the
response nor its timing reveals whether the username exists.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from bloglist.auth.passwords import PasswordHasher
from bloglist.auth.tokens import TokenCodec
from bloglist.exceptions import InvalidCredentialsError
from bloglist.schemas.account import LoginResponse
from bloglist.services.account_store import AccountStore

logger = logging.getLogger(__name__)


class SessionService:

    def __init__(
        self,
        account_store: AccountStore,
        password_hasher: PasswordHasher,
        token_codec: TokenCodec,
    ):
        self.account_store = account_store
        self.password_hasher = password_hasher
        self.token_codec = token_codec

    async def login(self, db: AsyncSession, username: str, password: str) -> LoginResponse:
        """
        Raises:
            InvalidCredentialsError: unknown username or wrong password.
        """
        account = await self.account_store.find_by_username(db, username)

        if account is None:
            self.password_hasher.dummy_verify()
            logger.warning("Login failed: unknown username")
            raise InvalidCredentialsError()

        if not self.password_hasher.verify(password, account.password_hash):
            logger.warning("Login failed: wrong password for account %s", account.id)
            raise InvalidCredentialsError()

        token = self.token_codec.issue(account.id)
        logger.info("Session issued for account %s", account.id)
        return LoginResponse(token=token, username=account.username, name=account.name)
