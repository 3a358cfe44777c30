"""
Bloglist Backend - Request Identity Resolution
===============================================

What:  Turns the Authorization header of a request into an Identity.
How:   Bearer token → TokenCodec.verify → AccountStore.find_by_id → Identity.
Who:   Called once per request through the `get_identity` dependency
       (bloglist.dependencies); the resulting value is passed explicitly to
       handlers and services.

Resolution:
    absent header, or not "Bearer <token>"   → ANONYMOUS
    token fails verification                → InvalidTokenError (401, handler never runs)
    valid token, account no longer exists   → ANONYMOUS (warning logged)
    valid token, account found              → Identity(account_id, username, name)
"""

import logging
import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from bloglist.auth.tokens import TokenCodec

if TYPE_CHECKING:
    from bloglist.models import Account
    from bloglist.services.account_store import AccountStore

logger = logging.getLogger(__name__)

BEARER_SCHEME = "bearer"


@dataclass(frozen=True)
class Identity:
    """
    The account a request acts as, or nobody.

    A snapshot taken at resolution time; it holds no session or ORM state.
    """
    account_id: Optional[uuid.UUID] = None
    username: Optional[str] = None
    name: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.account_id is not None

    @classmethod
    def from_account(cls, account: "Account") -> "Identity":
        return cls(account_id=account.id, username=account.username, name=account.name)


ANONYMOUS = Identity()


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """
    Return the credential from an `Authorization: Bearer <token>` header.

    Any other shape (missing header, other scheme, empty credential) means
    "no token" and returns None; it is never an error.
    """
    if not authorization:
        return None
    scheme, _, credential = authorization.strip().partition(" ")
    if scheme.lower() != BEARER_SCHEME:
        return None
    credential = credential.strip()
    return credential or None


class IdentityResolver:
    """Resolves request identities from bearer tokens against the credential store."""

    def __init__(self, token_codec: TokenCodec, account_store: "AccountStore"):
        self.token_codec = token_codec
        self.account_store = account_store

    async def resolve(self, db: AsyncSession, authorization: Optional[str]) -> Identity:
        """
        Raises:
            InvalidTokenError: a token was presented and failed verification.
        """
        token = extract_bearer_token(authorization)
        if token is None:
            return ANONYMOUS

        claims = self.token_codec.verify(token)

        account = await self.account_store.find_by_id(db, claims.account_id)
        if account is None:
            # Signed by us, but the account is gone. Downgraded rather than
            # rejected; ownership checks still refuse anonymous mutations.
            logger.warning(
                "Token for unknown account %s; continuing as anonymous",
                claims.account_id,
            )
            return ANONYMOUS

        return Identity.from_account(account)
