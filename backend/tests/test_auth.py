"""
Bloglist Backend - Auth Unit Tests
===================================

What:  Tests for password hashing, token issue/verify, bearer extraction,
       identity resolution and ownership checks.
How:   No database: the account store is an AsyncMock.
"""

import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock

import jwt
import pytest

from bloglist.auth.authorization import authorize_mutation, require_authenticated
from bloglist.auth.identity import ANONYMOUS, Identity, IdentityResolver, extract_bearer_token
from bloglist.auth.passwords import PasswordHasher
from bloglist.auth.tokens import TokenCodec
from bloglist.exceptions import (
    ConfigurationError,
    ForbiddenError,
    InvalidTokenError,
    UnauthenticatedError,
)

SECRET = "unit-test-secret-key-0123456789abcdef"


class TestPasswordHasher:

    def setup_method(self):
        self.hasher = PasswordHasher(rounds=4)

    def test_hash_verifies_against_plaintext(self):
        digest = self.hasher.hash("sekret")
        assert self.hasher.verify("sekret", digest)

    def test_wrong_password_does_not_verify(self):
        digest = self.hasher.hash("sekret")
        assert not self.hasher.verify("Sekret", digest)

    def test_same_password_hashes_differently(self):
        first = self.hasher.hash("sekret")
        second = self.hasher.hash("sekret")
        assert first != second
        assert self.hasher.verify("sekret", first)
        assert self.hasher.verify("sekret", second)

    def test_digest_is_not_the_password(self):
        assert "sekret" not in self.hasher.hash("sekret")


class TestTokenCodec:

    def setup_method(self):
        self.codec = TokenCodec(secret=SECRET)

    def test_empty_secret_is_a_configuration_error(self):
        with pytest.raises(ConfigurationError):
            TokenCodec(secret="")

    def test_issued_token_verifies_to_same_account(self):
        account_id = uuid.uuid4()
        claims = self.codec.verify(self.codec.issue(account_id))
        assert claims.account_id == account_id
        assert claims.issued_at is not None
        assert claims.expires_at is None

    def test_token_signed_with_other_secret_is_rejected(self):
        other = TokenCodec(secret="another-secret-key-0123456789abcdef")
        token = other.issue(uuid.uuid4())
        with pytest.raises(InvalidTokenError) as exc_info:
            self.codec.verify(token)
        assert exc_info.value.message == "token invalid"
        assert exc_info.value.reason == "signature mismatch"

    def test_garbage_is_rejected(self):
        with pytest.raises(InvalidTokenError):
            self.codec.verify("not-a-token")

    def test_tampered_payload_is_rejected(self):
        token = self.codec.issue(uuid.uuid4())
        header, payload, signature = token.split(".")
        forged = jwt.encode({"id": str(uuid.uuid4())}, "x" * 40, algorithm="HS256").split(".")[1]
        with pytest.raises(InvalidTokenError):
            self.codec.verify(".".join([header, forged, signature]))

    def test_missing_id_claim_is_rejected(self):
        token = jwt.encode({"user": "someone"}, SECRET, algorithm="HS256")
        with pytest.raises(InvalidTokenError) as exc_info:
            self.codec.verify(token)
        assert exc_info.value.reason == "missing account id"

    def test_non_uuid_id_claim_is_rejected(self):
        token = jwt.encode({"id": "5a422a851b54a676234d17f7"}, SECRET, algorithm="HS256")
        with pytest.raises(InvalidTokenError):
            self.codec.verify(token)

    def test_ttl_adds_expiry(self):
        codec = TokenCodec(secret=SECRET, ttl_seconds=3600)
        claims = codec.verify(codec.issue(uuid.uuid4()))
        assert claims.expires_at is not None
        assert claims.expires_at > datetime.now(timezone.utc)

    def test_expired_token_is_rejected(self):
        past = datetime.now(timezone.utc) - timedelta(hours=2)
        token = jwt.encode(
            {"id": str(uuid.uuid4()), "iat": past, "exp": past + timedelta(hours=1)},
            SECRET,
            algorithm="HS256",
        )
        with pytest.raises(InvalidTokenError) as exc_info:
            self.codec.verify(token)
        assert exc_info.value.reason == "token expired"


class TestExtractBearerToken:

    @pytest.mark.parametrize("header", [None, "", "Basic abc", "Bearer", "Bearer    ", "Token abc"])
    def test_no_token(self, header):
        assert extract_bearer_token(header) is None

    def test_bearer_token(self):
        assert extract_bearer_token("Bearer abc.def.ghi") == "abc.def.ghi"

    def test_scheme_is_case_insensitive(self):
        assert extract_bearer_token("bearer abc") == "abc"


class TestIdentityResolver:

    def setup_method(self):
        self.codec = TokenCodec(secret=SECRET)
        self.store = AsyncMock()
        self.resolver = IdentityResolver(self.codec, self.store)

    @pytest.mark.asyncio
    async def test_no_header_is_anonymous(self, mock_db_session):
        identity = await self.resolver.resolve(mock_db_session, None)
        assert identity is ANONYMOUS
        assert not identity.is_authenticated
        self.store.find_by_id.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_valid_token_resolves_account(self, mock_db_session):
        account = SimpleNamespace(id=uuid.uuid4(), username="root", name="Superuser")
        self.store.find_by_id.return_value = account

        identity = await self.resolver.resolve(
            mock_db_session, f"Bearer {self.codec.issue(account.id)}"
        )

        assert identity == Identity(account_id=account.id, username="root", name="Superuser")
        assert identity.is_authenticated

    @pytest.mark.asyncio
    async def test_invalid_token_raises(self, mock_db_session):
        with pytest.raises(InvalidTokenError):
            await self.resolver.resolve(mock_db_session, "Bearer garbage")
        self.store.find_by_id.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_token_for_missing_account_is_anonymous(self, mock_db_session):
        self.store.find_by_id.return_value = None
        identity = await self.resolver.resolve(
            mock_db_session, f"Bearer {self.codec.issue(uuid.uuid4())}"
        )
        assert identity is ANONYMOUS


class TestAuthorization:

    def setup_method(self):
        self.owner = Identity(account_id=uuid.uuid4(), username="owner")
        self.other = Identity(account_id=uuid.uuid4(), username="other")
        self.post = SimpleNamespace(id=uuid.uuid4(), owner_id=self.owner.account_id)

    def test_require_authenticated_rejects_anonymous(self):
        with pytest.raises(UnauthenticatedError):
            require_authenticated(ANONYMOUS)

    def test_require_authenticated_accepts_identity(self):
        require_authenticated(self.owner)

    def test_owner_may_mutate(self):
        authorize_mutation(self.owner, self.post)

    def test_other_account_is_forbidden(self):
        with pytest.raises(ForbiddenError):
            authorize_mutation(self.other, self.post)

    def test_anonymous_is_unauthenticated_not_forbidden(self):
        with pytest.raises(UnauthenticatedError):
            authorize_mutation(ANONYMOUS, self.post)

    def test_ownerless_resource_is_forbidden(self):
        orphan = SimpleNamespace(id=uuid.uuid4(), owner_id=None)
        with pytest.raises(ForbiddenError):
            authorize_mutation(self.owner, orphan)
