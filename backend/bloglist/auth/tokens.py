"""
Bloglist Backend - Session Token Codec
=======================================

What:  Issues and verifies signed, self-contained session tokens.
How:   PyJWT with a symmetric HMAC algorithm (HS256 by default). The payload
       carries the account id (`id`) and issue time (`iat`); an `exp` claim is
       added only when a TTL is configured.
Who:   SessionService issues tokens at login; IdentityResolver verifies the
       bearer token on every request that presents one.
When:  Constructed once in create_app() from Settings; never mutated.

Token Payload:
    {
        "id": "7f0c4c4e-4c5b-4a5e-9a53-0e5f2a1f9e11",
        "iat": 1705320000,
        "exp": 1705323600        ← only with TOKEN_TTL_SECONDS
    }

PyJWT compares signatures with hmac.compare_digest, so verification time
does not depend on how many signature bytes match.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from bloglist.exceptions import ConfigurationError, InvalidTokenError


@dataclass(frozen=True)
class TokenClaims:
    """Decoded, verified contents of a session token."""
    account_id: uuid.UUID
    issued_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None


class TokenCodec:
    """
    Creates and verifies session tokens with a process-wide secret.

    Raises:
        ConfigurationError: at construction when the secret is empty.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        ttl_seconds: Optional[int] = None,
    ):
        if not secret:
            raise ConfigurationError(
                message="SECRET_KEY must be configured to sign session tokens",
                context={"setting": "secret_key"},
            )
        self._secret = secret
        self.algorithm = algorithm
        self.ttl_seconds = ttl_seconds

    def issue(self, account_id: uuid.UUID) -> str:
        """Sign a token asserting `account_id`, stamped with the current time."""
        now = datetime.now(timezone.utc)
        payload: Dict[str, Any] = {"id": str(account_id), "iat": now}
        if self.ttl_seconds:
            payload["exp"] = now + timedelta(seconds=self.ttl_seconds)
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """
        Verify signature and structure, then return the claims.

        Raises:
            InvalidTokenError: bad signature, malformed token, expired token,
                               or a missing/non-UUID `id` claim.
        """
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError as e:
            raise InvalidTokenError(reason="token expired") from e
        except jwt.InvalidSignatureError as e:
            raise InvalidTokenError(reason="signature mismatch") from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(reason=f"malformed token: {type(e).__name__}") from e

        raw_id = payload.get("id")
        if not raw_id:
            raise InvalidTokenError(reason="missing account id")
        try:
            account_id = uuid.UUID(str(raw_id))
        except ValueError as e:
            raise InvalidTokenError(reason="account id is not a UUID") from e

        return TokenClaims(
            account_id=account_id,
            issued_at=_timestamp(payload.get("iat")),
            expires_at=_timestamp(payload.get("exp")),
        )


def _timestamp(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromtimestamp(value, tz=timezone.utc)
