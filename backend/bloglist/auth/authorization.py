"""
Bloglist Backend - Ownership Authorization
===========================================

What:  Decides whether an identity may mutate a resource.
Rule:  Only the account recorded as the resource's owner may mutate it.
       Anonymous callers are Unauthenticated (401); authenticated
       non-owners are Forbidden (403).
Who:   PostService (create requires an identity; delete and, when
       OWNER_ONLY_UPDATES is on, update require ownership).
"""

import logging
import uuid
from typing import Optional, Protocol

from bloglist.auth.identity import Identity
from bloglist.exceptions import ForbiddenError, UnauthenticatedError

logger = logging.getLogger(__name__)


class OwnedResource(Protocol):
    id: uuid.UUID
    owner_id: Optional[uuid.UUID]


def require_authenticated(identity: Identity) -> None:
    """Raise UnauthenticatedError unless the request carries an identity."""
    if not identity.is_authenticated:
        raise UnauthenticatedError()


def authorize_mutation(identity: Identity, resource: OwnedResource) -> None:
    """
    Allow (return None) only when `identity` owns `resource`.

    Resources without an owner can therefore not be mutated by anyone
    through an ownership-checked operation.

    Raises:
        UnauthenticatedError: identity is anonymous
        ForbiddenError:       identity is not the recorded owner
    """
    require_authenticated(identity)
    if resource.owner_id != identity.account_id:
        logger.info(
            "Denied mutation of %s by account %s (owner %s)",
            resource.id,
            identity.account_id,
            resource.owner_id,
        )
        raise ForbiddenError(
            context={"resource_id": str(resource.id), "account_id": str(identity.account_id)}
        )
