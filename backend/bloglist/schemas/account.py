"""
Bloglist Backend - Account & Session Schemas
=============================================

What:  Pydantic models for registration, login and account listings.
Who:   Used by the /api/users and /api/login routes.

The password only ever travels inward: no response model has a password or
password_hash field.
"""

import uuid
from typing import List, Optional

from pydantic import BaseModel, Field

from bloglist.schemas.post import PostSummary

# Column sizes in bloglist.models.account
USERNAME_MAX_LENGTH = 64
NAME_MAX_LENGTH = 255


class AccountCreate(BaseModel):
    """
    Body of POST /api/users.

    Fields are Optional so AccountService can answer with
    "must give both username and password" rather than a schema error.
    """
    username: Optional[str] = Field(
        default=None, max_length=USERNAME_MAX_LENGTH, description="Unique login name (min 3 chars)"
    )
    name: Optional[str] = Field(default=None, max_length=NAME_MAX_LENGTH, description="Display name")
    password: Optional[str] = Field(default=None, description="Password (min 3 chars)")


class AccountResponse(BaseModel):
    """An account with the posts it has created, oldest first."""
    id: uuid.UUID
    username: str
    name: Optional[str] = None
    posts: List[PostSummary] = Field(default_factory=list)


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    """
    What:  Returned by POST /api/login on success.
    How:   Clients send `token` back as `Authorization: Bearer <token>`.
    """
    token: str
    username: str
    name: Optional[str] = None
