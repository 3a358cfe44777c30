"""
Bloglist Backend - Post Request/Response Schemas
=================================================

What:  Pydantic models defining the post API contract.
How:   Request fields are Optional so the service layer can reject missing
       values with its own messages. Length and range limits match the
       columns, so oversized values are a 400 before any database work.
"""

import uuid
from typing import Optional

from pydantic import BaseModel, Field

# Column sizes in bloglist.models.post; likes is a 32-bit INTEGER
TITLE_MAX_LENGTH = 500
AUTHOR_MAX_LENGTH = 255
URL_MAX_LENGTH = 2048
LIKES_MAX = 2**31 - 1


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class PostCreate(BaseModel):
    """
    Body of POST /api/posts.

    title, author and url are required; PostService checks them before any
    database work. likes defaults to 0 when absent.
    """
    title: Optional[str] = Field(default=None, max_length=TITLE_MAX_LENGTH, description="Post title")
    author: Optional[str] = Field(
        default=None, max_length=AUTHOR_MAX_LENGTH, description="Author of the linked article"
    )
    url: Optional[str] = Field(default=None, max_length=URL_MAX_LENGTH, description="Link to the article")
    likes: Optional[int] = Field(default=None, ge=0, le=LIKES_MAX, description="Like count (default 0)")


class PostUpdate(BaseModel):
    """
    Body of PUT /api/posts/{id}. Only fields present in the body are written;
    the owner is not part of the contract and cannot be changed.
    """
    title: Optional[str] = Field(default=None, max_length=TITLE_MAX_LENGTH)
    author: Optional[str] = Field(default=None, max_length=AUTHOR_MAX_LENGTH)
    url: Optional[str] = Field(default=None, max_length=URL_MAX_LENGTH)
    likes: Optional[int] = Field(default=None, ge=0, le=LIKES_MAX)


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class OwnerSummary(BaseModel):
    """The account that created a post, without credentials."""
    id: uuid.UUID
    username: str
    name: Optional[str] = None

    model_config = {"from_attributes": True}


class PostSummary(BaseModel):
    """Post fields without the owner; nested inside account listings and stats."""
    id: uuid.UUID
    title: str
    author: str
    url: str
    likes: int

    model_config = {"from_attributes": True}


class PostResponse(PostSummary):
    """Full post representation returned by the /api/posts endpoints."""
    owner: Optional[OwnerSummary] = Field(
        default=None,
        description="Creating account; null for posts created without an identity",
    )


class AuthorPostCountResponse(BaseModel):
    author: str
    posts: int


class AuthorLikesResponse(BaseModel):
    author: str
    likes: int


class StatsResponse(BaseModel):
    """
    What:  Aggregates over the whole post collection.
    Who:   Returned by GET /api/posts/stats.

    Every "most" field is null when there are no posts.
    """
    total_posts: int
    total_likes: int
    most_liked: Optional[PostSummary] = None
    author_with_most_posts: Optional[AuthorPostCountResponse] = None
    author_with_most_likes: Optional[AuthorLikesResponse] = None
