"""
Bloglist Backend - Post Aggregations
=====================================

What:  Pure functions over an ordered sequence of posts: total likes, most
       liked post, most prolific author, most liked author.
How:   Single passes over the input; no I/O. Anything with `author` and
       `likes` attributes works (ORM Post, PostSummary, test doubles).
Who:   PostService.statistics() for GET /api/posts/stats.

Tie-break Rules:
    most_liked              → the LAST post whose likes >= the running max
    author_with_most_posts  → the FIRST author (by first appearance) at the max
    author_with_most_likes  → the FIRST author (by first appearance) at the max
"""

from dataclasses import dataclass
from typing import Dict, Optional, Protocol, Sequence, TypeVar


class RankablePost(Protocol):
    author: str
    likes: int


P = TypeVar("P", bound=RankablePost)


@dataclass(frozen=True)
class AuthorPostCount:
    author: str
    posts: int


@dataclass(frozen=True)
class AuthorLikes:
    author: str
    likes: int


def total_likes(posts: Sequence[RankablePost]) -> int:
    """Sum of likes; 0 for an empty sequence."""
    return sum(post.likes for post in posts)


def most_liked(posts: Sequence[P]) -> Optional[P]:
    """
    The post with the most likes, or None when `posts` is empty.

    Ties resolve to the last qualifying post in input order.
    """
    favourite: Optional[P] = None
    for post in posts:
        if favourite is None or post.likes >= favourite.likes:
            favourite = post
    return favourite


def author_with_most_posts(posts: Sequence[RankablePost]) -> Optional[AuthorPostCount]:
    """Author with the most posts (exact, case-sensitive match); None when empty."""
    counts: Dict[str, int] = {}
    for post in posts:
        counts[post.author] = counts.get(post.author, 0) + 1

    best = _first_max(counts)
    if best is None:
        return None
    return AuthorPostCount(author=best, posts=counts[best])


def author_with_most_likes(posts: Sequence[RankablePost]) -> Optional[AuthorLikes]:
    """Author whose posts have the most likes combined; None when empty."""
    sums: Dict[str, int] = {}
    for post in posts:
        sums[post.author] = sums.get(post.author, 0) + post.likes

    best = _first_max(sums)
    if best is None:
        return None
    return AuthorLikes(author=best, likes=sums[best])


def _first_max(totals: Dict[str, int]) -> Optional[str]:
    # dicts keep insertion order, i.e. author first appearance;
    # strict ">" keeps the earliest author on ties
    best: Optional[str] = None
    for author, value in totals.items():
        if best is None or value > totals[best]:
            best = author
    return best
