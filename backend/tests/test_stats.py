"""
Bloglist Backend - Post Aggregation Unit Tests
===============================================

What:  Tests for the pure functions in bloglist.services.stats.

What we test:
    ✅ total_likes over empty, single and many posts
    ✅ most_liked picks the last post on ties
    ✅ author_with_most_posts / author_with_most_likes pick the first author on ties
    ✅ every "most" function returns None for no posts
"""

from dataclasses import dataclass

from bloglist.services import stats


@dataclass
class FakePost:
    title: str
    author: str
    likes: int


LIST_WITH_ONE_POST = [
    FakePost(title="Go To Statement Considered Harmful", author="Edsger W. Dijkstra", likes=5),
]

POSTS = [
    FakePost(title="React patterns", author="Michael Chan", likes=7),
    FakePost(title="Go To Statement Considered Harmful", author="Edsger W. Dijkstra", likes=5),
    FakePost(title="Canonical string reduction", author="Edsger W. Dijkstra", likes=12),
    FakePost(title="First class tests", author="Robert C. Martin", likes=10),
    FakePost(title="TDD harms architecture", author="Robert C. Martin", likes=0),
    FakePost(title="Type wars", author="Robert C. Martin", likes=2),
]


class TestTotalLikes:

    def test_of_empty_list_is_zero(self):
        assert stats.total_likes([]) == 0

    def test_when_list_has_only_one_post_equals_its_likes(self):
        assert stats.total_likes(LIST_WITH_ONE_POST) == 5

    def test_of_a_bigger_list_is_calculated_right(self):
        assert stats.total_likes(POSTS) == 36


class TestMostLiked:

    def test_of_empty_list_is_none(self):
        assert stats.most_liked([]) is None

    def test_returns_post_with_most_likes(self):
        assert stats.most_liked(POSTS).title == "Canonical string reduction"

    def test_tie_goes_to_last_post(self):
        posts = [
            FakePost(title="a", author="x", likes=3),
            FakePost(title="b", author="y", likes=3),
            FakePost(title="c", author="z", likes=1),
        ]
        assert stats.most_liked(posts).title == "b"

    def test_all_zero_likes_returns_last_post(self):
        posts = [FakePost(title="a", author="x", likes=0), FakePost(title="b", author="y", likes=0)]
        assert stats.most_liked(posts).title == "b"


class TestAuthorWithMostPosts:

    def test_of_empty_list_is_none(self):
        assert stats.author_with_most_posts([]) is None

    def test_counts_posts_per_author(self):
        result = stats.author_with_most_posts(POSTS)
        assert result == stats.AuthorPostCount(author="Robert C. Martin", posts=3)

    def test_tie_goes_to_first_author_seen(self):
        posts = [
            FakePost(title="a", author="Ann", likes=1),
            FakePost(title="b", author="Bob", likes=1),
            FakePost(title="c", author="Bob", likes=1),
            FakePost(title="d", author="Ann", likes=1),
        ]
        assert stats.author_with_most_posts(posts).author == "Ann"

    def test_author_names_are_case_sensitive(self):
        posts = [
            FakePost(title="a", author="ann", likes=0),
            FakePost(title="b", author="Ann", likes=0),
            FakePost(title="c", author="Ann", likes=0),
        ]
        assert stats.author_with_most_posts(posts) == stats.AuthorPostCount(author="Ann", posts=2)


class TestAuthorWithMostLikes:

    def test_of_empty_list_is_none(self):
        assert stats.author_with_most_likes([]) is None

    def test_sums_likes_per_author(self):
        result = stats.author_with_most_likes(POSTS)
        assert result == stats.AuthorLikes(author="Edsger W. Dijkstra", likes=17)

    def test_tie_goes_to_first_author_seen(self):
        posts = [
            FakePost(title="a", author="Ann", likes=4),
            FakePost(title="b", author="Bob", likes=6),
            FakePost(title="c", author="Ann", likes=2),
        ]
        assert stats.author_with_most_likes(posts) == stats.AuthorLikes(author="Ann", likes=6)

    def test_zero_likes_still_yields_an_author(self):
        posts = [FakePost(title="a", author="Ann", likes=0)]
        assert stats.author_with_most_likes(posts) == stats.AuthorLikes(author="Ann", likes=0)


class TestMixedAuthors:

    POSTS = [
        FakePost(title="one", author="A", likes=2),
        FakePost(title="two", author="B", likes=5),
        FakePost(title="three", author="A", likes=1),
    ]

    def test_most_posts_and_most_likes_can_differ(self):
        assert stats.author_with_most_posts(self.POSTS) == stats.AuthorPostCount(author="A", posts=2)
        assert stats.author_with_most_likes(self.POSTS) == stats.AuthorLikes(author="B", likes=5)

    def test_total_likes(self):
        assert stats.total_likes(self.POSTS[:2]) == 7
