"""Post creation and retrieval"""

from typing import List, Optional

from ..models.post import Post
from ..utils.exceptions import ValidationError
from ..utils.logger import get_logger
from .repository import AccountRepository, PostRepository

logger = get_logger(__name__)

MAX_POST_LENGTH = 140


class PostService:
    """Validates and stores posts"""

    def __init__(
        self,
        posts: PostRepository,
        accounts: AccountRepository,
        max_length: int = MAX_POST_LENGTH,
    ):
        self.posts = posts
        self.accounts = accounts
        self.max_length = max_length

    def create_post(self, body: str, author_id: Optional[int] = None) -> Post:
        """Store a new post. Bodies of max_length characters or more are rejected."""
        if not isinstance(body, str):
            raise ValidationError("Post body must be a string")
        if len(body) >= self.max_length:
            raise ValidationError(f"Post is too long (must be under {self.max_length} characters)")

        with self.posts.store.transaction() as document:
            if author_id is not None:
                self.accounts.lookup(document, author_id)
            post = self.posts.add(document, body=body, author_id=author_id)

        logger.info("Post created", post_id=post.id, author_id=author_id)
        return post

    def get_post(self, post_id: int) -> Post:
        return self.posts.get(post_id)

    def list_posts(self, author_id: Optional[int] = None, sort: str = "asc") -> List[Post]:
        """Posts ordered by id, optionally only those by one author"""
        if sort not in ("asc", "desc"):
            raise ValidationError("sort must be 'asc' or 'desc'")
        posts = self.posts.list()
        if author_id is not None:
            posts = [p for p in posts if p.author_id == author_id]
        return sorted(posts, key=lambda p: p.id, reverse=(sort == "desc"))
