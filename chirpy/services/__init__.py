from .post_service import PostService
from .repository import AccountRepository, PostRepository, Repository

__all__ = ["AccountRepository", "PostRepository", "PostService", "Repository"]
