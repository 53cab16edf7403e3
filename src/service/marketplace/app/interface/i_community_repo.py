from abc import ABC, abstractmethod
from typing import List, Optional

from src.service.marketplace.app.dto.community_dto import CommentItem, PostListItem
from src.service.marketplace.domain.entity.community_entity import Comment, Post
from src.service.marketplace.domain.enum.post_category import PostCategory


class ICommunityRepo(ABC):
    @abstractmethod
    async def create_post(self, post: Post) -> Post:
        pass

    @abstractmethod
    async def get_post(self, post_id: int) -> Optional[Post]:
        """Soft-deleted posts are treated as missing"""
        pass

    @abstractmethod
    async def update_post(self, post: Post) -> Post:
        pass

    @abstractmethod
    async def soft_delete_post(self, post_id: int) -> None:
        """Marks the post deleted and removes its comments"""
        pass

    @abstractmethod
    async def increment_view_count(self, post_id: int) -> int:
        pass

    @abstractmethod
    async def list_posts(
        self, *, category: Optional[PostCategory], offset: int, limit: int
    ) -> List[PostListItem]:
        pass

    @abstractmethod
    async def create_comment(self, comment: Comment) -> Comment:
        pass

    @abstractmethod
    async def get_comment(self, comment_id: int) -> Optional[Comment]:
        pass

    @abstractmethod
    async def update_comment(self, comment: Comment) -> Comment:
        pass

    @abstractmethod
    async def delete_comment(self, comment_id: int) -> None:
        pass

    @abstractmethod
    async def list_comments(self, *, post_id: int, offset: int, limit: int) -> List[CommentItem]:
        pass
