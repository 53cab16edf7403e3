from datetime import datetime
from typing import Optional

import attrs

from src.service.marketplace.app.dto.page import CursorPage
from src.service.marketplace.domain.entity.community_entity import Post
from src.service.marketplace.domain.enum.post_category import PostCategory


@attrs.define
class PostListItem:
    post_id: int
    category: PostCategory
    title: str
    author_nickname: str
    comment_count: int
    view_count: int
    created_at: Optional[datetime] = None

    @property
    def category_display_name(self) -> str:
        return self.category.display_name


@attrs.define
class CommentItem:
    comment_id: int
    post_id: int
    author_id: int
    author_nickname: str
    content: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@attrs.define
class PostDetail:
    post: Post
    author_nickname: str
    comments: CursorPage[CommentItem]
