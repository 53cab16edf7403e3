from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from src.service.marketplace.app.dto.community_dto import CommentItem, PostDetail, PostListItem
from src.service.marketplace.app.query.community_query_use_case import WritePermission
from src.service.marketplace.domain.entity.community_entity import (
    COMMENT_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    Comment,
    Post,
)
from src.service.marketplace.domain.entity.user_entity import UserRole
from src.service.marketplace.domain.enum.post_category import PostCategory
from src.service.marketplace.driving_adapter.http_controller.schema.page_schema import (
    PageResponse,
)


class PostRequest(BaseModel):
    category: PostCategory
    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    content: str = Field(..., min_length=1)

    class Config:
        json_schema_extra = {
            'example': {
                'category': 'QUESTION',
                'title': 'How do you size positions?',
                'content': 'Looking for a rule of thumb for swing trades.',
            }
        }


class CommentRequest(BaseModel):
    content: str = Field(..., min_length=1, max_length=COMMENT_MAX_LENGTH)


class PostListItemResponse(BaseModel):
    post_id: int
    category: PostCategory
    category_display_name: str
    title: str
    author_nickname: str
    comment_count: int
    view_count: int
    created_at: Optional[datetime] = None

    @classmethod
    def from_item(cls, item: PostListItem) -> 'PostListItemResponse':
        return cls(
            post_id=item.post_id,
            category=item.category,
            category_display_name=item.category_display_name,
            title=item.title,
            author_nickname=item.author_nickname,
            comment_count=item.comment_count,
            view_count=item.view_count,
            created_at=item.created_at,
        )


class CommentResponse(BaseModel):
    comment_id: int
    post_id: int
    author_id: int
    author_nickname: Optional[str] = None
    content: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_item(cls, item: CommentItem) -> 'CommentResponse':
        return cls(
            comment_id=item.comment_id,
            post_id=item.post_id,
            author_id=item.author_id,
            author_nickname=item.author_nickname,
            content=item.content,
            created_at=item.created_at,
            updated_at=item.updated_at,
        )

    @classmethod
    def from_entity(cls, comment: Comment) -> 'CommentResponse':
        return cls(
            comment_id=comment.id or 0,
            post_id=comment.post_id,
            author_id=comment.author_id,
            content=comment.content,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
        )


class PostResponse(BaseModel):
    post_id: int
    author_id: int
    category: PostCategory
    category_display_name: str
    title: str
    content: str
    view_count: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, post: Post) -> 'PostResponse':
        return cls(
            post_id=post.id or 0,
            author_id=post.author_id,
            category=post.category,
            category_display_name=post.category.display_name,
            title=post.title,
            content=post.content,
            view_count=post.view_count,
            created_at=post.created_at,
            updated_at=post.updated_at,
        )


class PostDetailResponse(PostResponse):
    author_nickname: str
    comments: PageResponse[CommentResponse]

    @classmethod
    def from_detail(cls, detail: PostDetail) -> 'PostDetailResponse':
        base = PostResponse.from_entity(detail.post)
        return cls(
            **base.model_dump(),
            author_nickname=detail.author_nickname,
            comments=PageResponse[CommentResponse].from_page(
                detail.comments, CommentResponse.from_item
            ),
        )


class WritePermissionResponse(BaseModel):
    can_write: bool
    role: UserRole
    available_categories: List[PostCategory]

    @classmethod
    def from_permission(cls, permission: WritePermission) -> 'WritePermissionResponse':
        return cls(
            can_write=permission.can_write,
            role=permission.role,
            available_categories=permission.available_categories,
        )
