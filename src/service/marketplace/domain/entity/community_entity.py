from datetime import datetime
from typing import Optional

import attrs

from src.platform.exception.exceptions import DomainError, ForbiddenError
from src.service.marketplace.domain.entity.user_entity import UserEntity, UserRole
from src.service.marketplace.domain.enum.post_category import PostCategory


TITLE_MAX_LENGTH = 100
COMMENT_MAX_LENGTH = 1000


def validate_category_for(*, category: PostCategory, role: UserRole) -> None:
    if category == PostCategory.ALL:
        raise DomainError('ALL is not a writable category')
    if role == UserRole.USER and category != PostCategory.QUESTION:
        raise ForbiddenError('Users can only write QUESTION posts')


def writable_categories_for(role: UserRole) -> list[PostCategory]:
    if role == UserRole.USER:
        return [PostCategory.QUESTION]
    return PostCategory.writable()


def _validate_author_or_admin(*, author_id: int, user: UserEntity) -> None:
    if user.role != UserRole.ADMIN and author_id != user.id:
        raise ForbiddenError('Only the author or an admin can modify this')


@attrs.define
class Post:
    author_id: int
    category: PostCategory
    title: str
    content: str
    id: Optional[int] = None
    view_count: int = 0
    is_deleted: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def create(
        cls, *, author: UserEntity, category: PostCategory, title: str, content: str
    ) -> 'Post':
        validate_category_for(category=category, role=author.role)
        return cls(
            author_id=author.id or 0,
            category=category,
            title=_validate_title(title),
            content=_validate_content(content),
        )

    def edit(
        self, *, editor: UserEntity, category: PostCategory, title: str, content: str
    ) -> 'Post':
        _validate_author_or_admin(author_id=self.author_id, user=editor)
        validate_category_for(category=category, role=editor.role)
        return attrs.evolve(
            self,
            category=category,
            title=_validate_title(title),
            content=_validate_content(content),
        )

    def validate_deletable_by(self, user: UserEntity) -> None:
        _validate_author_or_admin(author_id=self.author_id, user=user)


@attrs.define
class Comment:
    post_id: int
    author_id: int
    content: str
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def create(cls, *, post_id: int, author_id: int, content: str) -> 'Comment':
        return cls(post_id=post_id, author_id=author_id, content=_validate_comment(content))

    def edit(self, *, editor: UserEntity, content: str) -> 'Comment':
        _validate_author_or_admin(author_id=self.author_id, user=editor)
        return attrs.evolve(self, content=_validate_comment(content))

    def validate_deletable_by(self, user: UserEntity) -> None:
        _validate_author_or_admin(author_id=self.author_id, user=user)


def _validate_title(title: str) -> str:
    stripped = (title or '').strip()
    if not stripped or len(stripped) > TITLE_MAX_LENGTH:
        raise DomainError(f'Title must be 1-{TITLE_MAX_LENGTH} characters')
    return stripped


def _validate_content(content: str) -> str:
    if not content or not content.strip():
        raise DomainError('Content is required')
    return content


def _validate_comment(content: str) -> str:
    stripped = (content or '').strip()
    if not stripped or len(stripped) > COMMENT_MAX_LENGTH:
        raise DomainError(f'Comment must be 1-{COMMENT_MAX_LENGTH} characters')
    return stripped
