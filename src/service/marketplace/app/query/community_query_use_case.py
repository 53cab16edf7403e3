from typing import List, Optional, Self

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.dto.community_dto import CommentItem, PostDetail, PostListItem
from src.service.marketplace.app.dto.page import CursorPage, offset_of
from src.service.marketplace.app.interface.i_community_repo import ICommunityRepo
from src.service.marketplace.app.interface.i_user_query_repo import IUserQueryRepo
from src.service.marketplace.domain.entity.community_entity import writable_categories_for
from src.service.marketplace.domain.entity.user_entity import UserEntity, UserRole
from src.service.marketplace.domain.enum.post_category import PostCategory


@attrs.define(frozen=True)
class WritePermission:
    can_write: bool
    role: UserRole
    available_categories: List[PostCategory]


class CommunityQueryUseCase:
    def __init__(self, *, community_repo: ICommunityRepo, user_query_repo: IUserQueryRepo) -> None:
        self.community_repo = community_repo
        self.user_query_repo = user_query_repo

    @classmethod
    @inject
    def depends(
        cls,
        community_repo: ICommunityRepo = Depends(Provide[Container.community_repo]),
        user_query_repo: IUserQueryRepo = Depends(Provide[Container.user_query_repo]),
    ) -> Self:
        return cls(community_repo=community_repo, user_query_repo=user_query_repo)

    @Logger.io
    async def list_posts(
        self, *, category: Optional[PostCategory], page_no: int, page_size: int
    ) -> CursorPage[PostListItem]:
        rows = await self.community_repo.list_posts(
            category=None if category in (None, PostCategory.ALL) else category,
            offset=offset_of(page_no=page_no, page_size=page_size),
            limit=page_size + 1,
        )
        return CursorPage.from_offset(rows=rows, page_no=page_no, page_size=page_size)

    @Logger.io
    async def list_comments(
        self, *, post_id: int, page_no: int, page_size: int
    ) -> CursorPage[CommentItem]:
        if not await self.community_repo.get_post(post_id):
            raise NotFoundError('Post not found')

        rows = await self.community_repo.list_comments(
            post_id=post_id,
            offset=offset_of(page_no=page_no, page_size=page_size),
            limit=page_size + 1,
        )
        return CursorPage.from_offset(rows=rows, page_no=page_no, page_size=page_size)

    @Logger.io
    async def get_post_detail(self, *, post_id: int, page_no: int, page_size: int) -> PostDetail:
        """Counts as a view"""
        post = await self.community_repo.get_post(post_id)
        if not post:
            raise NotFoundError('Post not found')

        post.view_count = await self.community_repo.increment_view_count(post_id)
        author = await self.user_query_repo.get_by_id(post.author_id)
        comments = await self.list_comments(post_id=post_id, page_no=page_no, page_size=page_size)
        return PostDetail(
            post=post,
            author_nickname=author.nickname if author else '',
            comments=comments,
        )

    def get_write_permission(self, *, user: UserEntity) -> WritePermission:
        categories = writable_categories_for(user.role)
        return WritePermission(
            can_write=bool(categories), role=user.role, available_categories=categories
        )
