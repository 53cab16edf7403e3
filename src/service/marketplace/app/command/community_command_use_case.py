from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.event.i_domain_event_publisher import IDomainEventPublisher
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_community_repo import ICommunityRepo
from src.service.marketplace.domain.domain_event.marketplace_events import CommentCreatedEvent
from src.service.marketplace.domain.entity.community_entity import Comment, Post
from src.service.marketplace.domain.entity.user_entity import UserEntity
from src.service.marketplace.domain.enum.post_category import PostCategory


class CommunityCommandUseCase:
    def __init__(
        self, *, community_repo: ICommunityRepo, event_publisher: IDomainEventPublisher
    ) -> None:
        self.community_repo = community_repo
        self.event_publisher = event_publisher

    @classmethod
    @inject
    def depends(
        cls,
        community_repo: ICommunityRepo = Depends(Provide[Container.community_repo]),
        event_publisher: IDomainEventPublisher = Depends(Provide[Container.event_bus]),
    ) -> Self:
        return cls(community_repo=community_repo, event_publisher=event_publisher)

    async def _get_post(self, post_id: int) -> Post:
        post = await self.community_repo.get_post(post_id)
        if not post:
            raise NotFoundError('Post not found')
        return post

    async def _get_comment(self, comment_id: int) -> Comment:
        comment = await self.community_repo.get_comment(comment_id)
        if not comment:
            raise NotFoundError('Comment not found')
        return comment

    @Logger.io
    async def create_post(
        self, *, author: UserEntity, category: PostCategory, title: str, content: str
    ) -> Post:
        post = await self.community_repo.create_post(
            Post.create(author=author, category=category, title=title, content=content)
        )
        Logger.base.info(f'📝 [COMMUNITY] Post #{post.id} ({category}) by user {author.id}')
        return post

    @Logger.io
    async def update_post(
        self,
        *,
        post_id: int,
        editor: UserEntity,
        category: PostCategory,
        title: str,
        content: str,
    ) -> Post:
        post = await self._get_post(post_id)
        return await self.community_repo.update_post(
            post.edit(editor=editor, category=category, title=title, content=content)
        )

    @Logger.io
    async def delete_post(self, *, post_id: int, user: UserEntity) -> None:
        post = await self._get_post(post_id)
        post.validate_deletable_by(user)
        await self.community_repo.soft_delete_post(post_id)
        Logger.base.info(f'🗑️ [COMMUNITY] Post #{post_id} deleted by user {user.id}')

    @Logger.io
    async def create_comment(self, *, post_id: int, author: UserEntity, content: str) -> Comment:
        post = await self._get_post(post_id)
        comment = await self.community_repo.create_comment(
            Comment.create(post_id=post_id, author_id=author.id or 0, content=content)
        )

        await self.event_publisher.publish(
            CommentCreatedEvent(
                comment_id=comment.id or 0,
                post_id=post_id,
                post_title=post.title,
                post_author_id=post.author_id,
                commenter_id=author.id or 0,
                commenter_nickname=author.nickname,
            )
        )
        return comment

    @Logger.io
    async def update_comment(self, *, comment_id: int, editor: UserEntity, content: str) -> Comment:
        comment = await self._get_comment(comment_id)
        return await self.community_repo.update_comment(comment.edit(editor=editor, content=content))

    @Logger.io
    async def delete_comment(self, *, comment_id: int, user: UserEntity) -> None:
        comment = await self._get_comment(comment_id)
        comment.validate_deletable_by(user)
        await self.community_repo.delete_comment(comment_id)
