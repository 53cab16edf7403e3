from typing import AsyncContextManager, Callable, List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.dto.community_dto import CommentItem, PostListItem
from src.service.marketplace.app.interface.i_community_repo import ICommunityRepo
from src.service.marketplace.domain.entity.community_entity import Comment, Post
from src.service.marketplace.domain.enum.post_category import PostCategory
from src.service.marketplace.driven_adapter.model.community_model import CommentModel, PostModel
from src.service.marketplace.driven_adapter.model.user_model import UserModel


class CommunityRepoImpl(ICommunityRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @staticmethod
    def _post_to_entity(post_model: PostModel) -> Post:
        return Post(
            id=post_model.id,
            author_id=post_model.author_id,
            category=PostCategory(post_model.category),
            title=post_model.title,
            content=post_model.content,
            view_count=post_model.view_count,
            is_deleted=post_model.is_deleted,
            created_at=post_model.created_at,
            updated_at=post_model.updated_at,
        )

    @staticmethod
    def _comment_to_entity(comment_model: CommentModel) -> Comment:
        return Comment(
            id=comment_model.id,
            post_id=comment_model.post_id,
            author_id=comment_model.author_id,
            content=comment_model.content,
            created_at=comment_model.created_at,
            updated_at=comment_model.updated_at,
        )

    # Posts

    @Logger.io
    async def create_post(self, post: Post) -> Post:
        async with self.session_factory() as session:
            post_model = PostModel(
                author_id=post.author_id,
                category=post.category.value,
                title=post.title,
                content=post.content,
                view_count=0,
                is_deleted=False,
            )
            session.add(post_model)
            await session.commit()
            await session.refresh(post_model)
            return self._post_to_entity(post_model)

    @Logger.io
    async def get_post(self, post_id: int) -> Optional[Post]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(PostModel).where(PostModel.id == post_id, PostModel.is_deleted.is_(False))
            )
            post_model = result.scalar_one_or_none()
            return self._post_to_entity(post_model) if post_model else None

    @Logger.io
    async def update_post(self, post: Post) -> Post:
        async with self.session_factory() as session:
            post_model = await session.get(PostModel, post.id)
            if not post_model or post_model.is_deleted:
                raise NotFoundError('Post not found')

            post_model.category = post.category.value
            post_model.title = post.title
            post_model.content = post.content

            await session.commit()
            await session.refresh(post_model)
            return self._post_to_entity(post_model)

    @Logger.io
    async def soft_delete_post(self, post_id: int) -> None:
        async with self.session_factory() as session:
            await session.execute(delete(CommentModel).where(CommentModel.post_id == post_id))
            await session.execute(
                update(PostModel).where(PostModel.id == post_id).values(is_deleted=True)
            )
            await session.commit()

    @Logger.io
    async def increment_view_count(self, post_id: int) -> int:
        async with self.session_factory() as session:
            await session.execute(
                update(PostModel)
                .where(PostModel.id == post_id)
                .values(view_count=PostModel.view_count + 1)
            )
            await session.commit()
            result = await session.execute(
                select(PostModel.view_count).where(PostModel.id == post_id)
            )
            return int(result.scalar() or 0)

    @Logger.io
    async def list_posts(
        self, *, category: Optional[PostCategory], offset: int, limit: int
    ) -> List[PostListItem]:
        comment_counts = (
            select(CommentModel.post_id, func.count(CommentModel.id).label('comment_count'))
            .group_by(CommentModel.post_id)
            .subquery()
        )
        stmt = (
            select(PostModel, UserModel.nickname, func.coalesce(comment_counts.c.comment_count, 0))
            .join(UserModel, UserModel.id == PostModel.author_id)
            .outerjoin(comment_counts, comment_counts.c.post_id == PostModel.id)
            .where(PostModel.is_deleted.is_(False))
        )
        if category is not None:
            stmt = stmt.where(PostModel.category == category.value)

        async with self.session_factory() as session:
            result = await session.execute(
                stmt.order_by(PostModel.created_at.desc(), PostModel.id.desc())
                .offset(offset)
                .limit(limit)
            )
            return [
                PostListItem(
                    post_id=post_model.id,
                    category=PostCategory(post_model.category),
                    title=post_model.title,
                    author_nickname=nickname,
                    comment_count=int(comment_count),
                    view_count=post_model.view_count,
                    created_at=post_model.created_at,
                )
                for post_model, nickname, comment_count in result.all()
            ]

    # Comments

    @Logger.io
    async def create_comment(self, comment: Comment) -> Comment:
        async with self.session_factory() as session:
            comment_model = CommentModel(
                post_id=comment.post_id, author_id=comment.author_id, content=comment.content
            )
            session.add(comment_model)
            await session.commit()
            await session.refresh(comment_model)
            return self._comment_to_entity(comment_model)

    @Logger.io
    async def get_comment(self, comment_id: int) -> Optional[Comment]:
        async with self.session_factory() as session:
            comment_model = await session.get(CommentModel, comment_id)
            return self._comment_to_entity(comment_model) if comment_model else None

    @Logger.io
    async def update_comment(self, comment: Comment) -> Comment:
        async with self.session_factory() as session:
            comment_model = await session.get(CommentModel, comment.id)
            if not comment_model:
                raise NotFoundError('Comment not found')

            comment_model.content = comment.content
            await session.commit()
            await session.refresh(comment_model)
            return self._comment_to_entity(comment_model)

    @Logger.io
    async def delete_comment(self, comment_id: int) -> None:
        async with self.session_factory() as session:
            await session.execute(delete(CommentModel).where(CommentModel.id == comment_id))
            await session.commit()

    @Logger.io
    async def list_comments(self, *, post_id: int, offset: int, limit: int) -> List[CommentItem]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(CommentModel, UserModel.nickname)
                .join(UserModel, UserModel.id == CommentModel.author_id)
                .where(CommentModel.post_id == post_id)
                .order_by(CommentModel.created_at.asc(), CommentModel.id.asc())
                .offset(offset)
                .limit(limit)
            )
            return [
                CommentItem(
                    comment_id=comment_model.id,
                    post_id=comment_model.post_id,
                    author_id=comment_model.author_id,
                    author_nickname=nickname,
                    content=comment_model.content,
                    created_at=comment_model.created_at,
                    updated_at=comment_model.updated_at,
                )
                for comment_model, nickname in result.all()
            ]
