from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.command.community_command_use_case import (
    CommunityCommandUseCase,
)
from src.service.marketplace.app.query.community_query_use_case import CommunityQueryUseCase
from src.service.marketplace.domain.entity.user_entity import UserEntity
from src.service.marketplace.domain.enum.post_category import PostCategory
from src.service.marketplace.driving_adapter.http_controller.auth.role_auth import (
    get_current_user,
)
from src.service.marketplace.driving_adapter.http_controller.schema.community_schema import (
    CommentRequest,
    CommentResponse,
    PostDetailResponse,
    PostListItemResponse,
    PostRequest,
    PostResponse,
    WritePermissionResponse,
)
from src.service.marketplace.driving_adapter.http_controller.schema.page_schema import (
    MessageResponse,
    PageResponse,
)


router = APIRouter()


@router.get('/posts', response_model=PageResponse[PostListItemResponse])
@Logger.io
async def list_posts(
    category: Optional[PostCategory] = Query(None),
    page_no: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=50),
    use_case: CommunityQueryUseCase = Depends(CommunityQueryUseCase.depends),
) -> PageResponse[PostListItemResponse]:
    page = await use_case.list_posts(category=category, page_no=page_no, page_size=page_size)
    return PageResponse[PostListItemResponse].from_page(page, PostListItemResponse.from_item)


@router.get('/posts/write-permission', response_model=WritePermissionResponse)
@Logger.io
async def get_write_permission(
    current_user: UserEntity = Depends(get_current_user),
    use_case: CommunityQueryUseCase = Depends(CommunityQueryUseCase.depends),
) -> WritePermissionResponse:
    return WritePermissionResponse.from_permission(use_case.get_write_permission(user=current_user))


@router.get('/posts/{post_id}', response_model=PostDetailResponse)
@Logger.io
async def get_post(
    post_id: int,
    page_no: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    use_case: CommunityQueryUseCase = Depends(CommunityQueryUseCase.depends),
) -> PostDetailResponse:
    detail = await use_case.get_post_detail(post_id=post_id, page_no=page_no, page_size=page_size)
    return PostDetailResponse.from_detail(detail)


@router.post('/posts', response_model=PostResponse, status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_post(
    request: PostRequest,
    current_user: UserEntity = Depends(get_current_user),
    use_case: CommunityCommandUseCase = Depends(CommunityCommandUseCase.depends),
) -> PostResponse:
    post = await use_case.create_post(
        author=current_user,
        category=request.category,
        title=request.title,
        content=request.content,
    )
    return PostResponse.from_entity(post)


@router.put('/posts/{post_id}', response_model=PostResponse)
@Logger.io
async def update_post(
    post_id: int,
    request: PostRequest,
    current_user: UserEntity = Depends(get_current_user),
    use_case: CommunityCommandUseCase = Depends(CommunityCommandUseCase.depends),
) -> PostResponse:
    post = await use_case.update_post(
        post_id=post_id,
        editor=current_user,
        category=request.category,
        title=request.title,
        content=request.content,
    )
    return PostResponse.from_entity(post)


@router.delete('/posts/{post_id}', response_model=MessageResponse)
@Logger.io
async def delete_post(
    post_id: int,
    current_user: UserEntity = Depends(get_current_user),
    use_case: CommunityCommandUseCase = Depends(CommunityCommandUseCase.depends),
) -> MessageResponse:
    await use_case.delete_post(post_id=post_id, user=current_user)
    return MessageResponse(message='Post deleted')


@router.get('/posts/{post_id}/comments', response_model=PageResponse[CommentResponse])
@Logger.io
async def list_comments(
    post_id: int,
    page_no: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    use_case: CommunityQueryUseCase = Depends(CommunityQueryUseCase.depends),
) -> PageResponse[CommentResponse]:
    page = await use_case.list_comments(post_id=post_id, page_no=page_no, page_size=page_size)
    return PageResponse[CommentResponse].from_page(page, CommentResponse.from_item)


@router.post(
    '/posts/{post_id}/comments',
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
@Logger.io
async def create_comment(
    post_id: int,
    request: CommentRequest,
    current_user: UserEntity = Depends(get_current_user),
    use_case: CommunityCommandUseCase = Depends(CommunityCommandUseCase.depends),
) -> CommentResponse:
    comment = await use_case.create_comment(
        post_id=post_id, author=current_user, content=request.content
    )
    return CommentResponse.from_entity(comment)


@router.put('/comments/{comment_id}', response_model=CommentResponse)
@Logger.io
async def update_comment(
    comment_id: int,
    request: CommentRequest,
    current_user: UserEntity = Depends(get_current_user),
    use_case: CommunityCommandUseCase = Depends(CommunityCommandUseCase.depends),
) -> CommentResponse:
    comment = await use_case.update_comment(
        comment_id=comment_id, editor=current_user, content=request.content
    )
    return CommentResponse.from_entity(comment)


@router.delete('/comments/{comment_id}', response_model=MessageResponse)
@Logger.io
async def delete_comment(
    comment_id: int,
    current_user: UserEntity = Depends(get_current_user),
    use_case: CommunityCommandUseCase = Depends(CommunityCommandUseCase.depends),
) -> MessageResponse:
    await use_case.delete_comment(comment_id=comment_id, user=current_user)
    return MessageResponse(message='Comment deleted')
