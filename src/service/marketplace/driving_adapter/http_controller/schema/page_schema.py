from typing import Callable, Generic, List, Optional, TypeVar

from pydantic import BaseModel

from src.service.marketplace.app.dto.page import CursorPage


T = TypeVar('T')
S = TypeVar('S')


class PageResponse(BaseModel, Generic[T]):
    content: List[T]
    next_cursor: Optional[int] = None
    has_next: bool
    page_size: int
    page_no: Optional[int] = None

    @classmethod
    def from_page(cls, page: CursorPage[S], mapper: Callable[[S], T]) -> 'PageResponse[T]':
        return cls(
            content=[mapper(item) for item in page.content],
            next_cursor=page.next_cursor,
            has_next=page.has_next,
            page_size=page.page_size,
            page_no=page.page_no,
        )


class MessageResponse(BaseModel):
    message: str
