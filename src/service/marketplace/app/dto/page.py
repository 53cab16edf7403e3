"""Paging DTO shared by every list endpoint."""

from typing import Generic, List, Optional, TypeVar

import attrs


T = TypeVar('T')


@attrs.define(frozen=True)
class CursorPage(Generic[T]):
    content: List[T]
    next_cursor: Optional[int]
    has_next: bool
    page_size: int
    page_no: Optional[int] = None

    @classmethod
    def from_offset(cls, *, rows: List[T], page_no: int, page_size: int) -> 'CursorPage[T]':
        """
        Build a page from a `page_size + 1` row fetch.

        The extra row only signals that another page exists; it is dropped.
        """
        has_next = len(rows) > page_size
        return cls(
            content=rows[:page_size],
            next_cursor=page_no + 1 if has_next else None,
            has_next=has_next,
            page_size=page_size,
            page_no=page_no,
        )


def offset_of(*, page_no: int, page_size: int) -> int:
    return (page_no - 1) * page_size
