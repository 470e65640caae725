"""Page envelope for timeline reads."""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class PaginatedResponse(BaseModel, Generic[T]):
    """One page of a newest-first listing.

    Pass `next_cursor` back as `cursor` to continue after the last item.
    """

    items: list[T]
    next_cursor: str | None = Field(
        default=None,
        description="Cursor for the next page. None on the last page.",
    )
    has_more: bool = Field(
        default=False,
        description="Whether older items exist after this page.",
    )
