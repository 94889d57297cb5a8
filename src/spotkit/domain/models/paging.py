"""Paging envelopes.

Hey future me - the API has TWO paging styles:
- offset paging (PagingObject): ?offset=40&limit=20, used almost everywhere
- cursor paging (CursorBasedPagingObject): ?after=<last id>, used by /me/following and
  recently-played. There's no offset and usually no total you can rely on.

Both carry a `next` URL which is all we need to fetch the following page. The endpoint that
decoded the page injects a fetcher (PrivateAttr, never serialized) so callers can just do
`await page.next_page()` or `async for item in page.iter_items()`.
"""

from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any, Generic, Self, TypeVar

from pydantic import BaseModel, Field, PrivateAttr

T = TypeVar("T")

PageFetcher = Callable[[str], Awaitable[Any]]


class _Page(BaseModel, Generic[T]):
    href: str | None = None
    items: list[T] = Field(default_factory=list)
    limit: int = 0
    next: str | None = None
    total: int | None = None

    _fetcher: PageFetcher | None = PrivateAttr(default=None)

    def bind(self, fetcher: PageFetcher) -> Self:
        """Attach the callable that loads a page from a `next` URL."""
        self._fetcher = fetcher
        return self

    @property
    def has_next(self) -> bool:
        return self.next is not None

    async def next_page(self) -> Self | None:
        """Fetch the page after this one, or None if this is the last page."""
        if self.next is None:
            return None
        if self._fetcher is None:
            raise RuntimeError(
                "This page was not loaded through an API client and can't fetch more pages"
            )
        page = await self._fetcher(self.next)
        return page  # type: ignore[no-any-return]

    async def iter_items(self) -> AsyncIterator[T]:
        """Yield items of this page and every following page, one request per page."""
        page: Self | None = self
        while page is not None:
            for item in page.items:
                yield item
            page = await page.next_page()

    async def get_all_items(self) -> list[T]:
        """Collect iter_items() into a list. Careful with huge libraries."""
        return [item async for item in self.iter_items()]


class PagingObject(_Page[T], Generic[T]):
    """Offset based page."""

    offset: int = 0
    previous: str | None = None


class Cursor(BaseModel):
    """Cursor pointing at the last (`after`) or first (`before`) item of a page."""

    after: str | None = None
    before: str | None = None


class CursorBasedPagingObject(_Page[T], Generic[T]):
    """Cursor based page."""

    cursors: Cursor = Field(default_factory=Cursor)
