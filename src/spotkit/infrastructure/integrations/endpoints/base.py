"""Shared plumbing for endpoint groups: request helpers, decoding, bulk limits, paging."""

import logging
from collections.abc import Awaitable, Callable, Sequence
from functools import lru_cache
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from spotkit.domain.exceptions import BadRequestError, DecodeError, ValidationError
from spotkit.domain.models.paging import CursorBasedPagingObject, PagingObject
from spotkit.infrastructure.integrations.request_spec import EndpointBuilder, RequestSpec

if TYPE_CHECKING:
    from spotkit.infrastructure.integrations.spotify_api import GenericSpotifyApi

logger = logging.getLogger(__name__)

T = TypeVar("T")
P = TypeVar("P", PagingObject[Any], CursorBasedPagingObject[Any])


@lru_cache(maxsize=None)
def _adapter(model: Any) -> TypeAdapter[Any]:
    # Building a TypeAdapter compiles a validator - do it once per type
    return TypeAdapter(model)


def decode(body: bytes, model: Any) -> Any:
    """Decode a JSON body into `model` (a pydantic model or any typing construct).

    Raises:
        DecodeError: Malformed JSON or a payload that doesn't match the model
    """
    try:
        return _adapter(model).validate_json(body)
    except PydanticValidationError as e:
        raise DecodeError(
            f"Response does not match {getattr(model, '__name__', model)}: "
            f"{e.error_count()} error(s), first: {e.errors()[0]['msg']}",
            body=body,
        ) from e


class SpotifyEndpoint:
    """Base class of every endpoint group (artists, shows, following, ...).

    Hey future me - endpoint methods stay DUMB: build a RequestSpec, hand it to the executor,
    decode. Anything smarter (retries, refresh, timeouts) belongs to the executor, not here.
    """

    def __init__(self, api: "GenericSpotifyApi") -> None:
        self.api = api

    def endpoint(self, path: str) -> EndpointBuilder:
        return EndpointBuilder(path)

    # =========================================================================
    # HTTP VERBS
    # =========================================================================

    async def _execute(self, spec: RequestSpec) -> bytes:
        return await self.api.executor.execute(spec)

    async def get(self, builder: EndpointBuilder) -> bytes:
        return await self._execute(builder.build("GET"))

    async def put(self, builder: EndpointBuilder, body: Any = None) -> bytes:
        return await self._execute(builder.build("PUT", body))

    async def post(self, builder: EndpointBuilder, body: Any = None) -> bytes:
        return await self._execute(builder.build("POST", body))

    async def delete(self, builder: EndpointBuilder, body: Any = None) -> bytes:
        return await self._execute(builder.build("DELETE", body))

    # =========================================================================
    # BULK HELPERS
    # =========================================================================

    @staticmethod
    def check_bulk_requesting(maximum: int, requested: int) -> None:
        """Fail fast, before any network call, when too many ids are passed.

        Raises:
            ValidationError: If requested > maximum
        """
        if requested > maximum:
            raise ValidationError(
                f"Too many ids requested ({requested}). Maximum is {maximum}"
            )

    @staticmethod
    def require_ids(ids: Sequence[str], what: str = "id") -> None:
        if not ids:
            raise ValidationError(f"At least one {what} is required")

    @staticmethod
    async def bulk_request(
        chunk_size: int,
        items: Sequence[str],
        producer: Callable[[Sequence[str]], Awaitable[list[T]]],
    ) -> list[T]:
        """Run `producer` once per chunk of `chunk_size` items and concatenate, keeping order."""
        results: list[T] = []
        for start in range(0, len(items), chunk_size):
            results.extend(await producer(items[start : start + chunk_size]))
        return results

    # =========================================================================
    # DECODING
    # =========================================================================

    async def get_object_or_none(self, builder: EndpointBuilder, model: type[T]) -> T | None:
        """GET a single object; 400/404 (unknown or malformed id) become None."""
        try:
            body = await self.get(builder)
        except BadRequestError as e:
            if e.status_code in (400, 404):
                logger.debug("Object not found (%d): %s", e.status_code, e.reason)
                return None
            raise
        return decode(body, model)  # type: ignore[no-any-return]

    async def get_paging(
        self,
        builder_or_url: EndpointBuilder | str,
        model: type[P],
        envelope: str | None = None,
    ) -> P:
        """GET a page and bind it so next_page()/iter_items() can follow the `next` link.

        Args:
            builder_or_url: First request, or an absolute `next` URL
            model: Parametrized paging type, e.g. PagingObject[SimpleEpisode]
            envelope: Key wrapping the page ({"artists": {...}} on /me/following)
        """
        if isinstance(builder_or_url, str):
            spec = RequestSpec(method="GET", path=builder_or_url)
        else:
            spec = builder_or_url.build("GET")
        body = await self._execute(spec)

        if envelope is None:
            page = decode(body, model)
        else:
            wrapped = decode(body, dict[str, model])  # type: ignore[valid-type]
            if envelope not in wrapped:
                raise DecodeError(f"Response has no '{envelope}' page", body=body)
            page = wrapped[envelope]

        return page.bind(lambda url: self.get_paging(url, model, envelope))  # type: ignore[no-any-return]
