"""Cursor-driven aggregation of paged Notion API results."""

import logging
from collections.abc import Callable
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

# Maximum page size accepted by paged Notion endpoints
MAX_PAGE_SIZE = 100


class Transport(Protocol):
    """The part of the transport the paginator depends on."""

    def request(
        self,
        method: str,
        endpoint: str,
        *,
        body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]: ...


class Cursor(BaseModel):
    """Continuation state returned by a paged endpoint."""

    model_config = ConfigDict(frozen=True)

    next_cursor: str | None = None
    has_more: bool = False

    @classmethod
    def from_response(cls, response: dict[str, Any]) -> "Cursor":
        """Read the cursor fields from a paged response."""
        next_cursor = response.get("next_cursor")
        return cls(
            next_cursor=next_cursor if isinstance(next_cursor, str) else None,
            has_more=response.get("has_more") is True,
        )

    @property
    def exhausted(self) -> bool:
        """Whether there are no further pages to fetch."""
        return not self.has_more or self.next_cursor is None


def extract_results(response: dict[str, Any]) -> list[dict[str, Any]]:
    """Default page extractor reading the ``results`` array."""
    results = response.get("results", [])
    return results if isinstance(results, list) else []


def paginate(
    transport: Transport,
    method: str,
    endpoint: str,
    *,
    body: dict[str, Any] | None = None,
    params: dict[str, Any] | None = None,
    limit: int | None = None,
    extract: Callable[[dict[str, Any]], list[dict[str, Any]]] = extract_results,
) -> list[dict[str, Any]]:
    """Fetch every page of a paged endpoint.

    The cursor goes into the JSON body for requests that have one and into
    the query parameters otherwise. Results are returned in the order the
    API produced them, without deduplication. Any request failure propagates
    and the results gathered so far are discarded.

    :param transport: Transport used for each request.
    :param method: HTTP method.
    :param endpoint: API endpoint path.
    :param body: JSON body template, or None for GET endpoints.
    :param params: Query parameter template.
    :param limit: Maximum number of results to return, or None for all.
    :param extract: Function returning the result items of one page.
    :returns: All results, truncated to ``limit``.
    """
    if limit is not None and limit <= 0:
        return []

    all_results: list[dict[str, Any]] = []
    start_cursor: str | None = None
    use_body = body is not None

    while True:
        remaining = None if limit is None else limit - len(all_results)
        page_size = MAX_PAGE_SIZE if remaining is None else min(remaining, MAX_PAGE_SIZE)

        paging: dict[str, Any] = {"page_size": page_size}
        if start_cursor is not None:
            paging["start_cursor"] = start_cursor

        if use_body:
            response = transport.request(
                method, endpoint, body={**(body or {}), **paging}, params=params
            )
        else:
            response = transport.request(method, endpoint, params={**(params or {}), **paging})

        all_results.extend(extract(response))

        if limit is not None and len(all_results) >= limit:
            break

        cursor = Cursor.from_response(response)
        if cursor.exhausted:
            break
        start_cursor = cursor.next_cursor

    logger.debug(f"Collected {len(all_results)} results from endpoint={endpoint}")
    if limit is not None:
        return all_results[:limit]
    return all_results
