"""Transport adapters for the pricing API.

Two calling conventions are accepted and reduced to one `Fetcher` callable:

- an `httpx.AsyncClient` (construct_httpx_fetcher)
- a fetch-like async function (construct_fetch_fetcher), e.g. a thin wrapper
  over `aiohttp.ClientSession.request`

Both raise FetcherError on failure so the client can normalize transport
errors without knowing which convention produced them.
"""

import inspect
import json
from typing import Any, Awaitable, Callable, Optional, Protocol

import httpx
import structlog

from swapkit.exceptions import FetcherError, FetcherResponse
from swapkit.logging import sanitize_url

logger = structlog.get_logger(__name__)

USER_AGENT = "swapkit/1.0"


class Fetcher(Protocol):
    """Makes one HTTP request and returns the parsed JSON body."""

    async def __call__(
        self,
        method: str,
        url: str,
        *,
        params: Optional[dict[str, Any]] = None,
        json: Optional[Any] = None,
    ) -> Any: ...


FetchFunction = Callable[..., Awaitable[Any]]


def _clean_params(params: Optional[dict[str, Any]]) -> dict[str, str]:
    """Drop None values and render booleans the way the API expects."""
    if not params:
        return {}
    cleaned = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            cleaned[key] = "true" if value else "false"
        else:
            cleaned[key] = str(value)
    return cleaned


def _parse_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


def construct_httpx_fetcher(client: httpx.AsyncClient) -> Fetcher:
    """Build a fetcher on top of an httpx client.

    Args:
        client: Client owned by the caller; it is never closed here.

    Returns:
        Fetcher raising FetcherError with a response for HTTP error statuses
        and without one for network-level failures.
    """

    async def fetcher(
        method: str,
        url: str,
        *,
        params: Optional[dict[str, Any]] = None,
        json: Optional[Any] = None,
    ) -> Any:
        logger.debug("Fetching", method=method, url=sanitize_url(url))
        try:
            response = await client.request(
                method,
                url,
                params=_clean_params(params),
                json=json,
                headers={"User-Agent": USER_AGENT},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise FetcherError(
                str(e),
                response=FetcherResponse(
                    status=e.response.status_code,
                    data=_parse_body(e.response),
                ),
                url=sanitize_url(str(e.request.url)),
            ) from e
        except httpx.RequestError as e:
            raise FetcherError(
                str(e) or type(e).__name__,
                url=sanitize_url(url),
            ) from e

        return _parse_body(response)

    return fetcher


def construct_fetch_fetcher(fetch: FetchFunction) -> Fetcher:
    """Build a fetcher on top of a fetch-like function.

    `fetch(url, *, method, headers, body)` must return a response object with
    an integer `status` (or `status_code`) and a `json()` method, which may be
    sync or async.

    Args:
        fetch: Fetch-like async callable

    Returns:
        Fetcher with the same error contract as construct_httpx_fetcher
    """

    async def fetcher(
        method: str,
        url: str,
        *,
        params: Optional[dict[str, Any]] = None,
        json: Optional[Any] = None,
    ) -> Any:
        full_url = str(httpx.URL(url, params=_clean_params(params)))
        headers = {"User-Agent": USER_AGENT}
        body = None
        if json is not None:
            headers["Content-Type"] = "application/json"
            body = _dumps(json)

        logger.debug("Fetching", method=method, url=sanitize_url(full_url))
        try:
            response = await fetch(full_url, method=method, headers=headers, body=body)
        except Exception as e:
            raise FetcherError(
                str(e) or type(e).__name__,
                url=sanitize_url(full_url),
            ) from e

        status = getattr(response, "status", None)
        if status is None:
            status = response.status_code

        try:
            data = response.json()
            if inspect.isawaitable(data):
                data = await data
        except Exception as e:
            # Error pages (HTML 502s and the like) still carry their status
            if status < 400:
                raise FetcherError(
                    f"Invalid JSON response: {e}",
                    url=sanitize_url(full_url),
                ) from e
            data = None

        if status >= 400:
            raise FetcherError(
                f"Request failed with status code {status}",
                response=FetcherResponse(status=status, data=data),
                url=sanitize_url(full_url),
            )

        return data

    return fetcher


def _dumps(payload: Any) -> str:
    return json.dumps(payload, separators=(",", ":"))
