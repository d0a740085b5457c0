"""Mapping of arbitrary failures onto the uniform APIError shape."""

from typing import Any

import httpx

from swapkit.exceptions import FetcherError
from swapkit.models import APIError


def _from_response(exc: BaseException, status: int, data: Any) -> APIError:
    message = data.get("error") if isinstance(data, dict) else None
    if not isinstance(message, str):
        message = str(exc)
    return APIError(status=status, message=message, data=data)


def normalize_error(exc: BaseException) -> APIError:
    """Normalize a failed delegate call.

    - Transport failure with a server response: status, the body's `error`
      field as message, and the body as data.
    - Transport failure without a response (timeout, DNS, refused): the
      failure's own message.
    - Anything else: "Unknown error: <exc>". Details of non-transport errors
      are intentionally not preserved beyond their string form.

    Args:
        exc: Exception raised by the delegate

    Returns:
        APIError describing the failure
    """
    if isinstance(exc, FetcherError):
        if exc.response is None:
            return APIError(message=exc.message)
        return _from_response(exc, exc.response.status, exc.response.data)

    if isinstance(exc, httpx.HTTPStatusError):
        try:
            data = exc.response.json()
        except ValueError:
            data = exc.response.text
        return _from_response(exc, exc.response.status_code, data)

    if isinstance(exc, httpx.RequestError):
        return APIError(message=str(exc))

    return APIError(message=f"Unknown error: {exc}")


def is_api_error(value: Any) -> bool:
    """True when a client operation result is a failure."""
    return isinstance(value, APIError)
