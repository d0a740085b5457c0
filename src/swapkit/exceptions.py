"""SDK exception hierarchy.

Two disjoint families are raised from this package:

- SDKConfigurationError: the client was built without a collaborator that an
  operation needs. Fatal, never normalized into an APIError.
- FetcherError: the transport failed. Public client operations catch it and
  return an APIError value instead.
"""

from dataclasses import dataclass
from typing import Any, Optional


class SwapKitError(Exception):
    """Base exception for all swapkit errors."""

    pass


class SDKConfigurationError(SwapKitError):
    """Client is missing a fetcher or provider required by an operation.

    Use case: constructing a client with no transport, or calling an
    allowance/approval operation on a read-only client.
    Action: fix the client construction, do not retry.
    """

    pass


@dataclass(frozen=True)
class FetcherResponse:
    """Server response attached to a failed request."""

    status: int
    data: Any = None


class FetcherError(SwapKitError):
    """HTTP transport failure (status error or network-level failure).

    `response` is set when the server answered with an error status, and is
    None for timeouts, DNS failures and refused connections.
    """

    def __init__(
        self,
        message: str,
        *,
        response: Optional[FetcherResponse] = None,
        url: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.response = response
        self.url = url


class BulkApprovalError(SwapKitError):
    """An approval in a bulk request failed after earlier ones were sent.

    `tx_hashes` holds the hashes of the approvals already broadcast, in
    request order; they are also part of the message.
    """

    def __init__(self, token_address: str, tx_hashes: list[str], cause: Exception) -> None:
        sent = ", ".join(tx_hashes) if tx_hashes else "none"
        super().__init__(
            f"approval of {token_address} failed ({cause}); already sent: {sent}"
        )
        self.token_address = token_address
        self.tx_hashes = tx_hashes


class TokenNotFoundError(SwapKitError):
    """Requested token is not known to the pricing API for this user."""

    pass
