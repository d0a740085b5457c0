"""Client facade over the pricing API and the chain.

AggregatorClient decides once, at construction, which capability set it
exposes:

- transport only: ReadOnlySDK (tokens, adapters, rates, balances, spender,
  transaction building)
- transport plus a web3 provider: FullSDK (adds allowances and approvals)

Every public operation returns either the collaborator's payload unchanged
or an APIError. The only exceptions that escape are SDKConfigurationError,
raised when the client was built without what an operation needs.

Typical usage:
    async with httpx.AsyncClient() as http:
        client = AggregatorClient(network=1, http_client=http)
        route = await client.get_rate("ETH", "DAI", "1000000000000000000")
        if is_api_error(route):
            print(route.message)
"""

from enum import Enum
from typing import Any, Awaitable, Callable, Optional, TypeVar

import httpx
import structlog

from swapkit.config import Settings, get_settings
from swapkit.constants import API_URL, DEFAULT_NETWORK
from swapkit.errors import normalize_error
from swapkit.exceptions import FetcherError, SDKConfigurationError
from swapkit.helpers.contract_caller import ContractCaller, construct_contract_caller
from swapkit.helpers.fetchers import (
    FetchFunction,
    construct_fetch_fetcher,
    construct_httpx_fetcher,
)
from swapkit.logging import ErrorType, configure_logging, truncate_body
from swapkit.models import (
    Allowance,
    APIError,
    BuildOptions,
    BuildTxParams,
    RateByRouteParams,
    RateOptions,
    RateParams,
    SwapSide,
)
from swapkit.sdk import FullSDK, ReadOnlySDK, construct_sdk

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class ClientMode(str, Enum):
    """Capability set a client was built with."""

    READ_ONLY = "read_only"
    FULL = "full"


class Capability(str, Enum):
    """Collaborator an operation depends on."""

    FETCHER = "fetcher"
    PROVIDER = "provider"


def _resolve_contract_caller(
    wallet_provider: Any, chain_provider: Any
) -> Optional[ContractCaller]:
    """Pick the contract-calling backend; chain_provider wins over wallet_provider.

    Returns:
        ContractCaller, or None when no provider was supplied

    Raises:
        SDKConfigurationError: A provider was supplied that cannot call contracts
    """
    if wallet_provider is None and chain_provider is None:
        return None

    provider = chain_provider if chain_provider is not None else wallet_provider
    contract_caller = construct_contract_caller(provider)
    if contract_caller is None:
        raise SDKConfigurationError(
            "provider cannot call contracts (expected a web3.Web3 instance)"
        )
    return contract_caller


class AggregatorClient:
    """Facade for price queries, transaction building and token approvals."""

    def __init__(
        self,
        network: int = DEFAULT_NETWORK,
        api_url: str = API_URL,
        wallet_provider: Any = None,
        chain_provider: Any = None,
        http_client: Optional[httpx.AsyncClient] = None,
        fetch: Optional[FetchFunction] = None,
    ) -> None:
        """Build the client and its capability set.

        No network calls happen here.

        Args:
            network: Chain id (default 1, mainnet)
            api_url: Pricing API base URL
            wallet_provider: web3.Web3 connected to a wallet that signs
            chain_provider: web3.Web3 for a chain node; preferred over
                wallet_provider when both are given
            http_client: httpx client used as transport; preferred over fetch
            fetch: Fetch-like async callable used when http_client is None

        Raises:
            SDKConfigurationError: No transport was supplied, or a provider
                was supplied that cannot call contracts
        """
        self.network = network
        self.api_url = api_url
        self.wallet_provider = wallet_provider
        self.chain_provider = chain_provider
        self._http_client = http_client
        self._owns_http_client = False
        self._log = logger.bind(network=network)

        if http_client is not None:
            fetcher = construct_httpx_fetcher(http_client)
        elif fetch is not None:
            fetcher = construct_fetch_fetcher(fetch)
        else:
            raise SDKConfigurationError("at least one fetcher is needed")

        contract_caller = _resolve_contract_caller(wallet_provider, chain_provider)
        self.sdk: ReadOnlySDK = construct_sdk(fetcher, api_url, network, contract_caller)

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        *,
        wallet_provider: Any = None,
        chain_provider: Any = None,
        http_client: Optional[httpx.AsyncClient] = None,
        fetch: Optional[FetchFunction] = None,
        setup_logging: bool = False,
    ) -> "AggregatorClient":
        """Build a client from Settings.

        When no transport is given, an httpx client with the configured
        timeout is created and closed by aclose().

        Args:
            settings: Settings to use (default: get_settings())
            setup_logging: Configure structlog with settings.log_json
                (JSON or console output) before building the client

        Raises:
            SDKConfigurationError: A provider was supplied that cannot call
                contracts; no httpx client is created in that case
        """
        settings = settings or get_settings()
        if setup_logging:
            configure_logging(json_output=settings.log_json)

        # Fail on a bad provider before opening a connection pool
        _resolve_contract_caller(wallet_provider, chain_provider)

        owns_http_client = http_client is None and fetch is None
        if owns_http_client:
            http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(settings.http_timeout_seconds)
            )

        client = cls(
            network=settings.network,
            api_url=settings.api_url,
            wallet_provider=wallet_provider,
            chain_provider=chain_provider,
            http_client=http_client,
            fetch=fetch,
        )
        client._owns_http_client = owns_http_client
        return client

    @property
    def mode(self) -> ClientMode:
        return ClientMode.FULL if isinstance(self.sdk, FullSDK) else ClientMode.READ_ONLY

    async def aclose(self) -> None:
        """Close the httpx client if this client created it."""
        if self._owns_http_client and self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def __aenter__(self) -> "AggregatorClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def _require(self, capability: Capability) -> None:
        # A fetcher is guaranteed by __init__; only the provider can be absent
        if capability is Capability.PROVIDER and not isinstance(self.sdk, FullSDK):
            raise SDKConfigurationError("sdk must be initialized with a provider")

    async def _call(
        self,
        operation: str,
        capability: Capability,
        delegate: Callable[[Any], Awaitable[T]],
    ) -> T | APIError:
        """Check the capability, run the delegate, normalize its failure."""
        self._require(capability)
        try:
            return await delegate(self.sdk)
        except Exception as e:
            error = normalize_error(e)
            self._log_failure(operation, e, error)
            return error

    def _log_failure(self, operation: str, exc: Exception, error: APIError) -> None:
        if error.status is not None:
            error_type = ErrorType.API_ERROR
        elif isinstance(exc, (FetcherError, httpx.RequestError)):
            error_type = ErrorType.NETWORK_ERROR
        else:
            error_type = ErrorType.UNKNOWN_ERROR

        self._log.warning(
            "Client operation failed",
            operation=operation,
            error_type=error_type,
            error_message=error.message,
            status=error.status,
            url=getattr(exc, "url", None),
            response_body=truncate_body(error.data) if error.data is not None else None,
        )

    async def get_tokens(self) -> list[dict[str, Any]] | APIError:
        return await self._call(
            "get_tokens", Capability.FETCHER, lambda sdk: sdk.get_tokens()
        )

    async def get_adapters(self) -> dict[str, Any] | APIError:
        return await self._call(
            "get_adapters",
            Capability.FETCHER,
            lambda sdk: sdk.get_adapters(type="object"),
        )

    async def get_market_names(self) -> list[str] | APIError:
        return await self._call(
            "get_market_names",
            Capability.FETCHER,
            lambda sdk: sdk.get_adapters(type="list", names_only=True),
        )

    async def get_rate_by_route(
        self,
        route: list[str],
        amount: str,
        user_address: Optional[str] = None,
        side: SwapSide = SwapSide.SELL,
        options: Optional[RateOptions] = None,
        src_decimals: Optional[int] = None,
        dest_decimals: Optional[int] = None,
    ) -> dict[str, Any] | APIError:
        """Price a swap along an explicit multi-hop route.

        Routes with fewer than two hops are rejected locally with
        APIError(message="Invalid Route"); no request is made.
        """
        if len(route) < 2:
            self._log.warning(
                "Client operation failed",
                operation="get_rate_by_route",
                error_type=ErrorType.INVALID_ROUTE,
                route_length=len(route),
            )
            return APIError(message="Invalid Route")

        return await self._call(
            "get_rate_by_route",
            Capability.FETCHER,
            lambda sdk: sdk.get_rate_by_route(
                RateByRouteParams(
                    route=route,
                    amount=amount,
                    user_address=user_address,
                    side=side,
                    options=options or RateOptions(),
                    src_decimals=src_decimals,
                    dest_decimals=dest_decimals,
                )
            ),
        )

    async def get_rate(
        self,
        src_token: str,
        dest_token: str,
        amount: str,
        user_address: Optional[str] = None,
        side: SwapSide = SwapSide.SELL,
        options: Optional[RateOptions] = None,
        src_decimals: Optional[int] = None,
        dest_decimals: Optional[int] = None,
    ) -> dict[str, Any] | APIError:
        return await self._call(
            "get_rate",
            Capability.FETCHER,
            lambda sdk: sdk.get_rate(
                RateParams(
                    src_token=src_token,
                    dest_token=dest_token,
                    amount=amount,
                    user_address=user_address,
                    side=side,
                    options=options or RateOptions(),
                    src_decimals=src_decimals,
                    dest_decimals=dest_decimals,
                )
            ),
        )

    async def build_tx(
        self,
        src_token: str,
        dest_token: str,
        src_amount: str,
        dest_amount: str,
        price_route: dict[str, Any],
        user_address: str,
        partner: Optional[str] = None,
        partner_address: Optional[str] = None,
        partner_fee_bps: Optional[int] = None,
        receiver: Optional[str] = None,
        options: Optional[BuildOptions] = None,
        src_decimals: Optional[int] = None,
        dest_decimals: Optional[int] = None,
        permit: Optional[str] = None,
        deadline: Optional[str] = None,
    ) -> dict[str, Any] | APIError:
        """Build swap transaction params for a price route from get_rate."""
        return await self._call(
            "build_tx",
            Capability.FETCHER,
            lambda sdk: sdk.build_tx(
                BuildTxParams(
                    src_token=src_token,
                    dest_token=dest_token,
                    src_amount=src_amount,
                    dest_amount=dest_amount,
                    price_route=price_route,
                    user_address=user_address,
                    partner=partner,
                    partner_address=partner_address,
                    partner_fee_bps=partner_fee_bps,
                    receiver=receiver,
                    src_decimals=src_decimals,
                    dest_decimals=dest_decimals,
                    permit=permit,
                    deadline=deadline,
                ),
                options,
            ),
        )

    async def get_token_transfer_proxy(self) -> str | APIError:
        return await self._call(
            "get_token_transfer_proxy",
            Capability.FETCHER,
            lambda sdk: sdk.get_spender(),
        )

    async def get_allowances(
        self, user_address: str, token_addresses: list[str]
    ) -> list[Allowance] | APIError:
        return await self._call(
            "get_allowances",
            Capability.PROVIDER,
            lambda sdk: sdk.get_allowances(user_address, token_addresses),
        )

    async def get_allowance(
        self, user_address: str, token_address: str
    ) -> Allowance | APIError:
        return await self._call(
            "get_allowance",
            Capability.PROVIDER,
            lambda sdk: sdk.get_allowance(user_address, token_address),
        )

    async def approve_token_bulk(
        self,
        amount: str,
        user_address: str,
        token_addresses: list[str],
    ) -> list[str] | APIError:
        return await self._call(
            "approve_token_bulk",
            Capability.PROVIDER,
            lambda sdk: sdk.approve_token_bulk(amount, user_address, token_addresses),
        )

    async def approve_token(
        self,
        amount: str,
        user_address: str,
        token_address: str,
        send_options: Optional[dict[str, Any]] = None,
    ) -> str | APIError:
        """Send an ERC-20 approval to the aggregator's spender.

        Args:
            amount: Allowance in token base units
            user_address: Account the approval is sent from
            token_address: Token to approve
            send_options: Extra transaction fields (gas, gasPrice, nonce...)

        Returns:
            Transaction hash, or APIError
        """
        return await self._call(
            "approve_token",
            Capability.PROVIDER,
            lambda sdk: sdk.approve_token(
                amount, user_address, token_address, send_options
            ),
        )

    async def get_balance(
        self, user_address: str, token: str
    ) -> dict[str, Any] | APIError:
        return await self._call(
            "get_balance",
            Capability.FETCHER,
            lambda sdk: sdk.get_balance(user_address, token),
        )

    async def get_balances(self, user_address: str) -> list[dict[str, Any]] | APIError:
        return await self._call(
            "get_balances",
            Capability.FETCHER,
            lambda sdk: sdk.get_balances(user_address),
        )
