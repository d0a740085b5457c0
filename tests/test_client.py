"""Tests for the AggregatorClient facade.

Tests cover:
- Transport resolution and read-only vs full capability assembly
- Capability preconditions raising SDKConfigurationError
- Error normalization for every failure shape
- Identity pass-through of successful payloads
- Local "Invalid Route" short-circuit
"""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from swapkit.client import AggregatorClient, ClientMode
from swapkit.config import Settings
from swapkit.constants import API_URL as DEFAULT_API_URL
from swapkit.exceptions import FetcherError, FetcherResponse, SDKConfigurationError
from swapkit.models import Allowance, APIError
from swapkit.sdk import FullSDK, ReadOnlySDK

from conftest import API_URL, DAI, SPENDER, USDC, USER


@pytest.fixture
def http_client():
    return httpx.AsyncClient()


@pytest.fixture
def read_only_client(http_client):
    return AggregatorClient(network=1, api_url=API_URL, http_client=http_client)


@pytest.fixture
def full_client(http_client, mock_web3):
    return AggregatorClient(
        network=1, api_url=API_URL, wallet_provider=mock_web3, http_client=http_client
    )


def _stub_sdk(client: AggregatorClient, **methods) -> None:
    """Replace SDK methods on a client with AsyncMocks."""
    for name, mock in methods.items():
        setattr(client.sdk, name, mock)


# =============================================================================
# Construction
# =============================================================================


class TestConstruction:
    """Transport and capability resolution at construction time."""

    def test_requires_a_fetcher(self):
        with pytest.raises(SDKConfigurationError, match="at least one fetcher is needed"):
            AggregatorClient()

    def test_requires_a_fetcher_even_with_provider(self, mock_web3):
        with pytest.raises(SDKConfigurationError, match="at least one fetcher is needed"):
            AggregatorClient(wallet_provider=mock_web3)

    def test_defaults(self, http_client):
        client = AggregatorClient(http_client=http_client)

        assert client.network == 1
        assert client.api_url == DEFAULT_API_URL

    def test_transport_only_is_read_only(self, read_only_client):
        assert type(read_only_client.sdk) is ReadOnlySDK
        assert read_only_client.mode is ClientMode.READ_ONLY

    def test_fetch_transport_is_accepted(self):
        client = AggregatorClient(fetch=AsyncMock())

        assert client.mode is ClientMode.READ_ONLY

    def test_http_client_preferred_over_fetch(self, make_http_client, json_response):
        fetch = AsyncMock()
        client = AggregatorClient(
            http_client=make_http_client(lambda r: json_response(200, {})),
            fetch=fetch,
        )

        assert client.mode is ClientMode.READ_ONLY
        fetch.assert_not_called()

    def test_wallet_provider_gives_full_mode(self, full_client):
        assert isinstance(full_client.sdk, FullSDK)
        assert full_client.mode is ClientMode.FULL

    def test_chain_provider_gives_full_mode(self, http_client, mock_web3):
        client = AggregatorClient(chain_provider=mock_web3, http_client=http_client)

        assert client.mode is ClientMode.FULL

    def test_chain_provider_preferred_over_wallet_provider(self, http_client):
        wallet, chain = MagicMock(), MagicMock()
        client = AggregatorClient(
            wallet_provider=wallet, chain_provider=chain, http_client=http_client
        )

        assert client.sdk._contract_caller._web3 is chain

    def test_unusable_provider_fails_construction(self, http_client):
        with pytest.raises(SDKConfigurationError, match="cannot call contracts"):
            AggregatorClient(wallet_provider=object(), http_client=http_client)

    def test_no_network_calls_during_construction(self):
        fetch = AsyncMock()
        AggregatorClient(fetch=fetch, wallet_provider=MagicMock())

        fetch.assert_not_called()


class TestFromSettings:
    @pytest.mark.asyncio
    async def test_uses_settings_and_owns_http_client(self):
        settings = Settings(network=137, api_url="https://example.com/api")

        client = AggregatorClient.from_settings(settings)

        assert client.network == 137
        assert client.api_url == "https://example.com/api"
        assert client.mode is ClientMode.READ_ONLY
        http = client._http_client
        await client.aclose()
        assert http.is_closed

    @pytest.mark.asyncio
    async def test_does_not_close_caller_http_client(self, http_client):
        async with AggregatorClient.from_settings(
            Settings(), http_client=http_client
        ):
            pass

        assert not http_client.is_closed

    def test_setup_logging_uses_log_json(self, http_client):
        with patch("swapkit.client.configure_logging") as configure:
            AggregatorClient.from_settings(
                Settings(log_json=False), http_client=http_client, setup_logging=True
            )

        configure.assert_called_once_with(json_output=False)

    def test_logging_left_alone_by_default(self, http_client):
        with patch("swapkit.client.configure_logging") as configure:
            AggregatorClient.from_settings(Settings(), http_client=http_client)

        configure.assert_not_called()

    def test_bad_provider_fails_before_creating_http_client(self):
        with patch("swapkit.client.httpx.AsyncClient") as async_client:
            with pytest.raises(SDKConfigurationError, match="cannot call contracts"):
                AggregatorClient.from_settings(Settings(), wallet_provider=object())

        async_client.assert_not_called()


# =============================================================================
# Capability preconditions
# =============================================================================


class TestCapabilityPreconditions:
    """Provider operations on a read-only client raise, never normalize."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "operation,args",
        [
            ("get_allowance", (USER, DAI)),
            ("get_allowances", (USER, [DAI])),
            ("approve_token", ("1", USER, DAI)),
            ("approve_token_bulk", ("1", USER, [DAI])),
        ],
    )
    async def test_provider_operations_fail_on_read_only(
        self, read_only_client, operation, args
    ):
        with pytest.raises(SDKConfigurationError, match="initialized with a provider"):
            await getattr(read_only_client, operation)(*args)

    @pytest.mark.asyncio
    async def test_provider_operations_available_on_full(self, full_client):
        _stub_sdk(
            full_client,
            get_allowance=AsyncMock(
                return_value=Allowance(token_address=DAI, allowance=3)
            ),
        )

        result = await full_client.get_allowance(USER, DAI)

        assert result == Allowance(token_address=DAI, allowance=3)

    @pytest.mark.asyncio
    async def test_read_operations_available_on_full(self, full_client):
        _stub_sdk(full_client, get_tokens=AsyncMock(return_value=[]))

        assert await full_client.get_tokens() == []


# =============================================================================
# Error normalization through operations
# =============================================================================


class TestErrorNormalization:
    @pytest.mark.asyncio
    async def test_response_error_is_normalized(self, read_only_client):
        _stub_sdk(
            read_only_client,
            get_tokens=AsyncMock(
                side_effect=FetcherError(
                    "Request failed with status code 400",
                    response=FetcherResponse(status=400, data={"error": "bad request"}),
                )
            ),
        )

        result = await read_only_client.get_tokens()

        assert result == APIError(
            status=400, message="bad request", data={"error": "bad request"}
        )

    @pytest.mark.asyncio
    async def test_network_error_is_normalized(self, read_only_client):
        _stub_sdk(
            read_only_client,
            get_spender=AsyncMock(side_effect=FetcherError("timeout")),
        )

        result = await read_only_client.get_token_transfer_proxy()

        assert result.to_dict() == {"message": "timeout"}

    @pytest.mark.asyncio
    async def test_unknown_error_is_normalized(self, full_client):
        _stub_sdk(
            full_client,
            approve_token=AsyncMock(side_effect=ValueError("insufficient funds")),
        )

        result = await full_client.approve_token("1", USER, DAI)

        assert result.to_dict() == {"message": "Unknown error: insufficient funds"}

    @pytest.mark.asyncio
    async def test_end_to_end_http_400(self, make_http_client, json_response):
        client = AggregatorClient(
            api_url=API_URL,
            http_client=make_http_client(
                lambda r: json_response(400, {"error": "Invalid tokens"})
            ),
        )

        result = await client.get_rate("ETH", "XYZ", "1")

        assert result == APIError(
            status=400, message="Invalid tokens", data={"error": "Invalid tokens"}
        )

    @pytest.mark.asyncio
    async def test_end_to_end_timeout(self, make_http_client):
        def handler(request):
            raise httpx.ConnectTimeout("timeout", request=request)

        client = AggregatorClient(api_url=API_URL, http_client=make_http_client(handler))

        assert (await client.get_tokens()).to_dict() == {"message": "timeout"}

    @pytest.mark.asyncio
    async def test_end_to_end_fetch_transport(self, fake_fetch_response):
        async def fetch(url, **kwargs):
            return fake_fetch_response(404, {"error": "Token not found"})

        client = AggregatorClient(api_url=API_URL, fetch=fetch)

        result = await client.get_balance(USER, "XYZ")

        assert result.status == 404
        assert result.message == "Token not found"

    @pytest.mark.asyncio
    async def test_end_to_end_fetch_html_error_page(self):
        class HtmlResponse:
            status = 502

            async def json(self):
                raise RuntimeError("unexpected mimetype: text/html")

        async def fetch(url, **kwargs):
            return HtmlResponse()

        client = AggregatorClient(api_url=API_URL, fetch=fetch)

        result = await client.get_tokens()

        assert result.status == 502
        assert result.data is None

    @pytest.mark.asyncio
    async def test_bulk_approval_failure_reports_sent_hashes(self, full_client):
        _stub_sdk(full_client, get_spender=AsyncMock(return_value=SPENDER))
        full_client.sdk._contract_caller = AsyncMock()
        full_client.sdk._contract_caller.transact.side_effect = [
            "0xfirst",
            ValueError("nonce too low"),
        ]

        result = await full_client.approve_token_bulk("1", USER, [DAI, USDC])

        assert isinstance(result, APIError)
        assert "0xfirst" in result.message
        assert "nonce too low" in result.message


# =============================================================================
# Pass-through and parameter assembly
# =============================================================================


class TestPassThrough:
    @pytest.mark.asyncio
    async def test_success_payload_is_returned_unchanged(self, read_only_client):
        payload = [{"symbol": "DAI", "address": DAI, "extra": {"nested": True}}]
        _stub_sdk(read_only_client, get_tokens=AsyncMock(return_value=payload))

        assert await read_only_client.get_tokens() is payload

    @pytest.mark.asyncio
    async def test_get_adapters_requests_object(self, read_only_client):
        mock = AsyncMock(return_value={"uniswap": []})
        _stub_sdk(read_only_client, get_adapters=mock)

        await read_only_client.get_adapters()

        mock.assert_awaited_once_with(type="object")

    @pytest.mark.asyncio
    async def test_get_market_names_requests_names(self, read_only_client):
        mock = AsyncMock(return_value=["uniswap"])
        _stub_sdk(read_only_client, get_adapters=mock)

        assert await read_only_client.get_market_names() == ["uniswap"]
        mock.assert_awaited_once_with(type="list", names_only=True)

    @pytest.mark.asyncio
    async def test_get_rate_assembles_params(self, read_only_client):
        mock = AsyncMock(return_value={"destAmount": "1"})
        _stub_sdk(read_only_client, get_rate=mock)

        await read_only_client.get_rate("ETH", DAI, "10", user_address=USER)

        params = mock.await_args.args[0]
        assert params.src_token == "ETH"
        assert params.dest_token == DAI
        assert params.amount == "10"
        assert params.user_address == USER

    @pytest.mark.asyncio
    async def test_build_tx_assembles_params(self, read_only_client):
        mock = AsyncMock(return_value={"to": SPENDER})
        _stub_sdk(read_only_client, build_tx=mock)

        result = await read_only_client.build_tx(
            "ETH", DAI, "1", "2", {"blockNumber": 1}, USER, receiver=USDC
        )

        assert result == {"to": SPENDER}
        params, options = mock.await_args.args
        assert params.receiver == USDC
        assert params.price_route == {"blockNumber": 1}
        assert options is None

    @pytest.mark.asyncio
    async def test_bulk_operations_forward_lists(self, full_client):
        allowances = AsyncMock(return_value=[])
        approvals = AsyncMock(return_value=["0x1", "0x2"])
        _stub_sdk(full_client, get_allowances=allowances, approve_token_bulk=approvals)

        await full_client.get_allowances(USER, [DAI, USDC])
        result = await full_client.approve_token_bulk("5", USER, [DAI, USDC])

        allowances.assert_awaited_once_with(USER, [DAI, USDC])
        approvals.assert_awaited_once_with("5", USER, [DAI, USDC])
        assert result == ["0x1", "0x2"]

    @pytest.mark.asyncio
    async def test_balance_operations(self, read_only_client):
        _stub_sdk(
            read_only_client,
            get_balance=AsyncMock(return_value={"balance": "1"}),
            get_balances=AsyncMock(return_value=[{"balance": "1"}]),
        )

        assert await read_only_client.get_balance(USER, DAI) == {"balance": "1"}
        assert await read_only_client.get_balances(USER) == [{"balance": "1"}]


# =============================================================================
# Rate by route
# =============================================================================


class TestRateByRoute:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("route", [[], ["ETH"]])
    async def test_short_route_rejected_without_request(self, route):
        fetch = AsyncMock()
        client = AggregatorClient(api_url=API_URL, fetch=fetch)

        result = await client.get_rate_by_route(route, "1")

        assert result.to_dict() == {"message": "Invalid Route"}
        fetch.assert_not_called()

    @pytest.mark.asyncio
    async def test_valid_route_is_delegated(self, read_only_client):
        mock = AsyncMock(return_value={"bestRoute": []})
        _stub_sdk(read_only_client, get_rate_by_route=mock)

        result = await read_only_client.get_rate_by_route(["ETH", DAI], "1")

        assert result == {"bestRoute": []}
        assert mock.await_args.args[0].route == ["ETH", DAI]
