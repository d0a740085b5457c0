"""SDK capability sets.

A client runs in exactly one of two modes, chosen once at construction:

- ReadOnlySDK: needs only a fetcher. Tokens, adapters, rates, balances,
  spender lookup and transaction building.
- FullSDK: fetcher plus contract caller. Adds allowance reads and approval
  transactions.

Both raise on failure (FetcherError for transport, SwapKitError subclasses
otherwise); turning failures into APIError values is the client's job.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Literal, Optional

import structlog

from swapkit.exceptions import BulkApprovalError, TokenNotFoundError
from swapkit.helpers.contract_caller import ERC20_ABI, ContractCaller
from swapkit.helpers.fetchers import Fetcher
from swapkit.models import (
    Allowance,
    BuildOptions,
    BuildTxParams,
    RateByRouteParams,
    RateParams,
)

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SDKConfig:
    fetcher: Fetcher
    api_url: str
    network: int


@dataclass(frozen=True)
class FullSDKConfig(SDKConfig):
    contract_caller: ContractCaller


class ReadOnlySDK:
    """Pricing API operations that need no blockchain access."""

    def __init__(self, config: SDKConfig) -> None:
        self._config = config
        self._log = logger.bind(network=config.network)

    @property
    def network(self) -> int:
        return self._config.network

    def _url(self, path: str) -> str:
        return f"{self._config.api_url.rstrip('/')}{path}"

    async def _get(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        return await self._config.fetcher("GET", self._url(path), params=params)

    async def get_tokens(self) -> list[dict[str, Any]]:
        data = await self._get(f"/tokens/{self.network}")
        return data["tokens"]

    async def get_adapters(
        self,
        type: Literal["object", "list"] = "object",
        names_only: bool = False,
    ) -> Any:
        """Fetch the DEX adapters known to the pricing API.

        Args:
            type: "object" returns the adapter map, "list" a list
            names_only: With type="list", return adapter names only
        """
        if type == "list":
            return await self._get(
                "/adapters/list",
                {"network": self.network, "namesOnly": names_only},
            )
        return await self._get("/adapters", {"network": self.network})

    async def get_rate(self, params: RateParams) -> dict[str, Any]:
        data = await self._get("/prices/", params.to_query(self.network))
        return data["priceRoute"]

    async def get_rate_by_route(self, params: RateByRouteParams) -> dict[str, Any]:
        data = await self._get("/prices/", params.to_query(self.network))
        return data["priceRoute"]

    async def build_tx(
        self,
        params: BuildTxParams,
        options: Optional[BuildOptions] = None,
    ) -> dict[str, Any]:
        query = (options or BuildOptions()).to_query()
        return await self._config.fetcher(
            "POST",
            self._url(f"/transactions/{self.network}"),
            params=query,
            json=params.to_body(),
        )

    async def get_spender(self) -> str:
        """Return the TokenTransferProxy address users approve."""
        data = await self._get("/adapters/contracts", {"network": self.network})
        return data["TokenTransferProxy"]

    async def get_balances(self, user_address: str) -> list[dict[str, Any]]:
        data = await self._get(f"/users/tokens/{self.network}/{user_address}")
        return data["tokens"]

    async def get_balance(self, user_address: str, token: str) -> dict[str, Any]:
        data = await self._get(f"/users/tokens/{self.network}/{user_address}/{token}")
        if not data.get("token"):
            raise TokenNotFoundError(f"Token {token} not found")
        return data["token"]


class FullSDK(ReadOnlySDK):
    """ReadOnlySDK plus operations that read or write on chain."""

    def __init__(self, config: FullSDKConfig) -> None:
        super().__init__(config)
        self._contract_caller = config.contract_caller

    async def get_allowance(self, user_address: str, token_address: str) -> Allowance:
        spender = await self.get_spender()
        return await self._read_allowance(spender, user_address, token_address)

    async def get_allowances(
        self, user_address: str, token_addresses: list[str]
    ) -> list[Allowance]:
        """Read allowances concurrently; results follow token_addresses order."""
        spender = await self.get_spender()
        return list(
            await asyncio.gather(
                *(
                    self._read_allowance(spender, user_address, token)
                    for token in token_addresses
                )
            )
        )

    async def _read_allowance(
        self, spender: str, user_address: str, token_address: str
    ) -> Allowance:
        value = await self._contract_caller.call(
            token_address, ERC20_ABI, "allowance", [user_address, spender]
        )
        return Allowance(token_address=token_address, allowance=int(value))

    async def approve_token(
        self,
        amount: str,
        user_address: str,
        token_address: str,
        send_options: Optional[dict[str, Any]] = None,
    ) -> str:
        """Approve the aggregator's spender for `amount` of a token.

        Args:
            amount: Allowance in token base units
            user_address: Account the approval is sent from
            token_address: ERC-20 token to approve
            send_options: Extra transaction fields; `from` is always user_address

        Returns:
            Transaction hash
        """
        spender = await self.get_spender()
        return await self._approve(spender, amount, user_address, token_address, send_options)

    async def approve_token_bulk(
        self,
        amount: str,
        user_address: str,
        token_addresses: list[str],
    ) -> list[str]:
        """Approve tokens one at a time, in order.

        Sends are sequential so each transaction from `user_address` gets its
        own nonce.

        Raises:
            BulkApprovalError: A later approval failed; carries the hashes of
                those already sent
        """
        spender = await self.get_spender()
        tx_hashes: list[str] = []
        for token in token_addresses:
            try:
                tx_hashes.append(
                    await self._approve(spender, amount, user_address, token)
                )
            except Exception as e:
                if not tx_hashes:
                    raise
                self._log.warning(
                    "Bulk approval interrupted",
                    token=token,
                    sent_tx_hashes=tx_hashes,
                    error=str(e),
                )
                raise BulkApprovalError(token, tx_hashes, e) from e
        return tx_hashes

    async def _approve(
        self,
        spender: str,
        amount: str,
        user_address: str,
        token_address: str,
        send_options: Optional[dict[str, Any]] = None,
    ) -> str:
        overrides = {**(send_options or {}), "from": user_address}
        tx_hash = await self._contract_caller.transact(
            token_address, ERC20_ABI, "approve", [spender, int(amount)], overrides
        )
        self._log.info(
            "Token approval sent",
            token=token_address,
            spender=spender,
            amount=str(amount),
        )
        return tx_hash


def construct_sdk(
    fetcher: Fetcher,
    api_url: str,
    network: int,
    contract_caller: Optional[ContractCaller] = None,
) -> ReadOnlySDK:
    """Assemble the capability set for the collaborators supplied."""
    if contract_caller is None:
        return ReadOnlySDK(SDKConfig(fetcher=fetcher, api_url=api_url, network=network))
    return FullSDK(
        FullSDKConfig(
            fetcher=fetcher,
            api_url=api_url,
            network=network,
            contract_caller=contract_caller,
        )
    )
