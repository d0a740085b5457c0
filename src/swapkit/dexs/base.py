"""Abstract base class for on-chain DEX adapters.

An adapter turns a priced swap leg into the parameters a specific liquidity
pool protocol needs. Adapters are looked up by exchange key in the registry
(swapkit.dexs.DEXS) as classes and instantiated by the caller.
"""

from abc import ABC, abstractmethod
from typing import Any

from swapkit.constants import DEFAULT_NETWORK, ETH_ADDRESS, WETH_ADDRESSES
from swapkit.models import SwapSide


class DexAdapter(ABC):
    """Produces exchange-specific swap parameters for one protocol family.

    Subclasses implement build_swap_params(); which exchanges use an
    adapter is decided by the registry alone.
    """

    def __init__(self, network: int = DEFAULT_NETWORK) -> None:
        self.network = network

    @staticmethod
    def is_eth(token: str) -> bool:
        return token.lower() == ETH_ADDRESS

    def weth_address(self) -> str:
        """Wrapped native token for this network.

        Raises:
            ValueError: If the network has no known wrapped native token
        """
        try:
            return WETH_ADDRESSES[self.network]
        except KeyError:
            raise ValueError(f"No wrapped native token known for network {self.network}")

    @abstractmethod
    def build_swap_params(
        self,
        src_token: str,
        dest_token: str,
        src_amount: str,
        dest_amount: str,
        data: dict[str, Any],
        side: SwapSide = SwapSide.SELL,
    ) -> dict[str, Any]:
        """Build the exchange call for one swap leg.

        Args:
            src_token: Token sold (ETH_ADDRESS for the native token)
            dest_token: Token bought
            src_amount: Amount sold, base units
            dest_amount: Minimum (SELL) or exact (BUY) amount bought, base units
            data: Exchange-specific data from the price route
            side: Which amount is fixed

        Returns:
            Dict with the target contract, method name and arguments

        Raises:
            ValueError: If `data` lacks what the protocol needs
        """
