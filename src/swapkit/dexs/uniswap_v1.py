"""Uniswap V1 style adapter: one exchange contract per token, ETH as hub."""

import time
from typing import Any

from swapkit.dexs.base import DexAdapter
from swapkit.models import SwapSide

DEFAULT_DEADLINE_SECONDS = 600


class UniswapV1(DexAdapter):
    """Swaps through a token's V1 exchange contract.

    Expected `data`:
        exchange: Exchange contract of the token being traded against ETH
            (the source token's exchange for token->ETH and token->token)
        deadline: Optional unix timestamp, defaults to now + 10 minutes
    """

    def build_swap_params(
        self,
        src_token: str,
        dest_token: str,
        src_amount: str,
        dest_amount: str,
        data: dict[str, Any],
        side: SwapSide = SwapSide.SELL,
    ) -> dict[str, Any]:
        exchange = data.get("exchange")
        if not exchange:
            raise ValueError("Uniswap V1 swap needs an exchange address")

        deadline = int(data.get("deadline") or time.time() + DEFAULT_DEADLINE_SECONDS)
        src, dest = int(src_amount), int(dest_amount)
        sell = SwapSide(side) == SwapSide.SELL
        value = 0

        if self.is_eth(src_token):
            value = src
            if sell:
                method, args = "ethToTokenSwapInput", [dest, deadline]
            else:
                method, args = "ethToTokenSwapOutput", [dest, deadline]
        elif self.is_eth(dest_token):
            if sell:
                method, args = "tokenToEthSwapInput", [src, dest, deadline]
            else:
                method, args = "tokenToEthSwapOutput", [dest, src, deadline]
        elif sell:
            # min_eth_bought of 1: the ETH leg is internal to the exchange
            method = "tokenToTokenSwapInput"
            args = [src, dest, 1, deadline, dest_token]
        else:
            method = "tokenToTokenSwapOutput"
            args = [dest, src, 2**256 - 1, deadline, dest_token]

        return {
            "target": exchange,
            "method": method,
            "args": args,
            "value": str(value),
        }
