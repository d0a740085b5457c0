"""Uniswap V2 style adapter, shared by forks with the same router interface."""

import time
from typing import Any

from swapkit.dexs.base import DexAdapter
from swapkit.models import SwapSide

DEFAULT_DEADLINE_SECONDS = 600


class UniswapV2(DexAdapter):
    """Swaps through a V2 router along a token path.

    Expected `data`:
        router: Router contract address
        to: Recipient of the bought tokens
        path: Optional token path; defaults to [src, dest] with the native
            token replaced by its wrapped form
        deadline: Optional unix timestamp, defaults to now + 10 minutes
    """

    def build_path(self, src_token: str, dest_token: str) -> list[str]:
        return [
            self.weth_address() if self.is_eth(token) else token
            for token in (src_token, dest_token)
        ]

    def build_swap_params(
        self,
        src_token: str,
        dest_token: str,
        src_amount: str,
        dest_amount: str,
        data: dict[str, Any],
        side: SwapSide = SwapSide.SELL,
    ) -> dict[str, Any]:
        router = data.get("router")
        recipient = data.get("to")
        if not router or not recipient:
            raise ValueError("Uniswap V2 swap needs router and to addresses")

        path = data.get("path") or self.build_path(src_token, dest_token)
        deadline = int(data.get("deadline") or time.time() + DEFAULT_DEADLINE_SECONDS)
        src, dest = int(src_amount), int(dest_amount)
        sell = SwapSide(side) == SwapSide.SELL
        value = 0

        if self.is_eth(src_token):
            value = src
            method = "swapExactETHForTokens" if sell else "swapETHForExactTokens"
            args = [dest, path, recipient, deadline]
        elif self.is_eth(dest_token):
            if sell:
                method, args = "swapExactTokensForETH", [src, dest, path, recipient, deadline]
            else:
                method, args = "swapTokensForExactETH", [dest, src, path, recipient, deadline]
        elif sell:
            method, args = "swapExactTokensForTokens", [src, dest, path, recipient, deadline]
        else:
            method, args = "swapTokensForExactTokens", [dest, src, path, recipient, deadline]

        return {
            "target": router,
            "method": method,
            "args": args,
            "value": str(value),
        }
