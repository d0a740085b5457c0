"""DEX adapter registry.

Maps exchange keys to adapter classes. Exchanges sharing a pool/router
interface share one adapter class: SushiSwap, DeFiSwap and LinkSwap are
Uniswap V2 forks. Adding an exchange is one entry here.
"""

from types import MappingProxyType
from typing import Mapping, Optional

from swapkit.dexs.base import DexAdapter
from swapkit.dexs.uniswap_v1 import UniswapV1
from swapkit.dexs.uniswap_v2 import UniswapV2

DEXS: Mapping[str, type[DexAdapter]] = MappingProxyType(
    {
        "uniswap": UniswapV1,
        "uniswapv2": UniswapV2,
        "sushiswap": UniswapV2,
        "defiswap": UniswapV2,
        "linkswap": UniswapV2,
    }
)


def lookup(identifier: str) -> Optional[type[DexAdapter]]:
    """Return the adapter class for an exchange key, or None if unknown."""
    return DEXS.get(identifier)


def list_dexs() -> list[str]:
    return list(DEXS)


__all__ = [
    "DEXS",
    "DexAdapter",
    "UniswapV1",
    "UniswapV2",
    "list_dexs",
    "lookup",
]
