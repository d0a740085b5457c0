"""Shared constants."""

API_URL = "https://apiv5.paraswap.io"

DEFAULT_NETWORK = 1

# Placeholder address the pricing API uses for the chain's native token
ETH_ADDRESS = "0xeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeee"

# Wrapped native token per network, used by router-style DEX adapters
WETH_ADDRESSES: dict[int, str] = {
    1: "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2",
    3: "0xc778417e063141139fce010982780140aa0cd5ab",
    56: "0xbb4cdb9cbd36b01bd1cbaebf2de08d9173bc095c",
    137: "0x0d500b1d8e8ef31e21c99d1db9a6444d3adf1270",
}
