"""Transport and contract-calling collaborators used to assemble the SDK."""

from swapkit.helpers.contract_caller import (
    ERC20_ABI,
    ContractCaller,
    Web3ContractCaller,
    construct_contract_caller,
)
from swapkit.helpers.fetchers import (
    Fetcher,
    construct_fetch_fetcher,
    construct_httpx_fetcher,
)

__all__ = [
    "ERC20_ABI",
    "ContractCaller",
    "Web3ContractCaller",
    "construct_contract_caller",
    "Fetcher",
    "construct_fetch_fetcher",
    "construct_httpx_fetcher",
]
