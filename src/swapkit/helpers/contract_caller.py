"""Contract-calling backends built from a web3 provider.

Web3.py calls block, so every chain interaction runs in a worker thread via
asyncio.to_thread. Signing belongs to the provider: either the node manages
the `from` account, or a signing middleware is installed on the Web3 instance.
"""

import asyncio
from typing import Any, Optional, Protocol, Sequence

import structlog
from web3 import Web3

logger = structlog.get_logger(__name__)

# Only the ERC-20 fragments the SDK consumes
ERC20_ABI: list[dict[str, Any]] = [
    {
        "constant": True,
        "inputs": [
            {"name": "_owner", "type": "address"},
            {"name": "_spender", "type": "address"},
        ],
        "name": "allowance",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "constant": False,
        "inputs": [
            {"name": "_spender", "type": "address"},
            {"name": "_value", "type": "uint256"},
        ],
        "name": "approve",
        "outputs": [{"name": "", "type": "bool"}],
        "stateMutability": "nonpayable",
        "type": "function",
    },
]


class ContractCaller(Protocol):
    """Reads from and sends transactions to on-chain contracts."""

    async def call(
        self,
        address: str,
        abi: list[dict[str, Any]],
        method: str,
        args: Sequence[Any],
    ) -> Any: ...

    async def transact(
        self,
        address: str,
        abi: list[dict[str, Any]],
        method: str,
        args: Sequence[Any],
        overrides: Optional[dict[str, Any]] = None,
    ) -> str: ...


def _checksum_args(args: Sequence[Any]) -> list[Any]:
    """Checksum every argument that looks like an address."""
    return [
        Web3.to_checksum_address(arg)
        if isinstance(arg, str) and Web3.is_address(arg)
        else arg
        for arg in args
    ]


class Web3ContractCaller:
    """ContractCaller backed by a synchronous web3.Web3 instance."""

    def __init__(self, web3: Web3) -> None:
        self._web3 = web3
        self._log = logger.bind(backend="web3")

    def _function(self, address: str, abi: list[dict[str, Any]], method: str, args):
        contract = self._web3.eth.contract(
            address=Web3.to_checksum_address(address),
            abi=abi,
        )
        return getattr(contract.functions, method)(*_checksum_args(args))

    async def call(
        self,
        address: str,
        abi: list[dict[str, Any]],
        method: str,
        args: Sequence[Any],
    ) -> Any:
        fn = self._function(address, abi, method, args)
        return await asyncio.to_thread(fn.call)

    async def transact(
        self,
        address: str,
        abi: list[dict[str, Any]],
        method: str,
        args: Sequence[Any],
        overrides: Optional[dict[str, Any]] = None,
    ) -> str:
        """Send a contract transaction and return its hash as 0x-hex.

        Args:
            address: Contract address
            abi: Contract ABI containing `method`
            method: Contract function name
            args: Positional function arguments
            overrides: Transaction fields (from, gas, gasPrice, value...).
                `from` defaults to the provider's default account.
        """
        tx: dict[str, Any] = dict(overrides or {})
        if tx.get("from"):
            tx["from"] = Web3.to_checksum_address(tx["from"])
        elif self._web3.eth.default_account:
            tx["from"] = self._web3.eth.default_account

        fn = self._function(address, abi, method, args)
        tx_hash = await asyncio.to_thread(fn.transact, tx)
        tx_hash_hex = Web3.to_hex(tx_hash)
        self._log.info(
            "Contract transaction sent",
            contract=address,
            method=method,
            tx_hash=tx_hash_hex,
        )
        return tx_hash_hex


def construct_contract_caller(provider: Any) -> Optional[ContractCaller]:
    """Wrap a provider into a ContractCaller.

    Returns:
        Web3ContractCaller, or None when the provider has no `eth` interface
    """
    if provider is None or getattr(provider, "eth", None) is None:
        return None
    return Web3ContractCaller(provider)
