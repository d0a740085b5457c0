"""swapkit - async client SDK for a DEX price-aggregation API."""

from swapkit.client import AggregatorClient, Capability, ClientMode
from swapkit.config import Settings, get_settings
from swapkit.dexs import DEXS, lookup
from swapkit.errors import is_api_error, normalize_error
from swapkit.exceptions import (
    BulkApprovalError,
    FetcherError,
    FetcherResponse,
    SDKConfigurationError,
    SwapKitError,
    TokenNotFoundError,
)
from swapkit.models import (
    Allowance,
    APIError,
    BuildOptions,
    RateOptions,
    SwapSide,
)

__version__ = "0.1.0"

__all__ = [
    # Client
    "AggregatorClient",
    "Capability",
    "ClientMode",
    # Config
    "Settings",
    "get_settings",
    # DEX registry
    "DEXS",
    "lookup",
    # Errors
    "APIError",
    "is_api_error",
    "normalize_error",
    "SwapKitError",
    "SDKConfigurationError",
    "FetcherError",
    "FetcherResponse",
    "BulkApprovalError",
    "TokenNotFoundError",
    # Types
    "Allowance",
    "BuildOptions",
    "RateOptions",
    "SwapSide",
]
