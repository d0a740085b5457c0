"""Pydantic schemas for client parameters and results.

Request parameter models serialize to the pricing API's camelCase field
names via `to_query()` / `to_body()`. Response payloads from the API are not
modelled here: the client passes them through untouched.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class SwapSide(str, Enum):
    """Which amount of a swap is fixed."""

    SELL = "SELL"
    BUY = "BUY"


class APIError(BaseModel):
    """Normalized failure returned by every public client operation.

    Callers tell success from failure by checking for this type (or for a
    `message` field in `to_dict()`), regardless of which transport failed.
    """

    model_config = ConfigDict(frozen=True)

    message: str
    status: Optional[int] = None
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        """Return the `{message, status?, data?}` shape, omitting unset keys."""
        return self.model_dump(exclude_none=True)


class Allowance(BaseModel):
    """ERC-20 allowance granted by a user to the aggregator's spender."""

    model_config = ConfigDict(frozen=True)

    token_address: str
    allowance: int = Field(..., ge=0)


class _CamelModel(BaseModel):
    """Base for request models serialized with camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        validate_default=True,
    )

    def _dump(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class RateOptions(_CamelModel):
    """Optional filters forwarded to the prices endpoint."""

    model_config = ConfigDict(extra="allow")

    include_dexs: Optional[list[str]] = Field(default=None, alias="includeDEXS")
    exclude_dexs: Optional[list[str]] = Field(default=None, alias="excludeDEXS")
    include_contract_methods: Optional[list[str]] = None
    exclude_contract_methods: Optional[list[str]] = None
    exclude_pools: Optional[list[str]] = None
    adapter_version: Optional[str] = None
    partner: Optional[str] = None
    max_impact: Optional[float] = None
    other_exchange_prices: Optional[bool] = None

    def to_query(self) -> dict[str, Any]:
        """Flatten options into query parameters (lists comma-joined)."""
        return {
            key: ",".join(value) if isinstance(value, list) else value
            for key, value in self._dump().items()
        }


class BuildOptions(_CamelModel):
    """Query flags for the transaction builder."""

    model_config = ConfigDict(extra="allow")

    ignore_checks: Optional[bool] = None
    ignore_gas_estimate: Optional[bool] = None
    only_params: Optional[bool] = None
    gas_price: Optional[str] = None

    def to_query(self) -> dict[str, Any]:
        return self._dump()


class RateParams(_CamelModel):
    """Parameters of a single-pair rate query."""

    src_token: str
    dest_token: str
    amount: str
    user_address: Optional[str] = None
    side: SwapSide = SwapSide.SELL
    options: RateOptions = Field(default_factory=RateOptions)
    src_decimals: Optional[int] = None
    dest_decimals: Optional[int] = None

    @field_validator("amount", mode="before")
    @classmethod
    def validate_amount(cls, v: Any) -> str:
        """Amounts travel as base-unit integer strings."""
        return str(v)

    def to_query(self, network: int) -> dict[str, Any]:
        query = self.model_dump(by_alias=True, exclude_none=True, exclude={"options"})
        query.update(self.options.to_query())
        query["network"] = network
        return query


class RateByRouteParams(_CamelModel):
    """Parameters of a multi-hop rate query.

    Route length is not validated here; the client rejects short routes
    before any request is made.
    """

    route: list[str]
    amount: str
    user_address: Optional[str] = None
    side: SwapSide = SwapSide.SELL
    options: RateOptions = Field(default_factory=RateOptions)
    src_decimals: Optional[int] = None
    dest_decimals: Optional[int] = None

    @field_validator("amount", mode="before")
    @classmethod
    def validate_amount(cls, v: Any) -> str:
        return str(v)

    def to_query(self, network: int) -> dict[str, Any]:
        """Route hops are dash-joined; source and destination are its ends."""
        query = self.model_dump(
            by_alias=True, exclude_none=True, exclude={"options", "route"}
        )
        query.update(self.options.to_query())
        query.update(
            srcToken=self.route[0],
            destToken=self.route[-1],
            route="-".join(self.route),
            network=network,
        )
        return query


class BuildTxParams(_CamelModel):
    """Body of a transaction build request."""

    src_token: str
    dest_token: str
    src_amount: str
    dest_amount: str
    price_route: dict[str, Any]
    user_address: str
    partner: Optional[str] = None
    partner_address: Optional[str] = None
    partner_fee_bps: Optional[int] = None
    receiver: Optional[str] = None
    src_decimals: Optional[int] = None
    dest_decimals: Optional[int] = None
    permit: Optional[str] = None
    deadline: Optional[str] = None

    @field_validator("src_amount", "dest_amount", mode="before")
    @classmethod
    def validate_amounts(cls, v: Any) -> str:
        return str(v)

    def to_body(self) -> dict[str, Any]:
        return self._dump()
