"""
Strategy configuration

Immutable parameters of one token launch, validated once at construction,
plus the reserve/auction split derived from them.
"""
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import (
    MAX_LP_FEE,
    MAX_TICK_SPACING,
    MAX_TOKEN_SPLIT,
    MIN_TICK_SPACING,
    RESERVED_RECIPIENTS,
    TOKEN_SPLIT_DENOMINATOR,
    UINT128_MAX,
)
from ..errors import (
    AuctionSupplyIsZeroError,
    InvalidFeeError,
    InvalidPositionRecipientError,
    InvalidSweepBlockError,
    InvalidTickSpacingError,
    InvalidTokenAndCurrencyError,
    TokenSplitTooHighError,
)
from ..planning.types import PoolKey, asset_sort_key

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


@dataclass(frozen=True)
class ReserveAccounting:
    """Split of the launched supply between the auction and the LP reserve."""
    total_supply: int
    auction_supply: int
    reserve_supply: int

    @classmethod
    def from_split(cls, total_supply: int, token_split_to_auction: int) -> "ReserveAccounting":
        auction_supply = total_supply * token_split_to_auction // TOKEN_SPLIT_DENOMINATOR
        if auction_supply == 0:
            raise AuctionSupplyIsZeroError(
                f"auction supply rounds to zero (total={total_supply}, split={token_split_to_auction})"
            )
        return cls(
            total_supply=total_supply,
            auction_supply=auction_supply,
            reserve_supply=total_supply - auction_supply,
        )


class StrategyConfig(BaseModel):
    """Launch strategy parameters"""
    model_config = ConfigDict(frozen=True)

    token: str = Field(..., description="Launched token address")
    currency: str = Field(..., description="Currency raised by the auction (0x0 for native)")
    total_supply: int = Field(..., description="Tokens the strategy must be funded with", gt=0, le=UINT128_MAX)
    token_split_to_auction: int = Field(
        ..., description=f"Share of supply sold in the auction, out of {TOKEN_SPLIT_DENOMINATOR}", ge=0
    )
    fee: int = Field(..., description="Pool LP fee in pips", ge=0)
    tick_spacing: int = Field(..., description="Pool tick spacing")
    position_recipient: str = Field(..., description="Owner of the minted positions")
    migration_allowed_at: int = Field(..., description="First block at which migrate() may run", ge=0)
    sweep_allowed_at: int = Field(..., description="First block at which the operator may sweep", ge=0)
    operator: str = Field(..., description="Account allowed to sweep")
    max_currency_amount_for_lp: int = Field(
        default=UINT128_MAX, description="Cap on raised currency used for liquidity", ge=0, le=UINT128_MAX
    )
    create_one_sided_token_position: bool = Field(default=True)
    create_one_sided_currency_position: bool = Field(default=True)

    @field_validator("token", "currency", "position_recipient", "operator")
    @classmethod
    def _normalize_address(cls, value: str) -> str:
        if not _ADDRESS_RE.match(value):
            raise ValueError(f"not a 20-byte hex address: {value}")
        return value.lower()

    def validate_parameters(self) -> None:
        """Semantic checks; raises a ConfigurationError subclass on the first failure."""
        if self.token == self.currency:
            raise InvalidTokenAndCurrencyError(f"token and currency are both {self.token}")
        if self.token_split_to_auction > MAX_TOKEN_SPLIT:
            raise TokenSplitTooHighError(
                f"token split {self.token_split_to_auction} exceeds {MAX_TOKEN_SPLIT}"
            )
        if not MIN_TICK_SPACING <= self.tick_spacing <= MAX_TICK_SPACING:
            raise InvalidTickSpacingError(
                f"tick spacing {self.tick_spacing} outside [{MIN_TICK_SPACING}, {MAX_TICK_SPACING}]"
            )
        if self.fee > MAX_LP_FEE:
            raise InvalidFeeError(f"fee {self.fee} exceeds {MAX_LP_FEE}")
        if self.position_recipient in RESERVED_RECIPIENTS:
            raise InvalidPositionRecipientError(f"reserved recipient {self.position_recipient}")
        if self.sweep_allowed_at <= self.migration_allowed_at:
            raise InvalidSweepBlockError(
                f"sweep block {self.sweep_allowed_at} must be after migration block {self.migration_allowed_at}"
            )
        self.reserve_accounting()

    def reserve_accounting(self) -> ReserveAccounting:
        return ReserveAccounting.from_split(self.total_supply, self.token_split_to_auction)

    @property
    def currency_is_asset0(self) -> bool:
        return asset_sort_key(self.currency) < asset_sort_key(self.token)

    @property
    def pool_key(self) -> PoolKey:
        return PoolKey.from_assets(self.token, self.currency, self.fee, self.tick_spacing)


def load_strategy_config(path: Union[str, Path]) -> StrategyConfig:
    """Load a StrategyConfig from a YAML file (top-level ``strategy:`` mapping)."""
    with open(path, "r") as f:
        raw = yaml.safe_load(f) or {}
    return StrategyConfig(**raw.get("strategy", raw))
