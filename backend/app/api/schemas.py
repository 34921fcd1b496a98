"""
API Request/Response Schemas using Pydantic

Defines data models for the migration preview endpoints.
"""
from pydantic import BaseModel, Field
from typing import Any, Dict, List
from datetime import datetime

from liquidity_launcher.strategy.config import StrategyConfig


class PlanPreviewRequest(BaseModel):
    """Request payload for POST /api/v1/plan/preview endpoint"""
    strategy: StrategyConfig = Field(..., description="Launch strategy parameters")
    clearing_price: int = Field(..., description="Auction clearing price (Q96, currency per token)", ge=0)
    currency_raised: int = Field(..., description="Currency raised by the auction", ge=0)

    class Config:
        json_schema_extra = {
            "example": {
                "strategy": {
                    "token": "0x2000000000000000000000000000000000000002",
                    "currency": "0x1000000000000000000000000000000000000001",
                    "total_supply": 1000000000000000000000000,
                    "token_split_to_auction": 5000000,
                    "fee": 3000,
                    "tick_spacing": 60,
                    "position_recipient": "0x3000000000000000000000000000000000000003",
                    "migration_allowed_at": 1000,
                    "sweep_allowed_at": 2000,
                    "operator": "0x4000000000000000000000000000000000000004"
                },
                "clearing_price": 79228162514264337593543950336,
                "currency_raised": 400000000000000000000000
            }
        }


class PlanStep(BaseModel):
    """One operation of the previewed plan"""
    step: int = Field(..., description="Position in the batch")
    action: str = Field(..., description="Opcode name")
    params: Dict[str, Any] = Field(..., description="Opcode parameters")


class MigrationSummary(BaseModel):
    """Numbers the migration would commit"""
    sqrt_price_x96: int
    token_amount: int
    currency_amount: int
    leftover_currency: int
    liquidity: int
    should_create_one_sided: bool
    has_one_sided_params: bool


class PlanPreviewResponse(BaseModel):
    """Response payload for POST /api/v1/plan/preview endpoint"""
    status: str = Field(..., description="Response status (success or error)")
    migration: MigrationSummary
    plan: List[PlanStep]
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Response timestamp")


class HealthCheckResponse(BaseModel):
    """Response payload for GET /api/v1/health endpoint"""
    status: str = Field(..., description="API health status")
    version: str = Field(..., description="API version")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Check timestamp")
