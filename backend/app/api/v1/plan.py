"""
Migration Plan Preview Endpoint

Runs the planning pipeline on a hypothetical auction outcome without
touching any ledger.
"""
from fastapi import APIRouter

from liquidity_launcher.cli import describe_plan
from liquidity_launcher.planning.planner import (
    build_migration_plan,
    create_migration_data,
    plan_final_take_pair,
)

from app.api.schemas import MigrationSummary, PlanPreviewRequest, PlanPreviewResponse, PlanStep
from app.config import settings

router = APIRouter()


@router.post("/plan/preview", response_model=PlanPreviewResponse)
async def preview_plan(request: PlanPreviewRequest):
    """
    Preview the migration plan for an auction outcome

    Flow:
    1. Validate strategy parameters
    2. Convert the clearing price and clamp amounts to the reserve
    3. Plan the full-range position and, if it fits, the one-sided position
    4. Append the final take-pair step

    Engine errors (bad configuration, invalid price, liquidity over the
    per-tick cap) are returned as 400 by the application error handler.
    """
    config = request.strategy
    config.validate_parameters()

    data = create_migration_data(config, request.clearing_price, request.currency_raised)
    plan, data = build_migration_plan(config, data)
    batch = plan.then(plan_final_take_pair(config, settings.PREVIEW_STRATEGY_ADDRESS))

    print(f"[Preview] {len(batch)} operations, liquidity {data.liquidity}")

    return PlanPreviewResponse(
        status="success",
        migration=MigrationSummary(
            sqrt_price_x96=data.sqrt_price,
            token_amount=data.token_amount,
            currency_amount=data.currency_amount,
            leftover_currency=data.leftover_currency,
            liquidity=data.liquidity,
            should_create_one_sided=data.should_create_one_sided,
            has_one_sided_params=data.has_one_sided_params,
        ),
        plan=[PlanStep(**step) for step in describe_plan(batch)],
    )
