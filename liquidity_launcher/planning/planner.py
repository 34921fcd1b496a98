"""
Position Planner - 풀 범위 + 선택적 한쪽 포지션 계획

옥션 결과를 받아 실행기(executor)에 넘길 작업 목록을 만듭니다.

    1. 풀 범위 포지션: SETTLE ×2 → MINT_POSITION → CLEAR_OR_TAKE ×2 (필수)
    2. 한쪽 포지션: SETTLE → MINT_POSITION → CLEAR_OR_TAKE (선택)
    3. 마지막 TAKE_PAIR: 남은 잔액을 오케스트레이터로 회수

풀 범위 포지션의 유동성 초과는 마이그레이션 전체를 실패시키는 오류이지만,
한쪽 포지션이 틱 경계나 틱당 유동성 상한에 걸리면 오류 없이 생략합니다.
"""

from dataclasses import replace
from typing import TYPE_CHECKING, Optional, Tuple

from ..errors import InvalidLiquidityError
from ..logging_utils import get_logger
from ..math.liquidity_math import (
    get_liquidity_for_amount0,
    get_liquidity_for_amount1,
    get_liquidity_for_amounts,
)
from ..math.price_math import calculate_amounts, convert_to_price_x192, convert_to_sqrt_price
from ..math.tick_math import (
    get_sqrt_price_at_tick,
    get_tick_at_sqrt_price,
    max_liquidity_per_tick,
    max_usable_tick,
    min_usable_tick,
    tick_floor,
    tick_strict_ceil,
)
from .actions import (
    Action,
    ClearOrTakeParams,
    MintPositionParams,
    Operation,
    SettleParams,
    TakePairParams,
)
from .builder import Plan, PlanBuilder
from .types import EMPTY_TICK_BOUNDS, MigrationData, OneSidedPosition, TickBounds

if TYPE_CHECKING:
    from ..strategy.config import StrategyConfig

logger = get_logger(__name__)


def full_range_bounds(tick_spacing: int) -> TickBounds:
    """주어진 간격에서 가장 넓은 사용 가능 범위"""
    return TickBounds(min_usable_tick(tick_spacing), max_usable_tick(tick_spacing))


def left_side_bounds(sqrt_price: int, tick_spacing: int) -> TickBounds:
    """현재 가격 왼쪽(아래) 범위: [minUsableTick, floor(currentTick)]

    현재 틱이 최소 경계에서 한 간격 이내면 센티넬을 반환합니다.
    """
    lower = min_usable_tick(tick_spacing)
    upper = tick_floor(get_tick_at_sqrt_price(sqrt_price), tick_spacing)
    if upper <= lower:
        return EMPTY_TICK_BOUNDS
    return TickBounds(lower, upper)


def right_side_bounds(sqrt_price: int, tick_spacing: int) -> TickBounds:
    """현재 가격 오른쪽(위) 범위: [strictCeil(currentTick), maxUsableTick]

    현재 틱이 최대 경계에서 한 간격 이내면 센티넬을 반환합니다.
    """
    lower = tick_strict_ceil(get_tick_at_sqrt_price(sqrt_price), tick_spacing)
    upper = max_usable_tick(tick_spacing)
    if lower >= upper:
        return EMPTY_TICK_BOUNDS
    return TickBounds(lower, upper)


def _ordered_amounts(config: "StrategyConfig", token_amount: int, currency_amount: int) -> Tuple[int, int]:
    if config.currency_is_asset0:
        return currency_amount, token_amount
    return token_amount, currency_amount


def full_range_liquidity(
    config: "StrategyConfig",
    sqrt_price: int,
    token_amount: int,
    currency_amount: int
) -> int:
    """풀 범위 포지션 유동성 (양측 공식)"""
    bounds = full_range_bounds(config.tick_spacing)
    amount0, amount1 = _ordered_amounts(config, token_amount, currency_amount)
    return get_liquidity_for_amounts(
        sqrt_price,
        get_sqrt_price_at_tick(bounds.lower),
        get_sqrt_price_at_tick(bounds.upper),
        amount0,
        amount1,
    )


def create_migration_data(
    config: "StrategyConfig",
    clearing_price: int,
    currency_raised: int
) -> MigrationData:
    """옥션 결과에서 MigrationData 계산

    Args:
        config: 전략 설정
        clearing_price: 옥션 청산 가격 (Q96, token 1개당 currency)
        currency_raised: 옥션이 모은 currency 총량

    Returns:
        MigrationData (has_one_sided_params는 아직 False)

    Raises:
        InvalidPriceError: 가격이 0이거나 AMM 허용 범위를 벗어난 경우
    """
    reserve_supply = config.reserve_accounting().reserve_supply
    price_x192 = convert_to_price_x192(clearing_price, config.currency_is_asset0)
    sqrt_price = convert_to_sqrt_price(price_x192)

    # LP에 쓸 수 있는 currency 상한 (초과분은 leftover가 아니라 수령인에게 반환)
    currency_for_lp = min(currency_raised, config.max_currency_amount_for_lp)
    token_amount, leftover_currency, currency_amount = calculate_amounts(
        price_x192, currency_for_lp, config.currency_is_asset0, reserve_supply
    )

    liquidity = full_range_liquidity(config, sqrt_price, token_amount, currency_amount)

    should_create_one_sided = (
        (reserve_supply > token_amount and config.create_one_sided_token_position)
        or (leftover_currency > 0 and config.create_one_sided_currency_position)
    )

    return MigrationData(
        sqrt_price=sqrt_price,
        token_amount=token_amount,
        currency_amount=currency_amount,
        leftover_currency=leftover_currency,
        liquidity=liquidity,
        should_create_one_sided=should_create_one_sided,
    )


def ensure_full_range_liquidity(config: "StrategyConfig", liquidity: int) -> None:
    """풀 범위 포지션이 틱당 유동성 상한 안에 있는지 검사

    Raises:
        InvalidLiquidityError: 상한을 넘는 경우 (필수 포지션이므로 하드 실패)
    """
    cap = max_liquidity_per_tick(config.tick_spacing)
    if liquidity > cap:
        raise InvalidLiquidityError(cap, liquidity)


def plan_full_range_position(
    config: "StrategyConfig",
    builder: PlanBuilder,
    sqrt_price: int,
    token_amount: int,
    currency_amount: int
) -> int:
    """풀 범위 포지션 작업을 builder에 추가

    SETTLE(asset0) → SETTLE(asset1) → MINT_POSITION → CLEAR_OR_TAKE ×2 순서.

    Returns:
        풀 범위 포지션 유동성
    """
    pool_key = config.pool_key
    bounds = full_range_bounds(config.tick_spacing)
    amount0, amount1 = _ordered_amounts(config, token_amount, currency_amount)
    liquidity = full_range_liquidity(config, sqrt_price, token_amount, currency_amount)

    builder.append(Action.SETTLE, SettleParams(pool_key.asset0, amount0))
    builder.append(Action.SETTLE, SettleParams(pool_key.asset1, amount1))
    builder.append(Action.MINT_POSITION, MintPositionParams(
        pool_key=pool_key,
        tick_lower=bounds.lower,
        tick_upper=bounds.upper,
        liquidity=liquidity,
        amount0_max=amount0,
        amount1_max=amount1,
        owner=config.position_recipient,
    ))
    builder.append(Action.CLEAR_OR_TAKE, ClearOrTakeParams(pool_key.asset0))
    builder.append(Action.CLEAR_OR_TAKE, ClearOrTakeParams(pool_key.asset1))
    return liquidity


def one_sided_position(config: "StrategyConfig", data: MigrationData) -> Optional[OneSidedPosition]:
    """한쪽 포지션을 만들 수 있으면 반환, 아니면 None

    남은 리저브 token이 있으면 token, 그렇지 않고 남은 currency가 있으면 currency로
    포지션을 구성합니다. asset0이면 현재 가격 위, asset1이면 아래에 놓입니다.
    """
    if not data.should_create_one_sided:
        return None

    leftover_token = config.reserve_accounting().reserve_supply - data.token_amount
    if leftover_token > 0 and config.create_one_sided_token_position:
        asset, amount = config.token, leftover_token
    elif data.leftover_currency > 0 and config.create_one_sided_currency_position:
        asset, amount = config.currency, data.leftover_currency
    else:
        return None

    is_asset0 = asset == config.pool_key.asset0
    if is_asset0:
        bounds = right_side_bounds(data.sqrt_price, config.tick_spacing)
    else:
        bounds = left_side_bounds(data.sqrt_price, config.tick_spacing)

    if not bounds.is_valid():
        logger.debug("one-sided position skipped: price too close to the tick boundary")
        return None

    sqrt_lower = get_sqrt_price_at_tick(bounds.lower)
    sqrt_upper = get_sqrt_price_at_tick(bounds.upper)
    if is_asset0:
        liquidity = get_liquidity_for_amount0(sqrt_lower, sqrt_upper, amount)
    else:
        liquidity = get_liquidity_for_amount1(sqrt_lower, sqrt_upper, amount)

    # 풀 범위 포지션과 경계 틱 하나를 공유하므로 합계로 검사
    if data.liquidity + liquidity > max_liquidity_per_tick(config.tick_spacing):
        logger.debug("one-sided position skipped: per-tick liquidity cap exceeded")
        return None

    return OneSidedPosition(
        asset=asset,
        amount=amount,
        bounds=bounds,
        liquidity=liquidity,
        is_asset0=is_asset0,
    )


def plan_one_sided_position(
    config: "StrategyConfig",
    data: MigrationData,
    builder: PlanBuilder
) -> Plan:
    """가능하면 한쪽 포지션 작업을 추가하고 builder를 확정(truncate)

    포지션이 맞지 않으면 풀 범위 작업만 담긴 계획을 그대로 반환합니다.
    """
    position = one_sided_position(config, data)
    if position is not None:
        builder.append(Action.SETTLE, SettleParams(position.asset, position.amount))
        builder.append(Action.MINT_POSITION, MintPositionParams(
            pool_key=config.pool_key,
            tick_lower=position.bounds.lower,
            tick_upper=position.bounds.upper,
            liquidity=position.liquidity,
            amount0_max=position.amount if position.is_asset0 else 0,
            amount1_max=0 if position.is_asset0 else position.amount,
            owner=config.position_recipient,
        ))
        builder.append(Action.CLEAR_OR_TAKE, ClearOrTakeParams(position.asset))
    return builder.truncate()


def plan_final_take_pair(config: "StrategyConfig", recipient: str) -> Operation:
    """모든 포지션 이후 남은 양쪽 잔액을 recipient로 회수하는 작업"""
    pool_key = config.pool_key
    return Operation(Action.TAKE_PAIR, TakePairParams(pool_key.asset0, pool_key.asset1, recipient))


def build_migration_plan(config: "StrategyConfig", data: MigrationData) -> Tuple[Plan, MigrationData]:
    """새 builder로 포지션 계획 전체를 만든다

    Returns:
        (확정된 포지션 계획, has_one_sided_params가 채워진 MigrationData)
    """
    ensure_full_range_liquidity(config, data.liquidity)
    builder = PlanBuilder()
    with builder.session():
        plan_full_range_position(
            config, builder, data.sqrt_price, data.token_amount, data.currency_amount
        )
        plan = plan_one_sided_position(config, data, builder)
    return plan, replace(data, has_one_sided_params=plan.position_count > 1)
