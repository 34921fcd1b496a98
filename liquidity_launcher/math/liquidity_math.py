"""
Liquidity Math - 유동성 계산

집중화된 유동성(Concentrated Liquidity)에서 토큰 수량과 유동성 간의 변환.
풀 범위 포지션은 양측 공식, 한쪽 포지션은 단일 토큰 공식을 사용합니다.

References:
- Uniswap V4 Periphery: src/libraries/LiquidityAmounts.sol
- Uniswap V4 Core: src/libraries/SqrtPriceMath.sol

핵심 공식:
    L = Δy / (√P_upper - √P_lower)  # asset1 기준
    L = Δx / (1/√P_lower - 1/√P_upper)  # asset0 기준
"""

from typing import Tuple

from ..constants import Q96
from .price_math import div_rounding_up, mul_div_rounding_up


def get_amount0_delta(
    sqrt_price_a_x96: int,
    sqrt_price_b_x96: int,
    liquidity: int,
    round_up: bool = True
) -> int:
    """유동성에서 amount0 변화량 계산

    공식: Δx = L * (√P_b - √P_a) / (√P_a * √P_b)

    Args:
        sqrt_price_a_x96: 하한 sqrtPriceX96
        sqrt_price_b_x96: 상한 sqrtPriceX96
        liquidity: 유동성
        round_up: True면 올림, False면 내림

    Returns:
        amount0 (asset0 수량, 최소 단위)
    """
    if sqrt_price_a_x96 > sqrt_price_b_x96:
        sqrt_price_a_x96, sqrt_price_b_x96 = sqrt_price_b_x96, sqrt_price_a_x96

    numerator1 = liquidity << 96
    numerator2 = sqrt_price_b_x96 - sqrt_price_a_x96

    if round_up:
        return div_rounding_up(
            mul_div_rounding_up(numerator1, numerator2, sqrt_price_b_x96),
            sqrt_price_a_x96
        )
    return (numerator1 * numerator2 // sqrt_price_b_x96) // sqrt_price_a_x96


def get_amount1_delta(
    sqrt_price_a_x96: int,
    sqrt_price_b_x96: int,
    liquidity: int,
    round_up: bool = True
) -> int:
    """유동성에서 amount1 변화량 계산

    공식: Δy = L * (√P_b - √P_a)
    """
    if sqrt_price_a_x96 > sqrt_price_b_x96:
        sqrt_price_a_x96, sqrt_price_b_x96 = sqrt_price_b_x96, sqrt_price_a_x96

    if round_up:
        return mul_div_rounding_up(liquidity, sqrt_price_b_x96 - sqrt_price_a_x96, Q96)
    return liquidity * (sqrt_price_b_x96 - sqrt_price_a_x96) // Q96


def get_liquidity_for_amount0(
    sqrt_price_a_x96: int,
    sqrt_price_b_x96: int,
    amount0: int
) -> int:
    """amount0에서 유동성 계산

    공식: L = Δx * √P_a * √P_b / (√P_b - √P_a)

    Args:
        sqrt_price_a_x96: 하한 sqrtPriceX96
        sqrt_price_b_x96: 상한 sqrtPriceX96
        amount0: asset0 수량

    Returns:
        유동성 (내림)
    """
    if sqrt_price_a_x96 > sqrt_price_b_x96:
        sqrt_price_a_x96, sqrt_price_b_x96 = sqrt_price_b_x96, sqrt_price_a_x96
    # 동일한 sqrt price (0으로 나누기 방지)
    if sqrt_price_b_x96 <= sqrt_price_a_x96:
        return 0

    intermediate = sqrt_price_a_x96 * sqrt_price_b_x96 // Q96
    return amount0 * intermediate // (sqrt_price_b_x96 - sqrt_price_a_x96)


def get_liquidity_for_amount1(
    sqrt_price_a_x96: int,
    sqrt_price_b_x96: int,
    amount1: int
) -> int:
    """amount1에서 유동성 계산

    공식: L = Δy / (√P_b - √P_a)
    """
    if sqrt_price_a_x96 > sqrt_price_b_x96:
        sqrt_price_a_x96, sqrt_price_b_x96 = sqrt_price_b_x96, sqrt_price_a_x96
    if sqrt_price_b_x96 <= sqrt_price_a_x96:
        return 0

    return amount1 * Q96 // (sqrt_price_b_x96 - sqrt_price_a_x96)


def get_liquidity_for_amounts(
    sqrt_price_x96: int,
    sqrt_price_a_x96: int,
    sqrt_price_b_x96: int,
    amount0: int,
    amount1: int
) -> int:
    """토큰 수량에서 유동성 계산 (양측 공식)

    현재 가격과 범위, 두 토큰 수량이 주어졌을 때
    민트 가능한 최대 유동성을 계산합니다.

    Args:
        sqrt_price_x96: 현재 sqrtPriceX96
        sqrt_price_a_x96: 하한 sqrtPriceX96
        sqrt_price_b_x96: 상한 sqrtPriceX96
        amount0: asset0 수량
        amount1: asset1 수량

    Returns:
        유동성 (두 제약 조건 중 작은 값)
    """
    if sqrt_price_a_x96 > sqrt_price_b_x96:
        sqrt_price_a_x96, sqrt_price_b_x96 = sqrt_price_b_x96, sqrt_price_a_x96

    if sqrt_price_x96 <= sqrt_price_a_x96:
        # 가격이 범위 아래: asset0만 사용
        return get_liquidity_for_amount0(sqrt_price_a_x96, sqrt_price_b_x96, amount0)

    elif sqrt_price_x96 < sqrt_price_b_x96:
        # 가격이 범위 내: 양쪽 토큰 사용, 작은 값 반환
        liquidity0 = get_liquidity_for_amount0(sqrt_price_x96, sqrt_price_b_x96, amount0)
        liquidity1 = get_liquidity_for_amount1(sqrt_price_a_x96, sqrt_price_x96, amount1)
        return min(liquidity0, liquidity1)

    else:
        # 가격이 범위 위: asset1만 사용
        return get_liquidity_for_amount1(sqrt_price_a_x96, sqrt_price_b_x96, amount1)


def get_amounts_for_liquidity(
    sqrt_price_x96: int,
    sqrt_price_a_x96: int,
    sqrt_price_b_x96: int,
    liquidity: int,
    round_up: bool = False
) -> Tuple[int, int]:
    """유동성에서 토큰 수량 계산

    포지션을 민트할 때 필요한 수량은 round_up=True로 계산합니다.

    Returns:
        (amount0, amount1) 튜플
    """
    if sqrt_price_a_x96 > sqrt_price_b_x96:
        sqrt_price_a_x96, sqrt_price_b_x96 = sqrt_price_b_x96, sqrt_price_a_x96

    if sqrt_price_x96 <= sqrt_price_a_x96:
        # 가격이 범위 아래: asset0만 보유
        amount0 = get_amount0_delta(sqrt_price_a_x96, sqrt_price_b_x96, liquidity, round_up)
        amount1 = 0

    elif sqrt_price_x96 < sqrt_price_b_x96:
        amount0 = get_amount0_delta(sqrt_price_x96, sqrt_price_b_x96, liquidity, round_up)
        amount1 = get_amount1_delta(sqrt_price_a_x96, sqrt_price_x96, liquidity, round_up)

    else:
        # 가격이 범위 위: asset1만 보유
        amount0 = 0
        amount1 = get_amount1_delta(sqrt_price_a_x96, sqrt_price_b_x96, liquidity, round_up)

    return amount0, amount1
