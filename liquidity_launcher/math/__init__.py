"""
Math layer for the migration engine

정수 연산만 사용하는 수학 함수들:
- price_math: 옥션 가격 → priceX192 / sqrtPriceX96 변환, 수량 계산
- tick_math: Tick ↔ sqrtPrice 변환, 틱 경계 반올림, 틱당 유동성 상한
- liquidity_math: 유동성 계산
"""

from .price_math import (
    calculate_amounts,
    convert_to_price_x192,
    convert_to_sqrt_price,
    sqrt_price_x96_to_price,
)
from .tick_math import (
    get_sqrt_price_at_tick,
    get_tick_at_sqrt_price,
    tick_floor,
    tick_ceil,
    tick_strict_ceil,
    min_usable_tick,
    max_usable_tick,
    max_liquidity_per_tick,
)
from .liquidity_math import (
    get_amount0_delta,
    get_amount1_delta,
    get_liquidity_for_amount0,
    get_liquidity_for_amount1,
    get_liquidity_for_amounts,
    get_amounts_for_liquidity,
)
